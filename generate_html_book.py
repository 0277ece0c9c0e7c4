#!/usr/bin/env python3
"""
Book HTML Preview Generator

This script converts the chapters listed in _quarto.yml into a single, nicely
formatted HTML file that can be read in any web browser or printed to PDF.
Code cells are shown, not run; the book generator owns execution.
"""

import argparse
import datetime
import html
import os
import re

import markdown

from book_config import DEFAULT_CONFIG, get_chapter_order, load_book_config
from qmd import chapter_title, parse_cells, split_front_matter

MATH_PATTERN = re.compile(r'\$\$(.+?)\$\$|(?<![\\$])\$(?!\s)([^$\n]+?)(?<!\s)\$', re.DOTALL)
CODE_PATTERN = re.compile(r'^(`{3,}).*?^\1[ \t]*$|(`+)[^\n]*?\2', re.MULTILINE | re.DOTALL)
DIV_OPEN = re.compile(r'^:::+\s*\{([^}]*)\}\s*$')
DIV_CLOSE = re.compile(r'^:::+\s*$')


def read_chapter_file(filepath):
    """Read and return the content of a chapter file."""
    try:
        with open(filepath, 'r', encoding='utf-8') as file:
            return file.read()
    except FileNotFoundError:
        print(f"⚠ Warning: File {filepath} not found, skipping...")
        return ""


def stash_math(content, stash):
    """Replace TeX math with placeholders so markdown leaves it alone."""
    def replace(match):
        if match.group(1) is not None:
            stash.append(f"\\[{html.escape(match.group(1))}\\]")
        else:
            stash.append(f"\\({html.escape(match.group(2))}\\)")
        return f"MATHSTASH{len(stash) - 1}X"

    # Code spans and fenced blocks keep their dollar signs
    pieces = []
    position = 0
    for code in CODE_PATTERN.finditer(content):
        pieces.append(MATH_PATTERN.sub(replace, content[position:code.start()]))
        pieces.append(code.group(0))
        position = code.end()
    pieces.append(MATH_PATTERN.sub(replace, content[position:]))
    return ''.join(pieces)


def restore_math(content, stash):
    return re.sub(r'MATHSTASH(\d+)X', lambda m: stash[int(m.group(1))], content)


def convert_callouts(content):
    """Turn `::: {.callout-note}` blocks, and any other fenced divs, into divs."""
    lines = []
    open_divs = []
    for line in content.split('\n'):
        open_match = DIV_OPEN.match(line)
        if open_match:
            classes = [token[1:] for token in open_match.group(1).split() if token.startswith('.')]
            callout = next((c for c in classes if c.startswith('callout-')), None)
            open_divs.append(callout or 'div')
            if callout:
                kind = callout[len('callout-'):]
                lines.append(f'\n<div class="callout {callout}" markdown="1">')
                lines.append(f'<div class="callout-title">{kind.capitalize()}</div>\n')
            else:
                lines.append(f'\n<div class="{" ".join(classes)}" markdown="1">\n')
        elif open_divs and DIV_CLOSE.match(line):
            open_divs.pop()
            lines.append('\n</div>\n')
        else:
            lines.append(line)
    return '\n'.join(lines)


def preprocess_chapter(content, stash):
    """Turn a chapter document into plain markdown for the converter."""
    _, body = split_front_matter(content)
    blocks = []
    for cell in parse_cells(body):
        if cell.is_code:
            if cell.options.get("echo", True) is False:
                continue
            blocks.append(f"```{cell.language}\n{cell.source}\n```")
        else:
            blocks.append(convert_callouts(stash_math(cell.source, stash)))
    return '\n\n'.join(blocks)


def create_css_styles():
    """CSS for the preview."""
    return """
    <style>
    body {
        font-family: 'Georgia', 'Times New Roman', serif;
        line-height: 1.6;
        color: #333;
        max-width: 800px;
        margin: 0 auto;
        padding: 20px;
    }

    @media print {
        body { font-size: 12pt; margin: 0; padding: 0.5in; }
        .page-break { page-break-before: always; }
        .no-print { display: none; }
        h1, h2, h3 { page-break-after: avoid; }
    }

    h1 { color: #446e9b; font-size: 2.2em; margin: 40px 0 30px 0; border-bottom: 3px solid #446e9b; padding-bottom: 15px; }
    h2 { color: #3cb521; font-size: 1.8em; margin: 35px 0 25px 0; }
    h3 { color: #d47500; font-size: 1.4em; margin: 30px 0 20px 0; }

    code {
        background-color: #f5f5f5;
        padding: 3px 6px;
        border-radius: 4px;
        font-family: 'Consolas', 'Monaco', 'Courier New', monospace;
        font-size: 0.9em;
    }

    pre {
        background-color: #f8f8f8;
        border: 1px solid #e1e4e8;
        border-left: 4px solid #446e9b;
        border-radius: 6px;
        padding: 20px;
        overflow-x: auto;
        font-size: 0.85em;
    }

    pre code { background: none; padding: 0; }

    table { border-collapse: collapse; margin: 25px 0; }
    th, td { border: 1px solid #ddd; padding: 8px 12px; text-align: left; }
    th { background-color: #f2f2f2; }

    .title-page { text-align: center; padding: 100px 0; page-break-after: always; }
    .title-page h1 { font-size: 3em; border: none; }
    .title-page .subtitle { font-size: 1.3em; color: #666; font-style: italic; }

    .toc { page-break-after: always; padding: 40px 0; }
    .toc ul { list-style: none; padding-left: 0; }
    .toc .chapter { margin: 8px 0; padding-left: 25px; }

    .callout { border-left: 5px solid #446e9b; background: #f4f7fb; padding: 10px 20px; margin: 20px 0; }
    .callout-warning { border-color: #d47500; background: #fdf6ec; }
    .callout-tip { border-color: #3cb521; background: #f1faef; }
    .callout-title { font-weight: bold; }

    .chapter-separator { height: 2px; background: linear-gradient(to right, #446e9b, transparent); margin: 50px 0; page-break-after: always; }
    .page-footer { margin-top: 60px; color: #888; font-size: 0.85em; text-align: right; }
    </style>
    """


def create_math_script():
    return """
    <script>
    window.MathJax = { tex: { inlineMath: [['\\\\(', '\\\\)']], displayMath: [['\\\\[', '\\\\]']] } };
    </script>
    <script async src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"></script>
    """


def create_table_of_contents(titles):
    items = '\n'.join(
        f'        <li class="chapter"><a href="#chapter-{i}">{html.escape(title)}</a></li>'
        for i, title in enumerate(titles, 1)
    )
    return f"""
<div class="toc">
    <h1>Table of Contents</h1>
    <ul>
{items}
    </ul>
</div>
"""


def generate_html_book(config_path=DEFAULT_CONFIG, output_file=None):
    """Generate the single-file HTML preview of the book."""
    config = load_book_config(config_path)
    print(f"🚀 Starting {config.title or 'book'} HTML preview generation...")

    md = markdown.Markdown(extensions=['tables', 'fenced_code', 'toc', 'md_in_html'])

    chapters = []
    for chapter_file in get_chapter_order(config):
        print(f"📄 Processing: {chapter_file}")

        content = read_chapter_file(os.path.join(config.root, chapter_file))
        if not content:
            continue

        title = chapter_title(content, default=os.path.splitext(os.path.basename(chapter_file))[0])
        stash = []
        chapter_html = restore_math(md.convert(preprocess_chapter(content, stash)), stash)
        chapters.append((title, chapter_html))

        # Reset markdown processor for next chapter
        md.reset()

    current_date = datetime.datetime.now().strftime("%B %Y")
    title = html.escape(config.title)

    html_content = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    {create_css_styles()}
    {create_math_script()}
</head>
<body class="theme-{html.escape(config.theme or 'default')}">

<div class="title-page">
    <h1>{title}</h1>
    <div class="subtitle">{html.escape(config.author)}</div>
    <div style="margin-top: 40px; color: #888;">Generated: {current_date}</div>
</div>
{create_table_of_contents([t for t, _ in chapters])}
"""

    for i, (_, chapter_html) in enumerate(chapters, 1):
        if i > 1:
            html_content += '<div class="chapter-separator"></div>\n'
        html_content += f'<div class="chapter" id="chapter-{i}">\n{chapter_html}\n</div>\n\n'

    if config.footer:
        html_content += f'<div class="page-footer">{html.escape(config.footer)}</div>\n'

    html_content += """
</body>
</html>
"""

    if output_file is None:
        output_file = os.path.join(config.root, "_book_preview.html")
    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(html_content)

    print(f"✅ HTML preview generated successfully: {output_file}")

    file_size = os.path.getsize(output_file) / (1024 * 1024)  # Convert to MB
    print(f"📊 File size: {file_size:.2f} MB")

    return output_file


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Render the book's chapters into one HTML preview")
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Book configuration file")
    parser.add_argument("--output", help="Output HTML file")
    args = parser.parse_args()

    try:
        html_file = generate_html_book(args.config, args.output)
        print(f"\n🎉 Success! Your book preview is ready: {html_file}")
        print("\n💡 To convert to PDF:")
        print("  1. Open the HTML file in Chrome/Firefox")
        print("  2. Press Ctrl+P (Cmd+P on Mac)")
        print("  3. Select 'Save as PDF' as destination")
    except Exception as e:
        print(f"❌ Error generating HTML preview: {str(e)}")
        import traceback
        traceback.print_exc()

#!/usr/bin/env python3
"""
Chapter purl script

Walks the chapter directories and extracts the executable code cells of
every .qmd chapter into a runnable script that sits next to it, so readers
can run a chapter's examples without the book generator.
"""

import argparse
import os

from book_config import DEFAULT_CONFIG, get_chapter_directories, get_execute_options, load_book_config
from qmd import parse_cells, split_front_matter

CHAPTERS = ["EDA", "Inference", "LinearModels"]

SCRIPT_EXTENSIONS = {
    "python": ".py",
    "julia": ".jl",
    "r": ".R",
}


def script_path(fname, language):
    """Path of the script written for a chapter document."""
    stem, _ = os.path.splitext(fname)
    return stem + SCRIPT_EXTENSIONS.get(language, "." + language)


def is_frozen(source, target):
    """True when the script exists and is at least as new as the document."""
    return os.path.exists(target) and os.path.getmtime(target) >= os.path.getmtime(source)


def is_evaluated(cell):
    return cell.is_code and cell.options.get("eval", True) is not False


def comment_block(text):
    return '\n'.join(f"# {line}".rstrip() for line in text.strip('\n').split('\n'))


def purl(fname, preamble="", documentation=0, force=False):
    """Extract the evaluated code cells of `fname` into a script.

    `preamble` is written at the top of the script. With `documentation`
    1 each cell gets a `# %%` separator; with 2 the prose is kept as
    comments as well. Unless `force` is set an up-to-date script is left
    alone. Returns the script path, or None if the chapter has no code.
    """
    with open(fname, 'r', encoding='utf-8') as file:
        text = file.read()

    _, body = split_front_matter(text)
    cells = parse_cells(body)
    code_cells = [cell for cell in cells if is_evaluated(cell)]
    if not code_cells:
        return None

    language = code_cells[0].language
    target = script_path(fname, language)
    if not force and is_frozen(fname, target):
        print(f"  ↺ Up to date: {target}")
        return target

    parts = []
    if preamble.strip():
        parts.append(preamble.rstrip('\n'))

    for number, cell in enumerate(cells, 1):
        if cell.is_code:
            if not is_evaluated(cell):
                continue
            if cell.language != language:
                raise ValueError(f"{fname}: mixes {language} and {cell.language} code cells")
            if documentation:
                parts.append(f"# %% {cell.label or f'cell {number}'}\n{cell.source}")
            else:
                parts.append(cell.source)
        elif documentation >= 2:
            parts.append(comment_block(cell.source))

    with open(target, 'w', encoding='utf-8') as file:
        file.write('\n\n'.join(parts) + '\n')

    return target


def process_file(f, ch, preamble="", **options):
    fname = os.path.join(ch, f)
    print(f"📄 Processing: {fname}")
    return purl(fname, preamble, **options)


def process_chapter(ch, suffix=".qmd", preamble="", **options):
    """Purl every chapter document in directory `ch`."""
    qmd_files = sorted(f for f in os.listdir(ch) if f.endswith(suffix))
    return [process_file(f, ch, preamble, **options) for f in qmd_files]


def main(chapters=None):
    chapters = CHAPTERS if chapters is None else chapters
    written = []
    for ch in chapters:
        written.extend(path for path in process_chapter(ch) if path)
    return written


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Extract runnable scripts from the book's chapters")
    parser.add_argument("chapters", nargs="*", help="Chapter directories (default: from the book config)")
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Book configuration file")
    parser.add_argument("--documentation", type=int, choices=[0, 1, 2], default=0,
                        help="0: code only, 1: cell separators, 2: prose as comments")
    parser.add_argument("--force", action="store_true", help="Rewrite scripts that are up to date")
    return parser.parse_args(argv)


def run(argv=None):
    args = parse_args(argv)

    config = load_book_config(args.config) if os.path.exists(args.config) else None

    chapters = args.chapters
    if not chapters and config is not None:
        chapters = [os.path.join(config.root, d) for d in get_chapter_directories(config)]
    chapters = chapters or CHAPTERS

    # freeze: false re-extracts every chapter
    force = args.force
    if config is not None and get_execute_options(config)["freeze"] is False:
        force = True

    written = []
    for ch in chapters:
        paths = process_chapter(ch, documentation=args.documentation, force=force)
        written.extend(path for path in paths if path)

    print(f"✅ {len(written)} chapter scripts ready")
    return written


if __name__ == "__main__":
    run()

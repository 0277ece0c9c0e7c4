#!/usr/bin/env python3
"""
Chapter document parsing

Splits a .qmd chapter into its YAML front matter, prose blocks and
executable code cells. Used by the purl script and the HTML preview.
"""

import re
from dataclasses import dataclass, field

import yaml

CELL_OPEN = re.compile(r'^(`{3,})\{(\w+)([^}]*)\}\s*$')
FENCE_OPEN = re.compile(r'^(`{3,})')
OPTION_LINE = re.compile(r'^#\|\s?(.*)$')


@dataclass
class Cell:
    """A block of a chapter: prose or an executable code cell."""
    kind: str
    source: str
    language: str = ""
    options: dict = field(default_factory=dict)

    @property
    def is_code(self):
        return self.kind == "code"

    @property
    def label(self):
        return self.options.get("label", "")


def split_front_matter(text):
    """Return (metadata, body) for a document with optional YAML front matter."""
    if not text.startswith('---'):
        return {}, text

    match = re.match(r'^---\s*\n(.*?)\n---\s*(?:\n|$)', text, re.DOTALL)
    if not match:
        return {}, text

    metadata = yaml.safe_load(match.group(1)) or {}
    if not isinstance(metadata, dict):
        raise ValueError("Front matter must be a YAML mapping")
    return metadata, text[match.end():]


def parse_cell_options(lines):
    """Strip leading '#|' option lines, returning (options, remaining lines)."""
    option_lines = []
    index = 0
    while index < len(lines):
        match = OPTION_LINE.match(lines[index])
        if not match:
            break
        option_lines.append(match.group(1))
        index += 1

    options = {}
    if option_lines:
        options = yaml.safe_load('\n'.join(option_lines)) or {}
        if not isinstance(options, dict):
            raise ValueError(f"Cell options must be key: value pairs, got {option_lines!r}")
    return options, lines[index:]


def parse_cells(body):
    """Split a document body into an ordered list of prose and code cells."""
    cells = []
    prose = []
    lines = body.split('\n')
    i = 0

    def flush_prose():
        if prose and any(line.strip() for line in prose):
            cells.append(Cell("prose", '\n'.join(prose)))
        prose.clear()

    while i < len(lines):
        line = lines[i]
        cell_match = CELL_OPEN.match(line)
        fence_match = FENCE_OPEN.match(line)

        if cell_match:
            fence, language = cell_match.group(1), cell_match.group(2).lower()
            code = []
            i += 1
            while i < len(lines) and lines[i].strip() != fence:
                code.append(lines[i])
                i += 1
            if i >= len(lines):
                raise ValueError(f"Unterminated {language} code cell")
            flush_prose()
            options, code = parse_cell_options(code)
            cells.append(Cell("code", '\n'.join(code), language, options))
        elif fence_match:
            # Display-only fenced block; keep it verbatim with the prose
            fence = fence_match.group(1)
            prose.append(line)
            i += 1
            while i < len(lines) and lines[i].strip() != fence:
                prose.append(lines[i])
                i += 1
            if i < len(lines):
                prose.append(lines[i])
        else:
            prose.append(line)
        i += 1

    flush_prose()
    return cells


def chapter_title(text, default=""):
    """Front-matter title, else the first level-one heading, else default."""
    metadata, body = split_front_matter(text)
    if metadata.get("title"):
        return str(metadata["title"])

    title_match = re.search(r'^#\s+(.+?)\s*(\{[^}]*\})?\s*$', body, re.MULTILINE)
    return title_match.group(1) if title_match else default

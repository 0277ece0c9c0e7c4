#!/usr/bin/env python3
"""
Book configuration reader

Loads the _quarto.yml book-build configuration and answers the questions
the build scripts ask of it: chapter order, chapter directories, and the
execution options.
"""

import os
from dataclasses import dataclass, field

import yaml

DEFAULT_CONFIG = "_quarto.yml"

EXECUTE_DEFAULTS = {
    "warning": False,
    "error": True,
    "freeze": "auto",
}


@dataclass
class BookConfig:
    title: str
    author: str = ""
    chapters: list = field(default_factory=list)
    theme: str = ""
    footer: str = ""
    execute: dict = field(default_factory=dict)
    raw: dict = field(default_factory=dict)
    root: str = "."


def flatten_chapters(entries):
    """Flatten chapter entries, expanding `part:` groups in declared order."""
    chapters = []
    for entry in entries:
        if isinstance(entry, str):
            chapters.append(entry)
        elif isinstance(entry, dict) and "chapters" in entry:
            part = entry.get("part")
            if isinstance(part, str) and part.endswith(".qmd"):
                chapters.append(part)
            chapters.extend(flatten_chapters(entry["chapters"]))
        elif isinstance(entry, dict) and "file" in entry:
            chapters.append(entry["file"])
        else:
            raise ValueError(f"Unrecognised chapter entry: {entry!r}")
    return chapters


def load_book_config(path=DEFAULT_CONFIG):
    """Read and validate a book configuration file."""
    with open(path, 'r', encoding='utf-8') as file:
        data = yaml.safe_load(file)

    if not isinstance(data, dict):
        raise ValueError(f"{path}: configuration must be a YAML mapping")

    book = data.get("book") or {}
    chapters = book.get("chapters", [])
    if not isinstance(chapters, list):
        raise ValueError(f"{path}: book.chapters must be a list")

    html = (data.get("format") or {}).get("html") or {}
    footer = (book.get("page-footer") or {})
    if isinstance(footer, dict):
        footer = footer.get("right") or footer.get("center") or footer.get("left") or ""

    execute = dict(EXECUTE_DEFAULTS)
    execute.update(data.get("execute") or {})

    return BookConfig(
        title=str(book.get("title", "")),
        author=str(book.get("author", "")),
        chapters=flatten_chapters(chapters),
        theme=str(html.get("theme", "")),
        footer=str(footer).strip(),
        execute=execute,
        raw=data,
        root=os.path.dirname(os.path.abspath(path)),
    )


def get_chapter_order(config):
    """Chapter documents in the order the book declares them."""
    return list(config.chapters)


def get_chapter_directories(config):
    """Distinct chapter subdirectories, in first-seen order."""
    directories = []
    for chapter in config.chapters:
        directory = os.path.dirname(chapter)
        if directory and directory not in directories:
            directories.append(directory)
    return directories


def get_execute_options(config):
    """The warning/error/freeze execution options, with defaults filled in."""
    return {key: config.execute.get(key, default) for key, default in EXECUTE_DEFAULTS.items()}

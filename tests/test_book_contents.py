"""Checks that the book shipped in this repository is consistent with its tooling."""

import os

from book_config import get_chapter_directories, get_chapter_order, load_book_config
from purl_chapters import CHAPTERS
from qmd import chapter_title, parse_cells, split_front_matter

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def load_config():
    return load_book_config(os.path.join(ROOT, "_quarto.yml"))


def test_default_chapter_directories_exist():
    for ch in CHAPTERS:
        assert os.path.isdir(os.path.join(ROOT, ch)), ch


def test_config_directories_match_defaults():
    assert get_chapter_directories(load_config()) == CHAPTERS


def test_every_listed_chapter_exists_and_parses():
    for chapter in get_chapter_order(load_config()):
        path = os.path.join(ROOT, chapter)
        assert os.path.isfile(path), chapter

        with open(path, 'r', encoding='utf-8') as file:
            text = file.read()
        _, body = split_front_matter(text)
        cells = parse_cells(body)

        assert chapter_title(text)
        if os.path.dirname(chapter):
            code = [cell for cell in cells if cell.is_code]
            assert code and all(cell.language == "python" for cell in code), chapter


def test_book_covers_the_core_topics():
    chapters = get_chapter_order(load_config())

    for expected in (
        "EDA/univariate.qmd",
        "EDA/bivariate.qmd",
        "EDA/categorical-data.qmd",
        "EDA/graphics.qmd",
        "Inference/inference.qmd",
        "LinearModels/linear-regression.qmd",
    ):
        assert expected in chapters

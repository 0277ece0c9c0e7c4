import pytest

from book_config import (
    get_chapter_directories,
    get_chapter_order,
    get_execute_options,
    load_book_config,
)

QUARTO_YML = """
project:
  type: book

book:
  title: "Using Python for Introductory Statistics"
  author: "A. Author"
  page-footer:
    right: |
      Copyright 2023.
  chapters:
    - index.qmd
    - EDA/univariate.qmd
    - EDA/categorical-data.qmd
    - part: Inference
      chapters:
        - Inference/distributions.qmd
    - LinearModels/linear-regression.qmd
    - references.qmd

format:
  html:
    theme: spacelab

execute:
  warning: false
  error: true
  freeze: auto
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "_quarto.yml"
    path.write_text(QUARTO_YML, encoding="utf-8")
    return path


def test_load_book_config(config_path):
    config = load_book_config(str(config_path))

    assert config.title == "Using Python for Introductory Statistics"
    assert config.author == "A. Author"
    assert config.theme == "spacelab"
    assert config.footer == "Copyright 2023."
    assert config.root == str(config_path.parent)


def test_chapter_order_flattens_parts(config_path):
    config = load_book_config(str(config_path))

    assert get_chapter_order(config) == [
        "index.qmd",
        "EDA/univariate.qmd",
        "EDA/categorical-data.qmd",
        "Inference/distributions.qmd",
        "LinearModels/linear-regression.qmd",
        "references.qmd",
    ]


def test_chapter_directories_in_first_seen_order(config_path):
    config = load_book_config(str(config_path))

    assert get_chapter_directories(config) == ["EDA", "Inference", "LinearModels"]


def test_execute_options(config_path):
    config = load_book_config(str(config_path))

    assert get_execute_options(config) == {"warning": False, "error": True, "freeze": "auto"}


def test_execute_defaults_when_missing(tmp_path):
    path = tmp_path / "_quarto.yml"
    path.write_text("book:\n  title: T\n  chapters: [index.qmd]\n", encoding="utf-8")

    config = load_book_config(str(path))

    assert get_execute_options(config) == {"warning": False, "error": True, "freeze": "auto"}


def test_chapters_must_be_a_list(tmp_path):
    path = tmp_path / "_quarto.yml"
    path.write_text("book:\n  chapters: index.qmd\n", encoding="utf-8")

    with pytest.raises(ValueError, match="book.chapters must be a list"):
        load_book_config(str(path))


def test_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_book_config(str(tmp_path / "_quarto.yml"))


def test_part_page_is_kept_before_its_chapters(tmp_path):
    path = tmp_path / "_quarto.yml"
    path.write_text(
        "book:\n"
        "  chapters:\n"
        "    - index.qmd\n"
        "    - part: Inference/part.qmd\n"
        "      chapters:\n"
        "        - Inference/distributions.qmd\n"
        "    - part: Models\n"
        "      chapters:\n"
        "        - LinearModels/linear-regression.qmd\n",
        encoding="utf-8",
    )

    config = load_book_config(str(path))

    assert get_chapter_order(config) == [
        "index.qmd",
        "Inference/part.qmd",
        "Inference/distributions.qmd",
        "LinearModels/linear-regression.qmd",
    ]

"""Utilities for loading the question catalog from a human-friendly text file.

File format (blocks separated by blank lines or '---'; lines starting with
'#' are ignored):

    ID: 12
    CATEGORY: dreams   (optional)
    Q: Question text. Additional lines until the next marker are treated as
       part of the question.

A block holding only a ``CATEGORY:`` line sets the default category for every
following block until the next such header:

    CATEGORY: fears

    ID: 163
    Q: What are you most afraid of losing?
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from deck_app.core.errors import CatalogImportError
from deck_app.core.models import Question

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "questions.txt"


@dataclass(slots=True)
class _Block:
    question_id: int | None = None
    category: str | None = None
    has_category: bool = False
    question_lines: list[str] | None = None


def load_catalog_from_file(file_path: Path) -> list[Question]:
    text = file_path.read_text(encoding="utf-8")
    questions = parse_catalog_text(text)
    if not questions:
        raise CatalogImportError(f"Catalog file {file_path} did not contain any questions.")
    return questions


def load_default_catalog() -> list[Question]:
    return load_catalog_from_file(DEFAULT_CATALOG_PATH)


def parse_catalog_text(text: str) -> list[Question]:
    questions: list[Question] = []
    seen_ids: set[int] = set()
    default_category: str | None = None

    for block_text in _split_blocks(text):
        block = _parse_block(block_text)
        if block.question_lines is None:
            if block.question_id is not None:
                raise CatalogImportError(f"Question {block.question_id} has no text (Q: ...).")
            default_category = block.category
            continue

        if block.question_id is None:
            raise CatalogImportError("Question id missing (ID: ...).")
        if block.question_id in seen_ids:
            raise CatalogImportError(f"Duplicate question id {block.question_id}.")
        seen_ids.add(block.question_id)

        question_text = "\n".join(block.question_lines).strip()
        if not question_text:
            raise CatalogImportError(f"Question {block.question_id} text cannot be empty.")

        category = block.category if block.has_category else default_category
        questions.append(Question(id=block.question_id, text=question_text, category=category))
    return questions


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped.startswith("#"):
            continue
        if stripped == "---" or not stripped:
            if current_block:
                blocks.append("\n".join(current_block))
                current_block = []
            continue
        current_block.append(stripped)
    if current_block:
        blocks.append("\n".join(current_block))
    return blocks


def _parse_block(block_text: str) -> _Block:
    block = _Block()
    in_question = False

    for line in block_text.splitlines():
        upper = line.upper()
        if upper.startswith("ID:"):
            raw_value = line.split(":", 1)[1].strip()
            try:
                block.question_id = int(raw_value)
            except ValueError as exc:
                raise CatalogImportError(f"ID must be an integer, got '{raw_value}'.") from exc
            in_question = False
            continue

        if upper.startswith("CATEGORY:"):
            block.category = line.split(":", 1)[1].strip() or None
            block.has_category = True
            in_question = False
            continue

        if upper.startswith("Q:"):
            block.question_lines = [line[2:].strip()]
            in_question = True
            continue

        if in_question and block.question_lines is not None:
            block.question_lines.append(line)
        else:
            raise CatalogImportError(f"Encountered text outside of a known section: '{line}'.")

    return block

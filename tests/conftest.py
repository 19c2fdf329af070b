from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

import pytest

from notemerge.collection import Collection
from notemerge.history import History
from notemerge.merge import MergeEngine


class ScriptedPrompter:
    """Answers conflicts from a fixed list; exceptions in the list are raised."""

    def __init__(self, answers: List[object]) -> None:
        self.answers = list(answers)
        self.asked: List[str] = []
        self.warnings: List[str] = []

    def ask(self, conflict):
        self.asked.append(f"{conflict.term}: {conflict.meaning.text}")
        if not self.answers:
            raise AssertionError(f"unexpected prompt for {conflict.term}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def warn(self, message: str) -> None:
        self.warnings.append(message)


@pytest.fixture
def engine() -> MergeEngine:
    return MergeEngine(Collection(), History())


@pytest.fixture
def notes_dir(tmp_path: Path) -> Dict[str, Path]:
    notes = tmp_path / "notes"
    notes.mkdir()

    lesson_one = "\n".join(
        [
            "# title: Lesson 1",
            "적 tidspunkt (situation, oplevelse)",
            "학교 skole",
        ]
    )
    (notes / "lesson1.txt").write_text(lesson_one + "\n", encoding="utf-8")

    lesson_two = "\n".join(
        [
            "# title",
            "",
            "Lesson 2",
            "학교 學校 skole",
            "적 gang",
            "# reading",
            "그때 나는 학교에 있었다.",
            "그때 dengang",
        ]
    )
    (notes / "lesson2.txt").write_text(lesson_two + "\n", encoding="utf-8")

    broken = "\n".join(
        [
            "# vocab",
            "시간 tid",
            "this line has no term",
        ]
    )
    (notes / "broken.txt").write_text(broken + "\n", encoding="utf-8")

    return {
        "lesson1": notes / "lesson1.txt",
        "lesson2": notes / "lesson2.txt",
        "broken": notes / "broken.txt",
    }


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def scripted():
    return ScriptedPrompter

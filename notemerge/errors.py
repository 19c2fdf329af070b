"""Exception types raised by the note merging tools."""

from __future__ import annotations

from pathlib import Path
from typing import Union


class NoteMergeError(Exception):
    """Base class for every error the package raises on purpose."""


class SourceReadError(NoteMergeError):
    def __init__(self, path: Union[str, Path], message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = str(path)


class InvalidNoteError(NoteMergeError):
    """A content line that does not look like a vocabulary entry."""

    def __init__(self, path: Union[str, Path], lineno: int, line: str) -> None:
        super().__init__(f"{path}:{lineno}: invalid vocabulary line: {line!r}")
        self.path = str(path)
        self.lineno = lineno
        self.line = line


class DocumentDecodeError(NoteMergeError):
    def __init__(self, path: Union[str, Path], message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = str(path)


class PersistenceError(NoteMergeError):
    def __init__(self, path: Union[str, Path], message: str) -> None:
        super().__init__(f"Unable to write {path}: {message}")
        self.path = str(path)


class PromptError(NoteMergeError):
    pass


class DecisionError(NoteMergeError):
    """Raised when a decision token is unknown or was already resolved."""

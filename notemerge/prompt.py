"""Ask the user how to resolve a conflicting meaning."""

from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO

from .errors import PromptError
from .merge import AddNew, Decision, NeedsDecision, Reject, Replace, Update

ACTIONS_HELP = "[a]dd, [r]eplace N, [u]pdate N TEXT, [n]o (skip)"


def format_symbol(symbol: Optional[str]) -> str:
    return f" [{symbol}]" if symbol else ""


def parse_answer(answer: str, count: int, index_base: int = 1) -> Decision:
    """Turn a typed answer into a decision. Raises ``ValueError`` when unusable."""
    parts = answer.strip().split(maxsplit=2)
    if not parts:
        raise ValueError(f"Choose an action: {ACTIONS_HELP}")
    command = parts[0].lower()
    if command in ("a", "add"):
        return AddNew()
    if command in ("n", "no", "s", "skip", "reject"):
        return Reject()
    if command not in ("r", "replace", "u", "update"):
        raise ValueError(f"Unknown action {parts[0]!r}. Choose: {ACTIONS_HELP}")

    if len(parts) < 2:
        raise ValueError("Missing meaning number")
    try:
        index = int(parts[1]) - index_base
    except ValueError as exc:
        raise ValueError(f"Not a number: {parts[1]!r}") from exc
    if not 0 <= index < count:
        raise ValueError(f"Choose a number between {index_base} and {count - 1 + index_base}")

    if command.startswith("r"):
        return Replace(index)
    if len(parts) < 3 or not parts[2].strip():
        raise ValueError("Missing updated meaning text")
    return Update(index, parts[2].strip())


class TerminalPrompter:
    def __init__(
        self,
        input_fn: Optional[Callable[[str], str]] = None,
        output: Optional[TextIO] = None,
        index_base: int = 1,
    ) -> None:
        self.input_fn = input_fn
        self.output = output
        self.index_base = index_base

    def _print(self, message: str = "") -> None:
        print(message, file=self.output or sys.stdout)

    def show(self, conflict: NeedsDecision) -> None:
        meaning = conflict.meaning
        self._print()
        self._print(f"{conflict.term}: {meaning.text}{format_symbol(meaning.symbol)} (from {conflict.source_title})")
        self._print("Already known:")
        for candidate in conflict.existing_meanings():
            number = candidate.index + self.index_base
            title = candidate.title or "?"
            self._print(f"  {number}. {candidate.text}{format_symbol(candidate.symbol)} ({title})")

    def warn(self, message: str) -> None:
        self._print(f"! {message}")

    def ask(self, conflict: NeedsDecision) -> Decision:
        self.show(conflict)
        count = len(conflict.existing_meanings())
        read = self.input_fn or input
        while True:
            try:
                answer = read(f"{ACTIONS_HELP} > ")
            except (EOFError, KeyboardInterrupt, OSError, UnicodeDecodeError) as exc:
                raise PromptError("Input closed while waiting for a decision") from exc
            try:
                return parse_answer(answer, count, self.index_base)
            except ValueError as exc:
                self.warn(str(exc))

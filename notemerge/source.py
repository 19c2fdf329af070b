"""Parse vocabulary note files into ``Source`` objects.

A note file is a sequence of lines. ``#`` lines are directives that switch
between scopes, everything else is content interpreted according to the
current scope::

    # title: Lesson 3
    적 tidspunkt (situation, oplevelse)
    # reading
    그때 나는 학교에 있었다.
    그때 dengang

The line after a reading example is the example's vocabulary; a blank line
closes it and the next content line is another example.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from .errors import InvalidNoteError, SourceReadError
from .pattern import match_line

logger = logging.getLogger(__name__)

TITLE_RE = re.compile(r"# ?[tT]itle:?")
READING_RE = re.compile(r"# ?[rR]ead")
VOCABULARY_RE = re.compile(r"# ?[vV]ocab")


@dataclass(frozen=True)
class Meaning:
    text: str
    symbol: Optional[str] = field(default=None, compare=False)


@dataclass(frozen=True)
class Entry:
    term: str
    meaning: Meaning


@dataclass
class Source:
    title: str
    entries: List[Entry]


class Scope(Enum):
    TITLE = "title"
    VOCAB = "vocab"
    READING_EXAMPLE = "reading_example"
    READING_VOCAB = "reading_vocab"


class Action(Enum):
    IGNORE = "ignore"
    SET_TITLE = "set_title"
    PARSE_VOCAB = "parse_vocab"
    UNKNOWN_DIRECTIVE = "unknown_directive"


@dataclass(frozen=True)
class Step:
    scope: Scope
    action: Action
    text: str = ""


def transition(scope: Scope, line: str) -> Step:
    """Decide the next scope and what to do with ``line``."""
    if line.startswith("#"):
        title = TITLE_RE.search(line)
        if title:
            rest = line[title.end():].strip()
            if rest:
                return Step(scope, Action.SET_TITLE, rest)
            return Step(Scope.TITLE, Action.IGNORE)
        if READING_RE.search(line):
            return Step(Scope.READING_EXAMPLE, Action.IGNORE)
        if VOCABULARY_RE.search(line):
            return Step(Scope.VOCAB, Action.IGNORE)
        return Step(scope, Action.UNKNOWN_DIRECTIVE)

    if not line.strip():
        if scope is Scope.READING_VOCAB:
            return Step(Scope.READING_EXAMPLE, Action.IGNORE)
        return Step(scope, Action.IGNORE)

    if scope is Scope.TITLE:
        return Step(Scope.VOCAB, Action.SET_TITLE, line.strip())
    if scope is Scope.READING_EXAMPLE:
        # example sentence, its vocabulary follows
        return Step(Scope.READING_VOCAB, Action.IGNORE)
    return Step(scope, Action.PARSE_VOCAB)


def split_lines(text: str) -> List[str]:
    r"""Split at "\n" only, dropping a "\r" before it."""
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_text(text: str, path: Union[str, Path], *, warn_unknown_directives: bool = True) -> Source:
    title = Path(path).name
    entries: List[Entry] = []
    scope = Scope.VOCAB
    for lineno, line in enumerate(split_lines(text)):
        step = transition(scope, line)
        scope = step.scope
        if step.action is Action.SET_TITLE:
            title = step.text
        elif step.action is Action.PARSE_VOCAB:
            match = match_line(line)
            if match is None:
                raise InvalidNoteError(path, lineno, line)
            entries.append(Entry(match.term, Meaning(match.text, match.symbol)))
        elif step.action is Action.UNKNOWN_DIRECTIVE and warn_unknown_directives:
            logger.warning("%s:%d: ignoring unrecognised directive %r", path, lineno, line)
    logger.debug("Parsed %d entries from %s (title %r)", len(entries), path, title)
    return Source(title, entries)


def load_source(path: Union[str, Path], *, warn_unknown_directives: bool = True) -> Source:
    source_path = Path(path)
    try:
        text = source_path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(source_path, str(exc)) from exc
    text = text.lstrip("\ufeff")
    return parse_text(text, source_path, warn_unknown_directives=warn_unknown_directives)

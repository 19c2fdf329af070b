"""Decide what happens to each parsed entry when it meets the collection.

``MergeEngine.submit`` either settles an entry on its own (new term, exact
duplicate, or a pair that was adjudicated in an earlier run) or hands back a
``NeedsDecision`` snapshot. The snapshot carries a single-use token; passing
it to ``MergeEngine.resolve`` together with a decision applies the change.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

from .collection import Collection, StoredMeaning
from .errors import DecisionError
from .history import History
from .source import Meaning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutoInserted:
    term: str
    text: str


@dataclass(frozen=True)
class AutoSkipped:
    term: str
    text: str
    reason: str


@dataclass(frozen=True)
class Candidate:
    index: int
    text: str
    symbol: Optional[str]
    title: Optional[str]


@dataclass(frozen=True)
class Reject:
    pass


@dataclass(frozen=True)
class AddNew:
    pass


@dataclass(frozen=True)
class Replace:
    index: int


@dataclass(frozen=True)
class Update:
    index: int
    text: str


Decision = Union[Reject, AddNew, Replace, Update]


@dataclass(frozen=True)
class NeedsDecision:
    token: int
    term: str
    meaning: Meaning
    source_title: str
    candidates: Tuple[Candidate, ...]
    engine: "MergeEngine" = field(repr=False, compare=False)

    def existing_meanings(self) -> Tuple[Candidate, ...]:
        return self.engine.existing_meanings(self.term)

    def reject(self) -> None:
        self.engine.resolve(self.token, Reject())

    def add_new(self) -> None:
        self.engine.resolve(self.token, AddNew())

    def replace(self, index: int) -> None:
        self.engine.resolve(self.token, Replace(index))

    def update(self, index: int, text: str) -> None:
        self.engine.resolve(self.token, Update(index, text))

    def discard(self) -> None:
        self.engine.discard(self.token)


Outcome = Union[AutoInserted, AutoSkipped, NeedsDecision]


class MergeEngine:
    def __init__(self, collection: Collection, history: History) -> None:
        self.collection = collection
        self.history = history
        self._pending: Dict[int, NeedsDecision] = {}
        self._tokens = itertools.count()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def submit(self, term: str, meaning: Meaning, source_title: str) -> Outcome:
        if self.history.has_been_handled(term, meaning.text):
            return AutoSkipped(term, meaning.text, "handled")

        if term not in self.collection:
            self.collection.add_meaning(term, meaning, source_title)
            self.history.record(term, meaning.text)
            logger.debug("Inserted %s: %s", term, meaning.text)
            return AutoInserted(term, meaning.text)

        duplicate = self.collection.find(term, meaning.text)
        if duplicate is not None:
            if duplicate.symbol is None and meaning.symbol is not None:
                duplicate.symbol = meaning.symbol
                logger.debug("Added symbol %s to %s: %s", meaning.symbol, term, meaning.text)
            return AutoSkipped(term, meaning.text, "duplicate")

        conflict = NeedsDecision(
            token=next(self._tokens),
            term=term,
            meaning=meaning,
            source_title=source_title,
            candidates=self.existing_meanings(term),
            engine=self,
        )
        self._pending[conflict.token] = conflict
        return conflict

    def discard(self, token: int) -> None:
        """Forget a pending conflict without deciding it; nothing is recorded."""
        if self._pending.pop(token, None) is None:
            raise DecisionError(f"Decision token {token} is unknown or already resolved")

    def existing_meanings(self, term: str) -> Tuple[Candidate, ...]:
        return tuple(
            Candidate(index, stored.text, stored.symbol, self.collection.title(stored.source))
            for index, stored in enumerate(self.collection.meanings(term))
        )

    def resolve(self, token: int, decision: Decision) -> None:
        """Apply ``decision`` to the conflict identified by ``token``.

        ``Replace`` lets the incoming symbol win over the stored one; ``Update``
        keeps the stored symbol and falls back to the incoming one. An
        out-of-range index raises ``IndexError`` and leaves the conflict
        pending so that it can be resolved again.
        """
        conflict = self._pending.get(token)
        if conflict is None:
            raise DecisionError(f"Decision token {token} is unknown or already resolved")
        term, meaning, title = conflict.term, conflict.meaning, conflict.source_title

        if isinstance(decision, Reject):
            pass
        elif isinstance(decision, AddNew):
            self.collection.add_meaning(term, meaning, title)
        elif isinstance(decision, Replace):
            stored = self._meaning_at(term, decision.index)
            symbol = meaning.symbol if meaning.symbol is not None else stored.symbol
            self.collection.replace_meaning(term, decision.index, meaning.text, symbol, title)
        elif isinstance(decision, Update):
            text = decision.text.strip()
            if not text:
                raise ValueError("Updated meaning text must not be empty")
            stored = self._meaning_at(term, decision.index)
            symbol = stored.symbol if stored.symbol is not None else meaning.symbol
            self.collection.replace_meaning(term, decision.index, text, symbol, title)
        else:
            raise TypeError(f"Unsupported decision: {decision!r}")

        self.history.record(term, meaning.text)
        del self._pending[token]
        logger.debug("Resolved %s: %s with %s", term, meaning.text, type(decision).__name__)

    def _meaning_at(self, term: str, index: int) -> StoredMeaning:
        meanings = self.collection.meanings(term)
        if not 0 <= index < len(meanings):
            raise IndexError(f"Invalid index: {index} not in 0..{len(meanings) - 1}")
        return meanings[index]


def submit(collection: Collection, history: History, term: str, meaning: Meaning, source_title: str) -> Outcome:
    return MergeEngine(collection, history).submit(term, meaning, source_title)

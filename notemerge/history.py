from __future__ import annotations

from typing import Dict, Iterable, Iterator, Optional, Set

from .models import HistoryDocument


class History:
    """Term/meaning pairs that have already been decided upon.

    Membership only ever grows; decisions are never forgotten.
    """

    def __init__(self, handled: Optional[Dict[str, Iterable[str]]] = None) -> None:
        self._handled: Dict[str, Set[str]] = {}
        for term, texts in (handled or {}).items():
            self._handled[term] = set(texts)

    def record(self, term: str, text: str) -> None:
        self._handled.setdefault(term, set()).add(text)

    def has_been_handled(self, term: str, text: str) -> bool:
        return text in self._handled.get(term, ())

    def terms(self) -> Iterator[str]:
        return iter(self._handled)

    def __len__(self) -> int:
        return sum(len(texts) for texts in self._handled.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, History):
            return NotImplemented
        return self._handled == other._handled

    def to_document(self) -> HistoryDocument:
        return HistoryDocument(handled={term: sorted(texts) for term, texts in self._handled.items()})

    @classmethod
    def from_document(cls, document: HistoryDocument) -> "History":
        return cls(document.handled)

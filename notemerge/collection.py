"""The persistent term -> meanings store and its table of source titles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .models import CollectionDocument, StoredMeaningModel
from .source import Meaning


@dataclass
class StoredMeaning:
    text: str
    symbol: Optional[str]
    source: int


class TitleTable:
    """Dense ids for source titles. Ids start at 0 and are never reused."""

    def __init__(self, titles: Optional[Dict[int, str]] = None, next_id: int = 0) -> None:
        self._titles: Dict[int, str] = dict(titles or {})
        self._ids: Dict[str, int] = {title: title_id for title_id, title in self._titles.items()}
        self.next_id = max([next_id] + [title_id + 1 for title_id in self._titles])

    def intern(self, title: str) -> int:
        title_id = self._ids.get(title)
        if title_id is None:
            title_id = self.next_id
            self.next_id += 1
            self._titles[title_id] = title
            self._ids[title] = title_id
        return title_id

    def lookup(self, title_id: int) -> Optional[str]:
        return self._titles.get(title_id)

    def id_of(self, title: str) -> Optional[int]:
        return self._ids.get(title)

    def items(self) -> Iterator[Tuple[int, str]]:
        return iter(sorted(self._titles.items()))

    def __contains__(self, title: object) -> bool:
        return title in self._ids

    def __len__(self) -> int:
        return len(self._titles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TitleTable):
            return NotImplemented
        return self._titles == other._titles and self.next_id == other.next_id


class Collection:
    def __init__(
        self,
        contents: Optional[Dict[str, List[StoredMeaning]]] = None,
        titles: Optional[TitleTable] = None,
    ) -> None:
        self._contents: Dict[str, List[StoredMeaning]] = contents if contents is not None else {}
        self.titles = titles if titles is not None else TitleTable()

    def intern(self, title: str) -> int:
        return self.titles.intern(title)

    def title(self, title_id: int) -> Optional[str]:
        return self.titles.lookup(title_id)

    def add_meaning(self, term: str, meaning: Meaning, source_title: str) -> StoredMeaning:
        stored = StoredMeaning(meaning.text, meaning.symbol, self.intern(source_title))
        self._contents.setdefault(term, []).append(stored)
        return stored

    def replace_meaning(
        self,
        term: str,
        index: int,
        text: str,
        symbol: Optional[str],
        source_title: str,
    ) -> StoredMeaning:
        """Overwrite the meaning at ``index`` and credit it to ``source_title``.

        Raises ``KeyError`` for an unknown term and ``IndexError`` when
        ``index`` is outside the term's current meanings; nothing is changed
        in either case.
        """
        meanings = self._contents.get(term)
        if not meanings:
            raise KeyError(f"No meanings found for term '{term}'")
        if not 0 <= index < len(meanings):
            raise IndexError(f"Invalid index: {index} not in 0..{len(meanings) - 1}")
        stored = meanings[index]
        stored.text = text
        stored.symbol = symbol
        stored.source = self.intern(source_title)
        return stored

    def find(self, term: str, text: str) -> Optional[StoredMeaning]:
        for stored in self._contents.get(term, ()):
            if stored.text == text:
                return stored
        return None

    def contains(self, term: str, text: str) -> bool:
        return self.find(term, text) is not None

    def meanings(self, term: str) -> Tuple[StoredMeaning, ...]:
        return tuple(self._contents.get(term, ()))

    def __contains__(self, term: object) -> bool:
        return term in self._contents

    def __iter__(self) -> Iterator[str]:
        return iter(self._contents)

    def __len__(self) -> int:
        return len(self._contents)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return self._contents == other._contents and self.titles == other.titles

    def to_document(self) -> CollectionDocument:
        return CollectionDocument(
            contents={
                term: [StoredMeaningModel(text=m.text, symbol=m.symbol, source=m.source) for m in meanings]
                for term, meanings in self._contents.items()
            },
            titles=dict(self.titles.items()),
            next_title_id=self.titles.next_id,
        )

    @classmethod
    def from_document(cls, document: CollectionDocument) -> "Collection":
        contents = {
            term: [StoredMeaning(m.text, m.symbol, m.source) for m in meanings]
            for term, meanings in document.contents.items()
        }
        return cls(contents, TitleTable(document.titles, document.next_title_id))

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class StoredMeaningModel(BaseModel):
    text: str
    symbol: Optional[str] = None
    source: int = Field(ge=0)

    @field_validator("text")
    @classmethod
    def non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("meaning text must not be empty")
        return value

    @field_validator("symbol")
    @classmethod
    def blank_symbol_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class CollectionDocument(BaseModel):
    contents: Dict[str, List[StoredMeaningModel]] = Field(default_factory=dict)
    titles: Dict[int, str] = Field(default_factory=dict)
    next_title_id: int = Field(default=0, ge=0)

    @field_validator("contents")
    @classmethod
    def terms_have_meanings(cls, value: Dict[str, List[StoredMeaningModel]]) -> Dict[str, List[StoredMeaningModel]]:
        empty = [term for term, meanings in value.items() if not meanings]
        if empty:
            raise ValueError(f"terms without meanings: {', '.join(sorted(empty))}")
        return value

    @model_validator(mode="after")
    def titles_consistent(self) -> "CollectionDocument":
        seen: Dict[str, int] = {}
        for title_id, title in self.titles.items():
            if title_id < 0 or title_id >= self.next_title_id:
                raise ValueError(f"title id {title_id} outside 0..{self.next_title_id - 1}")
            if title in seen:
                raise ValueError(f"title {title!r} registered under ids {seen[title]} and {title_id}")
            seen[title] = title_id
        for term, meanings in self.contents.items():
            for meaning in meanings:
                if meaning.source not in self.titles:
                    raise ValueError(f"meaning of {term!r} refers to unknown title id {meaning.source}")
        return self


class HistoryDocument(BaseModel):
    handled: Dict[str, List[str]] = Field(default_factory=dict)

"""Split a vocabulary line into its term, optional Han gloss and meaning."""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

# Script=Hangul, including the compatibility and half-width jamo.
HANGUL_RANGES = (
    "\u1100-\u11ff"
    "\u302e\u302f"
    "\u3131-\u318e"
    "\u3200-\u321e"
    "\u3260-\u327e"
    "\ua960-\ua97c"
    "\uac00-\ud7a3"
    "\ud7b0-\ud7c6"
    "\ud7cb-\ud7fb"
    "\uffa0-\uffbe"
    "\uffc2-\uffc7"
    "\uffca-\uffcf"
    "\uffd2-\uffd7"
    "\uffda-\uffdc"
)

# Script=Han: radicals, ideographs and the CJK extension planes.
HAN_RANGES = (
    "\u2e80-\u2e99"
    "\u2e9b-\u2ef3"
    "\u2f00-\u2fd5"
    "\u3005\u3007"
    "\u3021-\u3029"
    "\u3038-\u303b"
    "\u3400-\u4dbf"
    "\u4e00-\u9fff"
    "\uf900-\ufa6d"
    "\ufa70-\ufad9"
    "\U00020000-\U0002a6df"
    "\U0002a700-\U0002ebef"
    "\U0002f800-\U0002fa1d"
    "\U00030000-\U000323af"
)

# Grammatical markers allowed inside a term: "-(N)/~", "A", "V" and friends.
TERM_MARKERS = r"\-()/~NIAV"

VOCAB_RE = re.compile(
    rf"((?:[{TERM_MARKERS}{HANGUL_RANGES}]+(?:\s|:)+)+)"
    rf"((?:[{HAN_RANGES}]|\s)*)"
    r"\s*(.+)"
)


class TermMatch(NamedTuple):
    term: str
    symbol: Optional[str]
    text: str


def match_line(line: str) -> Optional[TermMatch]:
    """Return the ``(term, symbol, text)`` triple of ``line`` or ``None``.

    The term must start the line (leading indentation is ignored). A colon
    closing the term is dropped and an empty Han gloss becomes ``None``.
    """
    match = VOCAB_RE.match(line.strip())
    if match is None:
        return None
    term = match.group(1).strip()
    if term.endswith(":"):
        term = term[:-1].rstrip()
    symbol = match.group(2).strip()
    text = match.group(3).strip()
    if not term or not text:
        return None
    return TermMatch(term, symbol or None, text)

"""
Full-text search over dives.

Every dive is reduced to a set of normalised words (case-folded,
accents removed) drawn from its notes, people, suit, tags, dive-site
name and cylinder descriptions.  The index maps words to dives so
that a query over the whole log does not have to re-tokenise every
dive.
"""

import html
import re
import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Set

from .dive import Dive, DiveTable


class StringFilterMode(Enum):
    STARTSWITH = 0
    SUBSTRING = 1
    EXACT = 2


_TAG_RE = re.compile(r"<[^>]*>")
_WORD_RE = re.compile(r"\w+")


def normalize_word(word: str) -> str:
    """Case-fold *word* and strip combining accents."""
    decomposed = unicodedata.normalize("NFKD", word.casefold())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def tokenize(text: str) -> List[str]:
    """Split *text* into normalised words, dropping markup."""
    if not text:
        return []
    text = html.unescape(_TAG_RE.sub(" ", text))
    return [normalize_word(w) for w in _WORD_RE.findall(text)]


def dive_words(d: Dive) -> Set[str]:
    parts = [d.notes, d.buddy, d.divemaster, d.suit]
    parts.extend(d.tags)
    if d.dive_site is not None:
        parts.append(d.dive_site.name)
    parts.extend(c.type.description for c in d.cylinders)
    words: Set[str] = set()
    for part in parts:
        words.update(tokenize(part))
    return words


@dataclass
class FullTextQuery:
    original_query: str = ""
    words: List[str] = field(default_factory=list)

    @classmethod
    def from_string(cls, text: str) -> "FullTextQuery":
        return cls(original_query=text, words=tokenize(text))

    def doit(self) -> bool:
        """True if the query has anything to search for."""
        return bool(self.words)


def _word_matches(query_word: str, word: str, mode: StringFilterMode) -> bool:
    if mode is StringFilterMode.EXACT:
        return word == query_word
    if mode is StringFilterMode.SUBSTRING:
        return query_word in word
    return word.startswith(query_word)


def dive_matches(d: Dive, query: FullTextQuery, mode: StringFilterMode) -> bool:
    """Check a single dive without consulting an index."""
    if not query.doit():
        return True
    words = dive_words(d)
    return all(any(_word_matches(q, w, mode) for w in words) for q in query.words)


class FullTextResult:
    """Dives that matched a query over the whole index."""

    def __init__(self, dives: Iterable[Dive] = ()):
        self._ids = {id(d) for d in dives}

    def dive_matches(self, d: Dive) -> bool:
        return id(d) in self._ids

    def __len__(self) -> int:
        return len(self._ids)


class FullTextIndex:
    """Word → dives index over a dive table."""

    def __init__(self, table: DiveTable = None):
        self._words: Dict[str, List[Dive]] = {}
        self._dive_words: Dict[int, Set[str]] = {}
        if table is not None:
            self.populate(table)

    def populate(self, table: DiveTable) -> None:
        self._words.clear()
        self._dive_words.clear()
        for d in table:
            self.register_dive(d)

    def register_dive(self, d: Dive) -> None:
        words = dive_words(d)
        self._dive_words[id(d)] = words
        for w in words:
            self._words.setdefault(w, []).append(d)

    def unregister_dive(self, d: Dive) -> None:
        for w in self._dive_words.pop(id(d), set()):
            remaining = [x for x in self._words.get(w, []) if x is not d]
            if remaining:
                self._words[w] = remaining
            else:
                self._words.pop(w, None)

    def update_dive(self, d: Dive) -> None:
        self.unregister_dive(d)
        self.register_dive(d)

    def _dives_for_word(self, query_word: str, mode: StringFilterMode) -> Dict[int, Dive]:
        if mode is StringFilterMode.EXACT:
            return {id(d): d for d in self._words.get(query_word, [])}
        found: Dict[int, Dive] = {}
        for word, dives in self._words.items():
            if _word_matches(query_word, word, mode):
                found.update((id(d), d) for d in dives)
        return found

    def find_dives(self, query: FullTextQuery, mode: StringFilterMode) -> FullTextResult:
        """All dives in which every query word matches one of the dive's words."""
        if not query.doit():
            return FullTextResult()
        result = None
        for q in query.words:
            found = self._dives_for_word(q, mode)
            if result is None:
                result = found
            else:
                result = {k: v for k, v in result.items() if k in found}
            if not result:
                break
        return FullTextResult(result.values())

    def dive_matches(self, d: Dive, query: FullTextQuery, mode: StringFilterMode) -> bool:
        if not query.doit():
            return True
        words = self._dive_words.get(id(d))
        if words is None:
            return dive_matches(d, query, mode)
        return all(any(_word_matches(q, w, mode) for w in words) for q in query.words)

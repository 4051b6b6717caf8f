"""
Structured filter constraints.

A ``FilterConstraint`` compares one dive field with one or more
literals.  Depending on the field it is a numeric range, a string
match, a multiple-choice set or a plain yes/no test.  Data that a dive
does not carry never matches; ``negate`` is applied afterwards, so a
negated constraint does match dives with missing data.
"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set

from .dive import Dive, DiveMode
from .fulltext import StringFilterMode, normalize_word, tokenize
from .i18n import translate


class FilterConstraintType(Enum):
    DATE = "date"
    YEAR = "year"
    DAY_OF_WEEK = "day_of_week"
    RATING = "rating"
    WAVESIZE = "wavesize"
    CURRENT = "current"
    VISIBILITY = "visibility"
    SURGE = "surge"
    CHILL = "chill"
    DEPTH = "depth"
    DURATION = "duration"
    WATER_TEMP = "water_temp"
    AIR_TEMP = "air_temp"
    SAC = "sac"
    PLANNED = "planned"
    LOGGED = "logged"
    DIVE_MODE = "dive_mode"
    TAGS = "tags"
    PEOPLE = "people"
    LOCATION = "location"
    SUIT = "suit"
    NOTES = "notes"
    O2 = "o2"
    HE = "he"


class FilterConstraintRangeMode(Enum):
    EQUAL = 0
    LESS_OR_EQUAL = 1
    GREATER_OR_EQUAL = 2
    RANGE = 3


# ── Type metadata ────────────────────────────────────────────────────────

_TYPE_NAMES = {
    FilterConstraintType.DATE: "date",
    FilterConstraintType.YEAR: "year",
    FilterConstraintType.DAY_OF_WEEK: "week day",
    FilterConstraintType.RATING: "rating",
    FilterConstraintType.WAVESIZE: "wave size",
    FilterConstraintType.CURRENT: "current",
    FilterConstraintType.VISIBILITY: "visibility",
    FilterConstraintType.SURGE: "surge",
    FilterConstraintType.CHILL: "chill",
    FilterConstraintType.DEPTH: "max. depth",
    FilterConstraintType.DURATION: "duration",
    FilterConstraintType.WATER_TEMP: "water temp.",
    FilterConstraintType.AIR_TEMP: "air temp.",
    FilterConstraintType.SAC: "SAC",
    FilterConstraintType.PLANNED: "planned",
    FilterConstraintType.LOGGED: "logged",
    FilterConstraintType.DIVE_MODE: "dive mode",
    FilterConstraintType.TAGS: "tags",
    FilterConstraintType.PEOPLE: "people",
    FilterConstraintType.LOCATION: "location",
    FilterConstraintType.SUIT: "suit",
    FilterConstraintType.NOTES: "notes",
    FilterConstraintType.O2: "O₂",
    FilterConstraintType.HE: "He",
}

STRING_TYPES = {
    FilterConstraintType.TAGS, FilterConstraintType.PEOPLE,
    FilterConstraintType.LOCATION, FilterConstraintType.SUIT,
    FilterConstraintType.NOTES,
}
BOOL_TYPES = {FilterConstraintType.PLANNED, FilterConstraintType.LOGGED}
MULTIPLE_CHOICE_TYPES = {FilterConstraintType.DAY_OF_WEEK, FilterConstraintType.DIVE_MODE}

_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def constraint_type_name(ctype: FilterConstraintType) -> str:
    return translate(_TYPE_NAMES[ctype], "filter")


def is_string_type(ctype: FilterConstraintType) -> bool:
    return ctype in STRING_TYPES


def is_multiple_choice_type(ctype: FilterConstraintType) -> bool:
    return ctype in MULTIPLE_CHOICE_TYPES


def is_range_type(ctype: FilterConstraintType) -> bool:
    return ctype not in STRING_TYPES | BOOL_TYPES | MULTIPLE_CHOICE_TYPES


def multiple_choice_options(ctype: FilterConstraintType) -> List[str]:
    if ctype is FilterConstraintType.DAY_OF_WEEK:
        return [translate(d, "filter") for d in _WEEKDAYS]
    if ctype is FilterConstraintType.DIVE_MODE:
        return [m.text_ui for m in DiveMode]
    return []


# ── Field extraction ─────────────────────────────────────────────────────

def _utc(when: int) -> datetime.datetime:
    return datetime.datetime.fromtimestamp(when, tz=datetime.timezone.utc)


def _numeric_values(ctype: FilterConstraintType, d: Dive) -> List[int]:
    """Values of a range-type field; an empty list means "no data"."""
    if ctype is FilterConstraintType.DATE:
        return [d.when]
    if ctype is FilterConstraintType.YEAR:
        return [_utc(d.when).year]
    if ctype is FilterConstraintType.O2:
        return [c.gasmix.o2 or 209 for c in d.cylinders if not c.is_empty()]
    if ctype is FilterConstraintType.HE:
        return [c.gasmix.he for c in d.cylinders if not c.is_empty()]
    value = {
        FilterConstraintType.RATING: d.rating,
        FilterConstraintType.WAVESIZE: d.wavesize,
        FilterConstraintType.CURRENT: d.current,
        FilterConstraintType.VISIBILITY: d.visibility,
        FilterConstraintType.SURGE: d.surge,
        FilterConstraintType.CHILL: d.chill,
        FilterConstraintType.DEPTH: d.maxdepth,
        FilterConstraintType.DURATION: d.duration,
        FilterConstraintType.WATER_TEMP: d.watertemp,
        FilterConstraintType.AIR_TEMP: d.airtemp,
        FilterConstraintType.SAC: d.sac,
    }[ctype]
    return [value] if value else []


def _string_values(ctype: FilterConstraintType, d: Dive) -> List[str]:
    if ctype is FilterConstraintType.TAGS:
        return list(d.tags)
    if ctype is FilterConstraintType.PEOPLE:
        people = (d.buddy + "," + d.divemaster).split(",")
        return [p.strip() for p in people if p.strip()]
    if ctype is FilterConstraintType.LOCATION:
        return [d.dive_site.name] if d.dive_site is not None and d.dive_site.name else []
    if ctype is FilterConstraintType.SUIT:
        return [d.suit] if d.suit else []
    return tokenize(d.notes)


# ── Constraint ───────────────────────────────────────────────────────────

@dataclass
class FilterConstraint:
    """One predicate of a structured filter.

    Parameters
    ----------
    type : FilterConstraintType
        Dive field the constraint looks at.
    range_mode : FilterConstraintRangeMode
        How ``low``/``high`` are applied to range types.
    string_mode : StringFilterMode
        How ``strings`` are matched for string types.
    low, high : int
        Bounds in the field's internal unit (mm, s, mK, mℓ/min,
        permille, seconds since epoch, year …).
    strings : list of str
        Literals for string types; any one of them may match.
    choices : set of int
        Accepted option indices for multiple-choice types.
    negate : bool
        Invert the result.
    """
    type: FilterConstraintType
    range_mode: FilterConstraintRangeMode = FilterConstraintRangeMode.RANGE
    string_mode: StringFilterMode = StringFilterMode.SUBSTRING
    low: int = 0
    high: int = 0
    strings: List[str] = field(default_factory=list)
    choices: Set[int] = field(default_factory=set)
    negate: bool = False

    def set_choice(self, idx: int, selected: bool = True) -> None:
        options = multiple_choice_options(self.type)
        if not options:
            raise ValueError(f"Constraint type {self.type.value!r} has no choices")
        if idx < 0 or idx >= len(options):
            raise ValueError(
                f"Choice index {idx} out of range for {self.type.value!r} "
                f"(0..{len(options) - 1})")
        if selected:
            self.choices.add(idx)
        else:
            self.choices.discard(idx)

    def _match_range(self, value: int) -> bool:
        mode = self.range_mode
        if self.type is FilterConstraintType.DATE and mode is FilterConstraintRangeMode.EQUAL:
            return _utc(value).date() == _utc(self.low).date()
        if mode is FilterConstraintRangeMode.EQUAL:
            return value == self.low
        if mode is FilterConstraintRangeMode.LESS_OR_EQUAL:
            return value <= self.high
        if mode is FilterConstraintRangeMode.GREATER_OR_EQUAL:
            return value >= self.low
        return self.low <= value <= self.high

    def _match_string(self, value: str) -> bool:
        value = normalize_word(value)
        for s in self.strings:
            s = normalize_word(s.strip())
            if not s:
                continue
            if self.string_mode is StringFilterMode.EXACT and value == s:
                return True
            if self.string_mode is StringFilterMode.SUBSTRING and s in value:
                return True
            if self.string_mode is StringFilterMode.STARTSWITH and value.startswith(s):
                return True
        return False

    def _match_positive(self, d: Dive) -> bool:
        ctype = self.type
        if ctype is FilterConstraintType.PLANNED:
            return d.is_planned()
        if ctype is FilterConstraintType.LOGGED:
            return d.is_logged()
        if ctype is FilterConstraintType.DAY_OF_WEEK:
            return _utc(d.when).weekday() in self.choices
        if ctype is FilterConstraintType.DIVE_MODE:
            return int(d.dc.divemode) in self.choices
        if ctype in STRING_TYPES:
            if not any(s.strip() for s in self.strings):
                return True
            return any(self._match_string(v) for v in _string_values(ctype, d))
        return any(self._match_range(v) for v in _numeric_values(ctype, d))

    def matches(self, d: Optional[Dive]) -> bool:
        if d is None:
            return False
        return self._match_positive(d) != self.negate


def filter_constraint_match_dive(c: FilterConstraint, d: Dive) -> bool:
    return c.matches(d)

"""
Statistics binning and aggregation engine.

A ``StatsType`` describes one variable of a dive (date, max. depth,
duration, SAC, dive mode, buddies, suit, dive site).  Each type offers
one or more ``StatsBinner``s that split a list of dives into bins
along that variable, and numeric types can reduce a list of dives to
a median, average, time-weighted average, sum or quartile summary.

Absence of data never raises: the extractors return an invalid value
(``None``, NaN, ``INVALID_INT`` or ``""``) and such dives are skipped.
All bin lists are sorted ascending by bin value.
"""

import bisect
import calendar
import datetime
import math
import warnings
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from .dive import Dive, DiveMode, DiveSite
from .i18n import translate
from .units import (
    UnitSystem, METRIC, get_depth_unit, get_volume_unit, mm_to_feet, ml_to_cuft,
)

INVALID_INT = 2 ** 31 - 1


def _tr(text: str) -> str:
    return translate(text, "stats")


def is_invalid_value(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, int):
        return value == INVALID_INT
    return False


# ── Operations ───────────────────────────────────────────────────────────

class StatsOperation(IntEnum):
    MEDIAN = 0
    AVERAGE = 1
    TIME_WEIGHTED_AVERAGE = 2
    SUM = 3


# Order must follow StatsOperation
_OPERATION_NAMES = ("Median", "Average", "Time-weighted Avg.", "Sum")


@dataclass(frozen=True)
class StatsQuartiles:
    min: float
    q1: float
    q2: float
    q3: float
    max: float


def quartiles(vec: Sequence[float]) -> StatsQuartiles:
    """Five-number summary of an ascending sequence.

    Quartiles are interpolated linearly between the two values that
    straddle each quarter of the sample.
    """
    v = np.asarray(vec, dtype=float)
    s = len(v)
    if s == 0:
        return StatsQuartiles(0.0, 0.0, 0.0, 0.0, 0.0)

    def lower(i):
        return (3.0 * v[i] + v[i + 1]) / 4.0

    def mid(i):
        return (v[i] + v[i + 1]) / 2.0

    def upper(i):
        return (v[i] + 3.0 * v[i + 1]) / 4.0

    rem = s % 4
    if rem == 0:
        q = (upper(s // 4 - 1), mid(s // 2 - 1), lower(s - s // 4 - 1))
    elif rem == 1:
        q = (v[s // 4], v[s // 2], v[s - s // 4 - 1])
    elif rem == 2:
        q = (lower(s // 4), mid(s // 2 - 1), upper(s - s // 4 - 2))
    else:
        q = (mid(s // 4), v[s // 2], mid(s - s // 4 - 2))
    return StatsQuartiles(float(v[0]), float(q[0]), float(q[1]), float(q[2]), float(v[-1]))


# ── Bins ─────────────────────────────────────────────────────────────────

class StatsBin:
    """A bin value.  Bins only compare with bins of the same kind."""

    def __init__(self, value):
        self.value = value

    def _key(self):
        return self.value

    def _comparable(self, other) -> bool:
        if type(other) is type(self):
            return True
        warnings.warn(f"Comparing bins of different kinds: {type(self).__name__} "
                      f"and {type(other).__name__}", stacklevel=3)
        return False

    def __eq__(self, other) -> bool:
        if not isinstance(other, StatsBin):
            return NotImplemented
        return self._comparable(other) and self._key() == other._key()

    def __lt__(self, other) -> bool:
        if not isinstance(other, StatsBin):
            return NotImplemented
        return self._comparable(other) and self._key() < other._key()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._key()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class IntBin(StatsBin):
    pass


class PairBin(StatsBin):
    """(year, quarter) or (year, month) bin."""


class StringBin(StatsBin):
    pass


class DiveSiteBin(StatsBin):
    def _key(self):
        return (self.value.uuid, id(self.value))


@dataclass
class StatsBinDives:
    bin: StatsBin
    dives: List[Dive]


@dataclass
class StatsBinCount:
    bin: StatsBin
    count: int


# ── Binners ──────────────────────────────────────────────────────────────

class StatsBinner:
    """Splits dives into bins along one variable."""

    def name(self) -> str:
        return "N/A"

    def unit_symbol(self) -> str:
        return ""

    def format(self, bin: StatsBin) -> str:
        raise NotImplementedError

    def format_lower_bound(self, bin: StatsBin) -> str:
        return "N/A"

    def format_upper_bound(self, bin: StatsBin) -> str:
        return "N/A"

    def lower_bound_to_float(self, bin: StatsBin) -> float:
        return 0.0

    def upper_bound_to_float(self, bin: StatsBin) -> float:
        return 0.0

    def bins_between(self, bin1: StatsBin, bin2: StatsBin) -> List[StatsBin]:
        """Discrete binners have nothing between two bins."""
        return []

    def bin_dives(self, dives, fill_empty: bool = False) -> List[StatsBinDives]:
        raise NotImplementedError

    def count_dives(self, dives, fill_empty: bool = False) -> List[StatsBinCount]:
        raise NotImplementedError


def _add_to_value_bins(keys: list, entries: list, key, value, d: Dive) -> None:
    """Insert *d* under *value*, keeping *keys*/*entries* sorted by *key*."""
    i = bisect.bisect_left(keys, key)
    if i < len(keys) and keys[i] == key:
        entries[i][1].append(d)
    else:
        keys.insert(i, key)
        entries.insert(i, (value, [d]))


class SimpleBinner(StatsBinner):
    """Binner where each dive yields at most one bin value.

    Subclasses provide ``to_bin_value(dive)``; ``bin_class`` wraps the
    value into a bin.
    """
    bin_class = IntBin

    def to_bin_value(self, d: Dive):
        raise NotImplementedError

    def sort_key(self, value):
        return value

    def dive_values(self, d: Dive) -> list:
        return [self.to_bin_value(d)]

    def _value_bins(self, dives) -> List[Tuple[Any, List[Dive]]]:
        keys: list = []
        entries: list = []
        for d in dives:
            for value in self.dive_values(d):
                if is_invalid_value(value):
                    continue
                _add_to_value_bins(keys, entries, self.sort_key(value), value, d)
        return entries

    def bin_dives(self, dives, fill_empty: bool = False) -> List[StatsBinDives]:
        res: List[StatsBinDives] = []
        for value, bin_dives in self._value_bins(dives):
            b = self.bin_class(value)
            if fill_empty and res:
                res.extend(StatsBinDives(e, []) for e in self.bins_between(res[-1].bin, b))
            res.append(StatsBinDives(b, bin_dives))
        return res

    def count_dives(self, dives, fill_empty: bool = False) -> List[StatsBinCount]:
        res: List[StatsBinCount] = []
        for value, bin_dives in self._value_bins(dives):
            b = self.bin_class(value)
            if fill_empty and res:
                res.extend(StatsBinCount(e, 0) for e in self.bins_between(res[-1].bin, b))
            res.append(StatsBinCount(b, len(bin_dives)))
        return res


class ContinuousBinner(SimpleBinner):
    """Binner over an ordered axis where ``inc`` gives the next bin value."""

    def inc(self, value):
        raise NotImplementedError

    def lower_bound_to_float_base(self, value) -> float:
        raise NotImplementedError

    def bins_between(self, bin1: StatsBin, bin2: StatsBin) -> List[StatsBin]:
        res = []
        act = self.inc(bin1.value)
        while act < bin2.value:
            res.append(self.bin_class(act))
            act = self.inc(act)
        return res

    def format_lower_bound(self, bin: StatsBin) -> str:
        return self.format(bin)

    def format_upper_bound(self, bin: StatsBin) -> str:
        return self.format_lower_bound(self.bin_class(self.inc(bin.value)))

    def lower_bound_to_float(self, bin: StatsBin) -> float:
        return self.lower_bound_to_float_base(bin.value)

    def upper_bound_to_float(self, bin: StatsBin) -> float:
        return self.lower_bound_to_float_base(self.inc(bin.value))


class IntBinner(ContinuousBinner):
    def inc(self, value: int) -> int:
        return value + 1


class IntRangeBinner(IntBinner):
    """Integer bins, each covering ``bin_size`` units."""

    def __init__(self, bin_size: int):
        self.bin_size = bin_size

    def format(self, bin: StatsBin) -> str:
        return _tr("{}–{}").format(bin.value * self.bin_size, (bin.value + 1) * self.bin_size)

    def format_lower_bound(self, bin: StatsBin) -> str:
        return str(bin.value * self.bin_size)

    def lower_bound_to_float_base(self, value: int) -> float:
        return float(value * self.bin_size)


# ── Date: year, quarter, month ───────────────────────────────────────────

def _utc(when: int) -> datetime.datetime:
    return datetime.datetime.fromtimestamp(when, tz=datetime.timezone.utc)


def date_to_double(year: int, month: int, day: int = 1) -> float:
    """Days since 1970 of the given date (month 0-based)."""
    return calendar.timegm((year, month + 1, max(day, 1), 0, 0, 0)) / 86400.0


class DateYearBinner(IntBinner):
    def name(self) -> str:
        return _tr("Yearly")

    def format(self, bin: StatsBin) -> str:
        return str(bin.value)

    def to_bin_value(self, d: Dive) -> int:
        return _utc(d.when).year

    def lower_bound_to_float_base(self, year: int) -> float:
        return date_to_double(year, 0)


class DateQuarterBinner(ContinuousBinner):
    bin_class = PairBin

    def name(self) -> str:
        return _tr("Quarterly")

    def format(self, bin: StatsBin) -> str:
        year, quarter = bin.value
        return _tr("{} Q{}").format(year, quarter)

    def format_lower_bound(self, bin: StatsBin) -> str:
        year, quarter = bin.value
        return str(year) if quarter == 1 else _tr("Q{}").format(quarter)

    def to_bin_value(self, d: Dive) -> Tuple[int, int]:
        t = _utc(d.when)
        return (t.year, (t.month - 1) // 3 + 1)

    def inc(self, value: Tuple[int, int]) -> Tuple[int, int]:
        year, quarter = value
        if quarter >= 4:
            return (year + 1, 1)
        return (year, quarter + 1)

    def lower_bound_to_float_base(self, value: Tuple[int, int]) -> float:
        return date_to_double(value[0], (value[1] - 1) * 3)


class DateMonthBinner(ContinuousBinner):
    """Bins of (year, month) with a 0-based month."""
    bin_class = PairBin

    def name(self) -> str:
        return _tr("Monthly")

    def format(self, bin: StatsBin) -> str:
        year, month = bin.value
        return _tr("{} {}").format(calendar.month_abbr[month + 1], year)

    def to_bin_value(self, d: Dive) -> Tuple[int, int]:
        t = _utc(d.when)
        return (t.year, t.month - 1)

    def inc(self, value: Tuple[int, int]) -> Tuple[int, int]:
        year, month = value
        if month >= 11:
            return (year + 1, 0)
        return (year, month + 1)

    def lower_bound_to_float_base(self, value: Tuple[int, int]) -> float:
        return date_to_double(value[0], value[1])


# ── Depth, duration, SAC ─────────────────────────────────────────────────

class MeterBinner(IntRangeBinner):
    def name(self) -> str:
        return _tr("in {} {} steps").format(self.bin_size, get_depth_unit(METRIC))

    def unit_symbol(self) -> str:
        return get_depth_unit(METRIC)

    def to_bin_value(self, d: Dive) -> int:
        return d.maxdepth // 1000 // self.bin_size


class FeetBinner(IntRangeBinner):
    def __init__(self, bin_size: int, units: UnitSystem):
        super().__init__(bin_size)
        self.units = units

    def name(self) -> str:
        return _tr("in {} {} steps").format(self.bin_size, get_depth_unit(self.units))

    def unit_symbol(self) -> str:
        return get_depth_unit(self.units)

    def to_bin_value(self, d: Dive) -> int:
        return int(round(mm_to_feet(d.maxdepth))) // self.bin_size


class MinuteBinner(IntRangeBinner):
    def name(self) -> str:
        return _tr("in {} min steps").format(self.bin_size)

    def unit_symbol(self) -> str:
        return _tr("min")

    def to_bin_value(self, d: Dive) -> int:
        return d.duration // 60 // self.bin_size


class HourBinner(IntBinner):
    def name(self) -> str:
        return _tr("in hours")

    def format(self, bin: StatsBin) -> str:
        return str(bin.value)

    def unit_symbol(self) -> str:
        return _tr("h")

    def to_bin_value(self, d: Dive) -> int:
        return d.duration // 3600

    def lower_bound_to_float_base(self, hour: int) -> float:
        return float(hour)


class MetricSACBinner(IntRangeBinner):
    def name(self) -> str:
        return _tr("in {} {}/min steps").format(self.bin_size, get_volume_unit(METRIC))

    def unit_symbol(self) -> str:
        return get_volume_unit(METRIC) + _tr("/min")

    def to_bin_value(self, d: Dive) -> int:
        if d.sac <= 0:
            return INVALID_INT
        return d.sac // 1000 // self.bin_size


class ImperialSACBinner(IntBinner):
    """SAC bins in cuft/min; sizes are kept as cuft×100 integers."""

    def __init__(self, size: float, units: UnitSystem):
        self.bin_size = int(round(size * 100.0))
        self.units = units

    def name(self) -> str:
        return _tr("in {:.2f} {}/min steps").format(self.bin_size / 100.0, get_volume_unit(self.units))

    def format(self, bin: StatsBin) -> str:
        return _tr("{}–{}").format(f"{bin.value * self.bin_size / 100.0:.2f}",
                                   f"{(bin.value + 1) * self.bin_size / 100.0:.2f}")

    def unit_symbol(self) -> str:
        return get_volume_unit(self.units) + _tr("/min")

    def format_lower_bound(self, bin: StatsBin) -> str:
        return f"{bin.value * self.bin_size / 100.0:.2f}"

    def lower_bound_to_float_base(self, value: int) -> float:
        return value * self.bin_size / 100.0

    def to_bin_value(self, d: Dive) -> int:
        if d.sac <= 0:
            return INVALID_INT
        return int(round(ml_to_cuft(d.sac) * 100.0)) // self.bin_size


# ── Categorical binners ──────────────────────────────────────────────────

class DiveModeBinner(SimpleBinner):
    def format(self, bin: StatsBin) -> str:
        return DiveMode(bin.value).text_ui

    def to_bin_value(self, d: Dive) -> int:
        mode = int(d.dc.divemode)
        return mode if mode in {m.value for m in DiveMode} else int(DiveMode.OC)


class StringBinner(SimpleBinner):
    """A dive may land in several string bins; empty strings are skipped."""
    bin_class = StringBin

    def to_string_list(self, d: Dive) -> List[str]:
        raise NotImplementedError

    def dive_values(self, d: Dive) -> list:
        return self.to_string_list(d)

    def format(self, bin: StatsBin) -> str:
        return bin.value

    def bin_dives(self, dives, fill_empty: bool = False) -> List[StatsBinDives]:
        return super().bin_dives(dives, False)

    def count_dives(self, dives, fill_empty: bool = False) -> List[StatsBinCount]:
        return super().count_dives(dives, False)


class BuddyBinner(StringBinner):
    def to_string_list(self, d: Dive) -> List[str]:
        people = [s.strip() for s in d.buddy.split(",") if s]
        people.extend(s.strip() for s in d.divemaster.split(",") if s)
        return people


class SuitBinner(StringBinner):
    def to_string_list(self, d: Dive) -> List[str]:
        return [d.suit]


class LocationBinner(SimpleBinner):
    bin_class = DiveSiteBin

    def format(self, bin: StatsBin) -> str:
        site: Optional[DiveSite] = bin.value
        return site.name if site is not None else "-"

    def to_bin_value(self, d: Dive) -> Optional[DiveSite]:
        return d.dive_site

    def sort_key(self, value: DiveSite):
        return (value.uuid, id(value))


# ── Types ────────────────────────────────────────────────────────────────

class StatsType:
    """One variable of a dive, with its binners and reductions."""

    class Type(Enum):
        DISCRETE = "discrete"
        NUMERIC = "numeric"

    type = Type.DISCRETE

    def __init__(self, units: UnitSystem = METRIC):
        self.units = units

    def name(self) -> str:
        raise NotImplementedError

    def unit_symbol(self) -> str:
        return ""

    def decimals(self) -> int:
        return 0

    def binners(self) -> List[StatsBinner]:
        return []

    def to_float(self, d: Dive) -> float:
        return float("nan")

    def supported_operations(self) -> List[StatsOperation]:
        return []

    # ── Presentation ─────────────────────────────────────────────────

    def name_with_unit(self) -> str:
        symb = self.unit_symbol()
        return f"{self.name()} [{symb}]" if symb else self.name()

    def name_with_binner_unit(self, binner: StatsBinner) -> str:
        symb = binner.unit_symbol()
        return f"{self.name()} [{symb}]" if symb else self.name()

    def get_binner(self, idx: int) -> Optional[StatsBinner]:
        """Binner *idx*, falling back to the first one for bad indices."""
        b = self.binners()
        if not b:
            return None
        return b[idx] if 0 <= idx < len(b) else b[0]

    def supported_operation_names(self) -> List[str]:
        return [self.operation_name(op) for op in self.supported_operations()]

    def idx_to_operation(self, idx: int) -> StatsOperation:
        ops = self.supported_operations()
        if not ops:
            warnings.warn(f"Stats type {self.name()} does not support operations", stacklevel=2)
            return StatsOperation.MEDIAN
        return ops[idx] if 0 <= idx < len(ops) else ops[0]

    @staticmethod
    def operation_name(op) -> str:
        idx = int(op)
        if 0 <= idx < len(_OPERATION_NAMES):
            return _tr(_OPERATION_NAMES[idx])
        return ""

    # ── Reductions ───────────────────────────────────────────────────

    def _valid(self, dives) -> Tuple[np.ndarray, List[Dive]]:
        vals, kept = [], []
        for d in dives:
            v = self.to_float(d)
            if is_invalid_value(v):
                continue
            vals.append(v)
            kept.append(d)
        return np.array(vals, dtype=float), kept

    def values(self, dives) -> np.ndarray:
        """Valid values of *dives*, sorted ascending."""
        return np.sort(self._valid(dives)[0])

    def average(self, dives) -> float:
        vals, _ = self._valid(dives)
        return float(np.mean(vals)) if vals.size else 0.0

    def average_time_weighted(self, dives) -> float:
        vals, kept = self._valid(dives)
        weights = np.array([d.duration for d in kept], dtype=float)
        if not vals.size or weights.sum() <= 0.0:
            return 0.0
        return float(np.average(vals, weights=weights))

    def sum(self, dives) -> float:
        return float(np.sum(self._valid(dives)[0]))

    def quartiles(self, dives) -> StatsQuartiles:
        return quartiles(self.values(dives))

    def apply_operation(self, dives, op: StatsOperation) -> float:
        if op not in self.supported_operations():
            warnings.warn(f"Stats type {self.name()} does not support operation "
                          f"{self.operation_name(op) or op!r}", stacklevel=2)
            return 0.0
        if op == StatsOperation.MEDIAN:
            return self.quartiles(dives).q2
        if op == StatsOperation.AVERAGE:
            return self.average(dives)
        if op == StatsOperation.TIME_WEIGHTED_AVERAGE:
            return self.average_time_weighted(dives)
        return self.sum(dives)

    def scatter(self, t2: "StatsType", dives) -> List[Tuple[float, float]]:
        """(self, t2) value pairs of dives where both are valid, sorted by x."""
        xs, ys = [], []
        for d in dives:
            v1 = self.to_float(d)
            v2 = t2.to_float(d)
            if is_invalid_value(v1) or is_invalid_value(v2):
                continue
            xs.append(v1)
            ys.append(v2)
        order = np.lexsort((np.array(ys, dtype=float), np.array(xs, dtype=float)))
        return [(float(xs[i]), float(ys[i])) for i in order]


class DateType(StatsType):
    def __init__(self, units: UnitSystem = METRIC):
        super().__init__(units)
        self._binners = [DateYearBinner(), DateQuarterBinner(), DateMonthBinner()]

    def name(self) -> str:
        return _tr("Date")

    def binners(self) -> List[StatsBinner]:
        return self._binners


class DepthType(StatsType):
    type = StatsType.Type.NUMERIC

    def __init__(self, units: UnitSystem = METRIC):
        super().__init__(units)
        if units.is_metric_length:
            self._binners = [MeterBinner(5), MeterBinner(10), MeterBinner(20)]
        else:
            self._binners = [FeetBinner(15, units), FeetBinner(30, units), FeetBinner(60, units)]

    def name(self) -> str:
        return _tr("Max. Depth")

    def unit_symbol(self) -> str:
        return get_depth_unit(self.units)

    def decimals(self) -> int:
        return 1

    def binners(self) -> List[StatsBinner]:
        return self._binners

    def to_float(self, d: Dive) -> float:
        if self.units.is_metric_length:
            return d.maxdepth / 1000.0
        return mm_to_feet(d.maxdepth)

    def supported_operations(self) -> List[StatsOperation]:
        return [StatsOperation.MEDIAN, StatsOperation.AVERAGE, StatsOperation.SUM]


class DurationType(StatsType):
    type = StatsType.Type.NUMERIC

    def __init__(self, units: UnitSystem = METRIC):
        super().__init__(units)
        self._binners = [MinuteBinner(5), MinuteBinner(10), MinuteBinner(30), HourBinner()]

    def name(self) -> str:
        return _tr("Duration")

    def unit_symbol(self) -> str:
        return _tr("min")

    def binners(self) -> List[StatsBinner]:
        return self._binners

    def to_float(self, d: Dive) -> float:
        return d.duration / 60.0

    def supported_operations(self) -> List[StatsOperation]:
        return [StatsOperation.MEDIAN, StatsOperation.AVERAGE, StatsOperation.SUM]


class SACType(StatsType):
    type = StatsType.Type.NUMERIC

    def __init__(self, units: UnitSystem = METRIC):
        super().__init__(units)
        if units.is_metric_volume:
            self._binners = [MetricSACBinner(2), MetricSACBinner(5), MetricSACBinner(10)]
        else:
            self._binners = [ImperialSACBinner(size, units) for size in (0.1, 0.2, 0.4, 0.8)]

    def name(self) -> str:
        return _tr("SAC")

    def unit_symbol(self) -> str:
        return get_volume_unit(self.units) + _tr("/min")

    def decimals(self) -> int:
        return 0 if self.units.is_metric_volume else 2

    def binners(self) -> List[StatsBinner]:
        return self._binners

    def to_float(self, d: Dive) -> float:
        if d.sac <= 0:
            return float("nan")
        if self.units.is_metric_volume:
            return d.sac / 1000.0
        return ml_to_cuft(d.sac)

    def supported_operations(self) -> List[StatsOperation]:
        return [StatsOperation.MEDIAN, StatsOperation.AVERAGE,
                StatsOperation.TIME_WEIGHTED_AVERAGE]


class DiveModeType(StatsType):
    def __init__(self, units: UnitSystem = METRIC):
        super().__init__(units)
        self._binners = [DiveModeBinner()]

    def name(self) -> str:
        return _tr("Dive mode")

    def binners(self) -> List[StatsBinner]:
        return self._binners


class BuddyType(StatsType):
    def __init__(self, units: UnitSystem = METRIC):
        super().__init__(units)
        self._binners = [BuddyBinner()]

    def name(self) -> str:
        return _tr("Buddies")

    def binners(self) -> List[StatsBinner]:
        return self._binners


class SuitType(StatsType):
    def __init__(self, units: UnitSystem = METRIC):
        super().__init__(units)
        self._binners = [SuitBinner()]

    def name(self) -> str:
        return _tr("Suit type")

    def binners(self) -> List[StatsBinner]:
        return self._binners


class LocationType(StatsType):
    def __init__(self, units: UnitSystem = METRIC):
        super().__init__(units)
        self._binners = [LocationBinner()]

    def name(self) -> str:
        return _tr("Dive site")

    def binners(self) -> List[StatsBinner]:
        return self._binners


# ── Registries ───────────────────────────────────────────────────────────

def stats_types(units: UnitSystem = METRIC) -> List[StatsType]:
    return [DateType(units), DepthType(units), DurationType(units), SACType(units),
            DiveModeType(units), BuddyType(units), SuitType(units), LocationType(units)]


def stats_continuous_types(units: UnitSystem = METRIC) -> List[StatsType]:
    return [DateType(units), DepthType(units), DurationType(units), SACType(units)]


def stats_numeric_types(units: UnitSystem = METRIC) -> List[StatsType]:
    return [DepthType(units), DurationType(units), SACType(units)]

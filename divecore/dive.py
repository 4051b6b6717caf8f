"""
Dive data model for Divecore.

A ``DiveTable`` owns every ``Dive``; dives own their cylinders and
their dive-computer record and refer weakly to a shared ``DiveSite``.
Unlike the rest of the model these objects are mutable: the filter
flips ``hidden_by_filter``/``selected`` and the plan renderer writes
``notes``, ``cns`` and ``otu``.

Quantities are stored as fixed-point integers (mm, mbar, mℓ, mK,
seconds); ``0`` usually means "not recorded".
"""

import bisect
import warnings
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Tuple

from .constants import SURFACE_PRESSURE, PLANNED_DIVE_MODEL, MANUAL_DIVE_MODEL
from .gas import (
    GasMix, AIR, fill_pressures, gas_volume,
    depth_to_mbar as _depth_to_mbar, depth_to_atm as _depth_to_atm,
)
from .i18n import translate


# ── Enumerations ─────────────────────────────────────────────────────────

class DiveMode(IntEnum):
    OC = 0
    CCR = 1
    PSCR = 2
    FREEDIVE = 3

    @property
    def text_ui(self) -> str:
        return translate(_DIVEMODE_TEXT_UI[self], "divemode")


_DIVEMODE_TEXT_UI = ("Open circuit", "CCR", "pSCR", "Freedive")


class CylinderUse(IntEnum):
    OC_GAS = 0
    DILUENT = 1
    OXYGEN = 2
    NOT_USED = 3


# ── Cylinders, samples, events ───────────────────────────────────────────

@dataclass
class CylinderType:
    description: str = ""
    size: int = 0               # mℓ water capacity
    workingpressure: int = 0    # mbar


@dataclass
class Cylinder:
    """One gas source of a dive.

    Parameters
    ----------
    type : CylinderType
        Description and water capacity.
    gasmix : GasMix
        Breathing gas in the cylinder.
    start, end : int
        Start and end pressure in mbar (``0`` if unknown).
    cylinder_use : CylinderUse
        Role of the cylinder (OC gas, diluent, oxygen …).
    gas_used : int
        Gas taken from the cylinder during the dive, mℓ at 1 bar.
    deco_gas_used : int
        Part of ``gas_used`` needed for the planned ascent.
    """
    type: CylinderType = field(default_factory=CylinderType)
    gasmix: GasMix = AIR
    start: int = 0
    end: int = 0
    cylinder_use: CylinderUse = CylinderUse.OC_GAS
    gas_used: int = 0
    deco_gas_used: int = 0

    def is_empty(self) -> bool:
        """True if nothing at all is known about this cylinder."""
        return (not self.type.description and not self.type.size
                and not self.type.workingpressure
                and self.gasmix.o2 == 0 and self.gasmix.he == 0
                and not self.start and not self.end)

    def used_volume(self) -> int:
        """Gas used in mℓ; derived from the pressure drop when not booked."""
        if self.gas_used:
            return self.gas_used
        if not self.type.size or not self.start or not self.end:
            return 0
        return int(round(gas_volume(self.gasmix, self.type.size, self.start)
                         - gas_volume(self.gasmix, self.type.size, self.end)))


@dataclass
class Sample:
    time: int = 0           # s since dive start
    depth: int = 0          # mm
    cylinder: int = 0       # index into Dive.cylinders
    setpoint: int = 0       # mbar, 0 on open circuit


@dataclass
class Event:
    time: int = 0
    name: str = ""
    value: int = 0
    cylinder: int = -1      # gas-change target, -1 if none


@dataclass
class DiveComputer:
    model: str = ""
    divemode: DiveMode = DiveMode.OC
    samples: List[Sample] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    duration: int = 0
    maxdepth: int = 0
    meandepth: int = 0
    salinity: int = 0           # g/10ℓ as reported by the computer
    surface_pressure: int = 0   # mbar


@dataclass(eq=False)
class DiveSite:
    """A named location, shared by reference between dives."""
    uuid: int = 0
    name: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    description: str = ""

    def __lt__(self, other: "DiveSite") -> bool:
        return self.uuid < other.uuid


# ── Dive ─────────────────────────────────────────────────────────────────

@dataclass(eq=False)
class Dive:
    """A logged or planned dive.

    Dives compare by identity; ``id`` is a stable handle for callers
    that need one.  ``hidden_by_filter`` implies ``not selected``, which
    the filter engine maintains.
    """
    id: int = 0
    when: int = 0               # s since epoch, UTC
    duration: int = 0           # s
    maxdepth: int = 0           # mm
    meandepth: int = 0          # mm
    watertemp: int = 0          # mK
    airtemp: int = 0            # mK
    surface_pressure: int = 0   # mbar
    user_salinity: int = 0      # g/10ℓ
    rating: int = 0
    visibility: int = 0
    wavesize: int = 0
    current: int = 0
    surge: int = 0
    chill: int = 0
    buddy: str = ""
    divemaster: str = ""
    suit: str = ""
    cylinders: List[Cylinder] = field(default_factory=list)
    dc: DiveComputer = field(default_factory=DiveComputer)
    dive_site: Optional[DiveSite] = None
    tags: List[str] = field(default_factory=list)
    notes: str = ""
    invalid: bool = False
    hidden_by_filter: bool = False
    selected: bool = False
    cns: int = 0                # percent
    maxcns: int = 0
    otu: int = 0
    sac: int = 0                # mℓ/min

    @property
    def endtime(self) -> int:
        return self.when + self.duration

    def get_salinity(self) -> int:
        return self.user_salinity or self.dc.salinity

    def get_surface_pressure(self) -> int:
        return self.surface_pressure or self.dc.surface_pressure or SURFACE_PRESSURE

    def depth_to_mbar(self, depth_mm: int) -> float:
        return _depth_to_mbar(depth_mm, self.get_surface_pressure(), self.get_salinity())

    def depth_to_bar(self, depth_mm: int) -> float:
        return self.depth_to_mbar(depth_mm) / 1000.0

    def depth_to_atm(self, depth_mm: int) -> float:
        return _depth_to_atm(depth_mm, self.get_surface_pressure(), self.get_salinity())

    def get_cylinder(self, idx: int) -> Optional[Cylinder]:
        """Cylinder *idx*, or ``None`` (with a warning) when out of range."""
        if 0 <= idx < len(self.cylinders):
            return self.cylinders[idx]
        warnings.warn(f"Dive {self.id}: cylinder index {idx} out of range "
                      f"({len(self.cylinders)} cylinders)", stacklevel=2)
        return None

    def get_gasmix(self, idx: int) -> GasMix:
        cyl = self.get_cylinder(idx)
        return cyl.gasmix if cyl is not None else AIR

    def is_planned(self) -> bool:
        return self.dc.model == PLANNED_DIVE_MODEL

    def is_logged(self) -> bool:
        return self.dc.model not in (PLANNED_DIVE_MODEL, MANUAL_DIVE_MODEL)


# ── Dive table ───────────────────────────────────────────────────────────

class DiveTable:
    """All dives, kept sorted by start time, plus the current-dive pointer.

    Dives are located by their ``(when, id)`` sort key, so a dive whose
    start time changes has to be removed and added again.
    """

    def __init__(self, dives=None):
        self.dives: List[Dive] = []
        self._keys: List[Tuple[int, int]] = []
        self.current_dive: Optional[Dive] = None
        for d in dives or []:
            self.add_dive(d)

    def __len__(self) -> int:
        return len(self.dives)

    def __iter__(self):
        return iter(self.dives)

    def __getitem__(self, idx: int) -> Dive:
        return self.dives[idx]

    def __contains__(self, d) -> bool:
        return self._find(d) is not None

    def _find(self, d: Dive) -> Optional[int]:
        key = (d.when, d.id)
        i = bisect.bisect_left(self._keys, key)
        while i < len(self._keys) and self._keys[i] == key:
            if self.dives[i] is d:
                return i
            i += 1
        return None

    def index(self, d: Dive) -> int:
        idx = self._find(d)
        if idx is None:
            raise ValueError(f"Dive {d.id} is not in the dive table")
        return idx

    def add_dive(self, d: Dive) -> None:
        key = (d.when, d.id)
        idx = bisect.bisect_right(self._keys, key)
        self._keys.insert(idx, key)
        self.dives.insert(idx, d)

    def remove_dive(self, d: Dive) -> None:
        idx = self.index(d)
        if d.selected:
            self.deselect_dive(d)
        del self.dives[idx]
        del self._keys[idx]
        if self.current_dive is d:
            self.current_dive = None

    def get_dive_by_id(self, dive_id: int) -> Optional[Dive]:
        for d in self.dives:
            if d.id == dive_id:
                return d
        return None

    @property
    def amount_selected(self) -> int:
        return sum(1 for d in self.dives if d.selected)

    def select_dive(self, d: Dive) -> None:
        if d is None:
            return
        d.selected = True
        self.current_dive = d

    def deselect_dive(self, d: Dive) -> None:
        """Deselect *d*; if it was current, move to the nearest selected dive."""
        if d is None or not d.selected:
            return
        d.selected = False
        if self.current_dive is not d:
            return
        self.current_dive = None
        idx = self._find(d)
        if idx is None:
            return
        for i in range(idx - 1, -1, -1):
            if self.dives[i].selected:
                self.current_dive = self.dives[i]
                return
        for i in range(idx + 1, len(self.dives)):
            if self.dives[i].selected:
                self.current_dive = self.dives[i]
                return


def get_surface_interval(table: DiveTable, when: int) -> Optional[int]:
    """Seconds between the end of the previous dive and *when*.

    ``None`` if no dive starts before *when*; negative if the previous
    dive is still running at *when*.
    """
    previous = None
    for d in table:
        if d.when >= when:
            break
        previous = d
    if previous is None:
        return None
    return when - previous.endtime


# ── Oxygen toxicity and gas use ──────────────────────────────────────────

# NOAA single-exposure limits: pO₂ in mbar → minutes
CNS_TABLE = (
    (600, 720), (700, 570), (800, 450), (900, 360), (1000, 300),
    (1100, 240), (1200, 210), (1250, 195), (1300, 180), (1350, 165),
    (1400, 150), (1450, 135), (1500, 120), (1550, 83), (1600, 45),
)


def _cns_limit_minutes(po2_mbar: float) -> int:
    for threshold, minutes in CNS_TABLE:
        if po2_mbar <= threshold:
            return minutes
    return CNS_TABLE[-1][1]


def _segment_po2(dive: Dive, s0: Sample, s1: Sample) -> float:
    """Mean pO₂ in mbar over the interval between two samples."""
    mean_depth = (s0.depth + s1.depth) // 2
    amb = dive.depth_to_mbar(mean_depth)
    if dive.dc.divemode == DiveMode.CCR and s1.setpoint:
        return fill_pressures(amb, dive.get_gasmix(s1.cylinder), s1.setpoint).o2
    return fill_pressures(amb, dive.get_gasmix(s1.cylinder)).o2


def calculate_otu(dive: Dive) -> float:
    otu = 0.0
    samples = dive.dc.samples
    for s0, s1 in zip(samples, samples[1:]):
        t = s1.time - s0.time
        if t <= 0:
            continue
        po2 = _segment_po2(dive, s0, s1)
        if po2 > 500:
            otu += t / 60.0 * ((po2 - 500) / 500.0) ** (5.0 / 6.0)
    return otu


def calculate_cns(dive: Dive) -> float:
    cns = 0.0
    samples = dive.dc.samples
    for s0, s1 in zip(samples, samples[1:]):
        t = s1.time - s0.time
        if t <= 0:
            continue
        po2 = _segment_po2(dive, s0, s1)
        if po2 <= 500:
            continue
        cns += t / (_cns_limit_minutes(po2) * 60.0) * 100.0
    return cns


def total_gas_used(dive: Dive) -> int:
    """Open-circuit gas used over all cylinders in mℓ (oxygen cylinders excluded)."""
    return sum(c.used_volume() for c in dive.cylinders
               if c.cylinder_use not in (CylinderUse.OXYGEN, CylinderUse.NOT_USED))


def calculate_sac(dive: Dive) -> int:
    """SAC in mℓ/min, or 0 if gas use, duration or mean depth is missing."""
    airuse = total_gas_used(dive)
    duration = dive.dc.duration or dive.duration
    meandepth = dive.dc.meandepth or dive.meandepth
    if not airuse or not duration or not meandepth:
        return 0
    pressure = dive.depth_to_atm(meandepth)
    return int(round(airuse / pressure * 60 / duration))


def update_cylinder_related_info(dive: Dive) -> None:
    """Recompute SAC, OTU and, unless already known, CNS from the samples."""
    if dive is None:
        return
    dive.sac = calculate_sac(dive)
    dive.otu = int(round(calculate_otu(dive)))
    if dive.maxcns == 0:
        dive.cns = int(round(calculate_cns(dive)))
        dive.maxcns = dive.cns


def is_cylinder_used(dive: Dive, idx: int) -> bool:
    if not 0 <= idx < len(dive.cylinders):
        return False
    cyl = dive.cylinders[idx]
    if cyl.gas_used or (cyl.start and cyl.end and cyl.start > cyl.end):
        return True
    if any(s.cylinder == idx for s in dive.dc.samples):
        return True
    return any(e.name == "gaschange" and e.cylinder == idx for e in dive.dc.events)


def per_cylinder_mean_depth(dive: Dive) -> Tuple[List[int], List[int]]:
    """Time-weighted mean depth (mm) and time breathed (s) per cylinder."""
    n = len(dive.cylinders)
    depthtime = [0] * n
    seconds = [0] * n
    samples = dive.dc.samples
    for s0, s1 in zip(samples, samples[1:]):
        idx = s1.cylinder
        if not 0 <= idx < n:
            continue
        t = s1.time - s0.time
        if t <= 0:
            continue
        depthtime[idx] += t * (s0.depth + s1.depth) // 2
        seconds[idx] += t
    mean = [depthtime[i] // seconds[i] if seconds[i] else 0 for i in range(n)]
    return mean, seconds


def per_cylinder_sac(dive: Dive) -> List[Optional[int]]:
    """SAC in mℓ/min per cylinder; ``None`` where it cannot be computed."""
    mean, seconds = per_cylinder_mean_depth(dive)
    result: List[Optional[int]] = []
    for idx, cyl in enumerate(dive.cylinders):
        used = cyl.used_volume()
        if not used or not seconds[idx] or not mean[idx]:
            result.append(None)
            continue
        atm = dive.depth_to_atm(mean[idx])
        result.append(int(round(used / atm * 60 / seconds[idx])))
    return result

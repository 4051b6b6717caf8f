"""
Dive plans.

A ``Diveplan`` is the ordered list of waypoints the user entered plus
the ones the decompression engine appended.  The engine itself lives
outside this package; ``create_dive_from_plan`` only turns a finished
plan into dive-computer samples and books the gas it consumes.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .constants import (
    SURFACE_PRESSURE, SEAWATER_SALINITY, PLANNED_DIVE_MODEL,
    DEFAULT_BOTTOMSAC, DEFAULT_DECOSAC, DEFAULT_GFLOW, DEFAULT_GFHIGH,
)
from .dive import Dive, Sample
from .gas import gas_volume, isothermal_pressure


@dataclass
class DiveDataPoint:
    """One waypoint of a plan.

    Parameters
    ----------
    time : int
        Seconds since the start of the dive at which *depth* is reached.
    depth : int
        Depth in mm.
    cylinderid : int
        Index into the dive's cylinders.
    setpoint : int
        CCR setpoint in mbar; ``0`` for open circuit.
    entered : bool
        ``True`` for user-authored waypoints, ``False`` for the ones
        produced by the decompression engine.
    minimum_gas : int
        Minimum-gas pressure in mbar, filled in by the plan renderer
        for the last bottom waypoint.
    """
    time: int = 0
    depth: int = 0
    cylinderid: int = 0
    setpoint: int = 0
    entered: bool = False
    minimum_gas: int = 0


@dataclass
class Diveplan:
    when: int = 0
    surface_pressure: int = SURFACE_PRESSURE
    salinity: int = SEAWATER_SALINITY
    bottomsac: int = DEFAULT_BOTTOMSAC      # mℓ/min
    decosac: int = DEFAULT_DECOSAC          # mℓ/min
    gflow: int = DEFAULT_GFLOW
    gfhigh: int = DEFAULT_GFHIGH
    vpmb_conservatism: int = 0
    eff_gflow: int = 0
    eff_gfhigh: int = 0
    surface_interval: Optional[int] = None  # s; None if there is no previous dive
    points: List[DiveDataPoint] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.points


def plan_add_segment(plan: Diveplan, duration: int, depth: int, cylinderid: int,
                     po2: int, entered: bool) -> DiveDataPoint:
    """Append a waypoint *duration* seconds after the current last one."""
    last_time = plan.points[-1].time if plan.points else 0
    dp = DiveDataPoint(time=last_time + duration, depth=depth, cylinderid=cylinderid,
                       setpoint=po2, entered=entered)
    plan.points.append(dp)
    return dp


def diveplan_duration(plan: Diveplan) -> int:
    """Plan runtime in whole minutes, rounded."""
    duration = max((dp.time for dp in plan.points), default=0)
    return (max(duration, 0) + 30) // 60


def create_dive_from_plan(plan: Diveplan, dive: Dive) -> None:
    """Fill *dive* with the samples and gas use described by *plan*."""
    dive.dc.model = PLANNED_DIVE_MODEL
    dive.when = plan.when
    dive.surface_pressure = plan.surface_pressure
    dive.user_salinity = plan.salinity
    for cyl in dive.cylinders:
        cyl.gas_used = 0
        cyl.deco_gas_used = 0

    samples = []
    if not plan.points or plan.points[0].time != 0:
        first_cyl = plan.points[0].cylinderid if plan.points else 0
        samples.append(Sample(time=0, depth=0, cylinder=first_cyl))
    for dp in plan.points:
        samples.append(Sample(time=dp.time, depth=dp.depth,
                              cylinder=dp.cylinderid, setpoint=dp.setpoint))
    dive.dc.samples = samples

    depthtime = 0
    for (prev, dp), s in zip(_legs(samples, plan), samples[1:]):
        t = s.time - prev.time
        if t <= 0:
            continue
        mean_depth = (prev.depth + s.depth) // 2
        depthtime += t * mean_depth
        if s.setpoint:
            continue
        cyl = dive.get_cylinder(s.cylinder)
        if cyl is None:
            continue
        sac = plan.bottomsac if dp is not None and dp.entered else plan.decosac
        volume = int(round(sac * t / 60.0 * dive.depth_to_atm(mean_depth)))
        cyl.gas_used += volume
        if dp is not None and not dp.entered:
            cyl.deco_gas_used += volume

    duration = samples[-1].time
    dive.duration = dive.dc.duration = duration
    dive.maxdepth = dive.dc.maxdepth = max(s.depth for s in samples)
    dive.meandepth = dive.dc.meandepth = depthtime // duration if duration else 0

    for cyl in dive.cylinders:
        if not cyl.type.size or not cyl.start:
            continue
        remaining = gas_volume(cyl.gasmix, cyl.type.size, cyl.start) - cyl.gas_used
        if remaining <= 0:
            cyl.end = 0
        else:
            cyl.end = int(round(isothermal_pressure(cyl.gasmix, 1.0, remaining,
                                                    cyl.type.size) * 1000))


def _legs(samples, plan):
    """Pair every sample with its predecessor and the waypoint it ends at."""
    offset = len(samples) - len(plan.points)
    for i in range(1, len(samples)):
        j = i - offset
        yield samples[i - 1], plan.points[j] if 0 <= j < len(plan.points) else None

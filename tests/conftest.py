"""Shared builders for dive-table based tests."""

import calendar

import pytest

from divecore.dive import Cylinder, CylinderType, Dive, DiveTable
from divecore.gas import GasMix


def utc(year, month, day, hour=0, minute=0):
    return calendar.timegm((year, month, day, hour, minute, 0))


def make_dive(dive_id, when=None, **kwargs) -> Dive:
    """Dive with one air cylinder; *kwargs* override any field."""
    if when is None:
        when = utc(2023, 1, 1) + dive_id * 86400
    kwargs.setdefault('cylinders', [Cylinder(type=CylinderType("12ℓ", 12000, 232000),
                                             gasmix=GasMix(), start=200000, end=50000)])
    kwargs.setdefault('duration', 45 * 60)
    kwargs.setdefault('maxdepth', 18000)
    return Dive(id=dive_id, when=when, **kwargs)


@pytest.fixture
def three_dives():
    return [make_dive(1), make_dive(2), make_dive(3)]


@pytest.fixture
def table(three_dives):
    return DiveTable(three_dives)

"""
Units and quantities for Divecore.

Internal quantities are fixed-point integers: depths in mm, pressures
in mbar, volumes in mℓ, temperatures in mK and durations in seconds.  Floats
only appear at the display boundary, via the ``get_*_units`` helpers
which honour the user's ``UnitSystem``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .i18n import translate


# ── Unit system ──────────────────────────────────────────────────────────

class LengthUnit(Enum):
    METERS = "m"
    FEET = "ft"


class VolumeUnit(Enum):
    LITER = "ℓ"
    CUFT = "cuft"


class PressureUnit(Enum):
    BAR = "bar"
    PSI = "psi"


class TemperatureUnit(Enum):
    CELSIUS = "°C"
    FAHRENHEIT = "°F"


@dataclass(frozen=True)
class UnitSystem:
    """Display units chosen by the user."""
    length: LengthUnit = LengthUnit.METERS
    volume: VolumeUnit = VolumeUnit.LITER
    pressure: PressureUnit = PressureUnit.BAR
    temperature: TemperatureUnit = TemperatureUnit.CELSIUS

    @property
    def is_metric_length(self) -> bool:
        return self.length is LengthUnit.METERS

    @property
    def is_metric_volume(self) -> bool:
        return self.volume is VolumeUnit.LITER


METRIC = UnitSystem()
IMPERIAL = UnitSystem(
    length=LengthUnit.FEET,
    volume=VolumeUnit.CUFT,
    pressure=PressureUnit.PSI,
    temperature=TemperatureUnit.FAHRENHEIT,
)


# ── Raw conversions ──────────────────────────────────────────────────────

MM_PER_FOOT = 304.8
ML_PER_CUFT = 28316.846592
MBAR_PER_PSI = 68.947572932


def mm_to_feet(mm: float) -> float:
    return mm / MM_PER_FOOT


def feet_to_mm(feet: float) -> int:
    return int(round(feet * MM_PER_FOOT))


def ml_to_cuft(ml: float) -> float:
    return ml / ML_PER_CUFT


def cuft_to_ml(cuft: float) -> int:
    return int(round(cuft * ML_PER_CUFT))


def mbar_to_psi(mbar: float) -> float:
    return mbar / MBAR_PER_PSI


def psi_to_mbar(psi: float) -> int:
    return int(round(psi * MBAR_PER_PSI))


def mkelvin_to_celsius(mkelvin: int) -> float:
    return (mkelvin - 273150) / 1000.0


def mkelvin_to_fahrenheit(mkelvin: int) -> float:
    return mkelvin * 9 / 5000.0 - 459.670


def fraction(value: int, base: int) -> Tuple[int, int]:
    """Split *value* into whole units of *base* and the remainder.

    ``fraction(125, 60)`` gives ``(2, 5)``, i.e. "2:05".
    """
    return value // base, value % base


# ── Display conversions ──────────────────────────────────────────────────

def get_depth_unit(units: UnitSystem = METRIC) -> str:
    if units.is_metric_length:
        return translate("m", "units")
    return translate("ft", "units")


def get_volume_unit(units: UnitSystem = METRIC) -> str:
    if units.is_metric_volume:
        return translate("ℓ", "units")
    return translate("cuft", "units")


def get_depth_units(mm: int, units: UnitSystem = METRIC) -> Tuple[float, int, str]:
    """Return ``(value, decimals, unit)`` for a depth in mm.

    Metric depths shallower than 20 m carry one decimal.
    """
    if units.is_metric_length:
        value = mm / 1000.0
        return value, (1 if value < 20 else 0), get_depth_unit(units)
    return mm_to_feet(mm), 0, get_depth_unit(units)


def get_volume_units(ml: int, units: UnitSystem = METRIC) -> Tuple[float, int, str]:
    """Return ``(value, decimals, unit)`` for a volume in mℓ."""
    if units.is_metric_volume:
        return ml / 1000.0, 1, get_volume_unit(units)
    return ml_to_cuft(ml), 2, get_volume_unit(units)


def get_pressure_units(mbar: int, units: UnitSystem = METRIC) -> Tuple[float, str]:
    """Return ``(value, unit)`` for a pressure in mbar."""
    if units.pressure is PressureUnit.BAR:
        return mbar / 1000.0, translate("bar", "units")
    return mbar_to_psi(mbar), translate("psi", "units")


def get_temperature_units(mkelvin: int, units: UnitSystem = METRIC) -> Tuple[float, str]:
    """Return ``(value, unit)`` for a temperature in mK."""
    if units.temperature is TemperatureUnit.CELSIUS:
        return mkelvin_to_celsius(mkelvin), "°C"
    return mkelvin_to_fahrenheit(mkelvin), "°F"

"""
User preferences consulted by the filter, statistics and plan renderer.

Preferences are a plain dataclass passed explicitly to whoever needs
them.  ``to_state``/``from_state`` convert to and from JSON-able dicts;
``save_preferences``/``load_preferences`` persist them on disk.
"""

import datetime
import json
from dataclasses import dataclass, fields
from enum import Enum

from . import APP_NAME, APP_VERSION
from .constants import (
    DEFAULT_BOTTOMSAC, DEFAULT_DECOSAC, DEFAULT_SACFACTOR,
    DEFAULT_PROBLEMSOLVINGTIME, DEFAULT_BOTTOMPO2, DEFAULT_DECOPO2,
    SEAWATER_SALINITY,
)
from .units import (
    UnitSystem, METRIC, LengthUnit, VolumeUnit, PressureUnit, TemperatureUnit,
)


class DecoMode(Enum):
    BUEHLMANN = "BUEHLMANN"
    VPMB = "VPMB"
    RECREATIONAL = "RECREATIONAL"


@dataclass
class Preferences:
    units: UnitSystem = METRIC
    display_invalid_dives: bool = False
    verbatim_plan: bool = False
    display_runtime: bool = True
    display_duration: bool = True
    display_transitions: bool = False
    display_variations: bool = False
    deco_mode: DecoMode = DecoMode.BUEHLMANN
    bottomsac: int = DEFAULT_BOTTOMSAC                  # mℓ/min
    decosac: int = DEFAULT_DECOSAC                      # mℓ/min
    sacfactor: int = DEFAULT_SACFACTOR                  # percent
    problemsolvingtime: int = DEFAULT_PROBLEMSOLVINGTIME  # min
    bottompo2: int = DEFAULT_BOTTOMPO2                  # mbar
    decopo2: int = DEFAULT_DECOPO2                      # mbar
    salinity_edit_default: int = SEAWATER_SALINITY      # g/10ℓ

    def to_state(self) -> dict:
        state = {'version': APP_VERSION}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, UnitSystem):
                value = {
                    'length': value.length.name,
                    'volume': value.volume.name,
                    'pressure': value.pressure.name,
                    'temperature': value.temperature.name,
                }
            elif isinstance(value, Enum):
                value = value.name
            state[f.name] = value
        return state

    @classmethod
    def from_state(cls, state: dict) -> "Preferences":
        """Build preferences from *state*; unknown keys are ignored."""
        prefs = cls()
        for f in fields(cls):
            if f.name not in state:
                continue
            value = state[f.name]
            if f.name == 'units':
                value = _units_from_state(value)
            elif f.name == 'deco_mode':
                value = _enum_from_name(DecoMode, value)
            elif isinstance(getattr(prefs, f.name), bool):
                value = bool(value)
            else:
                value = int(value)
            setattr(prefs, f.name, value)
        return prefs


def _enum_from_name(enum_cls, name):
    try:
        return enum_cls[name]
    except KeyError:
        valid = ", ".join(m.name for m in enum_cls)
        raise ValueError(f"Unknown {enum_cls.__name__} {name!r} (expected one of {valid})") from None


def _units_from_state(state: dict) -> UnitSystem:
    if not isinstance(state, dict):
        raise ValueError(f"Unit system must be an object, got {state!r}")
    return UnitSystem(
        length=_enum_from_name(LengthUnit, state.get('length', 'METERS')),
        volume=_enum_from_name(VolumeUnit, state.get('volume', 'LITER')),
        pressure=_enum_from_name(PressureUnit, state.get('pressure', 'BAR')),
        temperature=_enum_from_name(TemperatureUnit, state.get('temperature', 'CELSIUS')),
    )


def save_preferences(prefs: Preferences, filepath: str) -> None:
    state = {
        'tool': APP_NAME,
        'saved_utc': datetime.datetime.now(datetime.timezone.utc).isoformat(),
        'preferences': prefs.to_state(),
    }
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(state, f, indent=2, ensure_ascii=False)


def load_preferences(filepath: str) -> Preferences:
    """Read preferences written by ``save_preferences``.

    Raises
    ------
    ValueError
        If the file is not valid JSON or holds malformed values.
    """
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            state = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed preferences file {filepath}: {e}") from e
    if not isinstance(state, dict) or not isinstance(state.get('preferences', {}), dict):
        raise ValueError(f"Malformed preferences file {filepath}: expected an object")
    try:
        return Preferences.from_state(state.get('preferences', {}))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Malformed preferences file {filepath}: {e}") from e

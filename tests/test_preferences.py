"""Tests for preference state dicts and their JSON persistence."""

import json

import pytest

from divecore.preferences import (
    DecoMode, Preferences, load_preferences, save_preferences,
)
from divecore.units import IMPERIAL, METRIC


class TestState:

    def test_defaults(self):
        prefs = Preferences()
        assert prefs.units == METRIC
        assert prefs.deco_mode is DecoMode.BUEHLMANN
        assert not prefs.display_invalid_dives

    def test_state_roundtrip(self):
        prefs = Preferences(units=IMPERIAL, deco_mode=DecoMode.VPMB, sacfactor=300,
                            verbatim_plan=True)
        state = prefs.to_state()
        assert state['deco_mode'] == "VPMB"
        assert state['units']['length'] == "FEET"
        assert Preferences.from_state(state) == prefs

    def test_unknown_keys_ignored(self):
        prefs = Preferences.from_state({'bottomsac': 15000, 'colour_scheme': "dark"})
        assert prefs.bottomsac == 15000

    def test_bad_enum_name(self):
        with pytest.raises(ValueError, match="DecoMode"):
            Preferences.from_state({'deco_mode': "RGBM"})

    def test_units_must_be_object(self):
        with pytest.raises(ValueError):
            Preferences.from_state({'units': "metric"})


class TestPersistence:

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "prefs.json"
        prefs = Preferences(display_invalid_dives=True, decopo2=1400)
        save_preferences(prefs, str(path))
        with open(path, encoding='utf-8') as f:
            raw = json.load(f)
        assert raw['tool'] == "Divecore"
        assert load_preferences(str(path)) == prefs

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("{not json", encoding='utf-8')
        with pytest.raises(ValueError, match="Malformed preferences file"):
            load_preferences(str(path))

    def test_non_object(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("[1, 2]", encoding='utf-8')
        with pytest.raises(ValueError, match="Malformed preferences file"):
            load_preferences(str(path))

    def test_bad_value(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text(json.dumps({'preferences': {'bottomsac': "lots"}}), encoding='utf-8')
        with pytest.raises(ValueError, match="Malformed preferences file"):
            load_preferences(str(path))

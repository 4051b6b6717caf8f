"""Tests for the dive-plan notes renderer.

Plans are built with ``plan_add_segment`` and turned into a dive with
``create_dive_from_plan`` so that gas use and end pressures are the
ones the renderer sees in practice.
"""

import pytest

from divecore.dive import Cylinder, CylinderType, Dive, DiveMode
from divecore.diveplan import Diveplan, create_dive_from_plan, plan_add_segment
from divecore.gas import GasMix, OXYGEN
from divecore.plannernotes import add_plan_to_notes, build_plan_document
from divecore.preferences import DecoMode, Preferences

CREATED = "2026-01-01"


def _cylinder(size_ml, start_mbar, mix=GasMix(o2=209)):
    return Cylinder(type=CylinderType(f"{size_ml // 1000}ℓ", size_ml, 232000),
                    gasmix=mix, start=start_mbar)


def _build(cylinders, segments, **plan_kwargs):
    plan = Diveplan(**plan_kwargs)
    for duration, depth, cyl, setpoint, entered in segments:
        plan_add_segment(plan, duration, depth, cyl, setpoint, entered)
    dive = Dive(cylinders=cylinders)
    create_dive_from_plan(plan, dive)
    return plan, dive


# 30 m for 20 min on air, then a stop at 6 m
SQUARE_30M = [
    (120, 30000, 0, 0, True),
    (1080, 30000, 0, 0, True),
    (240, 6000, 0, 0, False),
    (180, 6000, 0, 0, False),
    (60, 0, 0, 0, False),
]

# 60 m on 18/45 with switches to 21/35, EAN50 and oxygen on the ascent
TRIMIX_60M = [
    (120, 60000, 0, 0, True),
    (1080, 60000, 0, 0, True),
    (240, 36000, 0, 0, False),
    (60, 36000, 1, 0, False),
    (120, 21000, 1, 0, False),
    (60, 21000, 2, 0, False),
    (240, 6000, 2, 0, False),
    (600, 6000, 3, 0, False),
    (60, 0, 3, 0, False),
]


def _trimix_cylinders():
    return [_cylinder(24000, 232000, GasMix(o2=180, he=450)),
            _cylinder(11000, 200000, GasMix(o2=210, he=350)),
            _cylinder(7000, 200000, GasMix(o2=500)),
            _cylinder(7000, 200000, OXYGEN)]


def _min_gas_prefs(**kwargs):
    return Preferences(bottomsac=20000, sacfactor=200, problemsolvingtime=4, **kwargs)


def _balanced(html, tag):
    return html.count(f"<{tag}") == html.count(f"</{tag}>")


class TestHeader:

    def test_basic_document(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M)
        doc = add_plan_to_notes(plan, dive, Preferences(), created=CREATED)
        html = dive.notes
        assert html == doc.to_html()
        assert html.startswith("<div>") and html.endswith("</div>")
        for tag in ("div", "table", "tr", "span"):
            assert _balanced(html, tag)
        assert "Divecore (1.0.0) dive plan</b> created on 2026-01-01" in html
        assert "Runtime: 28min" in html
        assert doc.runtime == 28

    def test_surface_interval(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M,
                            surface_interval=3 * 3600 + 5 * 60)
        add_plan_to_notes(plan, dive, Preferences(), created=CREATED)
        assert "(surface interval 3:05) created on 2026-01-01" in dive.notes

    def test_long_surface_interval_not_shown(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M, surface_interval=50 * 3600)
        add_plan_to_notes(plan, dive, Preferences(), created=CREATED)
        assert "surface interval" not in dive.notes

    def test_overlapping_dives(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M, surface_interval=-600)
        doc = add_plan_to_notes(plan, dive, Preferences())
        assert doc.overlapping
        assert "overlapping dives detected" in dive.notes
        assert "<table" not in dive.notes
        assert doc.rows == []

    def test_aborted_plan_has_one_warning(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M)
        doc = add_plan_to_notes(plan, dive, Preferences(), error=True)
        assert dive.notes.count("Warning:") == 1
        assert doc.warnings == ["Decompression calculation aborted due to excessive time"]
        assert "<table" not in dive.notes

    def test_empty_plan_leaves_notes(self):
        dive = Dive(notes="my notes")
        assert add_plan_to_notes(Diveplan(), dive, Preferences()) is None
        assert dive.notes == "my notes"

    def test_disclaimer_names_algorithm(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M)
        doc = add_plan_to_notes(plan, dive, Preferences(deco_mode=DecoMode.VPMB),
                                show_disclaimer=True)
        assert "VPM-B" in doc.disclaimer
        assert doc.disclaimer in dive.notes

    def test_variations(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M)
        add_plan_to_notes(plan, dive, Preferences(display_variations=True))
        assert "VARIATIONS" in dive.notes
        add_plan_to_notes(plan, dive, Preferences(display_variations=True,
                                                  deco_mode=DecoMode.RECREATIONAL))
        assert "VARIATIONS" not in dive.notes


class TestItinerary:

    def test_table_rows(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M)
        doc = build_plan_document(plan, dive, Preferences())
        assert [r.symbol for r in doc.rows] == ["&#10136;", "&#10137;", "&#10138;", "-", "&#10138;"]
        assert [r.gas for r in doc.rows] == ["air", None, None, None, None]
        assert doc.rows[0].depth == " 30m"
        assert doc.rows[1].duration == " 18min"
        assert doc.rows[-1].runtime == " 28min"

    def test_hidden_columns(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M)
        doc = build_plan_document(plan, dive, Preferences(display_runtime=False,
                                                          display_duration=False))
        assert all(r.runtime is None and r.duration is None for r in doc.rows)
        assert ">runtime<" not in doc.to_html()

    def test_gas_changes_shown_at_stops(self):
        plan, dive = _build(_trimix_cylinders(), TRIMIX_60M)
        doc = build_plan_document(plan, dive, Preferences())
        gases = [r.gas for r in doc.rows if r.gas]
        assert gases == ["18/45", "21/35", "EAN50", "oxygen"]

    def test_short_segments_are_skipped(self):
        segments = SQUARE_30M[:2] + [(5, 30000, 0, 0, False)] + SQUARE_30M[2:]
        plan, dive = _build([_cylinder(24000, 232000)], segments)
        doc = build_plan_document(plan, dive, Preferences())
        assert len(doc.rows) == 5

    def test_verbatim(self):
        plan, dive = _build(_trimix_cylinders(), TRIMIX_60M)
        doc = build_plan_document(plan, dive, Preferences(verbatim_plan=True))
        assert doc.rows == []
        lines = doc.verbatim_lines
        assert lines[0] == "Transition to 60 m in 2:00 min - runtime 2:00 on 18/45"
        assert lines[1].startswith("Stay at 60 m for 18:00 min")
        switches = [line for line in lines if line.startswith("Switch gas to")]
        assert switches == ["Switch gas to 21/35", "Switch gas to EAN50", "Switch gas to oxygen"]
        assert lines[-1].startswith("Transition to 0.0 m")
        assert "Switch gas to 21/35<br>" in doc.to_html()

    def test_setpoint_in_verbatim(self):
        plan, dive = _build([_cylinder(3000, 200000)],
                            [(120, 20000, 0, 1300, True), (1200, 20000, 0, 1300, True),
                             (120, 0, 0, 1300, False)])
        dive.dc.divemode = DiveMode.CCR
        doc = build_plan_document(plan, dive, Preferences(verbatim_plan=True))
        assert doc.verbatim_lines[0].endswith("on air (SP = 1.3bar)")


class TestIcd:

    def test_one_row_per_helium_switch(self):
        plan, dive = _build(_trimix_cylinders(), TRIMIX_60M)
        doc = build_plan_document(plan, dive, Preferences())
        assert doc.istrimix
        assert [(r.gas_from, r.gas_to) for r in doc.icd_rows] == [("18/45", "21/35"), ("21/35", "EAN50")]
        assert doc.icd_warning
        html = doc.to_html()
        assert "Isobaric counterdiffusion information" in html
        assert "Isobaric counterdiffusion conditions exceeded" in html

    def test_verbatim_rows_match_table(self):
        plan, dive = _build(_trimix_cylinders(), TRIMIX_60M)
        doc = build_plan_document(plan, dive, Preferences(verbatim_plan=True))
        assert len(doc.icd_rows) == 2

    def test_no_icd_section_without_helium(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M)
        doc = build_plan_document(plan, dive, Preferences())
        assert not doc.istrimix
        assert "Isobaric counterdiffusion" not in doc.to_html()


class TestGasConsumption:

    def test_minimum_gas_sufficient(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M)
        dive.cylinders[0].deco_gas_used = 200000
        doc = build_plan_document(plan, dive, _min_gas_prefs())
        mingas = doc.gas_consumption[0].minimum_gas
        expected_ml = 2 * 4 * 20000 * dive.depth_to_bar(30000) + 2 * 200000
        assert mingas.volume == pytest.approx(expected_ml / 1000.0, abs=0.01)
        assert mingas.volume == pytest.approx(1040, rel=0.01)
        assert plan.points[1].minimum_gas == round(mingas.pressure * 1000)
        assert mingas.sufficient
        assert "<span style='color: green;'>/&Delta;:+" in doc.to_html()

    def test_minimum_gas_short(self):
        plan, dive = _build([_cylinder(12000, 200000)], SQUARE_30M)
        dive.cylinders[0].deco_gas_used = 200000
        doc = build_plan_document(plan, dive, _min_gas_prefs())
        entry = doc.gas_consumption[0]
        assert entry.warning is None
        assert not entry.minimum_gas.sufficient
        assert "<span style='color: red;'>/&Delta;:-" in doc.to_html()

    def test_more_gas_than_available(self):
        plan, dive = _build([_cylinder(3000, 200000)], SQUARE_30M)
        doc = build_plan_document(plan, dive, Preferences())
        assert doc.gas_consumption[0].warning == \
            "this is more gas than available in the specified cylinder!"
        assert doc.gas_consumption[0].minimum_gas is None

    def test_not_enough_reserve(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M)
        dive.cylinders[0].deco_gas_used = 10000000
        doc = build_plan_document(plan, dive, Preferences())
        assert doc.gas_consumption[0].warning == "not enough reserve for gas sharing on ascent!"

    def test_minimum_gas_above_start_pressure(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M)
        doc = build_plan_document(plan, dive, Preferences(sacfactor=2000))
        assert doc.gas_consumption[0].warning.startswith("required minimum gas for ascent")

    def test_recreational_has_no_minimum_gas(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M)
        doc = build_plan_document(plan, dive, Preferences(deco_mode=DecoMode.RECREATIONAL))
        assert doc.gas_consumption[0].minimum_gas is None
        assert "Recreational mode" in doc.deco_model

    def test_cylinder_without_size(self):
        plan, dive = _build([Cylinder(gasmix=GasMix(o2=209))], SQUARE_30M)
        doc = build_plan_document(plan, dive, Preferences())
        entry = doc.gas_consumption[0]
        assert entry.pressure is None
        assert "during planned ascent" in entry.to_html()

    def test_sized_cylinder_without_start_pressure(self):
        plan, dive = _build([_cylinder(12000, 0)], SQUARE_30M)
        doc = build_plan_document(plan, dive, Preferences())
        entry = doc.gas_consumption[0]
        assert entry.pressure is None
        assert entry.warning is None
        assert entry.minimum_gas is None
        assert entry.volume > 0
        assert "during planned ascent" in entry.to_html()

    def test_header_lines(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M)
        doc = build_plan_document(plan, dive, Preferences())
        assert doc.gas_header == "Gas consumption (based on SAC 20|17ℓ/min):"
        assert doc.deco_model == "Deco model: Bühlmann ZHL-16C with GFLow = 30% and GFHigh = 75%"
        assert "ATM pressure: 1013mbar (0m)" in doc.to_html()
        assert doc.otu == dive.otu > 0

    def test_vpmb_model_line(self):
        plan, dive = _build([_cylinder(24000, 232000)], SQUARE_30M, vpmb_conservatism=2,
                            eff_gflow=40, eff_gfhigh=85)
        doc = build_plan_document(plan, dive, Preferences(deco_mode=DecoMode.VPMB))
        assert doc.deco_model == "Deco model: VPM-B at +2 conservatism, effective GF=40/85"

    def test_ccr_header(self):
        plan, dive = _build([_cylinder(3000, 200000)],
                            [(120, 20000, 0, 1300, True), (1200, 20000, 0, 1300, True),
                             (120, 0, 0, 1300, False)])
        dive.dc.divemode = DiveMode.CCR
        doc = build_plan_document(plan, dive, Preferences())
        assert doc.gas_header == "Gas consumption (CCR legs excluded):"
        assert doc.po2_warnings == []


class TestPo2Warnings:

    def _doc(self, depth):
        plan, dive = _build([_cylinder(24000, 232000)],
                            [(120, depth, 0, 0, False), (300, depth, 0, 0, False),
                             (300, 0, 0, 0, False)])
        return build_plan_document(plan, dive, Preferences(decopo2=1400))

    def test_air_at_40m_is_fine(self):
        assert self._doc(40000).po2_warnings == []

    def test_air_at_60m_is_too_high(self):
        warnings = self._doc(60000).po2_warnings
        assert len(warnings) == 2
        assert all(w.high for w in warnings)
        assert warnings[0].po2 == pytest.approx(1.46, abs=0.01)
        assert warnings[0].message.startswith("high pO₂ value 1.46 at 2:00 with gas air at depth 60 m")

    def test_hypoxic_mix_near_surface(self):
        plan, dive = _build([_cylinder(24000, 232000, GasMix(o2=100, he=700))],
                            [(60, 3000, 0, 0, True), (600, 3000, 0, 0, True)])
        doc = build_plan_document(plan, dive, Preferences())
        assert len(doc.po2_warnings) == 2
        assert not doc.po2_warnings[0].high
        assert "low pO₂ value 0.13 at 1:00 with gas 10/70 at depth 3.0 m" in doc.to_html()

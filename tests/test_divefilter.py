"""Tests for the dive-list filter engine."""

import itertools

import pytest

from divecore.dive import DiveSite, DiveTable
from divecore.divefilter import DiveFilter, FilterData
from divecore.filterconstraint import FilterConstraint, FilterConstraintType
from divecore.fulltext import FullTextQuery, StringFilterMode
from divecore.preferences import Preferences

from conftest import make_dive


def _shown_count(table):
    return sum(1 for d in table if not d.hidden_by_filter)


def _depth_filter(low, high):
    return FilterData(constraints=[FilterConstraint(FilterConstraintType.DEPTH, low=low, high=high)])


def _mixed_log():
    sites = [DiveSite(uuid=u, name=f"Site {u}") for u in (3, 1, 2)]
    dives = [
        make_dive(1, maxdepth=12000, buddy="Anna", dive_site=sites[0]),
        make_dive(2, maxdepth=25000, notes="wreck penetration", dive_site=sites[1]),
        make_dive(3, maxdepth=40000, buddy="Bob", dive_site=sites[2]),
        make_dive(4, maxdepth=8000, notes="wreck snorkel", invalid=True),
    ]
    return DiveTable(dives), sites


class TestScenarios:

    def test_invalid_dive_hidden_by_default(self):
        d1 = make_dive(1, invalid=True)
        table = DiveTable([d1, make_dive(2), make_dive(3)])
        engine = DiveFilter(table, prefs=Preferences(display_invalid_dives=False))
        engine.update_all()
        assert engine.shown_dives == 2
        assert d1.hidden_by_filter

    def test_invalid_dive_shown_when_preferred(self):
        table = DiveTable([make_dive(1, invalid=True), make_dive(2)])
        engine = DiveFilter(table, prefs=Preferences(display_invalid_dives=True))
        engine.update_all()
        assert engine.shown_dives == 2

    def test_dive_site_scope_nesting(self):
        table, sites = _mixed_log()
        a, b, c = sites
        engine = DiveFilter(table)
        resets = []
        engine.connect_filter_reset(lambda: resets.append(engine.filtered_dive_sites()))

        engine.start_filter_dive_sites([a, b])
        engine.start_filter_dive_sites([c])
        assert engine.filtered_dive_sites() == [c]
        assert engine.dive_site_mode()
        engine.stop_filter_dive_sites()
        assert engine.dive_site_mode()
        engine.stop_filter_dive_sites()

        assert engine.filtered_dive_sites() == []
        assert not engine.dive_site_mode()
        assert len(resets) == 2


class TestInvariants:

    @pytest.mark.parametrize("data", [
        FilterData(),
        _depth_filter(10000, 30000),
        FilterData(full_text=FullTextQuery.from_string("wreck")),
        FilterData(full_text=FullTextQuery.from_string("wreck"),
                   constraints=[FilterConstraint(FilterConstraintType.DEPTH, low=20000, high=50000)]),
        FilterData(constraints=[FilterConstraint(FilterConstraintType.PEOPLE, strings=["anna"],
                                                 negate=True)]),
    ])
    def test_shown_count_matches_flags(self, data):
        table, _ = _mixed_log()
        engine = DiveFilter(table)
        engine.set_filter(data)
        engine.update_all()
        assert engine.shown_dives == _shown_count(table)

    def test_hidden_dives_are_deselected(self):
        table, _ = _mixed_log()
        for d in table:
            table.select_dive(d)
        engine = DiveFilter(table)
        engine.set_filter(_depth_filter(20000, 50000))
        change = engine.update_all()
        for d in change.new_hidden:
            assert not d.selected
        assert all(not d.selected for d in table if d.hidden_by_filter)

    def test_current_changed_reported(self):
        table, _ = _mixed_log()
        shallow = table.get_dive_by_id(1)
        table.select_dive(table.get_dive_by_id(3))
        table.select_dive(shallow)
        engine = DiveFilter(table)
        engine.set_filter(_depth_filter(20000, 50000))
        change = engine.update_all()
        assert change.current_changed
        assert table.current_dive is table.get_dive_by_id(3)

    def test_balanced_site_scope_restores_state(self):
        table, sites = _mixed_log()
        engine = DiveFilter(table)
        engine.set_filter(_depth_filter(20000, 50000))
        engine.update_all()
        before = [d.hidden_by_filter for d in table]

        engine.start_filter_dive_sites(sites[:1])
        engine.update_all()
        assert engine.shown_dives == 1
        engine.stop_filter_dive_sites()
        engine.update_all()
        assert [d.hidden_by_filter for d in table] == before

    def test_stop_without_start_is_harmless(self):
        table, _ = _mixed_log()
        engine = DiveFilter(table)
        engine.stop_filter_dive_sites()
        assert not engine.dive_site_mode()

    def test_set_dive_site_idempotent_under_permutation(self):
        table, sites = _mixed_log()
        engine = DiveFilter(table)
        resets = []
        engine.connect_filter_reset(lambda: resets.append(True))
        engine.start_filter_dive_sites(sites)
        for perm in itertools.permutations(sites):
            engine.set_filter_dive_site(list(perm))
        assert len(resets) == 1
        assert [s.uuid for s in engine.filtered_dive_sites()] == [1, 2, 3]
        engine.set_filter_dive_site(sites[:2])
        assert len(resets) == 2


class TestModes:

    def test_full_text_respects_invalid_flag(self):
        table, _ = _mixed_log()
        engine = DiveFilter(table)
        engine.set_filter(FilterData(full_text=FullTextQuery.from_string("wreck")))
        engine.update_all()
        assert [d.id for d in table if not d.hidden_by_filter] == [2]

    def test_full_text_mode_setting(self):
        table, _ = _mixed_log()
        engine = DiveFilter(table)
        engine.set_filter(FilterData(full_text=FullTextQuery.from_string("rec"),
                                     fulltext_string_mode=StringFilterMode.SUBSTRING))
        engine.update_all()
        assert engine.shown_dives == 1

    def test_full_text_sees_dive_added_later(self):
        table, _ = _mixed_log()
        engine = DiveFilter(table)
        added = make_dive(5, notes="wreck dive")
        table.add_dive(added)
        engine.set_filter(FilterData(full_text=FullTextQuery.from_string("wreck")))
        engine.update_all()
        assert not added.hidden_by_filter
        assert engine.shown_dives == 2 == _shown_count(table)
        change = engine.update([added])
        assert change.new_shown == [] and change.new_hidden == []

    def test_full_text_sees_edited_notes(self):
        table, _ = _mixed_log()
        engine = DiveFilter(table)
        engine.set_filter(FilterData(full_text=FullTextQuery.from_string("wreck")))
        engine.update_all()
        d = table.get_dive_by_id(1)
        assert d.hidden_by_filter
        d.notes = "wreck"
        engine.update_all()
        assert not d.hidden_by_filter
        d.notes = "reef"
        change = engine.update([d])
        assert change.new_hidden == [d]
        assert engine.shown_dives == 1 == _shown_count(table)

    def test_update_subset(self):
        table, _ = _mixed_log()
        engine = DiveFilter(table)
        engine.update_all()
        d = table.get_dive_by_id(1)
        d.maxdepth = 50000
        engine.set_filter(_depth_filter(45000, 60000))
        change = engine.update([d, None])
        assert change.new_shown == [] and change.new_hidden == []
        engine.update(list(table))
        assert engine.shown_dives == 1 == _shown_count(table)

    def test_reset_shows_everything(self):
        table, _ = _mixed_log()
        engine = DiveFilter(table)
        engine.set_filter(_depth_filter(20000, 30000))
        engine.update_all()
        change = engine.reset()
        assert engine.shown_dives == len(table)
        assert not engine.filter_data.valid_filter()
        assert len(change.new_shown) == 3

    def test_dive_removed(self):
        table, _ = _mixed_log()
        engine = DiveFilter(table)
        engine.update_all()
        d = table.get_dive_by_id(2)
        engine.dive_removed(d)
        table.remove_dive(d)
        assert engine.shown_dives == _shown_count(table)

    def test_shown_text(self):
        table, _ = _mixed_log()
        engine = DiveFilter(table)
        engine.update_all()
        assert engine.shown_text() == "4 dives"
        engine.set_filter(_depth_filter(20000, 50000))
        engine.update_all()
        assert engine.shown_text() == "2/4 shown"

    def test_listener_disconnect(self):
        table, _ = _mixed_log()
        engine = DiveFilter(table)
        calls = []
        listener = lambda: calls.append(1)  # noqa: E731
        engine.connect_filter_reset(listener)
        engine.set_filter(FilterData())
        engine.disconnect_filter_reset(listener)
        engine.set_filter(FilterData())
        assert calls == [1]

    def test_filter_data_equality(self):
        assert _depth_filter(1, 2) == _depth_filter(1, 2)
        assert _depth_filter(1, 2) != _depth_filter(1, 3)
        assert FilterData(full_text=FullTextQuery.from_string("a")) != FilterData()

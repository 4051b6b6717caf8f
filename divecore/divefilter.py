"""
Dive-list filter engine.

Keeps ``hidden_by_filter`` on every dive of a ``DiveTable`` in sync
with the active filter and reports the transitions as a
``ShownChange``.  The filter runs in one of three modes, in priority
order: dive-site mode (while a dive-site scope is open), full-text
mode (non-empty query) and constraint mode.

Listeners register with ``connect_filter_reset``; they are called
whenever the filter state changes and the list has to be re-evaluated
with ``update_all``.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .dive import Dive, DiveSite, DiveTable
from .filterconstraint import FilterConstraint
from .fulltext import FullTextIndex, FullTextQuery, StringFilterMode
from .i18n import translate
from .preferences import Preferences


@dataclass
class FilterData:
    full_text: FullTextQuery = field(default_factory=FullTextQuery)
    fulltext_string_mode: StringFilterMode = StringFilterMode.STARTSWITH
    constraints: List[FilterConstraint] = field(default_factory=list)

    def __eq__(self, other) -> bool:
        if not isinstance(other, FilterData):
            return NotImplemented
        return (self.full_text.original_query == other.full_text.original_query
                and self.fulltext_string_mode == other.fulltext_string_mode
                and self.constraints == other.constraints)

    def valid_filter(self) -> bool:
        return self.full_text.doit() or bool(self.constraints)


@dataclass
class ShownChange:
    new_shown: List[Dive] = field(default_factory=list)
    new_hidden: List[Dive] = field(default_factory=list)
    current_changed: bool = False


def _sorted_sites(sites) -> List[DiveSite]:
    return sorted(sites, key=lambda ds: ds.uuid)


class DiveFilter:
    """Filter state plus the ``shown_dives`` counter for one dive table."""

    def __init__(self, table: DiveTable, fulltext_index: Optional[FullTextIndex] = None,
                 prefs: Optional[Preferences] = None):
        self.table = table
        self.fulltext_index = fulltext_index if fulltext_index is not None else FullTextIndex(table)
        self.prefs = prefs if prefs is not None else Preferences()
        self.filter_data = FilterData()
        self._dive_sites: List[DiveSite] = []
        self._dive_site_refcount = 0
        self._shown_dives = sum(1 for d in table if not d.hidden_by_filter)
        self._filter_reset_listeners: List[Callable[[], None]] = []

    # ── Notification ─────────────────────────────────────────────────

    def connect_filter_reset(self, callback: Callable[[], None]) -> None:
        self._filter_reset_listeners.append(callback)

    def disconnect_filter_reset(self, callback: Callable[[], None]) -> None:
        if callback in self._filter_reset_listeners:
            self._filter_reset_listeners.remove(callback)

    def _emit_filter_reset(self) -> None:
        for callback in list(self._filter_reset_listeners):
            callback()

    # ── State ────────────────────────────────────────────────────────

    @property
    def shown_dives(self) -> int:
        return self._shown_dives

    def dive_site_mode(self) -> bool:
        return self._dive_site_refcount > 0

    def filtered_dive_sites(self) -> List[DiveSite]:
        return list(self._dive_sites)

    def set_filter(self, data: FilterData) -> None:
        """Install *data*; listeners are told to re-run ``update_all``."""
        self.filter_data = data
        self._emit_filter_reset()

    def start_filter_dive_sites(self, sites) -> None:
        self._dive_site_refcount += 1
        self._dive_sites = _sorted_sites(sites)
        if self._dive_site_refcount == 1:
            self._emit_filter_reset()

    def stop_filter_dive_sites(self) -> None:
        if self._dive_site_refcount == 0:
            return
        self._dive_site_refcount -= 1
        if self._dive_site_refcount > 0:
            return
        self._dive_sites = []
        self._emit_filter_reset()

    def set_filter_dive_site(self, sites) -> None:
        """Replace the dive-site list; a permutation of the current list is a no-op."""
        sites = _sorted_sites(sites)
        if [id(ds) for ds in sites] == [id(ds) for ds in self._dive_sites]:
            return
        self._dive_sites = sites
        self._emit_filter_reset()

    # ── Evaluation ───────────────────────────────────────────────────

    def show_dive(self, d: Dive) -> bool:
        """Constraint-mode verdict for *d*."""
        if d.invalid and not self.prefs.display_invalid_dives:
            return False
        if not self.filter_data.valid_filter():
            return True
        return all(c.matches(d) for c in self.filter_data.constraints)

    def _in_dive_sites(self, d: Dive) -> bool:
        return any(d.dive_site is ds for ds in self._dive_sites)

    def _set_filter_status(self, d: Dive, shown: bool) -> bool:
        """Update *d*; returns True if its shown status changed."""
        old_shown = not d.hidden_by_filter
        d.hidden_by_filter = not shown
        if not shown and d.selected:
            self.table.deselect_dive(d)
        changed = old_shown != shown
        if changed:
            self._shown_dives += 1 if shown else -1
        return changed

    def _update_dive_status(self, d: Dive, shown: bool, change: ShownChange) -> None:
        if self._set_filter_status(d, shown):
            if shown:
                change.new_shown.append(d)
            else:
                change.new_hidden.append(d)

    def update(self, dives) -> ShownChange:
        """Re-evaluate *dives* only."""
        old_current = self.table.current_dive
        change = ShownChange()
        query = self.filter_data.full_text
        mode = self.filter_data.fulltext_string_mode
        for d in dives:
            if d is None:
                continue
            if self.dive_site_mode():
                shown = self._in_dive_sites(d)
            elif query.doit():
                self.fulltext_index.update_dive(d)
                shown = self.fulltext_index.dive_matches(d, query, mode) and self.show_dive(d)
            else:
                shown = self.show_dive(d)
            self._update_dive_status(d, shown, change)
        change.current_changed = old_current is not self.table.current_dive
        return change

    def update_all(self) -> ShownChange:
        """Re-evaluate every dive of the table, in table order."""
        old_current = self.table.current_dive
        change = ShownChange()
        self._shown_dives = sum(1 for d in self.table if not d.hidden_by_filter)
        if self.dive_site_mode():
            for d in self.table:
                self._update_dive_status(d, self._in_dive_sites(d), change)
        elif self.filter_data.full_text.doit():
            self.fulltext_index.populate(self.table)
            result = self.fulltext_index.find_dives(self.filter_data.full_text,
                                                    self.filter_data.fulltext_string_mode)
            for d in self.table:
                self._update_dive_status(d, result.dive_matches(d) and self.show_dive(d), change)
        else:
            for d in self.table:
                self._update_dive_status(d, self.show_dive(d), change)
        change.current_changed = old_current is not self.table.current_dive
        return change

    def reset(self) -> ShownChange:
        """Drop the filter and show every dive."""
        self.filter_data = FilterData()
        old_current = self.table.current_dive
        change = ShownChange()
        for d in self.table:
            self._update_dive_status(d, True, change)
        self._shown_dives = len(self.table)
        change.current_changed = old_current is not self.table.current_dive
        return change

    def dive_removed(self, d: Optional[Dive]) -> None:
        if d is not None and not d.hidden_by_filter:
            self._shown_dives -= 1

    def shown_text(self) -> str:
        if self.dive_site_mode() or self.filter_data.valid_filter():
            return translate("{}/{} shown", "filter").format(self._shown_dives, len(self.table))
        return translate("{} dives", "filter").format(len(self.table))

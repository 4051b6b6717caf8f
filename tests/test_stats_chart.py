"""Smoke tests for the statistics charts (no GUI backend needed)."""

from matplotlib.figure import Figure

from divecore.stats_chart import render_box_chart, render_count_chart, render_scatter_chart
from divecore.statstypes import DepthType, DurationType, MeterBinner

from conftest import make_dive


def _dives():
    return [make_dive(i, maxdepth=depth, duration=minutes * 60)
            for i, (depth, minutes) in enumerate([(8000, 40), (12000, 55), (14000, 50),
                                                  (23000, 35), (27000, 30)])]


def _texts(ax):
    return [t.get_text() for t in ax.texts]


class TestCharts:

    def test_count_chart(self):
        fig = Figure()
        binner = MeterBinner(10)
        render_count_chart(fig, binner, binner.count_dives(_dives()), title="Depth")
        ax = fig.axes[0]
        assert len(ax.patches) == 3
        assert ax.get_title() == "Depth"

    def test_count_chart_empty(self):
        fig = Figure()
        render_count_chart(fig, MeterBinner(10), [])
        assert _texts(fig.axes[0]) == ["No data"]

    def test_box_chart(self):
        fig = Figure()
        binner = MeterBinner(10)
        render_box_chart(fig, binner, DurationType(), binner.bin_dives(_dives()), for_export=True)
        ax = fig.axes[0]
        assert [t.get_text() for t in ax.get_xticklabels()] == ["0–10", "10–20", "20–30"]
        assert ax.get_ylabel() == "Duration [min]"

    def test_scatter_chart(self):
        fig = Figure()
        render_scatter_chart(fig, DepthType(), DurationType(), _dives())
        ax = fig.axes[0]
        assert len(ax.collections) == 1
        assert ax.collections[0].get_offsets().shape == (5, 2)

    def test_redraw_clears_figure(self):
        fig = Figure()
        render_scatter_chart(fig, DepthType(), DurationType(), _dives())
        render_scatter_chart(fig, DepthType(), DurationType(), [])
        assert len(fig.axes) == 1
        assert _texts(fig.axes[0]) == ["No data"]

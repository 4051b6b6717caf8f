"""
Statistics charts.

Draws the output of the statistics engine onto a caller-supplied
matplotlib ``Figure``: dive counts per bin, box plots of a numeric
variable per bin, and a scatter plot of two numeric variables.
Nothing here needs a GUI backend.
"""

from typing import List, Sequence

import numpy as np
from matplotlib.figure import Figure

from .constants import CHART_PALETTE, PLOT_STYLE_DARK, PLOT_STYLE_LIGHT
from .i18n import translate
from .statstypes import (
    StatsBinCount, StatsBinDives, StatsBinner, StatsType, quartiles,
)


def _apply_style(fig: Figure, ax, for_export: bool) -> None:
    style = PLOT_STYLE_LIGHT if for_export else PLOT_STYLE_DARK
    fig.set_facecolor(style['figure.facecolor'])
    ax.set_facecolor(style['axes.facecolor'])
    ax.title.set_color(style['text.color'])
    ax.xaxis.label.set_color(style['axes.labelcolor'])
    ax.yaxis.label.set_color(style['axes.labelcolor'])
    for spine in ax.spines.values():
        spine.set_edgecolor(style['axes.edgecolor'])
    ax.tick_params(axis='x', colors=style['xtick.color'])
    ax.tick_params(axis='y', colors=style['ytick.color'])
    ax.grid(axis='y', color=style['grid.color'], linewidth=0.4, alpha=0.5)


def _no_data(ax) -> None:
    ax.text(0.5, 0.5, translate('No data', 'stats'),
            transform=ax.transAxes, ha='center', va='center',
            color=CHART_PALETTE['empty_text'])


def render_count_chart(
    fig: Figure,
    binner: StatsBinner,
    counts: Sequence[StatsBinCount],
    *,
    title: str = "",
    for_export: bool = False,
) -> None:
    """Bar chart of dive counts per bin.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        Figure to draw on (will be cleared).
    binner : StatsBinner
        Binner that produced *counts*; used for the bar labels.
    counts : sequence of StatsBinCount
        Output of ``binner.count_dives``.
    title : str
        Axes title.
    for_export : bool
        If ``True``, use light-theme colours.
    """
    fig.clf()
    ax = fig.add_subplot(111)
    _apply_style(fig, ax, for_export)

    if not counts:
        _no_data(ax)
        return

    x = np.arange(len(counts))
    heights = np.array([c.count for c in counts])
    ax.bar(x, heights, color=CHART_PALETTE['bar'], edgecolor=CHART_PALETTE['bar_edge'],
           linewidth=0.6, zorder=3)
    ax.set_xticks(x)
    ax.set_xticklabels([binner.format(c.bin) for c in counts], rotation=45,
                       ha='right', fontsize=7)
    ax.set_ylabel(translate('No. dives', 'stats'), fontsize=8)
    if binner.unit_symbol():
        ax.set_xlabel(binner.unit_symbol(), fontsize=8)
    if title:
        ax.set_title(title, fontsize=10, fontweight='bold')
    fig.tight_layout(pad=1.2)


def render_box_chart(
    fig: Figure,
    binner: StatsBinner,
    stats_type: StatsType,
    bins: Sequence[StatsBinDives],
    *,
    for_export: bool = False,
) -> None:
    """Box plot of *stats_type* for every bin, drawn from its quartiles."""
    fig.clf()
    ax = fig.add_subplot(111)
    _apply_style(fig, ax, for_export)

    stats: List[dict] = []
    labels: List[str] = []
    for entry in bins:
        values = stats_type.values(entry.dives)
        if not values.size:
            continue
        q = quartiles(values)
        stats.append({
            'whislo': q.min, 'q1': q.q1, 'med': q.q2, 'q3': q.q3, 'whishi': q.max,
            'label': binner.format(entry.bin),
        })
        labels.append(binner.format(entry.bin))

    if not stats:
        _no_data(ax)
        return

    ax.bxp(
        stats, showfliers=False, patch_artist=True,
        boxprops=dict(facecolor=CHART_PALETTE['box'], edgecolor=CHART_PALETTE['box_edge']),
        medianprops=dict(color=CHART_PALETTE['median'], linewidth=1.5),
    )
    ax.set_xticks(np.arange(1, len(labels) + 1))
    ax.set_xticklabels(labels, rotation=45, ha='right', fontsize=7)
    ax.set_ylabel(stats_type.name_with_unit(), fontsize=8)
    fig.tight_layout(pad=1.2)


def render_scatter_chart(
    fig: Figure,
    type_x: StatsType,
    type_y: StatsType,
    dives,
    *,
    for_export: bool = False,
) -> None:
    """Scatter plot of two numeric variables."""
    fig.clf()
    ax = fig.add_subplot(111)
    _apply_style(fig, ax, for_export)

    points = type_x.scatter(type_y, dives)
    if not points:
        _no_data(ax)
        return

    xy = np.array(points)
    ax.scatter(xy[:, 0], xy[:, 1], s=14, color=CHART_PALETTE['scatter'],
               alpha=0.8, zorder=3)
    ax.set_xlabel(type_x.name_with_unit(), fontsize=8)
    ax.set_ylabel(type_y.name_with_unit(), fontsize=8)
    ax.grid(axis='x', linewidth=0.4, alpha=0.5)
    fig.tight_layout(pad=1.2)

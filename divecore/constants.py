"""
Constants for Divecore.

Centralises physical constants, water densities, planner thresholds,
preference defaults, HTML colours used in plan notes, and the plot
palettes for the statistics charts.
"""

# ── Physical constants ───────────────────────────────────────────────────
O2_IN_AIR = 209                 # permille
SURFACE_PRESSURE = 1013         # mbar, standard sea-level pressure
ATM_MBAR = 1013.25              # mbar per atmosphere
MAX_COMPRESSIBILITY_BAR = 500   # virial polynomial is not valid beyond
ALTITUDE_SCALE_MM = 7800000     # scale height used for altitude estimates

# ── Water density in g/10ℓ ──────────────────────────────────────────────
FRESHWATER_SALINITY = 10000
BRACKISH_SALINITY = 10100
EN13319_SALINITY = 10200
SEAWATER_SALINITY = 10300
# libdivecomputer reports seawater as 1.025 kg/ℓ
DC_SEAWATER_SALINITY = 10250

# Upper bounds of the water-type classes (exclusive)
FRESHWATER_LIMIT = 10050
SALTYWATER_LIMIT = 10190
EN13319_LIMIT = 10210

# ── Planner thresholds ───────────────────────────────────────────────────
MIN_CYLINDER_RESERVE_MBAR = 10000   # below this a cylinder counts as empty
LOW_PO2_LIMIT = 0.16                # bar
SHORT_SEGMENT_SECONDS = 10
SURFACE_INTERVAL_DISPLAY_LIMIT = 48 * 60 * 60
ICD_RATIO = 5                       # ΔN₂ must stay below 1/5 of −ΔHe

# ── Preference defaults ──────────────────────────────────────────────────
DEFAULT_BOTTOMSAC = 20000           # mℓ/min
DEFAULT_DECOSAC = 17000             # mℓ/min
DEFAULT_SACFACTOR = 400             # percent
DEFAULT_PROBLEMSOLVINGTIME = 4      # min
DEFAULT_BOTTOMPO2 = 1400            # mbar
DEFAULT_DECOPO2 = 1600              # mbar
DEFAULT_GFLOW = 30
DEFAULT_GFHIGH = 75

# ── Plan-notes HTML colours ──────────────────────────────────────────────
PLAN_COLORS = {
    'warning':      'red',
    'gas':          'red',
    'icd_ok':       '#383838',
    'icd_exceeded': 'red',
    'mingas_ok':    'green',
    'mingas_short': 'red',
}

# HTML entities for the itinerary segment column
SEGMENT_SYMBOLS = {
    'ascent':   '&#10138;',
    'descent':  '&#10136;',
    'constant': '&#10137;',
    'deco':     '-',
}

# ── Dive-computer model strings ──────────────────────────────────────────
PLANNED_DIVE_MODEL = "planned dive"
MANUAL_DIVE_MODEL = "manually added dive"

# ── Statistics chart palette ─────────────────────────────────────────────
CHART_PALETTE = {
    'bar':        '#4472C4',
    'bar_edge':   '#2F5597',
    'box':        '#70AD47',
    'box_edge':   '#548235',
    'median':     '#C00000',
    'scatter':    '#0033A1',
    'empty_text': '#666666',
}

# ── Matplotlib dark-theme style dict (GUI preview) ──────────────────────
PLOT_STYLE_DARK = {
    'figure.facecolor':  '#252536',
    'axes.facecolor':    '#2a2a3c',
    'axes.edgecolor':    '#45475a',
    'axes.labelcolor':   '#cdd6f4',
    'text.color':        '#cdd6f4',
    'xtick.color':       '#9399b2',
    'ytick.color':       '#9399b2',
    'grid.color':        '#45475a',
}

# ── Matplotlib light-theme style dict (export / report) ─────────────────
PLOT_STYLE_LIGHT = {
    'figure.facecolor':  '#ffffff',
    'axes.facecolor':    '#ffffff',
    'axes.edgecolor':    '#333333',
    'axes.labelcolor':   '#1a1a2e',
    'text.color':        '#1a1a2e',
    'xtick.color':       '#333333',
    'ytick.color':       '#333333',
    'grid.color':        '#cccccc',
}

"""
Divecore v1.0.0

Non-UI engine of a dive-logging application.  Holds the dive data
model, the dive-list filter, the statistics binning/aggregation
engine and the dive-plan notes renderer.

Everything here is plain Python on top of numpy and matplotlib so
that any front end (desktop, web, scripts) can drive it.
"""

APP_NAME = "Divecore"
APP_VERSION = "1.0.0"
APP_DATE = "2026-10-16"
__version__ = APP_VERSION

"""Core (UI-agnostic) logic for the GCC competitiveness story.

This package contains:
- the fixed WCR dataset and its GCC aggregates (pandas)
- derived views: trajectory series, dimension breakdown
- chart spec builders (series/layout + Altair -> Vega-Lite spec dict)
- narrative helpers for the aggregation toggle and profile comparison
"""

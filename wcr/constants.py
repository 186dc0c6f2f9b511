from __future__ import annotations

from typing import Dict, Tuple

# Survey coverage
SURVEY_YEAR = 2025
FIRST_YEAR = 2020
TRAJECTORY_START_YEAR = 2021

# Entities
MEMBERS: Tuple[str, ...] = ("UAE", "Qatar", "Saudi Arabia", "Bahrain", "Oman", "Kuwait")
GCC_SIMPLE = "GCC (Simple)"
GCC_WEIGHTED = "GCC (Weighted)"
GCC_AVERAGE = "GCC Average"
AGGREGATES: Tuple[str, ...] = (GCC_SIMPLE, GCC_WEIGHTED)

# Trajectory legend order
TRAJECTORY_SERIES: Tuple[str, ...] = ("UAE", "Qatar", "Saudi Arabia", "Bahrain", "Kuwait", "Oman", GCC_AVERAGE)

DISPLAY_NAMES: Dict[str, str] = {
    GCC_WEIGHTED: "GCC (GDP-Weighted)",
    GCC_SIMPLE: "GCC (Simple Avg)",
}

ISO_CODES: Dict[str, str] = {
    "UAE": "UAE",
    "Qatar": "QAT",
    "Saudi Arabia": "SAU",
    "Bahrain": "BHR",
    "Oman": "OMN",
    "Kuwait": "KWT",
}

REGION_MEMBER = "GCC Member"
REGION_AGGREGATE = "GCC Aggregate"
REGION_OTHER = "Other"

# Factor table columns (rank/score pairs averaged into the aggregate rows)
FACTOR_COLUMNS: Tuple[str, ...] = (
    "overall_rank",
    "overall_score",
    "econ_rank",
    "econ_score",
    "gov_rank",
    "gov_score",
    "biz_rank",
    "biz_score",
    "infra_rank",
    "infra_score",
)
GDP_COLUMN = "gdp_usd_billion"

# Dimension name -> (score column, rank column)
DIMENSION_COLUMNS: Dict[str, Tuple[str, str]] = {
    "Overall": ("overall_score", "overall_rank"),
    "Economic Performance": ("econ_score", "econ_rank"),
    "Government Efficiency": ("gov_score", "gov_rank"),
    "Business Efficiency": ("biz_score", "biz_rank"),
    "Infrastructure": ("infra_score", "infra_rank"),
}

# Long-format order used for chart axes (bottom to top on horizontal bars).
DIMENSION_ORDER: Tuple[str, ...] = (
    "Infrastructure",
    "Economic Performance",
    "Government Efficiency",
    "Business Efficiency",
    "Overall",
)
HEATMAP_DIMENSIONS: Tuple[str, ...] = (
    "Overall",
    "Economic Performance",
    "Government Efficiency",
    "Business Efficiency",
    "Infrastructure",
)
RADAR_DIMENSIONS: Tuple[str, ...] = (
    "Economic Performance",
    "Government Efficiency",
    "Business Efficiency",
    "Infrastructure",
)
FIVE_YEAR_FACTORS: Tuple[str, ...] = ("Overall", "Econ Perf", "Gov Eff", "Bus Eff", "Infra")

# Palette
COUNTRY_COLORS: Dict[str, str] = {
    "UAE": "#000000",
    "Qatar": "#99154C",
    "Saudi Arabia": "#008035",
    "Bahrain": "#E20000",
    "Oman": "#a3a3a3",
    "Kuwait": "#00B1E6",
}
GOLD = "#B8A358"
NAVY = "#1a5276"
ENTITY_COLORS: Dict[str, str] = {
    **COUNTRY_COLORS,
    GCC_WEIGHTED: GOLD,
    GCC_SIMPLE: NAVY,
    GCC_AVERAGE: GOLD,
}
REGION_COLORS: Dict[str, str] = {
    REGION_AGGREGATE: GOLD,
    REGION_MEMBER: "#2980b9",
    REGION_OTHER: "#bdc3c7",
}
DEFAULT_COLOR = REGION_COLORS[REGION_OTHER]
AGGREGATE_OUTLINE = "#8B7355"

POSITIVE_COLOR = "#27ae60"
NEGATIVE_COLOR = "#e74c3c"

# (minimum score, tier, color), checked top-down
PERFORMANCE_TIERS: Tuple[Tuple[float, str, str], ...] = (
    (80.0, "Strong", POSITIVE_COLOR),
    (65.0, "Good", "#f39c12"),
)
DEFAULT_TIER: Tuple[str, str] = ("Moderate", NEGATIVE_COLOR)

HEATMAP_MIN = 45.0
HEATMAP_MAX = 100.0
HEATMAP_COLORS: Tuple[str, ...] = (NEGATIVE_COLOR, "#f9e79f", POSITIVE_COLOR)

ACHIEVED_COLOR = "#3498db"
GAP_COLOR = "#bdc3c7"
OPPORTUNITY_COLOR = "#c0392b"

# Trajectory rank bands: (top, bottom, fill)
RANK_BANDS: Tuple[Tuple[int, int, str], ...] = (
    (0, 10, "rgba(26, 188, 156, 0.1)"),
    (10, 20, "rgba(46, 204, 113, 0.08)"),
    (20, 30, "rgba(241, 196, 15, 0.08)"),
)

WORLD_DEFAULT_WINDOW = 25

# Hex alpha suffixes
RADAR_FILL_ALPHA = "33"
OVERLAY_FILL_ALPHA = "22"

# Future live source (Fusion Registry SDMX)
FUSION_BASE_URL = "https://fusion.gccstat.org/sdmx/v2"
FUSION_DATAFLOW = "WCR_GCC"

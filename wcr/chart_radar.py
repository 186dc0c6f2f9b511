from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Tuple

import altair as alt
import pandas as pd

from wcr.charts import (
    Annotation,
    ChartSpec,
    Layout,
    Series,
    close_polygon,
    entity_color,
    fmt_number,
    to_vega_spec,
    with_alpha,
)
from wcr.constants import DIMENSION_COLUMNS, GCC_WEIGHTED, OVERLAY_FILL_ALPHA, RADAR_DIMENSIONS, RADAR_FILL_ALPHA
from wcr.data import Dataset
from wcr.params import normalize_method

RADIAL_RANGE = [0, 100]
RADIAL_TICKS = [0, 25, 50, 75, 100]
LABEL_RADIUS = 118
EXTENT = 135


def radar_profile(dataset: Dataset, entity: str) -> Dict[str, Any]:
    """Closed polygon for one entity: the first category/value pair is repeated last."""
    row = dataset.factor_row(entity)
    values = [float(row[DIMENSION_COLUMNS[d][0]]) for d in RADAR_DIMENSIONS]
    categories, closed = close_polygon(RADAR_DIMENSIONS, values)
    return {"entity": entity, "categories": categories, "values": closed, "overall_score": float(row["overall_score"])}


def _polar_frame(name: str, categories: List[str], values: List[float]) -> pd.DataFrame:
    # Clockwise from 12 o'clock; the closing point lands back on the first spoke.
    n = len(categories) - 1
    rows = []
    for i, (cat, r) in enumerate(zip(categories, values)):
        angle = 2 * math.pi * i / n
        rows.append(
            {
                "series": name,
                "dimension": cat,
                "score": r,
                "position": i,
                "px": r * math.sin(angle),
                "py": r * math.cos(angle),
            }
        )
    return pd.DataFrame(rows)


def _grid_layers(categories: List[str]) -> List[alt.Chart]:
    n = len(categories)
    rings = []
    for tick in RADIAL_TICKS[1:]:
        for i in range(n + 1):
            angle = 2 * math.pi * (i % n) / n
            rings.append({"ring": tick, "position": i, "px": tick * math.sin(angle), "py": tick * math.cos(angle)})
    labels = [
        {
            "dimension": cat,
            "px": LABEL_RADIUS * math.sin(2 * math.pi * i / n),
            "py": LABEL_RADIUS * math.cos(2 * math.pi * i / n),
        }
        for i, cat in enumerate(categories)
    ]
    x = alt.X("px:Q", axis=None, scale=alt.Scale(domain=[-EXTENT, EXTENT]))
    y = alt.Y("py:Q", axis=None, scale=alt.Scale(domain=[-EXTENT, EXTENT]))
    ring_layer = (
        alt.Chart(pd.DataFrame(rings))
        .mark_line(color="#000000", opacity=0.1, strokeWidth=1)
        .encode(x=x, y=y, detail="ring:N", order="position:Q")
    )
    label_layer = alt.Chart(pd.DataFrame(labels)).mark_text(fontSize=11).encode(x=x, y=y, text="dimension:N")
    return [ring_layer, label_layer]


def _polygon_layer(
    frame: pd.DataFrame,
    color: str,
    fill_alpha: str,
    width: int,
    marker: int,
    legend: Optional[Tuple[List[str], List[str]]] = None,
) -> alt.Chart:
    fill_opacity = int(fill_alpha, 16) / 255
    x = alt.X("px:Q", axis=None, scale=alt.Scale(domain=[-EXTENT, EXTENT]))
    y = alt.Y("py:Q", axis=None, scale=alt.Scale(domain=[-EXTENT, EXTENT]))
    encoding: Dict[str, Any] = {
        "x": x,
        "y": y,
        "order": alt.Order("position:Q"),
        "tooltip": [
            alt.Tooltip("series:N", title="Entity"),
            alt.Tooltip("dimension:N", title="Dimension"),
            alt.Tooltip("score:Q", title="Score", format=".1f"),
        ],
    }
    if legend is not None:
        domain, palette = legend
        encoding["color"] = alt.Color(
            "series:N",
            title=None,
            scale=alt.Scale(domain=domain, range=palette),
            legend=alt.Legend(orient="bottom"),
        )
    return (
        alt.Chart(frame)
        .mark_line(
            color=color,
            fill=color,
            fillOpacity=fill_opacity,
            strokeWidth=width,
            point=alt.OverlayMarkDef(filled=True, color=color, size=marker ** 2),
        )
        .encode(**encoding)
    )


def _radar_series(name: str, profile: Dict[str, Any], color: str, fill_alpha: str, width: int, marker: int, subplot: str) -> Series:
    return Series(
        name=name,
        kind="polar",
        x=list(profile["categories"]),
        y=list(profile["values"]),
        labels=[f"{c}: {fmt_number(v)}" for c, v in zip(profile["categories"], profile["values"])],
        color=color,
        style={
            "fill": "toself",
            "fillcolor": with_alpha(color, fill_alpha),
            "width": width,
            "marker_size": marker,
            "subplot": subplot,
            "entity": profile["entity"],
        },
    )


def _polar_axes(rotation: Optional[int] = None, direction: Optional[str] = None) -> Dict[str, Any]:
    angular: Dict[str, Any] = {"order": list(RADAR_DIMENSIONS)}
    if rotation is not None:
        angular["rotation"] = rotation
    if direction is not None:
        angular["direction"] = direction
    return {"radial": {"range": list(RADIAL_RANGE), "tickvals": list(RADIAL_TICKS)}, "angular": angular}


def radar_chart(dataset: Dataset, entity: str = GCC_WEIGHTED) -> ChartSpec:
    profile = radar_profile(dataset, entity)
    color = entity_color(entity)
    series = [_radar_series(entity, profile, color, RADAR_FILL_ALPHA, width=2, marker=8, subplot="polar")]
    layout = Layout(
        title=f"{entity}: Competitiveness Profile",
        axes={"polar": _polar_axes()},
        options={"showlegend": False},
    )
    frame = _polar_frame(entity, profile["categories"], profile["values"])
    chart = (
        alt.layer(*_grid_layers(list(RADAR_DIMENSIONS)), _polygon_layer(frame, color, RADAR_FILL_ALPHA, 2, 8))
        .properties(width=360, height=360, title=layout.title)
    )
    return ChartSpec(name="radar", series=series, layout=layout, vega_lite=to_vega_spec(chart))


def dual_radar_chart(dataset: Dataset, country: str = "UAE", method: str = "Weighted") -> ChartSpec:
    label = normalize_method(method)
    left = radar_profile(dataset, label)
    right = radar_profile(dataset, country)
    left_color = entity_color(label)
    right_color = entity_color(country)

    series = [
        _radar_series(label, left, left_color, RADAR_FILL_ALPHA, width=3, marker=10, subplot="polar"),
        _radar_series(country, right, right_color, RADAR_FILL_ALPHA, width=3, marker=10, subplot="polar2"),
    ]
    annotations = [
        Annotation(x=0.225, y=1.12, text=f"{label}\nScore: {fmt_number(left['overall_score'])}", color=left_color, ref="paper"),
        Annotation(x=0.775, y=1.12, text=f"{country}\nScore: {fmt_number(right['overall_score'])}", color=right_color, ref="paper"),
    ]
    layout = Layout(
        title="Competitiveness Profile Comparison",
        axes={
            "polar": {**_polar_axes(rotation=90), "domain": {"x": [0, 0.45], "y": [0, 1]}},
            "polar2": {**_polar_axes(rotation=90), "domain": {"x": [0.55, 1], "y": [0, 1]}},
        },
        annotations=annotations,
        options={"showlegend": False},
    )

    panels = []
    for name, profile, color in ((label, left, left_color), (country, right, right_color)):
        frame = _polar_frame(name, profile["categories"], profile["values"])
        panels.append(
            alt.layer(*_grid_layers(list(RADAR_DIMENSIONS)), _polygon_layer(frame, color, RADAR_FILL_ALPHA, 3, 10)).properties(
                width=300,
                height=300,
                title=alt.TitleParams(name, subtitle=f"Score: {fmt_number(profile['overall_score'])}", color=color),
            )
        )
    chart = alt.hconcat(*panels).resolve_scale(x="independent", y="independent").properties(title=layout.title)
    return ChartSpec(name="dual_radar", series=series, layout=layout, vega_lite=to_vega_spec(chart))


def overlay_radar_chart(dataset: Dataset, country: str = "UAE", method: str = "Weighted") -> ChartSpec:
    label = normalize_method(method)
    profiles = [radar_profile(dataset, label), radar_profile(dataset, country)]
    colors = [entity_color(label), entity_color(country)]
    names = [f"{p['entity']} ({fmt_number(p['overall_score'])})" for p in profiles]

    series = [
        _radar_series(name, profile, color, OVERLAY_FILL_ALPHA, width=3, marker=10, subplot="polar")
        for name, profile, color in zip(names, profiles, colors)
    ]
    layout = Layout(
        title="Competitiveness Profile Comparison",
        axes={"polar": _polar_axes(rotation=90, direction="clockwise")},
        options={"showlegend": True, "legend": {"orientation": "h", "position": "bottom"}},
    )

    polygons = [
        _polygon_layer(_polar_frame(name, p["categories"], p["values"]), color, OVERLAY_FILL_ALPHA, 3, 10, legend=(names, colors))
        for name, p, color in zip(names, profiles, colors)
    ]
    chart = (
        alt.layer(*_grid_layers(list(RADAR_DIMENSIONS)), *polygons)
        .properties(width=420, height=420, title=layout.title)
    )
    return ChartSpec(name="overlay_radar", series=series, layout=layout, vega_lite=to_vega_spec(chart))

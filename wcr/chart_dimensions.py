from __future__ import annotations

from typing import List, Tuple

import altair as alt
import pandas as pd

from wcr.charts import Annotation, ChartSpec, Layout, Series, fmt_number, to_vega_spec
from wcr.constants import (
    ACHIEVED_COLOR,
    DEFAULT_TIER,
    DIMENSION_COLUMNS,
    DIMENSION_ORDER,
    GAP_COLOR,
    GCC_WEIGHTED,
    HEATMAP_COLORS,
    HEATMAP_DIMENSIONS,
    HEATMAP_MAX,
    HEATMAP_MIN,
    MEMBERS,
    OPPORTUNITY_COLOR,
    PERFORMANCE_TIERS,
)
from wcr.data import Dataset, dimension_breakdown
from wcr.params import normalize_method


def performance_tier(score: float) -> Tuple[str, str]:
    for floor, tier, color in PERFORMANCE_TIERS:
        if score >= floor:
            return tier, color
    return DEFAULT_TIER


def dimensions_chart(dataset: Dataset) -> ChartSpec:
    dims = dimension_breakdown(dataset, GCC_WEIGHTED)
    dims = dims[dims["dimension"] != "Overall"].sort_values("score", kind="mergesort").reset_index(drop=True)
    tiers = [performance_tier(s) for s in dims["score"]]
    dims["performance"] = [t for t, _ in tiers]
    dims["color"] = [c for _, c in tiers]
    dims["label"] = [f"{fmt_number(s)} (Rank #{round(r):.0f})" for s, r in zip(dims["score"], dims["rank"])]

    series = [
        Series(
            name=GCC_WEIGHTED,
            kind="bar",
            x=[float(v) for v in dims["score"]],
            y=dims["dimension"].tolist(),
            labels=dims["label"].tolist(),
            color=dims["color"].tolist(),
            style={
                "orientation": "h",
                "performance": dims["performance"].tolist(),
                "rank": [float(v) for v in dims["rank"]],
                "text_position": "inside",
            },
        )
    ]
    layout = Layout(
        title="GCC GDP-Weighted Performance by Dimension",
        axes={
            "x": {"title": "Score (0-100)", "range": [0, 100], "tickvals": list(range(0, 101, 20))},
            "y": {"title": "", "order": dims["dimension"].tolist()},
        },
        options={"showlegend": False},
    )

    y = alt.Y("dimension:N", title=None, sort=alt.EncodingSortField(field="score", order="descending"))
    bars = (
        alt.Chart(dims)
        .mark_bar(stroke="white", strokeWidth=1)
        .encode(
            x=alt.X("score:Q", title="Score (0-100)", scale=alt.Scale(domain=[0, 100]), axis=alt.Axis(values=list(range(0, 101, 20)))),
            y=y,
            color=alt.Color("color:N", scale=None),
            tooltip=[
                alt.Tooltip("dimension:N", title="Dimension"),
                alt.Tooltip("score:Q", title="Score", format=".1f"),
                alt.Tooltip("rank:Q", title="Global Rank", format=".0f"),
                alt.Tooltip("performance:N", title="Tier"),
            ],
        )
    )
    text = (
        alt.Chart(dims)
        .mark_text(align="right", dx=-8, color="white", fontSize=14)
        .encode(x="score:Q", y=y, text="label:N")
    )
    chart = alt.layer(bars, text).properties(title=layout.title)
    return ChartSpec(name="dimensions", series=series, layout=layout, vega_lite=to_vega_spec(chart))


def heatmap_chart(dataset: Dataset) -> ChartSpec:
    records = []
    matrix: List[List[float]] = []
    for country in MEMBERS:
        row = dataset.factor_row(country)
        values = [float(row[DIMENSION_COLUMNS[d][0]]) for d in HEATMAP_DIMENSIONS]
        matrix.append(values)
        records.extend({"country": country, "dimension": d, "score": v} for d, v in zip(HEATMAP_DIMENSIONS, values))
    cells = pd.DataFrame(records)

    mid = (HEATMAP_MIN + HEATMAP_MAX) / 2
    series = [
        Series(
            name="Scores",
            kind="heatmap",
            x=list(HEATMAP_DIMENSIONS),
            y=list(MEMBERS),
            z=matrix,
            labels=[fmt_number(v) for v in cells["score"]],
            style={
                "zmin": HEATMAP_MIN,
                "zmax": HEATMAP_MAX,
                "colorscale": [[0.0, HEATMAP_COLORS[0]], [0.5, HEATMAP_COLORS[1]], [1.0, HEATMAP_COLORS[2]]],
                "text_color": "white",
            },
        )
    ]
    layout = Layout(
        title="GCC Countries: Competitiveness Heatmap 2025",
        axes={
            "x": {"title": "", "order": list(HEATMAP_DIMENSIONS)},
            "y": {"title": "", "order": list(MEMBERS), "reversed": True},
            "color": {"title": "Score", "tickvals": [50, 60, 70, 80, 90, 100]},
        },
    )

    color = alt.Color(
        "score:Q",
        title="Score",
        scale=alt.Scale(domain=[HEATMAP_MIN, mid, HEATMAP_MAX], range=list(HEATMAP_COLORS), clamp=True),
        legend=alt.Legend(values=[50, 60, 70, 80, 90, 100]),
    )
    x = alt.X("dimension:N", title=None, sort=list(HEATMAP_DIMENSIONS), axis=alt.Axis(labelAngle=0))
    y = alt.Y("country:N", title=None, sort=list(MEMBERS))
    rects = (
        alt.Chart(cells)
        .mark_rect()
        .encode(
            x=x,
            y=y,
            color=color,
            tooltip=[
                alt.Tooltip("country:N", title="Country"),
                alt.Tooltip("dimension:N", title="Dimension"),
                alt.Tooltip("score:Q", title="Score", format=".1f"),
            ],
        )
    )
    text = alt.Chart(cells).mark_text(color="white", fontSize=12).encode(x=x, y=y, text=alt.Text("score:Q", format=".1f"))
    chart = alt.layer(rects, text).properties(title=layout.title)
    return ChartSpec(name="heatmap", series=series, layout=layout, vega_lite=to_vega_spec(chart))


def gap_chart(dataset: Dataset, method: str = "Weighted") -> ChartSpec:
    label = normalize_method(method)
    gap = dimension_breakdown(dataset, label)
    # first dimension wins ties
    widest = gap.loc[gap["gap"].idxmax()]
    annotation = Annotation(
        x=float(widest["score"] + widest["gap"] / 2),
        y=str(widest["dimension"]),
        text=f"{round(float(widest['gap'])):.0f}-point opportunity",
        color=OPPORTUNITY_COLOR,
        arrow=True,
    )

    dims = gap["dimension"].tolist()
    series = [
        Series(
            name="Achieved",
            kind="bar",
            x=[float(v) for v in gap["score"]],
            y=dims,
            labels=[f"{fmt_number(v)}%" for v in gap["score"]],
            color=ACHIEVED_COLOR,
            style={"orientation": "h", "stack": "total", "text_position": "inside"},
        ),
        Series(
            name="Gap to 100",
            kind="bar",
            x=[float(v) for v in gap["gap"]],
            y=dims,
            labels=[f"{fmt_number(v)}%" for v in gap["gap"]],
            color=GAP_COLOR,
            style={"orientation": "h", "stack": "total"},
        ),
    ]
    layout = Layout(
        title="GCC Performance Gap Analysis",
        subtitle=f"{label} - Achieved scores vs. potential improvement",
        axes={
            "x": {"title": "Percentage", "range": [0, 100], "tickvals": [0, 25, 50, 75, 100], "ticksuffix": "%"},
            "y": {"title": "", "order": list(DIMENSION_ORDER)},
        },
        annotations=[annotation],
        options={"barmode": "stack", "largest_gap": str(widest["dimension"]), "legend": {"orientation": "h", "position": "bottom"}},
    )

    long = gap.melt(id_vars="dimension", value_vars=["score", "gap"], var_name="segment", value_name="value")
    long["segment"] = long["segment"].map({"score": "Achieved", "gap": "Gap to 100"})
    long["segment_order"] = long["segment"].map({"Achieved": 0, "Gap to 100": 1})
    y = alt.Y("dimension:N", title=None, sort=list(reversed(DIMENSION_ORDER)))
    bars = (
        alt.Chart(long)
        .mark_bar()
        .encode(
            x=alt.X(
                "value:Q",
                stack="zero",
                title="Percentage",
                scale=alt.Scale(domain=[0, 100]),
                axis=alt.Axis(values=[0, 25, 50, 75, 100], labelExpr="datum.value + '%'"),
            ),
            y=y,
            color=alt.Color(
                "segment:N",
                title=None,
                scale=alt.Scale(domain=["Achieved", "Gap to 100"], range=[ACHIEVED_COLOR, GAP_COLOR]),
                legend=alt.Legend(orient="bottom"),
            ),
            order=alt.Order("segment_order:Q"),
            tooltip=[
                alt.Tooltip("dimension:N", title="Dimension"),
                alt.Tooltip("segment:N", title="Segment"),
                alt.Tooltip("value:Q", title="Percent", format=".1f"),
            ],
        )
    )
    note = pd.DataFrame([{"dimension": annotation.y, "x": annotation.x, "text": annotation.text}])
    note_layer = (
        alt.Chart(note)
        .mark_text(fontSize=11, fontWeight="bold", color=OPPORTUNITY_COLOR)
        .encode(x="x:Q", y=y, text="text:N")
    )
    chart = alt.layer(bars, note_layer).properties(title=alt.TitleParams(layout.title, subtitle=layout.subtitle))
    return ChartSpec(name="gap", series=series, layout=layout, vega_lite=to_vega_spec(chart))

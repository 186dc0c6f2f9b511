from __future__ import annotations

import altair as alt
import numpy as np

from wcr.charts import Annotation, ChartSpec, Layout, Series, entity_color, fmt_number, to_vega_spec
from wcr.constants import (
    AGGREGATE_OUTLINE,
    DISPLAY_NAMES,
    GOLD,
    REGION_AGGREGATE,
    REGION_MEMBER,
    WORLD_DEFAULT_WINDOW,
)
from wcr.data import Dataset, aggregate_world_row, insert_and_rerank
from wcr.params import normalize_method


def world_ranking_chart(dataset: Dataset, method: str = "Weighted") -> ChartSpec:
    label = normalize_method(method)
    world = dataset.world_rankings
    plot = insert_and_rerank(world, [aggregate_world_row(dataset.factors, label)])

    plot["display_name"] = plot["country"].map(DISPLAY_NAMES).fillna(plot["country"])
    plot["color"] = [entity_color(c, r) for c, r in zip(plot["country"], plot["region"])]
    is_aggregate = plot["region"] == REGION_AGGREGATE
    plot["outline"] = np.where(is_aggregate, AGGREGATE_OUTLINE, "transparent")
    plot["outline_width"] = np.where(is_aggregate, 2, 0)
    plot["is_gcc"] = plot["region"].isin([REGION_AGGREGATE, REGION_MEMBER])
    plot["label"] = [
        f"{name}: score {fmt_number(score)}, rank #{rank}"
        for name, score, rank in zip(plot["display_name"], plot["score"], plot["rank"])
    ]
    plot["rank_label"] = "#" + plot["rank"].astype(str)

    agg = plot[plot["country"] == label].iloc[0]
    gcc_rank = int(agg["rank"])
    gcc_score = float(agg["score"])

    series = [
        Series(
            name="World ranking",
            kind="bar",
            x=plot["display_name"].tolist(),
            y=[float(v) for v in plot["score"]],
            labels=plot["label"].tolist(),
            color=plot["color"].tolist(),
            style={
                "outline_color": plot["outline"].tolist(),
                "outline_width": [int(v) for v in plot["outline_width"]],
                "rank": [int(v) for v in plot["rank"]],
                "region": plot["region"].tolist(),
                "is_gcc": [bool(v) for v in plot["is_gcc"]],
            },
        )
    ]
    layout = Layout(
        title="GCC as a Unified Entity: World Ranking Position",
        subtitle=f"All {len(world)} countries + GCC aggregate (use slider to explore)",
        axes={
            "x": {
                "title": "",
                "tickangle": -45,
                "rangeslider": True,
                "range": [-0.5, WORLD_DEFAULT_WINDOW - 0.5],
            },
            "y": {"title": "Competitiveness Score", "range": [0, 105]},
        },
        annotations=[
            Annotation(x=agg["display_name"], y=gcc_score + 3, text=f"#{gcc_rank}", color=GOLD),
        ],
        options={"showlegend": False, "aggregate": label, "aggregate_rank": gcc_rank},
    )

    # Overview strip drives the detail bars; it opens on the top ranks.
    brush = alt.selection_interval(name="rank_window", encodings=["x"], value={"x": [1, WORLD_DEFAULT_WINDOW]})
    base = alt.Chart(plot)
    x_detail = alt.X(
        "display_name:N",
        sort=alt.EncodingSortField(field="rank", order="ascending"),
        title=None,
        axis=alt.Axis(labelAngle=-45, labelFontSize=9),
    )
    bars = (
        base.mark_bar()
        .encode(
            x=x_detail,
            y=alt.Y("score:Q", title="Competitiveness Score", scale=alt.Scale(domain=[0, 105])),
            color=alt.Color("color:N", scale=None),
            stroke=alt.Stroke("outline:N", scale=None),
            strokeWidth=alt.StrokeWidth("outline_width:Q", scale=None),
            tooltip=[
                alt.Tooltip("display_name:N", title="Country"),
                alt.Tooltip("score:Q", title="Score", format=".1f"),
                alt.Tooltip("rank:Q", title="Rank"),
            ],
        )
        .transform_filter(brush)
    )
    rank_text = (
        base.mark_text(dy=-10, fontSize=14, fontWeight="bold", color=GOLD)
        .encode(x=x_detail, y="score:Q", text="rank_label:N")
        .transform_filter(brush)
        .transform_filter(alt.datum.country == label)
    )
    overview = (
        base.mark_bar()
        .encode(
            x=alt.X("rank:Q", title="Rank", scale=alt.Scale(domain=[1, len(plot)])),
            y=alt.Y("score:Q", title=None, axis=None),
            color=alt.Color("color:N", scale=None),
        )
        .add_params(brush)
        .properties(height=50)
    )
    chart = alt.vconcat(
        alt.layer(bars, rank_text).properties(height=320),
        overview,
    ).properties(title=alt.TitleParams(layout.title, subtitle=layout.subtitle))

    return ChartSpec(name="world_ranking", series=series, layout=layout, vega_lite=to_vega_spec(chart))

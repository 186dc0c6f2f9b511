from __future__ import annotations

from typing import Any, Dict, Iterable, List, Union

import altair as alt
import pandas as pd

from wcr.charts import Annotation, ChartSpec, Layout, Series, fmt_number, to_vega_spec
from wcr.constants import ENTITY_COLORS, GCC_AVERAGE, RANK_BANDS, SURVEY_YEAR, TRAJECTORY_SERIES, TRAJECTORY_START_YEAR
from wcr.data import Dataset, trajectory_series
from wcr.params import normalize_highlight

HIGHLIGHT_STYLE = {"opacity": 1.0, "width": 2, "marker_size": 10}
MUTED_STYLE = {"opacity": 0.2, "width": 1, "marker_size": 5}
AVERAGE_WIDTH = 4


def _line_style(name: str, highlighted: bool) -> Dict[str, Any]:
    is_average = name == GCC_AVERAGE
    style = dict(HIGHLIGHT_STYLE if highlighted else MUTED_STYLE)
    if highlighted and is_average:
        style["width"] = AVERAGE_WIDTH
    style["dash"] = "dash" if is_average else "solid"
    style["mode"] = "lines+markers"
    style["highlighted"] = highlighted
    return style


def trajectory_chart(
    dataset: Dataset,
    highlight: Union[str, Iterable[str], None] = "All",
) -> ChartSpec:
    data = trajectory_series(dataset)
    names = [n for n in TRAJECTORY_SERIES if n in set(data["country"])]
    selected = normalize_highlight(highlight, names)
    highlight_all = len(selected) == len(names)

    series: List[Series] = []
    annotations: List[Annotation] = []
    frames: List[pd.DataFrame] = []
    for name in names:
        rows = data[data["country"] == name].sort_values("year")
        on = name in selected
        style = _line_style(name, on)
        color = ENTITY_COLORS[name]
        series.append(
            Series(
                name=name,
                kind="line",
                x=[int(v) for v in rows["year"]],
                y=[float(v) for v in rows["overall_rank"]],
                labels=[f"{name} ({int(y)}): rank #{fmt_number(r)}" for y, r in zip(rows["year"], rows["overall_rank"])],
                color=color,
                style=style,
            )
        )
        frames.append(
            rows.assign(
                color=color,
                opacity=style["opacity"],
                stroke_width=style["width"],
                marker_area=style["marker_size"] ** 2,
                dash=style["dash"],
            )
        )
        if on and not highlight_all:
            latest = rows.iloc[-1]
            annotations.append(
                Annotation(
                    x=int(latest["year"]),
                    y=float(latest["overall_rank"]),
                    text=f"{name} #{round(float(latest['overall_rank'])):.0f}",
                    color=color,
                    arrow=True,
                )
            )

    years = list(range(TRAJECTORY_START_YEAR, SURVEY_YEAR + 1))
    layout = Layout(
        title="GCC Competitiveness Journey: 2021-2025",
        axes={
            "x": {"title": "", "tickvals": years, "range": [TRAJECTORY_START_YEAR - 0.5, SURVEY_YEAR + 0.5]},
            "y": {
                "title": "Global Rank (lower is better)",
                "reversed": True,
                "range": [42, 0],
                "tickvals": [0, 10, 20, 30, 40],
            },
        },
        annotations=annotations,
        options={
            "highlight": list(selected),
            "highlight_all": highlight_all,
            "bands": [{"x": [years[0], years[-1]], "y": [top, bottom], "fill": fill} for top, bottom, fill in RANK_BANDS],
            "legend": {"orientation": "h", "position": "bottom"},
            "hovermode": "closest",
        },
    )

    chart = _vega_chart(pd.concat(frames, ignore_index=True), names, years, annotations, layout.title)
    return ChartSpec(name="trajectory", series=series, layout=layout, vega_lite=to_vega_spec(chart))


def _vega_chart(
    frame: pd.DataFrame,
    names: List[str],
    years: List[int],
    annotations: List[Annotation],
    title: str,
) -> alt.LayerChart:
    x_scale = alt.Scale(domain=[years[0] - 0.5, years[-1] + 0.5])
    x = alt.X(
        "year:Q",
        title=None,
        scale=x_scale,
        axis=alt.Axis(values=years, format="d", grid=False),
    )
    y_scale = alt.Scale(domain=[0, 42], reverse=True)
    bands = pd.DataFrame(
        [{"x0": years[0], "x1": years[-1], "y0": top, "y1": bottom, "fill": fill} for top, bottom, fill in RANK_BANDS]
    )
    band_layer = (
        alt.Chart(bands)
        .mark_rect()
        .encode(
            x=alt.X("x0:Q", scale=x_scale),
            x2="x1:Q",
            y=alt.Y("y0:Q", scale=y_scale),
            y2="y1:Q",
            fill=alt.Fill("fill:N", scale=None),
        )
    )
    color = alt.Color(
        "country:N",
        title=None,
        scale=alt.Scale(domain=names, range=[ENTITY_COLORS[n] for n in names]),
        legend=alt.Legend(orient="bottom"),
    )
    lines = (
        alt.Chart(frame)
        .mark_line()
        .encode(
            x=x,
            y=alt.Y("overall_rank:Q", title="Global Rank (lower is better)", scale=y_scale, axis=alt.Axis(values=[0, 10, 20, 30, 40])),
            color=color,
            detail="country:N",
            opacity=alt.Opacity("opacity:Q", scale=None, legend=None),
            strokeWidth=alt.StrokeWidth("stroke_width:Q", scale=None, legend=None),
            strokeDash=alt.StrokeDash(
                "dash:N",
                scale=alt.Scale(domain=["solid", "dash"], range=[[1, 0], [6, 4]]),
                legend=None,
            ),
        )
    )
    points = (
        alt.Chart(frame)
        .mark_point(filled=True)
        .encode(
            x=x,
            y=alt.Y("overall_rank:Q", scale=y_scale),
            color=color,
            opacity=alt.Opacity("opacity:Q", scale=None, legend=None),
            size=alt.Size("marker_area:Q", scale=None, legend=None),
            tooltip=[
                alt.Tooltip("country:N", title="Country"),
                alt.Tooltip("year:Q", title="Year", format="d"),
                alt.Tooltip("overall_rank:Q", title="Rank", format=".1f"),
            ],
        )
    )
    layers = [band_layer, lines, points]
    if annotations:
        labels = pd.DataFrame([{"year": a.x, "overall_rank": a.y, "text": a.text, "color": a.color} for a in annotations])
        layers.append(
            alt.Chart(labels)
            .mark_text(align="left", dx=12, fontSize=11, fontWeight="bold")
            .encode(x=x, y=alt.Y("overall_rank:Q", scale=y_scale), text="text:N", fill=alt.Fill("color:N", scale=None))
        )
    return alt.layer(*layers).properties(title=title)

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import altair as alt

from wcr.constants import DEFAULT_COLOR, ENTITY_COLORS, COUNTRY_COLORS, REGION_COLORS

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


@dataclass(frozen=True)
class Annotation:
    x: Any
    y: Any
    text: str
    color: Optional[str] = None
    arrow: bool = False
    ref: str = "data"


@dataclass(frozen=True)
class Series:
    name: str
    kind: str
    x: List[Any]
    y: List[Any]
    labels: List[str] = field(default_factory=list)
    color: Union[str, List[str], None] = None
    style: Dict[str, Any] = field(default_factory=dict)
    z: Optional[List[List[Any]]] = None


@dataclass(frozen=True)
class Layout:
    title: str
    subtitle: Optional[str] = None
    axes: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    annotations: List[Annotation] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ChartSpec:
    """Renderer-agnostic chart description.

    ``series`` and ``layout`` carry the data and styling decisions; ``vega_lite``
    is the same chart compiled through Altair for Vega-Lite renderers.
    """

    name: str
    series: List[Series]
    layout: Layout
    vega_lite: Dict[str, Any] = field(default_factory=dict, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def entity_color(country: str, region: Optional[str] = None) -> str:
    # member color > aggregate-region color > grey
    if country in COUNTRY_COLORS:
        return COUNTRY_COLORS[country]
    if region is not None and region in REGION_COLORS:
        return REGION_COLORS[region]
    return ENTITY_COLORS.get(country, DEFAULT_COLOR)


def with_alpha(hex_color: str, alpha: str) -> str:
    """Append a two-digit hex alpha to a ``#rrggbb`` color."""
    return f"{hex_color}{alpha}" if len(hex_color) == 7 else hex_color


def close_polygon(categories: Sequence[str], values: Sequence[float]) -> Tuple[List[str], List[float]]:
    cats = list(categories)
    vals = [float(v) for v in values]
    if not cats:
        return cats, vals
    return cats + cats[:1], vals + vals[:1]


def fmt_number(value: float, ndigits: int = 1) -> str:
    """Round for display, dropping a trailing ``.0`` (``21.0`` -> ``21``)."""
    return f"{round(float(value), ndigits):g}"

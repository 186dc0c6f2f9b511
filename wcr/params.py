from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Literal, Optional, Sequence, Tuple, Union

from wcr.constants import GCC_SIMPLE, GCC_WEIGHTED
from wcr.errors import EntityNotFound, InvalidParameter

AggregationMethod = Literal["Simple", "Weighted"]

HIGHLIGHT_ALL = "All"

_METHOD_TOKENS = {
    "simple": GCC_SIMPLE,
    "weighted": GCC_WEIGHTED,
    GCC_SIMPLE.lower(): GCC_SIMPLE,
    GCC_WEIGHTED.lower(): GCC_WEIGHTED,
}


def normalize_method(value: object) -> str:
    """Map an aggregation toggle token to the aggregate row label.

    Accepts ``Simple`` / ``Weighted`` (any case) and the full row labels.
    Anything else is rejected rather than guessed.
    """
    if not isinstance(value, str):
        raise InvalidParameter(f"Aggregation method must be a string, got {type(value).__name__}")
    label = _METHOD_TOKENS.get(value.strip().lower())
    if label is None:
        raise InvalidParameter(f"Unsupported aggregation method {value!r}; expected 'Simple' or 'Weighted'")
    return label


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    out: List[str] = []
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        if s:
            out.append(s)
    return out


def normalize_highlight(
    highlight: Union[str, Iterable[str], None],
    options: Sequence[str],
) -> Tuple[str, ...]:
    """Resolve a highlight selection against the available series.

    Empty selections, ``"All"``, and selections covering every option all
    resolve to the full option tuple. Unknown names raise EntityNotFound.
    """
    selected = _as_str_list(highlight)
    if not selected or HIGHLIGHT_ALL in selected:
        return tuple(options)
    for name in selected:
        if name not in options:
            raise EntityNotFound(name, options)
    chosen = set(selected)
    return tuple(o for o in options if o in chosen)


@dataclass(frozen=True)
class ChartParams:
    method: str = GCC_WEIGHTED
    highlight: Tuple[str, ...] = field(default_factory=tuple)
    country: str = "UAE"
    entity: str = GCC_WEIGHTED


def normalize_params(raw: dict) -> ChartParams:
    method = raw.get("method")
    method = normalize_method("Weighted" if method is None else method)
    highlight = tuple(_as_str_list(raw.get("highlight")))
    country = (raw.get("country") or "UAE").strip()
    entity = (raw.get("entity") or method).strip()
    return ChartParams(method=method, highlight=highlight, country=country, entity=entity)

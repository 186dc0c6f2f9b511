from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from wcr.constants import (
    DIMENSION_COLUMNS,
    GCC_SIMPLE,
    GCC_WEIGHTED,
    GDP_COLUMN,
    ISO_CODES,
    MEMBERS,
    NEGATIVE_COLOR,
    POSITIVE_COLOR,
    RADAR_DIMENSIONS,
)
from wcr.data import Dataset
from wcr.params import normalize_method


def gdp_weight_shares(dataset: Dataset) -> pd.DataFrame:
    weights = dataset.gdp_weights
    total = float(weights[GDP_COLUMN].sum())
    weights["code"] = weights["country"].map(ISO_CODES)
    weights["share"] = weights[GDP_COLUMN] / total
    return weights.sort_values("share", ascending=False, kind="mergesort").reset_index(drop=True)


def method_explanation(dataset: Dataset, method: str) -> Dict[str, Any]:
    label = normalize_method(method)
    shares = gdp_weight_shares(dataset)
    if label == GCC_WEIGHTED:
        largest = shares.iloc[0]
        detail = " | ".join(f"{code} {share:.0%}" for code, share in zip(shares["code"], shares["share"]))
        return {
            "method": label,
            "headline": "GDP weights",
            "detail": detail,
            "body": (
                f"{largest['country']}'s ${float(largest[GDP_COLUMN]) / 1000:.1f} trillion economy "
                "significantly influences the regional aggregate."
            ),
            "weights": shares[["country", "code", "share"]].to_dict(orient="records"),
        }

    # Members above the simple mean that are not the dominant economy gain the most from equal weighting.
    factors = dataset.factors
    members = factors[factors["country"].isin(MEMBERS)]
    simple_score = dataset.overall_score(GCC_SIMPLE)
    largest = str(shares.iloc[0]["country"])
    small_leaders = [
        str(c)
        for c in members.sort_values("overall_score", ascending=False, kind="mergesort")
        .query("overall_score > @simple_score and country != @largest")["country"]
    ]
    body = "Smaller economies have equal influence to larger economies."
    if small_leaders:
        body = f"Smaller high-performers ({', '.join(small_leaders)}) have equal influence to larger economies."
    return {
        "method": label,
        "headline": "Simple average",
        "detail": f"All {len(members)} countries weighted equally",
        "body": body,
        "weights": [
            {"country": c, "code": ISO_CODES.get(c), "share": 1 / len(members)} for c in members["country"]
        ],
    }


def compare_profiles(dataset: Dataset, country: str, method: str = "Weighted") -> Dict[str, Any]:
    """Country vs aggregate: overall gap plus strongest / weakest sub-dimension."""
    label = normalize_method(method)
    aggregate = dataset.factor_row(label)
    row = dataset.factor_row(country)

    diffs = {d: float(row[DIMENSION_COLUMNS[d][0]]) - float(aggregate[DIMENSION_COLUMNS[d][0]]) for d in RADAR_DIMENSIONS}
    strongest = max(diffs, key=diffs.__getitem__)
    weakest = min(diffs, key=diffs.__getitem__)
    overall = round(float(row["overall_score"]) - float(aggregate["overall_score"]), 1)
    return {
        "country": country,
        "aggregate": label,
        "overall_diff": overall,
        "overall_color": POSITIVE_COLOR if overall >= 0 else NEGATIVE_COLOR,
        "strongest": {"dimension": strongest, "diff": round(diffs[strongest], 1)},
        "weakest": {"dimension": weakest, "diff": round(diffs[weakest], 1)},
        "differences": {d: round(v, 1) for d, v in diffs.items()},
    }

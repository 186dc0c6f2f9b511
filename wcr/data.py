from __future__ import annotations

import logging
from dataclasses import InitVar, dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Tuple

import numpy as np
import pandas as pd

from wcr.constants import (
    AGGREGATES,
    DIMENSION_COLUMNS,
    DIMENSION_ORDER,
    FACTOR_COLUMNS,
    FIRST_YEAR,
    FIVE_YEAR_FACTORS,
    FUSION_BASE_URL,
    FUSION_DATAFLOW,
    GCC_AVERAGE,
    GCC_SIMPLE,
    GCC_WEIGHTED,
    GDP_COLUMN,
    MEMBERS,
    REGION_AGGREGATE,
    REGION_MEMBER,
    REGION_OTHER,
    SURVEY_YEAR,
    TRAJECTORY_START_YEAR,
)
from wcr.errors import DataUnavailable, EntityNotFound

logger = logging.getLogger(__name__)

TABLE_NAMES: Tuple[str, ...] = (
    "gdp_weights",
    "overall_rankings",
    "factors",
    "world_rankings",
    "world_rankings_with_gcc",
    "rankings_5yr",
)


@dataclass(frozen=True)
class Dataset:
    """Immutable bundle of the WCR tables.

    Tables are only reachable through ``table()`` and the named properties,
    which return copies, so callers may reshape what they get back without
    touching the shared instance.
    """

    tables: InitVar[Mapping[str, pd.DataFrame]]
    _tables: Mapping[str, pd.DataFrame] = field(init=False, repr=False, compare=False)

    def __post_init__(self, tables: Mapping[str, pd.DataFrame]) -> None:
        missing = [name for name in TABLE_NAMES if name not in tables]
        if missing:
            raise ValueError(f"Dataset is missing tables: {', '.join(missing)}")
        frozen = {name: tables[name].copy() for name in TABLE_NAMES}
        object.__setattr__(self, "_tables", MappingProxyType(frozen))

    def table(self, name: str) -> pd.DataFrame:
        return self._tables[name].copy()

    @property
    def gdp_weights(self) -> pd.DataFrame:
        return self.table("gdp_weights")

    @property
    def overall_rankings(self) -> pd.DataFrame:
        return self.table("overall_rankings")

    @property
    def factors(self) -> pd.DataFrame:
        return self.table("factors")

    @property
    def world_rankings(self) -> pd.DataFrame:
        return self.table("world_rankings")

    @property
    def world_rankings_with_gcc(self) -> pd.DataFrame:
        return self.table("world_rankings_with_gcc")

    @property
    def rankings_5yr(self) -> pd.DataFrame:
        return self.table("rankings_5yr")

    @property
    def entities(self) -> List[str]:
        return [str(c) for c in self._tables["factors"]["country"].tolist()]

    @property
    def members(self) -> List[str]:
        return [c for c in self.entities if c in MEMBERS]

    @property
    def aggregates(self) -> List[str]:
        return [c for c in self.entities if c in AGGREGATES]

    def factor_row(self, entity: str) -> pd.Series:
        factors = self._tables["factors"]
        match = factors[factors["country"] == entity]
        if match.empty:
            raise EntityNotFound(entity, self.entities)
        return match.iloc[0].copy()

    def overall_score(self, entity: str) -> float:
        return float(self.factor_row(entity)["overall_score"])


# ---------------- Source tables ----------------
def _gdp_weights() -> pd.DataFrame:
    # 2024, USD billions
    return pd.DataFrame(
        {
            "country": ["UAE", "Qatar", "Saudi Arabia", "Bahrain", "Oman", "Kuwait"],
            GDP_COLUMN: [552.3, 219.2, 1085.4, 46.9, 109.7, 160.2],
        }
    )


def _overall_rankings() -> pd.DataFrame:
    ranks = {
        "UAE": [9, 9, 12, 10, 7, 5],
        "Saudi Arabia": [24, 32, 24, 17, 16, 17],
        "Qatar": [14, 17, 18, 12, 11, 9],
        "Bahrain": [None, None, 30, 25, 21, 22],
        "Kuwait": [None, None, None, 38, 37, 36],
        "Oman": [None, None, None, None, None, 28],
    }
    years = list(range(FIRST_YEAR, SURVEY_YEAR + 1))
    rows = [
        {"country": country, "year": year, "overall_rank": rank}
        for country, values in ranks.items()
        for year, rank in zip(years, values)
    ]
    df = pd.DataFrame(rows)
    df["overall_rank"] = df["overall_rank"].astype("Int64")
    return df


def _member_factors() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "country": ["UAE", "Saudi Arabia", "Qatar", "Bahrain", "Kuwait", "Oman"],
            "year": SURVEY_YEAR,
            "overall_rank": [5, 17, 9, 22, 36, 28],
            "overall_score": [96.09, 82.09, 89.93, 76.56, 68.69, 72.86],
            "econ_rank": [2, 17, 7, 18, 43, 48],
            "econ_score": [79.64, 62.29, 69.53, 61.10, 49.60, 48.63],
            "gov_rank": [4, 17, 7, 28, 19, 16],
            "gov_score": [87.28, 69.26, 82.88, 57.73, 67.26, 69.97],
            "biz_rank": [3, 12, 5, 14, 31, 21],
            "biz_score": [92.55, 81.40, 91.41, 78.13, 56.86, 65.72],
            "infra_rank": [23, 31, 30, 36, 43, 38],
            "infra_score": [69.00, 59.50, 60.00, 53.38, 45.14, 51.21],
        }
    )


_WORLD_2025: Tuple[Tuple[str, float], ...] = (
    ("Switzerland", 100.00), ("Singapore", 99.44), ("Hong Kong SAR", 99.22), ("Denmark", 97.51),
    ("UAE", 96.09), ("Taiwan", 93.71), ("Ireland", 91.31), ("Sweden", 90.20),
    ("Qatar", 89.93), ("Netherlands", 89.75), ("Canada", 88.73), ("Norway", 86.17),
    ("USA", 84.27), ("Finland", 83.83), ("Iceland", 83.49), ("China", 82.13),
    ("Saudi Arabia", 82.09), ("Australia", 78.36), ("Germany", 78.24), ("Luxembourg", 78.17),
    ("Lithuania", 77.68), ("Bahrain", 76.56), ("Malaysia", 74.81), ("Belgium", 74.57),
    ("Czech Republic", 73.66), ("Austria", 73.55), ("Korea Rep.", 73.39), ("Oman", 72.86),
    ("United Kingdom", 71.95), ("Thailand", 71.32), ("New Zealand", 70.23), ("France", 69.93),
    ("Estonia", 69.65), ("Kazakhstan", 68.99), ("Japan", 68.74), ("Kuwait", 68.69),
    ("Portugal", 67.84), ("Latvia", 67.03), ("Spain", 65.80), ("Indonesia", 64.32),
    ("India", 64.19), ("Chile", 62.52), ("Italy", 62.50), ("Cyprus", 61.80),
    ("Puerto Rico", 61.03), ("Slovenia", 59.14), ("Jordan", 57.79), ("Hungary", 56.71),
    ("Romania", 56.64), ("Greece", 55.33), ("Philippines", 54.88), ("Poland", 53.91),
    ("Croatia", 51.19), ("Colombia", 49.66), ("Mexico", 48.84), ("Kenya", 48.29),
    ("Bulgaria", 47.96), ("Brazil", 46.41), ("Botswana", 46.12), ("Peru", 45.89),
    ("Ghana", 44.25), ("Argentina", 42.84), ("Slovak Republic", 42.79), ("South Africa", 41.98),
    ("Mongolia", 40.91), ("Türkiye", 40.41), ("Nigeria", 39.73), ("Namibia", 37.48),
    ("Venezuela", 25.47),
)


def _world_rankings() -> pd.DataFrame:
    df = pd.DataFrame(list(_WORLD_2025), columns=["country", "score"])
    df.insert(0, "rank", range(1, len(df) + 1))
    df["region"] = np.where(df["country"].isin(MEMBERS), REGION_MEMBER, REGION_OTHER)
    return df


def _rankings_5yr() -> pd.DataFrame:
    # country -> per-year ranks for (Overall, Econ Perf, Gov Eff, Bus Eff, Infra)
    by_year: Dict[int, Dict[str, List[Any]]] = {
        2021: {
            "UAE": [9, 30, 3, 8, 28],
            "Qatar": [17, 6, 6, 15, 40],
            "Saudi Arabia": [32, 24, 26, 15, 36],
        },
        2022: {
            "UAE": [12, 15, 17, 6, 26],
            "Qatar": [18, 7, 7, 14, 38],
            "Saudi Arabia": [24, 19, 16, 9, 34],
            "Bahrain": [30, 39, 20, 24, 39],
        },
        2023: {
            "UAE": [10, 36, 16, 4, 26],
            "Qatar": [12, 4, 4, 12, 33],
            "Saudi Arabia": [17, 11, 13, 6, 34],
            "Bahrain": [25, 23, 20, 22, 37],
            "Kuwait": [38, 19, 42, 42, 49],
        },
        2024: {
            "UAE": [7, 11, 10, 2, 25],
            "Qatar": [11, 4, 4, 11, 33],
            "Saudi Arabia": [16, 12, 12, 4, 34],
            "Bahrain": [21, 18, 21, 16, 39],
            "Kuwait": [37, 31, 36, 36, 46],
        },
        2025: {
            "UAE": [5, 2, 4, 3, 23],
            "Qatar": [9, 7, 7, 5, 30],
            "Saudi Arabia": [17, 17, 17, 12, 31],
            "Bahrain": [22, 18, 28, 14, 36],
            "Kuwait": [36, 43, 19, 31, 43],
            "Oman": [28, 48, 16, 21, 38],
        },
    }
    rows = []
    for country in ("UAE", "Qatar", "Saudi Arabia", "Bahrain", "Kuwait", "Oman"):
        for i, factor in enumerate(FIVE_YEAR_FACTORS):
            row: Dict[str, Any] = {"country": country, "factor": factor}
            for year, table in by_year.items():
                values = table.get(country)
                row[f"year_{year}"] = values[i] if values is not None else None
            rows.append(row)
    df = pd.DataFrame(rows)
    for year in by_year:
        df[f"year_{year}"] = df[f"year_{year}"].astype("Int64")
    return df


# ---------------- Derivations ----------------
def compute_aggregate(factors: pd.DataFrame, label: str, *, weighted: bool) -> Dict[str, Any]:
    """Collapse the member rows into one synthetic row.

    Simple: arithmetic mean of each rank/score column. Weighted: mean weighted
    by each member's 2024 GDP. The GDP field is always the member total.
    """
    members = factors[factors["country"].isin(MEMBERS)]
    if members.empty:
        raise EntityNotFound(label, MEMBERS)
    gdp = members[GDP_COLUMN].astype(float)
    row: Dict[str, Any] = {"country": label, "year": SURVEY_YEAR}
    for col in FACTOR_COLUMNS:
        values = members[col].astype(float)
        if weighted:
            row[col] = float(np.average(values, weights=gdp))
        else:
            row[col] = float(values.mean())
    row[GDP_COLUMN] = float(gdp.sum())
    return row


def insert_and_rerank(world: pd.DataFrame, rows: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    """Append synthetic rows, then re-sort by score and reassign dense ranks.

    Ties keep their input order (existing rows first, then ``rows`` in order).
    Always returns a new frame.
    """
    extra = pd.DataFrame(list(rows), columns=list(world.columns))
    combined = world.copy() if extra.empty else pd.concat([world, extra], ignore_index=True)
    combined = combined.sort_values("score", ascending=False, kind="mergesort").reset_index(drop=True)
    combined["rank"] = range(1, len(combined) + 1)
    return combined


def aggregate_world_row(factors: pd.DataFrame, label: str) -> Dict[str, Any]:
    match = factors[factors["country"] == label]
    if match.empty:
        raise EntityNotFound(label, factors["country"].tolist())
    return {
        "rank": None,
        "country": label,
        "score": float(match.iloc[0]["overall_score"]),
        "region": REGION_AGGREGATE,
    }


def build_dataset() -> Dataset:
    gdp_weights = _gdp_weights()
    factors = _member_factors().merge(gdp_weights, on="country", how="left")

    gcc_simple = compute_aggregate(factors, GCC_SIMPLE, weighted=False)
    gcc_weighted = compute_aggregate(factors, GCC_WEIGHTED, weighted=True)
    factors = pd.concat([factors, pd.DataFrame([gcc_simple, gcc_weighted])], ignore_index=True)

    world = _world_rankings()
    world_with_gcc = insert_and_rerank(world, [aggregate_world_row(factors, label) for label in AGGREGATES])

    logger.debug(
        "Built WCR dataset: %d factor rows, %d world rows (+%d aggregates), simple=%.2f weighted=%.2f",
        len(factors),
        len(world),
        len(AGGREGATES),
        gcc_simple["overall_score"],
        gcc_weighted["overall_score"],
    )
    return Dataset(
        tables={
            "gdp_weights": gdp_weights,
            "overall_rankings": _overall_rankings(),
            "factors": factors,
            "world_rankings": world,
            "world_rankings_with_gcc": world_with_gcc,
            "rankings_5yr": _rankings_5yr(),
        }
    )


@lru_cache(maxsize=1)
def load_dataset() -> Dataset:
    return build_dataset()


def load_live_dataset(base_url: str = FUSION_BASE_URL, dataflow_id: str = FUSION_DATAFLOW) -> Dataset:
    """Placeholder for loading WCR tables from the Fusion Registry SDMX API.

    Always raises DataUnavailable; it never returns partial or fabricated data.
    """
    logger.warning("Live WCR load requested (%s, dataflow %s) but no live source is configured", base_url, dataflow_id)
    raise DataUnavailable(
        f"Fusion Registry integration is not implemented ({base_url}, dataflow {dataflow_id}); use build_dataset() instead."
    )


# ---------------- Derived views ----------------
def trajectory_series(dataset: Dataset) -> pd.DataFrame:
    """Yearly overall ranks from 2021 on, plus a per-year ``GCC Average`` row.

    The average only covers countries ranked that year, so its denominator
    grows as members join the survey.
    """
    ranks = dataset.overall_rankings
    trajectory = ranks[(ranks["year"] >= TRAJECTORY_START_YEAR) & ranks["overall_rank"].notna()].copy()
    trajectory["overall_rank"] = trajectory["overall_rank"].astype(float)
    gcc_avg = (
        trajectory.groupby("year", as_index=False)
        .agg(overall_rank=("overall_rank", "mean"))
        .assign(country=GCC_AVERAGE)
    )
    return pd.concat([trajectory, gcc_avg[["country", "year", "overall_rank"]]], ignore_index=True)


def dimension_breakdown(dataset: Dataset, entity: str = GCC_WEIGHTED) -> pd.DataFrame:
    row = dataset.factor_row(entity)
    records = []
    for dimension in DIMENSION_ORDER:
        score_col, rank_col = DIMENSION_COLUMNS[dimension]
        score = float(row[score_col])
        records.append({"dimension": dimension, "score": score, "rank": float(row[rank_col]), "gap": 100.0 - score})
    return pd.DataFrame(records, columns=["dimension", "score", "rank", "gap"])

from __future__ import annotations

import logging
import math
from typing import Callable

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import ChartParamsModel, MetaEntitiesResponse
from wcr.chart_dimensions import dimensions_chart, gap_chart, heatmap_chart
from wcr.chart_radar import dual_radar_chart, overlay_radar_chart, radar_chart
from wcr.chart_trajectory import trajectory_chart
from wcr.chart_world import world_ranking_chart
from wcr.data import Dataset, dimension_breakdown, load_dataset, trajectory_series
from wcr.errors import DataUnavailable, EntityNotFound, InvalidParameter
from wcr.narrative import compare_profiles, method_explanation
from wcr.params import ChartParams, normalize_params


logger = logging.getLogger(__name__)

# Local story shell
SHELL_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

app = FastAPI(title="GCC Competitiveness Story API", version="0.1.0")
app.add_middleware(CORSMiddleware, allow_origins=SHELL_ORIGINS, allow_methods=["GET", "POST"], allow_headers=["*"])

_ERROR_STATUS = (
    (EntityNotFound, 404),
    (InvalidParameter, 422),
    (DataUnavailable, 503),
)


def _entities(dataset: Dataset) -> dict:
    return MetaEntitiesResponse(
        members=dataset.members,
        aggregates=dataset.aggregates,
        entities=dataset.entities,
    ).model_dump()


def _params_from_model(model: ChartParamsModel) -> ChartParams:
    return normalize_params(model.model_dump())


def _finite(value: float) -> float | None:
    out = float(value)
    return out if math.isfinite(out) else None


# NaN and pd.NA serialize as null
_ENCODERS = {
    type(pd.NA): lambda _: None,
    float: _finite,
    np.floating: _finite,
    np.integer: int,
    np.bool_: bool,
}


def _json(data: object) -> JSONResponse:
    return JSONResponse(content=jsonable_encoder(data, custom_encoder=_ENCODERS))


def _run(name: str, compute: Callable[[], object]) -> JSONResponse:
    try:
        return _json(compute())
    except Exception as exc:
        for exc_type, status in _ERROR_STATUS:
            if isinstance(exc, exc_type):
                logger.info("%s rejected: %s", name, exc)
                return JSONResponse(status_code=status, content={"error": str(exc), "type": type(exc).__name__})
        logger.exception("%s failed", name)
        return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/entities")
def meta_entities():
    return _run("meta_entities", lambda: _entities(load_dataset()))


@app.get("/data/factors")
def data_factors():
    return _run("data_factors", lambda: load_dataset().factors.to_dict(orient="records"))


@app.get("/data/world-rankings")
def data_world_rankings():
    return _run("data_world_rankings", lambda: load_dataset().world_rankings_with_gcc.to_dict(orient="records"))


@app.get("/data/trajectory")
def data_trajectory():
    return _run("data_trajectory", lambda: trajectory_series(load_dataset()).to_dict(orient="records"))


@app.get("/data/dimensions")
def data_dimensions(entity: str = Query(default="GCC (Weighted)")):
    return _run("data_dimensions", lambda: dimension_breakdown(load_dataset(), entity).to_dict(orient="records"))


@app.post("/charts/world-ranking")
def chart_world_ranking(params: ChartParamsModel):
    def compute():
        p = _params_from_model(params)
        return world_ranking_chart(load_dataset(), p.method).to_dict()

    return _run("world_ranking", compute)


@app.post("/charts/trajectory")
def chart_trajectory(params: ChartParamsModel):
    def compute():
        p = _params_from_model(params)
        return trajectory_chart(load_dataset(), p.highlight).to_dict()

    return _run("trajectory", compute)


@app.post("/charts/dimensions")
def chart_dimensions():
    return _run("dimensions", lambda: dimensions_chart(load_dataset()).to_dict())


@app.post("/charts/heatmap")
def chart_heatmap():
    return _run("heatmap", lambda: heatmap_chart(load_dataset()).to_dict())


@app.post("/charts/gap")
def chart_gap(params: ChartParamsModel):
    def compute():
        p = _params_from_model(params)
        return gap_chart(load_dataset(), p.method).to_dict()

    return _run("gap", compute)


@app.post("/charts/radar")
def chart_radar(params: ChartParamsModel):
    def compute():
        p = _params_from_model(params)
        return radar_chart(load_dataset(), p.entity).to_dict()

    return _run("radar", compute)


@app.post("/charts/radar/dual")
def chart_dual_radar(params: ChartParamsModel):
    def compute():
        p = _params_from_model(params)
        return dual_radar_chart(load_dataset(), p.country, p.method).to_dict()

    return _run("dual_radar", compute)


@app.post("/charts/radar/overlay")
def chart_overlay_radar(params: ChartParamsModel):
    def compute():
        p = _params_from_model(params)
        return overlay_radar_chart(load_dataset(), p.country, p.method).to_dict()

    return _run("overlay_radar", compute)


@app.get("/narrative/method")
def narrative_method(method: str = Query(default="Weighted")):
    return _run("narrative_method", lambda: method_explanation(load_dataset(), method))


@app.get("/narrative/comparison")
def narrative_comparison(country: str = Query(default="UAE"), method: str = Query(default="Weighted")):
    return _run("narrative_comparison", lambda: compare_profiles(load_dataset(), country, method))

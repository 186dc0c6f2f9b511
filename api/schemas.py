from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ChartParamsModel(BaseModel):
    method: str = "Weighted"
    highlight: List[str] = Field(default_factory=list)
    country: str = "UAE"
    entity: Optional[str] = None


class MetaEntitiesResponse(BaseModel):
    members: List[str]
    aggregates: List[str]
    entities: List[str]

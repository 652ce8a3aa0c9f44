"""Link Bounded Context - Value Objects."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from domain.coverage.value_objects import LinkBudgetResult
from domain.terrain.value_objects import Building, GeoPoint, LoSResult


class LinkVerdict(str, Enum):
    """Overall feasibility of a point-to-point link."""

    EXCELLENT = "excellent"
    GOOD = "good"
    MARGINAL = "marginal"
    NOT_VIABLE = "not_viable"


class LinkAnalysis(BaseModel):
    """Combined geometric and energetic assessment of one link (Value Object).

    Invariants:
        LA-1: is_viable == los.has_line_of_sight and budget.link_margin_db > 0
        LA-2: verdict == NOT_VIABLE iff not is_viable
    """

    start: GeoPoint | None = None
    end: GeoPoint | None = None
    distance_km: float = Field(ge=0)
    los: LoSResult
    budget: LinkBudgetResult
    is_viable: bool
    verdict: LinkVerdict
    buildings: tuple[Building, ...] = ()  # Buildings considered in the scan

    model_config = ConfigDict(frozen=True)

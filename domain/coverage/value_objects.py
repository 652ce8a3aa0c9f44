"""Coverage Bounded Context - Value Objects.

Immutable data structures describing a LoRa radio setup and the results of
link budget calculations. All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.coverage.config import DEFAULT_FADE_MARGIN_DB, SENSITIVITY_TABLE


class LinkStatus(str, Enum):
    """Link quality derived from link margin relative to the fade margin."""

    EXCELLENT = "excellent"
    GOOD = "good"
    MARGINAL = "marginal"
    POOR = "poor"


# ---------------------------------------------------------------------------
# RFParameters
# ---------------------------------------------------------------------------
class RFParameters(BaseModel):
    """LoRa radio configuration for one link (Value Object).

    Invariants:
        RF-1: bandwidth_khz is a key of the sensitivity table (125/250/500)
        RF-2: spreading_factor in [7, 12]
        RF-3: coding_rate denominator in [5, 8] (4/5 .. 4/8)
        RF-4: frequency_mhz > 0

    Defaults match an EU868 node at 14 dBm with 2 dBi antennas.
    """

    frequency_mhz: float = Field(default=868.0, gt=0)
    bandwidth_khz: int = 125
    spreading_factor: int = Field(default=7, ge=7, le=12)
    coding_rate: int = Field(default=5, ge=5, le=8)
    tx_power_dbm: float = 14.0
    tx_gain_dbi: float = 2.0
    rx_gain_dbi: float = 2.0
    fade_margin_db: float = DEFAULT_FADE_MARGIN_DB

    model_config = ConfigDict(frozen=True)

    @field_validator("bandwidth_khz")
    @classmethod
    def validate_bandwidth(cls, value: int) -> int:
        if value not in SENSITIVITY_TABLE:
            raise ValueError(
                f"bandwidth_khz must be one of {sorted(SENSITIVITY_TABLE)}, got {value}"
            )
        return value


# ---------------------------------------------------------------------------
# LinkBudgetResult
# ---------------------------------------------------------------------------
class LinkBudgetResult(BaseModel):
    """Outcome of a link budget calculation at a given distance (Value Object).

    Fields:
        link_margin_db: rx_power_dbm - sensitivity_dbm
        link_budget_db: link_margin_db - fade_margin_db (headroom left after fading)
    """

    sensitivity_dbm: float
    path_loss_db: float
    rx_power_dbm: float
    link_margin_db: float
    link_budget_db: float
    data_rate_bps: int = Field(ge=0)
    max_fresnel_radius_m: float = Field(ge=0)
    status: LinkStatus
    misc_losses_db: float
    fade_margin_db: float

    model_config = ConfigDict(frozen=True)


class Recommendation(BaseModel):
    """A ranked SF/BW combination for a target distance."""

    sf: int
    bw: int
    data_rate_bps: int
    link_margin_db: float
    score: float

    model_config = ConfigDict(frozen=True)

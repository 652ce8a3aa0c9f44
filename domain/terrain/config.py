"""Terrain Bounded Context - Tunable Thresholds.

The obstruction scan relies on a few fixed heuristics. They are named here and
bundled into ScanSettings so callers can override them per analysis.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

EARTH_RADIUS_KM = 6371.0  # Mean spherical radius
FRESNEL_CLEARANCE_RATIO = 0.6  # Fraction of first Fresnel zone that must be clear
BUILDING_PROXIMITY_M = 50.0  # Max distance from a sample for a building to count
BUILDING_HEIGHT_MARGIN_M = 5.0  # Excess over terrain that marks a building obstruction

# Quality bands for minimum Fresnel clearance (percent)
POOR_CLEARANCE_PCT = 20.0
MARGINAL_CLEARANCE_PCT = 60.0
GOOD_CLEARANCE_PCT = 100.0

DEFAULT_PROFILE_SAMPLES = 50  # Path segments between endpoints
DEFAULT_BUILDING_BUFFER_KM = 0.1  # Search corridor half-width for buildings


class ScanSettings(BaseModel):
    """Thresholds used by the obstruction scan (Value Object)."""

    fresnel_clearance_ratio: float = Field(default=FRESNEL_CLEARANCE_RATIO, gt=0)
    building_proximity_m: float = Field(default=BUILDING_PROXIMITY_M, ge=0)
    building_height_margin_m: float = Field(default=BUILDING_HEIGHT_MARGIN_M, ge=0)
    earth_radius_km: float = Field(default=EARTH_RADIUS_KM, gt=0)

    model_config = ConfigDict(frozen=True)

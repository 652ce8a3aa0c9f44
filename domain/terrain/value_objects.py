"""Terrain Bounded Context - Value Objects.

Immutable data structures representing geographic concepts and the results of
line-of-sight analysis. All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

from enum import Enum

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Numeric Constants
# ---------------------------------------------------------------------------
# Tolerance for floating-point comparisons of profile distances
DISTANCE_TOLERANCE_KM = 1e-6  # 1 mm


class BoundingBox(BaseModel):
    """Extent of a DEM grid in WGS84 degrees (Value Object).

    x is longitude and y is latitude. GridElevationAdapter refuses points
    outside the box rather than extrapolating terrain.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_bounds(self) -> "BoundingBox":
        for lon in (self.min_x, self.max_x):
            if not -180 <= lon <= 180:
                raise ValueError(f"Longitude out of range: {lon}")
        for lat in (self.min_y, self.max_y):
            if not -90 <= lat <= 90:
                raise ValueError(f"Latitude out of range: {lat}")
        # Empty extents cannot hold a single pixel
        if self.min_x >= self.max_x or self.min_y >= self.max_y:
            raise ValueError(
                f"Empty extent: x [{self.min_x}, {self.max_x}], "
                f"y [{self.min_y}, {self.max_y}]"
            )
        return self

    def contains(self, point: "GeoPoint") -> bool:
        """Edges count as inside."""
        return (
            self.min_x <= point.longitude <= self.max_x
            and self.min_y <= point.latitude <= self.max_y
        )


class GeoPoint(BaseModel):
    """Geographic coordinate in WGS84 (Value Object).

    Invariants:
        GP-1: latitude in [-90, 90]
        GP-2: longitude in [-180, 180]

    Pydantic frozen models compare and hash by value.
    """

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# TerrainGrid
# ---------------------------------------------------------------------------
class TerrainGrid(BaseModel):
    """Immutable elevation grid in WGS84 degrees (Value Object).

    Row 0 is the northern edge. NaN marks NoData pixels. The data array is
    copied and made read-only at construction time.
    """

    data: NDArray[np.float32]  # 2D float32 array (height x width), read-only
    bounds: BoundingBox
    resolution: tuple[float, float]  # (x_res, y_res) absolute values in degrees

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def validate_grid(self) -> "TerrainGrid":
        if self.data.ndim != 2:
            raise ValueError(f"Data must be 2D, got {self.data.ndim}D")
        if self.data.shape[0] == 0 or self.data.shape[1] == 0:
            raise ValueError(f"Data cannot be empty: {self.data.shape}")
        if self.resolution[0] <= 0 or self.resolution[1] <= 0:
            raise ValueError(f"Resolution must be positive: {self.resolution}")

        # Owned, contiguous float32 copy so caller arrays are never frozen
        immutable = np.array(self.data, dtype=np.float32, copy=True, order="C")
        if np.isnan(immutable).all():
            raise ValueError("Grid contains 100% NoData")
        immutable.flags.writeable = False
        object.__setattr__(self, "data", immutable)

        return self


# ---------------------------------------------------------------------------
# ElevationSample / ElevationProfile
# ---------------------------------------------------------------------------
class ElevationSample(BaseModel):
    """Single terrain sample along a path (Value Object)."""

    point: GeoPoint
    elevation_m: float
    distance_km: float = Field(ge=0)  # Distance from the path start

    model_config = ConfigDict(frozen=True)


class ElevationProfile(BaseModel):
    """Ordered terrain samples between two endpoints (Value Object).

    Invariants:
        EP-1: sample distances are non-decreasing
        EP-2: every sample distance lies in [0, total_distance_km]

    Fewer than 2 samples is allowed; analysis treats it as a degenerate path.
    """

    samples: tuple[ElevationSample, ...]
    total_distance_km: float = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_profile(self) -> "ElevationProfile":
        for i in range(1, len(self.samples)):
            if self.samples[i].distance_km < self.samples[i - 1].distance_km:
                raise ValueError("Sample distances must be non-decreasing")
        if (
            self.samples
            and self.samples[-1].distance_km
            > self.total_distance_km + DISTANCE_TOLERANCE_KM
        ):
            raise ValueError(
                f"Sample distance {self.samples[-1].distance_km:.6f} km exceeds "
                f"total_distance_km {self.total_distance_km:.6f} km"
            )
        return self

    @property
    def start(self) -> GeoPoint | None:
        return self.samples[0].point if self.samples else None

    @property
    def end(self) -> GeoPoint | None:
        return self.samples[-1].point if self.samples else None

    def elevations(self) -> tuple[float, ...]:
        """Return elevation values in path order."""
        return tuple(s.elevation_m for s in self.samples)

    def distances(self) -> tuple[float, ...]:
        """Return distance-from-start values in path order."""
        return tuple(s.distance_km for s in self.samples)


# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------
class Building(BaseModel):
    """Building that may obstruct a link (Value Object).

    Fields:
        position: Representative point (usually the footprint centroid)
        height_m: Height above local terrain
        footprint: Outline polygon vertices, or empty when unknown
    """

    position: GeoPoint
    height_m: float = Field(ge=0)
    footprint: tuple[GeoPoint, ...] = ()

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_footprint(self) -> "Building":
        if 0 < len(self.footprint) < 3:
            raise ValueError(
                f"Footprint needs >= 3 vertices or none, got {len(self.footprint)}"
            )
        return self


# ---------------------------------------------------------------------------
# Line-of-sight results
# ---------------------------------------------------------------------------
class ObstructionKind(str, Enum):
    TERRAIN = "terrain"
    BUILDING = "building"


class LoSQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    MARGINAL = "marginal"
    POOR = "poor"
    BLOCKED = "blocked"


class Obstruction(BaseModel):
    """A profile sample that intrudes into the required Fresnel clearance."""

    distance_km: float
    obstructing_height_m: float  # Terrain or building top elevation
    required_height_m: float  # Line height + clearance fraction of Fresnel radius
    excess_m: float  # obstructing_height_m - required_height_m (> 0)
    location: GeoPoint
    kind: ObstructionKind

    model_config = ConfigDict(frozen=True)


class LoSResult(BaseModel):
    """Outcome of a line-of-sight analysis (Value Object).

    min_fresnel_clearance_percent is the smallest clearance between the
    curvature-adjusted sight line and the obstruction height, as a percentage
    of the local first Fresnel radius. It is infinite when the profile has no
    interior samples to check.
    """

    has_line_of_sight: bool
    obstructions: tuple[Obstruction, ...] = ()
    min_fresnel_clearance_percent: float
    quality: LoSQuality
    total_distance_km: float = Field(default=0.0, ge=0)

    model_config = ConfigDict(frozen=True)

    def building_obstruction_count(self) -> int:
        return sum(1 for o in self.obstructions if o.kind is ObstructionKind.BUILDING)

    def terrain_obstruction_count(self) -> int:
        return sum(1 for o in self.obstructions if o.kind is ObstructionKind.TERRAIN)


class TerrainStats(BaseModel):
    """Summary statistics of a profile's elevations."""

    min_m: float
    max_m: float
    mean_m: float
    total_gain_m: float = Field(ge=0)  # Sum of rises between consecutive samples
    total_loss_m: float = Field(ge=0)  # Sum of drops between consecutive samples
    elevation_change_m: float = Field(ge=0)  # max_m - min_m

    model_config = ConfigDict(frozen=True)

"""Terrain Bounded Context - Domain Services.

Pure domain logic for path geometry and line-of-sight analysis.
NO I/O operations - elevation and building lookups are supplied by callers,
or by adapters implementing the ports in `domain/terrain/repositories.py`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np
from pyproj import Geod

from domain.coverage.services import check_frequency, fresnel_radius
from domain.terrain.config import (
    DEFAULT_PROFILE_SAMPLES,
    EARTH_RADIUS_KM,
    GOOD_CLEARANCE_PCT,
    MARGINAL_CLEARANCE_PCT,
    POOR_CLEARANCE_PCT,
    ScanSettings,
)
from domain.terrain.errors import InvalidProfileError
from domain.terrain.value_objects import (
    Building,
    ElevationProfile,
    ElevationSample,
    GeoPoint,
    LoSQuality,
    LoSResult,
    Obstruction,
    ObstructionKind,
    TerrainGrid,
    TerrainStats,
)

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

# Spherical earth (R = 6371 km) so distances agree with the haversine formula
_sphere = Geod(a=EARTH_RADIUS_KM * 1000.0, b=EARTH_RADIUS_KM * 1000.0)


# ---------------------------------------------------------------------------
# Great-circle Distance
# ---------------------------------------------------------------------------
def great_circle_distance_km(start: GeoPoint, end: GeoPoint) -> float:
    """Calculate great-circle distance between two points in km.

    Uses a spherical earth of radius 6371 km (same model as the haversine
    formula), adequate for the tens-of-km links this tool targets.
    """
    _, _, distance_m = _sphere.inv(
        start.longitude, start.latitude, end.longitude, end.latitude
    )
    return float(abs(distance_m)) / 1000.0


# ---------------------------------------------------------------------------
# Path Interpolation
# ---------------------------------------------------------------------------
def interpolate_path(
    start: GeoPoint, end: GeoPoint, num_points: int = DEFAULT_PROFILE_SAMPLES
) -> list[GeoPoint]:
    """Interpolate points linearly in latitude/longitude.

    This is a planar approximation rather than a geodesic; the error is
    negligible over short links.

    Args:
        start: Starting point
        end: Ending point
        num_points: Number of segments; num_points + 1 points are returned

    Returns:
        List of points [start, ..., end], point i at fraction i / num_points

    Raises:
        InvalidProfileError: If num_points < 1
    """
    if num_points < 1:
        raise InvalidProfileError(f"num_points must be >= 1, got {num_points}")

    fractions = np.linspace(0.0, 1.0, num_points + 1)
    lats = start.latitude + (end.latitude - start.latitude) * fractions
    lons = start.longitude + (end.longitude - start.longitude) * fractions

    points = [start]
    for lat, lon in zip(lats[1:-1], lons[1:-1]):
        points.append(GeoPoint(latitude=float(lat), longitude=float(lon)))
    points.append(end)
    return points


def build_elevation_profile(
    start: GeoPoint, end: GeoPoint, elevations: Sequence[float]
) -> ElevationProfile:
    """Combine an interpolated path with looked-up elevations.

    elevations[i] belongs to the i-th point of
    interpolate_path(start, end, len(elevations) - 1). Distance from start is
    the total great-circle distance scaled by path fraction, so samples are
    evenly spaced in distance.

    Args:
        start: Path origin
        end: Path destination
        elevations: Terrain elevation in meters per path point

    Returns:
        ElevationProfile (empty or single-sample when fewer than 2 elevations)
    """
    total = great_circle_distance_km(start, end)
    n = len(elevations)
    if n == 0:
        return ElevationProfile(samples=(), total_distance_km=total)
    if n == 1:
        sample = ElevationSample(
            point=start, elevation_m=float(elevations[0]), distance_km=0.0
        )
        return ElevationProfile(samples=(sample,), total_distance_km=total)

    points = interpolate_path(start, end, n - 1)
    samples = tuple(
        ElevationSample(
            point=point,
            elevation_m=float(elevation),
            distance_km=(i / (n - 1)) * total,
        )
        for i, (point, elevation) in enumerate(zip(points, elevations))
    )
    return ElevationProfile(samples=samples, total_distance_km=total)


# ---------------------------------------------------------------------------
# Earth Curvature
# ---------------------------------------------------------------------------
def earth_bulge_m(
    d1_km: float, d2_km: float, earth_radius_km: float = EARTH_RADIUS_KM
) -> float:
    """Height (m) the earth's curvature adds at a point splitting the path.

    bulge = d1 * d2 / (2 * R) converted to meters. Zero at either endpoint.
    """
    return (d1_km * d2_km) / (2 * earth_radius_km) * 1000.0


# ---------------------------------------------------------------------------
# Building Proximity
# ---------------------------------------------------------------------------
def _point_in_footprint(point: GeoPoint, footprint: Sequence[GeoPoint]) -> bool:
    """Even-odd ray casting test in lon/lat space."""
    inside = False
    x, y = point.longitude, point.latitude
    j = len(footprint) - 1
    for i in range(len(footprint)):
        xi, yi = footprint[i].longitude, footprint[i].latitude
        xj, yj = footprint[j].longitude, footprint[j].latitude
        if (yi > y) != (yj > y):
            x_cross = xi + (y - yi) * (xj - xi) / (yj - yi)
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def building_near(building: Building, point: GeoPoint, proximity_m: float) -> bool:
    """True if the building stands closer than proximity_m to point.

    A building counts when its position is close enough, or when its
    footprint contains the point.
    """
    if great_circle_distance_km(building.position, point) * 1000.0 < proximity_m:
        return True
    if building.footprint:
        return _point_in_footprint(point, building.footprint)
    return False


def obstruction_height_m(
    sample: ElevationSample,
    buildings: Sequence[Building],
    proximity_m: float,
) -> float:
    """Terrain elevation at a sample, raised to the tallest nearby building top."""
    height = sample.elevation_m
    for building in buildings:
        if building_near(building, sample.point, proximity_m):
            height = max(height, sample.elevation_m + building.height_m)
    return height


# ---------------------------------------------------------------------------
# Line-of-sight Analysis
# ---------------------------------------------------------------------------
def classify_clearance(has_line_of_sight: bool, min_clearance_pct: float) -> LoSQuality:
    """Map a minimum Fresnel clearance percentage onto a quality band."""
    if not has_line_of_sight:
        return LoSQuality.BLOCKED
    if min_clearance_pct < POOR_CLEARANCE_PCT:
        return LoSQuality.POOR
    if min_clearance_pct < MARGINAL_CLEARANCE_PCT:
        return LoSQuality.MARGINAL
    if min_clearance_pct < GOOD_CLEARANCE_PCT:
        return LoSQuality.GOOD
    return LoSQuality.EXCELLENT


def analyze_line_of_sight(
    profile: ElevationProfile,
    antenna_height_1_m: float,
    antenna_height_2_m: float,
    frequency_mhz: float,
    buildings: Sequence[Building] = (),
    settings: ScanSettings | None = None,
) -> LoSResult:
    """Determine line of sight and Fresnel clearance along a terrain profile.

    For every interior sample (endpoints excluded) the straight line between
    the two antenna tips is lowered by the earth bulge, and the terrain (or a
    building top within settings.building_proximity_m) is compared against
    the line plus settings.fresnel_clearance_ratio of the local first Fresnel
    radius.

    Args:
        profile: Terrain samples from start to end
        antenna_height_1_m: Antenna height above ground at the start
        antenna_height_2_m: Antenna height above ground at the end
        frequency_mhz: Carrier frequency
        buildings: Optional buildings that may obstruct the path
        settings: Scan thresholds; defaults to ScanSettings()

    Returns:
        LoSResult. A profile with fewer than 2 samples (or zero length)
        yields has_line_of_sight=False, no obstructions and 0% clearance.

    Raises:
        InvalidParameterError: If frequency_mhz is not positive

    Example:
        >>> profile = build_elevation_profile(a, b, elevations)
        >>> result = analyze_line_of_sight(profile, 10, 10, 868)
        >>> print(result.quality.value, f"{result.min_fresnel_clearance_percent:.0f}%")
    """
    check_frequency(frequency_mhz)
    settings = settings or ScanSettings()
    samples = profile.samples
    total = profile.total_distance_km

    if len(samples) < 2 or total <= 0:
        logger.warning(
            "Degenerate profile (%d samples, %.3f km): no line of sight",
            len(samples),
            total,
        )
        return LoSResult(
            has_line_of_sight=False,
            obstructions=(),
            min_fresnel_clearance_percent=0.0,
            quality=LoSQuality.BLOCKED,
            total_distance_km=total,
        )

    start_height = samples[0].elevation_m + antenna_height_1_m
    end_height = samples[-1].elevation_m + antenna_height_2_m

    obstructions: list[Obstruction] = []
    min_clearance = math.inf

    for sample in samples[1:-1]:
        d1 = sample.distance_km
        d2 = max(total - d1, 0.0)

        line_height = start_height + (end_height - start_height) * (d1 / total)
        adjusted_line_height = line_height - earth_bulge_m(
            d1, d2, settings.earth_radius_km
        )

        local_radius = fresnel_radius(d1, d2, frequency_mhz)
        required_height = (
            adjusted_line_height + settings.fresnel_clearance_ratio * local_radius
        )

        obstacle = obstruction_height_m(
            sample, buildings, settings.building_proximity_m
        )

        # Samples sharing an endpoint's distance have no Fresnel zone to clear
        if local_radius > 0:
            clearance_pct = (adjusted_line_height - obstacle) / local_radius * 100.0
            min_clearance = min(min_clearance, clearance_pct)

        if obstacle > required_height:
            if obstacle - sample.elevation_m > settings.building_height_margin_m:
                kind = ObstructionKind.BUILDING
            else:
                kind = ObstructionKind.TERRAIN
            obstructions.append(
                Obstruction(
                    distance_km=d1,
                    obstructing_height_m=obstacle,
                    required_height_m=required_height,
                    excess_m=obstacle - required_height,
                    location=sample.point,
                    kind=kind,
                )
            )

    has_los = not obstructions
    quality = classify_clearance(has_los, min_clearance)

    logger.debug(
        "LoS over %.2f km: %s, %d obstructions, min clearance %.1f%%",
        total,
        quality.value,
        len(obstructions),
        min_clearance,
    )

    return LoSResult(
        has_line_of_sight=has_los,
        obstructions=tuple(obstructions),
        min_fresnel_clearance_percent=min_clearance,
        quality=quality,
        total_distance_km=total,
    )


# ---------------------------------------------------------------------------
# Terrain Statistics
# ---------------------------------------------------------------------------
def terrain_stats(profile: ElevationProfile) -> TerrainStats:
    """Summarize elevations along a profile.

    Raises:
        InvalidProfileError: If the profile has no samples
    """
    if not profile.samples:
        raise InvalidProfileError("Cannot compute statistics of an empty profile")

    elevations = np.asarray(profile.elevations(), dtype=np.float64)
    steps = np.diff(elevations)
    lowest = float(elevations.min())
    highest = float(elevations.max())

    return TerrainStats(
        min_m=lowest,
        max_m=highest,
        mean_m=float(elevations.mean()),
        total_gain_m=float(steps[steps > 0].sum()),
        total_loss_m=float(-steps[steps < 0].sum()),
        elevation_change_m=highest - lowest,
    )


# ---------------------------------------------------------------------------
# DEM Sampling
# ---------------------------------------------------------------------------
def bilinear_interpolate(grid: TerrainGrid, point: GeoPoint) -> tuple[float, bool]:
    """Sample terrain height (m) under a path point from a DEM grid.

    Blends the 4 pixels around the point. Pixel indices are clamped at the
    grid edges. The caller must check grid.bounds.contains(point) first.

    NoData contract: if any of the 4 pixels is NaN the result is (NaN, True)
    and no partial blend is attempted. GridElevationAdapter replaces such
    samples with its nodata_fallback_m so that an ElevationProfile never
    carries NaN into the line-of-sight scan.

    Returns:
        (elevation_m, is_nodata)
    """
    # Row 0 is the northern edge
    col = (point.longitude - grid.bounds.min_x) / grid.resolution[0]
    row = (grid.bounds.max_y - point.latitude) / grid.resolution[1]

    rows, cols = grid.data.shape
    c0 = min(max(math.floor(col), 0), cols - 1)
    r0 = min(max(math.floor(row), 0), rows - 1)
    c1 = min(c0 + 1, cols - 1)
    r1 = min(r0 + 1, rows - 1)

    window = grid.data[np.ix_((r0, r1), (c0, c1))].astype(np.float64)
    if np.isnan(window).any():
        return (math.nan, True)

    fc = col - math.floor(col)
    fr = row - math.floor(row)
    weights = np.array([[(1 - fr) * (1 - fc), (1 - fr) * fc], [fr * (1 - fc), fr * fc]])
    return (float((window * weights).sum()), False)

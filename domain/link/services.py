"""Link Bounded Context - Domain Services.

Orchestrates the terrain and coverage contexts:

    endpoints -> interpolated path -> elevation/building lookups (ports)
    -> line-of-sight scan -> link budget -> LinkAnalysis

Lookups go through the ports in `domain.terrain.repositories`; everything
else is pure computation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from domain.coverage.services import compute_link_budget
from domain.coverage.value_objects import LinkBudgetResult, RFParameters
from domain.link.value_objects import LinkAnalysis, LinkVerdict
from domain.terrain.config import (
    DEFAULT_BUILDING_BUFFER_KM,
    DEFAULT_PROFILE_SAMPLES,
    ScanSettings,
)
from domain.terrain.repositories import BuildingRepository, ElevationRepository
from domain.terrain.services import (
    analyze_line_of_sight,
    build_elevation_profile,
    interpolate_path,
)
from domain.terrain.value_objects import (
    Building,
    ElevationProfile,
    GeoPoint,
    LoSQuality,
    LoSResult,
)

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

DEFAULT_ANTENNA_HEIGHT_M = 10.0


def link_verdict(los: LoSResult, budget: LinkBudgetResult) -> tuple[bool, LinkVerdict]:
    """Combine LoS quality and link margin into (is_viable, verdict).

    A link is viable when it has line of sight and positive link margin.
    Viable links take their verdict from LoS quality; anything below "good"
    is reported as marginal.
    """
    is_viable = los.has_line_of_sight and budget.link_margin_db > 0
    if not is_viable:
        return False, LinkVerdict.NOT_VIABLE
    if los.quality is LoSQuality.EXCELLENT:
        return True, LinkVerdict.EXCELLENT
    if los.quality is LoSQuality.GOOD:
        return True, LinkVerdict.GOOD
    return True, LinkVerdict.MARGINAL


def analyze_link(
    profile: ElevationProfile,
    params: RFParameters,
    antenna_height_1_m: float = DEFAULT_ANTENNA_HEIGHT_M,
    antenna_height_2_m: float = DEFAULT_ANTENNA_HEIGHT_M,
    buildings: Sequence[Building] = (),
    settings: ScanSettings | None = None,
) -> LinkAnalysis:
    """Assess one link from an already-resolved elevation profile.

    Args:
        profile: Terrain samples from start to end
        params: Radio configuration used for both Fresnel and budget
        antenna_height_1_m: Antenna height above ground at the start
        antenna_height_2_m: Antenna height above ground at the end
        buildings: Optional buildings near the path
        settings: Obstruction scan thresholds

    Returns:
        LinkAnalysis over profile.total_distance_km
    """
    distance = profile.total_distance_km
    los = analyze_line_of_sight(
        profile,
        antenna_height_1_m,
        antenna_height_2_m,
        params.frequency_mhz,
        buildings=buildings,
        settings=settings,
    )
    budget = compute_link_budget(params, distance)
    is_viable, verdict = link_verdict(los, budget)

    logger.debug(
        "Link %.2f km: LoS=%s margin=%.1f dB -> %s",
        distance,
        los.quality.value,
        budget.link_margin_db,
        verdict.value,
    )

    return LinkAnalysis(
        start=profile.start,
        end=profile.end,
        distance_km=distance,
        los=los,
        budget=budget,
        is_viable=is_viable,
        verdict=verdict,
        buildings=tuple(buildings),
    )


def analyze_link_between(
    start: GeoPoint,
    end: GeoPoint,
    params: RFParameters,
    elevations: ElevationRepository,
    buildings: BuildingRepository | None = None,
    num_samples: int = DEFAULT_PROFILE_SAMPLES,
    antenna_height_1_m: float = DEFAULT_ANTENNA_HEIGHT_M,
    antenna_height_2_m: float = DEFAULT_ANTENNA_HEIGHT_M,
    building_buffer_km: float = DEFAULT_BUILDING_BUFFER_KM,
    settings: ScanSettings | None = None,
) -> LinkAnalysis:
    """Assess a link between two points, resolving terrain through the ports.

    Args:
        start: Link origin
        end: Link destination
        params: Radio configuration
        elevations: Elevation provider
        buildings: Optional building provider; None skips building lookups
        num_samples: Number of path segments (num_samples + 1 samples)

    Raises:
        InvalidProfileError: If num_samples < 1
    """
    path = interpolate_path(start, end, num_samples)
    heights = elevations.get_elevations(path)
    if len(heights) != len(path):
        raise ValueError(
            f"Elevation provider returned {len(heights)} values for {len(path)} points"
        )
    profile = build_elevation_profile(start, end, heights)

    found: Sequence[Building] = ()
    if buildings is not None:
        found = buildings.get_buildings_along_path(start, end, building_buffer_km)

    return analyze_link(
        profile,
        params,
        antenna_height_1_m=antenna_height_1_m,
        antenna_height_2_m=antenna_height_2_m,
        buildings=found,
        settings=settings,
    )


def analyze_route(
    points: Sequence[GeoPoint],
    params: RFParameters,
    elevations: ElevationRepository,
    buildings: BuildingRepository | None = None,
    num_samples: int = DEFAULT_PROFILE_SAMPLES,
    antenna_height_m: float = DEFAULT_ANTENNA_HEIGHT_M,
    settings: ScanSettings | None = None,
) -> tuple[LinkAnalysis, ...]:
    """Assess each hop between consecutive points of a multi-point route.

    Returns an empty tuple for fewer than 2 points.
    """
    return tuple(
        analyze_link_between(
            a,
            b,
            params,
            elevations,
            buildings=buildings,
            num_samples=num_samples,
            antenna_height_1_m=antenna_height_m,
            antenna_height_2_m=antenna_height_m,
            settings=settings,
        )
        for a, b in zip(points, points[1:])
    )

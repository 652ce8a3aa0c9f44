"""Tests for path geometry and elevation profile construction.

Profiles are built directly from value objects; elevation lookups are
represented by plain lists of heights (no I/O).
"""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from domain.terrain.value_objects import (
    Building,
    ElevationProfile,
    ElevationSample,
    GeoPoint,
)
from tests.conftest import KM_PER_DEGREE, make_profile


# ===========================================================================
# Great-circle Distance
# ===========================================================================
def test_distance_one_degree_on_equator():
    """One degree of arc on a 6371 km sphere."""
    from domain.terrain.services import great_circle_distance_km

    a = GeoPoint(latitude=0.0, longitude=0.0)
    b = GeoPoint(latitude=0.0, longitude=1.0)

    assert great_circle_distance_km(a, b) == pytest.approx(6371 * math.pi / 180)
    assert KM_PER_DEGREE == pytest.approx(6371 * math.pi / 180)


def test_distance_matches_haversine():
    from domain.terrain.services import great_circle_distance_km

    a = GeoPoint(latitude=46.2, longitude=6.1)
    b = GeoPoint(latitude=46.5, longitude=6.6)

    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    d_phi = phi2 - phi1
    d_lam = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    )
    haversine_km = 2 * 6371 * math.asin(math.sqrt(h))

    assert great_circle_distance_km(a, b) == pytest.approx(haversine_km, rel=1e-9)
    assert great_circle_distance_km(b, a) == pytest.approx(haversine_km, rel=1e-9)


def test_distance_same_point_is_zero():
    from domain.terrain.services import great_circle_distance_km

    p = GeoPoint(latitude=-20.0, longitude=-45.0)

    assert great_circle_distance_km(p, p) == pytest.approx(0.0, abs=1e-9)


# ===========================================================================
# Path Interpolation
# ===========================================================================
def test_interpolate_path_returns_n_plus_one_points():
    from domain.terrain.services import interpolate_path

    start = GeoPoint(latitude=45.0, longitude=7.0)
    end = GeoPoint(latitude=46.0, longitude=8.0)

    points = interpolate_path(start, end, 4)

    assert len(points) == 5
    assert points[0] == start
    assert points[-1] == end
    assert points[2].latitude == pytest.approx(45.5)
    assert points[2].longitude == pytest.approx(7.5)


def test_interpolate_path_is_linear_in_lat_lon():
    """Planar interpolation: equal lat/lon steps, not a geodesic."""
    from domain.terrain.services import interpolate_path

    start = GeoPoint(latitude=10.0, longitude=20.0)
    end = GeoPoint(latitude=12.0, longitude=26.0)

    points = interpolate_path(start, end, 50)

    lat_steps = {round(b.latitude - a.latitude, 9) for a, b in zip(points, points[1:])}
    lon_steps = {round(b.longitude - a.longitude, 9) for a, b in zip(points, points[1:])}
    assert lat_steps == {0.04}
    assert lon_steps == {0.12}


def test_interpolate_path_rejects_zero_segments():
    from domain.terrain.errors import InvalidProfileError
    from domain.terrain.services import interpolate_path

    p = GeoPoint(latitude=0.0, longitude=0.0)

    with pytest.raises(InvalidProfileError):
        interpolate_path(p, p, 0)


# ===========================================================================
# Profile Construction
# ===========================================================================
def test_build_profile_uniform_distances():
    from domain.terrain.services import build_elevation_profile, great_circle_distance_km

    start = GeoPoint(latitude=45.0, longitude=7.0)
    end = GeoPoint(latitude=45.05, longitude=7.1)
    elevations = [float(i) for i in range(11)]

    profile = build_elevation_profile(start, end, elevations)

    total = great_circle_distance_km(start, end)
    assert profile.total_distance_km == pytest.approx(total)
    assert len(profile.samples) == 11
    assert profile.samples[0].point == start
    assert profile.samples[-1].point == end
    assert profile.samples[-1].distance_km == pytest.approx(total)
    for i, sample in enumerate(profile.samples):
        assert sample.distance_km == pytest.approx(i / 10 * total)
        assert sample.elevation_m == float(i)


def test_build_profile_short_inputs():
    from domain.terrain.services import build_elevation_profile

    start = GeoPoint(latitude=45.0, longitude=7.0)
    end = GeoPoint(latitude=45.0, longitude=7.1)

    assert build_elevation_profile(start, end, []).samples == ()
    single = build_elevation_profile(start, end, [320.0])
    assert len(single.samples) == 1
    assert single.start == start


# ===========================================================================
# Value Object Invariants
# ===========================================================================
def test_profile_rejects_decreasing_distances():
    p = GeoPoint(latitude=0.0, longitude=0.0)

    with pytest.raises(ValidationError, match="non-decreasing"):
        ElevationProfile(
            samples=(
                ElevationSample(point=p, elevation_m=0.0, distance_km=1.0),
                ElevationSample(point=p, elevation_m=0.0, distance_km=0.5),
            ),
            total_distance_km=1.0,
        )


def test_profile_rejects_samples_beyond_total():
    p = GeoPoint(latitude=0.0, longitude=0.0)

    with pytest.raises(ValidationError, match="exceeds"):
        ElevationProfile(
            samples=(ElevationSample(point=p, elevation_m=0.0, distance_km=3.0),),
            total_distance_km=2.0,
        )


def test_profile_accessors():
    profile = make_profile([100.0, 150.0, 120.0])

    assert profile.elevations() == (100.0, 150.0, 120.0)
    assert profile.distances() == (0.0, 1.0, 2.0)
    assert profile.start == GeoPoint(latitude=0.0, longitude=0.0)


def test_empty_profile_has_no_endpoints():
    profile = ElevationProfile(samples=(), total_distance_km=0.0)

    assert profile.start is None
    assert profile.end is None


def test_geopoint_range_validation():
    with pytest.raises(ValidationError):
        GeoPoint(latitude=91.0, longitude=0.0)
    with pytest.raises(ValidationError):
        GeoPoint(latitude=0.0, longitude=-180.5)


def test_building_footprint_needs_three_vertices():
    p = GeoPoint(latitude=0.0, longitude=0.0)

    with pytest.raises(ValidationError, match="Footprint"):
        Building(position=p, height_m=10.0, footprint=(p, p))

    assert Building(position=p, height_m=10.0).footprint == ()


# ===========================================================================
# Terrain Statistics
# ===========================================================================
def test_terrain_stats():
    from domain.terrain.services import terrain_stats

    stats = terrain_stats(make_profile([100.0, 150.0, 120.0, 180.0]))

    assert stats.min_m == 100.0
    assert stats.max_m == 180.0
    assert stats.mean_m == pytest.approx(137.5)
    assert stats.total_gain_m == pytest.approx(110.0)
    assert stats.total_loss_m == pytest.approx(30.0)
    assert stats.elevation_change_m == pytest.approx(80.0)


def test_terrain_stats_flat_single_sample():
    from domain.terrain.services import terrain_stats

    stats = terrain_stats(make_profile([42.0]))

    assert stats.total_gain_m == 0.0
    assert stats.total_loss_m == 0.0
    assert stats.elevation_change_m == 0.0


def test_terrain_stats_empty_profile_raises():
    from domain.terrain.errors import InvalidProfileError
    from domain.terrain.services import terrain_stats

    with pytest.raises(InvalidProfileError):
        terrain_stats(ElevationProfile(samples=(), total_distance_km=0.0))

"""Tests for GridElevationAdapter (in-memory DEM lookups).

Grids are built directly with numpy arrays.

Grid Reference:
- Bounds: lat [45, 46], lon [7, 8]
- Resolution: 0.1 degrees (10 x 10 pixels)
"""

from __future__ import annotations

import logging

import numpy as np
import pytest

from domain.terrain.value_objects import BoundingBox, GeoPoint, TerrainGrid
from src.infrastructure.terrain import GridElevationAdapter

BOUNDS = BoundingBox(min_x=7.0, max_x=8.0, min_y=45.0, max_y=46.0)


def create_test_grid_columns() -> TerrainGrid:
    """Elevation grows 10 m per column (west to east), constant per column."""
    data = np.tile(np.arange(10, dtype=np.float32) * 10.0, (10, 1))
    return TerrainGrid(data=data, bounds=BOUNDS, resolution=(0.1, 0.1))


def create_test_grid_east_nodata() -> TerrainGrid:
    """West half 150 m, east half NoData."""
    data = np.full((10, 10), 150.0, dtype=np.float32)
    data[:, 5:] = np.nan
    return TerrainGrid(data=data, bounds=BOUNDS, resolution=(0.1, 0.1))


# ===========================================================================
# Lookups
# ===========================================================================
def test_bilinear_between_columns():
    """px = 2.5 sits halfway between the 20 m and 30 m columns."""
    adapter = GridElevationAdapter(create_test_grid_columns())

    [elevation] = adapter.get_elevations([GeoPoint(latitude=45.55, longitude=7.25)])

    assert elevation == pytest.approx(25.0)


def test_elevations_keep_input_order():
    adapter = GridElevationAdapter(create_test_grid_columns())
    points = [
        GeoPoint(latitude=45.5, longitude=7.5),
        GeoPoint(latitude=45.5, longitude=7.1),
        GeoPoint(latitude=45.5, longitude=7.3),
    ]

    elevations = adapter.get_elevations(points)

    assert elevations == pytest.approx([50.0, 10.0, 30.0])


def test_point_outside_grid_raises():
    from domain.terrain.errors import PointOutOfBoundsError

    adapter = GridElevationAdapter(create_test_grid_columns())
    outside = GeoPoint(latitude=47.0, longitude=7.5)

    with pytest.raises(PointOutOfBoundsError) as exc_info:
        adapter.get_elevations([outside])

    assert exc_info.value.point == outside


def test_nodata_falls_back_with_warning(caplog: pytest.LogCaptureFixture):
    adapter = GridElevationAdapter(create_test_grid_east_nodata(), nodata_fallback_m=-1.0)
    points = [
        GeoPoint(latitude=45.5, longitude=7.2),
        GeoPoint(latitude=45.5, longitude=7.8),
    ]

    with caplog.at_level(logging.WARNING):
        elevations = adapter.get_elevations(points)

    assert elevations == [pytest.approx(150.0), -1.0]
    assert "1 of 2 points fell on NoData" in caplog.text


# ===========================================================================
# TerrainGrid Value Object
# ===========================================================================
def test_grid_data_is_read_only_copy():
    source = np.zeros((4, 4), dtype=np.float64)
    grid = TerrainGrid(data=source, bounds=BOUNDS, resolution=(0.25, 0.25))

    assert grid.data.dtype == np.float32
    assert source.flags.writeable
    with pytest.raises(ValueError):
        grid.data[0, 0] = 1.0


def test_grid_rejects_all_nodata():
    data = np.full((3, 3), np.nan, dtype=np.float32)

    with pytest.raises(ValueError, match="NoData"):
        TerrainGrid(data=data, bounds=BOUNDS, resolution=(0.1, 0.1))


def test_grid_adapter_feeds_line_of_sight():
    """Adapter output plugs straight into profile construction."""
    from domain.terrain.services import (
        analyze_line_of_sight,
        build_elevation_profile,
        interpolate_path,
    )

    adapter = GridElevationAdapter(create_test_grid_columns())
    start = GeoPoint(latitude=45.5, longitude=7.05)
    end = GeoPoint(latitude=45.5, longitude=7.15)

    elevations = adapter.get_elevations(interpolate_path(start, end, 20))
    profile = build_elevation_profile(start, end, elevations)
    result = analyze_line_of_sight(profile, 15.0, 15.0, 868.0)

    assert len(profile.samples) == 21
    # Monotonic slope: the straight line between mast tips clears the ground
    assert result.has_line_of_sight is True


# ===========================================================================
# DEM Sampling
# ===========================================================================
def test_bilinear_reports_nodata_next_to_nan_pixel():
    """px = 4.5 blends column 4 (150 m) with column 5 (NoData)."""
    import math

    from domain.terrain.services import bilinear_interpolate

    grid = create_test_grid_east_nodata()

    elevation, is_nodata = bilinear_interpolate(
        grid, GeoPoint(latitude=45.5, longitude=7.45)
    )
    assert is_nodata is True
    assert math.isnan(elevation)

    elevation, is_nodata = bilinear_interpolate(
        grid, GeoPoint(latitude=45.5, longitude=7.15)
    )
    assert is_nodata is False
    assert elevation == pytest.approx(150.0)


def test_bilinear_clamps_at_eastern_edge():
    from domain.terrain.services import bilinear_interpolate

    elevation, _ = bilinear_interpolate(
        create_test_grid_columns(), GeoPoint(latitude=45.0, longitude=8.0)
    )

    assert elevation == pytest.approx(90.0)


def test_bounding_box_rejects_empty_extent():
    from pydantic import ValidationError

    with pytest.raises(ValidationError, match="Empty extent"):
        BoundingBox(min_x=7.0, max_x=7.0, min_y=45.0, max_y=46.0)

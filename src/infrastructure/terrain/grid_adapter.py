"""In-memory DEM adapter for ElevationRepository.

Answers elevation lookups from an already-loaded TerrainGrid using bilinear
interpolation. Loading the grid (files, tiles, HTTP) is the caller's concern.

NoData handling: a point whose neighbouring pixels include NoData resolves
to `nodata_fallback_m` (0 m by default) and a warning is logged once per call.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from domain.terrain.errors import PointOutOfBoundsError
from domain.terrain.services import bilinear_interpolate
from domain.terrain.value_objects import GeoPoint, TerrainGrid

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)


class GridElevationAdapter:
    """Infrastructure adapter serving elevations from a TerrainGrid.

    Parameters
    ----------
    grid: TerrainGrid
        Elevation raster covering every point that will be queried.
    nodata_fallback_m: float
        Elevation reported for points that fall on NoData pixels.
    """

    def __init__(self, grid: TerrainGrid, nodata_fallback_m: float = 0.0) -> None:
        self.grid = grid
        self.nodata_fallback_m = nodata_fallback_m

    def get_elevations(self, points: Sequence[GeoPoint]) -> list[float]:
        """Return elevations in meters, one per point, in input order.

        Raises:
            PointOutOfBoundsError: If any point lies outside the grid bounds
        """
        elevations: list[float] = []
        nodata_count = 0

        for point in points:
            if not self.grid.bounds.contains(point):
                raise PointOutOfBoundsError(point, self.grid.bounds)
            elevation, is_nodata = bilinear_interpolate(self.grid, point)
            if is_nodata:
                nodata_count += 1
                elevation = self.nodata_fallback_m
            elevations.append(elevation)

        if nodata_count:
            logger.warning(
                "%d of %d points fell on NoData; using %.1f m",
                nodata_count,
                len(points),
                self.nodata_fallback_m,
            )
        return elevations

"""Terrain Bounded Context - Error Hierarchy.

Custom exceptions for terrain operations.

Note: a profile with fewer than 2 samples is NOT an error. analyze_line_of_sight
returns a defined "no LoS" result for it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.terrain.value_objects import BoundingBox, GeoPoint


class TerrainError(Exception):
    """Base error for terrain operations."""


class PointOutOfBoundsError(TerrainError):
    """Point is outside the terrain grid bounds.

    Attributes:
        point: The offending GeoPoint
        bounds: The grid's BoundingBox
    """

    def __init__(self, point: "GeoPoint", bounds: "BoundingBox") -> None:
        self.point = point
        self.bounds = bounds
        super().__init__(
            f"Point ({point.latitude:.6f}, {point.longitude:.6f}) outside bounds "
            f"[lat: {bounds.min_y:.6f} to {bounds.max_y:.6f}, "
            f"lon: {bounds.min_x:.6f} to {bounds.max_x:.6f}]"
        )


class InvalidProfileError(TerrainError):
    """Profile construction parameters are invalid."""

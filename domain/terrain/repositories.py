"""Domain Ports for terrain data lookups.

Defines interfaces (Protocols) that elevation and building providers must
implement. No concrete I/O here: network-backed providers, their caching and
rate limiting live outside the domain layer.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .value_objects import Building, GeoPoint


class ElevationRepository(Protocol):
    """Port for looking up terrain elevation at arbitrary points."""

    def get_elevations(self, points: Sequence[GeoPoint]) -> list[float]:
        """Return one elevation in meters per point, in the same order."""
        ...


class BuildingRepository(Protocol):
    """Port for looking up buildings near a path."""

    def get_buildings_along_path(
        self, start: GeoPoint, end: GeoPoint, buffer_km: float
    ) -> list[Building]:
        """Return buildings within buffer_km of the start-end segment."""
        ...

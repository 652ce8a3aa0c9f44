"""Root pytest configuration for all tests.

Shared fixtures build value objects directly (no I/O). Profiles are laid out
along the equator, where 0.009 degrees of longitude is roughly 1 km.
"""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from domain.coverage.value_objects import RFParameters
from domain.terrain.value_objects import ElevationProfile, ElevationSample, GeoPoint

KM_PER_DEGREE = 111.19492664455873  # Equatorial degree on the 6371 km sphere


def make_profile(
    elevations: Sequence[float], spacing_km: float = 1.0
) -> ElevationProfile:
    """Build an equatorial profile with evenly spaced samples.

    Sample i sits at distance i * spacing_km and longitude i * spacing_km / KM_PER_DEGREE.
    """
    samples = tuple(
        ElevationSample(
            point=GeoPoint(latitude=0.0, longitude=i * spacing_km / KM_PER_DEGREE),
            elevation_m=float(elevation),
            distance_km=i * spacing_km,
        )
        for i, elevation in enumerate(elevations)
    )
    total = spacing_km * (len(elevations) - 1) if elevations else 0.0
    return ElevationProfile(samples=samples, total_distance_km=total)


@pytest.fixture
def default_params() -> RFParameters:
    """EU868, SF7/BW125/CR4-5, 14 dBm, 2 dBi antennas, 10 dB fade margin."""
    return RFParameters()


@pytest.fixture
def long_range_params() -> RFParameters:
    return RFParameters(
        frequency_mhz=868.0,
        bandwidth_khz=125,
        spreading_factor=12,
        coding_rate=8,
        tx_power_dbm=20.0,
        tx_gain_dbi=5.0,
        rx_gain_dbi=5.0,
        fade_margin_db=15.0,
    )

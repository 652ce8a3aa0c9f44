"""Coverage Bounded Context - Static Configuration.

Read-only tables and tunable defaults for the RF link calculator.
Nothing here is mutated at runtime; every call reads the same values.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Receiver sensitivity (dBm) by bandwidth (kHz) and spreading factor
# ---------------------------------------------------------------------------
# Values from Semtech SX127x datasheets.
SENSITIVITY_TABLE: Mapping[int, Mapping[int, float]] = MappingProxyType(
    {
        125: MappingProxyType(
            {7: -123.0, 8: -126.0, 9: -129.0, 10: -132.0, 11: -134.5, 12: -137.0}
        ),
        250: MappingProxyType(
            {7: -120.0, 8: -123.0, 9: -125.0, 10: -128.0, 11: -131.0, 12: -133.0}
        ),
        500: MappingProxyType(
            {7: -117.0, 8: -120.0, 9: -122.0, 10: -125.0, 11: -128.0, 12: -130.0}
        ),
    }
)

SPREADING_FACTORS: tuple[int, ...] = (7, 8, 9, 10, 11, 12)
BANDWIDTHS_KHZ: tuple[int, ...] = (125, 250, 500)
CODING_RATES: tuple[int, ...] = (5, 6, 7, 8)  # Denominators of 4/x

# ---------------------------------------------------------------------------
# Link budget constants
# ---------------------------------------------------------------------------
MISC_LOSSES_DB = 2.0  # Cable + connector losses
DEFAULT_FADE_MARGIN_DB = 10.0
FSPL_CONSTANT_DB = 32.45  # For distance in km and frequency in MHz
STATUS_STEP_DB = 10.0  # Width of the marginal and good status bands

# Fresnel zone constant for d in km, f in MHz, radius in m
FRESNEL_CONSTANT = 17.3

# LoRa preamble: 8 programmed symbols + 4.25 sync symbols
PREAMBLE_SYMBOLS = 8 + 4.25


class RecommendationDefaults(BaseModel):
    """Assumed radio setup used when ranking SF/BW combinations.

    Mirrors a typical handheld node: 14 dBm TX, 2 dBi antennas, CR 4/5.
    """

    tx_power_dbm: float = 14.0
    tx_gain_dbi: float = 2.0
    rx_gain_dbi: float = 2.0
    coding_rate: int = Field(default=5, ge=5, le=8)
    fade_margin_db: float = DEFAULT_FADE_MARGIN_DB
    min_link_margin_db: float = 10.0  # Candidates below this are discarded
    top_n: int = Field(default=3, ge=1)

    model_config = ConfigDict(frozen=True)

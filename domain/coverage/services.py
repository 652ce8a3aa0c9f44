"""Coverage Bounded Context - Domain Services.

Pure numeric functions over RFParameters and link geometry.
NO I/O operations and no hidden state beyond the read-only sensitivity table
in `domain.coverage.config`.

Boundary contracts (asserted by tests, not errors):
    - free_space_path_loss(d <= 0, f) == 0
    - fresnel_radius(d1, d2, f) == 0 when d1 + d2 == 0
    - compute_max_range(...) == 0 when the path-loss budget is not positive
"""

from __future__ import annotations

import logging
import math

from domain.coverage.config import (
    BANDWIDTHS_KHZ,
    CODING_RATES,
    FRESNEL_CONSTANT,
    FSPL_CONSTANT_DB,
    MISC_LOSSES_DB,
    PREAMBLE_SYMBOLS,
    SENSITIVITY_TABLE,
    SPREADING_FACTORS,
    STATUS_STEP_DB,
    RecommendationDefaults,
)
from domain.coverage.errors import InvalidParameterError
from domain.coverage.value_objects import (
    LinkBudgetResult,
    LinkStatus,
    Recommendation,
    RFParameters,
)

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Parameter checks
# ---------------------------------------------------------------------------
def _check_modulation(sf: int, bw: int, cr: int | None = None) -> None:
    if bw not in SENSITIVITY_TABLE:
        raise InvalidParameterError("bandwidth_khz", bw, BANDWIDTHS_KHZ)
    if sf not in SENSITIVITY_TABLE[bw]:
        raise InvalidParameterError("spreading_factor", sf, SPREADING_FACTORS)
    if cr is not None and cr not in CODING_RATES:
        raise InvalidParameterError("coding_rate", cr, CODING_RATES)


def check_frequency(frequency_mhz: float) -> None:
    """Raise InvalidParameterError unless frequency_mhz is a positive number."""
    # NaN fails this comparison too
    if not frequency_mhz > 0:
        raise InvalidParameterError("frequency_mhz", frequency_mhz, "> 0")


# ---------------------------------------------------------------------------
# Sensitivity
# ---------------------------------------------------------------------------
def sensitivity(sf: int, bw: int) -> float:
    """Return receiver sensitivity in dBm for a spreading factor and bandwidth.

    Args:
        sf: Spreading factor (7-12)
        bw: Bandwidth in kHz (125, 250 or 500)

    Returns:
        Sensitivity in dBm (more negative = more sensitive)

    Raises:
        InvalidParameterError: If (sf, bw) is not in the sensitivity table
    """
    _check_modulation(sf, bw)
    return SENSITIVITY_TABLE[bw][sf]


# ---------------------------------------------------------------------------
# Data Rate / Time on Air
# ---------------------------------------------------------------------------
def data_rate(sf: int, bw: int, cr: int) -> int:
    """Calculate LoRa bit rate in bps.

    Formula: DR = SF * (BW / 2^SF) * (4 / CR)

    Evaluated in integer arithmetic and truncated, so that
    data_rate(7, 125, 5) == 5468.

    Raises:
        InvalidParameterError: If sf, bw or cr is outside the documented domain
    """
    _check_modulation(sf, bw, cr)
    bandwidth_hz = bw * 1000
    return (sf * bandwidth_hz * 4) // ((2**sf) * cr)


def symbol_duration(sf: int, bw: int) -> float:
    """Return LoRa symbol period in seconds (2^SF / BW)."""
    _check_modulation(sf, bw)
    return (2**sf) / (bw * 1000)


def time_on_air(payload_bytes: int, sf: int, bw: int, cr: int) -> float:
    """Calculate packet time on air in seconds.

    Uses explicit header, CRC on, no low-data-rate optimization:
        n_payload = 8 + max(ceil((8*PL - 4*SF + 28) / (4*SF)) * CR, 0)
        T = (12.25 + n_payload) * T_sym

    Args:
        payload_bytes: Application payload length in bytes
        sf: Spreading factor (7-12)
        bw: Bandwidth in kHz
        cr: Coding rate denominator (5-8)

    Raises:
        InvalidParameterError: If sf, bw or cr is outside the documented domain
        ValueError: If payload_bytes is negative
    """
    if payload_bytes < 0:
        raise ValueError("payload_bytes must be non-negative")
    _check_modulation(sf, bw, cr)

    t_sym = symbol_duration(sf, bw)
    payload_symbols = 8 + max(
        math.ceil((8 * payload_bytes - 4 * sf + 28) / (4 * sf)) * cr, 0
    )
    return (PREAMBLE_SYMBOLS + payload_symbols) * t_sym


# ---------------------------------------------------------------------------
# Propagation
# ---------------------------------------------------------------------------
def free_space_path_loss(distance_km: float, frequency_mhz: float) -> float:
    """Calculate Free Space Path Loss in dB.

    Formula: FSPL = 20*log10(d) + 20*log10(f) + 32.45 (d in km, f in MHz)

    Returns 0 for distance_km <= 0. This is a boundary policy for degenerate
    geometry, not a physical claim.
    """
    check_frequency(frequency_mhz)
    if distance_km <= 0:
        return 0.0
    return (
        20 * math.log10(distance_km)
        + 20 * math.log10(frequency_mhz)
        + FSPL_CONSTANT_DB
    )


def fresnel_radius(d1_km: float, d2_km: float, frequency_mhz: float) -> float:
    """Calculate first Fresnel zone radius in meters at a point on the path.

    Args:
        d1_km: Distance from the transmitter to the point
        d2_km: Distance from the point to the receiver
        frequency_mhz: Carrier frequency

    Returns:
        Radius in meters; 0 when d1_km + d2_km == 0 (zero-length path).
        Symmetric in d1 and d2, maximal at the midpoint.

    Raises:
        InvalidParameterError: If frequency_mhz is not positive
    """
    check_frequency(frequency_mhz)
    total = d1_km + d2_km
    if total == 0:
        return 0.0
    return FRESNEL_CONSTANT * math.sqrt((d1_km * d2_km) / (frequency_mhz * total))


def max_fresnel_radius(distance_km: float, frequency_mhz: float) -> float:
    """Fresnel radius at the path midpoint, where it is largest."""
    half = distance_km / 2
    return fresnel_radius(half, half, frequency_mhz)


# ---------------------------------------------------------------------------
# Link Budget
# ---------------------------------------------------------------------------
def classify_link_margin(link_margin_db: float, fade_margin_db: float) -> LinkStatus:
    """Map a link margin onto a status band relative to the fade margin F.

    < F poor, [F, F+10) marginal, [F+10, F+20) good, >= F+20 excellent.
    """
    if link_margin_db < fade_margin_db:
        return LinkStatus.POOR
    if link_margin_db < fade_margin_db + STATUS_STEP_DB:
        return LinkStatus.MARGINAL
    if link_margin_db < fade_margin_db + 2 * STATUS_STEP_DB:
        return LinkStatus.GOOD
    return LinkStatus.EXCELLENT


def compute_link_budget(params: RFParameters, distance_km: float) -> LinkBudgetResult:
    """Calculate the link budget for a radio setup at a given distance.

    rx_power = tx_power + tx_gain + rx_gain - FSPL - misc_losses
    link_margin = rx_power - sensitivity
    link_budget = link_margin - fade_margin

    Args:
        params: Radio configuration
        distance_km: Link length; <= 0 is treated as zero path loss

    Returns:
        LinkBudgetResult with status classified against the fade margin

    Example:
        >>> params = RFParameters(frequency_mhz=868, spreading_factor=12)
        >>> result = compute_link_budget(params, 10.0)
        >>> print(f"Margin: {result.link_margin_db:.1f} dB ({result.status.value})")
    """
    sens = sensitivity(params.spreading_factor, params.bandwidth_khz)
    path_loss = free_space_path_loss(distance_km, params.frequency_mhz)

    rx_power = (
        params.tx_power_dbm
        + params.tx_gain_dbi
        + params.rx_gain_dbi
        - path_loss
        - MISC_LOSSES_DB
    )
    link_margin = rx_power - sens
    link_budget = link_margin - params.fade_margin_db

    return LinkBudgetResult(
        sensitivity_dbm=sens,
        path_loss_db=path_loss,
        rx_power_dbm=rx_power,
        link_margin_db=link_margin,
        link_budget_db=link_budget,
        data_rate_bps=data_rate(
            params.spreading_factor, params.bandwidth_khz, params.coding_rate
        ),
        max_fresnel_radius_m=max_fresnel_radius(
            max(distance_km, 0.0), params.frequency_mhz
        ),
        status=classify_link_margin(link_margin, params.fade_margin_db),
        misc_losses_db=MISC_LOSSES_DB,
        fade_margin_db=params.fade_margin_db,
    )


def path_loss_budget(params: RFParameters) -> float:
    """Maximum tolerable path loss in dB once fade margin is reserved."""
    sens = sensitivity(params.spreading_factor, params.bandwidth_khz)
    return (
        params.tx_power_dbm
        + params.tx_gain_dbi
        + params.rx_gain_dbi
        - sens
        - MISC_LOSSES_DB
        - params.fade_margin_db
    )


def compute_max_range(params: RFParameters) -> float:
    """Calculate the distance (km) at which link margin equals the fade margin.

    Inverts FSPL for the available path-loss budget:
        d = 10 ** ((budget - 20*log10(f) - 32.45) / 20)

    Returns:
        Distance in km, or 0.0 ("no viable range") when the budget is not a
        positive finite number. Never negative.
    """
    budget = path_loss_budget(params)
    if not math.isfinite(budget) or budget <= 0:
        logger.warning(
            "No viable range: path-loss budget %.1f dB (SF%d/BW%d, %.1f dBm)",
            budget,
            params.spreading_factor,
            params.bandwidth_khz,
            params.tx_power_dbm,
        )
        return 0.0

    exponent = (
        budget - 20 * math.log10(params.frequency_mhz) - FSPL_CONSTANT_DB
    ) / 20
    return float(10**exponent)


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------
def recommend_settings(
    distance_km: float,
    frequency_mhz: float,
    defaults: RecommendationDefaults | None = None,
) -> tuple[Recommendation, ...]:
    """Rank SF/BW combinations for a target distance.

    Searches the fixed 6x3 grid (SF ascending, then BW ascending), keeps
    candidates with link margin >= defaults.min_link_margin_db and ranks them
    by data_rate * (link_margin / 10). Ties keep iteration order.

    Args:
        distance_km: Target link length
        frequency_mhz: Carrier frequency
        defaults: Assumed TX power, gains and coding rate

    Returns:
        Up to defaults.top_n recommendations, best first
    """
    check_frequency(frequency_mhz)
    defaults = defaults or RecommendationDefaults()
    candidates: list[Recommendation] = []

    for sf in SPREADING_FACTORS:
        for bw in BANDWIDTHS_KHZ:
            params = RFParameters(
                frequency_mhz=frequency_mhz,
                bandwidth_khz=bw,
                spreading_factor=sf,
                coding_rate=defaults.coding_rate,
                tx_power_dbm=defaults.tx_power_dbm,
                tx_gain_dbi=defaults.tx_gain_dbi,
                rx_gain_dbi=defaults.rx_gain_dbi,
                fade_margin_db=defaults.fade_margin_db,
            )
            result = compute_link_budget(params, distance_km)
            if result.link_margin_db < defaults.min_link_margin_db:
                continue
            candidates.append(
                Recommendation(
                    sf=sf,
                    bw=bw,
                    data_rate_bps=result.data_rate_bps,
                    link_margin_db=result.link_margin_db,
                    score=result.data_rate_bps * (result.link_margin_db / 10),
                )
            )

    # sorted() is stable: equal scores keep SF/BW iteration order
    ranked = sorted(candidates, key=lambda r: r.score, reverse=True)
    logger.debug(
        "%d of %d settings viable at %.2f km",
        len(candidates),
        len(SPREADING_FACTORS) * len(BANDWIDTHS_KHZ),
        distance_km,
    )
    return tuple(ranked[: defaults.top_n])

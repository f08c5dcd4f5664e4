"""Shared numerical helpers for the analytic pricer and the analyzer."""

import math

from scipy.special import erfc


def normal_cdf(x: float) -> float:
    """Standard normal cumulative distribution.

    Φ(x) = ½·erfc(-x/√2). The complementary error function keeps precision
    in the lower tail, where 1 + erf(x) would cancel.

    Args:
        x: Evaluation point (may be ±inf)

    Returns:
        Probability in [0, 1]
    """
    return float(0.5 * erfc(-x / math.sqrt(2.0)))


def normal_pdf(x: float) -> float:
    """Standard normal density."""
    return math.exp(-0.5 * x * x) / math.sqrt(2.0 * math.pi)


def d1_d2(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    expiry: float,
) -> tuple[float, float]:
    """Black-Scholes d1 and d2 terms.

    d1 = [ln(S/K) + (r + σ²/2)·T] / (σ·√T)
    d2 = d1 - σ·√T
    """
    vol_sqrt_t = volatility * math.sqrt(expiry)
    d1 = (math.log(spot / strike) + (rate + 0.5 * volatility**2) * expiry) / vol_sqrt_t
    return d1, d1 - vol_sqrt_t

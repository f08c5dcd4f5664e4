"""Closed-form Black-Scholes pricing and Greeks.

Black-Scholes Formula:
=====================

    C = S·Φ(d1) - K·e^(-rT)·Φ(d2)
    P = K·e^(-rT)·Φ(-d2) - S·Φ(-d1)

    d1 = [ln(S/K) + (r + σ²/2)·T] / (σ·√T)
    d2 = d1 - σ·√T

Φ is evaluated through the complementary error function (see
``pricing.math_utils.normal_cdf``). The formula assumes exercise at maturity
only, so American contracts are rejected.

Example:
    >>> pricer = AnalyticPricer()
    >>> contract = OptionContract(OptionKind.CALL, ExerciseStyle.EUROPEAN, 100.0, 1.0)
    >>> price = pricer.calculate_price(contract, MarketSnapshot(100.0, 0.05, 0.2))
"""

import logging
import math
from dataclasses import dataclass

from pricing.errors import UnsupportedStyleError
from pricing.math_utils import d1_d2, normal_cdf, normal_pdf
from pricing.models import ExerciseStyle, MarketSnapshot, OptionContract
from pricing.strategies import PricingStrategy, validate_inputs

logger = logging.getLogger(__name__)


@dataclass
class Greeks:
    """Option Greeks container.

    Attributes:
        delta: ∂V/∂S - Sensitivity to underlying price
        gamma: ∂²V/∂S² - Rate of change of delta
        vega: ∂V/∂σ - Sensitivity to volatility (per 1% move)
        theta: ∂V/∂t - Time decay (per day)
        rho: ∂V/∂r - Sensitivity to interest rate (per 1% move)
    """

    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return {
            "delta": self.delta,
            "gamma": self.gamma,
            "vega": self.vega,
            "theta": self.theta,
            "rho": self.rho,
        }


class AnalyticPricer(PricingStrategy):
    """Black-Scholes closed-form pricer for European options."""

    @property
    def name(self) -> str:
        return "Black-Scholes"

    def _check_style(self, contract: OptionContract) -> None:
        if contract.style != ExerciseStyle.EUROPEAN:
            raise UnsupportedStyleError(
                f"Unsupported style: {self.name} prices European options only, "
                f"got {contract.style.value}",
                style=contract.style.value,
            )

    def calculate_price(self, contract: OptionContract, snapshot: MarketSnapshot) -> float:
        """Calculate the Black-Scholes price.

        Args:
            contract: European option contract
            snapshot: Market state

        Returns:
            Option price

        Raises:
            UnsupportedStyleError: If the contract is not European
            InvalidParameterError: If spot, strike, expiry or volatility is non-positive
        """
        self._check_style(contract)
        validate_inputs(contract, snapshot)

        spot, strike = snapshot.spot, contract.strike
        rate, expiry = snapshot.rate, contract.expiry
        d1, d2 = d1_d2(spot, strike, rate, snapshot.volatility, expiry)
        discounted_strike = strike * math.exp(-rate * expiry)

        if contract.is_call:
            price = spot * normal_cdf(d1) - discounted_strike * normal_cdf(d2)
        else:
            price = discounted_strike * normal_cdf(-d2) - spot * normal_cdf(-d1)

        logger.debug(f"{self.name} {contract.kind.value} K={strike} T={expiry}: {price:.6f}")
        return price

    def greeks(self, contract: OptionContract, snapshot: MarketSnapshot) -> Greeks:
        """Calculate all Greeks in closed form.

        Vega and rho are quoted per 1% move, theta per calendar day,
        matching the conventions used by the rest of the package.

        Args:
            contract: European option contract
            snapshot: Market state

        Returns:
            Greeks object with all sensitivities
        """
        self._check_style(contract)
        validate_inputs(contract, snapshot)

        spot, strike = snapshot.spot, contract.strike
        rate, vol, expiry = snapshot.rate, snapshot.volatility, contract.expiry
        d1, d2 = d1_d2(spot, strike, rate, vol, expiry)
        sqrt_t = math.sqrt(expiry)
        discount = math.exp(-rate * expiry)
        density = normal_pdf(d1)

        gamma = density / (spot * vol * sqrt_t)
        vega = spot * density * sqrt_t
        decay = -spot * density * vol / (2 * sqrt_t)

        if contract.is_call:
            delta = normal_cdf(d1)
            theta = decay - rate * strike * discount * normal_cdf(d2)
            rho = strike * expiry * discount * normal_cdf(d2)
        else:
            delta = normal_cdf(d1) - 1.0
            theta = decay + rate * strike * discount * normal_cdf(-d2)
            rho = -strike * expiry * discount * normal_cdf(-d2)

        return Greeks(
            delta=delta,
            gamma=gamma,
            vega=vega / 100,  # Per 1% vol
            theta=theta / 365,  # Per day
            rho=rho / 100,  # Per 1% rate
        )


def put_call_parity_gap(call_price: float, put_price: float, spot: float, strike: float, rate: float, expiry: float) -> float:
    """Deviation from put-call parity: (C - P) - (S - K·e^(-rT)).

    Zero (to rounding) for consistent European prices.
    """
    return (call_price - put_price) - (spot - strike * math.exp(-rate * expiry))

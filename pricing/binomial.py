"""Cox-Ross-Rubinstein binomial tree pricer.

Tree parameters for N steps over expiry T:

    dt = T / N
    u  = e^(σ·√dt),  d = 1/u
    p  = (e^(r·dt) - d) / (u - d)
    discount = e^(-r·dt)

Terminal node j (0..N) has underlying S·u^j·d^(N-j). Values are rolled back
one layer at a time into a single buffer of length N+1, so memory stays
linear in N while the work is O(N²). At each American node the holding
value is floored at the immediate-exercise payoff.

The step count adapts to the horizon: N = clamp(round(T·365), 100, 1000).

Example:
    >>> pricer = LatticePricer()
    >>> put = OptionContract(OptionKind.PUT, ExerciseStyle.AMERICAN, 100.0, 0.5)
    >>> price = pricer.calculate_price(put, MarketSnapshot(100.0, 0.05, 0.25))
"""

import logging
import math
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from pricing.models import MarketSnapshot, OptionContract
from pricing.strategies import PricingStrategy, validate_inputs

logger = logging.getLogger(__name__)


class LatticePricer(PricingStrategy):
    """Binomial tree pricer supporting European and American exercise.

    Args:
        steps: Fixed step count. When None the count is derived from expiry.
        steps_per_year: Steps per year of expiry for the adaptive count
        min_steps: Lower bound on the adaptive count
        max_steps: Upper bound on the adaptive count
    """

    def __init__(
        self,
        steps: Optional[int] = None,
        steps_per_year: int = 365,
        min_steps: int = 100,
        max_steps: int = 1000,
    ):
        if steps is not None and steps < 1:
            raise ValueError(f"steps must be a positive integer, got {steps}")
        if not 1 <= min_steps <= max_steps:
            raise ValueError(f"Need 1 <= min_steps <= max_steps, got {min_steps}, {max_steps}")
        self.steps = steps
        self.steps_per_year = steps_per_year
        self.min_steps = min_steps
        self.max_steps = max_steps

    @classmethod
    def from_settings(cls, settings=None) -> "LatticePricer":
        """Build a pricer from application settings."""
        if settings is None:
            from config.settings import get_settings

            settings = get_settings()
        return cls(
            steps_per_year=settings.lattice_steps_per_year,
            min_steps=settings.lattice_min_steps,
            max_steps=settings.lattice_max_steps,
        )

    @property
    def name(self) -> str:
        return "Binomial"

    def steps_for(self, expiry: float) -> int:
        """Number of tree steps used for a contract with this expiry."""
        if self.steps is not None:
            return self.steps
        raw = expiry * self.steps_per_year
        return int(round(min(max(raw, self.min_steps), self.max_steps)))

    @staticmethod
    def _payoff(prices: NDArray[np.float64], strike: float, is_call: bool) -> NDArray[np.float64]:
        if is_call:
            return np.maximum(prices - strike, 0.0)
        return np.maximum(strike - prices, 0.0)

    def calculate_price(self, contract: OptionContract, snapshot: MarketSnapshot) -> float:
        """Price the contract by backward induction on the tree.

        Args:
            contract: Option contract (European or American)
            snapshot: Market state

        Returns:
            Option value at the root node

        Raises:
            InvalidParameterError: If spot, strike, expiry or volatility is non-positive
        """
        validate_inputs(contract, snapshot)

        n = self.steps_for(contract.expiry)
        spot, strike = snapshot.spot, contract.strike
        is_call, american = contract.is_call, contract.is_american

        dt = contract.expiry / n
        up = math.exp(snapshot.volatility * math.sqrt(dt))
        down = 1.0 / up
        p_up = (math.exp(snapshot.rate * dt) - down) / (up - down)
        p_down = 1.0 - p_up
        discount = math.exp(-snapshot.rate * dt)
        if not 0.0 <= p_up <= 1.0:
            logger.warning(f"Risk-neutral probability {p_up:.4f} outside [0, 1] (N={n}); tree is not arbitrage-free")

        # Node j of layer i sits at S·u^j·d^(i-j) = S·u^(2j-i)
        j = np.arange(n + 1)
        values = self._payoff(spot * up ** (2 * j - n), strike, is_call)

        for i in range(n - 1, -1, -1):
            # RHS is evaluated before the slice assignment, so the buffer is safe to reuse
            values[: i + 1] = discount * (p_up * values[1 : i + 2] + p_down * values[: i + 1])
            if american:
                exercise = self._payoff(spot * up ** (2 * j[: i + 1] - i), strike, is_call)
                np.maximum(values[: i + 1], exercise, out=values[: i + 1])

        price = float(values[0])
        logger.debug(
            f"{self.name} {contract.kind.value}/{contract.style.value} "
            f"K={strike} T={contract.expiry} N={n}: {price:.6f}"
        )
        return price

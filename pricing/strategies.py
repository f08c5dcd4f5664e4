"""Common interface for option pricing strategies.

Every strategy maps ``(OptionContract, MarketSnapshot)`` to a price. The
decision engine only depends on this interface, so strategies can be swapped
or compared freely.

Implementations:
- AnalyticPricer: closed-form Black-Scholes (European only)
- LatticePricer: Cox-Ross-Rubinstein binomial tree (European and American)
- QuantLibPricer: QuantLib analytic/binomial engines
"""

import math
from abc import ABC, abstractmethod

from pricing.errors import InvalidParameterError
from pricing.models import MarketSnapshot, OptionContract


def validate_inputs(contract: OptionContract, snapshot: MarketSnapshot) -> None:
    """Check that spot, strike, expiry and volatility are strictly positive
    and that the rate is finite.

    Args:
        contract: Option contract to price
        snapshot: Market state to price it in

    Raises:
        InvalidParameterError: Naming the first offending parameter
    """
    checks = (
        ("spot", snapshot.spot),
        ("strike", contract.strike),
        ("expiry", contract.expiry),
        ("volatility", snapshot.volatility),
    )
    for name, value in checks:
        # NaN fails the comparison and is rejected too
        if not (value > 0) or math.isinf(value):
            raise InvalidParameterError(
                f"Invalid parameters: {name} must be strictly positive and finite, got {value}",
                parameter=name,
                value=value,
            )
    if not math.isfinite(snapshot.rate):
        raise InvalidParameterError(
            f"Invalid parameters: rate must be finite, got {snapshot.rate}",
            parameter="rate",
            value=snapshot.rate,
        )


class PricingStrategy(ABC):
    """Abstract option pricing strategy."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable strategy name."""

    @abstractmethod
    def calculate_price(self, contract: OptionContract, snapshot: MarketSnapshot) -> float:
        """Price ``contract`` in market state ``snapshot``.

        Raises:
            InvalidParameterError: If spot, strike, expiry or volatility is non-positive
            UnsupportedStyleError: If the strategy cannot value the exercise style
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

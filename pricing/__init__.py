"""Option pricing strategies and contract/market value objects.

Strategies:
- black_scholes: AnalyticPricer, closed-form European pricing and Greeks
- binomial: LatticePricer, CRR tree for European and American exercise
- quantlib_pricer: QuantLibPricer, QuantLib engines behind the same interface

Example:
    >>> from pricing import AnalyticPricer, LatticePricer, MarketSnapshot, OptionContract
    >>> contract = OptionContract(OptionKind.CALL, ExerciseStyle.EUROPEAN, strike=100, expiry=1.0)
    >>> snapshot = MarketSnapshot(spot=95, rate=0.05, volatility=0.2)
    >>> AnalyticPricer().calculate_price(contract, snapshot)
    >>> LatticePricer().calculate_price(contract, snapshot)
"""

from pricing.models import ExerciseStyle, MarketSnapshot, OptionContract, OptionKind
from pricing.errors import (
    InsufficientStrategiesError,
    InvalidInputError,
    InvalidParameterError,
    PricingError,
    UnsupportedStyleError,
)
from pricing.math_utils import normal_cdf
from pricing.strategies import PricingStrategy, validate_inputs
from pricing.black_scholes import AnalyticPricer, Greeks, put_call_parity_gap
from pricing.binomial import LatticePricer
from pricing.quantlib_pricer import QuantLibPricer

__all__ = [
    # Value objects
    "OptionKind",
    "ExerciseStyle",
    "OptionContract",
    "MarketSnapshot",
    # Errors
    "PricingError",
    "InvalidParameterError",
    "UnsupportedStyleError",
    "InvalidInputError",
    "InsufficientStrategiesError",
    # Strategies
    "PricingStrategy",
    "validate_inputs",
    "AnalyticPricer",
    "Greeks",
    "put_call_parity_gap",
    "LatticePricer",
    "QuantLibPricer",
    "normal_cdf",
]

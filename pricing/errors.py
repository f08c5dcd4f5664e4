"""Exceptions raised by the pricing and decision components.

All of them describe a contract violation by the caller. None are retried.
They subclass ``ValueError`` so callers that already catch ``ValueError``
for bad inputs keep working.
"""

from typing import Any, Optional


class PricingError(ValueError):
    """Base class for invalid requests to the pricing core."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class InvalidParameterError(PricingError):
    """A pricer input (spot, strike, expiry, volatility) is non-positive."""

    def __init__(self, message: str, parameter: Optional[str] = None, value: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.parameter = parameter
        self.value = value


class UnsupportedStyleError(PricingError):
    """The pricer cannot value contracts of this exercise style."""

    def __init__(self, message: str, style: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.style = style


class InvalidInputError(PricingError):
    """Price series handed to the analyzer are empty, mismatched or non-finite."""


class InsufficientStrategiesError(PricingError):
    """The decision engine needs at least two pricing strategies."""

    def __init__(self, message: str, provided: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.provided = provided

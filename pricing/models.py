"""Value objects describing an option contract and the market it is priced in.

Both containers are immutable. Perturbed market states are derived as new
snapshots (see ``MarketSnapshot.scale_volatility``) so a snapshot handed to a
pricer is never changed behind the caller's back.
"""

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any


class OptionKind(str, Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"


class ExerciseStyle(str, Enum):
    """Exercise style enumeration."""

    EUROPEAN = "european"
    AMERICAN = "american"


@dataclass(frozen=True)
class OptionContract:
    """A single vanilla option contract.

    Attributes:
        kind: Call or put
        style: European (exercise at expiry only) or American
        strike: Strike price
        expiry: Time to expiry in years
    """

    kind: OptionKind
    style: ExerciseStyle
    strike: float
    expiry: float

    @property
    def is_call(self) -> bool:
        return self.kind == OptionKind.CALL

    @property
    def is_american(self) -> bool:
        return self.style == ExerciseStyle.AMERICAN

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "style": self.style.value,
            "strike": self.strike,
            "expiry": self.expiry,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OptionContract":
        """Create from dictionary."""
        return cls(
            kind=OptionKind(data["kind"]),
            style=ExerciseStyle(data["style"]),
            strike=float(data["strike"]),
            expiry=float(data["expiry"]),
        )


@dataclass(frozen=True)
class MarketSnapshot:
    """Market observables for a single pricing request.

    Attributes:
        spot: Current underlying price
        rate: Risk-free rate (annualized, continuous)
        volatility: Volatility of the underlying (annualized)
    """

    spot: float
    rate: float
    volatility: float

    def with_volatility(self, volatility: float) -> "MarketSnapshot":
        """Return a copy with a different volatility."""
        return replace(self, volatility=volatility)

    def scale_volatility(self, factor: float) -> "MarketSnapshot":
        """Return a copy with volatility multiplied by ``factor``.

        Spot and rate are carried over unchanged.
        """
        return self.with_volatility(self.volatility * factor)

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MarketSnapshot":
        """Create from dictionary."""
        return cls(
            spot=float(data["spot"]),
            rate=float(data["rate"]),
            volatility=float(data["volatility"]),
        )

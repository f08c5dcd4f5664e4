"""Turn a model-vs-model price comparison into a trading action.

Pipeline for one contract and one market snapshot:

1. Sweep volatility over 30 perturbed snapshots (95% .. 124% of base vol,
   spot and rate fixed).
2. Price the contract with the first two strategies at every sample.
3. Run the paired-difference test on the two price series.
4. Not significant → HOLD.
5. Otherwise edge = (reference price - spot) / spot, where the reference
   price is the first strategy's price at sample 14 (the 15th of 30).
6. threshold = 0.02 · (base vol / 0.20).
7. edge > threshold → BUY, edge < -threshold → SELL, else HOLD.

Each call is a pure function of its inputs. The sweep may run on a thread
pool; results are always gathered back in sample order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from decision.significance import AnalysisResult, SignificanceAnalyzer
from pricing.errors import InsufficientStrategiesError
from pricing.models import MarketSnapshot, OptionContract
from pricing.strategies import PricingStrategy

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """Trading recommendation."""

    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


@dataclass(frozen=True)
class DecisionReport:
    """Action together with the numbers that produced it.

    Attributes:
        action: Recommended action
        analysis: Paired-difference test result
        edge: Relative deviation of the reference price from spot
            (None when the test was not significant)
        threshold: Volatility-scaled edge threshold
        reference_price: First strategy's price at the reference sample
        strategy_names: Names of the two compared strategies
        volatilities: Volatility of each perturbed sample
        prices_a: First strategy's prices, in sample order
        prices_b: Second strategy's prices, in sample order
    """

    action: Action
    analysis: AnalysisResult
    edge: float | None
    threshold: float
    reference_price: float
    strategy_names: tuple[str, str]
    volatilities: tuple[float, ...] = field(default_factory=tuple)
    prices_a: tuple[float, ...] = field(default_factory=tuple)
    prices_b: tuple[float, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "action": self.action.value,
            "analysis": self.analysis.to_dict(),
            "edge": self.edge,
            "threshold": self.threshold,
            "reference_price": self.reference_price,
            "strategy_names": list(self.strategy_names),
            "volatilities": list(self.volatilities),
            "prices_a": list(self.prices_a),
            "prices_b": list(self.prices_b),
        }


class DecisionEngine:
    """Derives BUY/SELL/HOLD from two pricing strategies.

    Example:
        >>> engine = DecisionEngine()
        >>> action, analysis = engine.decide(
        ...     contract, [AnalyticPricer(), LatticePricer()], snapshot, SignificanceAnalyzer()
        ... )
    """

    def __init__(
        self,
        sample_count: int = 30,
        vol_start: float = 0.95,
        vol_step: float = 0.01,
        reference_index: int = 14,
        base_threshold: float = 0.02,
        reference_volatility: float = 0.20,
        max_workers: int = 1,
    ):
        """Initialize decision engine.

        Args:
            sample_count: Number of perturbed snapshots in the sweep
            vol_start: Volatility multiplier of the first sample
            vol_step: Multiplier increment between samples
            reference_index: Sample whose first-strategy price sets the edge
            base_threshold: Edge threshold at the reference volatility
            reference_volatility: Volatility at which the threshold equals base_threshold
            max_workers: Threads used for the sweep (1 = sequential)
        """
        if sample_count < 1:
            raise ValueError(f"sample_count must be positive, got {sample_count}")
        if not 0 <= reference_index < sample_count:
            raise ValueError(f"reference_index must lie in [0, {sample_count}), got {reference_index}")
        self.sample_count = sample_count
        self.vol_start = vol_start
        self.vol_step = vol_step
        self.reference_index = reference_index
        self.base_threshold = base_threshold
        self.reference_volatility = reference_volatility
        self.max_workers = max(1, max_workers)

    @classmethod
    def from_settings(cls, settings=None) -> "DecisionEngine":
        """Build an engine from application settings."""
        if settings is None:
            from config.settings import get_settings

            settings = get_settings()
        return cls(
            sample_count=settings.sample_count,
            vol_start=settings.vol_sweep_start,
            vol_step=settings.vol_sweep_step,
            reference_index=settings.reference_sample_index,
            base_threshold=settings.base_edge_threshold,
            reference_volatility=settings.reference_volatility,
            max_workers=settings.sweep_workers,
        )

    def volatility_factors(self) -> list[float]:
        """Volatility multipliers of the sweep, in sample order."""
        return [self.vol_start + self.vol_step * i for i in range(self.sample_count)]

    def perturbed_snapshots(self, snapshot: MarketSnapshot) -> list[MarketSnapshot]:
        """Fresh snapshots with scaled volatility; ``snapshot`` is left untouched."""
        return [snapshot.scale_volatility(factor) for factor in self.volatility_factors()]

    def edge_threshold(self, volatility: float) -> float:
        """Edge threshold scaled linearly with volatility."""
        return self.base_threshold * (volatility / self.reference_volatility)

    def classify(self, edge: float, threshold: float) -> Action:
        """Map an edge to an action given a symmetric threshold."""
        if edge > threshold:
            return Action.BUY
        if edge < -threshold:
            return Action.SELL
        return Action.HOLD

    def _price_series(
        self,
        strategy: PricingStrategy,
        contract: OptionContract,
        snapshots: Sequence[MarketSnapshot],
    ) -> list[float]:
        if self.max_workers == 1:
            return [strategy.calculate_price(contract, s) for s in snapshots]

        # map() yields results in submission order
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(lambda s: strategy.calculate_price(contract, s), snapshots))

    def evaluate(
        self,
        contract: OptionContract,
        strategies: Sequence[PricingStrategy],
        snapshot: MarketSnapshot,
        analyzer: SignificanceAnalyzer,
    ) -> DecisionReport:
        """Run the full sweep and return the action with its justification.

        Args:
            contract: Option contract to evaluate
            strategies: Pricing strategies; the first two are compared
            snapshot: Base market state
            analyzer: Significance analyzer

        Returns:
            DecisionReport

        Raises:
            InsufficientStrategiesError: Fewer than two strategies supplied
            InvalidParameterError: Propagated from the strategies
            UnsupportedStyleError: Propagated from the strategies
        """
        if len(strategies) < 2:
            raise InsufficientStrategiesError(
                f"Insufficient strategies: need at least 2, got {len(strategies)}",
                provided=len(strategies),
            )
        if len(strategies) > 2:
            logger.debug(f"{len(strategies)} strategies supplied, comparing the first two")
        first, second = strategies[0], strategies[1]

        snapshots = self.perturbed_snapshots(snapshot)
        prices_a = self._price_series(first, contract, snapshots)
        prices_b = self._price_series(second, contract, snapshots)

        analysis = analyzer.analyze(prices_a, prices_b)
        reference_price = prices_a[self.reference_index]
        threshold = self.edge_threshold(snapshot.volatility)

        if analysis.is_significant:
            edge = (reference_price - snapshot.spot) / snapshot.spot
            action = self.classify(edge, threshold)
        else:
            edge = None
            action = Action.HOLD

        logger.info(
            f"{first.name} vs {second.name} on {contract.kind.value}/{contract.style.value} "
            f"K={contract.strike}: p={analysis.p_value:.4g} edge={edge} "
            f"threshold={threshold:.4f} -> {action.value.upper()}"
        )

        return DecisionReport(
            action=action,
            analysis=analysis,
            edge=edge,
            threshold=threshold,
            reference_price=reference_price,
            strategy_names=(first.name, second.name),
            volatilities=tuple(s.volatility for s in snapshots),
            prices_a=tuple(prices_a),
            prices_b=tuple(prices_b),
        )

    def decide(
        self,
        contract: OptionContract,
        strategies: Sequence[PricingStrategy],
        snapshot: MarketSnapshot,
        analyzer: SignificanceAnalyzer,
    ) -> tuple[Action, AnalysisResult]:
        """Recommend an action and return the analysis behind it.

        See ``evaluate`` for arguments and errors.
        """
        report = self.evaluate(contract, strategies, snapshot, analyzer)
        return report.action, report.analysis

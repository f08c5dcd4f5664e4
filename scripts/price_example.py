#!/usr/bin/env python3
"""Price a sample contract with both strategies and print the decision.

Contract: European call, K=100, T=1y. Market: S=95, r=5%, σ=20%.

Usage:
    python -m scripts.price_example
"""

import logging

from config.settings import configure_logging, get_settings
from decision import DecisionEngine, DecisionSchema, SignificanceAnalyzer
from pricing import (
    AnalyticPricer,
    ExerciseStyle,
    LatticePricer,
    MarketSnapshot,
    OptionContract,
    OptionKind,
)

logger = logging.getLogger(__name__)


def main() -> None:
    configure_logging()
    settings = get_settings()

    contract = OptionContract(OptionKind.CALL, ExerciseStyle.EUROPEAN, strike=100.0, expiry=1.0)
    snapshot = MarketSnapshot(spot=95.0, rate=0.05, volatility=0.2)

    strategies = [AnalyticPricer(), LatticePricer.from_settings(settings)]
    for strategy in strategies:
        logger.info(f"{strategy.name}: {strategy.calculate_price(contract, snapshot):.4f}")

    engine = DecisionEngine.from_settings(settings)
    report = engine.evaluate(contract, strategies, snapshot, SignificanceAnalyzer.from_settings(settings))

    print(DecisionSchema.from_report(report).model_dump_json(indent=2))


if __name__ == "__main__":
    main()

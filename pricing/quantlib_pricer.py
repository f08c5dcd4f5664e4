"""Pricing strategy backed by QuantLib engines.

Gives an implementation that is independent of the in-house formulas, useful
as a cross-check and as a drop-in strategy for the decision engine.

QuantLib Pricing Flow:
=====================

1. MARKET DATA: SimpleQuote for spot
2. TERM STRUCTURES: flat yield curve (rate), flat dividend curve (zero),
   flat Black vol
3. PROCESS: BlackScholesMertonProcess
4. INSTRUMENT: VanillaOption with European or American exercise
5. ENGINE: AnalyticEuropeanEngine or BinomialVanillaEngine (CRR)

QuantLib works with calendar dates, so the expiry in years is mapped to a
whole number of days from the evaluation date under Actual/365 Fixed.
Expiries that are not whole days are rounded.
"""

import logging
import threading
from typing import Literal, Optional

import QuantLib as ql

from pricing.errors import UnsupportedStyleError
from pricing.models import MarketSnapshot, OptionContract
from pricing.strategies import PricingStrategy, validate_inputs

logger = logging.getLogger(__name__)

DAY_COUNT = ql.Actual365Fixed()

_EVALUATION_DATE_LOCK = threading.Lock()


def create_flat_yield_curve(rate: float, eval_date: ql.Date) -> ql.YieldTermStructureHandle:
    """Create a flat (constant) yield term structure."""
    return ql.YieldTermStructureHandle(ql.FlatForward(eval_date, rate, DAY_COUNT))


def create_flat_vol_surface(volatility: float, eval_date: ql.Date) -> ql.BlackVolTermStructureHandle:
    """Create a flat (constant) Black volatility surface."""
    flat_vol = ql.BlackConstantVol(eval_date, ql.NullCalendar(), volatility, DAY_COUNT)
    return ql.BlackVolTermStructureHandle(flat_vol)


def create_black_scholes_process(snapshot: MarketSnapshot, eval_date: ql.Date) -> ql.BlackScholesMertonProcess:
    """Create a Black-Scholes-Merton process for a market snapshot.

    The process models dS = r·S·dt + σ·S·dW (no dividends).
    """
    spot_handle = ql.QuoteHandle(ql.SimpleQuote(snapshot.spot))
    return ql.BlackScholesMertonProcess(
        spot_handle,
        create_flat_yield_curve(0.0, eval_date),
        create_flat_yield_curve(snapshot.rate, eval_date),
        create_flat_vol_surface(snapshot.volatility, eval_date),
    )


def create_vanilla_option(contract: OptionContract, eval_date: ql.Date, expiry_date: ql.Date) -> ql.VanillaOption:
    """Create a QuantLib vanilla option matching ``contract``."""
    ql_type = ql.Option.Call if contract.is_call else ql.Option.Put
    payoff = ql.PlainVanillaPayoff(ql_type, contract.strike)

    if contract.is_american:
        exercise = ql.AmericanExercise(eval_date, expiry_date)
    else:
        exercise = ql.EuropeanExercise(expiry_date)

    return ql.VanillaOption(payoff, exercise)


class QuantLibPricer(PricingStrategy):
    """Price contracts with a QuantLib pricing engine.

    Args:
        engine: "analytic" (closed form, European only) or "binomial" (CRR tree)
        steps: Tree steps for the binomial engine
        eval_date: Evaluation date (default: today)

    Example:
        >>> pricer = QuantLibPricer(engine="binomial", steps=500)
        >>> price = pricer.calculate_price(contract, snapshot)
    """

    def __init__(
        self,
        engine: Literal["analytic", "binomial"] = "analytic",
        steps: int = 500,
        eval_date: Optional[ql.Date] = None,
    ):
        if engine not in ("analytic", "binomial"):
            raise ValueError(f"Unknown QuantLib engine: {engine}")
        self.engine = engine
        self.steps = steps
        self.eval_date = eval_date or ql.Date.todaysDate()

    @property
    def name(self) -> str:
        return f"QuantLib-{self.engine}"

    def expiry_date(self, expiry: float) -> ql.Date:
        """Calendar date for an expiry in years, rounded to whole days."""
        days = max(1, int(round(expiry * 365)))
        return self.eval_date + ql.Period(days, ql.Days)

    def _pricing_engine(self, process: ql.BlackScholesMertonProcess) -> ql.PricingEngine:
        if self.engine == "analytic":
            return ql.AnalyticEuropeanEngine(process)
        return ql.BinomialVanillaEngine(process, "crr", self.steps)

    def calculate_price(self, contract: OptionContract, snapshot: MarketSnapshot) -> float:
        """Calculate the option NPV with the configured engine.

        Raises:
            UnsupportedStyleError: Analytic engine with an American contract
            InvalidParameterError: If spot, strike, expiry or volatility is non-positive
        """
        if self.engine == "analytic" and contract.is_american:
            raise UnsupportedStyleError(
                f"Unsupported style: {self.name} prices European options only",
                style=contract.style.value,
            )
        validate_inputs(contract, snapshot)

        # Instruments read the global evaluation date when computing NPV; hold the
        # lock while it is swapped so concurrent pricers never see each other's date
        with _EVALUATION_DATE_LOCK:
            settings = ql.Settings.instance()
            previous_date = settings.evaluationDate
            settings.evaluationDate = self.eval_date
            try:
                process = create_black_scholes_process(snapshot, self.eval_date)
                option = create_vanilla_option(contract, self.eval_date, self.expiry_date(contract.expiry))
                option.setPricingEngine(self._pricing_engine(process))
                price = option.NPV()
            finally:
                settings.evaluationDate = previous_date

        logger.debug(f"{self.name} {contract.kind.value}/{contract.style.value} K={contract.strike}: {price:.6f}")
        return price

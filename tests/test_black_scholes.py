"""Tests for closed-form Black-Scholes pricing and Greeks."""

import numpy as np
import pytest

from pricing.black_scholes import AnalyticPricer, Greeks, put_call_parity_gap
from pricing.errors import InvalidParameterError, UnsupportedStyleError
from pricing.math_utils import normal_cdf
from pricing.models import ExerciseStyle, MarketSnapshot, OptionContract, OptionKind


def european(kind: OptionKind, strike: float = 100.0, expiry: float = 0.25) -> OptionContract:
    return OptionContract(kind, ExerciseStyle.EUROPEAN, strike, expiry)


class TestNormalCdf:
    """Tests for the erfc-based normal CDF."""

    def test_midpoint(self):
        assert normal_cdf(0.0) == 0.5

    def test_known_quantile(self):
        assert np.isclose(normal_cdf(1.96), 0.9750021, atol=1e-7)

    def test_symmetry(self):
        for x in [0.1, 0.5, 1.0, 2.5]:
            assert np.isclose(normal_cdf(x) + normal_cdf(-x), 1.0, atol=1e-12)

    def test_infinite_limits(self):
        assert normal_cdf(np.inf) == 1.0
        assert normal_cdf(-np.inf) == 0.0


class TestAnalyticPrice:
    """Tests for BS pricing."""

    @pytest.fixture
    def pricer(self):
        return AnalyticPricer()

    @pytest.fixture
    def snapshot(self):
        return MarketSnapshot(spot=100, rate=0.05, volatility=0.2)

    def test_name(self, pricer):
        assert pricer.name == "Black-Scholes"

    def test_call_price_atm(self, pricer, snapshot):
        """ATM 3-month call should be roughly $4-5."""
        price = pricer.calculate_price(european(OptionKind.CALL), snapshot)
        assert 3 < price < 7

    def test_put_below_call_atm(self, pricer, snapshot):
        """ATM put is cheaper than the call with positive rates."""
        call = pricer.calculate_price(european(OptionKind.CALL), snapshot)
        put = pricer.calculate_price(european(OptionKind.PUT), snapshot)
        assert put < call

    def test_textbook_value(self, pricer):
        """S=K=100, r=5%, σ=20%, T=1 call is 10.4506."""
        price = pricer.calculate_price(
            european(OptionKind.CALL, expiry=1.0), MarketSnapshot(100, 0.05, 0.2)
        )
        assert np.isclose(price, 10.4506, atol=1e-4)

    def test_out_of_the_money_example(self, pricer):
        """S=95, K=100, r=5%, σ=20%, T=1 call."""
        price = pricer.calculate_price(
            european(OptionKind.CALL, expiry=1.0), MarketSnapshot(95, 0.05, 0.2)
        )
        assert np.isclose(price, 7.5109, atol=1e-3)

    @pytest.mark.parametrize("strike,expiry,vol", [(100, 0.25, 0.2), (80, 1.0, 0.35), (130, 2.0, 0.1)])
    def test_put_call_parity(self, pricer, strike, expiry, vol):
        """C - P = S - K·exp(-rT)."""
        snapshot = MarketSnapshot(spot=100, rate=0.05, volatility=vol)
        call = pricer.calculate_price(european(OptionKind.CALL, strike, expiry), snapshot)
        put = pricer.calculate_price(european(OptionKind.PUT, strike, expiry), snapshot)

        expected_diff = snapshot.spot - strike * np.exp(-snapshot.rate * expiry)
        assert np.isclose(call - put, expected_diff, atol=1e-6)
        assert abs(put_call_parity_gap(call, put, 100, strike, 0.05, expiry)) < 1e-6

    def test_call_approaches_intrinsic_itm(self, pricer, snapshot):
        """Deep ITM call should approach discounted intrinsic value."""
        price = pricer.calculate_price(european(OptionKind.CALL, 50, 0.01), snapshot)
        assert np.isclose(price, 50, atol=1)

    def test_put_approaches_zero_far_otm(self, pricer, snapshot):
        price = pricer.calculate_price(european(OptionKind.PUT, 50, 0.1), snapshot)
        assert price < 0.01

    def test_zero_rate_allowed(self, pricer):
        price = pricer.calculate_price(european(OptionKind.CALL), MarketSnapshot(100, 0.0, 0.2))
        assert price > 0


class TestAnalyticErrors:
    """Tests for rejected inputs."""

    @pytest.fixture
    def pricer(self):
        return AnalyticPricer()

    def test_american_rejected(self, pricer):
        contract = OptionContract(OptionKind.CALL, ExerciseStyle.AMERICAN, 100, 1.0)
        with pytest.raises(UnsupportedStyleError, match="Unsupported style") as exc_info:
            pricer.calculate_price(contract, MarketSnapshot(100, 0.05, 0.2))
        assert exc_info.value.style == "american"

    @pytest.mark.parametrize(
        "contract,snapshot,parameter",
        [
            (european(OptionKind.CALL), MarketSnapshot(-1, 0.05, 0.2), "spot"),
            (european(OptionKind.CALL, strike=0), MarketSnapshot(100, 0.05, 0.2), "strike"),
            (european(OptionKind.PUT, expiry=0), MarketSnapshot(100, 0.05, 0.2), "expiry"),
            (european(OptionKind.PUT), MarketSnapshot(100, 0.05, 0.0), "volatility"),
            (european(OptionKind.PUT), MarketSnapshot(float("nan"), 0.05, 0.2), "spot"),
            (european(OptionKind.CALL), MarketSnapshot(100, float("nan"), 0.2), "rate"),
            (european(OptionKind.CALL), MarketSnapshot(100, float("inf"), 0.2), "rate"),
        ],
    )
    def test_invalid_parameters(self, pricer, contract, snapshot, parameter):
        with pytest.raises(InvalidParameterError, match="Invalid parameters") as exc_info:
            pricer.calculate_price(contract, snapshot)
        assert exc_info.value.parameter == parameter

    def test_errors_are_value_errors(self, pricer):
        with pytest.raises(ValueError):
            pricer.calculate_price(european(OptionKind.CALL), MarketSnapshot(0, 0.05, 0.2))


class TestAnalyticGreeks:
    """Tests for closed-form Greeks."""

    @pytest.fixture
    def pricer(self):
        return AnalyticPricer()

    @pytest.fixture
    def snapshot(self):
        return MarketSnapshot(spot=100, rate=0.05, volatility=0.2)

    def test_delta_ranges(self, pricer, snapshot):
        for strike in [80, 100, 120]:
            call = pricer.greeks(european(OptionKind.CALL, strike), snapshot)
            put = pricer.greeks(european(OptionKind.PUT, strike), snapshot)
            assert 0 <= call.delta <= 1
            assert -1 <= put.delta <= 0
            assert np.isclose(call.delta - put.delta, 1.0)

    def test_gamma_maximum_near_atm(self, pricer, snapshot):
        gammas = [pricer.greeks(european(OptionKind.CALL, k), snapshot).gamma for k in [80, 100, 120]]
        assert gammas[1] > gammas[0]
        assert gammas[1] > gammas[2]

    def test_delta_matches_finite_difference(self, pricer, snapshot):
        contract = european(OptionKind.CALL)
        h = 0.01
        up = pricer.calculate_price(contract, MarketSnapshot(100 + h, 0.05, 0.2))
        down = pricer.calculate_price(contract, MarketSnapshot(100 - h, 0.05, 0.2))
        greeks = pricer.greeks(contract, snapshot)
        assert np.isclose(greeks.delta, (up - down) / (2 * h), atol=1e-5)

    def test_vega_per_vol_point(self, pricer, snapshot):
        contract = european(OptionKind.CALL)
        base = pricer.calculate_price(contract, snapshot)
        bumped = pricer.calculate_price(contract, snapshot.with_volatility(0.21))
        greeks = pricer.greeks(contract, snapshot)
        assert np.isclose(greeks.vega, bumped - base, rtol=0.02)

    def test_theta_negative_for_call(self, pricer, snapshot):
        assert pricer.greeks(european(OptionKind.CALL), snapshot).theta < 0

    def test_greeks_object(self, pricer, snapshot):
        greeks = pricer.greeks(european(OptionKind.CALL), snapshot)

        assert isinstance(greeks, Greeks)
        assert greeks.gamma > 0
        assert greeks.vega > 0
        assert greeks.rho > 0

        d = greeks.to_dict()
        assert set(d) == {"delta", "gamma", "vega", "theta", "rho"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

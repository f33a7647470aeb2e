"""Property-based tests for roll calculations.

**Feature: roll-calculator**
"""

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from optionview.models import Position, PositionType
from optionview.payoff import (
    build_rolled_position,
    calculate_close_profit_loss,
    calculate_leg_payoff,
    calculate_roll,
    calculate_roll_outcomes,
    can_roll,
)

SOLD_TYPES = tuple(t for t in PositionType if t.is_sold)


@st.composite
def sold_position_strategy(draw):
    """Generate sold positions that are eligible for a roll."""
    position_type = draw(st.sampled_from(SOLD_TYPES))
    cost_basis = 0.0
    if position_type == PositionType.COVERED_CALL:
        cost_basis = draw(st.floats(min_value=1.0, max_value=500.0, allow_nan=False, allow_infinity=False))

    return Position(
        symbol="TEST",
        position_type=position_type,
        strike_price=draw(st.floats(min_value=1.0, max_value=500.0, allow_nan=False, allow_infinity=False)),
        option_price=draw(st.floats(min_value=0.01, max_value=25.0, allow_nan=False, allow_infinity=False)),
        cost_basis_per_share=cost_basis,
        contracts=draw(st.integers(min_value=1, max_value=10)),
    )


prices = st.floats(min_value=0.01, max_value=50.0, allow_nan=False, allow_infinity=False)
strikes = st.floats(min_value=1.0, max_value=500.0, allow_nan=False, allow_infinity=False)


def make_position(position_type, strike, premium, contracts=1, cost_basis=0.0):
    return Position(
        symbol="TEST",
        position_type=position_type,
        strike_price=strike,
        option_price=premium,
        contracts=contracts,
        cost_basis_per_share=cost_basis,
    )


class TestClosingProfitLoss:
    """
    **Feature: roll-calculator, Property 5: Roll Close-P/L Sign**

    *For any* sold position, buying back for less than the original premium
    is a gain and buying back for more is a loss.
    """

    @given(position=sold_position_strategy(), close_price=prices, data=st.data())
    @settings(max_examples=100)
    def test_close_sign(self, position: Position, close_price: float, data):
        contracts = data.draw(st.integers(min_value=1, max_value=position.contracts))
        close_pl = calculate_close_profit_loss(position, close_price, contracts)

        if close_price < position.option_price:
            assert close_pl > 0
        elif close_price > position.option_price:
            assert close_pl < 0
        else:
            assert close_pl == 0

    def test_close_amount(self):
        position = make_position(PositionType.NAKED_PUT, 50.0, 2.0, contracts=3)

        assert calculate_close_profit_loss(position, 0.5, 2) == pytest.approx(300.0)


class TestCanRoll:
    """Preconditions for a roll calculation."""

    def test_valid_roll(self):
        position = make_position(PositionType.CASH_SECURED_PUT, 50.0, 2.0, contracts=2)

        assert can_roll(position, 0.5, 2, 48.0, 1.8)
        assert can_roll(position, 0.5, 1, 48.0, 1.8)

    @pytest.mark.parametrize(
        "close_price,contracts,new_strike,new_premium",
        [
            (0.0, 1, 48.0, 1.8),
            (-1.0, 1, 48.0, 1.8),
            (0.5, 0, 48.0, 1.8),
            (0.5, 3, 48.0, 1.8),
            (0.5, 1, 0.0, 1.8),
            (0.5, 1, 48.0, 0.0),
        ],
    )
    def test_invalid_inputs(self, close_price, contracts, new_strike, new_premium):
        position = make_position(PositionType.CASH_SECURED_PUT, 50.0, 2.0, contracts=2)

        assert not can_roll(position, close_price, contracts, new_strike, new_premium)

    @pytest.mark.parametrize("position_type", [PositionType.BUY_CALL, PositionType.BUY_PUT])
    def test_long_options_cannot_roll(self, position_type):
        position = make_position(position_type, 50.0, 2.0)

        assert not can_roll(position, 0.5, 1, 48.0, 1.8)


class TestRolledPosition:
    """The new position mirrors the old one at the new strike."""

    def test_cash_secured_put_takes_new_strike_as_cost_basis(self):
        old = make_position(PositionType.CASH_SECURED_PUT, 50.0, 2.0, contracts=2)
        new = build_rolled_position(old, 1, 48.0, 1.8)

        assert new.position_type == PositionType.CASH_SECURED_PUT
        assert new.strike_price == 48.0
        assert new.option_price == 1.8
        assert new.contracts == 1
        assert new.cost_basis_per_share == 48.0

    def test_covered_call_keeps_cost_basis(self):
        old = make_position(PositionType.COVERED_CALL, 190.0, 2.5, contracts=3, cost_basis=175.0)
        new = build_rolled_position(old, 2, 200.0, 3.2)

        assert new.cost_basis_per_share == 175.0
        assert new.contracts == 2

    def test_symbol_and_expiration_carry_over(self):
        old = Position(
            symbol="aapl",
            position_type=PositionType.NAKED_CALL,
            strike_price=190.0,
            option_price=2.5,
            contracts=1,
            expiration_date="2025-01-17",
        )
        new = build_rolled_position(old, 1, 200.0, 3.2)

        assert new.symbol == "AAPL"
        assert new.expiration_date == old.expiration_date


class TestRollScenarios:
    """Combined curve and metrics after a roll."""

    def test_cash_secured_put_roll(self):
        old = make_position(PositionType.CASH_SECURED_PUT, 50.0, 2.0)
        result = calculate_roll(old, 0.5, 1, 48.0, 1.8)

        assert result.close_profit_loss == pytest.approx(150.0)
        assert len(result.combined_curve) == 101
        assert result.metrics.max_profit == pytest.approx(330.0)
        assert result.metrics.max_loss == pytest.approx(150.0 + 180.0 - 4800.0)
        assert not result.metrics.is_max_loss_unlimited
        assert result.break_even_price == pytest.approx(44.7)
        assert result.max_profit_point.profit == pytest.approx(result.metrics.max_profit)

    def test_naked_call_roll_is_unlimited(self):
        old = make_position(PositionType.NAKED_CALL, 110.0, 1.5)
        result = calculate_roll(old, 3.0, 1, 120.0, 2.0)

        assert result.close_profit_loss == pytest.approx(-150.0)
        assert result.metrics.is_max_loss_unlimited
        assert result.metrics.max_profit == pytest.approx(50.0)
        assert result.metrics.max_loss < -100_000

    def test_partial_roll_scales_new_leg(self):
        old = make_position(PositionType.NAKED_PUT, 100.0, 3.0, contracts=4)
        result = calculate_roll(old, 1.0, 1, 95.0, 2.0)

        assert result.new_position.contracts == 1
        assert result.close_profit_loss == pytest.approx(200.0)
        assert result.metrics.max_profit == pytest.approx(400.0)

    def test_domain_spans_both_strikes(self):
        old = make_position(PositionType.NAKED_PUT, 100.0, 3.0)
        result = calculate_roll(old, 1.0, 1, 80.0, 2.0)
        curve_prices = [point.underlying_price for point in result.combined_curve]

        assert curve_prices[0] <= 80.0
        assert curve_prices[-1] >= 100.0

    @given(position=sold_position_strategy(), close_price=prices, new_strike=strikes, new_premium=prices)
    @settings(max_examples=50)
    def test_curve_is_close_plus_new_leg(
        self, position: Position, close_price: float, new_strike: float, new_premium: float
    ):
        assume(can_roll(position, close_price, position.contracts, new_strike, new_premium))
        result = calculate_roll(position, close_price, position.contracts, new_strike, new_premium, steps=40)

        for point in result.combined_curve:
            expected = result.close_profit_loss + calculate_leg_payoff(
                result.new_position, point.underlying_price
            )
            assert point.profit == pytest.approx(expected)

        assert result.metrics.max_profit == pytest.approx(
            max(point.profit for point in result.combined_curve)
        )
        assert result.metrics.max_loss <= min(point.profit for point in result.combined_curve)
        assert result.metrics.is_max_loss_unlimited == (
            position.position_type == PositionType.NAKED_CALL
        )


class TestRollOutcomes:
    """Assigned and not-assigned scenarios after a roll."""

    def test_covered_call(self):
        old = make_position(PositionType.COVERED_CALL, 100.0, 5.0, cost_basis=95.0)
        outcome = calculate_roll_outcomes(old, 105.0, 2.0, current_price=98.0)

        assert outcome.exercised_profit_loss == pytest.approx(1200.0)
        assert outcome.exercised_return == pytest.approx(1200.0 / 9500.0)
        assert outcome.not_exercised_profit_loss == pytest.approx(1700.0)
        assert outcome.not_exercised_return == pytest.approx(1700.0 / 9500.0)

    def test_naked_put(self):
        old = make_position(PositionType.NAKED_PUT, 100.0, 3.0)
        outcome = calculate_roll_outcomes(old, 95.0, 2.0, current_price=97.0)

        assert outcome.exercised_profit_loss == pytest.approx(0.0)
        assert outcome.exercised_return == pytest.approx(0.0)
        assert outcome.not_exercised_profit_loss == pytest.approx(300.0)
        assert outcome.not_exercised_return == pytest.approx(300.0 / 9700.0)

    def test_all_contracts_count(self):
        old = make_position(PositionType.CASH_SECURED_PUT, 50.0, 2.0, contracts=3)
        outcome = calculate_roll_outcomes(old, 48.0, 1.8, current_price=49.0)

        assert outcome.exercised_profit_loss == pytest.approx((48.0 - 50.0) * 300 + 3.8 * 300)
        assert outcome.not_exercised_profit_loss == pytest.approx((48.0 - 49.0) * 300 + 3.8 * 300)

    def test_zero_cost_basis_gives_zero_return(self):
        old = make_position(PositionType.NAKED_CALL, 110.0, 1.5)
        outcome = calculate_roll_outcomes(old, 120.0, 2.0, current_price=112.0)

        assert outcome.exercised_profit_loss == pytest.approx(110.0 * 100 + 350.0)
        assert outcome.exercised_return == 0.0
        assert outcome.not_exercised_return == 0.0

    def test_zero_current_price_gives_zero_return(self):
        old = make_position(PositionType.NAKED_PUT, 100.0, 3.0)
        outcome = calculate_roll_outcomes(old, 95.0, 2.0, current_price=0.0)

        assert outcome.not_exercised_profit_loss == pytest.approx(95.0 * 100 + 500.0)
        assert outcome.not_exercised_return == 0.0

    @given(position=sold_position_strategy(), new_strike=strikes, new_premium=prices, current_price=strikes)
    @settings(max_examples=50)
    def test_not_assigned_beats_assigned_by_strike_gap_for_calls(
        self, position: Position, new_strike: float, new_premium: float, current_price: float
    ):
        assume(position.position_type.is_call)
        outcome = calculate_roll_outcomes(position, new_strike, new_premium, current_price)

        gap = (new_strike - position.strike_price) * position.quantity
        assert outcome.not_exercised_profit_loss - outcome.exercised_profit_loss == pytest.approx(
            gap, abs=1e-6 * max(abs(gap), 1.0)
        )

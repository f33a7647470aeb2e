"""Tests for the data models.

**Feature: option-payoff**
"""

import math
from datetime import date

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from optionview.models import (
    ExerciseStatus,
    PayoffMetrics,
    PayoffPoint,
    Position,
    PositionType,
    RollResult,
)


class TestPositionValidation:
    """Field constraints on Position."""

    def test_defaults(self):
        position = Position(
            symbol="spy ",
            position_type=PositionType.NAKED_PUT,
            strike_price=450.0,
            option_price=3.2,
            contracts=2,
        )

        assert position.symbol == "SPY"
        assert position.cost_basis_per_share == 0.0
        assert position.exercise_status == ExerciseStatus.UNKNOWN
        assert position.expiration_date is None
        assert position.quantity == 200
        assert position.premium == pytest.approx(640.0)

    def test_accepts_type_values(self):
        position = Position(
            symbol="AAPL",
            position_type="CashSecuredPut",
            strike_price=180.0,
            option_price=2.0,
            contracts=1,
            exercise_status="NotExercised",
            expiration_date="2025-01-17",
        )

        assert position.position_type == PositionType.CASH_SECURED_PUT
        assert position.exercise_status == ExerciseStatus.NOT_EXERCISED
        assert position.expiration_date == date(2025, 1, 17)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"strike_price": 0.0},
            {"strike_price": -5.0},
            {"option_price": -0.1},
            {"contracts": 0},
            {"symbol": ""},
            {"position_type": "Straddle"},
        ],
    )
    def test_rejects_invalid_fields(self, overrides):
        fields = {
            "symbol": "AAPL",
            "position_type": PositionType.NAKED_CALL,
            "strike_price": 190.0,
            "option_price": 2.5,
            "contracts": 1,
        }
        fields.update(overrides)

        with pytest.raises(ValidationError):
            Position(**fields)

    def test_covered_call_requires_cost_basis(self):
        with pytest.raises(ValidationError):
            Position(
                symbol="AAPL",
                position_type=PositionType.COVERED_CALL,
                strike_price=190.0,
                option_price=2.5,
                contracts=1,
            )

    def test_positions_are_immutable(self):
        position = Position(
            symbol="AAPL",
            position_type=PositionType.NAKED_CALL,
            strike_price=190.0,
            option_price=2.5,
            contracts=1,
        )

        with pytest.raises(ValidationError):
            position.strike_price = 200.0

    def test_display_name(self):
        position = Position(
            symbol="AAPL",
            position_type=PositionType.CASH_SECURED_PUT,
            strike_price=47.5,
            option_price=1.0,
            contracts=1,
        )

        assert position.display_name == "Sell Cash-Secured Put @ $47.50"


class TestPositionType:
    """Classification helpers on PositionType."""

    @given(position_type=st.sampled_from(list(PositionType)))
    @settings(max_examples=20)
    def test_call_put_partition(self, position_type: PositionType):
        assert position_type.is_call != position_type.is_put

    def test_sold_types(self):
        sold = {t for t in PositionType if t.is_sold}

        assert sold == {
            PositionType.COVERED_CALL,
            PositionType.NAKED_CALL,
            PositionType.CASH_SECURED_PUT,
            PositionType.NAKED_PUT,
        }

    def test_naked_types(self):
        assert {t for t in PositionType if t.is_naked} == {
            PositionType.NAKED_CALL,
            PositionType.NAKED_PUT,
        }


class TestMarginCost:
    """Margin estimates for naked positions."""

    def test_estimates(self):
        naked_call = Position(
            symbol="X", position_type=PositionType.NAKED_CALL,
            strike_price=100.0, option_price=1.0, contracts=2,
        )
        naked_put = Position(
            symbol="X", position_type=PositionType.NAKED_PUT,
            strike_price=100.0, option_price=1.0, contracts=2,
        )

        assert naked_call.get_margin_cost() == pytest.approx(4000.0)
        assert naked_put.get_margin_cost() == pytest.approx(3000.0)

    def test_other_types_hold_no_margin(self):
        position = Position(
            symbol="X", position_type=PositionType.CASH_SECURED_PUT,
            strike_price=100.0, option_price=1.0, contracts=1, margin_cost=500.0,
        )

        assert position.get_margin_cost() == 0.0


class TestResultModels:
    """Derived properties on result models."""

    def test_unlimited_profit(self):
        metrics = PayoffMetrics(max_profit=math.inf, max_loss=-500.0)

        assert metrics.is_max_profit_unlimited
        assert not metrics.is_max_loss_unlimited
        assert metrics.break_even_prices == []

    def test_roll_break_even_is_first(self):
        new_position = Position(
            symbol="X", position_type=PositionType.NAKED_PUT,
            strike_price=48.0, option_price=1.8, contracts=1,
        )
        result = RollResult(
            close_profit_loss=150.0,
            new_position=new_position,
            combined_curve=[PayoffPoint(underlying_price=48.0, profit=330.0)],
            metrics=PayoffMetrics(max_profit=330.0, max_loss=-4470.0, break_even_prices=[44.7, 60.0]),
        )

        assert result.break_even_price == 44.7
        assert result.max_profit_point is None

    def test_roll_without_break_even(self):
        new_position = Position(
            symbol="X", position_type=PositionType.NAKED_PUT,
            strike_price=48.0, option_price=1.8, contracts=1,
        )
        result = RollResult(
            close_profit_loss=0.0,
            new_position=new_position,
            combined_curve=[],
            metrics=PayoffMetrics(max_profit=0.0, max_loss=0.0),
        )

        assert result.break_even_price is None

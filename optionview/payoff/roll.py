"""Roll scenario calculations.

A roll buys back some or all contracts of an existing short option and
opens the same number of contracts of the same type at a new strike. The
buy-back realizes a fixed P/L; the new position adds its expiration payoff.
"""

import logging

from optionview.models import (
    CONTRACT_MULTIPLIER,
    PayoffMetrics,
    PayoffPoint,
    Position,
    PositionType,
    RollOutcome,
    RollResult,
)
from optionview.payoff.calculator import (
    DEFAULT_STEPS,
    calculate_leg_payoff,
    generate_price_range,
)
from optionview.payoff.metrics import EXTREME_PRICE_MULTIPLIER, calculate_break_even_points

logger = logging.getLogger(__name__)


def can_roll(
    old_position: Position,
    close_price: float,
    contracts_to_roll: int,
    new_strike: float,
    new_premium: float,
) -> bool:
    """Check the inputs a roll calculation requires.

    The calculator itself does not validate; callers should only invoke it
    when this returns True. Only sold positions can be rolled.
    """
    return (
        old_position.position_type.is_sold
        and close_price > 0
        and 0 < contracts_to_roll <= old_position.contracts
        and new_strike > 0
        and new_premium > 0
    )


def calculate_close_profit_loss(
    old_position: Position, close_price: float, contracts_to_roll: int
) -> float:
    """Realized P/L of buying back the rolled contracts.

    Closing does not trigger assignment, so only the option leg counts:
    premium originally received minus the buy-back cost.
    """
    quantity = contracts_to_roll * CONTRACT_MULTIPLIER
    return (old_position.option_price - close_price) * quantity


def build_rolled_position(
    old_position: Position,
    contracts_to_roll: int,
    new_strike: float,
    new_premium: float,
) -> Position:
    """Create the position opened by the roll.

    The new position keeps the old type. A cash-secured put would be
    assigned at the new strike, so that becomes its cost basis; every other
    type keeps the original cost basis.
    """
    if old_position.position_type == PositionType.CASH_SECURED_PUT:
        cost_basis = new_strike
    else:
        cost_basis = old_position.cost_basis_per_share

    return Position(
        symbol=old_position.symbol,
        position_type=old_position.position_type,
        strike_price=new_strike,
        option_price=new_premium,
        cost_basis_per_share=cost_basis,
        contracts=contracts_to_roll,
        expiration_date=old_position.expiration_date,
    )


def calculate_roll(
    old_position: Position,
    close_price: float,
    contracts_to_roll: int,
    new_strike: float,
    new_premium: float,
    steps: int = DEFAULT_STEPS,
) -> RollResult:
    """Calculate the combined outcome of rolling a short option.

    Args:
        old_position: Position being rolled.
        close_price: Per-share cost to buy back the existing option.
        contracts_to_roll: Contracts closed and reopened.
        new_strike: Strike of the new option.
        new_premium: Per-share premium of the new option.
        steps: Number of price intervals for the combined curve.

    Returns:
        RollResult with the close P/L, new position, combined curve and its
        metrics. Inputs are assumed to satisfy can_roll().
    """
    close_profit_loss = calculate_close_profit_loss(old_position, close_price, contracts_to_roll)
    new_position = build_rolled_position(old_position, contracts_to_roll, new_strike, new_premium)

    def total_at(price: float) -> float:
        return close_profit_loss + calculate_leg_payoff(new_position, price)

    prices = generate_price_range([old_position, new_position], steps)
    curve = [PayoffPoint(underlying_price=price, profit=total_at(price)) for price in prices]
    profits = [point.profit for point in curve]

    max_profit = max(profits, default=0.0)
    max_loss = min(profits, default=0.0)
    is_max_loss_unlimited = False

    # Boundary probe is keyed off the old type, which the new position mirrors
    if old_position.position_type == PositionType.NAKED_CALL:
        max_price = max(prices, default=0.0)
        if max_price > 0:
            max_loss = min(max_loss, total_at(max_price * EXTREME_PRICE_MULTIPLIER))
        is_max_loss_unlimited = True
    else:
        max_loss = min(max_loss, total_at(0.0))

    metrics = PayoffMetrics(
        max_profit=max_profit,
        max_loss=max_loss,
        is_max_loss_unlimited=is_max_loss_unlimited,
        break_even_prices=calculate_break_even_points(curve),
    )

    logger.debug(
        "Rolled %d %s contract(s) to strike %.2f: close P/L %.2f",
        contracts_to_roll, old_position.position_type.value, new_strike, close_profit_loss,
    )

    return RollResult(
        close_profit_loss=close_profit_loss,
        new_position=new_position,
        combined_curve=curve,
        metrics=metrics,
        max_profit_point=max(curve, key=lambda point: point.profit, default=None),
    )


def _ratio(profit_loss: float, capital: float) -> float:
    return profit_loss / capital if capital > 0 else 0.0


def calculate_roll_outcomes(
    old_position: Position,
    new_strike: float,
    new_premium: float,
    current_price: float,
) -> RollOutcome:
    """Compare being assigned on the old option with not being assigned.

    Both scenarios count the old and new premium on every contract of the
    old position.

    Calls: assignment sells the shares at the old strike; without it the
    shares are held and sold at the new strike. Capital is the stock cost
    basis either way.

    Puts: assignment buys at the old strike and later sells at the new
    strike; without it the shares are bought at the current price and sold
    at the new strike. Capital is the old strike or the current price.

    Args:
        old_position: Sold position being rolled.
        new_strike: Strike of the new option.
        new_premium: Per-share premium of the new option.
        current_price: Current underlying price.

    Returns:
        RollOutcome with P/L and fractional return for each scenario.
    """
    quantity = old_position.quantity
    total_premium = (old_position.option_price + new_premium) * quantity
    cost_basis = old_position.cost_basis_per_share

    if old_position.position_type.is_call:
        exercised_pl = (old_position.strike_price - cost_basis) * quantity + total_premium
        exercised_capital = cost_basis * quantity
        not_exercised_pl = (new_strike - cost_basis) * quantity + total_premium
        not_exercised_capital = cost_basis * quantity
    else:
        exercised_pl = (new_strike - old_position.strike_price) * quantity + total_premium
        exercised_capital = old_position.strike_price * quantity
        not_exercised_pl = (new_strike - current_price) * quantity + total_premium
        not_exercised_capital = current_price * quantity

    return RollOutcome(
        exercised_profit_loss=exercised_pl,
        exercised_return=_ratio(exercised_pl, exercised_capital),
        not_exercised_profit_loss=not_exercised_pl,
        not_exercised_return=_ratio(not_exercised_pl, not_exercised_capital),
    )

"""Expiration payoff calculations for option positions.

This module provides the single-leg payoff formulas, the price axis shared
by every curve, and the aggregation of several legs into per-leg and total
profit/loss curves. All functions are pure and never mutate their inputs.
"""

import logging
from typing import Optional

from optionview.models import LegPayoff, PayoffData, PayoffPoint, Position, PositionType

logger = logging.getLogger(__name__)

DEFAULT_STEPS = 100

# Headroom around the strikes, as a fraction of the strike span or lowest strike
PRICE_BUFFER_RATIO = 0.2


def calculate_leg_payoff(position: Position, underlying_price: float) -> float:
    """Calculate the profit/loss of one position at expiration.

    Args:
        position: The option position.
        underlying_price: Underlying price at expiration.

    Returns:
        Profit (positive) or loss (negative) in currency units.
    """
    quantity = position.quantity
    premium = position.premium
    strike = position.strike_price
    position_type = position.position_type

    if position_type == PositionType.COVERED_CALL:
        # Shares are called away above the strike
        sale_price = min(underlying_price, strike)
        return (sale_price - position.cost_basis_per_share) * quantity + premium

    elif position_type == PositionType.NAKED_CALL:
        intrinsic = max(underlying_price - strike, 0.0)
        return premium - intrinsic * quantity

    elif position_type == PositionType.CASH_SECURED_PUT:
        if underlying_price >= strike:
            return premium
        return (underlying_price - strike) * quantity + premium

    elif position_type == PositionType.NAKED_PUT:
        intrinsic = max(strike - underlying_price, 0.0)
        return premium - intrinsic * quantity

    elif position_type == PositionType.BUY_CALL:
        intrinsic = max(underlying_price - strike, 0.0)
        return intrinsic * quantity - premium

    elif position_type == PositionType.BUY_PUT:
        intrinsic = max(strike - underlying_price, 0.0)
        return intrinsic * quantity - premium

    raise ValueError(f"Unsupported position type: {position_type!r}")


def calculate_total_payoff(positions: list[Position], underlying_price: float) -> float:
    """Sum the expiration payoff of all positions at one price."""
    return sum(calculate_leg_payoff(position, underlying_price) for position in positions)


def generate_price_range(positions: list[Position], steps: int = DEFAULT_STEPS) -> list[float]:
    """Generate evenly spaced underlying prices around the positions' strikes.

    The range spans every strike with a buffer of 20% of the strike span or
    20% of the lowest strike, whichever is larger, and never goes below 0.

    Args:
        positions: Positions whose strikes define the range.
        steps: Number of intervals; steps + 1 prices are returned.

    Returns:
        Ascending list of prices, empty when there are no positions.
    """
    if not positions:
        return []

    steps = max(steps, 1)

    strikes = [position.strike_price for position in positions]
    min_strike = min(strikes)
    max_strike = max(strikes)

    buffer = max((max_strike - min_strike) * PRICE_BUFFER_RATIO, min_strike * PRICE_BUFFER_RATIO)

    min_price = max(0.0, min_strike - buffer)
    max_price = max_strike + buffer
    step = (max_price - min_price) / steps

    logger.debug(
        "Price range %.4f..%.4f over %d steps for %d position(s)",
        min_price, max_price, steps, len(positions),
    )

    return [min_price + i * step for i in range(steps + 1)]


def calculate_payoff_data(positions: list[Position], steps: int = DEFAULT_STEPS) -> PayoffData:
    """Calculate per-leg and total payoff curves on a shared price axis.

    Args:
        positions: Positions to evaluate.
        steps: Number of price intervals.

    Returns:
        PayoffData whose leg and total curves have identical prices at
        matching indices.
    """
    prices = generate_price_range(positions, steps)

    legs = []
    for position in positions:
        points = [
            PayoffPoint(underlying_price=price, profit=calculate_leg_payoff(position, price))
            for price in prices
        ]
        legs.append(LegPayoff(position=position, points=points))

    total = []
    for index, price in enumerate(prices):
        profit = sum(leg.points[index].profit for leg in legs)
        total.append(PayoffPoint(underlying_price=price, profit=profit))

    return PayoffData(legs=legs, total=total)


def find_nearest_point(points: list[PayoffPoint], price: float) -> Optional[PayoffPoint]:
    """Return the curve sample closest to a price, without interpolating."""
    if not points:
        return None
    return min(points, key=lambda point: abs(point.underlying_price - price))


def profits_at_price(payoff_data: PayoffData, price: float) -> list[tuple[str, float]]:
    """Read every leg and the total at the sample nearest to a price.

    Returns:
        List of (label, profit) pairs, one per leg followed by "Total".
        Empty when the curves are empty.
    """
    total_point = find_nearest_point(payoff_data.total, price)
    if total_point is None:
        return []

    readings = []
    for leg in payoff_data.legs:
        point = find_nearest_point(leg.points, price)
        readings.append((leg.display_name, point.profit if point else 0.0))

    readings.append(("Total", total_point.profit))
    return readings

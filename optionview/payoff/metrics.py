"""Key metrics of option payoff curves.

Single positions use closed-form expressions. Combinations are scanned on
the generated price axis, with extra probes at the boundaries a finite grid
cannot reach: a price of 10x the top of the axis when a naked call makes
the loss unbounded, or a price of 0 otherwise. The 10x probe is an
approximation of "price goes to infinity", not a proof of unboundedness.
"""

import logging
import math

from optionview.models import PayoffMetrics, PayoffPoint, Position, PositionType
from optionview.payoff.calculator import (
    DEFAULT_STEPS,
    calculate_payoff_data,
    calculate_total_payoff,
)

logger = logging.getLogger(__name__)

# Multiple of the highest sampled price used to probe uncapped upside risk
EXTREME_PRICE_MULTIPLIER = 10

# Minimum profit change across a segment for interpolating a root
MIN_PROFIT_DELTA = 0.001

# A sample this close to zero counts as a break-even by itself
ZERO_PROFIT_TOLERANCE = 0.01

# Break-evens closer than this are merged
BREAK_EVEN_MERGE_DISTANCE = 0.50


def calculate_break_even_points(points: list[PayoffPoint]) -> list[float]:
    """Find the prices where a payoff curve crosses zero.

    A sign change between consecutive samples is resolved by linear
    interpolation. A sample within 0.01 of zero is reported as is. Results
    are sorted and any point within $0.50 of the previously kept point is
    dropped, so two genuine break-evens that close together are merged.

    Args:
        points: Curve samples in ascending price order.

    Returns:
        Ascending list of break-even prices.
    """
    break_evens = []

    for current, following in zip(points, points[1:]):
        crosses_up = current.profit < 0 < following.profit
        crosses_down = current.profit > 0 > following.profit

        if crosses_up or crosses_down:
            profit_diff = following.profit - current.profit
            if abs(profit_diff) > MIN_PROFIT_DELTA:
                ratio = -current.profit / profit_diff
                price_diff = following.underlying_price - current.underlying_price
                break_evens.append(current.underlying_price + ratio * price_diff)
        elif abs(current.profit) < ZERO_PROFIT_TOLERANCE:
            break_evens.append(current.underlying_price)

    unique_points = []
    for price in sorted(break_evens):
        if not unique_points or abs(price - unique_points[-1]) > BREAK_EVEN_MERGE_DISTANCE:
            unique_points.append(price)

    return unique_points


def calculate_single_position_metrics(
    position: Position, steps: int = DEFAULT_STEPS
) -> PayoffMetrics:
    """Calculate exact max profit/loss for one position.

    Break-even prices are still read from the sampled curve.
    """
    quantity = position.quantity
    premium = position.premium
    strike_value = position.strike_price * quantity
    position_type = position.position_type
    is_max_loss_unlimited = False

    if position_type == PositionType.COVERED_CALL:
        stock_cost = position.cost_basis_per_share * quantity
        max_profit = strike_value + premium - stock_cost
        max_loss = premium - stock_cost
    elif position_type == PositionType.CASH_SECURED_PUT:
        max_profit = premium
        max_loss = premium - strike_value
    elif position_type == PositionType.NAKED_CALL:
        max_profit = premium
        max_loss = 0.0
        is_max_loss_unlimited = True
    elif position_type == PositionType.NAKED_PUT:
        max_profit = premium
        max_loss = premium - strike_value
    elif position_type == PositionType.BUY_CALL:
        max_profit = math.inf
        max_loss = -premium
    elif position_type == PositionType.BUY_PUT:
        max_profit = strike_value - premium
        max_loss = -premium
    else:
        raise ValueError(f"Unsupported position type: {position_type!r}")

    payoff_data = calculate_payoff_data([position], steps)

    return PayoffMetrics(
        max_profit=max_profit,
        max_loss=max_loss,
        is_max_loss_unlimited=is_max_loss_unlimited,
        break_even_prices=calculate_break_even_points(payoff_data.total),
    )


def scan_metrics(positions: list[Position], steps: int = DEFAULT_STEPS) -> PayoffMetrics:
    """Derive metrics by scanning the total curve plus boundary probes."""
    payoff_data = calculate_payoff_data(positions, steps)
    profits = [point.profit for point in payoff_data.total]

    max_profit = max(profits, default=0.0)
    max_loss = min(profits, default=0.0)
    is_max_loss_unlimited = False

    has_naked_call = any(
        position.position_type == PositionType.NAKED_CALL for position in positions
    )

    if has_naked_call:
        max_price = max((point.underlying_price for point in payoff_data.total), default=0.0)
        if max_price > 0:
            extreme_price = max_price * EXTREME_PRICE_MULTIPLIER
            max_loss = min(max_loss, calculate_total_payoff(positions, extreme_price))
        is_max_loss_unlimited = True
    else:
        max_loss = min(max_loss, calculate_total_payoff(positions, 0.0))

    return PayoffMetrics(
        max_profit=max_profit,
        max_loss=max_loss,
        is_max_loss_unlimited=is_max_loss_unlimited,
        break_even_prices=calculate_break_even_points(payoff_data.total),
    )


def calculate_metrics(positions: list[Position], steps: int = DEFAULT_STEPS) -> PayoffMetrics:
    """Calculate max profit, max loss and break-evens for a set of positions.

    Args:
        positions: Positions to analyze; order does not matter.
        steps: Number of price intervals used for scanning.

    Returns:
        PayoffMetrics. An empty list yields all-zero metrics.
    """
    if len(positions) == 1:
        logger.debug("Closed-form metrics for %s", positions[0].display_name)
        return calculate_single_position_metrics(positions[0], steps)

    logger.debug("Scanning metrics for %d positions", len(positions))
    return scan_metrics(positions, steps)

"""Payoff engine module."""

from optionview.payoff.cache import PayoffCache, position_fingerprint
from optionview.payoff.calculator import (
    calculate_leg_payoff,
    calculate_payoff_data,
    calculate_total_payoff,
    find_nearest_point,
    generate_price_range,
    profits_at_price,
)
from optionview.payoff.metrics import (
    calculate_break_even_points,
    calculate_metrics,
    calculate_single_position_metrics,
    scan_metrics,
)
from optionview.payoff.presets import PRESETS, get_preset
from optionview.payoff.roll import (
    build_rolled_position,
    calculate_close_profit_loss,
    calculate_roll,
    calculate_roll_outcomes,
    can_roll,
)

__all__ = [
    "PRESETS",
    "PayoffCache",
    "build_rolled_position",
    "calculate_break_even_points",
    "calculate_close_profit_loss",
    "calculate_leg_payoff",
    "calculate_metrics",
    "calculate_payoff_data",
    "calculate_roll",
    "calculate_roll_outcomes",
    "calculate_single_position_metrics",
    "calculate_total_payoff",
    "can_roll",
    "find_nearest_point",
    "generate_price_range",
    "get_preset",
    "position_fingerprint",
    "profits_at_price",
    "scan_metrics",
]

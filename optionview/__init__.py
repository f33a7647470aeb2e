"""OptionView - expiration payoff analytics for option positions."""

from optionview.models import (
    ExerciseStatus,
    PayoffData,
    PayoffMetrics,
    PayoffPoint,
    Position,
    PositionType,
    RollResult,
)
from optionview.payoff import calculate_metrics, calculate_payoff_data, calculate_roll

__version__ = "0.1.0"

__all__ = [
    "ExerciseStatus",
    "PayoffData",
    "PayoffMetrics",
    "PayoffPoint",
    "Position",
    "PositionType",
    "RollResult",
    "calculate_metrics",
    "calculate_payoff_data",
    "calculate_roll",
]

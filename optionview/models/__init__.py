"""Data models for OptionView."""

from optionview.models.payoff import (
    LegPayoff,
    PayoffData,
    PayoffMetrics,
    PayoffPoint,
    RollOutcome,
    RollResult,
)
from optionview.models.position import (
    CONTRACT_MULTIPLIER,
    ExerciseStatus,
    Position,
    PositionType,
)
from optionview.models.summary import PortfolioSummary

__all__ = [
    "CONTRACT_MULTIPLIER",
    "ExerciseStatus",
    "LegPayoff",
    "PayoffData",
    "PayoffMetrics",
    "PayoffPoint",
    "PortfolioSummary",
    "Position",
    "PositionType",
    "RollOutcome",
    "RollResult",
]

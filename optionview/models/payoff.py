"""Payoff curve and metrics data models."""

import math
from typing import Optional

from pydantic import BaseModel, Field

from optionview.models.position import Position


class PayoffPoint(BaseModel):
    """A single sample of a profit/loss curve."""

    underlying_price: float = Field(..., description="Underlying price at expiration")
    profit: float = Field(..., description="Profit/Loss at that price")

    model_config = {"frozen": True}


class LegPayoff(BaseModel):
    """Profit/loss curve of one position."""

    position: Position = Field(..., description="Position the curve belongs to")
    points: list[PayoffPoint] = Field(default_factory=list, description="Curve samples")

    model_config = {"frozen": True}

    @property
    def display_name(self) -> str:
        return self.position.display_name


class PayoffData(BaseModel):
    """Per-leg curves plus their sum, sampled on a shared price axis."""

    legs: list[LegPayoff] = Field(default_factory=list, description="Per-leg curves")
    total: list[PayoffPoint] = Field(default_factory=list, description="Summed curve")

    model_config = {"frozen": True}


class PayoffMetrics(BaseModel):
    """Key figures of a payoff curve."""

    max_profit: float = Field(..., description="Maximum profit (inf when uncapped)")
    max_loss: float = Field(..., description="Maximum loss (negative for a loss)")
    is_max_loss_unlimited: bool = Field(default=False, description="Loss grows without bound")
    break_even_prices: list[float] = Field(
        default_factory=list, description="Break-even prices, ascending"
    )

    model_config = {"frozen": True}

    @property
    def is_max_profit_unlimited(self) -> bool:
        return math.isinf(self.max_profit)


class RollResult(BaseModel):
    """Outcome of closing an existing short option and opening a new one."""

    close_profit_loss: float = Field(..., description="Realized P/L from buying back")
    new_position: Position = Field(..., description="Position opened by the roll")
    combined_curve: list[PayoffPoint] = Field(
        default_factory=list, description="Close P/L plus new position payoff"
    )
    metrics: PayoffMetrics = Field(..., description="Metrics of the combined curve")
    max_profit_point: Optional[PayoffPoint] = Field(
        default=None, description="Curve sample with the highest profit"
    )

    model_config = {"frozen": True}

    @property
    def break_even_price(self) -> Optional[float]:
        if self.metrics.break_even_prices:
            return self.metrics.break_even_prices[0]
        return None


class RollOutcome(BaseModel):
    """Assigned and not-assigned scenarios after a roll.

    Returns are fractions of the capital committed in each scenario, 0 when
    that capital is 0.
    """

    exercised_profit_loss: float = Field(..., description="P/L if the old option is assigned")
    exercised_return: float = Field(..., description="Return if assigned")
    not_exercised_profit_loss: float = Field(..., description="P/L if it is not assigned")
    not_exercised_return: float = Field(..., description="Return if not assigned")

    model_config = {"frozen": True}

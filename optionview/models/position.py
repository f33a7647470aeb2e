"""Position data model."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

# Shares per option contract
CONTRACT_MULTIPLIER = 100

NAKED_CALL_MARGIN_RATE = 0.20
NAKED_PUT_MARGIN_RATE = 0.15


class PositionType(str, Enum):
    """Kind of option leg held."""

    COVERED_CALL = "CoveredCall"
    NAKED_CALL = "NakedCall"
    CASH_SECURED_PUT = "CashSecuredPut"
    NAKED_PUT = "NakedPut"
    BUY_CALL = "BuyCall"
    BUY_PUT = "BuyPut"

    @property
    def display_name(self) -> str:
        return POSITION_TYPE_NAMES[self]

    @property
    def is_call(self) -> bool:
        return self in (PositionType.COVERED_CALL, PositionType.NAKED_CALL, PositionType.BUY_CALL)

    @property
    def is_put(self) -> bool:
        return not self.is_call

    @property
    def is_sold(self) -> bool:
        return self not in (PositionType.BUY_CALL, PositionType.BUY_PUT)

    @property
    def is_naked(self) -> bool:
        return self in (PositionType.NAKED_CALL, PositionType.NAKED_PUT)


POSITION_TYPE_NAMES = {
    PositionType.COVERED_CALL: "Sell Covered Call",
    PositionType.NAKED_CALL: "Sell Naked Call",
    PositionType.CASH_SECURED_PUT: "Sell Cash-Secured Put",
    PositionType.NAKED_PUT: "Sell Naked Put",
    PositionType.BUY_CALL: "Buy Call",
    PositionType.BUY_PUT: "Buy Put",
}


class ExerciseStatus(str, Enum):
    """Whether a position was assigned at expiration."""

    EXERCISED = "Exercised"
    NOT_EXERCISED = "NotExercised"
    UNKNOWN = "Unknown"


class Position(BaseModel):
    """Represents one option leg (a set of contracts of a single type)."""

    symbol: str = Field(..., min_length=1, description="Underlying symbol")
    position_type: PositionType = Field(..., description="Option position type")
    strike_price: float = Field(..., gt=0, description="Strike price")
    option_price: float = Field(..., ge=0, description="Premium per share")
    cost_basis_per_share: float = Field(
        default=0.0, ge=0, description="Stock cost basis (covered calls)"
    )
    contracts: int = Field(..., ge=1, description="Number of contracts")
    margin_cost: Optional[float] = Field(
        default=None, ge=0, description="Margin held (naked positions)"
    )
    exercise_market_price: Optional[float] = Field(
        default=None, ge=0, description="Market price at assignment"
    )
    current_market_price: Optional[float] = Field(
        default=None, ge=0, description="Current market price"
    )
    exercise_status: ExerciseStatus = Field(
        default=ExerciseStatus.UNKNOWN, description="Assignment status"
    )
    expiration_date: Optional[date] = Field(default=None, description="Expiration date")

    model_config = {"frozen": True}

    @field_validator("symbol", mode="before")
    @classmethod
    def _normalize_symbol(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def _check_cost_basis(self) -> "Position":
        if self.position_type == PositionType.COVERED_CALL and self.cost_basis_per_share <= 0:
            raise ValueError("covered calls require a positive cost_basis_per_share")
        return self

    @property
    def quantity(self) -> int:
        """Number of underlying shares covered by the contracts."""
        return self.contracts * CONTRACT_MULTIPLIER

    @property
    def premium(self) -> float:
        """Total premium received (sold) or paid (bought)."""
        return self.option_price * self.quantity

    @property
    def display_name(self) -> str:
        return f"{self.position_type.display_name} @ ${self.strike_price:.2f}"

    def get_margin_cost(self) -> float:
        """Return the entered margin, or an estimate for naked positions.

        Naked calls are estimated at 20% of the strike value and naked puts
        at 15%. Other position types hold no margin.
        """
        if self.position_type == PositionType.NAKED_CALL:
            if self.margin_cost is not None:
                return self.margin_cost
            return self.strike_price * self.quantity * NAKED_CALL_MARGIN_RATE
        if self.position_type == PositionType.NAKED_PUT:
            if self.margin_cost is not None:
                return self.margin_cost
            return self.strike_price * self.quantity * NAKED_PUT_MARGIN_RATE
        return 0.0

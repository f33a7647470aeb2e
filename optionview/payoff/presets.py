"""Sample strategies for trying out payoff diagrams.

Each preset is a list of positions on one underlying, with expirations
counted from a reference day (today by default).
"""

from datetime import date, timedelta
from typing import Callable, Optional

from optionview.models import Position, PositionType


def _position(symbol, position_type, strike, premium, expiration, contracts=1, cost_basis=0.0):
    return Position(
        symbol=symbol,
        position_type=position_type,
        strike_price=strike,
        option_price=premium,
        cost_basis_per_share=cost_basis,
        contracts=contracts,
        expiration_date=expiration,
    )


def iron_condor(today: date) -> list[Position]:
    """Short call and short put around the price; neutral outlook."""
    expiration = today + timedelta(days=30)
    return [
        _position("AAPL", PositionType.NAKED_CALL, 185.0, 3.5, expiration),
        _position("AAPL", PositionType.NAKED_PUT, 165.0, 3.0, expiration),
    ]


def short_strangle(today: date) -> list[Position]:
    expiration = today + timedelta(days=45)
    return [
        _position("TSLA", PositionType.NAKED_CALL, 270.0, 8.5, expiration, contracts=2),
        _position("TSLA", PositionType.NAKED_PUT, 230.0, 7.0, expiration, contracts=2),
    ]


def covered_call(today: date) -> list[Position]:
    expiration = today + timedelta(days=30)
    return [
        _position("MSFT", PositionType.COVERED_CALL, 390.0, 6.5, expiration, cost_basis=370.0),
    ]


def cash_secured_put(today: date) -> list[Position]:
    expiration = today + timedelta(days=30)
    return [
        _position("NVDA", PositionType.CASH_SECURED_PUT, 480.0, 12.0, expiration),
    ]


def wheel(today: date) -> list[Position]:
    """Covered call on held shares plus a cash-secured put to add more."""
    expiration = today + timedelta(days=30)
    return [
        _position("AMD", PositionType.COVERED_CALL, 150.0, 5.0, expiration, cost_basis=140.0),
        _position("AMD", PositionType.CASH_SECURED_PUT, 130.0, 4.5, expiration),
    ]


def complex_strategy(today: date) -> list[Position]:
    """Short calls and puts across two expirations."""
    near = today + timedelta(days=30)
    far = today + timedelta(days=60)
    return [
        _position("SPY", PositionType.NAKED_CALL, 460.0, 5.0, near, contracts=2),
        _position("SPY", PositionType.NAKED_PUT, 440.0, 4.5, near, contracts=2),
        _position("SPY", PositionType.NAKED_CALL, 465.0, 7.0, far),
        _position("SPY", PositionType.NAKED_PUT, 435.0, 6.5, far),
    ]


PRESETS: dict[str, Callable[[date], list[Position]]] = {
    "iron-condor": iron_condor,
    "short-strangle": short_strangle,
    "covered-call": covered_call,
    "cash-secured-put": cash_secured_put,
    "wheel": wheel,
    "complex": complex_strategy,
}


def get_preset(name: str, today: Optional[date] = None) -> list[Position]:
    """Build a preset strategy by name.

    Raises:
        KeyError: If no preset has that name.
    """
    if name not in PRESETS:
        raise KeyError(f"Unknown preset '{name}'. Valid: {', '.join(PRESETS)}")
    return PRESETS[name](today or date.today())

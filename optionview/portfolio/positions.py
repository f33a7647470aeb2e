"""Position listing: search, sorting and grouping by expiration."""

from datetime import date
from enum import Enum
from typing import Optional

from optionview.models import Position


class PositionSortField(str, Enum):
    """Columns a position list can be sorted by."""

    SYMBOL = "symbol"
    TYPE = "type"
    EXPIRATION = "expiration"
    STRIKE = "strike"
    PREMIUM = "premium"
    AVG_PRICE = "avg_price"
    CONTRACTS = "contracts"
    EXERCISE = "exercise"


def _expiration_key(position: Position) -> date:
    return position.expiration_date or date.min


_SORT_KEYS = {
    PositionSortField.SYMBOL: lambda p: p.symbol.lower(),
    PositionSortField.TYPE: lambda p: p.position_type.value.lower(),
    PositionSortField.EXPIRATION: _expiration_key,
    PositionSortField.STRIKE: lambda p: p.strike_price,
    PositionSortField.PREMIUM: lambda p: p.option_price,
    PositionSortField.AVG_PRICE: lambda p: p.cost_basis_per_share,
    PositionSortField.CONTRACTS: lambda p: p.contracts,
    PositionSortField.EXERCISE: lambda p: p.exercise_status.value.lower(),
}


def list_positions(
    positions: list[Position],
    search: Optional[str] = None,
    sort_field: PositionSortField = PositionSortField.SYMBOL,
    descending: bool = False,
) -> list[Position]:
    """Filter and sort positions for display.

    Args:
        positions: All recorded positions.
        search: Case-insensitive substring the symbol must contain.
        sort_field: Column to sort by.
        descending: Reverse the sort order.

    Returns:
        New sorted list; the input is left untouched. Positions without an
        expiration date come last when sorting by expiration.
    """
    if search and search.strip():
        needle = search.strip().lower()
        positions = [p for p in positions if needle in p.symbol.lower()]

    sort_field = PositionSortField(sort_field)
    listed = sorted(positions, key=_SORT_KEYS[sort_field], reverse=descending)

    if sort_field == PositionSortField.EXPIRATION:
        # Undated positions stay last in either direction
        listed = [p for p in listed if p.expiration_date is not None] + [
            p for p in listed if p.expiration_date is None
        ]
    return listed


def group_by_expiration(positions: list[Position]) -> list[tuple[Optional[date], list[Position]]]:
    """Group positions by expiration date, earliest first.

    Positions without a date form a final group keyed by None. Order within
    a group follows the input.
    """
    grouped: dict[Optional[date], list[Position]] = {}
    for position in positions:
        grouped.setdefault(position.expiration_date, []).append(position)

    return sorted(grouped.items(), key=lambda item: (item[0] is None, item[0] or date.min))

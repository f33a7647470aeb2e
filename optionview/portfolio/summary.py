"""Portfolio aggregation across recorded positions.

Groups positions by symbol and works out how much capital each symbol ties
up, the cash expected back at settlement, and the resulting P/L. Positions
whose outcome cannot be determined (unknown assignment status, missing
market prices) contribute nothing rather than raising.
"""

import logging
from datetime import date
from enum import Enum
from typing import Optional

from optionview.models import ExerciseStatus, PortfolioSummary, Position, PositionType

logger = logging.getLogger(__name__)


class PortfolioSortField(str, Enum):
    """Columns a portfolio summary can be sorted by."""

    SYMBOL = "symbol"
    INVESTMENT = "investment"
    FINAL_SETTLEMENT_CASH = "final_settlement_cash"
    PROFIT_LOSS = "profit_loss"
    PROFIT_LOSS_PERCENTAGE = "profit_loss_percentage"
    PREMIUM = "premium"
    PREMIUM_PERCENTAGE = "premium_percentage"
    PORTFOLIO_DIVERSITY = "portfolio_diversity"


_SORT_KEYS = {
    PortfolioSortField.SYMBOL: lambda s: s.symbol.lower(),
    PortfolioSortField.INVESTMENT: lambda s: s.total_investment,
    PortfolioSortField.FINAL_SETTLEMENT_CASH: lambda s: s.final_settlement_cash,
    PortfolioSortField.PROFIT_LOSS: lambda s: s.profit_loss,
    PortfolioSortField.PROFIT_LOSS_PERCENTAGE: lambda s: s.profit_loss_percentage,
    PortfolioSortField.PREMIUM: lambda s: s.premium,
    PortfolioSortField.PREMIUM_PERCENTAGE: lambda s: s.premium_percentage,
    PortfolioSortField.PORTFOLIO_DIVERSITY: lambda s: s.portfolio_diversity,
}


def _percentage(part: float, whole: float) -> float:
    return (part / whole * 100) if whole > 0 else 0.0


def calculate_investment(position: Position) -> float:
    """Capital a position ties up.

    Covered calls hold the stock, cash-secured puts hold the strike value as
    collateral, naked positions hold margin and long options cost their
    premium.
    """
    position_type = position.position_type

    if position_type == PositionType.COVERED_CALL:
        return position.cost_basis_per_share * position.quantity
    elif position_type == PositionType.CASH_SECURED_PUT:
        return position.strike_price * position.quantity
    elif position_type.is_naked:
        return position.get_margin_cost()
    elif position_type in (PositionType.BUY_CALL, PositionType.BUY_PUT):
        return position.premium

    raise ValueError(f"Unsupported position type: {position_type!r}")


def _intrinsic_value(position: Position, price: float) -> float:
    if position.position_type.is_put:
        return max(0.0, position.strike_price - price)
    return max(0.0, price - position.strike_price)


def _settlement_price(position: Position) -> Optional[float]:
    """Market price an outcome is valued at, by assignment status."""
    if position.exercise_status == ExerciseStatus.EXERCISED:
        return position.exercise_market_price
    return position.current_market_price


def calculate_settlement(position: Position) -> Optional[tuple[float, float]]:
    """Cash at settlement and P/L of one position.

    Args:
        position: Position with exercise status and optional market prices.

    Returns:
        (final_settlement_cash, profit_loss), or None when the outcome
        cannot be computed.
    """
    status = position.exercise_status
    if status == ExerciseStatus.UNKNOWN:
        return None

    quantity = position.quantity
    premium = position.premium
    strike_value = position.strike_price * quantity
    position_type = position.position_type

    if position_type == PositionType.COVERED_CALL:
        stock_cost = position.cost_basis_per_share * quantity
        if status == ExerciseStatus.EXERCISED:
            # Shares delivered at the strike
            final_cash = premium + strike_value
            return final_cash, final_cash - stock_cost
        if position.current_market_price is not None:
            stock_value = position.current_market_price * quantity
            return premium, (stock_value - stock_cost) + premium
        return premium, premium

    elif position_type == PositionType.CASH_SECURED_PUT:
        if status == ExerciseStatus.EXERCISED:
            # Collateral spent on shares; value them at 0 when the price is unknown
            market_price = position.exercise_market_price or 0.0
            return premium, market_price * quantity + premium - strike_value
        return premium + strike_value, premium

    elif position_type.is_naked:
        margin = position.get_margin_cost()
        price = _settlement_price(position)
        if price is None:
            if status == ExerciseStatus.EXERCISED:
                return None
            return margin + premium, premium
        profit_loss = quantity * (position.option_price - _intrinsic_value(position, price))
        return margin + profit_loss, profit_loss

    elif position_type in (PositionType.BUY_CALL, PositionType.BUY_PUT):
        price = _settlement_price(position)
        if price is None:
            if status == ExerciseStatus.EXERCISED:
                return None
            # Expired worthless
            return 0.0, -premium
        final_cash = _intrinsic_value(position, price) * quantity
        return final_cash, final_cash - premium

    raise ValueError(f"Unsupported position type: {position_type!r}")


def summarize_symbol(symbol: str, positions: list[Position]) -> PortfolioSummary:
    """Aggregate the positions of one symbol.

    Diversity is left at 0; it depends on the rest of the portfolio and is
    filled in by build_portfolio_summaries().
    """
    total_investment = 0.0
    total_premium = 0.0
    final_settlement_cash = 0.0
    profit_loss = 0.0

    for position in positions:
        total_investment += calculate_investment(position)
        total_premium += position.premium if position.position_type.is_sold else -position.premium

        settlement = calculate_settlement(position)
        if settlement is None:
            continue
        final_cash, position_pl = settlement
        final_settlement_cash += final_cash
        profit_loss += position_pl

    return PortfolioSummary(
        symbol=symbol,
        total_investment=total_investment,
        final_settlement_cash=final_settlement_cash,
        profit_loss=profit_loss,
        profit_loss_percentage=_percentage(profit_loss, total_investment),
        premium=total_premium,
        premium_percentage=_percentage(total_premium, total_investment),
        positions=list(positions),
    )


def expiration_dates(positions: list[Position]) -> list[date]:
    """Sorted unique expiration dates of the positions that have one."""
    return sorted({p.expiration_date for p in positions if p.expiration_date is not None})


def build_portfolio_summaries(
    positions: list[Position],
    expiration_date: Optional[date] = None,
    search: Optional[str] = None,
    sort_field: PortfolioSortField = PortfolioSortField.SYMBOL,
    descending: bool = False,
) -> list[PortfolioSummary]:
    """Build per-symbol summaries for a portfolio.

    Args:
        positions: All recorded positions.
        expiration_date: Only include positions expiring on this date.
        search: Case-insensitive substring the symbol must contain.
        sort_field: Column to sort by.
        descending: Reverse the sort order.

    Returns:
        Sorted list of PortfolioSummary, one per symbol.
    """
    if expiration_date is not None:
        positions = [p for p in positions if p.expiration_date == expiration_date]

    grouped: dict[str, list[Position]] = {}
    for position in positions:
        grouped.setdefault(position.symbol, []).append(position)

    summaries = [summarize_symbol(symbol, group) for symbol, group in grouped.items()]

    # Diversity is measured against the filtered portfolio, before searching
    portfolio_investment = sum(s.total_investment for s in summaries)
    summaries = [
        s.model_copy(update={
            "portfolio_diversity": _percentage(s.total_investment, portfolio_investment),
        })
        for s in summaries
    ]

    if search:
        needle = search.strip().lower()
        summaries = [s for s in summaries if needle in s.symbol.lower()]

    logger.debug("Built %d portfolio summaries from %d positions", len(summaries), len(positions))

    return sorted(summaries, key=_SORT_KEYS[PortfolioSortField(sort_field)], reverse=descending)


def calculate_portfolio_totals(summaries: list[PortfolioSummary]) -> dict:
    """Calculate portfolio-wide totals from per-symbol summaries.

    Args:
        summaries: List of PortfolioSummary objects.

    Returns:
        Dictionary with total investment, settlement cash, P/L and P/L %.
    """
    total_investment = sum(s.total_investment for s in summaries)
    total_profit_loss = sum(s.profit_loss for s in summaries)

    return {
        "total_investment": total_investment,
        "final_settlement_cash": sum(s.final_settlement_cash for s in summaries),
        "profit_loss": total_profit_loss,
        "profit_loss_percentage": _percentage(total_profit_loss, total_investment),
        "premium": sum(s.premium for s in summaries),
    }

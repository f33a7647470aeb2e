"""Portfolio aggregation module."""

from optionview.portfolio.positions import (
    PositionSortField,
    group_by_expiration,
    list_positions,
)
from optionview.portfolio.summary import (
    PortfolioSortField,
    build_portfolio_summaries,
    calculate_investment,
    calculate_portfolio_totals,
    calculate_settlement,
    expiration_dates,
    summarize_symbol,
)

__all__ = [
    "PortfolioSortField",
    "PositionSortField",
    "build_portfolio_summaries",
    "calculate_investment",
    "calculate_portfolio_totals",
    "calculate_settlement",
    "expiration_dates",
    "group_by_expiration",
    "list_positions",
    "summarize_symbol",
]

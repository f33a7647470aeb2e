"""Portfolio summary data model."""

from pydantic import BaseModel, Field

from optionview.models.position import Position


class PortfolioSummary(BaseModel):
    """Aggregated cash flow and P/L for all positions on one symbol."""

    symbol: str = Field(..., min_length=1, description="Underlying symbol")
    total_investment: float = Field(..., description="Capital committed (stock, collateral, margin)")
    final_settlement_cash: float = Field(..., description="Cash at settlement")
    profit_loss: float = Field(..., description="Profit/Loss amount")
    profit_loss_percentage: float = Field(..., description="P/L as % of investment")
    premium: float = Field(..., description="Net premium received")
    premium_percentage: float = Field(..., description="Premium as % of investment")
    portfolio_diversity: float = Field(default=0.0, description="Share of portfolio investment (%)")
    positions: list[Position] = Field(default_factory=list, description="Positions on this symbol")

    model_config = {"frozen": True}

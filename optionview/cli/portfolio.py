"""Portfolio commands for OptionView CLI.

Handles per-symbol investment, settlement cash and P/L summaries.
"""

from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from optionview.cli.inputs import colored_money, exit_with_error, format_money, load_positions_file
from optionview.portfolio import (
    PortfolioSortField,
    build_portfolio_summaries,
    calculate_portfolio_totals,
    expiration_dates,
)

console = Console()


@click.command()
@click.option(
    "--file",
    "-f",
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="TOML file with a [[positions]] array.",
)
@click.option(
    "--expiration",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Only include positions expiring on this date (YYYY-MM-DD).",
)
@click.option("--search", default=None, help="Only show symbols containing this text.")
@click.option(
    "--sort",
    "sort_field",
    type=click.Choice([field.value for field in PortfolioSortField]),
    default=PortfolioSortField.SYMBOL.value,
    show_default=True,
    help="Column to sort by.",
)
@click.option("--desc", is_flag=True, default=False, help="Sort in descending order.")
@click.pass_context
def portfolio(
    ctx: click.Context,
    file: Path,
    expiration,
    search: Optional[str],
    sort_field: str,
    desc: bool,
) -> None:
    """Display investment, settlement cash and P/L per symbol.

    Positions with an unknown exercise status count toward investment and
    premium but not toward settlement cash or P/L.

    \b
    Examples:
      optionview portfolio --file positions.toml
      optionview portfolio -f positions.toml --expiration 2025-01-17
      optionview portfolio -f positions.toml --sort profit_loss --desc
    """
    config = (ctx.obj or {}).get("config", {})
    currency = config.get("display", {}).get("currency", "$")

    try:
        positions = load_positions_file(file)
    except (OSError, ValueError) as e:
        exit_with_error(str(e), title="Invalid Positions File")

    expiration_date: Optional[date] = expiration.date() if expiration else None

    summaries = build_portfolio_summaries(
        positions,
        expiration_date=expiration_date,
        search=search,
        sort_field=PortfolioSortField(sort_field),
        descending=desc,
    )

    if not summaries:
        console.print(Panel(
            "[dim]No positions found[/dim]",
            title="[bold]Portfolio[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Portfolio",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Symbol", style="bold")
    table.add_column("Investment", justify="right")
    table.add_column("Settlement Cash", justify="right")
    table.add_column("P/L", justify="right")
    table.add_column("P/L %", justify="right")
    table.add_column("Premium", justify="right")
    table.add_column("Premium %", justify="right")
    table.add_column("Diversity", justify="right", style="dim")

    for summary in summaries:
        pnl_color = "green" if summary.profit_loss >= 0 else "red"
        pnl_sign = "+" if summary.profit_loss >= 0 else ""

        table.add_row(
            summary.symbol,
            format_money(summary.total_investment, currency),
            format_money(summary.final_settlement_cash, currency),
            colored_money(summary.profit_loss, currency),
            f"[{pnl_color}]{pnl_sign}{summary.profit_loss_percentage:.2f}%[/{pnl_color}]",
            format_money(summary.premium, currency),
            f"{summary.premium_percentage:.2f}%",
            f"{summary.portfolio_diversity:.1f}%",
        )

    console.print(table)

    totals = calculate_portfolio_totals(summaries)
    total_color = "green" if totals["profit_loss"] >= 0 else "red"
    total_sign = "+" if totals["profit_loss"] >= 0 else ""

    heading = "[bold]Portfolio Total[/bold]"
    if expiration_date is not None:
        heading += f" (expiring {expiration_date.strftime('%Y-%m-%d')})"

    totals_text = (
        f"{heading}\n\n"
        f"Investment:       {format_money(totals['total_investment'], currency)}\n"
        f"Settlement Cash:  {format_money(totals['final_settlement_cash'], currency)}\n"
        f"{'─' * 30}\n"
        f"[bold]Profit / Loss:    {colored_money(totals['profit_loss'], currency)} "
        f"[{total_color}]({total_sign}{totals['profit_loss_percentage']:.2f}%)[/{total_color}][/bold]"
    )

    dates = expiration_dates(positions)
    if dates and expiration_date is None:
        totals_text += "\n\n[dim]Expirations: " + ", ".join(d.strftime("%Y-%m-%d") for d in dates) + "[/dim]"

    console.print(Panel(
        totals_text,
        title="[bold cyan]Totals[/bold cyan]",
        border_style="cyan",
    ))

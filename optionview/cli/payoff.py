"""Payoff commands for OptionView CLI.

Handles payoff tables and key metrics for one or more positions.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from optionview.cli.inputs import (
    LEG_FORMAT,
    collect_positions,
    colored_money,
    format_money,
    parse_legs_option,
)
from optionview.models import PayoffData, PayoffMetrics, Position
from optionview.payoff import PRESETS, PayoffCache, find_nearest_point, profits_at_price

console = Console()


def sample_rows(count: int, rows: int) -> list[int]:
    """Pick evenly spread indices (always including both ends) from a curve.

    Args:
        count: Number of points in the curve.
        rows: Number of rows wanted.

    Returns:
        Ascending, unique indices into the curve.
    """
    if count <= 0:
        return []
    if rows >= count:
        return list(range(count))
    if rows < 2:
        return [0]

    step = (count - 1) / (rows - 1)
    return sorted({round(i * step) for i in range(rows)})


def render_metrics(metrics: PayoffMetrics, currency: str, title: str = "Key Metrics") -> Panel:
    """Build the metrics panel shared by payoff, metrics and roll."""
    max_loss = (
        "[red]Unlimited[/red]" if metrics.is_max_loss_unlimited
        else colored_money(metrics.max_loss, currency)
    )
    if metrics.is_max_profit_unlimited:
        max_profit = "[green]Unlimited[/green]"
    else:
        max_profit = colored_money(metrics.max_profit, currency)

    if metrics.break_even_prices:
        break_evens = ", ".join(format_money(p, currency) for p in metrics.break_even_prices)
    else:
        break_evens = "[dim]None[/dim]"

    text = (
        f"Max Profit:  {max_profit}\n"
        f"Max Loss:    {max_loss}\n"
        f"Break-even:  {break_evens}"
    )
    return Panel(text, title=f"[bold cyan]{title}[/bold cyan]", border_style="cyan")


def render_payoff_table(payoff_data: PayoffData, rows: int, currency: str) -> Table:
    """Build a table of per-leg and total P/L at sampled prices."""
    table = Table(
        title="Payoff at Expiration",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Price", justify="right", style="bold")
    for leg in payoff_data.legs:
        table.add_column(leg.display_name, justify="right")
    if len(payoff_data.legs) != 1:
        table.add_column("Total", justify="right", style="bold")

    for index in sample_rows(len(payoff_data.total), rows):
        cells = [format_money(payoff_data.total[index].underlying_price, currency)]
        cells.extend(colored_money(leg.points[index].profit, currency) for leg in payoff_data.legs)
        if len(payoff_data.legs) != 1:
            cells.append(colored_money(payoff_data.total[index].profit, currency))
        table.add_row(*cells)

    return table


def _render_positions(positions: list[Position], currency: str) -> Table:
    table = Table(title="Positions", show_header=True, header_style="bold cyan")

    table.add_column("Symbol", style="bold")
    table.add_column("Type")
    table.add_column("Strike", justify="right")
    table.add_column("Premium", justify="right")
    table.add_column("Contracts", justify="right")
    table.add_column("Cost Basis", justify="right", style="dim")

    for position in positions:
        table.add_row(
            position.symbol,
            position.position_type.display_name,
            format_money(position.strike_price, currency),
            format_money(position.option_price, currency),
            str(position.contracts),
            format_money(position.cost_basis_per_share, currency)
            if position.cost_basis_per_share > 0 else "-",
        )

    return table


_leg_option = click.option(
    "--leg",
    "legs",
    multiple=True,
    callback=parse_legs_option,
    help=f"Position as {LEG_FORMAT}. Repeat for combinations.",
)
_file_option = click.option(
    "--file",
    "-f",
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML file with a [[positions]] array.",
)
_example_option = click.option(
    "--example",
    type=click.Choice(list(PRESETS)),
    default=None,
    help="Add the positions of a sample strategy.",
)


@click.command()
@_leg_option
@_file_option
@_example_option
@click.option("--steps", type=click.IntRange(min=1), default=None, help="Price intervals in the curve.")
@click.option("--rows", type=click.IntRange(min=2), default=None, help="Rows shown in the table.")
@click.option("--at", "at_price", type=float, default=None, help="Show P/L at the sample nearest this price.")
@click.pass_context
def payoff(
    ctx: click.Context,
    legs: list[Position],
    file: Optional[Path],
    example: Optional[str],
    steps: Optional[int],
    rows: Optional[int],
    at_price: Optional[float],
) -> None:
    """Display the payoff at expiration of one or more positions.

    Shows each leg's P/L and the combined total across a price range that
    covers every strike, followed by max profit, max loss and break-evens.

    \b
    Examples:
      optionview payoff --leg NakedPut:100:3
      optionview payoff --leg NP:95:2 --leg NC:110:1.5 --at 112
      optionview payoff --file positions.toml --rows 41
      optionview payoff --example iron-condor
    """
    config = (ctx.obj or {}).get("config", {})
    payoff_config = config.get("payoff", {})
    currency = config.get("display", {}).get("currency", "$")

    positions = collect_positions(legs, file, example)
    cache = PayoffCache(steps=steps or payoff_config.get("steps", 100))
    payoff_data, metrics = cache.get(positions)

    console.print(_render_positions(positions, currency))
    console.print(render_payoff_table(payoff_data, rows or payoff_config.get("table_rows", 21), currency))
    console.print(render_metrics(metrics, currency))

    if at_price is not None:
        nearest = find_nearest_point(payoff_data.total, at_price)
        readings = profits_at_price(payoff_data, at_price)
        lines = [f"{label}: {colored_money(profit, currency)}" for label, profit in readings]
        console.print(Panel(
            "\n".join(lines),
            title=f"[bold]P/L at {format_money(nearest.underlying_price, currency)}[/bold]",
            border_style="dim",
        ))


@click.command()
@_leg_option
@_file_option
@_example_option
@click.option("--steps", type=click.IntRange(min=1), default=None, help="Price intervals scanned.")
@click.pass_context
def metrics(
    ctx: click.Context,
    legs: list[Position],
    file: Optional[Path],
    example: Optional[str],
    steps: Optional[int],
) -> None:
    """Display max profit, max loss and break-even prices.

    A single position uses exact formulas; combinations are scanned.

    \b
    Examples:
      optionview metrics --leg CoveredCall:100:5:1:95
      optionview metrics --leg NP:95:2 --leg NC:110:1.5
    """
    from optionview.payoff import calculate_metrics

    config = (ctx.obj or {}).get("config", {})
    currency = config.get("display", {}).get("currency", "$")

    positions = collect_positions(legs, file, example)
    result = calculate_metrics(positions, steps or config.get("payoff", {}).get("steps", 100))

    console.print(render_metrics(result, currency))

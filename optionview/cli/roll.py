"""Roll calculator command for OptionView CLI.

Handles closing an existing short option and reopening it at a new strike.
"""

import click
from rich.console import Console
from rich.panel import Panel

from optionview.cli.inputs import (
    LEG_FORMAT,
    colored_money,
    exit_with_error,
    format_money,
    parse_legs_option,
)
from optionview.cli.payoff import render_metrics, render_payoff_table
from optionview.models import PayoffData, Position
from optionview.payoff import calculate_roll, calculate_roll_outcomes, can_roll

console = Console()


@click.command()
@click.option(
    "--leg",
    "legs",
    multiple=True,
    required=True,
    callback=parse_legs_option,
    help=f"Existing short position as {LEG_FORMAT}.",
)
@click.option("--close-price", type=float, required=True, help="Per-share cost to buy back the option.")
@click.option("--contracts", "contracts_to_roll", type=int, default=None, help="Contracts to roll (default: all).")
@click.option("--new-strike", type=float, required=True, help="Strike of the new option.")
@click.option("--new-premium", type=float, required=True, help="Per-share premium of the new option.")
@click.option("--steps", type=click.IntRange(min=1), default=None, help="Price intervals in the curve.")
@click.option("--rows", type=click.IntRange(min=2), default=None, help="Rows shown in the table.")
@click.option(
    "--current-price",
    type=click.FloatRange(min=0),
    default=None,
    help="Current underlying price; adds the assigned and not-assigned outcomes.",
)
@click.pass_context
def roll(
    ctx: click.Context,
    legs: list[Position],
    close_price: float,
    contracts_to_roll: int | None,
    new_strike: float,
    new_premium: float,
    steps: int | None,
    rows: int | None,
    current_price: float | None,
) -> None:
    """Calculate the outcome of rolling a short option.

    Combines the realized P/L of buying back the existing option with the
    expiration payoff of the new one.

    \b
    Examples:
      optionview roll --leg CSP:50:2 --close-price 0.5 --new-strike 48 --new-premium 1.8
      optionview roll --leg AAPL@CC:190:2.5:3:175 --close-price 4 \\
          --contracts 2 --new-strike 200 --new-premium 3.2
      optionview roll --leg NP:100:3 --close-price 1 --new-strike 95 \\
          --new-premium 2 --current-price 97
    """
    config = (ctx.obj or {}).get("config", {})
    payoff_config = config.get("payoff", {})
    currency = config.get("display", {}).get("currency", "$")

    if len(legs) != 1:
        exit_with_error("Roll takes exactly one existing position.", title="Invalid Roll")

    old_position = legs[0]
    if contracts_to_roll is None:
        contracts_to_roll = old_position.contracts

    if not can_roll(old_position, close_price, contracts_to_roll, new_strike, new_premium):
        exit_with_error(
            "Cannot calculate this roll.\n\n"
            "The position must be sold (not Buy Call/Put), prices must be positive and\n"
            f"contracts must be between 1 and {old_position.contracts}.",
            title="Invalid Roll",
        )

    result = calculate_roll(
        old_position,
        close_price,
        contracts_to_roll,
        new_strike,
        new_premium,
        steps or payoff_config.get("steps", 100),
    )

    new_position = result.new_position
    summary = (
        f"[bold]{old_position.symbol}[/bold] {old_position.display_name} "
        f"→ {new_position.display_name}\n\n"
        f"Contracts rolled:  {contracts_to_roll}\n"
        f"Close P/L:         {colored_money(result.close_profit_loss, currency)}\n"
        f"New premium:       {format_money(new_position.premium, currency)}"
    )
    if new_position.cost_basis_per_share > 0:
        summary += f"\nNew cost basis:    {format_money(new_position.cost_basis_per_share, currency)}"
    if result.max_profit_point is not None:
        summary += (
            f"\n\n[dim]Max profit reached at "
            f"{format_money(result.max_profit_point.underlying_price, currency)}[/dim]"
        )

    console.print(Panel(summary, title="[bold cyan]Roll[/bold cyan]", border_style="cyan"))

    curve = PayoffData(total=result.combined_curve)
    console.print(render_payoff_table(curve, rows or payoff_config.get("table_rows", 21), currency))
    console.print(render_metrics(result.metrics, currency, title="Combined Metrics"))

    if current_price is not None:
        outcome = calculate_roll_outcomes(old_position, new_strike, new_premium, current_price)
        console.print(Panel(
            f"[bold]If assigned[/bold]\n"
            f"  P/L:     {colored_money(outcome.exercised_profit_loss, currency)}\n"
            f"  Return:  {outcome.exercised_return * 100:.2f}%\n\n"
            f"[bold]If not assigned[/bold]\n"
            f"  P/L:     {colored_money(outcome.not_exercised_profit_loss, currency)}\n"
            f"  Return:  {outcome.not_exercised_return * 100:.2f}%\n\n"
            f"[dim]All {old_position.contracts} contract(s) at "
            f"{format_money(current_price, currency)} current price[/dim]",
            title="[bold cyan]Outcomes[/bold cyan]",
            border_style="cyan",
        ))

"""Position list command for OptionView CLI.

Handles searching, sorting and grouping recorded positions.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from optionview.cli.inputs import exit_with_error, format_money, load_positions_file
from optionview.models import ExerciseStatus, Position
from optionview.portfolio import PositionSortField, group_by_expiration, list_positions

console = Console()

STATUS_STYLES = {
    ExerciseStatus.EXERCISED: "yellow",
    ExerciseStatus.NOT_EXERCISED: "green",
    ExerciseStatus.UNKNOWN: "dim",
}


def render_positions_table(positions: list[Position], currency: str, title: str) -> Table:
    """Build a table with one row per position."""
    table = Table(title=title, show_header=True, header_style="bold cyan")

    table.add_column("Symbol", style="bold")
    table.add_column("Type")
    table.add_column("Expiration")
    table.add_column("Strike", justify="right")
    table.add_column("Premium", justify="right")
    table.add_column("Avg Price", justify="right")
    table.add_column("Contracts", justify="right")
    table.add_column("Exercise")

    for position in positions:
        style = STATUS_STYLES[position.exercise_status]
        table.add_row(
            position.symbol,
            position.position_type.display_name,
            position.expiration_date.strftime("%Y-%m-%d") if position.expiration_date else "-",
            format_money(position.strike_price, currency),
            format_money(position.option_price, currency),
            format_money(position.cost_basis_per_share, currency)
            if position.cost_basis_per_share > 0 else "-",
            str(position.contracts),
            f"[{style}]{position.exercise_status.value}[/{style}]",
        )

    return table


@click.command()
@click.option(
    "--file",
    "-f",
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="TOML file with a [[positions]] array.",
)
@click.option("--search", default=None, help="Only show symbols containing this text.")
@click.option(
    "--sort",
    "sort_field",
    type=click.Choice([field.value for field in PositionSortField]),
    default=PositionSortField.SYMBOL.value,
    show_default=True,
    help="Column to sort by.",
)
@click.option("--desc", is_flag=True, default=False, help="Sort in descending order.")
@click.option("--by-expiration", is_flag=True, default=False, help="One table per expiration date.")
@click.pass_context
def positions(
    ctx: click.Context,
    file: Path,
    search: Optional[str],
    sort_field: str,
    desc: bool,
    by_expiration: bool,
) -> None:
    """List recorded positions.

    \b
    Examples:
      optionview positions --file positions.toml
      optionview positions -f positions.toml --search aapl --sort strike --desc
      optionview positions -f positions.toml --by-expiration
    """
    config = (ctx.obj or {}).get("config", {})
    currency = config.get("display", {}).get("currency", "$")

    try:
        records = load_positions_file(file)
    except (OSError, ValueError) as e:
        exit_with_error(str(e), title="Invalid Positions File")

    shown = list_positions(records, search=search, sort_field=PositionSortField(sort_field), descending=desc)

    if not shown:
        console.print(Panel(
            "[dim]No positions found[/dim]",
            title="[bold]Positions[/bold]",
            border_style="dim",
        ))
        return

    if not by_expiration:
        console.print(render_positions_table(shown, currency, title=f"Positions ({len(shown)})"))
        return

    for expiration, group in group_by_expiration(shown):
        label = expiration.strftime("%Y-%m-%d") if expiration else "No expiration"
        console.print(render_positions_table(group, currency, title=f"{label} ({len(group)})"))

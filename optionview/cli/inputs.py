"""Position input parsing shared by the CLI commands.

Positions come either from repeated --leg options or from a TOML file with
a [[positions]] array whose keys are the Position field names.
"""

from pathlib import Path
from typing import Optional

import click
import toml
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel

from optionview.models import Position, PositionType
from optionview.payoff.presets import get_preset

console = Console()

DEFAULT_SYMBOL = "N/A"

LEG_FORMAT = "[SYMBOL@]TYPE:STRIKE:PREMIUM[:CONTRACTS[:COST_BASIS]]"

TYPE_ALIASES = {
    "cc": PositionType.COVERED_CALL,
    "nc": PositionType.NAKED_CALL,
    "csp": PositionType.CASH_SECURED_PUT,
    "np": PositionType.NAKED_PUT,
    "lc": PositionType.BUY_CALL,
    "call": PositionType.BUY_CALL,
    "lp": PositionType.BUY_PUT,
    "put": PositionType.BUY_PUT,
}


def exit_with_error(message: str, title: str = "Error") -> None:
    """Print an error panel and exit with status 1."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def parse_position_type(value: str) -> PositionType:
    """Resolve a position type name or alias, case-insensitively."""
    key = value.strip().lower()
    if key in TYPE_ALIASES:
        return TYPE_ALIASES[key]
    for position_type in PositionType:
        if position_type.value.lower() == key:
            return position_type

    valid = ", ".join([t.value for t in PositionType] + sorted(TYPE_ALIASES))
    raise ValueError(f"Unknown position type '{value}'. Valid: {valid}")


def parse_leg(spec: str) -> Position:
    """Parse a leg spec such as "AAPL@CoveredCall:190:2.5:1:175".

    Raises:
        ValueError: If the spec is malformed or describes an invalid position.
    """
    symbol = DEFAULT_SYMBOL
    body = spec.strip()
    if "@" in body:
        symbol, body = body.split("@", 1)

    parts = body.split(":")
    if not 3 <= len(parts) <= 5:
        raise ValueError(f"Expected {LEG_FORMAT}, got '{spec}'")

    try:
        fields = {
            "symbol": symbol,
            "position_type": parse_position_type(parts[0]),
            "strike_price": float(parts[1]),
            "option_price": float(parts[2]),
            "contracts": int(parts[3]) if len(parts) > 3 else 1,
            "cost_basis_per_share": float(parts[4]) if len(parts) > 4 else 0.0,
        }
    except ValueError as e:
        raise ValueError(f"Invalid leg '{spec}': {e}") from e

    try:
        return Position(**fields)
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise ValueError(f"Invalid leg '{spec}': {messages}") from e


def parse_legs_option(ctx: click.Context, param: click.Parameter, values: tuple) -> list[Position]:
    """Click callback turning --leg values into positions."""
    positions = []
    for value in values:
        try:
            positions.append(parse_leg(value))
        except ValueError as e:
            raise click.BadParameter(str(e), ctx=ctx, param=param)
    return positions


def load_positions_file(path: Path) -> list[Position]:
    """Load positions from a TOML file.

    Raises:
        ValueError: If the file cannot be parsed or a record is invalid.
        OSError: If the file cannot be read.
    """
    data = toml.load(path)
    records = data.get("positions", [])
    if not isinstance(records, list):
        raise ValueError(f"'positions' in {path} must be an array of tables")

    positions = []
    for index, record in enumerate(records, start=1):
        if not isinstance(record, dict):
            raise ValueError(f"Position #{index} in {path} must be a table")
        try:
            positions.append(Position(**record))
        except ValidationError as e:
            messages = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or 'position'}: {err['msg']}"
                for err in e.errors()
            )
            raise ValueError(f"Position #{index} in {path}: {messages}") from e

    return positions


def collect_positions(
    legs: list[Position], file: Optional[Path], example: Optional[str] = None
) -> list[Position]:
    """Combine --leg positions with those loaded from --file and an --example preset.

    Exits with an error panel when the file is unreadable or nothing was
    given.
    """
    positions = list(legs)

    if file is not None:
        try:
            positions.extend(load_positions_file(file))
        except (OSError, ValueError) as e:
            exit_with_error(str(e), title="Invalid Positions File")

    if example is not None:
        positions.extend(get_preset(example))

    if not positions:
        exit_with_error(
            "No positions given.\n\n"
            f"Use [cyan]--leg {LEG_FORMAT}[/cyan], [cyan]--file positions.toml[/cyan]\n"
            "or [cyan]--example NAME[/cyan].",
            title="No Positions",
        )

    return positions


def format_money(value: float, currency: str = "$", signed: bool = False) -> str:
    """Format an amount, marking infinities as unlimited."""
    if value == float("inf"):
        return "Unlimited"
    if value == float("-inf"):
        return "-Unlimited"
    sign = "+" if signed and value >= 0 else ""
    if value < 0:
        return f"-{currency}{abs(value):,.2f}"
    return f"{sign}{currency}{value:,.2f}"


def colored_money(value: float, currency: str = "$") -> str:
    """Format an amount in green (gain) or red (loss) rich markup."""
    color = "green" if value >= 0 else "red"
    return f"[{color}]{format_money(value, currency, signed=True)}[/{color}]"

"""Main CLI entry point for OptionView.

This module provides the main click group and lazy loading
of the command modules.
"""

import click
from rich.console import Console

# Console for rich output
console = Console()


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules are only imported when they are actually invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        attr = getattr(module, cmd_name, None)
        if not isinstance(attr, click.Command):
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(attr)
        return attr


LAZY_SUBCOMMANDS = {
    "payoff": "optionview.cli.payoff",
    "metrics": "optionview.cli.payoff",
    "roll": "optionview.cli.roll",
    "portfolio": "optionview.cli.portfolio",
    "positions": "optionview.cli.positions",
    "init": "optionview.cli.settings",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="optionview")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """OptionView - payoff analytics for option selling positions.

    Evaluate covered calls, naked calls, cash-secured puts, naked puts
    and long options at expiration, plan rolls, and summarize a portfolio.

    \b
    Quick Start:
      optionview payoff --leg NakedPut:100:3       # Payoff table + metrics
      optionview metrics --leg CoveredCall:100:5:1:95
      optionview roll --leg CSP:50:2 --close-price 0.5 \\
          --contracts 1 --new-strike 48 --new-premium 1.8
      optionview portfolio --file positions.toml
      optionview positions --file positions.toml --by-expiration
    """
    from optionview.config import load_config
    from optionview.logger import setup_logging

    config = load_config()
    setup_logging("DEBUG" if verbose else config["logging"]["level"])

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()

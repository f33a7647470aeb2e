"""Settings command for OptionView CLI.

Creates the configuration file.
"""

import click
from rich.console import Console
from rich.panel import Panel

console = Console()


@click.command()
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config file.")
def init(force: bool) -> None:
    """Create a configuration file with default settings.

    \b
    Examples:
      optionview init
      optionview init --force
    """
    from optionview.config import CONFIG_PATH, create_template_config

    if CONFIG_PATH.exists() and not force:
        console.print(Panel(
            f"[yellow]Config already exists:[/yellow] {CONFIG_PATH}\n\n"
            "Use [cyan]--force[/cyan] to overwrite it.",
            title="[bold yellow]Config[/bold yellow]",
            border_style="yellow",
        ))
        return

    try:
        path = create_template_config()
    except OSError as e:
        console.print(Panel(
            f"[red]Failed to write config:[/red]\n\n{str(e)}",
            title="[bold red]Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    console.print(Panel(
        f"[green]Config written to[/green] {path}\n\n"
        "Edit [cyan]\\[payoff][/cyan] steps and table_rows, [cyan]\\[display][/cyan] currency\n"
        "and [cyan]\\[logging][/cyan] level to taste.",
        title="[bold green]Config[/bold green]",
        border_style="green",
    ))

"""CLI commands for OptionView.

This package provides the command-line interface for OptionView,
including payoff, metrics, roll and portfolio commands.
"""

from optionview.cli.main import cli, main

__all__ = ["cli", "main"]

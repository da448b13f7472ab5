"""``python -m column_pruner`` entry point."""

from column_pruner import cli

cli.app()

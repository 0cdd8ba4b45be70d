"""CLI commands for managing zscli configuration."""

import sys
from typing import Any

import click
from tabulate import tabulate_formats

from .cli_utils import output_options, render
from .config import (
    CONFIG_KEYS,
    OUTPUT_KEY,
    TABLE_STYLE_KEY,
    get_config_file_path,
    get_default_output,
    get_table_style,
    load_config,
    remove_config_value,
    set_config_value,
)
from .output import OutputFormat
from .utils import ExitCodes, format_success


def _validate_value(key: str, value: str) -> str:
    """Validate a configuration value, exiting with INVALID_INPUT on error."""
    if key == OUTPUT_KEY:
        valid = [f.value for f in OutputFormat]
        normalized = value.lower().strip()
        if normalized not in valid:
            click.echo(
                f"✗ Invalid format '{value}'. Valid options: {', '.join(valid)}",
                err=True,
            )
            sys.exit(ExitCodes.INVALID_INPUT)
        return normalized

    if key == TABLE_STYLE_KEY and value not in tabulate_formats:
        click.echo(
            f"✗ Unknown table style '{value}'. Valid options: {', '.join(tabulate_formats)}",
            err=True,
        )
        sys.exit(ExitCodes.INVALID_INPUT)
    return value


def register_config_commands(cli: Any) -> None:
    """Register the 'config' command group and its subcommands."""

    @cli.group()
    def config() -> None:
        """Manage zscli output defaults.

        Settings are stored in ~/.config/zscli/config.json (override with
        ZSCLI_CONFIG). ZSCLI_OUTPUT and ZSCLI_TABLE_STYLE take precedence.
        """
        pass

    @config.command(name="view")
    @output_options
    def view(output: str, fields: list) -> None:
        """Show the effective configuration."""
        stored = load_config()
        settings = {
            "config-file": str(get_config_file_path()),
            OUTPUT_KEY: get_default_output(),
            TABLE_STYLE_KEY: get_table_style(),
        }
        for key, value in stored.items():
            if key not in settings:
                settings[key] = value
        render(settings, output, fields)

    @config.command(name="set")
    @click.argument("key", type=click.Choice(list(CONFIG_KEYS)))
    @click.argument("value")
    def set_value(key: str, value: str) -> None:
        """Set a configuration value (output or table-style)."""
        value = _validate_value(key, value)
        try:
            set_config_value(key, value)
        except RuntimeError as exc:
            click.echo(f"✗ {exc}", err=True)
            sys.exit(ExitCodes.GENERAL_ERROR)
        format_success(f"Set {key} to '{value}'.")

    @config.command(name="unset")
    @click.argument("key", type=click.Choice(list(CONFIG_KEYS)))
    def unset_value(key: str) -> None:
        """Remove a configuration value, restoring its default."""
        try:
            removed = remove_config_value(key)
        except RuntimeError as exc:
            click.echo(f"✗ {exc}", err=True)
            sys.exit(ExitCodes.GENERAL_ERROR)
        if removed:
            format_success(f"Removed {key}.")
        else:
            click.echo(f"{key} is not set.")

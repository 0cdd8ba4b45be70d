"""zscli entry points."""

import sys
from pathlib import Path
from typing import Any, List, Optional

import click
import tomllib

from .cli_utils import output_options, render
from .config_click import register_config_commands
from .output import OutputFormatError, print_dry_run, print_operation_result
from .resources import ROW_CONVERTERS, get_row_converter
from .utils import ExitCodes, handle_output_error, load_data_file, unwrap_inventories


def get_version() -> str:
    """Get version from _version.py (built package) or pyproject.toml (development)."""
    try:
        # Try to import from _version.py first (works in built packages)
        from ._version import __version__

        return __version__
    except ImportError:
        # Fall back to reading pyproject.toml (works in development)
        try:
            current_dir = Path(__file__).parent
            pyproject_path = current_dir.parent / "pyproject.toml"

            with open(pyproject_path, "rb") as f:
                pyproject_data = tomllib.load(f)

            return pyproject_data["project"]["version"]
        except (OSError, KeyError, tomllib.TOMLDecodeError):
            return "unknown"


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

KIND_CHOICES = sorted(ROW_CONVERTERS)


def _to_rows(data: Any, kind: Optional[str]) -> Any:
    """Convert raw inventories into row records for ``--kind``."""
    if not kind:
        return data

    converter = get_row_converter(kind)
    assert converter is not None
    inventories: List[Any] = data if isinstance(data, list) else [data]
    if not all(isinstance(inv, dict) for inv in inventories):
        click.echo(f"✗ --kind {kind} expects inventory objects", err=True)
        sys.exit(ExitCodes.INVALID_INPUT)
    rows = converter(inventories)
    return rows if isinstance(data, list) else rows[0]


@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version and exit")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """zscli - render cloud platform inventories as tables, JSON, YAML or text."""
    if version:
        click.echo(f"zscli version {get_version()}")
        ctx.exit()
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command(name="render")
@click.argument("source", default="-", required=False)
@click.option(
    "--kind",
    "-k",
    type=click.Choice(KIND_CHOICES, case_sensitive=False),
    help="Convert raw inventories into resource rows before rendering",
)
@output_options
def render_command(source: str, kind: Optional[str], output: str, fields: List[str]) -> None:
    """Render a JSON or YAML document from SOURCE (a file, or - for stdin).

    An object wrapping a single list (e.g. {"inventories": [...]}) is
    unwrapped before rendering.

    \b
    Examples:
      zscli render vms.json
      zscli render vms.json --kind vm -o table --fields name,state
      cat images.yaml | zscli render --kind image -o json
    """
    data = unwrap_inventories(load_data_file(source))
    render(_to_rows(data, kind), output, fields)


@cli.command(name="result")
@click.argument("resource_type")
@click.argument("source", default="-", required=False)
@click.option(
    "--output",
    "-o",
    default="simple",
    show_default=True,
    help="Output format: simple, name, wide, json, or yaml",
)
def result_command(resource_type: str, source: str, output: str) -> None:
    """Print an operation result for RESOURCE_TYPE read from SOURCE.

    \b
    Examples:
      zscli result instance created-vm.json
      zscli result image image.json -o wide
    """
    data = unwrap_inventories(load_data_file(source))
    try:
        print_operation_result(resource_type, data, output)
    except OutputFormatError as exc:
        handle_output_error(exc)


@cli.command(name="dry-run")
@click.argument("source", default="-", required=False)
@click.option(
    "--output",
    "-o",
    default="text",
    show_default=True,
    help="Output format: text, json, or yaml",
)
def dry_run_command(source: str, output: str) -> None:
    """Show the parameters a create request would send, read from SOURCE."""
    data = load_data_file(source)
    try:
        print_dry_run(data, output)
    except OutputFormatError as exc:
        handle_output_error(exc)


register_config_commands(cli)

"""Shared utility functions for zscli."""

import json
import sys
from typing import Any, List, Optional, Sequence

import click
import yaml


class ExitCodes:
    """Standard exit codes for CLI operations."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    INVALID_INPUT = 2
    NOT_FOUND = 3
    PERMISSION_DENIED = 4
    NETWORK_ERROR = 5


def handle_output_error(exc: Exception) -> None:
    """Report a rendering failure and exit with a general error.

    Args:
        exc: The exception raised by the output engine
    """
    click.echo(f"✗ Error formatting output: {exc}", err=True)
    sys.exit(ExitCodes.GENERAL_ERROR)


def warn(message: str) -> None:
    """Print a non-fatal warning to stderr."""
    click.echo(f"⚠️  Warning: {message}", err=True)


def format_success(message: str, data=None) -> None:
    """Format success messages consistently.

    Args:
        message: Success message to display
        data: Optional data to display with the message
    """
    click.echo(f"✓ {message}")
    if data:
        for key, value in data.items():
            click.echo(f"  {key}: {value}")


def _invalid_document(source: str, exc: Exception) -> None:
    click.echo(f"✗ Invalid JSON or YAML in {source}: {exc}", err=True)
    sys.exit(ExitCodes.INVALID_INPUT)


def parse_data_text(text: str, source: str = "<stdin>") -> Any:
    """Parse JSON, falling back to YAML (a superset of JSON).

    Args:
        text: Raw document text
        source: Name of the source for error messages

    Returns:
        Parsed document; None for an empty document.
    """
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        _invalid_document(source, exc)


def load_data_file(filepath: str) -> Any:
    """Load a JSON or YAML document from a path, or stdin when the path is ``-``.

    Args:
        filepath: Path to the document, or ``-`` for stdin

    Returns:
        Parsed document
    """
    if filepath == "-":
        try:
            text = click.get_text_stream("stdin").read()
        except UnicodeDecodeError as exc:
            _invalid_document("<stdin>", exc)
        return parse_data_text(text)

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as exc:
        _invalid_document(filepath, exc)
    except FileNotFoundError:
        click.echo(f"✗ File not found: {filepath}", err=True)
        sys.exit(ExitCodes.NOT_FOUND)
    except OSError as exc:
        click.echo(f"✗ Error reading file {filepath}: {exc}", err=True)
        sys.exit(ExitCodes.GENERAL_ERROR)

    return parse_data_text(text, filepath)


def unwrap_inventories(data: Any) -> Any:
    """Unwrap an API envelope such as ``{"inventories": [...]}``.

    Objects holding exactly one list-valued key are replaced by that list,
    and ``{"inventory": {...}}`` by the inner object. Anything else is
    returned unchanged.
    """
    if isinstance(data, dict) and len(data) == 1:
        ((key, value),) = data.items()
        if isinstance(value, list):
            return value
        if key == "inventory" and isinstance(value, dict):
            return value
    return data


def parse_fields_option(values: Optional[Sequence[str]]) -> List[str]:
    """Flatten repeated and comma-separated ``--fields`` values.

    ``("name,uuid", "state")`` becomes ``["name", "uuid", "state"]``. Blank
    entries are dropped; order and duplicates are kept as given.
    """
    fields: List[str] = []
    for value in values or ():
        for part in value.split(","):
            part = part.strip()
            if part:
                fields.append(part)
    return fields

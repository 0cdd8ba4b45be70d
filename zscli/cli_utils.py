"""Common utility functions for all CLI commands."""

from typing import Any, Callable, Optional, Sequence, TypeVar

import click

from .config import get_default_output
from .output import OutputFormatError, print_with_fields, unmatched_fields
from .records import materialize
from .utils import handle_output_error, parse_fields_option, warn

F = TypeVar("F", bound=Callable[..., Any])


def output_options(func: F) -> F:
    """Add the shared ``--output/-o`` and ``--fields`` options to a command.

    The command receives ``output`` (the raw format name; unknown names
    render as a table) and ``fields`` (a flattened list of field names).
    """

    def _flatten_fields(ctx: click.Context, param: click.Parameter, value: Any) -> Any:
        return parse_fields_option(value)

    func = click.option(
        "--fields",
        multiple=True,
        callback=_flatten_fields,
        help="Fields to display (comma separated: --fields name,uuid or repeated: "
        "--fields name --fields state)",
    )(func)
    func = click.option(
        "--output",
        "-o",
        default=get_default_output,
        show_default="table",
        help="Output format: table, json, yaml, or text",
    )(func)
    return func


def render(data: Any, output_format: str, fields: Optional[Sequence[str]] = None) -> None:
    """Render command output, warning about unmatched fields.

    Formatting errors are reported on stderr and end the command.
    """
    data = materialize(data)
    fields = list(fields or [])
    missing = unmatched_fields(data, fields)
    if missing:
        warn(f"no field matches {', '.join(repr(m) for m in missing)}")

    try:
        print_with_fields(data, output_format, fields)
    except OutputFormatError as exc:
        handle_output_error(exc)

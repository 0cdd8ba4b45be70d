"""Output formatting and field projection engine.

Every command hands its result to ``print_with_fields`` together with the
``--output`` format and ``--fields`` list. The value is classified into one
of the shapes defined in ``zscli.records`` and rendered as a table, JSON,
YAML or plain text.
"""

import enum
import json
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Union

import click
import yaml

from .records import (
    Shape,
    classify,
    field_matches,
    is_record,
    key_matches,
    materialize,
    project_record,
    record_fields,
    record_to_dict,
)
from .table_utils import echo_table, stringify

NO_RESOURCES_MESSAGE = "No resources found."


class OutputFormat(str, enum.Enum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"
    TEXT = "text"


class OutputFormatError(Exception):
    """Raised when a value cannot be serialized in the requested format."""


def parse_format(value: Optional[str]) -> OutputFormat:
    """Map a user supplied format name to an OutputFormat.

    Matching is case-insensitive. Unknown or empty names fall back to table.
    """
    try:
        return OutputFormat((value or "").strip().lower())
    except ValueError:
        return OutputFormat.TABLE


# --- Field filtering ---


def filter_fields(data: Any, fields: Optional[Sequence[str]]) -> Any:
    """Return a copy of ``data`` reduced to the requested fields.

    Records keep their type; fields that were not requested are reset to
    their zero value. Mappings keep only matching keys. Sequences are
    filtered element by element. Scalars and empty field lists pass through.
    The input is never modified.
    """
    if not fields:
        return data

    shape = classify(data)
    if shape is Shape.SEQUENCE:
        return [_filter_element(elem, fields) for elem in data]
    if shape is Shape.RECORD:
        return project_record(data, fields)
    if shape is Shape.MAP:
        return {k: v for k, v in data.items() if key_matches(k, fields)}
    return data


def _filter_element(elem: Any, fields: Sequence[str]) -> Any:
    shape = classify(elem)
    if shape is Shape.RECORD:
        return project_record(elem, fields)
    if shape is Shape.MAP:
        return {k: v for k, v in elem.items() if key_matches(k, fields)}
    return elem


def unmatched_fields(data: Any, fields: Optional[Sequence[str]]) -> List[str]:
    """List requested field names that match nothing in ``data``.

    Sequences are checked against the first element for records and against
    the union of keys for mappings.
    """
    if not fields:
        return []

    names: List[str] = []
    shape = classify(data)
    if shape is Shape.SEQUENCE:
        if not data:
            return []
        first = data[0]
        if is_record(first):
            data, shape = first, Shape.RECORD
        elif classify(first) is Shape.MAP:
            for elem in data:
                if classify(elem) is Shape.MAP:
                    names.extend(str(k) for k in elem)
        else:
            return []
    if shape is Shape.RECORD:
        for rf in record_fields(data):
            names.extend((rf.name, rf.display))
    elif shape is Shape.MAP:
        names.extend(str(k) for k in data)
    elif shape is Shape.SCALAR:
        return []

    known = {n.lower() for n in names}
    return [f for f in fields if f.lower() not in known]


# --- Plain data conversion for the structured encoders ---


def to_plain(data: Any, fields: Optional[Sequence[str]] = None) -> Any:
    """Convert a value into JSON/YAML friendly builtins.

    Records become dicts keyed by display name (restricted to ``fields``
    when given), tuples become lists and dates become ISO 8601 strings.

    Raises:
        OutputFormatError: If a container holds itself, directly or not.
    """
    return _to_plain(data, fields, set())


def _to_plain(data: Any, fields: Optional[Sequence[str]], active: Set[int]) -> Any:
    shape = classify(data)
    if shape is Shape.SCALAR:
        return _plain_scalar(data)

    # ids of the containers on the current path; shared siblings are fine
    if id(data) in active:
        raise OutputFormatError(f"circular reference detected in {type(data).__name__}")
    active.add(id(data))
    try:
        if shape is Shape.RECORD:
            items = record_to_dict(data, fields).items()
            return {k: _to_plain(v, None, active) for k, v in items}
        if shape is Shape.MAP:
            return {k: _to_plain(v, None, active) for k, v in data.items()}
        return [_to_plain(elem, fields, active) for elem in data]
    finally:
        active.discard(id(data))


def _plain_scalar(data: Any) -> Any:
    if isinstance(data, (datetime, date)):
        return data.isoformat()
    if isinstance(data, enum.Enum):
        return data.value
    return data


def dump_json(data: Any) -> str:
    """Serialize plain data as indented JSON."""
    try:
        return json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise OutputFormatError(f"cannot encode value as JSON: {exc}") from exc


def dump_yaml(data: Any) -> str:
    """Serialize plain data as block style YAML without the trailing newline."""
    try:
        text = yaml.safe_dump(
            data, default_flow_style=False, sort_keys=False, allow_unicode=True
        )
    except yaml.YAMLError as exc:
        raise OutputFormatError(f"cannot encode value as YAML: {exc}") from exc
    return text.rstrip("\n")


# --- Formatters ---


class Formatter:
    """Base class for output formatters."""

    def format(self, data: Any, fields: Optional[Sequence[str]] = None) -> None:
        """Render ``data`` to stdout."""
        raise NotImplementedError


class JSONFormatter(Formatter):
    """Indented JSON output."""

    def format(self, data: Any, fields: Optional[Sequence[str]] = None) -> None:
        """Render ``data`` as indented JSON."""
        data = filter_fields(data, fields)
        click.echo(dump_json(to_plain(data, fields)))


class YAMLFormatter(Formatter):
    """Block style YAML output."""

    def format(self, data: Any, fields: Optional[Sequence[str]] = None) -> None:
        """Render ``data`` as block style YAML."""
        data = filter_fields(data, fields)
        click.echo(dump_yaml(to_plain(data, fields)))


class TextFormatter(Formatter):
    """Plain ``str()`` output."""

    def format(self, data: Any, fields: Optional[Sequence[str]] = None) -> None:
        """Render ``data`` with its default string conversion."""
        click.echo(str(filter_fields(data, fields)))


class TableFormatter(Formatter):
    """Aligned table output."""

    def format(self, data: Any, fields: Optional[Sequence[str]] = None) -> None:
        """Render ``data`` as a table chosen by its shape."""
        shape = classify(data)
        if shape is Shape.SEQUENCE:
            self._format_sequence(data, fields)
        elif shape is Shape.RECORD:
            self._format_record(data, fields)
        elif shape is Shape.MAP:
            self._format_map(data, fields)
        else:
            click.echo(stringify(data))

    def _format_sequence(self, items: Sequence[Any], fields: Optional[Sequence[str]]) -> None:
        if not items:
            click.echo(NO_RESOURCES_MESSAGE)
            return

        first = items[0]
        first_shape = classify(first)
        if first_shape is Shape.RECORD:
            self._format_record_sequence(items, fields)
        elif first_shape is Shape.MAP:
            self._format_map_sequence(items, fields)
        else:
            echo_table(["Value"], [[item] for item in items])

    def _format_record_sequence(
        self, items: Sequence[Any], fields: Optional[Sequence[str]]
    ) -> None:
        columns = [rf for rf in record_fields(items[0]) if not fields or field_matches(rf, fields)]
        rows = [[getattr(item, rf.name, "") for rf in columns] for item in items]
        echo_table([rf.display for rf in columns], rows)

    def _format_map_sequence(self, items: Sequence[Any], fields: Optional[Sequence[str]]) -> None:
        keys = set()
        for item in items:
            if classify(item) is not Shape.MAP:
                continue
            for key in item:
                if not fields or key_matches(key, fields):
                    keys.add(key)
        headers = sorted(keys, key=str)

        rows = []
        for item in items:
            mapping = item if classify(item) is Shape.MAP else {}
            rows.append([mapping.get(key, "") for key in headers])
        echo_table([str(h) for h in headers], rows)

    def _format_record(self, record: Any, fields: Optional[Sequence[str]]) -> None:
        rows = [
            [rf.display, getattr(record, rf.name)]
            for rf in record_fields(record)
            if not fields or field_matches(rf, fields)
        ]
        echo_table(["Field", "Value"], rows)

    def _format_map(self, mapping: Any, fields: Optional[Sequence[str]]) -> None:
        keys = sorted(
            (k for k in mapping if not fields or key_matches(k, fields)),
            key=str,
        )
        echo_table(["Key", "Value"], [[str(k), mapping[k]] for k in keys])


# Formatter mapping for dynamic lookup
FORMATTER_MAP: Dict[OutputFormat, Callable[[], Formatter]] = {
    OutputFormat.TABLE: TableFormatter,
    OutputFormat.JSON: JSONFormatter,
    OutputFormat.YAML: YAMLFormatter,
    OutputFormat.TEXT: TextFormatter,
}


def get_formatter(output_format: Union[OutputFormat, str, None]) -> Formatter:
    """Return the formatter for a format, defaulting to the table formatter."""
    if not isinstance(output_format, OutputFormat):
        output_format = parse_format(output_format)
    return FORMATTER_MAP.get(output_format, TableFormatter)()


def print_data(data: Any, output_format: Union[OutputFormat, str, None]) -> None:
    """Render ``data`` without field filtering."""
    print_with_fields(data, output_format, None)


def print_with_fields(
    data: Any,
    output_format: Union[OutputFormat, str, None],
    fields: Optional[Sequence[str]] = None,
) -> None:
    """Render ``data`` in ``output_format`` restricted to ``fields``.

    Raises:
        OutputFormatError: If the value cannot be encoded in the chosen format.
    """
    formatter = get_formatter(output_format)
    formatter.format(materialize(data), list(fields or []))


# --- Operation results ---


def print_dry_run(data: Any, output_format: str) -> None:
    """Print the parameters a create call would send."""
    fmt = (output_format or "").lower()
    if fmt == OutputFormat.JSON.value:
        click.echo(dump_json(to_plain(data)))
    elif fmt == OutputFormat.YAML.value:
        click.echo(dump_yaml(to_plain(data)))
    else:
        click.echo(f"Would create with parameters: {data}")


def print_operation_result(resource_type: str, result: Any, output_format: str) -> None:
    """Print the result of a create/update style operation.

    Formats:
        json / yaml: the serialized result
        wide:        one-row table using the resource's table definition
        name:        ``<type>/<name>``
        anything else: ``<type>/<name> created``
    """
    from .resources import extract_name, print_wide_result

    fmt = (output_format or "").lower()
    if fmt == OutputFormat.JSON.value:
        click.echo(dump_json(to_plain(result)))
    elif fmt == OutputFormat.YAML.value:
        click.echo(dump_yaml(to_plain(result)))
    elif fmt == "wide":
        print_wide_result(resource_type, result)
    elif fmt == "name":
        name = extract_name(result)
        click.echo(f"{resource_type.lower()}/{name}" if name else resource_type)
    else:
        name = extract_name(result)
        if name:
            click.echo(f"{resource_type.lower()}/{name} created")
        else:
            click.echo(f"{resource_type} created successfully")

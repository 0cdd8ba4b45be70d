"""Shape model for renderable values.

Every value handed to the output engine is one of four shapes:

* RECORD   - a dataclass instance with declared fields
* SEQUENCE - a list/tuple of values sharing one shape
* MAP      - a string-keyed mapping without a fixed schema
* SCALAR   - anything else

Record types declare their display names next to the field definition:

    @dataclass
    class VmRow:
        name: str = display_field("name")
        uuid: str = display_field("uuid")
"""

import dataclasses
import enum
import typing
from collections.abc import Iterable, Mapping
from typing import Any, Dict, List, NamedTuple, Optional, Sequence


DISPLAY_KEY = "display"


class Shape(enum.Enum):
    """Structural kind of a renderable value."""

    RECORD = "record"
    SEQUENCE = "sequence"
    MAP = "map"
    SCALAR = "scalar"


class RecordField(NamedTuple):
    """A declared record field and its display name."""

    name: str
    display: str


def display_field(display: str, **kwargs: Any) -> Any:
    """Declare a dataclass field with an explicit display name.

    Args:
        display: Column/key label used in output and matched by ``--fields``
        **kwargs: Passed through to ``dataclasses.field`` (default, default_factory, ...)

    Returns:
        A ``dataclasses.Field`` carrying the display name in its metadata.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[DISPLAY_KEY] = display
    return dataclasses.field(metadata=metadata, **kwargs)


def is_record(value: Any) -> bool:
    """Return True for dataclass instances (not dataclass types)."""
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def classify(value: Any) -> Shape:
    """Return the shape of a value."""
    if is_record(value):
        return Shape.RECORD
    if isinstance(value, Mapping):
        return Shape.MAP
    if isinstance(value, (list, tuple)):
        return Shape.SEQUENCE
    return Shape.SCALAR


def materialize(value: Any) -> Any:
    """Drain one-shot iterables into a list so they can be read more than once.

    Strings, bytes, mappings, records, lists and tuples are returned as-is.
    """
    if isinstance(value, (str, bytes, bytearray, list, tuple, Mapping)):
        return value
    if is_record(value) or isinstance(value, type):
        return value
    if isinstance(value, Iterable):
        return list(value)
    return value


def record_fields(record: Any) -> List[RecordField]:
    """List the fields of a record (instance or dataclass type) in declaration order."""
    result = []
    for f in dataclasses.fields(record):
        display = f.metadata.get(DISPLAY_KEY) or f.name
        result.append(RecordField(f.name, display))
    return result


def field_matches(field: RecordField, requested: Sequence[str]) -> bool:
    """Check whether a field is selected by any requested name (case-insensitive)."""
    display = field.display.lower()
    name = field.name.lower()
    for r in requested:
        wanted = r.lower()
        if wanted == display or wanted == name:
            return True
    return False


def key_matches(key: Any, requested: Sequence[str]) -> bool:
    """Check whether a mapping key is selected by any requested name."""
    text = str(key).lower()
    return any(text == r.lower() for r in requested)


_ZERO_VALUES: Dict[Any, Any] = {
    str: "",
    int: 0,
    float: 0.0,
    bool: False,
}


def zero_value(f: "dataclasses.Field[Any]", hint: Any = None) -> Any:
    """Return the zero value for a dataclass field.

    Declared defaults win; otherwise the zero of the annotated type is used,
    falling back to None for types without an obvious zero.
    """
    if f.default is not dataclasses.MISSING:
        return f.default
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()

    if hint is None:
        return None
    origin = typing.get_origin(hint) or hint
    if origin in _ZERO_VALUES:
        return _ZERO_VALUES[origin]
    if origin is list:
        return []
    if origin is dict:
        return {}
    return None


def _type_hints(record: Any) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(type(record))
    except (NameError, TypeError):
        return {}


def project_record(record: Any, requested: Sequence[str]) -> Any:
    """Build a new record of the same type holding only the requested fields.

    Fields that are not requested are set to their zero value.
    """
    hints = _type_hints(record)
    values = {}
    for f in dataclasses.fields(record):
        if not f.init:
            continue
        rf = RecordField(f.name, f.metadata.get(DISPLAY_KEY) or f.name)
        if field_matches(rf, requested):
            values[f.name] = getattr(record, f.name)
        else:
            values[f.name] = zero_value(f, hints.get(f.name))
    return type(record)(**values)


def record_to_dict(record: Any, fields: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    """Convert a record to a dict keyed by display name, in declaration order.

    Args:
        record: Dataclass instance
        fields: When non-empty, only matching fields are included

    Returns:
        Ordered dict of display name to raw attribute value.
    """
    result: Dict[str, Any] = {}
    for rf in record_fields(record):
        if fields and not field_matches(rf, fields):
            continue
        result[rf.display] = getattr(record, rf.name)
    return result

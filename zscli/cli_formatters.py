"""Value formatters shared by resource rows and result tables."""

import math
import re
from datetime import date, datetime
from typing import Any

_KIB = 1024
_MEMORY_UNITS = ["KB", "MB", "GB", "TB"]
_IEC_PREFIXES = "KMGTPE"
_MEMORY_PATTERN = re.compile(r"^(\d+)([KMGT]?B?)?$")
_MEMORY_MULTIPLIERS = {
    "K": _KIB,
    "M": _KIB**2,
    "G": _KIB**3,
    "T": _KIB**4,
}


def format_memory_size(size_in_bytes: int) -> str:
    """Format a byte count as B/KB/MB/GB/TB with two decimals.

    Examples:
        >>> format_memory_size(512)
        '512 B'
        >>> format_memory_size(2 * 1024 * 1024 * 1024)
        '2.00 GB'
    """
    size_in_bytes = int(size_in_bytes or 0)
    if size_in_bytes < _KIB:
        return f"{size_in_bytes} B"

    size = float(size_in_bytes)
    unit_index = -1
    while size >= _KIB and unit_index < len(_MEMORY_UNITS) - 1:
        size /= _KIB
        unit_index += 1
    return f"{size:.2f} {_MEMORY_UNITS[unit_index]}"


def format_disk_size(size_in_bytes: int) -> str:
    """Format a disk size; same scale as memory sizes."""
    return format_memory_size(size_in_bytes)


def format_cpu_capacity(cpu_hz: int) -> str:
    """Format a CPU frequency in Hz as GHz."""
    return f"{int(cpu_hz or 0) / 1_000_000_000:.2f} GHz"


def format_size(size: Any) -> str:
    """Format a byte count with binary IEC units and one decimal (e.g. ``1.5 KiB``).

    Non-numeric values are returned as their string form.
    """
    if size is None:
        return "0"
    if isinstance(size, bool) or not isinstance(size, (int, float)):
        return str(size)
    if isinstance(size, float) and not math.isfinite(size):
        return str(size)

    size = int(size)
    if size < _KIB:
        return f"{size} B"

    div, exp = _KIB, 0
    n = size // _KIB
    while n >= _KIB and exp < len(_IEC_PREFIXES) - 1:
        div *= _KIB
        exp += 1
        n //= _KIB
    try:
        scaled = f"{size / div:.1f}"
    except OverflowError:
        scaled = str(size // div)
    return f"{scaled} {_IEC_PREFIXES[exp]}iB"


def format_time(value: Any) -> str:
    """Format a timestamp as ``YYYY-MM-DD HH:MM:SS``.

    Accepts datetime objects and ISO 8601 / RFC 3339 strings. Strings that
    do not parse are returned unchanged.
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d 00:00:00")
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
        return parsed.strftime("%Y-%m-%d %H:%M:%S")
    return str(value)


def parse_memory_size(memory: str) -> int:
    """Parse a human memory size (``1G``, ``1024M``, ``512MB``, ``4096``) into bytes.

    Raises:
        ValueError: If the value is empty or not in a recognized format.
    """
    if not memory:
        raise ValueError("memory size cannot be empty")

    text = memory.strip().upper()
    match = _MEMORY_PATTERN.match(text)
    if not match:
        raise ValueError(f"invalid memory format: {text}. Use format like 1G, 1024M")

    value = int(match.group(1))
    unit = match.group(2) or ""
    if unit in ("", "B"):
        return value
    return value * _MEMORY_MULTIPLIERS[unit[0]]

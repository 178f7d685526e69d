"""Utility functions for treeconf."""

import math
import struct
import sys

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
FLOAT32_MAX = 3.4028234663852886e38


def split_path(path: str) -> list[str] | None:
    """Split a dotted key path into segments.

    Args:
        path: Dotted path such as "a.b.c"

    Returns:
        List of segments, or None if the path is malformed (empty string or
        an empty segment such as "a..b")

    Examples:
        >>> split_path("prod.subsection.sub_float")
        ['prod', 'subsection', 'sub_float']

        >>> split_path("a..b") is None
        True
    """
    if not isinstance(path, str) or not path:
        return None
    parts = path.split(".")
    if any(part == "" for part in parts):
        return None
    return parts


def join_path(*parts: str) -> str:
    """Join path fragments, skipping empty ones.

    Examples:
        >>> join_path("prod", "value")
        'prod.value'

        >>> join_path("", "value")
        'value'
    """
    return ".".join(part for part in parts if part)


def narrow_int(value: int) -> int | None:
    """Checked cast to the platform word size; None when out of range."""
    if -sys.maxsize - 1 <= value <= sys.maxsize:
        return value
    return None


def narrow_int64(value: int) -> int | None:
    """Checked cast to a signed 64-bit integer; None when out of range."""
    if INT64_MIN <= value <= INT64_MAX:
        return value
    return None


def narrow_float32(value: float) -> float | None:
    """Checked cast to IEEE single precision.

    Returns the nearest float32 value as a Python float, or None when the
    finite input does not fit in the float32 range.

    Examples:
        >>> narrow_float32(0.5)
        0.5

        >>> narrow_float32(1e39) is None
        True
    """
    value = float(value)
    if math.isfinite(value) and abs(value) > FLOAT32_MAX:
        return None
    return struct.unpack("f", struct.pack("f", value))[0]

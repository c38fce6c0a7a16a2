"""
Field coercion — turn cbor2-decoded values into typed model fields.

cbor2 already resolves the standard tags (0/1 dates, 2 bignums), but
permissive encoders emit dates as bare strings or numbers and serials as
raw byte strings. Each helper accepts exactly the shapes listed in its
match arms and raises VicalParseError for anything else.

`context` names the field in error messages, e.g. "date" or
"CertificateInfo[3].notBefore".
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from vical_parser.domain.errors import VicalParseError

_RFC3339_DATE_TIME = re.compile(
    r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})?"
)


def type_name(value: Any) -> str:
    """Type label used in error messages."""
    if value is None:
        return "null"
    return type(value).__name__


def _wrong_type(context: str, expected: str, value: Any) -> VicalParseError:
    return VicalParseError(f"{context}: expected {expected}, got {type_name(value)}")


def as_bytes(value: Any, context: str) -> bytes:
    """bstr → bytes. bytearray/memoryview are copied."""
    match value:
        case bytes():
            return value
        case bytearray() | memoryview():
            return bytes(value)
        case _:
            raise _wrong_type(context, "bytes", value)


def as_text(value: Any, context: str) -> str:
    """Any scalar → its string form. Booleans render as "true"/"false"."""
    match value:
        case str():
            return value
        case bool():
            return "true" if value else "false"
        case int() | float():
            return str(value)
        case _:
            raise _wrong_type(context, "string", value)


def as_int(value: Any, context: str) -> int:
    """uint → int. Integral floats and decimal strings are narrowed."""
    match value:
        case bool():
            raise _wrong_type(context, "integer", value)
        case int():
            return value
        case float() if value.is_integer():
            return int(value)
        case str():
            try:
                return int(value.strip())
            except ValueError as e:
                raise VicalParseError(f"{context}: invalid integer {value!r}", e) from e
        case _:
            raise _wrong_type(context, "integer", value)


def as_serial_number(value: Any, context: str) -> int:
    """
    biguint → non-negative int.

    A byte string is read as a big-endian unsigned integer, so
    b"\\x01\\x00" becomes 256.
    """
    match value:
        case bool():
            raise _wrong_type(context, "unsigned integer", value)
        case int() if value >= 0:
            return value
        case int():
            raise VicalParseError(f"{context}: serial number must be non-negative, got {value}")
        case bytes() | bytearray() | memoryview():
            return int.from_bytes(value, "big", signed=False)
        case _:
            raise _wrong_type(context, "unsigned integer", value)


def _parse_rfc3339(value: str, context: str) -> datetime:
    """
    RFC 3339 date-time; date and time parts are both required.

    Bare dates and ISO 8601 basic format are rejected. A string without
    an offset is read as UTC.
    """
    text = value.strip()
    if _RFC3339_DATE_TIME.fullmatch(text) is None:
        raise VicalParseError(f"{context}: invalid RFC 3339 date-time {value!r}")
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise VicalParseError(f"{context}: invalid RFC 3339 date-time {value!r}", e) from e
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def as_datetime(value: Any, context: str) -> datetime:
    """
    tdate → datetime.

    Arms: datetime (tag already resolved by cbor2), RFC 3339 string
    (tag 0 style), epoch seconds (tag 1 style).
    """
    match value:
        case datetime():
            return value
        case bool():
            raise _wrong_type(context, "date-time", value)
        case str():
            return _parse_rfc3339(value, context)
        case int() | float():
            try:
                return datetime.fromtimestamp(value, tz=UTC)
            except (OverflowError, OSError, ValueError) as e:
                raise VicalParseError(f"{context}: epoch seconds out of range: {value}", e) from e
        case _:
            raise _wrong_type(context, "date-time", value)


def as_string_list(value: Any, context: str) -> tuple[str, ...]:
    """[* tstr] → tuple of str, order preserved."""
    match value:
        case list() | tuple():
            for index, item in enumerate(value):
                if not isinstance(item, str):
                    raise VicalParseError(
                        f"{context}: expected string at index {index}, got {type_name(item)}"
                    )
            return tuple(value)
        case _:
            raise _wrong_type(context, "array", value)


def as_mapping(value: Any, context: str) -> Mapping[Any, Any]:
    """Any mapping → read-only copy. Contents are not interpreted."""
    match value:
        case Mapping():
            return MappingProxyType(dict(value))
        case _:
            raise _wrong_type(context, "map", value)

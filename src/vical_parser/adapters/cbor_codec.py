"""
Strict CBOR decoding — exactly one data item per byte string.

cbor2.loads() stops after the first item and ignores anything behind it.
A signed VICAL, its protected header and its payload must each be a single
well-formed item, so leftover bytes are rejected here.
"""

from __future__ import annotations

import io
from typing import Any

import cbor2

from vical_parser.domain.errors import VicalParseError


def decode_single_item(data: bytes, error_message: str) -> Any:
    """
    Decode `data` as one CBOR item.

    Raises VicalParseError(error_message) when the bytes are malformed or
    when anything follows the first item.
    """
    fp = io.BytesIO(data)
    try:
        decoded = cbor2.CBORDecoder(fp).decode()
    except cbor2.CBORDecodeError as e:
        raise VicalParseError(error_message, e) from e

    consumed = fp.tell()
    if consumed != len(data):
        raise VicalParseError(
            f"{error_message}: trailing data after first item ({len(data) - consumed} bytes)"
        )
    return decoded

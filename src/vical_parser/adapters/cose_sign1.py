"""
COSE_Sign1 envelope unwrapping and header extraction.

  COSE_Sign1 = #6.18([
      protected   : bstr .cbor header_map,
      unprotected : header_map,
      payload     : bstr,
      signature   : bstr,
  ])

The tag is optional on the wire: a bare 4-element array is accepted too.
Signatures are never checked here; the bytes are handed back untouched.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import cbor2

from vical_parser.adapters.cbor_codec import decode_single_item
from vical_parser.adapters.coercion import as_bytes, type_name
from vical_parser.domain.errors import VicalParseError
from vical_parser.domain.models import COSE_SIGN1_TAG, CoseHeader, CoseSign1

_EMPTY_HEADER: Mapping[int, Any] = MappingProxyType({})


def _envelope_items(decoded: Any) -> list[Any] | tuple[Any, ...]:
    """Return the 4-element array, stripping tag 18 if present."""
    match decoded:
        case list() | tuple():
            items = decoded
        case cbor2.CBORTag(tag=tag, value=inner) if tag == COSE_SIGN1_TAG:
            if not isinstance(inner, (list, tuple)):
                raise VicalParseError(
                    "Invalid COSE_Sign1 structure: expected array of 4 elements "
                    f"inside tag {COSE_SIGN1_TAG}, got {type_name(inner)}"
                )
            items = inner
        case cbor2.CBORTag(tag=tag):
            raise VicalParseError(
                f"Invalid COSE_Sign1: expected tag {COSE_SIGN1_TAG}, got tag {tag}"
            )
        case _:
            raise VicalParseError(
                f"Invalid COSE_Sign1 format: expected tag {COSE_SIGN1_TAG} or array, "
                f"got {type_name(decoded)}"
            )

    if len(items) != 4:
        raise VicalParseError(
            "Invalid COSE_Sign1 structure: expected array of 4 elements, "
            f"got {len(items)}"
        )
    return items


def _unprotected_header(value: Any) -> Mapping[int, Any]:
    match value:
        case None:
            return _EMPTY_HEADER
        case Mapping():
            return MappingProxyType(dict(value))
        case _:
            raise VicalParseError(
                f"Invalid COSE_Sign1 unprotected header: expected map, got {type_name(value)}"
            )


def unwrap_cose_sign1(decoded: Any) -> CoseSign1:
    """
    Bind the four envelope elements of a decoded COSE_Sign1.

    Raises VicalParseError on a wrong tag, wrong arity, or an element
    of the wrong type.
    """
    protected, unprotected, payload, signature = _envelope_items(decoded)
    return CoseSign1(
        protected_header=as_bytes(protected, "Invalid COSE_Sign1 protected header"),
        unprotected_header=_unprotected_header(unprotected),
        payload=as_bytes(payload, "Invalid COSE_Sign1 payload"),
        signature=as_bytes(signature, "Invalid COSE_Sign1 signature"),
    )


def extract_algorithm(protected_header: bytes) -> int:
    """
    Decode the protected header and return its `alg` (label 1).

    Negative values are ordinary COSE algorithm identifiers (-7 = ES256).
    """
    if not protected_header:
        raise VicalParseError("Algorithm not found in protected header")
    header = decode_single_item(protected_header, "Failed to decode protected header")

    if not isinstance(header, Mapping):
        raise VicalParseError(
            f"Invalid protected header: expected map, got {type_name(header)}"
        )

    alg = header.get(CoseHeader.ALG)
    if alg is None:
        raise VicalParseError("Algorithm not found in protected header")
    if isinstance(alg, bool) or not isinstance(alg, int):
        raise VicalParseError(
            f"Invalid protected header alg: expected integer, got {type_name(alg)}"
        )
    return alg


def extract_signer_certificate(unprotected_header: Mapping[int, Any]) -> bytes | None:
    """
    First certificate of the x5chain (label 33), or None.

    x5chain is either a single bstr or an array with the end-entity
    certificate first. A malformed chain yields None, never an error.
    """
    match unprotected_header.get(CoseHeader.X5CHAIN):
        case bytes() | bytearray() | memoryview() as cert:
            return bytes(cert)
        case [bytes() | bytearray() | memoryview() as first, *_]:
            return bytes(first)
        case _:
            return None

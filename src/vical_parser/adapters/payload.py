"""
VICAL payload decoding and validation.

  VICAL = {
      "version"          : tstr,
      "vicalProvider"    : tstr,
      "date"             : tdate,
      ? "vicalIssueID"   : uint,
      ? "nextUpdate"     : tdate,
      "certificateInfos" : [* CertificateInfo],
      ? "extensions"     : {* tstr => any},
  }

  CertificateInfo = {
      "certificate"            : bstr,
      "serialNumber"           : biguint,
      "ski"                    : bstr,
      "docType"                : [+ tstr],
      ? "certificateProfile"   : [+ tstr],
      ? "issuingAuthority"     : tstr,
      ? "issuingCountry"       : tstr,
      ? "stateOrProvinceName"  : tstr,
      ? "issuer"               : bstr,
      ? "subject"              : bstr,
      ? "notBefore"            : tdate,
      ? "notAfter"             : tdate,
      ? "extensions"           : {* tstr => any},
  }

Validation is eager: the first missing or mistyped field raises
VicalParseError and nothing is returned.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from vical_parser.adapters.cbor_codec import decode_single_item
from vical_parser.adapters.coercion import (
    as_bytes,
    as_datetime,
    as_int,
    as_mapping,
    as_serial_number,
    as_string_list,
    as_text,
    type_name,
)
from vical_parser.domain.errors import VicalParseError
from vical_parser.domain.models import CertificateInfo, Vical

T = TypeVar("T")

_VICAL_REQUIRED = ("version", "vicalProvider", "date", "certificateInfos")
_CERTIFICATE_REQUIRED = ("certificate", "serialNumber", "ski", "docType")


def _require(data: Mapping[Any, Any], key: str, owner: str) -> Any:
    value = data.get(key)
    if value is None:
        raise VicalParseError(f"{owner} missing required field: {key}")
    return value


def _optional(
    data: Mapping[Any, Any],
    key: str,
    coerce: Callable[[Any, str], T],
    context: str,
) -> T | None:
    value = data.get(key)
    if value is None:
        return None
    return coerce(value, context)


def parse_certificate_info(data: Any, index: int) -> CertificateInfo:
    """Validate one certificateInfos entry. Errors name the entry index."""
    owner = f"CertificateInfo[{index}]"
    if not isinstance(data, Mapping):
        raise VicalParseError(f"{owner}: expected map, got {type_name(data)}")

    for key in _CERTIFICATE_REQUIRED:
        _require(data, key, owner)

    def ctx(key: str) -> str:
        return f"{owner}.{key}"

    return CertificateInfo(
        certificate=as_bytes(data["certificate"], ctx("certificate")),
        serial_number=as_serial_number(data["serialNumber"], ctx("serialNumber")),
        ski=as_bytes(data["ski"], ctx("ski")),
        doc_type=as_string_list(data["docType"], ctx("docType")),
        certificate_profile=_optional(
            data, "certificateProfile", as_string_list, ctx("certificateProfile")
        ),
        issuing_authority=_optional(data, "issuingAuthority", as_text, ctx("issuingAuthority")),
        issuing_country=_optional(data, "issuingCountry", as_text, ctx("issuingCountry")),
        state_or_province_name=_optional(
            data, "stateOrProvinceName", as_text, ctx("stateOrProvinceName")
        ),
        issuer=_optional(data, "issuer", as_bytes, ctx("issuer")),
        subject=_optional(data, "subject", as_bytes, ctx("subject")),
        not_before=_optional(data, "notBefore", as_datetime, ctx("notBefore")),
        not_after=_optional(data, "notAfter", as_datetime, ctx("notAfter")),
        extensions=_optional(data, "extensions", as_mapping, ctx("extensions")),
    )


def _required_text(data: Mapping[Any, Any], key: str) -> str:
    """Falsy values ("", 0, false) count as missing."""
    value = data[key]
    if not value:
        raise VicalParseError(f"VICAL missing required field: {key}")
    return as_text(value, key)


def parse_vical_payload(data: Any) -> Vical:
    """Validate a decoded payload map into a Vical."""
    if not isinstance(data, Mapping):
        raise VicalParseError(f"Invalid VICAL payload: expected map, got {type_name(data)}")

    for key in _VICAL_REQUIRED:
        _require(data, key, "VICAL")

    version = _required_text(data, "version")
    provider = _required_text(data, "vicalProvider")
    date = as_datetime(data["date"], "date")
    raw_infos = data["certificateInfos"]

    if not isinstance(raw_infos, (list, tuple)):
        raise VicalParseError(
            f"certificateInfos must be an array, got {type_name(raw_infos)}"
        )

    return Vical(
        version=version,
        vical_provider=provider,
        date=date,
        certificate_infos=tuple(
            parse_certificate_info(entry, index) for index, entry in enumerate(raw_infos)
        ),
        vical_issue_id=_optional(data, "vicalIssueID", as_int, "vicalIssueID"),
        next_update=_optional(data, "nextUpdate", as_datetime, "nextUpdate"),
        extensions=_optional(data, "extensions", as_mapping, "extensions"),
    )


def decode_vical_payload(payload: bytes) -> Vical:
    """CBOR-decode the COSE payload bytes, then validate them."""
    return parse_vical_payload(decode_single_item(payload, "Failed to decode VICAL payload"))

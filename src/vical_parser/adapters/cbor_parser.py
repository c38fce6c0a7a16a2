"""
VICAL parser adapter — CBOR decoding + COSE_Sign1 unwrapping + payload validation.

Adapter layer — implements the VicalParser port using cbor2.

Pipeline:
  raw bytes
    → decode_single_item()               generic CBOR value tree
    → unwrap_cose_sign1()                tag 18, 4-element array
    → extract_algorithm()                protected header label 1
    → extract_signer_certificate()       unprotected header label 33
    → decode_vical_payload()             typed, validated Vical
    → SignedVical (domain model)

parse_vical() raises VicalParseError; CborVicalParser.parse() is the
port boundary and folds every exception into a Result failure.
"""

from __future__ import annotations

import structlog
from railway import ErrorCode
from railway.result import Result

from vical_parser.adapters.cbor_codec import decode_single_item
from vical_parser.adapters.cose_sign1 import (
    extract_algorithm,
    extract_signer_certificate,
    unwrap_cose_sign1,
)
from vical_parser.adapters.payload import decode_vical_payload
from vical_parser.domain.models import SignedVical
from vical_parser.domain.queries import algorithm_name

log = structlog.get_logger()


def parse_vical(data: bytes | bytearray | memoryview) -> SignedVical:
    """
    Decode and validate a signed VICAL.

    The returned SignedVical keeps a copy of `data` so a caller can check
    the signature over the exact bytes that were signed. Raises
    VicalParseError on the first structural problem found.
    """
    raw_bytes = bytes(data)

    decoded = decode_single_item(raw_bytes, "Failed to decode CBOR")

    cose_sign1 = unwrap_cose_sign1(decoded)
    algorithm = extract_algorithm(cose_sign1.protected_header)
    signer_certificate = extract_signer_certificate(cose_sign1.unprotected_header)
    vical = decode_vical_payload(cose_sign1.payload)

    return SignedVical(
        cose_sign1=cose_sign1,
        vical=vical,
        algorithm=algorithm,
        raw_bytes=raw_bytes,
        signer_certificate=signer_certificate,
    )


class CborVicalParser:
    """
    Parse raw VICAL bytes into a SignedVical.

    Implements the VicalParser port. `max_input_bytes` bounds the input
    before it reaches the decoder; cbor2 itself places no limit on
    nesting depth or element counts.
    """

    def __init__(self, max_input_bytes: int | None = None) -> None:
        self._max_input_bytes = max_input_bytes

    def parse(self, raw: bytes) -> Result[SignedVical]:
        """
        Returns Result[SignedVical] on success.
        Returns Result.failure(VALIDATION_ERROR, ...) for oversized or malformed input.
        """
        if self._max_input_bytes is not None and len(raw) > self._max_input_bytes:
            log.warning(
                "parser.input_too_large",
                size_bytes=len(raw),
                max_input_bytes=self._max_input_bytes,
            )
            return Result.failure(
                ErrorCode.VALIDATION_ERROR,
                f"VICAL input is {len(raw)} bytes, limit is {self._max_input_bytes}",
            )

        return (
            Result.from_computation(
                lambda: parse_vical(raw),
                ErrorCode.VALIDATION_ERROR,
                "Failed to parse VICAL",
            )
            .peek(self._log_success)
            .peek_failure(lambda err: log.warning("parser.failed", error=str(err.exception)))
        )

    @staticmethod
    def _log_success(signed: SignedVical) -> None:
        log.info(
            "parser.complete",
            provider=signed.vical.vical_provider,
            version=signed.vical.version,
            issue_id=signed.vical.vical_issue_id,
            certificates=signed.vical.total_certificates,
            algorithm=algorithm_name(signed.algorithm),
            has_signer_certificate=signed.signer_certificate is not None,
        )

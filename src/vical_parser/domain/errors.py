"""
VicalParseError — the single error kind raised while decoding a VICAL.

Sub-kinds (bad CBOR, wrong envelope, missing field, wrong type) are told
apart by message only. Any error aborts the whole parse: a partially
decoded trust list must never be used.
"""

from __future__ import annotations


class VicalParseError(Exception):
    """Raised when input bytes are not a structurally valid signed VICAL."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message} ({self.cause})"

"""
Ports — Protocol-based interfaces for infrastructure adapters.

  Domain ← Ports (protocols) ← Adapters (implementations)

Adapters satisfy a port structurally, without inheritance:
  - VicalSource: FileVicalSource, HttpVicalDownloader
  - VicalParser: CborVicalParser
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from railway.result import Result

from vical_parser.domain.models import SignedVical


@runtime_checkable
class VicalSource(Protocol):
    """
    Port: obtain the raw bytes of a signed VICAL.

    Returns Result[bytes]; I/O errors travel on the failure track.
    """

    def fetch(self) -> Result[bytes]: ...


@runtime_checkable
class VicalParser(Protocol):
    """
    Port: decode raw bytes into a validated SignedVical.

    The implementation handles:
      1. CBOR decoding and COSE_Sign1 (tag 18) unwrapping
      2. Protected/unprotected header extraction (alg, x5chain)
      3. Payload decoding and field validation
    """

    def parse(self, raw: bytes) -> Result[SignedVical]: ...

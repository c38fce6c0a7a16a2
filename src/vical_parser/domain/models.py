"""
Domain models — immutable value objects for a decoded VICAL.

Structure (ISO/IEC 18013-5 Annex C):

  SignedVical
  ├── CoseSign1      [protected, unprotected, payload, signature]
  ├── Vical          version, vicalProvider, date, certificateInfos, ...
  │   └── CertificateInfo × N
  ├── algorithm      COSE alg from the protected header
  ├── signer_certificate (first x5chain entry, optional)
  └── raw_bytes      exact input, kept for external signature checks

All models are frozen dataclasses. Repeated fields are tuples and
extension maps are read-only proxies, so nothing is mutable once parsed.
Optional fields are None when the encoder did not supply them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any

# RFC 9052 tag for COSE_Sign1
COSE_SIGN1_TAG = 18

MDL_DOCTYPE = "org.iso.18013.5.1.mDL"

IACA_CERTIFICATE_PROFILE = "1.0.18013.5.1.2"

# Extended Key Usage carried by VICAL signer certificates
VICAL_EKU_OID = "1.0.18013.5.1.8"


class CoseHeader(IntEnum):
    """COSE header labels used by a VICAL."""

    ALG = 1
    KID = 4
    X5CHAIN = 33


class CoseAlgorithm(IntEnum):
    """COSE signature algorithms a VICAL provider may use."""

    ES256 = -7
    ES384 = -35
    ES512 = -36
    EDDSA = -8


@dataclass(frozen=True, slots=True)
class CoseSign1:
    """The four positional parts of the COSE_Sign1 envelope."""

    protected_header: bytes = field(repr=False)
    unprotected_header: Mapping[int, Any] = field(hash=False)
    payload: bytes = field(repr=False)
    signature: bytes = field(repr=False)


@dataclass(frozen=True, slots=True)
class CertificateInfo:
    """
    One trusted IACA root certificate entry.

    `certificate`, `issuer` and `subject` are raw DER blobs; they are not
    parsed as X.509. `serial_number` is an arbitrary-precision int since
    certificate serials may be up to 20 bytes long.
    """

    certificate: bytes = field(repr=False)
    serial_number: int
    ski: bytes
    doc_type: tuple[str, ...]
    certificate_profile: tuple[str, ...] | None = None
    issuing_authority: str | None = None
    issuing_country: str | None = None
    state_or_province_name: str | None = None
    issuer: bytes | None = field(default=None, repr=False)
    subject: bytes | None = field(default=None, repr=False)
    not_before: datetime | None = None
    not_after: datetime | None = None
    extensions: Mapping[str, Any] | None = field(default=None, hash=False)

    def supports(self, doc_type: str) -> bool:
        """True when this certificate is trusted for the given document type."""
        return doc_type in self.doc_type


@dataclass(frozen=True, slots=True)
class Vical:
    """The VICAL payload carried inside the COSE_Sign1 envelope."""

    version: str
    vical_provider: str
    date: datetime
    certificate_infos: tuple[CertificateInfo, ...] = ()
    vical_issue_id: int | None = None
    next_update: datetime | None = None
    extensions: Mapping[str, Any] | None = field(default=None, hash=False)

    @property
    def total_certificates(self) -> int:
        return len(self.certificate_infos)


@dataclass(frozen=True, slots=True)
class SignedVical:
    """
    The top-level parse result.

    Holds everything an external verifier needs to rebuild the
    Sig_structure: `raw_bytes`, `cose_sign1.protected_header`,
    `cose_sign1.payload`, `algorithm` and `signer_certificate`.
    """

    cose_sign1: CoseSign1
    vical: Vical
    algorithm: int
    raw_bytes: bytes = field(repr=False)
    signer_certificate: bytes | None = field(default=None, repr=False)

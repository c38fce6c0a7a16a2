"""
Build a mock signed VICAL for manual testing of the command line.

Infrastructure script — writes tests/fixtures/vical_sample.cbor with three
mDL IACA entries (KR, US-CA, DE). Certificates and the signature are
placeholder bytes: the file is structurally valid but its signature
will not verify.

Output structure:
  #6.18 COSE_Sign1
  ├── protected    { 1: -7 }                   (ES256)
  ├── unprotected  { 33: <signer cert> }       (x5chain)
  ├── payload      VICAL { version "1.0", vicalIssueID 157, 3 certificateInfos }
  └── signature    64 × 0xAB

Usage:
  python scripts/build_sample_vical.py [output-path]
"""

from __future__ import annotations

import sys
from datetime import UTC, datetime
from pathlib import Path

import cbor2

FIXTURES_DIR = Path(__file__).parent.parent / "tests" / "fixtures"
OUTPUT_FILE = "vical_sample.cbor"

MDL_DOCTYPE = "org.iso.18013.5.1.mDL"
IACA_PROFILE = "1.0.18013.5.1.2"


def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=UTC)


def _certificate_infos() -> list[dict[str, object]]:
    return [
        {
            "certificate": b"0\x82\x03\xa7 Korean IACA mock",
            "serialNumber": 1234567890,
            "ski": bytes.fromhex("a1b2c3d4e5f6"),
            "docType": [MDL_DOCTYPE],
            "certificateProfile": [IACA_PROFILE],
            "issuingAuthority": "Korean National Police Agency",
            "issuingCountry": "KR",
            "notBefore": _utc(2023, 1, 1),
            "notAfter": _utc(2033, 1, 1),
        },
        {
            "certificate": b"0\x82\x03\xb2 US-CA IACA mock",
            "serialNumber": 9876543210,
            "ski": bytes.fromhex("f6e5d4c3b2a1"),
            "docType": [MDL_DOCTYPE],
            "certificateProfile": [IACA_PROFILE],
            "issuingAuthority": "California DMV",
            "issuingCountry": "US-CA",
            "stateOrProvinceName": "California",
            "notBefore": _utc(2022, 6, 1),
            "notAfter": _utc(2032, 6, 1),
        },
        {
            "certificate": b"0\x82\x03\xc1 German IACA mock",
            # 20-byte serial, wider than 64 bits
            "serialNumber": int.from_bytes(bytes(range(1, 21)), "big"),
            "ski": bytes.fromhex("112233445566"),
            "docType": [MDL_DOCTYPE],
            "issuingAuthority": "Kraftfahrt-Bundesamt",
            "issuingCountry": "DE",
            "notBefore": _utc(2023, 3, 15),
            "notAfter": _utc(2033, 3, 15),
        },
    ]


def build_sample_vical() -> bytes:
    """Encode the sample VICAL as a tagged COSE_Sign1."""
    payload = {
        "version": "1.0",
        "vicalProvider": "Example VICAL Provider",
        "date": _utc(2024, 11, 1),
        "vicalIssueID": 157,
        "nextUpdate": _utc(2025, 1, 30),
        "certificateInfos": _certificate_infos(),
    }
    cose_sign1 = [
        cbor2.dumps({1: -7}),
        {33: b"0\x82\x03\xff VICAL signer mock"},
        cbor2.dumps(payload),
        b"\xab" * 64,
    ]
    return cbor2.dumps(cbor2.CBORTag(18, cose_sign1))


def main() -> None:
    output = Path(sys.argv[1]) if len(sys.argv) > 1 else FIXTURES_DIR / OUTPUT_FILE
    output.parent.mkdir(parents=True, exist_ok=True)
    data = build_sample_vical()
    output.write_bytes(data)
    print(f"Wrote {len(data)} bytes to {output}")  # noqa: T201


if __name__ == "__main__":
    main()

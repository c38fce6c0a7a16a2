"""
Query/index layer — pure lookups over an already-validated Vical.

None of these functions mutate their input or raise on an empty list.
"""

from __future__ import annotations

from vical_parser.domain.models import MDL_DOCTYPE, CertificateInfo, CoseAlgorithm, Vical

_ALGORITHM_NAMES: dict[int, str] = {
    CoseAlgorithm.ES256: "ES256 (ECDSA w/ SHA-256)",
    CoseAlgorithm.ES384: "ES384 (ECDSA w/ SHA-384)",
    CoseAlgorithm.ES512: "ES512 (ECDSA w/ SHA-512)",
    CoseAlgorithm.EDDSA: "EdDSA",
}


def algorithm_name(alg: int) -> str:
    """Human-readable name of a COSE algorithm identifier."""
    return _ALGORITHM_NAMES.get(alg, f"Unknown ({alg})")


def filter_by_doc_type(vical: Vical, doc_type: str) -> list[CertificateInfo]:
    """Certificates trusted for `doc_type`, in list order."""
    return [cert for cert in vical.certificate_infos if cert.supports(doc_type)]


def filter_mdl_certificates(vical: Vical) -> list[CertificateInfo]:
    """Certificates trusted for mobile driving licences."""
    return filter_by_doc_type(vical, MDL_DOCTYPE)


def find_by_country(vical: Vical, country_code: str) -> CertificateInfo | None:
    """
    First certificate whose issuing_country equals `country_code`.

    Comparison is exact: "us-ca" does not match "US-CA".
    """
    return next(
        (cert for cert in vical.certificate_infos if cert.issuing_country == country_code),
        None,
    )


def find_by_ski(vical: Vical, ski: bytes) -> CertificateInfo | None:
    """
    First certificate whose Subject Key Identifier equals `ski` byte-for-byte.

    Raises TypeError unless `ski` is bytes-like.
    """
    if not isinstance(ski, (bytes, bytearray, memoryview)):
        raise TypeError(f"ski must be bytes-like, got {type(ski).__name__}")
    wanted = bytes(ski)
    return next((cert for cert in vical.certificate_infos if cert.ski == wanted), None)


def build_trust_anchors(
    vical: Vical,
    doc_type: str = MDL_DOCTYPE,
) -> dict[str, CertificateInfo]:
    """
    Index certificates for `doc_type` by issuing country.

    Certificates without an issuing_country are skipped. When a country
    code repeats, the later certificate in list order wins.
    """
    anchors: dict[str, CertificateInfo] = {}
    for cert in vical.certificate_infos:
        if cert.supports(doc_type) and cert.issuing_country:
            anchors[cert.issuing_country] = cert
    return anchors

"""
vical_parser — ISO/IEC 18013-5 VICAL decoder.

Decodes a Verified Issuer Certificate Authority List: a COSE_Sign1-wrapped
CBOR catalogue of IACA root certificates. Produces immutable, validated
value objects and offers lookups (by document type, country, SKI) plus a
country-indexed trust anchor map.

Signature verification is left to the caller: the parsed result exposes
the algorithm, signer certificate and the exact signed bytes.
"""

from vical_parser.adapters.cbor_parser import CborVicalParser, parse_vical
from vical_parser.domain.errors import VicalParseError
from vical_parser.domain.models import (
    COSE_SIGN1_TAG,
    IACA_CERTIFICATE_PROFILE,
    MDL_DOCTYPE,
    VICAL_EKU_OID,
    CertificateInfo,
    CoseAlgorithm,
    CoseHeader,
    CoseSign1,
    SignedVical,
    Vical,
)
from vical_parser.domain.queries import (
    algorithm_name,
    build_trust_anchors,
    filter_by_doc_type,
    filter_mdl_certificates,
    find_by_country,
    find_by_ski,
)

__version__ = "0.1.0"

__all__ = [
    "COSE_SIGN1_TAG",
    "IACA_CERTIFICATE_PROFILE",
    "MDL_DOCTYPE",
    "VICAL_EKU_OID",
    "CborVicalParser",
    "CertificateInfo",
    "CoseAlgorithm",
    "CoseHeader",
    "CoseSign1",
    "SignedVical",
    "Vical",
    "VicalParseError",
    "algorithm_name",
    "build_trust_anchors",
    "filter_by_doc_type",
    "filter_mdl_certificates",
    "find_by_country",
    "find_by_ski",
    "parse_vical",
]

"""
Report rendering — JSON-ready summaries and a plain-text report of a SignedVical.

Presentation only: everything here reads the parsed value and the query
functions, nothing is decoded or validated again.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from vical_parser.domain.models import CertificateInfo, SignedVical
from vical_parser.domain.queries import (
    algorithm_name,
    build_trust_anchors,
    filter_mdl_certificates,
)

_RULE_WIDTH = 60
_CERT_PREVIEW_HEX_CHARS = 100


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def summarize_certificate(cert: CertificateInfo, verbose: bool = False) -> dict[str, Any]:
    info: dict[str, Any] = {
        "issuingCountry": cert.issuing_country,
        "issuingAuthority": cert.issuing_authority,
        "serialNumber": str(cert.serial_number),
        "ski": cert.ski.hex(),
        "docType": list(cert.doc_type),
    }
    if cert.state_or_province_name:
        info["stateOrProvinceName"] = cert.state_or_province_name
    if cert.certificate_profile:
        info["certificateProfile"] = list(cert.certificate_profile)
    if cert.not_before is not None:
        info["notBefore"] = _iso(cert.not_before)
    if cert.not_after is not None:
        info["notAfter"] = _iso(cert.not_after)

    if verbose:
        info["certificateSize"] = len(cert.certificate)
        info["certificateHex"] = cert.certificate.hex()[:_CERT_PREVIEW_HEX_CHARS] + "..."
    return info


def summarize(signed: SignedVical, verbose: bool = False) -> dict[str, Any]:
    """JSON-serialisable summary; serial numbers are decimal strings."""
    vical = signed.vical
    output: dict[str, Any] = {
        "version": vical.version,
        "vicalProvider": vical.vical_provider,
        "date": _iso(vical.date),
        "algorithm": algorithm_name(signed.algorithm),
        "certificateCount": vical.total_certificates,
    }
    if vical.vical_issue_id is not None:
        output["vicalIssueID"] = vical.vical_issue_id
    if vical.next_update is not None:
        output["nextUpdate"] = _iso(vical.next_update)

    output["certificates"] = [
        summarize_certificate(cert, verbose) for cert in vical.certificate_infos
    ]

    if verbose:
        output["rawSize"] = len(signed.raw_bytes)
        output["signatureSize"] = len(signed.cose_sign1.signature)
        if signed.signer_certificate is not None:
            output["signerCertificateSize"] = len(signed.signer_certificate)
        output["mdlCertificateCount"] = len(filter_mdl_certificates(vical))
        output["supportedCountries"] = list(build_trust_anchors(vical))
    return output


def render_text(signed: SignedVical, verbose: bool = False) -> str:
    """Human-readable report, as printed by the command line."""
    vical = signed.vical
    heavy = "═" * _RULE_WIDTH
    light = "─" * _RULE_WIDTH
    lines = [heavy, "VICAL Information", heavy]

    lines.append(f"Version:         {vical.version}")
    lines.append(f"Provider:        {vical.vical_provider}")
    lines.append(f"Date:            {_iso(vical.date)}")
    if vical.vical_issue_id is not None:
        lines.append(f"Issue ID:        {vical.vical_issue_id}")
    if vical.next_update is not None:
        lines.append(f"Next Update:     {_iso(vical.next_update)}")
    lines.append(f"Algorithm:       {algorithm_name(signed.algorithm)}")
    lines.append(f"Certificates:    {vical.total_certificates}")

    if verbose:
        lines.append(f"Raw Size:        {len(signed.raw_bytes)} bytes")
        lines.append(f"Signature Size:  {len(signed.cose_sign1.signature)} bytes")
        if signed.signer_certificate is not None:
            lines.append(f"Signer Cert:     {len(signed.signer_certificate)} bytes")

    lines += ["", light, "Certificate List", light]

    for number, cert in enumerate(vical.certificate_infos, start=1):
        lines.append("")
        lines.append(
            f"[{number}] {cert.issuing_country or 'Unknown'} - "
            f"{cert.issuing_authority or 'Unknown'}"
        )
        lines.append(f"    Serial:    {cert.serial_number}")
        lines.append(f"    SKI:       {cert.ski.hex()}")
        lines.append(f"    Doc Types: {', '.join(cert.doc_type)}")
        if cert.state_or_province_name:
            lines.append(f"    State:     {cert.state_or_province_name}")
        if cert.certificate_profile:
            lines.append(f"    Profile:   {', '.join(cert.certificate_profile)}")
        if cert.not_before is not None and cert.not_after is not None:
            lines.append(f"    Validity:  {_iso(cert.not_before)} ~ {_iso(cert.not_after)}")
        if verbose:
            lines.append(f"    Cert Size: {len(cert.certificate)} bytes")

    anchors = build_trust_anchors(vical)
    lines += ["", light, "mDL Trust Anchors", light]
    lines.append(f"Supported countries: {len(anchors)}")
    lines.append(", ".join(sorted(anchors)))
    lines += ["", heavy]
    return "\n".join(lines)

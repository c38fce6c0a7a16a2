"""
Unit tests for the top-level VICAL parser.

Test categories:
  - Round trip: encoded VICAL → SignedVical equal to the source fields
  - Signature material: raw bytes, protected header, payload, alg, signer cert
  - Error path: malformed CBOR, bad envelope, invalid payload → no partial result
  - Port boundary: CborVicalParser returns Result, enforces input size limit
"""

from __future__ import annotations

from datetime import UTC, datetime

import cbor2
import pytest
from railway import ErrorCode, ResultAssertions

from tests.builders import (
    DROP,
    ISSUE_DATE,
    MDL_DOCTYPE,
    NEXT_UPDATE,
    SIGNER_CERT,
    encode_cose_sign1,
    make_certificate_info,
    make_payload,
    sample_certificate_infos,
)
from vical_parser.adapters.cbor_parser import CborVicalParser, parse_vical
from vical_parser.domain.errors import VicalParseError
from vical_parser.domain.models import CertificateInfo, SignedVical, Vical


class TestRoundTrip:
    """
    GIVEN a VICAL with N well-formed certificates encoded in a COSE_Sign1
    WHEN parsed
    THEN the Vical equals the encoded fields, field for field.
    """

    def test_list_equals_source(self, sample_signed: SignedVical) -> None:
        expected = Vical(
            version="1.0",
            vical_provider="Test VICAL Provider",
            date=ISSUE_DATE,
            vical_issue_id=157,
            next_update=NEXT_UPDATE,
            certificate_infos=(
                CertificateInfo(
                    certificate=b"0\x82\x03\xa7 KR IACA",
                    serial_number=1234567890,
                    ski=bytes.fromhex("a1b2c3d4e5f6"),
                    doc_type=(MDL_DOCTYPE,),
                    certificate_profile=("1.0.18013.5.1.2",),
                    issuing_authority="Korean National Police Agency",
                    issuing_country="KR",
                    not_before=datetime(2023, 1, 1, tzinfo=UTC),
                    not_after=datetime(2033, 1, 1, tzinfo=UTC),
                ),
                CertificateInfo(
                    certificate=b"0\x82\x03\xb2 US-CA IACA",
                    serial_number=9876543210,
                    ski=bytes.fromhex("f6e5d4c3b2a1"),
                    doc_type=(MDL_DOCTYPE,),
                    certificate_profile=("1.0.18013.5.1.2",),
                    issuing_authority="California DMV",
                    issuing_country="US-CA",
                    state_or_province_name="California",
                    not_before=datetime(2022, 6, 1, tzinfo=UTC),
                    not_after=datetime(2032, 6, 1, tzinfo=UTC),
                ),
                CertificateInfo(
                    certificate=b"0\x82\x03\xc1 DE IACA",
                    serial_number=5555555555,
                    ski=bytes.fromhex("112233445566"),
                    doc_type=(MDL_DOCTYPE,),
                    issuing_authority="Kraftfahrt-Bundesamt",
                    issuing_country="DE",
                    not_before=datetime(2023, 3, 15, tzinfo=UTC),
                    not_after=datetime(2033, 3, 15, tzinfo=UTC),
                ),
            ),
        )
        assert sample_signed.vical == expected

    @pytest.mark.parametrize("count", [0, 1, 7])
    def test_count_and_order_preserved(self, count: int) -> None:
        infos = [make_certificate_info(serialNumber=1000 + n) for n in range(count)]
        signed = parse_vical(encode_cose_sign1(make_payload(certificate_infos=infos)))
        assert [c.serial_number for c in signed.vical.certificate_infos] == [
            1000 + n for n in range(count)
        ]

    def test_epoch_encoded_dates(self) -> None:
        """
        GIVEN dates encoded as tag 1 epoch seconds
        WHEN parsed
        THEN they equal the source instants truncated to seconds.
        """
        payload = make_payload(date=datetime(2024, 11, 1, 12, 30, 15, tzinfo=UTC))
        raw = encode_cose_sign1(cbor2.dumps(payload, datetime_as_timestamp=True))
        assert parse_vical(raw).vical.date == datetime(2024, 11, 1, 12, 30, 15, tzinfo=UTC)

    def test_bignum_serial(self) -> None:
        serial = int.from_bytes(bytes(range(1, 21)), "big")
        raw = encode_cose_sign1(make_payload([make_certificate_info(serialNumber=serial)]))
        assert parse_vical(raw).vical.certificate_infos[0].serial_number == serial

    def test_untagged_envelope(self) -> None:
        raw = encode_cose_sign1(make_payload(), tagged=False)
        assert parse_vical(raw).vical.version == "1.0"


class TestSignatureMaterial:
    """Everything an external verifier needs is exposed unchanged."""

    def test_raw_bytes_retained(self, sample_bytes: bytes, sample_signed: SignedVical) -> None:
        assert sample_signed.raw_bytes == sample_bytes

    def test_algorithm_and_signer(self, sample_signed: SignedVical) -> None:
        assert sample_signed.algorithm == -7
        assert sample_signed.signer_certificate == SIGNER_CERT

    def test_envelope_parts(self) -> None:
        payload_bytes = cbor2.dumps(make_payload())
        raw = encode_cose_sign1(payload_bytes, protected={1: -35}, signature=b"\x05" * 96)
        signed = parse_vical(raw)
        assert signed.cose_sign1.protected_header == cbor2.dumps({1: -35})
        assert signed.cose_sign1.payload == payload_bytes
        assert signed.cose_sign1.signature == b"\x05" * 96
        assert signed.algorithm == -35

    def test_missing_x5chain_is_not_an_error(self) -> None:
        signed = parse_vical(encode_cose_sign1(make_payload(), unprotected={4: b"kid"}))
        assert signed.signer_certificate is None

    def test_accepts_bytearray_input(self, sample_bytes: bytes) -> None:
        signed = parse_vical(bytearray(sample_bytes))
        assert type(signed.raw_bytes) is bytes


class TestParseErrors:
    """Every failure raises VicalParseError; nothing is returned."""

    def test_malformed_cbor(self) -> None:
        with pytest.raises(VicalParseError, match="Failed to decode CBOR") as excinfo:
            parse_vical(b"\x84\x41")
        assert isinstance(excinfo.value.cause, cbor2.CBORDecodeError)

    def test_empty_input(self) -> None:
        with pytest.raises(VicalParseError, match="Failed to decode CBOR"):
            parse_vical(b"")

    def test_three_element_envelope(self) -> None:
        raw = cbor2.dumps(cbor2.CBORTag(18, [cbor2.dumps({1: -7}), {}, b"payload"]))
        with pytest.raises(VicalParseError, match="expected array of 4 elements"):
            parse_vical(raw)

    def test_wrong_tag(self) -> None:
        raw = cbor2.dumps(cbor2.CBORTag(17, [b"", {}, b"", b""]))
        with pytest.raises(VicalParseError, match="expected tag 18"):
            parse_vical(raw)

    def test_missing_algorithm(self) -> None:
        with pytest.raises(VicalParseError, match="Algorithm not found"):
            parse_vical(encode_cose_sign1(make_payload(), protected={}))

    def test_missing_certificate_field(self) -> None:
        infos = sample_certificate_infos()
        infos[2] = make_certificate_info(ski=DROP)
        with pytest.raises(
            VicalParseError, match=r"CertificateInfo\[2\] missing required field: ski"
        ):
            parse_vical(encode_cose_sign1(make_payload(certificate_infos=infos)))

    def test_payload_not_cbor(self) -> None:
        with pytest.raises(VicalParseError, match="Failed to decode VICAL payload"):
            parse_vical(encode_cose_sign1(b"\xa1"))

    def test_trailing_bytes_after_envelope(self) -> None:
        """
        GIVEN a valid signed VICAL followed by two junk bytes
        WHEN parsed
        THEN it is rejected rather than decoded from its first item only.
        """
        raw = encode_cose_sign1(make_payload()) + b"\xff\xff"
        with pytest.raises(VicalParseError, match="Failed to decode CBOR: trailing") as excinfo:
            parse_vical(raw)
        assert "(2 bytes)" in str(excinfo.value)

    def test_trailing_bytes_in_protected_header(self) -> None:
        raw = encode_cose_sign1(make_payload(), protected=cbor2.dumps({1: -7}) + b"\x00")
        with pytest.raises(VicalParseError, match="protected header: trailing data"):
            parse_vical(raw)

    def test_trailing_bytes_in_payload(self) -> None:
        raw = encode_cose_sign1(cbor2.dumps(make_payload()) + b"\x00")
        with pytest.raises(VicalParseError, match="Failed to decode VICAL payload: trailing data"):
            parse_vical(raw)


class TestCborVicalParser:
    """The port implementation folds exceptions into Result failures."""

    def test_success(self, parser: CborVicalParser, sample_bytes: bytes) -> None:
        signed = ResultAssertions.assert_success(parser.parse(sample_bytes))
        assert signed.vical.total_certificates == 3

    def test_failure_is_validation_error(self, parser: CborVicalParser) -> None:
        raw = encode_cose_sign1(make_payload(vicalProvider=DROP))
        result = parser.parse(raw)
        error = ResultAssertions.assert_failure(result, ErrorCode.VALIDATION_ERROR)
        assert isinstance(error.exception, VicalParseError)
        ResultAssertions.assert_failure_detail_contains(
            result, "VICAL missing required field: vicalProvider"
        )

    def test_input_size_limit(self, sample_bytes: bytes) -> None:
        """
        GIVEN a parser limited to 16 bytes
        WHEN given the larger sample VICAL
        THEN it fails before decoding with VALIDATION_ERROR.
        """
        result = CborVicalParser(max_input_bytes=16).parse(sample_bytes)
        error = ResultAssertions.assert_failure(result, ErrorCode.VALIDATION_ERROR)
        assert "limit is 16" in error.message
        assert error.exception is None

    def test_input_at_limit_is_accepted(self, sample_bytes: bytes) -> None:
        result = CborVicalParser(max_input_bytes=len(sample_bytes)).parse(sample_bytes)
        ResultAssertions.assert_success(result)

    def test_trailing_bytes_are_validation_error(
        self, parser: CborVicalParser, sample_bytes: bytes
    ) -> None:
        result = parser.parse(sample_bytes + b"\x00")
        ResultAssertions.assert_failure(result, ErrorCode.VALIDATION_ERROR)
        ResultAssertions.assert_failure_detail_contains(result, "trailing data")

"""
Shared test fixtures for the vical-parser test suite.

Inputs are generated in-process with cbor2 (see tests/builders.py);
no binary fixtures are checked in.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

from tests.builders import sample_vical_bytes
from vical_parser.adapters.cbor_parser import CborVicalParser, parse_vical
from vical_parser.domain.models import SignedVical


@pytest.fixture()
def parser() -> CborVicalParser:
    """Create a CborVicalParser with no input size limit."""
    return CborVicalParser()


@pytest.fixture()
def sample_bytes() -> bytes:
    """Raw bytes of the three-certificate sample VICAL."""
    return sample_vical_bytes()


@pytest.fixture()
def sample_signed(sample_bytes: bytes) -> SignedVical:
    """The sample VICAL, parsed."""
    return parse_vical(sample_bytes)


@pytest.fixture()
def sample_file(tmp_path: Path, sample_bytes: bytes) -> Path:
    """The sample VICAL written to a temporary .cbor file."""
    path = tmp_path / "vical.cbor"
    path.write_bytes(sample_bytes)
    return path


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables out of AppSettings."""
    for name in ("LOG_LEVEL", "MAX_INPUT_BYTES", "DOWNLOAD__URL", "DOWNLOAD__TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Drop logging configuration bound to a previous test's captured streams."""
    yield
    structlog.reset_defaults()

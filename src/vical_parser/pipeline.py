"""
Pipeline — fetch the raw VICAL, then decode it.

  source.fetch()
    → parser.parse(raw_bytes)
      → SignedVical

Each stage returns Result[T]; the first failure short-circuits the rest.
"""

from __future__ import annotations

from railway.result import Result

from vical_parser.domain.models import SignedVical
from vical_parser.domain.ports import VicalParser, VicalSource


def run_pipeline(source: VicalSource, parser: VicalParser) -> Result[SignedVical]:
    """Fetch and parse a VICAL. Returns the first failure encountered, if any."""
    return source.fetch().flat_map(parser.parse)

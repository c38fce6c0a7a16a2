"""
Railway-Oriented Programming (ROP) primitives.

A Result is either Success(value) or Failure(FailureDescription). Adapters
return Results so that I/O and decoding failures travel on the failure
track instead of escaping as exceptions:

    from railway import Result, ErrorCode

    result = (
        source.fetch()
        .flat_map(parser.parse)
        .map(lambda signed: signed.vical)
    )
"""

from railway.assertions import ResultAssertions
from railway.failure import ErrorCode, FailureDescription
from railway.result import Failure, Result, Success

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ResultAssertions",
]

"""
Application entry point — wires dependencies and runs the command line.

Composition root: creates the concrete source and parser adapters,
runs the pipeline and renders the outcome.

This is the ONLY place where concrete adapter classes are instantiated.

Usage:
  vical-parser vical.cbor
  vical-parser --json vical.cbor > vical.json
  vical-parser -v --url https://provider.example/vical.cbor
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

import structlog
from railway import ErrorCode
from railway.failure import FailureDescription
from railway.result import Result

from vical_parser import __version__
from vical_parser.adapters.cbor_parser import CborVicalParser
from vical_parser.adapters.sources import FileVicalSource, HttpVicalDownloader
from vical_parser.config import AppSettings
from vical_parser.domain.models import SignedVical
from vical_parser.domain.ports import VicalSource
from vical_parser.pipeline import run_pipeline
from vical_parser.report import render_text, summarize


def configure_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog for human-readable console logging on stderr.

    stdout is reserved for the report so that --json output stays parseable.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def load_settings() -> Result[AppSettings]:
    """Returns Result.failure(CONFIGURATION_ERROR, ...) when settings do not validate."""
    return Result.from_computation(
        AppSettings, ErrorCode.CONFIGURATION_ERROR, "Configuration error"
    )


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vical-parser",
        description="Decode a COSE_Sign1-wrapped VICAL and print its certificate list.",
    )
    parser.add_argument("file", nargs="?", help="signed VICAL file (.cbor)")
    parser.add_argument("--url", help="download the VICAL from this URL instead of a file")
    parser.add_argument("-j", "--json", action="store_true", help="output as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="show detailed information")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _create_source(
    file: str | None,
    url: str | None,
    settings: AppSettings,
) -> VicalSource | None:
    """File argument first, then --url, then DOWNLOAD__URL from settings."""
    if file:
        return FileVicalSource(file)
    download_url = url or settings.download.url
    if download_url:
        return HttpVicalDownloader(download_url, timeout=settings.download.timeout_seconds)
    return None


def _print_report(signed: SignedVical, as_json: bool, verbose: bool) -> int:
    if as_json:
        print(json.dumps(summarize(signed, verbose), indent=2, ensure_ascii=False))  # noqa: T201
    else:
        print(render_text(signed, verbose))  # noqa: T201
    return 0


def _print_failure(error: FailureDescription, verbose: bool) -> int:
    print(f"Parse Error: {error.detail()}", file=sys.stderr)  # noqa: T201
    if verbose and error.exception is not None:
        print(error.full_stack_trace(), file=sys.stderr)  # noqa: T201
    return 1


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the pipeline and return the process exit status."""
    arg_parser = _build_arg_parser()
    args = arg_parser.parse_args(argv)

    settings_result = load_settings()
    if settings_result.is_failure():
        print(f"FATAL: {settings_result.error().detail()}", file=sys.stderr)  # noqa: T201
        return 1
    settings = settings_result.value()

    configure_structlog(settings.log_level)
    log = structlog.get_logger()

    source = _create_source(args.file, args.url, settings)
    if source is None:
        print("Error: No input file specified", file=sys.stderr)  # noqa: T201
        arg_parser.print_help(sys.stderr)
        return 1

    log.debug("app.starting", version=__version__, max_input_bytes=settings.max_input_bytes)

    result = run_pipeline(source, CborVicalParser(max_input_bytes=settings.max_input_bytes))
    return result.either(
        on_success=lambda signed: _print_report(signed, args.json, args.verbose),
        on_failure=lambda error: _print_failure(error, args.verbose),
    )


if __name__ == "__main__":
    sys.exit(main())

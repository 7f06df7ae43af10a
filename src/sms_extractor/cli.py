"""Command-line interface for SMS Extractor.

This module provides the main entry point for the CLI application.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections import Counter
from datetime import datetime
from pathlib import Path

import pydantic
import structlog

from sms_extractor import __version__
from sms_extractor.config import get_settings
from sms_extractor.exceptions import SmsExtractorError, ValidationError
from sms_extractor.models import RawMessage
from sms_extractor.pipeline import BatchProcessor, ExtractionOrchestrator, triage

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sms-extractor", description="SMS transaction extractor")
    parser.add_argument(
        "--patterns",
        type=Path,
        default=None,
        help="JSON file with extra pattern bundles (default: settings custom_patterns_path)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser("extract", help="Extract a transaction from one SMS")
    extract_parser.add_argument("--sender", required=True, help="Sender identity, e.g. VK-HDFCBK")
    extract_parser.add_argument("--body", required=True, help="Message body")
    extract_parser.add_argument(
        "--timestamp",
        type=datetime.fromisoformat,
        default=None,
        help="Arrival time in ISO format (default: now)",
    )

    batch_parser = subparsers.add_parser("batch", help="Extract transactions from a JSON-lines file")
    batch_parser.add_argument("path", type=Path, help="File with one message object per line")

    subparsers.add_parser("patterns", help="List registered pattern bundles")

    return parser


def load_messages(path: Path) -> list[RawMessage]:
    """Read JSON-lines messages; blank lines are skipped.

    Raises:
        ValidationError: If a line is not a valid message object.
    """
    messages = []
    with path.open(encoding="utf-8") as fh:
        for line_no, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            try:
                messages.append(RawMessage.model_validate_json(line))
            except pydantic.ValidationError as exc:
                raise ValidationError(f"{path}:{line_no}: invalid message: {exc}") from exc
    return messages


def _build_orchestrator(args: argparse.Namespace) -> ExtractionOrchestrator:
    orchestrator = ExtractionOrchestrator()
    if args.patterns is not None:
        orchestrator.registry.load_bundles(args.patterns)
    return orchestrator


def _cmd_extract(args: argparse.Namespace) -> int:
    settings = get_settings()
    orchestrator = _build_orchestrator(args)
    message = RawMessage(
        sender=args.sender,
        body=args.body,
        timestamp=args.timestamp or datetime.now(),
    )

    result = orchestrator.extract(message)
    print(result.model_dump_json(indent=2))
    print(f"Disposition: {triage(result, settings.min_confidence).value}")
    return 0 if result.is_success else 1


async def _cmd_batch(args: argparse.Namespace) -> int:
    settings = get_settings()
    messages = load_messages(args.path)
    processor = BatchProcessor(_build_orchestrator(args), settings)

    results = await processor.process_batch(messages)
    dispositions: Counter[str] = Counter()
    for result in results:
        dispositions[triage(result, settings.min_confidence).value] += 1
        print(result.model_dump_json())

    stats = processor.stats()
    print(
        f"Processed {len(results)} messages: "
        f"{dispositions['auto_accept']} accepted, "
        f"{dispositions['needs_review']} need review, "
        f"{dispositions['rejected']} rejected "
        f"(avg {stats.average_processing_ms:.1f} ms)",
        file=sys.stderr,
    )
    return 0


def _cmd_patterns(args: argparse.Namespace) -> int:
    orchestrator = _build_orchestrator(args)
    for bundle in orchestrator.patterns():
        state = "active" if bundle.is_active else "inactive"
        invalid = bundle.invalid_patterns()
        suffix = f"\tINVALID: {', '.join(invalid)}" if invalid else ""
        print(f"{bundle.id}\t{state}\t{bundle.institution}\t{bundle.sender_pattern}{suffix}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the SMS Extractor CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()

    # Configure logging
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )

    logger.info("sms_extractor_started", version=__version__, debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    try:
        if parsed.command == "extract":
            return _cmd_extract(parsed)
        if parsed.command == "batch":
            return asyncio.run(_cmd_batch(parsed))
        if parsed.command == "patterns":
            return _cmd_patterns(parsed)
    except SmsExtractorError as exc:
        logger.error("command_failed", command=parsed.command, error=str(exc))
        return 2

    logger.error("unknown_command", command=parsed.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())

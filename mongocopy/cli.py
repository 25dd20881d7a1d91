"""Command line interface for collection replication."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dateutil import parser as date_parser
from pymongo.errors import PyMongoError

from . import __version__
from .config import Settings, load_settings
from .exceptions import ConfigError
from .models.job import DEFAULT_OUTPUT_DIR, DEFAULT_TIMESTAMP_FIELD, JobConfig
from .models.result import CollectionResult
from .orchestrator import replicate

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _parse_since(value: str):
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        raise argparse.ArgumentTypeError(f"Invalid date: {value!r}")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Not an integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"Must be a positive integer: {value!r}")
    return number


def _split_collections(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mongocopy",
        description="Copy MongoDB collections between deployments or to/from JSON snapshots",
    )

    parser.add_argument("-a", "--all", action="store_true", help="Copy all collections")
    parser.add_argument("-c", "--collections", help="Comma-separated collections")
    parser.add_argument("--dry-run", action="store_true", help="Simulate without writing")
    parser.add_argument("--batch-size", type=_positive_int, help="Batch size")
    parser.add_argument("--yes", action="store_true", help="Skip confirmation")

    artifact_mode = parser.add_mutually_exclusive_group()
    artifact_mode.add_argument("--export-json", action="store_true", help="Export collections to JSON")
    artifact_mode.add_argument("--import-json", action="store_true", help="Import collections from JSON")
    parser.add_argument("--output-dir", default=DEFAULT_OUTPUT_DIR, help="Output directory for JSON")

    parser.add_argument("--log-path", help="Log file path")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bars")
    parser.add_argument("--copy-indexes", action="store_true", help="Copy indexes from source to target")
    parser.add_argument("--validate-schema", action="store_true", help="Validate schema before copying")
    parser.add_argument(
        "--incremental",
        action="store_true",
        help="Perform incremental backup (only new/updated docs)",
    )
    parser.add_argument(
        "--timestamp-field",
        default=DEFAULT_TIMESTAMP_FIELD,
        help="Field to use for incremental backup",
    )
    parser.add_argument("--since", type=_parse_since, help="Date for incremental backup (ISO format)")
    parser.add_argument(
        "--include-untimestamped",
        action="store_true",
        help="With --incremental, also copy documents lacking the timestamp field",
    )
    parser.add_argument("--report", help="Write the per-collection results to this JSON file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def configure_logging(verbose: bool = False, log_path: Optional[str] = None) -> None:
    """Set up console logging and an optional file sink."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if log_path:
        path = Path(log_path).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def confirm_action(message: str, default: bool = False) -> bool:
    """Ask a yes/no question on the terminal."""
    suffix = " [Y/n] " if default else " [y/N] "
    try:
        answer = input(message + suffix).strip().lower()
    except EOFError:
        return False

    if not answer:
        return default
    return answer in ("y", "yes")


def build_config(args: argparse.Namespace, settings: Settings) -> JobConfig:
    """Combine parsed arguments with environment settings."""
    collections = [] if args.all else _split_collections(args.collections)

    return JobConfig(
        source_uri=settings.source_uri,
        target_uri=settings.target_uri,
        db_name=settings.db_name,
        collections=tuple(collections),
        batch_size=args.batch_size or settings.batch_size,
        dry_run=args.dry_run,
        export_mode=args.export_json,
        import_mode=args.import_json,
        output_dir=args.output_dir or DEFAULT_OUTPUT_DIR,
        show_progress=not args.no_progress,
        copy_indexes=args.copy_indexes or settings.copy_indexes,
        validate_schema=args.validate_schema,
        incremental=args.incremental,
        timestamp_field=args.timestamp_field or DEFAULT_TIMESTAMP_FIELD,
        since=args.since,
        include_untimestamped=args.include_untimestamped,
    )


def write_report(path: str, results: List[CollectionResult]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump([r.to_dict() for r in results], f, indent=2, default=str)
    logger.info(f"Saved replication report to {path}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings()

    configure_logging(verbose=args.verbose or settings.debug, log_path=args.log_path)

    collections = _split_collections(args.collections)
    if not args.all and not collections and not args.export_json and not args.import_json:
        logger.info("Provide --all or --collections or --export-json/--import-json")
        parser.print_help()
        return 0

    try:
        config = build_config(args, settings).validate()
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        if settings.missing:
            logger.error(
                f"Missing environment variables: {', '.join(settings.missing)}. "
                f"Copy .env.example to .env and fill these values."
            )
        return 1

    if not args.yes:
        display = "ALL collections" if not config.collections else f"collections: {', '.join(config.collections)}"
        dry_run = " (dry-run)" if config.dry_run else ""
        if not confirm_action(f"About to operate on {display}{dry_run}. Continue?"):
            logger.warning("Cancelled by user")
            return 0

    try:
        results = asyncio.run(replicate(config))
    except PyMongoError as e:
        logger.error(f"Replication aborted: {e}")
        return 1

    for result in results:
        logger.info(result.summary_line())

    if args.report:
        write_report(args.report, results)

    failed = [r.name for r in results if r.is_failure]
    if failed:
        logger.warning(f"{len(failed)} collection(s) failed: {', '.join(failed)}")
    logger.info("Operation completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Console entry point for the RDS engine version exporter."""

from __future__ import annotations

import argparse
import logging
from typing import List

from config import CATALOG_REFRESH_POLICIES, ExporterConfig
from errors import CatalogBuildError, ConfigError, ExporterError, describe_error
from exporter import VersionExporter
from log_utils import setup_logging
from snapshot import CLASSIFICATION_POLICIES

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description=(
            "Export RDS engine version deprecation status as Prometheus metrics. "
            "Unset flags fall back to EXPORTER_* and AWS_* environment variables."
        )
    )
    parser.add_argument(
        "--interval",
        type=int,
        help="Seconds between snapshots (EXPORTER_AWS_API_INTERVAL_SECONDS)",
    )
    parser.add_argument(
        "--port", type=int, help="Metrics server port (EXPORTER_SERVER_PORT)"
    )
    parser.add_argument("--listen-addr", help="Metrics server address (default 0.0.0.0)")
    parser.add_argument("--region", help="AWS region")
    parser.add_argument("--profile", help="AWS profile")
    parser.add_argument(
        "--classification-policy",
        choices=CLASSIFICATION_POLICIES,
        help="skip: publish what can be classified; fail_fast: abort on first unknown version",
    )
    parser.add_argument(
        "--catalog-refresh",
        choices=CATALOG_REFRESH_POLICIES,
        help="Rebuild the engine version catalog once at startup or every cycle",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single snapshot without serving metrics, then exit",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: List[str] | None = None) -> int:
    """CLI main for console_scripts entry point."""
    parser = build_parser()
    args = parser.parse_args(args=argv)

    try:
        config = ExporterConfig.from_args(args)
    except ConfigError as e:
        setup_logging(verbose=args.verbose, log_file=args.log_file)
        logger.error(str(e))
        return 2

    setup_logging(verbose=config.verbose, log_file=args.log_file)
    exporter = VersionExporter(config)

    try:
        exporter.start(serve=not args.once)
    except CatalogBuildError as e:
        logger.error(f"Cannot start without an engine version catalog: {describe_error(e)}")
        return 1

    if args.once:
        try:
            exporter.run_once()
        except ExporterError as e:
            logger.error(f"Snapshot failed: {describe_error(e)}")
            return 1
        return 0

    try:
        exporter.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        exporter.stop()
    return 0

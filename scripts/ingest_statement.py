#!/usr/bin/env python3
"""Ingest one financial statement from the command line.

Usage:
    python -m scripts.ingest_statement --company-id 1 --type income_statement \\
        --year 2024 --quarter 2 --file statements/acme_q2.pdf --user-id 1

    python -m scripts.ingest_statement --company-id 1 --type annual_report \\
        --year 2023 --url https://example.com/acme-2023.pdf --user-id 1

Runs the same pipeline as the upload endpoint: archive (or fetch the URL),
extract text, create the statement, extract metrics, check for
inconsistencies, mark processed. Exit code 1 on any ingestion failure.
"""

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from pydantic import ValidationError

from finstatements.container import AppContainer
from finstatements.domain.errors import IngestionError
from finstatements.logging_config import setup_logging
from finstatements.schemas.statement import StatementIngestRequest, StatementType

logger = logging.getLogger("ingest_statement")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Ingest one financial statement.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--company-id", type=int, required=True)
    parser.add_argument(
        "--type",
        dest="statement_type",
        choices=[t.value for t in StatementType],
        default=StatementType.INCOME_STATEMENT.value,
    )
    parser.add_argument("--year", type=int, required=True)
    parser.add_argument("--quarter", type=int, choices=(1, 2, 3, 4), default=None)
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="Local PDF to upload")
    source.add_argument("--url", help="Document URL to fetch")
    parser.add_argument(
        "--user-id", type=int, required=True, help="Id of the uploading user"
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace, container: AppContainer) -> int:
    try:
        request = StatementIngestRequest(
            company_id=args.company_id,
            statement_type=args.statement_type,
            year=args.year,
            quarter=args.quarter,
        )
    except ValidationError as exc:
        logger.error("Invalid statement metadata: %s", exc)
        return 2

    payload = filename = None
    if args.file is not None:
        if not args.file.is_file():
            logger.error("File not found: %s", args.file)
            return 2
        payload = args.file.read_bytes()
        filename = args.file.name

    container.db_initialized()
    service = container.ingestion_service()

    t0 = time.time()
    try:
        result = service.ingest(
            request,
            uploaded_by=args.user_id,
            payload=payload,
            filename=filename,
            url=args.url,
        )
    except IngestionError as exc:
        logger.error("%s (state=%s)", exc.user_message, exc.state.value)
        return 1

    logger.info(
        "Statement %d %s in %.1fs: %d metrics, %d inconsistencies%s",
        result.statement_id,
        result.state.value,
        time.time() - t0,
        result.metrics_saved,
        result.inconsistencies_saved,
        " (detection degraded)" if result.detection_degraded else "",
    )
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(
        json_logs=os.getenv("JSON_LOGS", "false").lower() == "true",
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )

    container = AppContainer()
    try:
        return run(args, container)
    finally:
        container.shutdown_resources()


if __name__ == "__main__":
    sys.exit(main())

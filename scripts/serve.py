#!/usr/bin/env python3
"""Run the statements API under uvicorn.

Usage:
    python -m scripts.serve                      # 127.0.0.1:8000
    python -m scripts.serve --host 0.0.0.0 --port 8080 --workers 2
    python -m scripts.serve --reload             # development

Each ingestion builds its own clients, so workers share nothing but the
database.
"""

import argparse
import os
import sys

import uvicorn

APP = "finstatements.main:app"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the financial statements API.")
    parser.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    args = parser.parse_args(argv)
    if args.reload and args.workers > 1:
        parser.error("--reload cannot be combined with --workers")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)
    uvicorn.run(
        APP,
        host=args.host,
        port=args.port,
        workers=args.workers,
        reload=args.reload,
        # setup_logging() in finstatements.main owns the log format
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

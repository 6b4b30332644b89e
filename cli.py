#!/usr/bin/env python3
"""
Showdown Vote Unified CLI
Consolidated entry point for serving, migrating and seeding
"""

import asyncio
import logging
import subprocess
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def print_help():
    """Print usage"""
    print("""
Showdown Vote CLI

Usage: python cli.py <command> [options]

Commands:
  serve [--reload]   Start the API server on 0.0.0.0:8000
  migrate            Apply database migrations (alembic upgrade head)
  seed               Ingest a sample contest snapshot
  help               Show this message
""")


def migrate() -> int:
    logger.info("Running database migrations...")
    result = subprocess.run(["alembic", "upgrade", "head"])
    if result.returncode == 0:
        logger.info("Database migrations completed successfully")
    else:
        logger.error("Database migrations failed")
    return result.returncode


def serve(reload: bool = False) -> int:
    import uvicorn

    uvicorn.run("showdown_vote.main:app", host="0.0.0.0", port=8000, reload=reload)
    return 0


def seed() -> int:
    from showdown_vote.scripts.seed_sample_showdown import run

    asyncio.run(run())
    return 0


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] in ("help", "-h", "--help"):
        print_help()
        return 0

    command = argv[0]
    if command == "serve":
        return serve(reload="--reload" in argv[1:])
    if command == "migrate":
        return migrate()
    if command == "seed":
        return seed()

    logger.error(f"Unknown command: {command}")
    print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

"""Main entry point for the donor API server."""

import argparse

from config.config import API_HOST, API_PORT, DATABASE_PATH, LOG_LEVEL
from utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the blood donation donor API")
    parser.add_argument("--host", default=API_HOST, help="Interface to bind")
    parser.add_argument("--port", type=int, default=API_PORT, help="Port to listen on")
    parser.add_argument("--db", default=str(DATABASE_PATH), help="SQLite database path")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    import uvicorn

    from service.api.donor_api import app
    from service.storage.database import get_database

    args = parse_args(argv)
    setup_logging(args.log_level)

    logger.info("Initializing database...")
    get_database(args.db)

    logger.info(f"Server running on port {args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from .config import load_settings
from .console import Console
from .database import StorageGateway
from .errors import ConfigurationError, DatabaseConnectionError, QueryError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clinic",
        description="Keep doctor and patient records for a small clinic.",
    )
    parser.add_argument("--database-url", help="SQLAlchemy URL; overrides CLINIC_DATABASE_URL")
    parser.add_argument("--init-db", action="store_true",
                        help="create the doctors and patients tables if missing")
    parser.add_argument("--echo", action="store_true", help="echo SQL statements")
    parser.add_argument("--log-level", help="logging level, e.g. INFO or DEBUG")
    parser.add_argument("--env-file", help="path to a .env file")
    return parser


def configure_logging(level: str) -> None:
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Unknown log level: {level}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.env_file)
        if args.database_url:
            settings = replace(settings, database_url=args.database_url)
        if args.echo:
            settings = replace(settings, echo=True)
        if args.log_level:
            settings = replace(settings, log_level=args.log_level.upper())
        configure_logging(settings.log_level)
        url = settings.url
    except ConfigurationError as e:
        print(f"Configuration error: {str(e)}")
        return 1

    try:
        return run(url, settings.echo, args.init_db)
    except KeyboardInterrupt:
        print("\nExiting system...")
        return 0


def run(url, echo: bool, init_db: bool) -> int:
    """Connect, optionally create the tables, and serve the menu until exit."""
    try:
        gateway = StorageGateway.connect(url, echo=echo)
    except DatabaseConnectionError as e:
        print(f"Database connection error: {str(e)}")
        return 1

    with gateway:
        if init_db:
            try:
                gateway.create_schema()
            except QueryError as e:
                print(f"Database error: {str(e)}")
                return 1
        Console(gateway).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())

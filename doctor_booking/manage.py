"""Command line entry point.

Usage:
    python -m doctor_booking.manage --mode server
    python -m doctor_booking.manage --mode create-tables
    python -m doctor_booking.manage --mode seed
"""
import argparse
import logging

import uvicorn

from doctor_booking.core import config
from doctor_booking.database import SessionLocal, ensure_schema

logger = logging.getLogger(__name__)


def start_server() -> None:
    config.validate_runtime_config()
    uvicorn.run('doctor_booking.main:app', host='0.0.0.0', port=config.PORT)


def create_tables() -> None:
    ensure_schema()
    logger.info('Database tables created successfully.')


def seed() -> None:
    from doctor_booking.seed import seed_database

    ensure_schema()
    db = SessionLocal()
    try:
        seed_database(db)
    finally:
        db.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description='Doctor Booking API')
    parser.add_argument(
        '--mode',
        choices=['server', 'create-tables', 'seed'],
        required=True,
        help="'server' starts the API, 'create-tables' creates the schema, 'seed' loads sample users and doctors.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    if args.mode == 'server':
        start_server()
    elif args.mode == 'create-tables':
        create_tables()
    elif args.mode == 'seed':
        seed()


if __name__ == '__main__':
    main()

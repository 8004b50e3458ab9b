"""
Logistics Back-Office - Database Setup Script
Creates the PostgreSQL database (if needed) and the record tables

Usage:
    python scripts/setup_database.py

    Or with custom config:
    python scripts/setup_database.py --config config/db_config.yml

    SQLite (no database creation step):
    python scripts/setup_database.py --skip-create --url sqlite:///./backoffice.db
"""

import os
import sys
import logging
import argparse

from backoffice.db_utils import DatabaseManager, create_database_if_not_exists
from backoffice.logging_config import setup_logging


def main():
    """Create the database and the record tables"""

    parser = argparse.ArgumentParser(description='Logistics Back-Office Database Setup')
    parser.add_argument(
        '--config',
        default='config/db_config.yml',
        help='Path to database config YAML'
    )
    parser.add_argument(
        '--url',
        default=None,
        help='SQLAlchemy URL (overrides --config and $DATABASE_URL)'
    )
    parser.add_argument(
        '--db-name',
        default='logistics_backoffice',
        help='PostgreSQL database to create'
    )
    parser.add_argument(
        '--skip-create',
        action='store_true',
        help='Only create tables, do not issue CREATE DATABASE'
    )

    args = parser.parse_args()

    setup_logging(log_level='INFO')
    logger = logging.getLogger(__name__)

    logger.info("=" * 80)
    logger.info("Logistics Back-Office - Database Setup")
    logger.info("=" * 80)

    try:
        url = args.url or os.environ.get('DATABASE_URL')

        if not args.skip_create and not url:
            logger.info(f"Step 1: Creating database '{args.db_name}' if not exists...")
            create_database_if_not_exists(args.config, args.db_name)
        else:
            logger.info("Step 1: Skipped database creation")

        logger.info("Step 2: Creating record tables...")
        db = DatabaseManager(args.config, url=url)
        db.create_tables()
        db.close()

        logger.info("=" * 80)
        logger.info("✓ Database setup completed successfully!")
        logger.info("=" * 80)

        return 0

    except Exception as e:
        logger.error(f"✗ Database setup failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
API Dependencies
================
Database dependency injection for FastAPI endpoints.

A single DatabaseManager (and its connection pool) is shared by every
request; it is built lazily from DATABASE_URL or the YAML file named by
DB_CONFIG_PATH.
"""

import os
import logging
from typing import Generator, Optional

from dotenv import load_dotenv

from backoffice.db_utils import DatabaseManager

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = 'config/db_config.yml'

# Global database manager instance (singleton)
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """
    Get or create the global DatabaseManager instance.
    Reuses one connection pool across requests.
    """
    global _db_manager

    if _db_manager is None:
        config_path = os.environ.get('DB_CONFIG_PATH', DEFAULT_CONFIG_PATH)
        _db_manager = DatabaseManager(config_path)
        logger.info(f"DatabaseManager initialized with config: {config_path}")

    return _db_manager


def get_db() -> Generator[DatabaseManager, None, None]:
    """
    FastAPI dependency that yields the shared DatabaseManager.

    Usage in endpoints:
        @router.get("/endpoint")
        def endpoint(db: DatabaseManager = Depends(get_db)):
            rows = RecordRepository(db, exception_records).list_all()
    """
    yield get_db_manager()


def check_db_health(db: DatabaseManager) -> bool:
    """
    Check database connectivity with a simple query.
    Returns True if healthy, False otherwise.
    """
    try:
        result = db.execute_query("SELECT 1")
        return result is not None and len(result) > 0
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


def shutdown_db():
    """
    Dispose of the shared engine on app shutdown.
    """
    global _db_manager
    if _db_manager is not None:
        _db_manager.close()
        _db_manager = None
        logger.info("DatabaseManager closed")

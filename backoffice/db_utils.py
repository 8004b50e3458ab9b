"""
Database utilities for the back-office API
Provides configuration loading, the shared SQLAlchemy engine and query helpers
"""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional, List
from contextlib import contextmanager
from urllib.parse import quote_plus
import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class DatabaseConfig:
    """
    Database configuration loader

    The YAML file holds a ``database`` section with either a full ``url``
    or the individual ``host``/``port``/``database``/``user``/``password``
    keys. The ``DATABASE_URL`` environment variable wins over the file.
    """

    def __init__(self, config_path: Optional[str] = None, url: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self.url = url or os.environ.get('DATABASE_URL')
        self.config = {} if self.url else self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load database configuration from YAML"""
        if self.config_path is None or not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f)

        return config['database']

    def get_connection_string(self) -> str:
        """Build the SQLAlchemy connection string"""
        if self.url:
            return self.url
        if self.config.get('url'):
            return self.config['url']
        user = quote_plus(self.config['user'])
        password = quote_plus(self.config['password'])
        host = self.config['host']
        port = self.config['port']
        database = self.config['database']
        return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{database}"

    def get_psycopg2_params(self) -> Dict[str, Any]:
        """Get parameters for a direct psycopg2 connection"""
        return {
            'host': self.config['host'],
            'port': self.config['port'],
            'database': self.config['database'],
            'user': self.config['user'],
            'password': self.config['password']
        }


class DatabaseManager:
    """
    Owns the SQLAlchemy engine shared by all requests

    SQLite URLs (local development, tests) get a single shared connection so
    an in-memory database survives across requests.
    """

    def __init__(self, config_path: Optional[str] = None, url: Optional[str] = None):
        self.config = DatabaseConfig(config_path, url=url)
        self._engine: Optional[Engine] = None

    @property
    def is_sqlite(self) -> bool:
        return self.config.get_connection_string().startswith('sqlite')

    def get_engine(self) -> Engine:
        """Get SQLAlchemy engine (lazy initialization)"""
        if self._engine is None:
            connection_string = self.config.get_connection_string()
            if self.is_sqlite:
                self._engine = create_engine(
                    connection_string,
                    connect_args={'check_same_thread': False},
                    poolclass=StaticPool,
                    echo=False
                )
            else:
                self._engine = create_engine(
                    connection_string,
                    pool_pre_ping=True,
                    pool_size=5,
                    max_overflow=10,
                    echo=False
                )
            logger.info("SQLAlchemy engine initialized")
        return self._engine

    @contextmanager
    def get_connection(self):
        """Context manager for a transactional connection"""
        engine = self.get_engine()
        try:
            with engine.begin() as conn:
                yield conn
        except Exception as e:
            logger.error(f"Database error: {e}")
            raise

    def execute_query(self, query: str, params: Optional[Dict[str, Any]] = None) -> List[tuple]:
        """Execute SELECT query and return results"""
        with self.get_connection() as conn:
            result = conn.execute(text(query), params or {})
            return [tuple(row) for row in result]

    def create_tables(self) -> None:
        """Create every record table that does not exist yet"""
        from backoffice.storage.tables import metadata

        metadata.create_all(self.get_engine())
        logger.info("Record tables ensured")

    def close(self):
        """Dispose of the engine and its pool"""
        if self._engine:
            self._engine.dispose()
            self._engine = None
            logger.info("SQLAlchemy engine disposed")


def create_database_if_not_exists(config_path: str, db_name: str = "logistics_backoffice") -> None:
    """
    Create the PostgreSQL database if it doesn't exist
    Connects to the 'postgres' maintenance database to issue CREATE DATABASE
    """
    config = DatabaseConfig(config_path)
    params = config.get_psycopg2_params()
    params['database'] = 'postgres'

    try:
        conn = psycopg2.connect(**params)
        conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
        cursor = conn.cursor()

        cursor.execute(
            "SELECT 1 FROM pg_database WHERE datname = %s;",
            (db_name,)
        )
        exists = cursor.fetchone()

        if not exists:
            cursor.execute(f"CREATE DATABASE {db_name};")
            logger.info(f"Database '{db_name}' created successfully")
        else:
            logger.info(f"Database '{db_name}' already exists")

        cursor.close()
        conn.close()

    except Exception as e:
        logger.error(f"Error creating database: {e}")
        raise

"""Database manager and session utilities for Sisyflow."""

import os
import logging
from typing import Dict, Optional
from contextlib import contextmanager
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import text

from sisyflow.c1_database_session.base import Base

logger = logging.getLogger(__name__)

# Environment variable that points every session at a throwaway database (tests)
DATABASE_ENV_VAR = "SISYFLOW_DB"

_managers: Dict[str, "DatabaseManager"] = {}


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """Manager for database operations."""

    def __init__(self, database_path: str = "sisyflow.db", echo: bool = False):
        """Initialize database connection."""
        self.database_path = database_path
        self.engine = create_engine(
            f"sqlite:///{database_path}",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
        event.listen(self.engine, "connect", _enable_foreign_keys)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_tables(self):
        """Create all database tables."""
        # Models register themselves on Base when imported
        import sisyflow.core.database  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        self._create_indexes()

    def _create_indexes(self):
        """Create database indexes for the board and admin listings."""
        try:
            with self.engine.connect() as conn:
                conn.execute(
                    text(
                        """
                    CREATE INDEX IF NOT EXISTS idx_tickets_status_created_at
                    ON tickets(status, created_at)
                """
                    )
                )

                conn.execute(
                    text(
                        """
                    CREATE INDEX IF NOT EXISTS idx_ai_errors_created_at
                    ON ai_errors(created_at)
                """
                    )
                )

                conn.commit()
                logger.info("Created indexes for tickets and ai_errors")
        except Exception as e:
            logger.debug(f"Index creation (may already exist): {e}")

    def get_session(self):
        """Get a database session."""
        return self.SessionLocal()

    def drop_tables(self):
        """Drop all database tables (for testing)."""
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self):
        """Close every pooled connection."""
        self.engine.dispose()


def resolve_database_path(database_path: Optional[str] = None) -> str:
    """Pick the database file: explicit argument, then env override, then settings."""
    if database_path is not None:
        return database_path
    env_path = os.environ.get(DATABASE_ENV_VAR)
    if env_path:
        return env_path
    from sisyflow.core.config import get_settings

    return str(get_settings().database.database_path)


def get_database_manager(database_path: Optional[str] = None) -> DatabaseManager:
    """Return the shared manager for a database file, creating it on first use."""
    path = resolve_database_path(database_path)
    manager = _managers.get(path)
    if manager is None:
        manager = DatabaseManager(path)
        _managers[path] = manager
    return manager


def reset_database_managers():
    """Dispose cached engines so the next session opens fresh connections."""
    for manager in _managers.values():
        manager.dispose()
    _managers.clear()


@contextmanager
def get_db(database_path: Optional[str] = None):
    """Provide a transactional scope around a series of operations."""
    db = get_database_manager(database_path).get_session()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

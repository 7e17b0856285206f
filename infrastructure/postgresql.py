# ============================================================================
# POSTGRESQL CONNECTION INFRASTRUCTURE
# ============================================================================
# STATUS: Infrastructure - PostgreSQL connection handling
# PURPOSE: Read-only database connectivity for catalog inspection
# CREATED: 18 OCT 2026
# ============================================================================
"""
PostgreSQL Connection Infrastructure

Provides read-only database connectivity:
- Sessions are opened with read_only = True, so even a mistaken write
  is rejected by the server
- Context managers for safe resource management
- dict_row results

Read-only credentials can be supplied for additional safety.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

import psycopg
from psycopg.rows import dict_row

from core.config import ConnectionSettings

logger = logging.getLogger(__name__)


# ============================================================================
# POSTGRESQL REPOSITORY BASE
# ============================================================================

class PostgreSQLRepository:
    """
    Read-only repository for PostgreSQL catalog queries.

    One connection is opened lazily and reused for every query of a run;
    catalog reads are issued one after another.

    Usage:
        repo = PostgreSQLRepository(settings)
        with repo:
            row = repo.fetch_one("SELECT 1 AS one")
    """

    def __init__(self, settings: ConnectionSettings, connection: Optional[psycopg.Connection] = None):
        """
        Initialize PostgreSQL repository.

        Args:
            settings: Connection settings
            connection: Optional existing connection (tests, embedding)
        """
        self.settings = settings
        self._conn = connection
        self._owns_connection = connection is None

    @property
    def connection(self) -> psycopg.Connection:
        """Open the read-only connection on first use."""
        if self._conn is None:
            logger.debug(f"Connecting to PostgreSQL {self.settings.safe_target} (read-only)")
            conn = psycopg.connect(**self.settings.conninfo_kwargs(), row_factory=dict_row)
            conn.read_only = True
            self._conn = conn
            logger.debug("PostgreSQL connection established")
        return self._conn

    def close(self) -> None:
        if self._conn is not None and self._owns_connection:
            self._conn.close()
        self._conn = None

    def __enter__(self) -> "PostgreSQLRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @contextmanager
    def get_cursor(self):
        """
        Context manager for PostgreSQL cursors.

        The transaction is rolled back afterwards; nothing is ever committed.
        """
        conn = self.connection
        try:
            with conn.cursor() as cursor:
                yield cursor
        finally:
            conn.rollback()

    def fetch_one(self, query, params: tuple = None) -> Optional[Dict[str, Any]]:
        """Execute query and fetch one result."""
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchone()

    def fetch_all(self, query, params: tuple = None) -> list:
        """Execute query and fetch all results."""
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchall()

    def server_version(self) -> str:
        """PostgreSQL server version string, for verbose output."""
        row = self.fetch_one("SELECT current_setting('server_version') AS version")
        return row["version"] if row else "unknown"


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "PostgreSQLRepository",
]

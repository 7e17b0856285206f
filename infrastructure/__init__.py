# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Database access
# PURPOSE: Read-only connection and catalog inspection
# CREATED: 18 OCT 2026
# ============================================================================
"""
Infrastructure module for PgAuditor.

Provides:
- PostgreSQLRepository: read-only psycopg connection
- PostgresSchemaInspector: catalog queries used by the synthesizer

Usage:
    from infrastructure import PostgreSQLRepository, PostgresSchemaInspector

    with PostgreSQLRepository(settings) as repo:
        inspector = PostgresSchemaInspector(repo)
        columns = inspector.columns("public", "user")
"""

from infrastructure.base_repository import BaseRepository
from infrastructure.postgresql import PostgreSQLRepository
from infrastructure.schema_inspector import SchemaInspector, PostgresSchemaInspector

__all__ = [
    'BaseRepository',
    'PostgreSQLRepository',
    'SchemaInspector',
    'PostgresSchemaInspector',
]

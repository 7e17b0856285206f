# ============================================================================
# SCHEMA INSPECTOR
# ============================================================================
# STATUS: Infrastructure - Read-only catalog queries
# PURPOSE: Column metadata and existence checks consumed by the synthesizer
# CREATED: 18 OCT 2026
# ============================================================================
"""
Schema Inspector

The synthesizer only needs a handful of yes/no questions and one column
listing, all answered from pg_catalog:

    table_exists(schema, table)            pg_class (tables, partitioned tables)
    columns(schema, table)                 pg_attribute + format_type()
    trigger_exists(schema, table, name)    pg_trigger
    function_exists(schema, name, types)   pg_proc, matched on input argument types
    sequence_exists(schema, name)          pg_class relkind 'S'
    enum_type_exists(schema, name)         pg_type typtype 'e'

Every query is parameterized. Names are compared exactly (case-sensitive),
matching the quoted identifiers in the generated DDL.
"""

from typing import List, Protocol, runtime_checkable

from core.errors import CatalogQueryError, SchemaResolutionError
from core.models import ColumnDescriptor
from infrastructure.base_repository import BaseRepository
from infrastructure.postgresql import PostgreSQLRepository


@runtime_checkable
class SchemaInspector(Protocol):
    """Read-only catalog questions asked during synthesis."""

    def table_exists(self, schema: str, table: str) -> bool: ...

    def columns(self, schema: str, table: str) -> List[ColumnDescriptor]: ...

    def trigger_exists(self, schema: str, table: str, name: str) -> bool: ...

    def function_exists(self, schema: str, name: str, argument_types: str = "") -> bool: ...

    def sequence_exists(self, schema: str, name: str) -> bool: ...

    def enum_type_exists(self, schema: str, name: str) -> bool: ...


# ============================================================================
# CATALOG QUERIES
# ============================================================================

TABLE_EXISTS_SQL = """
    SELECT EXISTS (
        SELECT 1
        FROM pg_class c
        JOIN pg_namespace n ON c.relnamespace = n.oid
        WHERE n.nspname = %s
          AND c.relname = %s
          AND c.relkind IN ('r', 'p')
    ) AS present
"""

COLUMNS_SQL = """
    SELECT a.attname AS name,
           format_type(a.atttypid, a.atttypmod) AS native_type
    FROM pg_attribute a
    JOIN pg_class c ON a.attrelid = c.oid
    JOIN pg_namespace n ON c.relnamespace = n.oid
    WHERE n.nspname = %s
      AND c.relname = %s
      AND c.relkind IN ('r', 'p')
      AND a.attnum > 0
      AND NOT a.attisdropped
    ORDER BY a.attnum
"""

TRIGGER_EXISTS_SQL = """
    SELECT EXISTS (
        SELECT 1
        FROM pg_trigger t
        JOIN pg_class c ON t.tgrelid = c.oid
        JOIN pg_namespace n ON c.relnamespace = n.oid
        WHERE n.nspname = %s
          AND c.relname = %s
          AND t.tgname = %s
          AND NOT t.tgisinternal
    ) AS present
"""

FUNCTION_EXISTS_SQL = """
    SELECT EXISTS (
        SELECT 1
        FROM pg_proc p
        JOIN pg_namespace n ON p.pronamespace = n.oid
        WHERE n.nspname = %s
          AND p.proname = %s
          AND oidvectortypes(p.proargtypes) = %s
    ) AS present
"""

SEQUENCE_EXISTS_SQL = """
    SELECT EXISTS (
        SELECT 1
        FROM pg_class c
        JOIN pg_namespace n ON c.relnamespace = n.oid
        WHERE n.nspname = %s
          AND c.relname = %s
          AND c.relkind = 'S'
    ) AS present
"""

ENUM_TYPE_EXISTS_SQL = """
    SELECT EXISTS (
        SELECT 1
        FROM pg_type t
        JOIN pg_namespace n ON t.typnamespace = n.oid
        WHERE n.nspname = %s
          AND t.typname = %s
          AND t.typtype = 'e'
    ) AS present
"""


class PostgresSchemaInspector(BaseRepository):
    """
    SchemaInspector backed by a read-only PostgreSQLRepository.

    Usage:
        with PostgreSQLRepository(settings) as repo:
            inspector = PostgresSchemaInspector(repo)
            inspector.columns("public", "user")
    """

    def __init__(self, repo: PostgreSQLRepository):
        super().__init__()
        self.repo = repo

    def _exists(self, operation: str, entity_id: str, query: str, params: tuple) -> bool:
        with self._error_context(operation, entity_id):
            row = self.repo.fetch_one(query, params)
        if row is None:
            raise CatalogQueryError(f"{operation} returned no row for {entity_id}", operation=operation)
        present = bool(row["present"])
        self.logger.debug(f"{operation} {entity_id}: {present}")
        return present

    def table_exists(self, schema: str, table: str) -> bool:
        return self._exists("table lookup", f"{schema}.{table}", TABLE_EXISTS_SQL, (schema, table))

    def columns(self, schema: str, table: str) -> List[ColumnDescriptor]:
        """
        Columns of a table in ordinal order.

        Raises:
            SchemaResolutionError: If the table does not exist
            CatalogQueryError: If a catalog query fails
        """
        with self._error_context("column lookup", f"{schema}.{table}"):
            rows = self.repo.fetch_all(COLUMNS_SQL, (schema, table))

        # no rows: either a missing table or a table without columns
        if not rows and not self.table_exists(schema, table):
            raise SchemaResolutionError(schema, table)

        return [ColumnDescriptor(name=row["name"], native_type=row["native_type"]) for row in rows]

    def trigger_exists(self, schema: str, table: str, name: str) -> bool:
        return self._exists(
            "trigger lookup", f"{schema}.{table}.{name}", TRIGGER_EXISTS_SQL, (schema, table, name)
        )

    def function_exists(self, schema: str, name: str, argument_types: str = "") -> bool:
        """
        Whether schema.name(argument_types) exists.

        argument_types is the comma-separated list oidvectortypes() renders,
        e.g. "" for a trigger function or "text" for the settings helper.
        Overloads with other signatures do not count.
        """
        return self._exists(
            "function lookup",
            f"{schema}.{name}({argument_types})",
            FUNCTION_EXISTS_SQL,
            (schema, name, argument_types),
        )

    def sequence_exists(self, schema: str, name: str) -> bool:
        return self._exists("sequence lookup", f"{schema}.{name}", SEQUENCE_EXISTS_SQL, (schema, name))

    def enum_type_exists(self, schema: str, name: str) -> bool:
        return self._exists("enum type lookup", f"{schema}.{name}", ENUM_TYPE_EXISTS_SQL, (schema, name))


__all__ = [
    "SchemaInspector",
    "PostgresSchemaInspector",
]

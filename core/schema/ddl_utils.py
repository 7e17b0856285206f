# ============================================================================
# DDL UTILITIES
# ============================================================================
# STATUS: Core - DRY utilities for SQL DDL generation
# PURPOSE: Trigger, function, sequence, enum and table builders using psycopg.sql
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: TriggerBuilder, FunctionBuilder, SequenceBuilder, EnumBuilder,
#          TableBuilder, SchemaUtils, quote_ident
# DEPENDENCIES: psycopg
# ============================================================================
"""
DDL Utilities - Shared SQL Generation Patterns.

All methods return psycopg.sql.Composable objects. Identifiers are always
composed with sql.Identifier and values with sql.Literal; column types read
from the catalog are the only raw text and are passed through verbatim.

Usage:
    from core.schema.ddl_utils import TriggerBuilder

    stmt = TriggerBuilder.drop('public', 'user', 'tai_aud_user')
    print(stmt.as_string())
"""

from typing import Sequence, Tuple

from psycopg import sql

from core.contracts import AuditOperation
from core.schema.naming import fit_identifier


def quote_ident(name: str) -> str:
    """Quote an identifier the way PostgreSQL's quote_ident() always would."""
    return '"' + name.replace('"', '""') + '"'


# ============================================================================
# SCHEMA UTILITIES
# ============================================================================

class SchemaUtils:
    """
    Utility methods for schema-qualified references.
    """

    @staticmethod
    def qualified(schema: str, name: str) -> sql.Composed:
        """schema.name as two quoted identifiers."""
        return sql.SQL("{}.{}").format(sql.Identifier(schema), sql.Identifier(name))

    @staticmethod
    def regclass(schema: str, name: str) -> sql.Composed:
        """Literal regclass reference, e.g. for nextval()."""
        return sql.SQL("{}::regclass").format(
            sql.Literal(f"{quote_ident(schema)}.{quote_ident(name)}")
        )

    @staticmethod
    def nextval(schema: str, sequence: str) -> sql.Composed:
        return sql.SQL("nextval({})").format(SchemaUtils.regclass(schema, sequence))


# ============================================================================
# TRIGGER BUILDER
# ============================================================================

class TriggerBuilder:
    """
    Builder for PostgreSQL trigger DDL statements.
    """

    @staticmethod
    def drop(schema: str, table: str, trigger_name: str) -> sql.Composed:
        """DROP TRIGGER IF EXISTS on a schema-qualified table."""
        return sql.SQL("DROP TRIGGER IF EXISTS {name} ON {table}").format(
            name=sql.Identifier(trigger_name),
            table=SchemaUtils.qualified(schema, table),
        )

    @staticmethod
    def after_row(
        schema: str,
        table: str,
        trigger_name: str,
        operation: AuditOperation,
        function_name: str,
    ) -> sql.Composed:
        """
        Create an AFTER trigger firing once per affected row.

        Args:
            schema: Schema of the table and the trigger function
            table: Table the trigger is attached to
            trigger_name: Name of the trigger
            operation: Row operation that fires the trigger
            function_name: Trigger function to execute
        """
        return sql.SQL(
            "CREATE TRIGGER {name}\n"
            "AFTER {event} ON {table}\n"
            "FOR EACH ROW\n"
            "EXECUTE FUNCTION {function}()"
        ).format(
            name=sql.Identifier(trigger_name),
            event=sql.SQL(operation.value),
            table=SchemaUtils.qualified(schema, table),
            function=SchemaUtils.qualified(schema, function_name),
        )


# ============================================================================
# FUNCTION BUILDER
# ============================================================================

class FunctionBuilder:
    """
    Builder for PostgreSQL function DDL statements.
    """

    # Input argument types of settings_lookup(), as oidvectortypes() renders them
    SETTINGS_LOOKUP_ARGUMENT_TYPES = "text"

    @staticmethod
    def drop_trigger_function(schema: str, function_name: str) -> sql.Composed:
        """DROP FUNCTION IF EXISTS for an argument-less trigger function."""
        return sql.SQL("DROP FUNCTION IF EXISTS {function}()").format(
            function=SchemaUtils.qualified(schema, function_name)
        )

    @staticmethod
    def settings_lookup(schema: str, function_name: str) -> sql.Composed:
        """
        Create the settings-lookup helper.

        Returns the value of a configuration parameter, or NULL when it is
        not set or cannot be read. Errors are trapped so a missing parameter
        never aborts the audited statement by itself.
        """
        return sql.SQL(
            "CREATE FUNCTION {function}(setting_name text)\n"
            "RETURNS text\n"
            "LANGUAGE plpgsql\n"
            "STABLE\n"
            "AS $$\n"
            "BEGIN\n"
            "    RETURN current_setting(setting_name, true);\n"
            "EXCEPTION\n"
            "    WHEN OTHERS THEN\n"
            "        RETURN NULL;\n"
            "END;\n"
            "$$"
        ).format(function=SchemaUtils.qualified(schema, function_name))

    @staticmethod
    def setting_call(schema: str, function_name: str, setting: str) -> sql.Composed:
        """Call expression for the settings-lookup helper."""
        return sql.SQL("{function}({setting})").format(
            function=SchemaUtils.qualified(schema, function_name),
            setting=sql.Literal(setting),
        )

    @staticmethod
    def trigger_function(
        schema: str,
        function_name: str,
        declarations: Sequence[sql.Composable],
        body: Sequence[sql.Composable],
    ) -> sql.Composed:
        """
        Create a plpgsql trigger function from declaration and body lines.

        Lines are joined with newlines inside DECLARE and BEGIN ... END.
        """
        return sql.SQL(
            "CREATE OR REPLACE FUNCTION {function}()\n"
            "RETURNS trigger\n"
            "LANGUAGE plpgsql\n"
            "AS $$\n"
            "DECLARE\n"
            "{declarations}\n"
            "BEGIN\n"
            "{body}\n"
            "END;\n"
            "$$"
        ).format(
            function=SchemaUtils.qualified(schema, function_name),
            declarations=sql.SQL("\n").join(declarations),
            body=sql.SQL("\n").join(body),
        )


# ============================================================================
# SEQUENCE / ENUM BUILDERS
# ============================================================================

class SequenceBuilder:
    """
    Builder for PostgreSQL sequence DDL statements.
    """

    @staticmethod
    def create(schema: str, sequence: str) -> sql.Composed:
        return sql.SQL("CREATE SEQUENCE {sequence}").format(
            sequence=SchemaUtils.qualified(schema, sequence)
        )


class EnumBuilder:
    """
    Builder for PostgreSQL enum type DDL statements.
    """

    @staticmethod
    def create(schema: str, enum_name: str, values: Sequence[str]) -> sql.Composed:
        return sql.SQL("CREATE TYPE {name} AS ENUM ({values})").format(
            name=SchemaUtils.qualified(schema, enum_name),
            values=sql.SQL(", ").join(sql.Literal(v) for v in values),
        )

    @staticmethod
    def cast(value: str, schema: str, enum_name: str) -> sql.Composed:
        """Literal enum label cast to the schema-qualified enum type."""
        return sql.SQL("{}::{}").format(
            sql.Literal(value),
            SchemaUtils.qualified(schema, enum_name),
        )


# ============================================================================
# TABLE BUILDER
# ============================================================================

class TableBuilder:
    """
    Builder for CREATE TABLE statements from (column, type) pairs.
    """

    @staticmethod
    def column(name: str, type_sql: sql.Composable, *constraints: sql.Composable) -> sql.Composed:
        parts = [sql.Identifier(name), type_sql, *constraints]
        return sql.SQL(" ").join(parts)

    @staticmethod
    def create(schema: str, table: str, columns: Sequence[sql.Composable]) -> sql.Composed:
        return sql.SQL("CREATE TABLE {table} (\n    {columns}\n)").format(
            table=SchemaUtils.qualified(schema, table),
            columns=sql.SQL(",\n    ").join(columns),
        )

    @staticmethod
    def native(type_name: str) -> sql.SQL:
        """Catalog type name, passed through verbatim."""
        return sql.SQL(type_name)


def column_pair(column_name: str) -> Tuple[str, str]:
    """
    old_/new_ names for one audited column.

    Used both as audit table columns and as plpgsql holder variables, so
    they are fitted to the identifier limit like trigger and function
    names. Two long columns differing only past the cut keep distinct
    names through the hash suffix.
    """
    return fit_identifier(f"old_{column_name}"), fit_identifier(f"new_{column_name}")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'quote_ident',
    'column_pair',
    'SchemaUtils',
    'TriggerBuilder',
    'FunctionBuilder',
    'SequenceBuilder',
    'EnumBuilder',
    'TableBuilder',
]

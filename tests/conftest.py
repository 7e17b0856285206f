# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# STATUS: Tests - In-memory schema inspector and common tables
# PURPOSE: Drive the synthesizer without a database
# CREATED: 18 OCT 2026
# ============================================================================
"""
Shared fixtures.

FakeInspector answers the SchemaInspector questions from dictionaries and
records every call in order, so tests can check both the generated DDL and
the sequence of catalog reads.
"""

from typing import Dict, Iterable, List, Optional, Tuple

import pytest

from core.errors import CatalogQueryError, SchemaResolutionError
from core.models import ColumnDescriptor, TableIdentity
from core.schema.change_capture import audit_column_names
from core.schema.ddl_utils import column_pair
from core.schema.naming import derive_names


class FakeInspector:
    """In-memory SchemaInspector."""

    def __init__(
        self,
        tables: Optional[Dict[Tuple[str, str], List[ColumnDescriptor]]] = None,
        triggers: Iterable[Tuple[str, str, str]] = (),
        functions: Iterable[tuple] = (),
        sequences: Iterable[Tuple[str, str]] = (),
        enum_types: Iterable[Tuple[str, str]] = (),
        fail_on: Optional[str] = None,
    ):
        self.tables = dict(tables or {})
        self.triggers = set(triggers)
        # (schema, name) means a no-argument function
        self.functions = {f if len(f) == 3 else (*f, "") for f in functions}
        self.sequences = set(sequences)
        self.enum_types = set(enum_types)
        self.fail_on = fail_on
        self.calls: List[tuple] = []

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, *args))
        if self.fail_on == method:
            raise CatalogQueryError(f"{method} failed: connection reset", operation=method)

    def table_exists(self, schema, table):
        self._record("table_exists", schema, table)
        return (schema, table) in self.tables

    def columns(self, schema, table):
        self._record("columns", schema, table)
        if (schema, table) not in self.tables:
            raise SchemaResolutionError(schema, table)
        return list(self.tables[(schema, table)])

    def trigger_exists(self, schema, table, name):
        self._record("trigger_exists", schema, table, name)
        return (schema, table, name) in self.triggers

    def function_exists(self, schema, name, argument_types=""):
        self._record("function_exists", schema, name, argument_types)
        return (schema, name, argument_types) in self.functions

    def sequence_exists(self, schema, name):
        self._record("sequence_exists", schema, name)
        return (schema, name) in self.sequences

    def enum_type_exists(self, schema, name):
        self._record("enum_type_exists", schema, name)
        return (schema, name) in self.enum_types


USER_COLUMNS = [
    ColumnDescriptor(name="id", native_type="bigint"),
    ColumnDescriptor(name="username", native_type="text"),
]


def audit_table_columns(columns, capture_application_name=False):
    """Column descriptors of an audit table created by PgAuditor."""
    types = {
        "audit_id": "bigint",
        "operation": "pgauditor_operation",
        "changed_by": "text",
        "changed_at": "timestamp with time zone",
        "application_name": "text",
    }
    for column in columns:
        for holder in column_pair(column.name):
            types[holder] = column.native_type
    return [
        ColumnDescriptor(name=name, native_type=types[name])
        for name in audit_column_names(columns, capture_application_name)
    ]


def migrated_inspector(table: TableIdentity, columns, capture_application_name=False, **overrides):
    """Inspector for a database where PgAuditor's DDL was already applied."""
    names = derive_names(table)
    schema = table.schema_name
    kwargs = dict(
        tables={
            (schema, table.table_name): columns,
            (schema, names.audit_table_name): audit_table_columns(columns, capture_application_name),
        },
        triggers={(schema, table.table_name, n) for n in names.trigger_names().values()},
        functions={(schema, n) for n in names.function_names().values()}
        | {(schema, names.settings_function_name, "text")},
        sequences={(schema, names.sequence_name)},
        enum_types={(schema, names.enum_type_name)},
    )
    kwargs.update(overrides)
    return FakeInspector(**kwargs)


@pytest.fixture
def user_table() -> TableIdentity:
    return TableIdentity(schema_name="public", table_name="user")


@pytest.fixture
def fresh_inspector(user_table) -> FakeInspector:
    """Database with only the audited table."""
    return FakeInspector(tables={("public", "user"): USER_COLUMNS})


@pytest.fixture
def migrated(user_table) -> FakeInspector:
    return migrated_inspector(user_table, USER_COLUMNS)

# ============================================================================
# DDL SYNTHESIZER
# ============================================================================
# STATUS: Core - Audit DDL orchestration
# PURPOSE: Sequence the drop/create steps that put an audit on one table
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: DdlSynthesizer, synthesize
# DEPENDENCIES: psycopg
# ============================================================================
"""
DDL Synthesizer.

Produces the script that audits one table. Nothing is executed: the
inspector only reads the catalog and the script is handed to a human.

Steps (strict order, catalog reads issued one at a time):
    1. DROP TRIGGER for each existing audit trigger
    2. DROP FUNCTION for each existing audit trigger function
    3. stop here in drop mode
    4. CREATE FUNCTION settings helper     (if absent)
    5. CREATE SEQUENCE audit id sequence   (if absent)
    6. CREATE TYPE operation enum          (if absent)
    7. CREATE TABLE audit table            (if absent, drift check otherwise)
    8. CREATE OR REPLACE FUNCTION x3       (insert, update, delete)
    9. CREATE TRIGGER x3                   (AFTER ... FOR EACH ROW)

The audit table, sequence and enum type are never dropped, in any mode:
dropping them could destroy captured history.

Usage:
    synthesizer = DdlSynthesizer(inspector, table, options)
    script = synthesizer.synthesize()
    print(script.render())
"""

import logging
from typing import Dict, List, Optional

from psycopg import sql

from core.contracts import AuditOperation
from core.errors import AuditTableDriftError, SchemaResolutionError
from core.logging import log_context
from core.models import ColumnDescriptor, GeneratedNames, SynthesisOptions, TableIdentity
from core.schema.accumulator import DdlAccumulator, DdlScript
from core.schema.change_capture import (
    APPLICATION_NAME_COLUMN,
    AUDIT_ID_COLUMN,
    CHANGED_AT_COLUMN,
    CHANGED_BY_COLUMN,
    OPERATION_COLUMN,
    ChangeCaptureBuilder,
    audit_column_names,
)
from core.schema.ddl_utils import (
    EnumBuilder,
    FunctionBuilder,
    SchemaUtils,
    SequenceBuilder,
    TableBuilder,
    TriggerBuilder,
    column_pair,
)
from core.schema.naming import derive_names

logger = logging.getLogger(__name__)


class DdlSynthesizer:
    """
    Orchestrates audit DDL generation for one table.

    Args:
        inspector: Read-only SchemaInspector
        table: Audited table
        options: Synthesis options

    A synthesizer is single-use: synthesize() runs once. After a failure
    the statements gathered so far stay readable through ``partial`` for
    diagnostics, but they are not a safe script.
    """

    def __init__(self, inspector, table: TableIdentity, options: Optional[SynthesisOptions] = None):
        self.inspector = inspector
        self.table = table
        self.options = options or SynthesisOptions()
        self.names: GeneratedNames = derive_names(table)
        self._accumulator = DdlAccumulator()
        self._done = False

    @property
    def schema(self) -> str:
        return self.table.schema_name

    @property
    def partial(self) -> DdlScript:
        """Statements appended so far, complete or not."""
        return self._accumulator.build()

    def _emit(self, statement: sql.Composable) -> None:
        self._accumulator.append(statement)

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    def synthesize(self) -> DdlScript:
        """
        Run every step and return the finished script.

        Raises:
            SchemaResolutionError: Audited table not found
            CatalogQueryError: A catalog read failed
            AuditTableDriftError: Existing audit table cannot be reused
        """
        if self._done:
            raise RuntimeError("DdlSynthesizer.synthesize() may only run once")
        self._done = True

        with log_context(table=self.table.qualified_name):
            logger.info(
                f"Synthesizing audit DDL for {self.table} "
                f"(auth={self.options.authentication.value}, drop={self.options.drop_mode})"
            )

            if not self.inspector.table_exists(self.schema, self.table.table_name):
                raise SchemaResolutionError(self.schema, self.table.table_name)

            columns = self.inspector.columns(self.schema, self.table.table_name)
            logger.debug(f"Fetched {len(columns)} columns for {self.table}")

            self._drop_triggers()
            self._drop_functions()

            if self.options.drop_mode:
                logger.info(f"Drop mode: {len(self._accumulator)} drop statements for {self.table}")
                return self._accumulator.build()

            self._create_settings_function()
            self._create_sequence()
            self._create_enum_type()
            self._create_audit_table(columns)
            self._create_trigger_functions(columns)
            self._create_triggers()

            logger.info(f"Generated {len(self._accumulator)} DDL statements for {self.table}")
            return self._accumulator.build()

    # =========================================================================
    # STEPS 1-2: DROPS
    # =========================================================================

    def _drop_triggers(self) -> None:
        for operation, trigger_name in self.names.trigger_names().items():
            with log_context(step="drop_trigger", operation=operation.value):
                if self.inspector.trigger_exists(self.schema, self.table.table_name, trigger_name):
                    logger.debug(f"Trigger {trigger_name} exists, dropping")
                    self._emit(TriggerBuilder.drop(self.schema, self.table.table_name, trigger_name))

    def _drop_functions(self) -> None:
        for operation, function_name in self.names.function_names().items():
            with log_context(step="drop_function", operation=operation.value):
                if self.inspector.function_exists(self.schema, function_name):
                    logger.debug(f"Function {function_name} exists, dropping")
                    self._emit(FunctionBuilder.drop_trigger_function(self.schema, function_name))

    # =========================================================================
    # STEPS 4-6: SHARED OBJECTS
    # =========================================================================

    def _create_settings_function(self) -> None:
        name = self.names.settings_function_name
        if self.inspector.function_exists(
            self.schema, name, FunctionBuilder.SETTINGS_LOOKUP_ARGUMENT_TYPES
        ):
            logger.debug(f"Settings helper {self.schema}.{name} exists")
            return
        self._emit(FunctionBuilder.settings_lookup(self.schema, name))

    def _create_sequence(self) -> None:
        name = self.names.sequence_name
        if self.inspector.sequence_exists(self.schema, name):
            logger.debug(f"Sequence {self.schema}.{name} exists")
            return
        self._emit(SequenceBuilder.create(self.schema, name))

    def _create_enum_type(self) -> None:
        name = self.names.enum_type_name
        if self.inspector.enum_type_exists(self.schema, name):
            logger.debug(f"Enum type {self.schema}.{name} exists")
            return
        self._emit(EnumBuilder.create(self.schema, name, [op.value for op in AuditOperation]))

    # =========================================================================
    # STEP 7: AUDIT TABLE
    # =========================================================================

    def audit_table_statement(self, columns: List[ColumnDescriptor]) -> sql.Composed:
        """CREATE TABLE for the audit table (4 + 2N columns, 5 + 2N with application name)."""
        definitions = [
            TableBuilder.column(
                AUDIT_ID_COLUMN,
                sql.SQL("bigint"),
                sql.SQL("PRIMARY KEY DEFAULT {}").format(
                    SchemaUtils.nextval(self.schema, self.names.sequence_name)
                ),
            ),
            TableBuilder.column(
                OPERATION_COLUMN,
                SchemaUtils.qualified(self.schema, self.names.enum_type_name),
                sql.SQL("NOT NULL"),
            ),
            TableBuilder.column(CHANGED_BY_COLUMN, sql.SQL("text")),
            TableBuilder.column(CHANGED_AT_COLUMN, sql.SQL("timestamp with time zone"), sql.SQL("NOT NULL")),
        ]

        if self.options.capture_application_name:
            definitions.append(TableBuilder.column(APPLICATION_NAME_COLUMN, sql.SQL("text")))

        for column in columns:
            native = TableBuilder.native(column.native_type)
            for name in column_pair(column.name):
                definitions.append(TableBuilder.column(name, native))

        return TableBuilder.create(self.schema, self.names.audit_table_name, definitions)

    def _create_audit_table(self, columns: List[ColumnDescriptor]) -> None:
        audit_table = self.names.audit_table_name
        if not self.inspector.table_exists(self.schema, audit_table):
            self._emit(self.audit_table_statement(columns))
            return

        logger.debug(f"Audit table {self.schema}.{audit_table} exists, checking for drift")
        self._check_drift(columns, self.inspector.columns(self.schema, audit_table))

    def _check_drift(self, columns: List[ColumnDescriptor], existing: List[ColumnDescriptor]) -> None:
        """
        Compare an existing audit table with the one this run would create.

        Extra audit columns (from source columns dropped since) are kept and
        ignored. Missing columns or retyped old_/new_ columns are fatal.
        """
        existing_types: Dict[str, str] = {c.name: c.native_type for c in existing}
        expected = audit_column_names(columns, self.options.capture_application_name)
        missing = [name for name in expected if name not in existing_types]

        mismatched = []
        for column in columns:
            for name in column_pair(column.name):
                actual = existing_types.get(name)
                if actual is not None and actual != column.native_type:
                    mismatched.append(f"{name} ({actual} != {column.native_type})")

        if missing or mismatched:
            logger.error(
                f"Audit table {self.schema}.{self.names.audit_table_name} drifted: "
                f"missing={missing} mismatched={mismatched}"
            )
            raise AuditTableDriftError(
                f"{self.schema}.{self.names.audit_table_name}",
                missing=missing,
                mismatched=mismatched,
            )

    # =========================================================================
    # STEPS 8-9: FUNCTIONS AND TRIGGERS
    # =========================================================================

    def _create_trigger_functions(self, columns: List[ColumnDescriptor]) -> None:
        builder = ChangeCaptureBuilder(self.table, columns, self.names, self.options)
        for statement in builder.build_all():
            self._emit(statement)

    def _create_triggers(self) -> None:
        for operation in AuditOperation:
            self._emit(TriggerBuilder.after_row(
                self.schema,
                self.table.table_name,
                self.names.trigger_name(operation),
                operation,
                self.names.function_name(operation),
            ))


def synthesize(inspector, table: TableIdentity, options: Optional[SynthesisOptions] = None) -> DdlScript:
    """Convenience wrapper: build a synthesizer and run it."""
    return DdlSynthesizer(inspector, table, options).synthesize()


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ['DdlSynthesizer', 'synthesize']

# ============================================================================
# CHANGE CAPTURE BUILDER
# ============================================================================
# STATUS: Core - Per-operation audit trigger functions
# PURPOSE: Build the plpgsql function that writes one audit row per change
# CREATED: 18 OCT 2026
# EXPORTS: ChangeCaptureBuilder, CaptureProfile, CAPTURE_PROFILES
# DEPENDENCIES: psycopg
# ============================================================================
"""
Change Capture Builder.

One builder serves INSERT, UPDATE and DELETE. What differs between them is
held in CAPTURE_PROFILES:

    operation  captures      gated by change counter  returns
    INSERT     new_* only    no                       NEW
    UPDATE     old_* + new_* yes                      NEW
    DELETE     old_* only    no                       OLD

For UPDATE a column is captured only when ``OLD.col IS DISTINCT FROM
NEW.col`` (NULL-safe), and the audit row is written only when at least one
column changed. Holders of uncaptured columns stay NULL.

Generated function (INSERT, columns id bigint, username text)::

    CREATE OR REPLACE FUNCTION "public"."fai_user"()
    RETURNS trigger
    LANGUAGE plpgsql
    AS $$
    DECLARE
        "changed_by_value" text := NULL;
        "old_id" bigint := NULL;
        "new_id" bigint := NULL;
        ...
    BEGIN
        "changed_by_value" := session_user;
        "new_id" := NEW."id";
        ...
        INSERT INTO "public"."aud_user" (...) VALUES (...);
        RETURN NEW;
    END;
    $$
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from psycopg import sql

from core.contracts import AuditOperation
from core.models import ColumnDescriptor, GeneratedNames, SynthesisOptions, TableIdentity
from core.schema.authentication import CHANGED_BY_VARIABLE, changed_by_fragment
from core.schema.ddl_utils import (
    EnumBuilder,
    FunctionBuilder,
    SchemaUtils,
    TableBuilder,
    column_pair,
)

logger = logging.getLogger(__name__)

CHANGE_COUNTER_VARIABLE = "change_count"
APPLICATION_NAME_SETTING = "application_name"

# Leading audit table columns shared by every audit row
AUDIT_ID_COLUMN = "audit_id"
OPERATION_COLUMN = "operation"
CHANGED_BY_COLUMN = "changed_by"
CHANGED_AT_COLUMN = "changed_at"
APPLICATION_NAME_COLUMN = "application_name"

_INDENT = "    "


@dataclass(frozen=True)
class CaptureProfile:
    """What one operation captures and how its audit row is gated."""
    capture_old: bool
    capture_new: bool
    gated: bool
    returns: str


CAPTURE_PROFILES: Dict[AuditOperation, CaptureProfile] = {
    AuditOperation.INSERT: CaptureProfile(capture_old=False, capture_new=True, gated=False, returns="NEW"),
    AuditOperation.UPDATE: CaptureProfile(capture_old=True, capture_new=True, gated=True, returns="NEW"),
    AuditOperation.DELETE: CaptureProfile(capture_old=True, capture_new=False, gated=False, returns="OLD"),
}


def _indent(lines: Sequence[sql.Composable], level: int = 1) -> List[sql.Composable]:
    prefix = sql.SQL(_INDENT * level)
    return [sql.Composed([prefix, line]) for line in lines]


def audit_column_names(columns: Sequence[ColumnDescriptor], capture_application_name: bool) -> List[str]:
    """
    Audit table column names in table order.

    audit_id, operation, changed_by, changed_at, [application_name],
    then old_/new_ pairs in source ordinal order.
    """
    names = [AUDIT_ID_COLUMN, OPERATION_COLUMN, CHANGED_BY_COLUMN, CHANGED_AT_COLUMN]
    if capture_application_name:
        names.append(APPLICATION_NAME_COLUMN)
    for column in columns:
        names.extend(column_pair(column.name))
    return names


class ChangeCaptureBuilder:
    """
    Build audit trigger functions for one table.

    Args:
        table: Audited table
        columns: Column snapshot in ordinal order
        names: Generated object names
        options: Synthesis options (authentication, application name)
    """

    def __init__(
        self,
        table: TableIdentity,
        columns: Sequence[ColumnDescriptor],
        names: GeneratedNames,
        options: SynthesisOptions,
    ):
        self.table = table
        self.columns = list(columns)
        self.names = names
        self.options = options

    @property
    def schema(self) -> str:
        return self.table.schema_name

    # =========================================================================
    # FRAGMENTS
    # =========================================================================

    def declarations(self, operation: AuditOperation) -> List[sql.Composable]:
        """
        DECLARE section: changed_by holder, change counter for gated
        operations, then a NULL old_/new_ holder pair typed like each column.
        """
        profile = CAPTURE_PROFILES[operation]
        lines = [sql.SQL("{} text := NULL;").format(sql.Identifier(CHANGED_BY_VARIABLE))]

        if profile.gated:
            lines.append(sql.SQL("{} integer := 0;").format(sql.Identifier(CHANGE_COUNTER_VARIABLE)))

        for column in self.columns:
            native = TableBuilder.native(column.native_type)
            for holder in column_pair(column.name):
                lines.append(sql.SQL("{} {} := NULL;").format(sql.Identifier(holder), native))

        return _indent(lines)

    def capture_logic(self, operation: AuditOperation) -> List[sql.Composable]:
        """Assignments that copy row values into the holders."""
        profile = CAPTURE_PROFILES[operation]
        lines: List[sql.Composable] = []

        for column in self.columns:
            old_holder, new_holder = column_pair(column.name)
            col = sql.Identifier(column.name)
            assignments = []
            if profile.capture_old:
                assignments.append(
                    sql.SQL("{} := OLD.{};").format(sql.Identifier(old_holder), col)
                )
            if profile.capture_new:
                assignments.append(
                    sql.SQL("{} := NEW.{};").format(sql.Identifier(new_holder), col)
                )

            if profile.gated:
                lines.append(sql.SQL("IF OLD.{col} IS DISTINCT FROM NEW.{col} THEN").format(col=col))
                lines.extend(_indent(assignments))
                lines.extend(_indent([
                    sql.SQL("{counter} := {counter} + 1;").format(
                        counter=sql.Identifier(CHANGE_COUNTER_VARIABLE)
                    )
                ]))
                lines.append(sql.SQL("END IF;"))
            else:
                lines.extend(assignments)

        return lines

    def audit_columns(self) -> sql.Composed:
        """Column list of the audit INSERT."""
        return sql.SQL(", ").join(
            sql.Identifier(name)
            for name in audit_column_names(self.columns, self.options.capture_application_name)
        )

    def audit_values(self, operation: AuditOperation) -> sql.Composed:
        """Value list of the audit INSERT, mirroring audit_columns()."""
        values: List[sql.Composable] = [
            SchemaUtils.nextval(self.schema, self.names.sequence_name),
            EnumBuilder.cast(operation.value, self.schema, self.names.enum_type_name),
            sql.Identifier(CHANGED_BY_VARIABLE),
            sql.SQL("now()"),
        ]

        if self.options.capture_application_name:
            values.append(FunctionBuilder.setting_call(
                self.schema, self.names.settings_function_name, APPLICATION_NAME_SETTING
            ))

        for column in self.columns:
            values.extend(sql.Identifier(holder) for holder in column_pair(column.name))

        return sql.SQL(", ").join(values)

    def audit_insert(self, operation: AuditOperation) -> List[sql.Composable]:
        return [
            sql.SQL("INSERT INTO {table} ({columns})").format(
                table=SchemaUtils.qualified(self.schema, self.names.audit_table_name),
                columns=self.audit_columns(),
            ),
            sql.SQL("VALUES ({values});").format(values=self.audit_values(operation)),
        ]

    # =========================================================================
    # FUNCTION
    # =========================================================================

    def body(self, operation: AuditOperation) -> List[sql.Composable]:
        """BEGIN ... END section of the trigger function."""
        profile = CAPTURE_PROFILES[operation]
        who = changed_by_fragment(
            self.options.authentication,
            self.schema,
            self.names,
            self.options.config_property,
        )

        lines: List[sql.Composable] = []
        if profile.gated:
            lines.extend(self.capture_logic(operation))
            lines.append(sql.SQL("IF {} > 0 THEN").format(sql.Identifier(CHANGE_COUNTER_VARIABLE)))
            lines.extend(_indent(who))
            lines.extend(_indent(self.audit_insert(operation)))
            lines.append(sql.SQL("END IF;"))
        else:
            lines.extend(who)
            lines.extend(self.capture_logic(operation))
            lines.extend(self.audit_insert(operation))

        lines.append(sql.SQL("RETURN {};").format(sql.SQL(profile.returns)))
        return _indent(lines)

    def build(self, operation: AuditOperation) -> sql.Composed:
        """
        Build the complete CREATE OR REPLACE FUNCTION statement.

        Args:
            operation: INSERT, UPDATE or DELETE

        Returns:
            sql.Composed function definition
        """
        logger.debug(
            f"Building {operation.value} audit function {self.names.function_name(operation)} "
            f"for {self.table} ({len(self.columns)} columns)"
        )
        return FunctionBuilder.trigger_function(
            self.schema,
            self.names.function_name(operation),
            self.declarations(operation),
            self.body(operation),
        )

    def build_all(self) -> List[sql.Composed]:
        """Functions for INSERT, UPDATE and DELETE, in that order."""
        return [self.build(operation) for operation in AuditOperation]


__all__ = [
    "ChangeCaptureBuilder",
    "CaptureProfile",
    "CAPTURE_PROFILES",
    "audit_column_names",
    "AUDIT_ID_COLUMN",
    "OPERATION_COLUMN",
    "CHANGED_BY_COLUMN",
    "CHANGED_AT_COLUMN",
    "APPLICATION_NAME_COLUMN",
    "CHANGE_COUNTER_VARIABLE",
]

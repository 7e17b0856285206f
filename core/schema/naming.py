# ============================================================================
# IDENTIFIER NAMER
# ============================================================================
# STATUS: Core - Deterministic names for every generated object
# PURPOSE: Derive audit table, sequence, enum, function and trigger names
# CREATED: 18 OCT 2026
# EXPORTS: derive_names, fit_identifier, MAX_IDENTIFIER_BYTES
# ============================================================================
"""
Identifier Namer.

Naming scheme:
    audit table        aud_<table>
    triggers           tai_/tau_/tad_ + audit table name
    trigger functions  fai_/fau_/fad_ + table name
    sequence, enum type and settings helper are shared by every audit
    table in a schema.

PostgreSQL truncates identifiers longer than 63 bytes. Trigger and function
names use 3-letter prefixes and are fitted to the limit with a hash suffix,
so they never collide after truncation. The audit table name is not fitted;
a warning is logged when it is too long.
"""

import hashlib
import logging

from core.contracts import AuditOperation
from core.models import GeneratedNames, TableIdentity

logger = logging.getLogger(__name__)

MAX_IDENTIFIER_BYTES = 63

AUDIT_TABLE_PREFIX = "aud_"
SEQUENCE_NAME = "pgauditor_audit_seq"
ENUM_TYPE_NAME = "pgauditor_operation"
SETTINGS_FUNCTION_NAME = "pgauditor_setting"

TRIGGER_PREFIXES = {
    AuditOperation.INSERT: "tai_",
    AuditOperation.UPDATE: "tau_",
    AuditOperation.DELETE: "tad_",
}

FUNCTION_PREFIXES = {
    AuditOperation.INSERT: "fai_",
    AuditOperation.UPDATE: "fau_",
    AuditOperation.DELETE: "fad_",
}

_HASH_LENGTH = 8


def fit_identifier(name: str, limit: int = MAX_IDENTIFIER_BYTES) -> str:
    """
    Fit a name into ``limit`` bytes of UTF-8.

    Names that fit are returned unchanged. Longer names are cut on a
    character boundary and suffixed with ``_`` and 8 hex digits of the md5
    of the full name.
    """
    encoded = name.encode("utf-8")
    if len(encoded) <= limit:
        return name

    digest = hashlib.md5(encoded).hexdigest()[:_HASH_LENGTH]
    budget = limit - _HASH_LENGTH - 1
    head = encoded[:budget].decode("utf-8", errors="ignore")
    return f"{head}_{digest}"


def derive_names(table: TableIdentity) -> GeneratedNames:
    """
    Derive every generated object name for an audited table.

    Args:
        table: Identity of the audited table

    Returns:
        GeneratedNames
    """
    audit_table_name = f"{AUDIT_TABLE_PREFIX}{table.table_name}"

    if len(audit_table_name.encode("utf-8")) > MAX_IDENTIFIER_BYTES:
        logger.warning(
            f"Audit table name {audit_table_name!r} exceeds {MAX_IDENTIFIER_BYTES} bytes; "
            "PostgreSQL will truncate it"
        )

    triggers = {
        op: fit_identifier(prefix + audit_table_name)
        for op, prefix in TRIGGER_PREFIXES.items()
    }
    functions = {
        op: fit_identifier(prefix + table.table_name)
        for op, prefix in FUNCTION_PREFIXES.items()
    }

    return GeneratedNames(
        audit_table_name=audit_table_name,
        sequence_name=SEQUENCE_NAME,
        enum_type_name=ENUM_TYPE_NAME,
        settings_function_name=SETTINGS_FUNCTION_NAME,
        insert_trigger_name=triggers[AuditOperation.INSERT],
        update_trigger_name=triggers[AuditOperation.UPDATE],
        delete_trigger_name=triggers[AuditOperation.DELETE],
        insert_function_name=functions[AuditOperation.INSERT],
        update_function_name=functions[AuditOperation.UPDATE],
        delete_function_name=functions[AuditOperation.DELETE],
    )


__all__ = [
    "derive_names",
    "fit_identifier",
    "MAX_IDENTIFIER_BYTES",
    "AUDIT_TABLE_PREFIX",
    "SEQUENCE_NAME",
    "ENUM_TYPE_NAME",
    "SETTINGS_FUNCTION_NAME",
]

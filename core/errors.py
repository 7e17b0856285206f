# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# STATUS: Core - Exceptions raised during DDL synthesis
# PURPOSE: One hierarchy so callers can catch AuditorError and exit cleanly
# CREATED: 18 OCT 2026
# ============================================================================
"""
PgAuditor Errors

Every failure aborts the remaining synthesis steps and reaches the caller
unchanged. Nothing is retried: re-running after fixing the cause is safe
because every generated step is guarded by an existence check.

    AuditorError
    ├── ConfigurationError
    │   └── UnsupportedAuthenticationMode
    ├── SchemaResolutionError
    ├── CatalogQueryError
    └── AuditTableDriftError
"""

from typing import List, Optional


class AuditorError(Exception):
    """Base exception for PgAuditor."""


class ConfigurationError(AuditorError):
    """Raised when command line or environment configuration is invalid."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


class UnsupportedAuthenticationMode(ConfigurationError):
    """Raised for an authentication mode with no changed_by strategy."""

    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"Unsupported authentication mode: {mode!r}", field="authentication")


class SchemaResolutionError(AuditorError):
    """Raised when the audited table cannot be found in the catalog."""

    def __init__(self, schema_name: str, table_name: str):
        self.schema_name = schema_name
        self.table_name = table_name
        super().__init__(f"Table {schema_name}.{table_name} does not exist")


class CatalogQueryError(AuditorError):
    """Raised when a catalog round trip (existence check, column fetch) fails."""

    def __init__(self, message: str, operation: str = None):
        self.operation = operation
        super().__init__(message)


class AuditTableDriftError(AuditorError):
    """
    Raised when an existing audit table no longer matches its source table.

    Reconciling the audit table (adding columns for source columns created
    after the audit setup) is not implemented; the operator must alter the
    audit table by hand before triggers can be regenerated.
    """

    def __init__(
        self,
        audit_table: str,
        missing: Optional[List[str]] = None,
        mismatched: Optional[List[str]] = None,
    ):
        self.audit_table = audit_table
        self.missing = list(missing or [])
        self.mismatched = list(mismatched or [])

        details = []
        if self.missing:
            details.append(f"missing columns: {', '.join(self.missing)}")
        if self.mismatched:
            details.append(f"type mismatches: {', '.join(self.mismatched)}")

        super().__init__(
            f"Audit table {audit_table} has drifted from its source table "
            f"({'; '.join(details)}). Reconciling an existing audit table is not "
            "implemented; alter it manually and run PgAuditor again."
        )


__all__ = [
    "AuditorError",
    "ConfigurationError",
    "UnsupportedAuthenticationMode",
    "SchemaResolutionError",
    "CatalogQueryError",
    "AuditTableDriftError",
]

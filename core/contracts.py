# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Closed enums shared by configuration and synthesis
# PURPOSE: Authentication modes and audited row operations
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: AuthenticationMode, AuditOperation
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for PgAuditor.

These enums cross three boundaries:
- Command line (``--auth application``)
- Python (strategy and capture-profile dispatch)
- SQL (labels of the generated ``pgauditor_operation`` enum type)
"""

from enum import Enum


class AuthenticationMode(str, Enum):
    """
    How the audit row identifies who changed the audited row.

    APPLICATION: a custom configuration parameter set by the client
    DATABASE:    the PostgreSQL session user
    ANONYMOUS:   nobody, changed_by stays NULL
    """
    APPLICATION = "application"
    DATABASE = "database"
    ANONYMOUS = "anonymous"

    @classmethod
    def parse(cls, value: str) -> "AuthenticationMode":
        """Parse a command line value case-insensitively."""
        return cls(value.strip().lower())


class AuditOperation(str, Enum):
    """
    Row operations captured by the audit triggers.

    The values are the labels of the generated SQL enum type, in
    declaration order.
    """
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


__all__ = [
    "AuthenticationMode",
    "AuditOperation",
]

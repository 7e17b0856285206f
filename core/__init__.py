# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export core contracts, models, errors and the synthesizer
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================

from core.contracts import AuthenticationMode, AuditOperation
from core.errors import (
    AuditorError,
    ConfigurationError,
    UnsupportedAuthenticationMode,
    SchemaResolutionError,
    CatalogQueryError,
    AuditTableDriftError,
)
from core.models import TableIdentity, ColumnDescriptor, SynthesisOptions, GeneratedNames
from core.schema import DdlSynthesizer, DdlScript, synthesize

__all__ = [
    # Enums
    "AuthenticationMode",
    "AuditOperation",
    # Errors
    "AuditorError",
    "ConfigurationError",
    "UnsupportedAuthenticationMode",
    "SchemaResolutionError",
    "CatalogQueryError",
    "AuditTableDriftError",
    # Models
    "TableIdentity",
    "ColumnDescriptor",
    "SynthesisOptions",
    "GeneratedNames",
    # Schema
    "DdlSynthesizer",
    "DdlScript",
    "synthesize",
]

# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

All models are frozen: they are built once per run and never mutated.
"""

from core.models.table import TableIdentity, ColumnDescriptor, DEFAULT_SCHEMA
from core.models.options import SynthesisOptions, DEFAULT_CONFIG_PROPERTY
from core.models.names import GeneratedNames

__all__ = [
    # Table
    "TableIdentity",
    "ColumnDescriptor",
    "DEFAULT_SCHEMA",
    # Options
    "SynthesisOptions",
    "DEFAULT_CONFIG_PROPERTY",
    # Names
    "GeneratedNames",
]

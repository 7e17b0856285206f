# ============================================================================
# SCHEMA MODULE
# ============================================================================
# STATUS: Core - Audit DDL synthesis
# PURPOSE: Generate audit table, trigger and helper DDL for one table
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================

from core.schema.accumulator import DdlAccumulator, DdlScript
from core.schema.authentication import changed_by_fragment
from core.schema.change_capture import ChangeCaptureBuilder, CAPTURE_PROFILES
from core.schema.ddl_utils import (
    TriggerBuilder,
    FunctionBuilder,
    SequenceBuilder,
    EnumBuilder,
    TableBuilder,
    SchemaUtils,
)
from core.schema.naming import derive_names, fit_identifier, MAX_IDENTIFIER_BYTES
from core.schema.synthesizer import DdlSynthesizer, synthesize

__all__ = [
    # Synthesis
    "DdlSynthesizer",
    "synthesize",
    "DdlAccumulator",
    "DdlScript",
    # Components
    "derive_names",
    "fit_identifier",
    "MAX_IDENTIFIER_BYTES",
    "changed_by_fragment",
    "ChangeCaptureBuilder",
    "CAPTURE_PROFILES",
    # Utilities
    "TriggerBuilder",
    "FunctionBuilder",
    "SequenceBuilder",
    "EnumBuilder",
    "TableBuilder",
    "SchemaUtils",
]

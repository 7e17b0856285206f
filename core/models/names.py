# ============================================================================
# GENERATED NAMES MODEL
# ============================================================================
# STATUS: Core - Every object name the generated DDL refers to
# PURPOSE: Output of the identifier namer
# CREATED: 18 OCT 2026
# ============================================================================
"""
Generated Names

Names are unqualified; the schema of the audited table qualifies all of
them when DDL is rendered.
"""

from typing import Dict

from pydantic import BaseModel

from core.contracts import AuditOperation


class GeneratedNames(BaseModel):
    """Names derived from a TableIdentity by core.schema.naming."""

    model_config = {"frozen": True}

    audit_table_name: str
    sequence_name: str
    enum_type_name: str
    settings_function_name: str

    insert_trigger_name: str
    update_trigger_name: str
    delete_trigger_name: str

    insert_function_name: str
    update_function_name: str
    delete_function_name: str

    def trigger_name(self, operation: AuditOperation) -> str:
        return self.trigger_names()[operation]

    def function_name(self, operation: AuditOperation) -> str:
        return self.function_names()[operation]

    def trigger_names(self) -> Dict[AuditOperation, str]:
        return {
            AuditOperation.INSERT: self.insert_trigger_name,
            AuditOperation.UPDATE: self.update_trigger_name,
            AuditOperation.DELETE: self.delete_trigger_name,
        }

    def function_names(self) -> Dict[AuditOperation, str]:
        return {
            AuditOperation.INSERT: self.insert_function_name,
            AuditOperation.UPDATE: self.update_function_name,
            AuditOperation.DELETE: self.delete_function_name,
        }


__all__ = ["GeneratedNames"]

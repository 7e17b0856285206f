# ============================================================================
# SYNTHESIS OPTIONS MODEL
# ============================================================================
# STATUS: Core - Configuration choices consumed by the synthesizer
# PURPOSE: Immutable option set built once per run
# CREATED: 18 OCT 2026
# ============================================================================
"""
Synthesis Options

The small set of choices that change the generated DDL.
"""

from pydantic import BaseModel, Field

from core.contracts import AuthenticationMode

DEFAULT_CONFIG_PROPERTY = "pgauditor.current_user"


class SynthesisOptions(BaseModel):
    """
    Options for one synthesis run.

    config_property is only read in APPLICATION mode.
    """

    model_config = {"frozen": True}

    authentication: AuthenticationMode = Field(
        default=AuthenticationMode.DATABASE,
        description="How changed_by is resolved inside the trigger functions"
    )
    capture_application_name: bool = Field(
        default=False,
        description="Add an application_name column filled from the session"
    )
    drop_mode: bool = Field(
        default=False,
        description="Only drop triggers and trigger functions"
    )
    config_property: str = Field(
        default=DEFAULT_CONFIG_PROPERTY,
        min_length=1,
        description="Configuration parameter holding the application user"
    )


__all__ = ["SynthesisOptions", "DEFAULT_CONFIG_PROPERTY"]

# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Module

Binds command line flags and environment variables into one immutable
AuditorConfig per run.
"""

from core.config.defaults import (
    AuditorConfig,
    ConnectionSettings,
    DEFAULT_HOST,
    DEFAULT_PORT,
)

__all__ = [
    "AuditorConfig",
    "ConnectionSettings",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
]

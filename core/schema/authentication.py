# ============================================================================
# AUTHENTICATION STRATEGY
# ============================================================================
# STATUS: Core - "Who changed this row" fragment for trigger functions
# PURPOSE: One changed_by assignment per authentication mode
# CREATED: 18 OCT 2026
# EXPORTS: changed_by_fragment, CHANGED_BY_VARIABLE
# DEPENDENCIES: psycopg
# ============================================================================
"""
Authentication Strategy.

Every trigger function declares ``changed_by_value text := NULL`` and runs
the fragment built here before writing the audit row:

    DATABASE     changed_by_value := session_user;
    ANONYMOUS    (nothing; changed_by stays NULL)
    APPLICATION  read the configured parameter through the settings helper
                 and RAISE EXCEPTION when it is NULL or only whitespace,
                 which aborts the INSERT/UPDATE/DELETE that fired the trigger.

The fragment is identical for all three operations. It is returned as a
list of plpgsql lines so the caller can indent it.
"""

from typing import Callable, Dict, List

from psycopg import sql

from core.contracts import AuthenticationMode
from core.errors import UnsupportedAuthenticationMode
from core.models import GeneratedNames
from core.schema.ddl_utils import FunctionBuilder

CHANGED_BY_VARIABLE = "changed_by_value"

Fragment = List[sql.Composable]


def _database(schema: str, names: GeneratedNames, config_property: str) -> Fragment:
    return [sql.SQL("{var} := session_user;").format(var=sql.Identifier(CHANGED_BY_VARIABLE))]


def _anonymous(schema: str, names: GeneratedNames, config_property: str) -> Fragment:
    return []


def _application(schema: str, names: GeneratedNames, config_property: str) -> Fragment:
    var = sql.Identifier(CHANGED_BY_VARIABLE)
    lookup = FunctionBuilder.setting_call(schema, names.settings_function_name, config_property)
    # RAISE treats % as a placeholder
    message = sql.Literal(
        f"pgauditor: configuration parameter {config_property.replace('%', '%%')} "
        "must identify the user responsible for this change"
    )
    return [
        sql.SQL("{var} := {lookup};").format(var=var, lookup=lookup),
        # [:space:] also matches tabs and newlines; one-argument btrim() strips spaces only
        sql.SQL("IF {var} IS NULL OR {var} !~ '[^[:space:]]' THEN").format(var=var),
        sql.SQL("    RAISE EXCEPTION {message} USING ERRCODE = 'insufficient_privilege';").format(
            message=message
        ),
        sql.SQL("END IF;"),
    ]


_STRATEGIES: Dict[AuthenticationMode, Callable[[str, GeneratedNames, str], Fragment]] = {
    AuthenticationMode.DATABASE: _database,
    AuthenticationMode.ANONYMOUS: _anonymous,
    AuthenticationMode.APPLICATION: _application,
}


def changed_by_fragment(
    mode: AuthenticationMode,
    schema: str,
    names: GeneratedNames,
    config_property: str,
) -> Fragment:
    """
    Build the changed_by assignment for a trigger function.

    Args:
        mode: Authentication mode
        schema: Schema holding the settings helper
        names: Generated names (for the settings helper name)
        config_property: Parameter read in APPLICATION mode

    Returns:
        plpgsql lines, empty for ANONYMOUS

    Raises:
        UnsupportedAuthenticationMode: If mode has no strategy
    """
    try:
        strategy = _STRATEGIES[mode]
    except (KeyError, TypeError):
        raise UnsupportedAuthenticationMode(mode) from None
    return strategy(schema, names, config_property)


__all__ = ["changed_by_fragment", "CHANGED_BY_VARIABLE"]

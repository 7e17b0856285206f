# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Run configuration and connection settings
# PURPOSE: Bind command line flags and PG* environment variables
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Defaults

Connection settings follow psql: a command line flag wins over its
environment variable, which wins over the built-in default.

    flag          environment   default
    --host        PGHOST        localhost
    --port        PGPORT        5432
    --dbname      PGDATABASE    (none)
    --username    PGUSER        (required)
    --password    PGPASSWORD    (none)

Design:
- Immutable dataclasses
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from core.contracts import AuthenticationMode
from core.errors import ConfigurationError
from core.models import DEFAULT_CONFIG_PROPERTY, SynthesisOptions, TableIdentity

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5432


def _pick(flag_value, environ: Mapping[str, str], env_name: str, default=None):
    if flag_value is not None:
        return flag_value
    env_value = environ.get(env_name)
    if env_value:
        return env_value
    return default


@dataclass(frozen=True)
class ConnectionSettings:
    """
    Where and as whom to connect.

    The connection is always opened read-only.
    """
    user: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    dbname: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    @classmethod
    def resolve(
        cls,
        host: Optional[str] = None,
        port: Optional[int] = None,
        dbname: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ConnectionSettings":
        """
        Combine explicit values with PG* environment variables.

        Raises:
            ConfigurationError: No username, or a non-numeric port
        """
        environ = os.environ if environ is None else environ

        resolved_user = _pick(user, environ, "PGUSER")
        if not resolved_user:
            raise ConfigurationError(
                "A database username is required (--username or PGUSER)",
                field="username",
            )

        raw_port = _pick(port, environ, "PGPORT", DEFAULT_PORT)
        try:
            resolved_port = int(raw_port)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid port: {raw_port!r}", field="port") from None

        return cls(
            user=resolved_user,
            host=_pick(host, environ, "PGHOST", DEFAULT_HOST),
            port=resolved_port,
            dbname=_pick(dbname, environ, "PGDATABASE"),
            password=_pick(password, environ, "PGPASSWORD"),
        )

    def conninfo_kwargs(self) -> dict:
        """Keyword arguments for psycopg.connect()."""
        kwargs = {"host": self.host, "port": self.port, "user": self.user}
        if self.dbname:
            kwargs["dbname"] = self.dbname
        if self.password:
            kwargs["password"] = self.password
        return kwargs

    @property
    def safe_target(self) -> str:
        """user@host:port/dbname for logs (never the password)."""
        return f"{self.user}@{self.host}:{self.port}/{self.dbname or self.user}"


@dataclass(frozen=True)
class AuditorConfig:
    """
    Complete configuration for one run.

    Built once from command line arguments and the environment.
    """
    table: str
    connection: ConnectionSettings
    authentication: AuthenticationMode = AuthenticationMode.DATABASE
    config_property: str = DEFAULT_CONFIG_PROPERTY
    drop: bool = False
    application_name: bool = False
    verbose: bool = False
    log_format: str = "human"

    @classmethod
    def from_args(cls, args, environ: Optional[Mapping[str, str]] = None) -> "AuditorConfig":
        """
        Create from an argparse namespace plus environment variables.

        Raises:
            ConfigurationError: Invalid authentication mode or connection settings
        """
        auth_value = getattr(args, "auth", None)
        try:
            authentication = (
                AuthenticationMode.parse(auth_value) if auth_value else AuthenticationMode.DATABASE
            )
        except ValueError:
            valid = ", ".join(m.value for m in AuthenticationMode)
            raise ConfigurationError(
                f"Invalid authentication mode {auth_value!r} (valid: {valid})",
                field="authentication",
            ) from None

        connection = ConnectionSettings.resolve(
            host=args.host,
            port=args.port,
            dbname=args.dbname,
            user=args.username,
            password=args.password,
            environ=environ,
        )

        return cls(
            table=args.table,
            connection=connection,
            authentication=authentication,
            config_property=args.config_property or DEFAULT_CONFIG_PROPERTY,
            drop=bool(args.drop),
            application_name=bool(args.application_name),
            verbose=bool(args.verbose),
            log_format=getattr(args, "log_format", None) or "human",
        )

    def table_identity(self) -> TableIdentity:
        return TableIdentity.parse(self.table)

    def to_options(self) -> SynthesisOptions:
        return SynthesisOptions(
            authentication=self.authentication,
            capture_application_name=self.application_name,
            drop_mode=self.drop,
            config_property=self.config_property,
        )

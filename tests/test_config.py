# ============================================================================
# CONFIGURATION TESTS
# ============================================================================
# STATUS: Tests - Flags, environment and defaults
# PURPOSE: Verify precedence rules and validation of run configuration
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Tests

Run with:
    pytest tests/test_config.py -v
"""

from argparse import Namespace

import pytest

from core.config import AuditorConfig, ConnectionSettings
from core.contracts import AuthenticationMode
from core.errors import ConfigurationError


def _args(**overrides):
    values = dict(
        table="public.user",
        auth="database",
        config_property=None,
        drop=False,
        application_name=False,
        verbose=False,
        log_format="human",
        host=None,
        port=None,
        dbname=None,
        username="auditor",
        password=None,
    )
    values.update(overrides)
    return Namespace(**values)


class TestConnectionSettings:
    def test_defaults(self):
        settings = ConnectionSettings.resolve(user="auditor", environ={})
        assert settings.host == "localhost"
        assert settings.port == 5432
        assert settings.dbname is None

    def test_environment_used_when_no_flag(self):
        environ = {"PGHOST": "db.internal", "PGPORT": "6432", "PGDATABASE": "app", "PGUSER": "env_user"}
        settings = ConnectionSettings.resolve(environ=environ)
        assert (settings.host, settings.port, settings.dbname, settings.user) == (
            "db.internal", 6432, "app", "env_user"
        )

    def test_flag_wins_over_environment(self):
        environ = {"PGHOST": "db.internal", "PGUSER": "env_user", "PGPASSWORD": "from-env"}
        settings = ConnectionSettings.resolve(host="127.0.0.1", user="flag_user", password="x", environ=environ)
        assert settings.host == "127.0.0.1"
        assert settings.user == "flag_user"
        assert settings.password == "x"

    def test_username_required(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ConnectionSettings.resolve(environ={})
        assert exc_info.value.field == "username"

    def test_invalid_port(self):
        with pytest.raises(ConfigurationError):
            ConnectionSettings.resolve(user="auditor", environ={"PGPORT": "fivefour"})

    def test_password_hidden(self):
        settings = ConnectionSettings(user="auditor", password="s3cret")
        assert "s3cret" not in repr(settings)
        assert "s3cret" not in settings.safe_target

    def test_safe_target(self):
        settings = ConnectionSettings(user="auditor", host="db", port=5433, dbname="app")
        assert settings.safe_target == "auditor@db:5433/app"


class TestAuditorConfig:
    def test_from_args(self):
        config = AuditorConfig.from_args(_args(), environ={})
        assert config.table == "public.user"
        assert config.authentication is AuthenticationMode.DATABASE
        assert config.config_property == "pgauditor.current_user"
        assert config.connection.user == "auditor"

    def test_to_options(self):
        config = AuditorConfig.from_args(
            _args(auth="application", config_property="myapp.uid", drop=True, application_name=True),
            environ={},
        )
        options = config.to_options()
        assert options.authentication is AuthenticationMode.APPLICATION
        assert options.config_property == "myapp.uid"
        assert options.drop_mode is True
        assert options.capture_application_name is True

    def test_auth_case_insensitive(self):
        config = AuditorConfig.from_args(_args(auth="ANONYMOUS"), environ={})
        assert config.authentication is AuthenticationMode.ANONYMOUS

    def test_invalid_auth(self):
        with pytest.raises(ConfigurationError) as exc_info:
            AuditorConfig.from_args(_args(auth="kerberos"), environ={})
        assert exc_info.value.field == "authentication"

    def test_table_identity(self):
        config = AuditorConfig.from_args(_args(table="user"), environ={})
        identity = config.table_identity()
        assert identity.schema_name == "public"
        assert identity.table_name == "user"

    def test_username_from_environment(self):
        config = AuditorConfig.from_args(_args(username=None), environ={"PGUSER": "env_user"})
        assert config.connection.user == "env_user"

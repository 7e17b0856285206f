# ============================================================================
# COMMAND LINE TESTS
# ============================================================================
# STATUS: Tests - Entry point, exit codes and output streams
# PURPOSE: Verify the CLI without a database
# CREATED: 18 OCT 2026
# ============================================================================
"""
Command Line Tests

Run with:
    pytest tests/test_main.py -v
"""

from unittest.mock import MagicMock, patch

import psycopg
import pytest

import main
from core.config import AuditorConfig, ConnectionSettings
from core.errors import CatalogQueryError, SchemaResolutionError

from conftest import USER_COLUMNS, FakeInspector


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("main.configure_logging"):
        yield


class TestParser:
    def test_short_flags(self):
        args = main.build_parser().parse_args(
            ["-t", "app.user", "-a", "APPLICATION", "-c", "x.y", "-D", "-n",
             "-h", "db", "-p", "6432", "-d", "app", "-U", "auditor", "-W", "pw"]
        )
        assert args.table == "app.user"
        assert args.auth == "application"
        assert args.config_property == "x.y"
        assert args.drop is True
        assert args.application_name is True
        assert (args.host, args.port, args.dbname, args.username, args.password) == (
            "db", 6432, "app", "auditor", "pw"
        )

    def test_defaults(self):
        args = main.build_parser().parse_args(["-t", "user"])
        assert args.auth == "database"
        assert args.config_property == "pgauditor.current_user"
        assert args.drop is False

    def test_invalid_auth_is_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            main.build_parser().parse_args(["-t", "user", "-a", "kerberos"])
        assert exc_info.value.code == 2


class TestMain:
    def test_version(self, capsys):
        assert main.main(["--version"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("PgAuditor ")
        assert "psycopg" in out

    def test_missing_table(self, capsys):
        assert main.main(["-U", "auditor"], environ={}) == 2
        err = capsys.readouterr().err
        assert "-t/--table" in err

    def test_success_writes_ddl_to_stdout(self, capsys):
        with patch("main.run", return_value="CREATE SEQUENCE x;\n") as run:
            assert main.main(["-t", "user", "-U", "auditor"], environ={}) == 0
        captured = capsys.readouterr()
        assert captured.out == "CREATE SEQUENCE x;\n"
        config = run.call_args.args[0]
        assert config.table == "user"

    def test_auditor_error_exits_1(self, capsys):
        with patch("main.run", side_effect=SchemaResolutionError("public", "user")):
            assert main.main(["-t", "user", "-U", "auditor"], environ={}) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Table public.user does not exist" in captured.err

    def test_driver_error_exits_1(self, capsys):
        with patch("main.run", side_effect=psycopg.OperationalError("connection refused")):
            assert main.main(["-t", "user", "-U", "auditor"], environ={}) == 1
        assert "connection refused" in capsys.readouterr().err

    def test_missing_username_exits_1(self, capsys):
        assert main.main(["-t", "user"], environ={}) == 1
        assert "username" in capsys.readouterr().err


class TestRun:
    def _config(self, table="user", **kwargs):
        return AuditorConfig(table=table, connection=ConnectionSettings(user="auditor"), **kwargs)

    def _repo(self):
        repo = MagicMock()
        repo.__enter__.return_value = repo
        repo.connection = None
        return repo

    def test_renders_script(self):
        fake = FakeInspector(tables={("public", "user"): USER_COLUMNS})
        with patch("main.PostgresSchemaInspector", return_value=fake):
            ddl = main.run(self._config(), repo=self._repo())
        assert ddl.startswith('CREATE FUNCTION "public"."pgauditor_setting"')
        assert ddl.endswith(";\n")

    def test_drop_mode_on_fresh_database_is_empty(self):
        fake = FakeInspector(tables={("public", "user"): USER_COLUMNS})
        with patch("main.PostgresSchemaInspector", return_value=fake):
            assert main.run(self._config(drop=True), repo=self._repo()) == ""

    def test_catalog_failure_propagates(self):
        fake = FakeInspector(tables={("public", "user"): USER_COLUMNS}, fail_on="columns")
        with patch("main.PostgresSchemaInspector", return_value=fake):
            with pytest.raises(CatalogQueryError):
                main.run(self._config(), repo=self._repo())

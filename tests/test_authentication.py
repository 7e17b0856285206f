# ============================================================================
# AUTHENTICATION STRATEGY TESTS
# ============================================================================
# STATUS: Tests - changed_by fragments per authentication mode
# PURPOSE: Verify identity capture and the APPLICATION mode guard
# CREATED: 18 OCT 2026
# ============================================================================
"""
Authentication Strategy Tests

Run with:
    pytest tests/test_authentication.py -v
"""

import pytest

from core.contracts import AuthenticationMode
from core.errors import ConfigurationError, UnsupportedAuthenticationMode
from core.models import TableIdentity
from core.schema.authentication import changed_by_fragment
from core.schema.naming import derive_names


@pytest.fixture
def names():
    return derive_names(TableIdentity.parse("public.user"))


def _render(mode, names, config_property="pgauditor.current_user"):
    lines = changed_by_fragment(mode, "public", names, config_property)
    return "\n".join(line.as_string() for line in lines)


class TestDatabaseMode:
    def test_uses_session_user(self, names):
        assert _render(AuthenticationMode.DATABASE, names) == '"changed_by_value" := session_user;'

    def test_never_raises(self, names):
        assert "RAISE" not in _render(AuthenticationMode.DATABASE, names)


class TestAnonymousMode:
    def test_empty_fragment(self, names):
        assert changed_by_fragment(AuthenticationMode.ANONYMOUS, "public", names, "x.y") == []


class TestApplicationMode:
    def test_reads_configured_parameter(self, names):
        text = _render(AuthenticationMode.APPLICATION, names, "myapp.user_id")
        assert '"changed_by_value" := "public"."pgauditor_setting"(\'myapp.user_id\');' in text

    def test_raises_on_missing_or_blank_identity(self, names):
        text = _render(AuthenticationMode.APPLICATION, names)
        assert "IF \"changed_by_value\" IS NULL OR \"changed_by_value\" !~ '[^[:space:]]' THEN" in text
        assert "RAISE EXCEPTION" in text
        assert "insufficient_privilege" in text
        assert text.rstrip().endswith("END IF;")

    def test_message_names_the_parameter(self, names):
        text = _render(AuthenticationMode.APPLICATION, names, "myapp.user_id")
        assert "configuration parameter myapp.user_id must identify" in text

    def test_percent_escaped_in_message(self, names):
        text = _render(AuthenticationMode.APPLICATION, names, "odd.50%")
        assert "odd.50%%" in text

    def test_lookup_uses_schema_of_audited_table(self):
        names = derive_names(TableIdentity.parse("app.account"))
        lines = changed_by_fragment(AuthenticationMode.APPLICATION, "app", names, "a.b")
        assert '"app"."pgauditor_setting"' in lines[0].as_string()


class TestUnsupportedMode:
    @pytest.mark.parametrize("mode", ["kerberos", None, 3])
    def test_rejected(self, names, mode):
        with pytest.raises(UnsupportedAuthenticationMode):
            changed_by_fragment(mode, "public", names, "x.y")

    def test_is_a_configuration_error(self, names):
        with pytest.raises(ConfigurationError):
            changed_by_fragment("kerberos", "public", names, "x.y")

# ============================================================================
# CHANGE CAPTURE BUILDER TESTS
# ============================================================================
# STATUS: Tests - INSERT/UPDATE/DELETE trigger functions
# PURPOSE: Verify captured holders, change gating and audit INSERT shape
# CREATED: 18 OCT 2026
# ============================================================================
"""
Change Capture Builder Tests

Run with:
    pytest tests/test_change_capture.py -v
"""

import pytest

from core.contracts import AuditOperation, AuthenticationMode
from core.models import ColumnDescriptor, SynthesisOptions, TableIdentity
from core.schema.change_capture import CAPTURE_PROFILES, ChangeCaptureBuilder, audit_column_names
from core.schema.naming import derive_names

from conftest import USER_COLUMNS


def _builder(columns=USER_COLUMNS, **option_kwargs):
    table = TableIdentity.parse("public.user")
    return ChangeCaptureBuilder(table, columns, derive_names(table), SynthesisOptions(**option_kwargs))


def _function(operation, **kwargs):
    return _builder(**kwargs).build(operation).as_string()


# ============================================================================
# PROFILES
# ============================================================================

class TestCaptureProfiles:
    def test_every_operation_has_a_profile(self):
        assert set(CAPTURE_PROFILES) == set(AuditOperation)

    def test_only_update_is_gated(self):
        gated = [op for op, profile in CAPTURE_PROFILES.items() if profile.gated]
        assert gated == [AuditOperation.UPDATE]


class TestAuditColumnNames:
    def test_order(self):
        assert audit_column_names(USER_COLUMNS, False) == [
            "audit_id", "operation", "changed_by", "changed_at",
            "old_id", "new_id", "old_username", "new_username",
        ]

    def test_application_name_follows_changed_at(self):
        names = audit_column_names(USER_COLUMNS, True)
        assert names[4] == "application_name"
        assert len(names) == 5 + 2 * len(USER_COLUMNS)


# ============================================================================
# FUNCTION TEXT
# ============================================================================

class TestFunctionHeader:
    def test_header(self):
        text = _function(AuditOperation.INSERT)
        assert text.startswith('CREATE OR REPLACE FUNCTION "public"."fai_user"()\nRETURNS trigger\n')
        assert "LANGUAGE plpgsql" in text
        assert text.endswith("END;\n$$")

    def test_declarations_typed_like_source_columns(self):
        text = _function(AuditOperation.DELETE)
        assert '    "changed_by_value" text := NULL;' in text
        assert '    "old_id" bigint := NULL;' in text
        assert '    "new_username" text := NULL;' in text

    def test_counter_declared_only_for_update(self):
        assert '"change_count" integer := 0;' in _function(AuditOperation.UPDATE)
        assert "change_count" not in _function(AuditOperation.INSERT)
        assert "change_count" not in _function(AuditOperation.DELETE)


class TestInsertFunction:
    def test_captures_new_values_only(self):
        text = _function(AuditOperation.INSERT)
        assert '    "new_id" := NEW."id";' in text
        assert '    "new_username" := NEW."username";' in text
        assert ":= OLD." not in text

    def test_returns_new(self):
        assert "    RETURN NEW;" in _function(AuditOperation.INSERT)

    def test_audit_insert(self):
        text = _function(AuditOperation.INSERT)
        assert (
            '    INSERT INTO "public"."aud_user" ("audit_id", "operation", "changed_by", "changed_at", '
            '"old_id", "new_id", "old_username", "new_username")'
        ) in text
        assert "nextval('\"public\".\"pgauditor_audit_seq\"'::regclass)" in text
        assert "'INSERT'::\"public\".\"pgauditor_operation\"" in text
        assert '"changed_by_value", now(), "old_id", "new_id", "old_username", "new_username");' in text


class TestDeleteFunction:
    def test_captures_old_values_only(self):
        text = _function(AuditOperation.DELETE)
        assert '    "old_id" := OLD."id";' in text
        assert ":= NEW." not in text

    def test_returns_old(self):
        text = _function(AuditOperation.DELETE)
        assert "    RETURN OLD;" in text
        assert "RETURN NEW;" not in text

    def test_operation_label(self):
        assert "'DELETE'::\"public\".\"pgauditor_operation\"" in _function(AuditOperation.DELETE)


class TestUpdateFunction:
    def test_null_safe_comparison_per_column(self):
        text = _function(AuditOperation.UPDATE)
        assert '    IF OLD."id" IS DISTINCT FROM NEW."id" THEN' in text
        assert '    IF OLD."username" IS DISTINCT FROM NEW."username" THEN' in text

    def test_changed_column_captures_both_values(self):
        text = _function(AuditOperation.UPDATE)
        assert (
            '    IF OLD."id" IS DISTINCT FROM NEW."id" THEN\n'
            '        "old_id" := OLD."id";\n'
            '        "new_id" := NEW."id";\n'
            '        "change_count" := "change_count" + 1;\n'
            '    END IF;'
        ) in text

    def test_audit_row_gated_on_change_count(self):
        text = _function(AuditOperation.UPDATE)
        gate = text.index('    IF "change_count" > 0 THEN')
        assert gate < text.index('        INSERT INTO "public"."aud_user"')
        assert gate < text.index('        "changed_by_value" := session_user;')
        assert text.index("    RETURN NEW;") > text.index("VALUES (")

    def test_operation_label(self):
        assert "'UPDATE'::\"public\".\"pgauditor_operation\"" in _function(AuditOperation.UPDATE)


# ============================================================================
# OPTIONS
# ============================================================================

class TestAuthenticationInFunctions:
    @pytest.mark.parametrize("operation", list(AuditOperation))
    def test_anonymous_records_no_identity(self, operation):
        text = _function(operation, authentication=AuthenticationMode.ANONYMOUS)
        assert "session_user" not in text
        assert "pgauditor_setting" not in text

    @pytest.mark.parametrize("operation", list(AuditOperation))
    def test_application_mode_guards_every_operation(self, operation):
        text = _function(operation, authentication=AuthenticationMode.APPLICATION)
        assert "RAISE EXCEPTION" in text
        assert "'pgauditor.current_user'" in text

    def test_custom_config_property(self):
        text = _function(
            AuditOperation.INSERT,
            authentication=AuthenticationMode.APPLICATION,
            config_property="myapp.user_id",
        )
        assert "'myapp.user_id'" in text


class TestApplicationNameCapture:
    def test_column_and_value_added(self):
        text = _function(AuditOperation.INSERT, capture_application_name=True)
        assert '"changed_at", "application_name", "old_id"' in text
        assert "now(), \"public\".\"pgauditor_setting\"('application_name'), \"old_id\"" in text

    def test_absent_by_default(self):
        assert "application_name" not in _function(AuditOperation.INSERT)


class TestEdgeCases:
    def test_no_columns(self):
        text = _function(AuditOperation.UPDATE, columns=[])
        assert "IS DISTINCT FROM" not in text
        assert 'INSERT INTO "public"."aud_user" ("audit_id", "operation", "changed_by", "changed_at")' in text

    def test_unusual_column_names_quoted(self):
        columns = [ColumnDescriptor(name='Mixed "Case"', native_type="character varying(20)")]
        text = _function(AuditOperation.INSERT, columns=columns)
        assert '"new_Mixed ""Case""" := NEW."Mixed ""Case""";' in text
        assert '"old_Mixed ""Case""" character varying(20) := NULL;' in text

    def test_build_all_order(self):
        functions = [f.as_string() for f in _builder().build_all()]
        assert [f.split("\n", 1)[0] for f in functions] == [
            'CREATE OR REPLACE FUNCTION "public"."fai_user"()',
            'CREATE OR REPLACE FUNCTION "public"."fau_user"()',
            'CREATE OR REPLACE FUNCTION "public"."fad_user"()',
        ]

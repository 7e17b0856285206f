# ============================================================================
# TABLE MODELS
# ============================================================================
# STATUS: Core - Identity and column snapshot of the audited table
# PURPOSE: Immutable inputs to DDL synthesis
# CREATED: 18 OCT 2026
# ============================================================================
"""
Table Models

TableIdentity names the audited table. ColumnDescriptor is one entry of the
column snapshot fetched from the catalog once per run, in ordinal order.
"""

from pydantic import BaseModel, Field

from core.errors import ConfigurationError

DEFAULT_SCHEMA = "public"


class TableIdentity(BaseModel):
    """
    Schema-qualified name of the audited table.

    Immutable once constructed.
    """

    model_config = {"frozen": True}

    schema_name: str = Field(
        default=DEFAULT_SCHEMA,
        min_length=1,
        description="Schema containing the audited table"
    )
    table_name: str = Field(
        min_length=1,
        description="Name of the audited table, without schema"
    )

    @classmethod
    def parse(cls, raw: str) -> "TableIdentity":
        """
        Split a user supplied ``[schema.]table`` identifier.

        The split happens on the last dot. Without a schema qualifier
        (no dot, or nothing before it) the schema is ``public``.

        Raises:
            ConfigurationError: If no table name remains after the split
        """
        value = (raw or "").strip()
        schema_name, sep, table_name = value.rpartition(".")

        if not sep:
            table_name = value
        schema_name = schema_name or DEFAULT_SCHEMA

        if not table_name:
            raise ConfigurationError(
                f"Invalid table identifier {raw!r}: table name is empty",
                field="table",
            )

        return cls(schema_name=schema_name, table_name=table_name)

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.table_name}"

    def __str__(self) -> str:
        return self.qualified_name


class ColumnDescriptor(BaseModel):
    """One column of the audited table."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1, description="Column name")
    native_type: str = Field(
        min_length=1,
        description="Type as rendered by format_type(), passed through verbatim"
    )


__all__ = ["TableIdentity", "ColumnDescriptor", "DEFAULT_SCHEMA"]

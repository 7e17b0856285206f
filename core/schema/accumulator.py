# ============================================================================
# DDL ACCUMULATOR
# ============================================================================
# STATUS: Core - Ordered, append-only statement log
# PURPOSE: Collect generated statements and render the final script once
# CREATED: 18 OCT 2026
# EXPORTS: DdlAccumulator, DdlScript
# DEPENDENCIES: psycopg
# ============================================================================
"""
DDL Accumulator.

Statements are appended in synthesis order and are never reordered,
replaced or removed. The script is rendered as ``statement;`` lines in
append order.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from psycopg import sql
from psycopg.abc import AdaptContext

STATEMENT_TERMINATOR = ";\n"


@dataclass(frozen=True)
class DdlScript:
    """Immutable, ordered result of one synthesis run."""
    statements: Tuple[sql.Composable, ...] = ()

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self) -> Iterator[sql.Composable]:
        return iter(self.statements)

    def render(self, context: Optional[AdaptContext] = None) -> str:
        """
        Concatenate all statements in order, each terminated by ``;``.

        Args:
            context: Optional psycopg connection used for quoting
        """
        return "".join(
            statement.as_string(context) + STATEMENT_TERMINATOR
            for statement in self.statements
        )

    def __str__(self) -> str:
        return self.render()


class DdlAccumulator:
    """
    Single-writer, append-only sink for generated statements.

    Usage:
        acc = DdlAccumulator()
        acc.append(stmt)
        script = acc.build()
    """

    def __init__(self):
        self._statements = []

    def append(self, statement: sql.Composable) -> None:
        if not isinstance(statement, sql.Composable):
            raise TypeError(f"Expected sql.Composable, got {type(statement).__name__}")
        self._statements.append(statement)

    @property
    def statements(self) -> Tuple[sql.Composable, ...]:
        return tuple(self._statements)

    def __len__(self) -> int:
        return len(self._statements)

    def build(self) -> DdlScript:
        """Snapshot the statements appended so far."""
        return DdlScript(statements=self.statements)

    def render(self, context: Optional[AdaptContext] = None) -> str:
        return self.build().render(context)


__all__ = ["DdlAccumulator", "DdlScript", "STATEMENT_TERMINATOR"]

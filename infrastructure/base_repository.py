# ============================================================================
# BASE REPOSITORY - ERROR HANDLING PATTERNS
# ============================================================================
# STATUS: Infrastructure - Shared error translation for catalog access
# PURPOSE: Turn driver failures into CatalogQueryError with context
# CREATED: 18 OCT 2026
# ============================================================================
"""
Base Repository

Catalog readers wrap every round trip in ``_error_context``. A psycopg (or
any other unexpected) exception is logged and re-raised as
CatalogQueryError naming the lookup and the object; PgAuditor's own errors
already say what went wrong and are re-raised untouched.
"""

import logging
from abc import ABC
from contextlib import contextmanager
from typing import Optional

from core.errors import AuditorError, CatalogQueryError


class BaseRepository(ABC):
    """Base class for catalog readers."""

    def __init__(self):
        self.logger = logging.getLogger(type(self).__name__)

    @staticmethod
    def _describe_failure(operation: str, entity_id: Optional[str], error: Exception) -> str:
        target = f" for {entity_id}" if entity_id else ""
        return f"{operation} failed{target}: {error}"

    @contextmanager
    def _error_context(self, operation: str, entity_id: Optional[str] = None):
        """
        Translate failures inside the block.

        Args:
            operation: Lookup being performed, e.g. "trigger lookup"
            entity_id: Object being looked up, e.g. "public.user.tai_aud_user"

        Raises:
            CatalogQueryError: For any non-AuditorError exception
        """
        try:
            yield
        except AuditorError:
            raise
        except Exception as e:
            message = self._describe_failure(operation, entity_id, e)
            self.logger.error(message)
            raise CatalogQueryError(message, operation=operation) from e


__all__ = [
    "BaseRepository",
]

from __future__ import annotations

"""Editor exception classes.

Tree mutations and key handling never raise; these exceptions are reserved
for construction boundaries (loading an initial payload, building a token
from an identifier) where bad input cannot be degraded into a no-op.
"""

from typing import Optional


class EditorError(Exception):
    """Base exception for all editor errors."""

    def __init__(self, message: str, item_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.item_id = item_id

    def __str__(self) -> str:
        if self.item_id:
            return f"[{self.item_id}] {super().__str__()}"
        return super().__str__()


class DuplicateIdError(EditorError):
    """Raised when a document payload reuses a section or block id."""
    pass


class UnknownTokenError(EditorError):
    """Raised when a token is requested for an id outside the catalog."""

    def __init__(self, token_id: str, available: Optional[list[str]] = None) -> None:
        self.available = available or []
        super().__init__(f"Token '{token_id}' is not in the catalog", token_id)

from __future__ import annotations

"""High-level editing services.

Services are stateless and instantiated directly by the controller.
"""

from .block_editing_service import BlockEditingService, OperationResult, RemovalResult  # noqa: F401

__all__: list[str] = [
    "BlockEditingService",
    "OperationResult",
    "RemovalResult",
]

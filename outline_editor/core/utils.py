from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free and contain no GUI code; they can be used
across all layers of the editor.
"""

import uuid

__all__ = [
    "generate_block_id",
]


def generate_block_id(prefix: str = "") -> str:
    """Return a fresh identifier for a block.

    The default generator injected into the editor controller; any
    zero-argument callable returning unique strings can replace it.
    """
    return f"{prefix}{uuid.uuid4().hex}"

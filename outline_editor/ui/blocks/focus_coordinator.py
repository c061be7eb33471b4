from __future__ import annotations

import logging
from typing import Optional

from outline_editor.core.models import FocusRequest

logger = logging.getLogger(__name__)


class FocusCoordinator:
    """One-slot outbox for the block that should receive the caret next.

    The controller writes the slot as part of the same gesture as the tree
    mutation; surface adapters read it on every render pass and the one named
    by the request focuses itself. Readers never write. There is no
    acknowledgement: serving the same request twice is harmless because it
    always collapses the caret to the end of the block.
    """

    def __init__(self) -> None:
        self._request: Optional[FocusRequest] = None

    @property
    def current(self) -> Optional[FocusRequest]:
        return self._request

    def request(self, section_id: str, block_id: str) -> FocusRequest:
        self._request = FocusRequest(section_id, block_id)
        logger.debug("Focus requested section=%s block=%s", section_id, block_id)
        return self._request

    def set(self, request: Optional[FocusRequest]) -> None:
        """Replace the slot; None means no block should be force-focused."""
        self._request = request
        logger.debug("Focus request set to %s", request)

    def clear(self) -> None:
        self.set(None)

    def targets(self, section_id: str, block_id: str) -> bool:
        req = self._request
        return req is not None and req.targets(section_id, block_id)

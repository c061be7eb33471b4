from __future__ import annotations

"""Application factory wiring config, store, services and controller together."""

import logging
from typing import Any, Callable, Iterable, Mapping, Optional

from outline_editor.core.document_store import DocumentStore
from outline_editor.core.models import sections_from_payload
from outline_editor.core.services.block_editing_service import BlockEditingService
from outline_editor.core.settings import EditorSettings
from outline_editor.core.utils import generate_block_id
from outline_editor.ui.blocks.focus_coordinator import FocusCoordinator
from outline_editor.ui.controllers.editor_controller import EditorController

__all__ = ["build_editor"]

logger = logging.getLogger(__name__)


def build_editor(
    payload: Iterable[Mapping[str, Any]],
    *,
    settings: Optional[EditorSettings] = None,
    new_id: Callable[[], str] = generate_block_id,
    schedule: Optional[Callable[[Callable[[], None]], Any]] = None,
    configure_logging: bool = False,
) -> EditorController:
    """Build a ready-to-use editor over an initial document payload.

    Parameters
    ----------
    payload
        Ordered forest of section dictionaries, already in final markup form.
    settings
        Editing rules; read from :class:`~outline_editor.config.ConfigManager`
        when omitted.
    new_id
        Fresh block id generator.
    schedule
        Next-turn scheduler for popup measurement.
    configure_logging
        Call :func:`~outline_editor.logging_config.setup_logging` first.

    Raises
    ------
    DuplicateIdError
        If the payload reuses a section or block id.
    """
    if configure_logging:
        from outline_editor.logging_config import setup_logging

        setup_logging()

    if settings is None:
        settings = EditorSettings.from_config()

    store = DocumentStore(sections_from_payload(payload))
    controller = EditorController(
        store,
        BlockEditingService(),
        FocusCoordinator(),
        settings,
        new_id=new_id,
        schedule=schedule,
    )
    controller.render()
    logger.info(
        "Editor ready: %d top-level section(s), %d token(s) in catalog",
        len(store.sections),
        len(settings.catalog),
    )
    return controller

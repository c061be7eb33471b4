from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from outline_editor.core.document_store import DocumentStore, iter_sections
from outline_editor.core.models import Block, DocumentTree
from outline_editor.core.services.block_editing_service import (
    BlockEditingService,
    OperationResult,
)
from outline_editor.core.settings import EditorSettings
from outline_editor.core.utils import generate_block_id
from outline_editor.ui.blocks.focus_coordinator import FocusCoordinator
from outline_editor.ui.blocks.surface_adapter import SurfaceAdapter

logger = logging.getLogger(__name__)

AdapterKey = Tuple[str, str]


class EditorController:
    """Controller coordinating block surfaces with the document store.

    Every editing gesture runs synchronously inside one event dispatch: the
    adapter detects the gesture, the controller applies the matching tree
    transform through the editing service, installs the new tree in the
    store and writes the focus request. The render pass that follows
    reconciles adapters with the new tree and delivers the focus request.

    Parameters
    ----------
    store : DocumentStore
        Holder of the current section forest.
    editing_service : BlockEditingService
        Pure tree transforms.
    focus : FocusCoordinator
        One-slot focus outbox.
    settings : EditorSettings
        Editing rules handed to every adapter.
    new_id : Callable[[], str], optional
        Fresh block id generator; defaults to uuid4 hex strings.
    schedule : Callable[[Callable[[], None]], object], optional
        Next-turn scheduler passed to adapters for popup measurement.

    Notes
    -----
    Handlers are non-raising: stale ids produce ``OperationResult(False, ...)``
    and leave tree and focus untouched (removal excepted, which always
    writes its focus result).
    """

    def __init__(
        self,
        store: DocumentStore,
        editing_service: BlockEditingService,
        focus: FocusCoordinator,
        settings: EditorSettings,
        *,
        new_id: Callable[[], str] = generate_block_id,
        schedule: Optional[Callable[[Callable[[], None]], Any]] = None,
    ) -> None:
        self.store = store
        self.editing_service = editing_service
        self.focus = focus
        self.settings = settings
        self._new_id = new_id
        self._schedule = schedule
        self._adapters: Dict[AdapterKey, SurfaceAdapter] = {}

    @property
    def sections(self) -> DocumentTree:
        return self.store.sections

    # ---------------------------------------------------------------------------------
    # Gesture handlers
    # ---------------------------------------------------------------------------------

    def handle_block_change(self, section_id: str, block_id: str, new_content: str) -> OperationResult:
        """Commit surface markup to the model; focus is left alone."""
        changed = self.store.apply(
            lambda tree: self.editing_service.update_block_content(tree, section_id, block_id, new_content)
        )
        return OperationResult(
            changed,
            "Block content updated." if changed else "Block content unchanged.",
            {"section_id": section_id, "block_id": block_id},
        )

    def handle_split_block(self, section_id: str, block_id: str, before: str, after: str) -> OperationResult:
        """Enter inside a block: split it and focus the second half."""
        id_before = self._new_id()
        id_after = self._new_id()
        changed = self.store.apply(
            lambda tree: self.editing_service.split_block(
                tree, section_id, block_id, before, after, id_before, id_after
            )
        )
        if not changed:
            return OperationResult(False, "Block not found; split ignored.", {"block_id": block_id})
        self.focus.request(section_id, id_after)
        return OperationResult(
            True,
            "Block split.",
            {"section_id": section_id, "before_id": id_before, "after_id": id_after},
        )

    def handle_add_empty_block(self, section_id: str, block_id: str) -> OperationResult:
        """Enter at the end of a block: insert an empty block after it and focus it."""
        new_block = Block(self._new_id(), "")
        changed = self.store.apply(
            lambda tree: self.editing_service.insert_block_after(tree, section_id, block_id, new_block)
        )
        if not changed:
            return OperationResult(False, "Block not found; insertion dropped.", {"block_id": block_id})
        self.focus.request(section_id, new_block.id)
        return OperationResult(True, "Empty block added.", {"section_id": section_id, "block_id": new_block.id})

    def handle_remove_block(self, section_id: str, block_id: str) -> OperationResult:
        """Backspace in an empty block: remove it and focus its neighbour."""
        result = self.editing_service.remove_block(self.store.sections, section_id, block_id)
        self.store.replace(result.tree)
        self.focus.set(result.focus)
        details = {
            "section_id": section_id,
            "block_id": block_id,
            "focus": result.focus.block_id if result.focus else None,
        }
        if not result.removed:
            return OperationResult(False, "Block not found; nothing removed.", details)
        return OperationResult(True, "Block removed.", details)

    def handle_title_edit(self, section_id: str, new_name: Optional[str]) -> OperationResult:
        """Heading edited: rewrite the section name."""
        if new_name is None:
            return OperationResult(False, "No title supplied.", {"section_id": section_id})
        changed = self.store.apply(
            lambda tree: self.editing_service.rename_section(tree, section_id, new_name)
        )
        return OperationResult(
            changed,
            "Section renamed." if changed else "Section name unchanged.",
            {"section_id": section_id},
        )

    # ---------------------------------------------------------------------------------
    # Event dispatch
    # ---------------------------------------------------------------------------------

    def dispatch_key(self, section_id: str, block_id: str, key: str, *, shift: bool = False) -> bool:
        """Route a key press to a block surface, then re-render."""
        adapter = self.adapter(section_id, block_id)
        if adapter is None:
            logger.debug("Key for unknown block ignored section=%s block=%s", section_id, block_id)
            return False
        handled = adapter.handle_key(key, shift=shift)
        self.render()
        return handled

    def dispatch_input(self, section_id: str, block_id: str, text: str) -> bool:
        """Route raw text input (typing, paste) to a block surface, then re-render."""
        adapter = self.adapter(section_id, block_id)
        if adapter is None:
            return False
        adapter.handle_input(text)
        self.render()
        return True

    def dispatch_pick(self, section_id: str, block_id: str, index: int) -> Optional[str]:
        """Pointer pick in a block's suggestion list, then re-render."""
        adapter = self.adapter(section_id, block_id)
        if adapter is None:
            return None
        token_id = adapter.pick(index)
        self.render()
        return token_id

    # ---------------------------------------------------------------------------------
    # Render pass
    # ---------------------------------------------------------------------------------

    def render(self) -> None:
        """Reconcile one adapter per block and deliver the focus request.

        Surviving adapters keep their live surface; adapters of retired blocks
        are dropped; new blocks get a freshly mounted adapter.
        """
        request = self.focus.current
        live: Dict[AdapterKey, SurfaceAdapter] = {}
        for section in iter_sections(self.store.sections):
            for block in section.content:
                key = (section.id, block.id)
                adapter = self._adapters.get(key)
                if adapter is None:
                    adapter = self._create_adapter(section.id, block.id)
                live[key] = adapter
                adapter.render(block, request)
        dropped = len(set(self._adapters) - set(live))
        if dropped:
            logger.debug("Render dropped %d retired block surface(s)", dropped)
        self._adapters = live

    def adapter(self, section_id: str, block_id: str) -> Optional[SurfaceAdapter]:
        return self._adapters.get((section_id, block_id))

    def adapters(self) -> Iterator[SurfaceAdapter]:
        return iter(list(self._adapters.values()))

    def focused_adapter(self) -> Optional[SurfaceAdapter]:
        """Adapter whose surface currently holds input focus, if any."""
        for adapter in self._adapters.values():
            if adapter.surface.has_focus:
                return adapter
        return None

    def block_order(self) -> List[AdapterKey]:
        """(section_id, block_id) pairs in document order."""
        return [(sec.id, b.id) for sec in iter_sections(self.store.sections) for b in sec.content]

    # ---------------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------------

    def _create_adapter(self, section_id: str, block_id: str) -> SurfaceAdapter:
        return SurfaceAdapter(
            section_id,
            block_id,
            settings=self.settings,
            on_change=lambda markup: self.handle_block_change(section_id, block_id, markup),
            on_split=lambda before, after: self.handle_split_block(section_id, block_id, before, after),
            on_enter_at_end=lambda: self.handle_add_empty_block(section_id, block_id),
            on_backspace_at_empty=lambda: self.handle_remove_block(section_id, block_id),
            schedule=self._schedule,
        )

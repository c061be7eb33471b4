from __future__ import annotations

"""Bridge between one live block surface and the block model.

The surface owns the live markup; the model owns the truth between commits.
The adapter initialises its surface once from the block content, pushes
markup back through ``on_change`` at each commit point, and turns key events
into the structural requests the controller turns into tree transforms
(split, insert-after, remove). Focus requests arrive through the render pass.
"""

import logging
from typing import Any, Callable, Optional, Tuple

from outline_editor.core.models import Block, FocusRequest
from outline_editor.core.markup import strip_zero_width
from outline_editor.core.settings import EditorSettings
from outline_editor.ui.blocks.surface import EditingSurface
from outline_editor.ui.blocks.token_resolver import TokenResolver

logger = logging.getLogger(__name__)

__all__ = ["SurfaceAdapter"]


def _noop(*_args: Any) -> None:
    return None


class SurfaceAdapter:
    """Per-block editing surface adapter.

    Parameters
    ----------
    section_id, block_id : str
        Address of the bound block.
    settings : EditorSettings
        Trigger character, token class, zero-width characters and catalog.
    on_change : Callable[[str], None]
        Receives the surface markup at every commit point.
    on_split : Callable[[str, str], None]
        Enter inside the block: receives the before/after markup fragments.
    on_enter_at_end : Callable[[], None]
        Enter with the caret at the end of the block.
    on_backspace_at_empty : Callable[[], None]
        Backspace in an empty block with the caret at offset 0.
    schedule : Callable[[Callable[[], None]], object], optional
        Next-turn scheduler for the suggestion popup measurement.
    """

    def __init__(
        self,
        section_id: str,
        block_id: str,
        *,
        settings: EditorSettings,
        on_change: Callable[[str], None] = _noop,
        on_split: Callable[[str, str], None] = _noop,
        on_enter_at_end: Callable[[], None] = _noop,
        on_backspace_at_empty: Callable[[], None] = _noop,
        schedule: Optional[Callable[[Callable[[], None]], Any]] = None,
    ) -> None:
        self.section_id = section_id
        self.block_id = block_id
        self._settings = settings
        self._on_change = on_change
        self._on_split = on_split
        self._on_enter_at_end = on_enter_at_end
        self._on_backspace_at_empty = on_backspace_at_empty

        self.surface = EditingSurface(settings.token_class)
        self.resolver = TokenResolver(
            settings.catalog,
            trigger_character=settings.trigger_character,
            schedule=schedule,
            on_commit=self._commit,
        )
        self._mounted = False
        self._last_request: Optional[FocusRequest] = None

    # -------------------------------------------------------------- lifecycle

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(self, markup: str) -> None:
        """Initialise the surface from the block content, once."""
        if self._mounted:
            return
        self.surface.load(markup)
        self._mounted = True

    def render(self, block: Block, focus_request: Optional[FocusRequest]) -> None:
        """Re-render pass: mount on first sight, then serve any new focus request.

        A mounted surface is never reloaded from *block*; sibling mutations
        must not reset an in-progress edit.
        """
        if not self._mounted:
            self.mount(block.content)
        self.consume_focus(focus_request)

    def consume_focus(self, request: Optional[FocusRequest]) -> bool:
        """Focus the surface and collapse the caret to the end if *request* names it.

        Each request object is served once; a fresh request for the same
        block is served again. A request naming another block, or the slot
        changing to None, blurs the surface.
        """
        if request is self._last_request:
            return False
        self._last_request = request
        if request is None or not request.targets(self.section_id, self.block_id):
            self.surface.blur()
            return False
        self.surface.focus()
        self.surface.collapse_to_end()
        logger.debug("Focus served section=%s block=%s", self.section_id, self.block_id)
        return True

    # ------------------------------------------------------ caret arithmetic

    def plain_text_offset(self) -> int:
        return self.surface.caret_offset()

    def is_caret_at_end(self) -> bool:
        return self.surface.caret_at_end()

    def split_fragments(self) -> Tuple[str, str]:
        return self.surface.fragments_at_caret()

    def is_empty_at_start(self) -> bool:
        """True when the block holds no visible text and the caret is at 0."""
        text = strip_zero_width(self.surface.text, self._settings.zero_width_characters)
        return not text.strip() and self.plain_text_offset() == 0

    # ----------------------------------------------------------------- events

    def handle_input(self, text: str) -> None:
        """Raw text input at the caret (typing, paste)."""
        if not text:
            return
        self.surface.insert_text(text)
        self._commit(self.surface.markup)

    def handle_key(self, key: str, *, shift: bool = False) -> bool:
        """Dispatch one key press; return True when the key was consumed.

        While the suggestion list is open its navigation keys win and every
        other key is plain input.
        """
        if self.resolver.is_open:
            if self.resolver.handle_key(key, self.surface):
                return True
            return self._plain_key(key)

        if key == "Enter":
            if shift:
                self.surface.insert_line_break()
                self._commit(self.surface.markup)
            elif self.is_caret_at_end():
                self._on_enter_at_end()
            else:
                before, after = self.split_fragments()
                self._on_split(before, after)
            return True
        if self.resolver.is_trigger(key):
            self.resolver.trigger(self.surface)
            # The trigger character is typed input whether or not the list opened
            self._commit(self.surface.markup)
            return True
        if key == "Backspace" and self.is_empty_at_start():
            self._on_backspace_at_empty()
            return True
        return self._plain_key(key)

    def pick(self, index: int) -> Optional[str]:
        """Pointer pick of suggestion *index* while the list is open."""
        return self.resolver.select(index, self.surface)

    # ---------------------------------------------------------------- helpers

    def _plain_key(self, key: str) -> bool:
        if key == "Backspace":
            if self.plain_text_offset() == 0:
                return False
            self.surface.delete_backward()
            self._commit(self.surface.markup)
            return True
        if key == "ArrowLeft":
            self.surface.move_caret(-1)
            return True
        if key == "ArrowRight":
            self.surface.move_caret(1)
            return True
        if key == "Home":
            self.surface.place_caret(0)
            return True
        if key == "End":
            self.surface.collapse_to_end()
            return True
        if len(key) == 1:
            self.handle_input(key)
            return True
        return False

    def _commit(self, markup: str) -> None:
        self._on_change(markup)

    def __repr__(self) -> str:
        return f"SurfaceAdapter(section={self.section_id!r}, block={self.block_id!r}, surface={self.surface!r})"

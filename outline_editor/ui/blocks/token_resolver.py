from __future__ import annotations

"""Token suggestion state machine for one block surface.

States are ``Closed`` and ``Open(selected_index)``. Typing the trigger
character inserts it, saves the caret right after it as the anchor and opens
the list; arrow keys walk the catalog with wraparound; Enter (or a pointer
pick) swaps the trigger character for one atomic token chip.
"""

from enum import Enum
import logging
from typing import Any, Callable, Optional, Tuple

from outline_editor.core.catalog import TokenCatalog
from outline_editor.ui.blocks.surface import EditingSurface, anchor_rect

logger = logging.getLogger(__name__)

__all__ = ["ResolverState", "TokenResolver"]


class ResolverState(Enum):
    CLOSED = "closed"
    OPEN = "open"


class TokenResolver:
    """Suggestion list selection and atomic chip insertion.

    Parameters
    ----------
    catalog : TokenCatalog
        Candidates offered, in display order. Nothing outside it is offered.
    trigger_character : str
        Character that opens the list.
    schedule : Callable[[Callable[[], None]], object], optional
        Runs a callback on the next rendering turn. Popup measurement needs
        the trigger character laid out first, so it is deferred through this
        hook; without one the measurement runs immediately.
    on_commit : Callable[[str], None], optional
        Receives the surface markup synchronously after a chip is inserted.
    """

    NAVIGATION_KEYS = frozenset({"ArrowDown", "ArrowUp", "Enter", "Escape"})

    def __init__(
        self,
        catalog: TokenCatalog,
        *,
        trigger_character: str = "/",
        schedule: Optional[Callable[[Callable[[], None]], Any]] = None,
        on_commit: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._catalog = catalog
        self._trigger = trigger_character
        self._schedule = schedule
        self._on_commit = on_commit
        self._state = ResolverState.CLOSED
        self._selected_index = 0
        self._anchor: Optional[int] = None
        self._popup_position: Optional[Tuple[int, int]] = None
        self._measure_seq: int = 0
        self._surface: Optional[EditingSurface] = None

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> ResolverState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is ResolverState.OPEN

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def candidates(self) -> Tuple[str, ...]:
        return tuple(self._catalog)

    @property
    def selected_token(self) -> Optional[str]:
        if not self.is_open:
            return None
        return self._catalog[self._selected_index]

    @property
    def anchor(self) -> Optional[int]:
        """Plain-text offset right after the trigger character, while open."""
        return self._anchor

    @property
    def popup_position(self) -> Optional[Tuple[int, int]]:
        """(line, column) of the anchor once measured, while open."""
        return self._popup_position

    @property
    def trigger_character(self) -> str:
        return self._trigger

    def is_trigger(self, key: str) -> bool:
        return key == self._trigger

    # ------------------------------------------------------------ transitions

    def trigger(self, surface: EditingSurface) -> bool:
        """Insert the trigger character and open the list.

        Returns True when the list opened. With an empty catalog the
        character is still typed but nothing opens.
        """
        if self.is_open:
            surface.insert_text(self._trigger)
            return False
        self._anchor = surface.insert_text(self._trigger)
        surface.focus()
        if not self._catalog:
            self._anchor = None
            return False

        self._state = ResolverState.OPEN
        self._selected_index = 0
        self._popup_position = None
        self._surface = surface
        surface.add_edit_listener(self.track_edit)

        # Invalidate older measurements
        self._measure_seq += 1
        seq = self._measure_seq
        anchor = self._anchor

        def _measure() -> None:
            if seq != self._measure_seq or not self.is_open:
                return
            self._popup_position = anchor_rect(surface, self._anchor)

        if self._schedule is None:
            _measure()
        else:
            self._schedule(_measure)
        logger.debug("Token list opened at offset %s", anchor)
        return True

    def handle_key(self, key: str, surface: EditingSurface) -> bool:
        """Handle a navigation key while open; return True when consumed."""
        if not self.is_open or key not in self.NAVIGATION_KEYS:
            return False
        if key == "ArrowDown":
            self.move(1)
        elif key == "ArrowUp":
            self.move(-1)
        elif key == "Escape":
            self.close()
        else:
            self.select(self._selected_index, surface)
        return True

    def move(self, step: int) -> int:
        """Move the selection by *step* with wraparound over the catalog."""
        if self.is_open:
            n = len(self._catalog)
            self._selected_index = (self._selected_index + step + n) % n
        return self._selected_index

    def select(self, index: int, surface: EditingSurface) -> Optional[str]:
        """Replace the trigger character with the chip for candidate *index*.

        The caret ends up right after the chip and the markup is committed
        synchronously. Returns the inserted token id, or None when the list
        is closed or the index is out of range.
        """
        if not self.is_open or self._anchor is None:
            return None
        if not 0 <= index < len(self._catalog):
            return None
        token_id = self._catalog.require(self._catalog[index])
        anchor = self._anchor
        self.close()

        surface.delete_before_offset(anchor, 1)
        surface.insert_token(token_id)
        surface.focus()
        if self._on_commit is not None:
            self._on_commit(surface.markup)
        logger.debug("Token inserted: %s", token_id)
        return token_id

    def close(self) -> None:
        """Return to Closed and drop the saved anchor."""
        self._state = ResolverState.CLOSED
        self._selected_index = 0
        self._anchor = None
        self._popup_position = None
        self._measure_seq += 1
        if self._surface is not None:
            self._surface.remove_edit_listener(self.track_edit)
            self._surface = None

    def track_edit(self, start: int, removed: int, inserted: int) -> None:
        """Keep the anchor on the trigger character across surface edits.

        Edits wholly before the trigger character shift the anchor; text
        typed at or after the anchor leaves it in place. Deleting the
        trigger character itself closes the list.
        """
        if not self.is_open or self._anchor is None:
            return
        trigger_at = self._anchor - 1
        if removed and start <= trigger_at < start + removed:
            logger.debug("Trigger character deleted; token list closed")
            self.close()
            return
        if start + removed <= trigger_at:
            self._anchor += inserted - removed

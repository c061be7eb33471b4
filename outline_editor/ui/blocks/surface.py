from __future__ import annotations

"""Headless live editing surface bound to one block.

The surface holds the live content as a segment list plus a caret expressed
as a :class:`BoundaryPoint`, the way a browser selection addresses a node
and an offset inside it. It owns the pixels: once mounted, nothing but the
surface's own editing methods changes its content.
"""

from typing import Callable, List, Optional, Sequence, Tuple

from outline_editor.core.markup import (
    DEFAULT_TOKEN_CLASS,
    BoundaryPoint,
    LineBreak,
    Segment,
    TextRun,
    TokenRef,
    caret_stops,
    delete_before,
    display_length,
    insert_segments,
    offset_of,
    parse_markup,
    plain_text,
    point_at,
    segment_length,
    serialize_markup,
    split_segments,
)

__all__ = ["EditingSurface", "EditListener", "anchor_rect"]

# (start, removed, inserted): plain-text span replaced by an edit
EditListener = Callable[[int, int, int], None]


class EditingSurface:
    """Mutable live content of one block surface.

    Parameters
    ----------
    token_class : str
        Class marking token chips in the markup this surface reads and writes.
    """

    def __init__(self, token_class: str = DEFAULT_TOKEN_CLASS) -> None:
        self._token_class = token_class
        self._segments: List[Segment] = []
        self._caret = BoundaryPoint(0, 0)
        self._has_focus = False
        self._edit_listeners: List[EditListener] = []

    # ------------------------------------------------------------------ state

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return tuple(self._segments)

    @property
    def caret(self) -> BoundaryPoint:
        return self._caret

    @property
    def has_focus(self) -> bool:
        return self._has_focus

    @property
    def markup(self) -> str:
        """Current content serialized as block markup."""
        return serialize_markup(self._segments, self._token_class)

    @property
    def text(self) -> str:
        """Plain text of the surface (tokens as their id, breaks as newlines)."""
        return plain_text(self._segments)

    def load(self, markup: str) -> None:
        """Replace the whole content from markup and put the caret at the start."""
        removed = display_length(self._segments)
        self._segments = parse_markup(markup, self._token_class)
        self._caret = BoundaryPoint(0, 0)
        self._notify(0, removed, display_length(self._segments))

    def add_edit_listener(self, listener: EditListener) -> None:
        """Register *listener* for every content change (once per listener)."""
        if listener not in self._edit_listeners:
            self._edit_listeners.append(listener)

    def remove_edit_listener(self, listener: EditListener) -> None:
        if listener in self._edit_listeners:
            self._edit_listeners.remove(listener)

    # ---------------------------------------------------------------- selection

    def focus(self) -> None:
        self._has_focus = True

    def blur(self) -> None:
        self._has_focus = False

    def end_point(self) -> BoundaryPoint:
        """Point obtained by collapsing a selection over all content to its end."""
        return BoundaryPoint(len(self._segments), 0)

    def collapse_to_end(self) -> None:
        self._caret = self.end_point()

    def place_caret(self, offset: int) -> None:
        """Put the caret at a plain-text offset (clamped, never inside a token)."""
        self._caret = point_at(self._segments, offset)

    def place_caret_at(self, point: BoundaryPoint) -> None:
        """Put the caret at a raw boundary point, e.g. a click inside a chip."""
        index = max(0, min(point.index, len(self._segments)))
        if index == len(self._segments):
            self._caret = BoundaryPoint(index, 0)
            return
        length = segment_length(self._segments[index])
        self._caret = BoundaryPoint(index, max(0, min(point.offset, length)))

    def move_caret(self, step: int) -> int:
        """Move the caret by *step* stops; a chip is crossed in one step."""
        stops = caret_stops(self._segments)
        current = self.caret_offset()
        if step > 0:
            ahead = [s for s in stops if s > current]
            target = ahead[min(step, len(ahead)) - 1] if ahead else current
        elif step < 0:
            behind = [s for s in stops if s < current]
            target = behind[max(step, -len(behind))] if behind else current
        else:
            target = current
        self.place_caret(target)
        return target

    def caret_offset(self) -> int:
        """Plain-text offset of the caret."""
        return offset_of(self._segments, self._caret)

    def caret_at_end(self) -> bool:
        """True when the caret sits where a collapse-to-end would put it.

        Comparison is in plain-text coordinates, so a caret at the end of the
        last text run counts as the end just like the past-the-end point.
        """
        return self.caret_offset() == display_length(self._segments)

    # ------------------------------------------------------------------ editing

    def fragments_at_caret(self) -> Tuple[str, str]:
        """Markup before and after the caret, each renderable on its own."""
        before, after = split_segments(self._segments, self.caret_offset())
        return (
            serialize_markup(before, self._token_class),
            serialize_markup(after, self._token_class),
        )

    def insert_text(self, text: str) -> int:
        """Insert plain characters at the caret; return the new caret offset."""
        return self._insert([TextRun(text)])

    def insert_line_break(self) -> int:
        return self._insert([LineBreak()])

    def insert_token(self, token_id: str) -> int:
        """Insert one atomic chip at the caret and move the caret after it."""
        return self._insert([TokenRef(token_id)])

    def delete_backward(self, count: int = 1) -> int:
        """Delete *count* units before the caret (a chip is one unit)."""
        return self.delete_before_offset(self.caret_offset(), count)

    def delete_before_offset(self, offset: int, count: int = 1) -> int:
        """Delete *count* units before *offset* and leave the caret there."""
        before_length = display_length(self._segments)
        self._segments, caret = delete_before(self._segments, offset, count)
        self.place_caret(caret)
        removed = before_length - display_length(self._segments)
        if removed:
            self._notify(caret, removed, 0)
        return caret

    def insert_segments_at(self, offset: int, new: Sequence[Segment]) -> int:
        self._segments, caret = insert_segments(self._segments, offset, new)
        self.place_caret(caret)
        inserted = display_length(new)
        if inserted:
            self._notify(caret - inserted, 0, inserted)
        return caret

    def _insert(self, new: Sequence[Segment]) -> int:
        return self.insert_segments_at(self.caret_offset(), new)

    def _notify(self, start: int, removed: int, inserted: int) -> None:
        for listener in list(self._edit_listeners):
            listener(start, removed, inserted)

    def __repr__(self) -> str:
        return f"EditingSurface(markup={self.markup!r}, caret={self.caret_offset()})"


def anchor_rect(surface: EditingSurface, offset: Optional[int] = None) -> Tuple[int, int]:
    """Character-grid position (line, column) of *offset* on the surface.

    Stands in for on-screen geometry of a headless surface: the popup is
    positioned relative to this point.
    """
    if offset is None:
        offset = surface.caret_offset()
    before = surface.text[:offset]
    line = before.count("\n")
    column = len(before) - (before.rfind("\n") + 1)
    return line, column

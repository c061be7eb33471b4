from __future__ import annotations

"""Block content model and its markup codec.

Block content travels as markup: HTML-ish text interleaved with atomic token
chips (``<span class="inline-item" contenteditable="false">ID</span>``) and
``<br>`` line breaks. All offset, length and split arithmetic happens on a
flat sequence of segments instead of on the raw markup:

- :class:`TextRun` - a run of plain characters, length ``len(text)``;
- :class:`TokenRef` - an atomic chip, length ``len(token_id)`` but never split;
- :class:`LineBreak` - a line break, length 1.

Markup is only parsed (with :mod:`lxml.html`) and re-serialized at the
boundary. Serialization is segment-local, so serializing two halves of a
split and concatenating them yields the serialization of the whole.

Offsets used throughout are *plain-text offsets*: positions in the string
obtained by concatenating every segment's display text.
"""

from dataclasses import dataclass
import html
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from lxml import etree as ET
from lxml import html as lxml_html

__all__ = [
    "TextRun",
    "TokenRef",
    "LineBreak",
    "Segment",
    "BoundaryPoint",
    "DEFAULT_TOKEN_CLASS",
    "DEFAULT_ZERO_WIDTH",
    "segment_length",
    "display_length",
    "plain_text",
    "normalize_segments",
    "parse_markup",
    "serialize_markup",
    "normalize_markup",
    "offset_of",
    "point_at",
    "split_segments",
    "insert_segments",
    "delete_before",
    "strip_zero_width",
    "caret_stops",
]

DEFAULT_TOKEN_CLASS = "inline-item"
DEFAULT_ZERO_WIDTH = ("\u200b", "\u200c", "\u200d", "\ufeff")

_WRAPPER = "div"


@dataclass(frozen=True)
class TextRun:
    text: str


@dataclass(frozen=True)
class TokenRef:
    token_id: str

    @property
    def text(self) -> str:
        return self.token_id


@dataclass(frozen=True)
class LineBreak:
    @property
    def text(self) -> str:
        return "\n"


Segment = Union[TextRun, TokenRef, LineBreak]


@dataclass(frozen=True)
class BoundaryPoint:
    """A position inside a segment sequence.

    ``index`` names a segment and ``offset`` a position inside its display
    text (``0 <= offset <= segment_length``). ``index == len(segments)``
    with ``offset == 0`` is the end of the content.
    """

    index: int
    offset: int = 0


# ---------------------------------------------------------------------------
# Lengths and text
# ---------------------------------------------------------------------------

def segment_length(segment: Segment) -> int:
    """Return the display length of one segment."""
    if isinstance(segment, LineBreak):
        return 1
    return len(segment.text)


def display_length(segments: Iterable[Segment]) -> int:
    return sum(segment_length(s) for s in segments)


def plain_text(segments: Iterable[Segment]) -> str:
    """Concatenate the display text of every segment (line breaks as ``\\n``)."""
    return "".join(s.text for s in segments)


def strip_zero_width(text: str, characters: Sequence[str] = DEFAULT_ZERO_WIDTH) -> str:
    """Remove zero-width filler characters from *text*."""
    for ch in characters:
        text = text.replace(ch, "")
    return text


def normalize_segments(segments: Iterable[Segment]) -> List[Segment]:
    """Merge adjacent text runs and drop empty ones."""
    result: List[Segment] = []
    for seg in segments:
        if isinstance(seg, TextRun):
            if not seg.text:
                continue
            if result and isinstance(result[-1], TextRun):
                result[-1] = TextRun(result[-1].text + seg.text)
                continue
        result.append(seg)
    return result


# ---------------------------------------------------------------------------
# Markup codec
# ---------------------------------------------------------------------------

def _is_token_element(el: ET._Element, token_class: str) -> bool:
    return el.tag == "span" and token_class in (el.get("class") or "").split()


def _collect(el: ET._Element, token_class: str, out: List[Segment]) -> None:
    """Flatten the children of *el* (not its own text/tail) into *out*."""
    for child in el:
        if not isinstance(child.tag, str):
            # Comments and processing instructions contribute only their tail
            pass
        elif _is_token_element(child, token_class):
            out.append(TokenRef(child.text_content()))
        elif child.tag == "br":
            out.append(LineBreak())
        else:
            # Formatting wrappers left behind by the surface are flattened
            if child.text:
                out.append(TextRun(child.text))
            _collect(child, token_class, out)
        if child.tail:
            out.append(TextRun(child.tail))


def parse_markup(markup: Optional[str], token_class: str = DEFAULT_TOKEN_CLASS) -> List[Segment]:
    """Parse block markup into a normalized segment list.

    Text before the first tag is taken verbatim (entities decoded) and only
    the rest goes through the HTML parser, which discards leading
    whitespace-only text.
    """
    if not markup:
        return []
    cut = markup.find("<")
    head, rest = (markup, "") if cut == -1 else (markup[:cut], markup[cut:])

    out: List[Segment] = []
    if head:
        out.append(TextRun(html.unescape(head) if "&" in head else head))
    if rest:
        root = lxml_html.fragment_fromstring(rest, create_parent=_WRAPPER)
        if root.text:
            out.append(TextRun(root.text))
        _collect(root, token_class, out)
    return normalize_segments(out)


def serialize_markup(segments: Iterable[Segment], token_class: str = DEFAULT_TOKEN_CLASS) -> str:
    """Serialize segments into canonical block markup."""
    root = ET.Element(_WRAPPER)
    last: Optional[ET._Element] = None
    for seg in segments:
        if isinstance(seg, TextRun):
            if last is None:
                root.text = (root.text or "") + seg.text
            else:
                last.tail = (last.tail or "") + seg.text
            continue
        if isinstance(seg, TokenRef):
            last = ET.SubElement(root, "span")
            last.set("class", token_class)
            last.set("contenteditable", "false")
            last.text = seg.token_id
        else:
            last = ET.SubElement(root, "br")
    rendered = ET.tostring(root, method="html", encoding="unicode")
    # Strip the wrapper element
    return rendered[len(f"<{_WRAPPER}>"):-len(f"</{_WRAPPER}>")]


def normalize_markup(markup: Optional[str], token_class: str = DEFAULT_TOKEN_CLASS) -> str:
    """Round-trip *markup* through the codec to its canonical form."""
    return serialize_markup(parse_markup(markup, token_class), token_class)


# ---------------------------------------------------------------------------
# Offset arithmetic
# ---------------------------------------------------------------------------

def offset_of(segments: Sequence[Segment], point: BoundaryPoint) -> int:
    """Map a boundary point to a plain-text offset.

    A point inside a token resolves to the token's start plus the inner
    offset, i.e. the same coordinate space as the surrounding text.
    """
    offset = 0
    for i, seg in enumerate(segments):
        if i == point.index:
            return offset + max(0, min(point.offset, segment_length(seg)))
        offset += segment_length(seg)
    return offset


def point_at(segments: Sequence[Segment], offset: int) -> BoundaryPoint:
    """Map a plain-text offset to a boundary point, clamped to the content.

    Positions on a segment boundary attach to the end of the preceding text
    run when there is one, mirroring where a caret lands after typing.
    Offsets strictly inside a token snap to the token's end.
    """
    if offset <= 0:
        return BoundaryPoint(0, 0)
    pos = 0
    for i, seg in enumerate(segments):
        length = segment_length(seg)
        if offset < pos + length:
            if isinstance(seg, TextRun):
                return BoundaryPoint(i, offset - pos)
            if offset == pos:
                return BoundaryPoint(i, 0)
            return BoundaryPoint(i + 1, 0)
        if offset == pos + length and isinstance(seg, TextRun):
            return BoundaryPoint(i, length)
        pos += length
    return BoundaryPoint(len(segments), 0)


def _snap(segments: Sequence[Segment], offset: int) -> int:
    """Clamp *offset* and move it out of any token it falls inside."""
    offset = max(0, min(offset, display_length(segments)))
    pos = 0
    for seg in segments:
        length = segment_length(seg)
        if pos < offset < pos + length and not isinstance(seg, TextRun):
            return pos + length
        pos += length
    return offset


def split_segments(segments: Sequence[Segment], offset: int) -> Tuple[List[Segment], List[Segment]]:
    """Partition *segments* at a plain-text offset.

    Tokens are never divided: an offset inside a token splits after it.
    """
    offset = _snap(segments, offset)
    before: List[Segment] = []
    after: List[Segment] = []
    pos = 0
    for seg in segments:
        length = segment_length(seg)
        if pos + length <= offset:
            before.append(seg)
        elif pos >= offset:
            after.append(seg)
        else:
            cut = offset - pos
            before.append(TextRun(seg.text[:cut]))
            after.append(TextRun(seg.text[cut:]))
        pos += length
    return normalize_segments(before), normalize_segments(after)


def insert_segments(
    segments: Sequence[Segment], offset: int, new: Sequence[Segment]
) -> Tuple[List[Segment], int]:
    """Insert *new* at *offset*; return the new content and the caret after it."""
    before, after = split_segments(segments, offset)
    caret = display_length(before) + display_length(new)
    return normalize_segments([*before, *new, *after]), caret


def delete_before(
    segments: Sequence[Segment], offset: int, count: int = 1
) -> Tuple[List[Segment], int]:
    """Delete *count* units before *offset*.

    A unit is one character of a text run, one line break, or one whole
    token. Returns the new content and the caret position.
    """
    before, after = split_segments(segments, offset)
    for _ in range(count):
        if not before:
            break
        last = before.pop()
        if isinstance(last, TextRun) and len(last.text) > 1:
            before.append(TextRun(last.text[:-1]))
    return normalize_segments([*before, *after]), display_length(before)


def caret_stops(segments: Sequence[Segment]) -> List[int]:
    """Every offset a caret may rest on, ascending (none inside a token)."""
    stops: List[int] = []
    pos = 0
    for seg in segments:
        length = segment_length(seg)
        if isinstance(seg, TextRun):
            stops.extend(range(pos, pos + length))
        else:
            stops.append(pos)
        pos += length
    stops.append(pos)
    return stops

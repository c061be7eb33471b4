from __future__ import annotations

"""Shared data structures used across the outline editor core.

Sections and blocks are frozen value objects; the document is a forest
(``Tuple[Section, ...]``) that only ever changes by being replaced with a new
forest. The module is intentionally free of UI code so that the contained
objects can be reused in any context (unit-tests, CLI, GUI, etc.).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from outline_editor.core.exceptions import DuplicateIdError

__all__ = [
    "Block",
    "Section",
    "DocumentTree",
    "FocusRequest",
    "sections_from_payload",
    "sections_to_payload",
]


@dataclass(frozen=True)
class Block:
    """One independently editable unit of rich-text content.

    Attributes
    ----------
    id
        Identifier, unique across the whole tree.
    content
        Block markup (text, token chips and line breaks).
    """

    id: str
    content: str = ""


@dataclass(frozen=True)
class Section:
    """A named node of the outline.

    Attributes
    ----------
    id
        Identifier, unique across the whole tree.
    name
        Heading text.
    content
        Ordered blocks of the section (may be empty).
    subsections
        Ordered child sections (may be empty).
    """

    id: str
    name: str
    content: Tuple[Block, ...] = field(default_factory=tuple)
    subsections: Tuple["Section", ...] = field(default_factory=tuple)

    def block_index(self, block_id: str) -> int:
        """Return the position of *block_id* in ``content``, or -1."""
        for idx, block in enumerate(self.content):
            if block.id == block_id:
                return idx
        return -1


DocumentTree = Tuple[Section, ...]


@dataclass(frozen=True)
class FocusRequest:
    """Pending instruction to move the caret into a block."""

    section_id: str
    block_id: str

    def targets(self, section_id: str, block_id: str) -> bool:
        return self.section_id == section_id and self.block_id == block_id


# ---------------------------------------------------------------------------
# Payload conversion
# ---------------------------------------------------------------------------

def _block_from_payload(data: Mapping[str, Any]) -> Block:
    # "html" is accepted as an alias of "content"
    content = data.get("content", data.get("html", ""))
    return Block(id=str(data["id"]), content=content or "")


def _section_from_payload(data: Mapping[str, Any]) -> Section:
    return Section(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        content=tuple(_block_from_payload(b) for b in data.get("content") or ()),
        subsections=tuple(_section_from_payload(s) for s in data.get("subsections") or ()),
    )


def sections_from_payload(payload: Iterable[Mapping[str, Any]]) -> DocumentTree:
    """Build a document forest from plain dictionaries.

    Raises
    ------
    DuplicateIdError
        If any section or block id occurs more than once.
    KeyError
        If a section or block has no ``id``.
    """
    # Local import: document_store depends on this module
    from outline_editor.core.document_store import validate_unique_ids

    tree = tuple(_section_from_payload(s) for s in payload)
    duplicates = validate_unique_ids(tree)
    if duplicates:
        raise DuplicateIdError(
            f"Duplicate ids in document payload: {', '.join(duplicates)}", duplicates[0]
        )
    return tree


def sections_to_payload(tree: Iterable[Section]) -> List[Dict[str, Any]]:
    """Inverse of :func:`sections_from_payload`."""
    return [
        {
            "id": sec.id,
            "name": sec.name,
            "content": [{"id": b.id, "content": b.content} for b in sec.content],
            "subsections": sections_to_payload(sec.subsections),
        }
        for sec in tree
    ]

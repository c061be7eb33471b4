from __future__ import annotations

"""Document tree store and the recursive primitives every edit is built on.

The store owns the current forest of sections. Writes never mutate a
section in place: :func:`find_and_transform_section` walks the forest
depth-first (pre-order) and rebuilds the path to the target, returning
untouched branches by identity. A missing target is not an error; the
returned forest is then value-equal to (and shares every node with) the
input.
"""

from collections import Counter
import logging
from typing import Callable, Iterator, List, Optional, Tuple

from outline_editor.core.models import Block, DocumentTree, Section

__all__ = [
    "DocumentStore",
    "find_and_transform_section",
    "iter_sections",
    "find_section",
    "find_block",
    "collect_ids",
    "validate_unique_ids",
]

logger = logging.getLogger(__name__)

SectionTransform = Callable[[Section], Section]


def find_and_transform_section(
    tree: DocumentTree, target_id: str, transform: SectionTransform
) -> DocumentTree:
    """Replace the section ``target_id`` with ``transform(section)``.

    Every section of the forest is visited; nothing stops at the first
    match. Sections whose subtree did not change are reused as-is.
    """
    changed = False
    result: List[Section] = []
    for sec in tree:
        if sec.id == target_id:
            new_sec = transform(sec)
        else:
            new_subs = find_and_transform_section(sec.subsections, target_id, transform)
            if new_subs is sec.subsections:
                new_sec = sec
            else:
                new_sec = Section(sec.id, sec.name, sec.content, new_subs)
        if new_sec is not sec:
            changed = True
        result.append(new_sec)
    if not changed:
        return tree
    return tuple(result)


def iter_sections(tree: DocumentTree) -> Iterator[Section]:
    """Yield every section depth-first, pre-order."""
    for sec in tree:
        yield sec
        yield from iter_sections(sec.subsections)


def find_section(tree: DocumentTree, section_id: str) -> Optional[Section]:
    for sec in iter_sections(tree):
        if sec.id == section_id:
            return sec
    return None


def find_block(tree: DocumentTree, block_id: str) -> Optional[Tuple[Section, Block]]:
    """Locate a block anywhere in the tree; return ``(section, block)`` or None."""
    for sec in iter_sections(tree):
        for block in sec.content:
            if block.id == block_id:
                return sec, block
    return None


def collect_ids(tree: DocumentTree) -> List[str]:
    """Return every section and block id in document order."""
    ids: List[str] = []
    for sec in iter_sections(tree):
        ids.append(sec.id)
        ids.extend(b.id for b in sec.content)
    return ids


def validate_unique_ids(tree: DocumentTree) -> List[str]:
    """Return the ids that occur more than once (empty when the tree is valid)."""
    counts = Counter(collect_ids(tree))
    return [item_id for item_id, n in counts.items() if n > 1]


class DocumentStore:
    """Holds the current document forest.

    The store is the single writer of the tree. Callers hand it whole-tree
    transforms; ``revision`` only advances when the resulting forest differs
    in value from the previous one.

    Parameters
    ----------
    sections : DocumentTree
        Initial forest, already parsed.
    """

    def __init__(self, sections: DocumentTree = ()) -> None:
        self._sections: DocumentTree = tuple(sections)
        self._revision: int = 0

    @property
    def sections(self) -> DocumentTree:
        return self._sections

    @property
    def revision(self) -> int:
        return self._revision

    def replace(self, sections: DocumentTree) -> bool:
        """Install *sections* as the current tree; return True if it changed."""
        sections = tuple(sections)
        if sections is self._sections or sections == self._sections:
            return False
        self._sections = sections
        self._revision += 1
        logger.debug("Store revision %d", self._revision)
        return True

    def apply(self, transform: Callable[[DocumentTree], DocumentTree]) -> bool:
        """Replace the tree with ``transform(current_tree)``."""
        return self.replace(transform(self._sections))

    def find_section(self, section_id: str) -> Optional[Section]:
        return find_section(self._sections, section_id)

    def find_block(self, block_id: str) -> Optional[Tuple[Section, Block]]:
        return find_block(self._sections, block_id)

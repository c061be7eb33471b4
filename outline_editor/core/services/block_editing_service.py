from __future__ import annotations

"""Service layer for block-level edits on the document forest.

This module provides a UI-agnostic, testable service encapsulating the tree
transforms behind every editing gesture: splitting a block on Enter,
inserting an empty block after the current one, committing typed content,
removing an empty block on Backspace and renaming a section heading.

Scope and guarantees:
- Pure: every operation receives the current forest and returns a new one;
  nothing is mutated in place and fresh ids are supplied by the caller.
- Non-raising: a stale ``section_id``/``block_id`` pair is a silent no-op
  returning the unchanged forest (ids can go stale across re-renders).
- Focus policy for removal is computed here; recording the request is the
  caller's job.

Examples
--------
Basic usage:

    service = BlockEditingService()
    tree = service.split_block(tree, "S", "b1", "hel", "lo", "b2", "b3")
    result = service.remove_block(tree, "S", "b2")
    tree, focus = result.tree, result.focus

"""

from dataclasses import dataclass, replace
import logging
from typing import Any, Dict, List, Optional, Tuple

from outline_editor.core.document_store import find_and_transform_section, find_section
from outline_editor.core.models import Block, DocumentTree, FocusRequest, Section


__all__ = ["OperationResult", "RemovalResult", "BlockEditingService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    """Result of an editing gesture handled by the controller.

    Attributes
    ----------
    success
        Whether the tree changed.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class RemovalResult:
    """Outcome of :meth:`BlockEditingService.remove_block`.

    Attributes
    ----------
    tree
        The new forest (the input forest when nothing was removed).
    focus
        Block that should receive focus next, or None.
    removed
        Whether a block was actually removed.
    """
    tree: DocumentTree
    focus: Optional[FocusRequest]
    removed: bool = False


class BlockEditingService:
    """Encapsulates block edit operations on a section forest.

    Design principles:
    - No UI dependencies and no I/O.
    - No exceptions for stale targets; the unchanged forest is returned.
    - All writes go through :func:`find_and_transform_section`, except
      removal which also has to carry a focus result up the recursion.
    """

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def split_block(
        self,
        tree: DocumentTree,
        section_id: str,
        block_id: str,
        before: str,
        after: str,
        new_id_before: str,
        new_id_after: str,
    ) -> DocumentTree:
        """Replace one block with two new blocks holding *before* and *after*.

        The split block's id is retired. Requesting focus on
        ``new_id_after`` is left to the caller.
        """
        logger.info("Edit: split_block section=%s block=%s", section_id, block_id)

        def _split(sec: Section) -> Section:
            idx = sec.block_index(block_id)
            if idx == -1:
                return sec
            new_blocks = (Block(new_id_before, before), Block(new_id_after, after))
            return replace(sec, content=sec.content[:idx] + new_blocks + sec.content[idx + 1:])

        return self._finish("split_block", tree, find_and_transform_section(tree, section_id, _split), section_id, block_id)

    def insert_block_after(
        self,
        tree: DocumentTree,
        section_id: str,
        block_id: str,
        new_block: Block,
    ) -> DocumentTree:
        """Insert *new_block* right after ``block_id``.

        When ``block_id`` is not in the section the insertion is dropped,
        not appended.
        """
        logger.info("Edit: insert_block_after section=%s block=%s new=%s", section_id, block_id, new_block.id)

        def _insert(sec: Section) -> Section:
            idx = sec.block_index(block_id)
            if idx == -1:
                return sec
            return replace(sec, content=sec.content[:idx + 1] + (new_block,) + sec.content[idx + 1:])

        return self._finish("insert_block_after", tree, find_and_transform_section(tree, section_id, _insert), section_id, block_id)

    def update_block_content(
        self,
        tree: DocumentTree,
        section_id: str,
        block_id: str,
        new_content: str,
    ) -> DocumentTree:
        """Replace the markup of one block, keeping its id and position."""
        logger.debug("Edit: update_block_content section=%s block=%s", section_id, block_id)

        def _update(sec: Section) -> Section:
            idx = sec.block_index(block_id)
            if idx == -1 or sec.content[idx].content == new_content:
                return sec
            updated = replace(sec.content[idx], content=new_content)
            return replace(sec, content=sec.content[:idx] + (updated,) + sec.content[idx + 1:])

        new_tree = find_and_transform_section(tree, section_id, _update)
        if new_tree is tree:
            logger.debug("Edit noop: update_block_content section=%s block=%s", section_id, block_id)
        return new_tree

    def remove_block(self, tree: DocumentTree, section_id: str, block_id: str) -> RemovalResult:
        """Remove one block and work out which block should be focused next.

        Focus policy, evaluated on the pre-removal block list:
        - several blocks: the predecessor, or the successor when the first
          block was removed;
        - a single block: None (the section is left empty).

        A focus found in a descendant is only propagated upward when the
        ancestor level did not determine one itself.
        """
        logger.info("Edit: remove_block section=%s block=%s", section_id, block_id)
        new_tree, focus, removed = self._remove_from(tree, section_id, block_id)
        if not removed:
            logger.info("Edit noop: remove_block target_not_found section=%s block=%s", section_id, block_id)
            return RemovalResult(tree, None, False)
        logger.info(
            "Edit OK: remove_block section=%s block=%s focus=%s",
            section_id,
            block_id,
            focus.block_id if focus else None,
        )
        return RemovalResult(new_tree, focus, True)

    def rename_section(self, tree: DocumentTree, section_id: str, new_name: str) -> DocumentTree:
        """Rewrite only the ``name`` of a section."""
        logger.info("Edit: rename_section section=%s", section_id)

        def _rename(sec: Section) -> Section:
            if sec.name == new_name:
                return sec
            return replace(sec, name=new_name)

        new_tree = find_and_transform_section(tree, section_id, _rename)
        if new_tree is tree:
            if find_section(tree, section_id) is None:
                logger.info("Edit noop: rename_section target_not_found section=%s", section_id)
            return tree
        logger.info("Edit OK: rename_section section=%s", section_id)
        return new_tree

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _finish(
        self,
        operation: str,
        tree: DocumentTree,
        new_tree: DocumentTree,
        section_id: str,
        block_id: str,
    ) -> DocumentTree:
        if new_tree is tree:
            logger.info("Edit noop: %s target_not_found section=%s block=%s", operation, section_id, block_id)
        else:
            logger.info("Edit OK: %s section=%s block=%s", operation, section_id, block_id)
        return new_tree

    def _remove_from(
        self,
        sections: DocumentTree,
        section_id: str,
        block_id: str,
    ) -> Tuple[DocumentTree, Optional[FocusRequest], bool]:
        next_focus: Optional[FocusRequest] = None
        removed = False
        result: List[Section] = []
        for sec in sections:
            if sec.id == section_id:
                idx = sec.block_index(block_id)
                if idx == -1:
                    result.append(sec)
                    continue
                if len(sec.content) > 1:
                    neighbour = sec.content[idx - 1] if idx > 0 else sec.content[idx + 1]
                    next_focus = FocusRequest(section_id, neighbour.id)
                else:
                    next_focus = None
                removed = True
                result.append(replace(sec, content=sec.content[:idx] + sec.content[idx + 1:]))
                continue

            new_subs, child_focus, child_removed = self._remove_from(sec.subsections, section_id, block_id)
            # Own-level determination wins over a descendant's
            if child_focus is not None and next_focus is None:
                next_focus = child_focus
            if child_removed:
                removed = True
                result.append(replace(sec, subsections=new_subs))
            else:
                result.append(sec)
        if not removed:
            return sections, next_focus, False
        return tuple(result), next_focus, True

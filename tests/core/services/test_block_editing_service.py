"""Tests for the BlockEditingService tree transforms."""

import pytest

from outline_editor.core.document_store import find_section, validate_unique_ids
from outline_editor.core.models import Block, FocusRequest, Section
from outline_editor.core.services.block_editing_service import (
    BlockEditingService,
    RemovalResult,
)


@pytest.fixture
def single_block_tree():
    return (Section("S", "Section", (Block("b1", "hello"),)),)


@pytest.fixture
def three_block_tree():
    return (Section("S", "Section", (Block("b0", "zero"), Block("b1", "one"), Block("b2", "two"))),)


class TestSplitBlock:

    def test_split_replaces_block_with_two_new_blocks(self, service, single_block_tree):
        new_tree = service.split_block(single_block_tree, "S", "b1", "hel", "lo", "b2", "b3")
        assert new_tree[0].content == (Block("b2", "hel"), Block("b3", "lo"))

    def test_split_keeps_neighbours(self, service, three_block_tree):
        new_tree = service.split_block(three_block_tree, "S", "b1", "o", "ne", "n1", "n2")
        assert [b.id for b in new_tree[0].content] == ["b0", "n1", "n2", "b2"]
        assert new_tree[0].content[0] is three_block_tree[0].content[0]

    def test_split_nested_section(self, service, sample_tree):
        new_tree = service.split_block(sample_tree, "cnn", "cnn-3", "Later", " work followed.", "n1", "n2")
        cnn = find_section(new_tree, "cnn")
        assert [b.id for b in cnn.content] == ["cnn-1", "cnn-2", "n1", "n2"]
        assert new_tree[0] is sample_tree[0]

    def test_split_with_empty_halves(self, service, single_block_tree):
        new_tree = service.split_block(single_block_tree, "S", "b1", "hello", "", "b2", "b3")
        assert new_tree[0].content == (Block("b2", "hello"), Block("b3", ""))

    def test_split_block_in_wrong_section_is_noop(self, service, sample_tree):
        assert service.split_block(sample_tree, "cv", "cnn-1", "a", "b", "n1", "n2") is sample_tree


class TestInsertBlockAfter:

    def test_insert_after_block(self, service, three_block_tree):
        new_tree = service.insert_block_after(three_block_tree, "S", "b1", Block("new"))
        assert [b.id for b in new_tree[0].content] == ["b0", "b1", "new", "b2"]
        assert new_tree[0].content[2].content == ""

    def test_insert_after_last_block(self, service, three_block_tree):
        new_tree = service.insert_block_after(three_block_tree, "S", "b2", Block("new"))
        assert [b.id for b in new_tree[0].content] == ["b0", "b1", "b2", "new"]

    def test_insert_with_missing_anchor_is_dropped(self, service, three_block_tree):
        new_tree = service.insert_block_after(three_block_tree, "S", "missing", Block("new"))
        assert new_tree is three_block_tree
        assert "new" not in [b.id for b in new_tree[0].content]


class TestUpdateBlockContent:

    def test_update_replaces_content_only(self, service, three_block_tree):
        new_tree = service.update_block_content(three_block_tree, "S", "b1", "ONE")
        assert new_tree[0].content[1] == Block("b1", "ONE")
        assert new_tree[0].content[0] is three_block_tree[0].content[0]
        assert new_tree[0].name == "Section"

    def test_update_with_same_content_returns_same_tree(self, service, three_block_tree):
        assert service.update_block_content(three_block_tree, "S", "b1", "one") is three_block_tree

    def test_update_nested(self, service, sample_tree):
        new_tree = service.update_block_content(sample_tree, "gen", "gen-1", "rewritten")
        assert find_section(new_tree, "gen").content[0].content == "rewritten"


class TestRemoveBlock:

    def test_remove_middle_focuses_predecessor(self, service, three_block_tree):
        result = service.remove_block(three_block_tree, "S", "b1")
        assert isinstance(result, RemovalResult)
        assert result.removed
        assert [b.id for b in result.tree[0].content] == ["b0", "b2"]
        assert result.focus == FocusRequest("S", "b0")

    def test_remove_first_focuses_successor(self, service, three_block_tree):
        result = service.remove_block(three_block_tree, "S", "b0")
        assert [b.id for b in result.tree[0].content] == ["b1", "b2"]
        assert result.focus == FocusRequest("S", "b1")

    def test_remove_last_focuses_predecessor(self, service, three_block_tree):
        result = service.remove_block(three_block_tree, "S", "b2")
        assert result.focus == FocusRequest("S", "b1")

    def test_remove_only_block_leaves_empty_section(self, service):
        tree = (Section("S", "Section", (Block("x"),)),)
        result = service.remove_block(tree, "S", "x")
        assert result.removed
        assert result.tree[0].content == ()
        assert result.focus is None

    def test_remove_nested_block(self, service, sample_tree):
        result = service.remove_block(sample_tree, "cnn", "cnn-2")
        assert [b.id for b in find_section(result.tree, "cnn").content] == ["cnn-1", "cnn-3"]
        assert result.focus == FocusRequest("cnn", "cnn-1")
        assert result.tree[0] is sample_tree[0]

    def test_remove_nested_singleton(self, service, sample_tree):
        result = service.remove_block(sample_tree, "bert", "bert-1")
        assert find_section(result.tree, "bert").content == ()
        assert result.focus is None

    def test_remove_missing_block_is_noop(self, service, three_block_tree):
        result = service.remove_block(three_block_tree, "S", "missing")
        assert result.tree is three_block_tree
        assert result.focus is None
        assert not result.removed


class TestRenameSection:

    def test_rename_only_changes_name(self, service, sample_tree):
        new_tree = service.rename_section(sample_tree, "bert", "Encoders")
        bert = find_section(new_tree, "bert")
        assert bert.name == "Encoders"
        assert bert.content is find_section(sample_tree, "bert").content

    def test_rename_to_same_name_is_noop(self, service, sample_tree):
        assert service.rename_section(sample_tree, "cv", "Computer Vision") is sample_tree

    def test_rename_missing_section_is_noop(self, service, sample_tree):
        assert service.rename_section(sample_tree, "missing", "X") is sample_tree


def test_ids_stay_unique_across_edits(service, sample_tree, id_factory):
    tree = sample_tree
    tree = service.split_block(tree, "nlp", "nlp-1", "Trans", "formers", id_factory(), id_factory())
    first = tree[0].content[0].id
    tree = service.insert_block_after(tree, "nlp", first, Block(id_factory()))
    tree = service.split_block(tree, "cnn", "cnn-2", "", "all", id_factory(), id_factory())
    tree = service.insert_block_after(tree, "cnn", "cnn-3", Block(id_factory()))
    assert validate_unique_ids(tree) == []
    assert len(tree[0].content) == 3


@pytest.mark.parametrize(
    "operation",
    [
        lambda s, t: s.split_block(t, "cnn", "ghost", "a", "b", "n1", "n2"),
        lambda s, t: s.insert_block_after(t, "cnn", "ghost", Block("n1")),
        lambda s, t: s.update_block_content(t, "cnn", "ghost", "text"),
        lambda s, t: s.remove_block(t, "cnn", "ghost").tree,
        lambda s, t: s.split_block(t, "ghost-section", "cnn-1", "a", "b", "n1", "n2"),
    ],
)
def test_stale_ids_leave_tree_unchanged(service, sample_tree, operation):
    new_tree = operation(service, sample_tree)
    assert new_tree == sample_tree
    assert new_tree is sample_tree


def test_service_is_stateless(sample_tree):
    a, b = BlockEditingService(), BlockEditingService()
    assert a.rename_section(sample_tree, "cv", "V") == b.rename_section(sample_tree, "cv", "V")

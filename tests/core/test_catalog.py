import pytest

from outline_editor.core.catalog import TokenCatalog
from outline_editor.core.exceptions import UnknownTokenError
from outline_editor.core.settings import EditorSettings


def test_catalog_keeps_order(catalog):
    assert list(catalog)[0] == "brown2020gpt3"
    assert len(catalog) == 5
    assert catalog[1] == "vaswani2017attention"


def test_catalog_drops_duplicates_keeping_first_position():
    cat = TokenCatalog(["b", "a", "b", "c", "a"])
    assert list(cat) == ["b", "a", "c"]


def test_catalog_deduplicates_after_string_conversion():
    cat = TokenCatalog([1, "1", 2, "2"])
    assert list(cat) == ["1", "2"]
    assert len(cat) == 2


def test_membership_and_index(catalog):
    assert "he2016resnet" in catalog
    assert "unknown2024" not in catalog
    assert catalog.index_of("devlin2018bert") == 2
    assert catalog.index_of("unknown2024") == -1


def test_require_unknown_raises(catalog):
    assert catalog.require("brown2020gpt3") == "brown2020gpt3"
    with pytest.raises(UnknownTokenError) as exc:
        catalog.require("unknown2024")
    assert exc.value.item_id == "unknown2024"
    assert exc.value.available == list(catalog)
    assert "[unknown2024]" in str(exc.value)


def test_catalog_equality_and_hash():
    assert TokenCatalog(["a", "b"]) == TokenCatalog(["a", "b"])
    assert TokenCatalog(["a", "b"]) != TokenCatalog(["b", "a"])
    assert hash(TokenCatalog(["a"])) == hash(TokenCatalog(["a"]))


def test_catalog_from_config_mapping():
    cat = TokenCatalog.from_config({"catalog": ["x1", "x2"]})
    assert list(cat) == ["x1", "x2"]
    assert len(TokenCatalog.from_config({})) == 0


def test_catalog_from_packaged_config(catalog):
    cat = TokenCatalog.from_config()
    assert cat == catalog


class TestEditorSettings:

    def test_defaults(self):
        settings = EditorSettings()
        assert settings.trigger_character == "/"
        assert settings.token_class == "inline-item"
        assert len(settings.catalog) == 0

    def test_from_packaged_config(self, catalog):
        settings = EditorSettings.from_config()
        assert settings.trigger_character == "/"
        assert settings.token_class == "inline-item"
        assert "\u200b" in settings.zero_width_characters
        assert settings.catalog == catalog

    def test_from_mapping(self):
        settings = EditorSettings.from_config(
            {"trigger_character": "@", "token_class": "cite", "catalog": ["k"]}
        )
        assert settings.trigger_character == "@"
        assert settings.token_class == "cite"
        assert list(settings.catalog) == ["k"]

    def test_rejects_multi_character_trigger(self):
        with pytest.raises(ValueError):
            EditorSettings.from_config({"trigger_character": "//"})

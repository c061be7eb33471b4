"""Tests for ConfigManager overrides and setup_logging."""

import logging
import os

import pytest

from outline_editor.config import ConfigManager
from outline_editor.core.settings import EditorSettings
from outline_editor.logging_config import setup_logging


@pytest.fixture
def user_config_dir():
    path = os.environ["OUTLINE_EDITOR_CONFIG_DIR"]
    os.makedirs(path, exist_ok=True)
    return path


@pytest.fixture
def restore_logging():
    """Put root and module loggers back the way the test found them."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_level)
    for name in ("outline_editor.app",):
        module_logger = logging.getLogger(name)
        for handler in list(module_logger.handlers):
            module_logger.removeHandler(handler)
            handler.close()
        module_logger.setLevel(logging.NOTSET)


class TestConfigManager:

    def test_is_singleton(self):
        assert ConfigManager() is ConfigManager()

    def test_packaged_defaults(self):
        cfg = ConfigManager().get_editor_config()
        assert cfg["trigger_character"] == "/"
        assert cfg["token_class"] == "inline-item"
        assert cfg["catalog"][-1] == "he2016resnet"
        assert ConfigManager().get_logging_config()["version"] == 1

    def test_user_override_merges_over_defaults(self, user_config_dir):
        with open(os.path.join(user_config_dir, "editor.yml"), "w", encoding="utf-8") as fh:
            fh.write('trigger_character: "@"\ncatalog: [smith2021]\n')
        ConfigManager.reset()

        cfg = ConfigManager().get_editor_config()
        assert cfg["trigger_character"] == "@"
        assert cfg["token_class"] == "inline-item"

        settings = EditorSettings.from_config()
        assert settings.trigger_character == "@"
        assert list(settings.catalog) == ["smith2021"]

    def test_invalid_user_file_keeps_defaults(self, user_config_dir):
        with open(os.path.join(user_config_dir, "editor.yml"), "w", encoding="utf-8") as fh:
            fh.write("catalog: [unclosed\n")
        ConfigManager.reset()
        assert ConfigManager().get_editor_config()["trigger_character"] == "/"


class TestSetupLogging:

    def test_creates_log_directory(self, tmp_path, monkeypatch, restore_logging):
        log_dir = tmp_path / "logs"
        monkeypatch.setenv("OUTLINE_EDITOR_LOG_DIR", str(log_dir))

        setup_logging()

        assert log_dir.is_dir()
        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        assert file_handlers
        assert file_handlers[0].baseFilename == str(log_dir / "editor.log")

    def test_debug_module_override(self, tmp_path, monkeypatch, restore_logging):
        monkeypatch.setenv("OUTLINE_EDITOR_LOG_DIR", str(tmp_path / "logs"))
        monkeypatch.setenv("OUTLINE_EDITOR_DEBUG_MODULES", "outline_editor.app")

        setup_logging()

        assert logging.getLogger("outline_editor.app").level == logging.DEBUG

    def test_missing_config_falls_back_to_console(self, tmp_path, monkeypatch, restore_logging):
        monkeypatch.setenv("OUTLINE_EDITOR_LOG_DIR", str(tmp_path / "logs"))
        monkeypatch.setattr(ConfigManager, "get_logging_config", lambda self: {})

        setup_logging()

        assert not (tmp_path / "logs").exists()
        assert any(isinstance(h, logging.StreamHandler) for h in logging.getLogger().handlers)

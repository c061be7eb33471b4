from __future__ import annotations

"""Configuration loading and access helpers.

This module centralises the declarative editor rules (trigger character,
token markup class, zero-width filler characters, token catalog) and the
logging setup. It loads YAML files packaged with *outline_editor* and
optionally merges them with user overrides.

User overrides are looked up in ``$OUTLINE_EDITOR_CONFIG_DIR`` when set,
otherwise in ``~/.outline_editor/*.yml``.
"""

import importlib.resources as pkg_resources
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager"]


def _get_user_config_dir() -> Path:
    """Get the user configuration directory."""
    override = os.environ.get("OUTLINE_EDITOR_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".outline_editor"


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "editor": "editor.yml",
        "logging": "logging.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_editor_config(self) -> Dict[str, Any]:
        return self._data.get("editor", {})

    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    @classmethod
    def reset(cls) -> None:
        """Drop the cached instance so the next call reloads from disk."""
        cls._instance = None

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        startup_summary = []
        user_config_dir = _get_user_config_dir()

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = {}
            status = "missing"

            # 1. load packaged default
            try:
                text = pkg_resources.files(__package__).joinpath(filename).read_text(encoding="utf-8")
                merged_cfg.update(yaml.safe_load(text) or {})
                status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                status = "invalid"

            # 2. load user overrides
            user_path = user_config_dir / filename
            if user_path.exists():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    merged_cfg.update(user_data)
                    if status == "loaded":
                        status = "loaded+overrides"
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.info("Config startup: %s", " | ".join(startup_summary))

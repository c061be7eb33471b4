from __future__ import annotations

"""Editor settings value object built from the ``editor`` config section."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from outline_editor.core.catalog import TokenCatalog
from outline_editor.core.markup import DEFAULT_TOKEN_CLASS, DEFAULT_ZERO_WIDTH

__all__ = ["EditorSettings"]


@dataclass(frozen=True)
class EditorSettings:
    """Editing rules shared by every block surface.

    Attributes
    ----------
    catalog
        Ordered token catalog offered by the suggestion list.
    trigger_character
        Character that opens the suggestion list.
    token_class
        Class marking token chips in block markup.
    zero_width_characters
        Filler characters ignored by the empty-block check.
    """

    catalog: TokenCatalog = field(default_factory=lambda: TokenCatalog(()))
    trigger_character: str = "/"
    token_class: str = DEFAULT_TOKEN_CLASS
    zero_width_characters: Tuple[str, ...] = DEFAULT_ZERO_WIDTH

    @classmethod
    def from_config(cls, editor_config: Optional[Dict[str, Any]] = None) -> "EditorSettings":
        """Build settings from the editor config, defaulting missing keys."""
        if editor_config is None:
            from outline_editor.config import ConfigManager

            editor_config = ConfigManager().get_editor_config()
        trigger = str(editor_config.get("trigger_character") or "/")
        if len(trigger) != 1:
            raise ValueError(f"trigger_character must be a single character, got {trigger!r}")
        zero_width = editor_config.get("zero_width_characters")
        return cls(
            catalog=TokenCatalog.from_config(editor_config),
            trigger_character=trigger,
            token_class=str(editor_config.get("token_class") or DEFAULT_TOKEN_CLASS),
            zero_width_characters=tuple(zero_width) if zero_width is not None else DEFAULT_ZERO_WIDTH,
        )

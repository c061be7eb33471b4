"""Controllers package (UI-agnostic coordination between surfaces and services)."""

from .editor_controller import EditorController

__all__ = ["EditorController"]

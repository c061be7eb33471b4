"""Top-level package for the outline editor core.

Front-ends (a browser bridge, a TUI, tests) should only depend on the public
API exposed here rather than importing internal modules directly.
"""

from .app import build_editor
from .core.catalog import TokenCatalog
from .core.document_store import DocumentStore
from .core.models import Block, FocusRequest, Section
from .core.services import BlockEditingService
from .core.settings import EditorSettings
from .ui.controllers import EditorController

__all__: list[str] = [
    "Block",
    "BlockEditingService",
    "DocumentStore",
    "EditorController",
    "EditorSettings",
    "FocusRequest",
    "Section",
    "TokenCatalog",
    "build_editor",
]

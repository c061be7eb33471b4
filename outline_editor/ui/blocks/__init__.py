"""Per-block editing surfaces, the token suggestion list and focus delivery."""

from .focus_coordinator import FocusCoordinator
from .surface import EditingSurface
from .surface_adapter import SurfaceAdapter
from .token_resolver import ResolverState, TokenResolver

__all__ = [
    "EditingSurface",
    "FocusCoordinator",
    "ResolverState",
    "SurfaceAdapter",
    "TokenResolver",
]

from __future__ import annotations

"""Fixed, ordered catalog of valid token identifiers."""

from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from outline_editor.core.exceptions import UnknownTokenError

__all__ = ["TokenCatalog"]


class TokenCatalog:
    """Immutable ordered set of token identifiers.

    Order is the display order of the suggestion list and the modulus of
    its index wraparound. Duplicates in the input keep their first position.
    """

    __slots__ = ("_ids", "_members")

    def __init__(self, ids: Iterable[str]) -> None:
        ordered: list[str] = []
        for raw_id in ids:
            token_id = str(raw_id)
            if token_id not in ordered:
                ordered.append(token_id)
        self._ids: Tuple[str, ...] = tuple(ordered)
        self._members = frozenset(self._ids)

    @classmethod
    def from_config(cls, editor_config: Optional[Dict[str, Any]] = None) -> "TokenCatalog":
        """Build the catalog from the ``catalog`` list of the editor config."""
        if editor_config is None:
            from outline_editor.config import ConfigManager

            editor_config = ConfigManager().get_editor_config()
        return cls(editor_config.get("catalog") or [])

    def __contains__(self, token_id: object) -> bool:
        return token_id in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __getitem__(self, index: int) -> str:
        return self._ids[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TokenCatalog):
            return self._ids == other._ids
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._ids)

    def __repr__(self) -> str:
        return f"TokenCatalog({list(self._ids)!r})"

    def require(self, token_id: str) -> str:
        """Return *token_id* if it is a catalog member, else raise."""
        if token_id not in self._members:
            raise UnknownTokenError(token_id, list(self._ids))
        return token_id

    def index_of(self, token_id: str) -> int:
        """Return the display position of *token_id*, or -1."""
        try:
            return self._ids.index(token_id)
        except ValueError:
            return -1

"""An immutable chain of key/value pairs passed down a call tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_ROOT = object()


@dataclass(frozen=True)
class Context:
    """A context; Context() is the empty root."""

    parent: Context | None = None
    key: Any = _ROOT
    val: Any = None

    def _lookup(self, key: Any) -> tuple[bool, Any]:
        node: Context | None = self
        while node is not None:
            if node.key is not _ROOT and node.key == key:
                return True, node.val
            node = node.parent
        return False, None

    def value(self, key: Any) -> Any:
        """Return the value stored for key, or None."""
        return self._lookup(key)[1]


def new_context(ctx: Context, key: Any, value: Any) -> Context:
    """Return a child of ctx that carries value under key."""
    return Context(ctx, key, value)


def from_context(ctx: Context, key: Any) -> tuple[Any, bool]:
    """Return (value, True) if key is set in ctx, else (None, False)."""
    found, value = ctx._lookup(key)
    if not found or value is None:
        return None, False
    return value, True
"""Capability guard: only portable related models may be exported or imported."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from portable_model.core.errors import NotPortableError
from portable_model.core.portable import PortableModel

if TYPE_CHECKING:  # pragma: no cover
    from portable_model.core.association import AssociationHandle


def is_portable(model: Any) -> bool:
    """Return True if `model` is a class that includes `PortableModel`."""
    return isinstance(model, type) and issubclass(model, PortableModel)


def require_portable(handle: "AssociationHandle") -> None:
    """Raise `NotPortableError` unless the handle's related model is portable.

    Checked on every call; model capability is never memoized.
    """
    if not is_portable(handle.related):
        raise NotPortableError(handle.name, handle.related.__name__)


__all__ = ["is_portable", "require_portable"]

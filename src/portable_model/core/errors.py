"""Exception hierarchy for association export/import.

Every error raised by this package derives from `PortableError` and also from
the built-in exception closest to its meaning, so callers can catch either.

Failures delegated to collaborators are not wrapped:
- the related model's own `import_from_hash` errors (validation, unknown keys)
- SQLAlchemy storage errors and file-system `OSError`s
"""

from __future__ import annotations


class PortableError(Exception):
    """Base class for portable association errors."""


class NotPortableError(PortableError, TypeError):
    """The association's related model does not include `PortableModel`."""

    def __init__(self, association_name: str, model_name: str):
        super().__init__(f"{association_name}:{model_name} is not portable")
        self.association_name = association_name
        self.model_name = model_name


class MalformedDocumentError(PortableError, ValueError):
    """A decoded document does not have the shape the association expects."""


class AssociationAlreadyBoundError(PortableError, RuntimeError):
    """A singular association already has a target; import refuses to replace it."""

    def __init__(self, association_name: str):
        super().__init__(f"{association_name}: cannot replace existing association record")
        self.association_name = association_name


class UnsupportedAssociationError(PortableError, ValueError):
    """The named relationship is missing or is not a one-to-one/one-to-many link."""


class DetachedOwnerError(PortableError, RuntimeError):
    """The association owner is not attached to a Session."""


__all__ = [
    "AssociationAlreadyBoundError",
    "DetachedOwnerError",
    "MalformedDocumentError",
    "NotPortableError",
    "PortableError",
    "UnsupportedAssociationError",
]

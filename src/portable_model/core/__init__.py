"""portable_model core: capability guard, association handles and the serializer.

This package must not import `portable_model.io` or the CLI.
"""

from __future__ import annotations

from .association import AssociationHandle, Cardinality, association
from .capability import is_portable, require_portable
from .errors import (
    AssociationAlreadyBoundError,
    DetachedOwnerError,
    MalformedDocumentError,
    NotPortableError,
    PortableError,
    UnsupportedAssociationError,
)
from .portable import PortableModel
from .serializer import export_association, import_association
from .transaction import owner_transaction

__all__ = [
    "AssociationHandle",
    "Cardinality",
    "association",
    "is_portable",
    "require_portable",
    "AssociationAlreadyBoundError",
    "DetachedOwnerError",
    "MalformedDocumentError",
    "NotPortableError",
    "PortableError",
    "UnsupportedAssociationError",
    "PortableModel",
    "export_association",
    "import_association",
    "owner_transaction",
]

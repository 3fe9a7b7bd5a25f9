"""Export/import an association to and from a document file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from portable_model.core.association import AssociationHandle
from portable_model.core.capability import require_portable
from portable_model.core.serializer import export_association, import_association

from .document import read_document, write_document

logger = logging.getLogger(__name__)


def export_to_file(handle: AssociationHandle, path: str | Path) -> Path:
    """Export the association to `path` (YAML, or JSON for a `.json` suffix)."""
    require_portable(handle)

    out = write_document(path, export_association(handle))
    logger.info("exported %s to %s", handle.name, out)
    return out


def import_from_file(handle: AssociationHandle, path: str | Path) -> Any:
    """Import the association from the document stored at `path`.

    The capability check runs before the file is opened.
    """
    require_portable(handle)

    document = read_document(path)
    result = import_association(handle, document)
    logger.info("imported %s from %s", handle.name, path)
    return result


__all__ = ["export_to_file", "import_from_file"]

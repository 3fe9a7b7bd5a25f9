"""portable_model — export/import of ORM associations as portable documents.

A mapped class that includes `PortableModel` can have its one-to-one and
one-to-many associations written to a YAML (or JSON) document and read back
into another owner, with every imported record re-bound to that owner.
"""

from __future__ import annotations

from portable_model.core import (
    AssociationAlreadyBoundError,
    MalformedDocumentError,
    NotPortableError,
    PortableError,
    PortableModel,
    association,
    export_association,
    import_association,
)
from portable_model.io import export_to_file, import_from_file

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AssociationAlreadyBoundError",
    "MalformedDocumentError",
    "NotPortableError",
    "PortableError",
    "PortableModel",
    "association",
    "export_association",
    "import_association",
    "export_to_file",
    "import_from_file",
]

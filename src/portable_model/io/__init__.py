"""Document I/O for portable associations.

- `document`: YAML/JSON encoding and file read/write
- `files`: association export/import to and from document files
"""

from __future__ import annotations

from .document import document_format, dump_document, load_document, read_document, write_document
from .files import export_to_file, import_from_file

__all__ = [
    "document_format",
    "dump_document",
    "export_to_file",
    "import_from_file",
    "load_document",
    "read_document",
    "write_document",
]

"""Portable document encoding and file read/write.

A portable document is one record hash (singular association), `null` (empty
singular association) or a list of record hashes (collective association).

Format is chosen from the path suffix:
- `.json` -> JSON (`indent=2`, `sort_keys=True`, newline-terminated)
- anything else (`.yml`, `.yaml`, ...) -> YAML, keys kept in record order

Scalars beyond plain YAML/JSON types:
- YAML: dates and datetimes are native; `Decimal` is written as a `!decimal`
  tagged string and read back as `Decimal`
- JSON: date/datetime/time are written with `isoformat()` and `Decimal` as a
  string; `PortableModel.import_from_hash` converts them back by column type

YAML is loaded with a `yaml.SafeLoader` subclass that only adds `!decimal`.
"""

from __future__ import annotations

import datetime
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from portable_model.core.errors import MalformedDocumentError

YAML = "yaml"
JSON = "json"

_SUFFIX_FORMATS = {
    ".json": JSON,
    ".yaml": YAML,
    ".yml": YAML,
}

DECIMAL_TAG = "!decimal"


class _DocumentDumper(yaml.SafeDumper):
    pass


class _DocumentLoader(yaml.SafeLoader):
    pass


def _represent_decimal(dumper: yaml.SafeDumper, value: Decimal) -> yaml.ScalarNode:
    return dumper.represent_scalar(DECIMAL_TAG, str(value))


def _construct_decimal(loader: yaml.SafeLoader, node: yaml.Node) -> Decimal:
    return Decimal(loader.construct_scalar(node))


_DocumentDumper.add_representer(Decimal, _represent_decimal)
_DocumentLoader.add_constructor(DECIMAL_TAG, _construct_decimal)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime.date, datetime.datetime, datetime.time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def document_format(path: str | Path) -> str:
    """Return the document format for `path` (YAML unless the suffix says JSON)."""
    return _SUFFIX_FORMATS.get(Path(path).suffix.lower(), YAML)


def dump_document(document: Any, fmt: str = YAML) -> str:
    if fmt == JSON:
        return json.dumps(document, indent=2, sort_keys=True, default=_json_default) + "\n"
    if fmt == YAML:
        return yaml.dump(
            document,
            Dumper=_DocumentDumper,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    raise ValueError(f"dump_document: unknown format {fmt!r}")


def load_document(text: str, fmt: str = YAML, *, where: str = "document") -> Any:
    """Decode document text.

    Raises:
        MalformedDocumentError: if the text is not valid YAML/JSON.
    """
    try:
        if fmt == JSON:
            return json.loads(text)
        if fmt == YAML:
            return yaml.load(text, Loader=_DocumentLoader)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise MalformedDocumentError(f"{where}: cannot decode {fmt} document: {e}") from e
    raise ValueError(f"load_document: unknown format {fmt!r}")


def write_document(path: str | Path, document: Any) -> Path:
    """Encode `document` and write it to `path`, overwriting any existing file."""
    p = Path(path)
    text = dump_document(document, document_format(p))
    with p.open("w", encoding="utf-8", newline="") as f:
        f.write(text)
    return p


def read_document(path: str | Path) -> Any:
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    return load_document(text, document_format(p), where=str(p))


__all__ = [
    "JSON",
    "YAML",
    "document_format",
    "dump_document",
    "load_document",
    "read_document",
    "write_document",
]

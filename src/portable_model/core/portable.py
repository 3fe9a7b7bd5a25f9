"""The `PortableModel` mixin.

Including `PortableModel` in a declarative mapped class marks it as portable
and gives it the per-record routines the association serializer delegates to:

- `export_to_hash()` turns one record into a plain dict
- `import_from_hash()` materializes one record from such a dict

Per-class configuration (plain class attributes, not mapped):

- `__portable_excludes__`: column attributes left out of exported hashes
- `__portable_includes__`: relationships exported/imported along with the
  record, nested under their own name (their related model must be portable too)

Primary-key attributes are never exported and are ignored on import.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def _primary_key_attrs(mapper: Any) -> set[str]:
    return {mapper.get_property_by_column(column).key for column in mapper.primary_key}


_FROM_TEXT = {
    datetime.datetime: datetime.datetime.fromisoformat,
    datetime.date: datetime.date.fromisoformat,
    datetime.time: datetime.time.fromisoformat,
    Decimal: Decimal,
}


def _from_text(column_type: Any, value: Any, *, where: str) -> Any:
    """Convert text written by a JSON document back to the column's Python type."""
    if not isinstance(value, str):
        return value
    try:
        python_type = column_type.python_type
    except NotImplementedError:
        return value
    convert = _FROM_TEXT.get(python_type)
    if convert is None:
        return value
    try:
        return convert(value)
    except (ValueError, InvalidOperation) as e:
        raise ValueError(f"{where}: expected {python_type.__name__}, got {value!r}") from e


class PortableModel:
    """Marker mixin for mapped classes whose records can be exported/imported."""

    __portable_excludes__ = ()
    __portable_includes__ = ()

    def export_to_hash(self) -> dict[str, Any]:
        from portable_model.core.association import association
        from portable_model.core.serializer import export_association

        mapper = sa_inspect(type(self))
        skipped = _primary_key_attrs(mapper) | set(self.__portable_excludes__)

        record_hash: dict[str, Any] = {}
        for attr in mapper.column_attrs:
            if attr.key not in skipped:
                record_hash[attr.key] = getattr(self, attr.key)
        for name in self.__portable_includes__:
            record_hash[name] = export_association(association(self, name))
        return record_hash

    @classmethod
    def import_from_hash(cls, record_hash: Mapping[str, Any], *, session: Session) -> "PortableModel":
        """Create, add and flush one record, then import its included associations.

        Raises:
            ValueError: if the hash names an attribute the model does not have.
        """
        from portable_model.core.association import association
        from portable_model.core.serializer import import_association

        mapper = sa_inspect(cls)
        columns = {attr.key: attr.columns[0].type for attr in mapper.column_attrs}
        primary_keys = _primary_key_attrs(mapper)

        values: dict[str, Any] = {}
        nested: dict[str, Any] = {}
        for key, value in record_hash.items():
            if key in cls.__portable_includes__:
                nested[key] = value
            elif key in primary_keys:
                logger.debug("%s: ignoring primary key %r=%r in imported hash", cls.__name__, key, value)
            elif key in columns:
                values[key] = _from_text(columns[key], value, where=f"{cls.__name__}.{key}")
            else:
                raise ValueError(f"{cls.__name__}: unknown attribute {key!r}")

        record = cls(**values)
        session.add(record)
        # Flush so constraint failures surface inside the caller's transaction
        # and the new primary key is available to nested associations.
        session.flush()

        for name, document in nested.items():
            if document is None:
                # Empty singular include exported as null.
                continue
            import_association(association(record, name), document)
        return record


__all__ = ["PortableModel"]

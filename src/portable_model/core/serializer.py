"""Association serializer: export/import of a whole association.

One pair of entry points dispatches on `AssociationHandle.cardinality`:

SINGULAR
- export: `None` when there is no target, otherwise the target's record hash
- import: a single mapping; refused when a target already exists

COLLECTIVE
- export: list of record hashes in association order
- import: list of mappings, appended in document order after existing members

Every import injects the owner's key (`AssociationHandle.primary_key_hash`)
over whatever foreign-key value the document carries, and runs inside
`owner_transaction`, so a failure leaves the association unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from portable_model.core.association import AssociationHandle, Cardinality
from portable_model.core.capability import require_portable
from portable_model.core.errors import AssociationAlreadyBoundError, MalformedDocumentError
from portable_model.core.transaction import owner_transaction

logger = logging.getLogger(__name__)


def _require_record_hash(document: Any, *, where: str) -> Mapping[str, Any]:
    if not isinstance(document, Mapping):
        raise MalformedDocumentError(f"{where}: specified argument is not a hash, got {type(document).__name__}")
    return document


def _require_record_hashes(document: Any, *, where: str) -> list[Mapping[str, Any]]:
    if not isinstance(document, list):
        raise MalformedDocumentError(
            f"{where}: specified argument is not an array of hashes, got {type(document).__name__}"
        )
    for i, item in enumerate(document):
        if not isinstance(item, Mapping):
            raise MalformedDocumentError(
                f"{where}[{i}]: specified argument is not an array of hashes, got {type(item).__name__}"
            )
    return document


def _bind_to_owner(handle: AssociationHandle, record_hash: Mapping[str, Any]) -> dict[str, Any]:
    owner_key = handle.primary_key_hash()
    for key, value in owner_key.items():
        if key in record_hash and record_hash[key] != value:
            logger.debug("%s: overriding %s=%r from document with owner key %r", handle.name, key, record_hash[key], value)
    return {**record_hash, **owner_key}


def export_association(handle: AssociationHandle) -> Any:
    """Export the association to a record hash (singular) or list of hashes (collective)."""
    require_portable(handle)

    if handle.cardinality is Cardinality.SINGULAR:
        record = handle.target
        if record is None:
            logger.debug("%s: no associated record to export", handle.name)
            return None
        return record.export_to_hash()

    records = list(handle.target)
    logger.debug("%s: exporting %d %s record(s)", handle.name, len(records), handle.related.__name__)
    return [record.export_to_hash() for record in records]


def import_association(handle: AssociationHandle, document: Any) -> Any:
    """Import a decoded document into the association.

    Returns the new record (singular) or the list of new records (collective).

    Raises:
        NotPortableError: related model is not portable.
        MalformedDocumentError: document shape does not match the cardinality.
        AssociationAlreadyBoundError: singular association already has a target.
    """
    require_portable(handle)

    if handle.cardinality is Cardinality.SINGULAR:
        return _import_singular(handle, document)
    return _import_collective(handle, document)


def _import_singular(handle: AssociationHandle, document: Any) -> Any:
    record_hash = _require_record_hash(document, where=handle.name)

    with owner_transaction(handle) as session:
        if handle.target is not None:
            raise AssociationAlreadyBoundError(handle.name)
        record = handle.related.import_from_hash(_bind_to_owner(handle, record_hash), session=session)
        setattr(handle.owner, handle.name, record)
        session.flush()

    logger.debug("%s: imported 1 %s record", handle.name, handle.related.__name__)
    return record


def _import_collective(handle: AssociationHandle, document: Any) -> list[Any]:
    record_hashes = _require_record_hashes(document, where=handle.name)

    with owner_transaction(handle) as session:
        # Load current members before new rows exist, or the lazy load would
        # pick up the flushed records and extend() would add them twice.
        members = handle.target
        records = [
            handle.related.import_from_hash(_bind_to_owner(handle, record_hash), session=session)
            for record_hash in record_hashes
        ]
        members.extend(records)
        session.flush()

    logger.debug("%s: imported %d %s record(s)", handle.name, len(records), handle.related.__name__)
    return records


__all__ = ["export_association", "import_association"]

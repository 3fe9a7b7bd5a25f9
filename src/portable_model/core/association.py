"""Association handles over SQLAlchemy relationships.

A handle is a transient view of one relationship on one owner record. It is
built on demand by `association(owner, name)` and never cached: the target,
the owner's session and the owner's primary key are all read at call time.

Supported relationships (one-to-many direction, no secondary table):
- `uselist=False` -> `Cardinality.SINGULAR`   (zero-or-one related record)
- `uselist=True`  -> `Cardinality.COLLECTIVE` (ordered zero-or-many records)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import RelationshipDirection, Session, object_session

from portable_model.core.errors import DetachedOwnerError, UnsupportedAssociationError


class Cardinality(enum.Enum):
    SINGULAR = "singular"
    COLLECTIVE = "collective"


@dataclass(frozen=True)
class AssociationHandle:
    """A relationship `name` owned by `owner`, pointing at `related` records.

    `foreign_keys` holds `(related_attr, owner_attr)` pairs: each related-side
    attribute that must carry the owner's value of `owner_attr`.
    """

    owner: Any
    name: str
    related: type
    cardinality: Cardinality
    foreign_keys: tuple[tuple[str, str], ...]

    @property
    def session(self) -> Session:
        session = object_session(self.owner)
        if session is None:
            raise DetachedOwnerError(
                f"{self.name}: owner {type(self.owner).__name__} is not attached to a Session"
            )
        return session

    @property
    def target(self) -> Any:
        return getattr(self.owner, self.name)

    @property
    def foreign_key_name(self) -> str:
        return self.foreign_keys[0][0]

    def primary_key_hash(self) -> dict[str, Any]:
        """Return `{foreign_key_name: owner primary key}` for binding imported records.

        A pending owner is flushed first so that its primary key exists.
        """
        if sa_inspect(self.owner).pending:
            self.session.flush()
        return {related_attr: getattr(self.owner, owner_attr) for related_attr, owner_attr in self.foreign_keys}


def association(owner: Any, name: str) -> AssociationHandle:
    """Build a handle for relationship `name` on the mapped instance `owner`."""
    where = f"{type(owner).__name__}.{name}"
    mapper = sa_inspect(type(owner), raiseerr=False)
    if mapper is None:
        raise UnsupportedAssociationError(f"{where}: owner is not a mapped instance")
    prop = mapper.relationships.get(name)
    if prop is None:
        raise UnsupportedAssociationError(f"{where}: no such relationship")
    if prop.direction is not RelationshipDirection.ONETOMANY or prop.secondary is not None:
        raise UnsupportedAssociationError(
            f"{where}: expected a one-to-one or one-to-many relationship, got {prop.direction.name}"
        )

    related_mapper = prop.mapper
    foreign_keys = tuple(
        (
            related_mapper.get_property_by_column(remote).key,
            prop.parent.get_property_by_column(local).key,
        )
        for local, remote in prop.local_remote_pairs
    )

    return AssociationHandle(
        owner=owner,
        name=name,
        related=related_mapper.class_,
        cardinality=Cardinality.COLLECTIVE if prop.uselist else Cardinality.SINGULAR,
        foreign_keys=foreign_keys,
    )


__all__ = [
    "AssociationHandle",
    "Cardinality",
    "association",
]

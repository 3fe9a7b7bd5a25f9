"""Owner-scoped transactional scope for imports."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

from sqlalchemy.orm import Session

if TYPE_CHECKING:  # pragma: no cover
    from portable_model.core.association import AssociationHandle


@contextmanager
def owner_transaction(handle: "AssociationHandle") -> Iterator[Session]:
    """Run the enclosed block in one transaction on the association owner's session.

    Inside an existing transaction a SAVEPOINT is used, so a failure rolls back
    only the work done in this block and the caller still owns the final commit.
    Otherwise a new transaction is begun and committed when the block succeeds.

    Raises:
        DetachedOwnerError: the owner is not attached to a Session.
    """
    session = handle.session
    scope = session.begin_nested() if session.in_transaction() else session.begin()
    with scope:
        yield session


__all__ = ["owner_transaction"]

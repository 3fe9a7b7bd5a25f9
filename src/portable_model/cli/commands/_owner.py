"""Shared owner lookup for the export/import commands."""

from __future__ import annotations

import importlib
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portable_model.core import PortableError
from portable_model.db import create_engine, create_session_factory

DATABASE_ENVVAR = "PORTABLE_MODEL_DATABASE_URL"

# Reported as `error: ...` with exit code 1.
COMMAND_ERRORS = (PortableError, LookupError, ValueError, SQLAlchemyError, OSError)


def load_model(ref: str) -> type:
    """Resolve 'package.module:Class' to a mapped class."""
    if ":" not in ref:
        raise ValueError("expected format module:Class")
    module_name, class_name = (part.strip() for part in ref.split(":", 1))
    if not module_name or not class_name:
        raise ValueError("expected format module:Class")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"cannot import module {module_name!r}: {e}") from e
    model = getattr(module, class_name, None)
    if not isinstance(model, type) or sa_inspect(model, raiseerr=False) is None:
        raise ValueError(f"{ref}: not a mapped class")
    return model


def coerce_identity(model: type, raw: str) -> Any:
    """Convert a command-line id to the Python type of the model's primary key."""
    primary_key = sa_inspect(model).primary_key
    if len(primary_key) != 1:
        raise ValueError(f"{model.__name__}: composite primary keys are not supported")
    try:
        python_type = primary_key[0].type.python_type
    except NotImplementedError:
        return raw
    try:
        return python_type(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"--id: expected {python_type.__name__}, got {raw!r}") from e


@contextmanager
def open_owner(database: str, model: type, identity: Any) -> Iterator[tuple[Session, Any]]:
    """Yield `(session, owner)`; raises LookupError if no such owner exists."""
    engine = create_engine(database)
    try:
        with create_session_factory(engine)() as session:
            owner = session.get(model, identity)
            if owner is None:
                raise LookupError(f"{model.__name__} {identity!r} not found")
            yield session, owner
    finally:
        engine.dispose()

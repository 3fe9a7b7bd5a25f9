"""Engine and session helpers.

pysqlite defers BEGIN and handles SAVEPOINT poorly on its own; imports rely
on SAVEPOINTs for rollback, so SQLite engines created here use the event hooks
from the SQLAlchemy pysqlite documentation to emit BEGIN explicitly.
"""

from __future__ import annotations

from typing import Any

import sqlalchemy as sa
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


def _enable_sqlite_savepoints(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


def create_engine(url: str, *, echo: bool = False) -> Engine:
    engine = sa.create_engine(url, echo=echo)
    if engine.dialect.name == "sqlite" and engine.dialect.driver == "pysqlite":
        _enable_sqlite_savepoints(engine)
    return engine


def create_session_factory(engine: Engine) -> "sessionmaker[Session]":
    return sessionmaker(bind=engine)


__all__ = ["create_engine", "create_session_factory"]

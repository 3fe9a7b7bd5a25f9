"""Pytest configuration and shared models.

This repo follows the `src/` layout. Some environments may invoke a `pytest`
entrypoint from a different Python install than the one used for
`python -m pip install -e ...`, which can cause `import portable_model` to fail.

To keep the suite robust, we ensure `src/` is on `sys.path` during tests. The
insert runs at module import time rather than in a `pytest_configure()` hook
because the models below import `portable_model` when this module is loaded,
which happens before any hook runs.

The models below are importable as `conftest:<Model>` (the CLI tests rely on it).
"""

from __future__ import annotations

import datetime
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterator, List, Optional

import pytest
from sqlalchemy import ForeignKey, Numeric
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, relationship

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from portable_model.core import PortableModel  # noqa: E402
from portable_model.db import create_engine, create_session_factory  # noqa: E402


# =============================================================================
# Shared models
# =============================================================================


class Base(DeclarativeBase):
    pass


class Publisher(Base):
    __tablename__ = "publishers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str]


class Author(Base):
    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str]
    publisher_id: Mapped[Optional[int]] = mapped_column(ForeignKey("publishers.id"))

    publisher: Mapped[Optional[Publisher]] = relationship()
    profile: Mapped[Optional["Profile"]] = relationship(back_populates="author")
    books: Mapped[List["Book"]] = relationship(back_populates="author", order_by="Book.id")
    notes: Mapped[List["Note"]] = relationship(order_by="Note.id")
    royalties: Mapped[List["Royalty"]] = relationship(order_by="Royalty.id")


class Profile(PortableModel, Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(primary_key=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("authors.id"), unique=True)
    bio: Mapped[str]
    website: Mapped[Optional[str]]

    author: Mapped[Author] = relationship(back_populates="profile")


class Book(PortableModel, Base):
    __tablename__ = "books"
    __portable_includes__ = ("chapters",)

    id: Mapped[int] = mapped_column(primary_key=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("authors.id"))
    title: Mapped[str]
    year: Mapped[Optional[int]]

    author: Mapped[Author] = relationship(back_populates="books")
    chapters: Mapped[List["Chapter"]] = relationship(order_by="Chapter.id")


class Chapter(PortableModel, Base):
    __tablename__ = "chapters"

    id: Mapped[int] = mapped_column(primary_key=True)
    book_id: Mapped[int] = mapped_column(ForeignKey("books.id"))
    number: Mapped[int]
    heading: Mapped[str]


class Royalty(PortableModel, Base):
    """Numeric and date/time columns."""

    __tablename__ = "royalties"

    id: Mapped[int] = mapped_column(primary_key=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("authors.id"))
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    paid_on: Mapped[datetime.date]
    recorded_at: Mapped[Optional[datetime.datetime]]


class Note(Base):
    """Deliberately not portable."""

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(primary_key=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("authors.id"))
    body: Mapped[str]


# =============================================================================
# Fixtures and helpers
# =============================================================================


@pytest.fixture()
def engine() -> Iterator[Any]:
    eng = create_engine("sqlite://")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session(engine: Any) -> Iterator[Session]:
    with create_session_factory(engine)() as s:
        yield s


def make_author(
    session: Session,
    name: str,
    *,
    books: list[dict[str, Any]] | None = None,
    profile: dict[str, Any] | None = None,
    notes: list[str] | None = None,
) -> Author:
    """Create and commit an author with optional related records.

    Book dicts may carry a `chapters` list of Chapter field dicts.
    """
    author = Author(name=name)
    for book_fields in books or []:
        book_fields = dict(book_fields)
        chapters = [Chapter(**c) for c in book_fields.pop("chapters", [])]
        author.books.append(Book(chapters=chapters, **book_fields))
    if profile is not None:
        author.profile = Profile(**profile)
    for body in notes or []:
        author.notes.append(Note(body=body))
    session.add(author)
    session.commit()
    return author


def fields(record: Any, *, skip: tuple[str, ...] = ("id",)) -> dict[str, Any]:
    """Column values of a record, minus `skip`."""
    return {c.key: getattr(record, c.key) for c in record.__table__.columns if c.key not in skip}

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from conftest import Book, Chapter, fields, make_author
from portable_model.core import MalformedDocumentError, association, export_association, import_association


def _book_fields(book):
    return fields(book, skip=("id", "author_id"))


def test_export_empty_collection_is_empty_list(session):
    author = make_author(session, "ann")
    assert export_association(association(author, "books")) == []


def test_export_preserves_association_order(session):
    author = make_author(
        session,
        "ann",
        books=[{"title": "First", "year": 2001}, {"title": "Second"}, {"title": "Third", "year": 2010}],
    )

    doc = export_association(association(author, "books"))

    assert [d["title"] for d in doc] == ["First", "Second", "Third"]
    assert doc[0] == {"author_id": author.id, "title": "First", "year": 2001, "chapters": []}
    assert all("id" not in d for d in doc)


def test_round_trip_into_fresh_owner(session):
    source = make_author(
        session,
        "ann",
        books=[
            {"title": "First", "year": 2001, "chapters": [{"number": 1, "heading": "Start"}, {"number": 2, "heading": "End"}]},
            {"title": "Second"},
        ],
    )
    target = make_author(session, "bob")

    doc = export_association(association(source, "books"))
    imported = import_association(association(target, "books"), doc)
    session.commit()

    assert [_book_fields(b) for b in target.books] == [_book_fields(b) for b in source.books]
    assert [b.id for b in target.books] == [b.id for b in imported]
    assert all(b.author_id == target.id for b in target.books)

    # Nested chapters are rebound to the new books.
    first = target.books[0]
    assert [(c.number, c.heading) for c in first.chapters] == [(1, "Start"), (2, "End")]
    assert all(c.book_id == first.id for c in first.chapters)
    assert session.query(Chapter).count() == 4


def test_import_is_additive(session):
    author = make_author(session, "ann", books=[{"title": "Old 1"}, {"title": "Old 2"}])
    original_ids = [b.id for b in author.books]

    import_association(association(author, "books"), [{"title": "New 1"}, {"title": "New 2"}, {"title": "New 3"}])
    session.commit()
    session.expire_all()

    assert [b.title for b in author.books] == ["Old 1", "Old 2", "New 1", "New 2", "New 3"]
    assert [b.id for b in author.books][:2] == original_ids


def test_import_empty_list_changes_nothing(session):
    author = make_author(session, "ann", books=[{"title": "Old"}])

    assert import_association(association(author, "books"), []) == []
    assert [b.title for b in author.books] == ["Old"]


@pytest.mark.parametrize("document", ["hello", None, {"title": "not in a list"}, [{"title": "ok"}, "bad"], [{"title": "ok"}, ["nested"]]])
def test_import_rejects_non_list_of_mappings(session, document):
    author = make_author(session, "ann", books=[{"title": "Old"}])

    with pytest.raises(MalformedDocumentError, match="not an array of hashes"):
        import_association(association(author, "books"), document)

    assert [b.title for b in author.books] == ["Old"]
    assert session.query(Book).count() == 1


def test_document_foreign_key_is_overridden_by_owner(session):
    other = make_author(session, "other")
    author = make_author(session, "ann")

    imported = import_association(association(author, "books"), [{"author_id": other.id, "title": "Mine"}])
    session.commit()

    assert [b.author_id for b in imported] == [author.id]
    assert other.books == []


def test_failing_element_rolls_back_whole_import(session):
    author = make_author(session, "ann", books=[{"title": "Old"}])
    assert len(author.books) == 1

    with pytest.raises(ValueError, match="unknown attribute"):
        import_association(
            association(author, "books"),
            [{"title": "New 1"}, {"title": "New 2"}, {"title": "New 3", "pages": 300}],
        )

    assert len(author.books) == 1
    assert session.query(Book).count() == 1


def test_storage_failure_rolls_back_whole_import(session):
    author = make_author(session, "ann", books=[{"title": "Old"}])
    assert len(author.books) == 1

    # title is NOT NULL: the second insert fails at flush time.
    with pytest.raises(IntegrityError):
        import_association(association(author, "books"), [{"title": "New 1"}, {"title": None}])

    assert len(author.books) == 1
    assert session.query(Book).count() == 1

    # The session is still usable after the rolled-back savepoint.
    import_association(association(author, "books"), [{"title": "New 1"}])
    session.commit()
    assert [b.title for b in author.books] == ["Old", "New 1"]

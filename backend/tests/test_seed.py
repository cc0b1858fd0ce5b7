"""Tests for the seed loader"""

import json

import pytest
from pydantic import ValidationError

from bookcatalog.models import Book
from bookcatalog.seed import load_books, read_seed_file


def test_read_and_load(tmp_path, db_session):
    path = tmp_path / "books.json"
    path.write_text(json.dumps([
        {"id": "dune", "title": "Dune", "author": "Frank Herbert", "genres": ["SciFi"], "average_rating": 4.5},
        {"title": "No Id", "tags": ["misc"]},
    ]))

    written = load_books(db_session, read_seed_file(path))

    assert written == 2
    dune = db_session.get(Book, "dune")
    assert dune.genres == ["SciFi"]
    assert dune.ratings_count == 0
    generated = db_session.query(Book).filter(Book.title == "No Id").one()
    assert generated.id
    assert generated.tags == ["misc"]


def test_load_replaces_existing_book(tmp_path, db_session, make_book):
    make_book("dune", "Dune", genres=["Old"])
    path = tmp_path / "books.json"
    path.write_text(json.dumps([{"id": "dune", "title": "Dune", "genres": ["SciFi"]}]))

    load_books(db_session, read_seed_file(path))

    assert db_session.get(Book, "dune").genres == ["SciFi"]


def test_rejects_non_list(tmp_path):
    path = tmp_path / "books.json"
    path.write_text(json.dumps({"title": "Dune"}))

    with pytest.raises(ValueError):
        read_seed_file(path)


def test_rejects_out_of_range_rating(tmp_path):
    path = tmp_path / "books.json"
    path.write_text(json.dumps([{"title": "Dune", "average_rating": 7}]))

    with pytest.raises(ValidationError):
        read_seed_file(path)

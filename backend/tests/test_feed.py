"""Tests for the homepage feed"""

from datetime import datetime

from bookcatalog.services.feed import FeedService


def feed_ids(feed):
    return {label: [book.id for book in books] for label, books in feed.items()}


def test_empty_catalog_returns_empty_fallback_group(db_session):
    feed = FeedService(db_session).homepage_feed()

    assert list(feed.keys()) == ["Recently Added"]
    assert feed["Recently Added"] == []


def test_catalog_without_genres_falls_back_to_recent_books(db_session, make_book):
    make_book("old", "Old", created_at=datetime(2020, 1, 1))
    make_book("new", "New", created_at=datetime(2024, 1, 1))
    make_book("mid", "Mid", created_at=datetime(2022, 1, 1))

    feed = FeedService(db_session).homepage_feed()

    assert feed_ids(feed) == {"Recently Added": ["new", "mid", "old"]}


def test_fallback_is_capped(db_session, make_book):
    for i in range(15):
        make_book(f"r{i:02d}", f"Recent {i}")

    feed = FeedService(db_session).homepage_feed()

    assert len(feed["Recently Added"]) == 10
    assert feed["Recently Added"][0].id == "r14"


def test_genres_ordered_by_book_count(db_session, make_book):
    """Books with several genres count toward each of them"""

    make_book("b1", "One", genres=["Fantasy", "SciFi"], ratings_count=10)
    make_book("b2", "Two", genres=["Fantasy", "SciFi"], ratings_count=50)
    make_book("b3", "Three", genres=["Fantasy"], ratings_count=30)
    make_book("b4", "Four", genres=["Fantasy", "Romance"], ratings_count=5)
    make_book("b5", "Five", genres=["SciFi"], ratings_count=70)
    make_book("b6", "Six", ratings_count=100)

    feed = FeedService(db_session).homepage_feed()

    assert list(feed.keys()) == ["Fantasy", "SciFi", "Romance"]
    assert feed_ids(feed) == {
        "Fantasy": ["b2", "b3", "b1", "b4"],
        "SciFi": ["b5", "b2", "b1"],
        "Romance": ["b4"],
    }


def test_genre_counts(db_session, make_book):
    make_book("b1", "One", genres=["Fantasy", "SciFi"])
    make_book("b2", "Two", genres=["Fantasy"])

    counts = FeedService(db_session).genre_counts()

    assert counts == [("Fantasy", 2), ("SciFi", 1)]


def test_only_top_five_genres_with_label_tiebreak(db_session, make_book):
    make_book("big", "Big", genres=["Zeta"])
    make_book("big2", "Big 2", genres=["Zeta"])
    for label in ["Horror", "Art", "Poetry", "Crime", "Biography"]:
        make_book(f"g-{label}", label, genres=[label])

    feed = FeedService(db_session).homepage_feed()

    assert list(feed.keys()) == ["Zeta", "Art", "Biography", "Crime", "Horror"]


def test_books_per_genre_capped_and_tied_by_id(db_session, make_book):
    for i in range(12):
        make_book(f"f{i:02d}", f"F {i}", genres=["Fantasy"], ratings_count=1)

    feed = FeedService(db_session).homepage_feed()

    assert [book.id for book in feed["Fantasy"]] == [f"f{i:02d}" for i in range(10)]


def test_custom_limits(db_session, make_book):
    make_book("b1", "One", genres=["A"], ratings_count=1)
    make_book("b2", "Two", genres=["A", "B"], ratings_count=2)

    feed = FeedService(db_session, top_genres=1, books_per_genre=1).homepage_feed()

    assert feed_ids(feed) == {"A": ["b2"]}

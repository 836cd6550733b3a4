import catalog
from seed import SEED_AUTHORS, SEED_BOOKS, SEED_CATEGORIES, init_store
from stats import row_counts
from validation import validate_author, validate_book, validate_category


def test_seed_loads_fixed_set(ctx):
    assert row_counts() == {
        "books": len(SEED_BOOKS),
        "authors": len(SEED_AUTHORS),
        "categories": len(SEED_CATEGORIES),
    }
    assert row_counts() == {"books": 8, "authors": 4, "categories": 5}


def test_seed_rows_pass_validation():
    for row in SEED_AUTHORS:
        assert validate_author(row) == [], row
    for row in SEED_CATEGORIES:
        assert validate_category(row) == [], row
    for row in SEED_BOOKS:
        assert validate_book(row) == [], row


def test_init_store_is_idempotent(ctx):
    assert init_store() is False
    assert row_counts()["books"] == 8


def test_init_store_leaves_existing_rows_alone(empty_ctx):
    catalog.create_category({"name": "Esej"})

    assert init_store() is False
    assert row_counts() == {"books": 0, "authors": 0, "categories": 1}


def test_init_store_seeds_empty_store(empty_ctx):
    assert init_store() is True
    assert init_store() is False
    assert row_counts()["authors"] == 4

"""
Mutating catalog operations.

Every operation follows the same path: load the row (update/delete),
validate the payload, run the integrity rules and persist, all inside
one transaction. A failed rule leaves the store untouched.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

import integrity
import queries
from data_models import db, Author, Category, Book
from errors import CatalogError, DuplicateKey, StoreFailure
from validation import clean_author, clean_category, clean_book

logger = logging.getLogger(__name__)


@contextmanager
def atomic():
    """
    Commit the session when the block succeeds, roll back otherwise.

    Store errors are translated: constraint violations become DuplicateKey,
    anything else becomes StoreFailure.
    """
    try:
        yield db.session
        db.session.commit()
    except CatalogError as exc:
        db.session.rollback()
        logger.warning("Write rejected: %s", exc)
        raise
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Store rejected write: %s", exc.orig)
        raise DuplicateKey("The change conflicts with existing catalog records.") from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Store failure during write")
        raise StoreFailure() from exc


def _apply(entity, values):
    for key, value in values.items():
        setattr(entity, key, value)


# --- Authors ---

def create_author(payload):
    values = clean_author(payload)

    with atomic():
        integrity.ensure_unique_email(values["email"])
        author = Author(**values)
        db.session.add(author)

    logger.info("Created author %s (%s)", author.id, author.full_name)
    return queries.author_record(author)


def update_author(author_id, payload):
    author = queries.get_or_not_found(Author, author_id, "Author")
    values = clean_author(payload)

    with atomic():
        integrity.ensure_unique_email(values["email"], excluding_id=author.id)
        _apply(author, values)

    logger.info("Updated author %s", author.id)
    return queries.author_record(author)


def delete_author(author_id):
    author = queries.get_or_not_found(Author, author_id, "Author")

    with atomic():
        integrity.ensure_no_dependents(author)
        db.session.delete(author)

    logger.info("Deleted author %s", author_id)


# --- Categories ---

def create_category(payload):
    values = clean_category(payload)

    with atomic():
        integrity.ensure_unique_category_name(values["name"])
        category = Category(**values)
        db.session.add(category)

    logger.info("Created category %s (%s)", category.id, category.name)
    return queries.category_record(category)


def update_category(category_id, payload):
    category = queries.get_or_not_found(Category, category_id, "Category")
    values = clean_category(payload)

    with atomic():
        integrity.ensure_unique_category_name(values["name"], excluding_id=category.id)
        _apply(category, values)

    logger.info("Updated category %s", category.id)
    return queries.category_record(category)


def delete_category(category_id):
    category = queries.get_or_not_found(Category, category_id, "Category")

    with atomic():
        integrity.ensure_no_dependents(category)
        db.session.delete(category)

    logger.info("Deleted category %s", category_id)


# --- Books ---

def _check_book_references(values, excluding_id=None):
    integrity.ensure_unique_isbn(values["isbn"], excluding_id=excluding_id)
    integrity.ensure_author_exists(values["author_id"])
    integrity.ensure_category_exists(values["category_id"])


def create_book(payload):
    values = clean_book(payload)

    with atomic():
        _check_book_references(values)
        book = Book(**values)
        db.session.add(book)

    logger.info("Created book %s (%s)", book.id, book.isbn)
    return queries.get_book(book.id)


def update_book(book_id, payload):
    book = queries.get_or_not_found(Book, book_id, "Book")
    values = clean_book(payload)

    with atomic():
        _check_book_references(values, excluding_id=book.id)
        _apply(book, values)

    logger.info("Updated book %s", book.id)
    return queries.get_book(book.id)


def delete_book(book_id):
    book = queries.get_or_not_found(Book, book_id, "Book")

    with atomic():
        db.session.delete(book)

    logger.info("Deleted book %s", book_id)

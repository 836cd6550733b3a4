"""
Cross-entity integrity rules.

Each check is a read-only query that raises when the rule is broken.
They run inside the caller's transaction, before anything is written.
"""
from sqlalchemy import func

from data_models import db, Author, Category, Book
from errors import DuplicateKey, HasDependents, ReferenceNotFound


def _exists(query) -> bool:
    return db.session.execute(query.limit(1)).first() is not None


def _excluding(query, column, excluding_id):
    if excluding_id is not None:
        query = query.where(column != excluding_id)
    return query


def ensure_unique_email(email: str, excluding_id: int | None = None) -> None:
    """
    Fail if another author already uses this email (case-insensitive).
    """
    query = db.select(Author.id).where(func.casefold(Author.email) == email.casefold())
    if _exists(_excluding(query, Author.id, excluding_id)):
        raise DuplicateKey("An author with this email address already exists.")


def ensure_unique_category_name(name: str, excluding_id: int | None = None) -> None:
    """
    Fail if another category already has this name (case-insensitive).
    """
    query = db.select(Category.id).where(func.casefold(Category.name) == name.casefold())
    if _exists(_excluding(query, Category.id, excluding_id)):
        raise DuplicateKey("A category with this name already exists.")


def ensure_unique_isbn(isbn: str, excluding_id: int | None = None) -> None:
    """
    Fail if another book already has this ISBN (exact match).
    """
    query = db.select(Book.id).where(Book.isbn == isbn)
    if _exists(_excluding(query, Book.id, excluding_id)):
        raise DuplicateKey("A book with this ISBN already exists.")


def ensure_author_exists(author_id: int) -> None:
    if not _exists(db.select(Author.id).where(Author.id == author_id)):
        raise ReferenceNotFound("The selected author does not exist.")


def ensure_category_exists(category_id: int) -> None:
    if not _exists(db.select(Category.id).where(Category.id == category_id)):
        raise ReferenceNotFound("The selected category does not exist.")


def ensure_no_dependents(entity) -> None:
    """
    Block deleting an author or category that books still point to.
    """
    if isinstance(entity, Author):
        foreign_key = Book.author_id
        message = "The author cannot be deleted because they still have books."
    elif isinstance(entity, Category):
        foreign_key = Book.category_id
        message = "The category cannot be deleted because it still contains books."
    else:
        raise TypeError(f"{type(entity).__name__} has no dependent books")

    if _exists(db.select(Book.id).where(foreign_key == entity.id)):
        raise HasDependents(message)

"""
Read side of the catalog: search, sort, filter and response shaping.

Book counts are always computed from the books table at query time.
"""
from sqlalchemy import func, or_
from sqlalchemy.orm import contains_eager, joinedload, selectinload

from data_models import db, MAX_ID, Author, Category, Book
from errors import NotFound

AUTHOR_SORTS = {
    "first_name": (Author.first_name,),
    "last_name": (Author.last_name, Author.first_name),
    "email": (Author.email,),
    "birth_date": (Author.birth_date,),
}
DEFAULT_AUTHOR_SORT = "last_name"

BOOK_SORTS = {
    "title": (Book.title,),
    "isbn": (Book.isbn,),
    "publication_date": (Book.publication_date,),
    "author": (Author.last_name, Author.first_name),
    "category": (Category.name,),
}
DEFAULT_BOOK_SORT = "title"

DEFAULT_CATEGORY_SORT = "name"


def book_count_of(foreign_key, primary_key):
    """
    Correlated subquery counting the books that point at `primary_key`.
    """
    return (
        db.select(func.count(Book.id))
        .where(foreign_key == primary_key)
        .correlate_except(Book)
        .scalar_subquery()
        .label("book_count")
    )


def _sort_columns(sorts, sort_by, default):
    """
    Resolve a sort key case-insensitively; unknown keys use the default.
    """
    key = (sort_by or "").strip().lower()
    return sorts.get(key, sorts[default])


def _search_filter(search, *columns):
    """
    Case-insensitive substring match over any of `columns`.
    LIKE wildcards in the search text are matched literally.
    """
    text = (search or "").strip()
    if not text:
        return None
    escaped = text.casefold().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    like = f"%{escaped}%"
    return or_(*(func.casefold(column).like(like, escape="\\") for column in columns))


def get_or_not_found(model, ident, label, options=None):
    """
    Load a row by id or raise NotFound. Ids outside SQLite's integer range
    cannot exist, so they are not sent to the store.
    """
    entity = None
    if 1 <= ident <= MAX_ID:
        entity = db.session.get(model, ident, options=options or [])
    if entity is None:
        raise NotFound(f"{label} with id {ident} was not found.")
    return entity


# --- Projections ---

def project_book(book):
    return {
        "id": book.id,
        "title": book.title,
        "isbn": book.isbn,
        "publication_date": book.publication_date.isoformat(),
        "author_id": book.author_id,
        "author_name": book.author.full_name,
        "category_id": book.category_id,
        "category_name": book.category.name,
    }


def project_author(author, book_count, books=None):
    record = {
        "id": author.id,
        "first_name": author.first_name,
        "last_name": author.last_name,
        "birth_date": author.birth_date.isoformat(),
        "email": author.email,
        "biography": author.biography,
        "book_count": book_count,
    }
    if books is not None:
        record["books"] = [project_book(book) for book in books]
    return record


def project_category(category, book_count, books=None):
    record = {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "book_count": book_count,
    }
    if books is not None:
        record["books"] = [project_book(book) for book in books]
    return record


def count_books(foreign_key, ident) -> int:
    return db.session.scalar(db.select(func.count(Book.id)).where(foreign_key == ident))


# --- Authors ---

def list_authors(search=None, sort_by=None):
    """
    All authors with their live book count.

    Search matches first name, last name or email. Sort keys: first_name,
    last_name (default, then first name), email, birth_date.
    """
    book_count = book_count_of(Book.author_id, Author.id)
    query = db.select(Author, book_count)

    condition = _search_filter(search, Author.first_name, Author.last_name, Author.email)
    if condition is not None:
        query = query.where(condition)

    columns = _sort_columns(AUTHOR_SORTS, sort_by, DEFAULT_AUTHOR_SORT)
    query = query.order_by(*columns, Author.id)

    return [project_author(author, count) for author, count in db.session.execute(query)]


def get_author(author_id):
    """
    One author including the full list of their books.
    """
    author = get_or_not_found(
        Author,
        author_id,
        "Author",
        options=[selectinload(Author.books).joinedload(Book.category)],
    )
    return project_author(author, len(author.books), books=author.books)


def author_record(author):
    return project_author(author, count_books(Book.author_id, author.id))


# --- Categories ---

def list_categories(search=None, sort_by=None):
    """
    All categories with their live book count.

    Search matches name or description. Sort keys: name (default),
    book_count (largest first).
    """
    book_count = book_count_of(Book.category_id, Category.id)
    query = db.select(Category, book_count)

    condition = _search_filter(search, Category.name, Category.description)
    if condition is not None:
        query = query.where(condition)

    sorts = {
        "name": (Category.name,),
        "book_count": (book_count.desc(), Category.name),
    }
    columns = _sort_columns(sorts, sort_by, DEFAULT_CATEGORY_SORT)
    query = query.order_by(*columns, Category.id)

    return [project_category(category, count) for category, count in db.session.execute(query)]


def get_category(category_id):
    category = get_or_not_found(
        Category,
        category_id,
        "Category",
        options=[selectinload(Category.books).joinedload(Book.author)],
    )
    return project_category(category, len(category.books), books=category.books)


def category_record(category):
    return project_category(category, count_books(Book.category_id, category.id))


# --- Books ---

def list_books(search=None, sort_by=None, category_id=None, author_id=None):
    """
    Books joined with their author and category.

    Filters (category_id, author_id) apply first, then search over title,
    ISBN, author first/last name and category name, then sorting by title
    (default), isbn, publication_date, author or category.
    """
    query = (
        db.select(Book)
        .join(Book.author)
        .join(Book.category)
        .options(contains_eager(Book.author), contains_eager(Book.category))
    )

    if category_id is not None:
        query = query.where(Book.category_id == category_id)
    if author_id is not None:
        query = query.where(Book.author_id == author_id)

    condition = _search_filter(
        search,
        Book.title,
        Book.isbn,
        Author.first_name,
        Author.last_name,
        Category.name,
    )
    if condition is not None:
        query = query.where(condition)

    columns = _sort_columns(BOOK_SORTS, sort_by, DEFAULT_BOOK_SORT)
    query = query.order_by(*columns, Book.id)

    return [project_book(book) for book in db.session.scalars(query)]


def get_book(book_id):
    book = get_or_not_found(
        Book,
        book_id,
        "Book",
        options=[joinedload(Book.author), joinedload(Book.category)],
    )
    return project_book(book)

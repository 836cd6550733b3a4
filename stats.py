"""
Read-only rollups over the current catalog.

Nothing here is cached; every call queries the store. Rows with equal
book counts are ordered by id, lowest first, which also decides the
"top" category and author on a tie.
"""
from sqlalchemy import func

from data_models import db, Author, Category, Book
from queries import book_count_of


def row_counts():
    """
    Number of rows per table. Raises if the store is unreachable.
    """
    return {
        "books": db.session.scalar(db.select(func.count(Book.id))),
        "authors": db.session.scalar(db.select(func.count(Author.id))),
        "categories": db.session.scalar(db.select(func.count(Category.id))),
    }


def category_breakdown():
    book_count = book_count_of(Book.category_id, Category.id)
    query = db.select(Category.name, book_count).order_by(book_count.desc(), Category.id)
    return [{"name": name, "book_count": count} for name, count in db.session.execute(query)]


def author_breakdown():
    book_count = book_count_of(Book.author_id, Author.id)
    query = db.select(Author.first_name, Author.last_name, book_count).order_by(
        book_count.desc(), Author.id
    )
    return [
        {"author_name": f"{first_name} {last_name}", "book_count": count}
        for first_name, last_name, count in db.session.execute(query)
    ]


def compute_statistics():
    counts = row_counts()
    categories = category_breakdown()
    authors = author_breakdown()

    return {
        "total_books": counts["books"],
        "total_authors": counts["authors"],
        "total_categories": counts["categories"],
        "top_category": dict(categories[0]) if categories else None,
        "top_author": dict(authors[0]) if authors else None,
        "categories": categories,
        "authors": authors,
    }

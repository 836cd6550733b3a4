import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()

# Largest value an SQLite INTEGER column can hold.
MAX_ID = 2 ** 63 - 1


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """
    SQLite ships with foreign keys switched off; turn them on for every connection
    so RESTRICT rules are enforced by the store as well.

    Also registers casefold(), since SQLite's own lower() only folds ASCII.
    """
    if isinstance(dbapi_connection, sqlite3.Connection):
        dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Author(db.Model):
    """
    Author model with contact data and the books they wrote.
    """
    __tablename__ = 'authors'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    first_name = db.Column(db.String(50), nullable=False)
    last_name = db.Column(db.String(50), nullable=False)
    birth_date = db.Column(db.Date, nullable=False)
    email = db.Column(db.String(100), nullable=False, unique=True)
    biography = db.Column(db.String(1000), nullable=True)

    # Read-only view of dependents; the Book owns the foreign key.
    books = db.relationship(
        "Book",
        back_populates="author",
        passive_deletes="all",
        order_by="Book.id",
    )

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"Author(id = {self.id}, name = {self.full_name})"

    def __str__(self):
        return self.full_name


class Category(db.Model):
    """
    Category (genre) that groups books.
    """
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), nullable=False, unique=True)
    description = db.Column(db.String(500), nullable=True)

    books = db.relationship(
        "Book",
        back_populates="category",
        passive_deletes="all",
        order_by="Book.id",
    )

    def __repr__(self):
        return f"Category(id = {self.id}, name = {self.name})"

    def __str__(self):
        return self.name


class Book(db.Model):
    """
    Book model storing title, ISBN, publication date, author and category links.
    """
    __tablename__ = 'books'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    title = db.Column(db.String(200), nullable=False)
    isbn = db.Column(db.String(13), nullable=False, unique=True)
    publication_date = db.Column(db.Date, nullable=False)

    author_id = db.Column(
        db.Integer,
        db.ForeignKey("authors.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    category_id = db.Column(
        db.Integer,
        db.ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    author = db.relationship("Author", back_populates="books")
    category = db.relationship("Category", back_populates="books")

    def __repr__(self):
        return f"<Book id={self.id} title='{self.title}'>"

    def __str__(self):
        return f"{self.title} ({self.publication_date.year})" if self.publication_date else self.title

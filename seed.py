"""
Schema creation and the one-time seed set (4 authors, 5 categories, 8 books).
"""
import logging
from datetime import date

from data_models import db, Author, Category, Book
from stats import row_counts

logger = logging.getLogger(__name__)

SEED_AUTHORS = [
    {
        "id": 1,
        "first_name": "France",
        "last_name": "Prešeren",
        "birth_date": date(1800, 12, 3),
        "email": "france.preseren@knjiznica.si",
        "biography": "Največji slovenski pesnik, avtor Zdravljice in Krsta pri Savici.",
    },
    {
        "id": 2,
        "first_name": "Ivan",
        "last_name": "Cankar",
        "birth_date": date(1876, 5, 10),
        "email": "ivan.cankar@knjiznica.si",
        "biography": "Slovenski pisatelj in dramatik, avtor novel Hiša Marije Pomočnice in Na klancu.",
    },
    {
        "id": 3,
        "first_name": "Josip",
        "last_name": "Jurčič",
        "birth_date": date(1844, 3, 4),
        "email": "josip.jurcic@knjiznica.si",
        "biography": "Prvi slovenski romanopisec, avtor romana Deseti brat.",
    },
    {
        "id": 4,
        "first_name": "Dragotin",
        "last_name": "Kette",
        "birth_date": date(1876, 7, 19),
        "email": "dragotin.kette@knjiznica.si",
        "biography": "Slovenski pesnik moderne, predstavnik simbolizma.",
    },
]

SEED_CATEGORIES = [
    {"id": 1, "name": "Poezija", "description": "Pesniška dela in zbirke pesmi"},
    {"id": 2, "name": "Roman", "description": "Romani in daljša prozna dela"},
    {"id": 3, "name": "Drama", "description": "Dramska dela in gledališke igre"},
    {"id": 4, "name": "Novela", "description": "Krajša prozna dela in novele"},
    {"id": 5, "name": "Esej", "description": "Eseji in razprave"},
]

SEED_BOOKS = [
    {"id": 1, "title": "Poezije", "isbn": "9789610112034",
     "publication_date": date(1847, 12, 29), "author_id": 1, "category_id": 1},
    {"id": 2, "title": "Krst pri Savici", "isbn": "9789610112035",
     "publication_date": date(1836, 8, 15), "author_id": 1, "category_id": 1},
    {"id": 3, "title": "Na klancu", "isbn": "9789610112036",
     "publication_date": date(1902, 3, 20), "author_id": 2, "category_id": 4},
    {"id": 4, "title": "Hiša Marije Pomočnice", "isbn": "9789610112037",
     "publication_date": date(1904, 5, 15), "author_id": 2, "category_id": 4},
    {"id": 5, "title": "Za narodov blagor", "isbn": "9789610112038",
     "publication_date": date(1901, 11, 10), "author_id": 2, "category_id": 3},
    {"id": 6, "title": "Deseti brat", "isbn": "9789610112039",
     "publication_date": date(1866, 6, 1), "author_id": 3, "category_id": 2},
    {"id": 7, "title": "Moja pomlad", "isbn": "9789610112040",
     "publication_date": date(1899, 4, 12), "author_id": 4, "category_id": 1},
    {"id": 8, "title": "Zadnja postaja", "isbn": "9789610112041",
     "publication_date": date(1900, 9, 18), "author_id": 4, "category_id": 1},
]


def init_store():
    """
    Create missing tables and load the seed set into an empty store.

    Safe to call on every startup: a store that already holds rows is left
    as it is.

    Returns:
        True if seed rows were written, False otherwise.
    """
    db.create_all()

    if any(row_counts().values()):
        logger.debug("Store already populated, skipping seed")
        return False

    logger.info("Seeding store with initial catalog data")
    db.session.add_all(Author(**row) for row in SEED_AUTHORS)
    db.session.add_all(Category(**row) for row in SEED_CATEGORIES)
    db.session.flush()
    db.session.add_all(Book(**row) for row in SEED_BOOKS)

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Seeding the store failed")
        raise

    logger.info(
        "Seeded %d authors, %d categories and %d books",
        len(SEED_AUTHORS), len(SEED_CATEGORIES), len(SEED_BOOKS),
    )
    return True

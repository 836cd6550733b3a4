import pytest

from app import create_app
from config import TestConfig
from data_models import db


class EmptyStoreConfig(TestConfig):
    SEED_ON_STARTUP = False


def _make_app(config):
    app = create_app(config)
    with app.app_context():
        db.create_all()
    return app


@pytest.fixture
def app():
    # Fresh in-memory store per test, seeded with the default catalog
    app = _make_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def empty_app():
    app = _make_app(EmptyStoreConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def empty_ctx(empty_app):
    with empty_app.app_context():
        yield empty_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def author_payload():
    return {
        "first_name": "Srečko",
        "last_name": "Kosovel",
        "birth_date": "1904-03-18",
        "email": "srecko.kosovel@knjiznica.si",
        "biography": "Pesnik konstruktivizma.",
    }


@pytest.fixture
def book_payload():
    return {
        "title": "Integrali",
        "isbn": "978-9610-2001",
        "publication_date": "1967-01-01",
        "author_id": 1,
        "category_id": 1,
    }

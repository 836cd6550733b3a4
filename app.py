"""
Library Catalog API - a JSON catalog of authors, categories and books built
with Flask and SQLAlchemy.

Features:
- Create, read, update and delete authors, categories and books
- Search, sort and filter list endpoints
- Uniqueness and referential checks on every write
- Catalog statistics (totals, top category/author, per-entity counts)
- Health check with store connectivity and row counts
"""
import logging
import os
from datetime import datetime

import click
from flask import Blueprint, Flask, current_app, jsonify, request, url_for
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

import catalog
import queries
from config import Config
from data_models import db, MAX_ID
from errors import CatalogError, StoreFailure
from seed import init_store
from stats import compute_statistics, row_counts

system = Blueprint("system", __name__)
api = Blueprint("api", __name__, url_prefix="/api")


def _arg(*names):
    """
    First non-empty query parameter among `names` (snake_case and camelCase aliases).
    """
    for name in names:
        value = request.args.get(name, "").strip()
        if value:
            return value
    return None


def _int_arg(*names):
    value = _arg(*names)
    if value is None:
        return None
    try:
        number = int(value)
    except ValueError:
        return None
    return number if 1 <= number <= MAX_ID else None


def _payload():
    return request.get_json(silent=True)


def _created(record, endpoint, **values):
    return jsonify(record), 201, {"Location": url_for(endpoint, **values)}


# --- System ---

@system.route("/")
def index():
    """
    Service banner with the available endpoints.
    """
    return jsonify({
        "message": f"{current_app.config['APP_NAME']} is running.",
        "version": current_app.config["APP_VERSION"],
        "timestamp": datetime.now().isoformat(),
        "endpoints": {
            "authors": url_for("api.authors_index"),
            "categories": url_for("api.categories_index"),
            "books": url_for("api.books_index"),
            "statistics": url_for("api.statistics"),
            "health": url_for("system.health"),
        },
    })


@system.route("/health")
def health():
    """
    Liveness check: store connectivity and row counts.
    """
    try:
        counts = row_counts()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Health check failed")
        return jsonify({
            "status": "Unhealthy",
            "database": "Disconnected",
            "timestamp": datetime.now().isoformat(),
        }), 500

    return jsonify({
        "status": "Healthy",
        "database": "Connected",
        "counts": counts,
        "timestamp": datetime.now().isoformat(),
    })


# --- Authors ---

@api.route("/authors", methods=["GET"])
def authors_index():
    """
    List authors; supports ?search= and ?sort_by=first_name|last_name|email|birth_date
    """
    return jsonify(queries.list_authors(
        search=_arg("search"),
        sort_by=_arg("sort_by", "sortBy"),
    ))


@api.route("/authors", methods=["POST"])
def author_create():
    record = catalog.create_author(_payload())
    return _created(record, "api.author_detail", author_id=record["id"])


@api.route("/authors/<int:author_id>", methods=["GET"])
def author_detail(author_id):
    return jsonify(queries.get_author(author_id))


@api.route("/authors/<int:author_id>", methods=["PUT"])
def author_update(author_id):
    return jsonify(catalog.update_author(author_id, _payload()))


@api.route("/authors/<int:author_id>", methods=["DELETE"])
def author_delete(author_id):
    catalog.delete_author(author_id)
    return "", 204


# --- Categories ---

@api.route("/categories", methods=["GET"])
def categories_index():
    """
    List categories; supports ?search= and ?sort_by=name|book_count
    """
    return jsonify(queries.list_categories(
        search=_arg("search"),
        sort_by=_arg("sort_by", "sortBy"),
    ))


@api.route("/categories", methods=["POST"])
def category_create():
    record = catalog.create_category(_payload())
    return _created(record, "api.category_detail", category_id=record["id"])


@api.route("/categories/<int:category_id>", methods=["GET"])
def category_detail(category_id):
    return jsonify(queries.get_category(category_id))


@api.route("/categories/<int:category_id>", methods=["PUT"])
def category_update(category_id):
    return jsonify(catalog.update_category(category_id, _payload()))


@api.route("/categories/<int:category_id>", methods=["DELETE"])
def category_delete(category_id):
    catalog.delete_category(category_id)
    return "", 204


# --- Books ---

@api.route("/books", methods=["GET"])
def books_index():
    """
    List books, supports:
    - filtering via ?category_id= and ?author_id=
    - search over title, ISBN, author and category via ?search=
    - sorting via ?sort_by=title|isbn|publication_date|author|category
    """
    return jsonify(queries.list_books(
        search=_arg("search"),
        sort_by=_arg("sort_by", "sortBy"),
        category_id=_int_arg("category_id", "categoryId"),
        author_id=_int_arg("author_id", "authorId"),
    ))


@api.route("/books", methods=["POST"])
def book_create():
    record = catalog.create_book(_payload())
    return _created(record, "api.book_detail", book_id=record["id"])


@api.route("/books/<int:book_id>", methods=["GET"])
def book_detail(book_id):
    return jsonify(queries.get_book(book_id))


@api.route("/books/<int:book_id>", methods=["PUT"])
def book_update(book_id):
    return jsonify(catalog.update_book(book_id, _payload()))


@api.route("/books/<int:book_id>", methods=["DELETE"])
def book_delete(book_id):
    catalog.delete_book(book_id)
    return "", 204


# --- Statistics ---

@api.route("/statistics", methods=["GET"])
def statistics():
    return jsonify(compute_statistics())


# --- Errors ---

def register_error_handlers(app):
    @app.errorhandler(CatalogError)
    def handle_catalog_error(error):
        return jsonify({"errors": error.messages}), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error):
        db.session.rollback()
        app.logger.exception("Unexpected store failure")
        return jsonify({"errors": [StoreFailure.default_message]}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"errors": [error.description]}), error.code


@click.command("init-db")
@with_appcontext
def init_db_command():
    """
    Create the tables and load seed data into an empty store.
    """
    if init_store():
        click.echo("Store created and seeded.")
    else:
        click.echo("Store already populated, nothing to do.")


def create_app(config_object=None):
    """
    Application factory.
    """
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    app.json.sort_keys = False

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    if not app.config.get("TESTING"):
        os.makedirs(app.config["DATA_DIR"], exist_ok=True)

    db.init_app(app)

    app.register_blueprint(system)
    app.register_blueprint(api)
    register_error_handlers(app)
    app.cli.add_command(init_db_command)

    if app.config["SEED_ON_STARTUP"]:
        with app.app_context():
            init_store()
            app.logger.info("Store initialization completed")

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=app.config["DEBUG"])

from sqlalchemy.exc import OperationalError

import stats


def test_index_lists_endpoints(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.get_json()["endpoints"]["books"] == "/api/books"


def test_health(client):
    response = client.get("/health")
    body = response.get_json()

    assert response.status_code == 200
    assert body["status"] == "Healthy"
    assert body["database"] == "Connected"
    assert body["counts"] == {"books": 8, "authors": 4, "categories": 5}


def test_health_reports_store_failure(client, monkeypatch):
    def broken():
        raise OperationalError("SELECT 1", {}, Exception("unable to open database file"))

    monkeypatch.setattr("app.row_counts", broken)

    response = client.get("/health")
    assert response.status_code == 500
    assert response.get_json()["database"] == "Disconnected"


def test_create_author_returns_created_record(client, author_payload):
    response = client.post("/api/authors", json=author_payload)
    body = response.get_json()

    assert response.status_code == 201
    assert response.headers["Location"].endswith(f"/api/authors/{body['id']}")
    assert body["book_count"] == 0

    fetched = client.get(f"/api/authors/{body['id']}").get_json()
    assert fetched["email"] == author_payload["email"]
    assert fetched["books"] == []


def test_create_author_validation_errors(client):
    response = client.post("/api/authors", json={"email": "nope"})
    errors = response.get_json()["errors"]

    assert response.status_code == 400
    assert "First name is required." in errors
    assert "Email must be a valid email address." in errors


def test_non_json_body_is_rejected(client):
    response = client.post("/api/categories", data="name=Esej")
    assert response.status_code == 400
    assert response.get_json()["errors"] == ["Request body must be a JSON object."]


def test_duplicate_email_is_client_error(client, author_payload):
    author_payload["email"] = "Ivan.Cankar@KNJIZNICA.si"
    response = client.post("/api/authors", json=author_payload)

    assert response.status_code == 400
    assert response.get_json()["errors"] == ["An author with this email address already exists."]


def test_update_author(client):
    author = client.get("/api/authors/3").get_json()
    author["last_name"] = "Jurčič ml."

    response = client.put("/api/authors/3", json=author)

    assert response.status_code == 200
    assert client.get("/api/authors/3").get_json()["last_name"] == "Jurčič ml."


def test_missing_ids_are_not_found(client):
    for path in ("/api/authors/999", "/api/categories/999", "/api/books/999"):
        response = client.get(path)
        assert response.status_code == 404
        assert response.get_json()["errors"]

    assert client.delete("/api/books/999").status_code == 404
    assert client.put("/api/categories/999", json={"name": "X"}).status_code == 404


def test_ids_beyond_integer_range_are_not_found(client):
    huge = "/api/authors/100000000000000000000"
    assert client.get(huge).status_code == 404
    assert client.delete(huge).status_code == 404
    assert client.get("/api/books/9223372036854775808").status_code == 404


def test_book_with_unknown_author_is_rejected(client, book_payload):
    book_payload["author_id"] = 999
    response = client.post("/api/books", json=book_payload)

    assert response.status_code == 400
    assert response.get_json()["errors"] == ["The selected author does not exist."]
    assert len(client.get("/api/books").get_json()) == 8


def test_book_with_out_of_range_author_id_is_rejected(client, book_payload):
    book_payload["author_id"] = 10 ** 20
    response = client.post("/api/books", json=book_payload)

    assert response.status_code == 400
    assert response.get_json()["errors"] == ["A valid author must be selected."]


def test_book_crud(client, book_payload):
    created = client.post("/api/books", json=book_payload)
    assert created.status_code == 201
    book = created.get_json()
    assert book["author_name"] == "France Prešeren"

    book["title"] = "Integrali '26"
    book["category_id"] = 5
    updated = client.put(f"/api/books/{book['id']}", json=book).get_json()
    assert updated["title"] == "Integrali '26"
    assert updated["category_name"] == "Esej"

    response = client.delete(f"/api/books/{book['id']}")
    assert response.status_code == 204
    assert response.data == b""
    assert client.get(f"/api/books/{book['id']}").status_code == 404


def test_delete_category_with_books_then_without(client):
    response = client.delete("/api/categories/2")
    assert response.status_code == 400
    assert response.get_json()["errors"] == [
        "The category cannot be deleted because it still contains books."
    ]

    book = client.get("/api/books/6").get_json()
    book["category_id"] = 3
    assert client.put("/api/books/6", json=book).status_code == 200

    assert client.delete("/api/categories/2").status_code == 204
    assert client.get("/api/categories/2").status_code == 404


def test_delete_author_with_books_is_blocked(client):
    response = client.delete("/api/authors/1")
    assert response.status_code == 400
    assert client.get("/api/authors/1").status_code == 200


def test_list_books_query_parameters(client):
    books = client.get("/api/books?search=cankar&sort_by=publication_date").get_json()
    assert [book["id"] for book in books] == [5, 3, 4]

    books = client.get("/api/books?categoryId=4&sortBy=bogus").get_json()
    assert [book["title"] for book in books] == ["Hiša Marije Pomočnice", "Na klancu"]

    # non-numeric filters are ignored
    assert len(client.get("/api/books?author_id=abc").get_json()) == 8
    assert len(client.get("/api/books?author_id=100000000000000000000").get_json()) == 8


def test_list_authors_and_categories(client):
    authors = client.get("/api/authors?search=kette").get_json()
    assert [author["id"] for author in authors] == [4]
    assert authors[0]["book_count"] == 2

    categories = client.get("/api/categories").get_json()
    assert {c["name"]: c["book_count"] for c in categories}["Esej"] == 0


def test_statistics(client):
    body = client.get("/api/statistics").get_json()

    assert body["total_books"] == 8
    assert body["top_category"]["name"] == "Poezija"
    assert [c["book_count"] for c in body["categories"]] == [4, 2, 1, 1, 0]


def test_unexpected_store_error_is_generic_500(client, monkeypatch):
    def broken():
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(stats, "row_counts", broken)

    response = client.get("/api/statistics")
    assert response.status_code == 500
    assert response.get_json()["errors"] == [
        "An unexpected error occurred while accessing the catalog."
    ]


def test_unknown_route_is_json_404(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert "errors" in response.get_json()

from bookstore.constants.catalog import CLASSIC_GENRE


def test_list_books_paginated(client, make_book):
    for i in range(5):
        make_book(name=f"Book {i}")

    response = client.get("/books/", params={"page": 2, "limit": 2})

    assert response.status_code == 200
    body = response.json()
    assert [book["name"] for book in body["results"]] == ["Book 2", "Book 3"]
    assert body["current_page"] == 2
    assert body["total_pages"] == 3


def test_list_books_rejects_bad_paging(client):
    assert client.get("/books/", params={"page": 0}).status_code == 400
    assert client.get("/books/", params={"limit": 101}).status_code == 400
    assert client.get("/books/", params={"page": "abc"}).status_code == 400


def test_home_returns_all_shelves(client, make_book):
    make_book(name="Classic", category=CLASSIC_GENRE)
    make_book(name="Sale", current_price=50000, discount_percent=50)

    body = client.get("/books/home").json()

    assert set(body) == {"new_books", "classic_books", "discount_books", "popular_books"}
    assert [book["name"] for book in body["classic_books"]] == ["Classic"]
    assert [book["name"] for book in body["discount_books"]] == ["Sale"]


def test_filter_endpoint(client, make_book):
    make_book(name="Old", publication_year=1950)
    make_book(name="Recent", publication_year=2021, category="Kinh tế")
    make_book(name="Recent novel", publication_year=2022)

    response = client.get(
        "/books/filter",
        params=[("genre", "Tiểu thuyết"), ("year", "before-1960"), ("year", "2020-2023")],
    )

    assert response.status_code == 200
    assert [book["name"] for book in response.json()["results"]] == ["Old", "Recent novel"]


def test_filter_endpoint_rejects_bad_year(client):
    response = client.get("/books/filter", params={"year": "sometime"})
    assert response.status_code == 400


def test_detail_and_missing(client, make_book):
    book = make_book(name="Mắt Biếc")

    assert client.get(f"/books/detail/{book.id}").json()["name"] == "Mắt Biếc"
    assert client.get("/books/detail/999").status_code == 404


def test_related_missing_book(client):
    assert client.get("/books/relate/999").status_code == 404


def test_genres(client, make_book):
    make_book(category="Lịch sử")
    make_book(category="Lịch sử")
    assert client.get("/books/genres").json() == ["Lịch sử"]

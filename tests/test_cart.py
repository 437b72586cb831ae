import pytest
from sqlmodel import select

from bookstore.models.cart import CartItem
from bookstore.models.user import User
from bookstore.services import cart_service
from bookstore.services.book_service import BookNotFoundError
from bookstore.services.cart_service import CartItemNotFoundError, InvalidQuantityError


@pytest.fixture
def user(session):
    user = User(name="Reader", email="reader@example.com", password="x")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def test_add_creates_then_increments(session, user, make_book):
    book = make_book(original_price=100000, current_price=80000)

    cart_service.add_to_cart(session, user, book.id, 2)
    cart = cart_service.add_to_cart(session, user, book.id, 3)

    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 5
    assert cart["items"][0]["total"] == 400000
    assert cart["subtotal"] == 400000
    assert cart["quantity"] == 5


def test_add_increments_line_inserted_by_concurrent_request(session, user, make_book, monkeypatch):
    book = make_book()
    cart_service.add_to_cart(session, user, book.id, 1)

    lookup = cart_service._get_line
    calls = []

    def line_not_yet_visible(*args):
        calls.append(args)
        return None if len(calls) == 1 else lookup(*args)

    monkeypatch.setattr(cart_service, "_get_line", line_not_yet_visible)

    cart = cart_service.add_to_cart(session, user, book.id, 2)

    assert cart["quantity"] == 3
    assert len(session.exec(select(CartItem)).all()) == 1


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_rejects_non_positive_quantity(session, user, make_book, quantity):
    book = make_book()
    with pytest.raises(InvalidQuantityError):
        cart_service.add_to_cart(session, user, book.id, quantity)


def test_add_unknown_book(session, user):
    with pytest.raises(BookNotFoundError):
        cart_service.add_to_cart(session, user, 999, 1)


def test_update_to_zero_removes_line(session, user, make_book):
    book = make_book()
    cart_service.add_to_cart(session, user, book.id, 2)

    cart = cart_service.update_cart_item(session, user, book.id, 0)

    assert cart["items"] == []
    assert session.exec(select(CartItem)).all() == []


def test_update_negative_never_leaves_negative_quantity(session, user, make_book):
    book = make_book()
    other = make_book(name="Other")
    cart_service.add_to_cart(session, user, book.id, 2)
    cart_service.add_to_cart(session, user, other.id, 1)

    cart_service.update_cart_item(session, user, book.id, -5)

    quantities = [item.quantity for item in session.exec(select(CartItem)).all()]
    assert quantities == [1]


def test_stray_empty_lines_are_purged_on_mutation(session, user, make_book):
    book = make_book()
    other = make_book(name="Other")
    session.add(CartItem(user_id=user.id, book_id=other.id, quantity=0))
    session.commit()

    cart = cart_service.add_to_cart(session, user, book.id, 1)

    assert [item["book"]["id"] for item in cart["items"]] == [book.id]
    assert len(session.exec(select(CartItem)).all()) == 1


def test_update_missing_line(session, user):
    with pytest.raises(CartItemNotFoundError):
        cart_service.update_cart_item(session, user, 1, 3)


def test_remove_and_clear(session, user, make_book):
    first = make_book(name="First")
    second = make_book(name="Second")
    cart_service.add_to_cart(session, user, first.id, 1)
    cart_service.add_to_cart(session, user, second.id, 4)

    cart = cart_service.remove_from_cart(session, user, first.id)
    assert cart["quantity"] == 4

    cart_service.clear_cart(session, user.id)
    assert cart_service.cart_quantity(session, user.id) == 0


# ---------- routes ----------

def test_cart_requires_session(client):
    assert client.get("/cart/").status_code == 401


def test_cart_endpoints(auth_client, make_book):
    book = make_book(original_price=120000)

    added = auth_client.post("/cart/add", json={"book_id": book.id, "quantity": 2})
    assert added.status_code == 200
    assert added.json()["subtotal"] == 240000

    updated = auth_client.put(f"/cart/update/{book.id}", json={"quantity": 1})
    assert updated.json()["quantity"] == 1

    removed = auth_client.delete(f"/cart/remove/{book.id}")
    assert removed.json()["items"] == []

    assert auth_client.delete(f"/cart/remove/{book.id}").status_code == 404


def test_cart_add_validation(auth_client, make_book):
    book = make_book()
    assert auth_client.post("/cart/add", json={"book_id": book.id, "quantity": 0}).status_code == 400
    assert auth_client.post("/cart/add", json={"book_id": 999, "quantity": 1}).status_code == 404


def test_clear_cart_endpoint(auth_client, make_book):
    book = make_book()
    auth_client.post("/cart/add", json={"book_id": book.id})

    assert auth_client.delete("/cart/clear").json() == {"message": "Cart cleared"}
    assert auth_client.get("/cart/").json()["items"] == []

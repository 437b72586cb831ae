import pytest
from pydantic import ValidationError
from sqlmodel import select

from bookstore.models.cart import CartItem
from bookstore.models.order import Order
from bookstore.schemas.checkout_schemas import SubmitOrderForm
from bookstore.services.ghn_client import ShippingError

from conftest import ORDER_FORM


@pytest.mark.parametrize("phone", ["0971443356", "84971443356", "02838291234"])
def test_form_accepts_vietnamese_phones(phone):
    SubmitOrderForm(**{**ORDER_FORM, "phone": phone})


@pytest.mark.parametrize("phone", ["12345", "0171443356", "+1 555 0100", "09714433561"])
def test_form_rejects_invalid_phones(phone):
    with pytest.raises(ValidationError):
        SubmitOrderForm(**{**ORDER_FORM, "phone": phone})


def test_form_rejects_unknown_payment():
    with pytest.raises(ValidationError):
        SubmitOrderForm(**{**ORDER_FORM, "payment": "CARD"})


# ---------- address lookups ----------

def test_province_lookup(client, ghn):
    response = client.get("/checkout/province")
    assert response.status_code == 200
    assert response.json()[0]["name"] == "Hồ Chí Minh"


def test_district_lookup_validates_id(client, ghn):
    assert client.get("/checkout/district/abc").status_code == 400
    assert client.get("/checkout/district/-1").status_code == 400

    response = client.get("/checkout/district/202")
    assert response.status_code == 200
    ghn.get_districts.assert_called_once_with(202)


def test_ward_lookup(client, ghn):
    assert client.get("/checkout/ward/1442").json() == [{"code": "20101", "name": "Phường Bến Nghé"}]


def test_lookup_shipping_failure_is_500(client, ghn):
    ghn.get_provinces.side_effect = ShippingError("Fetched data has failed status")

    response = client.get("/checkout/province")

    assert response.status_code == 500
    assert response.json()["detail"] == "Fetched data has failed status"


# ---------- preview ----------

def test_preview_requires_session(client):
    response = client.post("/checkout/preview-order", json={"district": 1442, "ward": "20101"})
    assert response.status_code == 401


def test_preview_requires_district_and_ward(auth_client):
    assert auth_client.post("/checkout/preview-order", json={"district": 1442}).status_code == 400


def test_preview_rejects_zero_district(auth_client, ghn):
    response = auth_client.post("/checkout/preview-order", json={"district": 0, "ward": "20101"})
    assert response.status_code == 400
    ghn.preview_order.assert_not_called()


@pytest.mark.parametrize("field", ["province", "district"])
def test_form_rejects_zero_address_ids(field):
    with pytest.raises(ValidationError):
        SubmitOrderForm(**{**ORDER_FORM, field: 0})


def test_preview_empty_cart(auth_client):
    response = auth_client.post("/checkout/preview-order", json={"district": 1442, "ward": "20101"})
    assert response.status_code == 400


def test_preview_uses_cart_quantity(auth_client, ghn, make_book):
    first = make_book(name="First")
    second = make_book(name="Second")
    auth_client.post("/cart/add", json={"book_id": first.id, "quantity": 2})
    auth_client.post("/cart/add", json={"book_id": second.id, "quantity": 1})

    response = auth_client.post("/checkout/preview-order", json={"district": 1442, "ward": "20101"})

    assert response.status_code == 200
    assert response.json()["shipping_fee"] == 22000
    ghn.preview_order.assert_called_once_with(1442, "20101", 3)


# ---------- submit ----------

def test_submit_order_snapshots_cart_and_empties_it(auth_client, ghn, make_book, session):
    first = make_book(name="First", original_price=100000, current_price=90000)
    second = make_book(name="Second", original_price=50000)
    auth_client.post("/cart/add", json={"book_id": first.id, "quantity": 2})
    auth_client.post("/cart/add", json={"book_id": second.id, "quantity": 1})

    response = auth_client.post("/checkout/submit-order", json=ORDER_FORM)

    assert response.status_code == 201
    body = response.json()
    assert body["shipping_code"] == "LBK6QN"

    order = session.get(Order, body["order_id"])
    assert order.full_address == "12 Lê Lợi, Phường Bến Nghé, Quận 1, Hồ Chí Minh"
    assert order.payment == "COD"
    assert sorted((item.book_name, item.price, item.quantity) for item in order.items) == [
        ("First", 90000, 2),
        ("Second", 50000, 1),
    ]
    assert session.exec(select(CartItem)).all() == []

    kwargs = ghn.create_order.call_args.kwargs
    assert kwargs["quantity"] == 3
    assert kwargs["district_id"] == 1442
    assert kwargs["ward_code"] == "20101"


def test_submit_order_empty_cart(auth_client, ghn):
    response = auth_client.post("/checkout/submit-order", json=ORDER_FORM)
    assert response.status_code == 400
    ghn.create_order.assert_not_called()


def test_submit_order_unknown_ward(auth_client, ghn, make_book):
    book = make_book()
    auth_client.post("/cart/add", json={"book_id": book.id})

    response = auth_client.post("/checkout/submit-order", json={**ORDER_FORM, "ward": "99999"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid ward"
    ghn.create_order.assert_not_called()


def test_submit_order_carrier_failure_keeps_cart(auth_client, ghn, make_book, session):
    book = make_book()
    auth_client.post("/cart/add", json={"book_id": book.id, "quantity": 2})
    ghn.create_order.side_effect = ShippingError("Failed to fetch v2/shipping-order/create")

    response = auth_client.post("/checkout/submit-order", json=ORDER_FORM)

    assert response.status_code == 500
    assert session.exec(select(Order)).all() == []
    assert [item.quantity for item in session.exec(select(CartItem)).all()] == [2]


def test_submit_order_invalid_form(auth_client):
    response = auth_client.post("/checkout/submit-order", json={**ORDER_FORM, "phone": "123"})
    assert response.status_code == 400

import logging
from typing import List, Optional

from sqlmodel import Session

from bookstore.models.order import Order
from bookstore.models.order_item import OrderItem
from bookstore.models.user import User
from bookstore.schemas.checkout_schemas import SubmitOrderForm
from bookstore.services.cart_service import cart_quantity, clear_cart, get_cart_items
from bookstore.services.ghn_client import GHNClient

logger = logging.getLogger(__name__)


class CheckoutError(ValueError):
    """Checkout input the order cannot be built from."""


class EmptyCartError(CheckoutError):
    pass


def _find(entries: List[dict], field: str, value) -> Optional[dict]:
    return next((entry for entry in entries if entry[field] == value), None)


def preview_order(
    session: Session,
    ghn: GHNClient,
    user: User,
    district_id: int,
    ward_code: str,
) -> dict:
    quantity = cart_quantity(session, user.id)
    if quantity == 0:
        raise EmptyCartError("Cart is empty")
    return ghn.preview_order(district_id, ward_code, quantity)


def resolve_full_address(ghn: GHNClient, form: SubmitOrderForm) -> str:
    """Join the street address with the names of ward, district and province."""
    province = _find(ghn.get_provinces(), "id", form.province)
    if province is None:
        raise CheckoutError("Invalid province")

    district = _find(ghn.get_districts(form.province), "id", form.district)
    if district is None:
        raise CheckoutError("Invalid district")

    ward = _find(ghn.get_wards(form.district), "code", form.ward)
    if ward is None:
        raise CheckoutError("Invalid ward")

    return ", ".join([form.address.strip(), ward["name"], district["name"], province["name"]])


def submit_order(
    session: Session,
    ghn: GHNClient,
    user: User,
    form: SubmitOrderForm,
) -> Order:
    """
    Place an order for everything in the user's cart.

    The GHN shipment is created first; the order and its item snapshot
    are saved and the cart emptied in a single commit afterwards, so a
    carrier failure leaves the cart untouched.
    """
    cart_items = get_cart_items(session, user.id)
    if not cart_items:
        raise EmptyCartError("Cart is empty")

    quantity = sum(cart_item.quantity for cart_item, _ in cart_items)
    full_address = resolve_full_address(ghn, form)

    shipping_code = ghn.create_order(
        name=form.name,
        phone=form.phone,
        address=full_address,
        payment=form.payment,
        district_id=form.district,
        ward_code=form.ward,
        quantity=quantity,
        note=form.note,
    )

    order = Order(
        user_id=user.id,
        recipient_name=form.name,
        phone=form.phone,
        email=form.email,
        full_address=full_address,
        note=form.note,
        shipping_code=shipping_code,
        payment=form.payment.value,
        items=[
            OrderItem(
                book_id=book.id,
                book_name=book.name,
                price=book.effective_price,
                quantity=cart_item.quantity,
            )
            for cart_item, book in cart_items
        ],
    )
    session.add(order)

    clear_cart(session, user.id, commit=False)
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.id} placed by user {user.id} (GHN {shipping_code})")
    return order

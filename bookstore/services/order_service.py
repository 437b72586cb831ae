from typing import List

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from bookstore.models.order import Order


class OrderNotFoundError(LookupError):
    pass


def to_client_order(order: Order) -> dict:
    """Order without owner, plus item lines and computed totals."""
    items = [
        {
            "book_id": item.book_id,
            "book_name": item.book_name,
            "price": item.price,
            "quantity": item.quantity,
            "line_total": item.line_total,
        }
        for item in order.items
    ]

    return {
        "id": order.id,
        "recipient_name": order.recipient_name,
        "phone": order.phone,
        "email": order.email,
        "full_address": order.full_address,
        "shipping_code": order.shipping_code,
        "note": order.note,
        "payment": order.payment,
        "created_at": order.created_at,
        "quantity": sum(item["quantity"] for item in items),
        "total": sum(item["line_total"] for item in items),
        "items": items,
    }


def get_orders(session: Session, user_id: int) -> List[dict]:
    orders = session.exec(
        select(Order)
        .where(Order.user_id == user_id)
        .options(selectinload(Order.items))
        .order_by(Order.created_at.desc(), Order.id.desc())
    ).all()
    return [to_client_order(order) for order in orders]


def get_order_by_id(session: Session, user_id: int, order_id: int) -> dict:
    order = session.get(Order, order_id)

    if not order or order.user_id != user_id:
        raise OrderNotFoundError("Order not found")

    return to_client_order(order)

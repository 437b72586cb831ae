import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from bookstore.constants.catalog import ImageSize
from bookstore.models.book import Book
from bookstore.models.base import utcnow
from bookstore.models.cart import CartItem
from bookstore.models.user import User
from bookstore.services.book_service import BookNotFoundError

logger = logging.getLogger(__name__)


class InvalidQuantityError(ValueError):
    pass


class CartItemNotFoundError(LookupError):
    pass


def get_cart_items(session: Session, user_id: int) -> List[Tuple[CartItem, Book]]:
    return session.exec(
        select(CartItem, Book)
        .join(Book, CartItem.book_id == Book.id)
        .where(CartItem.user_id == user_id, CartItem.quantity > 0)
        .order_by(CartItem.id)
    ).all()


def cart_quantity(session: Session, user_id: int) -> int:
    """Total number of books in the cart."""
    total = session.exec(
        select(func.coalesce(func.sum(CartItem.quantity), 0))
        .where(CartItem.user_id == user_id, CartItem.quantity > 0)
    ).one()
    return int(total)


def get_cart(session: Session, user: User) -> dict:
    items_response = []
    subtotal = 0
    quantity = 0

    for cart_item, book in get_cart_items(session, user.id):
        line_total = book.effective_price * cart_item.quantity
        subtotal += line_total
        quantity += cart_item.quantity

        items_response.append({
            "book": book.to_client(ImageSize.SMALL, summary=True),
            "quantity": cart_item.quantity,
            "total": line_total,
        })

    return {
        "items": items_response,
        "quantity": quantity,
        "subtotal": subtotal,
    }


def _get_line(session: Session, user_id: int, book_id: int) -> Optional[CartItem]:
    return session.exec(
        select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.book_id == book_id
        )
    ).first()


def _purge_empty_lines(session: Session, user_id: int) -> None:
    empty = session.exec(
        select(CartItem).where(CartItem.user_id == user_id, CartItem.quantity <= 0)
    ).all()
    for item in empty:
        session.delete(item)


def _commit(session: Session, user_id: int) -> None:
    session.flush()
    _purge_empty_lines(session, user_id)
    session.commit()


def _increment(session: Session, item: CartItem, quantity: int) -> None:
    item.quantity += quantity
    item.updated_at = utcnow()
    session.add(item)


def add_to_cart(session: Session, user: User, book_id: int, quantity: int = 1) -> dict:
    if quantity <= 0:
        raise InvalidQuantityError("Quantity must be greater than 0")

    book = session.get(Book, book_id)
    if not book:
        raise BookNotFoundError(f"Book with id '{book_id}' not found")

    user_id = user.id
    existing_item = _get_line(session, user_id, book_id)

    if existing_item:
        _increment(session, existing_item, quantity)
        _commit(session, user_id)
    else:
        session.add(CartItem(user_id=user_id, book_id=book.id, quantity=quantity))
        try:
            _commit(session, user_id)
        except IntegrityError:
            # another request created the line first
            session.rollback()
            _increment(session, _get_line(session, user_id, book_id), quantity)
            _commit(session, user_id)

    logger.info(f"User {user_id} added {quantity} x book {book_id} to cart")
    return get_cart(session, user)


def update_cart_item(session: Session, user: User, book_id: int, quantity: int) -> dict:
    """Set the quantity of a line; zero or less removes it."""
    item = _get_line(session, user.id, book_id)
    if not item:
        raise CartItemNotFoundError("Cart item not found")

    if quantity <= 0:
        session.delete(item)
    else:
        item.quantity = quantity
        item.updated_at = utcnow()
        session.add(item)

    _commit(session, user.id)
    return get_cart(session, user)


def remove_from_cart(session: Session, user: User, book_id: int) -> dict:
    item = _get_line(session, user.id, book_id)
    if not item:
        raise CartItemNotFoundError("Cart item not found")

    session.delete(item)
    _commit(session, user.id)
    return get_cart(session, user)


def clear_cart(session: Session, user_id: int, commit: bool = True) -> None:
    items = session.exec(
        select(CartItem).where(CartItem.user_id == user_id)
    ).all()

    for item in items:
        session.delete(item)

    if commit:
        session.commit()

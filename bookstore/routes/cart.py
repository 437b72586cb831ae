from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from bookstore.database import get_session
from bookstore.models.user import User
from bookstore.schemas.cart_schemas import CartAddRequest, CartUpdateRequest
from bookstore.services import cart_service
from bookstore.services.book_service import BookNotFoundError
from bookstore.services.cart_service import CartItemNotFoundError, InvalidQuantityError
from bookstore.utils.session import get_current_user


router = APIRouter()

# View Cart

@router.get("/")
def get_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return cart_service.get_cart(session, current_user)


# Add to Cart

@router.post("/add")
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    try:
        return cart_service.add_to_cart(session, current_user, data.book_id, data.quantity)
    except InvalidQuantityError as e:
        raise HTTPException(400, str(e))
    except BookNotFoundError as e:
        raise HTTPException(404, str(e))


# Update Cart

@router.put("/update/{book_id}")
def update_cart_item(
    book_id: int,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    try:
        return cart_service.update_cart_item(session, current_user, book_id, data.quantity)
    except CartItemNotFoundError as e:
        raise HTTPException(404, str(e))


# Remove Cart

@router.delete("/remove/{book_id}")
def remove_item(
    book_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    try:
        return cart_service.remove_from_cart(session, current_user, book_id)
    except CartItemNotFoundError as e:
        raise HTTPException(404, str(e))


# Clear Cart

@router.delete("/clear")
def clear_cart_endpoint(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart_service.clear_cart(session, current_user.id)
    return {"message": "Cart cleared"}

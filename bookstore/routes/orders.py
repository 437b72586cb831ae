from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from typing import List

from bookstore.database import get_session
from bookstore.models.user import User
from bookstore.schemas.orders_schemas import OrderResponse
from bookstore.services import order_service
from bookstore.services.order_service import OrderNotFoundError
from bookstore.utils.session import get_current_user

router = APIRouter()


# Order history

@router.get("/", response_model=List[OrderResponse])
def list_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return order_service.get_orders(session, current_user.id)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    try:
        return order_service.get_order_by_id(session, current_user.id, order_id)
    except OrderNotFoundError as e:
        raise HTTPException(404, str(e))

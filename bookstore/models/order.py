from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime

from bookstore.models.base import timestamp_field

from bookstore.models.order_item import OrderItem

class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    # recipient snapshot
    recipient_name: str
    phone: str
    email: str
    full_address: str
    note: Optional[str] = None

    shipping_code: str
    payment: str  # PaymentMethod value

    created_at: datetime = timestamp_field()

    items: List["OrderItem"] = Relationship(back_populates="order")

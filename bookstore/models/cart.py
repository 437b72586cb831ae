from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from bookstore.models.base import timestamp_field

class CartItem(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "book_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    book_id: int = Field(foreign_key="book.id")
    quantity: int = 1
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

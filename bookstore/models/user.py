from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from bookstore.models.base import timestamp_field


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    password: str
    created_at: datetime = timestamp_field()

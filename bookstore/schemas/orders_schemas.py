from datetime import datetime
from pydantic import BaseModel
from typing import List, Optional

class OrderLine(BaseModel):
    book_id: int
    book_name: str
    price: int
    quantity: int
    line_total: int

class OrderResponse(BaseModel):
    id: int
    recipient_name: str
    phone: str
    email: str
    full_address: str
    shipping_code: str
    note: Optional[str] = None
    payment: str
    created_at: datetime
    quantity: int
    total: int
    items: List[OrderLine]

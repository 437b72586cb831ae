from sqlmodel import SQLModel, Field , Relationship
from typing import Optional , TYPE_CHECKING

if TYPE_CHECKING:
    from bookstore.models.order import Order

class OrderItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    book_id: int = Field(foreign_key="book.id")

    # copied from the book at purchase time
    book_name: str
    price: int
    quantity: int

    order: Optional["Order"] = Relationship(back_populates="items")

    @property
    def line_total(self) -> int:
        return self.price * self.quantity

from sqlmodel import SQLModel, Field

class CartAddRequest(SQLModel):
    book_id: int = Field(ge=1)
    quantity: int = 1

class CartUpdateRequest(SQLModel):
    # zero or less removes the line
    quantity: int

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from bookstore.models.base import timestamp_field

# fields returned by catalog listings
SUMMARY_FIELDS = (
    "id",
    "name",
    "image",
    "original_price",
    "current_price",
    "discount_percent",
)


def resize_image(url: str, width: int) -> str:
    """Insert a Cloudinary width transformation into an upload URL."""
    return url.replace("/image/upload/", f"/image/upload/w_{width}/", 1)


class Book(SQLModel, table=True):
    #main info
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    image: str
    description: Optional[str] = None

    #Author and meta
    author: str = Field(index=True)
    category: str = Field(index=True)
    publication_year: Optional[int] = Field(default=None, index=True)
    isbn: Optional[str] = None

    #Physical details
    dimensions: Optional[str] = None
    num_pages: Optional[int] = None
    cover_type: Optional[str] = None

    #Shop Details (VND)
    original_price: int
    current_price: Optional[int] = None
    discount_percent: int = Field(default=0, index=True)

    created_at: datetime = timestamp_field()

    @property
    def effective_price(self) -> int:
        if self.current_price is not None:
            return self.current_price
        return self.original_price

    def to_client(self, image_width: int, summary: bool = False) -> dict:
        data = self.model_dump(exclude={"created_at"})
        if summary:
            data = {key: data[key] for key in SUMMARY_FIELDS}
        data["image"] = resize_image(self.image, image_width)
        data["effective_price"] = self.effective_price
        return data

from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List

from bookstore.constants.catalog import (
    MAX_PAGES,
    MAX_PRICE,
    MIN_PAGES,
    MIN_PRICE,
    MIN_PUBLICATION_YEAR,
)


class BookImport(BaseModel):
    """One record of a catalog fixture file (camelCase keys accepted)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)

    original_price: int = Field(..., ge=MIN_PRICE, le=MAX_PRICE)
    current_price: Optional[int] = Field(None, ge=MIN_PRICE, le=MAX_PRICE)
    discount_percent: Optional[int] = Field(None, ge=0, le=100)

    isbn: Optional[str] = None
    publication_year: Optional[int] = Field(None, ge=MIN_PUBLICATION_YEAR)
    dimensions: Optional[str] = None
    num_pages: Optional[int] = Field(None, ge=MIN_PAGES, le=MAX_PAGES)
    cover_type: Optional[str] = None
    description: Optional[str] = None

    @field_validator("publication_year")
    @classmethod
    def not_in_future(cls, value):
        if value is not None and value > datetime.now(timezone.utc).year:
            raise ValueError("Too large year")
        return value

    @model_validator(mode="after")
    def fill_discount(self):
        if self.discount_percent is None:
            if self.current_price is not None and self.current_price < self.original_price:
                self.discount_percent = round(
                    (1 - self.current_price / self.original_price) * 100
                )
            else:
                self.discount_percent = 0
        return self


class BookFilter(BaseModel):
    genres: List[str] = []
    # "2015", "2010-2019" or "before-1990"
    years: List[str] = []
    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    sort: Optional[str] = None

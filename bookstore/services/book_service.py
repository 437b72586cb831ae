import re
from typing import List, Optional

from sqlalchemy import and_, or_, func
from sqlmodel import Session, select

from bookstore.constants.catalog import (
    CLASSIC_GENRE,
    DEFAULT_PAGE_LIMIT,
    RELATED_BY_AUTHOR,
    RELATED_BY_GENRE,
    RELATED_BY_YEAR,
    ImageSize,
)
from bookstore.models.book import Book
from bookstore.schemas.book_schemas import BookFilter
from bookstore.utils.pagination import InvalidQueryError, paginate


class BookNotFoundError(LookupError):
    pass


YEAR_BUCKET_RE = re.compile(r"^(\d{4})(?:-(\d{4}))?$")
OLDER_THAN_RE = re.compile(r"^before-(\d{4})$")


def effective_price():
    return func.coalesce(Book.current_price, Book.original_price)


SORT_FIELDS = {
    "newest": lambda: [Book.publication_year.desc().nulls_last(), Book.id],
    "oldest": lambda: [Book.publication_year.asc().nulls_last(), Book.id],
    "price-asc": lambda: [effective_price().asc(), Book.id],
    "price-desc": lambda: [effective_price().desc(), Book.id],
    "discount": lambda: [Book.discount_percent.desc(), Book.id],
    "name": lambda: [Book.name.asc(), Book.id],
}


def _summary(book: Book) -> dict:
    return book.to_client(ImageSize.SMALL, summary=True)


def _list_page(session: Session, query, page: int, limit: int):
    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        transform=_summary,
    )


def get_all_books(session: Session, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT):
    return _list_page(session, select(Book).order_by(Book.id), page, limit)


def get_new_books(session: Session, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT):
    query = (
        select(Book)
        .where(Book.publication_year.is_not(None))
        .order_by(Book.publication_year.desc(), Book.id)
    )
    return _list_page(session, query, page, limit)


def get_classic_books(session: Session, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT):
    query = select(Book).where(Book.category == CLASSIC_GENRE).order_by(Book.id)
    return _list_page(session, query, page, limit)


def get_discount_books(session: Session, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT):
    query = (
        select(Book)
        .where(Book.discount_percent > 0)
        .order_by(Book.discount_percent.desc(), Book.id)
    )
    return _list_page(session, query, page, limit)


def get_popular_books(session: Session, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT):
    query = select(Book).order_by(Book.discount_percent.desc(), Book.id)
    return _list_page(session, query, page, limit)


def get_home_books(session: Session) -> dict:
    """First page of every home page shelf."""
    return {
        "new_books": get_new_books(session)["results"],
        "classic_books": get_classic_books(session)["results"],
        "discount_books": get_discount_books(session)["results"],
        "popular_books": get_popular_books(session)["results"],
    }


def get_book_by_id(session: Session, book_id: int) -> Optional[dict]:
    book = session.get(Book, book_id)
    if book is None:
        return None
    return book.to_client(ImageSize.MEDIUM)


def get_related_books(session: Session, book_id: int) -> List[dict]:
    """
    Books sharing the genre, the author or the publication year,
    in that order, without duplicates.
    """
    book = session.get(Book, book_id)
    if book is None:
        raise BookNotFoundError(f"Book with id '{book_id}' not found")

    others = select(Book).where(Book.id != book.id).order_by(Book.id)

    same_genre = session.exec(
        others.where(Book.category == book.category).limit(RELATED_BY_GENRE)
    ).all()
    same_author = session.exec(
        others.where(Book.author == book.author).limit(RELATED_BY_AUTHOR)
    ).all()
    same_year = []
    if book.publication_year is not None:
        same_year = session.exec(
            others.where(Book.publication_year == book.publication_year).limit(RELATED_BY_YEAR)
        ).all()

    seen = set()
    related = []
    for candidate in [*same_genre, *same_author, *same_year]:
        if candidate.id in seen:
            continue
        seen.add(candidate.id)
        related.append(_summary(candidate))
    return related


def list_genres(session: Session) -> List[str]:
    return list(session.exec(select(Book.category).distinct().order_by(Book.category)).all())


# ------------------ FILTERING ------------------

def parse_year_bucket(bucket: str):
    """
    Turn a year facet into an inclusive (low, high) pair.
    ``None`` means unbounded on that side.
    """
    bucket = bucket.strip()

    older = OLDER_THAN_RE.match(bucket)
    if older:
        return None, int(older.group(1)) - 1

    match = YEAR_BUCKET_RE.match(bucket)
    if not match:
        raise InvalidQueryError(f"Invalid year filter '{bucket}'")

    low = int(match.group(1))
    high = int(match.group(2)) if match.group(2) else low
    if low > high:
        raise InvalidQueryError(f"Invalid year filter '{bucket}'")
    return low, high


def _year_condition(bucket: str):
    low, high = parse_year_bucket(bucket)
    if low is None:
        return Book.publication_year <= high
    return and_(Book.publication_year >= low, Book.publication_year <= high)


def build_filter_query(filters: BookFilter):
    query = select(Book)

    genres = [genre for genre in filters.genres if genre]
    if genres:
        query = query.where(Book.category.in_(genres))

    if filters.years:
        query = query.where(or_(*[_year_condition(bucket) for bucket in filters.years]))

    if (
        filters.min_price is not None
        and filters.max_price is not None
        and filters.min_price > filters.max_price
    ):
        raise InvalidQueryError("Invalid price range")

    price = effective_price()
    if filters.min_price is not None:
        query = query.where(price >= filters.min_price)

    if filters.max_price is not None:
        query = query.where(price <= filters.max_price)

    if filters.sort:
        order = SORT_FIELDS.get(filters.sort)
        if order is None:
            raise InvalidQueryError(f"Invalid sort field '{filters.sort}'")
        query = query.order_by(*order())
    else:
        query = query.order_by(Book.id)

    return query


def filter_books(
    session: Session,
    filters: BookFilter,
    page: int = 1,
    limit: int = DEFAULT_PAGE_LIMIT,
):
    result = _list_page(session, build_filter_query(filters), page, limit)
    result["filters"] = filters.model_dump()
    return result

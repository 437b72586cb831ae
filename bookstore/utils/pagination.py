import math
from typing import Callable, Optional, Tuple

from sqlalchemy import func
from sqlmodel import select

from bookstore.constants.catalog import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT


class InvalidQueryError(ValueError):
    """Raised for paging or filter input the catalog cannot serve."""


def validate_page_params(
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> Tuple[int, int]:
    if page is None:
        page = 1

    if limit is None:
        limit = DEFAULT_PAGE_LIMIT

    if page < 1:
        raise InvalidQueryError("Invalid page number")

    if limit < 1 or limit > MAX_PAGE_LIMIT:
        raise InvalidQueryError("Invalid page limit")

    return page, limit


def paginate(
    *,
    session,
    query,
    page: int = 1,
    limit: int = DEFAULT_PAGE_LIMIT,
    transform: Optional[Callable] = None,
):
    offset = (page - 1) * limit

    total = session.exec(
        select(func.count()).select_from(query.subquery())
    ).one()

    results = session.exec(
        query.offset(offset).limit(limit)
    ).all()

    if transform is not None:
        results = [transform(item) for item in results]

    return {
        "results": results,
        "current_page": page,
        "total_pages": math.ceil(total / limit),
        "total_items": total,
        "limit": limit,
    }

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session
from typing import List, Optional

from bookstore.database import get_session
from bookstore.schemas.book_schemas import BookFilter
from bookstore.services import book_service
from bookstore.services.book_service import BookNotFoundError
from bookstore.utils.pagination import InvalidQueryError, validate_page_params

router = APIRouter()


def page_params(page: Optional[int] = None, limit: Optional[int] = None):
    try:
        return validate_page_params(page, limit)
    except InvalidQueryError as e:
        raise HTTPException(400, str(e))


# ---------- LISTS ----------

@router.get("/", summary="List all books")
def list_books(paging=Depends(page_params), session: Session = Depends(get_session)):
    page, limit = paging
    return book_service.get_all_books(session, page, limit)


@router.get("/new", summary="Most recently published books")
def new_books(paging=Depends(page_params), session: Session = Depends(get_session)):
    page, limit = paging
    return book_service.get_new_books(session, page, limit)


@router.get("/classic", summary="Classic literature")
def classic_books(paging=Depends(page_params), session: Session = Depends(get_session)):
    page, limit = paging
    return book_service.get_classic_books(session, page, limit)


@router.get("/discount", summary="Discounted books, biggest discount first")
def discount_books(paging=Depends(page_params), session: Session = Depends(get_session)):
    page, limit = paging
    return book_service.get_discount_books(session, page, limit)


@router.get("/popular", summary="Popular books")
def popular_books(paging=Depends(page_params), session: Session = Depends(get_session)):
    page, limit = paging
    return book_service.get_popular_books(session, page, limit)


@router.get("/home", summary="Home page shelves")
def home_books(session: Session = Depends(get_session)):
    return book_service.get_home_books(session)


@router.get("/genres", summary="Available genres")
def genres(session: Session = Depends(get_session)):
    return book_service.list_genres(session)


# ------------------ FILTER BOOKS ------------------
@router.get("/filter", summary="Filter books by genre, year and price")
def filter_books(
    genre: List[str] = Query(default=[]),
    year: List[str] = Query(default=[], description="2015, 2010-2019 or before-1990"),
    min_price: Optional[int] = Query(default=None, ge=0),
    max_price: Optional[int] = Query(default=None, ge=0),
    sort: Optional[str] = None,
    paging=Depends(page_params),
    session: Session = Depends(get_session)
):
    page, limit = paging
    filters = BookFilter(
        genres=genre,
        years=year,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
    )
    try:
        return book_service.filter_books(session, filters, page, limit)
    except InvalidQueryError as e:
        raise HTTPException(400, str(e))


# ---------- SINGLE BOOK ----------

@router.get("/detail/{book_id}", summary="Get a book by ID")
def book_detail(book_id: int, session: Session = Depends(get_session)):
    book = book_service.get_book_by_id(session, book_id)
    if book is None:
        raise HTTPException(404, f"Book with id '{book_id}' not found")
    return book


@router.get("/relate/{book_id}", summary="Books related to a book")
def related_books(book_id: int, session: Session = Depends(get_session)):
    try:
        return book_service.get_related_books(session, book_id)
    except BookNotFoundError as e:
        raise HTTPException(404, str(e))

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError

from bookstore.database import create_db_and_tables
from bookstore.config import settings
from bookstore.routes import (
    books,
    cart,
    checkout,
    health,
    orders,
    users,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="Bookstore API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        content={"detail": "Database error"},
    )


app.include_router(books.router, prefix="/books", tags=["Books"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(checkout.router, prefix="/checkout", tags=["Checkout"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get("/")
def root():
    return {
        "book_endpoints": [
            "/books", "/books/new", "/books/classic", "/books/discount",
            "/books/popular", "/books/home", "/books/genres", "/books/filter",
            "/books/detail/{book_id}", "/books/relate/{book_id}"
        ],
        "user_endpoints": [
            "/users/register", "/users/login", "/users/logout", "/users/me"
        ],
        "cart": [
            "/cart", "/cart/add", "/cart/update/{book_id}",
            "/cart/remove/{book_id}", "/cart/clear"
        ],
        "checkout": [
            "/checkout/province", "/checkout/district/{province_id}",
            "/checkout/ward/{district_id}", "/checkout/preview-order",
            "/checkout/submit-order"
        ],
        "orders": [
            "/orders", "/orders/{order_id}"
        ]
    }

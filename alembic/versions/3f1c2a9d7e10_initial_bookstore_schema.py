"""initial bookstore schema

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "book",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("image", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("author", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("publication_year", sa.Integer(), nullable=True),
        sa.Column("isbn", sa.String(), nullable=True),
        sa.Column("dimensions", sa.String(), nullable=True),
        sa.Column("num_pages", sa.Integer(), nullable=True),
        sa.Column("cover_type", sa.String(), nullable=True),
        sa.Column("original_price", sa.Integer(), nullable=False),
        sa.Column("current_price", sa.Integer(), nullable=True),
        sa.Column("discount_percent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_book_name", "book", ["name"])
    op.create_index("ix_book_author", "book", ["author"])
    op.create_index("ix_book_category", "book", ["category"])
    op.create_index("ix_book_publication_year", "book", ["publication_year"])
    op.create_index("ix_book_discount_percent", "book", ["discount_percent"])

    op.create_table(
        "cartitem",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("book_id", sa.Integer(), sa.ForeignKey("book.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "book_id"),
    )
    op.create_index("ix_cartitem_user_id", "cartitem", ["user_id"])

    op.create_table(
        "order",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("recipient_name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_address", sa.String(), nullable=False),
        sa.Column("note", sa.String(), nullable=True),
        sa.Column("shipping_code", sa.String(), nullable=False),
        sa.Column("payment", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_order_user_id", "order", ["user_id"])

    op.create_table(
        "orderitem",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("order.id"), nullable=False),
        sa.Column("book_id", sa.Integer(), sa.ForeignKey("book.id"), nullable=False),
        sa.Column("book_name", sa.String(), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
    )
    op.create_index("ix_orderitem_order_id", "orderitem", ["order_id"])


def downgrade() -> None:
    op.drop_index("ix_orderitem_order_id", table_name="orderitem")
    op.drop_table("orderitem")
    op.drop_index("ix_order_user_id", table_name="order")
    op.drop_table("order")
    op.drop_index("ix_cartitem_user_id", table_name="cartitem")
    op.drop_table("cartitem")
    for index in ("discount_percent", "publication_year", "category", "author", "name"):
        op.drop_index(f"ix_book_{index}", table_name="book")
    op.drop_table("book")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")

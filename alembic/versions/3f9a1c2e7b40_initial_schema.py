"""initial_schema

Revision ID: 3f9a1c2e7b40
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the five farmer-portal tables (users, farmers, products, reviews,
orders) and their two PostgreSQL enum types.  Enables uuid-ossp for the
server-side primary key default.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f9a1c2e7b40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# ── Enum type names (PostgreSQL CREATE TYPE) ────────────────────────────────
ENUM_USER_ROLE = postgresql.ENUM(
    "admin", "farmer", "buyer", name="user_role", create_type=False
)
ENUM_ORDER_STATUS = postgresql.ENUM(
    "Pending",
    "Shipping",
    "Completed",
    "Canceled",
    name="order_status",
    create_type=False,
)


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("uuid_generate_v4()"),
        nullable=False,
    )


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ── 1. Create enum types ────────────────────────────────────────────
    ENUM_USER_ROLE.create(op.get_bind(), checkfirst=True)
    ENUM_ORDER_STATUS.create(op.get_bind(), checkfirst=True)

    # ── 2. Accounts ─────────────────────────────────────────────────────

    # users
    op.create_table(
        "users",
        _id_column(),
        sa.Column("username", sa.String(150), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("hashed_password", sa.String(128), nullable=False),
        sa.Column(
            "role",
            ENUM_USER_ROLE,
            server_default=sa.text("'buyer'"),
            nullable=False,
        ),
        sa.Column(
            "is_active",
            sa.Boolean(),
            server_default=sa.text("true"),
            nullable=False,
        ),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # farmers
    op.create_table(
        "farmers",
        _id_column(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("bio", sa.String(500), server_default=sa.text("''"), nullable=False),
        sa.Column("about", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("region", sa.String(64), server_default=sa.text("''"), nullable=False),
        sa.Column("town", sa.String(255), server_default=sa.text("''"), nullable=False),
        sa.Column("image", sa.String(2048), server_default=sa.text("''"), nullable=False),
        sa.Column("payment_account_id", sa.String(128), nullable=True),
        *_timestamp_columns(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    # ── 3. Marketplace ──────────────────────────────────────────────────

    # products
    op.create_table(
        "products",
        _id_column(),
        sa.Column("farmer_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("quantity", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column(
            "images",
            postgresql.ARRAY(sa.String(2048)),
            server_default=sa.text("'{}'"),
            nullable=False,
        ),
        *_timestamp_columns(),
        sa.ForeignKeyConstraint(["farmer_id"], ["farmers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_products_farmer_id", "products", ["farmer_id"])

    # reviews
    op.create_table(
        "reviews",
        _id_column(),
        sa.Column("product_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("farmer_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        *_timestamp_columns(),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["farmer_id"], ["farmers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reviews_farmer_id", "reviews", ["farmer_id"])

    # orders
    op.create_table(
        "orders",
        _id_column(),
        sa.Column("order_code", sa.String(32), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("farmer_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("product_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("contact", sa.String(64), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column(
            "status",
            ENUM_ORDER_STATUS,
            server_default=sa.text("'Pending'"),
            nullable=False,
        ),
        *_timestamp_columns(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["farmer_id"], ["farmers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("order_code"),
    )
    op.create_index("ix_orders_farmer_created", "orders", ["farmer_id", "created_at"])


def downgrade() -> None:
    # ── Drop tables in reverse dependency order ─────────────────────────
    op.drop_table("orders")
    op.drop_table("reviews")
    op.drop_table("products")
    op.drop_table("farmers")
    op.drop_table("users")

    # ── Drop enum types ─────────────────────────────────────────────────
    ENUM_ORDER_STATUS.drop(op.get_bind(), checkfirst=True)
    ENUM_USER_ROLE.drop(op.get_bind(), checkfirst=True)

"""Product, Review and Order ORM models — the farmer's side of the marketplace.

Orders are placed by buyers through the storefront (outside this service);
the portal reads them and transitions ``status`` only.  Products and their
reviews belong to the farmer and are managed from the portal.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmportal.models.base import Base, FarmerOwnedMixin, TimestampMixin, UUIDPrimaryKeyMixin
from farmportal.models.enums import OrderStatusEnum

if TYPE_CHECKING:
    from farmportal.models.user import User
    from farmportal.models.farmer import Farmer

# ═══════════════════════════════════════════════════════════════════════════
# Product
# ═══════════════════════════════════════════════════════════════════════════


class Product(Base, UUIDPrimaryKeyMixin, FarmerOwnedMixin, TimestampMixin):
    """A listing owned by one farmer.  ``images`` holds hosted image URLs."""

    __tablename__ = "products"
    __table_args__ = (Index("ix_products_farmer_id", "farmer_id"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )
    price: Mapped[float] = mapped_column(Float, nullable=False)
    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    images: Mapped[list[str]] = mapped_column(
        ARRAY(String(2048)),
        nullable=False,
        default=list,
        server_default=text("'{}'"),
    )

    # ── Relationships ────────────────────────────────────────────────────
    farmer: Mapped[Farmer] = relationship(back_populates="products")
    reviews: Mapped[list[Review]] = relationship(
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} slug={self.slug!r} farmer={self.farmer_id}>"


# ═══════════════════════════════════════════════════════════════════════════
# Review
# ═══════════════════════════════════════════════════════════════════════════


class Review(Base, UUIDPrimaryKeyMixin, FarmerOwnedMixin, TimestampMixin):
    """A buyer's rating of a product.

    ``farmer_id`` is denormalized from the product so the farmer's average
    rating is a single-table aggregate.
    """

    __tablename__ = "reviews"
    __table_args__ = (
        Index("ix_reviews_farmer_id", "farmer_id"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )

    product_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    # ── Relationships ────────────────────────────────────────────────────
    product: Mapped[Product] = relationship(back_populates="reviews")

    def __repr__(self) -> str:
        return f"<Review id={self.id} product={self.product_id} rating={self.rating}>"


# ═══════════════════════════════════════════════════════════════════════════
# Order
# ═══════════════════════════════════════════════════════════════════════════


class Order(Base, UUIDPrimaryKeyMixin, FarmerOwnedMixin, TimestampMixin):
    """A single-product purchase placed with one farmer.

    ``order_code`` is the human-readable reference shown to both parties
    (``ORD-YYYYMMDD-XXXXX``).
    """

    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_farmer_created", "farmer_id", "created_at"),
    )

    order_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    contact: Mapped[str] = mapped_column(String(64), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[OrderStatusEnum] = mapped_column(
        Enum(
            OrderStatusEnum,
            name="order_status",
            create_constraint=False,
            native_enum=True,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=OrderStatusEnum.pending,
        server_default=OrderStatusEnum.pending.value,
    )

    # ── Relationships ────────────────────────────────────────────────────
    buyer: Mapped[User] = relationship()
    farmer: Mapped[Farmer] = relationship(back_populates="orders")
    product: Mapped[Product] = relationship()

    def __repr__(self) -> str:
        return f"<Order id={self.id} code={self.order_code!r} status={self.status}>"

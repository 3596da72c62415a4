"""Farmer profile ORM model.

A farmer row is created when a user registers as a seller (outside this
service).  The portal only reads it and applies single-field partial
updates from the profile editor; it is never deleted here.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmportal.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from farmportal.models.user import User
    from farmportal.models.marketplace import Order, Product


class Farmer(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Public seller profile shown on the marketplace.

    ``region`` holds one of ``RegionEnum``'s values but is stored as text:
    the allowed set is enforced by the editor's selection widget only.
    ``payment_account_id`` is the Paystack subaccount code; NULL until the
    farmer adds a payout link.
    """

    __tablename__ = "farmers"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    bio: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default="",
        server_default=text("''"),
    )
    about: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )
    region: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        default="",
        server_default=text("''"),
    )
    town: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        server_default=text("''"),
    )
    image: Mapped[str] = mapped_column(
        String(2048),
        nullable=False,
        default="",
        server_default=text("''"),
    )
    payment_account_id: Mapped[str | None] = mapped_column(
        String(128), nullable=True
    )

    # ── Relationships ────────────────────────────────────────────────────
    user: Mapped[User] = relationship(back_populates="farmer")
    products: Mapped[list[Product]] = relationship(
        back_populates="farmer",
        cascade="all, delete-orphan",
    )
    orders: Mapped[list[Order]] = relationship(back_populates="farmer")

    def __repr__(self) -> str:
        return f"<Farmer id={self.id} name={self.name!r} region={self.region!r}>"

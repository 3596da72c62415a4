"""User ORM model for JWT authentication.

Users authenticate via username/password and receive an access/refresh
token pair.  Farmers and buyers are both users; a farmer additionally owns
one ``Farmer`` profile row.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Enum, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmportal.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from farmportal.models.enums import UserRoleEnum

if TYPE_CHECKING:
    from farmportal.models.farmer import Farmer


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Application user — authenticates via username/password (JWT)."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(150), unique=True, nullable=False, index=True
    )
    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False, index=True
    )
    hashed_password: Mapped[str] = mapped_column(
        String(128), nullable=False
    )
    role: Mapped[UserRoleEnum] = mapped_column(
        Enum(
            UserRoleEnum,
            name="user_role",
            create_constraint=False,
            native_enum=True,
        ),
        nullable=False,
        default=UserRoleEnum.buyer,
        server_default="buyer",
    )
    is_active: Mapped[bool] = mapped_column(
        default=True,
        server_default=text("true"),
        nullable=False,
    )

    # ── Relationships ────────────────────────────────────────────────────
    farmer: Mapped[Farmer | None] = relationship(
        back_populates="user",
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} role={self.role}>"

"""ORM model registry — importing this module registers every table on Base.metadata.

Alembic ``env.py`` imports ``Base`` from here (not from ``base.py``) so that
autogenerate sees all tables.  Application code can also do::

    from farmportal.models import Farmer, Order, Product, ...
"""

# ── Auth models ─────────────────────────────────────────────────────────────
from farmportal.models.user import User

# ── Base & Mixins ───────────────────────────────────────────────────────────
from farmportal.models.base import Base, FarmerOwnedMixin, TimestampMixin, UUIDPrimaryKeyMixin

# ── Enums ───────────────────────────────────────────────────────────────────
from farmportal.models.enums import (
    OrderActionEnum,
    OrderStatusEnum,
    RegionEnum,
    UserRoleEnum,
)

# ── Portal models ───────────────────────────────────────────────────────────
from farmportal.models.farmer import Farmer
from farmportal.models.marketplace import Order, Product, Review

__all__ = [
    # Base & mixins
    "Base",
    # Portal
    "Farmer",
    "FarmerOwnedMixin",
    "Order",
    # Enums
    "OrderActionEnum",
    "OrderStatusEnum",
    "Product",
    "RegionEnum",
    "Review",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    # Auth
    "User",
    "UserRoleEnum",
]

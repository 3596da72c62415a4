"""PostgreSQL-backed enum types for all ORM models.

Each StrEnum maps 1:1 to a PostgreSQL CREATE TYPE ... AS ENUM, except
``RegionEnum`` which is stored as plain text and only constrains what the
profile editor offers.
"""

from enum import StrEnum

# ── Order enums ─────────────────────────────────────────────────────────────


class OrderStatusEnum(StrEnum):
    """Shipping status of a marketplace order."""

    pending = "Pending"
    shipping = "Shipping"
    completed = "Completed"
    canceled = "Canceled"


class OrderActionEnum(StrEnum):
    """Action tokens a farmer can apply to an order."""

    ship = "Ship"
    complete = "Complete"
    cancel = "Cancel"


# ── Profile enums ───────────────────────────────────────────────────────────


class RegionEnum(StrEnum):
    """Administrative regions a farmer can list as their location."""

    ahafo = "Ahafo"
    ashanti = "Ashanti"
    bono = "Bono"
    bono_east = "Bono East"
    central = "Central"
    eastern = "Eastern"
    greater_accra = "Greater Accra"
    north_east = "North East"
    northern = "Northern"
    oti = "Oti"
    savannah = "Savannah"
    upper_east = "Upper East"
    upper_west = "Upper West"
    volta = "Volta"
    western = "Western"
    western_north = "Western North"


# ── Auth enums ──────────────────────────────────────────────────────────────


class UserRoleEnum(StrEnum):
    """User authorization roles for RBAC."""

    admin = "admin"
    farmer = "farmer"
    buyer = "buyer"

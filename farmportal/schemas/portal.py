"""Pydantic request/response schemas for the farmer portal.

Every read result carries an ``error`` field next to its data: the data
service converts failures into values instead of raising.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from farmportal.models.enums import OrderStatusEnum

# ── Stats ───────────────────────────────────────────────────────────────────


class FarmerStats(BaseModel):
	total_sales: float = 0.0
	orders: int = 0
	products: int = 0
	ratings: float = 0.0


class StatsResult(BaseModel):
	stats: FarmerStats = Field(default_factory=FarmerStats)
	error: str | None = None


# ── Orders ──────────────────────────────────────────────────────────────────


class OrderProductSummary(BaseModel):
	id: uuid.UUID
	name: str
	price: float
	slug: str
	images: list[str] = Field(default_factory=list)


class FarmerOrderRead(BaseModel):
	id: uuid.UUID
	order_code: str
	created_at: datetime
	amount: float
	user_name: str
	user_email: str
	contact: str
	shipping_status: OrderStatusEnum
	shipping_address: str
	quantity: int
	products: list[OrderProductSummary]


class OrdersResult(BaseModel):
	orders: list[FarmerOrderRead] = Field(default_factory=list)
	error: str | None = None


class OrderStatusUpdate(BaseModel):
	# Any token is accepted; unknown ones reset the order to Pending.
	action: str


# ── Products ────────────────────────────────────────────────────────────────


class ReviewRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	product_id: uuid.UUID
	user_id: uuid.UUID
	rating: int
	comment: str | None = None
	created_at: datetime


class ProductRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	farmer_id: uuid.UUID
	name: str
	slug: str
	description: str
	price: float
	quantity: int
	category: str | None = None
	images: list[str] = Field(default_factory=list)
	reviews: list[ReviewRead] = Field(default_factory=list)
	created_at: datetime
	updated_at: datetime


class ProductsResult(BaseModel):
	products: list[ProductRead] = Field(default_factory=list)
	error: str | None = None


class ProductUpsert(BaseModel):
	"""Create (no ``id``) or full update (with ``id``) of a product."""

	id: uuid.UUID | None = None
	farmer_id: uuid.UUID
	name: str
	slug: str
	description: str = ""
	price: float
	quantity: int = 0
	category: str | None = None
	images: list[str] = Field(default_factory=list)


# ── Profile ─────────────────────────────────────────────────────────────────


class FarmerProfileRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	user_id: uuid.UUID
	name: str
	bio: str
	about: str
	region: str
	town: str
	image: str
	payment_account_id: str | None = None


class ProfileResult(BaseModel):
	profile: FarmerProfileRead | None = None
	error: str | None = None


class FarmerDetailsUpdate(BaseModel):
	"""Partial farmer update; only fields explicitly sent are applied."""

	model_config = ConfigDict(extra="forbid")

	name: str | None = None
	bio: str | None = None
	about: str | None = None
	region: str | None = None
	town: str | None = None
	image: str | None = None
	payment_account_id: str | None = None


# ── Mutations ───────────────────────────────────────────────────────────────


class MutationResult(BaseModel):
	success: bool
	error: str | None = None

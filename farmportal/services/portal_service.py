"""Farmer portal data service — stats, orders, products and profile updates.

Each public method is a self-contained request/response operation.  Store
failures never propagate: they are logged, the session is rolled back and
the failure is returned as the ``error`` field of the result model.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from farmportal.config import get_settings
from farmportal.models import Farmer, Order, OrderActionEnum, OrderStatusEnum, Product, Review
from farmportal.schemas.portal import (
	FarmerDetailsUpdate,
	FarmerOrderRead,
	FarmerProfileRead,
	FarmerStats,
	MutationResult,
	OrderProductSummary,
	OrdersResult,
	ProductRead,
	ProductsResult,
	ProductUpsert,
	ProfileResult,
	StatsResult,
)
from farmportal.services.revalidation import (
	DASHBOARD_PATH,
	ORDERS_PATH,
	PRODUCTS_PATH,
	PROFILE_PATH,
	PathInvalidator,
)

READ_FAILURE_MESSAGE = "Something went wrong"

_ORDER_TRANSITIONS: dict[str, OrderStatusEnum] = {
	OrderActionEnum.ship.value: OrderStatusEnum.shipping,
	OrderActionEnum.complete.value: OrderStatusEnum.completed,
	OrderActionEnum.cancel.value: OrderStatusEnum.canceled,
}

logger = structlog.get_logger("farmportal.portal")


class FarmerPortalService:
	"""Service behind every farmer-portal endpoint."""

	def __init__(self, db: AsyncSession, invalidator: PathInvalidator | None = None):
		self.db = db
		self.invalidator = invalidator or PathInvalidator()
		self.settings = get_settings()

	# ── Dashboard ───────────────────────────────────────────────────────

	async def get_farmer_stats(self, farmer_id: uuid.UUID) -> StatsResult:
		try:
			stmt = self._stats_statement(farmer_id)
			row = (await self.db.execute(stmt)).one()
			stats = FarmerStats(
				total_sales=float(row.total_sales or 0),
				orders=int(row.orders or 0),
				products=int(row.products or 0),
				ratings=float(row.ratings or 0),
			)
		except Exception:
			logger.exception("farmer_stats_failed", farmer_id=str(farmer_id))
			await self._recover()
			return StatsResult(stats=FarmerStats(), error=READ_FAILURE_MESSAGE)
		return StatsResult(stats=stats)

	# ── Orders ──────────────────────────────────────────────────────────

	async def get_farmer_orders(self, farmer_id: uuid.UUID, recent: bool = False) -> OrdersResult:
		try:
			stmt = self._orders_statement(farmer_id, recent)
			rows = await self.db.execute(stmt)
			orders = [self._to_order_read(order) for order in rows.scalars().all()]
		except Exception:
			logger.exception("farmer_orders_failed", farmer_id=str(farmer_id), recent=recent)
			await self._recover()
			return OrdersResult(orders=[], error=READ_FAILURE_MESSAGE)
		return OrdersResult(orders=orders)

	async def update_order_status(
		self,
		order_id: uuid.UUID,
		action: str,
		farmer_id: uuid.UUID | None = None,
	) -> MutationResult:
		status = self.resolve_order_status(action)
		try:
			order = await self._require(Order, order_id, farmer_id)
			order.status = status
			await self.db.flush()
			await self.invalidator.invalidate(ORDERS_PATH, DASHBOARD_PATH)
		except Exception as exc:
			logger.exception("order_status_update_failed", order_id=str(order_id), action=action)
			await self._recover()
			return MutationResult(success=False, error=str(exc))
		logger.info("order_status_updated", order_id=str(order_id), status=status.value)
		return MutationResult(success=True)

	# ── Products ────────────────────────────────────────────────────────

	async def get_farmer_products(self, farmer_id: uuid.UUID) -> ProductsResult:
		try:
			stmt = (
				select(Product)
				.where(Product.farmer_id == farmer_id)
				.options(selectinload(Product.reviews))
				.order_by(Product.created_at.desc())
			)
			rows = await self.db.execute(stmt)
			products = [ProductRead.model_validate(product) for product in rows.scalars().all()]
		except Exception:
			logger.exception("farmer_products_failed", farmer_id=str(farmer_id))
			await self._recover()
			return ProductsResult(products=[], error=READ_FAILURE_MESSAGE)
		return ProductsResult(products=products)

	async def add_product(self, payload: ProductUpsert, farmer_id: uuid.UUID | None = None) -> MutationResult:
		data = payload.model_dump(exclude={"id", "farmer_id"})
		try:
			if payload.id is not None:
				product = await self._require(Product, payload.id, farmer_id)
				for key, value in data.items():
					setattr(product, key, value)
			else:
				product = Product(farmer_id=payload.farmer_id, **data)
				self.db.add(product)
			await self.db.flush()
			await self.invalidator.invalidate(PRODUCTS_PATH)
		except Exception as exc:
			logger.exception("product_upsert_failed", product_id=str(payload.id), farmer_id=str(payload.farmer_id))
			await self._recover()
			return MutationResult(success=False, error=str(exc))
		return MutationResult(success=True)

	async def delete_product(self, product_id: uuid.UUID, farmer_id: uuid.UUID | None = None) -> MutationResult:
		try:
			product = await self._require(Product, product_id, farmer_id)
			await self.db.delete(product)
			await self.db.flush()
			await self.invalidator.invalidate(PRODUCTS_PATH)
		except Exception as exc:
			logger.exception("product_delete_failed", product_id=str(product_id))
			await self._recover()
			return MutationResult(success=False, error=str(exc))
		return MutationResult(success=True)

	# ── Profile ─────────────────────────────────────────────────────────

	async def get_farmer_profile(self, farmer_id: uuid.UUID) -> ProfileResult:
		try:
			farmer = await self._require(Farmer, farmer_id)
			profile = FarmerProfileRead.model_validate(farmer)
		except Exception:
			logger.exception("farmer_profile_failed", farmer_id=str(farmer_id))
			await self._recover()
			return ProfileResult(profile=None, error=READ_FAILURE_MESSAGE)
		return ProfileResult(profile=profile)

	async def update_farmer_details(
		self,
		farmer_id: uuid.UUID,
		details: FarmerDetailsUpdate,
	) -> MutationResult:
		changes = details.model_dump(exclude_unset=True)
		logger.info("farmer_details_update", farmer_id=str(farmer_id), fields=sorted(changes))
		try:
			farmer = await self._require(Farmer, farmer_id)
			for key, value in changes.items():
				setattr(farmer, key, value)
			await self.db.flush()
			await self.invalidator.invalidate(PROFILE_PATH)
		except Exception as exc:
			logger.exception("farmer_details_update_failed", farmer_id=str(farmer_id))
			await self._recover()
			return MutationResult(success=False, error=str(exc))
		return MutationResult(success=True)

	# ── Helpers ─────────────────────────────────────────────────────────

	@staticmethod
	def resolve_order_status(action: str) -> OrderStatusEnum:
		return _ORDER_TRANSITIONS.get(action, OrderStatusEnum.pending)

	@staticmethod
	def _stats_statement(farmer_id: uuid.UUID):  # type: ignore[no-untyped-def]
		total_sales = (
			select(func.coalesce(func.sum(Order.amount), 0))
			.where(Order.farmer_id == farmer_id)
			.scalar_subquery()
		)
		orders = select(func.count(Order.id)).where(Order.farmer_id == farmer_id).scalar_subquery()
		products = select(func.count(Product.id)).where(Product.farmer_id == farmer_id).scalar_subquery()
		ratings = (
			select(func.coalesce(func.avg(Review.rating), 0))
			.where(Review.farmer_id == farmer_id)
			.scalar_subquery()
		)
		return select(
			total_sales.label("total_sales"),
			orders.label("orders"),
			products.label("products"),
			ratings.label("ratings"),
		)

	def _orders_statement(self, farmer_id: uuid.UUID, recent: bool):  # type: ignore[no-untyped-def]
		stmt = (
			select(Order)
			.where(Order.farmer_id == farmer_id)
			.options(selectinload(Order.buyer), selectinload(Order.product))
			.order_by(Order.created_at.desc())
		)
		if recent:
			stmt = stmt.limit(self.settings.recent_orders_limit)
		return stmt

	async def _require(self, model: type, entity_id: uuid.UUID, farmer_id: uuid.UUID | None = None):  # type: ignore[no-untyped-def]
		"""Load one row by id; with ``farmer_id``, rows of other farmers count as missing."""
		stmt = select(model).where(model.id == entity_id)
		if farmer_id is not None:
			stmt = stmt.where(model.farmer_id == farmer_id)
		row = await self.db.execute(stmt)
		entity = row.scalar_one_or_none()
		if entity is None:
			raise LookupError(f"{model.__name__} {entity_id} not found")
		return entity

	async def _recover(self) -> None:
		try:
			await self.db.rollback()
		except Exception:
			logger.exception("session_rollback_failed")

	@staticmethod
	def _to_order_read(order: Order) -> FarmerOrderRead:
		product = order.product
		return FarmerOrderRead(
			id=order.id,
			order_code=order.order_code,
			created_at=order.created_at,
			amount=float(order.amount),
			user_name=order.buyer.username,
			user_email=order.buyer.email,
			contact=order.contact,
			shipping_status=order.status,
			shipping_address=order.address,
			quantity=order.quantity,
			products=[
				OrderProductSummary(
					id=product.id,
					name=product.name,
					price=float(product.price),
					slug=product.slug,
					images=list(product.images or []),
				)
			],
		)

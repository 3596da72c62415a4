from __future__ import annotations

import json
from datetime import UTC, datetime
from types import SimpleNamespace
from uuid import uuid4

import pytest
from redis.exceptions import RedisError
from sqlalchemy.dialects import postgresql

from farmportal.models import OrderStatusEnum, Product
from farmportal.schemas.portal import FarmerDetailsUpdate, ProductUpsert
from farmportal.services.portal_service import READ_FAILURE_MESSAGE, FarmerPortalService
from farmportal.services.revalidation import (
	DASHBOARD_PATH,
	ORDERS_PATH,
	PRODUCTS_PATH,
	PROFILE_PATH,
	PathInvalidator,
)
from tests.fakes import FakeResult


def _service(session: object, redis: object | None = None) -> FarmerPortalService:
	return FarmerPortalService(session, PathInvalidator(redis, channel="test:revalidate"))  # type: ignore[arg-type]


def _order_obj(**overrides: object) -> SimpleNamespace:
	now = datetime.now(UTC)
	product = SimpleNamespace(
		id=uuid4(),
		name="Cassava",
		price=12.5,
		slug="cassava",
		images=["https://img.test/cassava.png"],
	)
	buyer = SimpleNamespace(username="kofi", email="kofi@test.local")
	fields = {
		"id": uuid4(),
		"order_code": "ORD-20261019-12345",
		"created_at": now,
		"amount": 25.0,
		"buyer": buyer,
		"contact": "+233200000000",
		"status": OrderStatusEnum.pending,
		"address": "12 Market Rd, Kumasi",
		"quantity": 2,
		"product": product,
	}
	fields.update(overrides)
	return SimpleNamespace(**fields)


def _compile(stmt: object) -> object:
	return stmt.compile(dialect=postgresql.dialect())  # type: ignore[attr-defined]


def _fake_row(**values: object) -> FakeResult:
	return FakeResult(row=SimpleNamespace(**values))


# ── Stats ───────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_stats_for_farmer_without_activity_are_zero(make_session) -> None:
	session = make_session(
		_fake_row(total_sales=0, orders=0, products=0, ratings=None),
	)

	result = await _service(session).get_farmer_stats(uuid4())

	assert result.error is None
	assert result.stats.total_sales == 0
	assert result.stats.orders == 0
	assert result.stats.products == 0
	assert result.stats.ratings == 0


@pytest.mark.asyncio
async def test_stats_run_as_a_single_statement(make_session) -> None:
	session = make_session(
		_fake_row(total_sales=310.5, orders=4, products=3, ratings=4.25),
	)

	result = await _service(session).get_farmer_stats(uuid4())

	assert len(session.statements) == 1
	sql = str(_compile(session.statements[0]))
	assert "sum(orders.amount)" in sql
	assert "avg(reviews.rating)" in sql
	assert result.stats.total_sales == 310.5
	assert result.stats.orders == 4
	assert result.stats.products == 3
	assert result.stats.ratings == 4.25


@pytest.mark.asyncio
async def test_stats_failure_returns_zeroed_defaults(make_session) -> None:
	session = make_session(RuntimeError("connection reset"))

	result = await _service(session).get_farmer_stats(uuid4())

	assert result.error == READ_FAILURE_MESSAGE
	assert result.stats.model_dump() == {"total_sales": 0, "orders": 0, "products": 0, "ratings": 0}
	assert session.rollback.await_count == 1


# ── Orders ──────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_orders_are_flattened_with_buyer_and_product(make_session) -> None:
	order = _order_obj()
	session = make_session(FakeResult(scalars=[order]))

	result = await _service(session).get_farmer_orders(uuid4())

	assert result.error is None
	assert len(result.orders) == 1
	item = result.orders[0]
	assert item.order_code == "ORD-20261019-12345"
	assert item.user_name == "kofi"
	assert item.user_email == "kofi@test.local"
	assert item.shipping_status == OrderStatusEnum.pending
	assert item.shipping_address == "12 Market Rd, Kumasi"
	assert [product.slug for product in item.products] == ["cassava"]


@pytest.mark.asyncio
async def test_recent_orders_are_limited_to_ten(make_session) -> None:
	session = make_session(FakeResult(scalars=[]))

	await _service(session).get_farmer_orders(uuid4(), recent=True)

	compiled = _compile(session.statements[0])
	assert "LIMIT" in str(compiled)
	assert "ORDER BY orders.created_at DESC" in str(compiled)
	assert 10 in compiled.params.values()  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_all_orders_are_not_limited(make_session) -> None:
	orders = [_order_obj(order_code=f"ORD-20261019-{n:05d}") for n in range(12)]
	session = make_session(FakeResult(scalars=orders))

	result = await _service(session).get_farmer_orders(uuid4(), recent=False)

	assert "LIMIT" not in str(_compile(session.statements[0]))
	assert len(result.orders) == 12


@pytest.mark.asyncio
async def test_orders_failure_returns_empty_list(make_session) -> None:
	session = make_session(RuntimeError("boom"))

	result = await _service(session).get_farmer_orders(uuid4(), recent=True)

	assert result.orders == []
	assert result.error == READ_FAILURE_MESSAGE


@pytest.mark.asyncio
@pytest.mark.parametrize(
	("action", "expected"),
	[
		("Ship", OrderStatusEnum.shipping),
		("Complete", OrderStatusEnum.completed),
		("Cancel", OrderStatusEnum.canceled),
		("Refund", OrderStatusEnum.pending),
		("ship", OrderStatusEnum.pending),
	],
)
async def test_update_order_status_maps_actions(
	make_session,
	fake_redis,
	action: str,
	expected: OrderStatusEnum,
) -> None:
	order = _order_obj(status=None)
	session = make_session(FakeResult(scalar=order))
	service = _service(session, fake_redis)

	result = await service.update_order_status(order.id, action)

	assert result.success is True
	assert result.error is None
	assert order.status == expected
	assert session.flush.await_count == 1
	assert service.invalidator.invalidated == [ORDERS_PATH, DASHBOARD_PATH]
	published = [json.loads(call.args[1])["path"] for call in fake_redis.publish.await_args_list]
	assert published == [ORDERS_PATH, DASHBOARD_PATH]


@pytest.mark.asyncio
async def test_update_order_status_missing_order_is_an_error_value(make_session) -> None:
	order_id = uuid4()
	session = make_session(FakeResult(scalar=None))
	service = _service(session)

	result = await service.update_order_status(order_id, "Ship")

	assert result.success is False
	assert result.error == f"Order {order_id} not found"
	assert service.invalidator.invalidated == []
	assert session.rollback.await_count == 1


@pytest.mark.asyncio
async def test_publish_failure_does_not_fail_the_mutation(make_session, fake_redis) -> None:
	fake_redis.publish.side_effect = RedisError("connection refused")
	order = _order_obj()
	session = make_session(FakeResult(scalar=order))
	service = _service(session, fake_redis)

	result = await service.update_order_status(order.id, "Complete")

	assert result.success is True
	assert result.error is None
	assert order.status == OrderStatusEnum.completed
	assert fake_redis.publish.await_count == 2
	assert service.invalidator.invalidated == [ORDERS_PATH, DASHBOARD_PATH]
	assert session.rollback.await_count == 0


@pytest.mark.asyncio
async def test_scoped_order_lookup_filters_by_farmer(make_session) -> None:
	owner_id = uuid4()
	session = make_session(FakeResult(scalar=None))

	result = await _service(session).update_order_status(uuid4(), "Ship", farmer_id=owner_id)

	assert result.success is False
	assert "not found" in (result.error or "")
	compiled = _compile(session.statements[0])
	assert "orders.farmer_id" in str(compiled)
	assert owner_id in compiled.params.values()  # type: ignore[attr-defined]


# ── Products ────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_get_products_includes_reviews(make_session) -> None:
	now = datetime.now(UTC)
	farmer_id = uuid4()
	product_id = uuid4()
	review = SimpleNamespace(
		id=uuid4(),
		product_id=product_id,
		user_id=uuid4(),
		rating=5,
		comment="Fresh",
		created_at=now,
	)
	product = SimpleNamespace(
		id=product_id,
		farmer_id=farmer_id,
		name="Yam",
		slug="yam",
		description="Puna yam",
		price=30.0,
		quantity=40,
		category="tubers",
		images=[],
		reviews=[review],
		created_at=now,
		updated_at=now,
	)
	session = make_session(FakeResult(scalars=[product]))

	result = await _service(session).get_farmer_products(farmer_id)

	assert result.error is None
	assert result.products[0].slug == "yam"
	assert result.products[0].reviews[0].rating == 5


@pytest.mark.asyncio
async def test_add_product_without_id_creates_linked_product(make_session) -> None:
	farmer_id = uuid4()
	session = make_session()
	service = _service(session)

	result = await service.add_product(
		ProductUpsert(farmer_id=farmer_id, name="Plantain", slug="plantain", price=8.0, images=["a.png"])
	)

	assert result.success is True
	assert len(session.added) == 1
	created = session.added[0]
	assert isinstance(created, Product)
	assert created.farmer_id == farmer_id
	assert created.slug == "plantain"
	assert created.images == ["a.png"]
	assert service.invalidator.invalidated == [PRODUCTS_PATH]


@pytest.mark.asyncio
async def test_add_product_with_id_updates_without_touching_identity(make_session) -> None:
	product_id = uuid4()
	owner_id = uuid4()
	existing = SimpleNamespace(
		id=product_id,
		farmer_id=owner_id,
		name="Old name",
		slug="old-name",
		description="",
		price=1.0,
		quantity=0,
		category=None,
		images=[],
	)
	session = make_session(FakeResult(scalar=existing))

	result = await _service(session).add_product(
		ProductUpsert(id=product_id, farmer_id=uuid4(), name="Maize", slug="maize", price=3.5, quantity=9)
	)

	assert result.success is True
	assert session.added == []
	assert existing.id == product_id
	assert existing.farmer_id == owner_id
	assert existing.name == "Maize"
	assert existing.price == 3.5
	assert existing.quantity == 9


@pytest.mark.asyncio
async def test_add_product_flush_failure_reports_message(make_session) -> None:
	session = make_session()
	session.flush.side_effect = RuntimeError("duplicate key value violates unique constraint")
	service = _service(session)

	result = await service.add_product(ProductUpsert(farmer_id=uuid4(), name="Okra", slug="okra", price=2.0))

	assert result.success is False
	assert "duplicate key" in (result.error or "")
	assert service.invalidator.invalidated == []


@pytest.mark.asyncio
async def test_delete_product(make_session) -> None:
	product = SimpleNamespace(id=uuid4())
	session = make_session(FakeResult(scalar=product))
	service = _service(session)

	result = await service.delete_product(product.id)

	assert result.success is True
	assert session.deleted == [product]
	assert service.invalidator.invalidated == [PRODUCTS_PATH]


@pytest.mark.asyncio
async def test_delete_missing_product(make_session) -> None:
	product_id = uuid4()
	session = make_session(FakeResult(scalar=None))

	result = await _service(session).delete_product(product_id)

	assert result.success is False
	assert result.error == f"Product {product_id} not found"


# ── Profile ─────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_update_farmer_details_applies_only_sent_fields(make_session) -> None:
	farmer = SimpleNamespace(id=uuid4(), name="Ama Farms", town="Kumasi", payment_account_id=None)
	session = make_session(FakeResult(scalar=farmer))
	service = _service(session)

	result = await service.update_farmer_details(farmer.id, FarmerDetailsUpdate(town="Techiman"))

	assert result.success is True
	assert farmer.town == "Techiman"
	assert farmer.name == "Ama Farms"
	assert farmer.payment_account_id is None
	assert service.invalidator.invalidated == [PROFILE_PATH]


@pytest.mark.asyncio
async def test_get_farmer_profile_missing(make_session) -> None:
	session = make_session(FakeResult(scalar=None))

	result = await _service(session).get_farmer_profile(uuid4())

	assert result.profile is None
	assert result.error == READ_FAILURE_MESSAGE


def test_resolve_order_status_defaults_to_pending() -> None:
	assert FarmerPortalService.resolve_order_status("Ship") == OrderStatusEnum.shipping
	assert FarmerPortalService.resolve_order_status("") == OrderStatusEnum.pending


@pytest.mark.asyncio
async def test_unscoped_delete_looks_up_by_id_only(make_session) -> None:
	product = SimpleNamespace(id=uuid4())
	session = make_session(FakeResult(scalar=product))

	await _service(session).delete_product(product.id)

	assert "products.farmer_id" not in str(_compile(session.statements[0]))

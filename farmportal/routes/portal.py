"""Farmer portal routes — dashboard stats, orders, products, profile.

Service results are returned as-is: a failed store call still answers 200
with ``error`` set, the same shape the portal front end renders.

Farmer-role callers only reach their own farmer's records; admins reach
every farmer.  Orders and products addressed by their own id are looked up
within the caller's farmer, so another farmer's row reads as not found.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from farmportal.auth.dependencies import caller_farmer_scope, ensure_farmer_access, require_role
from farmportal.database import get_db
from farmportal.models.enums import UserRoleEnum
from farmportal.models.user import User
from farmportal.schemas.portal import (
	FarmerDetailsUpdate,
	MutationResult,
	OrdersResult,
	OrderStatusUpdate,
	ProductsResult,
	ProductUpsert,
	ProfileResult,
	StatsResult,
)
from farmportal.services.portal_service import FarmerPortalService
from farmportal.services.revalidation import PathInvalidator

router = APIRouter(prefix="/farmer-portal", tags=["farmer-portal"])

_portal_user = require_role(UserRoleEnum.farmer, UserRoleEnum.admin)


def _service(request: Request, db: AsyncSession) -> FarmerPortalService:
	invalidator = PathInvalidator(getattr(request.app.state, "redis", None))
	return FarmerPortalService(db, invalidator)


@router.get("/{farmer_id}/stats", response_model=StatsResult)
async def get_farmer_stats(
	farmer_id: uuid.UUID,
	request: Request,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(_portal_user),
) -> StatsResult:
	ensure_farmer_access(user, farmer_id)
	return await _service(request, db).get_farmer_stats(farmer_id)


@router.get("/{farmer_id}/orders", response_model=OrdersResult)
async def get_farmer_orders(
	farmer_id: uuid.UUID,
	request: Request,
	recent: bool = Query(default=False),
	db: AsyncSession = Depends(get_db),
	user: User = Depends(_portal_user),
) -> OrdersResult:
	ensure_farmer_access(user, farmer_id)
	return await _service(request, db).get_farmer_orders(farmer_id, recent=recent)


@router.patch("/orders/{order_id}/status", response_model=MutationResult)
async def update_order_status(
	order_id: uuid.UUID,
	payload: OrderStatusUpdate,
	request: Request,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(_portal_user),
) -> MutationResult:
	scope = caller_farmer_scope(user)
	return await _service(request, db).update_order_status(order_id, payload.action, farmer_id=scope)


@router.get("/{farmer_id}/products", response_model=ProductsResult)
async def get_farmer_products(
	farmer_id: uuid.UUID,
	request: Request,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(_portal_user),
) -> ProductsResult:
	ensure_farmer_access(user, farmer_id)
	return await _service(request, db).get_farmer_products(farmer_id)


@router.post("/products", response_model=MutationResult)
async def add_product(
	payload: ProductUpsert,
	request: Request,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(_portal_user),
) -> MutationResult:
	scope = ensure_farmer_access(user, payload.farmer_id)
	return await _service(request, db).add_product(payload, farmer_id=scope)


@router.delete("/products/{product_id}", response_model=MutationResult)
async def delete_product(
	product_id: uuid.UUID,
	request: Request,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(_portal_user),
) -> MutationResult:
	scope = caller_farmer_scope(user)
	return await _service(request, db).delete_product(product_id, farmer_id=scope)


@router.get("/{farmer_id}/profile", response_model=ProfileResult)
async def get_farmer_profile(
	farmer_id: uuid.UUID,
	request: Request,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(_portal_user),
) -> ProfileResult:
	ensure_farmer_access(user, farmer_id)
	return await _service(request, db).get_farmer_profile(farmer_id)


@router.patch("/{farmer_id}/profile", response_model=MutationResult)
async def update_farmer_details(
	farmer_id: uuid.UUID,
	payload: FarmerDetailsUpdate,
	request: Request,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(_portal_user),
) -> MutationResult:
	ensure_farmer_access(user, farmer_id)
	return await _service(request, db).update_farmer_details(farmer_id, payload)

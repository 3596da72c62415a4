"""Login and session renewal routes."""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from farmportal.auth.dependencies import authenticate_user, resolve_user
from farmportal.auth.jwt import AuthError, IssuedTokens, decode_token, issue_tokens
from farmportal.database import get_db
from farmportal.schemas.auth import LoginRequest, RefreshRequest, TokenPair

router = APIRouter(prefix="/auth", tags=["auth"])
logger = structlog.get_logger("farmportal.auth")


def _map_error(exc: AuthError) -> HTTPException:
	return HTTPException(
		status_code=exc.status_code,
		detail={"error": exc.code, "message": exc.detail},
	)


def _to_pair(tokens: IssuedTokens) -> TokenPair:
	return TokenPair(
		access_token=tokens.access_token,
		refresh_token=tokens.refresh_token,
		expires_in=tokens.expires_in,
	)


@router.post("/login", response_model=TokenPair)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)) -> TokenPair:
	try:
		user = await authenticate_user(db, payload.username, payload.password)
	except AuthError as exc:
		logger.info("login_rejected", username=payload.username, reason=exc.code)
		raise _map_error(exc) from exc
	return _to_pair(issue_tokens(str(user.id), role=user.role.value))


@router.post("/refresh", response_model=TokenPair)
async def refresh(payload: RefreshRequest, db: AsyncSession = Depends(get_db)) -> TokenPair:
	"""Renew a session from its refresh token; no password is resubmitted."""
	try:
		claims = decode_token(payload.refresh_token, expected_type="refresh")
		user = await resolve_user(db, uuid.UUID(str(claims["sub"])))
	except AuthError as exc:
		raise _map_error(exc) from exc
	except ValueError as exc:
		raise _map_error(AuthError(code="token_invalid", detail="Token subject is invalid")) from exc
	return _to_pair(issue_tokens(str(user.id), role=user.role.value))

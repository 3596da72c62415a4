"""Authentication dependencies — get_current_user, require_role, password checks."""

from __future__ import annotations

import re
import uuid
from typing import Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from farmportal.auth.jwt import AuthError, decode_token
from farmportal.database import get_db
from farmportal.models.enums import UserRoleEnum
from farmportal.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_FARMER_PATH = re.compile(r"/api/v1/farmer-portal/([0-9a-fA-F\-]{36})(?:/|$)")


def _raise_auth(exc: AuthError) -> HTTPException:
	return HTTPException(
		status_code=exc.status_code,
		detail={"error": exc.code, "message": exc.detail},
	)


def hash_password(plaintext: str) -> str:
	return pwd_context.hash(plaintext)


def verify_password(plaintext: str, hashed: str) -> bool:
	try:
		return pwd_context.verify(plaintext, hashed)
	except ValueError:
		return False


def extract_request_farmer_id(request: Request) -> uuid.UUID | None:
	token = request.path_params.get("farmer_id")
	if token is not None:
		try:
			return uuid.UUID(str(token))
		except ValueError:
			return None

	match = _FARMER_PATH.search(request.url.path)
	if match is None:
		return None
	try:
		return uuid.UUID(match.group(1))
	except ValueError:
		return None


def extract_token_subject(request: Request) -> str | None:
	"""Subject of a valid bearer access token, if the request carries one."""
	auth_header = request.headers.get("authorization", "")
	if not auth_header.lower().startswith("bearer "):
		return None
	try:
		payload = decode_token(auth_header[7:].strip(), expected_type="access")
	except AuthError:
		return None
	return str(payload["sub"])


async def authenticate_user(db: AsyncSession, username: str, password: str) -> User:
	row = await db.execute(select(User).where(User.username == username))
	user = row.scalar_one_or_none()
	if user is None or not verify_password(password, user.hashed_password):
		raise AuthError(code="credentials_invalid", detail="Invalid username or password")
	if not user.is_active:
		raise AuthError(code="user_invalid", detail="User is not active")
	return user


async def resolve_user(db: AsyncSession, user_id: uuid.UUID) -> User:
	row = await db.execute(
		select(User).where(User.id == user_id).options(selectinload(User.farmer))
	)
	user = row.scalar_one_or_none()
	if user is None or not user.is_active:
		raise AuthError(code="user_invalid", detail="User is not active")
	return user


async def _resolve_user_from_token(
	db: AsyncSession,
	credentials: HTTPAuthorizationCredentials | None,
) -> User:
	if credentials is None or credentials.scheme.lower() != "bearer":
		raise _raise_auth(AuthError(code="auth_required", detail="Bearer token is required"))

	try:
		payload = decode_token(credentials.credentials, expected_type="access")
		user_id = uuid.UUID(str(payload["sub"]))
		return await resolve_user(db, user_id)
	except AuthError as exc:
		raise _raise_auth(exc) from exc
	except (ValueError, KeyError) as exc:
		raise _raise_auth(AuthError(code="token_invalid", detail="Token subject is invalid")) from exc


async def get_current_user(
	request: Request,
	db: AsyncSession = Depends(get_db),
) -> User:
	credentials = await bearer_scheme(request)
	return await _resolve_user_from_token(db, credentials)


def require_role(*allowed: UserRoleEnum) -> Callable[[User], User]:
	allowed_set = set(allowed)

	async def dependency(current_user: User = Depends(get_current_user)) -> User:
		if current_user.role not in allowed_set:
			raise HTTPException(
				status_code=status.HTTP_403_FORBIDDEN,
				detail={"error": "forbidden", "message": "Insufficient role"},
			)
		return current_user

	return dependency


def caller_farmer_scope(user: User) -> uuid.UUID | None:
	"""Farmer id a caller is confined to; ``None`` means unrestricted (admin)."""
	if user.role != UserRoleEnum.farmer:
		return None
	farmer = getattr(user, "farmer", None)
	if farmer is None:
		raise HTTPException(
			status_code=status.HTTP_403_FORBIDDEN,
			detail={"error": "forbidden", "message": "No farmer profile for this user"},
		)
	return farmer.id


def ensure_farmer_access(user: User, farmer_id: uuid.UUID) -> uuid.UUID | None:
	scope = caller_farmer_scope(user)
	if scope is not None and scope != farmer_id:
		raise HTTPException(
			status_code=status.HTTP_403_FORBIDDEN,
			detail={"error": "forbidden", "message": "Not your farmer account"},
		)
	return scope

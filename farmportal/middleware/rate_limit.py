"""Redis-backed rate limiting middleware."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from farmportal.auth.dependencies import extract_request_farmer_id, extract_token_subject
from farmportal.config import get_settings


class RateLimitMiddleware(BaseHTTPMiddleware):
	"""Per-farmer quota limiter backed by Redis atomic counters.

	Requests whose path names no farmer (order and product mutations) are
	counted against the bearer token's user instead.
	"""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		if self._is_bypass_path(request.url.path):
			return await call_next(request)

		bucket = self._bucket(request)
		if bucket is None:
			return await call_next(request)

		redis_client = getattr(request.app.state, "redis", None)
		if redis_client is None:
			return await call_next(request)

		quota = get_settings().rate_limit_user_per_minute
		minute_bucket = datetime.now(UTC).strftime("%Y%m%d%H%M")
		key = f"ratelimit:{bucket}:{minute_bucket}"
		current = await redis_client.incr(key)
		if current == 1:
			await redis_client.expire(key, 65)

		if current > quota:
			return JSONResponse(
				status_code=429,
				content={
					"detail": {
						"error": "rate_limited",
						"message": "Request quota exceeded",
						"bucket": bucket,
						"quota": quota,
					}
				},
			)

		return await call_next(request)

	@staticmethod
	def _bucket(request: Request) -> str | None:
		farmer_id = extract_request_farmer_id(request)
		if farmer_id is not None:
			return f"farmer:{farmer_id}"
		subject = extract_token_subject(request)
		if subject is not None:
			return f"user:{subject}"
		return None

	@staticmethod
	def _is_bypass_path(path: str) -> bool:
		return path.startswith(("/docs", "/redoc", "/openapi", "/health", "/api/v1/auth"))

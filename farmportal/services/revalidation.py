"""Presentation-path invalidation — tells the front end which views went stale."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from farmportal.config import get_settings

ORDERS_PATH = "/farmer-portal/orders"
DASHBOARD_PATH = "/farmer-portal/dashboard"
PRODUCTS_PATH = "/farmer-portal/products"
PROFILE_PATH = "/farmer-portal/profile"

logger = structlog.get_logger("farmportal.revalidation")


class PathInvalidator:
	"""Records stale view paths and publishes them on the revalidate channel."""

	def __init__(self, redis_client: Redis | None = None, channel: str | None = None):
		self.redis_client = redis_client
		self.channel = channel or get_settings().revalidate_channel
		self.invalidated: list[str] = []

	async def invalidate(self, *paths: str) -> None:
		for path in paths:
			self.invalidated.append(path)
			logger.info("path_invalidated", path=path)
			if self.redis_client is None:
				continue
			payload = {
				"event_type": "revalidate",
				"path": path,
				"invalidated_at": datetime.now(UTC).isoformat(),
			}
			try:
				await self.redis_client.publish(self.channel, json.dumps(payload))
			except RedisError:
				logger.exception("path_invalidation_publish_failed", path=path, channel=self.channel)

"""HTTP client the profile editor uses to talk to the portal API."""

from __future__ import annotations

import uuid
from typing import Any

import httpx

from farmportal.config import get_settings
from farmportal.schemas.auth import TokenPair
from farmportal.schemas.portal import MutationResult, ProfileResult


class SessionExpiredError(RuntimeError):
	"""Raised when the session cannot be renewed without signing in again."""


class PortalClient:
	"""Thin async client over ``/api/v1``; holds the caller's token pair."""

	def __init__(
		self,
		base_url: str | None = None,
		*,
		access_token: str | None = None,
		refresh_token: str | None = None,
		timeout: float | None = None,
		transport: httpx.AsyncBaseTransport | None = None,
	):
		settings = get_settings()
		self.base_url = (base_url or settings.portal_api_base_url).rstrip("/")
		self.access_token = access_token
		self.refresh_token = refresh_token
		self.timeout = timeout if timeout is not None else settings.portal_timeout_seconds
		self.transport = transport

	def _client(self) -> httpx.AsyncClient:
		headers = {"content-type": "application/json"}
		if self.access_token:
			headers["authorization"] = f"Bearer {self.access_token}"
		return httpx.AsyncClient(
			base_url=self.base_url,
			headers=headers,
			timeout=self.timeout,
			transport=self.transport,
		)

	async def get_farmer_profile(self, farmer_id: uuid.UUID) -> ProfileResult:
		async with self._client() as client:
			response = await client.get(f"/farmer-portal/{farmer_id}/profile")
			response.raise_for_status()
			return ProfileResult.model_validate(response.json())

	async def update_farmer_details(self, farmer_id: uuid.UUID, details: dict[str, Any]) -> MutationResult:
		async with self._client() as client:
			response = await client.patch(f"/farmer-portal/{farmer_id}/profile", json=details)
			response.raise_for_status()
			return MutationResult.model_validate(response.json())

	async def refresh_session(self) -> TokenPair:
		"""Swap the stored refresh token for a new token pair."""
		if not self.refresh_token:
			raise SessionExpiredError("No refresh token available")

		async with self._client() as client:
			response = await client.post("/auth/refresh", json={"refresh_token": self.refresh_token})
			if response.status_code == 401:
				raise SessionExpiredError("Refresh token rejected")
			response.raise_for_status()
			tokens = TokenPair.model_validate(response.json())

		self.access_token = tokens.access_token
		self.refresh_token = tokens.refresh_token
		return tokens

"""Per-field edit session for a single farmer profile.

Every editable field is either viewed or edited.  Saving a field sends a
partial update containing only that field; on success the saved value is
merged into the session and the caller's auth session is renewed, so other
fields being edited keep their drafts.  Failures end in a notification and
leave the field in edit mode.

Per field::

    Viewing --begin_edit--> Editing --save ok--> Viewing
                            Editing --save failed--> Editing
                            Editing --cancel--> Viewing

An image upload enters ``Editing`` for ``image`` and saves immediately.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any, Protocol

import structlog

from farmportal.config import get_settings
from farmportal.profile.fields import ProfileField, build_update_payload
from farmportal.profile.notifier import Notifier
from farmportal.schemas.auth import TokenPair
from farmportal.schemas.portal import FarmerProfileRead, MutationResult, ProfileResult

SAVE_SUCCESS_MESSAGE = "Details updated successfully"
SAVE_FAILURE_MESSAGE = "Failed to update details"
SAVE_ERROR_MESSAGE = "An error occurred while updating details"
UPLOAD_FAILURE_MESSAGE = "Error uploading profile picture"
SESSION_REFRESH_FAILURE_MESSAGE = "Your session could not be refreshed, please sign in again"

logger = structlog.get_logger("farmportal.profile")


class ProfileClient(Protocol):
	async def get_farmer_profile(self, farmer_id: uuid.UUID) -> ProfileResult: ...

	async def update_farmer_details(self, farmer_id: uuid.UUID, details: dict[str, Any]) -> MutationResult: ...

	async def refresh_session(self) -> TokenPair: ...


def _initial_values(profile: FarmerProfileRead | None) -> dict[ProfileField, Any]:
	values: dict[ProfileField, Any] = {}
	for field in ProfileField:
		raw = getattr(profile, field.value) if profile is not None else None
		if field is ProfileField.payment_account_id:
			values[field] = raw or None
		else:
			values[field] = raw or ""
	return values


class ProfileEditSession:
	"""Edit/view state, drafts and in-flight saves for one profile."""

	def __init__(
		self,
		profile: FarmerProfileRead | None,
		client: ProfileClient,
		notifier: Notifier,
		*,
		revert_on_cancel: bool | None = None,
	):
		self.farmer_id: uuid.UUID | None = profile.id if profile is not None else None
		self.client = client
		self.notifier = notifier
		if revert_on_cancel is None:
			revert_on_cancel = get_settings().profile_revert_on_cancel
		self.revert_on_cancel = revert_on_cancel

		self.saved: dict[ProfileField, Any] = _initial_values(profile)
		self.drafts: dict[ProfileField, Any] = dict(self.saved)
		self.editing: dict[ProfileField, bool] = {field: False for field in ProfileField}
		self.saving: set[ProfileField] = set()

	@classmethod
	async def load(
		cls,
		client: ProfileClient,
		farmer_id: uuid.UUID,
		notifier: Notifier,
		**kwargs: Any,
	) -> ProfileEditSession:
		"""Build a session from a fresh server fetch of the profile."""
		result = await client.get_farmer_profile(farmer_id)
		if result.error is not None or result.profile is None:
			notifier.error(result.error or "Farmer profile not found")
			return cls(None, client, notifier, **kwargs)
		return cls(result.profile, client, notifier, **kwargs)

	# ── State queries ───────────────────────────────────────────────────

	def is_editing(self, field: ProfileField | str) -> bool:
		return self.editing[ProfileField(field)]

	def is_saving(self, field: ProfileField | str) -> bool:
		return ProfileField(field) in self.saving

	def value(self, field: ProfileField | str) -> Any:
		return self.drafts[ProfileField(field)]

	# ── User actions ────────────────────────────────────────────────────

	def begin_edit(self, field: ProfileField | str) -> None:
		self.editing[ProfileField(field)] = True

	def change_value(self, field: ProfileField | str, value: Any) -> None:
		self.drafts[ProfileField(field)] = value

	def cancel(self, field: ProfileField | str) -> None:
		key = ProfileField(field)
		self.editing[key] = False
		if self.revert_on_cancel:
			self.drafts[key] = self.saved[key]

	async def save(self, field: ProfileField | str) -> bool:
		"""Persist one field.  Returns True when the update was accepted."""
		key = ProfileField(field)
		if self.farmer_id is None or key in self.saving:
			return False

		self.saving.add(key)
		try:
			payload = build_update_payload(key, self.drafts)
			try:
				result = await self.client.update_farmer_details(self.farmer_id, payload)
			except Exception:
				logger.exception("profile_save_failed", farmer_id=str(self.farmer_id), field=key.value)
				self.notifier.error(SAVE_ERROR_MESSAGE)
				return False

			if not result.success:
				logger.info(
					"profile_save_rejected",
					farmer_id=str(self.farmer_id),
					field=key.value,
					error=result.error,
				)
				self.notifier.error(result.error or SAVE_FAILURE_MESSAGE)
				return False

			self.notifier.success(SAVE_SUCCESS_MESSAGE)
			self._reconcile(key, payload)
			await self._refresh_session()
			return True
		finally:
			self.saving.discard(key)

	async def on_image_uploaded(self, result: Mapping[str, Any]) -> bool:
		"""Handle the uploader's success callback and save the new image."""
		try:
			image_url = result["info"]["secure_url"]
		except (KeyError, TypeError):
			image_url = None
		if not isinstance(image_url, str) or not image_url:
			logger.warning("profile_image_upload_malformed", farmer_id=str(self.farmer_id))
			self.notifier.error(UPLOAD_FAILURE_MESSAGE)
			return False

		self.drafts[ProfileField.image] = image_url
		self.editing[ProfileField.image] = True
		return await self.save(ProfileField.image)

	# ── Internals ───────────────────────────────────────────────────────

	def _reconcile(self, field: ProfileField, payload: dict[str, Any]) -> None:
		self.saved[field] = payload[field.value]
		self.editing[field] = False

	async def _refresh_session(self) -> None:
		try:
			await self.client.refresh_session()
		except Exception:
			logger.exception("session_refresh_failed", farmer_id=str(self.farmer_id))
			self.notifier.error(SESSION_REFRESH_FAILURE_MESSAGE)

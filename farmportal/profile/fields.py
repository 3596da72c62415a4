"""Editable profile fields and per-field update payloads."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from farmportal.models.enums import RegionEnum


class ProfileField(StrEnum):
	"""Fields of a farmer profile that can be edited one at a time."""

	name = "name"
	bio = "bio"
	about = "about"
	region = "region"
	town = "town"
	image = "image"
	payment_account_id = "payment_account_id"


def region_choices() -> list[str]:
	"""Values offered by the region selector, in display order."""
	return [region.value for region in RegionEnum]


def build_update_payload(field: ProfileField | str, drafts: Mapping[ProfileField, Any]) -> dict[str, Any]:
	"""Partial update body for saving ``field``: exactly ``{field: draft}``."""
	key = ProfileField(field)
	return {key.value: drafts.get(key)}

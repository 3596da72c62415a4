"""User-facing notifications raised by the profile editor."""

from __future__ import annotations

from typing import Protocol

import structlog


class Notifier(Protocol):
	def success(self, message: str) -> None: ...

	def error(self, message: str) -> None: ...


class LogNotifier:
	"""Notifier for headless use: every toast becomes a structured log line."""

	def __init__(self, logger_name: str = "farmportal.profile.notify"):
		self.logger = structlog.get_logger(logger_name)

	def success(self, message: str) -> None:
		self.logger.info("notify_success", message=message)

	def error(self, message: str) -> None:
		self.logger.warning("notify_error", message=message)

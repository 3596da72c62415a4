"""Pydantic schemas for login and session renewal."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
	username: str = Field(min_length=1, max_length=150)
	password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
	refresh_token: str = Field(min_length=1)


class TokenPair(BaseModel):
	access_token: str
	refresh_token: str
	token_type: str = "bearer"
	expires_in: int

"""Pydantic schemas for request/response validation."""

from app.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountSummary,
    AccountUpdate,
    LoginRequest,
    Permissions,
)
from app.schemas.token import LoginResponse, RefreshResponse, TokenClaims, TokenRequest, VerifyResponse

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "AccountSummary",
    "AccountUpdate",
    "LoginRequest",
    "LoginResponse",
    "Permissions",
    "RefreshResponse",
    "TokenClaims",
    "TokenRequest",
    "VerifyResponse",
]

"""
Token schemas for JWT authentication.
"""

from pydantic import BaseModel, Field

from app.models.account import AccountRole
from app.schemas.account import AccountSummary


class TokenClaims(BaseModel):
    """Identity carried by a session token. Never includes permissions."""

    account_id: int
    email: str
    role: AccountRole


class TokenRequest(BaseModel):
    """Body for the verify and refresh endpoints."""

    token: str = Field(min_length=1)


class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    account: AccountSummary


class VerifyResponse(BaseModel):
    valid: bool = True
    account: AccountSummary


class RefreshResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    account: AccountSummary

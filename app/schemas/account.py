"""
Account schemas for API request/response validation.
Separates internal models from API contracts using Pydantic.
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from app.core.security import password_strength_error
from app.models.account import Account, AccountRole

_NAME_PATTERN = re.compile(r"^[A-Za-z ]+$")


def _normalize_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = " ".join(value.split())
    if not value:
        return None
    if not 2 <= len(value) <= 50:
        raise ValueError("Name must be between 2 and 50 characters")
    if not _NAME_PATTERN.match(value):
        raise ValueError("Name can only contain letters and spaces")
    return value


def _check_password(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    error = password_strength_error(value)
    if error:
        raise ValueError(error)
    return value


class Permissions(BaseModel):
    """The complete, fixed permission set of an account."""

    view_suggestions: bool = True
    edit_suggestions: bool = False
    delete_suggestions: bool = False
    manage_suggestions: bool = False
    manage_admins: bool = False
    export_data: bool = True
    view_analytics: bool = True

    @classmethod
    def all_granted(cls) -> "Permissions":
        return cls(**{name: True for name in cls.model_fields})


class PermissionsUpdate(BaseModel):
    """Partial permission change; omitted flags keep their value."""

    view_suggestions: Optional[bool] = None
    edit_suggestions: Optional[bool] = None
    delete_suggestions: Optional[bool] = None
    manage_suggestions: Optional[bool] = None
    manage_admins: Optional[bool] = None
    export_data: Optional[bool] = None
    view_analytics: Optional[bool] = None


class AccountCreate(BaseModel):
    """Schema for creating a staff account."""

    email: EmailStr
    password: str
    role: AccountRole = AccountRole.HR
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    permissions: Permissions = Field(default_factory=Permissions)

    @field_validator("first_name", "last_name")
    @classmethod
    def normalize_names(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_name(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _check_password(v)  # type: ignore[return-value]

    @model_validator(mode="after")
    def require_a_name(self) -> "AccountCreate":
        if not self.first_name and not self.last_name:
            raise ValueError("At least one name field (first_name or last_name) is required")
        return self


class AccountUpdate(BaseModel):
    """Schema for updating a staff account. Omitted fields are unchanged."""

    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[AccountRole] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    permissions: Optional[PermissionsUpdate] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def normalize_names(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_name(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> Optional[str]:
        return _check_password(v)


class AccountStatusUpdate(BaseModel):
    is_active: bool


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str


class AccountSummary(BaseModel):
    """
    Account data returned by login, verify and refresh.
    Excludes the password hash and lockout internals.
    """

    id: int
    email: str
    role: AccountRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: str
    permissions: Permissions

    @classmethod
    def from_account(cls, account: Account) -> "AccountSummary":
        return cls(
            id=account.id,  # type: ignore[arg-type]
            email=account.email,
            role=account.role,
            first_name=account.first_name,
            last_name=account.last_name,
            full_name=account.full_name,
            permissions=Permissions(**account.permission_map()),
        )


class AccountResponse(AccountSummary):
    """Full account view for profile and account management."""

    is_active: bool
    is_locked: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        summary = AccountSummary.from_account(account)
        return cls(
            **summary.model_dump(),
            is_active=account.is_active,
            is_locked=account.is_locked,
            last_login=account.last_login,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class AccountName(BaseModel):
    """Assignable reviewer, as listed for suggestion assignment."""

    id: int
    name: str
    role: AccountRole
    email: str


class AccountListResponse(BaseModel):
    admins: List[AccountResponse]


class AccountNamesResponse(BaseModel):
    admins: List[AccountName]


class AccountMutationResponse(BaseModel):
    success: bool = True
    message: str
    admin: AccountResponse

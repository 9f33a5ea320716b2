"""
Staff account model with role and permission based access control.

Role and permissions are independent: a role is a coarse title used for a
handful of hard-coded checks, permissions are explicit per-account flags.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel

from app.models.base import as_utc, utc_now


class AccountRole(str, Enum):
    """Fixed set of staff titles."""

    HR = "HR"
    CEO = "CEO"
    COO = "COO"
    CTO = "CTO"
    CFO = "CFO"
    CCO = "CCO"
    CPO = "CPO"


# The one role allowed to create, modify and deactivate accounts.
ADMIN_MANAGER_ROLE = AccountRole.COO


class Permission(str, Enum):
    """Named capability flags. Values are the Account column names."""

    VIEW_SUGGESTIONS = "view_suggestions"
    EDIT_SUGGESTIONS = "edit_suggestions"
    DELETE_SUGGESTIONS = "delete_suggestions"
    MANAGE_SUGGESTIONS = "manage_suggestions"
    MANAGE_ADMINS = "manage_admins"
    EXPORT_DATA = "export_data"
    VIEW_ANALYTICS = "view_analytics"


class Account(SQLModel, table=True):
    """
    Staff account used to log into the review interface.

    Attributes:
        id: Primary key
        email: Unique, lower-cased email address (used for login)
        hashed_password: Password hash, never serialized in responses
        role: One of AccountRole
        view_suggestions..view_analytics: Permission flags
        is_active: Soft-disable flag; accounts are never hard deleted
        failed_login_attempts: Consecutive failed logins in the current window
        lock_until: End of the temporary lock, if any
        last_login: Time of the last successful login
    """

    __tablename__ = "accounts"  # type: ignore

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    hashed_password: str
    role: AccountRole = Field(default=AccountRole.HR, index=True)
    first_name: Optional[str] = Field(default=None, max_length=50)
    last_name: Optional[str] = Field(default=None, max_length=50)

    view_suggestions: bool = Field(default=True)
    edit_suggestions: bool = Field(default=False)
    delete_suggestions: bool = Field(default=False)
    manage_suggestions: bool = Field(default=False)
    manage_admins: bool = Field(default=False)
    export_data: bool = Field(default=True)
    view_analytics: bool = Field(default=True)

    is_active: bool = Field(default=True, index=True)
    failed_login_attempts: int = Field(default=0)
    lock_until: Optional[datetime] = None
    last_login: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_locked(self) -> bool:
        lock_until = as_utc(self.lock_until)
        return lock_until is not None and lock_until > utc_now()

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def has_permission(self, permission: Permission) -> bool:
        return bool(getattr(self, permission.value))

    def permission_map(self) -> dict[str, bool]:
        return {permission.value: self.has_permission(permission) for permission in Permission}

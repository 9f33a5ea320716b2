"""
API dependencies for FastAPI dependency injection.

This is the authorization guard: every protected route declares one of
these dependencies and handlers never re-check roles or permissions.

- get_current_account: bearer token -> live, active, unlocked Account (401)
- require_permission(p): account must hold permission p (403)
- require_role(*roles): account role must be one of roles (403)
- can_manage_admins: account role must be exactly COO (403)
"""

from typing import Annotated, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from app.core.exceptions import Forbidden, Unauthenticated
from app.core.logging import get_logger
from app.db.session import get_session
from app.models.account import ADMIN_MANAGER_ROLE, Account, AccountRole, Permission
from app.services.token_service import TokenService

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[Session, Depends(get_session)]


def get_current_account(
    request: Request,
    session: SessionDep,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> Account:
    """
    Dependency to get the current account from the bearer token.

    The token only identifies the account; active and lock state come from
    the database on every request.

    Raises:
        Unauthenticated: If the token is missing, invalid or expired, or the
            account is unknown, inactive or locked
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Access token required")

    account = TokenService.resolve_account(session, credentials.credentials)
    request.state.account = account
    return account


CurrentAccount = Annotated[Account, Depends(get_current_account)]


def require_permission(permission: Permission) -> Callable[..., Account]:
    """
    Build a dependency that requires one permission flag.

    Args:
        permission: Permission the account must hold

    Returns:
        Dependency returning the authorized account
    """

    def _check(account: CurrentAccount) -> Account:
        if not account.has_permission(permission):
            logger.warning(f"Account {account.id} lacks permission {permission.value}")
            raise Forbidden("Insufficient permissions")
        return account

    return _check


def require_role(*roles: AccountRole) -> Callable[..., Account]:
    """Build a dependency that requires the account role to be one of ``roles``."""
    allowed = frozenset(roles)

    def _check(account: CurrentAccount) -> Account:
        if account.role not in allowed:
            logger.warning(f"Account {account.id} with role {account.role.value} denied")
            raise Forbidden("Insufficient role permissions")
        return account

    return _check


def can_manage_admins(account: CurrentAccount) -> Account:
    """
    Account management is gated on the COO role, not on a permission flag.
    """
    if account.role != ADMIN_MANAGER_ROLE:
        logger.warning(f"Account {account.id} attempted account management")
        raise Forbidden("Only COO (Chief Operating Officer) can manage admin accounts")
    return account


AdminManager = Annotated[Account, Depends(can_manage_admins)]

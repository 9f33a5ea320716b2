"""
Authentication routes for staff accounts.
Provides JWT token-based login, verification, refresh and password changes.
"""

from fastapi import APIRouter

from app.api.deps import CurrentAccount, SessionDep
from app.core.logging import get_logger
from app.schemas.account import AccountResponse, AccountSummary, ChangePasswordRequest, LoginRequest
from app.schemas.common import MessageResponse
from app.schemas.token import LoginResponse, RefreshResponse, TokenRequest, VerifyResponse
from app.services.account_service import AccountService
from app.services.token_service import TokenService

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, session: SessionDep) -> LoginResponse:
    """
    Exchange email and password for a session token.

    Args:
        credentials: Email and password
        session: Database session

    Returns:
        Token and account summary

    Raises:
        Unauthenticated: If the credentials are invalid
        AccountLocked: If the account is temporarily locked
    """
    account = AccountService.authenticate(session, credentials.email, credentials.password)
    token = TokenService.issue(account)
    return LoginResponse(token=token, account=AccountSummary.from_account(account))


@router.post("/verify", response_model=VerifyResponse)
def verify(body: TokenRequest, session: SessionDep) -> VerifyResponse:
    """Check a token against the live account it names."""
    account = TokenService.resolve_account(session, body.token)
    return VerifyResponse(account=AccountSummary.from_account(account))


@router.post("/refresh", response_model=RefreshResponse)
def refresh(body: TokenRequest, session: SessionDep) -> RefreshResponse:
    """
    Re-issue a token, including an expired one, while its account is still
    active and unlocked.
    """
    token, account = TokenService.refresh(session, body.token)
    return RefreshResponse(token=token, account=AccountSummary.from_account(account))


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    account: CurrentAccount,
    session: SessionDep,
) -> MessageResponse:
    AccountService.change_password(session, account, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")


@router.post("/logout", response_model=MessageResponse)
def logout() -> MessageResponse:
    # Tokens are not stored server-side; the client discards its copy
    return MessageResponse(message="Logout successful. Please remove the token from your client.")


@router.get("/me", response_model=AccountResponse)
def get_profile(account: CurrentAccount) -> AccountResponse:
    """
    Get the current account's profile.
    This is a protected route that requires authentication.
    """
    return AccountResponse.from_account(account)

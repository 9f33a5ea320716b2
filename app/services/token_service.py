"""
Session token issuing, verification and refresh.

Tokens are signed JWTs carrying account id, email and role. They are not
stored server-side: a token only authenticates while the account it names is
still active and unlocked, so deactivating an account revokes its tokens.
"""

from typing import Tuple

from jose import ExpiredSignatureError, JWTError
from pydantic import ValidationError
from sqlmodel import Session

from app.core.exceptions import Unauthenticated
from app.core.logging import get_logger
from app.core.security import create_access_token, decode_access_token
from app.models.account import Account
from app.schemas.token import TokenClaims

logger = get_logger(__name__)


class TokenService:
    """Service class for session token operations."""

    @staticmethod
    def issue(account: Account) -> str:
        """
        Issue a token for an account.

        Args:
            account: Authenticated account

        Returns:
            Signed token with the configured expiry
        """
        return create_access_token(
            subject=account.id,
            claims={"email": account.email, "role": account.role.value},
        )

    @staticmethod
    def decode(token: str, verify_exp: bool = True) -> TokenClaims:
        """
        Check signature (and expiry unless disabled) and return the claims.

        Raises:
            Unauthenticated: If the token is expired, forged or malformed
        """
        try:
            payload = decode_access_token(token, verify_exp=verify_exp)
        except ExpiredSignatureError:
            raise Unauthenticated("Token expired")
        except JWTError as e:
            logger.warning(f"JWT validation failed: {e}")
            raise Unauthenticated("Invalid token")

        try:
            return TokenClaims(
                account_id=int(payload["sub"]),
                email=payload["email"],
                role=payload["role"],
            )
        except (KeyError, TypeError, ValueError, ValidationError):
            logger.warning("Token is missing or has malformed identity claims")
            raise Unauthenticated("Invalid token")

    @staticmethod
    def load_live_account(session: Session, claims: TokenClaims) -> Account:
        """
        Fetch the current account state behind a token.

        Raises:
            Unauthenticated: If the account is gone, inactive or locked
        """
        account = session.get(Account, claims.account_id)
        if account is None:
            logger.warning(f"Token for unknown account {claims.account_id}")
            raise Unauthenticated("Invalid token - account not found")
        if not account.is_active:
            logger.warning(f"Inactive account {account.id} presented a token")
            raise Unauthenticated("Account is deactivated")
        if account.is_locked:
            logger.warning(f"Locked account {account.id} presented a token")
            raise Unauthenticated("Account is temporarily locked")
        return account

    @classmethod
    def resolve_account(cls, session: Session, token: str) -> Account:
        """Verify a token and return its live, usable account."""
        return cls.load_live_account(session, cls.decode(token))

    @classmethod
    def refresh(cls, session: Session, token: str) -> Tuple[str, Account]:
        """
        Re-issue a token. Expiry is ignored but the signature is not, and the
        account must still be active and unlocked.

        Returns:
            New token and the live account
        """
        account = cls.load_live_account(session, cls.decode(token, verify_exp=False))
        logger.info(f"Token refreshed for account {account.id}")
        return cls.issue(account), account

"""
Tests for session token issue, verification and refresh.
"""

from datetime import timedelta

import pytest
from jose import jwt
from sqlmodel import Session

from app.core.config import settings
from app.core.exceptions import Unauthenticated
from app.core.security import create_access_token, decode_access_token
from app.models.account import Account, AccountRole
from app.models.base import utc_now
from app.services.token_service import TokenService


def expired_token(account: Account) -> str:
    return create_access_token(
        subject=account.id,
        claims={"email": account.email, "role": account.role.value},
        expires_delta=timedelta(minutes=-5),
    )


def test_issue_carries_identity_only(viewer: Account) -> None:
    payload = decode_access_token(TokenService.issue(viewer))
    assert payload["sub"] == str(viewer.id)
    assert payload["email"] == viewer.email
    assert payload["role"] == "HR"
    assert "exp" in payload and "iat" in payload
    assert "permissions" not in payload
    assert payload["exp"] - payload["iat"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


def test_decode_round_trip(viewer: Account) -> None:
    claims = TokenService.decode(TokenService.issue(viewer))
    assert claims.account_id == viewer.id
    assert claims.role == AccountRole.HR


def test_decode_expired(viewer: Account) -> None:
    with pytest.raises(Unauthenticated, match="Token expired"):
        TokenService.decode(expired_token(viewer))


def test_decode_wrong_signature(viewer: Account) -> None:
    forged = jwt.encode(
        {"sub": str(viewer.id), "email": viewer.email, "role": "COO"},
        "some-other-secret",
        algorithm=settings.ALGORITHM,
    )
    with pytest.raises(Unauthenticated, match="Invalid token"):
        TokenService.decode(forged)


def test_decode_missing_claims() -> None:
    token = create_access_token(subject="not-a-number")
    with pytest.raises(Unauthenticated, match="Invalid token"):
        TokenService.decode(token)


def test_resolve_reads_live_permissions(session: Session, viewer: Account) -> None:
    """Permission changes apply to tokens issued before the change."""
    token = TokenService.issue(viewer)
    viewer.edit_suggestions = True
    session.add(viewer)
    session.commit()

    account = TokenService.resolve_account(session, token)
    assert account.edit_suggestions is True


def test_resolve_deactivated_account(session: Session, viewer: Account) -> None:
    token = TokenService.issue(viewer)
    viewer.is_active = False
    session.add(viewer)
    session.commit()

    with pytest.raises(Unauthenticated, match="Account is deactivated"):
        TokenService.resolve_account(session, token)


def test_resolve_locked_account(session: Session, viewer: Account) -> None:
    token = TokenService.issue(viewer)
    viewer.lock_until = utc_now() + timedelta(minutes=30)
    session.add(viewer)
    session.commit()

    with pytest.raises(Unauthenticated, match="temporarily locked"):
        TokenService.resolve_account(session, token)


def test_resolve_deleted_account(session: Session, viewer: Account) -> None:
    token = TokenService.issue(viewer)
    session.delete(viewer)
    session.commit()

    with pytest.raises(Unauthenticated, match="account not found"):
        TokenService.resolve_account(session, token)


def test_refresh_accepts_expired_token(session: Session, viewer: Account) -> None:
    new_token, account = TokenService.refresh(session, expired_token(viewer))
    assert account.id == viewer.id
    assert TokenService.decode(new_token).account_id == viewer.id


def test_refresh_rejects_deactivated_account(session: Session, viewer: Account) -> None:
    token = expired_token(viewer)
    viewer.is_active = False
    session.add(viewer)
    session.commit()

    with pytest.raises(Unauthenticated):
        TokenService.refresh(session, token)


def test_refresh_rejects_forged_token(session: Session, viewer: Account) -> None:
    forged = jwt.encode(
        {"sub": str(viewer.id), "email": viewer.email, "role": "HR"},
        "some-other-secret",
        algorithm=settings.ALGORITHM,
    )
    with pytest.raises(Unauthenticated):
        TokenService.refresh(session, forged)

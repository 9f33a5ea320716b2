"""
Failed-login tracking and temporary account lockout.

State per account: ``failed_login_attempts`` and ``lock_until``. Every change
is a single SQL UPDATE evaluated by the database, so concurrent failures on
the same account never lose an increment and no application lock is needed.
"""

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import or_, update
from sqlmodel import Session, col

from app.core.config import settings
from app.core.logging import get_logger
from app.models.account import Account
from app.models.base import as_utc, utc_now

logger = get_logger(__name__)


class LockoutService:
    """Records login outcomes and answers whether an account is locked."""

    @staticmethod
    def is_locked(account: Account, now: Optional[datetime] = None) -> bool:
        lock_until = as_utc(account.lock_until)
        return lock_until is not None and lock_until > (now or utc_now())

    @staticmethod
    def record_failure(session: Session, account: Account) -> Account:
        """
        Count one failed login.

        An expired lock restarts the counter at 1. Otherwise the counter is
        incremented, and reaching ``MAX_LOGIN_ATTEMPTS`` without an active
        lock starts a lock of ``LOCKOUT_DURATION_MINUTES``.

        Args:
            session: Database session
            account: Account whose login failed

        Returns:
            The refreshed account
        """
        now = utc_now()

        restarted = session.execute(
            update(Account)
            .where(
                col(Account.id) == account.id,
                col(Account.lock_until).is_not(None),
                col(Account.lock_until) <= now,
            )
            .values(failed_login_attempts=1, lock_until=None, updated_at=now)
            .execution_options(synchronize_session=False)
        )

        if restarted.rowcount == 0:
            session.execute(
                update(Account)
                .where(col(Account.id) == account.id)
                .values(failed_login_attempts=Account.failed_login_attempts + 1, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            locked = session.execute(
                update(Account)
                .where(
                    col(Account.id) == account.id,
                    col(Account.failed_login_attempts) >= settings.MAX_LOGIN_ATTEMPTS,
                    or_(col(Account.lock_until).is_(None), col(Account.lock_until) <= now),
                )
                .values(
                    lock_until=now + timedelta(minutes=settings.LOCKOUT_DURATION_MINUTES),
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            if locked.rowcount:
                logger.warning(f"Account {account.id} locked after repeated failed logins")

        session.commit()
        session.refresh(account)
        return account

    @staticmethod
    def record_success(session: Session, account: Account) -> Account:
        """Reset the counter, clear any lock and stamp ``last_login``."""
        now = utc_now()
        session.execute(
            update(Account)
            .where(col(Account.id) == account.id)
            .values(failed_login_attempts=0, lock_until=None, last_login=now)
            .execution_options(synchronize_session=False)
        )
        session.commit()
        session.refresh(account)
        return account

"""
Account service layer implementing business logic for staff accounts:
lookup, creation, updates, activation, login and password changes.
"""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from app.core.config import settings
from app.core.exceptions import (
    AccountLocked,
    Conflict,
    Forbidden,
    NotFound,
    Unauthenticated,
    ValidationFailed,
)
from app.core.logging import get_logger
from app.core.security import (
    burn_verification,
    get_password_hash,
    password_strength_error,
    verify_password,
)
from app.models.account import Account, AccountRole
from app.models.base import utc_now
from app.schemas.account import AccountCreate, AccountName, AccountUpdate, Permissions
from app.services.lockout_service import LockoutService

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountService:
    """Service class for account-related operations."""

    @staticmethod
    def get_by_email(session: Session, email: str) -> Optional[Account]:
        """
        Retrieve an account by email address, ignoring case.

        Args:
            session: Database session
            email: Email address to search for

        Returns:
            Account if found, None otherwise
        """
        statement = select(Account).where(func.lower(Account.email) == normalize_email(email))
        return session.exec(statement).first()

    @staticmethod
    def get_by_id(session: Session, account_id: int) -> Optional[Account]:
        return session.get(Account, account_id)

    @staticmethod
    def get_or_404(session: Session, account_id: int) -> Account:
        account = session.get(Account, account_id)
        if account is None:
            raise NotFound("Admin not found")
        return account

    @staticmethod
    def list_accounts(session: Session) -> List[Account]:
        statement = select(Account).order_by(col(Account.created_at).desc())
        return list(session.exec(statement))

    @staticmethod
    def list_assignable_names(session: Session) -> List[AccountName]:
        """Active accounts, as offered when assigning a suggestion."""
        statement = (
            select(Account)
            .where(col(Account.is_active).is_(True))
            .order_by(col(Account.first_name), col(Account.last_name))
        )
        return [
            AccountName(id=account.id, name=account.full_name, role=account.role, email=account.email)  # type: ignore[arg-type]
            for account in session.exec(statement)
        ]

    @staticmethod
    def create(session: Session, account_in: AccountCreate) -> Account:
        """
        Create a new account with a hashed password.

        Raises:
            Conflict: If the email is already registered
        """
        email = normalize_email(account_in.email)
        if AccountService.get_by_email(session, email):
            raise Conflict("Admin with this email already exists")

        account = Account(
            email=email,
            hashed_password=get_password_hash(account_in.password),
            role=account_in.role,
            first_name=account_in.first_name,
            last_name=account_in.last_name,
            **account_in.permissions.model_dump(),
        )
        session.add(account)
        try:
            session.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same email
            session.rollback()
            raise Conflict("Admin with this email already exists")
        session.refresh(account)
        logger.info(f"Account created: {account.id} ({account.role.value})")
        return account

    @staticmethod
    def update(session: Session, actor: Account, account_id: int, account_in: AccountUpdate) -> Account:
        """
        Apply a partial update to an account.

        Raises:
            NotFound: If the account does not exist
            Forbidden: If the actor tries to change its own role
            Conflict: If the new email belongs to another account
        """
        account = AccountService.get_or_404(session, account_id)
        changes = account_in.model_dump(exclude_unset=True)

        new_role = changes.get("role")
        if account.id == actor.id and new_role is not None and new_role != account.role:
            logger.warning(f"Account {actor.id} attempted to change its own role")
            raise Forbidden("You cannot change your own role")

        first_name = changes.get("first_name", account.first_name)
        last_name = changes.get("last_name", account.last_name)
        if not first_name and not last_name:
            raise ValidationFailed.for_field("first_name", "At least one name field is required")

        if changes.get("email") is not None:
            email = normalize_email(changes["email"])
            existing = AccountService.get_by_email(session, email)
            if existing is not None and existing.id != account.id:
                raise Conflict("Admin with this email already exists")
            account.email = email

        if changes.get("password") is not None:
            account.hashed_password = get_password_hash(changes["password"])
        if changes.get("role") is not None:
            account.role = changes["role"]
        account.first_name = first_name
        account.last_name = last_name

        for name, granted in (changes.get("permissions") or {}).items():
            if granted is not None:
                setattr(account, name, granted)

        account.updated_at = utc_now()
        session.add(account)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            raise Conflict("Admin with this email already exists")
        session.refresh(account)
        logger.info(f"Account {account.id} updated by {actor.id}")
        return account

    @staticmethod
    def set_active(session: Session, actor: Account, account_id: int, is_active: bool) -> Account:
        """
        Activate or deactivate an account. Deactivation revokes its tokens.

        Raises:
            Forbidden: If the actor targets its own account
        """
        if account_id == actor.id:
            logger.warning(f"Account {actor.id} attempted to change its own active flag")
            raise Forbidden("You cannot deactivate your own account")

        account = AccountService.get_or_404(session, account_id)
        account.is_active = is_active
        account.updated_at = utc_now()
        session.add(account)
        session.commit()
        session.refresh(account)
        logger.info(f"Account {account.id} {'activated' if is_active else 'deactivated'} by {actor.id}")
        return account

    @staticmethod
    def authenticate(session: Session, email: str, password: str) -> Account:
        """
        Run the login flow for an email and password.

        Unknown emails, wrong passwords and deactivated accounts all fail with
        the same message. A locked account fails with AccountLocked before the
        password is checked.

        Returns:
            The account, with its failure counter reset

        Raises:
            Unauthenticated: On bad credentials
            AccountLocked: While a temporary lock is in force
        """
        account = AccountService.get_by_email(session, email)
        if account is None:
            burn_verification(password)
            logger.warning("Failed login attempt for unknown email")
            raise Unauthenticated(INVALID_CREDENTIALS)

        if LockoutService.is_locked(account):
            logger.warning(f"Login attempt on locked account {account.id}")
            raise AccountLocked()

        if not verify_password(password, account.hashed_password):
            LockoutService.record_failure(session, account)
            logger.warning(
                f"Failed login for account {account.id} "
                f"({account.failed_login_attempts}/{settings.MAX_LOGIN_ATTEMPTS})"
            )
            raise Unauthenticated(INVALID_CREDENTIALS)

        if not account.is_active:
            logger.warning(f"Login attempt on deactivated account {account.id}")
            raise Unauthenticated(INVALID_CREDENTIALS)

        LockoutService.record_success(session, account)
        logger.info(f"Account logged in: {account.id}")
        return account

    @staticmethod
    def change_password(session: Session, account: Account, current_password: str, new_password: str) -> Account:
        """
        Rotate an account's password after checking the current one.

        Raises:
            ValidationFailed: If the current password is wrong or the new one is weak
        """
        if not verify_password(current_password, account.hashed_password):
            raise ValidationFailed.for_field("current_password", "Current password is incorrect")

        error = password_strength_error(new_password)
        if error:
            raise ValidationFailed.for_field("new_password", error)
        if verify_password(new_password, account.hashed_password):
            raise ValidationFailed.for_field(
                "new_password", "New password must differ from the current password"
            )

        account.hashed_password = get_password_hash(new_password)
        account.updated_at = utc_now()
        session.add(account)
        session.commit()
        session.refresh(account)
        logger.info(f"Password changed for account {account.id}")
        return account

    @staticmethod
    def ensure_default_admin(session: Session) -> Optional[Account]:
        """
        Create the configured default admin once.

        Does nothing when ``DEFAULT_ADMIN_PASSWORD`` is unset. The unique email
        constraint makes concurrent runs safe: whichever insert loses gets a
        Conflict and the existing account is returned.

        Returns:
            The default admin account, or None when not configured
        """
        if not settings.DEFAULT_ADMIN_PASSWORD:
            logger.info("DEFAULT_ADMIN_PASSWORD not set; skipping default admin")
            return None

        existing = AccountService.get_by_email(session, settings.DEFAULT_ADMIN_EMAIL)
        if existing is not None:
            logger.info("Default admin already exists")
            return existing

        account_in = AccountCreate(
            email=settings.DEFAULT_ADMIN_EMAIL,
            password=settings.DEFAULT_ADMIN_PASSWORD,
            role=AccountRole(settings.DEFAULT_ADMIN_ROLE),
            first_name="Admin",
            last_name="User",
            permissions=Permissions.all_granted(),
        )
        try:
            account = AccountService.create(session, account_in)
        except Conflict:
            logger.info("Default admin created concurrently by another process")
            return AccountService.get_by_email(session, settings.DEFAULT_ADMIN_EMAIL)
        logger.info(f"Default admin created: {account.email}")
        return account

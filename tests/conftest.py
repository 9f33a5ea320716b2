"""
Pytest configuration and fixtures.
Provides test database, client, accounts and common test utilities.
"""

import os

# Settings are read at import time; these must be set before importing app
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production-use-0123456789")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "1000")

from typing import Any, Callable, Dict, Generator, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from app.db.session import get_session  # noqa: E402
from app.main import app  # noqa: E402
from app.models.account import Account, AccountRole  # noqa: E402
from app.models.suggestion import Suggestion  # noqa: E402
from app.schemas.account import AccountCreate, Permissions  # noqa: E402
from app.services.account_service import AccountService  # noqa: E402
from app.services.category_service import CategoryService  # noqa: E402
from app.services.token_service import TokenService  # noqa: E402
from tests.utils import DEFAULT_CATEGORY, DEFAULT_SUBCATEGORY, TEST_PASSWORD  # noqa: E402


@pytest.fixture(name="session")
def session_fixture() -> Generator[Session, None, None]:
    """
    Create a test database session.
    Uses an in-memory SQLite database for fast tests.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with dependency overrides.
    """

    def get_session_override() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(name="categories")
def categories_fixture(session: Session) -> Dict[str, Any]:
    """Seed the default categories."""
    return CategoryService.seed_categories(session)


@pytest.fixture(name="make_account")
def make_account_fixture(session: Session) -> Callable[..., Account]:
    """
    Factory for accounts. Permissions not given keep their creation defaults.
    """

    def _make(
        email: str,
        role: AccountRole = AccountRole.HR,
        first_name: str = "Test",
        last_name: str = "User",
        **permissions: bool,
    ) -> Account:
        account_in = AccountCreate(
            email=email,
            password=TEST_PASSWORD,
            role=role,
            first_name=first_name,
            last_name=last_name,
            permissions=Permissions(**permissions),
        )
        return AccountService.create(session, account_in)

    return _make


@pytest.fixture(name="coo")
def coo_fixture(make_account: Callable[..., Account]) -> Account:
    """Account manager with every permission."""
    return make_account(
        "coo@example.com",
        role=AccountRole.COO,
        first_name="Olivia",
        last_name="Operations",
        **Permissions.all_granted().model_dump(),
    )


@pytest.fixture(name="viewer")
def viewer_fixture(make_account: Callable[..., Account]) -> Account:
    """HR account with the default permissions (view, export, analytics)."""
    return make_account("viewer@example.com", first_name="Vera", last_name="Viewer")


@pytest.fixture(name="editor")
def editor_fixture(make_account: Callable[..., Account]) -> Account:
    """CTO account that can edit and delete suggestions but not manage accounts."""
    return make_account(
        "editor@example.com",
        role=AccountRole.CTO,
        first_name="Eddie",
        last_name="Editor",
        edit_suggestions=True,
        delete_suggestions=True,
        manage_admins=True,
    )


@pytest.fixture(name="auth_headers")
def auth_headers_fixture() -> Callable[[Account], Dict[str, str]]:
    """Build a bearer Authorization header for an account."""

    def _headers(account: Account) -> Dict[str, str]:
        return {"Authorization": f"Bearer {TokenService.issue(account)}"}

    return _headers


@pytest.fixture(name="add_suggestion")
def add_suggestion_fixture(session: Session, categories: Dict[str, Any]) -> Callable[..., Suggestion]:
    """
    Insert a suggestion directly, bypassing request validation.
    """

    def _add(
        text: str = "Please add more code review guidelines",
        category: str = DEFAULT_CATEGORY,
        subcategory: Optional[str] = DEFAULT_SUBCATEGORY,
        **fields: Any,
    ) -> Suggestion:
        category_row = CategoryService.find_active_category(session, category)
        assert category_row is not None
        subcategory_row = CategoryService.find_active_subcategories(
            session, subcategory or DEFAULT_SUBCATEGORY, category_row.id
        )[0]
        suggestion = Suggestion(
            category_id=category_row.id,  # type: ignore[arg-type]
            subcategory_id=subcategory_row.id,  # type: ignore[arg-type]
            suggestion_text=text,
            **fields,
        )
        session.add(suggestion)
        session.commit()
        session.refresh(suggestion)
        return suggestion

    return _add

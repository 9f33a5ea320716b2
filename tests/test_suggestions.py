"""
Tests for the public suggestion endpoints.
"""

from datetime import timedelta
from typing import Any, Dict

from fastapi.testclient import TestClient
from sqlalchemy import func
from sqlmodel import Session, select

from app.models.base import utc_now
from app.models.category import Category
from app.models.suggestion import Suggestion, SuggestionPriority, SuggestionStatus
from tests.utils import API, DEFAULT_CATEGORY, DEFAULT_SUBCATEGORY

SUGGESTIONS = f"{API}/suggestions"


def submission(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "category": DEFAULT_CATEGORY,
        "subcategory": DEFAULT_SUBCATEGORY,
        "suggestion_text": "We should   run code reviews\nwithin one day.",
    }
    payload.update(overrides)
    return payload


def suggestion_count(session: Session) -> int:
    return session.exec(select(func.count()).select_from(Suggestion)).one()


def test_categories(client: TestClient, categories: Dict[str, Any]) -> None:
    response = client.get(f"{SUGGESTIONS}/categories")
    assert response.status_code == 200
    data = response.json()["categories"]
    assert len(data) == 7
    assert list(data)[0] == DEFAULT_CATEGORY
    assert data[DEFAULT_CATEGORY][0] == DEFAULT_SUBCATEGORY
    assert all(len(subs) == 8 for subs in data.values())


def test_categories_hide_inactive(
    client: TestClient, session: Session, categories: Dict[str, Any]
) -> None:
    category = session.exec(select(Category).where(Category.name == DEFAULT_CATEGORY)).one()
    category.is_active = False
    session.add(category)
    session.commit()

    data = client.get(f"{SUGGESTIONS}/categories").json()["categories"]
    assert DEFAULT_CATEGORY not in data


def test_submit(client: TestClient, session: Session, categories: Dict[str, Any]) -> None:
    response = client.post(f"{SUGGESTIONS}/submit", json=submission())
    assert response.status_code == 201
    assert response.json()["success"] is True

    suggestion = session.exec(select(Suggestion)).one()
    assert suggestion.suggestion_text == "We should run code reviews within one day."
    assert suggestion.status == SuggestionStatus.PENDING
    assert suggestion.priority == SuggestionPriority.MEDIUM
    assert suggestion.reply == ""


def test_submit_unknown_category_writes_nothing(
    client: TestClient, session: Session, categories: Dict[str, Any]
) -> None:
    response = client.post(f"{SUGGESTIONS}/submit", json=submission(category="Nonexistent Category"))
    assert response.status_code == 422
    data = response.json()
    assert data["detail"] == "Invalid category selected"
    assert data["errors"] == [{"field": "category", "message": "Invalid category selected"}]
    assert suggestion_count(session) == 0


def test_submit_subcategory_from_other_category(
    client: TestClient, session: Session, categories: Dict[str, Any]
) -> None:
    response = client.post(f"{SUGGESTIONS}/submit", json=submission(subcategory="Team Management"))
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "subcategory"
    assert suggestion_count(session) == 0


def test_submit_inactive_category(
    client: TestClient, session: Session, categories: Dict[str, Any]
) -> None:
    category = session.exec(select(Category).where(Category.name == DEFAULT_CATEGORY)).one()
    category.is_active = False
    session.add(category)
    session.commit()

    response = client.post(f"{SUGGESTIONS}/submit", json=submission())
    assert response.status_code == 422
    assert suggestion_count(session) == 0


def test_submit_text_too_short(client: TestClient, categories: Dict[str, Any]) -> None:
    response = client.post(f"{SUGGESTIONS}/submit", json=submission(suggestion_text="Too short"))
    assert response.status_code == 422


def test_submit_text_invalid_characters(client: TestClient, categories: Dict[str, Any]) -> None:
    response = client.post(
        f"{SUGGESTIONS}/submit", json=submission(suggestion_text="Please fix the \u0000 issue now")
    )
    assert response.status_code == 422


def test_submit_keeps_markup_characters(
    client: TestClient, session: Session, categories: Dict[str, Any]
) -> None:
    """Submissions are not HTML-escaped on the way in."""
    text = "Use <code> blocks & \"quotes\" in docs/wiki"
    response = client.post(f"{SUGGESTIONS}/submit", json=submission(suggestion_text=text))
    assert response.status_code == 201
    assert session.exec(select(Suggestion)).one().suggestion_text == text


def test_public_stats(client: TestClient, add_suggestion) -> None:
    add_suggestion()
    add_suggestion(status=SuggestionStatus.RESOLVED)
    add_suggestion(category="Management & Leadership", subcategory="Team Management")

    response = client.get(f"{SUGGESTIONS}/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["total_suggestions"] == 3
    by_category = {item["category"]: item for item in data["category_breakdown"]}
    assert by_category[DEFAULT_CATEGORY]["count"] == 2
    assert by_category[DEFAULT_CATEGORY]["resolved"] == 1
    assert by_category["Management & Leadership"]["count"] == 1
    by_status = {item["status"]: item["count"] for item in data["status_breakdown"]}
    assert by_status == {"Pending": 2, "Resolved": 1}
    assert "last_updated" in data


def test_recent_stats(client: TestClient, add_suggestion) -> None:
    add_suggestion()
    add_suggestion(created_at=utc_now() - timedelta(days=45))

    response = client.get(f"{SUGGESTIONS}/recent")
    assert response.status_code == 200
    data = response.json()
    assert data["period"] == "Last 30 days"
    assert data["total_recent"] == 1
    assert data["category_stats"] == [{"category": DEFAULT_CATEGORY, "count": 1}]

"""
Tests for the reviewer dashboard statistics.
"""

from datetime import datetime, timezone

from fastapi.testclient import TestClient
from sqlmodel import Session

from app.models.account import Account
from app.models.suggestion import SuggestionPriority, SuggestionStatus
from app.services.stats_service import StatsService, months_ago
from tests.utils import API, DEFAULT_CATEGORY

DASHBOARD = f"{API}/admin/dashboard/stats"


def test_dashboard(client: TestClient, viewer: Account, auth_headers, add_suggestion) -> None:
    add_suggestion(reply="We are on it", status=SuggestionStatus.REVIEWED)
    add_suggestion(priority=SuggestionPriority.HIGH)

    response = client.get(DASHBOARD, headers=auth_headers(viewer))
    assert response.status_code == 200
    data = response.json()
    assert data["total_suggestions"] == 2
    assert data["response_rate"] == "50.0%"
    assert data["category_stats"][0]["category"] == DEFAULT_CATEGORY
    assert data["category_stats"][0]["count"] == 2
    assert data["category_stats"][0]["reviewed"] == 1
    assert data["category_stats"][0]["pending"] == 1
    assert {item["priority"]: item["count"] for item in data["priority_stats"]} == {
        "Medium": 1,
        "High": 1,
    }
    assert len(data["recent_suggestions"]) == 2
    assert sum(item["count"] for item in data["monthly_trend"]) == 2


def test_dashboard_empty(client: TestClient, viewer: Account, auth_headers, categories) -> None:
    data = client.get(DASHBOARD, headers=auth_headers(viewer)).json()
    assert data["total_suggestions"] == 0
    assert data["response_rate"] == "0%"
    assert data["recent_suggestions"] == []


def test_recent_suggestions_limited_to_ten(session: Session, add_suggestion) -> None:
    for i in range(12):
        add_suggestion(text=f"Recent suggestion number {i}")
    assert len(StatsService.dashboard(session)["recent_suggestions"]) == 10


def test_months_ago_crosses_year() -> None:
    now = datetime(2026, 2, 15, 10, 30, tzinfo=timezone.utc)
    assert months_ago(now, 6) == datetime(2025, 8, 1, tzinfo=timezone.utc)
    assert months_ago(now, 1) == datetime(2026, 1, 1, tzinfo=timezone.utc)

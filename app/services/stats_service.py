"""
Aggregate statistics for the public transparency endpoints and the
reviewer dashboard.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List

from sqlalchemy import case, extract, func
from sqlmodel import Session, col, select

from app.models.base import utc_now
from app.models.category import Category
from app.models.suggestion import Suggestion, SuggestionStatus
from app.services.suggestion_service import SuggestionService


def months_ago(now: datetime, months: int) -> datetime:
    """First instant of the month ``months`` before ``now``'s month."""
    month_index = now.year * 12 + (now.month - 1) - months
    return now.replace(
        year=month_index // 12,
        month=month_index % 12 + 1,
        day=1,
        hour=0,
        minute=0,
        second=0,
        microsecond=0,
    )


class StatsService:
    """Read-only aggregations over suggestions."""

    @staticmethod
    def total(session: Session) -> int:
        return session.exec(select(func.count()).select_from(Suggestion)).one()

    @staticmethod
    def status_stats(session: Session) -> List[Dict[str, Any]]:
        count = func.count().label("count")
        rows = session.exec(
            select(Suggestion.status, count).group_by(Suggestion.status).order_by(count.desc())
        ).all()
        return [{"status": status.value, "count": n} for status, n in rows]

    @staticmethod
    def priority_stats(session: Session) -> List[Dict[str, Any]]:
        count = func.count().label("count")
        rows = session.exec(
            select(Suggestion.priority, count).group_by(Suggestion.priority).order_by(count.desc())
        ).all()
        return [{"priority": priority.value, "count": n} for priority, n in rows]

    @staticmethod
    def category_stats(session: Session) -> List[Dict[str, Any]]:
        """Per-category totals with a breakdown by status."""
        count = func.count().label("count")
        per_status = [
            func.sum(case((Suggestion.status == status, 1), else_=0)).label(status.value.lower())
            for status in SuggestionStatus
        ]
        rows = session.exec(
            select(Category.name, Category.id, count, *per_status)
            .select_from(Suggestion)
            .join(Category, col(Category.id) == Suggestion.category_id)
            .group_by(Category.id, Category.name)
            .order_by(count.desc())
        ).all()
        stats = []
        for row in rows:
            name, category_id, total, *status_counts = row
            entry: Dict[str, Any] = {"category": name, "category_id": category_id, "count": total}
            for status, n in zip(SuggestionStatus, status_counts):
                entry[status.value.lower()] = int(n or 0)
            stats.append(entry)
        return stats

    @staticmethod
    def recent_by_category(session: Session, days: int = 30) -> Dict[str, Any]:
        since = utc_now() - timedelta(days=days)
        count = func.count().label("count")
        rows = session.exec(
            select(Category.name, count)
            .select_from(Suggestion)
            .join(Category, col(Category.id) == Suggestion.category_id)
            .where(col(Suggestion.created_at) >= since)
            .group_by(Category.name)
            .order_by(count.desc())
        ).all()
        stats = [{"category": name, "count": n} for name, n in rows]
        return {
            "period": f"Last {days} days",
            "category_stats": stats,
            "total_recent": sum(item["count"] for item in stats),
        }

    @staticmethod
    def response_rate(session: Session, total: int) -> str:
        """Share of suggestions with a non-empty reply, e.g. ``"42.5%"``."""
        if not total:
            return "0%"
        replied = session.exec(
            select(func.count()).select_from(Suggestion).where(Suggestion.reply != "")
        ).one()
        return f"{replied / total * 100:.1f}%"

    @staticmethod
    def monthly_trend(session: Session, months: int = 6) -> List[Dict[str, int]]:
        since = months_ago(utc_now(), months)
        year = extract("year", Suggestion.created_at).label("year")
        month = extract("month", Suggestion.created_at).label("month")
        rows = session.exec(
            select(year, month, func.count())
            .where(col(Suggestion.created_at) >= since)
            .group_by(year, month)
            .order_by(year, month)
        ).all()
        return [{"year": int(y), "month": int(m), "count": n} for y, m, n in rows]

    @classmethod
    def public_summary(cls, session: Session) -> Dict[str, Any]:
        return {
            "total_suggestions": cls.total(session),
            "category_breakdown": cls.category_stats(session),
            "status_breakdown": cls.status_stats(session),
            "last_updated": utc_now().isoformat(),
        }

    @classmethod
    def dashboard(cls, session: Session) -> Dict[str, Any]:
        """Everything the reviewer dashboard shows."""
        total = cls.total(session)
        recent = session.exec(
            select(Suggestion).order_by(col(Suggestion.created_at).desc(), col(Suggestion.id).desc()).limit(10)
        ).all()
        return {
            "total_suggestions": total,
            "response_rate": cls.response_rate(session, total),
            "category_stats": cls.category_stats(session),
            "status_stats": cls.status_stats(session),
            "priority_stats": cls.priority_stats(session),
            "recent_suggestions": [
                item.model_dump(mode="json") for item in SuggestionService.to_read(session, list(recent))
            ],
            "monthly_trend": cls.monthly_trend(session),
            "last_updated": utc_now().isoformat(),
        }

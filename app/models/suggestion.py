"""
Anonymously submitted suggestion and its review state.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlmodel import JSON, Column, Field, SQLModel

from app.models.base import utc_now


class SuggestionStatus(str, Enum):
    PENDING = "Pending"
    REVIEWED = "Reviewed"
    RESOLVED = "Resolved"
    ESCALATED = "Escalated"


class SuggestionPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class Suggestion(SQLModel, table=True):
    """
    A single feedback item.

    No submitter identity of any kind is stored.
    """

    __tablename__ = "suggestions"  # type: ignore

    id: Optional[int] = Field(default=None, primary_key=True)
    category_id: int = Field(foreign_key="categories.id", index=True)
    subcategory_id: int = Field(foreign_key="subcategories.id", index=True)
    suggestion_text: str = Field(max_length=2000)
    status: SuggestionStatus = Field(default=SuggestionStatus.PENDING, index=True)
    reply: str = Field(default="", max_length=1000)
    priority: SuggestionPriority = Field(default=SuggestionPriority.MEDIUM, index=True)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    assigned_to: Optional[str] = Field(default=None, max_length=100)
    estimated_resolution_date: Optional[datetime] = None
    actual_resolution_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, index=True)

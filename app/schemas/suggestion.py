"""
Suggestion schemas: anonymous submission, review updates, listing and export.
"""

import re
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.suggestion import SuggestionPriority, SuggestionStatus

# Characters accepted in suggestion bodies and replies.
_TEXT_PATTERN = re.compile(r"""^[a-zA-Z0-9\s\-.,!?@#$%^&*()_+={}\[\]|\\:;"'<>/]+$""")
_TAG_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-]+$")


def collapse_whitespace(value: str) -> str:
    return " ".join(value.split())


class SuggestionSubmit(BaseModel):
    """Anonymous submission. Category names are resolved server-side."""

    category: str = Field(min_length=2, max_length=100)
    subcategory: str = Field(min_length=2, max_length=100)
    suggestion_text: str

    @field_validator("category", "subcategory", mode="before")
    @classmethod
    def strip_names(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("suggestion_text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        v = collapse_whitespace(v)
        if not 10 <= len(v) <= 2000:
            raise ValueError("Suggestion text must be between 10 and 2000 characters")
        if not _TEXT_PATTERN.match(v):
            raise ValueError("Suggestion text contains invalid characters")
        return v


class SuggestionUpdate(BaseModel):
    """Reviewer changes. Omitted fields are left unchanged."""

    status: Optional[SuggestionStatus] = None
    reply: Optional[str] = None
    priority: Optional[SuggestionPriority] = None
    assigned_to: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None
    estimated_resolution_date: Optional[datetime] = None

    @field_validator("reply")
    @classmethod
    def validate_reply(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = collapse_whitespace(v)
        if not v:
            return ""
        if len(v) > 1000:
            raise ValueError("Reply cannot exceed 1000 characters")
        if not _TEXT_PATTERN.match(v):
            raise ValueError("Reply contains invalid characters")
        return v

    @field_validator("assigned_to")
    @classmethod
    def strip_assignee(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        cleaned = []
        for tag in v:
            tag = tag.strip()
            if not 1 <= len(tag) <= 50:
                raise ValueError("Each tag must be between 1 and 50 characters")
            if not _TAG_PATTERN.match(tag):
                raise ValueError("Tags can only contain letters, numbers, spaces, and hyphens")
            cleaned.append(tag)
        return cleaned


class SuggestionRead(BaseModel):
    id: int
    category: Optional[str] = None
    subcategory: Optional[str] = None
    suggestion_text: str
    status: SuggestionStatus
    reply: str
    priority: SuggestionPriority
    tags: List[str]
    assigned_to: Optional[str] = None
    estimated_resolution_date: Optional[datetime] = None
    actual_resolution_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class SuggestionFilterParams(BaseModel):
    """
    Client-supplied filters. Category and subcategory are names, never ids.
    Unknown keys are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    category: Optional[str] = Field(default=None, max_length=100)
    subcategory: Optional[str] = Field(default=None, max_length=100)
    status: Optional[SuggestionStatus] = None
    priority: Optional[SuggestionPriority] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = Field(default=None, max_length=200)

    @field_validator("category", "subcategory", "search")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        return v or None


class SortParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sort_by: str = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool


class SuggestionListResponse(BaseModel):
    suggestions: List[SuggestionRead]
    pagination: Pagination


class SuggestionUpdateResponse(BaseModel):
    success: bool = True
    message: str = "Suggestion updated successfully"
    suggestion: SuggestionRead
    recommendations: List[dict[str, str]] = Field(default_factory=list)


class SubmitResponse(BaseModel):
    success: bool = True
    message: str = "Your suggestion has been submitted successfully."


class ExportRequest(BaseModel):
    format: Literal["csv", "excel"] = "csv"
    filters: SuggestionFilterParams = Field(default_factory=SuggestionFilterParams)

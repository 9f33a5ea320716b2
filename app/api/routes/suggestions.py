"""
Public suggestion routes. No authentication; nothing about the caller is
stored or logged.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, status

from app.api.deps import SessionDep
from app.schemas.suggestion import SubmitResponse, SuggestionSubmit
from app.services.category_service import CategoryService
from app.services.stats_service import StatsService
from app.services.suggestion_service import SuggestionService

router = APIRouter(prefix="/suggestions", tags=["suggestions"])


@router.get("/categories")
def list_categories(session: SessionDep) -> Dict[str, Dict[str, List[str]]]:
    """Active categories mapped to their active subcategory names."""
    return {"categories": CategoryService.active_category_map(session)}


@router.post("/submit", response_model=SubmitResponse, status_code=status.HTTP_201_CREATED)
def submit_suggestion(submission: SuggestionSubmit, session: SessionDep) -> SubmitResponse:
    """
    Submit an anonymous suggestion.

    Raises:
        ValidationFailed: If the category or subcategory is not an active one
    """
    SuggestionService.submit(session, submission)
    return SubmitResponse()


@router.get("/stats")
def public_stats(session: SessionDep) -> Dict[str, Any]:
    return StatsService.public_summary(session)


@router.get("/recent")
def recent_stats(session: SessionDep) -> Dict[str, Any]:
    return StatsService.recent_by_category(session)

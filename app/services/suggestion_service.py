"""
Suggestion lifecycle: anonymous submission, review updates and deletion.
"""

from typing import Dict, List, Tuple

from sqlmodel import Session

from app.core.exceptions import NotFound, ValidationFailed
from app.core.logging import get_logger
from app.models.base import utc_now
from app.models.suggestion import Suggestion, SuggestionPriority, SuggestionStatus
from app.schemas.suggestion import SuggestionRead, SuggestionSubmit, SuggestionUpdate
from app.services.category_service import CategoryService

logger = get_logger(__name__)


class SuggestionService:
    """Service class for suggestion operations."""

    @staticmethod
    def submit(session: Session, submission: SuggestionSubmit) -> Suggestion:
        """
        Store an anonymous suggestion.

        Both names are resolved before anything is written, so an invalid
        category never leaves a partial record behind.

        Raises:
            ValidationFailed: If the category or subcategory is unknown or inactive
        """
        category = CategoryService.find_active_category(session, submission.category)
        if category is None:
            raise ValidationFailed.for_field("category", "Invalid category selected")

        subcategories = CategoryService.find_active_subcategories(
            session, submission.subcategory, category.id
        )
        if not subcategories:
            raise ValidationFailed.for_field("subcategory", "Invalid subcategory selected")

        suggestion = Suggestion(
            category_id=category.id,  # type: ignore[arg-type]
            subcategory_id=subcategories[0].id,  # type: ignore[arg-type]
            suggestion_text=submission.suggestion_text,
            status=SuggestionStatus.PENDING,
            priority=SuggestionPriority.MEDIUM,
        )
        session.add(suggestion)
        session.commit()
        session.refresh(suggestion)
        # Deliberately no request or submitter details in the log line
        logger.info(f"Suggestion {suggestion.id} submitted")
        return suggestion

    @staticmethod
    def get_or_404(session: Session, suggestion_id: int) -> Suggestion:
        suggestion = session.get(Suggestion, suggestion_id)
        if suggestion is None:
            raise NotFound("Suggestion not found")
        return suggestion

    @staticmethod
    def recommendations(suggestion: Suggestion, changes: SuggestionUpdate) -> List[Dict[str, str]]:
        """Advisory notes for reviewers; they never block an update."""
        notes = []
        has_reply = bool(changes.reply and changes.reply.strip())
        if changes.status is not None and changes.status != suggestion.status and not has_reply:
            notes.append(
                {
                    "field": "reply",
                    "message": "Reply recommended when changing suggestion status for better context",
                }
            )
        if changes.assigned_to and changes.assigned_to != suggestion.assigned_to and not has_reply:
            notes.append(
                {
                    "field": "reply",
                    "message": "Reply recommended when reassigning suggestion for better communication trail",
                }
            )
        return notes

    @staticmethod
    def update(
        session: Session, suggestion_id: int, changes: SuggestionUpdate
    ) -> Tuple[Suggestion, List[Dict[str, str]]]:
        """
        Apply reviewer changes.

        Moving to Resolved stamps ``actual_resolution_date`` only if it is
        still empty, so re-resolving keeps the first resolution time.

        Returns:
            The updated suggestion and any advisory recommendations
        """
        suggestion = SuggestionService.get_or_404(session, suggestion_id)
        notes = SuggestionService.recommendations(suggestion, changes)

        for field, value in changes.model_dump(exclude_unset=True).items():
            if field == "tags":
                value = list(value or [])
            elif field == "reply":
                value = value or ""
            elif field in ("status", "priority") and value is None:
                continue
            setattr(suggestion, field, value)

        now = utc_now()
        if suggestion.status == SuggestionStatus.RESOLVED and suggestion.actual_resolution_date is None:
            suggestion.actual_resolution_date = now
        suggestion.updated_at = now

        session.add(suggestion)
        session.commit()
        session.refresh(suggestion)
        for note in notes:
            logger.info(f"Suggestion {suggestion.id}: {note['message']}")
        return suggestion, notes

    @staticmethod
    def delete(session: Session, suggestion_id: int) -> None:
        suggestion = SuggestionService.get_or_404(session, suggestion_id)
        session.delete(suggestion)
        session.commit()
        logger.info(f"Suggestion {suggestion_id} deleted")

    @staticmethod
    def to_read(session: Session, suggestions: List[Suggestion]) -> List[SuggestionRead]:
        """Render suggestions with category and subcategory names."""
        categories, subcategories = CategoryService.name_maps(
            session,
            (s.category_id for s in suggestions),
            (s.subcategory_id for s in suggestions),
        )
        return [
            SuggestionRead(
                id=s.id,  # type: ignore[arg-type]
                category=categories.get(s.category_id),
                subcategory=subcategories.get(s.subcategory_id),
                suggestion_text=s.suggestion_text,
                status=s.status,
                reply=s.reply,
                priority=s.priority,
                tags=list(s.tags or []),
                assigned_to=s.assigned_to,
                estimated_resolution_date=s.estimated_resolution_date,
                actual_resolution_date=s.actual_resolution_date,
                created_at=s.created_at,
                updated_at=s.updated_at,
            )
            for s in suggestions
        ]

"""
Filter, sort and pagination for the suggestion collection.

All inputs arrive from query strings or export bodies and are untrusted:
category names are resolved against active records, sort fields are checked
against an allow-list and search terms are matched literally.
"""

import math
from dataclasses import dataclass
from typing import Any, List, Optional

from sqlalchemy import false, func, or_
from sqlmodel import Session, col, select

from app.core.config import settings
from app.models.suggestion import Suggestion
from app.schemas.suggestion import Pagination, SortParams, SuggestionFilterParams
from app.services.category_service import CategoryService

DEFAULT_SORT_FIELD = "created_at"

SORTABLE_FIELDS = {
    "created_at": Suggestion.created_at,
    "updated_at": Suggestion.updated_at,
    "status": Suggestion.status,
    "priority": Suggestion.priority,
    "estimated_resolution_date": Suggestion.estimated_resolution_date,
    "actual_resolution_date": Suggestion.actual_resolution_date,
}


def like_pattern(term: str) -> str:
    """Substring LIKE pattern with the term's own wildcards escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def compute_pagination(total: int, page: int, limit: int) -> Pagination:
    total_pages = math.ceil(total / limit) if limit else 0
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_items=total,
        items_per_page=limit,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


@dataclass
class SuggestionPage:
    items: List[Suggestion]
    pagination: Pagination


class SuggestionQuery:
    """Builds and runs suggestion queries for one session."""

    def __init__(self, session: Session):
        self.session = session

    def build_conditions(self, filters: SuggestionFilterParams) -> List[Any]:
        """
        Translate filters into WHERE clauses.

        A category or subcategory name that does not resolve to an active
        record produces an always-false clause, never an unfiltered query.
        """
        conditions: List[Any] = []
        category_id: Optional[int] = None

        if filters.category:
            category = CategoryService.find_active_category(self.session, filters.category)
            if category is None:
                return [false()]
            category_id = category.id
            conditions.append(Suggestion.category_id == category_id)

        if filters.subcategory:
            subcategories = CategoryService.find_active_subcategories(
                self.session, filters.subcategory, category_id
            )
            if not subcategories:
                return [false()]
            conditions.append(col(Suggestion.subcategory_id).in_([sub.id for sub in subcategories]))

        if filters.status is not None:
            conditions.append(Suggestion.status == filters.status)
        if filters.priority is not None:
            conditions.append(Suggestion.priority == filters.priority)

        if filters.start_date is not None:
            conditions.append(col(Suggestion.created_at) >= filters.start_date)
        if filters.end_date is not None:
            conditions.append(col(Suggestion.created_at) <= filters.end_date)

        if filters.search:
            pattern = like_pattern(filters.search)
            conditions.append(
                or_(
                    col(Suggestion.suggestion_text).ilike(pattern, escape="\\"),
                    col(Suggestion.reply).ilike(pattern, escape="\\"),
                )
            )

        return conditions

    @staticmethod
    def order_by(sort: Optional[SortParams]) -> List[Any]:
        """Sort clauses; unknown fields fall back to newest first. Ties break on id."""
        sort = sort or SortParams()
        column = col(SORTABLE_FIELDS.get(sort.sort_by, SORTABLE_FIELDS[DEFAULT_SORT_FIELD]))
        if sort.sort_order == "asc":
            return [column.asc(), col(Suggestion.id).asc()]
        return [column.desc(), col(Suggestion.id).desc()]

    def count(self, conditions: List[Any]) -> int:
        statement = select(func.count()).select_from(Suggestion).where(*conditions)
        return self.session.exec(statement).one()

    def paginate(
        self,
        filters: SuggestionFilterParams,
        sort: Optional[SortParams] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> SuggestionPage:
        """
        Run a filtered, sorted page query.

        Args:
            filters: Client filters
            sort: Sort field and direction
            page: 1-based page number
            limit: Page size, capped at PAGE_SIZE_MAX

        Returns:
            The page of suggestions and its pagination metadata
        """
        page = max(page, 1)
        limit = min(max(limit or settings.PAGE_SIZE_DEFAULT, 1), settings.PAGE_SIZE_MAX)

        conditions = self.build_conditions(filters)
        total = self.count(conditions)
        statement = (
            select(Suggestion)
            .where(*conditions)
            .order_by(*self.order_by(sort))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        items = list(self.session.exec(statement))
        return SuggestionPage(items=items, pagination=compute_pagination(total, page, limit))

    def all(self, filters: SuggestionFilterParams, sort: Optional[SortParams] = None) -> List[Suggestion]:
        """Every matching suggestion, for export."""
        statement = select(Suggestion).where(*self.build_conditions(filters)).order_by(*self.order_by(sort))
        return list(self.session.exec(statement))

"""
Admin routes: suggestion review, dashboard analytics, export and account
management. Every route is guarded by a permission or role dependency.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.deps import AdminManager, SessionDep, require_permission
from app.core.config import settings
from app.core.logging import get_logger
from app.core.sanitize import sanitize_model
from app.models.account import Account, Permission
from app.models.suggestion import SuggestionPriority, SuggestionStatus
from app.schemas.account import (
    AccountCreate,
    AccountListResponse,
    AccountMutationResponse,
    AccountNamesResponse,
    AccountResponse,
    AccountStatusUpdate,
    AccountUpdate,
)
from app.schemas.common import MessageResponse
from app.schemas.suggestion import (
    ExportRequest,
    SortParams,
    SuggestionFilterParams,
    SuggestionListResponse,
    SuggestionRead,
    SuggestionUpdate,
    SuggestionUpdateResponse,
)
from app.services.account_service import AccountService
from app.services.export_service import export_suggestions
from app.services.stats_service import StatsService
from app.services.suggestion_query import SuggestionQuery
from app.services.suggestion_service import SuggestionService

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

CanView = Annotated[Account, Depends(require_permission(Permission.VIEW_SUGGESTIONS))]
CanEdit = Annotated[Account, Depends(require_permission(Permission.EDIT_SUGGESTIONS))]
CanDelete = Annotated[Account, Depends(require_permission(Permission.DELETE_SUGGESTIONS))]
CanExport = Annotated[Account, Depends(require_permission(Permission.EXPORT_DATA))]
CanViewAnalytics = Annotated[Account, Depends(require_permission(Permission.VIEW_ANALYTICS))]


# Suggestions


@router.get("/suggestions", response_model=SuggestionListResponse)
def list_suggestions(
    _: CanView,
    session: SessionDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=settings.PAGE_SIZE_MAX)] = settings.PAGE_SIZE_DEFAULT,
    category: Annotated[Optional[str], Query(max_length=100)] = None,
    subcategory: Annotated[Optional[str], Query(max_length=100)] = None,
    suggestion_status: Annotated[Optional[SuggestionStatus], Query(alias="status")] = None,
    priority: Optional[SuggestionPriority] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    search: Annotated[Optional[str], Query(max_length=200)] = None,
    sort_by: str = "created_at",
    sort_order: Annotated[str, Query(pattern="^(asc|desc)$")] = "desc",
) -> SuggestionListResponse:
    """
    List suggestions with filters, sorting and pagination.

    Category and subcategory are names; a name that matches no active record
    gives an empty page.
    """
    filters = SuggestionFilterParams(
        category=category,
        subcategory=subcategory,
        status=suggestion_status,
        priority=priority,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    sort = SortParams(sort_by=sort_by, sort_order=sort_order)  # type: ignore[arg-type]
    result = SuggestionQuery(session).paginate(filters, sort, page=page, limit=limit)
    return SuggestionListResponse(
        suggestions=SuggestionService.to_read(session, result.items),
        pagination=result.pagination,
    )


@router.get("/suggestions/{suggestion_id}", response_model=SuggestionRead)
def get_suggestion(suggestion_id: int, _: CanView, session: SessionDep) -> SuggestionRead:
    suggestion = SuggestionService.get_or_404(session, suggestion_id)
    return SuggestionService.to_read(session, [suggestion])[0]


@router.put("/suggestions/{suggestion_id}", response_model=SuggestionUpdateResponse)
def update_suggestion(
    suggestion_id: int,
    changes: SuggestionUpdate,
    account: CanEdit,
    session: SessionDep,
) -> SuggestionUpdateResponse:
    """
    Apply reviewer changes to a suggestion.

    Returns:
        The updated suggestion plus advisory recommendations

    Raises:
        NotFound: If the suggestion does not exist
    """
    suggestion, notes = SuggestionService.update(session, suggestion_id, sanitize_model(changes))
    logger.info(f"Suggestion {suggestion_id} updated by account {account.id}")
    return SuggestionUpdateResponse(
        suggestion=SuggestionService.to_read(session, [suggestion])[0],
        recommendations=notes,
    )


@router.delete("/suggestions/{suggestion_id}", response_model=MessageResponse)
def delete_suggestion(suggestion_id: int, account: CanDelete, session: SessionDep) -> MessageResponse:
    SuggestionService.delete(session, suggestion_id)
    logger.info(f"Suggestion {suggestion_id} deleted by account {account.id}")
    return MessageResponse(message="Suggestion deleted successfully")


# Analytics and export


@router.get("/dashboard/stats")
def dashboard_stats(_: CanViewAnalytics, session: SessionDep) -> Dict[str, Any]:
    return StatsService.dashboard(session)


@router.post("/export")
def export(body: ExportRequest, account: CanExport, session: SessionDep) -> Response:
    """
    Export every suggestion matching the filters as CSV or Excel.

    Filters go through the same query builder as the list endpoint.
    """
    suggestions = SuggestionQuery(session).all(body.filters)
    content, media_type, filename = export_suggestions(
        SuggestionService.to_read(session, suggestions), body.format
    )
    logger.info(f"Account {account.id} exported {len(suggestions)} suggestions as {body.format}")
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# Accounts


@router.get("/admins", response_model=AccountListResponse)
def list_accounts(_: AdminManager, session: SessionDep) -> AccountListResponse:
    return AccountListResponse(
        admins=[AccountResponse.from_account(a) for a in AccountService.list_accounts(session)]
    )


@router.get("/admins/names", response_model=AccountNamesResponse)
def list_account_names(_: CanView, session: SessionDep) -> AccountNamesResponse:
    """Active accounts that suggestions can be assigned to."""
    return AccountNamesResponse(admins=AccountService.list_assignable_names(session))


@router.post("/admins", response_model=AccountMutationResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    account_in: AccountCreate,
    actor: AdminManager,
    session: SessionDep,
) -> AccountMutationResponse:
    """
    Create a staff account.

    Raises:
        Conflict: If the email is already registered
    """
    account = AccountService.create(session, sanitize_model(account_in))
    logger.info(f"Account {account.id} created by {actor.id}")
    return AccountMutationResponse(
        message="Admin created successfully",
        admin=AccountResponse.from_account(account),
    )


@router.put("/admins/{account_id}", response_model=AccountMutationResponse)
def update_account(
    account_id: int,
    account_in: AccountUpdate,
    actor: AdminManager,
    session: SessionDep,
) -> AccountMutationResponse:
    account = AccountService.update(session, actor, account_id, sanitize_model(account_in))
    return AccountMutationResponse(
        message="Admin updated successfully",
        admin=AccountResponse.from_account(account),
    )


@router.patch("/admins/{account_id}/status", response_model=AccountMutationResponse)
def set_account_status(
    account_id: int,
    body: AccountStatusUpdate,
    actor: AdminManager,
    session: SessionDep,
) -> AccountMutationResponse:
    account = AccountService.set_active(session, actor, account_id, body.is_active)
    return AccountMutationResponse(
        message=f"Admin {'activated' if account.is_active else 'deactivated'} successfully",
        admin=AccountResponse.from_account(account),
    )

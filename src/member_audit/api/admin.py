"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from member_audit.api.serializers import (
    serialize_activity_summary,
    serialize_history_page,
    serialize_photo_history,
    serialize_photo_stats,
)
from member_audit.domain.audit import ViewerPrivilege

if TYPE_CHECKING:
    from member_audit.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/users/{actor_id}/history", dependencies=[Depends(require_admin)])
async def user_activity(
    actor_id: UUID,
    request: Request,
    page: int = 1,
    page_size: int = 10,
    entity_type: str | None = None,
) -> dict[str, object]:
    """Return a member's full change history for administrators."""
    container: AppContainer = request.app.state.container
    history = container.history_service.query_history(
        actor_id,
        page=page,
        page_size=page_size,
        entity_type=entity_type,
        viewer_privilege=ViewerPrivilege.ADMIN,
    )
    return serialize_history_page(history)


@router.get("/users/{actor_id}/photos", dependencies=[Depends(require_admin)])
async def user_photos(
    actor_id: UUID, request: Request, photo_kind: str | None = None
) -> dict[str, object]:
    """Return a member's photo history for administrators."""
    container: AppContainer = request.app.state.container
    items = container.photo_history_service.list_photo_history(
        actor_id, photo_kind=photo_kind, viewer_privilege=ViewerPrivilege.ADMIN
    )
    return {"photos": serialize_photo_history(items)}


@router.get("/users/{actor_id}/photos/stats", dependencies=[Depends(require_admin)])
async def user_photo_stats(actor_id: UUID, request: Request) -> dict[str, object]:
    """Return photo statistics for a member."""
    container: AppContainer = request.app.state.container
    stats = container.photo_history_service.photo_stats(actor_id)
    return serialize_photo_stats(stats)


@router.get("/activity", dependencies=[Depends(require_admin)])
async def activity_overview(request: Request, days: int = 30) -> dict[str, object]:
    """Return per-member change activity over the last days."""
    container: AppContainer = request.app.state.container
    summary = container.history_service.activity_summary(days)
    return serialize_activity_summary(summary)

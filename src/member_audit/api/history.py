"""Self-service history endpoints, called by the member-facing backend."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from member_audit.api.serializers import (
    serialize_history_page,
    serialize_photo_history,
    serialize_photo_stats,
)
from member_audit.domain.audit import ViewerPrivilege

if TYPE_CHECKING:
    from member_audit.containers import AppContainer

router = APIRouter(prefix="/history", tags=["history"])


def _get_service_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.service_token


async def require_service(
    x_service_token: str | None = Header(default=None),
    service_token: str = Depends(_get_service_token),
) -> None:
    """Ensure requests come from the trusted member-facing backend."""
    if not x_service_token or x_service_token != service_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/{actor_id}", dependencies=[Depends(require_service)])
async def my_history(
    actor_id: UUID,
    request: Request,
    page: int = 1,
    page_size: int = 10,
    entity_type: str | None = None,
) -> dict[str, object]:
    """Return the owner's view of their change history."""
    container: AppContainer = request.app.state.container
    history = container.history_service.query_history(
        actor_id,
        page=page,
        page_size=page_size,
        entity_type=entity_type,
        viewer_privilege=ViewerPrivilege.OWNER,
    )
    return serialize_history_page(history)


@router.get("/{actor_id}/photos", dependencies=[Depends(require_service)])
async def my_photos(
    actor_id: UUID, request: Request, photo_kind: str | None = None
) -> dict[str, object]:
    """Return the owner's photo history."""
    container: AppContainer = request.app.state.container
    items = container.photo_history_service.list_photo_history(
        actor_id, photo_kind=photo_kind, viewer_privilege=ViewerPrivilege.OWNER
    )
    return {"photos": serialize_photo_history(items)}


@router.get("/{actor_id}/photos/stats", dependencies=[Depends(require_service)])
async def my_photo_stats(actor_id: UUID, request: Request) -> dict[str, object]:
    """Return the owner's photo statistics."""
    container: AppContainer = request.app.state.container
    stats = container.photo_history_service.photo_stats(actor_id)
    return serialize_photo_stats(stats)

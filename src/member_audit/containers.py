"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from member_audit.adapters.storage_asset_client import HttpxStorageAssetClient
from member_audit.adapters.supabase_audit_repository import SupabaseAuditRepository
from member_audit.adapters.supabase_photo_history_repository import (
    SupabasePhotoHistoryRepository,
)
from member_audit.config import Settings, build_field_policy
from member_audit.services.audit import AuditService
from member_audit.services.history import HistoryService
from member_audit.services.photos import PhotoHistoryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    audit_service: AuditService
    photo_history_service: PhotoHistoryService
    history_service: HistoryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    policy = build_field_policy(resolved_settings)
    audit_repository = SupabaseAuditRepository(supabase_client)
    photo_history_repository = SupabasePhotoHistoryRepository(supabase_client)
    asset_client = HttpxStorageAssetClient.create(
        supabase_url=resolved_settings.supabase_url,
        bucket=resolved_settings.storage_bucket,
        service_key=resolved_settings.supabase_service_key,
    )
    audit_service = AuditService(repository=audit_repository, policy=policy)
    photo_history_service = PhotoHistoryService(
        repository=photo_history_repository,
        asset_client=asset_client,
        recent_days=resolved_settings.photo_recent_days,
    )
    history_service = HistoryService(
        repository=audit_repository,
        policy=policy,
        resolve_asset=asset_client.public_url,
        max_page_size=resolved_settings.history_max_page_size,
    )

    async def close_resources() -> None:
        await asset_client.close()

    return AppContainer(
        settings=resolved_settings,
        audit_service=audit_service,
        photo_history_service=photo_history_service,
        history_service=history_service,
        close_resources=close_resources,
    )

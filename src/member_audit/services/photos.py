"""Photo version tracking keyed by content hash."""

import hashlib
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from member_audit.adapters.storage_asset_client import AssetClient
from member_audit.domain.audit import RequestContext, ViewerPrivilege, coerce_enum
from member_audit.domain.photos import (
    NewPhotoHistoryEntry,
    PhotoChangeResult,
    PhotoHistoryEntry,
    PhotoHistoryItem,
    PhotoKind,
    PhotoStats,
)

_logger = logging.getLogger(__name__)


class PhotoHistoryRepository(Protocol):
    """Append-only persistence interface for photo history."""

    def create_entry(self, entry: NewPhotoHistoryEntry) -> PhotoHistoryEntry:
        """Store a photo history entry and return it."""

    def latest_entry(
        self, actor_id: UUID, photo_kind: PhotoKind
    ) -> PhotoHistoryEntry | None:
        """Return the most recent entry for a member and photo kind."""

    def list_entries(
        self, actor_id: UUID, photo_kind: PhotoKind | None
    ) -> list[PhotoHistoryEntry]:
        """Return entries for a member, newest first."""


def content_hash(data: bytes) -> str:
    """Return the SHA-256 hex digest of a binary."""
    return hashlib.sha256(data).hexdigest()


@dataclass
class PhotoHistoryService:
    """Records photo replacements, skipping byte-identical re-uploads."""

    repository: PhotoHistoryRepository
    asset_client: AssetClient
    recent_days: int = 30

    async def record_photo_change(  # noqa: PLR0913
        self,
        actor_id: UUID,
        photo_kind: PhotoKind | str,
        old_asset_ref: str | None,
        new_bytes: bytes,
        file_name: str,
        mime_type: str,
        reason: str | None = None,
        *,
        new_asset_ref: str,
        context: RequestContext | None = None,
    ) -> PhotoChangeResult:
        """Record a photo replacement unless the content is unchanged."""
        kind = coerce_enum(PhotoKind, photo_kind)
        if not new_asset_ref:
            raise ValueError("new_asset_ref is required")
        digest = content_hash(new_bytes)

        previous_hash = await self._previous_hash(actor_id, kind, old_asset_ref)
        if previous_hash == digest:
            _logger.info(
                "Skipping photo history for identical %s upload: actor=%s",
                kind.value,
                actor_id,
            )
            return PhotoChangeResult(written=False)

        context = context or RequestContext()
        draft = NewPhotoHistoryEntry(
            actor_id=actor_id,
            photo_kind=kind,
            old_asset_ref=old_asset_ref,
            new_asset_ref=new_asset_ref,
            content_hash=digest,
            byte_size=len(new_bytes),
            file_name=file_name,
            mime_type=mime_type,
            change_reason=reason,
            network_origin=context.network_origin,
            client_agent=context.client_agent,
        )
        try:
            entry = self.repository.create_entry(draft)
        except Exception as exc:
            _logger.warning(
                "Failed to write photo history: kind=%s actor=%s",
                kind.value,
                actor_id,
                exc_info=True,
            )
            return PhotoChangeResult(written=False, error=exc)
        return PhotoChangeResult(written=True, entry=entry)

    def list_photo_history(
        self,
        actor_id: UUID,
        photo_kind: PhotoKind | str | None = None,
        viewer_privilege: ViewerPrivilege | str = ViewerPrivilege.OWNER,
    ) -> list[PhotoHistoryItem]:
        """Return a member's photo history with displayable URLs."""
        kind = coerce_enum(PhotoKind, photo_kind) if photo_kind else None
        privilege = coerce_enum(ViewerPrivilege, viewer_privilege)
        try:
            entries = self.repository.list_entries(actor_id, kind)
        except Exception:
            _logger.exception("Failed to load photo history: actor=%s", actor_id)
            return []
        return [self._to_item(entry, privilege) for entry in entries]

    def photo_stats(self, actor_id: UUID, now: datetime | None = None) -> PhotoStats:
        """Summarize a member's photo history."""
        try:
            entries = self.repository.list_entries(actor_id, None)
        except Exception:
            _logger.exception("Failed to load photo stats: actor=%s", actor_id)
            return PhotoStats()
        if not entries:
            return PhotoStats()

        current = now or datetime.now(tz=UTC)
        cutoff = current - timedelta(days=self.recent_days)
        by_kind = Counter(entry.photo_kind.value for entry in entries)
        file_types = Counter(_file_type(entry.mime_type) for entry in entries)
        latest = max(entries, key=lambda entry: entry.created_at)
        return PhotoStats(
            total_changes=len(entries),
            changes_by_kind={kind.value: by_kind[kind.value] for kind in PhotoKind},
            last_change_at=latest.created_at,
            last_change_kind=latest.photo_kind,
            has_recent_changes=any(entry.created_at > cutoff for entry in entries),
            average_byte_size=sum(entry.byte_size for entry in entries) / len(entries),
            most_common_file_type=file_types.most_common(1)[0][0],
        )

    async def _previous_hash(
        self, actor_id: UUID, kind: PhotoKind, old_asset_ref: str | None
    ) -> str | None:
        try:
            latest = self.repository.latest_entry(actor_id, kind)
        except Exception:
            _logger.warning(
                "Could not load latest %s entry: actor=%s",
                kind.value,
                actor_id,
                exc_info=True,
            )
            latest = None
        if latest is not None:
            return latest.content_hash
        if old_asset_ref is None:
            return None
        try:
            old_bytes = await self.asset_client.download_asset(old_asset_ref)
        except Exception:
            _logger.warning(
                "Could not fetch previous %s for hashing: %s",
                kind.value,
                old_asset_ref,
                exc_info=True,
            )
            return None
        return content_hash(old_bytes)

    def _to_item(
        self, entry: PhotoHistoryEntry, privilege: ViewerPrivilege
    ) -> PhotoHistoryItem:
        is_admin = privilege is ViewerPrivilege.ADMIN
        return PhotoHistoryItem(
            id=entry.id,
            photo_kind=entry.photo_kind,
            old_photo_url=self.asset_client.public_url(entry.old_asset_ref)
            if entry.old_asset_ref
            else None,
            new_photo_url=self.asset_client.public_url(entry.new_asset_ref),
            content_hash=entry.content_hash,
            byte_size=entry.byte_size,
            file_name=entry.file_name,
            mime_type=entry.mime_type,
            change_reason=entry.change_reason,
            created_at=entry.created_at,
            network_origin=entry.network_origin if is_admin else None,
            client_agent=entry.client_agent if is_admin else None,
        )


def _file_type(mime_type: str | None) -> str:
    if not mime_type or "/" not in mime_type:
        return "UNKNOWN"
    subtype = mime_type.split("/", 1)[1].strip()
    return subtype.upper() or "UNKNOWN"

"""Supabase-backed photo history repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from member_audit.domain.photos import (
    NewPhotoHistoryEntry,
    PhotoHistoryEntry,
    PhotoKind,
)
from member_audit.services.photos import PhotoHistoryRepository

_TABLE = "photo_history"


@dataclass
class SupabasePhotoHistoryRepository(PhotoHistoryRepository):
    """Supabase implementation for photo history persistence."""

    client: Client

    def create_entry(self, entry: NewPhotoHistoryEntry) -> PhotoHistoryEntry:
        """Insert a photo history row and return it as stored."""
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "actor_id": str(entry.actor_id),
                    "photo_kind": entry.photo_kind.value,
                    "old_asset_ref": entry.old_asset_ref,
                    "new_asset_ref": entry.new_asset_ref,
                    "content_hash": entry.content_hash,
                    "byte_size": entry.byte_size,
                    "file_name": entry.file_name,
                    "mime_type": entry.mime_type,
                    "change_reason": entry.change_reason,
                    "network_origin": entry.network_origin,
                    "client_agent": entry.client_agent,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create photo history entry")
        return _parse_entry(response.data[0])

    def latest_entry(
        self, actor_id: UUID, photo_kind: PhotoKind
    ) -> PhotoHistoryEntry | None:
        """Return the newest entry for a member and photo kind."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("actor_id", str(actor_id))
            .eq("photo_kind", photo_kind.value)
            .order("created_at", desc=True)
            .order("seq", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def list_entries(
        self, actor_id: UUID, photo_kind: PhotoKind | None
    ) -> list[PhotoHistoryEntry]:
        """Return a member's photo history, newest first."""
        query = self.client.table(_TABLE).select("*").eq("actor_id", str(actor_id))
        if photo_kind is not None:
            query = query.eq("photo_kind", photo_kind.value)
        response = (
            query.order("created_at", desc=True).order("seq", desc=True).execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _parse_entry(row: dict[str, object]) -> PhotoHistoryEntry:
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    return PhotoHistoryEntry(
        id=UUID(str(row["id"])),
        actor_id=UUID(str(row["actor_id"])),
        photo_kind=PhotoKind(row["photo_kind"]),
        old_asset_ref=row.get("old_asset_ref"),
        new_asset_ref=str(row.get("new_asset_ref", "")),
        content_hash=str(row.get("content_hash", "")),
        byte_size=int(row.get("byte_size") or 0),
        file_name=str(row.get("file_name", "")),
        mime_type=str(row.get("mime_type", "")),
        change_reason=row.get("change_reason"),
        network_origin=row.get("network_origin"),
        client_agent=row.get("client_agent"),
        created_at=created_at,
    )

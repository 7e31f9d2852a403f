"""Domain models for photo version history."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class PhotoKind(str, Enum):
    """Binary assets whose replacements are tracked."""

    PROFILE_PHOTO = "profile-photo"
    IDENTITY_PHOTO = "identity-photo"


@dataclass(frozen=True)
class NewPhotoHistoryEntry:
    """Photo history payload before the store assigns id and timestamp."""

    actor_id: UUID
    photo_kind: PhotoKind
    old_asset_ref: str | None
    new_asset_ref: str
    content_hash: str
    byte_size: int
    file_name: str
    mime_type: str
    change_reason: str | None = None
    network_origin: str | None = None
    client_agent: str | None = None


@dataclass(frozen=True)
class PhotoHistoryEntry:
    """Immutable record of one binary-asset replacement."""

    id: UUID
    actor_id: UUID
    photo_kind: PhotoKind
    old_asset_ref: str | None
    new_asset_ref: str
    content_hash: str
    byte_size: int
    file_name: str
    mime_type: str
    change_reason: str | None
    network_origin: str | None
    client_agent: str | None
    created_at: datetime


@dataclass(frozen=True)
class PhotoChangeResult:
    """Outcome of a photo change recording."""

    written: bool
    entry: PhotoHistoryEntry | None = None
    error: Exception | None = None


@dataclass(frozen=True)
class PhotoHistoryItem:
    """Photo history entry prepared for a viewer."""

    id: UUID
    photo_kind: PhotoKind
    old_photo_url: str | None
    new_photo_url: str
    content_hash: str
    byte_size: int
    file_name: str
    mime_type: str
    change_reason: str | None
    created_at: datetime
    network_origin: str | None = None
    client_agent: str | None = None


@dataclass(frozen=True)
class PhotoStats:
    """Aggregate figures over a member's photo history."""

    total_changes: int = 0
    changes_by_kind: dict[str, int] = field(default_factory=dict)
    last_change_at: datetime | None = None
    last_change_kind: PhotoKind | None = None
    has_recent_changes: bool = False
    average_byte_size: float = 0.0
    most_common_file_type: str = "UNKNOWN"

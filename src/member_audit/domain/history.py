"""Domain models for history queries."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from member_audit.domain.audit import AuditAction, EntityType

SYSTEM_CHANGE_SUMMARY = "system change"

_BUSY_THRESHOLD = 10
_STEADY_THRESHOLD = 3


@dataclass(frozen=True)
class DisplayChange:
    """A redacted field-level change ready for display."""

    field: str
    label: str
    old_value: object
    new_value: object


@dataclass(frozen=True)
class HistoryItem:
    """One audit entry as seen by a particular viewer."""

    id: UUID
    entity_type: EntityType
    entity_id: UUID
    action: AuditAction
    summary: str
    system_only: bool
    changes: list[DisplayChange]
    created_at: datetime
    network_origin: str | None = None
    client_agent: str | None = None


@dataclass(frozen=True)
class HistoryPage:
    """A page of history items with the filtered total."""

    entries: list[HistoryItem]
    total_count: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        """Number of pages needed for the filtered set."""
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0


class ActivityTrend(str, Enum):
    """Rough activity level of a member over the window."""

    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


@dataclass(frozen=True)
class MemberActivity:
    """Aggregated audit activity of one member over a time window."""

    actor_id: UUID
    total_changes: int = 0
    changes_by_entity: dict[str, int] = field(default_factory=dict)
    last_activity: datetime | None = None
    most_changed_field: str | None = None

    @property
    def profile_changes(self) -> int:
        return self.changes_by_entity.get(EntityType.PROFILE.value, 0)

    @property
    def coach_changes(self) -> int:
        return self.changes_by_entity.get(EntityType.COACH_PROFILE.value, 0)

    @property
    def trend(self) -> ActivityTrend:
        if self.total_changes > _BUSY_THRESHOLD:
            return ActivityTrend.INCREASING
        if self.total_changes > _STEADY_THRESHOLD:
            return ActivityTrend.STABLE
        return ActivityTrend.DECREASING


@dataclass(frozen=True)
class ActivitySummary:
    """Per-member activity plus totals for the admin dashboard."""

    members: list[MemberActivity]
    window_days: int
    since: datetime

    @property
    def total_members(self) -> int:
        return len(self.members)

    @property
    def active_members(self) -> int:
        return sum(1 for member in self.members if member.total_changes)

    @property
    def total_changes(self) -> int:
        return sum(member.total_changes for member in self.members)

    @property
    def average_changes_per_member(self) -> int:
        """Changes per active member, rounded half up."""
        if not self.active_members:
            return 0
        return math.floor(self.total_changes / self.active_members + 0.5)

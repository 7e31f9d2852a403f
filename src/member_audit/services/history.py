"""Read side of the audit log: paginated, filtered, redacted history."""

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID

from member_audit.domain.audit import (
    AuditAction,
    AuditEntry,
    EntityType,
    ViewerPrivilege,
    coerce_enum,
)
from member_audit.domain.history import (
    SYSTEM_CHANGE_SUMMARY,
    ActivitySummary,
    DisplayChange,
    HistoryItem,
    HistoryPage,
    MemberActivity,
)
from member_audit.domain.policy import FieldPolicy, entity_label
from member_audit.domain.values import Marker
from member_audit.services.audit import AuditRepository
from member_audit.services.redaction import AssetResolver, redact

_logger = logging.getLogger(__name__)


@dataclass
class HistoryService:
    """Serves a member's change history to owners and administrators."""

    repository: AuditRepository
    policy: FieldPolicy = field(default_factory=FieldPolicy)
    resolve_asset: AssetResolver | None = None
    max_page_size: int = 100
    max_activity_days: int = 365

    def query_history(
        self,
        actor_id: UUID,
        page: int = 1,
        page_size: int = 10,
        entity_type: EntityType | str | None = None,
        viewer_privilege: ViewerPrivilege | str = ViewerPrivilege.OWNER,
    ) -> HistoryPage:
        """Return one page of history, newest first, redacted for the viewer."""
        privilege = coerce_enum(ViewerPrivilege, viewer_privilege)
        entity_filter = coerce_enum(EntityType, entity_type) if entity_type else None
        if page < 1:
            raise ValueError("page must be 1 or greater")
        if not 1 <= page_size <= self.max_page_size:
            raise ValueError(f"page_size must be between 1 and {self.max_page_size}")

        offset = (page - 1) * page_size
        try:
            entries, total = self.repository.list_entries(
                actor_id, entity_filter, offset, page_size
            )
        except Exception:
            _logger.exception(
                "Failed to load history: actor=%s page=%s entity=%s",
                actor_id,
                page,
                entity_filter.value if entity_filter else None,
            )
            return HistoryPage(
                entries=[], total_count=0, page=page, page_size=page_size
            )

        return HistoryPage(
            entries=[self.present(entry, privilege) for entry in entries],
            total_count=total,
            page=page,
            page_size=page_size,
        )

    def activity_summary(
        self,
        days: int = 30,
        now: datetime | None = None,
        member_ids: Iterable[UUID] = (),
    ) -> ActivitySummary:
        """Aggregate audit activity per member over the last days.

        Members listed in member_ids are reported even without activity.
        Members are ordered by total changes, busiest first.
        """
        if not 1 <= days <= self.max_activity_days:
            raise ValueError(f"days must be between 1 and {self.max_activity_days}")
        since = (now or datetime.now(UTC)) - timedelta(days=days)
        try:
            entries = self.repository.list_entries_since(since)
        except Exception:
            _logger.exception("Failed to load activity since %s", since.isoformat())
            entries = []

        grouped: dict[UUID, list[AuditEntry]] = {
            member_id: [] for member_id in member_ids
        }
        for entry in entries:
            grouped.setdefault(entry.actor_id, []).append(entry)
        members = sorted(
            (_member_activity(actor_id, items) for actor_id, items in grouped.items()),
            key=lambda member: member.total_changes,
            reverse=True,
        )
        return ActivitySummary(members=members, window_days=days, since=since)

    def present(self, entry: AuditEntry, privilege: ViewerPrivilege) -> HistoryItem:
        """Build the viewer-specific view of a single audit entry."""
        visible = self.policy.visible_fields(entry.changed_fields, privilege)
        changes = [self._display_change(entry, name, privilege) for name in visible]
        is_admin = privilege is ViewerPrivilege.ADMIN
        return HistoryItem(
            id=entry.id,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            action=entry.action,
            summary=self.summarize(entry.action, entry.entity_type, visible),
            system_only=not visible,
            changes=changes,
            created_at=entry.created_at,
            network_origin=entry.network_origin if is_admin else None,
            client_agent=entry.client_agent if is_admin else None,
        )

    def summarize(
        self, action: AuditAction, entity_type: EntityType, visible: list[str]
    ) -> str:
        """Describe a change in one line from its visible fields."""
        if not visible:
            return SYSTEM_CHANGE_SUMMARY
        label = entity_label(entity_type)
        if action is AuditAction.CREATE:
            return f"created {label}"
        if action is AuditAction.DELETE:
            return f"deleted {label}"
        if len(visible) > self.policy.summary_field_limit:
            return f"changed {len(visible)} {label} fields"
        names = ", ".join(self.policy.label_for(name).lower() for name in visible)
        return f"changed {names}"

    def _display_change(
        self, entry: AuditEntry, field_name: str, privilege: ViewerPrivilege
    ) -> DisplayChange:
        old_value = (entry.old_snapshot or {}).get(field_name, Marker.ABSENT)
        new_value = (entry.new_snapshot or {}).get(field_name, Marker.ABSENT)
        return DisplayChange(
            field=field_name,
            label=self.policy.label_for(field_name),
            old_value=redact(
                field_name, old_value, privilege, self.policy, self.resolve_asset
            ),
            new_value=redact(
                field_name, new_value, privilege, self.policy, self.resolve_asset
            ),
        )


def _member_activity(actor_id: UUID, entries: list[AuditEntry]) -> MemberActivity:
    by_entity = dict.fromkeys((entity.value for entity in EntityType), 0)
    field_counts: Counter[str] = Counter()
    for entry in entries:
        by_entity[entry.entity_type.value] += 1
        field_counts.update(entry.changed_fields)
    most_common = field_counts.most_common(1)
    return MemberActivity(
        actor_id=actor_id,
        total_changes=len(entries),
        changes_by_entity=by_entity,
        last_activity=max((entry.created_at for entry in entries), default=None),
        most_changed_field=most_common[0][0] if most_common else None,
    )

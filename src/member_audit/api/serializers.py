"""JSON shapes returned by the history API."""

from member_audit.domain.history import ActivitySummary, HistoryItem, HistoryPage
from member_audit.domain.photos import PhotoHistoryItem, PhotoStats


def serialize_history_page(page: HistoryPage) -> dict[str, object]:
    """Serialize a history page."""
    return {
        "entries": [_serialize_history_item(item) for item in page.entries],
        "total_count": page.total_count,
        "page": page.page,
        "page_size": page.page_size,
        "total_pages": page.total_pages,
    }


def serialize_photo_history(items: list[PhotoHistoryItem]) -> list[dict[str, object]]:
    """Serialize photo history items."""
    return [
        {
            "id": str(item.id),
            "photo_kind": item.photo_kind.value,
            "old_photo_url": item.old_photo_url,
            "new_photo_url": item.new_photo_url,
            "content_hash": item.content_hash,
            "byte_size": item.byte_size,
            "file_name": item.file_name,
            "mime_type": item.mime_type,
            "change_reason": item.change_reason,
            "created_at": item.created_at.isoformat(),
            "network_origin": item.network_origin,
            "client_agent": item.client_agent,
        }
        for item in items
    ]


def serialize_photo_stats(stats: PhotoStats) -> dict[str, object]:
    """Serialize photo statistics."""
    return {
        "total_changes": stats.total_changes,
        "changes_by_kind": stats.changes_by_kind,
        "last_change_at": stats.last_change_at.isoformat()
        if stats.last_change_at
        else None,
        "last_change_kind": stats.last_change_kind.value
        if stats.last_change_kind
        else None,
        "has_recent_changes": stats.has_recent_changes,
        "average_byte_size": stats.average_byte_size,
        "most_common_file_type": stats.most_common_file_type,
    }


def serialize_activity_summary(summary: ActivitySummary) -> dict[str, object]:
    """Serialize the admin activity dashboard."""
    return {
        "window_days": summary.window_days,
        "since": summary.since.isoformat(),
        "total_members": summary.total_members,
        "active_members": summary.active_members,
        "total_changes": summary.total_changes,
        "average_changes_per_member": summary.average_changes_per_member,
        "members": [
            {
                "actor_id": str(member.actor_id),
                "total_changes": member.total_changes,
                "profile_changes": member.profile_changes,
                "coach_changes": member.coach_changes,
                "changes_by_entity": member.changes_by_entity,
                "last_activity": member.last_activity.isoformat()
                if member.last_activity
                else None,
                "most_changed_field": member.most_changed_field,
                "trend": member.trend.value,
            }
            for member in summary.members
        ],
    }


def _serialize_history_item(item: HistoryItem) -> dict[str, object]:
    return {
        "id": str(item.id),
        "entity_type": item.entity_type.value,
        "entity_id": str(item.entity_id),
        "action": item.action.value,
        "summary": item.summary,
        "system_only": item.system_only,
        "changes": [
            {
                "field": change.field,
                "label": change.label,
                "old_value": change.old_value,
                "new_value": change.new_value,
            }
            for change in item.changes
        ],
        "created_at": item.created_at.isoformat(),
        "network_origin": item.network_origin,
        "client_agent": item.client_agent,
    }

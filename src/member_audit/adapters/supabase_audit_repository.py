"""Supabase repository for audit entries."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from member_audit.domain.audit import AuditAction, AuditEntry, EntityType, NewAuditEntry
from member_audit.services.audit import AuditRepository

_TABLE = "audit_entries"
_BATCH_SIZE = 1000


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Supabase-backed audit repository. Rows are only ever inserted."""

    client: Client

    def create_entry(self, entry: NewAuditEntry) -> AuditEntry:
        """Insert an audit row and return it as stored."""
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "actor_id": str(entry.actor_id),
                    "entity_type": entry.entity_type.value,
                    "entity_id": str(entry.entity_id),
                    "action": entry.action.value,
                    "old_snapshot": entry.old_snapshot,
                    "new_snapshot": entry.new_snapshot,
                    "changed_fields": list(entry.changed_fields),
                    "network_origin": entry.network_origin,
                    "client_agent": entry.client_agent,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create audit entry")
        return _parse_entry(response.data[0])

    def list_entries(
        self,
        actor_id: UUID,
        entity_type: EntityType | None,
        offset: int,
        limit: int,
    ) -> tuple[list[AuditEntry], int]:
        """Return a newest-first page of entries and the filtered count."""
        query = (
            self.client.table(_TABLE)
            .select("*", count="exact")
            .eq("actor_id", str(actor_id))
        )
        if entity_type is not None:
            query = query.eq("entity_type", entity_type.value)
        response = (
            query.order("created_at", desc=True)
            .order("seq", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        entries = [_parse_entry(row) for row in response.data or []]
        total = response.count if response.count is not None else len(entries)
        return entries, total

    def list_entries_since(self, since: datetime) -> list[AuditEntry]:
        """Return entries created at or after since, fetched in batches."""
        entries: list[AuditEntry] = []
        offset = 0
        while True:
            response = (
                self.client.table(_TABLE)
                .select("*")
                .gte("created_at", since.isoformat())
                .order("created_at", desc=True)
                .order("seq", desc=True)
                .range(offset, offset + _BATCH_SIZE - 1)
                .execute()
            )
            rows = response.data or []
            entries.extend(_parse_entry(row) for row in rows)
            if len(rows) < _BATCH_SIZE:
                return entries
            offset += _BATCH_SIZE


def _parse_entry(row: dict[str, object]) -> AuditEntry:
    return AuditEntry(
        id=UUID(str(row["id"])),
        actor_id=UUID(str(row["actor_id"])),
        entity_type=EntityType(row["entity_type"]),
        entity_id=UUID(str(row["entity_id"])),
        action=AuditAction(row["action"]),
        old_snapshot=row.get("old_snapshot"),
        new_snapshot=row.get("new_snapshot"),
        changed_fields=tuple(row.get("changed_fields") or ()),
        network_origin=row.get("network_origin"),
        client_agent=row.get("client_agent"),
        created_at=_parse_timestamp(row.get("created_at")),
    )


def _parse_timestamp(raw: object) -> datetime:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return datetime.min.replace(tzinfo=UTC)

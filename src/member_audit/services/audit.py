"""Audit logging service."""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol
from uuid import UUID

from member_audit.domain.audit import (
    AuditAction,
    AuditEntry,
    AuditWriteError,
    AuditWriteResult,
    EntityType,
    NewAuditEntry,
    RequestContext,
    coerce_enum,
)
from member_audit.domain.policy import FieldPolicy
from member_audit.domain.values import normalize_snapshot, storable_snapshot
from member_audit.services.differ import changed_field_names, diff

_logger = logging.getLogger(__name__)


class AuditRepository(Protocol):
    """Append-only persistence interface for audit entries."""

    def create_entry(self, entry: NewAuditEntry) -> AuditEntry:
        """Store an audit entry and return it with id and timestamp."""

    def list_entries(
        self,
        actor_id: UUID,
        entity_type: EntityType | None,
        offset: int,
        limit: int,
    ) -> tuple[list[AuditEntry], int]:
        """Return a newest-first slice of entries and the filtered total."""

    def list_entries_since(self, since: datetime) -> list[AuditEntry]:
        """Return every entry created at or after since, newest first."""


@dataclass
class AuditService:
    """Best-effort recorder of field-level changes."""

    repository: AuditRepository
    policy: FieldPolicy = field(default_factory=FieldPolicy)

    def record_change(  # noqa: PLR0913
        self,
        action: AuditAction | str,
        entity_type: EntityType | str,
        entity_id: UUID,
        actor_id: UUID,
        old: Mapping[str, object] | None,
        new: Mapping[str, object] | None,
        context: RequestContext | None = None,
    ) -> AuditWriteResult:
        """Record one mutation; storage failures are logged, never raised."""
        resolved_action = coerce_enum(AuditAction, action)
        resolved_entity = coerce_enum(EntityType, entity_type)
        old, new = _snapshots_for(resolved_action, old, new)
        old_fields = normalize_snapshot(old)
        new_fields = normalize_snapshot(new)

        changes = diff(old_fields, new_fields, self.policy.non_auditable)
        changed_fields = changed_field_names(changes)
        if resolved_action is AuditAction.UPDATE and not changed_fields:
            _logger.debug(
                "Skipping audit for unchanged %s %s", resolved_entity.value, entity_id
            )
            return AuditWriteResult(written=False)

        context = context or RequestContext()
        draft = NewAuditEntry(
            actor_id=actor_id,
            entity_type=resolved_entity,
            entity_id=entity_id,
            action=resolved_action,
            old_snapshot=storable_snapshot(old, self.policy.non_auditable),
            new_snapshot=storable_snapshot(new, self.policy.non_auditable),
            changed_fields=changed_fields,
            network_origin=context.network_origin,
            client_agent=context.client_agent,
        )
        try:
            entry = self.repository.create_entry(draft)
        except Exception as exc:
            _logger.warning(
                "Failed to write audit entry: action=%s entity=%s/%s actor=%s",
                resolved_action.value,
                resolved_entity.value,
                entity_id,
                actor_id,
                exc_info=True,
            )
            return AuditWriteResult(
                written=False,
                error=AuditWriteError(str(exc) or type(exc).__name__, cause=exc),
                changed_fields=changed_fields,
            )
        return AuditWriteResult(
            written=True, entry=entry, changed_fields=changed_fields
        )

    async def record_change_async(  # noqa: PLR0913
        self,
        action: AuditAction | str,
        entity_type: EntityType | str,
        entity_id: UUID,
        actor_id: UUID,
        old: Mapping[str, object] | None,
        new: Mapping[str, object] | None,
        context: RequestContext | None = None,
    ) -> AuditWriteResult:
        """Record a mutation on a worker thread, off the caller's event loop."""
        return await asyncio.to_thread(
            self.record_change,
            action,
            entity_type,
            entity_id,
            actor_id,
            old,
            new,
            context,
        )


def _snapshots_for(
    action: AuditAction,
    old: Mapping[str, object] | None,
    new: Mapping[str, object] | None,
) -> tuple[Mapping[str, object] | None, Mapping[str, object] | None]:
    if action is AuditAction.CREATE:
        if new is None:
            raise ValueError("CREATE requires a new snapshot")
        return None, new
    if action is AuditAction.DELETE:
        if old is None:
            raise ValueError("DELETE requires an old snapshot")
        return old, None
    if old is None or new is None:
        raise ValueError("UPDATE requires both old and new snapshots")
    return old, new

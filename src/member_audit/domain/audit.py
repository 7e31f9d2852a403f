"""Domain models for audit entries."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TypeVar
from uuid import UUID

from member_audit.domain.values import FieldMap, FieldValue, Marker

_E = TypeVar("_E", bound=Enum)


class AuditAction(str, Enum):
    """Kind of mutation an audit entry describes."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class EntityType(str, Enum):
    """Record families tracked by the history engine."""

    PROFILE = "profile"
    COACH_PROFILE = "coach-profile"
    ACCOUNT = "account"


class ViewerPrivilege(str, Enum):
    """How much of a history entry the caller may see."""

    OWNER = "owner"
    ADMIN = "admin"


def coerce_enum(enum_cls: type[_E], value: "_E | str") -> _E:
    """Convert a raw value into a member of enum_cls or raise ValueError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_cls)
        raise ValueError(
            f"Unknown {enum_cls.__name__} {value!r}; expected one of: {allowed}"
        ) from None


@dataclass(frozen=True)
class RequestContext:
    """Provenance of the request that triggered a mutation."""

    network_origin: str | None = None
    client_agent: str | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RequestContext":
        """Build a context from HTTP request headers."""
        lowered = {key.lower(): value for key, value in headers.items()}
        forwarded = lowered.get("x-forwarded-for", "")
        origin = forwarded.split(",")[0].strip() or lowered.get("x-real-ip") or None
        return cls(network_origin=origin, client_agent=lowered.get("user-agent"))


@dataclass(frozen=True)
class FieldChange:
    """A single field that differs between two snapshots."""

    field: str
    old_value: "FieldValue | Marker"
    new_value: "FieldValue | Marker"


@dataclass(frozen=True)
class NewAuditEntry:
    """Audit entry payload before the store assigns id and timestamp."""

    actor_id: UUID
    entity_type: EntityType
    entity_id: UUID
    action: AuditAction
    old_snapshot: FieldMap | None
    new_snapshot: FieldMap | None
    changed_fields: tuple[str, ...]
    network_origin: str | None = None
    client_agent: str | None = None


@dataclass(frozen=True)
class AuditEntry:
    """Immutable record of one mutation to a tracked entity."""

    id: UUID
    actor_id: UUID
    entity_type: EntityType
    entity_id: UUID
    action: AuditAction
    old_snapshot: FieldMap | None
    new_snapshot: FieldMap | None
    changed_fields: tuple[str, ...]
    network_origin: str | None
    client_agent: str | None
    created_at: datetime


class AuditWriteError(Exception):
    """Raised inside the recorder when an audit row could not be stored."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


@dataclass(frozen=True)
class AuditWriteResult:
    """Outcome of a best-effort audit write.

    Callers may ignore this value: a failed write never affects the primary
    mutation that triggered it.
    """

    written: bool
    entry: AuditEntry | None = None
    error: AuditWriteError | None = None
    changed_fields: tuple[str, ...] = ()

    @property
    def failed(self) -> bool:
        """Whether the write was attempted and failed."""
        return self.error is not None

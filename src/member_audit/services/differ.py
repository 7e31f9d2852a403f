"""Field-level snapshot differ."""

from collections.abc import Iterable, Mapping

from member_audit.domain.audit import FieldChange
from member_audit.domain.values import FieldValue, Marker, normalize_snapshot


def values_equal(left: "FieldValue | Marker", right: "FieldValue | Marker") -> bool:
    """Structural equality where None and absent are interchangeable."""
    if left is Marker.UNREPRESENTABLE or right is Marker.UNREPRESENTABLE:
        return False
    if _is_empty(left) or _is_empty(right):
        return _is_empty(left) and _is_empty(right)
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if isinstance(left, list) or isinstance(right, list):
        if not (isinstance(left, list) and isinstance(right, list)):
            return False
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right, strict=True))
    if isinstance(left, dict) or isinstance(right, dict):
        if not (isinstance(left, dict) and isinstance(right, dict)):
            return False
        keys = list(left) + [key for key in right if key not in left]
        return all(
            values_equal(left.get(key, Marker.ABSENT), right.get(key, Marker.ABSENT))
            for key in keys
        )
    if isinstance(left, str) or isinstance(right, str):
        return isinstance(left, str) and isinstance(right, str) and left == right
    return left == right


def diff(
    old: Mapping[str, object] | None,
    new: Mapping[str, object] | None,
    non_auditable: Iterable[str] = (),
) -> list[FieldChange]:
    """Return the ordered list of fields whose values differ.

    A creation (old is None) reports every field of the new snapshot and a
    deletion (new is None) every field of the old one. Field order follows
    first appearance across old then new. Fields in non_auditable are never
    reported. A value that cannot be represented is reported as changed on
    its own, without affecting the other fields.
    """
    excluded = frozenset(non_auditable)
    old_fields = normalize_snapshot(old)
    new_fields = normalize_snapshot(new)

    if old_fields is None and new_fields is None:
        return []
    if old_fields is None:
        return [
            FieldChange(name, Marker.ABSENT, value)
            for name, value in new_fields.items()
            if name not in excluded
        ]
    if new_fields is None:
        return [
            FieldChange(name, value, Marker.ABSENT)
            for name, value in old_fields.items()
            if name not in excluded
        ]

    changes: list[FieldChange] = []
    names = list(old_fields) + [name for name in new_fields if name not in old_fields]
    for name in names:
        if name in excluded:
            continue
        old_value = old_fields.get(name, Marker.ABSENT)
        new_value = new_fields.get(name, Marker.ABSENT)
        if not values_equal(old_value, new_value):
            changes.append(FieldChange(name, old_value, new_value))
    return changes


def changed_field_names(changes: Iterable[FieldChange]) -> tuple[str, ...]:
    """Return the field names of a diff in order."""
    return tuple(change.field for change in changes)


def _is_empty(value: "FieldValue | Marker") -> bool:
    return value is None or value is Marker.ABSENT

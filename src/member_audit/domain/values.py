"""Snapshot value types and normalization."""

import math
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from uuid import UUID

FieldValue = (
    str | int | float | bool | None | list["FieldValue"] | dict[str, "FieldValue"]
)
FieldMap = dict[str, FieldValue]

UNREPRESENTABLE_TEXT = "<unrepresentable>"
UNREPRESENTABLE_KEY = "__unrepresentable__"
_DESCRIPTION_LIMIT = 120


class Marker(Enum):
    """Placeholders that complete the field value union."""

    ABSENT = "absent"
    UNREPRESENTABLE = "unrepresentable"


def normalize_value(value: object) -> "FieldValue | Marker":
    """Coerce a raw value into a field value, or mark it unrepresentable."""
    if value is None or isinstance(value, bool | str | int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else Marker.UNREPRESENTABLE
    if isinstance(value, Marker):
        return value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, list | tuple):
        items = [normalize_value(item) for item in value]
        if any(isinstance(item, Marker) for item in items):
            return Marker.UNREPRESENTABLE
        return items
    if isinstance(value, Mapping):
        if is_unrepresentable_tag(value):
            return Marker.UNREPRESENTABLE
        if not all(isinstance(key, str) for key in value):
            return Marker.UNREPRESENTABLE
        mapped = {key: normalize_value(item) for key, item in value.items()}
        if any(isinstance(item, Marker) for item in mapped.values()):
            return Marker.UNREPRESENTABLE
        return mapped
    return Marker.UNREPRESENTABLE


def normalize_snapshot(
    snapshot: Mapping[str, object] | None,
) -> "dict[str, FieldValue | Marker] | None":
    """Normalize every field of a snapshot, keeping field order."""
    if snapshot is None:
        return None
    if not isinstance(snapshot, Mapping):
        raise ValueError(f"Snapshot must be a field map, got {type(snapshot)!r}")
    return {str(key): normalize_value(value) for key, value in snapshot.items()}


def is_unrepresentable_tag(value: object) -> bool:
    """Whether a stored value stands in for one that was not a field value."""
    return (
        isinstance(value, Mapping)
        and len(value) == 1
        and isinstance(value.get(UNREPRESENTABLE_KEY), str)
    )


def unrepresentable_tag(value: object) -> FieldMap:
    """Wrap a non-field value in a JSON object describing it."""
    if is_unrepresentable_tag(value):
        return {UNREPRESENTABLE_KEY: value[UNREPRESENTABLE_KEY]}
    return {UNREPRESENTABLE_KEY: repr(value)[:_DESCRIPTION_LIMIT]}


def storable_snapshot(
    snapshot: Mapping[str, object] | None,
    excluded: frozenset[str] = frozenset(),
) -> FieldMap | None:
    """Return a JSON-safe copy of a raw snapshot without excluded fields.

    Values that are not field values are stored as unrepresentable tags, which
    normalize back to the unrepresentable marker, so diffing two stored
    snapshots reports the same fields as diffing the originals.
    """
    if snapshot is None:
        return None
    stored: FieldMap = {}
    for key, value in snapshot.items():
        name = str(key)
        if name in excluded:
            continue
        normalized = normalize_value(value)
        if normalized is Marker.ABSENT:
            continue
        if normalized is Marker.UNREPRESENTABLE:
            stored[name] = unrepresentable_tag(value)
        else:
            stored[name] = normalized
    return stored

"""Privilege-dependent masking of field values."""

import re
from collections.abc import Callable

from member_audit.domain.audit import ViewerPrivilege
from member_audit.domain.policy import FieldPolicy
from member_audit.domain.values import (
    UNREPRESENTABLE_TEXT,
    FieldValue,
    Marker,
    is_unrepresentable_tag,
)

NO_DATA = "no data"
HIDDEN = "[hidden]"
MASK = "***"

_EMAIL_KEEP = 2
_LONG_NUMBER_MIN_LENGTH = 11
_DIGITS = re.compile(r"[0-9]+")

AssetResolver = Callable[[str], str]


def redact(
    field_name: str,
    value: "FieldValue | Marker",
    privilege: ViewerPrivilege,
    policy: FieldPolicy,
    resolve_asset: AssetResolver | None = None,
) -> object:
    """Return the value of a field as the viewer is allowed to see it."""
    if value is Marker.ABSENT or value is None:
        return None
    if value is Marker.UNREPRESENTABLE or is_unrepresentable_tag(value):
        return UNREPRESENTABLE_TEXT
    if privilege is not ViewerPrivilege.ADMIN and policy.is_restricted(field_name):
        return HIDDEN
    if isinstance(value, list | dict) and not value:
        return NO_DATA
    if policy.is_asset(field_name) and isinstance(value, str) and value:
        return resolve_asset(value) if resolve_asset else value
    if privilege is ViewerPrivilege.ADMIN:
        return value
    return _mask(value)


def mask_email(value: str) -> str:
    """Keep the first two characters of the local part and the domain."""
    local, _, domain = value.partition("@")
    if len(local) > _EMAIL_KEEP:
        return f"{local[:_EMAIL_KEEP]}{MASK}@{domain}"
    return f"{MASK}@{domain}"


def mask_long_number(value: str) -> str:
    """Keep the first and last three digits of a long number."""
    return f"{value[:3]}{MASK}{value[-3:]}"


def _mask(value: FieldValue) -> FieldValue:
    if isinstance(value, list):
        return [_mask(item) for item in value]
    if isinstance(value, dict):
        return {key: _mask(item) for key, item in value.items()}
    if not isinstance(value, str):
        return value
    if _is_email_shaped(value):
        return mask_email(value)
    if len(value) >= _LONG_NUMBER_MIN_LENGTH and _DIGITS.fullmatch(value):
        return mask_long_number(value)
    return value


def _is_email_shaped(value: str) -> bool:
    _, at, domain = value.partition("@")
    return bool(at) and "." in domain

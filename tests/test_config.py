"""Tests for configuration parsing."""

from member_audit.config import Settings, build_field_policy, parse_field_list
from member_audit.domain.policy import (
    DEFAULT_ASSET_FIELDS,
    DEFAULT_NON_AUDITABLE_FIELDS,
    DEFAULT_RESTRICTED_FIELDS,
)


def test_parse_field_list() -> None:
    assert parse_field_list(None) is None
    assert parse_field_list("   ") is None
    assert parse_field_list(" , ,") is None
    assert parse_field_list("email, role,,status ") == frozenset(
        {"email", "role", "status"}
    )


def test_field_policy_defaults(settings: Settings) -> None:
    policy = build_field_policy(settings)

    assert policy.non_auditable == DEFAULT_NON_AUDITABLE_FIELDS
    assert policy.restricted == DEFAULT_RESTRICTED_FIELDS
    assert policy.asset_fields == DEFAULT_ASSET_FIELDS
    assert policy.user_relevant is None


def test_field_policy_overrides(settings: Settings) -> None:
    overridden = settings.model_copy(
        update={
            "non_auditable_fields": "synced_at",
            "user_relevant_fields": "display_name,city",
            "asset_fields": "avatar",
        }
    )

    policy = build_field_policy(overridden)

    assert policy.non_auditable == frozenset({"synced_at"})
    assert policy.restricted == DEFAULT_RESTRICTED_FIELDS
    assert policy.user_relevant == frozenset({"display_name", "city"})
    assert policy.is_asset("avatar")
    assert policy.is_asset("profile_photo_url")

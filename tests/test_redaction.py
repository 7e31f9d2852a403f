"""Tests for field redaction."""

import pytest

from member_audit.domain.audit import ViewerPrivilege
from member_audit.domain.policy import DEFAULT_RESTRICTED_FIELDS, FieldPolicy
from member_audit.domain.values import UNREPRESENTABLE_KEY, UNREPRESENTABLE_TEXT, Marker
from member_audit.services.redaction import HIDDEN, NO_DATA, mask_email, redact

OWNER = ViewerPrivilege.OWNER
ADMIN = ViewerPrivilege.ADMIN


def _cdn(ref: str) -> str:
    return f"https://cdn.test/{ref}"


def test_owner_sees_masked_email() -> None:
    policy = FieldPolicy()

    value = redact("emergency_contact", "annie@example.com", OWNER, policy)

    assert value == "an***@example.com"


def test_short_email_local_part_is_fully_masked() -> None:
    value = redact("emergency_contact", "an@example.com", OWNER, FieldPolicy())

    assert value == "***@example.com"


def test_three_character_local_part_keeps_two() -> None:
    assert mask_email("ann@example.com") == "an***@example.com"


def test_at_sign_without_dotted_domain_is_not_an_email() -> None:
    assert redact("bio", "ping me @home", OWNER, FieldPolicy()) == "ping me @home"


def test_owner_sees_masked_long_number() -> None:
    value = redact("phone_number", "081234567890", OWNER, FieldPolicy())

    assert value == "081***890"


def test_ten_digit_number_is_not_masked() -> None:
    assert redact("phone_number", "0812345678", OWNER, FieldPolicy()) == "0812345678"


def test_admin_sees_raw_values() -> None:
    policy = FieldPolicy()

    assert redact("phone_number", "081234567890", ADMIN, policy) == "081234567890"
    assert redact("role", "coach", ADMIN, policy) == "coach"
    assert redact("email", "annie@example.com", ADMIN, policy) == "annie@example.com"


@pytest.mark.parametrize("field_name", sorted(DEFAULT_RESTRICTED_FIELDS))
@pytest.mark.parametrize("value", ["athlete", "annie@example.com", 42, True, ["a"]])
def test_restricted_fields_never_show_raw_value_to_owner(
    field_name: str, value: object
) -> None:
    assert redact(field_name, value, OWNER, FieldPolicy()) == HIDDEN


def test_empty_collections_render_no_data_marker() -> None:
    policy = FieldPolicy()

    assert redact("certifications", [], OWNER, policy) == NO_DATA
    assert redact("social_media", {}, ADMIN, policy) == NO_DATA


def test_missing_values_render_as_none() -> None:
    policy = FieldPolicy()

    assert redact("bio", Marker.ABSENT, OWNER, policy) is None
    assert redact("bio", None, ADMIN, policy) is None


def test_unrepresentable_marker_renders_as_text() -> None:
    assert (
        redact("bio", Marker.UNREPRESENTABLE, OWNER, FieldPolicy())
        == UNREPRESENTABLE_TEXT
    )


def test_stored_unrepresentable_tag_renders_as_text() -> None:
    tag = {UNREPRESENTABLE_KEY: "b'\\x01'"}

    assert redact("avatar_bytes", tag, ADMIN, FieldPolicy()) == UNREPRESENTABLE_TEXT
    assert (
        redact("bio", UNREPRESENTABLE_TEXT, ADMIN, FieldPolicy())
        == UNREPRESENTABLE_TEXT
    )


def test_asset_fields_resolve_to_displayable_reference() -> None:
    policy = FieldPolicy()

    assert (
        redact("profile_photo_url", "profile-photos/u1.jpg", ADMIN, policy, _cdn)
        == "https://cdn.test/profile-photos/u1.jpg"
    )
    assert (
        redact("banner_image", "banners/b.png", OWNER, policy, _cdn)
        == "https://cdn.test/banners/b.png"
    )


def test_owner_masking_applies_inside_collections() -> None:
    value = redact(
        "social_media",
        {"contact": "annie@example.com", "numbers": ["081234567890", "12"]},
        OWNER,
        FieldPolicy(),
    )

    assert value == {"contact": "an***@example.com", "numbers": ["081***890", "12"]}


def test_other_scalars_pass_through_for_owner() -> None:
    policy = FieldPolicy()

    assert redact("experience_years", 7, OWNER, policy) == 7
    assert redact("city", "Bandung", OWNER, policy) == "Bandung"

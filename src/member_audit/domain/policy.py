"""Field visibility policy shared by the differ, redactor and query service."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from member_audit.domain.audit import EntityType, ViewerPrivilege

DEFAULT_NON_AUDITABLE_FIELDS = frozenset(
    {
        "created_at",
        "updated_at",
        "deleted_at",
        "last_login_at",
        "login_count",
        "verification_token",
        "reset_token",
    }
)

DEFAULT_RESTRICTED_FIELDS = frozenset(
    {
        "email",
        "member_code",
        "id_card",
        "is_deleted",
        "age",
        "team_id",
        "division_id",
        "is_verified",
        "is_edit_allowed",
        "id",
        "user_id",
        "role",
        "email_verified_at",
        "phone_verified_at",
        "status",
    }
)

DEFAULT_ASSET_FIELDS = frozenset({"profile_photo_url", "id_photo_url"})

DEFAULT_FIELD_LABELS: dict[str, str] = {
    "display_name": "Display name",
    "full_name": "Full name",
    "first_name": "First name",
    "last_name": "Last name",
    "nickname": "Nickname",
    "date_of_birth": "Date of birth",
    "gender": "Gender",
    "phone_number": "Phone number",
    "address": "Address",
    "city": "City",
    "province": "Province",
    "postal_code": "Postal code",
    "emergency_contact": "Emergency contact",
    "emergency_phone": "Emergency phone",
    "blood_type": "Blood type",
    "allergies": "Allergies",
    "medical_conditions": "Medical conditions",
    "id_photo_url": "Identity photo",
    "profile_photo_url": "Profile photo",
    "certifications": "Certifications",
    "achievements": "Achievements",
    "experience_years": "Years of experience",
    "specialization": "Specialization",
    "bio": "Biography",
    "social_media": "Social media",
    "website": "Website",
}

ENTITY_LABELS: dict[EntityType, str] = {
    EntityType.PROFILE: "profile",
    EntityType.COACH_PROFILE: "coach profile",
    EntityType.ACCOUNT: "account",
}

_ASSET_NAME_HINTS = ("photo", "image")


@dataclass(frozen=True)
class FieldPolicy:
    """Which fields are audited, shown to owners, and how they are labelled."""

    non_auditable: frozenset[str] = DEFAULT_NON_AUDITABLE_FIELDS
    restricted: frozenset[str] = DEFAULT_RESTRICTED_FIELDS
    user_relevant: frozenset[str] | None = None
    asset_fields: frozenset[str] = DEFAULT_ASSET_FIELDS
    labels: Mapping[str, str] = field(
        default_factory=lambda: dict(DEFAULT_FIELD_LABELS)
    )
    summary_field_limit: int = 3

    def is_restricted(self, field_name: str) -> bool:
        """Whether a field is hidden from non-admin viewers."""
        return field_name in self.restricted

    def is_asset(self, field_name: str) -> bool:
        """Whether a field holds a binary-asset reference."""
        if field_name in self.asset_fields:
            return True
        lowered = field_name.lower()
        return any(hint in lowered for hint in _ASSET_NAME_HINTS)

    def label_for(self, field_name: str) -> str:
        """Return the human label for a field."""
        label = self.labels.get(field_name)
        if label:
            return label
        return field_name.replace("_", " ").replace("-", " ").strip().title()

    def visible_fields(
        self, fields: Iterable[str], privilege: ViewerPrivilege
    ) -> list[str]:
        """Filter changed fields down to what the viewer may see."""
        visible = [name for name in fields if name not in self.non_auditable]
        if privilege is ViewerPrivilege.ADMIN:
            return visible
        visible = [name for name in visible if name not in self.restricted]
        if self.user_relevant is not None:
            visible = [name for name in visible if name in self.user_relevant]
        return visible


def entity_label(entity_type: EntityType) -> str:
    """Return the human label for an entity family."""
    return ENTITY_LABELS.get(entity_type, entity_type.value.replace("-", " "))

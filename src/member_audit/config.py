"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from member_audit.domain.policy import FieldPolicy

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    service_token: str
    storage_bucket: str = "uploads"
    history_max_page_size: int = 100
    photo_recent_days: int = 30
    non_auditable_fields: str | None = None
    restricted_fields: str | None = None
    user_relevant_fields: str | None = None
    asset_fields: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_field_list(raw: str | None) -> frozenset[str] | None:
    """Parse a comma-separated list of field names from env."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if not cleaned:
        return None
    names = {chunk.strip() for chunk in cleaned.split(",")}
    names.discard("")
    return frozenset(names) or None


def build_field_policy(settings: Settings) -> FieldPolicy:
    """Build the field policy, applying any env overrides to the defaults."""
    defaults = FieldPolicy()
    return FieldPolicy(
        non_auditable=parse_field_list(settings.non_auditable_fields)
        or defaults.non_auditable,
        restricted=parse_field_list(settings.restricted_fields)
        or defaults.restricted,
        user_relevant=parse_field_list(settings.user_relevant_fields),
        asset_fields=parse_field_list(settings.asset_fields)
        or defaults.asset_fields,
    )

"""Base entity class for records held in the content platform."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def ensure_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class StoredEntity(BaseModel):
    """Base class for all stored domain entities.

    Provides:
    - Store-assigned identifier
    - Created/updated timestamps (set by the store, UTC)
    - Standard serialization config
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_default=True,
        from_attributes=True,
    )

    id: str = Field(min_length=1, description="Store-assigned entry uid")
    created_at: datetime | None = Field(
        default=None,
        description="When the store created the entry",
    )
    updated_at: datetime | None = Field(
        default=None,
        description="When the store last updated the entry",
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_timestamps(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

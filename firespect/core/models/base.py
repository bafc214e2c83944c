"""Base Pydantic schemas and helpers for Firespect models."""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FirespectBaseModel(BaseModel):
    """Base Pydantic model for all schemas with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        use_enum_values=True,
        validate_default=True,
        str_strip_whitespace=True,
        # Wire format (AI backend, persisted JSON) is camelCase
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TimestampSchema(FirespectBaseModel):
    """Schema with timestamp fields."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def generate_id(prefix: str = "") -> str:
    """Generate a prefixed UUID.

    Args:
        prefix: Optional prefix for the ID (e.g., "job-", "inspection_")

    Returns:
        Prefixed UUID string
    """
    uid = str(uuid.uuid4())
    return f"{prefix}{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        Current datetime in UTC timezone
    """
    return datetime.now(timezone.utc)

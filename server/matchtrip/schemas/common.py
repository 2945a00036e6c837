"""Common Pydantic schemas."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Timezone-aware current time used for every audit timestamp."""
    return datetime.now(timezone.utc)


class StrictModel(BaseModel):
    """Base for persisted entities and request bodies: unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


class Meta(BaseModel):
    """Collection metadata stored next to the entity array."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    version: int = Field(0, ge=0, description="Incremented by every committed write")
    updated_at: Optional[datetime] = Field(
        None,
        alias="updatedAt",
        description="Time of the last committed write (ISO 8601)"
    )


class Violation(BaseModel):
    """Validation error violation."""

    path: str = Field(..., description="Dotted path to the invalid field")
    message: str = Field(..., description="Validation error message")


class Problem(BaseModel):
    """RFC 9457 Problem Details response."""

    type: Optional[str] = Field(None, description="Problem type URI")
    title: str = Field(..., description="Short human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: Optional[str] = Field(None, description="Human-readable explanation")
    instance: Optional[str] = Field(None, description="URI reference for this occurrence")
    code: Optional[str] = Field(None, description="Application-specific error code")
    retryable: Optional[bool] = Field(None, description="Whether the operation can be retried")
    violations: Optional[List[Violation]] = Field(None, description="Validation errors")


class EntityIdRequest(StrictModel):
    """Request body addressing a single entity."""

    id: str = Field(..., min_length=1, description="Entity ID")


class DeleteResponse(BaseModel):
    """Acknowledgement of a delete."""

    id: str = Field(..., description="Deleted entity ID")
    deleted: bool = Field(True, description="Always true; missing IDs are reported as 404")

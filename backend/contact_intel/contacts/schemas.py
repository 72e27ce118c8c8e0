"""Contact response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ContactResponse(BaseModel):
    id: UUID
    name: str
    email: str
    phone: str
    message: str = ""
    category: str
    priority: str
    score: int = 0
    created_at: datetime | None = Field(None, serialization_alias="createdAt")
    updated_at: datetime | None = Field(None, serialization_alias="updatedAt")

    model_config = {"from_attributes": True}


class Insight(BaseModel):
    """Advisory labels derived from a score."""

    label: str
    priority: str


class ScorePreviewResponse(BaseModel):
    valid: bool
    rubric: str
    score: int
    insight: Insight
    errors: dict[str, str] = Field(default_factory=dict)


def serialize_contact(contact) -> dict:
    return ContactResponse.model_validate(contact).model_dump(mode="json", by_alias=True)

"""Contact model and enums."""

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID

from ..database.base import Base


class Category(enum.StrEnum):
    """User-chosen contact category."""

    LEAD = "Lead"
    CLIENT = "Client"
    PARTNER = "Partner"
    VENDOR = "Vendor"


class Priority(enum.StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=False)
    message = Column(Text, default="")
    category = Column(String(20), default=Category.LEAD.value, index=True)
    priority = Column(String(20), default=Priority.MEDIUM.value)
    score = Column(Integer, default=0)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    __table_args__ = (
        Index("ix_contacts_created_at", created_at.desc()),
        Index("ix_contacts_score", score.desc()),
    )

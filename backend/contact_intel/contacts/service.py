"""Contact service: validated CRUD for contacts."""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from .models import Category, Contact
from .validation import ValidationResult, validate

logger = logging.getLogger(__name__)

SORT_ORDERS = {
    "recent": Contact.created_at.desc(),
    "name": func.lower(Contact.name).asc(),
    "score": Contact.score.desc(),
}


class ContactValidationError(Exception):
    """Raised when submitted contact fields fail validation."""

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        self.errors = result.messages()
        super().__init__(f"Invalid contact fields: {', '.join(sorted(self.errors))}")


def _to_uuid(value: str) -> UUID | None:
    """Convert string to UUID, returning None on failure."""
    if not value:
        return None
    try:
        return UUID(value)
    except (ValueError, AttributeError, TypeError):
        return None


def is_valid_id(value: str) -> bool:
    return _to_uuid(value) is not None


def _validated(fields: Mapping[str, Any], rubric: str) -> ValidationResult:
    result = validate(fields, rubric=rubric)
    if not result.ok:
        logger.debug("Contact rejected: %s", result.messages())
        raise ContactValidationError(result)
    return result


def create_contact(db: Session, fields: Mapping[str, Any], rubric: str) -> Contact:
    result = _validated(fields, rubric)
    record = result.record
    contact = Contact(
        name=record.name,
        email=record.email,
        phone=record.phone,
        message=record.message,
        category=record.category.value,
        priority=record.priority.value,
        score=result.score,
    )
    db.add(contact)
    db.flush()
    logger.info("Contact %s created (score=%d)", contact.id, contact.score)
    return contact


def get_contact(db: Session, contact_id: str) -> Contact | None:
    uid = _to_uuid(contact_id)
    if uid is None:
        return None
    return db.query(Contact).filter(Contact.id == uid).first()


def list_contacts(db: Session, category: str | None = None, sort: str = "recent") -> list[Contact]:
    """List contacts, optionally filtered by category.

    ``category`` of None or "all" disables the filter. Raises ValueError for
    an unknown category or sort key.
    """
    if sort not in SORT_ORDERS:
        raise ValueError(f"Unknown sort key: {sort!r}")
    query = db.query(Contact)
    if category and category != "all":
        query = query.filter(Contact.category == Category(category).value)
    return query.order_by(SORT_ORDERS[sort]).all()


def update_contact(db: Session, contact_id: str, fields: Mapping[str, Any], rubric: str) -> Contact | None:
    """Replace every editable field of a contact and rescore it."""
    contact = get_contact(db, contact_id)
    if contact is None:
        return None
    result = _validated(fields, rubric)
    record = result.record
    contact.name = record.name
    contact.email = record.email
    contact.phone = record.phone
    contact.message = record.message
    contact.category = record.category.value
    contact.priority = record.priority.value
    contact.score = result.score
    contact.updated_at = datetime.now(UTC)
    db.flush()
    logger.info("Contact %s updated (score=%d)", contact.id, contact.score)
    return contact


def delete_contact_by_id(db: Session, contact_id: str) -> bool:
    contact = get_contact(db, contact_id)
    if not contact:
        return False
    db.delete(contact)
    db.flush()
    logger.info("Contact %s deleted", contact_id)
    return True


def count_contacts(db: Session) -> int:
    return db.query(func.count(Contact.id)).scalar() or 0

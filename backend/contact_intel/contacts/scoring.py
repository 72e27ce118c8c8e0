"""Contact intelligence scoring.

Two rubrics are in use and they do not agree with each other:

- ``completeness``: the 25/25/25/15/5/5 rubric the contact form and the API
  apply when a contact is saved.
- ``engagement``: the 30/30/20/20 rubric of the standalone helper, which
  rewards long messages and gives every contact a flat base.

Neither is treated as canonical. Callers pick one by name through
``get_scorer`` / ``compute_score``.
"""

import re
from collections.abc import Mapping
from typing import Any, Protocol

from pydantic import BaseModel

from .models import Category, Priority

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
MIN_PHONE_DIGITS = 10

COMPLETENESS = "completeness"
ENGAGEMENT = "engagement"

_CATEGORY_VALUES = {c.value for c in Category}
_PRIORITY_VALUES = {p.value for p in Priority}


def field_text(record: Mapping[str, Any], key: str) -> str:
    """Return a field as trimmed text ('' when absent)."""
    value = record.get(key)
    if value is None:
        return ""
    return str(value).strip()


def digit_count(value: str) -> int:
    return sum(1 for ch in value if ch.isdigit())


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def _clamp(score: int) -> int:
    return max(0, min(score, 100))


class ScoringStrategy(Protocol):
    """Scoring rubric interface."""

    name: str

    def score(self, record: Mapping[str, Any]) -> int: ...


class CompletenessRubric:
    """Field-completeness rubric, sums to exactly 100 when every check passes."""

    name = COMPLETENESS

    def score(self, record: Mapping[str, Any]) -> int:
        total = 0
        if field_text(record, "name"):
            total += 25
        if is_valid_email(field_text(record, "email")):
            total += 25
        if digit_count(field_text(record, "phone")) >= MIN_PHONE_DIGITS:
            total += 25
        if field_text(record, "message"):
            total += 15
        if field_text(record, "category") in _CATEGORY_VALUES:
            total += 5
        if field_text(record, "priority") in _PRIORITY_VALUES:
            total += 5
        return _clamp(total)


class EngagementRubric:
    """Presence-and-engagement rubric with a flat base of 20."""

    name = ENGAGEMENT

    def score(self, record: Mapping[str, Any]) -> int:
        total = 0
        if field_text(record, "email"):
            total += 30
        if field_text(record, "phone"):
            total += 30
        message = record.get("message") or ""
        if len(str(message)) > 20:
            total += 20
        # Base engagement score
        total += 20
        return _clamp(total)


SCORERS: dict[str, ScoringStrategy] = {
    COMPLETENESS: CompletenessRubric(),
    ENGAGEMENT: EngagementRubric(),
}


def get_scorer(name: str) -> ScoringStrategy:
    """Look up a rubric by name. Raises KeyError for unknown names."""
    try:
        return SCORERS[name]
    except KeyError:
        raise KeyError(f"Unknown scoring rubric: {name!r} (expected one of {sorted(SCORERS)})") from None


def compute_score(record: BaseModel | Mapping[str, Any], rubric: str) -> int:
    """Score a contact record with the named rubric."""
    if isinstance(record, BaseModel):
        record = record.model_dump()
    return get_scorer(rubric).score(record)


# ── Advisory classification ───────────────────────────────────────────

PROFESSIONAL_LEAD = "Professional Lead"
POTENTIAL_CONTACT = "Potential Contact"
CASUAL = "Casual"


def classify(score: int) -> tuple[str, str]:
    """Map a score to an advisory (category label, priority label) pair.

    Not the user-chosen category/priority of the contact; never persisted.
    """
    if score >= 80:
        return PROFESSIONAL_LEAD, Priority.HIGH.value
    if score >= 50:
        return POTENTIAL_CONTACT, Priority.MEDIUM.value
    return CASUAL, Priority.LOW.value

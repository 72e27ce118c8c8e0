"""Contact routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..config import settings
from ..database.base import get_db
from ..dependencies import get_score_rubric
from ..rate_limit import limiter
from .models import Category, Priority
from .schemas import Insight, ScorePreviewResponse, serialize_contact
from .scoring import classify, field_text, get_scorer
from .service import (
    count_contacts,
    create_contact,
    delete_contact_by_id,
    get_contact,
    is_valid_id,
    list_contacts,
    update_contact,
)
from .validation import validate

router = APIRouter(tags=["contacts"])


def _not_found() -> JSONResponse:
    return JSONResponse({"message": "Contact not found"}, status_code=404)


def _invalid_id() -> JSONResponse:
    return JSONResponse({"message": "Invalid ID"}, status_code=400)


@router.get("/contacts")
def list_contacts_api(
    category: str | None = Query(None),
    sort: str = Query("recent"),
    db: Session = Depends(get_db),
):
    try:
        contacts = list_contacts(db, category=category, sort=sort)
    except ValueError as exc:
        return JSONResponse({"message": str(exc)}, status_code=400)
    return JSONResponse([serialize_contact(c) for c in contacts])


@router.get("/contacts/stats/summary")
def contacts_summary(db: Session = Depends(get_db)):
    return JSONResponse({"total": count_contacts(db)})


@router.post("/contacts/preview")
def preview_score(
    payload: dict[str, Any] = Body(...),
    rubric: str = Query("completeness"),
):
    """Score unsaved form fields for live feedback. Nothing is stored."""
    try:
        scorer = get_scorer(rubric)
    except KeyError as exc:
        return JSONResponse({"message": exc.args[0]}, status_code=400)

    result = validate(payload, rubric=rubric)
    if result.ok:
        score = result.score
    else:
        # Partial forms still get a score; blank or missing enums take their defaults, as in validate
        draft = dict(payload)
        for key, default in (("category", Category.LEAD.value), ("priority", Priority.MEDIUM.value)):
            if not field_text(draft, key):
                draft[key] = default
        score = scorer.score(draft)
    label, priority = classify(score)
    preview = ScorePreviewResponse(
        valid=result.ok,
        rubric=rubric,
        score=score,
        insight=Insight(label=label, priority=priority),
        errors=result.messages(),
    )
    return JSONResponse(preview.model_dump())


@router.get("/contacts/{contact_id}")
def get_contact_api(contact_id: str, db: Session = Depends(get_db)):
    if not is_valid_id(contact_id):
        return _invalid_id()
    contact = get_contact(db, contact_id)
    if contact is None:
        return _not_found()
    return JSONResponse(serialize_contact(contact))


@router.post("/contacts")
@limiter.limit(settings.rate_limit_write)
def create_contact_api(
    request: Request,
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    rubric: str = Depends(get_score_rubric),
):
    contact = create_contact(db, payload, rubric)
    db.commit()
    return JSONResponse(serialize_contact(contact), status_code=201)


@router.put("/contacts/{contact_id}")
@limiter.limit(settings.rate_limit_write)
def update_contact_api(
    request: Request,
    contact_id: str,
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    rubric: str = Depends(get_score_rubric),
):
    if not is_valid_id(contact_id):
        return _invalid_id()
    contact = update_contact(db, contact_id, payload, rubric)
    if contact is None:
        return _not_found()
    db.commit()
    return JSONResponse(serialize_contact(contact))


@router.delete("/contacts/{contact_id}")
@limiter.limit(settings.rate_limit_write)
def remove_contact(
    request: Request,
    contact_id: str,
    db: Session = Depends(get_db),
):
    if not is_valid_id(contact_id):
        return _invalid_id()
    if not delete_contact_by_id(db, contact_id):
        return _not_found()
    db.commit()
    return JSONResponse({"message": "Contact deleted successfully"})

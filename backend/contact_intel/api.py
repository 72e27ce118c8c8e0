"""API router: all JSON endpoints under the /api prefix."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from .contacts.routes import router as contacts_router
from .database.base import get_db

api_router = APIRouter(prefix="/api", tags=["api"])

api_router.include_router(contacts_router)


@api_router.get("/health")
def health(db: Session = Depends(get_db)):
    database = "Connected"
    try:
        db.execute(text("SELECT 1"))
    except Exception:
        database = "Disconnected"

    return {
        "status": "OK" if database == "Connected" else "DEGRADED",
        "timestamp": datetime.now(UTC).isoformat(),
        "database": database,
    }

"""/api/test and /api/revision - database check and change revision"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from ag_shop.api.dependencies import get_change_notifier
from ag_shop.api.schemas import RevisionResponse
from ag_shop.infrastructure.clients.change_webhook import ChangeNotifier
from ag_shop.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/test")
def test_database(db: Session = Depends(get_db)):
    """Round-trip a trivial query to confirm the database is reachable"""
    try:
        rows = db.execute(text("SELECT 1 AS test")).mappings().all()
    except Exception as e:
        logging.error(f"Database connection error: {e}")
        raise HTTPException(status_code=500, detail="Database connection failed")

    return {"message": "Database connection successful", "data": [dict(r) for r in rows]}


@router.get("/revision", response_model=RevisionResponse)
def get_revision(notifier: ChangeNotifier = Depends(get_change_notifier)):
    """
    Current change revision.

    Clients refetch lists only when this number moves instead of re-querying
    everything on a timer.
    """
    return RevisionResponse(revision=notifier.revision)

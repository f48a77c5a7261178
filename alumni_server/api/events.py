# alumni_server/api/events.py

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from alumni_server.api.dependencies import get_auth_context, get_optional_auth_context, require_admin
from alumni_server.core import events
from alumni_server.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from alumni_server.core.media import MediaFile
from alumni_server.core.security import AuthContext
from alumni_server.database import get_db


router = APIRouter(prefix="/api/events", tags=["events"])


class EventCreateRequest(BaseModel):
    title: str
    description: str
    date: datetime
    location: str
    mediaFiles: List[MediaFile] = []


class EventUpdateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = None
    mediaFiles: List[MediaFile] = []


# -------------------------------
# Public Endpoints
# -------------------------------

@router.get("")
def get_events(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return events.list_events(db, page, limit)


@router.get("/upcoming")
def get_upcoming_events(db: Session = Depends(get_db)):
    return events.upcoming_events(db)


@router.get("/{event_id}")
def get_event_by_id(
    event_id: int,
    viewer: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: Session = Depends(get_db),
):
    return events.get_event(db, event_id, viewer)


# -------------------------------
# Admin Endpoints
# -------------------------------

@router.post("", status_code=status.HTTP_201_CREATED)
def create_event(req: EventCreateRequest, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    return events.create_event(db, ctx, req.title, req.description, req.date, req.location, req.mediaFiles)


@router.put("/{event_id}")
def update_event(
    event_id: int,
    req: EventUpdateRequest,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return events.update_event(
        db, ctx, event_id,
        title=req.title,
        description=req.description,
        date=req.date,
        location=req.location,
        media_files=req.mediaFiles,
    )


@router.delete("/{event_id}")
def delete_event(event_id: int, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    events.delete_event(db, ctx, event_id)
    return {"message": "Event deleted successfully"}


# -------------------------------
# Registration
# -------------------------------

@router.post("/{event_id}/register")
def register_for_event(event_id: int, ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    registered = events.toggle_registration(db, ctx, event_id)
    return {
        "registered": registered,
        "message": (
            "Successfully registered for the event" if registered
            else "Successfully unregistered from the event"
        ),
    }

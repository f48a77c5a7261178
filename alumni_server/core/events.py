# alumni_server/core/events.py

import logging
from datetime import datetime
from typing import Iterable
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from alumni_server.core.errors import Forbidden, InvalidState, NotFound, ValidationError
from alumni_server.core.media import MediaFile, store_media_files
from alumni_server.core.membership import toggle_membership
from alumni_server.core.projection import event_views, event_detail
from alumni_server.core.security import AuthContext
from alumni_server.core.utils import offset_for, page_meta, to_naive_utc, utcnow
from alumni_server.models.content import Event, event_attendees


logger = logging.getLogger(__name__)

UPCOMING_COUNT = 3


def _visible():
    return Event.is_deleted.is_(False)


def _require_admin(ctx: AuthContext, action: str):
    if not ctx.is_admin:
        logger.warning("User %d tried to %s an event without admin role", ctx.user_id, action)
        raise Forbidden(f"Not authorized to {action} events")


def get_visible_event(db: Session, event_id: int) -> Event:
    event = db.query(Event).filter(Event.id == event_id, _visible()).first()
    if not event:
        raise NotFound("Event not found")
    return event


def create_event(
    db: Session,
    ctx: AuthContext,
    title: str,
    description: str,
    date: datetime,
    location: str,
    media_files: Iterable[MediaFile] | None = None,
) -> dict:
    _require_admin(ctx, "create")

    title = (title or "").strip()
    location = (location or "").strip()
    if not title or not description or not location or date is None:
        raise ValidationError("Title, description, date and location are required")

    event = Event(
        title=title,
        description=description,
        author_id=ctx.user_id,
        media_ids=store_media_files(db, media_files),
        event_date=to_naive_utc(date),
        location=location,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Event %d created by admin %d", event.id, ctx.user_id)
    return event_views(db, [event])[0]


def list_events(db: Session, page: int, limit: int) -> dict:
    total = db.query(func.count(Event.id)).filter(_visible()).scalar()
    events = (
        db.query(Event)
        .options(joinedload(Event.author))
        .filter(_visible())
        .order_by(Event.event_date.asc(), Event.id.asc())
        .offset(offset_for(page, limit))
        .limit(limit)
        .all()
    )
    return {"events": event_views(db, events), **page_meta(page, limit, total)}


def upcoming_events(db: Session, n: int = UPCOMING_COUNT, now: datetime | None = None) -> list[dict]:
    now = to_naive_utc(now) if now else utcnow()
    events = (
        db.query(Event)
        .options(joinedload(Event.author))
        .filter(_visible(), Event.event_date >= now)
        .order_by(Event.event_date.asc(), Event.id.asc())
        .limit(n)
        .all()
    )
    return event_views(db, events)


def get_event(db: Session, event_id: int, viewer: AuthContext | None = None) -> dict:
    event = get_visible_event(db, event_id)
    return event_detail(db, event, viewer.user_id if viewer else None)


def events_attended_by(db: Session, user_id: int) -> list[dict]:
    events = (
        db.query(Event)
        .options(joinedload(Event.author))
        .join(event_attendees, event_attendees.c.event_id == Event.id)
        .filter(event_attendees.c.user_id == user_id, _visible())
        .order_by(Event.event_date.desc(), Event.id.desc())
        .all()
    )
    return event_views(db, events)


def update_event(
    db: Session,
    ctx: AuthContext,
    event_id: int,
    title: str | None = None,
    description: str | None = None,
    date: datetime | None = None,
    location: str | None = None,
    media_files: Iterable[MediaFile] | None = None,
) -> dict:
    _require_admin(ctx, "update")
    event = get_visible_event(db, event_id)

    new_media = store_media_files(db, media_files)
    if title and title.strip():
        event.title = title.strip()
    if description:
        event.description = description
    if date is not None:
        event.event_date = to_naive_utc(date)
    if location and location.strip():
        event.location = location.strip()
    if new_media:
        event.media_ids = list(event.media_ids or []) + new_media

    db.commit()
    db.refresh(event)
    return event_views(db, [event])[0]


def delete_event(db: Session, ctx: AuthContext, event_id: int):
    _require_admin(ctx, "delete")
    event = get_visible_event(db, event_id)
    event.mark_deleted()
    db.commit()
    logger.info("Event %d soft-deleted by admin %d", event.id, ctx.user_id)


def toggle_registration(db: Session, ctx: AuthContext, event_id: int, now: datetime | None = None) -> bool:
    """
    Registers or unregisters the caller; returns True if now registered.
    Both directions are refused once the event date has passed.
    """
    event = get_visible_event(db, event_id)
    now = to_naive_utc(now) if now else utcnow()
    if event.event_date < now:
        raise InvalidState("Cannot register for past events")

    return toggle_membership(db, event_attendees, event_id=event.id, user_id=ctx.user_id)

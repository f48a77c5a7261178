# alumni_server/core/projection.py

"""
Read-time shaping of stored rows into client JSON.

Every function that projects more than one row resolves media for the whole
batch with a single lookup and computes counts with grouped queries; nothing
here writes to the database.
"""

from typing import Iterable, Sequence
from sqlalchemy import func
from sqlalchemy.orm import Session

from alumni_server.core.media import resolve_media
from alumni_server.core.membership import count_by, is_member
from alumni_server.core.utils import isoformat, utcnow
from alumni_server.models.content import Story, Event, Comment, story_likes, event_attendees
from alumni_server.models.user import User


# -------------------------------
# Users
# -------------------------------

def author_view(user: User, media_urls: dict) -> dict:
    return {
        "id": user.id,
        "firstname": user.firstname,
        "lastname": user.lastname,
        "username": user.username,
        "profileImage": media_urls.get(user.profile_image_id),
    }


def user_view(user: User, media_urls: dict) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "firstname": user.firstname,
        "lastname": user.lastname,
        "usertype": user.usertype,
        "status": user.status,
        "profileImage": media_urls.get(user.profile_image_id),
        "createdAt": isoformat(user.created_at),
        "updatedAt": isoformat(user.updated_at),
    }


def user_views(db: Session, users: Sequence[User]) -> list[dict]:
    media_urls = resolve_media(db, (u.profile_image_id for u in users))
    return [user_view(u, media_urls) for u in users]


def _collect_media_ids(items: Iterable, authors: Iterable[User]) -> list[str]:
    ids = [m for item in items for m in (item.media_ids or [])]
    ids.extend(a.profile_image_id for a in authors if a.profile_image_id)
    return ids


def _media_urls_for(item, media_urls: dict) -> list[str]:
    return [media_urls[m] for m in (item.media_ids or []) if m in media_urls]


# -------------------------------
# Stories
# -------------------------------

def _comment_counts(db: Session, story_ids: list[int]) -> dict:
    if not story_ids:
        return {}
    rows = (
        db.query(Comment.story_id, func.count(Comment.id))
        .filter(Comment.story_id.in_(story_ids))
        .group_by(Comment.story_id)
        .all()
    )
    return dict(rows)


def _story_view(story: Story, media_urls: dict, likes: int, comments: int) -> dict:
    return {
        "id": story.id,
        "title": story.title,
        "description": story.description,
        "author": author_view(story.author, media_urls),
        "mediaIds": list(story.media_ids or []),
        "mediaUrls": _media_urls_for(story, media_urls),
        "likes": likes,
        "comments": comments,
        "createdAt": isoformat(story.created_at),
        "updatedAt": isoformat(story.updated_at),
    }


def story_views(db: Session, stories: Sequence[Story]) -> list[dict]:
    story_ids = [s.id for s in stories]
    media_urls = resolve_media(db, _collect_media_ids(stories, (s.author for s in stories)))
    like_counts = count_by(db, story_likes, "story_id", story_ids)
    comment_counts = _comment_counts(db, story_ids)
    return [
        _story_view(s, media_urls, like_counts.get(s.id, 0), comment_counts.get(s.id, 0))
        for s in stories
    ]


def comment_view(comment: Comment, media_urls: dict) -> dict:
    return {
        "id": comment.id,
        "content": comment.content,
        "story": comment.story_id,
        "author": author_view(comment.author, media_urls),
        "createdAt": isoformat(comment.created_at),
        "updatedAt": isoformat(comment.updated_at),
    }


def story_detail(db: Session, story: Story, viewer_id: int | None = None) -> dict:
    comments = list(story.comments)
    authors = [story.author] + [c.author for c in comments]
    media_urls = resolve_media(db, _collect_media_ids([story], authors))
    likes = count_by(db, story_likes, "story_id", [story.id]).get(story.id, 0)

    view = _story_view(story, media_urls, likes, len(comments))
    view["commentCount"] = len(comments)
    view["comments"] = [comment_view(c, media_urls) for c in comments]
    if viewer_id is not None:
        view["liked"] = is_member(db, story_likes, story_id=story.id, user_id=viewer_id)
    return view


# -------------------------------
# Events
# -------------------------------

def _event_view(event: Event, media_urls: dict, attendee_count: int, now) -> dict:
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "author": author_view(event.author, media_urls),
        "mediaIds": list(event.media_ids or []),
        "mediaUrls": _media_urls_for(event, media_urls),
        "calendar": {
            "date": isoformat(event.event_date),
            "location": event.location,
        },
        "attendeeCount": attendee_count,
        "isPast": event.event_date < now,
        "createdAt": isoformat(event.created_at),
        "updatedAt": isoformat(event.updated_at),
    }


def event_views(db: Session, events: Sequence[Event]) -> list[dict]:
    now = utcnow()
    media_urls = resolve_media(db, _collect_media_ids(events, (e.author for e in events)))
    counts = count_by(db, event_attendees, "event_id", [e.id for e in events])
    return [_event_view(e, media_urls, counts.get(e.id, 0), now) for e in events]


def event_detail(db: Session, event: Event, viewer_id: int | None = None) -> dict:
    attendees = list(event.attendees)
    media_urls = resolve_media(db, _collect_media_ids([event], [event.author] + attendees))

    view = _event_view(event, media_urls, len(attendees), utcnow())
    view["attendees"] = [author_view(a, media_urls) for a in attendees]
    if viewer_id is not None:
        view["registered"] = any(a.id == viewer_id for a in attendees)
    return view

# alumni_server/core/stories.py

import logging
from typing import Iterable
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from alumni_server.core.errors import Forbidden, NotFound, ValidationError
from alumni_server.core.media import MediaFile, store_media_files, resolve_media
from alumni_server.core.membership import toggle_membership_counted
from alumni_server.core.projection import story_views, story_detail, comment_view
from alumni_server.core.security import AuthContext
from alumni_server.core.utils import offset_for, page_meta
from alumni_server.models.content import Story, Comment, story_likes


logger = logging.getLogger(__name__)

FEATURED_COUNT = 3


def _visible():
    return Story.is_deleted.is_(False)


def get_visible_story(db: Session, story_id: int) -> Story:
    story = db.query(Story).filter(Story.id == story_id, _visible()).first()
    if not story:
        raise NotFound("Story not found")
    return story


def create_story(
    db: Session,
    ctx: AuthContext,
    title: str,
    description: str,
    media_files: Iterable[MediaFile] | None = None,
) -> dict:
    title = (title or "").strip()
    if not title or not description:
        raise ValidationError("Title and description are required")

    story = Story(
        title=title,
        description=description,
        author_id=ctx.user_id,
        media_ids=store_media_files(db, media_files),
    )
    db.add(story)
    db.commit()
    db.refresh(story)
    logger.info("Story %d created by user %d", story.id, ctx.user_id)
    return story_views(db, [story])[0]


def list_stories(db: Session, page: int, limit: int) -> dict:
    total = db.query(func.count(Story.id)).filter(_visible()).scalar()
    stories = (
        db.query(Story)
        .options(joinedload(Story.author))
        .filter(_visible())
        .order_by(Story.created_at.desc(), Story.id.desc())
        .offset(offset_for(page, limit))
        .limit(limit)
        .all()
    )
    return {"stories": story_views(db, stories), **page_meta(page, limit, total)}


def featured_stories(db: Session, n: int = FEATURED_COUNT) -> list[dict]:
    """
    Most-liked visible stories; ties go to the newer story.
    """
    like_count = (
        db.query(story_likes.c.story_id, func.count().label("likes"))
        .group_by(story_likes.c.story_id)
        .subquery()
    )
    stories = (
        db.query(Story)
        .options(joinedload(Story.author))
        .outerjoin(like_count, like_count.c.story_id == Story.id)
        .filter(_visible())
        .order_by(
            func.coalesce(like_count.c.likes, 0).desc(),
            Story.created_at.desc(),
            Story.id.desc(),
        )
        .limit(n)
        .all()
    )
    return story_views(db, stories)


def get_story(db: Session, story_id: int, viewer: AuthContext | None = None) -> dict:
    story = get_visible_story(db, story_id)
    return story_detail(db, story, viewer.user_id if viewer else None)


def stories_by_author(db: Session, user_id: int) -> list[dict]:
    stories = (
        db.query(Story)
        .options(joinedload(Story.author))
        .filter(Story.author_id == user_id, _visible())
        .order_by(Story.created_at.desc(), Story.id.desc())
        .all()
    )
    return story_views(db, stories)


def update_story(
    db: Session,
    ctx: AuthContext,
    story_id: int,
    title: str | None = None,
    description: str | None = None,
    media_files: Iterable[MediaFile] | None = None,
) -> dict:
    """
    Only the author may edit. New media are appended to the existing list.
    """
    story = get_visible_story(db, story_id)
    if story.author_id != ctx.user_id:
        logger.warning("User %d tried to update story %d", ctx.user_id, story.id)
        raise Forbidden("Not authorized to update this story")

    new_media = store_media_files(db, media_files)
    if title and title.strip():
        story.title = title.strip()
    if description:
        story.description = description
    if new_media:
        story.media_ids = list(story.media_ids or []) + new_media

    db.commit()
    db.refresh(story)
    return story_views(db, [story])[0]


def delete_story(db: Session, ctx: AuthContext, story_id: int):
    story = get_visible_story(db, story_id)
    if story.author_id != ctx.user_id and not ctx.is_admin:
        logger.warning("User %d tried to delete story %d", ctx.user_id, story.id)
        raise Forbidden("Not authorized to delete this story")

    story.mark_deleted()
    db.commit()
    logger.info("Story %d soft-deleted by user %d", story.id, ctx.user_id)


def toggle_like(db: Session, ctx: AuthContext, story_id: int) -> tuple[int, bool]:
    """
    Returns (like count, liked) after flipping the caller's like.
    """
    story = get_visible_story(db, story_id)
    liked, likes = toggle_membership_counted(db, story_likes, "story_id", story_id=story.id, user_id=ctx.user_id)
    return likes, liked


def add_comment(db: Session, ctx: AuthContext, story_id: int, content: str) -> dict:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Comment content is required")

    story = get_visible_story(db, story_id)
    comment = Comment(content=content, author_id=ctx.user_id, story_id=story.id)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment_view(comment, resolve_media(db, [comment.author.profile_image_id]))

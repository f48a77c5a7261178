# alumni_server/api/stories.py

from typing import List, Optional
from pydantic import BaseModel
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from alumni_server.api.dependencies import get_auth_context, get_optional_auth_context
from alumni_server.core import stories
from alumni_server.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from alumni_server.core.media import MediaFile
from alumni_server.core.security import AuthContext
from alumni_server.database import get_db


router = APIRouter(prefix="/api/stories", tags=["stories"])


class StoryCreateRequest(BaseModel):
    title: str
    description: str
    mediaFiles: List[MediaFile] = []


class StoryUpdateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    mediaFiles: List[MediaFile] = []


class CommentRequest(BaseModel):
    content: str


# -------------------------------
# Public Endpoints
# -------------------------------

@router.get("")
def get_stories(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return stories.list_stories(db, page, limit)


@router.get("/featured")
def get_featured_stories(db: Session = Depends(get_db)):
    return stories.featured_stories(db)


@router.get("/{story_id}")
def get_story_by_id(
    story_id: int,
    viewer: Optional[AuthContext] = Depends(get_optional_auth_context),
    db: Session = Depends(get_db),
):
    return stories.get_story(db, story_id, viewer)


# -------------------------------
# Authenticated Endpoints
# -------------------------------

@router.post("", status_code=status.HTTP_201_CREATED)
def create_story(req: StoryCreateRequest, ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    return stories.create_story(db, ctx, req.title, req.description, req.mediaFiles)


@router.put("/{story_id}")
def update_story(
    story_id: int,
    req: StoryUpdateRequest,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return stories.update_story(db, ctx, story_id, req.title, req.description, req.mediaFiles)


@router.delete("/{story_id}")
def delete_story(story_id: int, ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    stories.delete_story(db, ctx, story_id)
    return {"message": "Story deleted successfully"}


@router.post("/{story_id}/like")
def like_story(story_id: int, ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    likes, liked = stories.toggle_like(db, ctx, story_id)
    return {"likes": likes, "liked": liked}


@router.post("/{story_id}/comments", status_code=status.HTTP_201_CREATED)
def add_comment(
    story_id: int,
    req: CommentRequest,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return stories.add_comment(db, ctx, story_id, req.content)

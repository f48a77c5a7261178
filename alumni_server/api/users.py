# alumni_server/api/users.py

from typing import Optional
from pydantic import BaseModel, EmailStr
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from alumni_server.api.dependencies import get_auth_context, require_admin
from alumni_server.core import identity, friends, stories, events
from alumni_server.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from alumni_server.core.media import resolve_media
from alumni_server.core.projection import user_view
from alumni_server.core.security import AuthContext
from alumni_server.database import get_db


router = APIRouter(prefix="/api/users", tags=["users"])


class ProfileUpdateRequest(BaseModel):
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    email: Optional[EmailStr] = None
    profileImage: Optional[str] = None


class PasswordChangeRequest(BaseModel):
    currentPassword: str
    newPassword: str


class StatusUpdateRequest(BaseModel):
    status: str


# -------------------------------
# Collection Endpoints
# -------------------------------

@router.get("")
def get_users(ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    return identity.list_users(db, ctx)


@router.get("/alumni")
def get_alumni_directory(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: str = "",
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return identity.alumni_directory(db, page, limit, search)


@router.put("/profile")
def update_user_profile(
    req: ProfileUpdateRequest,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    user = identity.update_profile(
        db,
        ctx.user_id,
        firstname=req.firstname,
        lastname=req.lastname,
        email=req.email,
        profile_image=req.profileImage,
    )
    return user_view(user, resolve_media(db, [user.profile_image_id]))


@router.put("/password")
def update_password(
    req: PasswordChangeRequest,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    identity.change_password(db, ctx.user_id, req.currentPassword, req.newPassword)
    return {"message": "Password updated successfully"}


# -------------------------------
# Per-user Endpoints
# -------------------------------

@router.get("/{user_id}")
def get_user_by_id(user_id: int, ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    return identity.user_detail(db, user_id)


@router.post("/{user_id}/friend")
def toggle_friend(user_id: int, ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    is_friend = friends.toggle_friend(db, ctx, user_id)
    return {
        "isFriend": is_friend,
        "message": "Friend added successfully" if is_friend else "Friend removed successfully",
    }


@router.put("/{user_id}/status")
def update_user_status(
    user_id: int,
    req: StatusUpdateRequest,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = identity.set_status(db, ctx, user_id, req.status)
    return {"id": user.id, "status": user.status, "message": "User status updated successfully"}


@router.get("/{user_id}/stories")
def get_user_stories(user_id: int, ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    return stories.stories_by_author(db, user_id)


@router.get("/{user_id}/events")
def get_user_events(user_id: int, ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    return events.events_attended_by(db, user_id)

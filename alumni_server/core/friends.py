# alumni_server/core/friends.py

import logging
from sqlalchemy.orm import Session

from alumni_server.core.errors import NotFound, ValidationError
from alumni_server.core.membership import toggle_membership
from alumni_server.core.security import AuthContext
from alumni_server.models.user import User, AlumniProfile, alumni_friends


logger = logging.getLogger(__name__)


def toggle_friend(db: Session, ctx: AuthContext, target_id: int) -> bool:
    """
    Adds or removes target from the caller's friend set; returns True if now a friend.
    Only the caller -> target edge is written.
    """
    if target_id == ctx.user_id:
        raise ValidationError("You cannot befriend yourself")

    target = db.query(User).filter(User.id == target_id, User.usertype == "alumni").first()
    if not target:
        raise NotFound("User not found or not an alumni")

    profile = db.query(AlumniProfile).filter(AlumniProfile.user_id == ctx.user_id).first()
    if not profile:
        raise NotFound("Alumni profile not found")

    is_friend = toggle_membership(db, alumni_friends, profile_id=profile.id, friend_id=target.id)
    logger.info("User %d %s %d", ctx.user_id, "befriended" if is_friend else "unfriended", target.id)
    return is_friend

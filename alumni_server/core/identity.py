# alumni_server/core/identity.py

import logging
from sqlalchemy import or_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from alumni_server.core.errors import Conflict, Forbidden, NotFound, Unauthenticated, ValidationError
from alumni_server.core.media import resolve_media, store_media
from alumni_server.core.projection import user_view, user_views
from alumni_server.core.security import AuthContext, get_password_hash, verify_password
from alumni_server.core.utils import offset_for, page_meta
from alumni_server.models.content import Story, Event, event_attendees
from alumni_server.models.user import User, AlumniProfile, USER_STATUSES, alumni_friends


logger = logging.getLogger(__name__)


def _required(value: str | None, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{field} is required")
    return value


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()


# -------------------------------
# Registration & Login
# -------------------------------

def register(db: Session, username: str, email: str, firstname: str, lastname: str, password: str) -> User:
    """
    Creates an alumni account together with its (empty) alumni profile.
    Raises Conflict when the username or the email is already in use.
    """
    return _create_user(db, username, email, firstname, lastname, password, "alumni")


def create_admin(db: Session, username: str, email: str, firstname: str, lastname: str, password: str) -> User:
    """
    Creates an admin account. Admins get no alumni profile.
    """
    return _create_user(db, username, email, firstname, lastname, password, "admin")


def _create_user(
    db: Session,
    username: str,
    email: str,
    firstname: str,
    lastname: str,
    password: str,
    usertype: str,
) -> User:
    username = _required(username, "Username")
    email = _required(email, "Email").lower()
    firstname = _required(firstname, "First name")
    lastname = _required(lastname, "Last name")
    if not password:
        raise ValidationError("Password is required")

    exists = db.query(User).filter(or_(User.username == username, User.email == email)).first()
    if exists:
        raise Conflict("User already exists")

    user = User(
        username=username,
        email=email,
        firstname=firstname,
        lastname=lastname,
        hashed_password=get_password_hash(password),
        usertype=usertype,
        status="active",
    )
    db.add(user)
    try:
        db.flush()
        if usertype == "alumni":
            db.add(AlumniProfile(user_id=user.id, status="active"))
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User already exists")

    db.refresh(user)
    logger.info("Registered %s %s (%d)", usertype, user.username, user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = find_by_email(db, email or "")
    if not user or not verify_password(password or "", user.hashed_password):
        raise Unauthenticated("Invalid email or password")
    return user


# -------------------------------
# Profile
# -------------------------------

def update_profile(
    db: Session,
    user_id: int,
    firstname: str | None = None,
    lastname: str | None = None,
    email: str | None = None,
    profile_image: str | None = None,
) -> User:
    """
    Partial update; blank values leave the stored field unchanged.
    A new profile image is stored as a Media row and referenced by id.
    Nothing is staged until the email and the image have been checked.
    """
    user = get_user(db, user_id)

    new_email = None
    if email and email.strip().lower() != user.email:
        new_email = email.strip().lower()
        taken = db.query(User).filter(User.email == new_email, User.id != user.id).first()
        if taken:
            raise Conflict("Email already in use")

    if profile_image:
        user.profile_image_id = store_media(db, profile_image)
    if new_email:
        user.email = new_email
    if firstname and firstname.strip():
        user.firstname = firstname.strip()
    if lastname and lastname.strip():
        user.lastname = lastname.strip()

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already in use")
    db.refresh(user)
    return user


def change_password(db: Session, user_id: int, current_password: str, new_password: str):
    user = get_user(db, user_id)
    if not verify_password(current_password or "", user.hashed_password):
        raise Unauthenticated("Current password is incorrect")
    if not new_password:
        raise ValidationError("New password is required")

    user.hashed_password = get_password_hash(new_password)
    db.commit()
    logger.info("Password changed for user %d", user.id)


def user_detail(db: Session, user_id: int) -> dict:
    """
    Public profile plus story, attended-event and friend counts.
    """
    user = get_user(db, user_id)

    story_count = db.query(func.count(Story.id)).filter(
        Story.author_id == user.id, Story.is_deleted.is_(False)
    ).scalar()
    event_count = (
        db.query(func.count(Event.id))
        .join(event_attendees, event_attendees.c.event_id == Event.id)
        .filter(event_attendees.c.user_id == user.id, Event.is_deleted.is_(False))
        .scalar()
    )
    friend_count = 0
    if user.alumni_profile:
        friend_count = (
            db.query(func.count())
            .select_from(alumni_friends)
            .filter(alumni_friends.c.profile_id == user.alumni_profile.id)
            .scalar()
        )

    view = user_view(user, resolve_media(db, [user.profile_image_id]))
    view.update(storyCount=story_count, eventCount=event_count, friendCount=friend_count)
    return view


# -------------------------------
# Administration
# -------------------------------

def list_users(db: Session, ctx: AuthContext) -> list[dict]:
    if not ctx.is_admin:
        raise Forbidden("Not authorized to access user list")
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return user_views(db, users)


def set_status(db: Session, ctx: AuthContext, user_id: int, status: str) -> User:
    if not ctx.is_admin:
        raise Forbidden("Not authorized to update user status")
    if status not in USER_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(USER_STATUSES)}")

    user = get_user(db, user_id)
    user.status = status
    db.commit()
    db.refresh(user)
    logger.info("User %d status set to %s by %d", user.id, status, ctx.user_id)
    return user


# -------------------------------
# Directory
# -------------------------------

def alumni_directory(db: Session, page: int, limit: int, search: str = "") -> dict:
    query = db.query(User).filter(User.usertype == "alumni", User.status == "active")

    search = (search or "").strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            User.firstname.ilike(pattern),
            User.lastname.ilike(pattern),
            User.username.ilike(pattern),
            User.email.ilike(pattern),
        ))

    total = query.count()
    users = (
        query.order_by(User.firstname.asc(), User.lastname.asc(), User.id.asc())
        .offset(offset_for(page, limit))
        .limit(limit)
        .all()
    )
    return {"alumni": user_views(db, users), **page_meta(page, limit, total)}

# alumni_server/api/auth.py

from pydantic import BaseModel, EmailStr, Field
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from alumni_server.api.dependencies import get_auth_context
from alumni_server.core import identity
from alumni_server.core.media import resolve_media
from alumni_server.core.projection import user_view
from alumni_server.core.security import AuthContext, create_access_token
from alumni_server.database import get_db


router = APIRouter(prefix="/api/auth", tags=["auth"])


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=1)
    email: EmailStr
    firstname: str = Field(..., min_length=1)
    lastname: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: str
    password: str


def _session_payload(db: Session, user) -> dict:
    return {
        "token": create_access_token(user.id),
        "user": user_view(user, resolve_media(db, [user.profile_image_id])),
    }


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(req: SignupRequest, db: Session = Depends(get_db)):
    user = identity.register(db, req.username, req.email, req.firstname, req.lastname, req.password)
    return _session_payload(db, user)


@router.post("/login")
def login(req: LoginRequest, db: Session = Depends(get_db)):
    user = identity.authenticate(db, req.email, req.password)
    return _session_payload(db, user)


@router.get("/me")
def read_users_me(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    user = identity.get_user(db, ctx.user_id)
    return user_view(user, resolve_media(db, [user.profile_image_id]))

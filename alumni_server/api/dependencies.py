# alumni_server/api/dependencies.py

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from alumni_server.core.errors import Forbidden, Unauthenticated
from alumni_server.core.security import AuthContext, decode_access_token
from alumni_server.database import get_db
from alumni_server.models.user import User


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def _resolve(db: Session, token: str) -> AuthContext:
    user_id = decode_access_token(token)
    user = db.get(User, user_id)
    if not user:
        raise Unauthenticated("Not authorized, user not found")
    return AuthContext(user_id=user.id, role=user.usertype)


def get_auth_context(token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> AuthContext:
    if not token:
        raise Unauthenticated("Not authorized, no token")
    return _resolve(db, token)


def get_optional_auth_context(
    token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> AuthContext | None:
    """
    Resolves the caller on public endpoints; anonymous or invalid tokens give None.
    """
    if not token:
        return None
    try:
        return _resolve(db, token)
    except Unauthenticated:
        return None


def require_admin(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if not ctx.is_admin:
        raise Forbidden("Not authorized as an admin")
    return ctx

from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from talentdesk.core.errors import AuthenticationFailed, PermissionDenied
from talentdesk.core.security import decode_access_token
from talentdesk.db.models import User
from talentdesk.db.repositories import Repository
from talentdesk.db.session import get_db_session

bearer = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authorized, no token")
    try:
        user_id = decode_access_token(credentials.credentials)
    except AuthenticationFailed as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

    user = Repository(db).get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authorized, user not found")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != "admin":
        raise PermissionDenied("Not authorized as an admin")
    return current_user

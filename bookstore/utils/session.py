import logging
import secrets
from typing import Optional

import redis
from fastapi import Depends, HTTPException, Request, status
from sqlmodel import Session

from bookstore.cache import get_redis
from bookstore.config import settings
from bookstore.database import get_session
from bookstore.models.user import User

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "session:"


class SessionStore:
    """Server-side sessions kept in Redis, keyed by an opaque cookie value."""

    def __init__(self, client: redis.Redis, max_age: int = settings.session_max_age):
        self.client = client
        self.max_age = max_age

    def _key(self, sid: str) -> str:
        return f"{SESSION_KEY_PREFIX}{sid}"

    def create(self, user_id: int) -> str:
        sid = secrets.token_urlsafe(32)
        self.client.set(self._key(sid), user_id, ex=self.max_age)
        logger.info(f"Session created for user {user_id}")
        return sid

    def get(self, sid: str) -> Optional[int]:
        value = self.client.get(self._key(sid))
        if value is None:
            return None
        return int(value)

    def destroy(self, sid: str) -> None:
        self.client.delete(self._key(sid))


def get_session_store(client: redis.Redis = Depends(get_redis)) -> SessionStore:
    return SessionStore(client)


def get_current_user(
    request: Request,
    sessions: SessionStore = Depends(get_session_store),
    session: Session = Depends(get_session)
) -> User:
    sid = request.cookies.get(settings.session_cookie_name)
    user_id = sessions.get(sid) if sid else None

    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session not found"
        )

    user = session.get(User, user_id)

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return user

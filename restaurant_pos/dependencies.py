# restaurant_pos/dependencies.py
import secrets
import threading
from typing import Dict, Optional
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session
from restaurant_pos.database import get_db
from restaurant_pos.models.models import UserORM


class SessionStore:
    """In-process bearer token -> user_id map for logged-in users."""

    def __init__(self):
        self._sessions: Dict[str, int] = {}
        self._lock = threading.Lock()

    def create(self, user_id: int) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._sessions[token] = user_id
        return token

    def get(self, token: str) -> Optional[int]:
        with self._lock:
            return self._sessions.get(token)

    def revoke(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def revoke_user(self, user_id: int) -> None:
        with self._lock:
            for token in [t for t, uid in self._sessions.items() if uid == user_id]:
                del self._sessions[token]

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


sessions = SessionStore()


def get_token(authorization: Optional[str] = Header(None)) -> str:
    """FastAPI dependency: extract the bearer token from the Authorization header."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not logged in")
    return authorization.split(" ", 1)[1].strip()


def get_current_user(token: str = Depends(get_token), db: Session = Depends(get_db)) -> UserORM:
    """FastAPI dependency: resolve the logged-in user from the session token."""
    user_id = sessions.get(token)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    user = db.query(UserORM).filter(UserORM.user_id == user_id).first()
    if not user:
        sessions.revoke(token)
        raise HTTPException(status_code=401, detail="Not logged in")
    return user


def require_roles(*roles: str, message: str = "You do not have permission to perform this action."):
    """Return a dependency that only lets users with one of `roles` through."""
    def dependency(user: UserORM = Depends(get_current_user)) -> UserORM:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail=message)
        return user
    return dependency

"""Cookie-keyed session store and the login/guest/logout operations.

Sessions are rows in the ``sessions`` table so identity survives restarts and
is shared by every backend instance pointed at the same database. Login does
not check the password against anything: any non-empty username/password pair
yields a ``user`` session.
"""

import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.exceptions import StorageError, Unauthenticated, ValidationError
from app.models import UserSession
from app.observability import get_logger
from app.schemas import SessionUser

settings = get_settings()
log = get_logger(__name__)


class SessionStore:
    """Create, resolve and destroy persisted sessions."""

    def __init__(self, max_age_seconds: Optional[int] = None):
        self.max_age = timedelta(
            seconds=max_age_seconds if max_age_seconds is not None else settings.session_max_age_seconds
        )

    async def create(
        self, db: AsyncSession, user: SessionUser, replace_token: Optional[str] = None
    ) -> str:
        """Persist a session for ``user`` and return its cookie token.

        When ``replace_token`` names an existing session it is removed first,
        so a browser holds at most one session at a time.
        """
        token = secrets.token_urlsafe(32)
        now = datetime.utcnow()
        try:
            if replace_token:
                await db.execute(delete(UserSession).where(UserSession.id == replace_token))
            db.add(
                UserSession(
                    id=token,
                    username=user.username,
                    role=user.role,
                    created_at=now,
                    expires_at=now + self.max_age,
                )
            )
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            log.error("Failed to create session for {}: {}", user.username, exc)
            raise StorageError("Failed to create session") from exc

        log.info("Session created for {} ({})", user.username, user.role)
        return token

    async def get(self, db: AsyncSession, token: Optional[str]) -> Optional[SessionUser]:
        """Resolve a cookie token to its identity, or None if absent/expired."""
        if not token:
            return None

        try:
            result = await db.execute(select(UserSession).where(UserSession.id == token))
            record = result.scalar_one_or_none()
            if record is None:
                return None

            if record.is_expired(datetime.utcnow()):
                await db.delete(record)
                await db.commit()
                return None
        except SQLAlchemyError as exc:
            await db.rollback()
            log.error("Failed to load session: {}", exc)
            raise StorageError("Failed to load session") from exc

        return SessionUser(username=record.username, role=record.role)

    async def destroy(self, db: AsyncSession, token: Optional[str]) -> None:
        """Remove a session. Unknown or missing tokens are ignored."""
        if not token:
            return

        try:
            result = await db.execute(delete(UserSession).where(UserSession.id == token))
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            log.error("Failed to destroy session: {}", exc)
            raise StorageError("Failed to destroy session") from exc

        if result.rowcount:
            log.info("Session destroyed")

    async def purge_expired(self, db: AsyncSession) -> int:
        """Delete every expired session and return how many were removed."""
        result = await db.execute(
            delete(UserSession).where(UserSession.expires_at <= datetime.utcnow())
        )
        await db.commit()
        return result.rowcount or 0


session_store = SessionStore()


async def login(
    db: AsyncSession, username: Optional[str], password: Optional[str],
    current_token: Optional[str] = None,
) -> tuple[SessionUser, str]:
    """Start a ``user`` session for any non-empty credential pair."""
    if not username or not password:
        raise ValidationError("Missing credentials")

    user = SessionUser(username=username, role="user")
    token = await session_store.create(db, user, replace_token=current_token)
    return user, token


async def enter_as_guest(
    db: AsyncSession, current_token: Optional[str] = None
) -> tuple[SessionUser, str]:
    """Start a guest session. Always succeeds."""
    user = SessionUser.guest()
    token = await session_store.create(db, user, replace_token=current_token)
    return user, token


async def logout(db: AsyncSession, token: Optional[str]) -> None:
    await session_store.destroy(db, token)


async def who_am_i(db: AsyncSession, token: Optional[str]) -> SessionUser:
    """Return the session's identity or raise Unauthenticated."""
    user = await session_store.get(db, token)
    if user is None:
        raise Unauthenticated()
    return user

"""FastAPI dependencies resolving the session cookie to an identity."""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.database import get_db
from app.exceptions import Forbidden
from app.observability import bind_context
from app.schemas import SessionUser
from app.services import sessions

settings = get_settings()


def get_session_token(request: Request) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name)


async def get_optional_user(
    token: Optional[str] = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
) -> Optional[SessionUser]:
    """The session identity, or None. Used by page routes that redirect."""
    user = await sessions.session_store.get(db, token)
    if user is not None:
        bind_context(username=user.username)
    return user


async def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
) -> SessionUser:
    """The session identity; raises Unauthenticated (401) when absent."""
    user = await sessions.who_am_i(db, token)
    bind_context(username=user.username)
    return user


async def require_not_guest(
    user: SessionUser = Depends(get_current_user),
) -> SessionUser:
    """Refuse guests on routes that change server-side favorites."""
    if user.is_guest:
        raise Forbidden("Guests cannot modify saved favorites")
    return user

"""Routes for signing in, entering as guest and signing out."""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.database import get_db
from app.dependencies import get_session_token
from app.services import sessions

router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()

APP_PAGE = "/app"
LOGIN_PAGE = "/login"


async def _read_credentials(request: Request) -> tuple[Optional[str], Optional[str]]:
    """Pull username/password from a JSON body or an HTML form post."""
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            return None, None
        if not isinstance(body, dict):
            return None, None
    else:
        body = await request.form()

    username = body.get("username")
    password = body.get("password")
    return (
        username if isinstance(username, str) else None,
        password if isinstance(password, str) else None,
    )


def _set_session_cookie(response: RedirectResponse, token: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


@router.post("/login")
async def login(
    request: Request,
    token: Optional[str] = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
) -> RedirectResponse:
    """Start a user session. Missing username or password is a 400."""
    username, password = await _read_credentials(request)
    _, new_token = await sessions.login(db, username, password, current_token=token)

    response = RedirectResponse(APP_PAGE, status_code=303)
    _set_session_cookie(response, new_token)
    return response


@router.post("/guest")
async def guest(
    token: Optional[str] = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
) -> RedirectResponse:
    """Start a guest session whose favorites stay in the browser."""
    _, new_token = await sessions.enter_as_guest(db, current_token=token)

    response = RedirectResponse(APP_PAGE, status_code=303)
    _set_session_cookie(response, new_token)
    return response


@router.post("/logout")
async def logout(
    token: Optional[str] = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
) -> RedirectResponse:
    """End the session. Safe to call without one."""
    await sessions.logout(db, token)

    response = RedirectResponse(LOGIN_PAGE, status_code=303)
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return response

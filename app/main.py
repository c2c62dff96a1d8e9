"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.config import get_settings
from app.database import async_session, init_db
from app.dependencies import get_optional_user
from app.exceptions import SipSnapError
from app.middleware import RateLimitMiddleware, RequestLoggingMiddleware
from app.observability import get_logger, setup_logging
from app.routers import api, auth
from app.schemas import SessionUser
from app.services import session_store

settings = get_settings()
setup_logging(settings.log_level, settings.log_format)
log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    await init_db()
    async with async_session() as db:
        purged = await session_store.purge_expired(db)
    log.info("Database ready, {} expired session(s) purged", purged)
    yield


app = FastAPI(
    title="SipSnap",
    description="Browse cocktails, fetch a mood photo and keep favorites",
    version="0.1.0",
    lifespan=lifespan,
)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

app.add_middleware(RateLimitMiddleware, enabled=settings.rate_limit_enabled)
# Added last so it runs first and every log line carries the request id
app.add_middleware(RequestLoggingMiddleware)

app.include_router(auth.router)
app.include_router(api.router)


@app.exception_handler(SipSnapError)
async def sipsnap_error_handler(request: Request, exc: SipSnapError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("{} {} failed: {}", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse("/login", status_code=303)


@app.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    """Sign-in form with a guest entry button."""
    return templates.TemplateResponse(request, "login.html", {})


@app.get("/app", response_class=HTMLResponse)
async def app_page(
    request: Request, user: Optional[SessionUser] = Depends(get_optional_user)
):
    """Main page; sessions that are missing or expired go back to login."""
    if user is None:
        return RedirectResponse("/login", status_code=303)
    return templates.TemplateResponse(request, "index.html", {"user": user})


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}

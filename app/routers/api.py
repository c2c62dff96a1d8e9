"""JSON API: identity, mood image proxy and favorites."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user, require_not_guest
from app.schemas import FavoriteCreate, SessionUser
from app.services import favorites_store, unsplash_client

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/me")
async def me(user: SessionUser = Depends(get_current_user)) -> dict:
    """Return the identity of the current session."""
    return {"user": user.model_dump()}


@router.get("/unsplash")
async def mood_image(
    q: str = Query(default="", description="Search phrase"),
    user: SessionUser = Depends(get_current_user),
) -> dict:
    """Return one landscape photo URL for ``q`` (empty when none matched)."""
    return await unsplash_client.get_mood_image(q)


@router.get("/favorites")
async def list_favorites(
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    """Favorites of the signed-in user, newest first. Guests get []."""
    favorites = await favorites_store.list(db, user)
    return [f.to_dict() for f in favorites]


@router.post("/favorites")
async def create_favorite(
    body: FavoriteCreate,
    user: SessionUser = Depends(require_not_guest),
    db: AsyncSession = Depends(get_db),
) -> dict:
    saved = await favorites_store.create(db, user, body)
    return {"ok": True, "saved": saved.to_dict()}


@router.delete("/favorites/{favorite_id}")
async def delete_favorite(
    favorite_id: str,
    user: SessionUser = Depends(require_not_guest),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Delete a favorite owned by the caller. Unknown ids still succeed."""
    await favorites_store.delete(db, user, favorite_id)
    return {"ok": True}

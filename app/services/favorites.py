"""Favorites store for signed-in users.

Every operation is scoped to the session's username. Guests have no rows:
listing returns an empty list and mutations are refused.
"""

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import Forbidden, StorageError, ValidationError
from app.models import Favorite
from app.observability import get_logger
from app.schemas import FavoriteCreate, SessionUser

log = get_logger(__name__)


class FavoritesStore:
    """CRUD over the ``favourites`` table."""

    async def list(self, db: AsyncSession, user: SessionUser) -> list[Favorite]:
        """All favorites owned by ``user``, newest first."""
        if user.is_guest:
            return []

        try:
            result = await db.execute(
                select(Favorite)
                .where(Favorite.username == user.username)
                .order_by(Favorite.created_at.desc())
            )
        except SQLAlchemyError as exc:
            log.error("Failed to load favorites for {}: {}", user.username, exc)
            raise StorageError("Failed to load favorites") from exc

        return list(result.scalars().all())

    async def create(
        self, db: AsyncSession, user: SessionUser, data: FavoriteCreate
    ) -> Favorite:
        """Save a new favorite stamped with the caller's username."""
        self._require_not_guest(user)

        name = (data.cocktail_name or "").strip()
        if not name:
            raise ValidationError("cocktailName required")

        favorite = Favorite(
            username=user.username,
            cocktail_name=name,
            cocktail_image=data.cocktail_image or "",
            mood_image=data.mood_image or "",
            recipe_text=data.recipe_text or "",
        )
        try:
            db.add(favorite)
            await db.commit()
            await db.refresh(favorite)
        except SQLAlchemyError as exc:
            await db.rollback()
            log.error("Failed to save favorite for {}: {}", user.username, exc)
            raise StorageError("Failed to save favorite") from exc

        log.info("Saved favorite {} ({}) for {}", favorite.id, name, user.username)
        return favorite

    async def delete(self, db: AsyncSession, user: SessionUser, favorite_id: str) -> None:
        """Delete one favorite owned by ``user``.

        Ids that do not exist or belong to someone else are a silent no-op.
        """
        self._require_not_guest(user)

        try:
            result = await db.execute(
                delete(Favorite).where(
                    Favorite.id == favorite_id,
                    Favorite.username == user.username,
                )
            )
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            log.error("Failed to delete favorite {} for {}: {}", favorite_id, user.username, exc)
            raise StorageError("Failed to delete favorite") from exc

        log.info("Deleted {} favorite(s) with id {} for {}", result.rowcount, favorite_id, user.username)

    def _require_not_guest(self, user: SessionUser) -> None:
        if user.is_guest:
            raise Forbidden("Guests cannot modify saved favorites")


favorites_store = FavoritesStore()

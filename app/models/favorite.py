"""Favorite model for saved cocktail picks of signed-in users."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _new_id() -> str:
    return uuid4().hex


class Favorite(Base):
    """A cocktail saved by a named user.

    Rows are owned by the username stamped on them at creation. Every query
    and delete is scoped by ``username`` so one user never sees or removes
    another user's favorites. Guests never get rows here; their favorites
    stay in client-side storage.
    """

    __tablename__ = "favourites"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    username: Mapped[str] = mapped_column(String(200), index=True)
    cocktail_name: Mapped[str] = mapped_column(String(200))
    cocktail_image: Mapped[str] = mapped_column(String(1000), default="")
    mood_image: Mapped[str] = mapped_column(String(1000), default="")
    recipe_text: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def to_dict(self) -> dict:
        """Wire representation, camelCase as the browser client expects."""
        return {
            "id": self.id,
            "username": self.username,
            "cocktailName": self.cocktail_name,
            "cocktailImage": self.cocktail_image,
            "moodImage": self.mood_image,
            "recipeText": self.recipe_text,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

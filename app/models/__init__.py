"""Database models."""

from app.models.favorite import Favorite
from app.models.session import UserSession

__all__ = [
    "Favorite",
    "UserSession",
]

"""Backend services: sessions, favorites and the Unsplash proxy client."""

from app.services.favorites import favorites_store
from app.services.sessions import session_store
from app.services.unsplash_api import unsplash_client

__all__ = [
    "favorites_store",
    "session_store",
    "unsplash_client",
]

"""Session identity with the favorites capability chosen for it.

The role is inspected once, in ``resolve_identity``. Everything downstream
talks to ``identity.favorites`` without knowing which store sits behind it.
"""

from dataclasses import dataclass
from typing import Protocol

from app.client.backend import BackendClient
from app.client.guest_favorites import GuestFavorites
from app.client.storage import Storage


class FavoritesCapability(Protocol):
    label: str

    async def load(self) -> list[dict]: ...

    async def save(self, entry: dict) -> list[dict]: ...

    async def delete(self, favorite_id: str) -> list[dict]: ...


class PersistentFavoritesCapability:
    """Favorites kept by the backend for a signed-in user."""

    label = "account"

    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def load(self) -> list[dict]:
        return await self.backend.list_favorites()

    async def save(self, entry: dict) -> list[dict]:
        await self.backend.create_favorite(entry)
        return await self.load()

    async def delete(self, favorite_id: str) -> list[dict]:
        await self.backend.delete_favorite(favorite_id)
        return await self.load()


class LocalFavoritesCapability:
    """Favorites kept in local storage for a guest. No network calls."""

    label = "guest/local storage"

    def __init__(self, guest_favorites: GuestFavorites):
        self.guest_favorites = guest_favorites

    async def load(self) -> list[dict]:
        return self.guest_favorites.list()

    async def save(self, entry: dict) -> list[dict]:
        return self.guest_favorites.save(entry)

    async def delete(self, favorite_id: str) -> list[dict]:
        return self.guest_favorites.delete(favorite_id)


@dataclass
class UserIdentity:
    username: str
    role: str
    favorites: FavoritesCapability

    @property
    def is_guest(self) -> bool:
        return self.role == "guest"

    @property
    def badge(self) -> str:
        if self.is_guest:
            return "Guest mode"
        return f"Signed in: {self.username}"


async def resolve_identity(backend: BackendClient, storage: Storage) -> UserIdentity:
    """Ask the backend who we are and attach the matching favorites store.

    Raises:
        LoginRequired: there is no valid session.
    """
    user = await backend.me()
    if user.get("role") == "guest":
        favorites: FavoritesCapability = LocalFavoritesCapability(GuestFavorites(storage))
    else:
        favorites = PersistentFavoritesCapability(backend)
    return UserIdentity(username=user.get("username", ""), role=user.get("role", ""), favorites=favorites)

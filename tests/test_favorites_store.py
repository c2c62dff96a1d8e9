"""Unit tests for the favorites store."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.exceptions import Forbidden, StorageError, ValidationError
from app.models import Favorite
from app.schemas import FavoriteCreate, SessionUser
from app.services.favorites import FavoritesStore

ALICE = SessionUser(username="alice", role="user")
BOB = SessionUser(username="bob", role="user")
GUEST = SessionUser.guest()


@pytest.fixture
def store():
    return FavoritesStore()


class TestList:
    @pytest.mark.asyncio
    async def test_only_own_favorites_newest_first(self, db_session, store):
        base = datetime(2026, 3, 1, 12, 0, 0)
        db_session.add_all([
            Favorite(username="alice", cocktail_name="Old", created_at=base),
            Favorite(username="alice", cocktail_name="New", created_at=base + timedelta(hours=2)),
            Favorite(username="alice", cocktail_name="Mid", created_at=base + timedelta(hours=1)),
            Favorite(username="bob", cocktail_name="Bob's", created_at=base + timedelta(hours=3)),
        ])
        await db_session.commit()

        favorites = await store.list(db_session, ALICE)

        assert [f.cocktail_name for f in favorites] == ["New", "Mid", "Old"]
        assert all(f.username == "alice" for f in favorites)

    @pytest.mark.asyncio
    async def test_guest_gets_empty_list(self, db_session, store):
        # A row that happens to carry the guest username is still not listed
        db_session.add(Favorite(username="Guest", cocktail_name="Sneaky"))
        await db_session.commit()

        assert await store.list(db_session, GUEST) == []

    @pytest.mark.asyncio
    async def test_user_without_favorites(self, db_session, store):
        assert await store.list(db_session, BOB) == []

    @pytest.mark.asyncio
    async def test_database_failure_becomes_storage_error(self, store):
        db = AsyncMock()
        db.execute.side_effect = OperationalError("SELECT", {}, Exception("db down"))

        with pytest.raises(StorageError) as exc_info:
            await store.list(db, ALICE)

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to load favorites"


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_stamps_username_and_defaults(self, db_session, store):
        saved = await store.create(
            db_session, ALICE, FavoriteCreate(cocktailName="Margarita")
        )

        assert saved.username == "alice"
        assert saved.cocktail_name == "Margarita"
        assert saved.cocktail_image == ""
        assert saved.mood_image == ""
        assert saved.recipe_text == ""
        assert saved.created_at is not None

    @pytest.mark.asyncio
    async def test_create_keeps_optional_fields(self, db_session, store):
        saved = await store.create(
            db_session,
            ALICE,
            FavoriteCreate(
                cocktailName="Mojito",
                cocktailImage="https://img/mojito.jpg",
                moodImage="https://img/beach.jpg",
                recipeText="Ingredients:\n• Mint\n\nMuddle.",
            ),
        )

        assert saved.cocktail_image == "https://img/mojito.jpg"
        assert saved.mood_image == "https://img/beach.jpg"
        assert saved.recipe_text == "Ingredients:\n• Mint\n\nMuddle."

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", [None, "", "   "])
    async def test_missing_name_is_rejected(self, db_session, store, name):
        with pytest.raises(ValidationError) as exc_info:
            await store.create(db_session, ALICE, FavoriteCreate(cocktailName=name))

        assert exc_info.value.message == "cocktailName required"
        result = await db_session.execute(select(Favorite))
        assert result.scalars().all() == []

    @pytest.mark.asyncio
    async def test_guest_is_forbidden(self, db_session, store):
        with pytest.raises(Forbidden) as exc_info:
            await store.create(db_session, GUEST, FavoriteCreate(cocktailName="Mojito"))

        assert exc_info.value.status_code == 403


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_own_favorite(self, db_session, store):
        saved = await store.create(db_session, ALICE, FavoriteCreate(cocktailName="Gimlet"))

        await store.delete(db_session, ALICE, saved.id)

        assert await store.list(db_session, ALICE) == []

    @pytest.mark.asyncio
    async def test_delete_other_users_favorite_has_no_effect(self, db_session, store):
        saved = await store.create(db_session, BOB, FavoriteCreate(cocktailName="Sazerac"))

        await store.delete(db_session, ALICE, saved.id)

        remaining = await store.list(db_session, BOB)
        assert [f.id for f in remaining] == [saved.id]

    @pytest.mark.asyncio
    async def test_delete_unknown_id_is_silent(self, db_session, store):
        await store.delete(db_session, ALICE, "does-not-exist")

    @pytest.mark.asyncio
    async def test_delete_removes_at_most_one(self, db_session, store):
        first = await store.create(db_session, ALICE, FavoriteCreate(cocktailName="Negroni"))
        second = await store.create(db_session, ALICE, FavoriteCreate(cocktailName="Negroni"))

        await store.delete(db_session, ALICE, first.id)

        remaining = await store.list(db_session, ALICE)
        assert [f.id for f in remaining] == [second.id]

    @pytest.mark.asyncio
    async def test_guest_is_forbidden(self, db_session, store):
        with pytest.raises(Forbidden):
            await store.delete(db_session, GUEST, "anything")

    @pytest.mark.asyncio
    async def test_database_failure_rolls_back(self, store):
        db = AsyncMock()
        db.execute.side_effect = OperationalError("DELETE", {}, Exception("locked"))

        with pytest.raises(StorageError) as exc_info:
            await store.delete(db, ALICE, "abc")

        db.rollback.assert_awaited_once()
        assert exc_info.value.message == "Failed to delete favorite"

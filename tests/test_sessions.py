"""Unit tests for the session store and login/guest/logout operations."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import Unauthenticated, ValidationError
from app.models import UserSession
from app.schemas import SessionUser
from app.services import sessions
from app.services.sessions import SessionStore


class TestLogin:
    """Tests for login credential handling."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username,password",
        [("alice", "secret"), ("Bob Smith", "x"), ("  spaced  ", "p w")],
    )
    async def test_any_non_empty_pair_logs_in(self, db_session, username, password):
        """Credentials are not verified; any non-empty pair gives a user session."""
        user, token = await sessions.login(db_session, username, password)

        assert user.username == username
        assert user.role == "user"
        assert token

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username,password",
        [("", "secret"), ("alice", ""), (None, "secret"), ("alice", None), (None, None)],
    )
    async def test_missing_field_is_rejected(self, db_session, username, password):
        with pytest.raises(ValidationError) as exc_info:
            await sessions.login(db_session, username, password)

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_rejected_login_creates_no_session(self, db_session):
        with pytest.raises(ValidationError):
            await sessions.login(db_session, "alice", "")

        result = await db_session.execute(select(UserSession))
        assert result.scalars().all() == []


class TestGuest:
    @pytest.mark.asyncio
    async def test_guest_identity_is_fixed(self, db_session):
        user, token = await sessions.enter_as_guest(db_session)

        assert user == SessionUser(username="Guest", role="guest")
        assert user.is_guest is True
        assert token

    @pytest.mark.asyncio
    async def test_each_guest_entry_gets_own_token(self, db_session):
        _, first = await sessions.enter_as_guest(db_session)
        _, second = await sessions.enter_as_guest(db_session)

        assert first != second


class TestSessionStore:
    """Tests for persisted session lookup and removal."""

    @pytest.mark.asyncio
    async def test_who_am_i_resolves_token(self, db_session):
        _, token = await sessions.login(db_session, "alice", "pw")

        user = await sessions.who_am_i(db_session, token)

        assert user.username == "alice"
        assert user.role == "user"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "unknown-token"])
    async def test_who_am_i_without_valid_token(self, db_session, token):
        with pytest.raises(Unauthenticated):
            await sessions.who_am_i(db_session, token)

    @pytest.mark.asyncio
    async def test_session_survives_new_store_instance(self, session_factory):
        """Sessions live in the database, not in the store object."""
        async with session_factory() as db:
            token = await SessionStore().create(db, SessionUser(username="dana", role="user"))

        async with session_factory() as db:
            user = await SessionStore().get(db, token)

        assert user == SessionUser(username="dana", role="user")

    @pytest.mark.asyncio
    async def test_login_replaces_previous_session(self, db_session):
        _, guest_token = await sessions.enter_as_guest(db_session)

        _, user_token = await sessions.login(
            db_session, "alice", "pw", current_token=guest_token
        )

        assert await sessions.session_store.get(db_session, guest_token) is None
        assert (await sessions.session_store.get(db_session, user_token)).username == "alice"

    @pytest.mark.asyncio
    async def test_logout_removes_session(self, db_session):
        _, token = await sessions.login(db_session, "alice", "pw")

        await sessions.logout(db_session, token)

        with pytest.raises(Unauthenticated):
            await sessions.who_am_i(db_session, token)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "never-issued"])
    async def test_logout_is_idempotent(self, db_session, token):
        await sessions.logout(db_session, token)
        await sessions.logout(db_session, token)

    @pytest.mark.asyncio
    async def test_expired_session_is_treated_as_absent(self, db_session: AsyncSession):
        now = datetime.utcnow()
        db_session.add(UserSession(
            id="stale", username="alice", role="user",
            created_at=now - timedelta(days=30), expires_at=now - timedelta(days=1),
        ))
        await db_session.commit()

        assert await sessions.session_store.get(db_session, "stale") is None

        result = await db_session.execute(select(UserSession).where(UserSession.id == "stale"))
        assert result.scalar_one_or_none() is None

    @pytest.mark.asyncio
    async def test_purge_expired(self, db_session: AsyncSession):
        store = SessionStore(max_age_seconds=3600)
        live = await store.create(db_session, SessionUser(username="alice", role="user"))
        now = datetime.utcnow()
        db_session.add(UserSession(
            id="stale", username="bob", role="user",
            created_at=now - timedelta(days=2), expires_at=now - timedelta(days=1),
        ))
        await db_session.commit()

        removed = await store.purge_expired(db_session)

        assert removed == 1
        assert await store.get(db_session, live) is not None

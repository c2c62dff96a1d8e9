"""HTTP client for the SipSnap backend.

Holds one httpx client for its whole life so the session cookie set by the
auth routes is sent on every later call.
"""

from typing import Optional

import httpx

from app.client.errors import BackendError, LoginRequired


class BackendClient:
    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._http = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            follow_redirects=False,
            timeout=30.0,
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @staticmethod
    def _raise_for_error(response: httpx.Response, fallback: str) -> None:
        if response.status_code < 400:
            return
        try:
            message = response.json().get("error") or fallback
        except (ValueError, AttributeError):
            message = response.text or fallback
        if response.status_code == 401:
            raise LoginRequired(message)
        raise BackendError(message, response.status_code)

    async def login(self, username: str, password: str) -> None:
        response = await self._http.post(
            "/auth/login", data={"username": username, "password": password}
        )
        self._raise_for_error(response, "Login failed")

    async def enter_as_guest(self) -> None:
        response = await self._http.post("/auth/guest")
        self._raise_for_error(response, "Guest entry failed")

    async def logout(self) -> None:
        response = await self._http.post("/auth/logout")
        self._raise_for_error(response, "Logout failed")

    async def me(self) -> dict:
        """Current session identity; raises LoginRequired without one."""
        response = await self._http.get("/api/me")
        self._raise_for_error(response, "Not logged in")
        return response.json()["user"]

    async def mood_image(self, query: str) -> str:
        response = await self._http.get("/api/unsplash", params={"q": query})
        self._raise_for_error(response, "Mood image failed")
        return response.json().get("imageUrl") or ""

    async def list_favorites(self) -> list[dict]:
        response = await self._http.get("/api/favorites")
        self._raise_for_error(response, "Load failed")
        return response.json()

    async def create_favorite(self, entry: dict) -> dict:
        response = await self._http.post("/api/favorites", json=entry)
        self._raise_for_error(response, "Save failed")
        return response.json()["saved"]

    async def delete_favorite(self, favorite_id: str) -> None:
        response = await self._http.delete(f"/api/favorites/{favorite_id}")
        self._raise_for_error(response, "Delete failed")

"""Unsplash client that picks one mood photograph for a search phrase.

The access key stays on the server; browsers only ever see the image URL.
"""

import httpx

from app.config import get_settings
from app.exceptions import ServerMisconfigured, UpstreamError
from app.observability import get_logger

settings = get_settings()
log = get_logger(__name__)

DEFAULT_QUERY = "cocktail mood"


class UnsplashClient:
    """Client for the Unsplash photo search API."""

    def __init__(self):
        self.base_url = settings.unsplash_api_base_url
        self.access_key = settings.unsplash_access_key

    def _get_headers(self) -> dict:
        return {"Authorization": f"Client-ID {self.access_key}"}

    async def get_mood_image(self, query: str | None) -> dict:
        """Search for a single landscape photo matching ``query``.

        Returns:
            ``{"imageUrl": url}``; the URL is empty when nothing matched.

        Raises:
            ServerMisconfigured: no access key is configured.
            UpstreamError: Unsplash answered with a non-success status
                (passed through), or could not be reached or sent an
                unreadable reply (status 500).
        """
        if not self.access_key:
            raise ServerMisconfigured("Missing UNSPLASH_ACCESS_KEY")

        q = (query or "").strip() or DEFAULT_QUERY

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{self.base_url}/search/photos",
                    headers=self._get_headers(),
                    params={
                        "query": q,
                        "per_page": 1,
                        "orientation": "landscape",
                    },
                    timeout=30.0,
                )
        except httpx.HTTPError as exc:
            log.warning("Unsplash unreachable for {!r}: {}", q, exc)
            raise UpstreamError("Unsplash proxy error", status_code=500, details=str(exc)) from exc

        if not response.is_success:
            log.warning("Unsplash returned {} for {!r}", response.status_code, q)
            raise UpstreamError(
                "Unsplash failed", status_code=response.status_code, details=response.text
            )

        try:
            results = response.json().get("results") or []
            if not results:
                return {"imageUrl": ""}
            return {"imageUrl": (results[0].get("urls") or {}).get("regular", "")}
        except (ValueError, AttributeError, TypeError, KeyError) as exc:
            log.warning("Unreadable Unsplash reply for {!r}: {}", q, exc)
            raise UpstreamError("Unsplash proxy error", status_code=500, details=str(exc)) from exc


unsplash_client = UnsplashClient()

"""Drives the SipSnap client: browsing, picking a drink, mood images, favorites.

Handlers take the ``AppState`` they act on and return it. Failures land in
``state.message`` and never disturb the current pick; each new action
clears the previous message.
"""

from typing import Optional

from app.client.backend import BackendClient
from app.client.catalog import CocktailDBClient, build_recipe_text, prepare_for_display
from app.client.debounce import SEARCH_QUIET_PERIOD, Debouncer, QueryAction, classify_query
from app.client.errors import ClientError
from app.client.identity import resolve_identity
from app.client.state import DEFAULT_LETTER, AppState, CurrentPick
from app.client.storage import Storage
from app.observability import get_logger

log = get_logger(__name__)

FALLBACK_MOOD_QUERY = "cocktail mood aesthetic"


class Orchestrator:
    def __init__(
        self,
        catalog: CocktailDBClient,
        backend: BackendClient,
        storage: Storage,
        quiet_period: float = SEARCH_QUIET_PERIOD,
    ):
        self.catalog = catalog
        self.backend = backend
        self.storage = storage
        self._debouncer: Debouncer[tuple[AppState, str]] = Debouncer(
            quiet_period, self._run_search
        )

    async def start(self) -> AppState:
        """Resolve the session and load the default view.

        Raises:
            LoginRequired: no valid session; send the user to sign in.
        """
        identity = await resolve_identity(self.backend, self.storage)
        state = AppState(identity=identity)
        log.info("Client started for {} ({})", identity.username, identity.role)
        await self.browse_letter(state, DEFAULT_LETTER)
        grid_message = state.message
        await self.load_favorites(state)
        state.message = state.message or grid_message
        return state

    # Grid

    async def browse_letter(self, state: AppState, letter: str) -> AppState:
        state.message = ""
        state.grid_request += 1
        request = state.grid_request
        try:
            entries = await self.catalog.browse_by_letter(letter)
        except ClientError as exc:
            return self._fail(state, exc, request)
        if request == state.grid_request:
            state.grid = prepare_for_display(entries)
        return state

    async def search(self, state: AppState, text: str) -> AppState:
        state.message = ""
        state.grid_request += 1
        request = state.grid_request
        try:
            entries = await self.catalog.search_by_name(text)
        except ClientError as exc:
            return self._fail(state, exc, request)
        if request == state.grid_request:
            state.grid = prepare_for_display(entries)
        return state

    def on_search_input(self, state: AppState, text: str) -> AppState:
        """Record a keystroke; the search runs once typing pauses."""
        state.search_text = text
        self._debouncer.push((state, text))
        return state

    async def wait_for_search(self) -> None:
        await self._debouncer.wait()

    async def _run_search(self, payload: tuple[AppState, str]) -> None:
        state, text = payload
        action, q = classify_query(text)
        if action is QueryAction.BROWSE:
            await self.browse_letter(state, state.letter or DEFAULT_LETTER)
        elif action is QueryAction.SEARCH:
            state.letter = ""
            await self.search(state, q)

    async def change_letter(self, state: AppState, letter: str) -> AppState:
        if not letter:
            return state
        self._debouncer.cancel()
        state.search_text = ""
        state.letter = letter
        return await self.browse_letter(state, letter)

    async def clear(self, state: AppState) -> AppState:
        """Forget the pick and go back to browsing the default letter."""
        self._debouncer.cancel()
        state.pick = CurrentPick()
        state.search_text = ""
        state.letter = DEFAULT_LETTER
        state.scroll_to_pick = False
        return await self.browse_letter(state, DEFAULT_LETTER)

    # Current pick

    async def select_cocktail(self, state: AppState, drink_id: str) -> AppState:
        state.message = ""
        try:
            entry = await self.catalog.lookup_by_id(drink_id)
        except ClientError as exc:
            return self._fail(state, exc)
        if entry is None:
            return state

        state.pick = CurrentPick(
            id=entry.id,
            name=entry.name or "Unnamed cocktail",
            thumbnail=entry.thumbnail,
            recipe_text=build_recipe_text(entry),
        )
        await self.refresh_mood_image(state)
        state.scroll_to_pick = True
        return state

    async def refresh_mood_image(self, state: AppState) -> AppState:
        state.message = ""
        pick = state.pick
        if pick.is_selected:
            query = f"{pick.name.strip()} cocktail mood"
        else:
            query = FALLBACK_MOOD_QUERY

        try:
            url = await self.backend.mood_image(query)
        except ClientError as exc:
            return self._fail(state, exc)

        # A newer selection may have replaced the pick meanwhile
        if state.pick is pick:
            pick.mood_image = url
        return state

    # Favorites

    async def load_favorites(self, state: AppState) -> AppState:
        state.message = ""
        try:
            state.favorites = await state.identity.favorites.load()
        except ClientError as exc:
            return self._fail(state, exc)
        return state

    async def save_favorite(self, state: AppState) -> AppState:
        """Save the current pick. Does nothing when no drink is selected."""
        if not state.pick.is_selected:
            return state
        state.message = ""
        try:
            state.favorites = await state.identity.favorites.save(state.pick.to_favorite())
        except ClientError as exc:
            return self._fail(state, exc)
        return state

    async def delete_favorite(self, state: AppState, favorite_id: str) -> AppState:
        state.message = ""
        try:
            state.favorites = await state.identity.favorites.delete(favorite_id)
        except ClientError as exc:
            return self._fail(state, exc)
        return state

    def _fail(self, state: AppState, exc: ClientError, request: Optional[int] = None) -> AppState:
        # Errors from superseded grid loads are stale too
        if request is not None and request != state.grid_request:
            return state
        log.warning("Client action failed: {}", exc.message)
        state.message = exc.message
        return state

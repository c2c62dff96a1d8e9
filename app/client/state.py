"""Client application state.

One ``AppState`` per running client, owned by whoever drives the
orchestrator and handed to each of its handlers.
"""

from dataclasses import dataclass, field
from typing import Optional

from app.client.catalog import DisplayList
from app.client.identity import UserIdentity

PLACEHOLDER_NAME = "No cocktail yet"
DEFAULT_LETTER = "a"


@dataclass
class CurrentPick:
    """The drink currently shown in the pick card."""

    id: Optional[str] = None
    name: str = PLACEHOLDER_NAME
    thumbnail: str = ""
    recipe_text: str = ""
    mood_image: str = ""

    @property
    def is_selected(self) -> bool:
        name = self.name.strip()
        return bool(name) and name != PLACEHOLDER_NAME

    def to_favorite(self) -> dict:
        return {
            "cocktailName": self.name.strip(),
            "cocktailImage": self.thumbnail,
            "moodImage": self.mood_image,
            "recipeText": self.recipe_text.strip(),
        }


@dataclass
class AppState:
    identity: Optional[UserIdentity] = None
    pick: CurrentPick = field(default_factory=CurrentPick)
    grid: DisplayList = field(default_factory=DisplayList)
    favorites: list[dict] = field(default_factory=list)
    letter: str = DEFAULT_LETTER
    search_text: str = ""
    message: Optional[str] = None
    scroll_to_pick: bool = False
    # Bumped for every grid load; older responses are dropped on arrival
    grid_request: int = 0

"""Request and identity schemas shared by routes and services."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

GUEST_USERNAME = "Guest"


class SessionUser(BaseModel):
    """Identity carried by a session: a named user or the guest."""

    username: str
    role: Literal["user", "guest"]

    @property
    def is_guest(self) -> bool:
        return self.role == "guest"

    @classmethod
    def guest(cls) -> "SessionUser":
        return cls(username=GUEST_USERNAME, role="guest")


class FavoriteCreate(BaseModel):
    """Body of ``POST /api/favorites``.

    Every field is optional at the schema level so a missing name is reported
    by the favorites service as a 400 rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    cocktail_name: Optional[str] = Field(default=None, alias="cocktailName")
    cocktail_image: Optional[str] = Field(default=None, alias="cocktailImage")
    mood_image: Optional[str] = Field(default=None, alias="moodImage")
    recipe_text: Optional[str] = Field(default=None, alias="recipeText")

"""TheCocktailDB client plus the helpers that shape results for display."""

from dataclasses import dataclass, field
from typing import Optional

import httpx

from app.client.errors import CatalogError
from app.config import get_settings
from app.observability import get_logger

settings = get_settings()
log = get_logger(__name__)

INGREDIENT_SLOTS = 15
DISPLAY_LIMIT = 60


@dataclass
class CatalogEntry:
    """One drink as returned by the catalog.

    ``ingredients`` holds the raw (ingredient, measure) pair for every slot
    present in the payload, in slot order, blanks included.
    """

    id: str
    name: str
    thumbnail: str = ""
    instructions: str = ""
    ingredients: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def from_api(cls, drink: dict) -> "CatalogEntry":
        ingredients = [
            (drink.get(f"strIngredient{i}") or "", drink.get(f"strMeasure{i}") or "")
            for i in range(1, INGREDIENT_SLOTS + 1)
        ]
        return cls(
            id=str(drink.get("idDrink") or ""),
            name=drink.get("strDrink") or "",
            thumbnail=drink.get("strDrinkThumb") or "",
            instructions=drink.get("strInstructions") or "",
            ingredients=ingredients,
        )


@dataclass
class DisplayList:
    """Entries to render plus the size of the full match set."""

    items: list[CatalogEntry] = field(default_factory=list)
    total: int = 0

    @property
    def is_empty(self) -> bool:
        return self.total == 0


def prepare_for_display(entries: list[CatalogEntry], limit: int = DISPLAY_LIMIT) -> DisplayList:
    """Sort case-insensitively by name and cap at ``limit`` entries.

    The cap bounds render cost only; ``total`` still counts every match.
    """
    ordered = sorted(entries, key=lambda e: e.name.casefold())
    return DisplayList(items=ordered[:limit], total=len(entries))


def build_recipe_text(entry: CatalogEntry) -> str:
    """Render ingredients and instructions as one block of text.

    Slots with a blank ingredient are skipped whatever their measure. The
    "Ingredients:" header and the blank separator line only appear when at
    least one ingredient line exists.
    """
    lines = []
    for ingredient, measure in entry.ingredients[:INGREDIENT_SLOTS]:
        ingredient = ingredient.strip()
        if not ingredient:
            continue
        line = f"{measure.strip()} {ingredient}".strip()
        lines.append(f"• {line}")

    instructions = entry.instructions.strip()
    if not lines:
        return instructions
    return "Ingredients:\n" + "\n".join(lines) + "\n\n" + instructions


class CocktailDBClient:
    """Read-only client for TheCocktailDB."""

    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url or settings.cocktaildb_api_base_url
        self._transport = transport

    async def _get(self, path: str, params: dict) -> list[dict]:
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}/{path}", params=params, timeout=30.0
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            log.warning("Catalog request {} {} failed: {}", path, params, exc)
            raise CatalogError("Could not reach the cocktail catalog") from exc

        # The catalog answers "drinks": null when nothing matches
        drinks = data.get("drinks") if isinstance(data, dict) else None
        return drinks if isinstance(drinks, list) else []

    async def browse_by_letter(self, letter: str) -> list[CatalogEntry]:
        """All drinks whose name starts with ``letter``."""
        drinks = await self._get("search.php", {"f": letter})
        return [CatalogEntry.from_api(d) for d in drinks]

    async def search_by_name(self, text: str) -> list[CatalogEntry]:
        """Drinks whose name matches ``text``. Blank text makes no request."""
        q = text.strip()
        if not q:
            return []
        drinks = await self._get("search.php", {"s": q})
        return [CatalogEntry.from_api(d) for d in drinks]

    async def lookup_by_id(self, drink_id: str) -> Optional[CatalogEntry]:
        """Full detail for one drink, or None when the id is unknown."""
        drinks = await self._get("lookup.php", {"i": drink_id})
        if not drinks:
            return None
        return CatalogEntry.from_api(drinks[0])

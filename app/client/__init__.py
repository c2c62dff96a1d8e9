"""Client side of SipSnap: catalog browsing, guest storage and the orchestrator."""

from app.client.backend import BackendClient
from app.client.catalog import CocktailDBClient
from app.client.orchestrator import Orchestrator
from app.client.state import AppState
from app.client.storage import FileStorage, MemoryStorage

__all__ = [
    "AppState",
    "BackendClient",
    "CocktailDBClient",
    "FileStorage",
    "MemoryStorage",
    "Orchestrator",
]

"""
Storage backends for the shopping list.

The engine persists its whole list as one serialized record under a single
key. Backends only move that text in and out; parsing stays in the engine so
malformed data is handled in one place.

- InMemoryStorage: process-local, for tests
- JsonFileStorage: one ``<key>.json`` file in a directory
- SqliteStorage: one row per (user, key) in the application database
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union
import logging

from ..data.database import DatabaseInterface

logger = logging.getLogger(__name__)

DEFAULT_KEY = "panier"


class ShoppingListStorage(ABC):
    """Abstract key-value slot holding the serialized shopping list."""

    key: str = DEFAULT_KEY

    @abstractmethod
    def load(self) -> Optional[str]:
        """Return the stored text, or None if nothing was ever saved."""
        pass

    @abstractmethod
    def save(self, value: str) -> None:
        """Replace the stored text."""
        pass


class InMemoryStorage(ShoppingListStorage):
    """Keeps the record in memory. Nothing survives the process."""

    def __init__(self, value: Optional[str] = None, key: str = DEFAULT_KEY):
        self.key = key
        self.value = value
        self.save_count = 0

    def load(self) -> Optional[str]:
        return self.value

    def save(self, value: str) -> None:
        self.value = value
        self.save_count += 1


class JsonFileStorage(ShoppingListStorage):
    """Stores the record as ``<directory>/<key>.json``."""

    def __init__(self, directory: Union[str, Path], key: str = DEFAULT_KEY):
        self.key = key
        self.directory = Path(directory)
        self.path = self.directory / f"{key}.json"

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def save(self, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.path.write_text(value, encoding="utf-8")
        logger.debug(f"Wrote shopping list to {self.path}")


class SqliteStorage(ShoppingListStorage):
    """Stores the record in the ``shopping_lists`` table, scoped to one user."""

    def __init__(self, db: DatabaseInterface, user_id: int, key: str = DEFAULT_KEY):
        self.db = db
        self.user_id = user_id
        self.key = key

    def load(self) -> Optional[str]:
        return self.db.get_shopping_list(self.user_id, self.key)

    def save(self, value: str) -> None:
        self.db.save_shopping_list(self.user_id, self.key, value)

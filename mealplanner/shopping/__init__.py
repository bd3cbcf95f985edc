"""Shopping list: recipe groups with serving scaling plus manual items."""

from .engine import ShoppingListEngine, RecipeGroup, ManualItem, display_quantity
from .storage import ShoppingListStorage, InMemoryStorage, JsonFileStorage, SqliteStorage

__all__ = [
    "ShoppingListEngine",
    "RecipeGroup",
    "ManualItem",
    "display_quantity",
    "ShoppingListStorage",
    "InMemoryStorage",
    "JsonFileStorage",
    "SqliteStorage",
]

"""
Data models for the Meal Planner.

These models define the core entities used throughout the system:
- Ingredient: name / quantity / unit triple shared by recipes and shopping lists
- Recipe: predefined catalogue recipes
- CustomRecipe: user-authored recipes
- MealPlanning: one scheduled meal (date + slot) for a user
- User: authentication record

JSON field names follow the client's camelCase contract (``prepTime``,
``recipeId`` ...); Python attributes stay snake_case.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Dict, Any, Union


MEAL_SLOTS = ["petit-dejeuner", "dejeuner", "diner", "collation"]
DEFAULT_SLOT = "diner"

RECIPE_SOURCES = ["predefined", "custom"]

# Minimum rating for a catalogue recipe to be shown as certified
CERTIFIED_RATING = 4.8


def _iso(value: Union[datetime, str, None]) -> Optional[str]:
    """Normalize a stored timestamp to its ISO string form."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _parse_dt(value: Union[datetime, str, None]) -> datetime:
    if isinstance(value, datetime):
        return value
    if value:
        return datetime.fromisoformat(value)
    return datetime.now()


@dataclass
class Ingredient:
    """An ingredient line as authored in a recipe.

    ``quantity`` may be a number, a numeric string ("300") or free text
    ("to taste"); ``unit`` may be empty.
    """
    name: str
    quantity: Union[str, int, float] = ""
    unit: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "quantity": self.quantity, "unit": self.unit}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ingredient":
        return cls(
            name=data.get("name", ""),
            quantity=data.get("quantity", ""),
            unit=data.get("unit") or "",
        )


@dataclass
class Recipe:
    """Predefined recipe from the catalogue."""

    id: int
    name: str
    type: str = ""
    cuisine: str = ""
    difficulty: str = ""
    prep_time: int = 0
    cook_time: int = 0
    servings: int = 1
    image: Optional[str] = None
    ingredients: List[Ingredient] = field(default_factory=list)
    steps: List[str] = field(default_factory=list)
    rating: float = 0.0
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def total_time(self) -> int:
        """Preparation plus cooking time in minutes."""
        return (self.prep_time or 0) + (self.cook_time or 0)

    @property
    def is_certified(self) -> bool:
        return (self.rating or 0) >= CERTIFIED_RATING

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on name, cuisine or type."""
        q = query.lower()
        return (
            q in self.name.lower()
            or q in (self.cuisine or "").lower()
            or q in (self.type or "").lower()
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "cuisine": self.cuisine,
            "difficulty": self.difficulty,
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "servings": self.servings,
            "image": self.image,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "steps": self.steps,
            "rating": self.rating,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipe":
        """Create Recipe from a catalogue/JSON dictionary."""
        return cls(
            id=int(data["id"]),
            name=data["name"],
            type=data.get("type") or "",
            cuisine=data.get("cuisine") or "",
            difficulty=data.get("difficulty") or "",
            prep_time=data.get("prepTime") or 0,
            cook_time=data.get("cookTime") or 0,
            servings=data.get("servings") or 1,
            image=data.get("image"),
            ingredients=[Ingredient.from_dict(i) for i in data.get("ingredients") or []],
            steps=list(data.get("steps") or []),
            rating=float(data.get("rating") or 0),
            created_at=_parse_dt(data.get("createdAt")),
            updated_at=_parse_dt(data.get("updatedAt")),
        )


@dataclass
class CustomRecipe:
    """Recipe authored by, and only visible to, one user."""

    id: str
    user_id: int
    name: str
    type: Optional[str] = None
    cuisine: Optional[str] = None
    difficulty: Optional[str] = None
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: Optional[int] = None
    image: Optional[str] = None
    ingredients: List[Ingredient] = field(default_factory=list)
    steps: List[str] = field(default_factory=list)
    rating: Optional[float] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "type": self.type,
            "cuisine": self.cuisine,
            "difficulty": self.difficulty,
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "servings": self.servings,
            "image": self.image,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "steps": self.steps,
            "rating": float(self.rating) if self.rating else None,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass
class MealPlanning:
    """A recipe scheduled for a date and meal slot."""

    id: str
    user_id: int
    date: str  # ISO format: "2025-01-20"
    recipe_id: str
    source: str  # "predefined" or "custom"
    slot: Optional[str] = DEFAULT_SLOT
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "date": self.date,
            "slot": self.slot,
            "recipeId": self.recipe_id,
            "source": self.source,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass
class User:
    """Registered user. The password hash never leaves the server."""

    id: int
    username: str
    password_hash: str
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "createdAt": _iso(self.created_at),
        }

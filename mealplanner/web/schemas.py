"""
Request bodies for the JSON API.

Field names on the wire are camelCase; models expose snake_case attributes.
"""

from datetime import date
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

MealSlot = Literal["petit-dejeuner", "dejeuner", "diner", "collation"]
RecipeSource = Literal["predefined", "custom"]


class RequestModel(BaseModel):
    """Base for request bodies: accepts aliases or field names, ignores extras."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class IngredientIn(RequestModel):
    name: str
    quantity: Union[int, float]
    unit: str


def _check_image(value: Optional[str]) -> Optional[str]:
    # The client sends "" when no image was given
    if value is None or value == "":
        return None
    if not value.startswith(("http://", "https://")):
        raise ValueError("image must be an http(s) URL")
    return value


class CreateCustomRecipeRequest(RequestModel):
    """Body for POST /api/custom-recipes."""
    name: str = Field(min_length=1)
    type: Optional[str] = None
    cuisine: Optional[str] = None
    difficulty: Optional[str] = None
    prep_time: Optional[int] = Field(default=None, alias="prepTime")
    cook_time: Optional[int] = Field(default=None, alias="cookTime")
    servings: Optional[int] = None
    image: Optional[str] = None
    ingredients: List[IngredientIn] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)

    @field_validator("image")
    @classmethod
    def check_image(cls, value: Optional[str]) -> Optional[str]:
        return _check_image(value)

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump()


class UpdateCustomRecipeRequest(RequestModel):
    """Body for PATCH /api/custom-recipes/<id>. Only sent fields change."""
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = None
    cuisine: Optional[str] = None
    difficulty: Optional[str] = None
    prep_time: Optional[int] = Field(default=None, alias="prepTime")
    cook_time: Optional[int] = Field(default=None, alias="cookTime")
    servings: Optional[int] = None
    image: Optional[str] = None
    ingredients: Optional[List[IngredientIn]] = None
    steps: Optional[List[str]] = None

    @field_validator("image")
    @classmethod
    def check_image(cls, value: Optional[str]) -> Optional[str]:
        return _check_image(value)

    def to_updates(self) -> Dict[str, Any]:
        updates = self.model_dump(exclude_unset=True)
        # NOT NULL columns
        for key in ("name", "ingredients", "steps"):
            if key in updates and updates[key] is None:
                updates.pop(key)
        return updates


def _check_date(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if len(value) != 10:
        raise ValueError("Date must be in YYYY-MM-DD format")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError("Date must be in YYYY-MM-DD format")
    return value


def _as_text(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class CreateMealPlanningRequest(RequestModel):
    """Body for POST /api/planning."""
    date: str
    slot: MealSlot = "diner"
    recipe_id: str = Field(alias="recipeId")
    source: RecipeSource

    @field_validator("date")
    @classmethod
    def check_date(cls, value: Optional[str]) -> Optional[str]:
        return _check_date(value)

    @field_validator("recipe_id", mode="before")
    @classmethod
    def recipe_id_as_text(cls, value: Any) -> Any:
        return _as_text(value)


class UpdateMealPlanningRequest(RequestModel):
    """Body for PATCH /api/planning/<id>."""
    date: Optional[str] = None
    slot: Optional[MealSlot] = None
    recipe_id: Optional[str] = Field(default=None, alias="recipeId")
    source: Optional[RecipeSource] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, value: Optional[str]) -> Optional[str]:
        return _check_date(value)

    @field_validator("recipe_id", mode="before")
    @classmethod
    def recipe_id_as_text(cls, value: Any) -> Any:
        return _as_text(value)

    def to_updates(self) -> Dict[str, Any]:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class AddRecipeToListRequest(RequestModel):
    """Body for POST /api/shopping-list/recipes."""
    recipe_id: str = Field(alias="recipeId")
    source: RecipeSource = "predefined"
    servings: Optional[int] = Field(default=None, ge=1)

    @field_validator("recipe_id", mode="before")
    @classmethod
    def recipe_id_as_text(cls, value: Any) -> Any:
        return _as_text(value)


class ServingsChangeRequest(RequestModel):
    delta: int


class ManualItemRequest(RequestModel):
    name: str = ""


class SignUpRequest(RequestModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=4)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class SignInRequest(RequestModel):
    username: str
    password: str


def validation_message(error: ValidationError) -> str:
    """Flatten a pydantic error into one readable line."""
    parts = []
    for err in error.errors():
        location = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    return "; ".join(parts) or "Invalid request body"

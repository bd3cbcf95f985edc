"""
Shopping list engine.

The list is made of recipe groups (all ingredients pulled from one recipe,
scaled together by a serving count) followed by manual items (free text,
never scaled). Every mutation writes the full list back through the
injected storage; there is no partial write.

Persisted form is a JSON array ``[...groups, ...manual_items]``. Each element
carries an explicit ``kind`` ("recipe" or "manual"). Elements saved before the
tag existed are classified by the presence of a ``recipeId`` field.
"""

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from ..data.models import Ingredient
from .storage import ShoppingListStorage

logger = logging.getLogger(__name__)

RECIPE_KIND = "recipe"
MANUAL_KIND = "manual"

# Leading numeric literal, the way a browser's parseFloat reads "300g" as 300
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_quantity(quantity: Union[str, int, float, None]) -> Optional[float]:
    """
    Read a quantity as a finite number.

    Args:
        quantity: Number or text such as "300", "1.5 kg" or "to taste"

    Returns:
        The number, or None when there is no finite leading number
    """
    if isinstance(quantity, bool) or quantity is None:
        return None
    if isinstance(quantity, (int, float)):
        value = float(quantity)
    else:
        match = _LEADING_NUMBER.match(str(quantity))
        if not match:
            return None
        value = float(match.group(1))
    return value if math.isfinite(value) else None


def format_quantity(value: float) -> str:
    """Integral values with no decimals, anything else with exactly one."""
    if value % 1 == 0:
        return f"{value:.0f}"
    return f"{value:.1f}"


def display_quantity(ingredient: Ingredient, group: "RecipeGroup") -> str:
    """
    Quantity of an ingredient scaled to the group's current servings.

    Non-numeric quantities are returned unchanged as text.

    Examples:
        300 g for 4, shown for 2 -> "150"
        1 for 3, shown for 2 -> "0.7"
    """
    if ingredient.quantity is None:
        return ""
    qty = parse_quantity(ingredient.quantity)
    if qty is None:
        return str(ingredient.quantity)
    ratio = group.current_servings / group.original_servings
    return format_quantity(qty * ratio)


def _normalize_servings(servings: Any) -> int:
    try:
        value = int(servings)
    except (TypeError, ValueError):
        return 1
    return value if value >= 1 else 1


def _field(source: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or an object."""
    if isinstance(source, Mapping):
        return source.get(name, default)
    return getattr(source, name, default)


def _to_ingredient(value: Any) -> Ingredient:
    if isinstance(value, Ingredient):
        return Ingredient(name=value.name, quantity=value.quantity, unit=value.unit)
    return Ingredient.from_dict(value)


def _load_ingredients(raw: Any) -> List[Ingredient]:
    """Ingredients of a saved group; anything but a list of objects is rejected."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"ingredients must be a list, got {type(raw).__name__}")
    for entry in raw:
        if not isinstance(entry, dict):
            raise ValueError(f"unexpected ingredient {entry!r}")
    return [Ingredient.from_dict(entry) for entry in raw]


@dataclass
class RecipeGroup:
    """All ingredients drawn from one recipe, scaled as a unit.

    ``original_servings`` is the baseline the quantities were written for and
    never changes after creation; only ``current_servings`` moves.
    """
    recipe_id: Union[str, int]
    recipe_name: str
    original_servings: int
    current_servings: int
    ingredients: List[Ingredient] = field(default_factory=list)

    kind = RECIPE_KIND

    def display_quantity(self, ingredient: Ingredient) -> str:
        return display_quantity(ingredient, self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": RECIPE_KIND,
            "recipeId": self.recipe_id,
            "recipeName": self.recipe_name,
            "originalServings": self.original_servings,
            "currentServings": self.current_servings,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecipeGroup":
        return cls(
            recipe_id=data["recipeId"],
            recipe_name=data.get("recipeName", ""),
            original_servings=_normalize_servings(data.get("originalServings")),
            current_servings=_normalize_servings(data.get("currentServings")),
            ingredients=_load_ingredients(data.get("ingredients")),
        )


@dataclass
class ManualItem:
    """Free-text entry typed by the user. Not tied to any recipe."""
    name: str
    quantity: Union[str, int, float] = ""
    unit: str = ""

    kind = MANUAL_KIND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": MANUAL_KIND,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManualItem":
        return cls(
            name=data.get("name", ""),
            quantity=data.get("quantity", ""),
            unit=data.get("unit") or "",
        )


def render_item(item: Union[Ingredient, ManualItem], group: Optional[RecipeGroup] = None) -> str:
    """
    One shopping-list line: "name : quantity unit".

    The quantity part is left out when the quantity is empty or zero, the
    unit when it is empty. Recipe ingredients are scaled through ``group``.
    """
    line = item.name
    if item.quantity:
        shown = display_quantity(item, group) if group is not None else str(item.quantity)
        line += f" : {shown}"
    if item.unit:
        line += f" {item.unit}"
    return line


class ShoppingListEngine:
    """Recipe groups plus manual items, persisted as a whole on every change."""

    def __init__(self, storage: ShoppingListStorage):
        """
        Initialize an empty engine.

        Args:
            storage: Where the serialized list is read from and written to.
                Call load() to pick up previously saved state.
        """
        self.storage = storage
        self.recipe_groups: List[RecipeGroup] = []
        self.manual_items: List[ManualItem] = []

    # ==================== Persistence ====================

    def load(self) -> "ShoppingListEngine":
        """
        Rebuild state from storage.

        Missing data gives an empty list. Malformed data is logged and also
        gives an empty list; it is never raised.
        """
        self.recipe_groups = []
        self.manual_items = []

        raw = self.storage.load()
        if not raw:
            return self

        try:
            elements = json.loads(raw)
            if not isinstance(elements, list):
                raise ValueError(f"expected a list, got {type(elements).__name__}")

            groups: List[RecipeGroup] = []
            manual: List[ManualItem] = []
            for element in elements:
                if not isinstance(element, dict):
                    raise ValueError(f"unexpected element {element!r}")
                if self._is_recipe_group(element):
                    groups.append(RecipeGroup.from_dict(element))
                else:
                    manual.append(ManualItem.from_dict(element))
        except (ValueError, TypeError, KeyError) as e:
            logger.error(f"[SHOPPING] Could not parse saved list '{self.storage.key}': {e}")
            return self

        self.recipe_groups = groups
        self.manual_items = manual
        logger.debug(
            f"[SHOPPING] Loaded {len(groups)} recipe groups and {len(manual)} manual items"
        )
        return self

    @staticmethod
    def _is_recipe_group(element: Dict[str, Any]) -> bool:
        kind = element.get("kind")
        if kind == RECIPE_KIND:
            return True
        if kind == MANUAL_KIND:
            return False
        # Untagged element from an older save
        return "recipeId" in element

    def to_list(self) -> List[Dict[str, Any]]:
        """Serializable form: groups first, then manual items, in order."""
        return (
            [group.to_dict() for group in self.recipe_groups]
            + [item.to_dict() for item in self.manual_items]
        )

    def save(self):
        """
        Write the whole list to storage.

        A failing backend propagates its exception; in-memory state is kept
        as it is.
        """
        try:
            self.storage.save(json.dumps(self.to_list(), ensure_ascii=False))
        except Exception as e:
            logger.error(f"[SHOPPING] Failed to save list '{self.storage.key}': {e}", exc_info=True)
            raise

    # ==================== Recipe groups ====================

    def add_recipe(
        self,
        recipe: Any,
        ingredients: Optional[List[Any]] = None,
        declared_servings: Optional[int] = None,
    ) -> RecipeGroup:
        """
        Append a recipe's ingredients as a new group.

        Args:
            recipe: Mapping or object with ``id``, ``name`` and optionally
                ``servings`` and ``ingredients``
            ingredients: Ingredients to capture (defaults to the recipe's)
            declared_servings: Baseline servings (defaults to the recipe's,
                then to 1)

        Returns:
            The new RecipeGroup
        """
        if ingredients is None:
            ingredients = _field(recipe, "ingredients") or []
        if declared_servings is None:
            declared_servings = _field(recipe, "servings")

        servings = _normalize_servings(declared_servings)
        group = RecipeGroup(
            recipe_id=_field(recipe, "id"),
            recipe_name=_field(recipe, "name", ""),
            original_servings=servings,
            current_servings=servings,
            ingredients=[_to_ingredient(i) for i in ingredients],
        )
        self.recipe_groups.append(group)
        logger.info(
            f"[SHOPPING] Added recipe {group.recipe_id} ({group.recipe_name}) "
            f"for {servings} servings, {len(group.ingredients)} ingredients"
        )
        self.save()
        return group

    def adjust_servings(self, group_index: int, delta: int) -> RecipeGroup:
        """
        Change a group's current servings by ``delta``, never below 1.

        Raises:
            IndexError: If no group exists at ``group_index``
        """
        group = self.recipe_groups[self._check_index(group_index, self.recipe_groups)]
        group.current_servings = max(1, group.current_servings + delta)
        self.save()
        return group

    def delete_group(self, group_index: int) -> RecipeGroup:
        """
        Remove the group at ``group_index``; the others keep their order.

        Raises:
            IndexError: If no group exists at ``group_index``
        """
        group = self.recipe_groups.pop(self._check_index(group_index, self.recipe_groups))
        logger.info(f"[SHOPPING] Removed recipe group {group.recipe_id}")
        self.save()
        return group

    # ==================== Manual items ====================

    def add_manual_item(self, name: str) -> Optional[ManualItem]:
        """
        Append a free-text item. Blank names are ignored.

        Returns:
            The new ManualItem, or None if nothing was added
        """
        if not name or not name.strip():
            return None
        item = ManualItem(name=name, quantity="", unit="")
        self.manual_items.append(item)
        self.save()
        return item

    def delete_manual_item(self, index: int) -> ManualItem:
        """
        Remove the manual item at ``index``.

        Raises:
            IndexError: If no manual item exists at ``index``
        """
        item = self.manual_items.pop(self._check_index(index, self.manual_items))
        self.save()
        return item

    def clear(self):
        """Drop every group and manual item."""
        self.recipe_groups = []
        self.manual_items = []
        logger.info("[SHOPPING] Cleared list")
        self.save()

    # ==================== Views ====================

    @property
    def is_empty(self) -> bool:
        return not self.recipe_groups and not self.manual_items

    def view(self) -> Dict[str, Any]:
        """Display-ready list with scaled quantities and rendered lines."""
        groups = []
        for index, group in enumerate(self.recipe_groups):
            data = group.to_dict()
            data["index"] = index
            data["items"] = [
                {
                    **ing.to_dict(),
                    "displayQuantity": group.display_quantity(ing),
                    "label": render_item(ing, group),
                }
                for ing in group.ingredients
            ]
            groups.append(data)

        manual = []
        for index, item in enumerate(self.manual_items):
            data = item.to_dict()
            data["index"] = index
            data["label"] = render_item(item)
            manual.append(data)

        return {
            "recipeGroups": groups,
            "manualItems": manual,
            "isEmpty": self.is_empty,
        }

    @staticmethod
    def _check_index(index: int, items: List[Any]) -> int:
        # Negative indices would silently address from the end
        if index < 0 or index >= len(items):
            raise IndexError(f"No shopping list entry at index {index}")
        return index

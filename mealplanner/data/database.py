"""
Database interface for the Meal Planner.

A single SQLite database holds:
- users: authentication records
- recipes: predefined catalogue (seeded, read-mostly)
- custom_recipes: user-authored recipes
- meal_planning: scheduled meals per user
- shopping_lists: one serialized shopping list per (user, key)
"""

import sqlite3
import json
import logging
import uuid
from typing import List, Optional, Dict, Any
from datetime import datetime
from pathlib import Path

from .models import Recipe, CustomRecipe, MealPlanning, User, Ingredient, DEFAULT_SLOT

logger = logging.getLogger(__name__)


# Attribute -> column for partial updates
CUSTOM_RECIPE_COLUMNS = {
    "name": "name",
    "type": "type",
    "cuisine": "cuisine",
    "difficulty": "difficulty",
    "prep_time": "prep_time",
    "cook_time": "cook_time",
    "servings": "servings",
    "image": "image",
    "ingredients": "ingredients_json",
    "steps": "steps_json",
}

MEAL_PLANNING_COLUMNS = {
    "date": "date",
    "slot": "slot",
    "recipe_id": "recipe_id",
    "source": "source",
}

JSON_COLUMNS = {"ingredients_json", "steps_json"}


def _dump_ingredients(ingredients: List[Any]) -> str:
    return json.dumps([
        ing.to_dict() if isinstance(ing, Ingredient) else dict(ing)
        for ing in ingredients or []
    ])


def _load_ingredients(raw: Optional[str]) -> List[Ingredient]:
    if not raw:
        return []
    return [Ingredient.from_dict(i) for i in json.loads(raw)]


class DatabaseInterface:
    """Interface for interacting with the SQLite database."""

    def __init__(self, db_dir: str = "data", db_name: str = "mealplanner.db"):
        """
        Initialize database interface.

        Args:
            db_dir: Directory containing the database file
            db_name: Database file name
        """
        self.db_dir = Path(db_dir)
        self.db_dir.mkdir(parents=True, exist_ok=True)

        self.db_path = self.db_dir / db_name

        self._init_database()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_database(self):
        """Initialize database schema."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS recipes (
                    id INTEGER PRIMARY KEY,
                    name TEXT NOT NULL,
                    type TEXT,
                    cuisine TEXT,
                    difficulty TEXT,
                    prep_time INTEGER,
                    cook_time INTEGER,
                    servings INTEGER,
                    image TEXT,
                    ingredients_json TEXT NOT NULL,
                    steps_json TEXT NOT NULL,
                    rating REAL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS custom_recipes (
                    id TEXT PRIMARY KEY,
                    user_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    type TEXT,
                    cuisine TEXT,
                    difficulty TEXT,
                    prep_time INTEGER,
                    cook_time INTEGER,
                    servings INTEGER,
                    image TEXT,
                    ingredients_json TEXT NOT NULL,
                    steps_json TEXT NOT NULL,
                    rating REAL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,

                    FOREIGN KEY (user_id) REFERENCES users(id)
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_custom_recipes_user
                ON custom_recipes(user_id)
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS meal_planning (
                    id TEXT PRIMARY KEY,
                    user_id INTEGER NOT NULL,
                    date TEXT NOT NULL,
                    slot TEXT,
                    recipe_id TEXT NOT NULL,
                    source TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,

                    FOREIGN KEY (user_id) REFERENCES users(id)
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_meal_planning_user_date
                ON meal_planning(user_id, date)
            """)

            # Whole serialized list per (user, key); no deltas
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS shopping_lists (
                    user_id INTEGER NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (user_id, key)
                )
            """)

            conn.commit()
            logger.info(f"Database initialized at {self.db_path}")

    # ==================== User Operations ====================

    def create_user(self, username: str, password_hash: str) -> Optional[int]:
        """
        Create a new user.

        Args:
            username: Unique username
            password_hash: Hashed password (use werkzeug.security.generate_password_hash)

        Returns:
            User ID if created, None if username already exists
        """
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    INSERT INTO users (username, password_hash, created_at)
                    VALUES (?, ?, ?)
                    """,
                    (username, password_hash, datetime.now().isoformat())
                )
                conn.commit()
                user_id = cursor.lastrowid
                logger.info(f"Created user: {username} (ID: {user_id})")
                return user_id
        except sqlite3.IntegrityError:
            logger.warning(f"Username already exists: {username}")
            return None

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username, or None if not found."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, username, password_hash, created_at FROM users WHERE username = ?",
                (username,)
            ).fetchone()
            return self._row_to_user(row) if row else None

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID, or None if not found."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, username, password_hash, created_at FROM users WHERE id = ?",
                (user_id,)
            ).fetchone()
            return self._row_to_user(row) if row else None

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            username=row["username"],
            password_hash=row["password_hash"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    # ==================== Recipe Catalogue Operations ====================

    def save_recipe(self, recipe: Recipe) -> int:
        """
        Insert or replace a predefined recipe.

        Args:
            recipe: Recipe object (its id is kept)

        Returns:
            ID of saved recipe
        """
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO recipes
                (id, name, type, cuisine, difficulty, prep_time, cook_time, servings,
                 image, ingredients_json, steps_json, rating, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    recipe.id,
                    recipe.name,
                    recipe.type,
                    recipe.cuisine,
                    recipe.difficulty,
                    recipe.prep_time,
                    recipe.cook_time,
                    recipe.servings,
                    recipe.image,
                    _dump_ingredients(recipe.ingredients),
                    json.dumps(recipe.steps),
                    recipe.rating,
                    recipe.created_at.isoformat(),
                    recipe.updated_at.isoformat(),
                ),
            )
            conn.commit()

        logger.debug(f"Saved recipe {recipe.id} ({recipe.name})")
        return recipe.id

    def get_recipe(self, recipe_id: int) -> Optional[Recipe]:
        """
        Get a specific recipe by ID.

        Args:
            recipe_id: Recipe ID

        Returns:
            Recipe object or None if not found
        """
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM recipes WHERE id = ?", (recipe_id,)).fetchone()
            if row:
                return self._row_to_recipe(row)
            return None

    def list_recipes(self) -> List[Recipe]:
        """All predefined recipes ordered by ID."""
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM recipes ORDER BY id").fetchall()
            return [self._row_to_recipe(row) for row in rows]

    def count_recipes(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM recipes").fetchone()[0]

    def _row_to_recipe(self, row: sqlite3.Row) -> Recipe:
        """Convert database row to Recipe object."""
        return Recipe(
            id=row["id"],
            name=row["name"],
            type=row["type"] or "",
            cuisine=row["cuisine"] or "",
            difficulty=row["difficulty"] or "",
            prep_time=row["prep_time"] or 0,
            cook_time=row["cook_time"] or 0,
            servings=row["servings"] or 1,
            image=row["image"],
            ingredients=_load_ingredients(row["ingredients_json"]),
            steps=json.loads(row["steps_json"]) if row["steps_json"] else [],
            rating=row["rating"] or 0.0,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    # ==================== Custom Recipe Operations ====================

    def create_custom_recipe(self, user_id: int, data: Dict[str, Any]) -> CustomRecipe:
        """
        Create a custom recipe owned by a user.

        Args:
            user_id: Owner
            data: Field values keyed by CustomRecipe attribute name

        Returns:
            The stored CustomRecipe
        """
        now = datetime.now()
        recipe = CustomRecipe(
            id=str(uuid.uuid4()),
            user_id=user_id,
            name=data["name"],
            type=data.get("type"),
            cuisine=data.get("cuisine"),
            difficulty=data.get("difficulty"),
            prep_time=data.get("prep_time"),
            cook_time=data.get("cook_time"),
            servings=data.get("servings"),
            image=data.get("image"),
            ingredients=[
                ing if isinstance(ing, Ingredient) else Ingredient.from_dict(ing)
                for ing in data.get("ingredients") or []
            ],
            steps=list(data.get("steps") or []),
            created_at=now,
            updated_at=now,
        )

        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO custom_recipes
                (id, user_id, name, type, cuisine, difficulty, prep_time, cook_time,
                 servings, image, ingredients_json, steps_json, rating, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    recipe.id,
                    recipe.user_id,
                    recipe.name,
                    recipe.type,
                    recipe.cuisine,
                    recipe.difficulty,
                    recipe.prep_time,
                    recipe.cook_time,
                    recipe.servings,
                    recipe.image,
                    _dump_ingredients(recipe.ingredients),
                    json.dumps(recipe.steps),
                    recipe.rating,
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
            conn.commit()

        logger.info(f"Created custom recipe {recipe.id} for user {user_id}")
        return recipe

    def get_custom_recipe(self, recipe_id: str, user_id: Optional[int] = None) -> Optional[CustomRecipe]:
        """
        Get a custom recipe by ID.

        Args:
            recipe_id: Custom recipe ID
            user_id: Optional owner filter (for security)

        Returns:
            CustomRecipe or None
        """
        with self._connect() as conn:
            if user_id is not None:
                row = conn.execute(
                    "SELECT * FROM custom_recipes WHERE id = ? AND user_id = ?",
                    (recipe_id, user_id)
                ).fetchone()
            else:
                row = conn.execute(
                    "SELECT * FROM custom_recipes WHERE id = ?", (recipe_id,)
                ).fetchone()
            return self._row_to_custom_recipe(row) if row else None

    def list_custom_recipes(self, user_id: int) -> List[CustomRecipe]:
        """Custom recipes for a user, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM custom_recipes WHERE user_id = ? ORDER BY created_at DESC",
                (user_id,)
            ).fetchall()
            return [self._row_to_custom_recipe(row) for row in rows]

    def update_custom_recipe(self, recipe_id: str, updates: Dict[str, Any]) -> Optional[CustomRecipe]:
        """
        Apply a partial update to a custom recipe by primary key.

        Args:
            recipe_id: Custom recipe ID
            updates: Attribute -> new value; unknown keys are ignored

        Returns:
            Updated CustomRecipe, or None if it does not exist
        """
        self._update_row("custom_recipes", CUSTOM_RECIPE_COLUMNS, recipe_id, updates)
        return self.get_custom_recipe(recipe_id)

    def delete_custom_recipe(self, recipe_id: str) -> bool:
        """Delete a custom recipe by primary key. Returns True if a row was removed."""
        return self._delete_row("custom_recipes", recipe_id)

    def _row_to_custom_recipe(self, row: sqlite3.Row) -> CustomRecipe:
        return CustomRecipe(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            type=row["type"],
            cuisine=row["cuisine"],
            difficulty=row["difficulty"],
            prep_time=row["prep_time"],
            cook_time=row["cook_time"],
            servings=row["servings"],
            image=row["image"],
            ingredients=_load_ingredients(row["ingredients_json"]),
            steps=json.loads(row["steps_json"]) if row["steps_json"] else [],
            rating=row["rating"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    # ==================== Meal Planning Operations ====================

    def add_meal_planning(
        self,
        user_id: int,
        date: str,
        recipe_id: str,
        source: str,
        slot: Optional[str] = DEFAULT_SLOT,
    ) -> MealPlanning:
        """
        Schedule a recipe on a date/slot for a user.

        Args:
            user_id: Owner
            date: Day in YYYY-MM-DD form
            recipe_id: Recipe identifier (catalogue ID or custom recipe UUID)
            source: "predefined" or "custom"
            slot: Meal slot (defaults to dinner)

        Returns:
            The stored MealPlanning entry
        """
        now = datetime.now()
        entry = MealPlanning(
            id=str(uuid.uuid4()),
            user_id=user_id,
            date=date,
            slot=slot,
            recipe_id=str(recipe_id),
            source=source,
            created_at=now,
            updated_at=now,
        )

        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO meal_planning
                (id, user_id, date, slot, recipe_id, source, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.id,
                    entry.user_id,
                    entry.date,
                    entry.slot,
                    entry.recipe_id,
                    entry.source,
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
            conn.commit()

        logger.info(f"Planned {source} recipe {recipe_id} on {date} ({slot}) for user {user_id}")
        return entry

    def get_meal_planning(self, entry_id: str, user_id: Optional[int] = None) -> Optional[MealPlanning]:
        """Get a planning entry by ID, optionally filtered by owner."""
        with self._connect() as conn:
            if user_id is not None:
                row = conn.execute(
                    "SELECT * FROM meal_planning WHERE id = ? AND user_id = ?",
                    (entry_id, user_id)
                ).fetchone()
            else:
                row = conn.execute(
                    "SELECT * FROM meal_planning WHERE id = ?", (entry_id,)
                ).fetchone()
            return self._row_to_meal_planning(row) if row else None

    def list_meal_planning(self, user_id: int) -> List[MealPlanning]:
        """All planning entries for a user ordered by date ascending."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM meal_planning WHERE user_id = ? ORDER BY date ASC, created_at ASC",
                (user_id,)
            ).fetchall()
            return [self._row_to_meal_planning(row) for row in rows]

    def update_meal_planning(self, entry_id: str, updates: Dict[str, Any]) -> Optional[MealPlanning]:
        """Apply a partial update to a planning entry by primary key."""
        self._update_row("meal_planning", MEAL_PLANNING_COLUMNS, entry_id, updates)
        return self.get_meal_planning(entry_id)

    def delete_meal_planning(self, entry_id: str) -> bool:
        """Delete a planning entry by primary key. Returns True if a row was removed."""
        return self._delete_row("meal_planning", entry_id)

    def _row_to_meal_planning(self, row: sqlite3.Row) -> MealPlanning:
        return MealPlanning(
            id=row["id"],
            user_id=row["user_id"],
            date=row["date"],
            slot=row["slot"],
            recipe_id=row["recipe_id"],
            source=row["source"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    # ==================== Shopping List Operations ====================

    def get_shopping_list(self, user_id: int, key: str) -> Optional[str]:
        """Raw serialized shopping list for (user, key), or None if never saved."""
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM shopping_lists WHERE user_id = ? AND key = ?",
                (user_id, key)
            ).fetchone()
            return row[0] if row else None

    def save_shopping_list(self, user_id: int, key: str, value: str):
        """Replace the serialized shopping list for (user, key)."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO shopping_lists (user_id, key, value, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                (user_id, key, value, datetime.now().isoformat())
            )
            conn.commit()

    # ==================== Helpers ====================

    def _update_row(self, table: str, columns: Dict[str, str], row_id: str, updates: Dict[str, Any]):
        assignments = []
        values = []
        for attr, value in updates.items():
            column = columns.get(attr)
            if column is None:
                continue
            if column == "ingredients_json":
                value = _dump_ingredients(value)
            elif column in JSON_COLUMNS:
                value = json.dumps(value)
            assignments.append(f"{column} = ?")
            values.append(value)

        assignments.append("updated_at = ?")
        values.append(datetime.now().isoformat())
        values.append(row_id)

        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                f"UPDATE {table} SET {', '.join(assignments)} WHERE id = ?",
                values,
            )
            conn.commit()

        logger.debug(f"Updated {table} {row_id}: {sorted(updates)}")

    def _delete_row(self, table: str, row_id: str) -> bool:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(f"DELETE FROM {table} WHERE id = ?", (row_id,))
            conn.commit()
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Deleted {table} {row_id}")
        return deleted

"""
Unit tests for shopping list storage backends.
"""

import pytest

from mealplanner.shopping.engine import ShoppingListEngine
from mealplanner.shopping.storage import (
    DEFAULT_KEY,
    InMemoryStorage,
    JsonFileStorage,
    ShoppingListStorage,
    SqliteStorage,
)


def test_storage_is_abstract():
    with pytest.raises(TypeError):
        ShoppingListStorage()


def test_in_memory_storage():
    storage = InMemoryStorage()
    assert storage.key == DEFAULT_KEY == "panier"
    assert storage.load() is None

    storage.save("[]")
    assert storage.load() == "[]"
    assert storage.save_count == 1


class TestJsonFileStorage:

    def test_missing_file_loads_none(self, temp_db_dir):
        assert JsonFileStorage(temp_db_dir).load() is None

    def test_writes_key_named_file(self, temp_db_dir):
        storage = JsonFileStorage(temp_db_dir, key="courses")
        storage.save('[{"kind": "manual", "name": "Pain"}]')

        assert storage.path.name == "courses.json"
        assert storage.path.exists()
        assert JsonFileStorage(temp_db_dir, key="courses").load() == '[{"kind": "manual", "name": "Pain"}]'

    def test_engine_over_file(self, temp_db_dir, sample_recipe):
        engine = ShoppingListEngine(JsonFileStorage(temp_db_dir)).load()
        engine.add_recipe(sample_recipe)
        engine.add_manual_item("Café")

        reloaded = ShoppingListEngine(JsonFileStorage(temp_db_dir)).load()
        assert reloaded.to_list() == engine.to_list()


class TestSqliteStorage:

    def test_lists_are_per_user(self, db):
        alice = db.create_user("alice", "hash")
        bob = db.create_user("bob", "hash")

        SqliteStorage(db, alice).save("[1]")
        assert SqliteStorage(db, alice).load() == "[1]"
        assert SqliteStorage(db, bob).load() is None

    def test_lists_are_per_key(self, db, user_id):
        SqliteStorage(db, user_id, key="panier").save("[]")
        assert SqliteStorage(db, user_id, key="autre").load() is None

    def test_save_replaces(self, db, user_id):
        storage = SqliteStorage(db, user_id)
        storage.save("[]")
        storage.save('[{"kind": "manual", "name": "Pain"}]')
        assert storage.load() == '[{"kind": "manual", "name": "Pain"}]'

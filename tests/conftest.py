"""
Pytest configuration and shared fixtures.

Fixtures are reusable test setup that can be injected into tests.
"""

import pytest
import tempfile
import shutil

from mealplanner.config import Config
from mealplanner.data.database import DatabaseInterface
from mealplanner.data.models import Recipe, Ingredient
from mealplanner.data.seed import seed_recipes
from mealplanner.web.app import create_app


@pytest.fixture
def temp_db_dir():
    """
    Create a temporary database directory for testing.

    This fixture is automatically cleaned up after each test.
    """
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def db(temp_db_dir):
    """
    Create a fresh DatabaseInterface for each test.

    Usage in tests:
        def test_something(db):
            db.create_user(...)
    """
    return DatabaseInterface(db_dir=temp_db_dir)


@pytest.fixture
def seeded_db(db):
    """Database with the bundled recipe catalogue loaded."""
    seed_recipes(db)
    return db


@pytest.fixture
def sample_recipe():
    """Risotto for 4, with one non-numeric quantity."""
    return Recipe(
        id=1,
        name="Risotto aux champignons",
        type="plat",
        cuisine="Italienne",
        difficulty="Moyen",
        prep_time=15,
        cook_time=30,
        servings=4,
        ingredients=[
            Ingredient(name="Riz arborio", quantity=300, unit="g"),
            Ingredient(name="Oignon", quantity=1, unit=""),
            Ingredient(name="Sel", quantity="au goût", unit=""),
        ],
        steps=["Faire revenir l'oignon", "Ajouter le riz"],
        rating=4.5,
    )


@pytest.fixture
def user_id(db):
    """A registered user in the test database."""
    return db.create_user("alice", "not-a-real-hash")


@pytest.fixture
def app(temp_db_dir):
    """Flask app over a temporary, seeded database."""
    config = Config(
        db_dir=temp_db_dir,
        log_dir=temp_db_dir,
        secret_key="test_secret_key",
        testing=True,
    )
    app = create_app(config)
    seed_recipes(app.extensions["mealplanner"].db)
    return app


@pytest.fixture
def client(app):
    """Flask test client with session support."""
    return app.test_client()


@pytest.fixture
def auth_client(client):
    """Client signed in as a freshly registered user."""
    response = client.post('/api/auth/sign-up', json={
        'username': 'alice',
        'password': 'secret123',
    })
    assert response.status_code == 201
    return client


@pytest.fixture
def other_client(app):
    """Second, independent client signed in as another user."""
    other = app.test_client()
    response = other.post('/api/auth/sign-up', json={
        'username': 'bob',
        'password': 'secret456',
    })
    assert response.status_code == 201
    return other

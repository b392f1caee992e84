"""
Pytest configuration and shared fixtures.

Every test gets a fresh app on an in-memory SQLite database.
"""

import pytest

from app import create_app
from models import db as _db
from services import RecipePayload, create_recipe


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


def make_recipe(title, servings, ingredients, steps=None, **extra):
    """Save a recipe whose ingredients are raw lines in the unsectioned group."""
    payload = RecipePayload.model_validate({
        'title': title,
        'servings': servings,
        'sections': [{
            'name': 'Main',
            'ingredients': [{'raw': line} for line in ingredients],
            'steps': [{'text': text} for text in steps or []],
        }],
        **extra,
    })
    return create_recipe(payload)


@pytest.fixture
def pancakes(app):
    """Pancakes: serves 4, one line '2 cups flour'."""
    return make_recipe('Pancakes', 4, ['2 cups flour'], steps=['Mix', 'Fry'])


@pytest.fixture
def sectioned_recipe_payload():
    return {
        'title': 'Lasagne',
        'description': 'Layered pasta bake',
        'servings': {'amount': 6},
        'times': {'prep': '30 min', 'cook': '1 hr', 'total': '1 hr 30 min'},
        'sections': [
            {
                'name': 'Sauce',
                'ingredients': [
                    {'item': 'crushed tomatoes', 'amount': 800, 'unit': 'g'},
                    {'item': 'onion', 'amount': 1, 'notes': 'diced'},
                ],
                'steps': [
                    {'step': 2, 'text': 'Simmer for 20 minutes'},
                    {'step': 1, 'text': 'Fry the onion'},
                ],
            },
            {
                'name': 'Main',
                'ingredients': [{'raw': '12 lasagne sheets'}],
                'steps': [{'text': 'Layer and bake'}],
            },
            {
                'name': 'Topping',
                'ingredients': [{'item': 'mozzarella', 'amount': '1 1/2', 'unit': 'cups'}],
            },
        ],
        'notes': ['Better the next day'],
        'storage': ['Freezes well'],
        'tips': [],
        'variations': ['Use spinach instead of meat'],
        'cuisine': 'Italian',
    }

"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db, get_by_id, utcnow

from .recipe import Recipe, RecipeSection, RecipeIngredient, Instruction, RecipeNote
from .mealplan import MealPlanEntry

__all__ = [
    'db',
    'get_by_id',
    'utcnow',
    'Recipe',
    'RecipeSection',
    'RecipeIngredient',
    'Instruction',
    'RecipeNote',
    'MealPlanEntry',
]

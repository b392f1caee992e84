"""
Meal Plan Service

Range queries over the planning grid and the per-cell upsert that keeps
at most one entry per (date, meal slot).
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional

from sqlalchemy import case
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from constants import MEAL_SLOTS
from models import db, get_by_id, Recipe, MealPlanEntry
from .errors import NotFound, TransactionFailure

logger = logging.getLogger(__name__)

# breakfast, lunch, dinner, snack
SLOT_ORDER = case(
    {slot: index for index, slot in enumerate(MEAL_SLOTS)},
    value=MealPlanEntry.meal_slot,
    else_=len(MEAL_SLOTS),
)


@dataclass
class PlannedEntry:
    """A meal plan entry joined with its recipe's title and base servings."""
    id: int
    date: str
    meal_slot: str
    recipe_id: Optional[int]
    recipe_title: Optional[str]
    recipe_servings: Optional[int]
    servings: Optional[int]
    notes: Optional[str]

    def to_dict(self):
        return asdict(self)


def entry_to_dict(entry):
    return {
        'id': entry.id,
        'date': entry.date,
        'meal_slot': entry.meal_slot,
        'recipe_id': entry.recipe_id,
        'servings': entry.servings,
        'notes': entry.notes,
    }


def get_entries(start_date, end_date):
    """
    Entries with start_date <= date <= end_date, ordered by date then slot.

    Dates are ISO strings, so string comparison is date comparison. Entries
    without a recipe come back with a None title.
    """
    rows = (
        db.session.query(MealPlanEntry, Recipe.title, Recipe.servings_amount)
        .outerjoin(Recipe, MealPlanEntry.recipe_id == Recipe.id)
        .filter(MealPlanEntry.date >= start_date, MealPlanEntry.date <= end_date)
        .order_by(MealPlanEntry.date, SLOT_ORDER, MealPlanEntry.id)
        .all()
    )
    return [
        PlannedEntry(
            id=entry.id,
            date=entry.date,
            meal_slot=entry.meal_slot,
            recipe_id=entry.recipe_id,
            recipe_title=title,
            recipe_servings=servings_amount,
            servings=entry.servings,
            notes=entry.notes,
        )
        for entry, title, servings_amount in rows
    ]


def _find_cell(date, meal_slot):
    return MealPlanEntry.query.filter_by(date=date, meal_slot=meal_slot).first()


def _assign(entry, recipe_id, servings, notes):
    entry.recipe_id = recipe_id
    entry.servings = servings
    entry.notes = notes


def upsert_entry(date, meal_slot, recipe_id=None, servings=None, notes=None):
    """
    Put a recipe into a (date, meal slot) cell.

    An occupied cell is updated in place rather than duplicated. Returns
    (entry, created) where created is False when an existing row was updated.
    """
    if recipe_id is not None and get_by_id(Recipe, recipe_id) is None:
        raise NotFound(f"Recipe {recipe_id} not found")

    try:
        entry = _find_cell(date, meal_slot)
        created = entry is None
        if created:
            entry = MealPlanEntry(date=date, meal_slot=meal_slot)
            db.session.add(entry)
        _assign(entry, recipe_id, servings, notes)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        # Another request filled the cell between our check and insert
        logger.info("Meal plan cell %s/%s taken concurrently, updating instead", date, meal_slot)
        entry, created = _update_existing(date, meal_slot, recipe_id, servings, notes), False
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Failed to save meal plan entry %s/%s", date, meal_slot)
        raise TransactionFailure('Failed to save meal plan entry') from exc

    if created:
        logger.info("Planned recipe %s for %s %s", recipe_id, date, meal_slot)
    else:
        logger.info("Updated meal plan cell %s %s (existing entry %s)", date, meal_slot, entry.id)
    return entry, created


def _update_existing(date, meal_slot, recipe_id, servings, notes):
    try:
        entry = _find_cell(date, meal_slot)
        if entry is None:
            raise TransactionFailure('Failed to save meal plan entry')
        _assign(entry, recipe_id, servings, notes)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Failed to update meal plan entry %s/%s", date, meal_slot)
        raise TransactionFailure('Failed to save meal plan entry') from exc
    return entry


def remove_entry(entry_id):
    """Delete one entry; NotFound when no entry has that id."""
    entry = get_by_id(MealPlanEntry, entry_id)
    if entry is None:
        raise NotFound(f"Meal plan entry {entry_id} not found")

    try:
        db.session.delete(entry)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Failed to delete meal plan entry %s", entry_id)
        raise TransactionFailure('Failed to delete meal plan entry') from exc

    logger.info("Removed meal plan entry %s", entry_id)

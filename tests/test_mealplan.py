"""Tests for meal plan range queries and the per-cell upsert."""

import pytest
from sqlalchemy.exc import IntegrityError

from models import MealPlanEntry
from services import NotFound, get_entries, remove_entry, upsert_entry
from services import mealplan as mealplan_service
from tests.conftest import make_recipe


class TestUpsert:

    def test_insert_then_update_same_cell(self, app, pancakes):
        waffles = make_recipe('Waffles', 2, ['1 cup flour'])

        first, created = upsert_entry('2024-03-01', 'dinner', recipe_id=pancakes, servings=2)
        assert created is True

        second, created = upsert_entry('2024-03-01', 'dinner', recipe_id=waffles, notes='leftovers')
        assert created is False
        assert second.id == first.id

        rows = MealPlanEntry.query.filter_by(date='2024-03-01', meal_slot='dinner').all()
        assert len(rows) == 1
        assert rows[0].recipe_id == waffles
        assert rows[0].servings is None
        assert rows[0].notes == 'leftovers'

    def test_unknown_recipe(self, app):
        with pytest.raises(NotFound):
            upsert_entry('2024-03-01', 'lunch', recipe_id=404)
        assert MealPlanEntry.query.count() == 0

    def test_entry_without_recipe(self, app):
        entry, created = upsert_entry('2024-03-02', 'snack', notes='eat out')
        assert created is True
        assert entry.recipe_id is None

    def test_concurrent_insert_becomes_update(self, app, db, pancakes, monkeypatch):
        # Another writer fills the cell after our lookup found it empty
        existing = MealPlanEntry(date='2024-03-03', meal_slot='lunch')
        db.session.add(existing)
        db.session.commit()
        existing_id = existing.id

        real_find = mealplan_service._find_cell
        calls = []

        def stale_find(date, meal_slot):
            calls.append((date, meal_slot))
            if len(calls) == 1:
                return None
            return real_find(date, meal_slot)

        monkeypatch.setattr(mealplan_service, '_find_cell', stale_find)
        entry, created = upsert_entry('2024-03-03', 'lunch', recipe_id=pancakes, servings=6)

        assert created is False
        assert entry.id == existing_id
        assert entry.recipe_id == pancakes
        assert entry.servings == 6
        assert MealPlanEntry.query.count() == 1

    def test_unique_constraint_on_cell(self, app, db):
        db.session.add(MealPlanEntry(date='2024-03-04', meal_slot='dinner'))
        db.session.add(MealPlanEntry(date='2024-03-04', meal_slot='dinner'))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()


class TestRangeQuery:

    def test_inclusive_range_ordered_by_date_then_slot(self, app, pancakes):
        upsert_entry('2024-01-02', 'snack', recipe_id=pancakes)
        upsert_entry('2024-01-02', 'breakfast', recipe_id=pancakes)
        upsert_entry('2024-01-01', 'dinner')
        upsert_entry('2024-01-01', 'lunch', recipe_id=pancakes)
        upsert_entry('2024-01-03', 'breakfast', recipe_id=pancakes)

        entries = get_entries('2024-01-01', '2024-01-02')

        assert [(e.date, e.meal_slot) for e in entries] == [
            ('2024-01-01', 'lunch'),
            ('2024-01-01', 'dinner'),
            ('2024-01-02', 'breakfast'),
            ('2024-01-02', 'snack'),
        ]
        assert entries[0].recipe_title == 'Pancakes'
        assert entries[0].recipe_servings == 4
        assert entries[1].recipe_title is None

    def test_empty_range(self, app, pancakes):
        upsert_entry('2024-01-10', 'dinner', recipe_id=pancakes)
        assert get_entries('2024-02-01', '2024-02-29') == []

    def test_entry_dict_shape(self, app, pancakes):
        upsert_entry('2024-01-01', 'breakfast', recipe_id=pancakes, servings=3, notes='double batch')
        data = get_entries('2024-01-01', '2024-01-01')[0].to_dict()

        assert data['recipe_title'] == 'Pancakes'
        assert data['servings'] == 3
        assert data['notes'] == 'double batch'


class TestRemove:

    def test_remove(self, app, pancakes):
        entry, _ = upsert_entry('2024-01-01', 'dinner', recipe_id=pancakes)
        remove_entry(entry.id)
        assert MealPlanEntry.query.count() == 0

    def test_remove_missing(self, app):
        with pytest.raises(NotFound):
            remove_entry(12345)

"""
Recipe Service

Loads a recipe with its sections, ingredient lines, instructions and notes,
assembles them into the shapes the editor and the shopping list use, and
saves a full replacement of a recipe's child rows in one transaction.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from constants import DEFAULT_SECTION, NOTE_KINDS
from models import (
    db,
    get_by_id,
    utcnow,
    Recipe,
    RecipeSection,
    RecipeIngredient,
    Instruction,
    RecipeNote,
    MealPlanEntry,
)
from .errors import NotFound, TransactionFailure
from .parsing import StructuredIngredient, build_ingredient_text, parse_ingredient_line
from .quantity import Quantity

logger = logging.getLogger(__name__)

# Payload list attribute -> stored note kind
NOTE_GROUPS = tuple(zip(('notes', 'storage', 'tips', 'variations'), NOTE_KINDS))


@dataclass
class SectionDetail:
    section: RecipeSection
    ingredients: List[RecipeIngredient] = field(default_factory=list)
    instructions: List[Instruction] = field(default_factory=list)


@dataclass
class RecipeDetail:
    recipe: Recipe
    sections: List[SectionDetail] = field(default_factory=list)
    unsectioned_ingredients: List[RecipeIngredient] = field(default_factory=list)
    unsectioned_instructions: List[Instruction] = field(default_factory=list)
    notes: List[RecipeNote] = field(default_factory=list)

    def to_dict(self):
        return recipe_detail_to_dict(self)


# ============================================
# LOADING
# ============================================

def assemble_recipe_detail(recipe, sections, ingredients, instructions, notes):
    """
    Merge separately fetched child rows into a RecipeDetail.

    Rows whose section_id names one of the recipe's sections go under that
    section; everything else is unsectioned. Input order is preserved.
    """
    section_map = {s.id: SectionDetail(section=s) for s in sections}
    detail = RecipeDetail(recipe=recipe, sections=list(section_map.values()), notes=list(notes))

    for ingredient in ingredients:
        target = section_map.get(ingredient.section_id) if ingredient.section_id else None
        if target:
            target.ingredients.append(ingredient)
        else:
            detail.unsectioned_ingredients.append(ingredient)

    for instruction in instructions:
        target = section_map.get(instruction.section_id) if instruction.section_id else None
        if target:
            target.instructions.append(instruction)
        else:
            detail.unsectioned_instructions.append(instruction)

    return detail


def load_recipe_detail(recipe_id):
    """Load a recipe and all of its child rows; NotFound if the recipe is missing."""
    recipe = get_by_id(Recipe, recipe_id)
    if recipe is None:
        raise NotFound(f"Recipe {recipe_id} not found")

    # Independent reads, merged by section_id below
    sections = (RecipeSection.query.filter_by(recipe_id=recipe_id)
                .order_by(RecipeSection.order_index, RecipeSection.id).all())
    ingredients = (RecipeIngredient.query.filter_by(recipe_id=recipe_id)
                   .order_by(RecipeIngredient.order_index, RecipeIngredient.id).all())
    instructions = (Instruction.query.filter_by(recipe_id=recipe_id)
                    .order_by(Instruction.step_number, Instruction.id).all())
    notes = (RecipeNote.query.filter_by(recipe_id=recipe_id)
             .order_by(RecipeNote.order_index, RecipeNote.id).all())

    return assemble_recipe_detail(recipe, sections, ingredients, instructions, notes)


def flatten_ingredients(detail):
    """All ingredient lines of a recipe: each section's in order, then the unsectioned ones."""
    lines = []
    for section in detail.sections:
        lines.extend(section.ingredients)
    lines.extend(detail.unsectioned_ingredients)
    return lines


def load_ingredient_lines(recipe_ids):
    """
    Flattened ingredient lines for several recipes at once.

    Returns {recipe_id: [RecipeIngredient, ...]} using one query for the
    sections and one for the lines, whatever the number of recipes.
    """
    recipe_ids = list(recipe_ids)
    if not recipe_ids:
        return {}

    sections = (RecipeSection.query.filter(RecipeSection.recipe_id.in_(recipe_ids))
                .order_by(RecipeSection.order_index, RecipeSection.id).all())
    ingredients = (RecipeIngredient.query.filter(RecipeIngredient.recipe_id.in_(recipe_ids))
                   .order_by(RecipeIngredient.order_index, RecipeIngredient.id).all())

    lines = {}
    for recipe_id in recipe_ids:
        detail = assemble_recipe_detail(
            None,
            [s for s in sections if s.recipe_id == recipe_id],
            [i for i in ingredients if i.recipe_id == recipe_id],
            [], [],
        )
        lines[recipe_id] = flatten_ingredients(detail)
    return lines


def list_recipes(query=None, limit=20):
    """Recipe id/title pairs, newest first, optionally filtered by title."""
    q = Recipe.query
    if query:
        q = q.filter(Recipe.title.ilike(f"%{query}%"))
    rows = q.order_by(Recipe.created_at.desc(), Recipe.id.desc()).limit(limit).all()
    return [{'id': r.id, 'title': r.title} for r in rows]


# ============================================
# SERIALIZATION
# ============================================

def ingredient_to_dict(row):
    quantity = Quantity.from_columns(row.quantity_numerator, row.quantity_denominator)
    return {
        'id': row.id,
        'raw_text': row.raw_text,
        'quantity_numerator': row.quantity_numerator,
        'quantity_denominator': row.quantity_denominator,
        'amount': quantity.to_fraction_text() if quantity else None,
        'unit': row.unit,
        'item': row.item,
        'notes': row.notes,
        'order_index': row.order_index,
    }


def instruction_to_dict(row):
    return {
        'id': row.id,
        'step_number': row.step_number,
        'text': row.text,
        'notes': row.notes,
    }


def recipe_to_dict(recipe):
    return {
        'id': recipe.id,
        'title': recipe.title,
        'description': recipe.description,
        'image_url': recipe.image_url,
        'cuisine': recipe.cuisine,
        'servings_amount': recipe.servings_amount,
        'time_prep': recipe.time_prep,
        'time_cook': recipe.time_cook,
        'time_total': recipe.time_total,
        'source_type': recipe.source_type,
        'source_url': recipe.source_url,
        'created_at': recipe.created_at.isoformat() if recipe.created_at else None,
        'updated_at': recipe.updated_at.isoformat() if recipe.updated_at else None,
    }


def recipe_detail_to_dict(detail):
    data = recipe_to_dict(detail.recipe)
    data['sections'] = [
        {
            'id': s.section.id,
            'name': s.section.name,
            'order_index': s.section.order_index,
            'ingredients': [ingredient_to_dict(i) for i in s.ingredients],
            'instructions': [instruction_to_dict(i) for i in s.instructions],
        }
        for s in detail.sections
    ]
    data['unsectioned_ingredients'] = [ingredient_to_dict(i) for i in detail.unsectioned_ingredients]
    data['unsectioned_instructions'] = [instruction_to_dict(i) for i in detail.unsectioned_instructions]
    data['notes'] = [
        {'id': n.id, 'kind': n.kind, 'text': n.text, 'order_index': n.order_index}
        for n in detail.notes
    ]
    return data


def recipe_to_payload(detail):
    """
    Editor state for a loaded recipe, in the same shape a save accepts.

    Unsectioned rows are gathered under an implicit "Main" section placed
    after the named ones. Ingredient lines are re-parsed from raw_text.
    """
    recipe = detail.recipe
    sections = []

    def add_section(name, ingredients, instructions):
        steps = sorted(instructions, key=lambda i: i.step_number)
        sections.append({
            'name': name,
            'ingredients': [parse_ingredient_line(i.raw_text).to_dict() for i in ingredients],
            'steps': [
                {'step': s.step_number, 'text': s.text, **({'notes': s.notes} if s.notes else {})}
                for s in steps
            ],
        })

    for s in detail.sections:
        add_section(s.section.name, s.ingredients, s.instructions)
    if detail.unsectioned_ingredients or detail.unsectioned_instructions:
        add_section(DEFAULT_SECTION, detail.unsectioned_ingredients, detail.unsectioned_instructions)

    payload = {
        'title': recipe.title,
        'description': recipe.description or '',
        'servings': {'amount': recipe.servings_amount},
        'times': {'prep': recipe.time_prep, 'cook': recipe.time_cook, 'total': recipe.time_total},
        'sections': sections,
        'image_url': recipe.image_url,
        'cuisine': recipe.cuisine,
        'source_type': recipe.source_type,
        'source_url': recipe.source_url,
    }
    for attr, kind in NOTE_GROUPS:
        payload[attr] = [n.text for n in detail.notes if n.kind == kind]
    return payload


# ============================================
# SAVING
# ============================================

def _apply_recipe_fields(recipe, payload):
    recipe.title = payload.title
    recipe.description = payload.description
    recipe.servings_amount = payload.servings.amount
    recipe.time_prep = payload.times.prep
    recipe.time_cook = payload.times.cook
    recipe.time_total = payload.times.total
    recipe.image_url = payload.image_url
    recipe.cuisine = payload.cuisine
    recipe.source_type = payload.source_type
    recipe.source_url = payload.source_url
    recipe.updated_at = utcnow()


def _section_order(payload):
    """Unique section names, first seen across ingredients then instructions; 'Main' excluded."""
    order = []
    for attr in ('ingredients', 'steps'):
        for section in payload.sections:
            if getattr(section, attr) and section.name != DEFAULT_SECTION and section.name not in order:
                order.append(section.name)
    return order


def _grouped(payload, attr):
    """(section name, rows) pairs with repeated section names merged, in first-seen order."""
    groups = {}
    for section in payload.sections:
        rows = getattr(section, attr)
        if rows:
            groups.setdefault(section.name, []).extend(rows)
    return groups.items()


def _ingredient_row(recipe_id, section_id, line, order_index):
    if line.item:
        structured = StructuredIngredient(
            item=line.item,
            amount=line.amount,
            unit=line.unit or None,
            notes=line.notes or None,
        )
        # Structured fields are authoritative; regenerate the raw line from them
        raw_text = build_ingredient_text(structured)
    else:
        raw_text = line.raw.strip()
        structured = parse_ingredient_line(raw_text)

    quantity = None
    if structured.amount is not None:
        quantity = Quantity.from_amount(structured.amount)

    return RecipeIngredient(
        recipe_id=recipe_id,
        section_id=section_id,
        raw_text=raw_text,
        quantity_numerator=quantity.numerator if quantity else None,
        quantity_denominator=quantity.denominator if quantity else None,
        unit=structured.unit,
        item=structured.item or None,
        notes=structured.notes,
        order_index=order_index,
    )


def _delete_children(recipe_id):
    RecipeIngredient.query.filter_by(recipe_id=recipe_id).delete()
    Instruction.query.filter_by(recipe_id=recipe_id).delete()
    RecipeNote.query.filter_by(recipe_id=recipe_id).delete()
    RecipeSection.query.filter_by(recipe_id=recipe_id).delete()


def _insert_children(recipe, payload):
    section_ids = {}
    for index, name in enumerate(_section_order(payload)):
        section = RecipeSection(recipe_id=recipe.id, name=name, order_index=index)
        db.session.add(section)
        db.session.flush()
        section_ids[name] = section.id

    for name, lines in _grouped(payload, 'ingredients'):
        section_id = section_ids.get(name)
        for index, line in enumerate(lines):
            db.session.add(_ingredient_row(recipe.id, section_id, line, index))

    for name, steps in _grouped(payload, 'steps'):
        section_id = section_ids.get(name)
        if all(step.step is not None for step in steps):
            steps = sorted(steps, key=lambda step: step.step)
        # Renumber so steps stay contiguous from 1 within the section
        for number, step in enumerate(steps, 1):
            db.session.add(Instruction(
                recipe_id=recipe.id,
                section_id=section_id,
                step_number=number,
                text=step.text,
                notes=step.notes or None,
            ))

    # One counter across all note kinds
    order_index = 0
    for attr, kind in NOTE_GROUPS:
        for text in getattr(payload, attr):
            db.session.add(RecipeNote(recipe_id=recipe.id, kind=kind, text=text, order_index=order_index))
            order_index += 1


def create_recipe(payload):
    """Insert a recipe with all of its child rows; returns the new recipe id."""
    try:
        recipe = Recipe()
        _apply_recipe_fields(recipe, payload)
        db.session.add(recipe)
        db.session.flush()
        _insert_children(recipe, payload)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Failed to create recipe %r", payload.title)
        raise TransactionFailure('Failed to save recipe') from exc

    logger.info("Created recipe %s (%s)", recipe.id, recipe.title)
    return recipe.id


def save_recipe_detail(recipe_id, payload):
    """
    Replace a recipe's fields and every child row in one transaction.

    Existing sections, ingredients, instructions and notes are deleted and
    the payload's full set inserted. On any database error nothing changes.
    """
    recipe = get_by_id(Recipe, recipe_id)
    if recipe is None:
        raise NotFound(f"Recipe {recipe_id} not found")

    try:
        _apply_recipe_fields(recipe, payload)
        _delete_children(recipe_id)
        db.session.flush()
        _insert_children(recipe, payload)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Failed to save recipe %s, rolled back", recipe_id)
        raise TransactionFailure('Failed to save recipe') from exc

    logger.info("Saved recipe %s (%s)", recipe_id, payload.title)
    return recipe_id


def delete_recipe(recipe_id):
    """Delete a recipe and its children; meal plan entries keep their row with no recipe."""
    recipe = get_by_id(Recipe, recipe_id)
    if recipe is None:
        raise NotFound(f"Recipe {recipe_id} not found")

    try:
        # Clear MealPlanEntry references (set recipe_id to NULL for this recipe)
        MealPlanEntry.query.filter_by(recipe_id=recipe_id).update({'recipe_id': None})
        db.session.delete(recipe)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Failed to delete recipe %s", recipe_id)
        raise TransactionFailure('Failed to delete recipe') from exc

    logger.info("Deleted recipe %s", recipe_id)

"""
Shopping List Service

Builds a shopping list from the meal plan: works out how many servings of
each planned recipe are needed, scales every ingredient line to match, and
merges identical lines across recipes.
"""

import logging
import unicodedata
from fractions import Fraction

from .mealplan import get_entries
from .parsing import parse_ingredient_line
from .quantity import Quantity
from .recipes import load_ingredient_lines

logger = logging.getLogger(__name__)


def collation_key(text):
    """
    Sort key approximating a locale-aware compare.

    Accents and case are ignored first; ties put lowercase before uppercase.
    """
    stripped = ''.join(
        c for c in unicodedata.normalize('NFKD', text) if not unicodedata.combining(c)
    )
    return (stripped.casefold(), stripped.swapcase(), text)


def scale_factor(total_servings, base_servings):
    """Servings needed over servings the recipe makes; 1 when the base is unusable."""
    if not base_servings or base_servings <= 0:
        return Fraction(1)
    return Fraction(total_servings, base_servings)


def shopping_line(row, factor):
    """
    Display text for one ingredient line scaled by factor.

    Lines with a quantity are rebuilt as 'amount unit item' (notes left
    off); lines without one keep their raw text unscaled.
    """
    quantity = Quantity.from_columns(row.quantity_numerator, row.quantity_denominator)
    if quantity is None or quantity.numerator == 0:
        return row.raw_text

    item = row.item or parse_ingredient_line(row.raw_text).item
    parts = [quantity.scale(factor).format(), row.unit, item]
    return ' '.join(part.strip() for part in parts if part and part.strip())


def collect_recipe_demand(entries):
    """
    Total servings needed per recipe, in first-planned order.

    Each entry contributes its servings override, or the recipe's base
    servings when it has none. Entries without a recipe are skipped.
    """
    demand = {}
    for entry in entries:
        if entry.recipe_id is None:
            continue
        servings = entry.servings if entry.servings is not None else entry.recipe_servings
        recipe = demand.get(entry.recipe_id)
        if recipe is None:
            demand[entry.recipe_id] = {
                'title': entry.recipe_title,
                'total_servings': servings,
                'base_servings': entry.recipe_servings,
            }
        else:
            recipe['total_servings'] += servings
    return demand


def aggregate_ingredients(demand, lines_by_recipe):
    """Group scaled display lines by exact text, collecting contributing recipe titles."""
    grouped = {}
    for recipe_id, info in demand.items():
        factor = scale_factor(info['total_servings'], info['base_servings'])
        if not info['base_servings'] or info['base_servings'] <= 0:
            logger.warning("Recipe %s has no base servings; using its quantities unscaled", recipe_id)
        for row in lines_by_recipe.get(recipe_id, []):
            text = shopping_line(row, factor)
            titles = grouped.setdefault(text, [])
            if info['title'] not in titles:
                titles.append(info['title'])

    items = [{'ingredient': text, 'recipes': titles} for text, titles in grouped.items()]
    items.sort(key=lambda item: collation_key(item['ingredient']))
    return items


def generate_shopping_list(start_date, end_date):
    """
    Shopping list for every planned meal between start_date and end_date inclusive.

    Returns {'ingredients': [{'ingredient', 'recipes'}], 'recipes':
    [{'title', 'total_servings', 'base_servings'}], 'date_range': {...}}.
    """
    date_range = {'start': start_date, 'end': end_date}
    entries = [e for e in get_entries(start_date, end_date) if e.recipe_id is not None]
    if not entries:
        return {'ingredients': [], 'recipes': [], 'date_range': date_range}

    demand = collect_recipe_demand(entries)
    lines_by_recipe = load_ingredient_lines(demand.keys())
    ingredients = aggregate_ingredients(demand, lines_by_recipe)

    logger.info(
        "Shopping list %s..%s: %d recipes, %d lines",
        start_date, end_date, len(demand), len(ingredients),
    )
    return {
        'ingredients': ingredients,
        'recipes': list(demand.values()),
        'date_range': date_range,
    }

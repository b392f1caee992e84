"""
Recipe Import Service

Builds a recipe payload from a web page's schema.org Recipe JSON-LD.
"""

import json
import logging
import re

import requests
from bs4 import BeautifulSoup
from flask import current_app
from pydantic import ValidationError as PydanticValidationError

from constants import DEFAULT_SECTION, MAX_LENGTHS, MAX_SERVINGS
from utils.sanitizer import (
    sanitize_text,
    sanitize_url,
    sanitize_recipe_title,
    sanitize_ingredient_text,
)
from utils.url_validator import safe_fetch, SSRFError
from .errors import ImportFailure
from .schemas import RecipePayload

logger = logging.getLogger(__name__)

ISO_DURATION = re.compile(
    r'^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$',
    re.IGNORECASE,
)
STEP_NUMBER_PREFIX = re.compile(r'^\s*(?:step\s*)?\d+[.):]\s*', re.IGNORECASE)
DEFAULT_SERVINGS = 4


def _is_recipe(node):
    kind = node.get('@type')
    return kind == 'Recipe' or (isinstance(kind, list) and 'Recipe' in kind)


def find_recipe_node(data):
    """Depth-first search of JSON-LD data (object, list or @graph) for a Recipe."""
    if isinstance(data, list):
        for item in data:
            found = find_recipe_node(item)
            if found:
                return found
    elif isinstance(data, dict):
        if _is_recipe(data):
            return data
        if '@graph' in data:
            return find_recipe_node(data['@graph'])
    return None


def extract_recipe_json(html):
    """First schema.org Recipe object found in the page's JSON-LD scripts, or None."""
    soup = BeautifulSoup(html, 'html.parser')
    for script in soup.find_all('script', type='application/ld+json'):
        try:
            data = json.loads(script.string or script.get_text())
        except (json.JSONDecodeError, TypeError):
            continue
        recipe = find_recipe_node(data)
        if recipe:
            return recipe
    return None


def format_duration(value):
    """ISO-8601 duration ('PT1H30M') to display text ('1 hr 30 min'); other text is cleaned."""
    if not value:
        return ''
    match = ISO_DURATION.match(str(value).strip())
    if not match:
        return sanitize_text(value, max_length=MAX_LENGTHS['time'])

    days = int(match.group('days') or 0)
    hours = int(match.group('hours') or 0) + days * 24
    minutes = int(match.group('minutes') or 0)
    parts = []
    if hours:
        parts.append(f"{hours} hr")
    if minutes or not hours:
        parts.append(f"{minutes} min")
    return ' '.join(parts)


def parse_servings(value):
    """First whole number in recipeYield ('4 servings', ['6', '6 slices'], 8)."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        servings = int(value)
    else:
        match = re.search(r'\d+', str(value or ''))
        servings = int(match.group()) if match else DEFAULT_SERVINGS
    return min(max(servings, 1), MAX_SERVINGS)


def _first_text(value):
    if isinstance(value, list):
        return ', '.join(sanitize_text(v) for v in value if v)
    return sanitize_text(value) if value else ''


def _image_url(value):
    if isinstance(value, list):
        value = value[0] if value else ''
    if isinstance(value, dict):
        value = value.get('url', '')
    return sanitize_url(value) or None


def _step_text(node):
    if isinstance(node, str):
        text = node
    elif isinstance(node, dict):
        text = node.get('text') or node.get('name') or ''
    else:
        return ''
    return STEP_NUMBER_PREFIX.sub('', sanitize_text(text))


def parse_instructions(value):
    """
    recipeInstructions as (section name, [step texts]) pairs.

    Plain steps go under the default section; each HowToSection becomes its
    own named section.
    """
    main_steps = []
    sections = []
    if isinstance(value, str):
        for line in re.split(r'\n+', value):
            text = _step_text(line)
            if text:
                main_steps.append(text)
    elif isinstance(value, list):
        for node in value:
            if isinstance(node, dict) and node.get('@type') == 'HowToSection':
                name = sanitize_text(node.get('name'), max_length=MAX_LENGTHS['section_name']) or DEFAULT_SECTION
                steps = [t for t in (_step_text(n) for n in node.get('itemListElement') or []) if t]
                if steps:
                    sections.append((name, steps))
            else:
                text = _step_text(node)
                if text:
                    main_steps.append(text)
    if main_steps:
        sections.insert(0, (DEFAULT_SECTION, main_steps))
    return sections


def recipe_json_to_payload(data, source_url=None):
    """Map a schema.org Recipe object to a validated RecipePayload."""
    ingredients = [
        {'raw': line}
        for line in (sanitize_ingredient_text(i) for i in data.get('recipeIngredient') or [])
        if line
    ]
    instruction_sections = parse_instructions(data.get('recipeInstructions'))

    sections = [{'name': DEFAULT_SECTION, 'ingredients': ingredients, 'steps': []}]
    for name, steps in instruction_sections:
        step_rows = [{'step': n, 'text': text} for n, text in enumerate(steps, 1)]
        if name == DEFAULT_SECTION:
            sections[0]['steps'] = step_rows
        else:
            sections.append({'name': name, 'ingredients': [], 'steps': step_rows})

    payload = {
        'title': sanitize_recipe_title(data.get('name'), max_length=MAX_LENGTHS['title']),
        'description': sanitize_text(data.get('description')),
        'servings': {'amount': parse_servings(data.get('recipeYield'))},
        'times': {
            'prep': format_duration(data.get('prepTime')),
            'cook': format_duration(data.get('cookTime')),
            'total': format_duration(data.get('totalTime')),
        },
        'sections': sections,
        'cuisine': _first_text(data.get('recipeCuisine'))[:MAX_LENGTHS['cuisine']] or None,
        'image_url': _image_url(data.get('image')),
        'source_type': 'import',
        'source_url': sanitize_url(source_url) or None,
    }
    try:
        return RecipePayload.model_validate(payload)
    except PydanticValidationError as exc:
        logger.warning("Imported recipe from %s failed validation: %s", source_url, exc)
        raise ImportFailure('Imported recipe data is incomplete') from exc


def parse_recipe_html(html, source_url=None):
    """Recipe payload from a page's HTML; ImportFailure when it has no Recipe JSON-LD."""
    data = extract_recipe_json(html)
    if data is None:
        raise ImportFailure('Could not find structured recipe data on that page')
    return recipe_json_to_payload(data, source_url)


def import_recipe_from_url(url):
    """Fetch a recipe page and turn it into a payload ready to be reviewed and saved."""
    config = current_app.config
    try:
        response = safe_fetch(
            url,
            timeout=config.get('IMPORT_TIMEOUT', 10),
            max_size=config.get('IMPORT_MAX_BYTES', 10 * 1024 * 1024),
        )
    except SSRFError as exc:
        logger.warning("Blocked recipe import from %s: %s", url, exc)
        raise ImportFailure(f'URL blocked for security: {exc}', status_code=400) from exc
    except requests.RequestException as exc:
        logger.warning("Could not fetch %s: %s", url, exc)
        raise ImportFailure(f'Could not fetch URL: {exc}', status_code=502) from exc

    payload = parse_recipe_html(response.text, source_url=url)
    logger.info("Imported recipe %r from %s", payload.title, url)
    return payload

"""
Recipe Generation Service

Turns a text prompt into a recipe payload through an external generator.
The generator is any callable set as RECIPE_GENERATOR in the app config;
it takes the prompt and returns a dict shaped like a recipe payload.
"""

import logging

from flask import current_app
from pydantic import ValidationError as PydanticValidationError

from constants import DEFAULT_SECTION
from .errors import GeneratorUnavailable, GenerationFailure
from .schemas import RecipePayload

logger = logging.getLogger(__name__)


def _clean_section(section):
    ingredients = []
    for line in section.get('ingredients') or []:
        if isinstance(line, str):
            line = {'raw': line}
        if isinstance(line, dict) and (line.get('item') or line.get('raw')):
            ingredients.append(line)

    steps = []
    for step in section.get('steps') or section.get('instructions') or []:
        if isinstance(step, str):
            step = {'text': step}
        if isinstance(step, dict) and str(step.get('text') or '').strip():
            steps.append(step)

    return {
        'name': section.get('name') or DEFAULT_SECTION,
        'ingredients': ingredients,
        'steps': steps,
    }


def generated_to_payload(data):
    """
    Validate a generator response as a recipe payload.

    Blank ingredient lines and steps are dropped and the payload is marked
    as AI-sourced. Anything that still does not validate is a
    GenerationFailure, not a client error.
    """
    if not isinstance(data, dict):
        raise GenerationFailure('Recipe generator returned an unexpected response')

    sections = data.get('sections') or []
    if not isinstance(sections, list) or not all(isinstance(s, dict) for s in sections):
        raise GenerationFailure('Recipe generator returned an unexpected response')

    payload = dict(data)
    payload['sections'] = [_clean_section(s) for s in sections]
    payload['source_type'] = 'ai'
    payload.pop('source_url', None)
    payload.setdefault('servings', 4)

    try:
        return RecipePayload.model_validate(payload)
    except PydanticValidationError as exc:
        logger.warning("Generated recipe failed validation: %s", exc)
        raise GenerationFailure('Recipe generator returned an invalid recipe') from exc


def generate_recipe(prompt):
    """Run the configured generator for a prompt and return a validated payload."""
    generator = current_app.config.get('RECIPE_GENERATOR')
    if not callable(generator):
        raise GeneratorUnavailable('Recipe generator not configured')

    try:
        data = generator(prompt)
    except Exception as exc:
        logger.exception("Recipe generator failed for prompt %r", prompt)
        raise GenerationFailure('Recipe generation failed') from exc

    payload = generated_to_payload(data)
    logger.info("Generated recipe %r", payload.title)
    return payload

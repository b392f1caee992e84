"""
Meal Planner Web Application

JSON API over the recipe, meal plan and shopping list services.
"""

import logging

import click
from flask import Blueprint, Flask, jsonify, request
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import get_config
from models import db
from services import (
    RecipeAppError,
    ValidationError,
    RecipePayload,
    MealPlanEntryPayload,
    DateRangeQuery,
    ImportRequest,
    GenerateRequest,
    validate_payload,
    list_recipes,
    load_recipe_detail,
    recipe_to_payload,
    create_recipe,
    save_recipe_detail,
    delete_recipe,
    entry_to_dict,
    get_entries,
    upsert_entry,
    remove_entry,
    generate_shopping_list,
    import_recipe_from_url,
    generate_recipe,
)

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__, url_prefix='/api')
migrate = Migrate()

MAX_LIST_LIMIT = 100


def _json_body():
    return request.get_json(silent=True)


def _payload_json(payload):
    return payload.model_dump(mode='json', exclude_none=True)


# ============================================
# ROUTES - RECIPES
# ============================================

@api.route('/recipes')
def recipes_list():
    query = request.args.get('q', '').strip() or None
    limit = request.args.get('limit', 20, type=int)
    limit = min(max(limit, 1), MAX_LIST_LIMIT)
    return jsonify({'recipes': list_recipes(query, limit)})


@api.route('/recipes', methods=['POST'])
def recipes_create():
    payload = validate_payload(RecipePayload, _json_body(), 'Invalid recipe')
    recipe_id = create_recipe(payload)
    return jsonify({'id': recipe_id}), 201


@api.route('/recipes/<int:id>')
def recipe_detail(id):
    return jsonify(load_recipe_detail(id).to_dict())


@api.route('/recipes/<int:id>/edit')
def recipe_edit(id):
    return jsonify(recipe_to_payload(load_recipe_detail(id)))


@api.route('/recipes/<int:id>', methods=['PUT'])
def recipe_update(id):
    payload = validate_payload(RecipePayload, _json_body(), 'Invalid recipe')
    save_recipe_detail(id, payload)
    return jsonify({'success': True, 'id': id})


@api.route('/recipes/<int:id>', methods=['DELETE'])
def recipe_delete(id):
    delete_recipe(id)
    return jsonify({'success': True})


# ============================================
# ROUTES - IMPORT & GENERATE
# ============================================

@api.route('/recipes/import', methods=['POST'])
def recipe_import():
    data = validate_payload(ImportRequest, _json_body(), 'Invalid import request')
    payload = import_recipe_from_url(data.url)
    return jsonify({'recipe': _payload_json(payload)})


@api.route('/recipes/generate', methods=['POST'])
def recipe_generate():
    data = validate_payload(GenerateRequest, _json_body(), 'Invalid generation request')
    payload = generate_recipe(data.prompt)
    return jsonify({'recipe': _payload_json(payload)})


# ============================================
# ROUTES - MEAL PLAN
# ============================================

@api.route('/meal-plan')
def meal_plan_list():
    dates = validate_payload(DateRangeQuery, request.args.to_dict(), 'Invalid date range')
    entries = get_entries(dates.start, dates.end)
    return jsonify({'entries': [e.to_dict() for e in entries]})


@api.route('/meal-plan', methods=['POST'])
def meal_plan_save():
    data = validate_payload(MealPlanEntryPayload, _json_body(), 'Invalid meal plan entry')
    entry, created = upsert_entry(
        data.date, data.meal_slot,
        recipe_id=data.recipe_id, servings=data.servings, notes=data.notes,
    )
    return jsonify({'entry': entry_to_dict(entry)}), 201 if created else 200


@api.route('/meal-plan', methods=['DELETE'])
@api.route('/meal-plan/<int:id>', methods=['DELETE'])
def meal_plan_delete(id=None):
    if id is None:
        id = request.args.get('id', type=int)
    if id is None:
        raise ValidationError('Missing meal plan entry id',
                              details=[{'field': 'id', 'message': 'Field required'}])
    remove_entry(id)
    return jsonify({'success': True})


# ============================================
# ROUTES - SHOPPING LIST
# ============================================

@api.route('/shopping-list')
def shopping_list():
    dates = validate_payload(DateRangeQuery, request.args.to_dict(), 'Invalid date range')
    return jsonify(generate_shopping_list(dates.start, dates.end))


# ============================================
# ERROR HANDLERS
# ============================================

def handle_app_error(error):
    if error.status_code >= 500:
        logger.error("%s: %s", type(error).__name__, error.message)
    return jsonify(error.to_dict()), error.status_code


def handle_http_error(error):
    return jsonify({'error': error.description}), error.code


# ============================================
# APPLICATION FACTORY
# ============================================

def configure_logging(app):
    level = app.config.get('LOG_LEVEL', 'INFO')
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger().setLevel(level)


def init_db(app):
    """Create every table that does not exist yet."""
    with app.app_context():
        db.create_all()


def create_app(config_name=None):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    app.json.sort_keys = app.config.get('JSON_SORT_KEYS', False)

    configure_logging(app)
    db.init_app(app)
    migrate.init_app(app, db)

    app.register_blueprint(api)
    app.register_error_handler(RecipeAppError, handle_app_error)
    app.register_error_handler(HTTPException, handle_http_error)

    @app.cli.command('init-db')
    def init_db_command():
        """Create the database tables."""
        init_db(app)
        click.echo('Initialized the database.')

    logger.debug("App created with %s", get_config(config_name).__name__)
    return app


if __name__ == '__main__':
    app = create_app()
    init_db(app)
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=5000, use_reloader=False)

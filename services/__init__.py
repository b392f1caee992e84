"""
Services Package

Business logic modules for the recipe and meal planning application.
"""

from .errors import (
    RecipeAppError,
    NotFound,
    ValidationError,
    TransactionFailure,
    ImportFailure,
    GeneratorUnavailable,
    GenerationFailure,
)

from .quantity import (
    Quantity,
    scale_quantity,
    format_quantity,
)

from .parsing import (
    StructuredIngredient,
    normalize_fractions,
    parse_amount,
    parse_ingredient_line,
    build_ingredient_text,
)

from .schemas import (
    RecipePayload,
    MealPlanEntryPayload,
    DateRangeQuery,
    ImportRequest,
    GenerateRequest,
    validate_payload,
)

from .recipes import (
    RecipeDetail,
    load_recipe_detail,
    flatten_ingredients,
    list_recipes,
    recipe_to_payload,
    create_recipe,
    save_recipe_detail,
    delete_recipe,
)

from .mealplan import (
    entry_to_dict,
    get_entries,
    upsert_entry,
    remove_entry,
)

from .shopping import (
    generate_shopping_list,
)

from .importer import (
    parse_recipe_html,
    import_recipe_from_url,
)

from .generator import (
    generated_to_payload,
    generate_recipe,
)

__all__ = [
    # Errors
    'RecipeAppError',
    'NotFound',
    'ValidationError',
    'TransactionFailure',
    'ImportFailure',
    'GeneratorUnavailable',
    'GenerationFailure',
    # Quantity
    'Quantity',
    'scale_quantity',
    'format_quantity',
    # Parsing
    'StructuredIngredient',
    'normalize_fractions',
    'parse_amount',
    'parse_ingredient_line',
    'build_ingredient_text',
    # Schemas
    'RecipePayload',
    'MealPlanEntryPayload',
    'DateRangeQuery',
    'ImportRequest',
    'GenerateRequest',
    'validate_payload',
    # Recipes
    'RecipeDetail',
    'load_recipe_detail',
    'flatten_ingredients',
    'list_recipes',
    'recipe_to_payload',
    'create_recipe',
    'save_recipe_detail',
    'delete_recipe',
    # Meal plan
    'entry_to_dict',
    'get_entries',
    'upsert_entry',
    'remove_entry',
    # Shopping
    'generate_shopping_list',
    # Import / generation
    'parse_recipe_html',
    'import_recipe_from_url',
    'generated_to_payload',
    'generate_recipe',
]

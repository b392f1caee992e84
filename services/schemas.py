"""
Request Schemas

Pydantic models every request body and query is validated against before
it reaches the services. Services only ever see these validated objects.
"""

from datetime import date as date_type
from decimal import Decimal
from typing import List, Literal, Optional
from urllib.parse import urlparse

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)

from constants import DATE_PATTERN, DEFAULT_SECTION, MAX_AMOUNT, MAX_LENGTHS, MAX_ROW_ID, MAX_SERVINGS
from .errors import ValidationError
from .parsing import parse_amount
from .quantity import Quantity, to_fraction

MealSlot = Literal['breakfast', 'lunch', 'dinner', 'snack']
SourceType = Literal['manual', 'ai', 'import']


class Schema(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra='ignore')


def _check_http_url(value):
    if value in (None, ''):
        return None
    parsed = urlparse(value)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ValueError('must be an http or https URL')
    return value


def _check_iso_date(value):
    try:
        date_type.fromisoformat(value)
    except ValueError:
        raise ValueError('not a valid calendar date')
    return value


class IngredientLinePayload(Schema):
    """
    One ingredient line.

    Either the structured fields (item, amount, unit, notes) or a free-text
    raw line may be given; raw is parsed when item is blank.
    """
    item: str = Field(default='', max_length=MAX_LENGTHS['item'])
    amount: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT)
    unit: Optional[str] = Field(default=None, max_length=MAX_LENGTHS['unit'])
    notes: Optional[str] = Field(default=None, max_length=MAX_LENGTHS['ingredient_notes'])
    raw: Optional[str] = Field(default=None, max_length=MAX_LENGTHS['ingredient_text'])

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, value):
        if value is None or value == '':
            return None
        if isinstance(value, bool):
            raise ValueError('not a valid amount')
        if isinstance(value, str):
            fraction = parse_amount(value)
            if fraction is None:
                raise ValueError('not a valid amount')
        else:
            try:
                fraction = to_fraction(value)
            except (TypeError, ValueError):
                raise ValueError('not a valid amount')
        return Quantity.from_amount(fraction).to_decimal()

    @model_validator(mode='after')
    def require_text(self):
        if not self.item and not (self.raw or '').strip():
            raise ValueError('ingredient needs an item or a raw line')
        return self


class InstructionStepPayload(Schema):
    step: Optional[int] = Field(default=None, ge=1)
    text: str = Field(min_length=1)
    notes: Optional[str] = Field(default=None, max_length=MAX_LENGTHS['step_notes'])


class SectionPayload(Schema):
    name: str = Field(default=DEFAULT_SECTION, max_length=MAX_LENGTHS['section_name'])
    ingredients: List[IngredientLinePayload] = Field(default_factory=list)
    steps: List[InstructionStepPayload] = Field(
        default_factory=list,
        validation_alias=AliasChoices('steps', 'instructions'),
    )

    @field_validator('name')
    @classmethod
    def default_name(cls, value):
        return value or DEFAULT_SECTION


class ServingsPayload(Schema):
    amount: int = Field(ge=1, le=MAX_SERVINGS)
    notes: Optional[str] = None


class TimesPayload(Schema):
    prep: str = Field(default='', max_length=MAX_LENGTHS['time'])
    cook: str = Field(default='', max_length=MAX_LENGTHS['time'])
    total: str = Field(default='', max_length=MAX_LENGTHS['time'])

    @field_validator('prep', 'cook', 'total', mode='before')
    @classmethod
    def none_to_blank(cls, value):
        return '' if value is None else value


class RecipePayload(Schema):
    """Full recipe: row fields plus the complete set of child rows."""
    title: str = Field(min_length=1, max_length=MAX_LENGTHS['title'])
    description: str = ''
    servings: ServingsPayload
    times: TimesPayload = Field(default_factory=TimesPayload)
    sections: List[SectionPayload] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    storage: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)
    variations: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    cuisine: Optional[str] = Field(default=None, max_length=MAX_LENGTHS['cuisine'])
    source_type: SourceType = 'manual'
    source_url: Optional[str] = None

    @field_validator('servings', mode='before')
    @classmethod
    def bare_servings(cls, value):
        # Accept "servings": 4 as well as "servings": {"amount": 4}
        if isinstance(value, int) and not isinstance(value, bool):
            return {'amount': value}
        return value

    @field_validator('notes', 'storage', 'tips', 'variations')
    @classmethod
    def drop_blank_notes(cls, value):
        return [text for text in value if text]

    @field_validator('image_url', 'source_url')
    @classmethod
    def http_url(cls, value):
        return _check_http_url(value)


class MealPlanEntryPayload(Schema):
    date: str = Field(pattern=DATE_PATTERN)
    meal_slot: MealSlot = Field(validation_alias=AliasChoices('meal_slot', 'mealSlot'))
    recipe_id: Optional[int] = Field(
        default=None, ge=1, le=MAX_ROW_ID,
        validation_alias=AliasChoices('recipe_id', 'recipeId'),
    )
    servings: Optional[int] = Field(default=None, ge=1, le=MAX_SERVINGS)
    notes: Optional[str] = Field(default=None, max_length=MAX_LENGTHS['entry_notes'])

    @field_validator('date')
    @classmethod
    def calendar_date(cls, value):
        return _check_iso_date(value)


class DateRangeQuery(Schema):
    start: str = Field(pattern=DATE_PATTERN)
    end: str = Field(pattern=DATE_PATTERN)

    @field_validator('start', 'end')
    @classmethod
    def calendar_date(cls, value):
        return _check_iso_date(value)


class ImportRequest(Schema):
    url: str = Field(min_length=1)

    @field_validator('url')
    @classmethod
    def http_url(cls, value):
        return _check_http_url(value)


class GenerateRequest(Schema):
    prompt: str = Field(min_length=1, max_length=MAX_LENGTHS['prompt'])


def validate_payload(schema, data, message='Invalid request data'):
    """Validate data against a schema, raising the service ValidationError."""
    try:
        return schema.model_validate(data if data is not None else {})
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc, message) from exc

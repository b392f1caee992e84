"""
Constants Package

Unit vocabulary, fraction tables and validation whitelists.
"""

from .units import UNIT_WORDS, UNICODE_FRACTIONS, DISPLAY_FRACTIONS
from .validation import (
    MEAL_SLOTS,
    NOTE_KINDS,
    DEFAULT_SECTION,
    DATE_PATTERN,
    MAX_LENGTHS,
    MAX_SERVINGS,
    MAX_AMOUNT,
    MAX_ROW_ID,
)

__all__ = [
    'UNIT_WORDS',
    'UNICODE_FRACTIONS',
    'DISPLAY_FRACTIONS',
    'MEAL_SLOTS',
    'NOTE_KINDS',
    'DEFAULT_SECTION',
    'DATE_PATTERN',
    'MAX_LENGTHS',
    'MAX_SERVINGS',
    'MAX_AMOUNT',
    'MAX_ROW_ID',
]

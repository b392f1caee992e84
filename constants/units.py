"""
Unit Constants and Fraction Tables

Contains the unit vocabulary recognised by the ingredient parser and the
fraction tables used to read and display quantities.
"""

from fractions import Fraction

# Unit tokens recognised after a leading amount (matched case-insensitively,
# kept as written). Units are never converted into one another.
UNIT_WORDS = {
    # Volume
    'cup', 'cups', 'c',
    'tablespoon', 'tablespoons', 'tbsp', 'tbs', 'tb', 'tbsps',
    'teaspoon', 'teaspoons', 'tsp', 'tsps', 'ts',
    'milliliter', 'milliliters', 'millilitre', 'millilitres', 'ml',
    'liter', 'liters', 'litre', 'litres', 'l',
    'pint', 'pints', 'pt', 'quart', 'quarts', 'qt',
    'gallon', 'gallons', 'gal', 'floz',
    # Weight
    'pound', 'pounds', 'lb', 'lbs',
    'ounce', 'ounces', 'oz',
    'gram', 'grams', 'g', 'gr',
    'kilogram', 'kilograms', 'kg',
    'milligram', 'milligrams', 'mg',
    # Count-like
    'clove', 'cloves', 'head', 'heads',
    'slice', 'slices', 'piece', 'pieces',
    'can', 'cans', 'jar', 'jars', 'bottle', 'bottles',
    'package', 'packages', 'pkg', 'packet', 'packets',
    'bunch', 'bunches', 'stalk', 'stalks', 'sprig', 'sprigs',
    'stick', 'sticks', 'pinch', 'pinches', 'dash', 'dashes',
    'handful', 'handfuls', 'bag', 'bags', 'box', 'boxes',
}

# Unicode fraction characters mapping (exact values)
UNICODE_FRACTIONS = {
    '½': Fraction(1, 2),  # ½
    '⅓': Fraction(1, 3),  # ⅓
    '⅔': Fraction(2, 3),  # ⅔
    '¼': Fraction(1, 4),  # ¼
    '¾': Fraction(3, 4),  # ¾
    '⅕': Fraction(1, 5),  # ⅕
    '⅖': Fraction(2, 5),  # ⅖
    '⅗': Fraction(3, 5),  # ⅗
    '⅘': Fraction(4, 5),  # ⅘
    '⅙': Fraction(1, 6),  # ⅙
    '⅚': Fraction(5, 6),  # ⅚
    '⅛': Fraction(1, 8),  # ⅛
    '⅜': Fraction(3, 8),  # ⅜
    '⅝': Fraction(5, 8),  # ⅝
    '⅞': Fraction(7, 8),  # ⅞
}

# Fractional part (in thousandths) -> display glyph. Only parts whose glyph
# parses back to the same thousandth are listed.
DISPLAY_FRACTIONS = {
    125: '⅛', 200: '⅕', 250: '¼', 333: '⅓',
    375: '⅜', 400: '⅖', 500: '½', 600: '⅗',
    625: '⅝', 667: '⅔', 750: '¾', 800: '⅘',
    875: '⅞',
}

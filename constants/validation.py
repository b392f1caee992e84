"""
Validation Constants

Contains whitelist values and field limits used when validating
request payloads before anything is written.
"""

# Meal slots in planning-grid order
MEAL_SLOTS = ('breakfast', 'lunch', 'dinner', 'snack')

# Recipe note kinds, in the order they are stored
NOTE_KINDS = ('note', 'storage', 'tip', 'variation')

# Section name used for unsectioned ingredients and instructions
DEFAULT_SECTION = 'Main'

# ISO calendar date, no time zone
DATE_PATTERN = r'^\d{4}-\d{2}-\d{2}$'

# Maximum field lengths (match the column sizes)
MAX_LENGTHS = {
    'title': 256,
    'time': 64,
    'cuisine': 128,
    'section_name': 128,
    'unit': 64,
    'item': 256,
    'ingredient_notes': 256,
    'ingredient_text': 500,
    'step_notes': 256,
    'entry_notes': 256,
    'prompt': 500,
}

MAX_SERVINGS = 1000

# Largest ingredient amount kept as a quantity; bigger lines stay unstructured
MAX_AMOUNT = 1_000_000

# SQLite INTEGER range; larger ids cannot name a row
MAX_ROW_ID = 2 ** 63 - 1

"""
Parsing Service

Functions for turning free-text ingredient lines into structured
(amount, unit, item, notes) values and back again.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction

from constants import MAX_AMOUNT, UNIT_WORDS, UNICODE_FRACTIONS
from .quantity import Quantity

# Mixed fractions first, then simple fractions, then decimals/integers
AMOUNT_PATTERN = re.compile(r'^(\d+\s+\d+\s*/\s*\d+|\d+\s*/\s*\d+|\d+(?:\.\d+)?|\.\d+)')
MIXED_FRACTION_PATTERN = re.compile(r'^(\d+)\s+(\d+)\s*/\s*(\d+)$')
SIMPLE_FRACTION_PATTERN = re.compile(r'^(\d+)\s*/\s*(\d+)$')
DECIMAL_PATTERN = re.compile(r'^(\d+(?:\.\d+)?|\.\d+)$')
LEADING_WORD_PATTERN = re.compile(r'^([A-Za-z]+)\.?(?=\s)')
TRAILING_NOTES_PATTERN = re.compile(r'^(.+?)\s*\(([^)]+)\)$')


@dataclass
class StructuredIngredient:
    """Best-effort decomposition of an ingredient line."""
    item: str
    amount: Decimal = None
    unit: str = None
    notes: str = None

    def quantity(self):
        if self.amount is None:
            return None
        return Quantity.from_amount(self.amount)

    def to_dict(self):
        data = {'item': self.item}
        if self.amount is not None:
            data['amount'] = float(self.amount)
        if self.unit:
            data['unit'] = self.unit
        if self.notes:
            data['notes'] = self.notes
        return data


def normalize_fractions(text):
    """Replace Unicode fraction characters with ASCII fractions ('1½' -> '1 1/2')."""
    # First, normalize all whitespace (including non-breaking spaces) to regular spaces
    text = re.sub(r'[\s\u00a0\u2000-\u200b]+', ' ', text)

    for char, value in UNICODE_FRACTIONS.items():
        if char in text:
            ascii_fraction = f"{value.numerator}/{value.denominator}"
            # Mixed fraction like "1½" or "1 ½"
            text = re.sub(r'(\d+)\s*' + re.escape(char), r'\1 ' + ascii_fraction, text)
            text = text.replace(char, ascii_fraction)
    # Unicode fraction slash
    return text.replace('\u2044', '/').strip()


def parse_amount(text):
    """
    Parse an amount like '2', '1.5', '1/2' or '1 1/2' into an exact Fraction.

    Returns None when the text is not an amount.
    """
    text = normalize_fractions(text or '')
    try:
        mixed = MIXED_FRACTION_PATTERN.match(text)
        if mixed:
            whole, num, den = (int(g) for g in mixed.groups())
            return whole + Fraction(num, den)
        simple = SIMPLE_FRACTION_PATTERN.match(text)
        if simple:
            return Fraction(int(simple.group(1)), int(simple.group(2)))
        if DECIMAL_PATTERN.match(text):
            return Fraction(text)
    except ZeroDivisionError:
        pass
    return None


def _stored_amount(value):
    """Round an amount to the stored precision."""
    return Quantity.from_amount(value).to_decimal()


def _split_notes(text):
    match = TRAILING_NOTES_PATTERN.match(text)
    if match:
        return match.group(1).strip(), match.group(2).strip()
    return text, None


def _parse_leading_amount(text):
    """Match '<amount> <unit>? <item> (<notes>)?'; None when the line does not fit."""
    match = AMOUNT_PATTERN.match(text)
    if not match:
        return None
    amount = parse_amount(match.group(1))
    if amount is None or amount > MAX_AMOUNT:
        return None

    rest = text[match.end():]
    unit = None
    if not rest[:1].isspace():
        # Only a unit may be glued to the amount, as in "200g flour"
        word = LEADING_WORD_PATTERN.match(rest)
        if not word or word.group(1).lower() not in UNIT_WORDS:
            return None
        unit = word.group(0)
        rest = rest[word.end():]
    else:
        rest = rest.strip()
        word = LEADING_WORD_PATTERN.match(rest)
        if word and word.group(1).lower() in UNIT_WORDS:
            unit = word.group(0)
            rest = rest[word.end():]

    rest = rest.strip()
    if not rest:
        if unit is None:
            return None
        # "2 cups" has no item; the unit word is the item
        rest, unit = unit, None

    item, notes = _split_notes(rest)
    if not item:
        return None
    return StructuredIngredient(item=item, amount=_stored_amount(amount), unit=unit, notes=notes)


def parse_ingredient_line(raw_text):
    """
    Parse an ingredient line like '2 cups flour (sifted)'.

    Never raises: a line without a leading amount falls back to
    'item (notes)', and failing that the whole line is the item.
    """
    text = normalize_fractions(raw_text or '')
    if not text:
        return StructuredIngredient(item='')

    parsed = _parse_leading_amount(text)
    if parsed is not None:
        return parsed

    item, notes = _split_notes(text)
    return StructuredIngredient(item=item, notes=notes)


def build_ingredient_text(ingredient):
    """Inverse of parse_ingredient_line: 'amount unit item (notes)' with absent parts omitted."""
    parts = []
    if ingredient.amount is not None:
        parts.append(Quantity.from_amount(ingredient.amount).to_text())
    if ingredient.unit:
        parts.append(ingredient.unit.strip())
    if ingredient.item:
        parts.append(ingredient.item.strip())
    if ingredient.notes and ingredient.notes.strip():
        parts.append(f"({ingredient.notes.strip()})")
    return re.sub(r'\s+', ' ', ' '.join(parts)).strip()

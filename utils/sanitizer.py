"""
Input Sanitization Module

Cleans text and URLs taken from externally fetched pages before they are
turned into a recipe payload.
"""

import html
import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup

CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b-\x1f\x7f-\x9f]')


def sanitize_text(text, max_length=10000):
    """
    Reduce a fragment of page text to plain text.

    Tags are dropped, entities decoded, control characters removed and
    whitespace collapsed.

    Args:
        text: The text to clean (can be None or a non-string)
        max_length: Maximum allowed length (default 10000)

    Returns:
        Cleaned string, truncated if necessary
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    if '<' in text:
        text = BeautifulSoup(text, 'html.parser').get_text(' ')
    text = html.unescape(text)

    # Remove control characters and null bytes
    text = CONTROL_CHARS.sub('', text)

    # Collapse whitespace
    text = re.sub(r'\s+', ' ', text).strip()

    # Truncate if too long
    if len(text) > max_length:
        text = text[:max_length].rstrip()

    return text


def sanitize_url(url):
    """
    Return the URL if it is a plain http(s) URL, otherwise ''.

    Rejects javascript:, data: and every other scheme that could execute
    code when used in href or src attributes.
    """
    if not url or not isinstance(url, str):
        return ''

    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme.lower() not in ('http', 'https') or not parsed.netloc:
        return ''
    return url


def sanitize_recipe_title(title, max_length=256):
    """Clean a recipe title, falling back to 'Imported Recipe' when nothing is left."""
    title = sanitize_text(title, max_length=max_length)
    return title or 'Imported Recipe'


def sanitize_ingredient_text(text, max_length=500):
    """Clean a single ingredient line from an external source."""
    return sanitize_text(text, max_length=max_length)

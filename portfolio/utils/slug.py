"""Slug generation utilities."""
from __future__ import annotations

import re

# Accented Latin letters folded to ASCII before the slug is built.
ACCENT_MAP = str.maketrans({
    "á": "a", "é": "e", "í": "i", "ó": "o", "ú": "u",
    "Á": "a", "É": "e", "Í": "i", "Ó": "o", "Ú": "u",
    "ñ": "n", "Ñ": "n",
    "ü": "u", "Ü": "u",
})

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def remove_accents(text: str) -> str:
    return text.translate(ACCENT_MAP)


def slugify(text: str) -> str:
    """
    Convert a string to a URL-friendly slug.

    The result only holds lowercase ASCII letters, digits and single hyphens,
    never starts or ends with a hyphen, and slugify(slugify(x)) == slugify(x).

    Args:
        text: The text to convert to a slug

    Returns:
        A URL-friendly slug string (empty when nothing usable remains)
    """
    if not text:
        return ""

    text = remove_accents(text.lower())

    # Every run of characters outside [a-z0-9] becomes one hyphen
    text = re.sub(r"[^a-z0-9]+", "-", text)

    return text.strip("-")


def is_valid_slug(value: str) -> bool:
    return bool(value) and SLUG_PATTERN.match(value) is not None

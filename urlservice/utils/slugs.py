"""Slug validation

Slugs and generated bookmark hashes share one lookup path
(/u/<owner>/b/<hash or slug>). Keeping the two keyspaces disjoint removes any
ambiguity: a slug may never look like a generated hash.
"""

import re

from urlservice.constants import Defaults
from urlservice.exceptions import InvalidSlugError
from urlservice.utils.shortener import is_generated_hash


SLUG_PATTERN = re.compile(r'[A-Za-z0-9._~-]+')


def clean_slug(slug: str | None) -> str | None:
    """Validate a requested slug.

    Returns:
        str | None: The slug with surrounding whitespace stripped, or None when no
                    slug was requested (None or blank string).

    Raises:
        InvalidSlugError: On illegal characters, excessive length or hash-shaped slugs.

    Example:
        >>> clean_slug(' mypage ')
        'mypage'
        >>> clean_slug('') is None
        True
    """
    if slug is None:
        return None
    if not isinstance(slug, str):
        raise InvalidSlugError(f'Slug must be of type string (given type: {type(slug)}).')

    slug = slug.strip()
    if not slug:
        return None
    if len(slug) > Defaults.SLUG_MAX_LENGTH:
        raise InvalidSlugError(f'Slug must be at most {Defaults.SLUG_MAX_LENGTH} characters long (given length: {len(slug)}).')
    if not SLUG_PATTERN.fullmatch(slug):
        raise InvalidSlugError(f"Slug may only contain letters, digits and '.', '_', '~', '-' (given value: {slug!r}).")
    if is_generated_hash(slug):
        raise InvalidSlugError(
            f'Slug must not consist of exactly {Defaults.BOOKMARK_HASH_LENGTH} letters and digits, '
            f'that shape is reserved for generated hashes (given value: {slug!r}).'
        )
    return slug


def is_slug(value: str) -> bool:
    """True if `value` could be a stored slug (shape only, no lookup)."""
    return (
        isinstance(value, str)
        and len(value) <= Defaults.SLUG_MAX_LENGTH
        and SLUG_PATTERN.fullmatch(value) is not None
        and not is_generated_hash(value)
    )

"""Keyword string parsing

Keywords arrive as one freeform string ("python, web;;tools"). The splitting
rule matches the tag strings stored by earlier versions of the service: runs
of whitespace, commas or semicolons separate names and empty tokens vanish.
"""

import re

from urlservice.models import KeywordModel


KEYWORD_SEPARATORS = re.compile(r'[\s,;]+')


def parse_keyword_names(raw: str | None) -> list[str]:
    """Split a raw keyword string into normalized, de-duplicated names.

    Example:
        >>> parse_keyword_names('a, b;;c')
        ['a', 'b', 'c']
        >>> parse_keyword_names(' Python python ')
        ['python']
        >>> parse_keyword_names(None)
        []
    """
    if raw is None:
        return []

    names = []
    for token in KEYWORD_SEPARATORS.split(raw):
        name = token.strip().lower()
        if name and name not in names:
            names.append(name)
    return names


def to_keywords(names) -> frozenset[KeywordModel]:
    """Build KeywordModels from names. Raises InvalidKeywordError on empty names."""
    return frozenset(KeywordModel(name) for name in names)


def join_keyword_names(keywords) -> str:
    return ' '.join(sorted(keyword.name for keyword in keywords))

from dataclasses import dataclass, field, replace
from datetime import datetime
from collections.abc import Iterable

from urlservice.exceptions import InvalidKeywordError


# fmt: off
@dataclass(frozen=True)
class UserModel:
    user_name: str                      # Opaque identity key resolved by the authentication provider


@dataclass(frozen=True, order=True)
class KeywordModel:
    name: str                           # Trimmed, lower-cased tag name

    def __post_init__(self) -> None:
        name = self.name.strip().lower() if isinstance(self.name, str) else ''
        if not name:
            raise InvalidKeywordError(f'Keyword name must be a non-empty string (given value: {self.name!r}).')
        object.__setattr__(self, 'name', name)


@dataclass(frozen=True)
class LongURLModel:
    url: str                            # Long URL as first submitted
    hash: str                           # Global hash, shared by every bookmark of this URL


@dataclass(frozen=True)
class BookmarkModel:
    owner: str                                                  # User name of the bookmark owner
    long_url: LongURLModel                                      # Shared long URL record
    hash: str                                                   # Per-user generated short code
    slug: str | None = None                                     # Optional per-user custom alias
    keywords: frozenset[KeywordModel] = field(default_factory=frozenset)
    created_at: datetime | None = None

    def with_keywords(self, keywords: Iterable[KeywordModel]) -> 'BookmarkModel':
        return replace(self, keywords=frozenset(keywords))

    @property
    def keyword_names(self) -> list[str]:
        return sorted(keyword.name for keyword in self.keywords)
# fmt: on

"""Abstract base class for bookmark data access objects (DAOs).

A bookmark is a user's personal short link: a per-user hash, an optional
slug and a set of keywords, pointing at one shared long URL.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from urlservice.dao.redis import BookmarkRedisDAO
        >>> dao = BookmarkRedisDAO(...)

        >>> bookmark = dao.create('alice', 'https://example.org/page', slug='mypage', keywords=['docs'])
        >>> dao.expand('alice', 'mypage') == dao.expand('alice', bookmark.hash)
        True
        >>> dao.update('alice', bookmark.hash, slug=None, keywords=['docs', 'web']).keyword_names
        ['docs', 'web']
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from urlservice.models import BookmarkModel, LongURLModel


class BookmarkBaseDAO(ABC):
    """Interface for bookmark data access objects (DAOs).

    Methods:
        create(owner, long_url, slug=None, keywords=(), **kwargs) -> BookmarkModel:
            Allocate a fresh per-user hash and store a bookmark for `long_url`.
            Raises SlugConflictError if the slug is taken (nothing is written).
            Raises HashExhaustionError if no free hash was found.
            Raises KeywordAttachError if the bookmark was stored but its keywords weren't.

        get(owner, bookmark_hash, **kwargs) -> BookmarkModel:
            Retrieve a bookmark by its generated hash.
            Raises BookmarkNotFoundError.

        expand(owner, hash_or_slug, **kwargs) -> BookmarkModel:
            Resolve a lookup key, trying the generated hash first, then the slug.
            Raises BookmarkNotFoundError.

        expand_global(url_hash, **kwargs) -> LongURLModel:
            Resolve a global hash, independent of any owner.
            Raises LongURLNotFoundError.

        update(owner, hash_or_slug, slug=None, keywords=None, **kwargs) -> BookmarkModel:
            Replace slug (None clears it) and keywords (None leaves them unchanged).
            Raises BookmarkNotFoundError, SlugConflictError, KeywordAttachError.

        list_by_owner(owner, **kwargs) -> list[BookmarkModel]:
            All bookmarks of an owner, newest first.

    NOTE:
        - Bookmarks are never deleted and never change owner or long URL.
    """

    @abstractmethod
    def create(self, owner: str, long_url: str, slug: str | None = None, keywords: Iterable[str] = (), **kwargs) -> BookmarkModel:
        pass

    @abstractmethod
    def get(self, owner: str, bookmark_hash: str, **kwargs) -> BookmarkModel:
        pass

    @abstractmethod
    def expand(self, owner: str, hash_or_slug: str, **kwargs) -> BookmarkModel:
        pass

    @abstractmethod
    def expand_global(self, url_hash: str, **kwargs) -> LongURLModel:
        pass

    @abstractmethod
    def update(
        self,
        owner: str,
        hash_or_slug: str,
        slug: str | None = None,
        keywords: Iterable[str] | None = None,
        **kwargs,
    ) -> BookmarkModel:
        pass

    @abstractmethod
    def list_by_owner(self, owner: str, **kwargs) -> list[BookmarkModel]:
        pass

"""Abstract base class for long URL data access objects (DAOs).

This is the Shortener contract: every long URL is stored once under a global
hash shared by all users who shorten it.

Responsibilities:
    - Map a long URL to its global hash (lookup-or-insert, idempotent).
    - Resolve a global hash back to its long URL.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from urlservice.dao.redis import LongURLRedisDAO
        >>> dao = LongURLRedisDAO(...)

        >>> long_url = dao.shorten('https://Example.org/page')
        >>> long_url.url
        'https://example.org/page'
        >>> dao.shorten('https://example.org/page').hash == long_url.hash
        True
        >>> dao.get(long_url.hash).url
        'https://example.org/page'
"""

from abc import ABC, abstractmethod

from urlservice.models import LongURLModel


class LongURLBaseDAO(ABC):
    """Interface for long URL data access objects (DAOs).

    Methods:
        shorten(url: str, **kwargs) -> LongURLModel:
            Return the LongURLModel for a URL, creating it on first use.
            Raises InvalidURLError if the URL can't be normalized.
            Raises HashExhaustionError if no free global hash was found.
            Raises DataStoreError on connection or write failure.

        get(url_hash: str, **kwargs) -> LongURLModel:
            Retrieve a LongURLModel by its global hash.
            Raises LongURLNotFoundError if the hash is unknown.
            Raises DataStoreError on connection or read failure.

    NOTE:
        - Long URLs are never deleted: any number of bookmarks may reference them.
    """

    @abstractmethod
    def shorten(self, url: str, **kwargs) -> LongURLModel:
        """Return the LongURLModel for `url`, creating it on first use.

        Implementations must perform the lookup-or-insert atomically so that
        concurrent identical requests never create two records.
        """
        pass

    @abstractmethod
    def get(self, url_hash: str, **kwargs) -> LongURLModel:
        """Retrieve a LongURLModel by its global hash."""
        pass

"""Data Access Object (DAO) implementation for long URLs in Redis

Each long URL lives under its global hash:

    <prefix>:longurls:<hash>:url -> <long url, as first submitted>

Responsibilities:
    - Compute the global hash of the normalized long URL;
    - Claim a hash slot atomically (WATCH/MULTI) and detect collisions;
    - Fall back to salted hashes on collision, up to a retry budget;
    - Resolve a global hash back to its long URL.

Example:
    >>> from urlservice.dao.redis import LongURLRedisDAO
    >>> dao = LongURLRedisDAO(prefix="app:dev")
    >>> long_url = dao.shorten("https://Example.org/page")
    >>> long_url.url
    'https://Example.org/page'
    >>> dao.shorten("https://example.org/page") == long_url
    True
    >>> dao.get(long_url.hash) == long_url
    True
"""

import logging

import redis
from beartype import beartype

from urlservice.constants import Defaults
from urlservice.models import LongURLModel
from urlservice.dao.base import LongURLBaseDAO
from urlservice.dao.redis.mixins import RedisClientMixin
from urlservice.dao.redis.helpers import handle_redis_connection_error
from urlservice.dao.exceptions import HashExhaustionError, LongURLNotFoundError
from urlservice.utils.shortener import normalize_url, generate_url_hash


logger = logging.getLogger(__name__)


class LongURLRedisDAO(RedisClientMixin, LongURLBaseDAO):
    """Redis-based Data Access Object (DAO) for long URLs and their global hashes

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        hash_length (int):
            Length of generated global hashes.
        hash_retries (int):
            Number of salted attempts before giving up.
    """

    def __init__(self, *args, hash_length: int = Defaults.LONG_URL_HASH_LENGTH, hash_retries: int = Defaults.HASH_RETRIES, **kwargs):
        super().__init__(*args, **kwargs)
        self.hash_length = hash_length
        self.hash_retries = hash_retries

    @handle_redis_connection_error
    @beartype
    def shorten(self, url: str, **kwargs) -> LongURLModel:
        """Return the LongURLModel for a URL, creating it on first use

        The hash and the dedup check use the normalized URL; the record keeps
        the URL as first submitted, which is what redirects send clients to.

        Args:
            url (str):
                Long URL to shorten.

        Returns:
            LongURLModel: Shared record of the long URL.

        Raises:
            InvalidURLError:
                If the URL can't be normalized.
            HashExhaustionError:
                If every attempt within the retry budget collided.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        normalize_url(url)  # Reject invalid URLs before opening a transaction

        def _shorten(pipe) -> LongURLModel:
            long_url, is_new = self.claim(pipe, url)
            pipe.multi()
            if is_new:
                self.stage(pipe, long_url)
            return long_url

        return self.redis.transaction(_shorten, value_from_callable=True)

    def claim(self, pipe: redis.client.Pipeline, url: str) -> tuple[LongURLModel, bool]:
        """Pick the hash slot of `url` on a pipeline in immediate (WATCH) mode.

        For attempt = 0, 1, ... the candidate slot is WATCHed and read. A free
        slot is taken, a slot holding an equivalent URL is reused and any other
        value is a collision that moves on to the next salted attempt. Writing a
        taken slot is left to the caller (`stage()` after MULTI), so the claim
        commits together with whatever else the caller's transaction writes.
        Concurrent claims of one free slot abort all but one EXEC; the retry
        then reads the winner's URL and converges on the same hash.

        Returns:
            tuple[LongURLModel, bool]: The record and whether it still has to be written.
        """
        normalized = normalize_url(url)

        for attempt in range(self.hash_retries):
            url_hash = generate_url_hash(normalized, attempt=attempt, length=self.hash_length)
            long_url_key = self.keys.long_url_key(url_hash)

            pipe.watch(long_url_key)
            stored_url = pipe.get(long_url_key)
            if stored_url is None:
                return LongURLModel(url=url.strip(), hash=url_hash), True
            if normalize_url(stored_url) == normalized:
                return LongURLModel(url=stored_url, hash=url_hash), False

            logger.debug(
                'Global hash collision, trying salted fallback.',
                extra={'urlHash': url_hash, 'attempt': attempt},
            )

        raise HashExhaustionError(f'No free global hash for {normalized!r} after {self.hash_retries} attempts.')

    def stage(self, pipe: redis.client.Pipeline, long_url: LongURLModel) -> None:
        """Queue the write of a claimed record (pipeline after MULTI)."""
        pipe.set(self.keys.long_url_key(long_url.hash), long_url.url)

    @handle_redis_connection_error
    @beartype
    def get(self, url_hash: str, **kwargs) -> LongURLModel:
        """Retrieve a long URL by its global hash

        Raises:
            LongURLNotFoundError:
                If no long URL is stored under the hash.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        url = self.redis.get(self.keys.long_url_key(url_hash))
        if url is None:
            raise LongURLNotFoundError(f"Long URL with hash '{url_hash}' not found.")
        return LongURLModel(url=url, hash=url_hash)

"""Data Access Object (DAO) implementation for slug reservations in Redis

    <prefix>:users:<owner>:slugs:<slug> -> <bookmark hash>

A reservation is a compare-and-set guarded by WATCH. Its two halves are exposed
separately so other transactions can take part in one:

    check_holder(pipe, ...)     WATCH + GET, before MULTI (raises on conflict)
    stage_reserve(pipe, ...)    SET, after MULTI
    stage_release(pipe, ...)    DEL, after MULTI

BookmarkRedisDAO claims and releases slugs this way, in the same transaction
that writes the bookmark record.
"""

import logging

import redis
from beartype import beartype

from urlservice.dao.base import SlugBaseDAO
from urlservice.dao.redis.mixins import RedisClientMixin
from urlservice.dao.redis.helpers import handle_redis_connection_error
from urlservice.dao.exceptions import SlugConflictError


logger = logging.getLogger(__name__)


class SlugRedisDAO(RedisClientMixin, SlugBaseDAO):
    """Redis-based slug resolver, scoped per owner."""

    @handle_redis_connection_error
    @beartype
    def reserve(self, owner: str, slug: str, bookmark_hash: str, **kwargs) -> None:
        """Claim `slug` for a bookmark of `owner`

        Raises:
            SlugConflictError:
                If another bookmark of the same owner holds the slug.
            DataStoreError:
                If Redis connectivity issues occur.
        """

        def _reserve(pipe) -> None:
            if self.check_holder(pipe, owner, slug, bookmark_hash):
                return
            pipe.multi()
            self.stage_reserve(pipe, owner, slug, bookmark_hash)

        self.redis.transaction(_reserve)

    @handle_redis_connection_error
    @beartype
    def release(self, owner: str, slug: str, bookmark_hash: str, **kwargs) -> bool:
        """Drop the reservation of `slug` if `bookmark_hash` still holds it

        Returns:
            bool: True if the reservation was dropped, False if it was free or held by another bookmark.
        """

        def _release(pipe) -> bool:
            if self.watch_holder(pipe, owner, slug) != bookmark_hash:
                return False
            pipe.multi()
            self.stage_release(pipe, owner, slug)
            return True

        released = self.redis.transaction(_release, value_from_callable=True)
        if not released:
            logger.debug('Slug not released, held by another bookmark or free.', extra={'owner': owner, 'slug': slug})
        return released

    @handle_redis_connection_error
    @beartype
    def resolve(self, owner: str, slug: str, **kwargs) -> str | None:
        return self.redis.get(self.keys.slug_key(owner, slug))

    def watch_holder(self, pipe: redis.client.Pipeline, owner: str, slug: str) -> str | None:
        """WATCH the reservation and return its holder (pipeline in immediate mode)."""
        slug_key = self.keys.slug_key(owner, slug)
        pipe.watch(slug_key)
        return pipe.get(slug_key)

    def check_holder(self, pipe: redis.client.Pipeline, owner: str, slug: str, bookmark_hash: str | None = None) -> bool:
        """Compare step of the reservation (pipeline in immediate mode).

        `bookmark_hash=None` stands for a bookmark not written yet, which no
        existing reservation can belong to.

        Returns:
            bool: True if `bookmark_hash` already holds the slug, False if it's free.

        Raises:
            SlugConflictError: If another bookmark holds the slug.
        """
        holder = self.watch_holder(pipe, owner, slug)
        if holder is None:
            return False
        if holder != bookmark_hash:
            raise SlugConflictError(f"Slug '{slug}' is already taken by bookmark '{holder}'.")
        return True

    def stage_reserve(self, pipe: redis.client.Pipeline, owner: str, slug: str, bookmark_hash: str) -> None:
        pipe.set(self.keys.slug_key(owner, slug), bookmark_hash)

    def stage_release(self, pipe: redis.client.Pipeline, owner: str, slug: str) -> None:
        pipe.delete(self.keys.slug_key(owner, slug))

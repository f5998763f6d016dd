"""Data Access Object (DAO) implementation for bookmarks in Redis

Key layout (see RedisKeySchema):

    <prefix>:users:<owner>:counter              -> per-user hash counter
    <prefix>:users:<owner>:bookmarks            -> sorted set of hashes, scored by creation time
    <prefix>:users:<owner>:bookmarks:<hash>     -> {url_hash, created_at, slug?}
    <prefix>:users:<owner>:slugs:<slug>         -> <hash>

Responsibilities:
    - Allocate fresh per-user hashes and store bookmark records;
    - Write long URL, slug and bookmark record in one WATCH/MULTI transaction;
    - Resolve per-user lookup keys (hash first, then slug);
    - Attach keywords after the bookmark write commits.

Classes:
    BookmarkRedisDAO:
        DAO for storing and retrieving BookmarkModel in a Redis datastore.

Example:
    >>> from urlservice.dao.redis import BookmarkRedisDAO
    >>> dao = BookmarkRedisDAO(prefix="app:dev")
    >>> bookmark = dao.create("alice", "https://example.org/page", slug="mypage", keywords=["docs"])
    >>> dao.expand("alice", "mypage").hash == bookmark.hash
    True
    >>> dao.expand_global(bookmark.long_url.hash).url
    'https://example.org/page'
"""

import logging
from datetime import datetime, UTC
from collections.abc import Iterable

import redis
from beartype import beartype

from urlservice.constants import Defaults
from urlservice.models import BookmarkModel, LongURLModel
from urlservice.dao.base import BookmarkBaseDAO, KeywordBaseDAO
from urlservice.dao.redis.mixins import RedisClientMixin
from urlservice.dao.redis.long_url_redis_dao import LongURLRedisDAO
from urlservice.dao.redis.slug_redis_dao import SlugRedisDAO
from urlservice.dao.redis.keyword_redis_dao import KeywordRedisDAO
from urlservice.dao.redis.helpers import handle_redis_connection_error
from urlservice.dao.exceptions import (
    BookmarkNotFoundError,
    DataStoreError,
    HashExhaustionError,
    KeywordAttachError,
)
from urlservice.utils.keywords import to_keywords
from urlservice.utils.shortener import normalize_url, generate_shortcode, is_generated_hash
from urlservice.utils.slugs import clean_slug, is_slug


logger = logging.getLogger(__name__)


class BookmarkRedisDAO(RedisClientMixin, BookmarkBaseDAO):
    """Redis-based Data Access Object (DAO) for bookmarks

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        long_urls (LongURLRedisDAO):
            Shortener used to link bookmarks to shared long URLs.
        slugs (SlugRedisDAO):
            Slug resolver whose compare-and-set steps run inside bookmark transactions.
        keyword_index (KeywordBaseDAO):
            Keyword index updated after bookmark writes.
        hash_retries (int):
            Number of fresh hashes tried before giving up.

    Methods:
        create(owner, long_url, slug=None, keywords=()) -> BookmarkModel
        get(owner, bookmark_hash) -> BookmarkModel
        expand(owner, hash_or_slug) -> BookmarkModel
        expand_global(url_hash) -> LongURLModel
        update(owner, hash_or_slug, slug=None, keywords=None) -> BookmarkModel
        list_by_owner(owner) -> list[BookmarkModel]
    """

    def __init__(
        self,
        *args,
        long_urls: LongURLRedisDAO | None = None,
        slugs: SlugRedisDAO | None = None,
        keyword_index: KeywordBaseDAO | None = None,
        hash_retries: int = Defaults.HASH_RETRIES,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.hash_retries = hash_retries
        # Long URL and slug steps run on this DAO's pipelines, so those two must share its client
        self.long_urls = long_urls or LongURLRedisDAO(**self.shared_client_kwargs(), hash_retries=hash_retries)
        self.slugs = slugs or SlugRedisDAO(**self.shared_client_kwargs())
        self.keyword_index = keyword_index or KeywordRedisDAO(**self.shared_client_kwargs())

    @handle_redis_connection_error
    @beartype
    def create(self, owner: str, long_url: str, slug: str | None = None, keywords: Iterable[str] = (), **kwargs) -> BookmarkModel:
        """Store a new bookmark of `owner` for `long_url`

        Procedure:
        - Step 1: Validate URL, slug and keywords (nothing is written on bad input)
        - Step 2: In one transaction, check the slug, claim the shared long URL,
                  allocate a fresh per-user hash and write record + slug
        - Step 3: Attach keywords (best effort, after commit)

        Args:
            owner (str):
                User name of the bookmark owner.
            long_url (str):
                Long URL to bookmark.
            slug (str | None):
                Optional custom alias, unique per owner.
            keywords (Iterable[str]):
                Keyword names to attach.

        Returns:
            BookmarkModel: The committed bookmark with its keywords.

        Raises:
            InvalidURLError / InvalidSlugError / InvalidKeywordError:
                On bad input.
            SlugConflictError:
                If another bookmark of `owner` holds the slug (nothing is written).
            HashExhaustionError:
                If no free long URL or per-user hash was found within the retry budget (nothing is written).
            KeywordAttachError:
                If the bookmark was committed but its keywords weren't.
            DataStoreError:
                If Redis connectivity issues occur before the bookmark commit.
        """
        normalize_url(long_url)
        slug = clean_slug(slug)
        keyword_set = to_keywords(keywords)
        created_at = datetime.now(UTC)

        counter_key = self.keys.bookmark_counter_key(owner)
        index_key = self.keys.bookmark_index_key(owner)

        # NOTE: Every key read below is WATCHed, so the slug check, the long URL
        #       claim and the hash allocation commit together with the writes or
        #       not at all. A concurrent change reruns the whole function:
        #
        #       (request 1): GET <slug key>  => nil
        #                    ... interruption
        #       (request 2): GET <slug key>  => nil
        #                    MULTI / SET <slug key> <hash 2> / EXEC  => committed
        #       (request 1): MULTI / SET <slug key> <hash 1> / EXEC  => aborted (WatchError)
        #                    rerun: GET <slug key>  => <hash 2>  => SlugConflictError
        def _create(pipe) -> tuple[LongURLModel, str]:
            if slug is not None:
                self.slugs.check_holder(pipe, owner, slug)
            shared_url, new_url = self.long_urls.claim(pipe, long_url)
            counter, bookmark_hash = self._allocate_hash(pipe, owner)

            record = {'url_hash': shared_url.hash, 'created_at': created_at.isoformat()}
            if slug is not None:
                record['slug'] = slug

            pipe.multi()
            if new_url:
                self.long_urls.stage(pipe, shared_url)
            pipe.set(counter_key, counter)
            pipe.hset(self.keys.bookmark_key(owner, bookmark_hash), mapping=record)
            pipe.zadd(index_key, {bookmark_hash: created_at.timestamp()})
            if slug is not None:
                self.slugs.stage_reserve(pipe, owner, slug, bookmark_hash)
            return shared_url, bookmark_hash

        shared_url, bookmark_hash = self.redis.transaction(_create, value_from_callable=True)

        bookmark = BookmarkModel(
            owner=owner,
            long_url=shared_url,
            hash=bookmark_hash,
            slug=slug,
            created_at=created_at,
        )
        if not keyword_set:
            return bookmark
        return self._attach_keywords(bookmark, keyword_set)

    @handle_redis_connection_error
    @beartype
    def get(self, owner: str, bookmark_hash: str, **kwargs) -> BookmarkModel:
        """Retrieve a bookmark by its generated hash

        Raises:
            BookmarkNotFoundError:
                If `owner` has no bookmark with this hash.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        record = self.redis.hgetall(self.keys.bookmark_key(owner, bookmark_hash)) if is_generated_hash(bookmark_hash) else None
        if not record:
            raise BookmarkNotFoundError(f"Bookmark '{bookmark_hash}' of user '{owner}' not found.")

        created_at = record.get('created_at')
        bookmark = BookmarkModel(
            owner=owner,
            long_url=self.long_urls.get(record['url_hash']),
            hash=bookmark_hash,
            slug=record.get('slug') or None,
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )
        return bookmark.with_keywords(self.keyword_index.keywords_of(bookmark))

    @handle_redis_connection_error
    @beartype
    def expand(self, owner: str, hash_or_slug: str, **kwargs) -> BookmarkModel:
        """Resolve a per-user lookup key: generated hash first, then slug

        Raises:
            BookmarkNotFoundError:
                If neither a hash nor a slug of `owner` matches.
        """
        bookmark_hash = self._resolve_hash(owner, hash_or_slug)
        if bookmark_hash is None:
            raise BookmarkNotFoundError(f"Bookmark '{hash_or_slug}' of user '{owner}' not found.")
        return self.get(owner, bookmark_hash)

    @beartype
    def expand_global(self, url_hash: str, **kwargs) -> LongURLModel:
        return self.long_urls.get(url_hash)

    @handle_redis_connection_error
    @beartype
    def update(
        self,
        owner: str,
        hash_or_slug: str,
        slug: str | None = None,
        keywords: Iterable[str] | None = None,
        **kwargs,
    ) -> BookmarkModel:
        """Replace slug and keywords of a bookmark

        The slug always gets replaced: None (or a blank string) clears it. The old
        reservation is released in the same transaction that claims the new one.
        Keywords are replaced only when given; None leaves them unchanged.

        Raises:
            BookmarkNotFoundError:
                If `owner` has no bookmark matching `hash_or_slug`.
            InvalidSlugError / InvalidKeywordError:
                On bad input (nothing is written).
            SlugConflictError:
                If another bookmark of `owner` holds the new slug (nothing is written).
            KeywordAttachError:
                If the slug was committed but the keywords weren't.
        """
        new_slug = clean_slug(slug)
        keyword_set = to_keywords(keywords) if keywords is not None else None

        bookmark_hash = self._resolve_hash(owner, hash_or_slug)
        if bookmark_hash is None:
            raise BookmarkNotFoundError(f"Bookmark '{hash_or_slug}' of user '{owner}' not found.")
        bookmark_key = self.keys.bookmark_key(owner, bookmark_hash)

        def _update(pipe) -> None:
            if not pipe.exists(bookmark_key):
                raise BookmarkNotFoundError(f"Bookmark '{hash_or_slug}' of user '{owner}' not found.")

            old_slug = pipe.hget(bookmark_key, 'slug') or None
            # A reservation already taken over by another bookmark is left alone
            release_old = old_slug not in (None, new_slug) and self.slugs.watch_holder(pipe, owner, old_slug) == bookmark_hash
            if new_slug is not None:
                self.slugs.check_holder(pipe, owner, new_slug, bookmark_hash)

            pipe.multi()
            if release_old:
                self.slugs.stage_release(pipe, owner, old_slug)
            if new_slug is not None:
                self.slugs.stage_reserve(pipe, owner, new_slug, bookmark_hash)
                pipe.hset(bookmark_key, 'slug', new_slug)
            else:
                pipe.hdel(bookmark_key, 'slug')

        self.redis.transaction(_update, bookmark_key)

        bookmark = self.get(owner, bookmark_hash)
        if keyword_set is None:
            return bookmark
        return self._attach_keywords(bookmark, keyword_set)

    @handle_redis_connection_error
    @beartype
    def list_by_owner(self, owner: str, **kwargs) -> list[BookmarkModel]:
        hashes = self.redis.zrevrange(self.keys.bookmark_index_key(owner), 0, -1)
        return [self.get(owner, bookmark_hash) for bookmark_hash in hashes]

    def _allocate_hash(self, pipe: redis.client.Pipeline, owner: str) -> tuple[int, str]:
        """Next free per-user hash after the owner's counter (pipeline in immediate mode)."""
        counter_key = self.keys.bookmark_counter_key(owner)
        pipe.watch(counter_key)
        counter = int(pipe.get(counter_key) or 0)

        for attempt in range(self.hash_retries):
            counter += 1
            bookmark_hash = generate_shortcode(counter, salt=owner)
            bookmark_key = self.keys.bookmark_key(owner, bookmark_hash)
            pipe.watch(bookmark_key)
            if not pipe.exists(bookmark_key):
                return counter, bookmark_hash

            logger.warning(
                'Bookmark hash collision, allocating another hash.',
                extra={'owner': owner, 'bookmarkHash': bookmark_hash, 'attempt': attempt},
            )

        raise HashExhaustionError(f"No free bookmark hash for user '{owner}' after {self.hash_retries} attempts.")

    def _resolve_hash(self, owner: str, hash_or_slug: str) -> str | None:
        # Only hash- or slug-shaped keys reach Redis, anything else (e.g. '<hash>:keywords') can't name a bookmark
        if is_generated_hash(hash_or_slug):
            return hash_or_slug if self.redis.exists(self.keys.bookmark_key(owner, hash_or_slug)) else None
        if not is_slug(hash_or_slug):
            return None
        return self.slugs.resolve(owner, hash_or_slug)

    def _attach_keywords(self, bookmark: BookmarkModel, keyword_set) -> BookmarkModel:
        try:
            attached = self.keyword_index.attach(bookmark, [keyword.name for keyword in keyword_set])
        except (DataStoreError, redis.exceptions.RedisError) as e:
            raise KeywordAttachError(
                f"Bookmark '{bookmark.hash}' of user '{bookmark.owner}' was saved, but its keywords weren't.",
                bookmark=bookmark,
            ) from e
        return bookmark.with_keywords(attached)

"""Data Access Object (DAO) implementation for the keyword index in Redis

Two sets are maintained in lockstep:

    <prefix>:users:<owner>:bookmarks:<hash>:keywords -> {<keyword name>, ...}
    <prefix>:keywords:<name>:bookmarks               -> {"<owner>/<hash>", ...}

Redis removes a set once its last member is gone, so a keyword disappears as
soon as no bookmark references it.
"""

from collections.abc import Iterable

from beartype import beartype

from urlservice.types import BookmarkRef
from urlservice.models import BookmarkModel, KeywordModel
from urlservice.dao.base import KeywordBaseDAO
from urlservice.dao.redis.mixins import RedisClientMixin
from urlservice.dao.redis.helpers import handle_redis_connection_error, bookmark_ref, parse_bookmark_ref
from urlservice.utils.keywords import to_keywords


class KeywordRedisDAO(RedisClientMixin, KeywordBaseDAO):
    """Redis-based keyword index

    Methods:
        attach(bookmark, names) -> frozenset[KeywordModel]:
            Replace the keyword set of a bookmark and update the reverse index.
        keywords_of(bookmark) -> frozenset[KeywordModel]:
            Keywords attached to a bookmark.
        bookmarks_for(keyword) -> set[BookmarkRef]:
            (owner, hash) pairs of bookmarks tagged with a keyword.
    """

    @handle_redis_connection_error
    @beartype
    def attach(self, bookmark: BookmarkModel, names: Iterable[str], **kwargs) -> frozenset[KeywordModel]:
        """Replace the full keyword set of `bookmark`

        Both the forward set and the reverse index are rewritten in one
        transaction, guarded by WATCH on the forward set.

        Raises:
            InvalidKeywordError:
                If any name is empty after trimming (nothing is written).
            DataStoreError:
                If Redis connectivity issues occur.
        """
        keywords = to_keywords(names)
        new_names = {keyword.name for keyword in keywords}
        keywords_key = self.keys.bookmark_keywords_key(bookmark.owner, bookmark.hash)
        ref = bookmark_ref(bookmark.owner, bookmark.hash)

        def _attach(pipe) -> None:
            old_names = pipe.smembers(keywords_key)
            pipe.multi()
            for name in old_names - new_names:
                pipe.srem(self.keys.keyword_bookmarks_key(name), ref)
            pipe.delete(keywords_key)
            if new_names:
                pipe.sadd(keywords_key, *new_names)
            for name in new_names:
                pipe.sadd(self.keys.keyword_bookmarks_key(name), ref)

        self.redis.transaction(_attach, keywords_key)
        return keywords

    @handle_redis_connection_error
    @beartype
    def keywords_of(self, bookmark: BookmarkModel, **kwargs) -> frozenset[KeywordModel]:
        names = self.redis.smembers(self.keys.bookmark_keywords_key(bookmark.owner, bookmark.hash))
        return frozenset(KeywordModel(name) for name in names)

    @handle_redis_connection_error
    @beartype
    def bookmarks_for(self, keyword: str | KeywordModel, **kwargs) -> set[BookmarkRef]:
        if not isinstance(keyword, KeywordModel):
            keyword = KeywordModel(keyword)
        refs = self.redis.smembers(self.keys.keyword_bookmarks_key(keyword.name))
        return {parse_bookmark_ref(ref) for ref in refs}

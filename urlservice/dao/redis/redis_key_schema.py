import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "urlservice:prod" or "urlservice:dev".

    Layout:
        longurls:<hash>:url                         -> normalized long URL (string)
        users                                       -> registered user names (set)
        users:<owner>:counter                       -> per-user bookmark counter (int)
        users:<owner>:bookmarks                     -> bookmark hashes by creation time (sorted set)
        users:<owner>:bookmarks:<hash>              -> bookmark record (hash)
        users:<owner>:bookmarks:<hash>:keywords     -> keyword names of a bookmark (set)
        users:<owner>:slugs:<slug>                  -> bookmark hash holding the slug (string)
        keywords:<name>:bookmarks                   -> "<owner>/<hash>" references (set)
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def long_url_key(self, url_hash: str) -> str:
        return f'longurls:{url_hash}:url'

    @prefix_key
    def user_registry_key(self) -> str:
        return 'users'

    @prefix_key
    def bookmark_counter_key(self, owner: str) -> str:
        return f'users:{owner}:counter'

    @prefix_key
    def bookmark_index_key(self, owner: str) -> str:
        return f'users:{owner}:bookmarks'

    @prefix_key
    def bookmark_key(self, owner: str, bookmark_hash: str) -> str:
        return f'users:{owner}:bookmarks:{bookmark_hash}'

    @prefix_key
    def bookmark_keywords_key(self, owner: str, bookmark_hash: str) -> str:
        return f'users:{owner}:bookmarks:{bookmark_hash}:keywords'

    @prefix_key
    def slug_key(self, owner: str, slug: str) -> str:
        return f'users:{owner}:slugs:{slug}'

    @prefix_key
    def keyword_bookmarks_key(self, name: str) -> str:
        return f'keywords:{name}:bookmarks'

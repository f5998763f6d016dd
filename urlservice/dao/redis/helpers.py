import functools
import redis
from typing import TypeVar, Any
from collections.abc import Callable

from urlservice.types import BookmarkRef
from urlservice.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def connection_label(client: redis.Redis) -> str:
    """'<host>:<port>/<db>' of a client, for error messages."""
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.ConnectionError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def get_count(self):
        ...     return self.redis.get('count')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {connection_label(self.redis)}.") from e

    return wrapper


def bookmark_ref(owner: str, bookmark_hash: str) -> str:
    """Encode a bookmark reference for the keyword reverse index ("<owner>/<hash>")."""
    return f'{owner}/{bookmark_hash}'


def parse_bookmark_ref(ref: str) -> BookmarkRef:
    # Generated hashes are base62, so the last '/' always separates the hash
    owner, _, bookmark_hash = ref.rpartition('/')
    return owner, bookmark_hash

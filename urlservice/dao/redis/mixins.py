"""Redis client plumbing shared by the Redis DAOs.

The DAOs serving one request share a single client. The first DAO builds it
from connection parameters and PINGs once; every other DAO receives it through
`redis_client` (see `shared_client_kwargs()`) and skips the healthcheck.
BookmarkRedisDAO depends on the sharing: it runs the long URL and slug steps on
its own transaction pipeline.

Example:
    >>> long_urls = LongURLRedisDAO(redis_host='localhost', prefix='urlservice:dev')  # connects + PING
    >>> slugs = SlugRedisDAO(**long_urls.shared_client_kwargs())  # same client, no PING
    >>> slugs.redis is long_urls.redis
    True
"""

import redis

from urlservice.dao.redis.redis_key_schema import RedisKeySchema
from urlservice.dao.redis.helpers import connection_label
from urlservice.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Gives a DAO its Redis client (`redis`) and key schema (`keys`)."""

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int | str = 6379,
        redis_db: int | str = 0,
        redis_decode_responses: bool = True,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        """Use `redis_client` when given, else connect with the `redis_*` parameters.

        Raises:
            DataStoreError:
                If a freshly built client can't reach Redis.
        """
        self.keys = RedisKeySchema(prefix=prefix)

        if redis_client is not None:
            self.redis = redis_client
            return

        # AppConfig and YAML documents may carry port/db as strings
        self.redis = redis.Redis(
            host=redis_host,
            port=int(redis_port),
            db=int(redis_db),
            decode_responses=redis_decode_responses,
            username=redis_username,
            password=redis_password,
        )
        self._healthcheck()

    def shared_client_kwargs(self) -> dict:
        """Constructor kwargs for another DAO on this client and key prefix."""
        return {'redis_client': self.redis, 'prefix': self.keys.prefix}

    def _healthcheck(self) -> None:
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {connection_label(self.redis)}. Check the provided configuration parameters.") from e

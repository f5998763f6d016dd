import fakeredis
import pytest

from urlservice.dao.redis import (
    LongURLRedisDAO,
    SlugRedisDAO,
    KeywordRedisDAO,
    BookmarkRedisDAO,
    UserRedisDAO,
)


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def fake_server() -> fakeredis.FakeServer:
    return fakeredis.FakeServer()


@pytest.fixture
def fake_redis(fake_server) -> fakeredis.FakeRedis:
    """In-memory Redis server speaking the real protocol (transactions included)."""
    return fakeredis.FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture
def other_client(fake_server) -> fakeredis.FakeRedis:
    """Second connection to the same server, standing in for a concurrent request."""
    return fakeredis.FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture
def long_url_dao(fake_redis, app_prefix) -> LongURLRedisDAO:
    return LongURLRedisDAO(redis_client=fake_redis, prefix=app_prefix)


@pytest.fixture
def slug_dao(fake_redis, app_prefix) -> SlugRedisDAO:
    return SlugRedisDAO(redis_client=fake_redis, prefix=app_prefix)


@pytest.fixture
def keyword_dao(fake_redis, app_prefix) -> KeywordRedisDAO:
    return KeywordRedisDAO(redis_client=fake_redis, prefix=app_prefix)


@pytest.fixture
def user_dao(fake_redis, app_prefix) -> UserRedisDAO:
    return UserRedisDAO(redis_client=fake_redis, prefix=app_prefix)


@pytest.fixture
def bookmark_dao(fake_redis, app_prefix, long_url_dao, slug_dao, keyword_dao) -> BookmarkRedisDAO:
    return BookmarkRedisDAO(redis_client=fake_redis, prefix=app_prefix, long_urls=long_url_dao, slugs=slug_dao, keyword_index=keyword_dao)

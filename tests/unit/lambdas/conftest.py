from typing import cast
from unittest.mock import MagicMock

import fakeredis
import pytest
from pytest import MonkeyPatch

from urlservice.types import LambdaContext, LambdaConfiguration, LambdaEvent
from urlservice.service import UrlService
from urlservice.dao.redis import LongURLRedisDAO, SlugRedisDAO, BookmarkRedisDAO, KeywordRedisDAO, UserRedisDAO
from urlservice.utils.config import ServiceSettings


@pytest.fixture(autouse=True)
def _env(monkeypatch: MonkeyPatch) -> None:
    """Run handlers as deployed (not locally) so failures turn into 500 responses."""
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)


@pytest.fixture
def config() -> LambdaConfiguration:
    return cast(
        LambdaConfiguration,
        {
            'redis': {'host': 'redis.test', 'port': 6379, 'db': 0},
            'short_link_prefix': 'https://s.example.org',
            'service': {},
        },
    )


@pytest.fixture
def service() -> UrlService:
    """UrlService on Redis DAOs backed by one fakeredis instance."""
    shared = {'redis_client': fakeredis.FakeRedis(decode_responses=True), 'prefix': 'testapp:test'}
    long_urls = LongURLRedisDAO(**shared)
    keywords = KeywordRedisDAO(**shared)
    return UrlService(
        long_urls=long_urls,
        bookmarks=BookmarkRedisDAO(**shared, long_urls=long_urls, slugs=SlugRedisDAO(**shared), keyword_index=keywords),
        users=UserRedisDAO(**shared),
        settings=ServiceSettings(short_link_prefix='https://s.example.org'),
    )


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'test'})


@pytest.fixture
def patch_app(monkeypatch: MonkeyPatch, config: LambdaConfiguration, service: UrlService):
    """Point a lambda module at the test configuration and the fakeredis-backed service."""

    def _patch(app) -> None:
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
        monkeypatch.setattr(app, 'UrlService', MagicMock(from_config=MagicMock(return_value=service)))

    return _patch


def with_user(event: LambdaEvent, user_name: str) -> LambdaEvent:
    return {**event, 'requestContext': {'authorizer': {'claims': {'cognito:username': user_name}}}}


@pytest.fixture
def as_user():
    """Attach Cognito claims of a user to an API Gateway event."""
    return with_user

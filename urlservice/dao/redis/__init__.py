from urlservice.dao.redis.redis_key_schema import RedisKeySchema
from urlservice.dao.redis.mixins import RedisClientMixin
from urlservice.dao.redis.long_url_redis_dao import LongURLRedisDAO
from urlservice.dao.redis.slug_redis_dao import SlugRedisDAO
from urlservice.dao.redis.keyword_redis_dao import KeywordRedisDAO
from urlservice.dao.redis.bookmark_redis_dao import BookmarkRedisDAO
from urlservice.dao.redis.user_redis_dao import UserRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'LongURLRedisDAO',
    'SlugRedisDAO',
    'KeywordRedisDAO',
    'BookmarkRedisDAO',
    'UserRedisDAO',
]

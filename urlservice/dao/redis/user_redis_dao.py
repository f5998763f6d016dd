from beartype import beartype

from urlservice.models import UserModel
from urlservice.dao.base import UserBaseDAO
from urlservice.dao.redis.mixins import RedisClientMixin
from urlservice.dao.redis.helpers import handle_redis_connection_error


class UserRedisDAO(RedisClientMixin, UserBaseDAO):
    """Redis-based user registry (a set of known user names)."""

    @handle_redis_connection_error
    @beartype
    def get(self, user_name: str, **kwargs) -> UserModel:
        user_name = user_name.strip()
        if not user_name:
            raise ValueError('User name must be a non-empty string.')
        self.redis.sadd(self.keys.user_registry_key(), user_name)  # Register on first sight
        return UserModel(user_name=user_name)

    @handle_redis_connection_error
    @beartype
    def exists(self, user_name: str, **kwargs) -> bool:
        return bool(self.redis.sismember(self.keys.user_registry_key(), user_name))

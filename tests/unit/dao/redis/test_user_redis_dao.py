"""Unit tests for the UserRedisDAO class.

Test coverage includes:

1. Registration
   - Ensures get() registers users on first sight and returns a UserModel.

2. Existence checks
   - Ensures exists() reflects registration.

3. Validation
   - Ensures blank user names are rejected.
"""

import pytest

from urlservice.models import UserModel


def test_get_registers_user(user_dao, fake_redis):
    assert user_dao.get(' alice ') == UserModel(user_name='alice')
    assert fake_redis.smembers('testapp:test:users') == {'alice'}


def test_get_is_idempotent(user_dao, fake_redis):
    user_dao.get('alice')
    user_dao.get('alice')
    assert fake_redis.scard('testapp:test:users') == 1


def test_exists(user_dao):
    assert user_dao.exists('alice') is False
    user_dao.get('alice')
    assert user_dao.exists('alice') is True


@pytest.mark.parametrize('user_name', ['', '   '])
def test_get_rejects_blank_names(user_dao, user_name):
    with pytest.raises(ValueError):
        user_dao.get(user_name)

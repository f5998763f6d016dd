"""Unit tests for Redis DAO helpers.

Test coverage includes:
    1. handle_redis_connection_error
       - Ensures the wrapped method executes and returns its result.
       - Ensures Redis connection and timeout errors are converted into DataStoreError.
       - Confirms functools.wraps preserves the original function's name and docstring.
    2. Bookmark references
       - Ensures references of the keyword reverse index encode and decode (owner, hash).
    3. connection_label
       - Formats host, port and db of a client for error messages.
"""

from unittest.mock import MagicMock

import pytest
import redis

from urlservice.dao.redis.helpers import handle_redis_connection_error, bookmark_ref, parse_bookmark_ref, connection_label
from urlservice.dao.exceptions import DataStoreError, SlugConflictError


class DummyDAO:
    def __init__(self):
        self.redis = MagicMock()
        self.redis.connection_pool.connection_kwargs = {
            'host': 'localhost',
            'port': 6379,
            'db': 0,
        }

    @handle_redis_connection_error
    def ping(self):
        return 'OK'

    @handle_redis_connection_error
    def fail(self, error):
        raise error


# -------------------------------
# 1. handle_redis_connection_error
# -------------------------------


def test_decorator_allows_normal_execution():
    """Ensure the wrapped function executes normally when no error occurs."""
    assert DummyDAO().ping() == 'OK'


@pytest.mark.parametrize(
    'error',
    [
        redis.exceptions.ConnectionError('Cannot connect'),
        redis.exceptions.TimeoutError('Timed out'),
    ],
)
def test_decorator_transforms_redis_connectivity_errors(error):
    """Ensure Redis connectivity errors are caught and re-raised as DataStoreError."""
    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0."):
        DummyDAO().fail(error)


def test_decorator_leaves_other_errors_alone():
    """Ensure domain errors raised inside the method propagate unchanged."""
    with pytest.raises(SlugConflictError):
        DummyDAO().fail(SlugConflictError('taken'))


def test_decorator_preserves_function_metadata():
    """Ensure function name and docstring are preserved via functools.wraps."""

    @handle_redis_connection_error
    def sample_function():
        """This is a sample docstring."""
        return 'OK'

    assert sample_function.__name__ == 'sample_function'
    assert 'sample docstring' in sample_function.__doc__


# -------------------------------
# 2. Bookmark references
# -------------------------------


def test_bookmark_ref():
    assert bookmark_ref('alice', 'Gh71TCN') == 'alice/Gh71TCN'


def test_parse_bookmark_ref_keeps_slashes_in_owner():
    """Ensure only the last '/' separates owner and hash."""
    assert parse_bookmark_ref('alice/Gh71TCN') == ('alice', 'Gh71TCN')
    assert parse_bookmark_ref('org/alice/Gh71TCN') == ('org/alice', 'Gh71TCN')


# -------------------------------
# 3. connection_label
# -------------------------------


def test_connection_label():
    assert connection_label(DummyDAO().redis) == 'localhost:6379/0'

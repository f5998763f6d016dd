"""Unit tests for the JSON log formatter in logging.py.

Test coverage includes:

1. JsonFormatter
   - Emits timestamp, level, logger, message and `extra` fields as JSON.
   - Serializes unknown types via str() and includes formatted exceptions.

2. initialize_logging()
   - Honors LOG_LEVEL and keeps AWS SDK loggers at WARNING outside DEBUG.
"""

import sys
import json
import logging

from urlservice.utils.logging import JsonFormatter, initialize_logging


def _record(exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord('urlservice.service', logging.INFO, __file__, 10, 'Created %s.', ('bookmark',), exc_info)
    record.created = 1766750400.0  # 2025-12-26T12:00:00Z
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# -------------------------------
# 1. JsonFormatter
# -------------------------------


def test_json_formatter_fields():
    log = json.loads(JsonFormatter().format(_record(owner='alice')))

    assert log['timestamp'] == '2025-12-26T12:00:00.000Z'
    assert log['level'] == 'INFO'
    assert log['logger'] == 'urlservice.service'
    assert log['message'] == 'Created bookmark.'
    assert log['owner'] == 'alice'


def test_json_formatter_serializes_unknown_types():
    log = json.loads(JsonFormatter().format(_record(keywords=frozenset({'docs'}))))
    assert log['keywords'] == "frozenset({'docs'})"


def test_json_formatter_includes_exceptions():
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = _record(exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))
    assert 'RuntimeError: boom' in log['exception']


# -------------------------------
# 2. initialize_logging()
# -------------------------------


def test_initialize_logging_level(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    initialize_logging()
    assert logging.getLogger().level == logging.DEBUG

    monkeypatch.setenv('LOG_LEVEL', 'WARNING')
    initialize_logging()
    assert logging.getLogger().level == logging.WARNING


def test_initialize_logging_quiets_aws_loggers(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'INFO')
    initialize_logging()
    assert logging.getLogger('botocore').level == logging.WARNING

    monkeypatch.setenv('LOG_LEVEL', 'DEBUG')
    initialize_logging()
    assert logging.getLogger('botocore').level == logging.DEBUG


def test_json_formatter_skips_record_internals():
    log = json.loads(JsonFormatter().format(_record()))
    assert set(log) == {'timestamp', 'level', 'logger', 'message'}

"""JSON logging for the lambda functions

Every lambda package calls `initialize_logging()` on import, so records reach
CloudWatch as one JSON object per line. Values passed through `extra=` become
top-level fields:

    >>> logger.info('Created bookmark.', extra={'owner': 'alice', 'bookmarkHash': 'Gh71TCN'})
    {"timestamp": "2025-12-26T12:00:00.000Z", "level": "INFO", "logger": "urlservice.service",
     "message": "Created bookmark.", "owner": "alice", "bookmarkHash": "Gh71TCN"}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from urlservice.constants import ENV


# Attributes every LogRecord has; anything else arrived through `extra=`
RECORD_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', (), None))) | {'message', 'asctime'}

# Kept at WARNING unless LOG_LEVEL=DEBUG
NOISY_LOGGERS = ('boto3', 'botocore', 'urllib3')


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        log = {
            'timestamp': created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in vars(record).items() if key not in RECORD_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        # Models, enums and datetimes in `extra` fall back to str()
        return json.dumps(log, default=str)


def initialize_logging() -> None:
    level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                },
            },
            'loggers': {name: {'level': level if level == 'DEBUG' else 'WARNING'} for name in NOISY_LOGGERS},
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )

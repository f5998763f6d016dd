"""Helper utilities for AWS lambda functions.

Functions:
    running_locally() -> bool
        True when the lambda runs under SAM local or with APP_ENV=local
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Answer unexpected handler failures with HTTP 500
    request_params(event) -> dict
        Merge query string and body (JSON or form-encoded) parameters
    path_parameter(event, name) -> str | None
        Read a path parameter from an API Gateway event

Example:
    Typical usage inside a Lambda handler:

        >>> event = {
        ...     "httpMethod": "POST",
        ...     "headers": {"Content-Type": "application/x-www-form-urlencoded"},
        ...     "body": "longurl=https%3A%2F%2Fexample.org&keywords=a+b",
        ... }
        >>> request_params(event)
        {'longurl': 'https://example.org', 'keywords': 'a b'}
"""

import os
import json
import base64
import logging
import functools
from urllib.parse import parse_qsl
from collections.abc import Callable

from urlservice.types import LambdaEvent, LambdaContext, LambdaResponse, RequestParams
from urlservice.constants import ENV, UNKNOWN_INTERNAL_SERVER_ERROR
from urlservice.exceptions import MissingEnvironmentVariableError


logger = logging.getLogger(__name__)


def running_locally() -> bool:
    """True under `sam local` or with APP_ENV=local, where handlers let exceptions surface."""
    return os.getenv(ENV.App.APP_ENV, '').lower() == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: turn any exception escaping a lambda handler into an HTTP 500 response.

    When running locally the exception is re-raised instead, so SAM shows the traceback.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception as e:
            if running_locally():
                raise
            logger.exception(
                'Unhandled exception in lambda handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR, 'error': e.__class__.__name__},
            )
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps({'message': 'Internal Server Error', 'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR}),
            }

    return wrapper


def _header(event: LambdaEvent, name: str) -> str:
    headers = event.get('headers') or {}
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value or ''
    return ''


def request_params(event: LambdaEvent) -> RequestParams:
    """Merge query string and body parameters of an API Gateway proxy event.

    Body parameters win over query string parameters. Form-encoded bodies are
    recognized by their Content-Type header; any other body must be a JSON object.

    Raises:
        ValueError: If a JSON body can't be decoded or isn't an object.
    """
    params: RequestParams = dict(event.get('queryStringParameters') or {})

    body = event.get('body') or ''
    if body and event.get('isBase64Encoded'):
        body = base64.b64decode(body).decode('utf-8')
    if not body:
        return params

    if _header(event, 'Content-Type').startswith('application/x-www-form-urlencoded'):
        params.update(parse_qsl(body, keep_blank_values=True))
        return params

    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        raise ValueError('Request body is neither JSON nor form-encoded.') from e
    if not isinstance(payload, dict):
        raise ValueError('JSON request body must be an object.')
    params.update(payload)
    return params


def path_parameter(event: LambdaEvent, name: str) -> str | None:
    return (event.get('pathParameters') or {}).get(name)

"""API Gateway proxy responses shared by the lambda handlers.

Error results of the service layer map onto HTTP status codes:

    NOT_FOUND               -> 404
    SLUG_CONFLICT           -> 409
    INVALID_INPUT           -> 400
    AUTHENTICATION_MISSING  -> 401
    FORBIDDEN               -> 403
    HASH_EXHAUSTION         -> 503
    DATA_STORE              -> 500
"""

import json
from http import HTTPStatus

from urlservice.types import LambdaResponse
from urlservice.constants import ErrorKind
from urlservice.service import ServiceResult


STATUS_BY_ERROR = {
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.SLUG_CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.INVALID_INPUT: HTTPStatus.BAD_REQUEST,
    ErrorKind.AUTHENTICATION_MISSING: HTTPStatus.UNAUTHORIZED,
    ErrorKind.FORBIDDEN: HTTPStatus.FORBIDDEN,
    ErrorKind.HASH_EXHAUSTION: HTTPStatus.SERVICE_UNAVAILABLE,
    ErrorKind.DATA_STORE: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def response_200(body: dict) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def response_301(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 301,
        'headers': {
            'Location': location,
            'Content-Type': 'application/json',
        },
        'body': json.dumps({'longUrl': location}),
    }


def response_302(*, location: str, warnings: tuple[str, ...] = ()) -> LambdaResponse:
    body = {'warnings': list(warnings)} if warnings else {}
    return {
        'statusCode': 302,
        'headers': {'Location': location},
        'body': json.dumps(body),
    }


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return response_error(HTTPStatus.BAD_REQUEST, message, error_code)


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return response_error(HTTPStatus.INTERNAL_SERVER_ERROR, message, error_code)


def response_error(status: HTTPStatus, message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = status.phrase
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': int(status),
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def response_from_failure(result: ServiceResult) -> LambdaResponse:
    """Answer a failed ServiceResult with its mapped status code."""
    status = STATUS_BY_ERROR.get(result.error, HTTPStatus.INTERNAL_SERVER_ERROR)
    return response_error(status, result.message, str(result.error))

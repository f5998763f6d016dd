"""Unit tests for lambda helper utilities in helpers.py.

Test coverage includes:

1. require_environment()
   - Decorated function executes when all env vars are present.
   - Missing or empty env vars raise MissingEnvironmentVariableError.

2. guarantee_500_response()
   - Faulty handlers answer with 500 when deployed and re-raise when running locally.

3. request_params()
   - Merges query string parameters with JSON, form-encoded and base64 bodies.
   - Rejects bodies that are neither.

4. path_parameter()

5. running_locally()
"""

import json
import base64

import pytest

from urlservice.constants import ENV
from urlservice.exceptions import MissingEnvironmentVariableError
from urlservice.utils.helpers import require_environment, guarantee_500_response, request_params, path_parameter, running_locally


# -------------------------------
# 1. require_environment()
# -------------------------------


def test_require_environment_happy_path(monkeypatch):
    monkeypatch.setenv('ENV1', 'value1')
    monkeypatch.setenv('ENV2', 'value2')

    @require_environment('ENV1', 'ENV2')
    def sample_function(x: int) -> int:
        return x + 1

    assert sample_function(1) == 2


@pytest.mark.parametrize(
    'env_setup, missing_names',
    [
        ({'ENV1': None, 'ENV2': 'value2'}, ["'ENV1'"]),
        ({'ENV1': '', 'ENV2': 'value2'}, ["'ENV1'"]),
        ({'ENV1': None, 'ENV2': None}, ["'ENV1'", "'ENV2'"]),
    ],
)
def test_require_environment_missing_or_empty(monkeypatch, env_setup, missing_names):
    for name, value in env_setup.items():
        if value is None:
            monkeypatch.delenv(name, raising=False)
        else:
            monkeypatch.setenv(name, value)

    @require_environment('ENV1', 'ENV2')
    def sample_function() -> None:
        pass

    expected_message = f'Missing required environment variables: {", ".join(missing_names)}'
    with pytest.raises(MissingEnvironmentVariableError, match=expected_message):
        sample_function()


# -------------------------------
# 2. guarantee_500_response()
# -------------------------------


def test_guarantee_500_response(monkeypatch):
    """Faulty lambda handler returns 500 response when not running locally."""
    monkeypatch.setattr('urlservice.utils.helpers.running_locally', lambda: False)

    @guarantee_500_response
    def faulty_lambda_handler(event, context):
        raise RuntimeError('boom')

    response = faulty_lambda_handler({}, None)
    body = json.loads(response['body'])

    assert response['statusCode'] == 500
    assert body == {'message': 'Internal Server Error', 'errorCode': 'UNKNOWN_INTERNAL_SERVER_ERROR'}


def test_guarantee_500_response_reraises_when_running_locally(monkeypatch):
    monkeypatch.setattr('urlservice.utils.helpers.running_locally', lambda: True)

    @guarantee_500_response
    def faulty_lambda_handler(event, context):
        raise RuntimeError('boom')

    with pytest.raises(RuntimeError, match='boom'):
        faulty_lambda_handler({}, None)


def test_guarantee_500_response_passes_through_responses():
    @guarantee_500_response
    def lambda_handler(event, context):
        return {'statusCode': 200, 'body': '{}'}

    assert lambda_handler({}, None) == {'statusCode': 200, 'body': '{}'}


# -------------------------------
# 3. request_params()
# -------------------------------


def test_request_params_json_body():
    event = {
        'queryStringParameters': {'slug': 'from-query', 'extra': '1'},
        'body': json.dumps({'longurl': 'https://example.org', 'slug': 'from-body'}),
    }
    assert request_params(event) == {'longurl': 'https://example.org', 'slug': 'from-body', 'extra': '1'}


def test_request_params_form_body():
    event = {
        'headers': {'content-type': 'application/x-www-form-urlencoded; charset=UTF-8'},
        'body': 'longurl=https%3A%2F%2Fexample.org%2Fpage&keywords=a%2C+b%3B%3Bc&slug=',
    }
    assert request_params(event) == {'longurl': 'https://example.org/page', 'keywords': 'a, b;;c', 'slug': ''}


def test_request_params_base64_body():
    event = {
        'isBase64Encoded': True,
        'headers': {'Content-Type': 'application/x-www-form-urlencoded'},
        'body': base64.b64encode(b'longurl=https%3A%2F%2Fexample.org').decode('ascii'),
    }
    assert request_params(event) == {'longurl': 'https://example.org'}


@pytest.mark.parametrize('event', [{}, {'body': None, 'queryStringParameters': None}, {'body': ''}])
def test_request_params_empty(event):
    assert request_params(event) == {}


@pytest.mark.parametrize('body', ['longurl=https://example.org', '["not", "an", "object"]'])
def test_request_params_rejects_unknown_bodies(body):
    with pytest.raises(ValueError):
        request_params({'body': body})


# -------------------------------
# 4. path_parameter()
# -------------------------------


def test_path_parameter():
    assert path_parameter({'pathParameters': {'hash': 'mypage'}}, 'hash') == 'mypage'
    assert path_parameter({'pathParameters': None}, 'hash') is None
    assert path_parameter({}, 'hash') is None


# -------------------------------
# 5. running_locally()
# -------------------------------


@pytest.mark.parametrize(
    'app_env, sam_flag, expected',
    [
        ('local', None, True),
        ('LOCAL', None, True),
        ('dev', None, False),
        ('dev', 'true', True),
        (None, None, False),
    ],
)
def test_running_locally(monkeypatch, app_env, sam_flag, expected):
    if app_env is None:
        monkeypatch.delenv(ENV.App.APP_ENV, raising=False)
    else:
        monkeypatch.setenv(ENV.App.APP_ENV, app_env)

    if sam_flag is None:
        monkeypatch.delenv(ENV.App.AWS_SAM_LOCAL, raising=False)
    else:
        monkeypatch.setenv(ENV.App.AWS_SAM_LOCAL, sam_flag)

    assert running_locally() is expected

"""Unit tests for configuration utilities in config.py

Test coverage includes:

1. Environment variable resolution
   - Ensures app_env(), app_name(), app_prefix(), project_root(), config_dir() read the environment.

2. Configuration document parsing
   - Ensures extract_function_config() picks the active backend of a function.
   - Ensures malformed documents raise BadConfigurationError.

3. AWS AppConfig loading
   - Ensures load_config() fetches the document through an appconfigdata session.
   - Ensures missing AppConfig identifiers raise MissingEnvironmentVariableError.

4. Local YAML loading
   - Ensures load_config() reads config/<APP_ENV>.yml when running locally.

5. Service settings
   - Ensures ServiceSettings normalizes the short link prefix and composes short URLs.
"""

import os
import json
from io import BytesIO
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import botocore

from urlservice.utils import config
from urlservice.utils.config import ServiceSettings, extract_function_config, redis_config
from urlservice.exceptions import BadConfigurationError, ConfigurationError, MissingEnvironmentVariableError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    """Set up environment variables for testing (deployed, not local)."""
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.setenv('APPCONFIG_APP_ID', 'app123')
    monkeypatch.setenv('APPCONFIG_ENV_ID', 'env123')
    monkeypatch.setenv('APPCONFIG_PROFILE_ID', 'prof123')


@pytest.fixture
def appconfig_payload():
    """Provide a default AppConfig payload used by multiple tests."""
    # fmt: off
    return {
        'build': 42,
        'active_backend': 'redis',
        'short_link_prefix': 'https://s.example.org',
        'service': {'hash_retries': 3},
        'configs': {
            'test_lambda': {
                'redis': {
                    'host': 'monkey',
                    'port': 659595,
                    'db': 3
                }
            }
        },
    }
    # fmt: on


@pytest.fixture
def appconfig_client(monkeypatch, appconfig_payload):
    """Mock the AppConfig Data client returned by boto3."""
    client = MagicMock()
    client.start_configuration_session.return_value = {'InitialConfigurationToken': 'monkey_token'}
    client.get_latest_configuration.return_value = {'Configuration': BytesIO(json.dumps(appconfig_payload).encode('utf-8'))}
    monkeypatch.setattr(config.boto3, 'client', lambda service: client)
    return client


# -------------------------------
# 1. Environment variable resolution
# -------------------------------


def test_app_env(monkeypatch):
    """Ensure app_env() returns the lower-cased APP_ENV value"""
    monkeypatch.setitem(os.environ, 'APP_ENV', 'Prod')
    assert config.app_env() == 'prod'


def test_app_env_defaults_to_local(monkeypatch):
    monkeypatch.delenv('APP_ENV', raising=False)
    assert config.app_env() == 'local'


def test_app_name(monkeypatch):
    """Ensure app_name() returns the correct environment value from APP_NAME"""
    monkeypatch.setitem(os.environ, 'APP_NAME', 'test-app')
    assert config.app_name() == 'test-app'


def test_app_prefix(monkeypatch):
    """Ensure app_prefix() combines APP_NAME and APP_ENV"""
    monkeypatch.setitem(os.environ, 'APP_NAME', 'test-app')
    assert config.app_prefix() == 'test-app:test'


def test_app_prefix_without_app_name(monkeypatch):
    monkeypatch.delenv('APP_NAME', raising=False)
    assert config.app_prefix() is None


def test_project_root(monkeypatch):
    """Ensure project_root() reads PROJECT_ROOT"""
    monkeypatch.setitem(os.environ, 'PROJECT_ROOT', '/monkey/path')
    assert config.project_root() == Path('/monkey/path')


def test_config_dir(monkeypatch):
    monkeypatch.setitem(os.environ, 'PROJECT_ROOT', '/monkey/path')
    monkeypatch.delenv('CONFIG_DIR', raising=False)
    assert config.config_dir() == Path('/monkey/path/config')

    monkeypatch.setitem(os.environ, 'CONFIG_DIR', '/etc/urlservice')
    assert config.config_dir() == Path('/etc/urlservice')


# -------------------------------
# 2. Configuration document parsing
# -------------------------------


def test_extract_function_config(appconfig_payload):
    result = extract_function_config(appconfig_payload, 'test_lambda')

    assert result == {
        'redis': {'host': 'monkey', 'port': 659595, 'db': 3},
        'short_link_prefix': 'https://s.example.org',
        'service': {'hash_retries': 3},
    }


@pytest.mark.parametrize('missing', ['active_backend', 'configs', 'short_link_prefix'])
def test_extract_function_config_missing_keys(appconfig_payload, missing):
    del appconfig_payload[missing]
    with pytest.raises(BadConfigurationError):
        extract_function_config(appconfig_payload, 'test_lambda')


def test_extract_function_config_unknown_function(appconfig_payload):
    with pytest.raises(BadConfigurationError):
        extract_function_config(appconfig_payload, 'other_lambda')


def test_redis_config(appconfig_payload):
    data = extract_function_config(appconfig_payload, 'test_lambda')
    assert redis_config(data) == {'redis_host': 'monkey', 'redis_port': 659595, 'redis_db': 3}

    with pytest.raises(BadConfigurationError):
        redis_config({'short_link_prefix': 'https://s.example.org'})


# -------------------------------
# 3. AWS AppConfig loading
# -------------------------------


def test_load_config_from_appconfig(appconfig_client):
    result = config.load_config('test_lambda')

    assert result['redis']['host'] == 'monkey'
    assert result['redis']['port'] == 659595
    assert result['redis']['db'] == 3
    assert result['short_link_prefix'] == 'https://s.example.org'

    appconfig_client.start_configuration_session.assert_called_once_with(
        ApplicationIdentifier='app123',
        EnvironmentIdentifier='env123',
        ConfigurationProfileIdentifier='prof123',
    )
    appconfig_client.get_latest_configuration.assert_called_once_with(ConfigurationToken='monkey_token')


def test_load_config_rejects_invalid_json(monkeypatch, appconfig_client):
    appconfig_client.get_latest_configuration.return_value = {'Configuration': BytesIO(b'{not json')}
    with pytest.raises(BadConfigurationError):
        config.load_config('test_lambda')


def test_load_config_propagates_client_errors(monkeypatch, appconfig_client):
    appconfig_client.start_configuration_session.side_effect = botocore.exceptions.ClientError(
        {'Error': {'Code': 'ResourceNotFoundException'}}, 'StartConfigurationSession'
    )
    with pytest.raises(botocore.exceptions.ClientError):
        config.load_config('test_lambda')


def test_load_config_requires_appconfig_ids(monkeypatch, appconfig_client):
    monkeypatch.delenv('APPCONFIG_PROFILE_ID')
    with pytest.raises(MissingEnvironmentVariableError, match="'APPCONFIG_PROFILE_ID'"):
        config.load_config('test_lambda')
    appconfig_client.start_configuration_session.assert_not_called()


# -------------------------------
# 4. Local YAML loading
# -------------------------------


def test_load_config_from_local_yaml(monkeypatch, tmp_path, appconfig_client):
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.setenv('CONFIG_DIR', str(tmp_path))
    (tmp_path / 'local.yml').write_text(
        'active_backend: redis\n'
        'short_link_prefix: http://localhost:3000\n'
        'configs:\n'
        '  test_lambda:\n'
        '    redis:\n'
        '      host: localhost\n'
        '      port: 6379\n',
        encoding='utf-8',
    )

    result = config.load_config('test_lambda')

    assert result == {'redis': {'host': 'localhost', 'port': 6379}, 'short_link_prefix': 'http://localhost:3000', 'service': {}}
    appconfig_client.start_configuration_session.assert_not_called()


def test_load_config_local_yaml_missing(monkeypatch, tmp_path):
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.setenv('CONFIG_DIR', str(tmp_path))
    with pytest.raises(ConfigurationError, match='does not exist'):
        config.load_config('test_lambda')


def test_load_config_local_yaml_invalid(monkeypatch, tmp_path):
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.setenv('CONFIG_DIR', str(tmp_path))
    (tmp_path / 'local.yml').write_text('configs: [unclosed\n', encoding='utf-8')
    with pytest.raises(BadConfigurationError):
        config.load_config('test_lambda')


def test_shipped_local_config_is_valid(monkeypatch):
    """Ensure config/local.yml in the repository covers every lambda."""
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.delenv('CONFIG_DIR', raising=False)
    monkeypatch.delenv('PROJECT_ROOT', raising=False)

    for function_name in ('shorten_url', 'edit_bookmark', 'redirect_url'):
        data = config.load_config(function_name)
        assert ServiceSettings.from_config(data).short_link_prefix == 'http://localhost:3000/'
        assert redis_config(data)['redis_host'] == 'localhost'


# -------------------------------
# 5. Service settings
# -------------------------------


def test_service_settings_from_config(appconfig_payload):
    settings = ServiceSettings.from_config(extract_function_config(appconfig_payload, 'test_lambda'))

    assert settings.short_link_prefix == 'https://s.example.org/'
    assert settings.hash_retries == 3
    assert settings.long_url_hash_length == 6


def test_service_settings_short_urls():
    settings = ServiceSettings(short_link_prefix='https://s.example.org/')

    assert settings.short_url('alice', 'mypage') == 'https://s.example.org/u/alice/b/mypage'
    assert settings.global_short_url('Ab3dE9') == 'https://s.example.org/b/Ab3dE9'


@pytest.mark.parametrize(
    'kwargs',
    [
        {'short_link_prefix': ''},
        {'short_link_prefix': 's.example.org'},
        {'short_link_prefix': 'ftp://s.example.org'},
        {'short_link_prefix': 'https://s.example.org', 'hash_retries': 0},
        {'short_link_prefix': 'https://s.example.org', 'long_url_hash_length': 3},
        {'short_link_prefix': 'https://s.example.org', 'hash_retries': 'many'},
        {'short_link_prefix': 'https://s.example.org', 'long_url_hash_length': None},
    ],
)
def test_service_settings_rejects_invalid_values(kwargs):
    with pytest.raises(BadConfigurationError):
        ServiceSettings(**kwargs)


def test_service_settings_requires_prefix():
    with pytest.raises(BadConfigurationError):
        ServiceSettings.from_config({'redis': {}})


@pytest.mark.parametrize('service', [{'hash_retries': 'many'}, {'long_url_hash_length': '7.5'}, {'hash_retries': [3]}])
def test_service_settings_from_config_rejects_non_numeric_values(service):
    with pytest.raises(BadConfigurationError, match='must be an integer'):
        ServiceSettings.from_config({'short_link_prefix': 'https://s.example.org', 'service': service})


def test_service_settings_coerces_numeric_strings():
    settings = ServiceSettings.from_config({'short_link_prefix': 'https://s.example.org', 'service': {'hash_retries': '5', 'long_url_hash_length': '9'}})

    assert settings.hash_retries == 5
    assert settings.long_url_hash_length == 9

"""Utility functions for application configuration management.

Lambda functions read their configuration from **AWS AppConfig**. Each
environment (`APP_ENV`) has a dedicated AppConfig *Environment* within the
shared AppConfig *Application* identified by `APP_NAME`. The configuration
JSON follows this structure:

    {
        "active_backend": "redis",
        "short_link_prefix": "https://s.example.org",
        "service": {"hash_retries": 5},
        "configs": {
            "shorten_url": {
                "redis": { ... }
            },
            "edit_bookmark": {
                "redis": { ... }
            },
            "redirect_url": {
                "redis": { ... }
            }
        }
    }

When running locally (APP_ENV=local or under SAM) the same document is read
from `config/<APP_ENV>.yml` instead (directory overridable via CONFIG_DIR).

Typical usage inside a Lambda handler:
    >>> from urlservice.utils.config import load_config, ServiceSettings
    >>> app_config = load_config('shorten_url')
    >>> app_config['redis']['host']
    'localhost'
    >>> ServiceSettings.from_config(app_config).short_link_prefix
    'https://s.example.org/'
"""

import os
import json
import logging
import functools
from typing import Any
from pathlib import Path
from dataclasses import dataclass
from urllib.parse import urlsplit
from collections.abc import Callable

import boto3
import yaml

from urlservice.types import ConfigDocument, LambdaConfiguration, RedisConnectionParams
from urlservice.constants import ENV, Defaults
from urlservice.utils.helpers import require_environment, running_locally
from urlservice.exceptions import BadConfigurationError, ConfigurationError


logger = logging.getLogger(__name__)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, Path(__file__).resolve().parents[2]))


def app_prefix() -> str | None:
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def config_dir() -> Path:
    return Path(os.environ.get(ENV.App.CONFIG_DIR) or project_root() / 'config')


def extract_function_config(document: ConfigDocument, function_name: str) -> LambdaConfiguration:
    """Pick the active backend section of one function plus the shared service settings.

    Raises:
        BadConfigurationError: If the document misses any of the required keys.
    """
    try:
        backend = document['active_backend']
        data = {
            backend: document['configs'][function_name][backend],
            'short_link_prefix': document['short_link_prefix'],
        }
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f'Configuration document is missing {e} (function: {function_name}).') from e

    data['service'] = document.get('service') or {}
    return data


def _load_local_config(func: Callable) -> Callable:
    """Decorator: load the configuration document from a local YAML file when running locally.

    Behavior:
        - If the application is running locally, read `<config dir>/<APP_ENV>.yml`.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).
    """

    @functools.wraps(func)
    def wrapper(function_name: str) -> LambdaConfiguration:
        if not running_locally():
            return func(function_name)

        path = config_dir() / f'{app_env()}.yml'
        logger.debug('Trying to load configuration from local file.', extra={'path': str(path), 'functionName': function_name})
        try:
            with open(path, encoding='utf-8') as f:
                document = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f'Local configuration file {path} does not exist.') from e
        except yaml.YAMLError as e:
            raise BadConfigurationError(f'Local configuration file {path} is not valid YAML.') from e

        data = extract_function_config(document, function_name)
        logger.debug('Loaded configuration from local file.', extra={'path': str(path), 'functionName': function_name})
        return data

    return wrapper


@_load_local_config
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(function_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig.

    Fetches the AppConfig JSON once and returns the section relevant to the
    requested Lambda function (e.g., 'shorten_url', 'redirect_url').
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'functionName': function_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    try:
        document = json.loads(content.decode('utf-8'))
    except json.JSONDecodeError as e:
        raise BadConfigurationError('AppConfig document is not valid JSON.') from e

    data = extract_function_config(document, function_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'functionName': function_name, 'build': document.get('build')})
    return data


def redis_config(app_config: LambdaConfiguration) -> RedisConnectionParams:
    """Turn the 'redis' section into RedisClientMixin keyword arguments."""
    try:
        return {f'redis_{k}': v for k, v in app_config['redis'].items()}
    except (KeyError, AttributeError) as e:
        raise BadConfigurationError("Configuration has no 'redis' backend section.") from e


def _bounded_int(name: str, value: Any, minimum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise BadConfigurationError(f'{name} must be an integer (given value: {value!r}).') from e
    if number < minimum:
        raise BadConfigurationError(f'{name} must be at least {minimum} (given value: {value}).')
    return number


@dataclass(frozen=True)
class ServiceSettings:
    """Immutable service settings, validated once at startup.

    Attributes:
        short_link_prefix (str):
            Absolute http(s) base URI used to compose display short links.
            Always ends with '/'.
        hash_retries (int):
            Salted retries before hash generation fails with HashExhaustionError.
        long_url_hash_length (int):
            Length of global long URL hashes.
    """

    short_link_prefix: str
    hash_retries: int = Defaults.HASH_RETRIES
    long_url_hash_length: int = Defaults.LONG_URL_HASH_LENGTH

    def __post_init__(self) -> None:
        prefix = self.short_link_prefix
        if not isinstance(prefix, str) or not prefix.strip():
            raise BadConfigurationError(f'Short link prefix must be a non-empty string (given value: {prefix!r}).')

        prefix = prefix.strip()
        components = urlsplit(prefix)
        if components.scheme not in {'http', 'https'} or not components.netloc:
            raise BadConfigurationError(f'Short link prefix must be an absolute http(s) URL (given value: {prefix!r}).')
        if not prefix.endswith('/'):
            prefix += '/'
        object.__setattr__(self, 'short_link_prefix', prefix)

        object.__setattr__(self, 'hash_retries', _bounded_int('Hash retries', self.hash_retries, 1))
        object.__setattr__(self, 'long_url_hash_length', _bounded_int('Long URL hash length', self.long_url_hash_length, 4))

    @classmethod
    def from_config(cls, app_config: LambdaConfiguration) -> 'ServiceSettings':
        if 'short_link_prefix' not in app_config:
            raise BadConfigurationError("Configuration has no 'short_link_prefix'.")
        service = app_config.get('service') or {}
        return cls(
            short_link_prefix=app_config['short_link_prefix'],
            hash_retries=service.get('hash_retries', Defaults.HASH_RETRIES),
            long_url_hash_length=service.get('long_url_hash_length', Defaults.LONG_URL_HASH_LENGTH),
        )

    def short_url(self, owner: str, key: str) -> str:
        return f'{self.short_link_prefix}u/{owner}/b/{key}'

    def global_short_url(self, url_hash: str) -> str:
        return f'{self.short_link_prefix}b/{url_hash}'

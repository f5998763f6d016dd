from enum import StrEnum


class Defaults:
    """Default tuning values for hash generation."""

    LONG_URL_HASH_LENGTH = 6  # Global hashes: 62**6 ~ 5.6e10 slots
    BOOKMARK_HASH_LENGTH = 7  # Per-user hashes, same length as generate_shortcode() output
    HASH_RETRIES = 5  # Salted retries before giving up with HashExhaustionError
    SLUG_MAX_LENGTH = 64


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        CONFIG_DIR = 'CONFIG_DIR'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'


class ErrorKind(StrEnum):
    """Error kinds returned by the service layer."""

    NOT_FOUND = 'NOT_FOUND'
    SLUG_CONFLICT = 'SLUG_CONFLICT'
    HASH_EXHAUSTION = 'HASH_EXHAUSTION'
    AUTHENTICATION_MISSING = 'AUTHENTICATION_MISSING'
    FORBIDDEN = 'FORBIDDEN'
    INVALID_INPUT = 'INVALID_INPUT'
    DATA_STORE = 'DATA_STORE'


class ResultWarning(StrEnum):
    """Warning-level outcomes attached to otherwise successful results."""

    KEYWORDS_NOT_SAVED = 'KEYWORDS_NOT_SAVED'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'

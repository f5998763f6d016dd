class UrlServiceError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:urlservice_error'


class ConfigurationError(UrlServiceError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class ValidationError(UrlServiceError, ValueError):
    """Base exception for rejected user input."""

    error_code = 'input:validation_error'


class InvalidURLError(ValidationError):
    """Raised when a long URL can't be normalized (bad scheme, missing host)."""

    error_code = 'input:invalid_url_error'


class InvalidSlugError(ValidationError):
    """Raised when a slug has illegal characters or the shape of a generated hash."""

    error_code = 'input:invalid_slug_error'


class InvalidKeywordError(ValidationError):
    """Raised when a keyword name is empty after trimming."""

    error_code = 'input:invalid_keyword_error'

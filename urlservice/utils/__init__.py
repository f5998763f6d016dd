from urlservice.utils.config import app_env, app_name, project_root, app_prefix, load_config, ServiceSettings
from urlservice.utils.helpers import require_environment, guarantee_500_response, request_params, path_parameter
from urlservice.utils.shortener import normalize_url, generate_shortcode, generate_url_hash
from urlservice.utils.keywords import parse_keyword_names
from urlservice.utils.slugs import clean_slug
from urlservice.utils.logging import initialize_logging


__all__ = [
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'ServiceSettings',
    'require_environment',
    'guarantee_500_response',
    'request_params',
    'path_parameter',
    'normalize_url',
    'generate_shortcode',
    'generate_url_hash',
    'parse_keyword_names',
    'clean_slug',
    'initialize_logging',
]

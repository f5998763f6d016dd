import logging

from urlservice.types import LambdaEvent, LambdaContext, LambdaResponse
from urlservice.service import UrlService
from urlservice.exceptions import ConfigurationError
from urlservice.dao.exceptions import DataStoreError
from urlservice.utils import load_config, guarantee_500_response, path_parameter
from urlservice.lambdas.responses import response_301, response_400, response_500, response_from_failure


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short URLs

    Two routes are served:
        GET /b/{globalHash}         -> shared long URL record
        GET /u/{username}/b/{hash}  -> bookmark of a user (generated hash or slug)

    Redirects require no authentication.

    HTTP responses:
        301: Successful redirect
            headers:
                Location: long URL
            body: {"longUrl": <long URL>}
        400: Bad client request (missing path parameters)
        404: No long URL or bookmark matches
        500: Internal server error

    Example:
        >>> event = {'pathParameters': {'username': 'alice', 'hash': 'mypage'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode'], response['headers']['Location']
        (301, 'https://example.org/page')
    """
    # 0- Get application's config and build the service
    try:
        service = UrlService.from_config(load_config('redirect_url'))
    except (ConfigurationError, DataStoreError):
        logger.exception('Failed to initialize service for redirect URL function. Responding with 500.')
        return response_500()

    # 1- Resolve the long URL of the requested route
    global_hash = path_parameter(event, 'globalHash')
    owner = path_parameter(event, 'username')
    key = path_parameter(event, 'hash')

    if global_hash:
        result = service.expand_global(global_hash)
        long_url = result.value.url if result.ok else None
    elif owner and key:
        result = service.expand(owner, key)
        long_url = result.value.long_url.url if result.ok else None
    else:
        logger.info('Missing short URL key in path. Responding with 400.')
        return response_400(message="missing 'globalHash' or 'username'/'hash' in path", error_code='INVALID_INPUT')

    if not result.ok:
        logger.info(
            'Short URL not found. Responding with %s.',
            result.error,
            extra={'globalHash': global_hash, 'owner': owner, 'key': key},
        )
        return response_from_failure(result)

    # 2- Redirect client to the long URL
    logger.info('Redirecting client to long URL. Responding with 301.', extra={'globalHash': global_hash, 'owner': owner, 'key': key})
    return response_301(location=long_url)

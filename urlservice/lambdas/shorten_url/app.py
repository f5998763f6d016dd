import logging

from urlservice.types import LambdaEvent, LambdaContext, LambdaResponse
from urlservice.service import UrlService, CognitoPrincipal
from urlservice.exceptions import ConfigurationError
from urlservice.dao.exceptions import DataStoreError
from urlservice.utils import load_config, guarantee_500_response, request_params
from urlservice.lambdas.responses import response_200, response_302, response_400, response_500, response_from_failure


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests on /b/new

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Resolve the authenticated user
    - Step 2: GET answers with the empty bookmark form
    - Step 3: POST extracts 'longurl', 'slug' and 'keywords' (JSON or form-encoded body)
    - Step 4: Create the bookmark and redirect to its edit page

    HTTP responses:
        200: Empty bookmark form (GET)
            body: {"edit": false}
        302: Bookmark created (POST)
            headers:
                Location: /u/<user>/b/<hash>/edit
        400: Bad client request (missing or invalid long URL, slug or keywords)
        401: No authenticated user
        409: Slug already taken by another bookmark of the user
        503: Hash generation exhausted its retries
        500: Internal server error

    Example:
        >>> event = {
        ...     'httpMethod': 'POST',
        ...     'requestContext': {'authorizer': {'claims': {'cognito:username': 'alice'}}},
        ...     'body': '{"longurl": "https://example.org/page", "keywords": "docs"}',
        ... }
        >>> response = lambda_handler(event, None)
        >>> response['statusCode'], response['headers']['Location']
        (302, '/u/alice/b/Gh71TCN/edit')
    """
    # 0- Get application's config and build the service
    try:
        service = UrlService.from_config(load_config('shorten_url'))
    except (ConfigurationError, DataStoreError):
        logger.exception('Failed to initialize service for shorten URL function. Responding with 500.')
        return response_500()

    # 1- Resolve the authenticated user
    user_result = service.get_user(CognitoPrincipal.from_event(event))
    if not user_result.ok:
        logger.info('Unauthenticated request to /b/new. Responding with %s.', user_result.error)
        return response_from_failure(user_result)
    user = user_result.value

    # 2- Empty form for new bookmarks
    if event.get('httpMethod', 'GET').upper() == 'GET':
        return response_200({'edit': False})

    # 3- Extract parameters from the request
    try:
        params = request_params(event)
    except ValueError as e:
        logger.info('Malformed request body. Responding with 400.', extra={'error': str(e)})
        return response_400(message=str(e), error_code='INVALID_INPUT')

    # 4- Create the bookmark
    result = service.shorten(params.get('longurl'), params.get('slug'), params.get('keywords'), user)
    if not result.ok:
        logger.info('Failed to shorten URL. Responding with error.', extra={'owner': user.user_name, 'errorKind': result.error})
        return response_from_failure(result)

    bookmark = result.value
    return response_302(location=f'/u/{bookmark.owner}/b/{bookmark.hash}/edit', warnings=result.warnings)

import logging

from urlservice.types import LambdaEvent, LambdaContext, LambdaResponse
from urlservice.service import UrlService, CognitoPrincipal
from urlservice.exceptions import ConfigurationError
from urlservice.dao.exceptions import DataStoreError
from urlservice.utils import load_config, guarantee_500_response, request_params, path_parameter
from urlservice.lambdas.responses import response_200, response_302, response_400, response_500, response_from_failure


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests on /u/{username}/b/{hash}/edit

    GET answers with the edit form data of the bookmark. POST replaces its slug
    and, when the 'keywords' parameter is present, its keywords. A missing
    'keywords' parameter leaves the keywords unchanged while an empty one
    removes them all.

    HTTP responses:
        200: Edit form data (GET)
        302: Bookmark updated (POST), redirect back to the edit page
        400: Bad client request (invalid slug or keywords)
        401: No authenticated user
        403: Bookmark belongs to another user
        404: No bookmark matches the hash or slug
        409: Slug already taken by another bookmark of the user
        500: Internal server error
    """
    # 0- Get application's config and build the service
    try:
        service = UrlService.from_config(load_config('edit_bookmark'))
    except (ConfigurationError, DataStoreError):
        logger.exception('Failed to initialize service for edit bookmark function. Responding with 500.')
        return response_500()

    owner = path_parameter(event, 'username')
    key = path_parameter(event, 'hash')
    if not owner or not key:
        logger.info("Missing 'username' or 'hash' in path. Responding with 400.")
        return response_400(message="missing 'username' or 'hash' in path", error_code='INVALID_INPUT')

    # 1- Only the owner may see and edit a bookmark
    user_result = service.authorize(CognitoPrincipal.from_event(event), owner)
    if not user_result.ok:
        return response_from_failure(user_result)

    # 2- Edit form data
    if event.get('httpMethod', 'GET').upper() == 'GET':
        result = service.edit_form(owner, key)
        if not result.ok:
            logger.info('Bookmark not found for edit form.', extra={'owner': owner, 'key': key})
            return response_from_failure(result)
        return response_200(result.value)

    # 3- Update slug and keywords
    try:
        params = request_params(event)
    except ValueError as e:
        logger.info('Malformed request body. Responding with 400.', extra={'error': str(e)})
        return response_400(message=str(e), error_code='INVALID_INPUT')

    result = service.update_bookmark(owner, key, params.get('slug'), params.get('keywords'))
    if not result.ok:
        logger.info('Failed to update bookmark.', extra={'owner': owner, 'key': key, 'errorKind': result.error})
        return response_from_failure(result)

    bookmark = result.value
    logger.info('Updated bookmark.', extra={'owner': owner, 'bookmarkHash': bookmark.hash})
    return response_302(location=f'/u/{owner}/b/{bookmark.hash}/edit', warnings=result.warnings)

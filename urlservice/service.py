"""Service facade used by the lambda handlers.

Every operation returns a ServiceResult instead of raising: the value on
success, or an ErrorKind plus a human-readable message on failure. DAO and
validation exceptions are translated here, so handlers only map error kinds
to HTTP status codes.

Classes:
    ServiceResult:
        Typed result of a service operation.
    Principal:
        Protocol of an authenticated caller.
    CognitoPrincipal:
        Principal built from API Gateway Cognito authorizer claims.
    UrlService:
        Facade over the long URL, bookmark and user DAOs.

Example:
    >>> service = UrlService.from_config(load_config('shorten_url'))
    >>> user = service.get_user(CognitoPrincipal('alice')).value
    >>> result = service.shorten('https://example.org/page', 'mypage', 'docs, howto', user)
    >>> result.ok, result.value.slug
    (True, 'mypage')
    >>> service.shorten('https://example.org/other', 'mypage', None, user).error
    <ErrorKind.SLUG_CONFLICT: 'SLUG_CONFLICT'>
"""

import logging
from dataclasses import dataclass, field
from collections.abc import Iterable
from typing import Any, Protocol

from urlservice.types import LambdaConfiguration, LambdaEvent, FormData
from urlservice.constants import ErrorKind, ResultWarning
from urlservice.models import BookmarkModel, LongURLModel, UserModel
from urlservice.exceptions import ValidationError, InvalidKeywordError
from urlservice.dao.base import LongURLBaseDAO, BookmarkBaseDAO, UserBaseDAO
from urlservice.dao.redis import LongURLRedisDAO, SlugRedisDAO, BookmarkRedisDAO, KeywordRedisDAO, UserRedisDAO
from urlservice.dao.exceptions import (
    DataStoreError,
    HashExhaustionError,
    KeywordAttachError,
    NotFoundError,
    SlugConflictError,
)
from urlservice.utils.config import ServiceSettings, app_prefix, redis_config
from urlservice.utils.keywords import parse_keyword_names, join_keyword_names


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceResult[T]:
    value: T | None = None
    error: ErrorKind | None = None
    message: str = ''
    warnings: tuple[ResultWarning, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T, *warnings: ResultWarning) -> 'ServiceResult[T]':
        return cls(value=value, warnings=tuple(warnings))

    @classmethod
    def fail(cls, error: ErrorKind, message: str = '') -> 'ServiceResult[T]':
        return cls(error=error, message=message)


class Principal(Protocol):
    def get_user_name(self) -> str: ...


@dataclass(frozen=True)
class CognitoPrincipal:
    """Caller identity taken from the Cognito authorizer of API Gateway."""

    user_name: str

    def get_user_name(self) -> str:
        return self.user_name

    @classmethod
    def from_event(cls, event: LambdaEvent) -> 'CognitoPrincipal | None':
        authorizer = (event.get('requestContext') or {}).get('authorizer') or {}
        claims = authorizer.get('claims') or {}
        user_name = claims.get('cognito:username') or claims.get('username')
        if not user_name or not str(user_name).strip():
            return None
        return cls(user_name=str(user_name).strip())


def _keyword_names(raw: str | Iterable[str] | None) -> list[str]:
    if raw is None or isinstance(raw, str):
        return parse_keyword_names(raw)
    if not isinstance(raw, Iterable) or not all(isinstance(item, str) for item in raw):
        raise InvalidKeywordError(f"Keywords must be a string or a list of strings (given value: {raw!r}).")
    return [name for item in raw for name in parse_keyword_names(item)]


class UrlService:
    """Facade over the DAOs, translating exceptions into ServiceResult errors.

    Attributes:
        long_urls (LongURLBaseDAO):
            Global long URL shortener.
        bookmarks (BookmarkBaseDAO):
            Bookmark store (runs slug reservation inside its write transactions, attaches keywords after).
        users (UserBaseDAO):
            User registry.
        settings (ServiceSettings):
            Short link prefix and hash generation tuning.
    """

    def __init__(
        self,
        long_urls: LongURLBaseDAO,
        bookmarks: BookmarkBaseDAO,
        users: UserBaseDAO,
        settings: ServiceSettings,
    ):
        self.long_urls = long_urls
        self.bookmarks = bookmarks
        self.users = users
        self.settings = settings

    @classmethod
    def from_config(cls, app_config: LambdaConfiguration) -> 'UrlService':
        """Build the service with Redis DAOs sharing one client.

        Raises:
            BadConfigurationError: If the configuration is invalid.
            DataStoreError: If Redis is unreachable.
        """
        settings = ServiceSettings.from_config(app_config)
        prefix = app_prefix()

        long_urls = LongURLRedisDAO(
            **redis_config(app_config),
            prefix=prefix,
            hash_length=settings.long_url_hash_length,
            hash_retries=settings.hash_retries,
        )
        shared = long_urls.shared_client_kwargs()
        bookmarks = BookmarkRedisDAO(
            **shared,
            long_urls=long_urls,
            slugs=SlugRedisDAO(**shared),
            keyword_index=KeywordRedisDAO(**shared),
            hash_retries=settings.hash_retries,
        )
        return cls(
            long_urls=long_urls,
            bookmarks=bookmarks,
            users=UserRedisDAO(**shared),
            settings=settings,
        )

    def get_user(self, principal: Principal | None) -> ServiceResult[UserModel]:
        if principal is None:
            return ServiceResult.fail(ErrorKind.AUTHENTICATION_MISSING, 'authentication required')
        try:
            user = self.users.get(principal.get_user_name())
        except ValueError:
            return ServiceResult.fail(ErrorKind.AUTHENTICATION_MISSING, 'authenticated principal has no user name')
        except DataStoreError as e:
            return self._data_store_failure(e)
        return ServiceResult.success(user)

    def authorize(self, principal: Principal | None, user_name: str) -> ServiceResult[UserModel]:
        """Resolve the caller and check it owns the namespace of `user_name`."""
        result = self.get_user(principal)
        if not result.ok:
            return result
        if result.value.user_name != user_name:
            logger.info(
                'Principal tried to access a foreign namespace.',
                extra={'principal': result.value.user_name, 'owner': user_name},
            )
            return ServiceResult.fail(ErrorKind.FORBIDDEN, f"bookmarks of user '{user_name}' belong to someone else")
        return result

    def shorten(
        self,
        long_url: str | None,
        slug: str | None,
        keyword_names: str | Iterable[str] | None,
        user: UserModel,
    ) -> ServiceResult[BookmarkModel]:
        """Create a bookmark of `user` for `long_url`

        Procedure:
        - Step 1: Validate input (long URL present, keyword names parseable)
        - Step 2: Create the bookmark (shared long URL, per-user hash, slug)
        - Step 3: Report keyword attach failures as a warning, not an error
        """
        if not isinstance(long_url, str) or not long_url.strip():
            return ServiceResult.fail(ErrorKind.INVALID_INPUT, "missing 'longurl'")

        try:
            bookmark = self.bookmarks.create(
                user.user_name,
                long_url.strip(),
                slug=slug,
                keywords=_keyword_names(keyword_names),
            )
        except ValidationError as e:
            return ServiceResult.fail(ErrorKind.INVALID_INPUT, str(e))
        except SlugConflictError as e:
            logger.info('Slug conflict on bookmark creation.', extra={'owner': user.user_name, 'slug': slug})
            return ServiceResult.fail(ErrorKind.SLUG_CONFLICT, str(e))
        except HashExhaustionError as e:
            logger.error('Hash generation exhausted its retries.', extra={'owner': user.user_name, 'error': str(e)})
            return ServiceResult.fail(ErrorKind.HASH_EXHAUSTION, str(e))
        except KeywordAttachError as e:
            return self._keywords_not_saved(e)
        except DataStoreError as e:
            return self._data_store_failure(e)

        logger.info(
            'Created bookmark.',
            extra={'owner': bookmark.owner, 'bookmarkHash': bookmark.hash, 'urlHash': bookmark.long_url.hash},
        )
        return ServiceResult.success(bookmark)

    def expand(self, owner: str, hash_or_slug: str) -> ServiceResult[BookmarkModel]:
        try:
            return ServiceResult.success(self.bookmarks.expand(owner, hash_or_slug))
        except NotFoundError as e:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, str(e))
        except DataStoreError as e:
            return self._data_store_failure(e)

    def expand_global(self, global_hash: str) -> ServiceResult[LongURLModel]:
        try:
            return ServiceResult.success(self.long_urls.get(global_hash))
        except NotFoundError as e:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, str(e))
        except DataStoreError as e:
            return self._data_store_failure(e)

    def update_bookmark(
        self,
        owner: str,
        hash_or_slug: str,
        slug: str | None,
        keyword_names: str | Iterable[str] | None,
    ) -> ServiceResult[BookmarkModel]:
        """Replace slug and (when given) keywords of a bookmark

        `keyword_names=None` leaves the keywords unchanged; an empty string or
        list removes all of them. `slug=None` (or blank) clears the slug.
        """
        try:
            keywords = None if keyword_names is None else _keyword_names(keyword_names)
            bookmark = self.bookmarks.update(owner, hash_or_slug, slug=slug, keywords=keywords)
        except NotFoundError as e:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, str(e))
        except ValidationError as e:
            return ServiceResult.fail(ErrorKind.INVALID_INPUT, str(e))
        except SlugConflictError as e:
            logger.info('Slug conflict on bookmark update.', extra={'owner': owner, 'slug': slug})
            return ServiceResult.fail(ErrorKind.SLUG_CONFLICT, str(e))
        except KeywordAttachError as e:
            return self._keywords_not_saved(e)
        except DataStoreError as e:
            return self._data_store_failure(e)
        return ServiceResult.success(bookmark)

    def edit_form(self, owner: str, hash_or_slug: str) -> ServiceResult[FormData]:
        result = self.expand(owner, hash_or_slug)
        if not result.ok:
            return ServiceResult.fail(result.error, result.message)
        return ServiceResult.success(self.form_data(result.value))

    def form_data(self, bookmark: BookmarkModel) -> FormData:
        return {
            'edit': True,
            'userid': bookmark.owner,
            'longUrl': bookmark.long_url.url,
            'shortUrl': self.settings.short_url(bookmark.owner, bookmark.slug or bookmark.hash),
            'globalShortUrl': self.settings.global_short_url(bookmark.long_url.hash),
            'selectedKeywords': join_keyword_names(bookmark.keywords),
            'slug': bookmark.slug or '',
        }

    def _keywords_not_saved(self, e: KeywordAttachError) -> ServiceResult[Any]:
        bookmark = e.bookmark
        logger.warning(
            'Bookmark saved without its keywords.',
            extra={'owner': bookmark.owner, 'bookmarkHash': bookmark.hash, 'error': str(e.__cause__ or e)},
        )
        return ServiceResult.success(bookmark, ResultWarning.KEYWORDS_NOT_SAVED)

    def _data_store_failure(self, e: DataStoreError) -> ServiceResult[Any]:
        logger.error('Data store failure.', extra={'error': str(e)})
        return ServiceResult.fail(ErrorKind.DATA_STORE, str(e))

"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    DataStoreError:
        Raised when the data store fails (connection issues, timeouts, OOM, etc.).

    LongURLNotFoundError / BookmarkNotFoundError:
        Raised when a lookup key has no matching record.

    SlugConflictError:
        Raised when a slug is already held by another bookmark of the same owner.

    HashExhaustionError:
        Raised when no free hash was found within the retry budget.

    KeywordAttachError:
        Raised when keywords couldn't be attached to an already committed bookmark.

Example:
    >>> from urlservice.dao.exceptions import SlugConflictError
    >>> raise SlugConflictError("Slug 'mypage' is already taken.")
    Traceback (most recent call last):
        ...
    urlservice.dao.exceptions.SlugConflictError: Slug 'mypage' is already taken.
"""

from urlservice.exceptions import UrlServiceError


class DAOError(UrlServiceError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and out-of-memory failures.
    """

    error_code = 'dao:data_store_error'


class NotFoundError(DAOError):
    """Raised when a lookup key (hash, slug or global hash) has no record."""

    error_code = 'dao:not_found_error'


class LongURLNotFoundError(NotFoundError):
    """Raised when a LongURLModel is not found in the data store."""

    error_code = 'dao:long_url_not_found_error'


class BookmarkNotFoundError(NotFoundError):
    """Raised when a BookmarkModel is not found in the owner's namespace."""

    error_code = 'dao:bookmark_not_found_error'


class SlugConflictError(DAOError):
    """Raised when a slug is held by a different bookmark of the same owner."""

    error_code = 'dao:slug_conflict_error'


class HashExhaustionError(DAOError):
    """Raised when hash generation runs out of retries without finding a free value."""

    error_code = 'dao:hash_exhaustion_error'


class KeywordAttachError(DAOError):
    """Raised when keywords can't be attached after the bookmark was committed.

    The committed bookmark travels with the exception so callers can still
    report the successful write.
    """

    error_code = 'dao:keyword_attach_error'

    def __init__(self, message: str, bookmark=None):
        super().__init__(message)
        self.bookmark = bookmark

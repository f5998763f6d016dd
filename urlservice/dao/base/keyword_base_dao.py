from abc import ABC, abstractmethod
from collections.abc import Iterable

from urlservice.types import BookmarkRef
from urlservice.models import BookmarkModel, KeywordModel


class KeywordBaseDAO(ABC):
    """Interface for the keyword index (bookmark <-> keyword, many-to-many).

    Methods:
        attach(bookmark: BookmarkModel, names: Iterable[str], **kwargs) -> frozenset[KeywordModel]:
            Replace the full keyword set of a bookmark (not additive).
            Raises InvalidKeywordError for empty names.

        keywords_of(bookmark: BookmarkModel, **kwargs) -> frozenset[KeywordModel]:
            Keywords currently attached to a bookmark.

        bookmarks_for(keyword: str | KeywordModel, **kwargs) -> set[BookmarkRef]:
            (owner, bookmark hash) pairs tagged with a keyword.
    """

    @abstractmethod
    def attach(self, bookmark: BookmarkModel, names: Iterable[str], **kwargs) -> frozenset[KeywordModel]:
        pass

    @abstractmethod
    def keywords_of(self, bookmark: BookmarkModel, **kwargs) -> frozenset[KeywordModel]:
        pass

    @abstractmethod
    def bookmarks_for(self, keyword: str | KeywordModel, **kwargs) -> set[BookmarkRef]:
        pass

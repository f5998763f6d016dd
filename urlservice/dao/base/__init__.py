from urlservice.dao.base.long_url_base_dao import LongURLBaseDAO
from urlservice.dao.base.slug_base_dao import SlugBaseDAO
from urlservice.dao.base.bookmark_base_dao import BookmarkBaseDAO
from urlservice.dao.base.keyword_base_dao import KeywordBaseDAO
from urlservice.dao.base.user_base_dao import UserBaseDAO


__all__ = [
    'LongURLBaseDAO',
    'SlugBaseDAO',
    'BookmarkBaseDAO',
    'KeywordBaseDAO',
    'UserBaseDAO',
]

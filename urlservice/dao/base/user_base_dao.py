"""Abstract base class for user data access objects (DAOs).

Identity is resolved by the authentication provider; the data store only
keeps a registry of user names it has seen.
"""

from abc import ABC, abstractmethod

from urlservice.models import UserModel


class UserBaseDAO(ABC):
    """Interface for user data access objects (DAOs)

    Methods:
        get(user_name: str, **kwargs) -> UserModel:
            Return the user, registering it on first sight.
            Raises ValueError on empty user names.
            Raises DataStoreError on read/write failure.

        exists(user_name: str, **kwargs) -> bool:
            True if the user was registered before.
    """

    @abstractmethod
    def get(self, user_name: str, **kwargs) -> UserModel:
        """Return the user, registering it on first sight.

        NOTE: Implementations of this method must guarantee auto-registration of unknown users.
        """
        pass

    @abstractmethod
    def exists(self, user_name: str, **kwargs) -> bool:
        pass

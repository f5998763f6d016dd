from abc import ABC, abstractmethod


class SlugBaseDAO(ABC):
    """Interface for per-user slug reservations (Slug Resolver).

    A slug is a user-chosen alias of one bookmark, unique within its owner's
    namespace.

    Methods:
        reserve(owner: str, slug: str, bookmark_hash: str, **kwargs) -> None:
            Claim a slug for a bookmark. No-op if the bookmark already holds it.
            Raises SlugConflictError if another bookmark of the owner holds it.

        release(owner: str, slug: str, bookmark_hash: str, **kwargs) -> bool:
            Drop the reservation if (and only if) `bookmark_hash` still holds it.

        resolve(owner: str, slug: str, **kwargs) -> str | None:
            Return the bookmark hash holding the slug, None if it's free.
    """

    @abstractmethod
    def reserve(self, owner: str, slug: str, bookmark_hash: str, **kwargs) -> None:
        pass

    @abstractmethod
    def release(self, owner: str, slug: str, bookmark_hash: str, **kwargs) -> bool:
        pass

    @abstractmethod
    def resolve(self, owner: str, slug: str, **kwargs) -> str | None:
        pass

"""Abstract repository interface (port) for User persistence."""

from abc import ABC, abstractmethod

from service_portal.domain.entities import User


class UserRepository(ABC):
    """Port for user profile persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> User | None:
        """Retrieve a single user by id."""
        ...

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user profile and return it."""
        ...

"""UserRepository protocol — defines user lookup and persistence contract."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class UserRepository(Protocol):
    """Repository interface for User entity access."""

    async def get_by_id(self, user_id: int) -> Optional[object]:
        """Look up a user by internal database ID.

        Args:
            user_id: The internal (primary key) user ID.

        Returns:
            The User object (with general law loaded), or None if not found.
        """
        ...

    async def get_by_email(self, email: str) -> Optional[object]:
        """Look up a user by email address."""
        ...

    async def add(self, user: object) -> object:
        """Stage a user (and its general law) and flush it.

        Returns:
            The User object with its ID populated.
        """
        ...

    async def delete(self, user: object) -> None:
        """Delete a user; owned general law information goes with it."""
        ...

"""
Typed domain errors for the legal profile package.

Ordinary invalid input is never raised: it comes back as ValidationErrors
on a SaveResult. These exceptions cover programming and lookup errors that
callers must handle explicitly.
"""


class DomainError(Exception):
    """Base class for all domain-specific errors."""


class UnknownAttributeError(DomainError):
    """Bulk assignment received a key the entity does not accept."""

    def __init__(self, entity: str, attribute: str) -> None:
        self.entity = entity
        self.attribute = attribute
        super().__init__(f"Unknown attribute '{attribute}' for {entity}")


class UserNotFound(DomainError):
    """User with the given ID does not exist."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")

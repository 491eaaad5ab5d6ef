"""CensorRuleRepository protocol — defines censor rule lookup and insert contract."""

from typing import List, Optional, Protocol, runtime_checkable


@runtime_checkable
class CensorRuleRepository(Protocol):
    """Repository interface for CensorRule entity access."""

    async def find_by_text(self, text: str) -> Optional[object]:
        """Return the first rule whose text matches exactly, or None."""
        ...

    async def add(self, rule: object) -> object:
        """Persist a new rule and return it with ID populated."""
        ...

    async def list_by_text(self, text: str) -> List[object]:
        """All rules whose text matches exactly, oldest first."""
        ...

    async def list_for_user(self, user_id: int) -> List[object]:
        """Rules generated on behalf of a user, oldest first."""
        ...

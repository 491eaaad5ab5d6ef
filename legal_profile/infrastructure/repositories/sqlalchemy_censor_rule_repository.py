"""SQLAlchemy implementation of CensorRuleRepository."""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from legal_profile.models.censor_rule import CensorRule

logger = logging.getLogger(__name__)


class SqlAlchemyCensorRuleRepository:
    """Concrete CensorRuleRepository backed by SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_text(self, text: str) -> Optional[CensorRule]:
        result = await self._session.execute(
            select(CensorRule)
            .where(CensorRule.text == text)
            .order_by(CensorRule.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def add(self, rule: CensorRule) -> CensorRule:
        """Persist a new rule and return it with ID populated."""
        self._session.add(rule)
        await self._session.flush()
        return rule

    async def list_by_text(self, text: str) -> List[CensorRule]:
        result = await self._session.execute(
            select(CensorRule).where(CensorRule.text == text).order_by(CensorRule.id)
        )
        return list(result.scalars().all())

    async def list_for_user(self, user_id: int) -> List[CensorRule]:
        result = await self._session.execute(
            select(CensorRule)
            .where(CensorRule.user_id == user_id)
            .order_by(CensorRule.id)
        )
        return list(result.scalars().all())

"""General law information — personal details required alongside a legal request.

Owned by exactly one User and deleted with it.
"""

import enum
import logging
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..domain.errors import UnknownAttributeError
from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .user import User

logger = logging.getLogger(__name__)


class MaritalStatus(str, enum.Enum):
    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"
    COMMON_LAW = "common_law"

    @classmethod
    def values(cls) -> list:
        return [status.value for status in cls]


class GeneralLaw(Base, TimestampMixin):
    __tablename__ = "general_laws"

    ASSIGNABLE = ("date_of_birth", "marital_status", "occupation", "domicile")

    # Populated by validate_general_law(); not persisted
    errors = None

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    marital_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    occupation: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    domicile: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="general_law")

    def __init__(self, **kwargs: Any) -> None:
        attrs = {k: kwargs.pop(k) for k in self.ASSIGNABLE if k in kwargs}
        super().__init__(**kwargs)
        self.assign_attributes(attrs)

    def assign_attributes(self, attrs: Dict[str, Any]) -> None:
        """Assign form values, coercing dates and marital status enums."""
        for key, value in attrs.items():
            if key not in self.ASSIGNABLE:
                raise UnknownAttributeError("GeneralLaw", key)
            if key == "date_of_birth":
                value = _coerce_date(value)
            elif key == "marital_status" and isinstance(value, MaritalStatus):
                value = value.value
            setattr(self, key, value)

    def __repr__(self) -> str:
        return (
            f"<GeneralLaw(id={self.id}, user_id={self.user_id}, "
            f"marital_status={self.marital_status})>"
        )


def _coerce_date(value: Any) -> Optional[date]:
    # Unparseable form input becomes None and fails the presence check
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            logger.debug(f"Discarding unparseable date_of_birth: {value!r}")
            return None
    return None

from .base import Base, TimestampMixin
from .censor_rule import CensorRule
from .general_law import GeneralLaw, MaritalStatus
from .user import User

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "GeneralLaw",
    "MaritalStatus",
    "CensorRule",
]

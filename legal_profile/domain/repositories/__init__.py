from .censor_rule_repository import CensorRuleRepository
from .user_repository import UserRepository

__all__ = ["CensorRuleRepository", "UserRepository"]

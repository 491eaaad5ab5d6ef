from .sqlalchemy_censor_rule_repository import SqlAlchemyCensorRuleRepository
from .sqlalchemy_user_repository import SqlAlchemyUserRepository

__all__ = [
    "SqlAlchemyCensorRuleRepository",
    "SqlAlchemyUserRepository",
]

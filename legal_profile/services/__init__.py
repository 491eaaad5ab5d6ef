from .user_legal_profile import (
    SaveResult,
    UserLegalProfileService,
    build_user_legal_profile,
)

__all__ = ["SaveResult", "UserLegalProfileService", "build_user_legal_profile"]

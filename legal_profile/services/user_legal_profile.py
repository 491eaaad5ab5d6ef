"""
User legal profile service.

Creates and updates users together with their general law information,
runs the legal-compliance validations and, after every successful save,
makes sure a censor rule exists for the user's identity card number so the
number is redacted wherever public content is rendered.

Censor rules are only ever added here. When a user's number changes the
rule for the old number stays in place, so both values remain redacted.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings, get_settings
from ..core.i18n import t
from ..domain.errors import UnknownAttributeError, UserNotFound
from ..domain.repositories import CensorRuleRepository, UserRepository
from ..domain.validation import CREATE, UPDATE, ValidationErrors, is_blank, validate_user
from ..infrastructure.repositories import (
    SqlAlchemyCensorRuleRepository,
    SqlAlchemyUserRepository,
)
from ..models.censor_rule import CensorRule
from ..models.general_law import GeneralLaw
from ..models.user import User, coerce_acceptance
from ..utils.logging import get_audit_logger, mask_identity_number

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    """Outcome of a create/update/save call.

    ``ok`` is False only for validation failures; nothing was written in
    that case and ``errors`` holds the field messages. The rejected values
    are kept in ``attempted`` so a form can show them again, while the user
    itself is reset to its stored state.
    """

    ok: bool
    user: User
    errors: ValidationErrors = field(default_factory=ValidationErrors)
    censor_rule: Optional[CensorRule] = None
    attempted: Dict[str, Any] = field(default_factory=dict)


class UserLegalProfileService:
    """Validates and persists users with their legal-compliance fields."""

    def __init__(
        self,
        session: AsyncSession,
        theme_name: str,
        locale: Optional[str] = None,
        user_repo: Optional[UserRepository] = None,
        censor_rule_repo: Optional[CensorRuleRepository] = None,
    ) -> None:
        self._session = session
        self._theme_name = theme_name
        self._locale = locale
        self._users = user_repo or SqlAlchemyUserRepository(session)
        self._censor_rules = censor_rule_repo or SqlAlchemyCensorRuleRepository(session)
        self._audit = get_audit_logger()

    @property
    def theme_name(self) -> str:
        return self._theme_name

    async def get_user(self, user_id: int) -> User:
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)
        return user

    async def create(self, params: Dict[str, Any]) -> SaveResult:
        """Build a user from form params (with ``general_law_attributes``) and save it."""
        user = User.from_params(params)
        return await self.save(user, context=CREATE)

    async def update(self, user: User, params: Dict[str, Any]) -> SaveResult:
        """Assign form params to an existing user and save it."""
        user.assign_attributes(params)
        return await self.save(user, context=UPDATE)

    async def save(self, user: User, context: Optional[str] = None) -> SaveResult:
        """Validate and persist *user* with its general law information.

        Validation failures are returned, not raised, and leave the database
        untouched. Storage errors propagate after the session is rolled back.
        """
        errors = validate_user(user, context, self._locale)
        if errors:
            attempted = _attempted_values(user)
            await self._discard_changes(user)
            return SaveResult(ok=False, user=user, errors=errors, attempted=attempted)
        rule = await self._persist(user)
        return SaveResult(ok=True, user=user, censor_rule=rule)

    async def update_attribute(self, user: User, name: str, value: Any) -> SaveResult:
        """Set a single column and save without running validations.

        The censor rule for the resulting identity card number is still
        ensured.
        """
        if name == "terms":
            name = "terms_accepted"
        if name not in User.ASSIGNABLE:
            raise UnknownAttributeError("User", name)
        if name == "terms_accepted":
            value = coerce_acceptance(value)
        setattr(user, name, value)
        rule = await self._persist(user)
        return SaveResult(ok=True, user=user, censor_rule=rule)

    async def destroy(self, user: User) -> None:
        """Delete the user and its general law information.

        Censor rules generated for the user are kept.
        """
        user_id = user.id
        try:
            await self._users.delete(user)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error(f"Failed to delete user {user_id}: {_error_summary(e)}")
            raise
        logger.info(f"Deleted user {user_id} and their general law information")

    async def _discard_changes(self, user: User) -> None:
        """Reset a rejected user so a later flush cannot write its values."""
        state = inspect(user)
        if state.pending:
            # cascades to the general law record
            self._session.expunge(user)
            return
        if not state.persistent:
            return
        general_law = user.general_law
        with self._session.no_autoflush:
            if general_law is not None:
                general_law_state = inspect(general_law)
                if general_law_state.pending:
                    self._session.expunge(general_law)
                elif general_law_state.persistent:
                    await self._session.refresh(general_law)
            await self._session.refresh(user)
        logger.debug(f"Discarded rejected changes to user {user.id}")

    async def _persist(self, user: User) -> Optional[CensorRule]:
        identity_card_number = user.identity_card_number
        label = user.id if user.id is not None else "<new>"
        try:
            await self._users.add(user)
            user_id = user.id
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error(f"Failed to save user {label}: {_error_summary(e)}")
            raise
        logger.debug(f"Saved user {user_id}")
        return await self.sync_censor_rule(user_id, identity_card_number)

    async def sync_censor_rule(
        self, user_id: Optional[int], identity_card_number: Optional[str]
    ) -> Optional[CensorRule]:
        """Find or create the censor rule for *identity_card_number*.

        An existing rule with the same text is returned unchanged, whoever
        it was created for. Blank numbers are skipped; they can only reach
        this point through update_attribute().
        """
        if is_blank(identity_card_number):
            logger.debug(f"No identity card number for user {user_id}, no censor rule")
            return None

        masked = mask_identity_number(identity_card_number)
        existing = await self._censor_rules.find_by_text(identity_card_number)
        if existing is not None:
            logger.debug(f"Censor rule for {masked} already exists (id={existing.id})")
            return existing

        rule = CensorRule(
            text=identity_card_number,
            replacement=t("censor_rule.replacement", self._locale),
            last_edit_editor=self._theme_name,
            last_edit_comment=t("censor_rule.comment", self._locale),
            user_id=user_id,
        )
        try:
            async with self._session.begin_nested():
                await self._censor_rules.add(rule)
                rule_id = rule.id
        except IntegrityError:
            # Another request inserted the same text between lookup and insert
            existing = await self._censor_rules.find_by_text(identity_card_number)
            if existing is None:
                raise
            logger.info(f"Censor rule for {masked} created concurrently, reusing it")
            return existing
        await self._session.commit()

        self._audit.info(
            "censor_rule_created",
            rule_id=rule_id,
            user_id=user_id,
            text=masked,
            editor=self._theme_name,
        )
        return rule


def _attempted_values(user: User) -> Dict[str, Any]:
    values: Dict[str, Any] = {name: getattr(user, name) for name in User.ASSIGNABLE}
    if user.general_law is not None:
        values["general_law_attributes"] = {
            name: getattr(user.general_law, name) for name in GeneralLaw.ASSIGNABLE
        }
    return values


def _error_summary(error: SQLAlchemyError) -> str:
    # str(error) includes the bound parameters, which carry personal data
    return str(getattr(error, "orig", None) or error.__class__.__name__)


def build_user_legal_profile(
    session: AsyncSession, settings: Optional[Settings] = None
) -> UserLegalProfileService:
    """Wire the service from application settings."""
    settings = settings or get_settings()
    return UserLegalProfileService(
        session,
        theme_name=settings.theme_name,
        locale=settings.default_locale,
    )

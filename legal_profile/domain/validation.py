"""
Validation rules for users and their general law information.

Each rule is a predicate over one attribute plus a translation key. Rules are
evaluated in order and every failure is collected: a single validate() call
reports all violated rules, never just the first. Invalid input is returned
as ValidationErrors, never raised.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from ..core.i18n import t
from ..models.general_law import MaritalStatus

logger = logging.getLogger(__name__)

# ASCII digits and whitespace only; \d and \s would otherwise accept any
# Unicode digit or space
IDENTITY_CARD_NUMBER_FORMAT = re.compile(r"\A\d{3}-\d{6}-\d{4}[A-Z]\Z", re.ASCII)
FULL_NAME_FORMAT = re.compile(r"\s", re.ASCII)

CREATE = "create"
UPDATE = "update"


class ValidationErrors:
    """Ordered field → messages mapping collected by validate()."""

    def __init__(self) -> None:
        self._errors: Dict[str, List[str]] = {}

    def add(self, field: str, message: str) -> None:
        self._errors.setdefault(field, []).append(message)

    def on(self, field: str) -> List[str]:
        """Messages attached to *field* (empty list if none)."""
        return list(self._errors.get(field, []))

    def merge(self, other: "ValidationErrors", prefix: Optional[str] = None) -> None:
        """Append *other*'s messages, keying them ``prefix.field`` when given."""
        for field, messages in other.items():
            if prefix:
                field = f"{prefix}.{field}"
            for message in messages:
                self.add(field, message)

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        return iter((field, list(messages)) for field, messages in self._errors.items())

    @property
    def fields(self) -> List[str]:
        return list(self._errors)

    def full_messages(self) -> List[str]:
        return [message for messages in self._errors.values() for message in messages]

    def to_dict(self) -> Dict[str, List[str]]:
        return {field: list(messages) for field, messages in self._errors.items()}

    def __contains__(self, field: object) -> bool:
        return field in self._errors

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._errors.values())

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __repr__(self) -> str:
        return f"<ValidationErrors({self.to_dict()})>"


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return not value
    return False


@dataclass(frozen=True)
class Rule:
    """One predicate on one attribute.

    ``on`` restricts the rule to the "create" or "update" context; ``None``
    runs it in both. With ``allow_blank`` a blank value passes, leaving
    blankness to a separate presence rule.
    """

    field: str
    message_key: str
    check: Optional[Callable[[Any], bool]] = None
    on: Optional[str] = None
    allow_blank: bool = False

    def applies(self, context: Optional[str]) -> bool:
        return self.on is None or self.on == context

    def passes(self, entity: Any, context: Optional[str], locale: Optional[str]) -> bool:
        value = getattr(entity, self.field, None)
        if self.allow_blank and is_blank(value):
            return True
        return bool(self.check(value))

    def nested_errors(self, entity: Any) -> Optional["ValidationErrors"]:
        return None


@dataclass(frozen=True)
class NestedRule(Rule):
    """Validates an associated entity with its own rules.

    The nested errors are stored on the associated entity's ``errors`` and
    copied to the owner as ``<field>.<nested field>`` after the summary
    message. A missing association passes, so pair this with a presence
    rule.
    """

    rules: Tuple[Rule, ...] = ()

    def passes(self, entity: Any, context: Optional[str], locale: Optional[str]) -> bool:
        associated = getattr(entity, self.field, None)
        if associated is None:
            return True
        associated.errors = validate(associated, self.rules, context, locale)
        return not associated.errors

    def nested_errors(self, entity: Any) -> Optional["ValidationErrors"]:
        associated = getattr(entity, self.field, None)
        return getattr(associated, "errors", None)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def present(value: Any) -> bool:
    return not is_blank(value)


def accepted(value: Any) -> bool:
    return value is True


def matches(pattern: "re.Pattern[str]") -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return isinstance(value, str) and pattern.search(value) is not None

    return check


def one_of(allowed: Sequence[Any]) -> Callable[[Any], bool]:
    return lambda value: value in allowed


def not_in_future(value: Any) -> bool:
    return isinstance(value, date) and value <= date.today()


# ---------------------------------------------------------------------------
# Rule sets
# ---------------------------------------------------------------------------

GENERAL_LAW_RULES: Tuple[Rule, ...] = (
    Rule("date_of_birth", "validation.general_law.date_of_birth.blank", present),
    Rule(
        "date_of_birth",
        "validation.general_law.date_of_birth.future",
        not_in_future,
        allow_blank=True,
    ),
    Rule("marital_status", "validation.general_law.marital_status.blank", present),
    Rule(
        "marital_status",
        "validation.general_law.marital_status.inclusion",
        one_of(MaritalStatus.values()),
        allow_blank=True,
    ),
    Rule("occupation", "validation.general_law.occupation.blank", present),
    Rule("domicile", "validation.general_law.domicile.blank", present),
)

USER_RULES: Tuple[Rule, ...] = (
    Rule("terms_accepted", "validation.user.terms", accepted, on=CREATE),
    Rule(
        "identity_card_number",
        "validation.user.identity_card_number.blank",
        present,
    ),
    Rule(
        "identity_card_number",
        "validation.user.identity_card_number.format",
        matches(IDENTITY_CARD_NUMBER_FORMAT),
        allow_blank=True,
    ),
    Rule("general_law", "validation.user.general_law.blank", present),
    NestedRule(
        "general_law",
        "validation.user.general_law.invalid",
        rules=GENERAL_LAW_RULES,
    ),
    Rule("name", "validation.user.name.full_name", matches(FULL_NAME_FORMAT)),
)


def validate(
    entity: Any,
    rules: Sequence[Rule],
    context: Optional[str] = None,
    locale: Optional[str] = None,
) -> ValidationErrors:
    """Run every applicable rule against *entity* and collect the failures."""
    errors = ValidationErrors()
    for rule in rules:
        if not rule.applies(context):
            continue
        if not rule.passes(entity, context, locale):
            errors.add(rule.field, t(rule.message_key, locale))
            nested = rule.nested_errors(entity)
            if nested:
                errors.merge(nested, prefix=rule.field)
    return errors


def validate_user(
    user: Any, context: Optional[str] = None, locale: Optional[str] = None
) -> ValidationErrors:
    """Validate a user and its general law information.

    The context defaults to "create" for unsaved users and "update" otherwise.
    The result is also stored on ``user.errors``.
    """
    if context is None:
        context = user.validation_context()
    errors = validate(user, USER_RULES, context, locale)
    user.errors = errors
    if errors:
        logger.debug(f"User validation failed on {errors.fields} (context={context})")
    return errors


def validate_general_law(
    general_law: Any, context: Optional[str] = None, locale: Optional[str] = None
) -> ValidationErrors:
    errors = validate(general_law, GENERAL_LAW_RULES, context, locale)
    general_law.errors = errors
    return errors

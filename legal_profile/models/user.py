from typing import Any, Dict, Optional

from sqlalchemy import Boolean, Integer, String, inspect
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..domain.errors import UnknownAttributeError
from .base import Base, TimestampMixin
from .general_law import GeneralLaw

# Form values that count as accepting the terms
ACCEPTED_VALUES = (True, 1, "1", "true", "yes", "on")


def coerce_acceptance(value: Any) -> Optional[bool]:
    """Map a checkbox value to a bool; None stays None (never ticked)."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip().lower()
    return value in ACCEPTED_VALUES


class User(Base, TimestampMixin):
    __tablename__ = "users"

    ASSIGNABLE = ("name", "email", "terms_accepted", "identity_card_number")

    # Populated by validate_user(); not persisted
    errors = None

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(
        String(255), unique=True, nullable=True, index=True
    )

    # Legal-compliance fields
    terms_accepted: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    identity_card_number: Mapped[Optional[str]] = mapped_column(
        String(32), nullable=True
    )

    # Relationships
    general_law: Mapped[Optional["GeneralLaw"]] = relationship(
        "GeneralLaw",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __init__(self, **kwargs: Any) -> None:
        general_law_attrs = kwargs.pop("general_law_attributes", None)
        if "terms" in kwargs:
            kwargs["terms_accepted"] = kwargs.pop("terms")
        if "terms_accepted" in kwargs:
            kwargs["terms_accepted"] = coerce_acceptance(kwargs["terms_accepted"])
        super().__init__(**kwargs)
        if general_law_attrs is not None:
            self._assign_general_law(general_law_attrs)

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "User":
        """Build an unsaved user from form params, including nested general law."""
        user = cls()
        user.assign_attributes(params)
        return user

    # --- Nested attributes ---

    def assign_attributes(self, params: Dict[str, Any]) -> None:
        """Bulk-assign user columns and ``general_law_attributes``.

        Existing general law information is updated in place; otherwise a
        new record is built and attached.
        """
        for key, value in params.items():
            if key == "general_law_attributes":
                self._assign_general_law(value)
                continue
            if key == "terms":
                key = "terms_accepted"
            if key not in self.ASSIGNABLE:
                raise UnknownAttributeError("User", key)
            if key == "terms_accepted":
                value = coerce_acceptance(value)
            setattr(self, key, value)

    def build_general_law(self, **attrs: Any) -> GeneralLaw:
        """Attach a new GeneralLaw, replacing any existing one."""
        self.general_law = GeneralLaw(**attrs)
        return self.general_law

    def _assign_general_law(self, attrs: Optional[Dict[str, Any]]) -> None:
        if attrs is None:
            return
        if self.general_law is None:
            self.build_general_law(**attrs)
        else:
            self.general_law.assign_attributes(attrs)

    # --- Domain behavior ---

    def is_new(self) -> bool:
        """True until the row has been written to the database."""
        return not inspect(self).has_identity

    def has_accepted_terms(self) -> bool:
        return bool(self.terms_accepted)

    def validation_context(self) -> str:
        return "create" if self.is_new() else "update"

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name}, email={self.email})>"

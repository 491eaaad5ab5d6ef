"""Censor rule — text to replacement mapping applied when rendering public content.

Rows are consumed by the rendering layer; this package only inserts them.
"""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class CensorRule(Base, TimestampMixin):
    __tablename__ = "censor_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    text: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    replacement: Mapped[str] = mapped_column(Text, nullable=False)
    regexp: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_edit_editor: Mapped[str] = mapped_column(String(255), nullable=False)
    last_edit_comment: Mapped[str] = mapped_column(Text, nullable=False)

    # User the rule was generated for; kept when the user is deleted
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    def __repr__(self) -> str:
        return (
            f"<CensorRule(id={self.id}, user_id={self.user_id}, "
            f"editor={self.last_edit_editor})>"
        )

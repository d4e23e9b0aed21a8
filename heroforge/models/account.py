"""
Account and profile models.

An account is the login identity (``id`` plus argon2 password hash). Its
profile holds the display name and is created in the same transaction.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utc_now

if TYPE_CHECKING:
    from .character import Character


class Account(Base):
    """Login identity. Never deleted."""

    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utc_now, nullable=False)

    profile: Mapped["Profile"] = relationship("Profile", back_populates="account", uselist=False, lazy="raise")
    characters: Mapped[list["Character"]] = relationship("Character", back_populates="owner", lazy="raise")

    def __repr__(self) -> str:
        return f"<Account(id={self.id})>"


class Profile(Base):
    """Display data for an account, 1:1."""

    __tablename__ = "profiles"

    profile_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    display_name: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utc_now, nullable=False)

    account: Mapped[Account] = relationship("Account", back_populates="profile", lazy="raise")

    def __repr__(self) -> str:
        return f"<Profile(account_id={self.account_id}, display_name={self.display_name})>"

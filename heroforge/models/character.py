"""
Character model.

Character names are unique across all accounts. Starting stats are fixed
at creation; ``money`` is only ever shown to the owner.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utc_now

if TYPE_CHECKING:
    from .account import Account
    from .item import InventoryEntry

STARTING_LEVEL = 1
STARTING_HEALTH = 500
STARTING_POWER = 100
STARTING_MONEY = 10000


class Character(Base):
    """A playable character owned by one account."""

    __tablename__ = "characters"

    character_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(64), ForeignKey("accounts.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=STARTING_LEVEL)
    health: Mapped[int] = mapped_column(Integer, nullable=False, default=STARTING_HEALTH)
    power: Mapped[int] = mapped_column(Integer, nullable=False, default=STARTING_POWER)
    money: Mapped[int] = mapped_column(Integer, nullable=False, default=STARTING_MONEY)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utc_now, nullable=False)

    owner: Mapped["Account"] = relationship("Account", back_populates="characters", lazy="raise")
    inventory: Mapped[list["InventoryEntry"]] = relationship(
        "InventoryEntry", back_populates="character", lazy="raise", passive_deletes=True
    )

    def is_owned_by(self, account_id: str) -> bool:
        """True when ``account_id`` owns this character."""
        return self.owner_id == account_id

    def __repr__(self) -> str:
        return f"<Character(character_id={self.character_id}, name={self.name}, owner_id={self.owner_id})>"

"""
SQLAlchemy models for the item catalog and character inventories.

``ItemDefinition`` is the catalog template. ``InventoryEntry`` is a
per-character acquisition that freezes the item's name, stats and price at
the moment it was acquired; later edits to the definition never reach it.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utc_now

if TYPE_CHECKING:
    from .character import Character


class ItemDefinition(Base):
    """Catalog entry. ``price`` is fixed once the row exists."""

    __tablename__ = "item_definitions"

    item_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    health: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    power: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    entries: Mapped[list[InventoryEntry]] = relationship("InventoryEntry", back_populates="item", lazy="raise")

    def __repr__(self) -> str:
        return f"<ItemDefinition(item_id={self.item_id}, name={self.name})>"


class InventoryEntry(Base):
    """An item held by a character, with a frozen snapshot of the definition."""

    __tablename__ = "inventory_entries"
    __table_args__ = (UniqueConstraint("character_id", "name", name="uq_inventory_entries_character_id_name"),)

    inventory_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    character_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("characters.character_id"), nullable=False, index=True
    )
    item_id: Mapped[int] = mapped_column(Integer, ForeignKey("item_definitions.item_id"), nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    health: Mapped[int] = mapped_column(Integer, nullable=False)
    power: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    acquired_at: Mapped[datetime] = mapped_column(DateTime(), default=utc_now, nullable=False)

    character: Mapped[Character] = relationship("Character", back_populates="inventory", lazy="raise")
    item: Mapped[ItemDefinition] = relationship("ItemDefinition", back_populates="entries", lazy="raise")

    @classmethod
    def snapshot_of(cls, item: ItemDefinition, character_id: int) -> InventoryEntry:
        """Build an entry copying ``item``'s current name, stats and price."""
        return cls(
            character_id=character_id,
            item_id=item.item_id,
            name=item.name,
            health=item.health,
            power=item.power,
            price=item.price,
        )

    def __repr__(self) -> str:
        return f"<InventoryEntry(inventory_id={self.inventory_id}, character_id={self.character_id}, name={self.name})>"

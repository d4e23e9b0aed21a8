"""
Database models for HeroForge.

Importing this package registers every model on the shared metadata.
"""

from .account import Account, Profile
from .base import Base
from .character import Character
from .item import InventoryEntry, ItemDefinition

__all__ = ["Account", "Base", "Character", "InventoryEntry", "ItemDefinition", "Profile"]

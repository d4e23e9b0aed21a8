"""Repository modules for async persistence layer."""

from .account_repository import AccountRepository
from .character_repository import CharacterRepository
from .item_repository import ItemRepository

__all__ = ["AccountRepository", "CharacterRepository", "ItemRepository"]

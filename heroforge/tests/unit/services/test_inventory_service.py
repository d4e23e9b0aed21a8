"""Tests for the inventory mutation protocol."""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select

from heroforge.error_types import ErrorReason
from heroforge.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from heroforge.models import InventoryEntry, ItemDefinition
from heroforge.persistence.repositories.item_repository import ItemRepository
from heroforge.schemas.item import ItemCreate, ItemUpdate
from heroforge.services.account_service import AccountService
from heroforge.services.character_service import CharacterService
from heroforge.services.inventory_service import InventoryService, collect_item_changes

SWORD = ItemCreate(name="Sword", health=0, power=10, price=100, description="sharp")


async def _owner_with_character(session, account_id: str = "player1", character_name: str = "Hero"):
    identity = await AccountService(session).register(account_id, "secret1", "secret1", account_id.upper())
    character = await CharacterService(session).create(identity.account, character_name)
    return identity.account, character


async def _count(session, model) -> int:
    return await session.scalar(select(func.count()).select_from(model))


class TestAddItem:
    @pytest.mark.asyncio
    async def test_creates_definition_and_snapshot(self, db_session):
        owner, character = await _owner_with_character(db_session)

        acquired = await InventoryService(db_session).add_item(owner, SWORD)

        assert acquired.item.item_id is not None
        assert acquired.entry.character_id == character.character_id
        assert acquired.entry.item_id == acquired.item.item_id
        assert (acquired.entry.name, acquired.entry.health, acquired.entry.power, acquired.entry.price) == (
            "Sword",
            0,
            10,
            100,
        )

    @pytest.mark.asyncio
    async def test_defaults_to_earliest_character(self, db_session):
        owner, first = await _owner_with_character(db_session)
        await CharacterService(db_session).create(owner, "Sidekick")

        acquired = await InventoryService(db_session).add_item(owner, SWORD)

        assert acquired.entry.character_id == first.character_id

    @pytest.mark.asyncio
    async def test_explicit_character(self, db_session):
        owner, _ = await _owner_with_character(db_session)
        second = await CharacterService(db_session).create(owner, "Sidekick")

        acquired = await InventoryService(db_session).add_item(
            owner, SWORD.model_copy(update={"character_id": second.character_id})
        )

        assert acquired.entry.character_id == second.character_id

    @pytest.mark.asyncio
    async def test_explicit_character_of_another_account(self, db_session):
        _, foreign = await _owner_with_character(db_session, "player1", "Hero")
        intruder, _ = await _owner_with_character(db_session, "player2", "Villain")

        with pytest.raises(ResourceNotFoundError) as exc_info:
            await InventoryService(db_session).add_item(
                intruder, SWORD.model_copy(update={"character_id": foreign.character_id})
            )

        assert exc_info.value.reason is ErrorReason.NOT_FOUND_OR_FORBIDDEN
        assert await _count(db_session, ItemDefinition) == 0

    @pytest.mark.asyncio
    async def test_no_character(self, db_session):
        identity = await AccountService(db_session).register("player1", "secret1", "secret1", "P1")

        with pytest.raises(ResourceNotFoundError) as exc_info:
            await InventoryService(db_session).add_item(identity.account, SWORD)

        assert exc_info.value.reason is ErrorReason.NO_CHARACTER

    @pytest.mark.asyncio
    async def test_blank_name(self, db_session):
        owner, _ = await _owner_with_character(db_session)

        with pytest.raises(ValidationError):
            await InventoryService(db_session).add_item(owner, ItemCreate(name=" "))

    @pytest.mark.asyncio
    async def test_duplicate_item(self, db_session):
        """Same name twice on one character: 409 and no orphaned definition."""
        owner, _ = await _owner_with_character(db_session)
        service = InventoryService(db_session)
        await service.add_item(owner, SWORD)

        with pytest.raises(ConflictError) as exc_info:
            await service.add_item(owner, SWORD)

        assert exc_info.value.reason is ErrorReason.DUPLICATE_ITEM
        assert await _count(db_session, ItemDefinition) == 1
        assert await _count(db_session, InventoryEntry) == 1

    @pytest.mark.asyncio
    async def test_late_duplicate_rolls_back_definition(self, db_session):
        """If the pre-check misses, the unique constraint fails the whole unit."""
        owner, _ = await _owner_with_character(db_session)
        service = InventoryService(db_session)
        await service.add_item(owner, SWORD)

        with patch.object(ItemRepository, "entry_name_exists", AsyncMock(return_value=False)):
            with pytest.raises(ConflictError) as exc_info:
                await service.add_item(owner, SWORD)

        assert exc_info.value.reason is ErrorReason.DUPLICATE_ITEM
        assert await _count(db_session, ItemDefinition) == 1
        assert await _count(db_session, InventoryEntry) == 1

    @pytest.mark.asyncio
    async def test_failure_after_definition_leaves_nothing(self, db_session, mocker):
        """A crash between the two writes leaves neither the entry nor the definition."""
        owner, _ = await _owner_with_character(db_session)
        add_definition = ItemRepository.add_definition

        async def definition_then_crash(self, *args, **kwargs):
            await add_definition(self, *args, **kwargs)
            raise RuntimeError("store went away")

        mocker.patch.object(ItemRepository, "add_definition", definition_then_crash)

        with pytest.raises(RuntimeError, match="store went away"):
            await InventoryService(db_session).add_item(owner, SWORD)

        assert await _count(db_session, ItemDefinition) == 0
        assert await _count(db_session, InventoryEntry) == 0


class TestCollectItemChanges:
    def test_only_present_non_null_fields(self):
        assert collect_item_changes(ItemUpdate(name="Axe", health=None)) == {"name": "Axe"}

    def test_zero_is_a_real_value(self):
        assert collect_item_changes(ItemUpdate(power=0, health=0)) == {"power": 0, "health": 0}

    def test_price_never_included(self):
        assert collect_item_changes(ItemUpdate(price=1)) == {}


class TestUpdateItem:
    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, db_session):
        owner, _ = await _owner_with_character(db_session)
        service = InventoryService(db_session)
        acquired = await service.add_item(owner, SWORD)

        item = await service.update_item(acquired.item.item_id, ItemUpdate(power=0, price=999))

        assert item.power == 0
        assert item.name == "Sword"
        assert item.description == "sharp"
        assert item.price == 100

    @pytest.mark.asyncio
    async def test_snapshot_untouched(self, db_session):
        """Editing a definition does not reach entries taken before."""
        owner, _ = await _owner_with_character(db_session)
        service = InventoryService(db_session)
        acquired = await service.add_item(owner, SWORD)
        inventory_id = acquired.entry.inventory_id

        await service.update_item(acquired.item.item_id, ItemUpdate(name="Great Sword", power=50))

        entry = await db_session.get(InventoryEntry, inventory_id)
        await db_session.refresh(entry)
        assert (entry.name, entry.power) == ("Sword", 10)

    @pytest.mark.asyncio
    async def test_nothing_to_update(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await InventoryService(db_session).update_item(1, ItemUpdate(price=5))

        assert exc_info.value.reason is ErrorReason.NOTHING_TO_UPDATE

    @pytest.mark.asyncio
    async def test_unknown_item(self, db_session):
        with pytest.raises(ResourceNotFoundError):
            await InventoryService(db_session).update_item(404, ItemUpdate(name="Axe"))


class TestListInventory:
    @pytest.mark.asyncio
    async def test_existing_character_without_items(self, db_session):
        _, character = await _owner_with_character(db_session)

        assert await InventoryService(db_session).list_inventory(character.character_id) == []

    @pytest.mark.asyncio
    async def test_unknown_character(self, db_session):
        with pytest.raises(ResourceNotFoundError):
            await InventoryService(db_session).list_inventory(12345)

    @pytest.mark.asyncio
    async def test_entries_carry_linked_definition(self, db_session):
        owner, character = await _owner_with_character(db_session)
        service = InventoryService(db_session)
        await service.add_item(owner, SWORD)

        entries = await service.list_inventory(character.character_id)

        assert [entry.item.name for entry in entries] == ["Sword"]
        assert entries[0].item.price == 100

"""
데이터베이스 모듈 단위 테스트
"""

import asyncio
import os
import sqlite3
import tempfile

import pytest

from src.rogue_engine.database import DatabaseManager, verify_schema
from src.rogue_engine.game.models import Account
from src.rogue_engine.game.repositories import AccountRepository


async def create_account(repo: AccountRepository, username: str = "hero") -> Account:
    account = Account(username=username, password_hash="hash")
    return await repo.create(account.to_dict_with_password())


class TestDatabaseManager:
    """DatabaseManager 테스트"""

    @pytest.mark.asyncio
    async def test_initialize_creates_schema(self, db_manager):
        connection = await db_manager.get_connection()
        assert await verify_schema(connection)
        assert await db_manager.health_check()

    @pytest.mark.asyncio
    async def test_sqlite_url_and_file_database(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            db_path = os.path.join(tmp_dir, "nested", "game.db")
            db_manager = DatabaseManager(f"sqlite:///{db_path}")
            assert db_manager.db_path == db_path
            assert not db_manager.is_memory

            async with db_manager:
                assert await db_manager.health_check()
            assert os.path.exists(db_path)

    @pytest.mark.asyncio
    async def test_transaction_rolls_back_on_error(self, db_manager, account_repo):
        with pytest.raises(RuntimeError):
            async with db_manager.transaction():
                await create_account(account_repo, "rolled_back")
                raise RuntimeError("boom")

        assert await account_repo.count() == 0

    @pytest.mark.asyncio
    async def test_transaction_commits(self, db_manager, account_repo):
        async with db_manager.transaction():
            await create_account(account_repo, "committed")

        assert await account_repo.username_exists("committed")

    @pytest.mark.asyncio
    async def test_other_task_waits_for_open_transaction(self, db_manager, account_repo):
        # 다른 태스크의 쓰기는 롤백되는 트랜잭션에 섞이지 않음
        entered = asyncio.Event()
        release = asyncio.Event()

        async def failing_transaction():
            async with db_manager.transaction():
                await create_account(account_repo, "inside")
                entered.set()
                await release.wait()
                raise RuntimeError("boom")

        transaction_task = asyncio.create_task(failing_transaction())
        await entered.wait()

        outside_task = asyncio.create_task(create_account(account_repo, "outside"))
        await asyncio.sleep(0.05)
        assert not outside_task.done()

        release.set()
        with pytest.raises(RuntimeError):
            await transaction_task
        await outside_task

        assert not await account_repo.username_exists("inside")
        assert await account_repo.username_exists("outside")

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        db_manager = DatabaseManager(":memory:")
        await db_manager.initialize()
        await db_manager.close()
        await db_manager.close()


class TestAccountRepository:

    @pytest.mark.asyncio
    async def test_create_and_lookup(self, account_repo):
        created = await create_account(account_repo)

        assert created.username == "hero"
        assert (await account_repo.get_by_id(created.id)).username == "hero"
        assert (await account_repo.get_by_username("hero")).id == created.id
        assert await account_repo.get_by_username("nobody") is None
        assert await account_repo.exists(created.id)

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, account_repo):
        await create_account(account_repo)
        with pytest.raises(sqlite3.IntegrityError):
            await create_account(account_repo)

    @pytest.mark.asyncio
    async def test_update_last_login(self, account_repo):
        created = await create_account(account_repo)
        assert created.last_login is None

        updated = await account_repo.update_last_login(created.id)
        assert updated.last_login is not None

    @pytest.mark.asyncio
    async def test_update_missing_record(self, account_repo):
        assert await account_repo.update("missing", {"preferred_locale": "ko"}) is None

    @pytest.mark.asyncio
    async def test_delete(self, account_repo):
        created = await create_account(account_repo)
        assert await account_repo.delete(created.id)
        assert not await account_repo.delete(created.id)
        assert await account_repo.count() == 0

    @pytest.mark.asyncio
    async def test_delete_by_requires_conditions(self, account_repo):
        with pytest.raises(ValueError):
            await account_repo.delete_by()


class TestSavedGameRepository:

    @pytest.mark.asyncio
    async def test_save_and_load(self, account_repo, saved_game_repo):
        account = await create_account(account_repo)

        await saved_game_repo.save_for_account(account.id, {"version": 1, "log": ["안녕"]})

        assert await saved_game_repo.has_saved_game(account.id)
        saved = await saved_game_repo.get_by_account_id(account.id)
        assert saved.data == {"version": 1, "log": ["안녕"]}

    @pytest.mark.asyncio
    async def test_save_replaces_previous(self, account_repo, saved_game_repo):
        account = await create_account(account_repo)

        await saved_game_repo.save_for_account(account.id, {"turn": 1})
        await saved_game_repo.save_for_account(account.id, {"turn": 2})

        assert await saved_game_repo.count(account_id=account.id) == 1
        assert (await saved_game_repo.get_by_account_id(account.id)).data == {"turn": 2}

    @pytest.mark.asyncio
    async def test_delete_for_account(self, account_repo, saved_game_repo):
        account = await create_account(account_repo)
        await saved_game_repo.save_for_account(account.id, {"turn": 1})

        assert await saved_game_repo.delete_for_account(account.id)
        assert not await saved_game_repo.delete_for_account(account.id)
        assert not await saved_game_repo.has_saved_game(account.id)

    @pytest.mark.asyncio
    async def test_saves_are_per_account(self, account_repo, saved_game_repo):
        first = await create_account(account_repo, "first")
        second = await create_account(account_repo, "second")
        await saved_game_repo.save_for_account(first.id, {"owner": "first"})

        assert await saved_game_repo.has_saved_game(first.id)
        assert not await saved_game_repo.has_saved_game(second.id)

    @pytest.mark.asyncio
    async def test_deleting_account_cascades(self, account_repo, saved_game_repo):
        account = await create_account(account_repo)
        await saved_game_repo.save_for_account(account.id, {"turn": 1})

        await account_repo.delete(account.id)

        assert not await saved_game_repo.has_saved_game(account.id)

# -*- coding: utf-8 -*-
"""공용 테스트 픽스처"""

import pytest

from src.rogue_engine.core.event_bus import EventBus
from src.rogue_engine.core.game_engine import GameEngine
from src.rogue_engine.database import DatabaseManager
from src.rogue_engine.game import spawner
from src.rogue_engine.game.components import ALL_COMPONENTS
from src.rogue_engine.game.managers import AccountManager
from src.rogue_engine.game.map import Map
from src.rogue_engine.game.models import Account
from src.rogue_engine.game.rect import Rect
from src.rogue_engine.game.repositories import AccountRepository, SavedGameRepository
from src.rogue_engine.game.types import Point, RunState
from src.rogue_engine.game.world import World


def make_open_world(width: int = 20, height: int = 12, player_at=(5, 5), seed: int = 1) -> World:
    """테두리만 벽인 작은 맵과 플레이어 하나가 있는 World"""
    world = World(seed=seed)
    for component_type in ALL_COMPONENTS:
        world.register(component_type)

    game_map = Map(width, height)
    room = Rect(0, 0, width - 2, height - 2)
    game_map.apply_room_to_map(room)
    game_map.rooms.append(room)
    game_map.populate_blocked()
    world.map = game_map

    x, y = player_at
    world.player_entity = spawner.player(world, x, y)
    world.player_pos = Point(x, y)
    world.run_state = RunState.AWAITING_INPUT
    return world


@pytest.fixture
def open_world() -> World:
    return make_open_world()


@pytest.fixture
def world_factory():
    return make_open_world


# === 데이터베이스 / 엔진 ===

@pytest.fixture
async def db_manager():
    """메모리 데이터베이스 픽스처"""
    manager = DatabaseManager(":memory:")
    await manager.initialize()
    try:
        yield manager
    finally:
        await manager.close()


@pytest.fixture
def account_repo(db_manager) -> AccountRepository:
    return AccountRepository(db_manager)


@pytest.fixture
def saved_game_repo(db_manager) -> SavedGameRepository:
    return SavedGameRepository(db_manager)


@pytest.fixture
def account_manager(account_repo) -> AccountManager:
    return AccountManager(account_repo)


@pytest.fixture
async def account(account_repo) -> Account:
    created = Account(username="hero", password_hash="hash")
    return await account_repo.create(created.to_dict_with_password())


@pytest.fixture
async def game_engine(saved_game_repo):
    """시드 고정 게임 엔진 (전용 이벤트 버스 사용)"""
    event_bus = EventBus()
    engine = GameEngine(saved_game_repo, event_bus=event_bus, seed=1234)
    await engine.start()
    try:
        yield engine
    finally:
        await engine.stop()
        await event_bus.stop()

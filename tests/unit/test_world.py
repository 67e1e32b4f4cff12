# -*- coding: utf-8 -*-
"""엔티티/컴포넌트 저장소 테스트"""

import pytest

from src.rogue_engine.game.components import CombatStats, Name, Position
from src.rogue_engine.game.world import World
from src.rogue_engine.utils.exceptions import WorldError


@pytest.fixture
def world():
    return World(seed=1)


class TestEntities:

    def test_builder_attaches_components(self, world):
        entity = world.create_entity().with_(Position(1, 2)).with_(Name("Orc")).build()

        assert world.is_alive(entity)
        assert world.get(entity, Position) == Position(1, 2)
        assert world.get(entity, Name).name == "Orc"
        assert world.has(entity, Position)
        assert not world.has(entity, CombatStats)

    def test_ids_are_never_reused(self, world):
        first = world.create_entity().build()
        world.delete_entity(first)
        second = world.create_entity().build()
        assert second != first
        assert second > first

    def test_delete_removes_all_components(self, world):
        entity = world.create_entity().with_(Position(1, 1)).with_(Name("x")).build()
        world.delete_entity(entity)

        assert not world.is_alive(entity)
        assert world.get(entity, Position) is None
        assert world.components_of(entity) == {}

    def test_insert_on_dead_entity_raises(self, world):
        entity = world.create_entity().build()
        world.delete_entity(entity)
        with pytest.raises(WorldError):
            world.insert(entity, Position(0, 0))

    def test_lazy_delete_waits_for_maintain(self, world):
        entity = world.create_entity().with_(Position(0, 0)).build()
        world.lazy_delete(entity)
        assert world.is_alive(entity)

        world.maintain()
        assert not world.is_alive(entity)

    def test_restore_entity_keeps_id_and_moves_counter(self, world):
        world.restore_entity(10).with_(Name("restored")).build()
        assert world.get(10, Name).name == "restored"
        assert world.create_entity().build() == 11

        with pytest.raises(WorldError):
            world.restore_entity(10)

    def test_advance_entity_counter_never_goes_back(self, world):
        world.advance_entity_counter(50)
        assert world.next_entity_id == 50
        world.advance_entity_counter(5)
        assert world.next_entity_id == 50


class TestJoin:

    def test_join_yields_only_matching_entities_in_id_order(self, world):
        b = world.create_entity().with_(Position(2, 2)).with_(Name("b")).build()
        world.create_entity().with_(Position(3, 3)).build()
        a = world.create_entity().with_(Position(1, 1)).with_(Name("a")).build()

        rows = list(world.join(Position, Name))
        assert [row[0] for row in rows] == sorted([a, b])
        assert rows[0][2].name == "b"

    def test_join_without_types(self, world):
        world.create_entity().with_(Position(0, 0)).build()
        assert list(world.join()) == []

    def test_remove_and_clear_storage(self, world):
        entity = world.create_entity().with_(Position(0, 0)).build()
        removed = world.remove(entity, Position)
        assert removed == Position(0, 0)
        assert world.remove(entity, Position) is None

        world.insert(entity, Position(4, 4))
        world.clear_storage(Position)
        assert list(world.join(Position)) == []


def test_log_uses_world_locale():
    world = World(locale="ko")
    world.log("log.player_dead")
    assert world.game_log.recent(1) == ["당신은 죽었습니다"]

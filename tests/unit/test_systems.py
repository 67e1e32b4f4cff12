# -*- coding: utf-8 -*-
"""게임 시스템 테스트"""

from src.rogue_engine.game import spawner
from src.rogue_engine.game.components import (
    CombatStats, InBackpack, Position, SufferDamage, Viewshed, WantsToDrinkPotion,
    WantsToDropItem, WantsToMelee, WantsToPickupItem,
)
from src.rogue_engine.game.systems import (
    SYSTEM_ORDER, DamageSystem, ItemCollectionSystem, ItemDropSystem, MapIndexingSystem,
    MeleeCombatSystem, MonsterAI, PotionUseSystem, VisibilitySystem, delete_the_dead,
)
from src.rogue_engine.game.types import Point, RunState


def test_system_order():
    assert SYSTEM_ORDER == (
        VisibilitySystem, MonsterAI, MapIndexingSystem, MeleeCombatSystem,
        DamageSystem, ItemCollectionSystem, PotionUseSystem, ItemDropSystem,
    )


class TestVisibility:

    def test_player_view_is_written_to_map(self, open_world):
        VisibilitySystem().run(open_world)

        game_map = open_world.map
        idx = game_map.xy_idx(5, 5)
        assert game_map.visible_tiles[idx]
        assert game_map.revealed_tiles[idx]

        viewshed = open_world.get(open_world.player_entity, Viewshed)
        assert not viewshed.dirty
        assert Point(5, 5) in viewshed.visible_tiles

    def test_revealed_tiles_stay_revealed(self, open_world):
        VisibilitySystem().run(open_world)
        far_idx = open_world.map.xy_idx(12, 5)
        assert open_world.map.revealed_tiles[far_idx]

        pos = open_world.get(open_world.player_entity, Position)
        pos.x = 1
        open_world.get(open_world.player_entity, Viewshed).dirty = True
        VisibilitySystem().run(open_world)

        assert open_world.map.revealed_tiles[far_idx]
        assert not open_world.map.visible_tiles[far_idx]

    def test_clean_viewshed_is_not_recomputed(self, open_world):
        viewshed = open_world.get(open_world.player_entity, Viewshed)
        viewshed.dirty = False
        VisibilitySystem().run(open_world)
        assert viewshed.visible_tiles == []


class TestMapIndexing:

    def test_blocking_entities_and_contents(self, open_world):
        orc = spawner.orc(open_world, 7, 5)
        potion = spawner.health_potion(open_world, 8, 5)

        MapIndexingSystem().run(open_world)

        game_map = open_world.map
        assert game_map.blocked[game_map.xy_idx(7, 5)]
        assert not game_map.blocked[game_map.xy_idx(8, 5)]
        assert game_map.blocked[game_map.xy_idx(0, 0)]
        assert game_map.tile_content[game_map.xy_idx(7, 5)] == [orc]
        assert game_map.tile_content[game_map.xy_idx(8, 5)] == [potion]
        assert open_world.player_entity in game_map.tile_content[game_map.xy_idx(5, 5)]


class TestMeleeAndDamage:

    def test_damage_is_power_minus_defense(self, open_world):
        orc = spawner.orc(open_world, 6, 5)
        open_world.insert(open_world.player_entity, WantsToMelee(target=orc))

        MeleeCombatSystem().run(open_world)

        assert open_world.get(orc, SufferDamage).amount == [4]
        assert open_world.game_log.recent(1) == ["Player hits Orc, for 4 hp."]
        assert list(open_world.join(WantsToMelee)) == []

    def test_zero_damage_logs_unable_to_hurt(self, open_world):
        orc = spawner.orc(open_world, 6, 5)
        open_world.get(orc, CombatStats).defense = 10
        open_world.insert(open_world.player_entity, WantsToMelee(target=orc))

        MeleeCombatSystem().run(open_world)

        assert open_world.get(orc, SufferDamage) is None
        assert open_world.game_log.recent(1) == ["Player is unable to hurt Orc"]

    def test_dead_attacker_does_nothing(self, open_world):
        orc = spawner.orc(open_world, 6, 5)
        open_world.get(orc, CombatStats).hp = 0
        open_world.insert(orc, WantsToMelee(target=open_world.player_entity))

        MeleeCombatSystem().run(open_world)

        assert open_world.get(open_world.player_entity, SufferDamage) is None

    def test_damage_accumulates_and_applies(self, open_world):
        orc = spawner.orc(open_world, 6, 5)
        SufferDamage.new_damage(open_world, orc, 3)
        SufferDamage.new_damage(open_world, orc, 5)

        DamageSystem().run(open_world)

        assert open_world.get(orc, CombatStats).hp == 8
        assert open_world.get(orc, SufferDamage) is None

    def test_dead_monster_is_removed(self, open_world):
        goblin = spawner.goblin(open_world, 6, 5)
        open_world.get(goblin, CombatStats).hp = 0

        delete_the_dead(open_world)

        assert not open_world.is_alive(goblin)
        assert open_world.game_log.recent(1) == ["Goblin is dead"]

    def test_dead_player_ends_game(self, open_world):
        open_world.get(open_world.player_entity, CombatStats).hp = -2

        delete_the_dead(open_world)
        delete_the_dead(open_world)

        assert open_world.run_state == RunState.GAME_OVER
        assert open_world.is_alive(open_world.player_entity)
        assert open_world.game_log.entries.count("You are dead") == 1


class TestMonsterAI:

    def _prepare(self, world):
        VisibilitySystem().run(world)
        MapIndexingSystem().run(world)

    def test_only_acts_on_monster_turn(self, open_world):
        orc = spawner.orc(open_world, 6, 5)
        self._prepare(open_world)

        open_world.run_state = RunState.PLAYER_TURN
        MonsterAI().run(open_world)
        assert open_world.get(orc, WantsToMelee) is None

    def test_adjacent_monster_attacks(self, open_world):
        orc = spawner.orc(open_world, 6, 6)
        self._prepare(open_world)

        open_world.run_state = RunState.MONSTER_TURN
        MonsterAI().run(open_world)

        assert open_world.get(orc, WantsToMelee).target == open_world.player_entity
        assert open_world.get(orc, Position) == Position(6, 6)

    def test_monster_steps_toward_visible_player(self, open_world):
        orc = spawner.orc(open_world, 9, 5)
        self._prepare(open_world)

        open_world.run_state = RunState.MONSTER_TURN
        MonsterAI().run(open_world)

        assert open_world.get(orc, Position) == Position(8, 5)
        assert open_world.get(orc, Viewshed).dirty
        assert open_world.map.blocked[open_world.map.xy_idx(8, 5)]
        assert not open_world.map.blocked[open_world.map.xy_idx(9, 5)]

    def test_monster_ignores_unseen_player(self, open_world):
        orc = spawner.orc(open_world, 9, 5)
        self._prepare(open_world)
        open_world.get(orc, Viewshed).visible_tiles = []

        open_world.run_state = RunState.MONSTER_TURN
        MonsterAI().run(open_world)

        assert open_world.get(orc, Position) == Position(9, 5)


class TestInventory:

    def test_pick_up_moves_item_to_backpack(self, open_world):
        potion = spawner.health_potion(open_world, 5, 5)
        player = open_world.player_entity
        open_world.insert(player, WantsToPickupItem(collected_by=player, item=potion))

        ItemCollectionSystem().run(open_world)

        assert open_world.get(potion, Position) is None
        assert open_world.get(potion, InBackpack).owner == player
        assert open_world.game_log.recent(1) == ["You pick up the Health Potion."]
        assert list(open_world.join(WantsToPickupItem)) == []

    def test_drinking_heals_up_to_max(self, open_world):
        player = open_world.player_entity
        potion = spawner.health_potion(open_world, 5, 5)
        open_world.remove(potion, Position)
        open_world.insert(potion, InBackpack(owner=player))
        open_world.get(player, CombatStats).hp = 25

        open_world.insert(player, WantsToDrinkPotion(potion=potion))
        PotionUseSystem().run(open_world)
        open_world.maintain()

        assert open_world.get(player, CombatStats).hp == 30
        assert not open_world.is_alive(potion)
        assert open_world.game_log.recent(1) == ["You drink the Health Potion, healing 8 hp."]

    def test_drop_places_item_under_dropper(self, open_world):
        player = open_world.player_entity
        potion = spawner.health_potion(open_world, 1, 1)
        open_world.remove(potion, Position)
        open_world.insert(potion, InBackpack(owner=player))

        open_world.insert(player, WantsToDropItem(item=potion))
        ItemDropSystem().run(open_world)

        assert open_world.get(potion, Position) == Position(5, 5)
        assert open_world.get(potion, InBackpack) is None
        assert open_world.game_log.recent(1) == ["You drop the Health Potion."]

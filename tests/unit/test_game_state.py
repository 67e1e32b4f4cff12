# -*- coding: utf-8 -*-
"""게임 상태 머신 테스트"""

from src.rogue_engine.game import spawner
from src.rogue_engine.game.components import CombatStats, InBackpack, Monster, Position
from src.rogue_engine.game.console import Console, VirtualKeyCode as K
from src.rogue_engine.game.gui import PANEL_Y
from src.rogue_engine.game.state import GameState
from src.rogue_engine.game.types import RunState


def give_potion(world):
    potion = spawner.health_potion(world, 1, 1)
    world.remove(potion, Position)
    world.insert(potion, InBackpack(owner=world.player_entity))
    return potion


class TestNewGame:

    def test_player_starts_in_first_room(self):
        state = GameState.new_game(seed=42)
        world = state.world

        pos = world.get(world.player_entity, Position)
        assert (pos.x, pos.y) == world.map.first_room_center()
        assert state.run_state == RunState.PRE_RUN
        assert world.game_log.recent(1) == ["Welcome to Rusty Roguelike"]

    def test_first_room_has_no_monsters(self):
        world = GameState.new_game(seed=3).world
        first = world.map.rooms[0]
        for _entity, _monster, pos in world.join(Monster, Position):
            assert not (first.x1 < pos.x <= first.x2 and first.y1 < pos.y <= first.y2)

    def test_same_seed_same_dungeon(self):
        a = GameState.new_game(seed=9).world
        b = GameState.new_game(seed=9).world
        assert a.map.tiles == b.map.tiles
        assert [p for _e, p in a.join(Position)] == [p for _e, p in b.join(Position)]

    def test_first_advance_draws_the_player(self):
        state = GameState.new_game(seed=42)
        console = Console()

        assert state.advance(console) == RunState.AWAITING_INPUT

        pos = state.world.get(state.world.player_entity, Position)
        assert console.get(pos.x, pos.y).glyph == "@"
        assert "HP: 30 / 30" in console.to_text().split("\n")[PANEL_Y]


class TestTurns:

    def test_move_runs_player_and_monster_turns(self, open_world):
        state = GameState(open_world)
        console = Console()

        assert state.advance(console, K.RIGHT) == RunState.AWAITING_INPUT
        assert open_world.get(open_world.player_entity, Position) == Position(6, 5)
        assert console.get(6, 5).glyph == "@"

    def test_unknown_key_keeps_waiting(self, open_world):
        state = GameState(open_world)
        assert state.advance(Console(), K.Z) == RunState.AWAITING_INPUT
        assert open_world.get(open_world.player_entity, Position) == Position(5, 5)

    def test_escape_requests_save(self, open_world):
        state = GameState(open_world)
        assert state.advance(Console(), K.ESCAPE) == RunState.SAVE_GAME

    def test_monster_kills_player(self, open_world):
        orc = spawner.orc(open_world, 5, 6)
        open_world.get(orc, CombatStats).power = 100
        open_world.run_state = RunState.PRE_RUN
        state = GameState(open_world)
        state.advance(Console())

        final = state.advance(Console(), K.S)

        assert final == RunState.GAME_OVER
        assert "You are dead" in open_world.game_log.entries
        # 게임 오버 상태에서는 더 이상 입력을 받지 않음
        assert state.advance(Console(), K.D) == RunState.GAME_OVER


class TestItemMenus:

    def test_drink_from_inventory(self, open_world):
        potion = give_potion(open_world)
        open_world.get(open_world.player_entity, CombatStats).hp = 10
        state = GameState(open_world)
        console = Console()

        assert state.advance(console, K.I) == RunState.SHOW_INVENTORY
        assert "Inventory" in console.to_text()

        assert state.advance(console, K.A) == RunState.AWAITING_INPUT
        assert open_world.get(open_world.player_entity, CombatStats).hp == 18
        assert not open_world.is_alive(potion)

    def test_cancel_inventory(self, open_world):
        give_potion(open_world)
        state = GameState(open_world)

        state.advance(Console(), K.I)
        assert state.advance(Console(), K.ESCAPE) == RunState.AWAITING_INPUT

    def test_invalid_letter_keeps_menu_open(self, open_world):
        give_potion(open_world)
        state = GameState(open_world)

        state.advance(Console(), K.N)
        assert state.advance(Console(), K.F) == RunState.SHOW_DROP_ITEM

    def test_drop_item(self, open_world):
        potion = give_potion(open_world)
        state = GameState(open_world)

        state.advance(Console(), K.N)
        assert state.advance(Console(), K.A) == RunState.AWAITING_INPUT

        assert open_world.get(potion, Position) == Position(5, 5)
        assert open_world.get(potion, InBackpack) is None

    def test_pick_up_then_drink(self, open_world):
        potion = spawner.health_potion(open_world, 6, 5)
        state = GameState(open_world)

        state.advance(Console(), K.RIGHT)
        state.advance(Console(), K.G)
        assert open_world.get(potion, InBackpack).owner == open_world.player_entity
        assert "You pick up the Health Potion." in open_world.game_log.entries

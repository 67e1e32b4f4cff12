# -*- coding: utf-8 -*-
"""엔티티 생성 및 화면 UI 테스트"""

from src.rogue_engine.game import spawner
from src.rogue_engine.game.components import (
    BlocksTile, CombatStats, InBackpack, Item, Monster, Name, Position, Potion, Renderable,
)
from src.rogue_engine.game.console import Console, VirtualKeyCode
from src.rogue_engine.game.gui import PANEL_Y, draw_ui, drop_item_menu, show_inventory
from src.rogue_engine.game.rect import Rect
from src.rogue_engine.game.types import ItemMenuResult


class TestSpawner:

    def test_player_stats(self, open_world):
        player = open_world.player_entity
        assert open_world.get(player, CombatStats) == CombatStats(max_hp=30, hp=30, defense=2, power=5)
        assert open_world.get(player, Renderable).glyph == "@"
        assert open_world.get(player, Name).name == "Player"

    def test_monsters_block_and_fight(self, open_world):
        orc = spawner.orc(open_world, 3, 3)
        goblin = spawner.goblin(open_world, 4, 4)

        for monster, glyph in ((orc, "o"), (goblin, "g")):
            assert open_world.get(monster, Renderable).glyph == glyph
            assert open_world.has(monster, Monster)
            assert open_world.has(monster, BlocksTile)
            assert open_world.get(monster, CombatStats) == CombatStats(max_hp=16, hp=16, defense=1, power=4)

    def test_health_potion(self, open_world):
        potion = spawner.health_potion(open_world, 2, 2)
        assert open_world.has(potion, Item)
        assert open_world.get(potion, Potion).heal_amount == 8
        assert not open_world.has(potion, BlocksTile)

    def test_localized_names(self, world_factory):
        world = world_factory()
        world.locale = "ko"
        orc = spawner.orc(world, 3, 3)
        assert world.get(orc, Name).name == "오크"

    def test_spawn_room_stays_inside_room(self, world_factory):
        world = world_factory(width=40, height=30)
        rooms = [Rect.new(2, 2, 8, 8), Rect.new(20, 10, 9, 7)]

        for _ in range(20):
            for room in rooms:
                spawner.spawn_room(world, room)

        spawned = [
            (entity, pos) for entity, pos in world.join(Position)
            if entity != world.player_entity
        ]
        assert spawned
        for _entity, pos in spawned:
            assert any(
                room.x1 < pos.x <= room.x2 and room.y1 < pos.y <= room.y2
                for room in rooms
            )

    def test_spawn_room_limits(self, world_factory):
        world = world_factory(width=40, height=30)
        room = Rect.new(2, 2, 8, 8)

        for _ in range(30):
            before_monsters = len(list(world.join(Monster)))
            before_items = len(list(world.join(Item)))
            spawner.spawn_room(world, room)
            assert len(list(world.join(Monster))) - before_monsters <= spawner.MAX_MONSTERS - 1
            assert len(list(world.join(Item))) - before_items <= spawner.MAX_ITEMS - 1


class TestUserInterface:

    def test_draw_ui_shows_health_and_log(self, open_world):
        console = Console()
        open_world.log("log.welcome")
        open_world.log("log.nothing_to_pick_up")

        draw_ui(open_world, console)

        lines = console.to_text().split("\n")
        assert " HP: 30 / 30 " in lines[PANEL_Y]
        assert "There is nothing here to pick up." in lines[PANEL_Y + 1]
        assert "Welcome to Rusty Roguelike" in lines[PANEL_Y + 2]

    def _give_potions(self, world, count):
        potions = []
        for _ in range(count):
            potion = spawner.health_potion(world, 1, 1)
            world.remove(potion, Position)
            world.insert(potion, InBackpack(owner=world.player_entity))
            potions.append(potion)
        return potions

    def test_inventory_lists_items(self, open_world):
        self._give_potions(open_world, 2)
        console = Console()

        result, entity = show_inventory(open_world, console, None)

        assert result == ItemMenuResult.NO_RESPONSE
        assert entity is None
        text = console.to_text()
        assert "Inventory" in text
        assert "(a) Health Potion" in text
        assert "(b) Health Potion" in text
        assert "ESCAPE to cancel" in text

    def test_inventory_selection(self, open_world):
        potions = self._give_potions(open_world, 2)

        assert show_inventory(open_world, Console(), VirtualKeyCode.B) == (ItemMenuResult.SELECTED, potions[1])
        assert show_inventory(open_world, Console(), VirtualKeyCode.ESCAPE) == (ItemMenuResult.CANCEL, None)
        assert show_inventory(open_world, Console(), VirtualKeyCode.C) == (ItemMenuResult.NO_RESPONSE, None)

    def test_other_owner_items_are_hidden(self, open_world):
        orc = spawner.orc(open_world, 3, 3)
        potion = spawner.health_potion(open_world, 3, 3)
        open_world.remove(potion, Position)
        open_world.insert(potion, InBackpack(owner=orc))

        result, _ = drop_item_menu(open_world, Console(), VirtualKeyCode.A)
        assert result == ItemMenuResult.NO_RESPONSE

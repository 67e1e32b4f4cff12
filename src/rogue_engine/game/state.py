# -*- coding: utf-8 -*-
"""게임 상태 머신과 한 틱 처리"""

import logging
from typing import Optional

from .components import ALL_COMPONENTS, Position, Renderable, WantsToDrinkPotion, WantsToDropItem
from .console import Console, VirtualKeyCode
from .gui import draw_ui, drop_item_menu, show_inventory
from .map import Map, draw_map
from .player import player_input
from .systems import SYSTEM_ORDER, delete_the_dead
from .types import SETTLED_STATES, ItemMenuResult, Point, RunState
from .world import World
from . import spawner

logger = logging.getLogger(__name__)

# 입력 없이 연속으로 돌 수 있는 최대 틱 수
MAX_SETTLE_TICKS = 16


class GameState:
    """World 하나를 감싸고 틱 단위로 진행시키는 클래스"""

    def __init__(self, world: World):
        self.world = world
        self._systems = [system_class() for system_class in SYSTEM_ORDER]

    @classmethod
    def new_game(cls, seed: Optional[int] = None, locale: str = "en") -> 'GameState':
        """새 던전을 만들고 플레이어와 몬스터/아이템 배치"""
        world = World(seed=seed, locale=locale)
        for component_type in ALL_COMPONENTS:
            world.register(component_type)

        world.map = Map.new_map_rooms_and_corridors(world.rng)
        player_x, player_y = world.map.first_room_center()

        world.player_entity = spawner.player(world, player_x, player_y)
        for room in world.map.rooms[1:]:
            spawner.spawn_room(world, room)

        world.run_state = RunState.PRE_RUN
        world.player_pos = Point(player_x, player_y)
        world.log("log.welcome")

        logger.info(f"새 게임 생성: 방 {len(world.map.rooms)}개, 엔티티 {len(world.entities())}개")
        return cls(world)

    @property
    def run_state(self) -> RunState:
        return self.world.run_state

    def run_systems(self) -> None:
        for system in self._systems:
            system.run(self.world)
        self.world.maintain()

    def tick(self, console: Console, key: Optional[VirtualKeyCode] = None) -> RunState:
        """한 틱 진행: 상태 전이, 사망 정리, 화면 그리기"""
        world = self.world
        console.cls()
        new_run_state = world.run_state

        draw_map(world.map, console)
        self._draw_entities(console)
        draw_ui(world, console)

        if new_run_state == RunState.PRE_RUN:
            self.run_systems()
            new_run_state = RunState.AWAITING_INPUT
        elif new_run_state == RunState.AWAITING_INPUT:
            new_run_state = player_input(world, key)
        elif new_run_state == RunState.PLAYER_TURN:
            self.run_systems()
            new_run_state = RunState.MONSTER_TURN
        elif new_run_state == RunState.MONSTER_TURN:
            self.run_systems()
            new_run_state = RunState.AWAITING_INPUT
        elif new_run_state == RunState.SHOW_INVENTORY:
            result, item_entity = show_inventory(world, console, key)
            if result == ItemMenuResult.CANCEL:
                new_run_state = RunState.AWAITING_INPUT
            elif result == ItemMenuResult.SELECTED:
                world.insert(world.player_entity, WantsToDrinkPotion(potion=item_entity))
                new_run_state = RunState.PLAYER_TURN
        elif new_run_state == RunState.SHOW_DROP_ITEM:
            result, item_entity = drop_item_menu(world, console, key)
            if result == ItemMenuResult.CANCEL:
                new_run_state = RunState.AWAITING_INPUT
            elif result == ItemMenuResult.SELECTED:
                world.insert(world.player_entity, WantsToDropItem(item=item_entity))
                new_run_state = RunState.PLAYER_TURN

        world.run_state = new_run_state
        delete_the_dead(world)
        return world.run_state

    def advance(self, console: Console, key: Optional[VirtualKeyCode] = None) -> RunState:
        """키 하나를 처리하고 다시 입력이 필요할 때까지 진행한 뒤 최종 화면을 그림"""
        state = self.tick(console, key)

        ticks = 0
        while state not in SETTLED_STATES and ticks < MAX_SETTLE_TICKS:
            state = self.tick(console, None)
            ticks += 1

        if ticks >= MAX_SETTLE_TICKS:
            logger.warning(f"틱이 안정되지 않음: {state.value}")

        # 안정된 상태의 화면 (키 없이 한 번 더 그림)
        return self.tick(console, None)

    def _draw_entities(self, console: Console) -> None:
        world = self.world
        game_map = world.map

        data = list(world.join(Position, Renderable))
        data.sort(key=lambda item: item[2].render_order, reverse=True)
        for _entity, pos, render in data:
            idx = game_map.xy_idx(pos.x, pos.y)
            if game_map.visible_tiles[idx]:
                console.set(pos.x, pos.y, render.fg, render.bg, render.glyph)

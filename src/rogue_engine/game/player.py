# -*- coding: utf-8 -*-
"""플레이어 입력 처리"""

import logging
from typing import Dict, Optional, Tuple

from .components import (
    CombatStats, Item, Player, Position, Viewshed, WantsToMelee, WantsToPickupItem,
)
from .console import VirtualKeyCode
from .types import Point, RunState
from .world import World

logger = logging.getLogger(__name__)

K = VirtualKeyCode

# 키 -> 이동량
MOVEMENT_KEYS: Dict[VirtualKeyCode, Tuple[int, int]] = {
    # 상하좌우
    K.LEFT: (-1, 0), K.NUMPAD4: (-1, 0), K.A: (-1, 0),
    K.RIGHT: (1, 0), K.NUMPAD6: (1, 0), K.D: (1, 0),
    K.UP: (0, -1), K.NUMPAD8: (0, -1), K.W: (0, -1),
    K.DOWN: (0, 1), K.NUMPAD2: (0, 1), K.S: (0, 1),

    # 대각선
    K.NUMPAD9: (1, -1), K.E: (1, -1),
    K.NUMPAD7: (-1, -1), K.Q: (-1, -1),
    K.NUMPAD3: (1, 1), K.C: (1, 1),
    K.NUMPAD1: (-1, 1), K.Y: (-1, 1),
}


def try_move_player(delta_x: int, delta_y: int, world: World) -> None:
    """이동 시도. 대상 칸에 전투 가능한 엔티티가 있으면 공격 의도를 남김"""
    game_map = world.map

    for entity, _player, pos, viewshed in world.join(Player, Position, Viewshed):
        dest_x = pos.x + delta_x
        dest_y = pos.y + delta_y
        if dest_x < 1 or dest_x > game_map.width - 1 or dest_y < 1 or dest_y > game_map.height - 1:
            return

        destination_idx = game_map.xy_idx(dest_x, dest_y)

        for potential_target in game_map.tile_content[destination_idx]:
            if world.has(potential_target, CombatStats):
                world.insert(entity, WantsToMelee(target=potential_target))
                return

        if not game_map.blocked[destination_idx]:
            pos.x = min(game_map.width - 1, max(0, dest_x))
            pos.y = min(game_map.height - 1, max(0, dest_y))
            world.player_pos = Point(pos.x, pos.y)
            viewshed.dirty = True


def get_item(world: World) -> None:
    """플레이어 발밑의 아이템 줍기 의도 등록"""
    player_pos = world.player_pos

    target_item: Optional[int] = None
    for item_entity, _item, position in world.join(Item, Position):
        if position.x == player_pos.x and position.y == player_pos.y:
            target_item = item_entity

    if target_item is None:
        world.log("log.nothing_to_pick_up")
        return

    world.insert(world.player_entity, WantsToPickupItem(collected_by=world.player_entity, item=target_item))


def player_input(world: World, key: Optional[VirtualKeyCode]) -> RunState:
    """키 입력을 해석해 다음 상태 반환"""
    if key is None:
        return RunState.AWAITING_INPUT

    if key in MOVEMENT_KEYS:
        delta_x, delta_y = MOVEMENT_KEYS[key]
        try_move_player(delta_x, delta_y, world)
    elif key == K.G:
        get_item(world)
    elif key == K.I:
        return RunState.SHOW_INVENTORY
    elif key == K.N:
        return RunState.SHOW_DROP_ITEM
    elif key == K.ESCAPE:
        return RunState.SAVE_GAME
    else:
        return RunState.AWAITING_INPUT

    return RunState.PLAYER_TURN

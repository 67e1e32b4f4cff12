# -*- coding: utf-8 -*-
"""플레이어, 몬스터, 아이템 생성"""

import logging
from typing import List

from ..core.localization import get_message
from .components import (
    BlocksTile, CombatStats, Item, Monster, Name, Player, Position, Potion,
    Renderable, Viewshed,
)
from .console import BLACK, MAGENTA, RED, YELLOW
from .rect import Rect
from .world import World

logger = logging.getLogger(__name__)

MAX_MONSTERS = 4
MAX_ITEMS = 2


def player(world: World, x: int, y: int) -> int:
    """플레이어 엔티티 생성"""
    return (world.create_entity()
            .with_(Position(x, y))
            .with_(Renderable("@", YELLOW, BLACK, render_order=0))
            .with_(Player())
            .with_(Viewshed(range=8, dirty=True))
            .with_(Name(get_message("entity.player", world.locale)))
            .with_(CombatStats(max_hp=30, hp=30, defense=2, power=5))
            .build())


def random_monster(world: World, x: int, y: int) -> int:
    """1d2로 오크 또는 고블린 생성"""
    roll = world.rng.roll_dice(1, 2)
    if roll == 1:
        return orc(world, x, y)
    return goblin(world, x, y)


def orc(world: World, x: int, y: int) -> int:
    return monster(world, x, y, "o", get_message("entity.orc", world.locale))


def goblin(world: World, x: int, y: int) -> int:
    return monster(world, x, y, "g", get_message("entity.goblin", world.locale))


def monster(world: World, x: int, y: int, glyph: str, name: str) -> int:
    return (world.create_entity()
            .with_(Position(x, y))
            .with_(Renderable(glyph, RED, BLACK, render_order=1))
            .with_(Viewshed(range=8, dirty=True))
            .with_(Monster())
            .with_(Name(name))
            .with_(BlocksTile())
            .with_(CombatStats(max_hp=16, hp=16, defense=1, power=4))
            .build())


def health_potion(world: World, x: int, y: int) -> int:
    return (world.create_entity()
            .with_(Position(x, y))
            .with_(Renderable("¡", MAGENTA, BLACK, render_order=2))
            .with_(Name(get_message("entity.health_potion", world.locale)))
            .with_(Item())
            .with_(Potion(heal_amount=8))
            .build())


def _random_spawn_points(world: World, room: Rect, count: int) -> List[int]:
    """방 안에서 서로 겹치지 않는 타일 인덱스 count개 선택"""
    points: List[int] = []
    for _ in range(count):
        while True:
            x = room.x1 + world.rng.roll_dice(1, abs(room.x2 - room.x1))
            y = room.y1 + world.rng.roll_dice(1, abs(room.y2 - room.y1))
            idx = world.map.xy_idx(x, y)
            if idx not in points:
                points.append(idx)
                break
    return points


def spawn_room(world: World, room: Rect) -> None:
    """방 하나에 몬스터와 아이템 배치"""
    num_monsters = world.rng.roll_dice(1, MAX_MONSTERS + 2) - 3
    num_items = world.rng.roll_dice(1, MAX_ITEMS + 2) - 3

    monster_points = _random_spawn_points(world, room, max(0, num_monsters))
    item_points = _random_spawn_points(world, room, max(0, num_items))

    for idx in monster_points:
        x, y = world.map.idx_xy(idx)
        random_monster(world, x, y)

    for idx in item_points:
        x, y = world.map.idx_xy(idx)
        health_potion(world, x, y)

    logger.debug(f"방 {room.center()} 스폰: 몬스터 {len(monster_points)}, 아이템 {len(item_points)}")

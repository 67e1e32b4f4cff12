# -*- coding: utf-8 -*-
"""상태 패널 및 아이템 메뉴 출력"""

from typing import List, Optional, Tuple

from ..core.localization import get_message
from .components import CombatStats, InBackpack, Name, Player
from .console import BLACK, RED, WHITE, YELLOW, Console, VirtualKeyCode, letter_to_option
from .types import ItemMenuResult
from .world import World

PANEL_Y = 43
LOG_LINES = 5


def draw_ui(world: World, console: Console) -> None:
    """하단 패널: 체력 막대와 최근 로그"""
    console.draw_box(0, PANEL_Y, 79, 6, WHITE, BLACK)

    for _entity, stats, _player in world.join(CombatStats, Player):
        health = get_message("ui.hp", world.locale, hp=stats.hp, max_hp=stats.max_hp)
        console.print_color(12, PANEL_Y, YELLOW, BLACK, health)
        console.draw_bar_horizontal(28, PANEL_Y, 51, stats.hp, stats.max_hp, RED, BLACK)

    y = PANEL_Y + 1
    for message in world.game_log.recent(LOG_LINES):
        console.print(2, y, message[:76])
        y += 1


def _backpack_items(world: World) -> List[Tuple[int, str]]:
    return [
        (entity, name.name)
        for entity, pack, name in world.join(InBackpack, Name)
        if pack.owner == world.player_entity
    ]


def _item_menu(world: World, console: Console, key: Optional[VirtualKeyCode],
               title: str) -> Tuple[ItemMenuResult, Optional[int]]:
    items = _backpack_items(world)
    count = len(items)

    y = 25 - (count // 2)
    console.draw_box(15, y - 2, 31, count + 3, WHITE, BLACK)
    console.print_color(18, y - 2, YELLOW, BLACK, title)
    console.print_color(18, y + count + 1, YELLOW, BLACK, get_message("ui.escape_to_cancel", world.locale))

    for j, (_entity, name) in enumerate(items):
        console.set(17, y, WHITE, BLACK, "(")
        console.set(18, y, YELLOW, BLACK, chr(ord("a") + j))
        console.set(19, y, WHITE, BLACK, ")")
        console.print(21, y, name)
        y += 1

    if key is None:
        return ItemMenuResult.NO_RESPONSE, None
    if key == VirtualKeyCode.ESCAPE:
        return ItemMenuResult.CANCEL, None

    selection = letter_to_option(key)
    if 0 <= selection < count:
        return ItemMenuResult.SELECTED, items[selection][0]
    return ItemMenuResult.NO_RESPONSE, None


def show_inventory(world: World, console: Console,
                   key: Optional[VirtualKeyCode]) -> Tuple[ItemMenuResult, Optional[int]]:
    """물약 사용 메뉴"""
    return _item_menu(world, console, key, get_message("ui.inventory", world.locale))


def drop_item_menu(world: World, console: Console,
                   key: Optional[VirtualKeyCode]) -> Tuple[ItemMenuResult, Optional[int]]:
    """아이템 버리기 메뉴"""
    return _item_menu(world, console, key, get_message("ui.drop_which", world.locale))

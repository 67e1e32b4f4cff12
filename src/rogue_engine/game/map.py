# -*- coding: utf-8 -*-
"""던전 맵: 방과 복도 생성, 이동 가능성, 화면 출력"""

import logging
import math
from enum import Enum
from typing import List, Optional, Tuple

from .console import Console, RGB, BLACK, GREEN, TEAL
from .rect import Rect
from .rng import RandomNumberGenerator

logger = logging.getLogger(__name__)

MAP_WIDTH = 80
MAP_HEIGHT = 43
MAP_COUNT = MAP_WIDTH * MAP_HEIGHT

# 방 생성 파라미터
MAX_ROOMS = 30
MIN_SIZE = 6
MAX_SIZE = 10

DIAGONAL_COST = 1.45


class TileType(Enum):
    """타일 종류"""
    WALL = "#"
    FLOOR = "."


class Map:
    """2차원 타일 맵 (1차원 리스트에 y * width + x 로 저장)"""

    def __init__(self, width: int = MAP_WIDTH, height: int = MAP_HEIGHT):
        self.width = width
        self.height = height
        count = width * height
        self.tiles: List[TileType] = [TileType.WALL] * count
        self.rooms: List[Rect] = []
        self.revealed_tiles: List[bool] = [False] * count
        self.visible_tiles: List[bool] = [False] * count
        self.blocked: List[bool] = [False] * count
        self.tile_content: List[List[int]] = [[] for _ in range(count)]

    def xy_idx(self, x: int, y: int) -> int:
        return y * self.width + x

    def idx_xy(self, idx: int) -> Tuple[int, int]:
        return idx % self.width, idx // self.width

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    # === 생성 ===

    def apply_room_to_map(self, room: Rect) -> None:
        for y in range(room.y1 + 1, room.y2 + 1):
            for x in range(room.x1 + 1, room.x2 + 1):
                self.tiles[self.xy_idx(x, y)] = TileType.FLOOR

    def apply_horizontal_tunnel(self, x1: int, x2: int, y: int) -> None:
        for x in range(min(x1, x2), max(x1, x2) + 1):
            idx = self.xy_idx(x, y)
            if 0 < idx < self.width * self.height:
                self.tiles[idx] = TileType.FLOOR

    def apply_vertical_tunnel(self, y1: int, y2: int, x: int) -> None:
        for y in range(min(y1, y2), max(y1, y2) + 1):
            idx = self.xy_idx(x, y)
            if 0 < idx < self.width * self.height:
                self.tiles[idx] = TileType.FLOOR

    @classmethod
    def new_map_rooms_and_corridors(cls, rng: RandomNumberGenerator,
                                    width: int = MAP_WIDTH,
                                    height: int = MAP_HEIGHT) -> 'Map':
        """겹치지 않는 방들을 배치하고 이전 방과 L자 복도로 연결한 맵 생성"""
        dungeon = cls(width, height)

        for _ in range(MAX_ROOMS):
            w = rng.range(MIN_SIZE, MAX_SIZE)
            h = rng.range(MIN_SIZE, MAX_SIZE)
            x = rng.roll_dice(1, width - w - 1) - 1
            y = rng.roll_dice(1, height - h - 1) - 1
            new_room = Rect.new(x, y, w, h)

            if any(new_room.intersect(other) for other in dungeon.rooms):
                continue

            dungeon.apply_room_to_map(new_room)

            if dungeon.rooms:
                new_x, new_y = new_room.center()
                prev_x, prev_y = dungeon.rooms[-1].center()
                if rng.range(0, 2) == 1:
                    dungeon.apply_horizontal_tunnel(prev_x, new_x, prev_y)
                    dungeon.apply_vertical_tunnel(prev_y, new_y, new_x)
                else:
                    dungeon.apply_vertical_tunnel(prev_y, new_y, prev_x)
                    dungeon.apply_horizontal_tunnel(prev_x, new_x, new_y)

            dungeon.rooms.append(new_room)

        logger.debug(f"맵 생성 완료: {width}x{height}, 방 {len(dungeon.rooms)}개")
        return dungeon

    # === 이동/시야 ===

    def is_opaque(self, idx: int) -> bool:
        return self.tiles[idx] == TileType.WALL

    def is_exit_valid(self, x: int, y: int) -> bool:
        if x < 1 or x > self.width - 1 or y < 1 or y > self.height - 1:
            return False
        return not self.blocked[self.xy_idx(x, y)]

    def get_available_exits(self, idx: int) -> List[Tuple[int, float]]:
        """이동 가능한 인접 타일과 이동 비용 목록"""
        exits: List[Tuple[int, float]] = []
        x, y = self.idx_xy(idx)
        w = self.width

        # 상하좌우
        if self.is_exit_valid(x - 1, y):
            exits.append((idx - 1, 1.0))
        if self.is_exit_valid(x + 1, y):
            exits.append((idx + 1, 1.0))
        if self.is_exit_valid(x, y - 1):
            exits.append((idx - w, 1.0))
        if self.is_exit_valid(x, y + 1):
            exits.append((idx + w, 1.0))

        # 대각선
        if self.is_exit_valid(x - 1, y - 1):
            exits.append(((idx - w) - 1, DIAGONAL_COST))
        if self.is_exit_valid(x + 1, y - 1):
            exits.append(((idx - w) + 1, DIAGONAL_COST))
        if self.is_exit_valid(x - 1, y + 1):
            exits.append(((idx + w) - 1, DIAGONAL_COST))
        if self.is_exit_valid(x + 1, y + 1):
            exits.append(((idx + w) + 1, DIAGONAL_COST))

        return exits

    def get_pathing_distance(self, idx1: int, idx2: int) -> float:
        x1, y1 = self.idx_xy(idx1)
        x2, y2 = self.idx_xy(idx2)
        return distance2d(x1, y1, x2, y2)

    def populate_blocked(self) -> None:
        self.blocked = [tile == TileType.WALL for tile in self.tiles]

    def clear_content_index(self) -> None:
        for content in self.tile_content:
            content.clear()

    def first_room_center(self) -> Optional[Tuple[int, int]]:
        return self.rooms[0].center() if self.rooms else None


def distance2d(x1: int, y1: int, x2: int, y2: int) -> float:
    """두 점 사이의 유클리드 거리"""
    return math.hypot(x1 - x2, y1 - y2)


def draw_map(game_map: Map, console: Console) -> None:
    """발견한 타일만 그림. 현재 보이지 않는 타일은 회색조"""
    for idx, tile in enumerate(game_map.tiles):
        if not game_map.revealed_tiles[idx]:
            continue

        x, y = game_map.idx_xy(idx)
        if tile == TileType.FLOOR:
            glyph = "."
            fg: RGB = TEAL
        else:
            glyph = "#"
            fg = GREEN

        if not game_map.visible_tiles[idx]:
            fg = fg.to_greyscale()
        console.set(x, y, fg, BLACK, glyph)

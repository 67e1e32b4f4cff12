# -*- coding: utf-8 -*-
"""시야(Field of View) 계산"""

from typing import Iterator, Set, Tuple

from .map import Map, distance2d
from .types import Point


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> Iterator[Tuple[int, int]]:
    """(x0, y0)에서 (x1, y1)까지의 격자 직선 (시작점 포함)"""
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    x, y = x0, y0
    while True:
        yield x, y
        if x == x1 and y == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy


def _square_perimeter(cx: int, cy: int, radius: int) -> Iterator[Tuple[int, int]]:
    for x in range(cx - radius, cx + radius + 1):
        yield x, cy - radius
        yield x, cy + radius
    for y in range(cy - radius + 1, cy + radius):
        yield cx - radius, y
        yield cx + radius, y


def field_of_view(origin: Point, radius: int, game_map: Map) -> Set[Point]:
    """origin에서 radius 이내에 보이는 좌표 집합

    시작점에서 반경 사각형 둘레의 모든 칸으로 직선을 쏘고, 반경을 넘거나
    맵 밖으로 나가거나 불투명 타일을 만나면 멈춥니다. 벽 자체는 보입니다.
    """
    visible: Set[Point] = set()
    if not game_map.in_bounds(origin.x, origin.y):
        return visible

    visible.add(origin)
    if radius <= 0:
        return visible

    for tx, ty in _square_perimeter(origin.x, origin.y, radius):
        for x, y in bresenham_line(origin.x, origin.y, tx, ty):
            if not game_map.in_bounds(x, y):
                break
            if distance2d(origin.x, origin.y, x, y) > radius:
                break
            visible.add(Point(x, y))
            if game_map.is_opaque(game_map.xy_idx(x, y)):
                break

    return visible

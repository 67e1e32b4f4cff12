# -*- coding: utf-8 -*-
"""A* 경로 탐색"""

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Dict, List

from .map import Map

MAX_ASTAR_STEPS = 65536


@dataclass
class NavigationPath:
    """경로 탐색 결과. steps[0]은 출발 지점"""
    destination: int
    success: bool = False
    steps: List[int] = field(default_factory=list)


def a_star_search(start: int, end: int, game_map: Map) -> NavigationPath:
    """start 인덱스에서 end 인덱스까지의 최단 경로 탐색

    출구 목록은 Map.get_available_exits, 휴리스틱은 유클리드 거리를 사용합니다.
    """
    path = NavigationPath(destination=end)
    if start == end:
        path.success = True
        path.steps = [start]
        return path

    counter = itertools.count()
    open_heap = [(game_map.get_pathing_distance(start, end), next(counter), start)]
    came_from: Dict[int, int] = {}
    g_score: Dict[int, float] = {start: 0.0}
    closed = set()
    expansions = 0

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current in closed:
            continue

        if current == end:
            steps = [current]
            while current in came_from:
                current = came_from[current]
                steps.append(current)
            steps.reverse()
            path.success = True
            path.steps = steps
            return path

        closed.add(current)
        expansions += 1
        if expansions > MAX_ASTAR_STEPS:
            break

        for neighbor, cost in game_map.get_available_exits(current):
            if neighbor in closed:
                continue
            tentative = g_score[current] + cost
            if tentative < g_score.get(neighbor, float("inf")):
                came_from[neighbor] = current
                g_score[neighbor] = tentative
                f_score = tentative + game_map.get_pathing_distance(neighbor, end)
                heapq.heappush(open_heap, (f_score, next(counter), neighbor))

    return path

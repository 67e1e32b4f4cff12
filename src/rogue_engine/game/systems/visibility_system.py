# -*- coding: utf-8 -*-
"""시야 갱신 시스템"""

from ..components import Player, Position, Viewshed
from ..fov import field_of_view
from ..types import Point
from ..world import World


class VisibilitySystem:
    """dirty 표시된 시야만 다시 계산하고, 플레이어 시야는 맵에 반영"""

    def run(self, world: World) -> None:
        game_map = world.map

        for entity, viewshed, pos in world.join(Viewshed, Position):
            if not viewshed.dirty:
                continue
            viewshed.dirty = False

            visible = field_of_view(Point(pos.x, pos.y), viewshed.range, game_map)
            viewshed.visible_tiles = [
                p for p in visible
                if 0 <= p.x < game_map.width and 0 <= p.y < game_map.height
            ]

            if world.has(entity, Player):
                game_map.visible_tiles = [False] * len(game_map.visible_tiles)
                for p in viewshed.visible_tiles:
                    idx = game_map.xy_idx(p.x, p.y)
                    game_map.revealed_tiles[idx] = True
                    game_map.visible_tiles[idx] = True

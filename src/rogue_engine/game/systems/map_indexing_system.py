# -*- coding: utf-8 -*-
"""맵 인덱스 (막힌 타일, 타일별 엔티티) 재구성 시스템"""

from ..components import BlocksTile, Position
from ..world import World


class MapIndexingSystem:

    def run(self, world: World) -> None:
        game_map = world.map
        game_map.populate_blocked()
        game_map.clear_content_index()

        for entity, pos in world.join(Position):
            idx = game_map.xy_idx(pos.x, pos.y)
            if world.has(entity, BlocksTile):
                game_map.blocked[idx] = True
            game_map.tile_content[idx].append(entity)

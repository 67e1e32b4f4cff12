# -*- coding: utf-8 -*-
"""몬스터 AI 시스템"""

import logging

from ..components import Monster, Position, Viewshed, WantsToMelee
from ..map import distance2d
from ..pathfinding import a_star_search
from ..types import RunState
from ..world import World

logger = logging.getLogger(__name__)


class MonsterAI:
    """몬스터 턴에만 동작. 인접하면 공격, 플레이어가 보이면 한 칸 추적"""

    def run(self, world: World) -> None:
        if world.run_state != RunState.MONSTER_TURN:
            return
        if world.player_entity is None:
            return

        game_map = world.map
        player_pos = world.player_pos

        for entity, viewshed, _monster, pos in world.join(Viewshed, Monster, Position):
            distance = distance2d(pos.x, pos.y, player_pos.x, player_pos.y)
            if distance < 1.5:
                world.insert(entity, WantsToMelee(target=world.player_entity))
                continue

            if player_pos not in viewshed.visible_tiles:
                continue

            path = a_star_search(
                game_map.xy_idx(pos.x, pos.y),
                game_map.xy_idx(player_pos.x, player_pos.y),
                game_map,
            )
            if path.success and len(path.steps) > 1:
                game_map.blocked[game_map.xy_idx(pos.x, pos.y)] = False
                pos.x, pos.y = game_map.idx_xy(path.steps[1])
                game_map.blocked[path.steps[1]] = True
                viewshed.dirty = True

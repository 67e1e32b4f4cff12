# -*- coding: utf-8 -*-
"""피해 적용 및 사망 처리"""

import logging

from ..components import CombatStats, Name, SufferDamage
from ..types import RunState
from ..world import World

logger = logging.getLogger(__name__)


class DamageSystem:

    def run(self, world: World) -> None:
        for _entity, stats, damage in world.join(CombatStats, SufferDamage):
            stats.hp -= sum(damage.amount)

        world.clear_storage(SufferDamage)


def delete_the_dead(world: World) -> None:
    """체력이 0 이하인 엔티티 정리. 플레이어가 죽으면 GAME_OVER"""
    dead = []
    for entity, stats in world.join(CombatStats):
        if stats.hp >= 1:
            continue

        if entity == world.player_entity:
            if world.run_state != RunState.GAME_OVER:
                world.log("log.player_dead")
                world.run_state = RunState.GAME_OVER
                logger.info("플레이어 사망")
        else:
            name = world.get(entity, Name)
            if name is not None:
                world.log("log.is_dead", name=name.name)
            dead.append(entity)

    for victim in dead:
        world.delete_entity(victim)

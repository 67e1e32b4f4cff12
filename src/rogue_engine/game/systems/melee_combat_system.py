# -*- coding: utf-8 -*-
"""근접 전투 시스템"""

import logging

from ..components import CombatStats, Name, SufferDamage, WantsToMelee
from ..world import World

logger = logging.getLogger(__name__)


class MeleeCombatSystem:
    """공격 의도(WantsToMelee)를 피해(SufferDamage)로 변환"""

    def run(self, world: World) -> None:
        for entity, wants_melee, name, stats in world.join(WantsToMelee, Name, CombatStats):
            if stats.hp <= 0:
                continue

            target_stats = world.get(wants_melee.target, CombatStats)
            if target_stats is None or target_stats.hp <= 0:
                continue

            target_name = world.get(wants_melee.target, Name)
            target_label = target_name.name if target_name else "?"

            damage = max(0, stats.power - target_stats.defense)
            if damage == 0:
                world.log("log.unable_to_hurt", attacker=name.name, target=target_label)
            else:
                world.log("log.hits", attacker=name.name, target=target_label, damage=damage)
                SufferDamage.new_damage(world, wants_melee.target, damage)

            logger.debug(f"근접 공격: {entity} -> {wants_melee.target}, 피해 {damage}")

        world.clear_storage(WantsToMelee)

# -*- coding: utf-8 -*-
"""아이템 줍기, 물약 마시기, 버리기 시스템"""

from ..components import (
    CombatStats, InBackpack, Name, Position, Potion, WantsToDrinkPotion,
    WantsToDropItem, WantsToPickupItem,
)
from ..world import World


def _item_name(world: World, item: int) -> str:
    name = world.get(item, Name)
    return name.name if name else "?"


class ItemCollectionSystem:

    def run(self, world: World) -> None:
        for pickup in list(world.storage(WantsToPickupItem).values()):
            world.remove(pickup.item, Position)
            world.insert(pickup.item, InBackpack(owner=pickup.collected_by))

            if pickup.collected_by == world.player_entity:
                world.log("log.pick_up", item=_item_name(world, pickup.item))

        world.clear_storage(WantsToPickupItem)


class PotionUseSystem:

    def run(self, world: World) -> None:
        for entity, drink, stats in world.join(WantsToDrinkPotion, CombatStats):
            potion = world.get(drink.potion, Potion)
            if potion is None:
                continue

            stats.hp = min(stats.max_hp, stats.hp + potion.heal_amount)
            if entity == world.player_entity:
                world.log("log.drink", item=_item_name(world, drink.potion), amount=potion.heal_amount)
            world.lazy_delete(drink.potion)

        world.clear_storage(WantsToDrinkPotion)


class ItemDropSystem:

    def run(self, world: World) -> None:
        for entity, to_drop in world.join(WantsToDropItem):
            dropper_pos = world.get(entity, Position)
            if dropper_pos is None:
                continue

            world.insert(to_drop.item, Position(dropper_pos.x, dropper_pos.y))
            world.remove(to_drop.item, InBackpack)

            if entity == world.player_entity:
                world.log("log.drop", item=_item_name(world, to_drop.item))

        world.clear_storage(WantsToDropItem)

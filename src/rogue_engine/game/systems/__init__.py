# -*- coding: utf-8 -*-
"""게임 시스템 모듈

매 시뮬레이션 단계마다 SYSTEM_ORDER 순서대로 실행됩니다.
"""

from .visibility_system import VisibilitySystem
from .monster_ai_system import MonsterAI
from .map_indexing_system import MapIndexingSystem
from .melee_combat_system import MeleeCombatSystem
from .damage_system import DamageSystem, delete_the_dead
from .inventory_system import ItemCollectionSystem, PotionUseSystem, ItemDropSystem

SYSTEM_ORDER = (
    VisibilitySystem,
    MonsterAI,
    MapIndexingSystem,
    MeleeCombatSystem,
    DamageSystem,
    ItemCollectionSystem,
    PotionUseSystem,
    ItemDropSystem,
)

__all__ = [
    "VisibilitySystem",
    "MonsterAI",
    "MapIndexingSystem",
    "MeleeCombatSystem",
    "DamageSystem",
    "delete_the_dead",
    "ItemCollectionSystem",
    "PotionUseSystem",
    "ItemDropSystem",
    "SYSTEM_ORDER",
]

# -*- coding: utf-8 -*-
"""엔티티 컴포넌트 정의

컴포넌트는 순수 데이터이며, 동작은 systems 패키지가 담당합니다.
엔티티 참조는 정수 엔티티 ID로 보관합니다.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from .console import RGB, BLACK, WHITE
from .types import Point


@dataclass
class Position:
    x: int = 0
    y: int = 0


@dataclass
class Renderable:
    glyph: str = "?"
    fg: RGB = WHITE
    bg: RGB = BLACK
    render_order: int = 0  # 낮을수록 위에 그려짐

    def to_dict(self) -> Dict[str, Any]:
        return {
            "glyph": self.glyph,
            "fg": self.fg.to_list(),
            "bg": self.bg.to_list(),
            "render_order": self.render_order,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Renderable':
        return cls(
            glyph=data["glyph"],
            fg=RGB.from_list(data["fg"]),
            bg=RGB.from_list(data["bg"]),
            render_order=data.get("render_order", 0),
        )


@dataclass
class Player:
    """플레이어 표식"""
    pass


@dataclass
class Viewshed:
    visible_tiles: List[Point] = field(default_factory=list)
    range: int = 8
    dirty: bool = True

    def to_dict(self) -> Dict[str, Any]:
        # 시야는 로드 후 다시 계산되므로 범위만 저장
        return {"range": self.range}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Viewshed':
        return cls(range=data.get("range", 8), dirty=True)


@dataclass
class Monster:
    """몬스터 표식"""
    pass


@dataclass
class Name:
    name: str = ""


@dataclass
class BlocksTile:
    """이동을 막는 엔티티 표식"""
    pass


@dataclass
class CombatStats:
    max_hp: int
    hp: int
    defense: int
    power: int


@dataclass
class WantsToMelee:
    target: int


@dataclass
class SufferDamage:
    amount: List[int] = field(default_factory=list)

    @staticmethod
    def new_damage(world: Any, victim: int, amount: int) -> None:
        """피해 누적. 이미 SufferDamage가 있으면 목록에 추가"""
        existing: Optional[SufferDamage] = world.get(victim, SufferDamage)
        if existing is not None:
            existing.amount.append(amount)
        else:
            world.insert(victim, SufferDamage([amount]))


@dataclass
class Item:
    """집을 수 있는 아이템 표식"""
    pass


@dataclass
class Potion:
    heal_amount: int


@dataclass
class InBackpack:
    owner: int


@dataclass
class WantsToPickupItem:
    collected_by: int
    item: int


@dataclass
class WantsToDrinkPotion:
    potion: int


@dataclass
class WantsToDropItem:
    item: int


# 저장 파일에 기록되는 컴포넌트 (의도 컴포넌트는 턴마다 비워지므로 제외)
PERSISTENT_COMPONENTS: Dict[str, Type] = {
    cls.__name__: cls
    for cls in (
        Position, Renderable, Player, Viewshed, Monster, Name,
        BlocksTile, CombatStats, Item, Potion, InBackpack,
    )
}

ALL_COMPONENTS: List[Type] = [
    Position, Renderable, Player, Viewshed, Monster, Name, BlocksTile,
    CombatStats, WantsToMelee, SufferDamage, Item, Potion, InBackpack,
    WantsToPickupItem, WantsToDrinkPotion, WantsToDropItem,
]

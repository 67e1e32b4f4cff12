# -*- coding: utf-8 -*-
"""방 생성에 쓰이는 사각형"""

from dataclasses import dataclass
from typing import Tuple


@dataclass
class Rect:
    """(x1, y1) ~ (x2, y2) 사각형. 내부 바닥은 x1+1..x2, y1+1..y2"""
    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def new(cls, x: int, y: int, w: int, h: int) -> 'Rect':
        return cls(x, y, x + w, y + h)

    def intersect(self, other: 'Rect') -> bool:
        """다른 사각형과 겹치면 True (경계 포함)"""
        return (self.x1 <= other.x2 and self.x2 >= other.x1
                and self.y1 <= other.y2 and self.y2 >= other.y1)

    def center(self) -> Tuple[int, int]:
        return (self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2

"""
게임 로직 모듈 (맵, 엔티티-컴포넌트 저장소, 시스템, 계정)
"""

from .console import Console, VirtualKeyCode
from .state import GameState
from .types import ItemMenuResult, Point, RunState
from .world import World

__all__ = [
    'Console',
    'VirtualKeyCode',
    'GameState',
    'ItemMenuResult',
    'Point',
    'RunState',
    'World',
]

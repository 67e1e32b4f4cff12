# -*- coding: utf-8 -*-
"""게임 전반에서 공유하는 기본 타입"""

from dataclasses import dataclass
from enum import Enum


class RunState(Enum):
    """게임 진행 상태 머신"""
    AWAITING_INPUT = "awaiting_input"  # 플레이어 입력 대기
    PRE_RUN = "pre_run"                # 시작/로드 직후 시스템 1회 실행
    PLAYER_TURN = "player_turn"
    MONSTER_TURN = "monster_turn"
    SHOW_INVENTORY = "show_inventory"  # 물약 사용 메뉴
    SHOW_DROP_ITEM = "show_drop_item"  # 아이템 버리기 메뉴
    SAVE_GAME = "save_game"            # 저장 요청 (엔진이 처리)
    GAME_OVER = "game_over"            # 플레이어 사망


# 입력을 기다리며 멈춰 있는 상태들
SETTLED_STATES = frozenset({
    RunState.AWAITING_INPUT,
    RunState.SHOW_INVENTORY,
    RunState.SHOW_DROP_ITEM,
    RunState.SAVE_GAME,
    RunState.GAME_OVER,
})


class ItemMenuResult(Enum):
    """아이템 메뉴 응답"""
    CANCEL = "cancel"
    NO_RESPONSE = "no_response"
    SELECTED = "selected"


@dataclass(frozen=True)
class Point:
    """맵 좌표"""
    x: int = 0
    y: int = 0

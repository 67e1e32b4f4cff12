# -*- coding: utf-8 -*-
"""주사위 기반 난수 생성기"""

import random
from typing import Any, Optional


class RandomNumberGenerator:
    """게임 전용 난수 생성기 (시드 고정 및 상태 저장 지원)"""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def roll_dice(self, n: int, die_type: int) -> int:
        """die_type 면체 주사위 n개를 굴린 합 (nDd)"""
        if n <= 0 or die_type <= 0:
            return 0
        return sum(self._random.randint(1, die_type) for _ in range(n))

    def range(self, min_value: int, max_value: int) -> int:
        """[min_value, max_value) 범위의 정수"""
        if max_value <= min_value:
            return min_value
        return self._random.randrange(min_value, max_value)

    def get_state(self) -> Any:
        """저장용 내부 상태 (JSON 직렬화 가능 형태)"""
        version, internal, gauss = self._random.getstate()
        return [version, list(internal), gauss]

    def set_state(self, state: Any) -> None:
        """get_state()로 얻은 상태 복원"""
        version, internal, gauss = state
        self._random.setstate((version, tuple(internal), gauss))

# -*- coding: utf-8 -*-
"""화면 하단에 표시되는 게임 로그"""

from typing import List, Optional

MAX_LOG_ENTRIES = 200


class GameLog:
    """최근 메시지 목록 (오래된 항목은 잘라냄)"""

    def __init__(self, entries: Optional[List[str]] = None):
        self.entries: List[str] = list(entries or [])

    def add(self, message: str) -> None:
        self.entries.append(message)
        if len(self.entries) > MAX_LOG_ENTRIES:
            self.entries = self.entries[-MAX_LOG_ENTRIES:]

    def recent(self, count: int) -> List[str]:
        """최신 메시지부터 count개"""
        return list(reversed(self.entries[-count:])) if count > 0 else []

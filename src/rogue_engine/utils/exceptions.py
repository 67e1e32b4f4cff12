# -*- coding: utf-8 -*-
"""
Rogue Engine에서 사용될 커스텀 예외 클래스를 정의합니다.
"""

class RogueEngineError(Exception):
    """Rogue Engine의 기본이 되는 예외 클래스입니다."""
    pass

class AuthenticationError(RogueEngineError):
    """인증 과정에서 발생하는 예외입니다."""
    pass

class WorldError(RogueEngineError):
    """엔티티/컴포넌트 저장소 관련 예외입니다."""
    pass

class DatabaseError(RogueEngineError):
    """데이터베이스 연산 중 발생하는 예외입니다."""
    pass

class SaveGameError(RogueEngineError):
    """저장된 게임을 만들거나 불러오는 중 발생하는 예외입니다."""
    pass

# -*- coding: utf-8 -*-
"""환경 설정 관리 모듈"""

import os
from typing import Any, Optional

from dotenv import load_dotenv

# .env 파일 로드
load_dotenv()


class Config:
    """환경 변수 기반 설정 관리 클래스"""

    @staticmethod
    def get_env(key: str, default: Any = None, cast_type: type = str) -> Any:
        """환경 변수 값을 가져오고 타입 변환을 수행합니다.

        Args:
            key: 환경 변수 키
            default: 기본값
            cast_type: 변환할 타입 (str, int, bool 등)

        Returns:
            변환된 환경 변수 값 또는 기본값
        """
        value = os.getenv(key, default)

        if value is None:
            return default

        if cast_type == bool:
            return str(value).lower() in ('true', '1', 'yes', 'on')
        elif cast_type == int:
            try:
                return int(value)
            except (ValueError, TypeError):
                return default
        elif cast_type == float:
            try:
                return float(value)
            except (ValueError, TypeError):
                return default
        else:
            return cast_type(value)

    # 데이터베이스 설정
    DATABASE_URL = get_env.__func__('DATABASE_URL', 'sqlite:///data/rogue_engine.db')

    # Telnet 서버 설정
    TELNET_HOST = get_env.__func__('TELNET_HOST', '127.0.0.1')
    TELNET_PORT = get_env.__func__('TELNET_PORT', 4000, int)

    # 웹 서버 설정 (브라우저 클라이언트)
    WEB_ENABLED = get_env.__func__('WEB_ENABLED', True, bool)
    WEB_HOST = get_env.__func__('WEB_HOST', '127.0.0.1')
    WEB_PORT = get_env.__func__('WEB_PORT', 8080, int)

    # 개발 설정
    LOG_LEVEL = get_env.__func__('LOG_LEVEL', 'INFO')

    # 다국어 설정
    DEFAULT_LOCALE = get_env.__func__('DEFAULT_LOCALE', 'en')
    SUPPORTED_LOCALES = get_env.__func__('SUPPORTED_LOCALES', 'en,ko').split(',')

    # 사용자 계정 설정
    USERNAME_MIN_LENGTH = get_env.__func__('USERNAME_MIN_LENGTH', 3, int)
    USERNAME_MAX_LENGTH = get_env.__func__('USERNAME_MAX_LENGTH', 20, int)
    PASSWORD_MIN_LENGTH = get_env.__func__('PASSWORD_MIN_LENGTH', 6, int)

    # 게임 설정
    GAME_SEED: Optional[int] = get_env.__func__('GAME_SEED', None, int)
    SESSION_TIMEOUT = get_env.__func__('SESSION_TIMEOUT', 600, int)

    @classmethod
    def get_username_validation_config(cls) -> dict:
        """사용자명 유효성 검사 설정을 반환합니다."""
        return {
            'min_length': cls.USERNAME_MIN_LENGTH,
            'max_length': cls.USERNAME_MAX_LENGTH,
            'password_min_length': cls.PASSWORD_MIN_LENGTH
        }

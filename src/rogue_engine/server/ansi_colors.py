# -*- coding: utf-8 -*-
"""ANSI 색상 및 커서 제어 코드 정의"""

from ..game.console import RGB


class ANSIColors:
    """ANSI 색상 코드 상수"""

    # 기본 속성
    RESET = "\033[0m"
    BOLD = "\033[1m"

    # 전경색 (메뉴/안내 메시지용)
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BRIGHT_CYAN = "\033[96m"
    BRIGHT_YELLOW = "\033[93m"

    # 화면/커서 제어
    CLEAR_SCREEN = "\033[2J"
    CURSOR_HOME = "\033[H"
    HIDE_CURSOR = "\033[?25l"
    SHOW_CURSOR = "\033[?25h"

    @staticmethod
    def fg_rgb(color: RGB) -> str:
        """24비트 전경색"""
        return f"\033[38;2;{color.r};{color.g};{color.b}m"

    @staticmethod
    def bg_rgb(color: RGB) -> str:
        """24비트 배경색"""
        return f"\033[48;2;{color.r};{color.g};{color.b}m"

    @staticmethod
    def colorize(text: str, color: str) -> str:
        """텍스트에 색상 적용"""
        return f"{color}{text}{ANSIColors.RESET}"

    @staticmethod
    def bold(text: str) -> str:
        return f"{ANSIColors.BOLD}{text}{ANSIColors.RESET}"

    @staticmethod
    def error(text: str) -> str:
        """오류 메시지 (빨간색)"""
        return ANSIColors.colorize(text, ANSIColors.RED)

    @staticmethod
    def success(text: str) -> str:
        """성공 메시지 (녹색)"""
        return ANSIColors.colorize(text, ANSIColors.GREEN)

    @staticmethod
    def info(text: str) -> str:
        """정보 메시지 (청록색)"""
        return ANSIColors.colorize(text, ANSIColors.CYAN)

    @staticmethod
    def warning(text: str) -> str:
        """경고 메시지 (노란색)"""
        return ANSIColors.colorize(text, ANSIColors.YELLOW)

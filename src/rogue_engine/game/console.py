# -*- coding: utf-8 -*-
"""가상 콘솔 (문자 셀 버퍼) 및 키 코드 정의"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class RGB:
    """0~255 범위의 RGB 색상"""
    r: int = 0
    g: int = 0
    b: int = 0

    def to_greyscale(self) -> 'RGB':
        """밝기만 남긴 회색조 색상 반환"""
        linear = int(self.r * 0.299 + self.g * 0.587 + self.b * 0.114)
        return RGB(linear, linear, linear)

    @property
    def hex(self) -> str:
        """#rrggbb 형식 문자열"""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_list(self) -> List[int]:
        return [self.r, self.g, self.b]

    @classmethod
    def from_list(cls, values: List[int]) -> 'RGB':
        return cls(int(values[0]), int(values[1]), int(values[2]))


# 자주 쓰는 색상
BLACK = RGB(0, 0, 0)
WHITE = RGB(255, 255, 255)
YELLOW = RGB(255, 255, 0)
RED = RGB(255, 0, 0)
GREEN = RGB(0, 255, 0)
MAGENTA = RGB(255, 0, 255)
CYAN = RGB(0, 255, 255)
GREY = RGB(128, 128, 128)
TEAL = RGB(0, 128, 128)


@dataclass
class Cell:
    """콘솔의 한 칸"""
    glyph: str = " "
    fg: RGB = WHITE
    bg: RGB = BLACK


class Console:
    """고정 크기 문자 셀 버퍼

    게임 로직은 이 버퍼에만 그리고, 실제 출력(ANSI/웹)은 서버 계층이 담당합니다.
    """

    def __init__(self, width: int = 80, height: int = 50):
        self.width = width
        self.height = height
        self.cells: List[Cell] = [Cell() for _ in range(width * height)]

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cls(self) -> None:
        """화면 지우기"""
        self.cells = [Cell() for _ in range(self.width * self.height)]

    def set(self, x: int, y: int, fg: RGB, bg: RGB, glyph: str) -> None:
        """한 칸 설정 (범위 밖은 무시)"""
        if not self._in_bounds(x, y):
            return
        self.cells[y * self.width + x] = Cell(glyph[:1] or " ", fg, bg)

    def get(self, x: int, y: int) -> Optional[Cell]:
        if not self._in_bounds(x, y):
            return None
        return self.cells[y * self.width + x]

    def print(self, x: int, y: int, text: str) -> None:
        """기본 색상(흰색/검정)으로 문자열 출력"""
        self.print_color(x, y, WHITE, BLACK, text)

    def print_color(self, x: int, y: int, fg: RGB, bg: RGB, text: str) -> None:
        """지정 색상으로 문자열 출력"""
        for offset, glyph in enumerate(text):
            self.set(x + offset, y, fg, bg, glyph)

    def draw_box(self, x: int, y: int, width: int, height: int, fg: RGB, bg: RGB) -> None:
        """단일선 상자 그리기 (내부는 공백으로 채움)"""
        for row in range(y, y + height + 1):
            for col in range(x, x + width + 1):
                self.set(col, row, fg, bg, " ")

        self.set(x, y, fg, bg, "┌")
        self.set(x + width, y, fg, bg, "┐")
        self.set(x, y + height, fg, bg, "└")
        self.set(x + width, y + height, fg, bg, "┘")
        for col in range(x + 1, x + width):
            self.set(col, y, fg, bg, "─")
            self.set(col, y + height, fg, bg, "─")
        for row in range(y + 1, y + height):
            self.set(x, row, fg, bg, "│")
            self.set(x + width, row, fg, bg, "│")

    def draw_bar_horizontal(self, x: int, y: int, width: int, n: int, max_n: int,
                            fg: RGB, bg: RGB) -> None:
        """n / max_n 비율의 가로 막대 그리기"""
        percent = n / max_n if max_n > 0 else 0.0
        fill_width = int(percent * width)
        for offset in range(width):
            if offset <= fill_width:
                self.set(x + offset, y, fg, bg, "▓")
            else:
                self.set(x + offset, y, fg, bg, "░")

    def to_text(self) -> str:
        """색상 없이 글자만 줄 단위로 반환 (디버그/테스트용)"""
        lines = []
        for row in range(self.height):
            start = row * self.width
            lines.append("".join(cell.glyph for cell in self.cells[start:start + self.width]))
        return "\n".join(lines)


class VirtualKeyCode(Enum):
    """게임 입력 키 코드"""
    A = "a"
    B = "b"
    C = "c"
    D = "d"
    E = "e"
    F = "f"
    G = "g"
    H = "h"
    I = "i"
    J = "j"
    K = "k"
    L = "l"
    M = "m"
    N = "n"
    O = "o"
    P = "p"
    Q = "q"
    R = "r"
    S = "s"
    T = "t"
    U = "u"
    V = "v"
    W = "w"
    X = "x"
    Y = "y"
    Z = "z"

    # 숫자 키는 텔넷에서 넘패드와 구분되지 않음
    NUMPAD1 = "1"
    NUMPAD2 = "2"
    NUMPAD3 = "3"
    NUMPAD4 = "4"
    NUMPAD5 = "5"
    NUMPAD6 = "6"
    NUMPAD7 = "7"
    NUMPAD8 = "8"
    NUMPAD9 = "9"

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    ESCAPE = "escape"
    RETURN = "return"

    @classmethod
    def from_char(cls, char: str) -> Optional['VirtualKeyCode']:
        """입력 문자 하나를 키 코드로 변환 (대소문자 무시)"""
        if len(char) != 1:
            return None
        try:
            return cls(char.lower())
        except ValueError:
            return None

    @classmethod
    def from_browser_key(cls, key: str) -> Optional['VirtualKeyCode']:
        """브라우저 KeyboardEvent.key 값을 키 코드로 변환"""
        special = {
            "ArrowLeft": cls.LEFT,
            "ArrowRight": cls.RIGHT,
            "ArrowUp": cls.UP,
            "ArrowDown": cls.DOWN,
            "Escape": cls.ESCAPE,
            "Enter": cls.RETURN,
        }
        if key in special:
            return special[key]
        return cls.from_char(key)


def letter_to_option(key: Optional[VirtualKeyCode]) -> int:
    """메뉴 선택용: a → 0, b → 1 ... 문자가 아니면 -1"""
    if key is None:
        return -1
    value = key.value
    if len(value) == 1 and "a" <= value <= "z":
        return ord(value) - ord("a")
    return -1

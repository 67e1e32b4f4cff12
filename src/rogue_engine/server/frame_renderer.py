# -*- coding: utf-8 -*-
"""콘솔 버퍼를 클라이언트 출력 형식으로 변환"""

from typing import List, Optional

from ..game.console import RGB, Console
from .ansi_colors import ANSIColors


def render_ansi(console: Console) -> str:
    """
    콘솔 전체를 ANSI 트루컬러 문자열로 변환

    커서를 맨 위로 옮긴 뒤 모든 줄을 덮어씁니다. 색상 코드는 바뀔 때만 출력합니다.
    """
    parts: List[str] = [ANSIColors.HIDE_CURSOR, ANSIColors.CURSOR_HOME]
    current_fg: Optional[RGB] = None
    current_bg: Optional[RGB] = None

    for row in range(console.height):
        if row > 0:
            parts.append("\r\n")
        start = row * console.width
        for cell in console.cells[start:start + console.width]:
            if cell.fg != current_fg:
                parts.append(ANSIColors.fg_rgb(cell.fg))
                current_fg = cell.fg
            if cell.bg != current_bg:
                parts.append(ANSIColors.bg_rgb(cell.bg))
                current_bg = cell.bg
            parts.append(cell.glyph)

    parts.append(ANSIColors.RESET)
    return "".join(parts)


def render_rows(console: Console) -> List[List[list]]:
    """웹 클라이언트용: 줄마다 [glyph, fg, bg] 목록. 색상은 #rrggbb"""
    rows = []
    for row in range(console.height):
        start = row * console.width
        rows.append([
            [cell.glyph, cell.fg.hex, cell.bg.hex]
            for cell in console.cells[start:start + console.width]
        ])
    return rows

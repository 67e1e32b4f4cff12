# -*- coding: utf-8 -*-
"""Telnet 세션 관리

접속 직후 문자 단위 모드(서버 에코, Go-Ahead 억제)로 협상합니다.
게임 중에는 read_key()로 키 하나씩, 로그인/메뉴에서는 read_line()으로 한 줄씩 읽습니다.
"""

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from ..game.console import Console, VirtualKeyCode
from ..game.models import Account
from .ansi_colors import ANSIColors
from .frame_renderer import render_ansi

logger = logging.getLogger(__name__)

# Telnet 명령 바이트
IAC = 255
DONT = 254
DO = 253
WONT = 252
WILL = 251
SB = 250
SE = 240

# Telnet 옵션
ECHO = 1
SUPPRESS_GO_AHEAD = 3
LINEMODE = 34

# 제어 문자
NUL = 0x00
BACKSPACE = 0x08
LF = 0x0A
CR = 0x0D
ESC = 0x1B
DELETE = 0x7F

# ESC 다음 바이트를 기다리는 시간 (초). 이 안에 오지 않으면 ESC 단독 입력
ESCAPE_SEQUENCE_TIMEOUT = 0.05

# ESC [ x / ESC O x 의 마지막 글자 -> 키
CURSOR_KEYS = {
    ord("A"): VirtualKeyCode.UP,
    ord("B"): VirtualKeyCode.DOWN,
    ord("C"): VirtualKeyCode.RIGHT,
    ord("D"): VirtualKeyCode.LEFT,
}


class TelnetSession:
    """Telnet 클라이언트 세션을 관리하는 클래스"""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter,
                 session_id: Optional[str] = None):
        """
        TelnetSession 초기화

        Args:
            reader: asyncio StreamReader 객체
            writer: asyncio StreamWriter 객체
            session_id: 세션 ID (없으면 자동 생성)
        """
        self.session_id: str = session_id or str(uuid.uuid4())
        self.reader: asyncio.StreamReader = reader
        self.writer: asyncio.StreamWriter = writer
        self.account: Optional[Account] = None
        self.is_authenticated: bool = False
        self.locale: str = "en"
        self.created_at: datetime = datetime.now()
        self.last_activity: datetime = datetime.now()
        self.ip_address: Optional[str] = None

        # 되돌려 놓은 입력 바이트 (미리 읽기용)
        self._pending = bytearray()

        peername = writer.get_extra_info('peername')
        if peername:
            self.ip_address = peername[0]

        logger.info(f"새 Telnet 세션 생성: {self.short_id} (IP: {self.ip_address})")

    @property
    def short_id(self) -> str:
        return self.session_id.split('-')[-1]

    async def initialize_telnet(self) -> None:
        """문자 단위 모드 협상: 서버가 에코하고 Go-Ahead를 억제함"""
        try:
            self.writer.write(bytes([IAC, WILL, ECHO]))
            self.writer.write(bytes([IAC, WILL, SUPPRESS_GO_AHEAD]))
            self.writer.write(bytes([IAC, DONT, LINEMODE]))
            await self.writer.drain()
        except ConnectionError as e:
            logger.debug(f"Telnet 프로토콜 협상 오류 (무시됨): {e}")

    def authenticate(self, account: Account) -> None:
        """세션에 인증된 계정 설정"""
        self.account = account
        self.is_authenticated = True
        self.locale = account.preferred_locale
        self.update_activity()
        logger.info(f"Telnet 세션 {self.short_id}에 계정 '{account.username}' 인증 완료")

    def update_activity(self) -> None:
        self.last_activity = datetime.now()

    # === 출력 ===

    async def _write(self, text: str) -> bool:
        if self.writer.is_closing():
            return False
        try:
            self.writer.write(text.encode('utf-8'))
            await self.writer.drain()
            return True
        except ConnectionError as e:
            logger.debug(f"Telnet 세션 {self.short_id} 전송 실패: {e}")
            return False

    async def send_text(self, text: str, newline: bool = True) -> bool:
        """
        텍스트 전송. 줄바꿈은 CRLF로 변환

        Returns:
            bool: 전송 성공 여부
        """
        text = text.replace("\r\n", "\n").replace("\n", "\r\n")
        if newline:
            text += "\r\n"
        return await self._write(text)

    async def send_prompt(self, prompt: str = "> ") -> bool:
        """줄바꿈 없이 프롬프트 전송"""
        return await self.send_text(prompt, newline=False)

    async def send_error(self, message: str) -> bool:
        return await self.send_text(ANSIColors.error(message))

    async def send_success(self, message: str) -> bool:
        return await self.send_text(ANSIColors.success(message))

    async def send_info(self, message: str) -> bool:
        return await self.send_text(ANSIColors.info(message))

    async def send_frame(self, console: Console) -> bool:
        """게임 화면 한 장 전송"""
        return await self._write(render_ansi(console))

    async def clear_screen(self) -> bool:
        """화면을 지우고 커서를 다시 보이게 함"""
        return await self._write(
            ANSIColors.RESET + ANSIColors.CLEAR_SCREEN + ANSIColors.CURSOR_HOME + ANSIColors.SHOW_CURSOR
        )

    # === 입력 ===

    async def _read_byte(self, timeout: Optional[float] = None) -> Optional[int]:
        """
        1바이트 읽기

        Returns:
            Optional[int]: 읽은 바이트 (연결 종료 시 None)

        Raises:
            asyncio.TimeoutError: timeout 안에 입력이 없는 경우
        """
        if self._pending:
            return self._pending.pop(0)

        if timeout is None:
            data = await self.reader.read(1)
        else:
            data = await asyncio.wait_for(self.reader.read(1), timeout=timeout)

        if not data:
            return None
        return data[0]

    def _unread(self, byte_val: int) -> None:
        self._pending.insert(0, byte_val)

    async def _skip_telnet_command(self) -> None:
        """IAC 다음 명령 건너뛰기 (옵션 협상, 하위 협상 포함)"""
        cmd = await self._read_byte(timeout=1.0)
        if cmd in (WILL, WONT, DO, DONT):
            await self._read_byte(timeout=1.0)
        elif cmd == SB:
            # IAC SE가 나올 때까지 버림
            previous = None
            while True:
                byte_val = await self._read_byte(timeout=1.0)
                if byte_val is None or (previous == IAC and byte_val == SE):
                    return
                previous = byte_val

    async def _read_escape_sequence(self) -> Optional[VirtualKeyCode]:
        """ESC 이후 처리. 방향키 시퀀스면 방향키, 아니면 ESC 단독"""
        try:
            introducer = await self._read_byte(timeout=ESCAPE_SEQUENCE_TIMEOUT)
        except asyncio.TimeoutError:
            return VirtualKeyCode.ESCAPE

        if introducer is None:
            return VirtualKeyCode.ESCAPE

        if introducer not in (ord("["), ord("O")):
            # 다른 키를 빠르게 이어 누른 경우
            self._unread(introducer)
            return VirtualKeyCode.ESCAPE

        # 최종 바이트(0x40~0x7E)까지 읽음. 매개변수 바이트는 무시
        while True:
            try:
                final = await self._read_byte(timeout=ESCAPE_SEQUENCE_TIMEOUT)
            except asyncio.TimeoutError:
                return None
            if final is None:
                return None
            if 0x40 <= final <= 0x7E:
                return CURSOR_KEYS.get(final)

    async def read_key(self, timeout: Optional[float] = None) -> Optional[VirtualKeyCode]:
        """
        게임 키 하나 읽기. 알 수 없는 입력은 건너뜀

        Args:
            timeout: 입력 대기 시간 (초)

        Returns:
            Optional[VirtualKeyCode]: 키 코드 (타임아웃 또는 연결 종료 시 None)
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout if timeout else None

        while True:
            remaining = None
            if deadline is not None:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    logger.debug(f"Telnet 세션 {self.short_id} 키 입력 타임아웃")
                    return None

            try:
                byte_val = await self._read_byte(timeout=remaining)
            except asyncio.TimeoutError:
                logger.debug(f"Telnet 세션 {self.short_id} 키 입력 타임아웃")
                return None

            if byte_val is None:
                logger.debug(f"Telnet 세션 {self.short_id}: 연결 종료 감지")
                return None

            key: Optional[VirtualKeyCode] = None
            if byte_val == IAC:
                await self._skip_telnet_command()
            elif byte_val == ESC:
                key = await self._read_escape_sequence()
            elif byte_val == CR:
                await self._consume_line_ending()
                key = VirtualKeyCode.RETURN
            elif byte_val == LF:
                key = VirtualKeyCode.RETURN
            elif 32 <= byte_val <= 126:
                key = VirtualKeyCode.from_char(chr(byte_val))

            if key is not None:
                self.update_activity()
                return key

    async def _consume_line_ending(self) -> None:
        """CR 다음의 LF 또는 NUL 소비"""
        try:
            next_byte = await self._read_byte(timeout=ESCAPE_SEQUENCE_TIMEOUT)
        except asyncio.TimeoutError:
            return
        if next_byte is not None and next_byte not in (LF, NUL):
            self._unread(next_byte)

    async def read_line(self, timeout: Optional[float] = None, echo: bool = True) -> Optional[str]:
        """
        한 줄 읽기. 서버 에코 모드이므로 입력 문자를 직접 되돌려 보냄

        Args:
            timeout: 전체 입력 대기 시간 (초)
            echo: False이면 입력을 표시하지 않음 (비밀번호)

        Returns:
            Optional[str]: 읽은 문자열 (타임아웃 또는 연결 종료 시 None)
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout if timeout else None
        buffer = bytearray()

        while True:
            remaining = None
            if deadline is not None:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    return None

            try:
                byte_val = await self._read_byte(timeout=remaining)
            except asyncio.TimeoutError:
                logger.debug(f"Telnet 세션 {self.short_id} 읽기 타임아웃")
                return None

            if byte_val is None:
                return None

            if byte_val == IAC:
                await self._skip_telnet_command()
                continue

            if byte_val in (CR, LF):
                if byte_val == CR:
                    await self._consume_line_ending()
                await self._write("\r\n")
                break

            if byte_val in (BACKSPACE, DELETE):
                if buffer:
                    # UTF-8 다중 바이트 문자 통째로 제거
                    while buffer:
                        removed = buffer.pop()
                        if (removed & 0xC0) != 0x80:
                            break
                    if echo:
                        await self._write("\b \b")
                continue

            if byte_val == ESC:
                # 줄 입력 중 방향키 시퀀스는 무시
                await self._read_escape_sequence()
                continue

            if 32 <= byte_val <= 126 or byte_val >= 128:
                buffer.append(byte_val)
                if echo:
                    await self._write_raw(bytes([byte_val]))

        self.update_activity()
        return buffer.decode('utf-8', errors='ignore').strip()

    async def _write_raw(self, data: bytes) -> None:
        if self.writer.is_closing():
            return
        try:
            self.writer.write(data)
            await self.writer.drain()
        except ConnectionError as e:
            logger.debug(f"Telnet 세션 {self.short_id} 에코 실패: {e}")

    # === 세션 상태 ===

    async def close(self, message: str = "Connection closed") -> None:
        """Telnet 연결 종료"""
        if self.writer.is_closing():
            return
        try:
            await self.send_text(f"\r\n{message}")
            self.writer.close()
            await self.writer.wait_closed()
            logger.info(f"Telnet 세션 {self.short_id} 연결 종료: {message}")
        except OSError as e:
            logger.error(f"Telnet 세션 {self.short_id} 종료 중 오류: {e}")

    def is_active(self, timeout_seconds: int = 600) -> bool:
        """연결이 살아 있고 최근 활동이 있었는지"""
        if self.writer.is_closing():
            return False
        inactive_time = (datetime.now() - self.last_activity).total_seconds()
        return inactive_time < timeout_seconds

    def get_session_info(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "account_id": self.account.id if self.account else None,
            "username": self.account.username if self.account else None,
            "is_authenticated": self.is_authenticated,
            "created_at": self.created_at.isoformat(),
            "last_activity": self.last_activity.isoformat(),
            "ip_address": self.ip_address,
            "locale": self.locale,
        }

    def __str__(self) -> str:
        account_info = f"({self.account.username})" if self.account else "(미인증)"
        return f"TelnetSession[{self.short_id}]{account_info}"

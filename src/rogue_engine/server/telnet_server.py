# -*- coding: utf-8 -*-
"""Telnet 로그라이크 서버"""

import asyncio
import logging
from typing import Any, Dict, Optional

from ..config import Config
from ..core.event_bus import EventType
from ..core.game_engine import GameEngine
from ..core.localization import get_message
from ..game.console import Console, VirtualKeyCode
from ..game.managers import AccountManager
from ..game.types import RunState
from ..utils.exceptions import AuthenticationError, SaveGameError
from .ansi_colors import ANSIColors
from .telnet_session import TelnetSession

logger = logging.getLogger(__name__)

K = VirtualKeyCode

AUTH_INPUT_TIMEOUT = 60.0


class TelnetServer:
    """asyncio 기반의 Telnet 서버"""

    def __init__(self, host: str = "0.0.0.0", port: int = 4000,
                 account_manager: Optional[AccountManager] = None,
                 game_engine: Optional[GameEngine] = None):
        """TelnetServer 초기화

        Args:
            host: 서버 호스트
            port: 서버 포트
            account_manager: 계정 매니저
            game_engine: 게임 엔진 (웹 서버와 공유)
        """
        self.host: str = host
        self.port: int = port
        self.account_manager: Optional[AccountManager] = account_manager
        self.game_engine: Optional[GameEngine] = game_engine
        self.sessions: Dict[str, TelnetSession] = {}
        self.account_sessions: Dict[str, str] = {}  # account_id -> session_id 매핑
        self.server: Optional[asyncio.Server] = None
        self._is_running: bool = False
        self._cleanup_task: Optional[asyncio.Task] = None

        logger.info("TelnetServer 초기화")

    async def start(self) -> None:
        """Telnet 서버 시작"""
        logger.info(f"Telnet 서버 시작 중... telnet://{self.host}:{self.port}")

        self.server = await asyncio.start_server(self.handle_client, self.host, self.port)
        self._cleanup_task = asyncio.create_task(self._cleanup_inactive_sessions())

        self._is_running = True
        logger.info("Telnet 서버가 성공적으로 시작되었습니다.")

    async def stop(self) -> None:
        """Telnet 서버 중지"""
        if not self.server:
            return

        logger.info("Telnet 서버 종료 중...")

        for session_id in list(self.sessions.keys()):
            await self.remove_session(session_id, "Server shutting down / 서버 종료")

        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass

        self.server.close()
        await self.server.wait_closed()
        self._is_running = False
        logger.info("Telnet 서버가 성공적으로 종료되었습니다.")

    async def _publish(self, event_type: EventType, session: TelnetSession) -> None:
        if self.game_engine:
            await self.game_engine.publish(event_type, session.session_id, session.account,
                                           transport="telnet")

    async def handle_client(self, reader: asyncio.StreamReader,
                            writer: asyncio.StreamWriter) -> None:
        """클라이언트 연결 처리"""
        session = TelnetSession(reader, writer)
        self.sessions[session.session_id] = session
        logger.info(f"새로운 Telnet 클라이언트 연결: {session} (총 {len(self.sessions)}개)")
        await self._publish(EventType.PLAYER_CONNECTED, session)

        try:
            await session.initialize_telnet()
            await self.send_welcome_message(session)

            if await self.handle_authentication(session):
                await self._publish(EventType.PLAYER_LOGIN, session)
                await self.game_menu(session)

        except asyncio.CancelledError:
            logger.info(f"Telnet 세션 {session.short_id} 핸들러 취소됨")
        except Exception as e:
            logger.error(f"Telnet 세션 {session.short_id} 처리 중 오류: {e}", exc_info=True)
            await session.send_error("A server error occurred. / 서버 오류가 발생했습니다.")
        finally:
            if self.game_engine:
                await self.game_engine.remove_session(session.session_id)
            if session.is_authenticated:
                await self._publish(EventType.PLAYER_LOGOUT, session)
            await self._publish(EventType.PLAYER_DISCONNECTED, session)
            await self.remove_session(session.session_id, "Connection closed / 연결 종료")

    async def send_welcome_message(self, session: TelnetSession) -> None:
        welcome_text = f"""
{ANSIColors.BOLD}{ANSIColors.BRIGHT_CYAN}
╔═══════════════════════════════════════════════╗
║                                               ║
║        {ANSIColors.BRIGHT_YELLOW}Rusty Roguelike{ANSIColors.BRIGHT_CYAN}                        ║
║        {ANSIColors.WHITE}러스티 로그라이크{ANSIColors.BRIGHT_CYAN}                      ║
║                                               ║
╚═══════════════════════════════════════════════╝
{ANSIColors.RESET}
{ANSIColors.CYAN}Use a terminal of at least 80x50 with truecolor support.
80x50 이상의 트루컬러 터미널을 사용하세요.{ANSIColors.RESET}
"""
        await session.send_text(welcome_text)

    async def handle_authentication(self, session: TelnetSession) -> bool:
        """로그인/회원가입 메뉴. 인증되면 True"""
        max_attempts = 3
        attempts = 0

        while attempts < max_attempts:
            await session.send_text("")
            await session.send_info("1. Login / 로그인")
            await session.send_info("2. Register / 회원가입")
            await session.send_info("3. Quit / 종료")
            await session.send_text("")
            await session.send_prompt("Choice / 선택> ")

            choice = await session.read_line(timeout=AUTH_INPUT_TIMEOUT)
            if choice is None:
                return False

            choice = choice.lower()
            if choice in ('3', 'quit', 'q'):
                await session.send_text("Goodbye! / 안녕히 가세요!")
                return False

            try:
                if choice in ('1', 'login', 'l'):
                    if await self.handle_login(session):
                        return True
                elif choice in ('2', 'register', 'r'):
                    if await self.handle_register(session):
                        return True
                else:
                    await session.send_error(
                        "Invalid choice. Please enter 1, 2, or 3. / 잘못된 선택입니다. 1, 2, 또는 3을 입력하세요."
                    )
            except AuthenticationError as e:
                logger.warning(f"Telnet 인증 실패: IP={session.ip_address}, 오류='{e}'")
                await session.send_error(str(e))

            attempts += 1

        await session.send_error("Too many attempts. / 최대 시도 횟수를 초과했습니다.")
        return False

    async def handle_login(self, session: TelnetSession) -> bool:
        """
        로그인 처리

        Raises:
            AuthenticationError: 사용자명 또는 비밀번호가 틀린 경우
        """
        await session.send_text("")
        await session.send_info("=== Login / 로그인 ===")
        await session.send_prompt("Username / 사용자명: ")
        username = await session.read_line(timeout=AUTH_INPUT_TIMEOUT)
        if not username:
            return False

        await session.send_prompt("Password / 비밀번호: ")
        password = await session.read_line(timeout=AUTH_INPUT_TIMEOUT, echo=False)
        if not password:
            return False

        logger.info(f"Telnet 로그인 시도: 사용자명='{username}', IP={session.ip_address}")
        account = await self.account_manager.authenticate(username, password)
        await self._attach_account(session, account)

        await session.send_success(get_message("auth.login_success", session.locale, username=account.username))
        logger.info(f"Telnet 로그인 성공: 사용자명='{username}', 계정ID={account.id}")
        return True

    async def handle_register(self, session: TelnetSession) -> bool:
        """
        회원가입 처리 후 자동 로그인

        Raises:
            AuthenticationError: 사용자명이 유효하지 않거나 이미 있는 경우
        """
        validation = Config.get_username_validation_config()

        await session.send_text("")
        await session.send_info("=== Register / 회원가입 ===")
        await session.send_prompt(
            f"Username ({validation['min_length']}-{validation['max_length']} chars) / 사용자명: "
        )
        username = await session.read_line(timeout=AUTH_INPUT_TIMEOUT)
        if not username:
            return False

        await session.send_prompt(
            f"Password (min {validation['password_min_length']} chars) / 비밀번호: "
        )
        password = await session.read_line(timeout=AUTH_INPUT_TIMEOUT, echo=False)
        if not password:
            return False

        await session.send_prompt("Confirm password / 비밀번호 확인: ")
        password_confirm = await session.read_line(timeout=AUTH_INPUT_TIMEOUT, echo=False)
        if password != password_confirm:
            await session.send_error("Passwords do not match. / 비밀번호가 일치하지 않습니다.")
            return False

        logger.info(f"Telnet 회원가입 시도: 사용자명='{username}', IP={session.ip_address}")
        account = await self.account_manager.create_account(username, password)
        await self._attach_account(session, account)

        await session.send_success(get_message("auth.register_success", session.locale, username=account.username))
        logger.info(f"Telnet 회원가입 성공: 사용자명='{username}', 계정ID={account.id}")
        return True

    async def _attach_account(self, session: TelnetSession, account) -> None:
        """세션 인증. 같은 계정의 기존 접속은 게임을 저장한 뒤 끊음"""
        old_session_id = self.account_sessions.get(account.id)
        if old_session_id and old_session_id in self.sessions:
            if self.game_engine:
                await self.game_engine.remove_session(old_session_id)
            await self.remove_session(old_session_id, "Logged in from another location. / 다른 위치에서 로그인했습니다.")

        session.authenticate(account)
        self.account_sessions[account.id] = session.session_id

    async def game_menu(self, session: TelnetSession) -> None:
        """새 게임 / 이어하기 / 종료 / 언어 메뉴"""
        while session.is_active(Config.SESSION_TIMEOUT):
            locale = session.locale
            has_save = await self.game_engine.has_saved_game(session.account)

            await session.send_text("")
            await session.send_info(get_message("menu.title", locale))
            await session.send_text(get_message("menu.new_game", locale))
            if has_save:
                await session.send_text(get_message("menu.continue", locale))
            await session.send_text(get_message("menu.quit", locale))
            await session.send_text(get_message("menu.language", locale))
            await session.send_text("")
            await session.send_text(ANSIColors.warning(get_message("game.controls", locale)))
            await session.send_prompt(get_message("menu.prompt", locale))

            key = await session.read_key(timeout=Config.SESSION_TIMEOUT)
            if key is None:
                return
            await session.send_text("")

            if key == K.NUMPAD1:
                console = await self.game_engine.start_new_game(session.session_id, session.account)
                if not await self.play(session, console):
                    return
            elif key == K.NUMPAD2 and has_save:
                try:
                    console = await self.game_engine.continue_game(session.session_id, session.account)
                except SaveGameError:
                    await session.send_error(get_message("game.load_failed", locale))
                    continue
                if console is None:
                    await session.send_error(get_message("game.no_save", locale))
                    continue
                if not await self.play(session, console):
                    return
            elif key == K.NUMPAD4:
                await self.switch_locale(session)
            elif key in (K.NUMPAD3, K.Q, K.ESCAPE):
                await session.send_text(get_message("menu.goodbye", locale))
                return
            else:
                await session.send_error(get_message("menu.invalid_choice", locale))

    async def switch_locale(self, session: TelnetSession) -> None:
        """지원 언어를 차례로 돌려 가며 선호 언어 변경"""
        locales = Config.SUPPORTED_LOCALES
        current = locales.index(session.locale) if session.locale in locales else -1
        locale = locales[(current + 1) % len(locales)]

        session.account = await self.account_manager.set_locale(session.account, locale)
        session.locale = session.account.preferred_locale
        await session.send_success(get_message("settings.locale_changed", session.locale))

    async def play(self, session: TelnetSession, console: Console) -> bool:
        """
        키 입력 게임 루프

        Returns:
            bool: 게임이 끝나 메뉴로 돌아가면 True, 연결이 끊기면 False
        """
        await session.clear_screen()
        await session.send_frame(console)

        while True:
            key = await session.read_key(timeout=Config.SESSION_TIMEOUT)
            if key is None:
                return False

            # 같은 계정이 다른 곳에서 게임을 열면 이 세션의 게임은 저장 후 닫혀 있음
            if self.game_engine.get_game(session.session_id) is None:
                await session.clear_screen()
                await session.send_error(get_message("game.taken_over", session.locale))
                return True

            result = await self.game_engine.handle_key(session.session_id, key)
            await session.send_frame(result.console)

            if not result.finished:
                continue

            if result.run_state == RunState.GAME_OVER:
                await session.send_text("\r\n" + ANSIColors.error(get_message("game.over", session.locale)))
                if await session.read_key(timeout=Config.SESSION_TIMEOUT) is None:
                    return False
                await session.clear_screen()
            else:
                await session.clear_screen()
                await session.send_success(get_message("game.saved", session.locale))
            return True

    async def remove_session(self, session_id: str, reason: str = "세션 종료") -> bool:
        """세션 제거"""
        session = self.sessions.pop(session_id, None)
        if not session:
            return False

        if session.account and self.account_sessions.get(session.account.id) == session_id:
            del self.account_sessions[session.account.id]

        await session.close(reason)
        logger.info(f"Telnet 세션 {session.short_id} 제거: {reason} (남은 세션: {len(self.sessions)}개)")
        return True

    async def _cleanup_inactive_sessions(self) -> None:
        """비활성 세션 정리 (백그라운드 작업)"""
        cleanup_interval = 60

        while True:
            try:
                await asyncio.sleep(cleanup_interval)

                inactive_sessions = [
                    session_id for session_id, session in self.sessions.items()
                    if not session.is_active(Config.SESSION_TIMEOUT)
                ]
                for session_id in inactive_sessions:
                    if self.game_engine:
                        await self.game_engine.remove_session(session_id)
                    await self.remove_session(session_id, "Idle timeout / 비활성 상태로 인한 정리")

                if inactive_sessions:
                    logger.info(f"Telnet: {len(inactive_sessions)}개 비활성 세션 정리 완료")

            except asyncio.CancelledError:
                logger.info("Telnet 세션 정리 작업 취소됨")
                break
            except Exception as e:
                logger.error(f"Telnet 세션 정리 중 오류: {e}")

    def get_stats(self) -> Dict[str, Any]:
        """서버 통계 정보 반환"""
        total_sessions = len(self.sessions)
        authenticated_sessions = sum(1 for s in self.sessions.values() if s.is_authenticated)

        return {
            "total_sessions": total_sessions,
            "authenticated_sessions": authenticated_sessions,
            "is_running": self._is_running,
        }

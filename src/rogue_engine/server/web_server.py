# -*- coding: utf-8 -*-
"""브라우저 클라이언트용 aiohttp 웹 서버

JSON 프로토콜 (클라이언트 -> 서버):
    {"command": "login" | "register", "username": ..., "password": ...}
    {"command": "new_game"} / {"command": "continue"}
    {"command": "key", "key": KeyboardEvent.key}
    {"command": "set_locale", "locale": "en" | "ko"}

서버 -> 클라이언트:
    {"status": "success", "action": ..., ...}
    {"type": "frame", "rows": [[[glyph, fg, bg], ...], ...], ...}
    {"type": "game_end", "reason": "saved" | "died", ...}
    {"error": ..., "error_code": ...}
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from aiohttp import WSMsgType, web

from ..config import Config
from ..core.event_bus import EventType
from ..core.game_engine import GameEngine
from ..core.localization import get_message
from ..game.console import VirtualKeyCode
from ..game.managers import AccountManager
from ..game.types import RunState
from ..utils.exceptions import AuthenticationError, SaveGameError
from .session import Session, SessionManager

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


class WebServer:
    """aiohttp 기반 웹 서버"""

    def __init__(self, host: str = "localhost", port: int = 8080,
                 account_manager: Optional[AccountManager] = None,
                 game_engine: Optional[GameEngine] = None):
        self.host: str = host
        self.port: int = port
        self.app: web.Application = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None
        self.account_manager: Optional[AccountManager] = account_manager
        self.game_engine: Optional[GameEngine] = game_engine
        self.session_manager: SessionManager = SessionManager(Config.SESSION_TIMEOUT)
        self._is_running: bool = False

        logger.info("WebServer 초기화")
        self._setup_routes()

    def _setup_routes(self) -> None:
        """서버 라우팅 설정"""
        self.app.router.add_get("/", self.handle_index)
        self.app.router.add_get("/api/config", self.handle_config)
        self.app.router.add_get("/api/stats", self.handle_stats)
        self.app.router.add_get("/ws", self.websocket_handler)

    async def handle_index(self, request: web.Request) -> web.FileResponse:
        """메인 페이지 핸들러"""
        return web.FileResponse(STATIC_DIR / "index.html")

    async def handle_config(self, request: web.Request) -> web.Response:
        """클라이언트 설정 정보 제공"""
        return web.json_response({
            "username": {
                "min_length": Config.USERNAME_MIN_LENGTH,
                "max_length": Config.USERNAME_MAX_LENGTH
            },
            "password": {
                "min_length": Config.PASSWORD_MIN_LENGTH
            },
            "locale": {
                "default": Config.DEFAULT_LOCALE,
                "supported": Config.SUPPORTED_LOCALES
            }
        })

    async def handle_stats(self, request: web.Request) -> web.Response:
        """서버/엔진 통계"""
        stats: Dict[str, Any] = {"sessions": self.session_manager.get_stats()}
        if self.game_engine:
            stats["engine"] = self.game_engine.get_stats()
            stats["event_bus"] = self.game_engine.event_bus.get_stats()
        return web.json_response(stats)

    async def websocket_handler(self, request: web.Request) -> web.WebSocketResponse:
        """웹소켓 연결 및 메시지 처리 핸들러"""
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        session = self.session_manager.add_session(ws, request)
        logger.info(f"새로운 클라이언트 연결: {session}")
        await self._publish(EventType.PLAYER_CONNECTED, session)

        try:
            async for msg in ws:
                if msg.type == WSMsgType.TEXT:
                    session.update_activity()
                    try:
                        data = json.loads(msg.data)
                    except json.JSONDecodeError:
                        data = None
                    if not isinstance(data, dict):
                        await session.send_error("잘못된 JSON 형식입니다.", "INVALID_JSON")
                        continue

                    try:
                        if not session.is_authenticated:
                            await self.handle_authentication(session, data)
                        else:
                            await self.handle_game_command(session, data)

                    except AuthenticationError as e:
                        logger.warning(f"인증 실패: IP={session.ip_address}, 오류='{e}'")
                        await session.send_error(str(e), "AUTH_ERROR")
                    except Exception as e:
                        logger.error(f"세션 {session.session_id} 메시지 처리 오류: {e}", exc_info=True)
                        await session.send_error("예상치 못한 오류가 발생했습니다.", "INTERNAL_ERROR")

                elif msg.type == WSMsgType.ERROR:
                    logger.error(f"세션 {session.session_id} WebSocket 오류: {ws.exception()}")

        except asyncio.CancelledError:
            logger.info(f"세션 {session.session_id} WebSocket 핸들러 취소됨")
        finally:
            if self.game_engine:
                await self.game_engine.remove_session(session.session_id)
            if session.is_authenticated:
                await self._publish(EventType.PLAYER_LOGOUT, session)
            await self._publish(EventType.PLAYER_DISCONNECTED, session)
            await self.session_manager.remove_session(session.session_id, "연결 종료")

        return ws

    async def _publish(self, event_type: EventType, session: Session) -> None:
        if self.game_engine:
            await self.game_engine.publish(event_type, session.session_id, session.account,
                                           transport="web")

    async def handle_authentication(self, session: Session, data: dict) -> None:
        """
        login / register 처리. 회원가입은 바로 로그인까지 진행

        Raises:
            AuthenticationError: 입력 누락, 인증 실패, 계정 생성 실패
        """
        command = data.get("command")
        username = data.get("username")
        password = data.get("password")

        if not all([command, username, password]):
            raise AuthenticationError("명령, 사용자 이름, 비밀번호는 필수입니다.")

        if command == "register":
            logger.info(f"회원가입 시도: 사용자명='{username}', IP={session.ip_address}")
            account = await self.account_manager.create_account(username, password, data.get("locale"))
            message_key = "auth.register_success"
        elif command == "login":
            logger.info(f"로그인 시도: 사용자명='{username}', IP={session.ip_address}")
            account = await self.account_manager.authenticate(username, password)
            message_key = "auth.login_success"
        else:
            raise AuthenticationError("알 수 없는 인증 명령입니다.")

        old_session_id = self.session_manager.authenticate_session(session.session_id, account)
        if old_session_id:
            if self.game_engine:
                await self.game_engine.remove_session(old_session_id)
            await self.session_manager.remove_session(old_session_id, "새 세션으로 대체됨")

        await self._publish(EventType.PLAYER_LOGIN, session)
        await session.send_success(
            get_message(message_key, session.locale, username=account.username),
            {
                "action": "login_success",
                "username": account.username,
                "session_id": session.session_id,
                "locale": session.locale,
                "has_save": await self.game_engine.has_saved_game(account),
            }
        )
        logger.info(f"로그인 성공: 사용자명='{username}', 계정ID={account.id}")

    async def handle_game_command(self, session: Session, data: dict) -> None:
        """인증된 사용자의 게임 명령 처리"""
        command = data.get("command")

        if command == "new_game":
            console = await self.game_engine.start_new_game(session.session_id, session.account)
            await session.send_frame(console, RunState.AWAITING_INPUT.value)

        elif command == "continue":
            try:
                console = await self.game_engine.continue_game(session.session_id, session.account)
            except SaveGameError:
                await session.send_error(get_message("game.load_failed", session.locale), "LOAD_FAILED")
                return
            if console is None:
                await session.send_error(get_message("game.no_save", session.locale), "NO_SAVE")
                return
            await session.send_frame(console, RunState.AWAITING_INPUT.value)

        elif command == "key":
            await self.handle_key(session, data.get("key", ""))

        elif command == "set_locale":
            await self.handle_set_locale(session, data.get("locale", ""))

        else:
            await session.send_error(f"알 수 없는 명령입니다: {command}", "UNKNOWN_COMMAND")

    async def handle_set_locale(self, session: Session, locale: str) -> None:
        """
        선호 언어 변경. 진행 중인 게임의 로그도 새 언어로 이어짐

        Raises:
            AuthenticationError: 지원하지 않는 언어인 경우
        """
        session.account = await self.account_manager.set_locale(session.account, locale)
        session.locale = session.account.preferred_locale
        self.game_engine.update_account(session.session_id, session.account)

        await session.send_success(
            get_message("settings.locale_changed", session.locale),
            {"action": "locale_changed", "locale": session.locale},
        )

    async def handle_key(self, session: Session, browser_key: str) -> None:
        if self.game_engine.get_game(session.session_id) is None:
            await session.send_error("진행 중인 게임이 없습니다.", "NO_GAME")
            return

        key = VirtualKeyCode.from_browser_key(browser_key)
        if key is None:
            return

        result = await self.game_engine.handle_key(session.session_id, key)
        await session.send_frame(result.console, result.run_state.value)

        if result.finished:
            died = result.run_state == RunState.GAME_OVER
            await session.send_message({
                "type": "game_end",
                "reason": "died" if died else "saved",
                "message": get_message("game.over" if died else "game.saved", session.locale),
                "has_save": not died,
            })

    async def start(self) -> None:
        """웹 서버 시작"""
        logger.info(f"웹 서버 시작 중... http://{self.host}:{self.port}")

        await self.session_manager.start_cleanup_task()

        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, self.host, self.port)
        await self.site.start()

        self._is_running = True
        logger.info("웹 서버가 성공적으로 시작되었습니다.")

    async def stop(self) -> None:
        """웹 서버 중지"""
        if not self.runner:
            return

        logger.info("웹 서버 종료 중...")
        for session_id in list(self.session_manager.get_all_sessions().keys()):
            if self.game_engine:
                await self.game_engine.remove_session(session_id)
            await self.session_manager.remove_session(session_id, "서버 종료")

        await self.session_manager.stop_cleanup_task()
        await self.runner.cleanup()
        self._is_running = False
        logger.info("웹 서버가 성공적으로 종료되었습니다.")

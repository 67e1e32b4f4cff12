# -*- coding: utf-8 -*-
"""WebSocket 세션 관리"""

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from aiohttp import web

from ..game.console import Console
from ..game.models import Account
from .frame_renderer import render_rows

logger = logging.getLogger(__name__)


class Session:
    """브라우저 WebSocket 세션"""

    def __init__(self, websocket: web.WebSocketResponse, session_id: Optional[str] = None):
        self.session_id: str = session_id or str(uuid.uuid4())
        self.websocket: web.WebSocketResponse = websocket
        self.account: Optional[Account] = None
        self.is_authenticated: bool = False
        self.locale: str = "en"
        self.created_at: datetime = datetime.now()
        self.last_activity: datetime = datetime.now()
        self.ip_address: Optional[str] = None
        self.user_agent: Optional[str] = None

        logger.info(f"새 세션 생성: {self.session_id}")

    def authenticate(self, account: Account) -> None:
        """세션에 인증된 계정 설정"""
        self.account = account
        self.is_authenticated = True
        self.locale = account.preferred_locale
        self.update_activity()
        logger.info(f"세션 {self.session_id}에 계정 '{account.username}' 인증 완료")

    def update_activity(self) -> None:
        self.last_activity = datetime.now()

    async def send_message(self, message: Dict[str, Any]) -> bool:
        """
        클라이언트에게 JSON 메시지 전송

        Returns:
            bool: 전송 성공 여부
        """
        if self.websocket.closed:
            logger.warning(f"세션 {self.session_id}: WebSocket이 이미 닫혀있음")
            return False

        try:
            await self.websocket.send_json(message)
            return True
        except ConnectionError as e:
            logger.error(f"세션 {self.session_id} 메시지 전송 실패: {e}")
            return False

    async def send_error(self, error_message: str, error_code: Optional[str] = None) -> bool:
        error_data = {
            "error": error_message,
            "timestamp": datetime.now().isoformat()
        }
        if error_code:
            error_data["error_code"] = error_code
        return await self.send_message(error_data)

    async def send_success(self, message: str, data: Optional[Dict[str, Any]] = None) -> bool:
        """
        성공 메시지 전송

        Args:
            message: 성공 메시지
            data: 추가 데이터 (action 등)
        """
        success_data = {
            "status": "success",
            "message": message,
            "timestamp": datetime.now().isoformat()
        }
        if data:
            success_data.update(data)
        return await self.send_message(success_data)

    async def send_frame(self, console: Console, run_state: str) -> bool:
        """게임 화면 한 장 전송"""
        return await self.send_message({
            "type": "frame",
            "width": console.width,
            "height": console.height,
            "run_state": run_state,
            "rows": render_rows(console),
        })

    async def close(self, code: int = 1000, message: str = "Session closed") -> None:
        if self.websocket.closed:
            return
        try:
            await self.websocket.close(code=code, message=message.encode())
            logger.info(f"세션 {self.session_id} 연결 종료: {message}")
        except ConnectionError as e:
            logger.error(f"세션 {self.session_id} 종료 중 오류: {e}")

    def is_active(self, timeout_seconds: int = 600) -> bool:
        if self.websocket.closed:
            return False
        inactive_time = (datetime.now() - self.last_activity).total_seconds()
        return inactive_time < timeout_seconds

    def __str__(self) -> str:
        account_info = f"({self.account.username})" if self.account else "(미인증)"
        return f"Session[{self.session_id[:8]}...]{account_info}"


class SessionManager:
    """WebSocket 세션들을 관리하는 매니저 클래스"""

    def __init__(self, timeout_seconds: int = 600):
        self.sessions: Dict[str, Session] = {}
        self.account_sessions: Dict[str, str] = {}  # account_id -> session_id 매핑
        self.timeout_seconds = timeout_seconds
        self._cleanup_task: Optional[asyncio.Task] = None
        self._cleanup_interval: int = 60

        logger.info("SessionManager 초기화 완료")

    async def start_cleanup_task(self) -> None:
        """비활성 세션 정리 작업 시작"""
        if self._cleanup_task is None or self._cleanup_task.done():
            self._cleanup_task = asyncio.create_task(self._cleanup_inactive_sessions())
            logger.info("세션 정리 작업 시작")

    async def stop_cleanup_task(self) -> None:
        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            logger.info("세션 정리 작업 중지")

    def add_session(self, websocket: web.WebSocketResponse, request: web.Request) -> Session:
        """새 세션 추가"""
        session = Session(websocket)
        session.ip_address = request.remote
        session.user_agent = request.headers.get('User-Agent')

        self.sessions[session.session_id] = session
        logger.info(f"새 세션 추가: {session.session_id} (총 {len(self.sessions)}개)")
        return session

    def authenticate_session(self, session_id: str, account: Account) -> Optional[str]:
        """
        세션에 계정 인증

        Returns:
            Optional[str]: 같은 계정으로 이미 접속해 있던 세션 ID (호출자가 정리)
        """
        session = self.sessions.get(session_id)
        if not session:
            logger.warning(f"세션 {session_id}를 찾을 수 없음")
            return None

        old_session_id = self.account_sessions.get(account.id)
        session.authenticate(account)
        self.account_sessions[account.id] = session_id

        if old_session_id and old_session_id != session_id and old_session_id in self.sessions:
            return old_session_id
        return None

    async def remove_session(self, session_id: str, reason: str = "세션 종료") -> bool:
        """세션 제거"""
        session = self.sessions.pop(session_id, None)
        if not session:
            return False

        if session.account and self.account_sessions.get(session.account.id) == session_id:
            del self.account_sessions[session.account.id]

        await session.close(message=reason)
        logger.info(f"세션 {session_id} 제거: {reason} (남은 세션: {len(self.sessions)}개)")
        return True

    def get_session(self, session_id: str) -> Optional[Session]:
        return self.sessions.get(session_id)

    def get_all_sessions(self) -> Dict[str, Session]:
        return self.sessions.copy()

    def get_authenticated_sessions(self) -> Dict[str, Session]:
        return {sid: session for sid, session in self.sessions.items()
                if session.is_authenticated}

    async def broadcast_to_all(self, message: Dict[str, Any]) -> int:
        """모든 세션에 메시지 전송. 성공한 세션 수 반환"""
        success_count = 0
        for session in list(self.sessions.values()):
            if await session.send_message(message):
                success_count += 1
        return success_count

    async def _cleanup_inactive_sessions(self) -> None:
        """비활성 세션 정리 (백그라운드 작업)"""
        while True:
            try:
                await asyncio.sleep(self._cleanup_interval)

                inactive_sessions = [
                    session_id for session_id, session in self.sessions.items()
                    if not session.is_active(self.timeout_seconds)
                ]
                for session_id in inactive_sessions:
                    await self.remove_session(session_id, "비활성 상태로 인한 정리")

                if inactive_sessions:
                    logger.info(f"{len(inactive_sessions)}개 비활성 세션 정리 완료")

            except asyncio.CancelledError:
                logger.info("세션 정리 작업 취소됨")
                break
            except Exception as e:
                logger.error(f"세션 정리 중 오류: {e}")

    def get_stats(self) -> Dict[str, Any]:
        total_sessions = len(self.sessions)
        return {
            "total_sessions": total_sessions,
            "authenticated_sessions": len(self.get_authenticated_sessions()),
            "cleanup_interval": self._cleanup_interval,
        }

# -*- coding: utf-8 -*-
"""게임 엔진 코어 클래스

세션마다 GameState 하나와 콘솔 하나를 두고 새 게임/이어하기/저장/사망 흐름을 처리합니다.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..config import Config
from ..game.console import Console, VirtualKeyCode
from ..game.models import Account
from ..game.repositories import SavedGameRepository
from ..game.serialization import load_world, save_world
from ..game.state import GameState
from ..game.types import RunState
from ..utils.exceptions import SaveGameError
from .event_bus import Event, EventBus, EventType, get_event_bus

logger = logging.getLogger(__name__)


@dataclass
class ActiveGame:
    """세션 하나가 진행 중인 게임"""
    session_id: str
    account: Account
    state: GameState
    console: Console = field(default_factory=Console)
    started_at: datetime = field(default_factory=datetime.now)


@dataclass
class KeyResult:
    """handle_key() 결과. finished가 True이면 게임이 끝나 메뉴로 돌아감"""
    console: Console
    run_state: RunState
    finished: bool = False


class GameEngine:
    """로그라이크 게임 엔진"""

    def __init__(self,
                 saved_game_repo: SavedGameRepository,
                 event_bus: Optional[EventBus] = None,
                 seed: Optional[int] = None):
        """
        GameEngine 초기화

        Args:
            saved_game_repo: 저장 게임 리포지토리
            event_bus: 이벤트 버스 (None이면 전역 인스턴스 사용)
            seed: 새 게임 난수 시드 (None이면 Config.GAME_SEED, 그것도 없으면 무작위)
        """
        self.saved_game_repo = saved_game_repo
        self.event_bus = event_bus or get_event_bus()
        self.seed = seed if seed is not None else Config.GAME_SEED

        self._games: Dict[str, ActiveGame] = {}
        self._account_sessions: Dict[str, str] = {}  # account_id -> session_id (저장 슬롯이 계정당 하나)
        self._running = False
        self._start_time: Optional[datetime] = None
        self._stats: Dict[str, int] = {
            "connections": 0,
            "logins": 0,
            "games_started": 0,
            "games_loaded": 0,
            "games_saved": 0,
            "deaths": 0,
        }

        self._setup_event_subscriptions()
        logger.info("GameEngine 초기화 완료")

    def _setup_event_subscriptions(self) -> None:
        counters = {
            EventType.PLAYER_CONNECTED: "connections",
            EventType.PLAYER_LOGIN: "logins",
            EventType.GAME_STARTED: "games_started",
            EventType.GAME_LOADED: "games_loaded",
            EventType.GAME_SAVED: "games_saved",
            EventType.PLAYER_DIED: "deaths",
        }
        for event_type, counter in counters.items():
            self.event_bus.subscribe(event_type, self._make_counter(counter))

    def _make_counter(self, counter: str):
        def count_event(event: Event) -> None:
            self._stats[counter] += 1
        count_event.__name__ = f"count_{counter}"
        return count_event

    # === 엔진 수명 ===

    async def start(self) -> None:
        if self._running:
            logger.warning("GameEngine이 이미 실행 중입니다")
            return

        if not self.event_bus.is_running:
            await self.event_bus.start()

        self._running = True
        self._start_time = datetime.now()
        logger.info("GameEngine 시작 완료")

    async def stop(self) -> None:
        """엔진 중지. 진행 중인 게임은 모두 저장"""
        if not self._running:
            return

        logger.info("GameEngine 중지 중...")
        for session_id in list(self._games.keys()):
            await self.remove_session(session_id)

        self._running = False
        logger.info("GameEngine 중지 완료")

    def is_running(self) -> bool:
        return self._running

    # === 게임 흐름 ===

    async def publish(self, event_type: EventType, session_id: str,
                      account: Optional[Account] = None, **data: Any) -> None:
        await self.event_bus.publish(Event(
            event_type=event_type,
            source=session_id,
            account_id=account.id if account else None,
            data=data,
        ))

    def get_game(self, session_id: str) -> Optional[ActiveGame]:
        return self._games.get(session_id)

    async def has_saved_game(self, account: Account) -> bool:
        return await self.saved_game_repo.has_saved_game(account.id)

    def get_game_for_account(self, account_id: str) -> Optional[ActiveGame]:
        session_id = self._account_sessions.get(account_id)
        return self._games.get(session_id) if session_id else None

    async def _release(self, session_id: str, account: Account) -> None:
        """
        세션이나 계정에 이미 진행 중인 게임이 있으면 저장하고 닫음

        Telnet과 웹은 세션 목록이 따로라 같은 계정이 두 곳에서 게임을 열 수 있음.
        저장 슬롯은 계정당 하나이므로 살아 있는 게임도 계정당 하나만 둠.
        """
        for old_session_id in (session_id, self._account_sessions.get(account.id)):
            if old_session_id and old_session_id in self._games:
                logger.info(f"진행 중인 게임 정리 후 교체: {account.username} ({old_session_id})")
                await self.remove_session(old_session_id)

    def _register(self, game: ActiveGame) -> None:
        self._games[game.session_id] = game
        self._account_sessions[game.account.id] = game.session_id

    def _unregister(self, game: ActiveGame) -> None:
        self._games.pop(game.session_id, None)
        if self._account_sessions.get(game.account.id) == game.session_id:
            del self._account_sessions[game.account.id]

    async def start_new_game(self, session_id: str, account: Account) -> Console:
        """새 던전 생성 후 첫 화면 반환. 같은 계정의 기존 게임은 먼저 저장됨"""
        await self._release(session_id, account)

        state = GameState.new_game(seed=self.seed, locale=account.preferred_locale)
        game = ActiveGame(session_id=session_id, account=account, state=state)
        self._register(game)

        state.advance(game.console)
        await self.publish(EventType.GAME_STARTED, session_id, account)
        logger.info(f"새 게임 시작: {account.username} ({session_id})")
        return game.console

    async def continue_game(self, session_id: str, account: Account) -> Optional[Console]:
        """
        저장된 게임을 불러옴. 불러온 저장은 즉시 삭제됨

        같은 계정이 다른 세션에서 게임 중이면 그 게임을 저장한 뒤 불러오므로
        진행 상황을 이 세션에서 그대로 이어감.

        Returns:
            Optional[Console]: 첫 화면 (저장이 없으면 None)

        Raises:
            SaveGameError: 저장 데이터가 손상된 경우 (손상된 저장은 삭제됨)
        """
        await self._release(session_id, account)

        saved = await self.saved_game_repo.get_by_account_id(account.id)
        if saved is None:
            return None

        await self.saved_game_repo.delete_for_account(account.id)

        try:
            world = load_world(saved.data)
        except SaveGameError:
            logger.error(f"손상된 저장 게임 삭제: {account.username}")
            raise

        world.locale = account.preferred_locale
        game = ActiveGame(session_id=session_id, account=account, state=GameState(world))
        self._register(game)

        game.state.advance(game.console)
        await self.publish(EventType.GAME_LOADED, session_id, account)
        logger.info(f"저장된 게임 불러오기: {account.username} ({session_id})")
        return game.console

    async def handle_key(self, session_id: str, key: Optional[VirtualKeyCode]) -> KeyResult:
        """
        키 하나를 게임에 전달하고 결과 화면 반환

        Raises:
            KeyError: 세션에 진행 중인 게임이 없는 경우
        """
        game = self._games[session_id]
        run_state = game.state.advance(game.console, key)

        if run_state == RunState.SAVE_GAME:
            await self._save_and_close(game)
            return KeyResult(game.console, run_state, finished=True)

        if run_state == RunState.GAME_OVER:
            await self._finish_dead_game(game)
            return KeyResult(game.console, run_state, finished=True)

        return KeyResult(game.console, run_state)

    async def _save_and_close(self, game: ActiveGame) -> None:
        data = save_world(game.state.world)
        await self.saved_game_repo.save_for_account(game.account.id, data)
        self._unregister(game)
        await self.publish(EventType.GAME_SAVED, game.session_id, game.account)

    async def _finish_dead_game(self, game: ActiveGame) -> None:
        await self.saved_game_repo.delete_for_account(game.account.id)
        self._unregister(game)
        await self.publish(EventType.PLAYER_DIED, game.session_id, game.account)
        logger.info(f"플레이어 사망: {game.account.username}")

    async def remove_session(self, session_id: str) -> None:
        """세션 종료(또는 게임 교체) 시 호출. 살아 있는 게임은 저장해 둠"""
        game = self._games.get(session_id)
        if game is None:
            return

        if game.state.run_state == RunState.GAME_OVER:
            await self._finish_dead_game(game)
            return

        try:
            await self._save_and_close(game)
            logger.info(f"게임 닫으며 저장: {game.account.username} ({session_id})")
        except Exception as e:
            logger.error(f"게임 저장 실패 ({session_id}): {e}", exc_info=True)
            self._unregister(game)

    def update_account(self, session_id: str, account: Account) -> None:
        """계정 정보(선호 언어 등)가 바뀌면 진행 중인 게임에도 반영"""
        game = self._games.get(session_id)
        if game is None:
            return
        game.account = account
        game.state.world.locale = account.preferred_locale

    # === 통계 ===

    def get_stats(self) -> Dict[str, Any]:
        uptime = 0.0
        if self._start_time:
            uptime = (datetime.now() - self._start_time).total_seconds()

        return {
            "running": self._running,
            "uptime_seconds": uptime,
            "active_games": len(self._games),
            **self._stats,
        }

# -*- coding: utf-8 -*-
"""이벤트 버스 시스템

세션 접속, 게임 시작/저장, 플레이어 사망 같은 서버 수준 사건을 비동기 큐로 전달합니다.
게임 내부의 턴 처리는 이벤트 버스를 거치지 않습니다.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class EventType(Enum):
    """이벤트 타입 정의"""
    # 접속/인증
    PLAYER_CONNECTED = "player_connected"
    PLAYER_DISCONNECTED = "player_disconnected"
    PLAYER_LOGIN = "player_login"
    PLAYER_LOGOUT = "player_logout"

    # 게임 진행
    GAME_STARTED = "game_started"
    GAME_LOADED = "game_loaded"
    GAME_SAVED = "game_saved"
    PLAYER_DIED = "player_died"

    # 시스템 이벤트
    SERVER_STARTED = "server_started"
    SERVER_STOPPING = "server_stopping"
    SERVER_STOPPED = "server_stopped"

    CUSTOM = "custom"


@dataclass
class Event:
    """이벤트 데이터 클래스"""
    event_type: EventType
    source: str  # 이벤트 발생원 (session_id 등)
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    account_id: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.event_type, str):
            original_type = self.event_type
            try:
                self.event_type = EventType(original_type)
            except ValueError:
                self.event_type = EventType.CUSTOM
                self.data["original_type"] = original_type


EventCallback = Callable[[Event], Any]


class EventBus:
    """이벤트 버스 - 이벤트 발행/구독 시스템"""

    def __init__(self, max_history: int = 1000):
        self._subscribers: Dict[EventType, List[EventCallback]] = {}
        self._event_history: List[Event] = []
        self._max_history: int = max_history
        self._running: bool = False
        self._event_queue: asyncio.Queue = asyncio.Queue()
        self._processor_task: Optional[asyncio.Task] = None

        logger.info("EventBus 초기화 완료")

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """이벤트 버스 시작"""
        if self._running:
            logger.warning("EventBus가 이미 실행 중입니다")
            return

        self._running = True
        self._processor_task = asyncio.create_task(self._process_events())
        logger.info("EventBus 시작됨")

        await self.publish(Event(event_type=EventType.SERVER_STARTED, source="event_bus"))

    async def stop(self) -> None:
        """이벤트 버스 중지. 큐에 남은 이벤트를 먼저 처리함"""
        if not self._running:
            return

        logger.info("EventBus 중지 중...")
        await self.publish(Event(event_type=EventType.SERVER_STOPPING, source="event_bus"))
        await self.wait_idle()

        self._running = False

        if self._processor_task and not self._processor_task.done():
            self._processor_task.cancel()
            try:
                await self._processor_task
            except asyncio.CancelledError:
                pass

        # 큐가 멈췄으므로 직접 전달
        await self._handle_event(Event(event_type=EventType.SERVER_STOPPED, source="event_bus"))
        logger.info("EventBus 중지 완료")

    def subscribe(self, event_type: EventType, callback: EventCallback) -> None:
        """
        이벤트 구독

        Args:
            event_type: 구독할 이벤트 타입
            callback: 이벤트 발생 시 호출될 콜백 (동기/비동기 모두 가능)
        """
        self._subscribers.setdefault(event_type, []).append(callback)
        logger.debug(f"이벤트 구독 등록: {event_type.value} -> {getattr(callback, '__name__', callback)}")

    def unsubscribe(self, event_type: EventType, callback: EventCallback) -> bool:
        """이벤트 구독 해제. 등록되어 있지 않았으면 False"""
        callbacks = self._subscribers.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)
            return True
        return False

    async def publish(self, event: Event) -> None:
        """이벤트 발행. 중지 상태에서는 버림"""
        if not self._running:
            logger.warning(f"EventBus가 중지된 상태에서 이벤트 발행 시도: {event.event_type.value}")
            return

        await self._event_queue.put(event)
        logger.debug(f"이벤트 발행: {event.event_type.value} (ID: {event.event_id})")

    async def wait_idle(self) -> None:
        """큐에 쌓인 이벤트가 모두 처리될 때까지 대기"""
        if self._running:
            await self._event_queue.join()

    async def _process_events(self) -> None:
        """이벤트 처리 루프 (백그라운드 작업)"""
        logger.info("이벤트 처리 루프 시작")

        try:
            while self._running:
                event = await self._event_queue.get()
                try:
                    await self._handle_event(event)
                except Exception as e:
                    logger.error(f"이벤트 처리 중 오류: {e}", exc_info=True)
                finally:
                    self._event_queue.task_done()

        except asyncio.CancelledError:
            logger.info("이벤트 처리 루프 취소됨")
        finally:
            logger.info("이벤트 처리 루프 종료")

    async def _handle_event(self, event: Event) -> None:
        """히스토리에 기록하고 구독자에게 전달. 콜백 오류는 다른 구독자에게 영향을 주지 않음"""
        self._add_to_history(event)

        subscribers = list(self._subscribers.get(event.event_type, []))
        if not subscribers:
            logger.debug(f"구독자가 없는 이벤트: {event.event_type.value}")
            return

        for callback in subscribers:
            try:
                result = callback(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error(
                    f"이벤트 콜백 실행 중 오류 ({getattr(callback, '__name__', callback)}): {e}",
                    exc_info=True
                )

    def _add_to_history(self, event: Event) -> None:
        self._event_history.append(event)
        if len(self._event_history) > self._max_history:
            self._event_history = self._event_history[-self._max_history:]

    def get_subscribers(self, event_type: EventType) -> List[EventCallback]:
        return list(self._subscribers.get(event_type, []))

    def get_event_history(self, event_type: Optional[EventType] = None,
                          limit: int = 100) -> List[Event]:
        """
        이벤트 히스토리 조회

        Args:
            event_type: 특정 이벤트 타입만 조회 (None이면 전체)
            limit: 최대 반환 개수 (0 이하이면 전체)
        """
        history = self._event_history
        if event_type:
            history = [e for e in history if e.event_type == event_type]
        return history[-limit:] if limit > 0 else list(history)

    def get_stats(self) -> Dict[str, Any]:
        """이벤트 버스 통계 정보 반환"""
        event_type_counts: Dict[str, int] = {}
        for event in self._event_history:
            key = event.event_type.value
            event_type_counts[key] = event_type_counts.get(key, 0) + 1

        return {
            "running": self._running,
            "total_subscribers": sum(len(callbacks) for callbacks in self._subscribers.values()),
            "event_history_size": len(self._event_history),
            "max_history_size": self._max_history,
            "event_type_counts": event_type_counts,
            "queue_size": self._event_queue.qsize(),
        }


# 전역 이벤트 버스 인스턴스
_global_event_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """전역 이벤트 버스 인스턴스 반환"""
    global _global_event_bus
    if _global_event_bus is None:
        _global_event_bus = EventBus()
    return _global_event_bus


async def initialize_event_bus() -> EventBus:
    """전역 이벤트 버스 초기화 및 시작"""
    event_bus = get_event_bus()
    if not event_bus.is_running:
        await event_bus.start()
    return event_bus


async def shutdown_event_bus() -> None:
    """전역 이벤트 버스 종료"""
    global _global_event_bus
    if _global_event_bus and _global_event_bus.is_running:
        await _global_event_bus.stop()
    _global_event_bus = None

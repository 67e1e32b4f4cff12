# -*- coding: utf-8 -*-
"""이벤트 버스 테스트"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.rogue_engine.core.event_bus import Event, EventBus, EventType


@pytest.fixture
async def event_bus():
    bus = EventBus(max_history=10)
    await bus.start()
    try:
        yield bus
    finally:
        await bus.stop()


def test_event_from_string_type():
    """문자열 이벤트 타입 변환 테스트"""
    assert Event(event_type="game_saved", source="s1").event_type == EventType.GAME_SAVED

    custom = Event(event_type="something_else", source="s1")
    assert custom.event_type == EventType.CUSTOM
    assert custom.data["original_type"] == "something_else"


@pytest.mark.asyncio
class TestEventBus:

    async def test_sync_and_async_subscribers(self, event_bus: EventBus):
        sync_callback = MagicMock()
        async_callback = AsyncMock()
        event_bus.subscribe(EventType.GAME_STARTED, sync_callback)
        event_bus.subscribe(EventType.GAME_STARTED, async_callback)

        event = Event(event_type=EventType.GAME_STARTED, source="session-1")
        await event_bus.publish(event)
        await event_bus.wait_idle()

        sync_callback.assert_called_once_with(event)
        async_callback.assert_awaited_once_with(event)

    async def test_failing_callback_does_not_stop_others(self, event_bus: EventBus):
        broken = MagicMock(side_effect=RuntimeError("boom"))
        working = MagicMock()
        event_bus.subscribe(EventType.PLAYER_DIED, broken)
        event_bus.subscribe(EventType.PLAYER_DIED, working)

        await event_bus.publish(Event(event_type=EventType.PLAYER_DIED, source="s"))
        await event_bus.wait_idle()

        working.assert_called_once()

    async def test_unsubscribe(self, event_bus: EventBus):
        callback = MagicMock()
        event_bus.subscribe(EventType.GAME_SAVED, callback)

        assert event_bus.unsubscribe(EventType.GAME_SAVED, callback)
        assert not event_bus.unsubscribe(EventType.GAME_SAVED, callback)

        await event_bus.publish(Event(event_type=EventType.GAME_SAVED, source="s"))
        await event_bus.wait_idle()
        callback.assert_not_called()

    async def test_history_is_bounded(self, event_bus: EventBus):
        for i in range(15):
            await event_bus.publish(Event(event_type=EventType.CUSTOM, source=str(i)))
        await event_bus.wait_idle()

        history = event_bus.get_event_history(limit=0)
        assert len(history) == 10
        assert history[-1].source == "14"
        assert len(event_bus.get_event_history(EventType.CUSTOM, limit=3)) == 3

    async def test_stats(self, event_bus: EventBus):
        event_bus.subscribe(EventType.PLAYER_LOGIN, MagicMock())
        await event_bus.publish(Event(event_type=EventType.PLAYER_LOGIN, source="s"))
        await event_bus.wait_idle()

        stats = event_bus.get_stats()
        assert stats["running"]
        assert stats["total_subscribers"] == 1
        assert stats["event_type_counts"]["player_login"] == 1
        assert stats["event_type_counts"]["server_started"] == 1


@pytest.mark.asyncio
async def test_stop_drains_queue_and_notifies():
    """중지 시 남은 이벤트 처리 및 중지 이벤트 전달 테스트"""
    bus = EventBus()
    stopped = MagicMock()
    saved = MagicMock()
    bus.subscribe(EventType.SERVER_STOPPED, stopped)
    bus.subscribe(EventType.GAME_SAVED, saved)

    await bus.start()
    await bus.publish(Event(event_type=EventType.GAME_SAVED, source="s"))
    await bus.stop()

    assert not bus.is_running
    saved.assert_called_once()
    stopped.assert_called_once()


@pytest.mark.asyncio
async def test_publish_when_stopped_is_dropped():
    bus = EventBus()
    callback = MagicMock()
    bus.subscribe(EventType.GAME_SAVED, callback)

    await bus.publish(Event(event_type=EventType.GAME_SAVED, source="s"))

    assert bus.get_event_history() == []
    callback.assert_not_called()

"""
핵심 엔진 모듈
"""

from .event_bus import Event, EventBus, EventType

__all__ = ['Event', 'EventBus', 'EventType']

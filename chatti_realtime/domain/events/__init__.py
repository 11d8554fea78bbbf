"""
Domain Events

모든 Domain Event의 기본 클래스 및 이벤트 정의
"""

from .base import DomainEvent
from .message_events import MessageEvent, MessageCreated, MessageUpdated, MessageDeleted

__all__ = [
    'DomainEvent',
    'MessageEvent',
    'MessageCreated',
    'MessageUpdated',
    'MessageDeleted',
]

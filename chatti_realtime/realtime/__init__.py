"""
실시간 Presence / 이벤트 Fan-out 모듈

FastAPI WebSocket 위에서 사용자 접속 상태와 메시지 이벤트를 전달합니다.

주요 구성 요소:
- registry: 사용자별 활성 연결 수
- presence: 온라인/오프라인 전환 브로드캐스트와 last-seen
- rooms: 사용자 룸 구독과 이벤트 전달
- fanout: CRUD 계층이 호출하는 메시지 이벤트 인터페이스
- connection_manager: WebSocket 연결 관리
- handlers: 클라이언트 프레임 처리
"""

from .registry import ConnectionRegistry, PresenceTransition
from .connection_manager import Connection, ConnectionManager
from .presence import PresenceBroadcaster
from .rooms import RoomRouter
from .fanout import MessageEventNotifier, NoopMessageEventNotifier, RealtimeMessageEventNotifier
from .handlers import WebSocketMessageHandler
from .hub import RealtimeHub, build_realtime_hub

__all__ = [
    "ConnectionRegistry",
    "PresenceTransition",
    "Connection",
    "ConnectionManager",
    "PresenceBroadcaster",
    "RoomRouter",
    "MessageEventNotifier",
    "NoopMessageEventNotifier",
    "RealtimeMessageEventNotifier",
    "WebSocketMessageHandler",
    "RealtimeHub",
    "build_realtime_hub",
]

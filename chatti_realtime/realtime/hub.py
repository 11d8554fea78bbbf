from dataclasses import dataclass
from typing import Optional

from chatti_realtime.core.config import Settings
from chatti_realtime.realtime.auth import AuthProvider, JWTAuthProvider
from chatti_realtime.realtime.connection_manager import ConnectionManager
from chatti_realtime.realtime.fanout import RealtimeMessageEventNotifier
from chatti_realtime.realtime.handlers import WebSocketMessageHandler
from chatti_realtime.realtime.presence import PresenceBroadcaster
from chatti_realtime.realtime.registry import ConnectionRegistry
from chatti_realtime.realtime.rooms import RoomRouter
from chatti_realtime.utils.time_utils import Clock, utc_now


@dataclass
class RealtimeHub:
    """프로세스당 하나만 생성되는 실시간 계층 구성 요소 묶음"""
    transport: ConnectionManager
    registry: ConnectionRegistry
    presence: PresenceBroadcaster
    rooms: RoomRouter
    notifier: RealtimeMessageEventNotifier
    handler: WebSocketMessageHandler
    auth_provider: Optional[AuthProvider] = None


def build_realtime_hub(
    config: Settings,
    clock: Clock = utc_now,
    auth_provider: Optional[AuthProvider] = None,
) -> RealtimeHub:
    """설정으로부터 실시간 계층을 구성합니다."""
    transport = ConnectionManager()
    registry = ConnectionRegistry()
    presence = PresenceBroadcaster(
        registry,
        transport,
        clock=clock,
        last_seen_max_entries=config.last_seen_max_entries,
    )
    rooms = RoomRouter(transport, presence)

    if auth_provider is None and config.ws_auth_required:
        auth_provider = JWTAuthProvider(config.secret_key, config.algorithm)

    return RealtimeHub(
        transport=transport,
        registry=registry,
        presence=presence,
        rooms=rooms,
        notifier=RealtimeMessageEventNotifier(rooms),
        handler=WebSocketMessageHandler(rooms, transport),
        auth_provider=auth_provider,
    )

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from fastapi import WebSocket

from chatti_realtime.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(eq=False)
class Connection:
    """전송 계층의 WebSocket 세션 하나"""
    websocket: WebSocket
    connection_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    # join 으로 announce 한 사용자 ID (없으면 아직 join 전)
    user_id: Optional[str] = None
    # 토큰으로 인증된 사용자 ID (인증 비활성화 시 None)
    authenticated_user_id: Optional[str] = None


class ConnectionManager:
    """
    WebSocket 연결과 사용자 룸 구독을 관리합니다.

    룸은 사용자 ID 하나에 대응하며, 그 사용자로 join 한 모든 연결(다중 기기)이
    구독자가 됩니다.
    """

    def __init__(self):
        # 연결별 세션: {connection_id: Connection}
        self.connections: Dict[str, Connection] = {}
        # 사용자 룸별 구독 연결: {user_id: {connection_id}}
        self.rooms: Dict[str, Set[str]] = {}
        # close_all 이후에는 종료 중 (readiness 실패)
        self.closing = False

    def register(self, websocket: WebSocket, authenticated_user_id: Optional[str] = None) -> Connection:
        """수락된 WebSocket 을 연결로 등록합니다."""
        connection = Connection(websocket=websocket, authenticated_user_id=authenticated_user_id)
        self.connections[connection.connection_id] = connection
        logger.debug(f"Connection {connection.connection_id} registered")
        return connection

    def unregister(self, connection: Connection):
        """연결 정보를 제거합니다. 룸 구독은 호출 전에 해제되어 있어야 합니다."""
        self.connections.pop(connection.connection_id, None)
        logger.debug(f"Connection {connection.connection_id} unregistered")

    def subscribe(self, connection: Connection, user_id: str):
        """연결을 사용자 룸에 추가합니다. 이미 구독 중이면 변화 없음."""
        self.rooms.setdefault(user_id, set()).add(connection.connection_id)

    def unsubscribe(self, connection: Connection, user_id: str) -> bool:
        """연결을 사용자 룸에서 제거합니다. 구독 중이 아니었으면 False."""
        members = self.rooms.get(user_id)
        if not members or connection.connection_id not in members:
            return False

        members.discard(connection.connection_id)

        # 룸에 연결이 없으면 룸 자체를 제거
        if not members:
            del self.rooms[user_id]
        return True

    def get_room_connections(self, user_id: str) -> List[Connection]:
        """사용자 룸을 구독 중인 연결 목록"""
        return [
            self.connections[connection_id]
            for connection_id in self.rooms.get(user_id, ())
            if connection_id in self.connections
        ]

    def get_room_size(self, user_id: str) -> int:
        return len(self.rooms.get(user_id, ()))

    def get_connection_count(self) -> int:
        return len(self.connections)

    async def send_json(self, connection: Connection, data: Dict[str, Any]) -> bool:
        """
        특정 연결에 JSON 데이터를 전송합니다.

        전송 실패는 로그만 남기고 False 를 반환합니다. 끊어진 연결의 정리는
        해당 연결의 수신 루프가 disconnect 를 감지했을 때 수행합니다.
        """
        try:
            await connection.websocket.send_json(data)
            return True
        except Exception as e:
            logger.warning(
                f"Failed to send {data.get('type')} to connection {connection.connection_id}: {e}"
            )
            return False

    async def send_to_room(self, user_id: str, data: Dict[str, Any]) -> int:
        """사용자 룸의 모든 연결에 전송하고 성공한 전송 수를 반환합니다."""
        delivered = 0
        for connection in self.get_room_connections(user_id):
            if await self.send_json(connection, data):
                delivered += 1
        return delivered

    async def broadcast(self, data: Dict[str, Any]) -> int:
        """현재 연결된 모든 세션에 브로드캐스트합니다."""
        delivered = 0
        for connection in list(self.connections.values()):
            if await self.send_json(connection, data):
                delivered += 1
        return delivered

    async def close_all(self, code: int = 1001):
        """서버 종료 시 모든 연결을 닫습니다."""
        self.closing = True
        for connection in list(self.connections.values()):
            try:
                await connection.websocket.close(code=code)
            except Exception as e:
                logger.debug(f"Error closing connection {connection.connection_id}: {e}")

from typing import Any, Dict, Optional

from chatti_realtime.core.logging import get_logger
from chatti_realtime.realtime import protocol
from chatti_realtime.realtime.connection_manager import Connection, ConnectionManager
from chatti_realtime.realtime.presence import PresenceBroadcaster
from chatti_realtime.utils.time_utils import to_iso

logger = get_logger(__name__)


class RoomRouter:
    """
    사용자 ID -> 구독 연결 집합 매핑 및 이벤트 전달

    전달은 현재 열린 연결로의 push 뿐이며 큐잉/재시도는 하지 않습니다.
    """

    def __init__(self, transport: ConnectionManager, presence: PresenceBroadcaster):
        self.transport = transport
        self.presence = presence

    async def join(self, connection: Connection, user_id: str) -> bool:
        """
        연결을 user_id 룸에 가입시킵니다.

        연결이 다른 ID 로 이미 join 되어 있었다면 이전 ID 에서 먼저 leave 합니다.
        같은 ID 로 다시 join 하면 연결 수는 바뀌지 않고 스냅샷만 다시 전송합니다.
        """
        user_id = (user_id or "").strip()
        if not user_id:
            return False

        if connection.user_id == user_id:
            await self.presence.send_snapshot(connection)
            return True

        if connection.user_id:
            await self.leave(connection)

        connection.user_id = user_id
        self.transport.subscribe(connection, user_id)
        await self.presence.user_connected(user_id, connection)
        logger.info(f"Connection {connection.connection_id} joined as user {user_id}")
        return True

    async def leave(self, connection: Connection, user_id: Optional[str] = None) -> bool:
        """
        연결을 사용자 룸에서 제거합니다.

        구독 중이 아니었던 룸에 대해서는 아무것도 하지 않으므로 disconnect 가
        중복으로 처리되어도 연결 수가 틀어지지 않습니다.
        """
        user_id = user_id or connection.user_id
        if not user_id:
            return False

        if connection.user_id == user_id:
            connection.user_id = None

        if not self.transport.unsubscribe(connection, user_id):
            return False

        await self.presence.user_disconnected(user_id)
        logger.info(f"Connection {connection.connection_id} left user {user_id}")
        return True

    async def deliver_to_user(self, user_id: Optional[str], event: str, payload: Dict[str, Any]) -> int:
        """user_id 룸의 모든 연결에 이벤트를 전송합니다. 빈 룸이면 0."""
        if not user_id:
            return 0
        delivered = await self.transport.send_to_room(user_id, protocol.frame(event, payload))
        if not delivered:
            logger.debug(f"No live connection for user {user_id}; {event} dropped")
        return delivered

    async def deliver_typing_signal(self, from_user_id: str, to_user_id: str, is_typing: bool) -> bool:
        """
        타이핑 상태를 수신자 룸에만 전달합니다.

        보낸 사람/받는 사람이 비었거나 자기 자신에게 보내는 경우는 무시합니다.
        """
        from_user_id = (from_user_id or "").strip()
        to_user_id = (to_user_id or "").strip()
        if not from_user_id or not to_user_id or from_user_id == to_user_id:
            return False

        await self.deliver_to_user(to_user_id, protocol.TYPING, {
            "fromUserId": from_user_id,
            "toUserId": to_user_id,
            "isTyping": bool(is_typing),
            "timestamp": to_iso(self.presence.clock()),
        })
        return True

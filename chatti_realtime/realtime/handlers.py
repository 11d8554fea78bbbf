from typing import Any, Dict

from pydantic import ValidationError

from chatti_realtime.core.logging import get_logger, log_security_event, user_id_var
from chatti_realtime.realtime import protocol
from chatti_realtime.realtime.connection_manager import Connection, ConnectionManager
from chatti_realtime.realtime.rooms import RoomRouter
from chatti_realtime.schemas.realtime import JoinPayload, TypingPayload
from chatti_realtime.utils.time_utils import to_iso

logger = get_logger(__name__)


class WebSocketMessageHandler:
    """WebSocket 메시지 처리 핸들러"""

    def __init__(self, rooms: RoomRouter, transport: ConnectionManager):
        self.rooms = rooms
        self.transport = transport

    async def handle_message(self, connection: Connection, data: Dict[str, Any]):
        """
        WebSocket으로 받은 메시지를 처리합니다.

        형식이 잘못된 join/typing 프레임은 에러 응답 없이 무시합니다.

        Args:
            connection: 메시지를 보낸 연결
            data: 클라이언트에서 전송한 메시지 데이터
        """
        message_type = data.get("type")

        if message_type == protocol.CLIENT_JOIN:
            await self._handle_join(connection, data)
        elif message_type == protocol.CLIENT_TYPING:
            await self._handle_typing(connection, data)
        elif message_type == protocol.CLIENT_LEAVE:
            await self.rooms.leave(connection)
        elif message_type == protocol.CLIENT_PING:
            await self._handle_ping(connection)
        else:
            logger.warning(
                f"Unknown message type: {message_type} from connection {connection.connection_id}"
            )

    async def _handle_join(self, connection: Connection, data: Dict[str, Any]):
        try:
            payload = JoinPayload.model_validate(data)
        except ValidationError:
            logger.debug(f"Ignoring malformed join from connection {connection.connection_id}")
            return

        if connection.authenticated_user_id and payload.user_id != connection.authenticated_user_id:
            log_security_event(
                logger,
                "ws_join_identity_mismatch",
                user_id=connection.authenticated_user_id,
                requested_user_id=payload.user_id,
            )
            return

        if await self.rooms.join(connection, payload.user_id):
            user_id_var.set(payload.user_id)

    async def _handle_typing(self, connection: Connection, data: Dict[str, Any]):
        try:
            payload = TypingPayload.model_validate(data)
        except ValidationError:
            logger.debug(f"Ignoring malformed typing from connection {connection.connection_id}")
            return

        if connection.authenticated_user_id and payload.from_user_id != connection.authenticated_user_id:
            log_security_event(
                logger,
                "ws_typing_identity_mismatch",
                severity="low",
                user_id=connection.authenticated_user_id,
            )
            return

        await self.rooms.deliver_typing_signal(
            payload.from_user_id, payload.to_user_id, payload.is_typing
        )

    async def _handle_ping(self, connection: Connection):
        """Ping 메시지에 대한 Pong 응답"""
        await self.transport.send_json(connection, protocol.frame(protocol.PONG, {
            "timestamp": to_iso(self.rooms.presence.clock())
        }))

"""
메시지 이벤트 Fan-out

CRUD 계층이 실시간 계층에 알리는 유일한 경로입니다. 도메인 계층은
`MessageEventNotifier` 인터페이스에만 의존하며, 실시간 계층이 없는 환경에서는
`NoopMessageEventNotifier` 를 주입받습니다.
"""

from abc import ABC, abstractmethod
from typing import List

from chatti_realtime.core.logging import get_logger
from chatti_realtime.domain.events import MessageCreated, MessageDeleted, MessageEvent, MessageUpdated
from chatti_realtime.realtime import protocol
from chatti_realtime.realtime.rooms import RoomRouter

logger = get_logger(__name__)


class MessageEventNotifier(ABC):
    """커밋된 메시지 변경을 실시간 계층에 알리는 인터페이스"""

    @abstractmethod
    async def message_created(self, event: MessageCreated) -> List[str]:
        ...

    @abstractmethod
    async def message_updated(self, event: MessageUpdated) -> List[str]:
        ...

    @abstractmethod
    async def message_deleted(self, event: MessageDeleted) -> List[str]:
        ...


class NoopMessageEventNotifier(MessageEventNotifier):
    """아무것도 전달하지 않는 기본 구현"""

    async def message_created(self, event: MessageCreated) -> List[str]:
        return []

    async def message_updated(self, event: MessageUpdated) -> List[str]:
        return []

    async def message_deleted(self, event: MessageDeleted) -> List[str]:
        return []


def fanout_targets(sender_id: str, receiver_id: str = None) -> List[str]:
    """보낸 사람 룸, 그리고 다른 사람이면 받는 사람 룸"""
    targets = [sender_id] if sender_id else []
    if receiver_id and receiver_id != sender_id:
        targets.append(receiver_id)
    return targets


class RealtimeMessageEventNotifier(MessageEventNotifier):
    """도메인 이벤트를 사용자 룸 전달로 변환합니다."""

    def __init__(self, rooms: RoomRouter):
        self.rooms = rooms

    async def message_created(self, event: MessageCreated) -> List[str]:
        return await self._fan_out(protocol.MESSAGE_NEW, event)

    async def message_updated(self, event: MessageUpdated) -> List[str]:
        return await self._fan_out(protocol.MESSAGE_UPDATED, event)

    async def message_deleted(self, event: MessageDeleted) -> List[str]:
        return await self._fan_out(protocol.MESSAGE_DELETED, event)

    async def _fan_out(self, event_name: str, event: MessageEvent) -> List[str]:
        sender_id = (event.sender_id or "").strip()
        receiver_id = (event.receiver_id or "").strip()
        targets = fanout_targets(sender_id, receiver_id)
        payload = event.to_payload()

        # 한쪽 룸이 비어 있어도 다른 쪽 전달에는 영향 없음
        for user_id in targets:
            await self.rooms.deliver_to_user(user_id, event_name, payload)

        logger.info(
            f"Fan-out {event_name} message {event.message_id} to {targets}",
            extra={
                "event_type": "message_fanout",
                "event": event_name,
                "domain_event": event.event_type,
                "targets": targets,
            }
        )
        return targets

from collections import OrderedDict
from typing import Any, Dict, Optional

from chatti_realtime.core.logging import get_logger, log_presence_event
from chatti_realtime.realtime import protocol
from chatti_realtime.realtime.connection_manager import Connection, ConnectionManager
from chatti_realtime.realtime.registry import ConnectionRegistry, PresenceTransition
from chatti_realtime.utils.time_utils import Clock, to_iso, utc_now

logger = get_logger(__name__)


class PresenceBroadcaster:
    """
    온라인/오프라인 전환 감지 및 브로드캐스트

    연결 수가 0 -> 1, 1 -> 0 으로 바뀔 때만 presence 이벤트를 모든 연결에
    한 번 전송합니다. 다중 기기 접속에 의한 중간 변화(1 -> 2, 2 -> 1)는
    외부에 드러나지 않습니다.

    last-seen 기록은 최대 `last_seen_max_entries` 개까지만 보관하며,
    가장 오래 갱신되지 않은 사용자부터 제거합니다.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        transport: ConnectionManager,
        clock: Clock = utc_now,
        last_seen_max_entries: int = 10000,
    ):
        if last_seen_max_entries < 1:
            raise ValueError("last_seen_max_entries must be positive")

        self.registry = registry
        self.transport = transport
        self.clock = clock
        self.last_seen_max_entries = last_seen_max_entries
        # {user_id: ISO-8601 last seen}, 오래된 순서
        self._last_seen: "OrderedDict[str, str]" = OrderedDict()

    async def user_connected(self, user_id: str, connection: Connection) -> PresenceTransition:
        """
        연결이 user_id 로 join 했을 때 호출됩니다.

        1. 연결 수 증가 (첫 연결이면 last-seen 기록 제거)
        2. join 한 연결에만 presence 스냅샷 전송
        3. 0 -> 1 전환이면 전체 연결에 Online 브로드캐스트
        """
        transition = self.registry.increment(user_id)
        if transition == PresenceTransition.WENT_ONLINE:
            self._last_seen.pop(user_id, None)

        await self.send_snapshot(connection)

        if transition == PresenceTransition.WENT_ONLINE:
            await self._broadcast_presence(user_id, protocol.STATUS_ONLINE, last_seen="")
        return transition

    async def user_disconnected(self, user_id: str) -> PresenceTransition:
        """연결이 user_id 를 떠났을 때 호출됩니다. 1 -> 0 전환이면 Offline 브로드캐스트."""
        transition = self.registry.decrement(user_id)
        if transition == PresenceTransition.WENT_OFFLINE:
            last_seen = to_iso(self.clock())
            self._remember_last_seen(user_id, last_seen)
            await self._broadcast_presence(user_id, protocol.STATUS_OFFLINE, last_seen=last_seen)
        return transition

    def build_snapshot(self) -> Dict[str, Any]:
        """현재 온라인 사용자와 last-seen 전체를 담은 스냅샷"""
        return {
            "onlineUserIds": self.registry.snapshot(),
            "lastSeenByUser": dict(self._last_seen),
            "timestamp": to_iso(self.clock()),
        }

    async def send_snapshot(self, connection: Connection) -> bool:
        return await self.transport.send_json(
            connection, protocol.frame(protocol.PRESENCE_SNAPSHOT, self.build_snapshot())
        )

    def get_user_presence(self, user_id: str) -> Dict[str, Any]:
        """단일 사용자의 presence 상태"""
        connections = self.registry.count(user_id)
        return {
            "userId": user_id,
            "status": protocol.STATUS_ONLINE if connections else protocol.STATUS_OFFLINE,
            "lastSeen": self._last_seen.get(user_id),
            "connections": connections,
        }

    def get_last_seen(self, user_id: str) -> Optional[str]:
        return self._last_seen.get(user_id)

    def _remember_last_seen(self, user_id: str, last_seen: str):
        self._last_seen[user_id] = last_seen
        self._last_seen.move_to_end(user_id)
        while len(self._last_seen) > self.last_seen_max_entries:
            evicted, _ = self._last_seen.popitem(last=False)
            logger.debug(f"Evicted last-seen entry for user {evicted}")

    async def _broadcast_presence(self, user_id: str, status: str, last_seen: str):
        payload = {
            "userId": user_id,
            "status": status,
            "lastSeen": last_seen,
            "timestamp": to_iso(self.clock()),
        }
        log_presence_event(logger, user_id, status, self.registry.count(user_id))
        await self.transport.broadcast(protocol.frame(protocol.PRESENCE, payload))

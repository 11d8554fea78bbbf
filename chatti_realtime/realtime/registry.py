from enum import Enum
from typing import Dict, List

from chatti_realtime.core.logging import get_logger

logger = get_logger(__name__)


class PresenceTransition(str, Enum):
    """연결 수 변경 결과"""
    WENT_ONLINE = "went_online"
    STILL_ONLINE = "still_online"
    WENT_OFFLINE = "went_offline"
    UNCHANGED = "unchanged"


class ConnectionRegistry:
    """
    사용자별 활성 연결 수 관리

    한 사용자가 여러 기기/탭에서 동시에 접속할 수 있으므로 연결 객체가 아닌
    연결 수만 보관합니다. 수가 0이 되면 항목을 삭제하므로 항목이 없다는 것은
    곧 오프라인을 의미합니다.
    """

    def __init__(self):
        # {user_id: 활성 연결 수}
        self._counts: Dict[str, int] = {}

    def increment(self, user_id: str) -> PresenceTransition:
        """join 시 호출. 0 -> 1 전환이면 WENT_ONLINE 을 반환합니다."""
        count = self._counts.get(user_id, 0) + 1
        self._counts[user_id] = count
        logger.debug(f"User {user_id} connection count -> {count}")
        if count == 1:
            return PresenceTransition.WENT_ONLINE
        return PresenceTransition.STILL_ONLINE

    def decrement(self, user_id: str) -> PresenceTransition:
        """
        leave/disconnect 시 호출.

        이미 정리된 사용자에 대해서도 예외 없이 UNCHANGED 를 반환합니다.
        """
        count = self._counts.get(user_id)
        if count is None:
            return PresenceTransition.UNCHANGED

        if count > 1:
            self._counts[user_id] = count - 1
            logger.debug(f"User {user_id} connection count -> {count - 1}")
            return PresenceTransition.STILL_ONLINE

        del self._counts[user_id]
        logger.debug(f"User {user_id} connection count -> 0")
        return PresenceTransition.WENT_OFFLINE

    def count(self, user_id: str) -> int:
        return self._counts.get(user_id, 0)

    def is_online(self, user_id: str) -> bool:
        return user_id in self._counts

    def snapshot(self) -> List[str]:
        """현재 온라인인 사용자 ID 목록"""
        return list(self._counts.keys())

    def __len__(self) -> int:
        return len(self._counts)

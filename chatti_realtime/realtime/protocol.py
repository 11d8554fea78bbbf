"""
WebSocket 와이어 프로토콜

모든 프레임은 `type` 필드에 이벤트 이름을 담은 JSON 객체이며,
이벤트 페이로드 필드는 `type` 과 같은 레벨에 펼쳐서 전송합니다.
"""

from typing import Any, Dict

# 클라이언트 -> 서버
CLIENT_JOIN = "join"
CLIENT_LEAVE = "leave"
CLIENT_TYPING = "typing"
CLIENT_PING = "ping"

# 서버 -> 클라이언트
PRESENCE_SNAPSHOT = "presence:snapshot"
PRESENCE = "presence"
TYPING = "typing"
PONG = "pong"
ERROR = "error"
MESSAGE_NEW = "message:new"
MESSAGE_UPDATED = "message:updated"
MESSAGE_DELETED = "message:deleted"

STATUS_ONLINE = "Online"
STATUS_OFFLINE = "Offline"


def frame(event: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """이벤트 이름과 페이로드로 전송 프레임을 만듭니다."""
    return {**payload, "type": event}

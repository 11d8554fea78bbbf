"""
Message Domain Events

메시지 생성/수정/삭제가 외부 저장소에 커밋된 직후 CRUD 계층이 만드는 이벤트입니다.
`to_payload()` 는 클라이언트가 받는 camelCase 와이어 페이로드를 반환합니다.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from chatti_realtime.utils.time_utils import to_iso
from .base import DomainEvent


@dataclass
class MessageEvent(DomainEvent):
    """메시지 이벤트 공통 필드"""
    message_id: str
    sender_id: str
    receiver_id: Optional[str] = None
    conversation_id: Optional[str] = None

    def _identity_payload(self) -> Dict[str, Any]:
        return {
            "id": self.message_id,
            "senderId": self.sender_id,
            "receiverId": self.receiver_id or "",
            "conversationId": self.conversation_id or "",
        }

    def to_payload(self) -> Dict[str, Any]:
        return self._identity_payload()


@dataclass
class MessageCreated(MessageEvent):
    """메시지 생성 이벤트"""
    text: str = ""
    image_url: str = ""
    audio_url: str = ""
    # 저장소가 기록한 메시지 생성 시각 (없으면 이벤트 시각 사용)
    created_at: Optional[str] = None
    # 클라이언트가 낙관적 렌더링에 사용한 임시 ID
    client_id: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            **self._identity_payload(),
            "text": self.text,
            "imageUrl": self.image_url,
            "audioUrl": self.audio_url,
            "timestamp": self.created_at or to_iso(self.timestamp),
        }
        if self.client_id:
            payload["clientId"] = self.client_id
        return payload


@dataclass
class MessageUpdated(MessageEvent):
    """메시지 수정 이벤트"""
    text: str = ""
    image_url: str = ""
    audio_url: str = ""
    created_at: Optional[str] = None
    edited_at: Optional[datetime] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            **self._identity_payload(),
            "text": self.text,
            "imageUrl": self.image_url,
            "audioUrl": self.audio_url,
            "timestamp": self.created_at,
            "edited": True,
            "editedAt": to_iso(self.edited_at or self.timestamp),
        }


@dataclass
class MessageDeleted(MessageEvent):
    """메시지 삭제 이벤트"""

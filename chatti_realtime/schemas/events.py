from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chatti_realtime.domain.events import MessageCreated, MessageDeleted, MessageUpdated
from chatti_realtime.utils.time_utils import utc_now


class MessageEventBase(BaseModel):
    """내부 이벤트 API 공통 스키마 (camelCase)"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        str_strip_whitespace=True,
    )

    id: str = Field(..., min_length=1, description="메시지 ID")
    sender_id: str = Field(..., min_length=1, description="보낸 사용자 ID")
    receiver_id: Optional[str] = Field(None, description="받는 사용자 ID (삭제 시 없을 수 있음)")
    conversation_id: Optional[str] = Field(None, description="대화 ID")


class MessageCreatedRequest(MessageEventBase):
    """message.created 이벤트"""
    text: str = Field(default="", description="메시지 본문")
    image_url: str = Field(default="", description="이미지 URL")
    audio_url: str = Field(default="", description="음성 URL")
    timestamp: Optional[str] = Field(None, description="저장소 기준 생성 시각 (ISO-8601)")
    client_id: Optional[str] = Field(None, description="클라이언트 임시 메시지 ID")

    def to_event(self) -> MessageCreated:
        return MessageCreated(
            timestamp=utc_now(),
            message_id=self.id,
            sender_id=self.sender_id,
            receiver_id=self.receiver_id,
            conversation_id=self.conversation_id,
            text=self.text,
            image_url=self.image_url,
            audio_url=self.audio_url,
            created_at=self.timestamp,
            client_id=self.client_id,
        )


class MessageUpdatedRequest(MessageEventBase):
    """message.updated 이벤트"""
    text: str = Field(default="", description="수정된 메시지 본문")
    image_url: str = Field(default="", description="이미지 URL")
    audio_url: str = Field(default="", description="음성 URL")
    timestamp: Optional[str] = Field(None, description="저장소 기준 생성 시각 (ISO-8601)")
    edited_at: Optional[datetime] = Field(None, description="수정 시각")

    def to_event(self) -> MessageUpdated:
        return MessageUpdated(
            timestamp=utc_now(),
            message_id=self.id,
            sender_id=self.sender_id,
            receiver_id=self.receiver_id,
            conversation_id=self.conversation_id,
            text=self.text,
            image_url=self.image_url,
            audio_url=self.audio_url,
            created_at=self.timestamp,
            edited_at=self.edited_at,
        )


class MessageDeletedRequest(MessageEventBase):
    """message.deleted 이벤트"""

    def to_event(self) -> MessageDeleted:
        return MessageDeleted(
            timestamp=utc_now(),
            message_id=self.id,
            sender_id=self.sender_id,
            receiver_id=self.receiver_id,
            conversation_id=self.conversation_id,
        )


class FanoutResponse(BaseModel):
    """내부 이벤트 API 응답"""
    delivered: bool = Field(..., description="fan-out 수행 여부")
    targets: List[str] = Field(default_factory=list, description="전달 대상 사용자 ID")

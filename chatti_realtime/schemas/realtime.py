from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class InboundPayload(BaseModel):
    """클라이언트 프레임 공통 설정 (camelCase, 숫자 ID 허용, 공백 제거)"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class JoinPayload(InboundPayload):
    """join 프레임"""
    user_id: str = Field(..., min_length=1, description="announce 할 사용자 ID")


class TypingPayload(InboundPayload):
    """typing 프레임"""
    from_user_id: str = Field(..., min_length=1, description="입력 중인 사용자 ID")
    to_user_id: str = Field(..., min_length=1, description="알림을 받을 사용자 ID")
    is_typing: bool = Field(default=False, description="입력 중 여부")

    @field_validator("is_typing", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        return bool(value)

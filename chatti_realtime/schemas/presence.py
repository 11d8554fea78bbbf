from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PresenceSnapshotResponse(BaseModel):
    """presence 스냅샷 응답"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    online_user_ids: List[str] = Field(..., description="온라인 사용자 ID 목록")
    last_seen_by_user: Dict[str, str] = Field(..., description="사용자별 마지막 접속 시각")
    timestamp: str = Field(..., description="스냅샷 생성 시각")


class UserPresenceResponse(BaseModel):
    """단일 사용자 presence 응답"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str = Field(..., description="사용자 ID")
    status: str = Field(..., description="Online 또는 Offline")
    last_seen: Optional[str] = Field(None, description="마지막 접속 시각 (오프라인일 때)")
    connections: int = Field(..., description="활성 연결 수")

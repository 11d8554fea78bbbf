"""
Presence 조회 API

WebSocket 을 열지 않은 클라이언트나 다른 서비스가 현재 접속 상태를 조회합니다.
"""

from fastapi import APIRouter, Depends

from chatti_realtime.api.dependencies import get_hub
from chatti_realtime.realtime.hub import RealtimeHub
from chatti_realtime.schemas.presence import PresenceSnapshotResponse, UserPresenceResponse

router = APIRouter(prefix="/presence", tags=["Presence"])


@router.get("", response_model=PresenceSnapshotResponse)
async def get_presence_snapshot(hub: RealtimeHub = Depends(get_hub)):
    """join 한 연결이 받는 것과 같은 presence 스냅샷"""
    return hub.presence.build_snapshot()


@router.get("/{user_id}", response_model=UserPresenceResponse)
async def get_user_presence(user_id: str, hub: RealtimeHub = Depends(get_hub)):
    """
    단일 사용자 presence 조회

    - **user_id**: 사용자 ID
    """
    return hub.presence.get_user_presence(user_id.strip())

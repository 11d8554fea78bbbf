"""
내부 메시지 이벤트 API

별도 프로세스에서 동작하는 CRUD 서비스가 메시지 변경을 커밋한 뒤 호출합니다.
요청 본문은 그대로 실시간 fan-out 으로 전달됩니다.
"""

from fastapi import APIRouter, Depends, status

from chatti_realtime.api.dependencies import get_hub, verify_internal_api_key
from chatti_realtime.realtime.hub import RealtimeHub
from chatti_realtime.schemas.events import (
    FanoutResponse,
    MessageCreatedRequest,
    MessageDeletedRequest,
    MessageUpdatedRequest,
)

router = APIRouter(
    prefix="/internal/events/messages",
    tags=["Internal Events"],
    dependencies=[Depends(verify_internal_api_key)],
)


@router.post("/created", response_model=FanoutResponse, status_code=status.HTTP_202_ACCEPTED)
async def message_created(body: MessageCreatedRequest, hub: RealtimeHub = Depends(get_hub)):
    """message:new 를 보낸 사람/받는 사람 룸에 전달"""
    targets = await hub.notifier.message_created(body.to_event())
    return FanoutResponse(delivered=True, targets=targets)


@router.post("/updated", response_model=FanoutResponse, status_code=status.HTTP_202_ACCEPTED)
async def message_updated(body: MessageUpdatedRequest, hub: RealtimeHub = Depends(get_hub)):
    """message:updated 를 보낸 사람/받는 사람 룸에 전달"""
    targets = await hub.notifier.message_updated(body.to_event())
    return FanoutResponse(delivered=True, targets=targets)


@router.post("/deleted", response_model=FanoutResponse, status_code=status.HTTP_202_ACCEPTED)
async def message_deleted(body: MessageDeletedRequest, hub: RealtimeHub = Depends(get_hub)):
    """message:deleted 를 보낸 사람 룸과 (확인된 경우) 받는 사람 룸에 전달"""
    targets = await hub.notifier.message_deleted(body.to_event())
    return FanoutResponse(delivered=True, targets=targets)

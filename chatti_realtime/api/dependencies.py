import secrets
from typing import Optional

from fastapi import Header, Request

from chatti_realtime.core.config import Settings
from chatti_realtime.core.errors import ServiceUnavailableException, invalid_internal_key_error
from chatti_realtime.realtime.hub import RealtimeHub


def get_hub(request: Request) -> RealtimeHub:
    """애플리케이션에 바인딩된 실시간 허브 (lifespan 시작 전이면 503)"""
    hub = request.app.state.hub
    if hub is None:
        raise ServiceUnavailableException("Realtime hub not initialized")
    return hub


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def verify_internal_api_key(
    request: Request,
    x_internal_api_key: Optional[str] = Header(default=None),
):
    """
    내부 이벤트 API 키 검증

    INTERNAL_API_KEY 가 설정되지 않았으면 검증을 건너뜁니다.
    """
    expected = get_settings(request).internal_api_key
    if not expected:
        return
    if not x_internal_api_key or not secrets.compare_digest(x_internal_api_key, expected):
        raise invalid_internal_key_error()

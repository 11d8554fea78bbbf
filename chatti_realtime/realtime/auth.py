from abc import ABC, abstractmethod
from typing import Optional

from fastapi import WebSocket, status
from jose import JWTError, jwt

from chatti_realtime.core.logging import get_logger, log_security_event

logger = get_logger(__name__)


class AuthProvider(ABC):
    """Bearer 토큰을 사용자 ID 로 검증하는 인증 공급자 계약"""

    @abstractmethod
    def verify(self, token: str) -> Optional[str]:
        """유효한 토큰이면 사용자 ID, 아니면 None"""


class JWTAuthProvider(AuthProvider):
    """JWT `sub` 클레임을 사용자 ID 로 사용하는 인증 공급자"""

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def verify(self, token: str) -> Optional[str]:
        if not token or not self.secret_key:
            return None
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            return None

        user_id = payload.get("sub")
        if user_id is None:
            return None
        return str(user_id).strip() or None


def extract_token(websocket: WebSocket) -> Optional[str]:
    """
    Authorization 헤더 또는 `token` 쿼리 파라미터에서 토큰을 추출합니다.

    브라우저 WebSocket API 는 헤더를 지정할 수 없으므로 쿼리 파라미터도 허용합니다.
    """
    header = (websocket.headers.get("Authorization") or "").strip()
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None

    token = (websocket.query_params.get("token") or "").strip()
    return token or None


async def authenticate_websocket(websocket: WebSocket, provider: AuthProvider) -> Optional[str]:
    """
    WebSocket 연결에서 토큰을 검증하고 사용자 ID를 반환합니다.

    Args:
        websocket: 아직 accept 되지 않은 WebSocket 연결 객체
        provider: 토큰 검증에 사용할 인증 공급자

    Returns:
        str: 인증된 사용자 ID, 인증 실패 시 연결을 닫고 None
    """
    token = extract_token(websocket)
    if not token:
        log_security_event(logger, "ws_missing_token", severity="low")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return None

    try:
        user_id = provider.verify(token)
    except Exception as e:
        logger.error(f"WebSocket authentication error: {e}")
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return None

    if not user_id:
        log_security_event(logger, "ws_invalid_token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return None

    logger.info(f"WebSocket authentication successful for user: {user_id}")
    return user_id

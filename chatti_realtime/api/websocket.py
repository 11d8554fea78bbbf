import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from chatti_realtime.core.logging import (
    clear_connection_context,
    get_logger,
    log_websocket_event,
    set_connection_context,
)
from chatti_realtime.realtime import protocol
from chatti_realtime.realtime.auth import authenticate_websocket
from chatti_realtime.realtime.hub import RealtimeHub

logger = get_logger(__name__)

router = APIRouter(tags=["WebSocket"])


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    실시간 presence / 메시지 이벤트 WebSocket 엔드포인트

    연결 후 클라이언트는 `join` 으로 사용자 ID 를 announce 해야 이벤트를 받습니다.
    연결이 끊기면 마지막으로 announce 한 ID 에서 무조건 leave 합니다.
    """
    hub: RealtimeHub = websocket.app.state.hub
    settings = websocket.app.state.settings

    # 허브 생성 전이거나 종료 중이면 재접속 유도
    if hub is None or hub.transport.closing:
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
        return

    # 1. WebSocket 인증 (설정된 경우)
    authenticated_user_id = None
    if settings.ws_auth_required:
        authenticated_user_id = await authenticate_websocket(websocket, hub.auth_provider)
        if not authenticated_user_id:
            return

    # 2. 연결 등록
    await websocket.accept()
    connection = hub.transport.register(websocket, authenticated_user_id)
    set_connection_context(connection.connection_id, authenticated_user_id)
    log_websocket_event(logger, "connected", connection.connection_id, authenticated_user_id)

    try:
        # 3. 메시지 수신 루프
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))

            raw = message.get("text")
            if raw is None:
                # 바이너리 프레임은 지원하지 않음
                if not await _send_error(hub, connection, "invalid_frame", "텍스트 JSON 프레임만 지원합니다."):
                    break
                continue

            try:
                data = json.loads(raw)
            except ValueError as e:
                # JSON 파싱 오류
                logger.warning(f"Invalid JSON from connection {connection.connection_id}: {e}")
                if not await _send_error(hub, connection, "invalid_json", "JSON 형식이 올바르지 않습니다."):
                    break
                continue

            if not isinstance(data, dict):
                if not await _send_error(hub, connection, "invalid_frame", "메시지는 JSON 객체여야 합니다."):
                    break
                continue

            try:
                await hub.handler.handle_message(connection, data)
            except Exception as e:
                logger.exception(f"Error processing message from connection {connection.connection_id}: {e}")
                if not await _send_error(hub, connection, "processing_error", "메시지 처리 중 오류가 발생했습니다."):
                    break

    except WebSocketDisconnect:
        # 정상적인 연결 해제
        pass

    except Exception as e:
        logger.error(f"Unexpected error in WebSocket connection {connection.connection_id}: {e}")

    finally:
        # 4. 연결 해제 처리
        user_id = connection.user_id
        await hub.rooms.leave(connection)
        hub.transport.unregister(connection)
        log_websocket_event(logger, "disconnected", connection.connection_id, user_id)
        clear_connection_context()


async def _send_error(hub: RealtimeHub, connection, error_code: str, message: str) -> bool:
    return await hub.transport.send_json(connection, protocol.frame(protocol.ERROR, {
        "errorCode": error_code,
        "message": message,
    }))

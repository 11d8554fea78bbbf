"""
Realtime Service - FastAPI Application

사용자 접속 상태(presence), 타이핑 알림, 메시지 이벤트 fan-out 을 담당하는 서비스
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from chatti_realtime.api import events, health, presence, websocket
from chatti_realtime.core.config import Settings, settings as default_settings
from chatti_realtime.core.logging import get_logger, setup_logging
from chatti_realtime.middleware.error_handler import (
    ErrorHandlerMiddleware,
    create_http_exception_handler,
    create_validation_exception_handler,
)
from chatti_realtime.realtime.hub import RealtimeHub, build_realtime_hub

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    config: Settings = app.state.settings
    setup_logging(config)
    logger.info(f"{config.app_name} starting up...")

    # 주입된 허브가 없으면 프로세스당 하나를 여기서 생성
    if app.state.hub is None:
        app.state.hub = build_realtime_hub(config)

    yield

    logger.info(f"{config.app_name} shutting down...")
    await app.state.hub.transport.close_all()


def create_app(
    config: Optional[Settings] = None,
    hub: Optional[RealtimeHub] = None,
    enable_metrics: bool = True,
) -> FastAPI:
    """
    애플리케이션 생성

    실시간 허브는 lifespan 시작 시 생성되어 app.state 에 보관됩니다.
    테스트처럼 lifespan 을 실행하지 않는 경우 `hub` 를 직접 주입합니다.
    """
    config = config or default_settings

    app = FastAPI(
        title=config.app_name,
        version=config.version,
        lifespan=lifespan
    )
    app.state.settings = config
    app.state.hub = hub

    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, create_http_exception_handler())
    app.add_exception_handler(RequestValidationError, create_validation_exception_handler())

    # Include routers
    app.include_router(health.router)
    app.include_router(presence.router)
    app.include_router(events.router)
    app.include_router(websocket.router)

    # Prometheus metrics
    if enable_metrics:
        Instrumentator().instrument(app).expose(app)

    @app.get("/")
    async def root():
        return {
            "service": config.app_name,
            "version": config.version,
            "status": "running"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "chatti_realtime.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug
    )

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from chatti_realtime.core.config import Settings
from chatti_realtime.main import create_app
from chatti_realtime.realtime.hub import build_realtime_hub


class FakeWebSocket:
    """전송된 프레임을 기록하는 테스트용 WebSocket"""

    def __init__(self, fail: bool = False):
        self.sent: List[dict] = []
        self.fail = fail
        self.closed_with = None

    async def send_json(self, data: dict):
        if self.fail:
            raise RuntimeError("socket is closed")
        self.sent.append(data)

    async def close(self, code: int = 1000):
        self.closed_with = code

    def of_type(self, event_type: str) -> List[dict]:
        return [frame for frame in self.sent if frame["type"] == event_type]


class FakeClock:
    """수동으로 진행시키는 시계"""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_settings() -> Settings:
    """테스트용 설정 (.env 무시)"""
    return Settings(
        _env_file=None,
        app_name="chatti-realtime-test",
        last_seen_max_entries=100,
        ws_auth_required=False,
        secret_key="test-secret",
        internal_api_key=None,
    )


@pytest.fixture
def hub(test_settings, clock):
    """테스트용 실시간 허브"""
    return build_realtime_hub(test_settings, clock=clock)


@pytest.fixture
def connect(hub):
    """가짜 WebSocket 으로 연결을 등록하는 팩토리"""
    def _connect(fail: bool = False, authenticated_user_id: str = None):
        return hub.transport.register(FakeWebSocket(fail=fail), authenticated_user_id)
    return _connect


@pytest.fixture
def app(test_settings, hub):
    return create_app(test_settings, hub=hub, enable_metrics=False)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """테스트용 비동기 HTTP 클라이언트"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

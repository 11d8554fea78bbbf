import pytest

from chatti_realtime.realtime.connection_manager import ConnectionManager
from tests.conftest import FakeWebSocket


class TestConnectionManager:
    """WebSocket 연결/룸 구독 관리 테스트"""

    def test_subscribe_twice_keeps_single_membership(self):
        transport = ConnectionManager()
        connection = transport.register(FakeWebSocket())

        transport.subscribe(connection, "alice")
        transport.subscribe(connection, "alice")

        assert transport.get_room_size("alice") == 1
        assert transport.unsubscribe(connection, "alice")
        assert not transport.unsubscribe(connection, "alice")
        assert "alice" not in transport.rooms

    def test_unregistered_connection_is_skipped_in_room(self):
        transport = ConnectionManager()
        connection = transport.register(FakeWebSocket())
        transport.subscribe(connection, "alice")

        transport.unregister(connection)

        assert transport.get_room_connections("alice") == []
        assert transport.get_connection_count() == 0

    @pytest.mark.asyncio
    async def test_broadcast_counts_successful_sends(self):
        transport = ConnectionManager()
        healthy = transport.register(FakeWebSocket())
        transport.register(FakeWebSocket(fail=True))

        delivered = await transport.broadcast({"type": "presence"})

        assert delivered == 1
        assert healthy.websocket.sent == [{"type": "presence"}]

    @pytest.mark.asyncio
    async def test_close_all_marks_manager_closing(self):
        transport = ConnectionManager()
        connection = transport.register(FakeWebSocket())

        await transport.close_all()

        assert transport.closing
        assert connection.websocket.closed_with == 1001

import pytest


class TestWebSocketMessageHandler:
    """클라이언트 프레임 처리 테스트"""

    @pytest.mark.asyncio
    async def test_join_frame(self, hub, connect):
        connection = connect()

        await hub.handler.handle_message(connection, {"type": "join", "userId": "alice"})

        assert connection.user_id == "alice"
        assert connection.websocket.sent[0]["type"] == "presence:snapshot"

    @pytest.mark.asyncio
    async def test_numeric_user_id_is_stringified(self, hub, connect):
        connection = connect()

        await hub.handler.handle_message(connection, {"type": "join", "userId": 42})

        assert connection.user_id == "42"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("frame", [
        {"type": "join"},
        {"type": "join", "userId": ""},
        {"type": "join", "userId": "   "},
        {"type": "join", "userId": None},
        {"type": "join", "userId": ["alice"]},
    ])
    async def test_malformed_join_is_silently_ignored(self, hub, connect, frame):
        connection = connect()

        await hub.handler.handle_message(connection, frame)

        assert connection.user_id is None
        assert connection.websocket.sent == []
        assert len(hub.registry) == 0

    @pytest.mark.asyncio
    async def test_typing_frame(self, hub, connect):
        alice = connect()
        bob = connect()
        await hub.rooms.join(alice, "alice")
        await hub.rooms.join(bob, "bob")

        await hub.handler.handle_message(alice, {
            "type": "typing", "fromUserId": "alice", "toUserId": "bob", "isTyping": 1
        })

        frames = bob.websocket.of_type("typing")
        assert len(frames) == 1
        assert frames[0]["isTyping"] is True

    @pytest.mark.asyncio
    async def test_malformed_typing_is_silently_ignored(self, hub, connect):
        bob = connect()
        await hub.rooms.join(bob, "bob")
        sent_before = list(bob.websocket.sent)

        await hub.handler.handle_message(bob, {"type": "typing", "toUserId": "bob"})

        assert bob.websocket.sent == sent_before

    @pytest.mark.asyncio
    async def test_leave_frame(self, hub, connect):
        connection = connect()
        await hub.rooms.join(connection, "alice")

        await hub.handler.handle_message(connection, {"type": "leave"})

        assert connection.user_id is None
        assert not hub.registry.is_online("alice")

    @pytest.mark.asyncio
    async def test_ping_frame(self, hub, connect):
        connection = connect()

        await hub.handler.handle_message(connection, {"type": "ping"})

        assert connection.websocket.sent == [
            {"type": "pong", "timestamp": "2024-01-01T09:00:00.000Z"}
        ]

    @pytest.mark.asyncio
    async def test_unknown_frame_is_ignored(self, hub, connect):
        connection = connect()

        await hub.handler.handle_message(connection, {"type": "dance"})

        assert connection.websocket.sent == []


class TestAuthenticatedConnection:
    """토큰 인증된 연결의 ID 제한 테스트"""

    @pytest.mark.asyncio
    async def test_join_as_other_identity_is_ignored(self, hub, connect):
        connection = connect(authenticated_user_id="alice")

        await hub.handler.handle_message(connection, {"type": "join", "userId": "mallory"})

        assert connection.user_id is None
        assert len(hub.registry) == 0

    @pytest.mark.asyncio
    async def test_join_as_own_identity(self, hub, connect):
        connection = connect(authenticated_user_id="alice")

        await hub.handler.handle_message(connection, {"type": "join", "userId": "alice"})

        assert connection.user_id == "alice"

    @pytest.mark.asyncio
    async def test_spoofed_typing_is_ignored(self, hub, connect):
        alice = connect(authenticated_user_id="alice")
        bob = connect()
        await hub.rooms.join(bob, "bob")

        await hub.handler.handle_message(alice, {
            "type": "typing", "fromUserId": "carol", "toUserId": "bob", "isTyping": True
        })

        assert bob.websocket.of_type("typing") == []

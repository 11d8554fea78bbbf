import logging
from datetime import datetime, timezone

import pytest

from chatti_realtime.domain.events import MessageCreated, MessageDeleted, MessageUpdated
from chatti_realtime.realtime.fanout import NoopMessageEventNotifier, fanout_targets

EVENT_TIME = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def make_created(sender_id="u1", receiver_id="u2", **kwargs) -> MessageCreated:
    return MessageCreated(
        timestamp=EVENT_TIME,
        message_id="m1",
        sender_id=sender_id,
        receiver_id=receiver_id,
        conversation_id="c1",
        text="hello",
        **kwargs
    )


class TestFanoutTargets:
    """fan-out 대상 계산 테스트"""

    def test_sender_and_receiver(self):
        assert fanout_targets("u1", "u2") == ["u1", "u2"]

    def test_missing_receiver(self):
        assert fanout_targets("u1", None) == ["u1"]
        assert fanout_targets("u1", "") == ["u1"]

    def test_receiver_same_as_sender(self):
        assert fanout_targets("u1", "u1") == ["u1"]


class TestRealtimeMessageEventNotifier:
    """메시지 이벤트 fan-out 테스트"""

    @pytest.mark.asyncio
    async def test_created_is_delivered_to_both_parties(self, hub, connect):
        u1 = connect()
        u2 = connect()
        await hub.rooms.join(u1, "u1")
        await hub.rooms.join(u2, "u2")

        targets = await hub.notifier.message_created(make_created())

        assert targets == ["u1", "u2"]
        for connection in (u1, u2):
            frames = connection.websocket.of_type("message:new")
            assert len(frames) == 1
            assert frames[0]["id"] == "m1"
            assert frames[0]["text"] == "hello"
            assert frames[0]["senderId"] == "u1"
            assert frames[0]["receiverId"] == "u2"

    @pytest.mark.asyncio
    async def test_created_reaches_sender_when_receiver_offline(self, hub, connect):
        u1 = connect()
        await hub.rooms.join(u1, "u1")

        targets = await hub.notifier.message_created(make_created())

        assert targets == ["u1", "u2"]
        assert len(u1.websocket.of_type("message:new")) == 1

    @pytest.mark.asyncio
    async def test_created_reaches_receiver_when_sender_offline(self, hub, connect):
        u2 = connect()
        await hub.rooms.join(u2, "u2")

        await hub.notifier.message_created(make_created())

        assert len(u2.websocket.of_type("message:new")) == 1

    @pytest.mark.asyncio
    async def test_message_to_self_is_delivered_once(self, hub, connect):
        u1 = connect()
        await hub.rooms.join(u1, "u1")

        targets = await hub.notifier.message_created(make_created(receiver_id="u1"))

        assert targets == ["u1"]
        assert len(u1.websocket.of_type("message:new")) == 1

    @pytest.mark.asyncio
    async def test_updated_event_name_and_edit_metadata(self, hub, connect):
        u2 = connect()
        await hub.rooms.join(u2, "u2")

        await hub.notifier.message_updated(MessageUpdated(
            timestamp=EVENT_TIME,
            message_id="m1",
            sender_id="u1",
            receiver_id="u2",
            text="edited",
            created_at="2024-01-01T08:00:00.000Z",
        ))

        frame = u2.websocket.of_type("message:updated")[0]
        assert frame["text"] == "edited"
        assert frame["edited"] is True
        assert frame["editedAt"] == "2024-01-01T09:00:00.000Z"
        assert frame["timestamp"] == "2024-01-01T08:00:00.000Z"

    @pytest.mark.asyncio
    async def test_deleted_without_receiver_goes_to_sender_only(self, hub, connect):
        u1 = connect()
        u2 = connect()
        await hub.rooms.join(u1, "u1")
        await hub.rooms.join(u2, "u2")

        targets = await hub.notifier.message_deleted(MessageDeleted(
            timestamp=EVENT_TIME, message_id="m1", sender_id="u1", conversation_id="c1"
        ))

        assert targets == ["u1"]
        assert u1.websocket.of_type("message:deleted") == [{
            "type": "message:deleted",
            "id": "m1",
            "senderId": "u1",
            "receiverId": "",
            "conversationId": "c1",
        }]
        assert u2.websocket.of_type("message:deleted") == []

    @pytest.mark.asyncio
    async def test_fan_out_is_logged_with_domain_event(self, hub, caplog):
        caplog.set_level(logging.INFO, logger="chatti_realtime.realtime.fanout")

        await hub.notifier.message_created(make_created())

        records = [r for r in caplog.records if getattr(r, "event_type", None) == "message_fanout"]
        assert len(records) == 1
        assert records[0].domain_event == "MessageCreated"
        assert records[0].targets == ["u1", "u2"]

    @pytest.mark.asyncio
    async def test_noop_notifier_delivers_nothing(self):
        notifier = NoopMessageEventNotifier()

        assert await notifier.message_created(make_created()) == []

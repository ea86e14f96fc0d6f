"""Tests for the event bus."""

from playersync.events import EventBus


class TestEventBus:
    """Test EventBus publish/subscribe."""

    def test_publish_to_subscribers(self):
        bus = EventBus()
        received = []
        bus.subscribe(EventBus.ACTION_NEXT, received.append)
        bus.publish(EventBus.ACTION_NEXT, {"source": "test"})
        assert received == [{"source": "test"}]

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        bus.subscribe(EventBus.ACTION_NEXT, received.append)
        bus.unsubscribe(EventBus.ACTION_NEXT, received.append)
        bus.unsubscribe(EventBus.ACTION_PREV, received.append)
        bus.publish(EventBus.ACTION_NEXT)
        assert received == []

    def test_callback_error_is_contained(self):
        bus = EventBus()
        received = []

        def broken(data):
            raise ValueError("boom")

        bus.subscribe(EventBus.ACTION_NEXT, broken)
        bus.subscribe(EventBus.ACTION_NEXT, received.append)
        bus.publish(EventBus.ACTION_NEXT, 1)
        assert received == [1]

    def test_unsubscribe_during_publish(self):
        bus = EventBus()
        calls = []

        def once(data):
            calls.append(data)
            bus.unsubscribe(EventBus.ACTION_NEXT, once)

        bus.subscribe(EventBus.ACTION_NEXT, once)
        bus.publish(EventBus.ACTION_NEXT, 1)
        bus.publish(EventBus.ACTION_NEXT, 2)
        assert calls == [1]

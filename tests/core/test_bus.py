"""Tests for the Event Bus."""

from datetime import datetime, UTC
from unittest.mock import Mock

from consequences.core.bus import Event, EventBus, EventFilter


def test_event_defaults():
    """Test that a new event has never been triggered."""
    event = Event(unique_id="doorbell")

    assert event.unique_id == "doorbell"
    assert event.last_triggered is None


def test_publish_stamps_last_triggered():
    """Test that publishing records the trigger time."""
    bus = EventBus()
    event = Event(unique_id="doorbell")
    now = datetime(2025, 1, 15, 20, 0, 0, tzinfo=UTC)

    bus.publish(event, now=now)

    assert event.last_triggered == now


def test_filter_by_event_id():
    """Test that filtered subscribers only see matching events."""
    bus = EventBus()
    all_events = Mock()
    doorbell_only = Mock()
    bus.subscribe(all_events)
    bus.subscribe(doorbell_only, EventFilter(event_id="doorbell"))

    doorbell = Event("doorbell")
    motion = Event("motion")
    bus.publish(doorbell)
    bus.publish(motion)

    assert all_events.call_count == 2
    doorbell_only.assert_called_once_with(doorbell)


def test_failing_handler_does_not_stop_others():
    """Test that one bad handler doesn't block delivery."""
    bus = EventBus()
    bad = Mock(side_effect=RuntimeError("boom"))
    good = Mock()
    bus.subscribe(bad)
    bus.subscribe(good)

    event = Event("doorbell")
    bus.publish(event)

    good.assert_called_once_with(event)


def test_unsubscribe():
    """Test that unsubscribed handlers are no longer called."""
    bus = EventBus()
    handler = Mock()
    bus.subscribe(handler)
    bus.unsubscribe(handler)

    bus.publish(Event("doorbell"))

    handler.assert_not_called()

"""Tests for the state-event list."""

import pytest

from hybridsim import DelegateStateEvent, StateEventList


class Clock:
    def __init__(self):
        self.time = 0.0


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def events(clock):
    return StateEventList(lambda: clock.time)


def after(threshold, priority=0, target=None):
    return DelegateStateEvent(
        target=target,
        priority=priority,
        state_checker=lambda event, time: time >= threshold,
    )


class TestStateEventList:
    """Polling and draining state events."""

    def test_has_any_follows_time_source(self, events, clock):
        events.add(after(2.0))

        assert not events.has_any()
        clock.time = 2.5
        assert events.has_any()

    def test_has_any_does_not_modify(self, events, clock):
        events.add(after(0.0))
        clock.time = 1.0

        assert events.has_any()
        assert events.has_any()
        assert len(events) == 1

    def test_take_next_highest_priority_first(self, events, clock):
        """Among true events the highest priority is taken first."""
        low = after(0.0, priority=1)
        high = after(0.0, priority=9)
        mid = after(0.0, priority=5)
        for event in (low, high, mid):
            events.add(event)
        clock.time = 1.0

        assert [events.take_next() for _ in range(3)] == [high, mid, low]
        assert events.take_next() is None

    def test_equal_priority_keeps_insertion_order(self, events):
        first = after(0.0, priority=3)
        second = after(0.0, priority=3)
        events.add(first)
        events.add(second)

        assert list(events) == [first, second]

    def test_take_next_skips_false_events(self, events, clock):
        """False predicates stay listed while true ones are taken."""
        pending = after(10.0, priority=100)
        ready = after(1.0, priority=1)
        events.add(pending)
        events.add(ready)
        clock.time = 5.0

        assert events.take_next() is ready
        assert events.take_next() is None
        assert list(events) == [pending]

    def test_drain_leaves_no_true_event(self, events, clock):
        for threshold in (1.0, 2.0, 3.0, 7.0):
            events.add(after(threshold))
        clock.time = 3.0

        while events.take_next() is not None:
            pass

        assert not events.has_any()
        assert len(events) == 1

    def test_remove_all_for(self, events, make_recorder):
        a = make_recorder("a")
        b = make_recorder("b")
        events.add(after(0.0, target=a))
        events.add(after(0.0, target=a))
        kept = after(0.0, target=b)
        events.add(kept)

        events.remove_all_for(a)

        assert list(events) == [kept]

    def test_remove_and_clear(self, events):
        event = after(0.0)
        events.add(event)
        events.add(after(0.0))

        events.remove(event)
        assert len(events) == 1

        events.clear()
        assert not events

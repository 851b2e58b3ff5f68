import time
from datetime import timedelta

import pytest

from dualink.coalescer import EventCoalescer
from dualink.events import BTN_LEFT, KeyboardKey, PointerButton, PointerMotion


def test_disabled_coalescer_passes_through():
    c = EventCoalescer(0)
    ev = PointerMotion(time=0, dx=1.0, dy=2.0)
    flushed, passed = c.feed(ev)
    assert flushed is None
    assert passed == ev
    assert c.is_disabled()


def test_motion_events_are_accumulated():
    c = EventCoalescer(0.001)
    m1 = PointerMotion(time=0, dx=1.0, dy=2.0)
    m2 = PointerMotion(time=0, dx=3.0, dy=-1.0)

    assert c.feed(m1) == (None, None)
    assert c.has_pending()
    assert c.feed(m2) == (None, None)

    assert c.flush() == PointerMotion(time=0, dx=4.0, dy=1.0)
    assert not c.has_pending()


def test_non_motion_flushes_accumulated_motion():
    c = EventCoalescer(0.001)
    c.feed(PointerMotion(time=0, dx=5.0, dy=5.0))
    button = PointerButton(time=0, button=BTN_LEFT, state=1)
    flushed, passed = c.feed(button)
    assert flushed == PointerMotion(time=0, dx=5.0, dy=5.0)
    assert passed == button


def test_keyboard_events_pass_through():
    c = EventCoalescer(0.001)
    key = KeyboardKey(time=0, key=42, state=1)
    flushed, passed = c.feed(key)
    assert flushed is None
    assert passed == key


def test_flush_with_nothing_returns_none():
    c = EventCoalescer(0.001)
    assert c.flush() is None


def test_deadline_is_set_on_first_motion():
    c = EventCoalescer(0.001)
    assert c.next_deadline() is None
    before = time.monotonic()
    c.feed(PointerMotion(time=0, dx=1.0, dy=0.0))
    deadline = c.next_deadline()
    assert deadline is not None
    assert deadline >= before


def test_deadline_not_moved_by_later_motion():
    c = EventCoalescer(0.001)
    c.feed(PointerMotion(time=0, dx=1.0, dy=0.0))
    first = c.next_deadline()
    c.feed(PointerMotion(time=0, dx=1.0, dy=0.0))
    assert c.next_deadline() == first


def test_zero_motion_clears_pending_without_event():
    c = EventCoalescer(0.001)
    c.feed(PointerMotion(time=0, dx=0.0, dy=0.0))
    assert c.has_pending()
    assert c.flush() is None
    assert not c.has_pending()


def test_timedelta_window_accepted():
    c = EventCoalescer(timedelta(milliseconds=1))
    assert not c.is_disabled()
    assert c.feed(PointerMotion(time=0, dx=1.0, dy=1.0)) == (None, None)


def test_negative_window_rejected():
    with pytest.raises(ValueError):
        EventCoalescer(-1)
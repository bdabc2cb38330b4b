"""Tests for the user timing offset"""
from system_utils.offset import OffsetController


def make_controller(clock, feedback=None, cleared=None):
    return OffsetController(
        on_feedback=feedback,
        on_feedback_cleared=cleared,
        call_later=clock.call_later,
        step_ms=250,
        min_ms=-5000,
        max_ms=10000,
        feedback_clear_ms=2000,
    )


def test_increase_saturates_at_max(clock):
    offset = make_controller(clock)
    for _ in range(40):
        offset.increase()
    assert offset.offset_ms == 10000
    for _ in range(60):
        offset.increase()
    assert offset.offset_ms == 10000


def test_decrease_saturates_at_min(clock):
    offset = make_controller(clock)
    for _ in range(100):
        offset.decrease()
    assert offset.offset_ms == -5000


def test_apply_never_negative(clock):
    offset = make_controller(clock)
    offset.set_offset(-2000)
    assert offset.apply(1500) == 0
    assert offset.apply(3000) == 1000


def test_initial_offset_clamped(clock):
    offset = OffsetController(call_later=clock.call_later, initial_ms=99999, max_ms=10000)
    assert offset.offset_ms == 10000


def test_feedback_clears_after_delay(clock):
    shown, cleared = [], []
    offset = make_controller(clock, shown.append, lambda: cleared.append(True))

    offset.increase()
    assert shown == [250]
    clock.advance(1.999)
    assert cleared == []
    clock.advance(0.002)
    assert cleared == [True]


def test_repeated_presses_keep_one_feedback_timer(clock):
    cleared = []
    offset = make_controller(clock, cleared=lambda: cleared.append(True))

    offset.increase()
    clock.advance(1.5)
    offset.increase()
    assert len(clock.pending) == 1
    clock.advance(1.5)
    assert cleared == []
    clock.advance(0.6)
    assert cleared == [True]

# ABOUTME: Unit tests for the in-memory fixed-window and sliding-window admission gates
# ABOUTME: Tests construction validation, window accounting, boundary bursts and cancellation

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from crpt_api.exceptions import AdmissionCancelledException, ConfigurationException
from crpt_api.implementations.memory.rate_limiter import (
    FixedWindowRateLimiter,
    SlidingWindowRateLimiter,
    period_to_seconds,
)
from crpt_api.models import TimeUnit


class TestConstructionValidation:
    """Gates reject unusable limits when they are built, never later."""

    @pytest.mark.unit
    @pytest.mark.parametrize("capacity", [0, -1])
    def test_non_positive_capacity_rejected(self, capacity):
        with pytest.raises(ConfigurationException) as exc_info:
            FixedWindowRateLimiter(timedelta(seconds=1), capacity)

        assert exc_info.value.code == "INVALID_CONFIG"
        assert exc_info.value.details["capacity"] == capacity

    @pytest.mark.unit
    def test_positive_capacity_accepted(self):
        gate = FixedWindowRateLimiter(timedelta(seconds=1), 5)

        assert gate.capacity == 5
        assert gate.count == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("capacity", [2.5, True, "3", None])
    def test_non_integer_capacity_rejected(self, capacity):
        with pytest.raises(ConfigurationException):
            FixedWindowRateLimiter(1.0, capacity)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "period",
        [0, -1, 0.0, timedelta(0), timedelta(seconds=-5), float("nan")],
    )
    def test_non_positive_period_rejected(self, period):
        with pytest.raises(ConfigurationException):
            FixedWindowRateLimiter(period, 5)

    @pytest.mark.unit
    @pytest.mark.parametrize("period", ["60", None, True])
    def test_period_of_wrong_type_rejected(self, period):
        with pytest.raises(ConfigurationException):
            SlidingWindowRateLimiter(period, 5)

    @pytest.mark.unit
    def test_period_accepts_seconds_and_timedelta(self):
        assert period_to_seconds(2) == 2.0
        assert period_to_seconds(0.25) == 0.25
        assert period_to_seconds(timedelta(minutes=1)) == 60.0

    @pytest.mark.unit
    def test_per_time_unit(self):
        gate = FixedWindowRateLimiter.per(TimeUnit.MINUTES, 10)

        assert gate.period == timedelta(minutes=1)
        assert gate.capacity == 10

    @pytest.mark.unit
    def test_per_time_unit_rejects_bad_capacity(self):
        with pytest.raises(ConfigurationException):
            SlidingWindowRateLimiter.per(TimeUnit.SECONDS, 0)


class TestFixedWindowRateLimiter:
    """Window accounting of the fixed-window gate against a manual clock."""

    @pytest.mark.unit
    def test_window_opens_at_construction(self, clock):
        gate = FixedWindowRateLimiter(1.0, 3, clock=clock)

        assert gate.window_start == clock.now

    @pytest.mark.unit
    def test_capacity_admitted_without_waiting(self, clock):
        gate = FixedWindowRateLimiter(1.0, 3, clock=clock)

        assert [gate.acquire() for _ in range(3)] == [True, True, True]
        assert gate.count == 3

    @pytest.mark.unit
    def test_over_capacity_is_not_admitted_inside_window(self, clock):
        gate = FixedWindowRateLimiter(1.0, 3, clock=clock)
        start = gate.window_start
        for _ in range(3):
            assert gate.try_acquire() is True

        clock.advance(0.5)

        assert gate.try_acquire() is False
        assert gate.count == 3
        assert gate.window_start == start

    @pytest.mark.unit
    def test_window_reset_restarts_count_at_one(self, clock):
        gate = FixedWindowRateLimiter(1.0, 2, clock=clock)
        gate.acquire()
        gate.acquire()

        now = clock.advance(1.001)

        assert gate.try_acquire() is True
        assert gate.count == 1
        assert gate.window_start == now

    @pytest.mark.unit
    def test_new_arrival_can_take_slot_ahead_of_woken_waiter(self, clock):
        """No fairness between waiters and new callers once the window rolls over."""
        gate = FixedWindowRateLimiter(1.0, 1, clock=clock)
        gate.acquire()
        assert gate.try_acquire() is False  # the waiter finds the window full

        clock.advance(1.001)
        assert gate.try_acquire() is True  # a caller arriving at the boundary

        # the waiter wakes after the arrival and has to wait a full window again
        assert gate.try_acquire() is False
        assert gate.count == 1

    @pytest.mark.unit
    def test_partially_used_window_is_not_reset_exactly_at_period(self, clock):
        gate = FixedWindowRateLimiter(1.0, 3, clock=clock)
        start = gate.window_start
        gate.acquire()

        clock.advance(1.0)

        assert gate.try_acquire() is True
        assert gate.count == 2
        assert gate.window_start == start

    @pytest.mark.unit
    def test_full_window_reset_exactly_at_period(self, clock):
        gate = FixedWindowRateLimiter(1.0, 2, clock=clock)
        gate.acquire()
        gate.acquire()

        now = clock.advance(1.0)

        assert gate.try_acquire() is True
        assert gate.count == 1
        assert gate.window_start == now

    @pytest.mark.unit
    def test_idle_gate_opens_window_at_first_late_caller(self, clock):
        gate = FixedWindowRateLimiter(1.0, 2, clock=clock)

        now = clock.advance(3.7)
        gate.acquire()

        assert gate.window_start == now
        assert gate.count == 1

    @pytest.mark.unit
    def test_boundary_burst_is_admitted(self, clock):
        """Callers on both sides of a window boundary pass without waiting."""
        gate = FixedWindowRateLimiter(1.0, 2, clock=clock)

        clock.advance(0.95)
        assert gate.try_acquire() is True
        assert gate.try_acquire() is True

        clock.advance(0.1)
        assert gate.try_acquire() is True
        assert gate.try_acquire() is True

        # Four admissions within 0.1s although capacity is 2 per second
        assert gate.count == 2

    @pytest.mark.unit
    def test_blocked_caller_admitted_when_window_ends(self, clock):
        gate = FixedWindowRateLimiter(0.05, 1, clock=clock)
        gate.acquire()
        admitted = threading.Event()

        def caller():
            gate.acquire()
            admitted.set()

        worker = threading.Thread(target=caller)
        worker.start()
        assert not admitted.wait(0.02)

        now = clock.advance(0.06)
        worker.join(timeout=2.0)

        assert admitted.is_set()
        assert gate.count == 1
        assert gate.window_start == now

    @pytest.mark.unit
    def test_cancel_event_set_before_call(self, clock):
        gate = FixedWindowRateLimiter(1.0, 2, clock=clock)
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(AdmissionCancelledException) as exc_info:
            gate.acquire(cancel)

        assert exc_info.value.code == "CANCELLED"
        assert gate.count == 0
        assert cancel.is_set()

    @pytest.mark.unit
    def test_cancelled_waiter_leaves_no_residue(self, clock):
        gate = FixedWindowRateLimiter(30.0, 1, clock=clock)
        gate.acquire()
        cancel = threading.Event()
        errors = []

        def caller():
            try:
                gate.acquire(cancel)
            except AdmissionCancelledException as e:
                errors.append(e)

        worker = threading.Thread(target=caller)
        worker.start()
        time.sleep(0.05)
        cancel.set()
        worker.join(timeout=2.0)

        assert not worker.is_alive()
        assert len(errors) == 1
        assert gate.count == 1
        assert cancel.is_set()

        # The next window still has its full capacity
        clock.advance(30.5)
        assert gate.try_acquire() is True
        assert gate.try_acquire() is False

    @pytest.mark.unit
    def test_concurrent_try_acquire_never_exceeds_capacity(self):
        gate = FixedWindowRateLimiter(60.0, 50)

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(lambda _: gate.try_acquire(), range(200)))

        assert results.count(True) == 50
        assert gate.count == 50

    @pytest.mark.unit
    def test_concurrent_acquire_within_capacity_does_not_block(self):
        gate = FixedWindowRateLimiter(60.0, 20)

        started = time.monotonic()
        with ThreadPoolExecutor(max_workers=20) as pool:
            results = list(pool.map(lambda _: gate.acquire(), range(20)))

        assert all(results)
        assert gate.count == 20
        assert time.monotonic() - started < 1.0

    @pytest.mark.unit
    def test_cancellation_is_logged(self, clock, log_messages):
        gate = FixedWindowRateLimiter(30.0, 1, clock=clock)
        gate.acquire()
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(AdmissionCancelledException):
            gate.acquire(cancel)

        assert any("cancelled" in message for message in log_messages)

    @pytest.mark.unit
    def test_window_reset_is_logged(self, clock, log_messages):
        gate = FixedWindowRateLimiter(1.0, 1, clock=clock)
        gate.acquire()

        clock.advance(2.0)
        gate.acquire()

        assert any("window reset" in message for message in log_messages)


class TestSlidingWindowRateLimiter:
    """The strict alternative counts admissions in the trailing period."""

    @pytest.mark.unit
    def test_capacity_admitted_then_refused(self, clock):
        gate = SlidingWindowRateLimiter(1.0, 2, clock=clock)

        assert gate.try_acquire() is True
        assert gate.try_acquire() is True
        assert gate.try_acquire() is False
        assert gate.count == 2

    @pytest.mark.unit
    def test_no_boundary_burst(self, clock):
        gate = SlidingWindowRateLimiter(1.0, 2, clock=clock)

        clock.advance(0.95)
        assert gate.try_acquire() is True
        assert gate.try_acquire() is True

        clock.advance(0.1)
        assert gate.try_acquire() is False

    @pytest.mark.unit
    def test_oldest_admission_expires_first(self, clock):
        gate = SlidingWindowRateLimiter(1.0, 2, clock=clock)
        gate.acquire()
        clock.advance(0.5)
        gate.acquire()

        clock.advance(0.5)
        assert gate.count == 1
        assert gate.try_acquire() is True
        assert gate.try_acquire() is False

    @pytest.mark.unit
    def test_blocked_caller_admitted_when_oldest_expires(self, clock):
        gate = SlidingWindowRateLimiter(0.05, 1, clock=clock)
        gate.acquire()
        admitted = threading.Event()

        worker = threading.Thread(target=lambda: gate.acquire() and admitted.set())
        worker.start()
        assert not admitted.wait(0.02)

        clock.advance(0.06)
        worker.join(timeout=2.0)

        assert admitted.is_set()
        assert gate.count == 1

    @pytest.mark.unit
    def test_cancelled_waiter_leaves_no_residue(self, clock):
        gate = SlidingWindowRateLimiter(30.0, 1, clock=clock)
        gate.acquire()
        cancel = threading.Event()
        errors = []

        def caller():
            try:
                gate.acquire(cancel)
            except AdmissionCancelledException as e:
                errors.append(e)

        worker = threading.Thread(target=caller)
        worker.start()
        time.sleep(0.05)
        cancel.set()
        worker.join(timeout=2.0)

        assert len(errors) == 1
        assert gate.count == 1

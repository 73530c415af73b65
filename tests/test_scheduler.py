"""Tests for frame scheduling."""

import pytest

from singing_ball.scheduler import ManualScheduler, RealtimeScheduler


class TestFrameQueue:

    def test_callback_runs_once(self, scheduler):
        calls = []
        scheduler.request_frame(lambda: calls.append(1))
        assert scheduler.run_frame() == 1
        assert scheduler.run_frame() == 0
        assert calls == [1]

    def test_handles_are_unique(self, scheduler):
        a = scheduler.request_frame(lambda: None)
        b = scheduler.request_frame(lambda: None)
        assert a != b
        assert scheduler.pending == 2

    def test_cancel(self, scheduler):
        calls = []
        handle = scheduler.request_frame(lambda: calls.append('x'))
        scheduler.cancel_frame(handle)
        scheduler.run_frame()
        assert calls == []

    def test_cancel_unknown_handle_is_noop(self, scheduler):
        scheduler.cancel_frame(12345)
        handle = scheduler.request_frame(lambda: None)
        scheduler.run_frame()
        scheduler.cancel_frame(handle)
        assert scheduler.pending == 0

    def test_cancel_from_earlier_callback_in_same_frame(self, scheduler):
        calls = []
        handles = {}
        handles['first'] = scheduler.request_frame(lambda: scheduler.cancel_frame(handles['second']))
        handles['second'] = scheduler.request_frame(lambda: calls.append('second'))
        assert scheduler.run_frame() == 1
        assert calls == []

    def test_request_during_frame_waits_for_next(self, scheduler):
        order = []

        def loop():
            order.append(scheduler.frame_count)
            scheduler.request_frame(loop)

        scheduler.request_frame(loop)
        assert scheduler.run_frame() == 1
        assert scheduler.run_frame() == 1
        assert order == [0, 1]
        assert scheduler.pending == 1


class TestClocks:

    def test_manual_clock(self):
        scheduler = ManualScheduler(start_ms=100.0, frame_ms=10.0)
        assert scheduler.now() == 100.0
        scheduler.advance(5.0)
        assert scheduler.now() == 105.0
        scheduler.run_frames(3)
        assert scheduler.now() == 135.0
        assert scheduler.frame_count == 3

    def test_realtime_clock_is_monotonic(self):
        scheduler = RealtimeScheduler()
        first = scheduler.now()
        assert scheduler.now() >= first


class TestFrameQueueIsAbstract:

    def test_cannot_instantiate_without_clock(self):
        from singing_ball.scheduler import FrameQueue
        with pytest.raises(TypeError):
            FrameQueue()

    def test_subclass_must_provide_clock(self):
        from singing_ball.scheduler import FrameQueue

        class NoClock(FrameQueue):
            pass

        with pytest.raises(TypeError):
            NoClock()

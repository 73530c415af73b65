"""
Frame scheduling — the "request next frame" primitive the engine runs on.

- One callback per request, run once on the next frame
- Callbacks requested while a frame is running wait for the following frame
- Clock reads are in milliseconds
"""

import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Protocol

import singing_ball as SB


class FrameScheduler(Protocol):
    def request_frame(self, callback: Callable[[], None]) -> int: ...

    def cancel_frame(self, handle: int) -> None: ...

    def now(self) -> float: ...


class FrameQueue(ABC):
    """Pending-callback bookkeeping shared by the concrete schedulers."""

    def __init__(self):
        self._pending: Dict[int, Callable[[], None]] = {}
        self._next_handle = 1
        self.frame_count = 0

    def request_frame(self, callback: Callable[[], None]) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_frame(self) -> int:
        """Run the callbacks queued before this frame started. Returns how many ran."""
        ran = 0
        for handle in list(self._pending):
            # A callback earlier in the batch may have cancelled this one
            callback = self._pending.pop(handle, None)
            if callback is not None:
                callback()
                ran += 1
        self.frame_count += 1
        return ran

    @abstractmethod
    def now(self) -> float:
        """Clock in milliseconds."""


class ManualScheduler(FrameQueue):
    """Injected clock: time only moves on advance() or run_frame()."""

    def __init__(self, start_ms: float = 0.0, frame_ms: float = 1000.0 / SB.FPS):
        super().__init__()
        self._clock_ms = float(start_ms)
        self.frame_ms = frame_ms

    def now(self) -> float:
        return self._clock_ms

    def advance(self, ms: float):
        self._clock_ms += ms

    def run_frame(self) -> int:
        self.advance(self.frame_ms)
        return super().run_frame()

    def run_frames(self, n_frames: int) -> int:
        return sum(self.run_frame() for _ in range(n_frames))


class RealtimeScheduler(FrameQueue):
    """Monotonic wall clock; the host loop calls run_frame() once per display refresh."""

    def now(self) -> float:
        return time.perf_counter() * 1000.0

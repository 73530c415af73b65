"""Pytest configuration and fixtures for singing ball tests."""

import os

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import pytest

import singing_ball as SB


class RecordingContext:
    """Drawing context that keeps every call as (name, args)."""

    def __init__(self):
        self.calls = []

    def fill_rect(self, color, rect):
        self.calls.append(('fill_rect', color, rect))

    def stroke_circle(self, center, radius, color, width):
        self.calls.append(('stroke_circle', center, radius, color, width))

    def fill_circle(self, center, radius, color, alpha=1.0):
        self.calls.append(('fill_circle', center, radius, color, alpha))

    def line(self, start, end, color, width):
        self.calls.append(('line', start, end, color, width))

    def text(self, text, position, size, color):
        self.calls.append(('text', text, position, size, color))

    def names(self):
        return [c[0] for c in self.calls]

    def clear(self):
        self.calls = []


class RecordingCanvas:
    def __init__(self, width=SB.WIDTH, height=SB.HEIGHT, has_context=True):
        self.width = width
        self.height = height
        self.context = RecordingContext() if has_context else None

    def get_context(self):
        return self.context


@pytest.fixture
def scheduler():
    from singing_ball.scheduler import ManualScheduler
    return ManualScheduler()


@pytest.fixture
def canvas():
    return RecordingCanvas()


@pytest.fixture
def engine(canvas, scheduler):
    """Engine on the default 1080x1920 canvas with default tunables."""
    from singing_ball.engine import SimulationEngine
    return SimulationEngine(canvas, scheduler)


@pytest.fixture
def run_until_collision():
    """Step an engine until the ball hits the circle. Returns the number of steps taken."""
    def _run(engine, max_steps=2000):
        for n in range(1, max_steps + 1):
            if engine.step():
                return n
        raise AssertionError(f'no collision within {max_steps} steps')
    return _run

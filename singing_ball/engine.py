"""
Singing-ball engine — one ball bouncing inside a circle, growing and speeding up on every hit.

- Fixed step per tick: gravity → decay → position → circle collision → color phase
- Mass is derived from size (square root), so growth only dampens the dynamics
- Elapsed time follows the wall clock and is display-only, never an integration step
- Ticks are requested one at a time from an injected FrameScheduler
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional, Tuple

import numpy as np

import singing_ball as SB
from singing_ball.renderer import AppearanceConfig, Canvas, render_frame
from singing_ball.scheduler import FrameScheduler

logger = logging.getLogger(__name__)


class DrawingContextError(RuntimeError):
    """The canvas could not provide a drawing context."""


@dataclass
class SimulationState:
    """Everything a tick mutates. Owned by one engine."""
    x: float
    y: float
    vx: float
    vy: float
    radius: float
    color_phase: float = 0.0
    elapsed_time: float = 0.0
    collision_count: int = 0
    collision_points: Deque[Tuple[float, float]] = field(default_factory=deque)
    previous_positions: Deque[Tuple[float, float]] = field(
        default_factory=lambda: deque(maxlen=SB.MOTION_BLUR_STEPS))

    @property
    def center(self) -> np.ndarray:
        return np.array([self.x, self.y])

    @center.setter
    def center(self, p: np.ndarray):
        self.x, self.y = float(p[0]), float(p[1])

    @property
    def velocity(self) -> np.ndarray:
        return np.array([self.vx, self.vy])

    @velocity.setter
    def velocity(self, v: np.ndarray):
        self.vx, self.vy = float(v[0]), float(v[1])

    @property
    def speed(self) -> float:
        return float(np.sqrt(self.vx**2 + self.vy**2))


@dataclass
class SimulationConfig:
    initial_ball_radius: float = SB.INITIAL_BALL_RADIUS
    start_velocity: Tuple[float, float] = SB.START_VELOCITY
    start_height_divisor: float = SB.START_HEIGHT_DIVISOR
    arena_margin: float = SB.ARENA_MARGIN
    ball_margin: float = SB.BALL_MARGIN
    gravity: float = SB.GRAVITY
    velocity_increase: float = SB.VELOCITY_INCREASE
    velocity_decay: float = SB.VELOCITY_DECAY
    ball_growth: float = SB.BALL_GROWTH
    motion_blur_steps: int = SB.MOTION_BLUR_STEPS
    color_phase_speed: float = SB.COLOR_PHASE_SPEED
    max_collision_points: Optional[int] = SB.MAX_COLLISION_POINTS


class SimulationEngine:
    """
    Physics state, per-tick update and full-frame render for the singing ball.

    Two lifecycle states, Running and Stopped. start()/stop() switch between
    them and are idempotent; reset() works in either.
    """

    def __init__(self, canvas: Canvas, scheduler: FrameScheduler,
                 config: Optional[SimulationConfig] = None,
                 appearance: Optional[AppearanceConfig] = None):
        ctx = canvas.get_context()
        if ctx is None:
            raise DrawingContextError('Could not get canvas context')

        self.canvas = canvas
        self.ctx = ctx
        self.scheduler = scheduler
        self.config = config or SimulationConfig()
        self.appearance = appearance or AppearanceConfig()

        # Fixed geometry
        self.width = canvas.width
        self.height = canvas.height
        self.circle_center = (self.width / 2, self.height / 2)
        self.circle_radius = min(self.width, self.height) / 2 - self.config.arena_margin
        self.max_ball_radius = self.circle_radius - self.config.ball_margin
        if self.max_ball_radius < self.config.initial_ball_radius:
            raise ValueError(
                f'{self.width}x{self.height} surface is too small for the arena '
                f'(max ball radius {self.max_ball_radius} < {self.config.initial_ball_radius})')

        # Tunables
        self.set_gravity(self.config.gravity)
        self.set_velocity_increase(self.config.velocity_increase)
        self.set_velocity_decay(self.config.velocity_decay)
        self.set_ball_growth_rate(self.config.ball_growth)

        self._running = False
        self._frame_handle: Optional[int] = None
        self._start_ms = 0.0
        self.state: Optional[SimulationState] = None
        self.reset()
        logger.info('Engine on %dx%d canvas, circle radius %.1f, max ball radius %.1f',
                    self.width, self.height, self.circle_radius, self.max_ball_radius)

    # Parameter surface

    def set_gravity(self, value: float):
        self.gravity = value

    def set_velocity_increase(self, value: float):
        self.velocity_increase_factor = 1 + value
        self.secondary_increase_factor = 1 + value + SB.SECONDARY_INCREASE_OFFSET

    def set_velocity_decay(self, value: float):
        self.velocity_decay = value

    def set_ball_growth_rate(self, value: float):
        self.ball_growth_rate = 1 + value

    # Lifecycle

    def reset(self):
        """Back to the initial ball. Tunables and the color phase are kept."""
        cfg = self.config
        phase = self.state.color_phase if self.state is not None else 0.0
        self.state = SimulationState(
            x=self.width / 2,
            y=self.height / cfg.start_height_divisor,
            vx=cfg.start_velocity[0],
            vy=cfg.start_velocity[1],
            radius=cfg.initial_ball_radius,
            color_phase=phase,
            collision_points=deque(maxlen=cfg.max_collision_points),
            previous_positions=deque(maxlen=cfg.motion_blur_steps),
        )
        self._start_ms = self.scheduler.now()
        logger.debug('Reset (running=%s)', self._running)

    def start(self):
        if self._running:
            return
        # Shift the time origin so elapsed time carries on from where it paused
        self._start_ms = self.scheduler.now() - self.state.elapsed_time * 1000
        self._running = True
        self._frame_handle = self.scheduler.request_frame(self.tick)
        logger.debug('Started at elapsed %.3fs', self.state.elapsed_time)

    def stop(self):
        self._running = False
        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None
        logger.debug('Stopped at elapsed %.3fs', self.state.elapsed_time)

    def is_running(self) -> bool:
        return self._running

    def tick(self):
        """Scheduler callback: update, render, then ask for the next frame."""
        self._frame_handle = None
        if not self._running:
            return
        self.step()
        self.render()
        self._frame_handle = self.scheduler.request_frame(self.tick)

    # Physics

    @property
    def mass(self) -> float:
        return SB.BASE_MASS * np.sqrt(self.state.radius / self.config.initial_ball_radius)

    def step(self) -> bool:
        """Advance one fixed step. Returns True if the ball hit the circle."""
        s = self.state
        if self._running:
            s.elapsed_time = (self.scheduler.now() - self._start_ms) / 1000

        s.previous_positions.append((s.x, s.y))

        mass = self.mass
        effective_gravity = self.gravity * (1 + (mass - 1) * 0.2)
        mass_based_decay = max(self.velocity_decay - (mass - 1) * 0.00005, 0.997)

        s.vy += effective_gravity
        s.vx *= mass_based_decay
        s.vy *= mass_based_decay

        s.x += s.vx
        s.y += s.vy

        hit = self._resolve_circle_collision(mass)
        s.color_phase += self.config.color_phase_speed
        return hit

    def _resolve_circle_collision(self, mass: float) -> bool:
        s = self.state
        cx, cy = self.circle_center
        dx = s.x - cx
        dy = s.y - cy
        distance = np.sqrt(dx**2 + dy**2)

        if distance == 0 or distance < self.circle_radius - s.radius:
            return False

        normal = np.array([dx, dy]) / distance
        v = s.velocity
        restitution = max(0.9 - (mass - 1) * 0.005, 0.7)
        v = (v - 2 * np.dot(v, normal) * normal) * restitution

        if s.radius < self.max_ball_radius:
            s.radius = min(s.radius * self.ball_growth_rate, self.max_ball_radius)

        v = v * (1 + (self.velocity_increase_factor - 1) / mass**0.3)

        # Never let the ball die at the wall
        min_velocity = 1.0 / mass**0.25
        speed = np.sqrt(v[0]**2 + v[1]**2)
        if speed == 0:
            v = -normal * min_velocity
        elif speed < min_velocity:
            v = v * (min_velocity / speed)
        s.velocity = v

        # Angle comes from the post-integration position, not the new velocity
        angle = np.arctan2(dy, dx)
        cos_a, sin_a = np.cos(angle), np.sin(angle)
        self._record_collision((float(cx + self.circle_radius * cos_a),
                                float(cy + self.circle_radius * sin_a)))

        s.x = float(cx + (self.circle_radius - s.radius) * cos_a)
        s.y = float(cy + (self.circle_radius - s.radius) * sin_a)
        return True

    def _record_collision(self, point: Tuple[float, float]):
        points = self.state.collision_points
        if points.maxlen is not None and len(points) == points.maxlen:
            logger.debug('Collision trace full (%d), dropping oldest point', points.maxlen)
        points.append(point)
        self.state.collision_count += 1

    # Rendering

    def render(self):
        render_frame(self.ctx, self, self.appearance)

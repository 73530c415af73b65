import logging
import math
import os
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple

import numpy as np

os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]
Point = Tuple[float, float]


class DrawingContext(Protocol):
    """Immediate-mode 2D drawing. Alpha is a 0..1 fraction."""

    def fill_rect(self, color: Color, rect: Tuple[float, float, float, float]) -> None: ...

    def stroke_circle(self, center: Point, radius: float, color: Color, width: float) -> None: ...

    def fill_circle(self, center: Point, radius: float, color: Color, alpha: float = 1.0) -> None: ...

    def line(self, start: Point, end: Point, color: Color, width: float) -> None: ...

    def text(self, text: str, position: Point, size: int, color: Color) -> None: ...


class Canvas(Protocol):
    width: int
    height: int

    def get_context(self) -> Optional[DrawingContext]: ...


@dataclass
class AppearanceConfig:
    """Pixels only, never physics."""
    background: Color = (0, 0, 0)
    ring_width: float = 25
    ring_offset: float = 25
    trace_color: Color = (255, 0, 0)
    trace_width: float = 2
    ball_color: Color = (255, 0, 0)
    ghost_alpha: float = 0.2
    text_color: Color = (255, 255, 255)
    label: str = '@singing.ball'
    label_size: int = 30
    status_size: int = 24
    status_offset: float = 60


def transition_color(phase: float) -> Color:
    """Three sine waves 0, 2 and 4 radians apart, mapped onto 0..255."""
    r = math.floor(127 * math.sin(phase) + 128)
    g = math.floor(127 * math.sin(phase + 2) + 128)
    b = math.floor(127 * math.sin(phase + 4) + 128)
    return (r, g, b)


def status_text(elapsed_time: float, mass: float) -> str:
    return f'Time: {elapsed_time:.1f}s | Mass: {mass:.1f}'


def render_frame(ctx: DrawingContext, engine, appearance: AppearanceConfig):
    """Draw the engine's current state. Reads state, never writes it."""
    state = engine.state
    cx, cy = engine.circle_center
    circle_radius = engine.circle_radius
    ball = (state.x, state.y)

    ctx.fill_rect(appearance.background, (0, 0, engine.width, engine.height))

    ctx.stroke_circle((cx, cy), circle_radius + appearance.ring_offset,
                      transition_color(state.color_phase), appearance.ring_width)

    for point in state.collision_points:
        ctx.line(point, ball, appearance.trace_color, appearance.trace_width)

    ctx.text(appearance.label, (cx, cy), appearance.label_size, appearance.text_color)
    ctx.text(status_text(state.elapsed_time, engine.mass),
             (cx, cy + circle_radius + appearance.status_offset),
             appearance.status_size, appearance.text_color)

    # Oldest ghost is faintest
    steps = engine.config.motion_blur_steps
    for index, pos in enumerate(state.previous_positions):
        alpha = (index + 1) / steps
        ctx.fill_circle(pos, state.radius, appearance.ball_color, alpha * appearance.ghost_alpha)

    ctx.fill_circle(ball, state.radius, appearance.ball_color)


_fonts = {}


def get_font(size: int) -> pygame.font.Font:
    if size not in _fonts:
        if not pygame.font.get_init():
            pygame.font.init()
        _fonts[size] = pygame.font.Font(None, size)
    return _fonts[size]


class PygameContext:
    """DrawingContext over a pygame.Surface."""

    def __init__(self, surface: pygame.Surface):
        self.surface = surface

    def fill_rect(self, color, rect):
        self.surface.fill(color, pygame.Rect(*rect))

    def stroke_circle(self, center, radius, color, width):
        # Canvas strokes straddle the path; pygame draws the band inward from the radius
        outer = radius + width / 2
        pygame.draw.circle(self.surface, color, center, outer, max(1, int(round(width))))

    def fill_circle(self, center, radius, color, alpha=1.0):
        if alpha >= 1.0:
            pygame.draw.circle(self.surface, color, center, radius)
            return
        size = int(math.ceil(radius)) * 2 + 2
        tmp = pygame.Surface((size, size), pygame.SRCALPHA)
        pygame.draw.circle(tmp, (*color, int(round(alpha * 255))), (size / 2, size / 2), radius)
        self.surface.blit(tmp, (center[0] - size / 2, center[1] - size / 2))

    def line(self, start, end, color, width):
        pygame.draw.line(self.surface, color, start, end, max(1, int(round(width))))

    def text(self, text, position, size, color):
        rendered = get_font(size).render(text, True, color)
        # Anchor on the baseline centre, as canvas fillText does with textAlign=center
        self.surface.blit(rendered, rendered.get_rect(midbottom=(position[0], position[1])))


class PygameCanvas:
    """Fixed-size drawable surface. Pass an existing surface to draw into it."""

    def __init__(self, width: int, height: int, surface: Optional[pygame.Surface] = None):
        self.width = width
        self.height = height
        self.surface = surface

    def get_context(self) -> Optional[PygameContext]:
        if self.surface is None:
            try:
                self.surface = pygame.Surface((self.width, self.height))
            except pygame.error as e:
                logger.warning('Could not create %dx%d surface: %s', self.width, self.height, e)
                return None
        return PygameContext(self.surface)


def to_array(surface: pygame.Surface) -> np.ndarray:
    """Surface → (H, W, 3) uint8."""
    return pygame.surfarray.array3d(surface).transpose(1, 0, 2)


def save_frame(surface: pygame.Surface, path: str):
    """Save one frame as PNG, creating parent directories."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    pygame.image.save(surface, path)


def scale_to_height(surface: pygame.Surface, height: int) -> pygame.Surface:
    """Fit a tall canvas into a window of the given height, keeping aspect."""
    w, h = surface.get_size()
    width = max(1, int(round(w * height / h)))
    return pygame.transform.smoothscale(surface, (width, height))


def draw_lines(surface: pygame.Surface, lines: Sequence[str], position: Point = (12, 12),
               size: int = 22, color: Color = (255, 255, 255)):
    """Left-aligned text block, one entry per row."""
    font = get_font(size)
    x, y = position
    for row in lines:
        rendered = font.render(row, True, color)
        surface.blit(rendered, (x, y))
        y += rendered.get_height() + 2

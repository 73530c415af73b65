"""Keyboard parameter panel: play/pause, reset and four sliders wired to engine setters."""

import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, List

os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame

import singing_ball as SB


@dataclass
class Slider:
    label: str
    minimum: float
    maximum: float
    step: float
    value: float
    apply: Callable[[float], None]

    def set(self, value: float) -> float:
        """Clamp onto the advertised range, snap to the step grid, push to the engine."""
        value = min(max(value, self.minimum), self.maximum)
        n_steps = round((value - self.minimum) / self.step)
        decimals = max(0, -Decimal(str(self.step)).as_tuple().exponent)
        self.value = round(min(self.minimum + n_steps * self.step, self.maximum), decimals)
        self.apply(self.value)
        return self.value

    def nudge(self, direction: int) -> float:
        return self.set(self.value + direction * self.step)


class ControlPanel:
    """Reads and writes only through the engine's public surface."""

    def __init__(self, engine):
        self.engine = engine
        cfg = engine.config
        self.sliders: List[Slider] = [
            Slider('Gravity', *SB.GRAVITY_RANGE, cfg.gravity, engine.set_gravity),
            Slider('Velocity Increase', *SB.VELOCITY_INCREASE_RANGE,
                   cfg.velocity_increase, engine.set_velocity_increase),
            Slider('Velocity Decay', *SB.VELOCITY_DECAY_RANGE,
                   cfg.velocity_decay, engine.set_velocity_decay),
            Slider('Ball Growth Rate', *SB.BALL_GROWTH_RANGE,
                   cfg.ball_growth, engine.set_ball_growth_rate),
        ]
        self.selected = 0

    def toggle_running(self) -> bool:
        if self.engine.is_running():
            self.engine.stop()
        else:
            self.engine.start()
        return self.engine.is_running()

    def reset(self):
        self.engine.reset()

    def select(self, index: int):
        self.selected = index % len(self.sliders)

    def select_next(self):
        self.select(self.selected + 1)

    def select_previous(self):
        self.select(self.selected - 1)

    def nudge(self, direction: int) -> float:
        return self.sliders[self.selected].nudge(direction)

    def handle_key(self, key: int) -> bool:
        """Returns True if the key was one of ours."""
        if key == pygame.K_SPACE:
            self.toggle_running()
        elif key == pygame.K_r:
            self.reset()
        elif key == pygame.K_UP:
            self.select_previous()
        elif key == pygame.K_DOWN:
            self.select_next()
        elif key == pygame.K_LEFT:
            self.nudge(-1)
        elif key == pygame.K_RIGHT:
            self.nudge(1)
        else:
            return False
        return True

    def lines(self) -> List[str]:
        rows = ['Running' if self.engine.is_running() else 'Paused',
                'SPACE play/pause  R reset  arrows tune']
        for i, slider in enumerate(self.sliders):
            marker = '>' if i == self.selected else ' '
            rows.append(f'{marker} {slider.label}: {slider.value:g}')
        return rows

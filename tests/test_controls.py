"""Tests for the keyboard parameter panel."""

import pygame
import pytest

from singing_ball.controls import ControlPanel, Slider


@pytest.fixture
def panel(engine):
    return ControlPanel(engine)


class TestSlider:

    def test_clamps_and_applies(self):
        applied = []
        slider = Slider('Gravity', 0.0, 1.0, 0.1, 0.4, applied.append)
        assert slider.set(5.0) == 1.0
        assert slider.set(-2.0) == 0.0
        assert applied == [1.0, 0.0]

    def test_snaps_to_step(self):
        slider = Slider('Decay', 0.99, 1.0, 0.001, 0.998, lambda v: None)
        assert slider.set(0.99449) == 0.994
        assert slider.nudge(1) == 0.995

    def test_snaps_to_exponent_form_step(self):
        slider = Slider('Fine', 0.0, 0.001, 1e-05, 0.0005, lambda v: None)
        assert slider.set(0.00051234) == 0.00051
        assert slider.nudge(1) == 0.00052


class TestControlPanel:

    def test_initial_values_match_engine_defaults(self, panel):
        assert [s.value for s in panel.sliders] == [0.4, 0.02, 0.998, 0.015]

    def test_nudge_gravity(self, panel, engine):
        assert panel.nudge(-1) == 0.3
        assert engine.gravity == 0.3

    def test_nudge_velocity_increase(self, panel, engine):
        panel.select(1)
        assert panel.nudge(1) == 0.03
        assert engine.velocity_increase_factor == pytest.approx(1.03)
        assert engine.secondary_increase_factor == pytest.approx(1.04)

    def test_decay_clamped_at_one(self, panel, engine):
        panel.select(2)
        for _ in range(5):
            panel.nudge(1)
        assert panel.sliders[2].value == 1.0
        assert engine.velocity_decay == 1.0

    def test_ball_growth(self, panel, engine):
        panel.select(3)
        panel.nudge(1)
        assert engine.ball_growth_rate == pytest.approx(1.016)

    def test_selection_wraps(self, panel):
        panel.select_previous()
        assert panel.selected == 3
        panel.select_next()
        assert panel.selected == 0

    def test_toggle_running(self, panel, engine):
        assert panel.toggle_running()
        assert engine.is_running()
        assert not panel.toggle_running()
        assert not engine.is_running()

    def test_reset(self, panel, engine, run_until_collision):
        run_until_collision(engine)
        panel.reset()
        assert engine.state.radius == 5
        assert len(engine.state.collision_points) == 0

    def test_key_mapping(self, panel, engine):
        assert panel.handle_key(pygame.K_SPACE)
        assert engine.is_running()
        assert panel.handle_key(pygame.K_DOWN)
        assert panel.selected == 1
        assert panel.handle_key(pygame.K_RIGHT)
        assert panel.sliders[1].value == 0.03
        assert panel.handle_key(pygame.K_UP)
        assert panel.handle_key(pygame.K_LEFT)
        assert engine.gravity == 0.3
        assert panel.handle_key(pygame.K_r)
        assert not panel.handle_key(pygame.K_x)

    def test_overlay_lines(self, panel):
        rows = panel.lines()
        assert rows[0] == 'Paused'
        assert '> Gravity: 0.4' in rows
        assert '  Velocity Decay: 0.998' in rows

"""Tests for WorldState ticks, commands and the background driver."""

import random
import time

import pytest

from sandbox.exceptions import ConfigurationError, GridFullError
from sandbox.physics import AttractionIntegrator, make_body
from sandbox.snake import SnakeGame
from sandbox.world import SimulationDriver, WorldState


class TestTick:
    def test_iteration_counts_ticks(self, world):
        world.run_ticks(5)
        assert world.iteration == 5

    def test_bodies_move_towards_each_other(self):
        world = WorldState([make_body((-10.0, 0.0, 0.0)), make_body((10.0, 0.0, 0.0))])
        world.run_ticks(10)
        assert world.bodies[0].pose.translation[0] > -10.0
        assert world.bodies[1].pose.translation[0] < 10.0

    def test_trail_is_sampled_every_snake_step(self, world):
        world.toggle_trail()
        world.run_ticks(40)
        assert len(world.trail) == 1
        world.run_ticks(40)
        assert len(world.trail) == 2

    def test_trail_sample_matches_lead_body(self, world):
        world.toggle_trail()
        world.tick()
        sample = world.trail[0]
        assert sample.position == world.bodies[0].pose.translation
        assert sample.velocity == world.bodies[0].velocity

    def test_no_trail_when_off(self, world):
        world.run_ticks(120)
        assert world.trail == []

    def test_snake_steps_on_boundary_ticks(self, world):
        world.tick()
        assert world.snake.snake.head() == (3, 0, 0)
        world.run_ticks(39)
        assert world.snake.snake.head() == (3, 0, 0)
        world.tick()
        assert world.snake.snake.head() == (4, 0, 0)

    def test_progress_tracks_sub_step(self, world):
        world.run_ticks(10)
        assert world.snake.progress == pytest.approx(9 / 40)

    def test_food_spawns_with_first_step(self, world):
        world.tick()
        assert len(world.snake.food) == 1
        assert world.snake.food[0].spawn_tick == 0

    def test_food_expires_between_snake_steps(self, world):
        world.iteration = 40
        world.tick()
        world.iteration = 40 + 25000
        world.tick()
        assert any(f.spawn_tick == 40 for f in world.snake.food)
        world.tick()
        assert world.iteration == 40 + 25002
        assert all(f.spawn_tick != 40 for f in world.snake.food)

    def test_body_removed_mid_tick_is_not_resurrected(self):
        class ResettingIntegrator(AttractionIntegrator):
            def __init__(self):
                super().__init__()
                self.world = None

            def step(self, bodies):
                self.world.reset()
                super().step(bodies)

        integrator = ResettingIntegrator()
        world = WorldState(
            [make_body((0.0, 0.0, 0.0)), make_body((5.0, 0.0, 0.0)), make_body((0.0, 5.0, 0.0))],
            integrator=integrator,
        )
        integrator.world = world
        world.tick()
        assert world.body_count() == 1
        assert world.bodies[0].velocity != (0.0, 0.0, 0.0)

    def test_body_added_mid_tick_is_kept(self):
        class AddingIntegrator(AttractionIntegrator):
            def step(self, bodies):
                world.add_body((50.0, 0.0, 0.0))
                super().step(bodies)

        world = WorldState([make_body((0.0, 0.0, 0.0)), make_body((5.0, 0.0, 0.0))],
                           integrator=AddingIntegrator())
        world.tick()
        assert world.body_count() == 3
        assert world.bodies[2].pose.translation == (50.0, 0.0, 0.0)

    def test_body_added_after_mid_tick_reset_is_kept(self):
        class ResetThenAddIntegrator(AttractionIntegrator):
            def step(self, bodies):
                world.reset()
                world.add_body((50.0, 0.0, 0.0))
                super().step(bodies)

        world = WorldState([make_body((0.0, 0.0, 0.0)), make_body((5.0, 0.0, 0.0))],
                           integrator=ResetThenAddIntegrator())
        world.tick()
        assert world.body_count() == 2
        assert world.bodies[0].velocity != (0.0, 0.0, 0.0)
        assert world.bodies[1].pose.translation == (50.0, 0.0, 0.0)
        assert world.bodies[1].velocity == (0.0, 0.0, 0.0)

    def test_failed_snake_step_leaves_world_unchanged(self):
        world = WorldState([make_body((0.0, 0.0, 0.0))], snake=SnakeGame(size=(3, 1, 1)))
        world.toggle_trail()
        before = world.lead_body()
        with pytest.raises(GridFullError):
            world.tick()
        assert world.iteration == 0
        assert list(world.snake.snake.parts) == [(0, 0, 0), (1, 0, 0), (2, 0, 0)]
        assert world.trail == []
        assert world.lead_body() == before


class TestCommands:
    def test_world_needs_a_body(self):
        with pytest.raises(ValueError):
            WorldState([])

    def test_create_uses_requested_count(self, seeded_rng):
        assert WorldState.create(seeded_rng, body_count=7).body_count() == 7

    def test_reset_keeps_first_body(self, world):
        first = world.lead_body()
        world.add_body((1.0, 2.0, 3.0))
        world.reset()
        assert world.body_count() == 1
        assert world.lead_body().pose == first.pose

    def test_add_body_returns_count(self, world):
        before = world.body_count()
        assert world.add_body((0.0, 0.0, 0.0)) == before + 1

    def test_add_cluster_adds_twenty_five_near_origin(self, world):
        before = world.body_count()
        world.add_cluster((100.0, 0.0, 0.0))
        assert world.body_count() == before + 25
        for body in world.bodies[before:]:
            x, y, z = body.pose.translation
            assert 100.0 <= x <= 110.0
            assert 0.0 <= y <= 10.0
            assert 0.0 <= z <= 10.0

    def test_clear_trail_keeps_trailing_flag(self, world):
        world.toggle_trail()
        world.run_ticks(41)
        world.clear_trail()
        assert world.trail == []
        assert world.trailing is True

    def test_toggle_trail_reports_state(self, world):
        assert world.toggle_trail() is True
        assert world.toggle_trail() is False

    def test_set_snake_direction_rejects_reverse(self, world):
        assert world.set_snake_direction((-1, 0, 0)) is False
        assert world.set_snake_direction((0, 1, 0)) is True

    def test_sliders_are_clamped(self, world):
        assert world.set_slider("tax", 3.0) == 1.0
        assert world.set_slider("tax", -1.0) == 0.0

    def test_unknown_slider(self, world):
        with pytest.raises(ConfigurationError):
            world.set_slider("gravity", 0.5)

    def test_reset_market_button(self, world):
        world.set_slider("tax", 0.9)
        world.press("reset")
        assert world.snapshot().market.tax == pytest.approx(0.0)


class TestSnapshot:
    def test_snapshot_is_independent(self, world):
        snap = world.snapshot()
        world.run_ticks(41)
        world.add_body((1.0, 1.0, 1.0))
        assert snap.tick == 0
        assert list(snap.snake.snake.parts) == [(0, 0, 0), (1, 0, 0), (2, 0, 0)]
        assert len(snap.bodies) == world.body_count() - 1

    def test_snapshot_carries_display_values(self, world):
        world.set_slider("brightness", 0.8)
        assert world.snapshot().display["brightness"] == pytest.approx(0.8)

    def test_stats(self, world):
        world.run_ticks(41)
        stats = world.stats()
        assert stats["tick"] == 41
        assert stats["bodies"] == world.body_count()
        assert stats["snake_length"] == 3
        assert stats["food"] == 2


class TestDriver:
    def test_driver_ticks_until_stopped(self):
        world = WorldState.create(random.Random(1), body_count=2)
        driver = SimulationDriver(world, tick_interval=0.0005)
        driver.start()
        deadline = time.monotonic() + 5.0
        while world.iteration < 10 and time.monotonic() < deadline:
            time.sleep(0.01)
        driver.stop()
        assert not driver.is_alive()
        assert world.iteration >= 10
        stopped_at = world.iteration
        time.sleep(0.02)
        assert world.iteration == stopped_at

    def test_driver_is_daemon(self, world):
        assert SimulationDriver(world).daemon is True

    def test_driver_keeps_error_and_stops(self):
        world = WorldState([make_body((0.0, 0.0, 0.0))], snake=SnakeGame(size=(3, 1, 1)))
        driver = SimulationDriver(world, tick_interval=0.0005)
        driver.start()
        driver.join(timeout=5.0)
        assert not driver.is_alive()
        assert isinstance(driver.error, GridFullError)
        assert world.iteration == 0
        with pytest.raises(GridFullError):
            driver.raise_if_failed()

    def test_healthy_driver_does_not_raise(self, world):
        driver = SimulationDriver(world)
        driver.raise_if_failed()
        assert driver.error is None

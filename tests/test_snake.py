"""Tests for the snake state machine."""

import random

import pytest

from sandbox.data_models import Food
from sandbox.exceptions import GridFullError
from sandbox.snake import Snake, SnakeGame


def make_game(parts, direction, size=(100, 100, 100), food=None):
    return SnakeGame(size=size, snake=Snake(parts, direction), food=food, rng=random.Random(7))


class TestForward:
    def test_plain_move(self):
        game = make_game([(0, 0, 0), (1, 0, 0), (2, 0, 0)], (1, 0, 0))
        game.forward()
        assert list(game.snake.parts) == [(1, 0, 0), (2, 0, 0), (3, 0, 0)]

    def test_wraps_around_grid(self):
        game = make_game([(97, 0, 0), (98, 0, 0), (99, 0, 0)], (1, 0, 0))
        game.forward()
        assert game.snake.head() == (0, 0, 0)

    def test_wraps_around_negative_side(self):
        game = make_game([(0, 2, 0), (0, 1, 0), (0, 0, 0)], (0, -1, 0))
        game.forward()
        assert game.snake.head() == (0, 99, 0)

    def test_self_collision_shrinks_to_minimum(self):
        parts = [(5, 5, 5), (1, 0, 0), (1, 1, 0), (0, 1, 0), (0, 0, 0)]
        game = make_game(parts, (1, 0, 0))
        game.forward()
        assert len(game.snake.parts) == 2
        assert list(game.snake.parts) == [(0, 0, 0), (1, 0, 0)]

    def test_collision_is_not_fatal(self):
        parts = [(5, 5, 5), (1, 0, 0), (1, 1, 0), (0, 1, 0), (0, 0, 0)]
        game = make_game(parts, (1, 0, 0))
        game.forward()
        game.forward()
        assert list(game.snake.parts) == [(1, 0, 0), (2, 0, 0)]

    def test_moving_into_vacated_tail_cell_is_allowed(self):
        parts = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
        game = make_game(parts, (0, -1, 0))
        game.forward()
        assert list(game.snake.parts) == [(1, 0, 0), (1, 1, 0), (0, 1, 0), (0, 0, 0)]

    def test_eating_food_grows_snake(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0), food=[Food((2, 0, 0), 0), Food((9, 9, 9), 0)])
        game.forward()
        assert list(game.snake.parts) == [(0, 0, 0), (1, 0, 0), (2, 0, 0)]
        assert [f.position for f in game.food] == [(9, 9, 9)]

    def test_parts_never_drop_below_two(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0))
        for _ in range(250):
            game.forward()
            assert len(game.snake.parts) >= 2


class TestDirection:
    def test_reverse_is_rejected(self):
        snake = Snake([(0, 0, 0), (1, 0, 0), (2, 0, 0)], (1, 0, 0))
        assert snake.set_direction((-1, 0, 0)) is False
        assert snake.direction == (1, 0, 0)

    def test_perpendicular_is_accepted(self):
        snake = Snake([(0, 0, 0), (1, 0, 0), (2, 0, 0)], (1, 0, 0))
        assert snake.set_direction((0, 0, 1)) is True
        assert snake.direction == (0, 0, 1)

    def test_rejection_uses_motion_not_direction(self):
        # Direction already changed to +Y but the snake has not moved yet;
        # -Y is still allowed because the last move was along +X.
        snake = Snake([(0, 0, 0), (1, 0, 0)], (0, 1, 0))
        assert snake.set_direction((0, -1, 0)) is True
        assert snake.set_direction((-1, 0, 0)) is False

    def test_needs_two_parts(self):
        with pytest.raises(ValueError):
            Snake([(0, 0, 0)], (1, 0, 0))


class TestSteer:
    def test_picks_axis_closest_to_reference(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0))
        assert game.steer((0.1, 0.2, 0.9)) == (0, 0, 1)
        assert game.snake.direction == (0, 0, 1)

    def test_never_picks_reverse(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0))
        chosen = game.steer((-1.0, 0.0, 0.0))
        assert chosen != (-1, 0, 0)
        assert game.snake.direction != (-1, 0, 0)

    def test_forward_reference_keeps_going(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (0, 1, 0))
        assert game.steer((1.0, 0.1, 0.0)) == (1, 0, 0)


class TestFood:
    def test_run_spawns_one_food_off_snake(self):
        game = make_game([(0, 0, 0), (1, 0, 0), (2, 0, 0)], (1, 0, 0))
        game.run(0)
        assert len(game.food) == 1
        assert game.food[0].position not in game.snake.parts
        assert game.food[0].spawn_tick == 0

    def test_food_expires_after_max_age(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0), food=[Food((50, 50, 50), 100)])
        game.run(100 + 25001)
        assert all(f.spawn_tick != 100 for f in game.food)
        assert len(game.food) == 1

    def test_food_survives_until_max_age(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0), food=[Food((50, 50, 50), 100)])
        game.run(100 + 25000)
        assert any(f.spawn_tick == 100 for f in game.food)

    def test_unoccupied_avoids_snake_and_food(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0), size=(4, 1, 1), food=[Food((2, 0, 0), 0)])
        for _ in range(20):
            assert game.unoccupied() == (3, 0, 0)

    def test_full_grid_raises(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0), size=(3, 1, 1), food=[Food((2, 0, 0), 0)])
        with pytest.raises(GridFullError):
            game.unoccupied()

    def test_many_steps_keep_food_distinct(self, seeded_rng):
        game = SnakeGame(rng=seeded_rng)
        for i in range(200):
            game.run(i * 40)
        positions = [f.position for f in game.food]
        assert len(positions) == len(set(positions))


class TestGeometry:
    def test_full_progress_fills_target_cell(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0))
        pose = game.extend_progress(1.0, (1, 0, 0), (2, 0, 0))
        assert pose.scale == pytest.approx((1.0, 1.0, 1.0))
        assert pose.translation == pytest.approx((2.0, 0.0, 0.0))

    def test_zero_progress_is_flat(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0))
        pose = game.extend_progress(0.0, (1, 0, 0), (1, 0, 1))
        assert pose.scale == pytest.approx((1.0, 1.0, 0.0))
        assert pose.translation == pytest.approx((1.0, 0.0, 0.5))

    def test_wrapped_segment_stays_one_cell_long(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0))
        pose = game.extend_progress(0.5, (99, 0, 0), (0, 0, 0))
        assert pose.scale == pytest.approx((0.5, 1.0, 1.0))
        assert pose.translation[0] == pytest.approx(99.75)

    def test_segment_per_part(self):
        game = make_game([(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0)], (1, 0, 0))
        game.progress = 0.25
        poses = game.segment_poses()
        assert len(poses) == 4
        # tail shrinks with 1 - progress, head grows with progress
        assert poses[0].scale[0] == pytest.approx(0.75)
        assert poses[-1].scale[0] == pytest.approx(0.25)
        assert poses[1].scale == pytest.approx((1.0, 1.0, 1.0))

    def test_head_tip_leads_the_head(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0))
        game.progress = 1.0
        assert game.head_tip()[0] == pytest.approx(1.5)

    def test_clone_is_independent(self):
        game = make_game([(0, 0, 0), (1, 0, 0)], (1, 0, 0))
        copy = game.clone()
        game.forward()
        assert list(copy.snake.parts) == [(0, 0, 0), (1, 0, 0)]

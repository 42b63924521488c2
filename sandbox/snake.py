#!/usr/bin/env python3
"""
Snake game on a toroidal 3D grid.

The snake is a deque of grid cells, oldest first; the last two cells give its
current motion. Every step the new head is the old head plus the direction,
wrapped on every axis. Running into its own body does not end the game: the
snake shrinks back to its minimum length of two cells and carries on.

Food is spawned once per step on a free cell and expires after FOOD_MAX_AGE
ticks if it is not eaten.

Between steps `progress` (0..1) tells the renderer how far the head has grown
into its new cell and how far the tail has withdrawn from its old one.
"""
import logging
import random
from collections import deque
from typing import Deque, List, Optional, Sequence, Tuple

from .constants import FOOD_MAX_AGE, GRID_SIZE, SNAKE_WORLD_SCALE
from .data_models import Food, GridPosition, Pose
from .exceptions import GridFullError
from .vector_utils import Vec3, vec_add, vec_dot

logger = logging.getLogger(__name__)

AXIS_DIRECTIONS: Tuple[GridPosition, ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
)


def grid_add(a: GridPosition, b: GridPosition) -> GridPosition:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def grid_sub(a: GridPosition, b: GridPosition) -> GridPosition:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def grid_neg(a: GridPosition) -> GridPosition:
    return (-a[0], -a[1], -a[2])


def grid_wrap(a: GridPosition, size: Sequence[int]) -> GridPosition:
    """Wrap every axis into [0, size)."""
    return (a[0] % size[0], a[1] % size[1], a[2] % size[2])


class Snake:
    """Body cells (oldest first) and the direction of the next step."""

    def __init__(self, parts: Sequence[GridPosition], direction: GridPosition):
        if len(parts) < 2:
            raise ValueError("a snake needs at least two parts")
        self.parts: Deque[GridPosition] = deque(tuple(p) for p in parts)
        self.direction: GridPosition = tuple(direction)

    @classmethod
    def new(cls) -> "Snake":
        return cls([(0, 0, 0), (1, 0, 0), (2, 0, 0)], (1, 0, 0))

    def head(self) -> GridPosition:
        return self.parts[-1]

    def motion(self) -> GridPosition:
        """Vector from the second-newest part to the newest."""
        return grid_sub(self.parts[-1], self.parts[-2])

    def set_direction(self, direction: GridPosition) -> bool:
        """Change direction unless it would reverse into the body."""
        direction = tuple(direction)
        if direction == grid_neg(self.motion()):
            return False
        self.direction = direction
        return True

    def shrink_to_minimum(self) -> None:
        """Drop everything but the head; the caller appends the new cell."""
        head = self.parts[-1]
        self.parts.clear()
        self.parts.append(head)

    def clone(self) -> "Snake":
        return Snake(list(self.parts), self.direction)


class SnakeGame:
    """
    Snake, food and the grid they live on.

    Args:
        size: Cells per axis
        snake: Initial snake (defaults to Snake.new())
        food: Food already on the grid
        pose: World placement of the whole grid; its scale is the world extent
        rng: Random source for food placement
    """

    def __init__(
        self,
        size: Sequence[int] = GRID_SIZE,
        snake: Optional[Snake] = None,
        food: Optional[List[Food]] = None,
        pose: Optional[Pose] = None,
        rng: Optional[random.Random] = None,
    ):
        self.size: Tuple[int, int, int] = tuple(size)
        self.snake = snake or Snake.new()
        self.food: List[Food] = list(food or [])
        self.pose = pose or Pose(scale=SNAKE_WORLD_SCALE)
        self.progress = 0.0
        self.rng = rng or random.Random()

    # -----------------------
    # State transitions
    # -----------------------

    def forward(self) -> None:
        """
        Move the snake one cell.

        A crash leaves exactly two parts, the old head and the new cell.
        """
        parts = self.snake.parts
        candidate = grid_wrap(grid_add(parts[-1], self.snake.direction), self.size)

        if candidate in list(parts)[1:]:
            logger.debug("Snake crashed into itself at %s (length %d)", candidate, len(parts))
            self.snake.shrink_to_minimum()
        else:
            eaten = self._food_index(candidate)
            if eaten is not None:
                del self.food[eaten]
                if parts[0] == candidate:
                    self.snake.shrink_to_minimum()
            else:
                parts.popleft()

        parts.append(candidate)

    def run(self, iteration: int) -> None:
        """One snake step: move, expire old food, spawn one new food item."""
        self.forward()
        self.expire_food(iteration)
        self.food.append(Food(position=self.unoccupied(), spawn_tick=iteration))

    def expire_food(self, iteration: int) -> None:
        self.food = [f for f in self.food if iteration - f.spawn_tick <= FOOD_MAX_AGE]

    def unoccupied(self) -> GridPosition:
        """
        Uniformly random cell holding neither food nor a snake part.

        Raises:
            GridFullError: every cell is taken, so sampling would never end.
        """
        taken = {f.position for f in self.food} | set(self.snake.parts)
        capacity = self.size[0] * self.size[1] * self.size[2]
        if len(taken) >= capacity:
            raise GridFullError(f"no free cell left on a {self.size} grid")

        while True:
            position = (
                self.rng.randrange(self.size[0]),
                self.rng.randrange(self.size[1]),
                self.rng.randrange(self.size[2]),
            )
            if position not in taken:
                return position

    def steer(self, reference: Vec3) -> Optional[GridPosition]:
        """
        Point the snake along the axis closest to `reference`.

        The reverse of the current motion is never a candidate. Returns the
        chosen direction, or None if it was rejected.
        """
        reverse = grid_neg(self.snake.motion())
        best = None
        best_dot = None
        for direction in AXIS_DIRECTIONS:
            if direction == reverse:
                continue
            d = vec_dot(direction, reference)
            if best_dot is None or d > best_dot:
                best, best_dot = direction, d
        if best is None or not self.snake.set_direction(best):
            return None
        return best

    def _food_index(self, position: GridPosition) -> Optional[int]:
        for i, f in enumerate(self.food):
            if f.position == position:
                return i
        return None

    # -----------------------
    # Geometry
    # -----------------------

    def cell_scale(self) -> Vec3:
        s = self.pose.scale
        return (s[0] / self.size[0], s[1] / self.size[1], s[2] / self.size[2])

    def cell_pose(self, position: GridPosition) -> Pose:
        cell = self.cell_scale()
        translation = vec_add(
            self.pose.translation,
            (position[0] * cell[0], position[1] * cell[1], position[2] * cell[2]),
        )
        return Pose(scale=cell, translation=translation)

    def _step_delta(self, attached: GridPosition, attaching: GridPosition) -> GridPosition:
        """Unit step between neighbouring cells, taking wrap-around into account."""
        delta = list(grid_sub(attaching, attached))
        for axis in range(3):
            if delta[axis] > self.size[axis] // 2:
                delta[axis] -= self.size[axis]
            elif delta[axis] < -(self.size[axis] // 2):
                delta[axis] += self.size[axis]
        return tuple(delta)

    def extend_progress(self, progress: float, attached: GridPosition, attaching: GridPosition) -> Pose:
        """
        Pose of a segment growing from `attached` into `attaching`.

        At progress 0 the segment is flat against the shared face; at 1 it
        fills the `attaching` cell.
        """
        cell = self.cell_scale()
        delta = self._step_delta(attached, attaching)
        scale = tuple(
            (progress if delta[axis] != 0 else 1.0) * cell[axis] for axis in range(3)
        )
        translation = tuple(
            self.pose.translation[axis]
            + (attached[axis] + 0.5 * delta[axis] * (1.0 + progress)) * cell[axis]
            for axis in range(3)
        )
        return Pose(scale=scale, translation=translation)

    def segment_poses(self) -> List[Pose]:
        """Tail, body and head poses with the tail and head interpolated."""
        parts = self.snake.parts
        poses = [self.extend_progress(1.0 - self.progress, parts[1], parts[0])]
        for i in range(1, len(parts) - 1):
            poses.append(self.cell_pose(parts[i]))
        poses.append(self.extend_progress(self.progress, parts[-2], parts[-1]))
        return poses

    def head_tip(self) -> Vec3:
        """World position of the leading face of the head."""
        parts = self.snake.parts
        extended = self.extend_progress(self.progress, parts[-2], parts[-1])
        delta = self._step_delta(parts[-2], parts[-1])
        return tuple(
            extended.translation[axis] + extended.scale[axis] * 0.5 * delta[axis]
            for axis in range(3)
        )

    def clone(self) -> "SnakeGame":
        game = SnakeGame(self.size, self.snake.clone(), list(self.food), self.pose, self.rng)
        game.progress = self.progress
        return game

#!/usr/bin/env python3
"""
Shared world state and the background simulation driver.

What this module does
- WorldState owns the bodies, the trail, the snake game and the control panel.
  Each is guarded by its own re-entrant lock.
- SimulationDriver is a daemon thread that calls WorldState.tick() at a fixed
  real-time cadence for the lifetime of the process.

Lock discipline
- Locks are held only long enough to copy or assign. The tick copies the bodies,
  releases the lock, runs the O(N^2) attraction pass on the copy and then
  re-acquires the lock to commit. If reset() ran in between, only body 0 is
  written back; every other index may now hold a body added after the reset.
- A snake step runs on a copy of the game and is committed only if it
  succeeds, so a failed tick leaves the world as it was.
- Commands (add body, reset, trail toggles, steering, sliders) are applied
  directly under the relevant lock from the presentation thread. A command is
  observed by the first tick that starts after it; there is no stronger
  ordering.
- Readers call snapshot(), which returns copies; the presentation thread never
  sees a body mid-update.

Only the driver integrates velocities. The presentation thread writes the
control panel and applies commands.
"""
import logging
import random
import threading
import time
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from .constants import (
    ADDED_BODY_COLOR,
    BODY_COLOR,
    BODY_SIZE,
    CLUSTER_SIZE,
    CLUSTER_SPREAD,
    INITIAL_BODY_COUNT,
    INITIAL_SPAWN_RANGE,
    SNAKE_STEP_TICKS,
    TICK_INTERVAL,
)
from .controls import ControlPanel
from .data_models import Body, Color, GridPosition, TrailVector
from .economics import MarketGraph
from .exceptions import SandboxError
from .physics import AttractionIntegrator, make_body
from .snake import SnakeGame
from .vector_utils import Vec3, vec_add

logger = logging.getLogger(__name__)


@dataclass
class WorldSnapshot:
    """Copies of the shared state taken for one frame."""
    bodies: List[Body]
    trail: List[TrailVector]
    trailing: bool
    snake: SnakeGame
    market: MarketGraph
    display: Dict[str, float] = field(default_factory=dict)
    tick: int = 0


def copy_bodies(bodies: List[Body]) -> List[Body]:
    # Pose and the vector tuples are immutable, so a shallow copy per body is enough.
    return [replace(b) for b in bodies]


class WorldState:
    """
    The shared context passed to both the simulation driver and the
    presentation loop.
    """

    def __init__(self, bodies: List[Body], snake: Optional[SnakeGame] = None,
                 controls: Optional[ControlPanel] = None,
                 integrator: Optional[AttractionIntegrator] = None,
                 rng: Optional[random.Random] = None):
        if not bodies:
            raise ValueError("the world needs at least one body")
        self.rng = rng or random.Random()

        self.body_lock = threading.RLock()
        self.bodies: List[Body] = list(bodies)
        # Bumped by reset(); a tick that sees it change keeps only body 0.
        self.generation = 0

        self.trail_lock = threading.RLock()
        self.trail: List[TrailVector] = []
        self.trailing = False

        self.snake_lock = threading.RLock()
        self.snake = snake or SnakeGame(rng=self.rng)

        self.controls_lock = threading.RLock()
        self.controls = controls or ControlPanel()

        self.integrator = integrator or AttractionIntegrator()
        self.iteration = 0

    @classmethod
    def create(cls, rng: Optional[random.Random] = None,
               body_count: int = INITIAL_BODY_COUNT) -> "WorldState":
        """Initial scene: resting bodies scattered uniformly in a cube around the origin."""
        rng = rng or random.Random()
        r = INITIAL_SPAWN_RANGE
        bodies = [
            make_body(
                (rng.uniform(-r, r), rng.uniform(-r, r), rng.uniform(-r, r)),
                BODY_COLOR,
                BODY_SIZE,
            )
            for _ in range(max(1, body_count))
        ]
        return cls(bodies, rng=rng)

    # -----------------------
    # Simulation tick
    # -----------------------

    def tick(self) -> None:
        """Advance the world by one tick."""
        iteration = self.iteration
        boundary = iteration % SNAKE_STEP_TICKS == 0

        with self.body_lock:
            bodies = copy_bodies(self.bodies)
            generation = self.generation

        self.integrator.step(bodies)

        with self.snake_lock:
            if boundary:
                game = self.snake.clone()
                game.run(iteration)
                self.snake = game
            else:
                self.snake.expire_food(iteration)
            self.snake.progress = (iteration % SNAKE_STEP_TICKS) / SNAKE_STEP_TICKS

        with self.trail_lock:
            if boundary and self.trailing:
                lead = bodies[0]
                self.trail.append(TrailVector(lead.pose.translation, lead.velocity))

        with self.body_lock:
            count = min(len(self.bodies), len(bodies))
            if generation != self.generation:
                count = min(count, 1)
            for i in range(count):
                self.bodies[i] = bodies[i]

        self.iteration = iteration + 1

    def run_ticks(self, count: int) -> None:
        for _ in range(count):
            self.tick()

    # -----------------------
    # Commands
    # -----------------------

    def add_body(self, translation: Vec3, color: Color = ADDED_BODY_COLOR) -> int:
        with self.body_lock:
            self.bodies.append(make_body(translation, color, BODY_SIZE))
            count = len(self.bodies)
        logger.info("Added body at (%.1f, %.1f, %.1f); %d bodies", *translation, count)
        return count

    def add_cluster(self, origin: Vec3, size: int = CLUSTER_SIZE) -> int:
        """Add `size` randomly colored bodies scattered just beyond `origin`."""
        new_bodies = []
        for _ in range(size):
            offset = (self.rng.random(), self.rng.random(), self.rng.random())
            color = (self.rng.random(), self.rng.random(), self.rng.random())
            translation = vec_add(origin, tuple(o * CLUSTER_SPREAD for o in offset))
            new_bodies.append(make_body(translation, color, BODY_SIZE))
        with self.body_lock:
            self.bodies.extend(new_bodies)
            count = len(self.bodies)
        logger.info("Added cluster of %d bodies; %d bodies", size, count)
        return count

    def reset(self) -> None:
        """Remove every body except body 0."""
        with self.body_lock:
            del self.bodies[1:]
            self.generation += 1
        logger.info("Reset bodies")

    def toggle_trail(self) -> bool:
        with self.trail_lock:
            self.trailing = not self.trailing
            trailing = self.trailing
        logger.info("Trail %s", "on" if trailing else "off")
        return trailing

    def clear_trail(self) -> None:
        with self.trail_lock:
            self.trail = []
        logger.info("Cleared trail")

    def steer_snake(self, reference: Vec3) -> Optional[GridPosition]:
        with self.snake_lock:
            return self.snake.steer(reference)

    def set_snake_direction(self, direction: GridPosition) -> bool:
        with self.snake_lock:
            return self.snake.snake.set_direction(direction)

    def set_slider(self, name: str, value: float) -> float:
        with self.controls_lock:
            return self.controls.set_slider(name, value)

    def press(self, name: str) -> None:
        with self.controls_lock:
            self.controls.press(name)

    def reset_market(self) -> None:
        with self.controls_lock:
            self.controls.reset_market()

    # -----------------------
    # Readers
    # -----------------------

    def body_count(self) -> int:
        with self.body_lock:
            return len(self.bodies)

    def lead_body(self) -> Body:
        with self.body_lock:
            return replace(self.bodies[0])

    def snapshot(self) -> WorldSnapshot:
        with self.body_lock:
            bodies = copy_bodies(self.bodies)
        with self.trail_lock:
            trail = list(self.trail)
            trailing = self.trailing
        with self.snake_lock:
            snake = self.snake.clone()
        with self.controls_lock:
            market = self.controls.market_graph()
            display = self.controls.display_values()
        return WorldSnapshot(
            bodies=bodies,
            trail=trail,
            trailing=trailing,
            snake=snake,
            market=market,
            display=display,
            tick=self.iteration,
        )

    def stats(self) -> Dict[str, float]:
        snap = self.snapshot()
        return {
            "tick": snap.tick,
            "bodies": len(snap.bodies),
            "trail": len(snap.trail),
            "snake_length": len(snap.snake.snake.parts),
            "food": len(snap.snake.food),
        }


class SimulationDriver(threading.Thread):
    """
    Background loop: tick, then sleep for the tick interval.

    Runs until stop() is called or the process exits (daemon thread). A
    SandboxError raised by a tick ends the loop; it is kept in `error` for the
    presentation loop to re-raise.
    """

    def __init__(self, world: WorldState, tick_interval: float = TICK_INTERVAL):
        super().__init__(daemon=True, name="simulation-driver")
        self.world = world
        self.tick_interval = tick_interval
        self._stop_event = threading.Event()
        self.error: Optional[SandboxError] = None

    def run(self):
        logger.info("Simulation driver started (%.4f s per tick)", self.tick_interval)
        while not self._stop_event.is_set():
            try:
                self.world.tick()
            except SandboxError as e:
                logger.exception("Simulation driver failed at tick %d", self.world.iteration)
                self.error = e
                break
            time.sleep(self.tick_interval)
        logger.info("Simulation driver stopped at tick %d", self.world.iteration)

    def raise_if_failed(self) -> None:
        if self.error is not None:
            raise self.error

    def stop(self, timeout: Optional[float] = 2.0) -> None:
        self._stop_event.set()
        if self.is_alive():
            self.join(timeout=timeout)

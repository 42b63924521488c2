#!/usr/bin/env python3
"""
Cube Sandbox application entry point and viewport/control-panel coordination.

What this module does
- Builds a WorldState (bodies, snake game, trail, market sliders) and starts the
  SimulationDriver thread that ticks it.
- Runs the presentation loop on the main thread: Pygame viewport input and
  drawing plus the Dear PyGui control panel, both pumped once per frame.
- Offers a headless mode that ticks the world as fast as possible and logs stats.

Threading model
- Exactly two long-lived threads: the simulation driver (background) and this
  presentation loop (main). Input events are turned into WorldState commands
  synchronously on the presentation loop.
- Every frame the presentation loop takes a snapshot (copies made under the
  world's locks) and renders from that copy only.

Controls (viewport window)
- W/S/A/D: move camera; hold right mouse button and drag: look around
- B: cycle camera follow (snake head, body 0, free)
- N: add body at camera; M: add a cluster of bodies; R: remove all but body 0
- T: toggle trail of body 0; C: clear trail
- Arrow keys, O, L: steer the snake relative to the camera

Running
1) Install dependencies: `pip install -e .`
2) Run this module: `python cube_sandbox.py` (or `--headless --ticks 20000`)
"""

import argparse
import logging
import math
import random
import sys
from typing import List, Optional, Tuple

# GUI and Rendering libs
import pygame
import dearpygui.dearpygui as dpg

import numpy as np

from sandbox.camera import Camera
from sandbox.constants import (
    BACKGROUND_COLOR,
    CAMERA_NEAR,
    CAMERA_SENSITIVITY,
    CAMERA_STEP,
    FOLLOW_BODY_DISTANCE,
    FOLLOW_SNAKE_DISTANCE,
    HUD_COLOR,
    TARGET_FPS,
    TICK_INTERVAL,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from sandbox.controls import ElementKind
from sandbox.data_models import DrawRecord
from sandbox.exceptions import SandboxError
from sandbox.scene import build_draw_records
from sandbox.vector_utils import vec_norm, vec_scale
from sandbox.world import SimulationDriver, WorldSnapshot, WorldState

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
)

logger = logging.getLogger(__name__)

FOLLOW_MODES = ("snake", "body", "free")

# Unit cube centred on the origin, as homogeneous column vectors.
CUBE_CORNERS = np.array([
    [-0.5, -0.5, -0.5, 1.0],
    [0.5, -0.5, -0.5, 1.0],
    [0.5, 0.5, -0.5, 1.0],
    [-0.5, 0.5, -0.5, 1.0],
    [-0.5, -0.5, 0.5, 1.0],
    [0.5, -0.5, 0.5, 1.0],
    [0.5, 0.5, 0.5, 1.0],
    [-0.5, 0.5, 0.5, 1.0],
]).T
CUBE_FACES = (
    ((0, 1, 2, 3), (0.0, 0.0, -1.0)),
    ((4, 5, 6, 7), (0.0, 0.0, 1.0)),
    ((0, 1, 5, 4), (0.0, -1.0, 0.0)),
    ((3, 2, 6, 7), (0.0, 1.0, 0.0)),
    ((0, 3, 7, 4), (-1.0, 0.0, 0.0)),
    ((1, 2, 6, 5), (1.0, 0.0, 0.0)),
)
SAFE_COORD_LIMIT = 30000


# ============================================================
# Software projection of draw records
# ============================================================

def light_direction(light: float) -> np.ndarray:
    angle = light * math.pi
    return np.array(vec_norm((math.cos(angle), 1.0, math.sin(angle))))


def project_records(records: List[DrawRecord], view_projection: np.ndarray, size: Tuple[int, int],
                    brightness: float, light: float):
    """
    Project every cube face to screen space.

    Returns (depth, points, rgb) tuples sorted far to near so they can be
    painted in order. Cubes with any corner behind the near plane are skipped.
    """
    w, h = size
    light_dir = light_direction(light)
    ambient = 0.35
    polygons = []
    for record in records:
        clip = view_projection @ record.transform @ CUBE_CORNERS
        depth = clip[3]
        if np.any(depth <= CAMERA_NEAR):
            continue
        ndc = clip[:3] / depth
        xs = (ndc[0] + 1.0) * 0.5 * w
        ys = (1.0 - ndc[1]) * 0.5 * h
        if np.any(np.abs(xs) > SAFE_COORD_LIMIT) or np.any(np.abs(ys) > SAFE_COORD_LIMIT):
            continue
        rotation = record.transform[:3, :3]
        for indices, normal in CUBE_FACES:
            n = rotation @ np.array(normal)
            length = np.linalg.norm(n)
            lambert = abs(float(np.dot(n / length, light_dir))) if length > 0 else 0.0
            shade = min(1.0, ambient + brightness * 1.5 * lambert)
            rgb = tuple(int(min(255, max(0, c * 255 * shade))) for c in record.color)
            points = [(float(xs[i]), float(ys[i])) for i in indices]
            polygons.append((float(np.mean(depth[list(indices)])), points, rgb))
    polygons.sort(key=lambda p: p[0], reverse=True)
    return polygons


# ============================================================
# Pygame viewport
# ============================================================

class Viewport:
    """
    Pygame window: turns key/mouse input into camera moves and world commands,
    and draws the current snapshot.
    """
    def __init__(self, world: WorldState):
        self.world = world
        self.camera = Camera()
        self.surface = None
        self.clock = None
        self.font = None
        self.follow_mode = FOLLOW_MODES[0]
        self.turning = False
        self.running = True

    def open(self):
        pygame.init()
        pygame.display.set_caption("Cube Sandbox - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        try:
            self.font = pygame.font.SysFont("consolas", 16)
        except Exception:
            self.font = pygame.font.Font(None, 16)

    def close(self):
        pygame.quit()

    def steering_reference(self, key) -> Optional[Tuple[float, float, float]]:
        right = self.camera.right()
        forward = self.camera.horizontal_forward()
        return {
            pygame.K_RIGHT: right,
            pygame.K_LEFT: vec_scale(right, -1.0),
            pygame.K_UP: forward,
            pygame.K_DOWN: vec_scale(forward, -1.0),
            pygame.K_o: (0.0, -1.0, 0.0),
            pygame.K_l: (0.0, 1.0, 0.0),
        }.get(key)

    def handle_key(self, key):
        if key == pygame.K_w:
            self.camera.go_forward(CAMERA_STEP)
        elif key == pygame.K_s:
            self.camera.go_forward(-CAMERA_STEP)
        elif key == pygame.K_d:
            self.camera.go_right(CAMERA_STEP)
        elif key == pygame.K_a:
            self.camera.go_right(-CAMERA_STEP)
        elif key == pygame.K_b:
            i = FOLLOW_MODES.index(self.follow_mode)
            self.follow_mode = FOLLOW_MODES[(i + 1) % len(FOLLOW_MODES)]
            logger.info("Camera follow: %s", self.follow_mode)
        elif key == pygame.K_n:
            self.world.add_body(self.camera.world_position())
        elif key == pygame.K_m:
            self.world.add_cluster(self.camera.world_position())
        elif key == pygame.K_r:
            self.world.reset()
        elif key == pygame.K_t:
            self.world.toggle_trail()
        elif key == pygame.K_c:
            self.world.clear_trail()
        else:
            reference = self.steering_reference(key)
            if reference is not None:
                self.world.steer_snake(reference)

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 3:
                self.turning = True
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 3:
                self.turning = False
            elif event.type == pygame.MOUSEMOTION and self.turning:
                dx, dy = event.rel
                self.camera.turn(-dy * CAMERA_SENSITIVITY, dx * CAMERA_SENSITIVITY)

    def follow(self, snapshot: WorldSnapshot):
        if self.follow_mode == "snake":
            self.camera.follow(snapshot.snake.head_tip(), FOLLOW_SNAKE_DISTANCE)
        elif self.follow_mode == "body":
            self.camera.follow(snapshot.bodies[0].pose.translation, FOLLOW_BODY_DISTANCE)

    def draw(self, snapshot: WorldSnapshot):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)
        w, h = surf.get_size()

        records = build_draw_records(snapshot)
        view_projection = self.camera.view_projection(w / max(h, 1))
        polygons = project_records(
            records,
            view_projection,
            (w, h),
            snapshot.display.get("brightness", 0.5),
            snapshot.display.get("light", 0.5),
        )
        for _, points, rgb in polygons:
            pygame.draw.polygon(surf, rgb, points)

        self.draw_graph(surf, snapshot)

        surplus = snapshot.market.surplus()
        lines = [
            "WASD: move | RMB-drag: look | B: follow | N/M: add | R: reset | T/C: trail | Arrows/O/L: steer",
            f"Tick {snapshot.tick}  Bodies {len(snapshot.bodies)}  Trail {len(snapshot.trail)}"
            f"{' (on)' if snapshot.trailing else ''}  Snake {len(snapshot.snake.snake.parts)}"
            f"  Food {len(snapshot.snake.food)}  Follow: {self.follow_mode}",
            f"Consumer {surplus.consumer:.3f}  Producer {surplus.producer:.3f}  "
            f"Government {surplus.government:.3f}  Outside {surplus.outside:.3f}  Loss {surplus.loss:.3f}",
        ]
        for i, line in enumerate(lines):
            surf.blit(self.font.render(line, True, HUD_COLOR), (10, 10 + 20 * i))

        pygame.display.flip()

    def draw_graph(self, surf, snapshot: WorldSnapshot):
        """Supply, taxed demand and efficient demand curves in a corner inset."""
        market = snapshot.market
        size = 220
        w, h = surf.get_size()
        left, top = w - size - 10, h - size - 10
        pygame.draw.rect(surf, (235, 235, 235), (left, top, size, size))

        def to_screen(q, p):
            u = q / 1.5
            v = (p + 0.2 + market.slide) / 2.25
            return (left + u * size, top + (1.0 - v) * size)

        curves = (
            (market.supply, (0, 0, 0)),
            (market.demand + market.outside, (0, 0, 0)),
            (market.demand - market.tax, (255, 128, 0)),
        )
        for curve, color in curves:
            points = []
            for i in range(41):
                q = 1.5 * i / 40
                x, y = to_screen(q, curve.y(q))
                if top <= y <= top + size:
                    points.append((x, y))
            if len(points) > 1:
                pygame.draw.lines(surf, color, False, points, 2)

        for equilibrium, color in ((market.natural_equilibrium(), (0, 190, 255)),
                                   (market.optimal_equilibrium(), (230, 50, 60))):
            x, y = to_screen(equilibrium.quantity, equilibrium.price)
            if top <= y <= top + size:
                pygame.draw.circle(surf, color, (int(x), int(y)), 4)


# ============================================================
# Dear PyGui control panel
# ============================================================

class UI:
    """
    Dear PyGui interface: market and display sliders, world commands and a
    surplus readout.
    """
    def __init__(self, world: WorldState):
        self.world = world
        self.slider_ids = {}
        self.readout_id = None
        self._build_ui()

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Cube Sandbox - Controls', width=420, height=520)

        with dpg.window(label="Controls", width=400, height=500, pos=(10, 10), tag="main_window"):
            dpg.add_text("Market")
            for element in self.world.controls.elements:
                if element.kind is ElementKind.SLIDER:
                    self.slider_ids[element.name] = dpg.add_slider_float(
                        label=element.label, min_value=0.0, max_value=1.0,
                        default_value=element.value, width=220,
                        callback=lambda s, a, u: self.world.set_slider(u, a),
                        user_data=element.name,
                    )
                else:
                    dpg.add_button(label=element.label, callback=lambda s, a, u: self._press(u),
                                   user_data=element.name)

            dpg.add_separator()
            dpg.add_text("Bodies")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Add cluster", callback=lambda: self.world.add_cluster((0.0, 0.0, 0.0)))
                dpg.add_button(label="Reset", callback=self.world.reset)
            with dpg.group(horizontal=True):
                dpg.add_button(label="Toggle trail", callback=self.world.toggle_trail)
                dpg.add_button(label="Clear trail", callback=self.world.clear_trail)

            dpg.add_separator()
            self.readout_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    def _press(self, name: str):
        self.world.press(name)
        with self.world.controls_lock:
            values = self.world.controls.values()
        for slider, item in self.slider_ids.items():
            dpg.set_value(item, values[slider])

    def sync(self, snapshot: WorldSnapshot):
        natural = snapshot.market.natural_equilibrium()
        optimal = snapshot.market.optimal_equilibrium()
        surplus = snapshot.market.surplus()
        dpg.set_value(
            self.readout_id,
            f"Natural   q={natural.quantity:.3f} p={natural.price:.3f}\n"
            f"Optimal   q={optimal.quantity:.3f} p={optimal.price:.3f}\n"
            f"Consumer  {surplus.consumer:.4f}\n"
            f"Producer  {surplus.producer:.4f}\n"
            f"Government {surplus.government:.4f}\n"
            f"Outside   {surplus.outside:.4f}\n"
            f"Loss      {surplus.loss:.4f}",
        )

    def is_running(self) -> bool:
        return dpg.is_dearpygui_running()

    def render_frame(self):
        dpg.render_dearpygui_frame()

    def close(self):
        dpg.destroy_context()


# ============================================================
# Application entry
# ============================================================

def run_interactive(world: WorldState, tick_interval: float):
    driver = SimulationDriver(world, tick_interval)
    viewport = Viewport(world)
    viewport.open()
    ui = UI(world)

    driver.start()
    frame = 0
    try:
        while viewport.running and ui.is_running():
            driver.raise_if_failed()
            viewport.handle_events()
            snapshot = world.snapshot()
            viewport.follow(snapshot)
            viewport.draw(snapshot)
            if frame % 6 == 0:
                ui.sync(snapshot)
            ui.render_frame()
            viewport.clock.tick(TARGET_FPS)
            frame += 1
    finally:
        driver.stop()
        ui.close()
        viewport.close()


def run_headless(world: WorldState, ticks: int, stats_interval: int):
    logger.info("Running %d ticks headless", ticks)
    for _ in range(ticks):
        world.tick()
        if stats_interval and world.iteration % stats_interval == 0:
            stats = world.stats()
            logger.info(
                "tick %(tick)d: %(bodies)d bodies, trail %(trail)d, snake %(snake_length)d, food %(food)d",
                stats,
            )
    surplus = world.snapshot().market.surplus()
    logger.info("Final surplus: %s", surplus)


def main(argv=None):
    """Parse command-line arguments and run the appropriate mode."""
    parser = argparse.ArgumentParser(
        description="Cube Sandbox: attraction, 3D snake and supply/demand in one world",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive viewport and control panel
  python cube_sandbox.py

  # Headless run with the trail enabled and stats every 4000 ticks
  python cube_sandbox.py --headless --ticks 40000 --stats-interval 4000 --trail
        """,
    )
    parser.add_argument("--headless", action="store_true", help="Tick without opening any window")
    parser.add_argument("--ticks", type=int, default=10000,
                        help="Ticks to run in headless mode (default: 10000)")
    parser.add_argument("--stats-interval", type=int, default=1000,
                        help="Log stats every N ticks in headless mode (default: 1000)")
    parser.add_argument("--tick-interval", type=float, default=TICK_INTERVAL,
                        help=f"Seconds slept per tick by the simulation driver (default: {TICK_INTERVAL})")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (optional)")
    parser.add_argument("--trail", action="store_true", help="Start with the trail enabled")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")
    args = parser.parse_args(argv)

    logging.getLogger().setLevel(args.log_level)

    world = WorldState.create(random.Random(args.seed))
    if args.trail:
        world.toggle_trail()

    try:
        if args.headless:
            run_headless(world, args.ticks, args.stats_interval)
        else:
            run_interactive(world, args.tick_interval)
    except SandboxError as e:
        logger.error("Simulation failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Shared constants for Cube Sandbox.

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier. Distances are in world units (one body cube
is one unit wide); time is counted in ticks of the simulation driver.
"""

# Simulation cadence
TICK_INTERVAL = 0.001  # seconds slept per tick by the simulation driver
SNAKE_STEP_TICKS = 40  # snake moves, food spawns and the trail samples once per window
FOOD_MAX_AGE = 25000  # ticks before uneaten food expires

# Attraction
ATTRACTION_GAIN = 0.0005  # scales the per-pair direction/distance^2 term
INITIAL_BODY_COUNT = 4
INITIAL_SPAWN_RANGE = 100.0  # initial bodies spawn uniformly in [-range, range) per axis
CLUSTER_SIZE = 25  # bodies added by a single cluster command
CLUSTER_SPREAD = 10.0
BODY_SIZE = 1.0
REFERENCE_AXIS = (1.0, 0.0, 0.0)  # bodies and arrows point this axis along their vector

# Trail arrows
TRAIL_VECTOR_SCALE = 20.0  # velocity is stretched this much when drawn
TRAIL_THICKNESS = 0.1

# Snake
GRID_SIZE = (100, 100, 100)
SNAKE_WORLD_SCALE = (100.0, 100.0, 100.0)  # world extent of the whole grid

# Economics: supply 2x^2 + 0.1, demand -x^2 + 1
SUPPLY_COEFFICIENTS = (2.0, 0.0, 0.1)
DEMAND_COEFFICIENTS = (-1.0, 0.0, 1.0)
MARKET_DEFAULTS = {
    "outside": 0.5,
    "tax": 0.5,
    "reduction": 0.0,
    "slide": 0.5,
}

# Colors (RGB floats 0..1)
BODY_COLOR = (0.0, 0.0, 0.0)
ADDED_BODY_COLOR = (1.0, 0.0, 0.0)
TRAIL_COLOR = (1.0, 0.0, 0.0)
SNAKE_COLOR = (1.0, 0.0, 0.0)
FOOD_COLOR = (0.0, 1.0, 0.0)
FRAME_COLOR = (1.0, 0.0, 0.0)
FLOOR_COLOR = (1.0, 1.0, 1.0)
PRODUCER_COLOR = (0.9, 0.95, 0.0)
CONSUMER_COLOR = (0.0, 0.75, 1.0)
GOVERNMENT_COLOR = (0.05, 0.3, 0.05)
OUTSIDE_COLOR = (0.1, 0.6, 0.1)
LOSS_COLOR = (0.9, 0.2, 0.25)

# Surplus bar layout
SURPLUS_BAR_SCALE = (40.0, 500.0, 40.0)
SURPLUS_BAR_SPACING = 60.0
SURPLUS_BAR_ORIGIN = (-250.0, 0.0, -100.0)
FLOOR_SCALE = (500.0, 1.0, 50.0)
FLOOR_TRANSLATION = (-100.0, 1.0, -100.0)

# Camera
WORLD_SCALE = 0.01  # view space is world space scaled by this factor
CAMERA_STEP = 0.05  # view-space units per movement key press
CAMERA_SENSITIVITY = 0.0015  # radians per pixel of mouse motion
CAMERA_FOV = 1.5707963267948966  # pi / 2
CAMERA_NEAR = 0.01
CAMERA_FAR = 100.0
FOLLOW_BODY_DISTANCE = 1.0 / 30.0
FOLLOW_SNAKE_DISTANCE = 1.0 / 5.0

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (10, 12, 18)
HUD_COLOR = (200, 200, 200)
TARGET_FPS = 60
DEFAULT_BRIGHTNESS = 0.5
DEFAULT_LIGHT = 0.5

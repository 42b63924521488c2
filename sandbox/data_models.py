#!/usr/bin/env python3
"""
Data models for Cube Sandbox.

This module defines the dataclasses shared between the simulation driver, the
scene builder and the renderer.

Units and usage
- translation and velocity are in world units; velocity is added to translation
  once per tick, so it is measured in world units per tick.
- color is an RGB tuple of floats in 0..1.
- Body instances are owned by WorldState and are only mutated on copies taken
  under its lock; Pose, TrailVector and Food are immutable.
"""
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from .vector_utils import IDENTITY_QUAT, Quat, Vec3, vec_add, vec_scale, vec_mul

Color = Tuple[float, float, float]
GridPosition = Tuple[int, int, int]


@dataclass(frozen=True)
class Pose:
    """
    Scale, rotation and translation describing a scaled rigid transform.

    The matrix applies scale first, then rotation, then translation.
    """
    scale: Vec3 = (1.0, 1.0, 1.0)
    rotation: Quat = IDENTITY_QUAT
    translation: Vec3 = (0.0, 0.0, 0.0)

    def center(self) -> Vec3:
        """Centre of the unit box placed at this pose (translation + scale/2)."""
        return vec_add(self.translation, vec_scale(self.scale, 0.5))

    def matrix(self) -> np.ndarray:
        """4x4 column-vector transform matrix (T * R * S)."""
        x, y, z, w = self.rotation
        rot = np.array([
            [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
            [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
            [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
        ], dtype=float)
        m = np.identity(4, dtype=float)
        m[:3, :3] = rot * np.array(self.scale, dtype=float)
        m[:3, 3] = self.translation
        return m

    def scaled_by(self, factors: Vec3) -> "Pose":
        return Pose(vec_mul(self.scale, factors), self.rotation, self.translation)


@dataclass
class Body:
    """
    A cube taking part in the attraction simulation.

    Fields:
    - pose: Current scale/rotation/translation
    - color: RGB tuple used for rendering
    - velocity: Accumulated per-tick displacement. Attraction adds to it every
      tick and it is never reset, so it behaves as a velocity.
    """
    pose: Pose
    color: Color = (0.0, 0.0, 0.0)
    velocity: Vec3 = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class TrailVector:
    """Snapshot of body 0's position and velocity, drawn as an arrow."""
    position: Vec3
    velocity: Vec3


@dataclass(frozen=True)
class Food:
    """A food item on the snake grid and the tick it was spawned at."""
    position: GridPosition
    spawn_tick: int


@dataclass
class DrawRecord:
    """One unit cube handed to the renderer: a 4x4 transform and a color."""
    transform: np.ndarray
    color: Color = field(default=(1.0, 1.0, 1.0))

    @classmethod
    def from_pose(cls, pose: Pose, color: Color) -> "DrawRecord":
        return cls(pose.matrix(), color)

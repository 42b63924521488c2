#!/usr/bin/env python3
"""
Attraction Engine for Cube Sandbox

Responsibilities
- Accumulate pairwise attraction into each body's velocity.
- Move every body by its velocity once per tick.
- Turn each body so its reference axis points along its velocity.

Units and conventions
- Positions are in world units; one body cube is one unit wide.
- Velocities are in world units per tick. There is no timestep: one tick is the
  implicit unit of time.
- Bodies carry no mass; every pair attracts with the same gain.

Numerical notes
- The pull of body j on body i is (t_j - t_i) / d^2, i.e. the direction vector
  divided by the squared distance, so its magnitude falls off as 1/d rather than
  the 1/d^2 of Newtonian gravity. This is the intended toy law.
- There is no softening and no damping. Close pairs produce very large velocity
  changes and energy is not conserved.
- Complexity: O(N^2) per tick (direct summation).

Threading
- This module is pure compute over the list it is given. WorldState hands it a
  copy of the bodies taken under its lock and commits the result afterwards.
"""

import math
from dataclasses import replace
from typing import List

from .constants import ATTRACTION_GAIN, REFERENCE_AXIS
from .data_models import Body, Pose
from .vector_utils import IDENTITY_QUAT, Vec3, rotation_between, vec_add, vec_sub


class AttractionIntegrator:
    """
    Pairwise attraction with a symplectic-Euler-like update.

    Each tick runs in two phases. All velocity changes are computed from the
    positions at the start of the tick first; only then are velocities and
    positions written, so the result does not depend on body order.
    """

    def __init__(self, gain: float = ATTRACTION_GAIN):
        self.gain = float(gain)

    def compute_velocity_deltas(self, bodies: List[Body]) -> List[Vec3]:
        """
        Velocity change for every body due to all other bodies.

        For each ordered pair (i, j), i != j:

            dv_i += gain * (t_j - t_i) / |c_j - c_i|^2

        where t is a body's translation and c its centre. A pair with exactly
        coincident centres contributes nothing.

        Args:
            bodies: Bodies to read (not modified).

        Returns:
            List of (dvx, dvy, dvz) in the same order as the input.
        """
        n = len(bodies)
        translations = [b.pose.translation for b in bodies]
        centers = [b.pose.center() for b in bodies]
        deltas = []

        for i in range(n):
            sx, sy, sz = 0.0, 0.0, 0.0
            for j in range(n):
                if i == j:
                    continue
                dx, dy, dz = vec_sub(centers[i], centers[j])
                distance = math.sqrt(dx * dx + dy * dy + dz * dz)
                if distance == 0.0:
                    continue
                inv_d2 = 1.0 / (distance * distance)
                tx, ty, tz = vec_sub(translations[j], translations[i])
                sx += tx * inv_d2
                sy += ty * inv_d2
                sz += tz * inv_d2
            deltas.append((sx * self.gain, sy * self.gain, sz * self.gain))

        return deltas

    def step(self, bodies: List[Body]) -> None:
        """
        Advance all bodies by one tick (modified in place).

        Args:
            bodies: List of Body objects, normally a snapshot copy.
        """
        deltas = self.compute_velocity_deltas(bodies)

        for body, delta in zip(bodies, deltas):
            body.velocity = vec_add(body.velocity, delta)

        for body in bodies:
            translation = vec_add(body.pose.translation, body.velocity)
            body.pose = replace(
                body.pose,
                translation=translation,
                rotation=align_rotation(body.velocity),
            )


def align_rotation(velocity: Vec3):
    """
    Rotation turning the reference axis onto `velocity`.

    A zero velocity, or one parallel or anti-parallel to the reference axis,
    has no well-defined rotation axis; those bodies get the identity rotation.
    """
    rotation = rotation_between(REFERENCE_AXIS, velocity)
    if rotation is None:
        return IDENTITY_QUAT
    return rotation


def make_body(translation: Vec3, color=(0.0, 0.0, 0.0), size: float = 1.0) -> Body:
    """Create a resting body with a uniform cube of `size`."""
    return Body(pose=Pose(scale=(size, size, size), translation=translation), color=color)

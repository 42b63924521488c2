#!/usr/bin/env python3
"""
First-person camera for the 3D viewport.

The camera lives in view space, which is world space scaled by WORLD_SCALE.
It keeps +Y as up and refuses turns that would tip it over the vertical.
"""
import math
from typing import Optional

import numpy as np

from .constants import CAMERA_FAR, CAMERA_FOV, CAMERA_NEAR, WORLD_SCALE
from .vector_utils import (
    IDENTITY_QUAT,
    Quat,
    Vec3,
    quat_from_axis_angle,
    quat_mul,
    quat_normalize,
    quat_rotate,
    vec_add,
    vec_cross,
    vec_dot,
    vec_norm,
    vec_scale,
    vec_sub,
)

UP: Vec3 = (0.0, 1.0, 0.0)
FORWARD_AXIS: Vec3 = (1.0, 0.0, 0.0)


class Camera:
    """
    Pose of the viewer: a rotation and a translation in view space.

    `forward` is the rotated +X axis and is cached because steering and
    following both read it every frame.
    """

    def __init__(self, rotation: Quat = IDENTITY_QUAT, translation: Vec3 = (0.0, 0.0, 0.0)):
        self.rotation = rotation
        self.translation = translation
        self.forward = quat_rotate(rotation, FORWARD_AXIS)

    def up(self) -> Vec3:
        return UP

    def right(self) -> Vec3:
        return vec_norm(vec_cross(self.forward, UP))

    def turn(self, pitch: float, yaw: float) -> bool:
        """Rotate by pitch/yaw radians; returns False if the turn was refused."""
        rotation = quat_mul(
            quat_from_axis_angle(self.right(), -pitch),
            quat_from_axis_angle(UP, -yaw),
        )
        new_rotation = quat_normalize(quat_mul(rotation, self.rotation))
        new_forward = quat_rotate(new_rotation, FORWARD_AXIS)
        if vec_dot(new_forward, (self.forward[0], 0.0, self.forward[2])) <= 0.0:
            return False
        self.rotation = new_rotation
        self.forward = new_forward
        return True

    def go_forward(self, step: float) -> None:
        self.translation = vec_add(self.translation, vec_scale(self.forward, step))

    def go_right(self, step: float) -> None:
        self.translation = vec_add(self.translation, vec_scale(self.right(), step))

    def world_position(self) -> Vec3:
        """Camera position in world units."""
        return vec_scale(self.translation, 1.0 / WORLD_SCALE)

    def follow(self, world_point: Vec3, distance: float) -> None:
        """Sit `distance` view units behind a world-space point."""
        target = vec_scale(world_point, WORLD_SCALE)
        offset = vec_scale(self.forward, distance)
        self.translation = vec_add(vec_sub(target, offset), (0.005, 0.005, 0.005))

    def horizontal_forward(self) -> Vec3:
        return (self.forward[0], 0.0, self.forward[2])

    def view_matrix(self) -> np.ndarray:
        """Right-handed look-at matrix, including the world-to-view scale."""
        eye = np.array(self.translation, dtype=float)
        f = np.array(vec_norm(self.forward), dtype=float)
        s = np.cross(f, np.array(UP, dtype=float))
        s_len = np.linalg.norm(s)
        if s_len == 0:
            s = np.array(self.right(), dtype=float)
        else:
            s = s / s_len
        u = np.cross(s, f)
        look = np.identity(4, dtype=float)
        look[0, :3] = s
        look[1, :3] = u
        look[2, :3] = -f
        look[:3, 3] = [-np.dot(s, eye), -np.dot(u, eye), np.dot(f, eye)]
        scale = np.diag([WORLD_SCALE, WORLD_SCALE, WORLD_SCALE, 1.0])
        return look @ scale

    @staticmethod
    def projection_matrix(aspect_ratio: float, fov: float = CAMERA_FOV,
                          near: float = CAMERA_NEAR, far: float = CAMERA_FAR) -> np.ndarray:
        """OpenGL-style right-handed perspective projection."""
        f = 1.0 / math.tan(fov / 2.0)
        proj = np.zeros((4, 4), dtype=float)
        proj[0, 0] = f / aspect_ratio
        proj[1, 1] = f
        proj[2, 2] = (far + near) / (near - far)
        proj[2, 3] = 2.0 * far * near / (near - far)
        proj[3, 2] = -1.0
        return proj

    def view_projection(self, aspect_ratio: float, projection: Optional[np.ndarray] = None) -> np.ndarray:
        if projection is None:
            projection = self.projection_matrix(aspect_ratio)
        return projection @ self.view_matrix()

#!/usr/bin/env python3
"""
Vector and quaternion helper functions for 3D operations.

These are small, fast functions for vector math used throughout the app.
Vectors are (x, y, z) tuples; quaternions are (x, y, z, w) tuples.
"""
import math
from typing import Optional, Tuple

Vec3 = Tuple[float, float, float]
Quat = Tuple[float, float, float, float]

IDENTITY_QUAT: Quat = (0.0, 0.0, 0.0, 1.0)


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def vec_sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def vec_scale(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def vec_mul(a: Vec3, b: Vec3) -> Vec3:
    """Component-wise product."""
    return (a[0] * b[0], a[1] * b[1], a[2] * b[2])


def vec_len(a: Vec3) -> float:
    return math.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def vec_norm(a: Vec3) -> Vec3:
    l = vec_len(a)
    if l == 0:
        return (0.0, 0.0, 0.0)
    return (a[0] / l, a[1] / l, a[2] / l)


def vec_dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def vec_cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def angle_between(a: Vec3, b: Vec3) -> float:
    """Unsigned angle in radians; 0 when either vector has zero length."""
    la, lb = vec_len(a), vec_len(b)
    if la == 0 or lb == 0:
        return 0.0
    return math.acos(clamp(vec_dot(a, b) / (la * lb), -1.0, 1.0))


def quat_from_axis_angle(axis: Vec3, angle: float) -> Quat:
    """Rotation of `angle` radians around the unit vector `axis`."""
    s = math.sin(angle * 0.5)
    return (axis[0] * s, axis[1] * s, axis[2] * s, math.cos(angle * 0.5))


def quat_mul(q: Quat, r: Quat) -> Quat:
    """Hamilton product q * r (apply r first, then q)."""
    x1, y1, z1, w1 = q
    x2, y2, z2, w2 = r
    return (
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
    )


def quat_normalize(q: Quat) -> Quat:
    l = math.sqrt(sum(c * c for c in q))
    if l == 0:
        return IDENTITY_QUAT
    return (q[0] / l, q[1] / l, q[2] / l, q[3] / l)


def quat_rotate(q: Quat, v: Vec3) -> Vec3:
    """Rotate vector v by unit quaternion q."""
    u = (q[0], q[1], q[2])
    w = q[3]
    t = vec_scale(vec_cross(u, v), 2.0)
    return vec_add(vec_add(v, vec_scale(t, w)), vec_cross(u, t))


def rotation_between(reference: Vec3, target: Vec3) -> Optional[Quat]:
    """
    Rotation taking `reference` onto the direction of `target`.

    Returns None when the cross product vanishes (zero-length target, or target
    parallel/anti-parallel to the reference) since the rotation axis is
    undefined there.
    """
    axis = vec_cross(reference, target)
    if vec_len(axis) == 0:
        return None
    return quat_from_axis_angle(vec_norm(axis), angle_between(reference, target))

#!/usr/bin/env python3
"""
Scene assembly: turns a WorldSnapshot into the ordered list of unit cubes the
renderer draws each frame.

Order: bodies, trail arrows, snake segments, food, grid frame, surplus bars,
floor plate.
"""
from typing import TYPE_CHECKING, List, Sequence, Tuple

from .constants import (
    CONSUMER_COLOR,
    FLOOR_COLOR,
    FLOOR_SCALE,
    FLOOR_TRANSLATION,
    FOOD_COLOR,
    FRAME_COLOR,
    GOVERNMENT_COLOR,
    LOSS_COLOR,
    OUTSIDE_COLOR,
    PRODUCER_COLOR,
    REFERENCE_AXIS,
    SNAKE_COLOR,
    SURPLUS_BAR_ORIGIN,
    SURPLUS_BAR_SCALE,
    SURPLUS_BAR_SPACING,
    TRAIL_COLOR,
    TRAIL_THICKNESS,
    TRAIL_VECTOR_SCALE,
)
from .data_models import Color, DrawRecord, Pose, TrailVector
from .economics import Surplus
from .snake import SnakeGame
from .vector_utils import (
    IDENTITY_QUAT,
    Vec3,
    quat_rotate,
    rotation_between,
    vec_add,
    vec_len,
    vec_scale,
)

if TYPE_CHECKING:
    from .world import WorldSnapshot

Block = Tuple[float, Color]

# Half turn about Z.
BAR_ROTATION = (0.0, 0.0, 1.0, 0.0)


def arrow_pose(position: Vec3, vector: Vec3, thickness: float = TRAIL_THICKNESS) -> Pose:
    """
    Thin box from `position` along `vector`.

    When `vector` is parallel or anti-parallel to the reference axis (or zero)
    no rotation is needed or possible; the box is stretched along that axis
    with a signed scale instead.
    """
    rotation = rotation_between(REFERENCE_AXIS, vector)
    if rotation is None:
        scale = (vector[0], thickness, thickness)
        return Pose(scale=scale, rotation=IDENTITY_QUAT,
                    translation=vec_add(position, vec_scale(scale, 0.5)))
    scale = (vec_len(vector), thickness, thickness)
    offset = quat_rotate(rotation, vec_scale(scale, 0.5))
    return Pose(scale=scale, rotation=rotation, translation=vec_add(position, offset))


def trail_records(trail: Sequence[TrailVector]) -> List[DrawRecord]:
    return [
        DrawRecord.from_pose(
            arrow_pose(v.position, vec_scale(v.velocity, TRAIL_VECTOR_SCALE)),
            TRAIL_COLOR,
        )
        for v in trail
    ]


def snake_records(game: SnakeGame) -> List[DrawRecord]:
    records = [DrawRecord.from_pose(p, SNAKE_COLOR) for p in game.segment_poses()]
    records.extend(DrawRecord.from_pose(game.cell_pose(f.position), FOOD_COLOR) for f in game.food)
    return records


def frame_records(pose: Pose) -> List[DrawRecord]:
    """Twelve edges of the snake grid, drawn from four alternating corners."""
    records = []
    for corner in ((False, False, False), (True, False, True), (True, True, False), (False, True, True)):
        position = list(pose.translation)
        vector = list(pose.scale)
        for axis in range(3):
            if corner[axis]:
                position[axis] += pose.scale[axis]
                vector[axis] = -vector[axis]
        position = tuple(position)
        for axis in range(3):
            edge = [0.0, 0.0, 0.0]
            edge[axis] = vector[axis]
            records.append(DrawRecord.from_pose(arrow_pose(position, tuple(edge)), FRAME_COLOR))
    return records


def block_stack(blocks: Sequence[Block], pose: Pose) -> List[DrawRecord]:
    """
    Stack signed bar segments along the pose's local Y axis.

    Negative blocks are not drawn while any positive block exists; instead
    they lower the base of the stack by their combined size. A zero block is
    only drawn when it is the stack's sole entry.
    """
    negative = sum(value for value, _ in blocks if value < 0.0)
    positive = [b for b in blocks if b[0] > 0.0]

    translation = pose.translation
    sy = pose.scale[1]
    if positive:
        translation = vec_add(translation, vec_scale(quat_rotate(pose.rotation, (0.0, negative, 0.0)), sy))
        shown = positive
    else:
        shown = list(blocks)

    records = []
    for value, color in shown:
        if value == 0.0 and len(blocks) != 1:
            continue
        half = vec_scale(quat_rotate(pose.rotation, (0.0, value, 0.0)), sy * 0.5)
        translation = vec_add(translation, half)
        records.append(DrawRecord.from_pose(
            Pose(
                scale=(pose.scale[0], sy * value, pose.scale[2]),
                rotation=pose.rotation,
                translation=translation,
            ),
            color,
        ))
        translation = vec_add(translation, half)
    return records


def surplus_stacks(surplus: Surplus) -> List[List[Block]]:
    """Outside alone, the full decomposition, the market total, then each part."""
    return [
        [(surplus.outside, OUTSIDE_COLOR)],
        [
            (surplus.outside, OUTSIDE_COLOR),
            (surplus.producer, PRODUCER_COLOR),
            (surplus.consumer, CONSUMER_COLOR),
            (surplus.government, GOVERNMENT_COLOR),
            (surplus.loss, LOSS_COLOR),
        ],
        [
            (surplus.producer, PRODUCER_COLOR),
            (surplus.consumer, CONSUMER_COLOR),
            (surplus.government, GOVERNMENT_COLOR),
        ],
        [(surplus.producer, PRODUCER_COLOR)],
        [(surplus.consumer, CONSUMER_COLOR)],
        [(surplus.government, GOVERNMENT_COLOR)],
    ]


def surplus_records(surplus: Surplus) -> List[DrawRecord]:
    records = []
    for i, stack in enumerate(surplus_stacks(surplus)):
        pose = Pose(
            scale=SURPLUS_BAR_SCALE,
            rotation=BAR_ROTATION,
            translation=(
                SURPLUS_BAR_ORIGIN[0] + SURPLUS_BAR_SPACING * i,
                SURPLUS_BAR_ORIGIN[1],
                SURPLUS_BAR_ORIGIN[2],
            ),
        )
        records.extend(block_stack(stack, pose))
    return records


def build_draw_records(snapshot: "WorldSnapshot") -> List[DrawRecord]:
    """Every cube to draw this frame, in draw order."""
    records = [DrawRecord.from_pose(b.pose, b.color) for b in snapshot.bodies]
    records.extend(trail_records(snapshot.trail))
    records.extend(snake_records(snapshot.snake))
    records.extend(frame_records(snapshot.snake.pose))
    records.extend(surplus_records(snapshot.market.surplus()))
    records.append(DrawRecord.from_pose(
        Pose(scale=FLOOR_SCALE, translation=FLOOR_TRANSLATION),
        FLOOR_COLOR,
    ))
    return records

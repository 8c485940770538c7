"""Connector alignment — the rigid transform that docks one connector onto another."""

from __future__ import annotations

from dungeongen.geometry.vector import (
    Transform, look_rotation, mat_mul, neg, rotate, sub, transpose,
)
from dungeongen.scene.adapter import ConnectorPose


FACE_TO_FACE = 0
PASS_THROUGH = 1
ALIGN_MODES = (FACE_TO_FACE, PASS_THROUGH)


def align_to_connector(
    attach: ConnectorPose, target: ConnectorPose, mode: int,
) -> Transform:
    """Module transform that puts *attach* onto *target*.

    *attach* is the candidate's connector in module space (i.e. with the
    module at the origin, unrotated).  In face-to-face mode the attach
    connector ends up facing against the target; in pass-through mode it
    faces the same way.  Its up axis always follows the target's.
    """
    desired = neg(target.forward) if mode == FACE_TO_FACE else target.forward
    rotation = mat_mul(
        look_rotation(desired, target.up),
        transpose(look_rotation(attach.forward, attach.up)),
    )
    position = sub(target.position, rotate(rotation, attach.position))
    return Transform(position=position, rotation=rotation)

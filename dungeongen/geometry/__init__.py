from .vector import (
    Vec3,
    Mat3,
    Transform,
    IDENTITY,
    look_rotation,
    distance,
    dot,
    neg,
    is_close,
)
from .bounds import AABB, boxes_overlap

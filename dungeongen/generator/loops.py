"""Loop closure — joining two open connectors without adding a module."""

from __future__ import annotations

import logging

from dungeongen.config import GeneratorRules
from dungeongen.geometry.vector import (
    distance, dot, look_rotation, mat_mul, neg, transpose,
)
from dungeongen.scene.adapter import ConnectorPose, Handle

from .context import LoopClosure, SearchContext
from .frontier import OpenConnector
from .overlap import overlaps_existing


log = logging.getLogger(__name__)


def closable(a: ConnectorPose, b: ConnectorPose, rules: GeneratorRules) -> bool:
    """Level, close together and facing each other."""
    if abs(a.position[1] - b.position[1]) > rules.loop_height_tolerance:
        return False
    if distance(a.position, b.position) > rules.loop_distance_max:
        return False
    return dot(a.forward, b.forward) <= rules.loop_align_dot_max


def branch_to_move(
    ctx: SearchContext, mover: Handle, anchor: Handle,
) -> list[Handle] | None:
    """Instances that move with *mover* when it is docked onto *anchor*.

    That is the attachment subtree hanging off the lowest common ancestor
    of the two, on *mover*'s side.  Returns None when *mover*'s instance
    lies on *anchor*'s ancestor chain, since moving it would drag the
    anchor along.
    """
    anchor_chain: set[Handle] = set()
    node: Handle | None = anchor
    while node is not None:
        anchor_chain.add(node)
        node = ctx.parents.get(node)
    if mover in anchor_chain:
        return None

    root = mover
    while True:
        parent = ctx.parents.get(root)
        if parent is None or parent in anchor_chain:
            break
        root = parent

    branch = [root]
    i = 0
    while i < len(branch):
        branch.extend(ctx.children_of(branch[i]))
        i += 1
    return branch


def _try_dock(
    ctx: SearchContext,
    mover: OpenConnector, mover_pose: ConnectorPose,
    anchor: OpenConnector, anchor_pose: ConnectorPose,
) -> LoopClosure | None:
    branch = branch_to_move(ctx, mover.handle, anchor.handle)
    if branch is None:
        return None

    delta = mat_mul(
        look_rotation(neg(anchor_pose.forward), anchor_pose.up),
        transpose(look_rotation(mover_pose.forward, mover_pose.up)),
    )
    previous = {h: ctx.scene.get_transform(h) for h in branch}
    for h, t in previous.items():
        ctx.scene.set_transform(
            h, t.about(mover_pose.position, delta, anchor_pose.position))

    moving = set(branch)
    others = [h for h in ctx.placed if h not in moving]
    if any(overlaps_existing(ctx.scene, h, others) for h in branch):
        for h, t in previous.items():
            ctx.scene.set_transform(h, t)
        return None
    return LoopClosure(moved=mover, anchor=anchor, previous=previous)


def find_loop_closure(ctx: SearchContext) -> LoopClosure | None:
    """Scan open connector pairs and apply the first loop that fits.

    On success the moved instances are left at their new transforms and
    the returned closure records their old ones; the caller takes the two
    connectors off the frontier (``SearchContext.closing``).
    """
    conns = list(ctx.frontier)
    poses = [ctx.pose_of(c) for c in conns]
    for i in range(len(conns)):
        for j in range(i + 1, len(conns)):
            if not closable(poses[i], poses[j], ctx.rules):
                continue
            closure = _try_dock(ctx, conns[i], poses[i], conns[j], poses[j])
            if closure is None:
                closure = _try_dock(ctx, conns[j], poses[j], conns[i], poses[i])
            if closure is not None:
                return closure
    return None

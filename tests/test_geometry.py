"""Tests for vector math, bounding boxes and connector alignment.

Validates:
  - look_rotation produces an orthonormal basis along forward / up
  - Transform.about rotates around a pivot and lands on the target
  - AABB intersection, shrinking and the zero-volume rule
  - Alignment round-trip: face-to-face and pass-through docking put the
    attach connector exactly on the target
"""

from __future__ import annotations

import math
import unittest

from dungeongen.geometry.bounds import AABB, boxes_overlap
from dungeongen.geometry.vector import (
    IDENTITY, Transform, cross, dot, is_close, length, look_rotation,
    mat_mul, neg, normalize, transpose,
)
from dungeongen.generator.alignment import (
    ALIGN_MODES, FACE_TO_FACE, PASS_THROUGH, align_to_connector,
)
from dungeongen.scene import AnalyticScene, ConnectorPose
from tests.dungeon_fixture import corridor


class TestVectorHelpers(unittest.TestCase):

    def test_normalize_zero_vector_raises(self):
        with self.assertRaises(ValueError):
            normalize((0.0, 0.0, 0.0))

    def test_look_rotation_identity(self):
        rot = look_rotation((0.0, 0.0, 1.0), (0.0, 1.0, 0.0))
        for i in range(3):
            for j in range(3):
                self.assertAlmostEqual(rot[i][j], 1.0 if i == j else 0.0)

    def test_look_rotation_orthonormal(self):
        t = Transform(rotation=look_rotation((1.0, 0.2, -3.0), (0.1, 1.0, 0.0)))
        for axis in (t.right, t.up, t.forward):
            self.assertAlmostEqual(length(axis), 1.0)
        self.assertAlmostEqual(dot(t.right, t.up), 0.0)
        self.assertAlmostEqual(dot(t.up, t.forward), 0.0)
        self.assertTrue(is_close(cross(t.right, t.up), t.forward))
        self.assertTrue(is_close(t.forward, normalize((1.0, 0.2, -3.0))))

    def test_look_rotation_up_parallel_to_forward(self):
        """A degenerate up still yields a valid rotation."""
        t = Transform(rotation=look_rotation((0.0, 1.0, 0.0), (0.0, 1.0, 0.0)))
        self.assertTrue(is_close(t.forward, (0.0, 1.0, 0.0)))
        self.assertAlmostEqual(dot(t.up, t.forward), 0.0)
        self.assertAlmostEqual(length(t.up), 1.0)

    def test_transpose_is_inverse(self):
        rot = look_rotation((1.0, 0.0, 1.0), (0.0, 1.0, 0.0))
        prod = mat_mul(rot, transpose(rot))
        for i in range(3):
            for j in range(3):
                self.assertAlmostEqual(prod[i][j], 1.0 if i == j else 0.0)

    def test_apply_point_yaw_90(self):
        # forward = +X is a 90° yaw: local +Z maps to world +X
        t = Transform(position=(10.0, 0.0, 0.0), rotation=look_rotation((1.0, 0.0, 0.0)))
        self.assertTrue(is_close(t.apply_point((0.0, 0.0, 2.0)), (12.0, 0.0, 0.0)))
        self.assertTrue(is_close(t.apply_point((1.0, 0.0, 0.0)), (10.0, 0.0, -1.0)))

    def test_about_pivot(self):
        """Rotating 180° about a pivot then moving the pivot onto a target."""
        half_turn = look_rotation((0.0, 0.0, -1.0))
        t = Transform(position=(0.0, 0.0, 2.0)).about(
            pivot=(0.0, 0.0, 1.0), delta=half_turn, target=(5.0, 0.0, 0.0))
        self.assertTrue(is_close(t.position, (5.0, 0.0, -1.0)))
        self.assertTrue(is_close(t.forward, (0.0, 0.0, -1.0)))

    def test_from_basis(self):
        t = Transform.from_basis((1.0, 2.0, 3.0), (0.0, 0.0, -1.0), (0.0, 1.0, 0.0))
        self.assertEqual(t.position, (1.0, 2.0, 3.0))
        self.assertTrue(is_close(t.forward, (0.0, 0.0, -1.0)))
        self.assertTrue(is_close(t.up, (0.0, 1.0, 0.0)))


class TestAABB(unittest.TestCase):

    def test_from_points_and_size(self):
        box = AABB.from_points([(0, 0, 0), (2, 1, -3), (1, 4, 0)])
        self.assertEqual(box.min, (0, 0, -3))
        self.assertEqual(box.max, (2, 4, 0))
        self.assertEqual(box.size, (2, 4, 3))
        self.assertAlmostEqual(box.volume, 24.0)

    def test_touching_boxes_intersect(self):
        a = AABB((0, 0, 0), (1, 1, 1))
        b = AABB((1, 0, 0), (2, 1, 1))
        self.assertTrue(a.intersects(b))

    def test_shrunk_touching_boxes_do_not_intersect(self):
        a = AABB((0, 0, 0), (1, 1, 1)).expand(-0.01)
        b = AABB((1, 0, 0), (2, 1, 1)).expand(-0.01)
        self.assertFalse(a.intersects(b))

    def test_overlapping_boxes(self):
        a = AABB((0, 0, 0), (2, 2, 2))
        b = AABB((1, 1, 1), (3, 3, 3))
        self.assertTrue(boxes_overlap(a, b))

    def test_zero_volume_never_overlaps(self):
        a = AABB.empty_at((0.5, 0.5, 0.5))
        b = AABB((0, 0, 0), (1, 1, 1))
        self.assertTrue(a.is_empty)
        self.assertTrue(a.intersects(b))
        self.assertFalse(boxes_overlap(a, b))
        self.assertFalse(boxes_overlap(b, a))

    def test_over_shrink_collapses(self):
        box = AABB((0, 0, 0), (1, 0.01, 1)).expand(-0.01)
        self.assertTrue(box.is_empty)
        self.assertLessEqual(box.min[1], box.max[1])

    def test_from_points_empty_raises(self):
        with self.assertRaises(ValueError):
            AABB.from_points([])


class TestConnectorAlignment(unittest.TestCase):
    """Docking a connector onto a target must reproduce the target pose."""

    def setUp(self):
        self.attach = ConnectorPose(
            position=(0.5, 0.0, 2.0), forward=(0.0, 0.0, 1.0), up=(0.0, 1.0, 0.0))
        self.target = ConnectorPose(
            position=(3.0, 1.0, -2.0),
            forward=normalize((1.0, 0.0, 1.0)),
            up=(0.0, 1.0, 0.0),
        )

    def test_face_to_face(self):
        t = align_to_connector(self.attach, self.target, FACE_TO_FACE)
        self.assertTrue(is_close(t.apply_point(self.attach.position), self.target.position))
        self.assertTrue(is_close(t.apply_direction(self.attach.forward), neg(self.target.forward)))
        self.assertTrue(is_close(t.apply_direction(self.attach.up), self.target.up))

    def test_pass_through(self):
        t = align_to_connector(self.attach, self.target, PASS_THROUGH)
        self.assertTrue(is_close(t.apply_point(self.attach.position), self.target.position))
        self.assertTrue(is_close(t.apply_direction(self.attach.forward), self.target.forward))

    def test_round_trip_through_scene(self):
        """Reading the connector back from the scene gives the target pose."""
        scene = AnalyticScene()
        module = corridor()
        handle = scene.instantiate(module)
        local = scene.get_connectors(handle)
        for index in range(len(local)):
            for mode in ALIGN_MODES:
                scene.set_transform(handle, IDENTITY)
                t = align_to_connector(scene.get_connectors(handle)[index], self.target, mode)
                scene.set_transform(handle, t)
                world = scene.get_connectors(handle)[index]
                expected = neg(self.target.forward) if mode == FACE_TO_FACE else self.target.forward
                self.assertTrue(is_close(world.position, self.target.position),
                                f"connector {index} mode {mode}: {world.position}")
                self.assertTrue(is_close(world.forward, expected),
                                f"connector {index} mode {mode}: {world.forward}")

    def test_tilted_target(self):
        """Alignment is a pure computation: any orientation is accepted."""
        target = ConnectorPose((0.0, 5.0, 0.0), normalize((0.0, 1.0, 1.0)), normalize((0.0, 1.0, -1.0)))
        t = align_to_connector(self.attach, target, FACE_TO_FACE)
        self.assertTrue(is_close(t.apply_point(self.attach.position), target.position))
        self.assertTrue(is_close(t.apply_direction(self.attach.forward), neg(target.forward)))
        self.assertAlmostEqual(length(t.forward), 1.0)
        self.assertFalse(math.isnan(t.position[0]))

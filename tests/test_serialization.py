"""Tests for solution serialization and replay."""

from __future__ import annotations

import json
import unittest

from dungeongen.catalog import CatalogResult
from dungeongen.generator import (
    Placement, generate_dungeon, instantiate_solution, parse_solution,
    solution_to_dict, verify_solution,
)
from dungeongen.scene import AnalyticScene, SceneError
from tests.dungeon_fixture import corridor, entries


class TestSolutionToDict(unittest.TestCase):

    def test_shape(self):
        solution = [Placement("corridor", (0.0, 0.0, 4.0), (0.0, 0.0, 1.0), (0.0, 1.0, 0.0))]
        d = solution_to_dict(solution, seed=7)
        self.assertEqual(d["module_count"], 1)
        self.assertEqual(d["seed"], 7)
        self.assertEqual(d["placements"][0]["module_id"], "corridor")
        self.assertEqual(d["placements"][0]["position"], [0.0, 0.0, 4.0])
        json.dumps(d)

    def test_seed_omitted(self):
        self.assertNotIn("seed", solution_to_dict([]))

    def test_rounding_folds_negative_zero(self):
        p = Placement("c", (1e-12, -0.0, 3.0000000004), (-1e-17, 0.0, -1.0), (0.0, 1.0, 0.0))
        d = solution_to_dict([p])["placements"][0]
        self.assertEqual(d["position"], [0.0, 0.0, 3.0])
        self.assertEqual(json.dumps(d["forward"]), "[0.0, 0.0, -1.0]")

    def test_parse(self):
        d = {"placements": [
            {"module_id": "corridor", "position": [1, 2, 3], "forward": [0, 0, 1]},
        ]}
        [p] = parse_solution(d)
        self.assertEqual(p.position, (1.0, 2.0, 3.0))
        self.assertEqual(p.up, (0.0, 1.0, 0.0))


class TestReplay(unittest.TestCase):

    def setUp(self):
        self.module = corridor()
        self.catalog = CatalogResult(modules=[self.module])
        self.solution = generate_dungeon(entries(self.module), 4, AnalyticScene(), seed=3)

    def test_instantiate_reproduces_transforms(self):
        scene = AnalyticScene()
        handles = instantiate_solution(scene, self.solution, self.catalog)
        self.assertEqual(len(handles), 4)
        for h, p in zip(handles, self.solution):
            t = scene.get_transform(h)
            for a, b in zip(t.position, p.position):
                self.assertAlmostEqual(a, b)

    def test_instantiate_from_json(self):
        data = json.loads(json.dumps(solution_to_dict(self.solution)))
        scene = AnalyticScene()
        instantiate_solution(scene, parse_solution(data), self.catalog)
        self.assertEqual(len(scene), 4)

    def test_unknown_module(self):
        bad = [Placement("missing", (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 1.0, 0.0))]
        with self.assertRaises(SceneError):
            instantiate_solution(AnalyticScene(), bad, self.catalog)

    def test_verify_clean(self):
        scene = AnalyticScene()
        self.assertEqual(verify_solution(scene, self.solution, self.catalog), [])
        self.assertEqual(len(scene), 0)

    def test_verify_reports_overlap(self):
        stacked = [self.solution[0], self.solution[0]]
        self.assertEqual(verify_solution(AnalyticScene(), stacked, self.catalog), [(0, 1)])


if __name__ == "__main__":
    unittest.main()

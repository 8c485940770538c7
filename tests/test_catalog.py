"""Tests for catalog loading, validation and serialization."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from dungeongen.catalog import (
    CatalogResult, catalog_entries, catalog_to_dict, get_module,
    load_catalog, module_to_dict, parse_module,
)
from tests.dungeon_fixture import corridor


def _module(**overrides) -> dict:
    data = {
        "id": "piece",
        "weight": 1,
        "connectors": [
            {"id": "a", "position": [0, 0, -2], "forward": [0, 0, -1]},
            {"id": "b", "position": [0, 0, 2], "forward": [0, 0, 1]},
        ],
        "colliders": [{"center": [0, 1.5, 0], "size": [4, 3, 4]}],
    }
    data.update(overrides)
    return data


class TestShippedCatalog(unittest.TestCase):

    def test_loads_cleanly(self):
        result = load_catalog()
        self.assertTrue(result.ok, [str(e) for e in result.errors])
        self.assertEqual(len(result.modules), 5)

    def test_every_module_is_usable(self):
        for entry in catalog_entries(load_catalog()):
            self.assertTrue(entry.usable, entry.module.id)
            self.assertGreater(entry.weight, 0)

    def test_get_module(self):
        result = load_catalog()
        m = get_module(result, "corridor_straight")
        self.assertIsNotNone(m)
        self.assertEqual(m.connector_count, 2)
        self.assertIsNone(get_module(result, "no_such_module"))
        self.assertIs(get_module(result.modules, "hall_cross"),
                      get_module(result, "hall_cross"))


class TestCatalogValidation(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name: str, data) -> None:
        text = data if isinstance(data, str) else json.dumps(data)
        (self.dir / f"{name}.json").write_text(text, encoding="utf-8")

    def _fields(self, result: CatalogResult) -> set[str]:
        return {e.field for e in result.errors}

    def test_empty_directory(self):
        result = load_catalog(self.dir)
        self.assertFalse(result.ok)
        self.assertEqual(result.modules, [])
        self.assertIn("files", self._fields(result))

    def test_bad_json_is_skipped(self):
        self._write("broken", "{ not json")
        self._write("good", _module())
        result = load_catalog(self.dir)
        self.assertEqual([m.id for m in result.modules], ["piece"])
        self.assertIn("json", self._fields(result))

    def test_missing_field_is_skipped(self):
        self._write("noid", {"weight": 1})
        result = load_catalog(self.dir)
        self.assertEqual(result.modules, [])
        self.assertEqual(result.errors[0].field, "parse")
        self.assertEqual(result.errors[0].module_id, "noid")

    def test_short_vector_is_a_parse_error(self):
        self._write("short", _module(connectors=[
            {"id": "a", "position": [0, 0], "forward": [0, 0, 1]},
        ]))
        result = load_catalog(self.dir)
        self.assertEqual(result.modules, [])
        self.assertIn("parse", self._fields(result))

    def test_duplicate_module_ids(self):
        self._write("one", _module())
        self._write("two", _module())
        result = load_catalog(self.dir)
        self.assertEqual(len(result.modules), 2)
        self.assertIn("id", self._fields(result))

    def test_duplicate_connector_ids(self):
        self._write("dup", _module(connectors=[
            {"id": "a", "position": [0, 0, 0], "forward": [0, 0, 1]},
            {"id": "a", "position": [0, 0, 1], "forward": [0, 0, 1]},
        ]))
        result = load_catalog(self.dir)
        self.assertIn("connectors.a", self._fields(result))

    def test_parallel_up_vector(self):
        self._write("tilted", _module(connectors=[
            {"id": "a", "position": [0, 0, 0], "forward": [0, 1, 0], "up": [0, 2, 0]},
        ]))
        result = load_catalog(self.dir)
        self.assertIn("connectors.a.up", self._fields(result))
        # Validation issues do not drop the module
        self.assertEqual(len(result.modules), 1)

    def test_zero_forward(self):
        self._write("flat", _module(connectors=[
            {"id": "a", "position": [0, 0, 0], "forward": [0, 0, 0]},
        ]))
        self.assertIn("connectors.a.forward", self._fields(load_catalog(self.dir)))

    def test_negative_weight_is_a_warning(self):
        self._write("neg", _module(weight=-2))
        with self.assertLogs("dungeongen.catalog.loader", level="WARNING") as logs:
            result = load_catalog(self.dir)
        self.assertTrue(result.ok)
        self.assertEqual([w.field for w in result.warnings], ["weight"])
        self.assertEqual(result.modules[0].weight, -2.0)
        self.assertTrue(any("Negative weight" in line for line in logs.output))

    def test_non_finite_weight_is_an_error(self):
        self._write("nan", "{\"id\": \"nan\", \"weight\": NaN, \"colliders\": [{\"size\": [1, 1, 1]}]}")
        self.assertIn("weight", self._fields(load_catalog(self.dir)))

    def test_degenerate_connector_is_not_usable(self):
        self._write("flat", _module(connectors=[
            {"id": "a", "position": [0, 0, 0], "forward": [0, 0, 0]},
        ]))
        [entry] = catalog_entries(load_catalog(self.dir))
        self.assertTrue(entry.module.has_geometry)
        self.assertFalse(entry.usable)

    def test_negative_box_size(self):
        self._write("inside_out", _module(colliders=[{"center": [0, 0, 0], "size": [1, -1, 1]}]))
        self.assertIn("colliders[0].size", self._fields(load_catalog(self.dir)))

    def test_no_geometry(self):
        self._write("ghost", {"id": "ghost"})
        result = load_catalog(self.dir)
        self.assertIn("geometry", self._fields(result))
        self.assertFalse(catalog_entries(result)[0].usable)

    def test_defaults(self):
        self._write("plain", {
            "id": "plain",
            "connectors": [{"id": "a", "position": [0, 0, 0], "forward": [1, 0, 0]}],
        })
        m = load_catalog(self.dir).modules[0]
        self.assertEqual(m.name, "plain")
        self.assertEqual(m.weight, 1.0)
        self.assertEqual(m.connectors[0].up, (0.0, 1.0, 0.0))
        self.assertTrue(m.source_file.endswith("plain.json"))


class TestCatalogSerialization(unittest.TestCase):

    def test_module_round_trip(self):
        original = corridor(weight=2.5)
        self.assertEqual(parse_module(module_to_dict(original)), original)

    def test_catalog_to_dict(self):
        d = catalog_to_dict(load_catalog())
        self.assertTrue(d["ok"])
        self.assertEqual(d["module_count"], 5)
        self.assertEqual(d["errors"], [])
        self.assertEqual(d["warnings"], [])
        json.dumps(d)


if __name__ == "__main__":
    unittest.main()

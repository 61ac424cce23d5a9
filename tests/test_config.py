"""Unit tests for YAML analysis descriptions."""

import os
import tempfile
import unittest
from pathlib import Path

from pathrta.config import load_config, parse_config
from pathrta.errors import ConfigError, EmptyCombinationSpace
from pathrta.models import Event
from pathrta.pipeline import analyze

EXAMPLE_CONFIG = Path(__file__).resolve().parent.parent / "configs" / "rtic_full_example.yaml"


def task(name, paths, priority=1):
    return {
        "name": name,
        "interrupt": "TIMER_IRQ_0",
        "priority": priority,
        "deadline": 1000,
        "inter_arrival": 1000,
        "paths": paths,
    }


class TestParseConfig(unittest.TestCase):
    """Test validation of raw analysis descriptions."""

    def test_events_path(self):
        """Test a path given as events."""
        config = parse_config({"tasks": [task("a", [{"max_cycles": 50, "events": [[10, "A"], [20, "A"]]}])]})
        self.assertEqual(len(config.tasks), 1)
        self.assertEqual(config.tasks[0].name, "a")
        self.assertEqual(config.paths[0][0].max_cycles, 50)
        self.assertEqual(config.paths[0][0].cycle_laps, (Event(10, "A"), Event(20, "A")))

    def test_writes_path(self):
        """Test a path given as raw mask writes."""
        path = {
            "max_cycles": 900,
            "writes": [
                {"address": 0xE000E180, "cycle": 100, "value": 8194},
                {"address": 0xE000E100, "cycle": 390, "value": 8194, "instruction_cycles": 10},
            ],
        }
        config = parse_config({"tasks": [task("a", [path])]})
        self.assertEqual(config.paths[0][0].cycle_laps, (Event(100, "8194"), Event(400, "8194")))

    def test_analysis_settings(self):
        """Test optional analysis settings and their defaults."""
        config = parse_config({"tasks": [task("a", [{"max_cycles": 1}])]})
        self.assertIsNone(config.max_combinations)
        self.assertIsNone(config.workers)
        self.assertTrue(config.higher_value_higher_priority)

        config = parse_config({
            "analysis": {"max_combinations": 10, "workers": 2, "higher_value_higher_priority": False},
            "tasks": [task("a", [{"max_cycles": 1}])],
        })
        self.assertEqual(config.max_combinations, 10)
        self.assertEqual(config.workers, 2)
        self.assertFalse(config.higher_value_higher_priority)

    def test_negative_analysis_settings(self):
        """Test that negative limits are rejected rather than ignored."""
        for key in ("max_combinations", "workers"):
            with self.subTest(key=key):
                with self.assertRaisesRegex(ConfigError, key):
                    parse_config({
                        "analysis": {key: -1},
                        "tasks": [task("a", [{"max_cycles": 1}])],
                    })

    def test_zero_analysis_settings(self):
        """Test that zero is kept as a value, not treated as unset."""
        config = parse_config({
            "analysis": {"max_combinations": 0, "workers": 0},
            "tasks": [task("a", [{"max_cycles": 1}])],
        })
        self.assertEqual(config.max_combinations, 0)
        self.assertEqual(config.workers, 0)

    def test_no_tasks(self):
        """Test that a description without tasks is rejected."""
        with self.assertRaises(ConfigError):
            parse_config({"tasks": []})

    def test_missing_field(self):
        """Test that a task without a deadline is rejected."""
        raw = task("a", [])
        del raw["deadline"]
        with self.assertRaisesRegex(ConfigError, "deadline"):
            parse_config({"tasks": [raw]})

    def test_invalid_value(self):
        """Test that invalid task values are reported as configuration errors."""
        raw = task("a", [])
        raw["inter_arrival"] = 0
        with self.assertRaises(ConfigError):
            parse_config({"tasks": [raw]})

    def test_missing_max_cycles(self):
        """Test that a path without max_cycles is rejected."""
        with self.assertRaisesRegex(ConfigError, "max_cycles"):
            parse_config({"tasks": [task("a", [{"events": []}])]})

    def test_events_and_writes(self):
        """Test that a path cannot give both events and writes."""
        with self.assertRaises(ConfigError):
            parse_config({"tasks": [task("a", [{"max_cycles": 5, "events": [], "writes": []}])]})

    def test_bad_write(self):
        """Test that writes with unknown fields are rejected."""
        path = {"max_cycles": 5, "writes": [{"address": 0xE000E180, "cycle": 1, "val": 2}]}
        with self.assertRaises(ConfigError):
            parse_config({"tasks": [task("a", [path])]})

    def test_duplicate_task(self):
        """Test that task names must be unique."""
        with self.assertRaises(ConfigError):
            parse_config({"tasks": [task("a", []), task("a", [])]})

    def test_task_without_paths(self):
        """Test that a task without paths fails the analysis, not the parsing."""
        config = parse_config({"tasks": [task("a", [])]})
        self.assertEqual(config.paths, [[]])
        with self.assertRaises(EmptyCombinationSpace):
            analyze(config.tasks, config.paths)


class TestLoadConfig(unittest.TestCase):
    """Test reading descriptions from YAML files."""

    def test_load_yaml(self):
        """Test loading a YAML file with hexadecimal addresses."""
        content = (
            "tasks:\n"
            "  - name: a\n"
            "    priority: 1\n"
            "    deadline: 100\n"
            "    inter_arrival: 100\n"
            "    paths:\n"
            "      - max_cycles: 50\n"
            "        writes:\n"
            "          - {address: 0xe000e180, cycle: 10, value: 4}\n"
            "          - {address: 0xe000e100, cycle: 20, value: 4}\n"
        )
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "tasks.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
            config = parse_config(load_config(path))

        self.assertEqual(config.tasks[0].interrupt, "a")
        self.assertEqual(config.paths[0][0].cycle_laps, (Event(10, "4"), Event(20, "4")))

    def test_not_a_mapping(self):
        """Test that a YAML list at the top level is rejected."""
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "tasks.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write("- a\n- b\n")
            with self.assertRaises(ConfigError):
                load_config(path)

    def test_example_config(self):
        """Test that the shipped example describes the four RTIC tasks."""
        config = parse_config(load_config(EXAMPLE_CONFIG))
        self.assertEqual(
            [t.name for t in config.tasks],
            ["button_handler", "debounce_button", "alarm0_handler", "alarm2_handler"],
        )
        self.assertEqual([len(p) for p in config.paths], [2, 1, 2, 1])
        self.assertEqual(config.elf, "test_bin/rtic_full_example")


if __name__ == "__main__":
    unittest.main()

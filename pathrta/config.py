"""Loading of analysis descriptions from YAML."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml  # pip install pyyaml

from pathrta.errors import ConfigError
from pathrta.hooks import MemoryWrite, events_from_writes
from pathrta.models import PathResult, TaskDescriptor


@dataclass(frozen=True)
class AnalysisConfig:
    """A task table with the execution paths found for each task.

    Attributes:
        tasks: Static task descriptors.
        paths: Path results of each task, in the order of tasks.
        elf: Path of the analyzed binary (informational).
        max_combinations: Optional bound on the combination space.
        workers: Number of processes used to evaluate combinations.
        higher_value_higher_priority: Priority direction of the evaluator.
    """
    tasks: List[TaskDescriptor]
    paths: List[List[PathResult]]
    elf: Optional[str] = None
    max_combinations: Optional[int] = None
    workers: Optional[int] = None
    higher_value_higher_priority: bool = True


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Load the raw YAML analysis description."""
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return raw


def _require(mapping: Dict[str, Any], key: str, where: str) -> Any:
    if key not in mapping:
        raise ConfigError(f"{where}: missing '{key}'")
    return mapping[key]


def _optional_count(analysis: Dict[str, Any], key: str) -> Optional[int]:
    value = analysis.get(key)
    if value is None:
        return None
    try:
        count = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"analysis: {key}: {e}") from e
    if count < 0:
        raise ConfigError(f"analysis: {key} must be >= 0, got {count}")
    return count


def _parse_path(raw: Any, where: str) -> PathResult:
    if not isinstance(raw, dict):
        raise ConfigError(f"{where}: expected a mapping")
    max_cycles = _require(raw, "max_cycles", where)

    if "events" in raw and "writes" in raw:
        raise ConfigError(f"{where}: give either 'events' or 'writes', not both")

    try:
        if "writes" in raw:
            writes = [MemoryWrite(**w) for w in raw["writes"] or []]
            events = events_from_writes(writes)
        else:
            events = [(int(cycle), str(label)) for cycle, label in raw.get("events") or []]
        return PathResult(max_cycles=int(max_cycles), cycle_laps=tuple(events))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{where}: {e}") from e


def _parse_task(raw: Any, index: int) -> TaskDescriptor:
    where = f"task {index}"
    if not isinstance(raw, dict):
        raise ConfigError(f"{where}: expected a mapping")
    name = _require(raw, "name", where)
    where = f"task '{name}'"
    try:
        return TaskDescriptor(
            name=str(name),
            interrupt=str(raw.get("interrupt", name)),
            priority=int(_require(raw, "priority", where)),
            deadline=int(_require(raw, "deadline", where)),
            inter_arrival=int(_require(raw, "inter_arrival", where)),
        )
    except ConfigError:
        raise
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{where}: {e}") from e


def parse_config(raw: Dict[str, Any]) -> AnalysisConfig:
    """Validate a raw analysis description and build the analysis inputs.

    Raises:
        ConfigError: If the description is incomplete or invalid.
    """
    raw_tasks = raw.get("tasks")
    if not raw_tasks:
        raise ConfigError("No tasks defined")

    tasks = []
    paths = []
    for index, raw_task in enumerate(raw_tasks):
        task = _parse_task(raw_task, index)
        if task.name in (t.name for t in tasks):
            raise ConfigError(f"task '{task.name}' is defined twice")
        raw_paths = raw_task.get("paths") or []
        tasks.append(task)
        paths.append([
            _parse_path(p, f"task '{task.name}' path {i}") for i, p in enumerate(raw_paths)
        ])

    analysis = raw.get("analysis") or {}
    if not isinstance(analysis, dict):
        raise ConfigError("'analysis' must be a mapping")

    max_combinations = _optional_count(analysis, "max_combinations")
    workers = _optional_count(analysis, "workers")
    return AnalysisConfig(
        tasks=tasks,
        paths=paths,
        elf=raw.get("elf"),
        max_combinations=max_combinations,
        workers=workers,
        higher_value_higher_priority=bool(analysis.get("higher_value_higher_priority", True)),
    )

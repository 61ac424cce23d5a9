"""Data models for traces, tasks and analysis results."""

from dataclasses import dataclass, field
from typing import Iterator, List, NamedTuple, Optional, Tuple


class Event(NamedTuple):
    """A timestamped lock/unlock event recorded on one execution path."""
    cycle: int
    label: str


@dataclass(frozen=True)
class Trace:
    """A (possibly nested) interval of execution cycles.

    The root trace of a task spans the whole analyzed run and carries the
    task name as its id. Every inner trace is a critical section identified
    by the label of its lock/unlock events.

    Attributes:
        id: Task name (root) or resource label (critical section).
        start: First cycle of the interval.
        end: Last cycle of the interval (end >= start).
        inner: Nested intervals, ordered by start and non-overlapping.
    """
    id: str
    start: int
    end: int
    inner: Tuple["Trace", ...] = ()

    def __post_init__(self) -> None:
        """Validate interval bounds and nesting."""
        object.__setattr__(self, 'inner', tuple(self.inner))
        if self.start < 0:
            raise ValueError(f"Trace {self.id}: start must be non-negative, got {self.start}")
        if self.end < self.start:
            raise ValueError(f"Trace {self.id}: end ({self.end}) cannot precede start ({self.start})")

        previous_end = self.start
        for child in self.inner:
            if child.start < previous_end or child.end > self.end:
                raise ValueError(
                    f"Trace {self.id}: inner trace {child.id} [{child.start}, {child.end}] "
                    f"is not nested within [{previous_end}, {self.end}]"
                )
            previous_end = child.end

    @property
    def length(self) -> int:
        """Return the number of cycles spanned by this interval."""
        return self.end - self.start

    def walk(self) -> Iterator["Trace"]:
        """Yield every nested interval below this one, depth first."""
        for child in self.inner:
            yield child
            yield from child.walk()

    def __str__(self) -> str:
        return f"Trace({self.id}: [{self.start}, {self.end}], inner={len(self.inner)})"


@dataclass(frozen=True)
class PathResult:
    """Result of one symbolic execution path of a task.

    Attributes:
        max_cycles: Cycle count reached at the end of the path.
        cycle_laps: Chronological lock/unlock events seen on the path.
    """
    max_cycles: int
    cycle_laps: Tuple[Event, ...] = ()

    def __post_init__(self) -> None:
        if self.max_cycles < 0:
            raise ValueError(f"max_cycles must be non-negative, got {self.max_cycles}")
        object.__setattr__(
            self, 'cycle_laps', tuple(Event(int(cycle), str(label)) for cycle, label in self.cycle_laps)
        )


@dataclass(frozen=True)
class TaskDescriptor:
    """Static description of a hardware task.

    Attributes:
        name: Task identifier.
        interrupt: Interrupt vector (entry point) the task is bound to.
        priority: Task priority; its direction is owned by the evaluator.
        deadline: Relative deadline in cycles.
        inter_arrival: Minimum inter-arrival time in cycles.
    """
    name: str
    interrupt: str
    priority: int
    deadline: int
    inter_arrival: int

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Task name must not be empty")
        if self.priority < 0:
            raise ValueError(f"Task {self.name}: priority must be non-negative, got {self.priority}")
        if self.deadline <= 0:
            raise ValueError(f"Task {self.name}: deadline must be positive, got {self.deadline}")
        if self.inter_arrival <= 0:
            raise ValueError(
                f"Task {self.name}: inter_arrival must be positive, got {self.inter_arrival}"
            )


@dataclass(frozen=True)
class TaskRecord:
    """One execution path of a task, ready for schedulability evaluation.

    All path alternatives of the same task share the same id. Records are
    immutable and shared between combinations rather than copied.
    """
    id: str
    priority: int
    deadline: int
    inter_arrival: int
    trace: Trace

    def __post_init__(self) -> None:
        if self.deadline <= 0:
            raise ValueError(f"Task {self.id}: deadline must be positive, got {self.deadline}")
        if self.inter_arrival <= 0:
            raise ValueError(
                f"Task {self.id}: inter_arrival must be positive, got {self.inter_arrival}"
            )

    @property
    def wcet(self) -> int:
        """Return the execution time of this path (length of the root trace)."""
        return self.trace.length

    @property
    def utilization(self) -> float:
        """Return the utilization of this path (wcet / inter_arrival)."""
        return self.wcet / self.inter_arrival

    def __str__(self) -> str:
        return (
            f"TaskRecord({self.id}: C={self.wcet}, T={self.inter_arrival}, "
            f"D={self.deadline}, prio={self.priority})"
        )


Combination = Tuple[TaskRecord, ...]


@dataclass(frozen=True)
class TaskResult:
    """Evaluation of a single task within one task-set combination."""
    task: TaskRecord
    response_time: Optional[int]
    wcet: int
    blocking: int
    interference: int

    @property
    def passed(self) -> bool:
        """Return True if the response time is known and meets the deadline."""
        return self.response_time is not None and self.response_time <= self.task.deadline


@dataclass(frozen=True)
class TaskSetResult:
    """Ordered per-task evaluation results of one task-set combination."""
    results: Tuple[TaskResult, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'results', tuple(self.results))

    @property
    def task_ids(self) -> List[str]:
        return [r.task.id for r in self.results]

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[TaskResult]:
        return iter(self.results)

    def __getitem__(self, index: int) -> TaskResult:
        return self.results[index]


@dataclass(frozen=True)
class WorstCaseReport(TaskSetResult):
    """Worst observed result per task across all evaluated combinations."""

    @property
    def schedulable(self) -> bool:
        """Return True if every task meets its deadline in the worst case."""
        return all(r.passed for r in self.results)

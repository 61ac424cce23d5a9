"""Reconstruction of nested critical-section traces from lock/unlock events.

The instrumented run records an event each time the interrupt mask is
cleared (lock) or set (unlock), labelled with the written mask value. A lock
and its unlock carry the same label, so an interval closes as soon as the
label of the currently open interval repeats. Events in between belong to
intervals nested inside it.

Example:
    events = [(10, "A"), (20, "B"), (30, "B"), (40, "A")]
    make_trace(0, 50, events, "task")

    task [0, 50]
      A [10, 40]
        B [20, 30]
"""

import logging
from typing import Iterable, List, Sequence, Tuple, Union

from pathrta.errors import EmptyCombinationSpace, MalformedEventSequence
from pathrta.models import Event, PathResult, TaskDescriptor, TaskRecord, Trace

logger = logging.getLogger(__name__)

EventLike = Union[Event, Tuple[int, str]]


def _check_events(start: int, end: int, laps: Sequence[Event], id: str) -> None:
    if start > end:
        raise MalformedEventSequence(f"Trace {id}: start ({start}) exceeds end ({end})")

    previous = start
    for cycle, label in laps:
        if cycle < previous:
            raise MalformedEventSequence(
                f"Trace {id}: event {label!r} at cycle {cycle} is out of order "
                f"(previous cycle {previous})"
            )
        if cycle > end:
            raise MalformedEventSequence(
                f"Trace {id}: event {label!r} at cycle {cycle} lies beyond the end cycle {end}"
            )
        previous = cycle


def _make_trace(start: int, end: int, laps: Sequence[Event], id: str) -> Trace:
    inner = []

    current = None
    inner_start = 0
    start_i = 0
    for i, (cycle, label) in enumerate(laps):
        if current is None:
            current = label
            inner_start = cycle
            start_i = i
        elif label == current:
            inner.append(_make_trace(inner_start, cycle, laps[start_i + 1:i], label))
            current = None

    if current is not None:
        raise MalformedEventSequence(
            f"Trace {id}: lock {current!r} at cycle {inner_start} has no matching unlock"
        )

    return Trace(id=id, start=start, end=end, inner=tuple(inner))


def make_trace(start: int, end: int, laps: Iterable[EventLike], id: str) -> Trace:
    """Reconstruct a tree of nested intervals from chronological events.

    Args:
        start: First cycle of the enclosing interval.
        end: Last cycle of the enclosing interval.
        laps: Chronological (cycle, label) events within [start, end].
        id: Identifier of the enclosing interval (the task name for roots).

    Returns:
        A Trace spanning [start, end] whose inner traces are the matched
        lock/unlock intervals in chronological order.

    Raises:
        MalformedEventSequence: If an interval is never closed, events are
            out of order, or an event lies outside [start, end].
    """
    events = [Event(int(cycle), str(label)) for cycle, label in laps]
    _check_events(start, end, events, id)
    trace = _make_trace(start, end, events, id)
    logger.debug("Reconstructed trace %s from %d events", id, len(events))
    return trace


def flatten_trace(trace: Trace) -> List[Event]:
    """Return the lock/unlock events that reconstruct the inner traces.

    Each inner trace contributes its opening event, the events of its own
    inner traces, then its closing event. The root itself emits no events.
    """
    events = []
    for child in trace.inner:
        events.append(Event(child.start, child.id))
        events.extend(flatten_trace(child))
        events.append(Event(child.end, child.id))
    return events


def create_task(symex_result: PathResult, task: TaskDescriptor) -> TaskRecord:
    """Build the task record for one execution path of a task."""
    trace = make_trace(0, symex_result.max_cycles, symex_result.cycle_laps, task.name)
    return TaskRecord(
        id=task.name,
        priority=task.priority,
        deadline=task.deadline,
        inter_arrival=task.inter_arrival,
        trace=trace,
    )


def create_tasks(symex_results: Sequence[PathResult], task: TaskDescriptor) -> List[TaskRecord]:
    """Build one task record per execution path of a task.

    Raises:
        EmptyCombinationSpace: If the task has no execution paths.
        MalformedEventSequence: If any path carries a malformed event list.
    """
    if not symex_results:
        raise EmptyCombinationSpace(f"Task {task.name}: no execution paths to analyze")
    return [create_task(result, task) for result in symex_results]

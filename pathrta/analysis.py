"""Response-time evaluation of a single task-set combination.

The path combination analysis only needs an evaluator exposing
``response_time`` and ``total_utilization``. This module defines that
protocol and a default evaluator for fixed-priority preemptive scheduling
on a single core with Stack Resource Policy (SRP) blocking.

RTA Formula:
    R_i^(k+1) = C_i + B_i + sum_{j in hp(i)} ceil(R_i^(k) / T_j) * C_j

where:
    - C_i is the execution time of task i (length of its root trace)
    - B_i is the longest critical section of a lower-priority task on a
      resource whose ceiling is at least the priority of task i
    - hp(i) is the set of tasks with higher priority than task i
    - T_j is the minimum inter-arrival time of task j

The iteration starts with R_i^(0) = C_i + B_i and continues until either:
    1. Convergence: R_i^(k+1) = R_i^(k)
    2. Overrun: R_i^(k+1) > T_i (the next release arrives first)
    3. Max iterations reached

A converged response time may exceed the deadline; it is still returned so
the report can show by how much the deadline is missed.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Sequence

import logging
import math

from pathrta.models import TaskRecord, TaskResult, TaskSetResult

logger = logging.getLogger(__name__)


class Evaluator(Protocol):
    def response_time(self, tasks: Sequence[TaskRecord]) -> TaskSetResult:
        ...

    def total_utilization(self, tasks: Sequence[TaskRecord]) -> float:
        ...


def resource_ceilings(tasks: Sequence[TaskRecord], urgency) -> Dict[str, int]:
    """Return, per resource label, the highest urgency of the tasks using it."""
    ceilings: Dict[str, int] = {}
    for task in tasks:
        for section in task.trace.walk():
            level = urgency(task)
            if section.id not in ceilings or ceilings[section.id] < level:
                ceilings[section.id] = level
    return ceilings


@dataclass(frozen=True)
class SrpEvaluator:
    """Fixed-priority response-time evaluator with SRP blocking.

    Attributes:
        higher_value_higher_priority: If True (RTIC convention) a larger
            priority number preempts a smaller one; otherwise a smaller
            number is more urgent.
        max_iterations: Iteration limit for the response-time recurrence.
    """
    higher_value_higher_priority: bool = True
    max_iterations: int = 1000

    def urgency(self, task: TaskRecord) -> int:
        """Return a key where larger always means higher priority."""
        return task.priority if self.higher_value_higher_priority else -task.priority

    def higher_priority_tasks(
        self, task: TaskRecord, tasks: Sequence[TaskRecord]
    ) -> list[TaskRecord]:
        return [t for t in tasks if self.urgency(t) > self.urgency(task)]

    def blocking_time(self, task: TaskRecord, tasks: Sequence[TaskRecord]) -> int:
        """Return the longest critical section that can block the task."""
        ceilings = resource_ceilings(tasks, self.urgency)
        blocking = 0
        for other in tasks:
            if self.urgency(other) >= self.urgency(task):
                continue
            for section in other.trace.walk():
                if ceilings[section.id] >= self.urgency(task):
                    blocking = max(blocking, section.length)
        return blocking

    def compute_response_time(
        self,
        task: TaskRecord,
        higher_priority_tasks: list[TaskRecord],
        blocking: int = 0,
    ) -> Optional[int]:
        """Compute the response time of a task by fixed-point iteration.

        Returns:
            The response time once it converges, None if it grows beyond the
            task's inter-arrival time or does not converge within
            max_iterations.
        """
        R_prev = task.wcet + blocking

        for _ in range(self.max_iterations):
            interference = 0
            for hp_task in higher_priority_tasks:
                interference += math.ceil(R_prev / hp_task.inter_arrival) * hp_task.wcet

            R_new = task.wcet + blocking + interference

            if R_new > task.inter_arrival:
                return None

            if R_new == R_prev:
                return R_new

            R_prev = R_new

        return None

    def response_time(self, tasks: Sequence[TaskRecord]) -> TaskSetResult:
        """Evaluate every task of a combination, keeping the input order."""
        results = []
        for task in tasks:
            hp_tasks = self.higher_priority_tasks(task, tasks)
            blocking = self.blocking_time(task, tasks)
            rt = self.compute_response_time(task, hp_tasks, blocking)
            interference = rt - task.wcet - blocking if rt is not None else 0
            if rt is None:
                logger.debug("Task %s: response time did not converge", task.id)
            results.append(TaskResult(
                task=task,
                response_time=rt,
                wcet=task.wcet,
                blocking=blocking,
                interference=interference,
            ))
        return TaskSetResult(results=tuple(results))

    def total_utilization(self, tasks: Sequence[TaskRecord]) -> float:
        return sum(t.utilization for t in tasks)

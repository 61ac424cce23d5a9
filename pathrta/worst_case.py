"""Reduction of per-combination results to a worst-case report."""

import logging
from typing import Optional, Sequence, Tuple

from pathrta.errors import (
    EmptyCombinationSpace,
    InconsistentCombinationShape,
    UnresolvedResponseTime,
)
from pathrta.models import TaskResult, TaskSetResult, WorstCaseReport

logger = logging.getLogger(__name__)


def _check_shape(list_of_task_results: Sequence[TaskSetResult]) -> None:
    task_ids = list_of_task_results[0].task_ids
    unresolved = []
    for index, result in enumerate(list_of_task_results):
        if result.task_ids != task_ids:
            raise InconsistentCombinationShape(
                f"Combination {index} has tasks {result.task_ids}, expected {task_ids}"
            )
        for task_result in result:
            if task_result.response_time is None:
                unresolved.append((task_result.task.id, index))
    if unresolved:
        raise UnresolvedResponseTime(unresolved)


def find_worst(
    list_of_task_results: Sequence[TaskSetResult],
    utilizations: Sequence[float],
) -> Tuple[WorstCaseReport, float]:
    """Select the worst result per task across all evaluated combinations.

    For each task position, the result with the strictly greatest response
    time is kept, so the first one seen wins ties.

    Args:
        list_of_task_results: Evaluation of every combination, all with the
            same task order.
        utilizations: Total utilization of each combination, in the same order.

    Returns:
        A tuple of (report, max_utilization).

    Raises:
        EmptyCombinationSpace: If no combination was evaluated.
        InconsistentCombinationShape: If the combinations disagree on their
            tasks, or the utilizations do not match the results.
        UnresolvedResponseTime: If any task has no response time.
    """
    if not list_of_task_results:
        raise EmptyCombinationSpace("No combination results to reduce")
    if len(utilizations) != len(list_of_task_results):
        raise InconsistentCombinationShape(
            f"{len(utilizations)} utilizations for {len(list_of_task_results)} combinations"
        )
    _check_shape(list_of_task_results)

    worst_by_response_time = []
    for i in range(len(list_of_task_results[0])):
        current_worst: Optional[TaskResult] = None
        for task_results in list_of_task_results:
            candidate = task_results[i]
            if current_worst is None or current_worst.response_time < candidate.response_time:
                current_worst = candidate
        worst_by_response_time.append(current_worst)

    max_utilization = max(utilizations)
    logger.info("Max utilization over %d combinations: %s",
                len(list_of_task_results), max_utilization)

    return WorstCaseReport(results=tuple(worst_by_response_time)), max_utilization

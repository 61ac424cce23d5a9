"""End-to-end multi-path analysis: traces, combinations, evaluation, worst case."""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import logging

from pathrta.analysis import Evaluator, SrpEvaluator
from pathrta.combinations import expected_combinations, get_all_sets
from pathrta.errors import InconsistentCombinationShape
from pathrta.models import (
    Combination,
    PathResult,
    TaskDescriptor,
    TaskRecord,
    TaskSetResult,
    WorstCaseReport,
)
from pathrta.traces import create_tasks
from pathrta.worst_case import find_worst

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Everything produced by one analysis run.

    Attributes:
        combinations: Every evaluated task-set combination.
        expected: Product of the per-task path counts.
        report: Worst result per task across all combinations.
        max_utilization: Highest total utilization of any combination.
    """
    combinations: List[Combination]
    expected: int
    report: WorstCaseReport
    max_utilization: float


def build_alternatives(
    task_list: Sequence[TaskDescriptor],
    path_results: Sequence[Sequence[PathResult]],
) -> List[List[TaskRecord]]:
    """Build the path-alternative records of every task."""
    if len(task_list) != len(path_results):
        raise InconsistentCombinationShape(
            f"{len(path_results)} path result lists for {len(task_list)} tasks"
        )
    return [create_tasks(results, task) for task, results in zip(task_list, path_results)]


def _evaluate(evaluator: Evaluator, tasks: Combination) -> Tuple[TaskSetResult, float]:
    return evaluator.response_time(tasks), evaluator.total_utilization(tasks)


def evaluate_combinations(
    combinations: Sequence[Combination],
    evaluator: Evaluator,
    workers: Optional[int] = None,
) -> Tuple[List[TaskSetResult], List[float]]:
    """Evaluate every combination, in order.

    Combinations are independent, so with workers > 1 they are spread over a
    process pool. The evaluator must then be picklable.

    Returns:
        A tuple of (results, utilizations), parallel to combinations.
    """
    if workers is not None and workers > 1:
        with ProcessPoolExecutor(max_workers=workers) as pool:
            chunksize = max(1, len(combinations) // (workers * 4))
            evaluated = list(pool.map(
                _evaluate,
                [evaluator] * len(combinations),
                combinations,
                chunksize=chunksize,
            ))
    else:
        evaluated = [_evaluate(evaluator, tasks) for tasks in combinations]

    results = [result for result, _ in evaluated]
    utilizations = [utilization for _, utilization in evaluated]
    return results, utilizations


def analyze(
    task_list: Sequence[TaskDescriptor],
    path_results: Sequence[Sequence[PathResult]],
    evaluator: Optional[Evaluator] = None,
    max_combinations: Optional[int] = None,
    workers: Optional[int] = None,
) -> AnalysisOutcome:
    """Run the complete worst-case analysis over all path combinations.

    Args:
        task_list: Static task descriptors.
        path_results: For each task (same order), its execution path results.
        evaluator: Schedulability evaluator; SrpEvaluator() if not given.
        max_combinations: Optional bound on the combination space.
        workers: Number of processes used to evaluate combinations.

    Returns:
        The analysis outcome.

    Raises:
        AnalysisError: On malformed traces, an empty or oversized combination
            space, or unresolved response times.
    """
    if evaluator is None:
        evaluator = SrpEvaluator()

    tasks = build_alternatives(task_list, path_results)
    expected = expected_combinations(tasks)
    list_to_test = get_all_sets(tasks, max_combinations=max_combinations)

    results, utilizations = evaluate_combinations(list_to_test, evaluator, workers=workers)
    report, max_utilization = find_worst(results, utilizations)

    return AnalysisOutcome(
        combinations=list_to_test,
        expected=expected,
        report=report,
        max_utilization=max_utilization,
    )

"""Enumeration of task-set combinations over per-task execution paths."""

import logging
from typing import List, Optional, Sequence

from pathrta.errors import CombinationBudgetExceeded, EmptyCombinationSpace
from pathrta.models import Combination, TaskRecord

logger = logging.getLogger(__name__)

LARGE_COMBINATION_SPACE = 10_000


def expected_combinations(tasks: Sequence[Sequence[TaskRecord]]) -> int:
    """Return the number of combinations get_all_sets would produce."""
    expected = 1
    for alternatives in tasks:
        expected *= len(alternatives)
    return expected


def get_all_sets(
    tasks: Sequence[Sequence[TaskRecord]],
    max_combinations: Optional[int] = None,
) -> List[Combination]:
    """Enumerate every way of picking exactly one execution path per task.

    The result is the Cartesian product of the per-task alternatives, so its
    size is the product of the alternative counts and grows exponentially
    with the number of tasks that have more than one path. Records are
    shared between combinations, not copied.

    Args:
        tasks: For each task, its path-alternative records.
        max_combinations: Optional upper bound on the number of combinations.

    Returns:
        List of combinations, each holding one record per task in the order
        the tasks were given.

    Raises:
        EmptyCombinationSpace: If there are no tasks or a task has no paths.
        CombinationBudgetExceeded: If the product exceeds max_combinations.
    """
    if not tasks:
        raise EmptyCombinationSpace("No tasks to combine")

    for alternatives in tasks:
        if not alternatives:
            raise EmptyCombinationSpace("A task has no execution path alternatives")

    expected = expected_combinations(tasks)
    if max_combinations is not None and expected > max_combinations:
        raise CombinationBudgetExceeded(expected, max_combinations)
    if expected > LARGE_COMBINATION_SPACE:
        logger.warning("Enumerating %d task set combinations", expected)
    else:
        logger.info("Enumerating %d task set combinations", expected)

    sets: List[Combination] = [()]
    for alternatives in tasks:
        sets = [combination + (task,) for combination in sets for task in alternatives]

    return sets

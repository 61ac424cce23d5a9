"""Errors raised by trace reconstruction and path combination analysis."""

from typing import List, Tuple


class AnalysisError(ValueError):
    pass


class MalformedEventSequence(AnalysisError):
    """A lock event never finds its unlock, or the events are out of order."""


class EmptyCombinationSpace(AnalysisError):
    """No task set combination can be formed from the given alternatives."""


class InconsistentCombinationShape(AnalysisError):
    """Combination results do not share the same task count and order."""


class CombinationBudgetExceeded(AnalysisError):
    def __init__(self, expected: int, limit: int) -> None:
        super().__init__(
            f"{expected} combinations exceed the configured limit of {limit}"
        )
        self.expected = expected
        self.limit = limit


class UnresolvedResponseTime(AnalysisError):
    """The evaluator could not compute a response time for some tasks.

    Attributes:
        unresolved: Every (task id, combination index) pair without a
            response time, in evaluation order.
    """

    def __init__(self, unresolved: List[Tuple[str, int]]) -> None:
        pairs = ", ".join(f"{task_id} in combination {index}" for task_id, index in unresolved)
        super().__init__(f"No response time for {pairs}")
        self.unresolved = list(unresolved)
        self.task_id, self.combination_index = self.unresolved[0]


class ConfigError(ValueError):
    pass

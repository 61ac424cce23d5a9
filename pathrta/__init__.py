"""pathrta: worst-case response-time analysis over all execution paths.

This package reconstructs nested critical-section traces from lock/unlock
events recorded on each symbolic execution path of a task, enumerates every
combination of one path per task, evaluates each combination under
fixed-priority preemptive scheduling and reports the worst response time of
every task.
"""

from pathrta.models import Event, Trace, PathResult, TaskDescriptor, TaskRecord
from pathrta.models import TaskResult, TaskSetResult, WorstCaseReport
from pathrta.traces import make_trace, create_task
from pathrta.combinations import get_all_sets
from pathrta.analysis import SrpEvaluator
from pathrta.worst_case import find_worst
from pathrta.pipeline import analyze

__version__ = "0.1.0"
__all__ = [
    "Event",
    "Trace",
    "PathResult",
    "TaskDescriptor",
    "TaskRecord",
    "TaskResult",
    "TaskSetResult",
    "WorstCaseReport",
    "make_trace",
    "create_task",
    "get_all_sets",
    "SrpEvaluator",
    "find_worst",
    "analyze",
]
